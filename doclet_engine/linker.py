# doclet_engine/linker.py

"""
Linker: resolves name-based edges between provisional symbols.

Runs once over the merged tables of every source in a run:

1. merge per-source tables (later sources override earlier ones)
2. promote functions that own prototype members to classes
3. resolve indirect member assignments against documented functions
4. resolve base classes from prototype replacement (or @extends)
5. attach members to their classes
6. resolve @see and {@link} targets
7. freeze the symbols so the returned model is read-only throughout

Each step reads a snapshot taken before it starts, so nothing resolved in a
step feeds back into the same step.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence, Set

from .builder import BuildResult
from .errors import DiagnosticKind
from .model import (
    ClassSymbol,
    Diagnostic,
    DocletModel,
    LinkState,
    Reference,
    Symbol,
    SymbolRole,
    UnattachedComment,
)

logger = logging.getLogger(__name__)


def resolve_target(target: str, context: Optional[str], names: Set[str]) -> Optional[str]:
    """
    Resolve a link target to a qualified name.

    ``#member`` is looked up on the context class; ``Class#member`` and
    ``Class.prototype.member`` normalize to ``Class.member``. A bare member
    name also falls back to the context class.

    Args:
        target: Target text as written
        context: Qualified name of the class the reference appears in
        names: All qualified names in the table

    Returns:
        Qualified name, or None if nothing matches
    """
    name = target.strip()
    if name.endswith('()'):
        name = name[:-2]
    if not name:
        return None

    if name.startswith('#'):
        member = name[1:]
        if context and f"{context}.{member}" in names:
            return f"{context}.{member}"
        return member if member in names else None

    name = name.replace('.prototype.', '.').replace('#', '.')
    if name in names:
        return name
    if context and f"{context}.{name}" in names:
        return f"{context}.{name}"
    return None


class Linker:
    """Turns provisional build results into a finished DocletModel."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def link(self, results: Sequence[BuildResult]) -> DocletModel:
        """
        Link the build results of one run.

        Symbols of ``results`` are completed in place and frozen, so each
        set of build results can be linked once.

        Args:
            results: Per-source build results, in source order

        Returns:
            The finished, read-only DocletModel
        """
        self.diagnostics = []
        for result in results:
            self.diagnostics.extend(result.diagnostics)

        table = self._merge(results)
        table = self._promote_classes(table, results)
        implementations = self._resolve_implementations(table)
        for function_name in implementations:
            table.pop(function_name, None)

        classes = {name: s for name, s in table.items() if isinstance(s, ClassSymbol)}
        self._resolve_bases(classes, results)
        self._attach_members(table, classes)
        self._resolve_links(table)

        free_functions = tuple(s for s in table.values() if s.role is SymbolRole.FUNCTION)
        unattached = tuple(u for result in results for u in result.unattached)
        self._freeze(table, unattached)

        logger.info(f"Linked {len(table)} symbols ({len(classes)} classes, "
                    f"{len(free_functions)} free functions) with {len(self.diagnostics)} diagnostics")

        return DocletModel(
            symbols=MappingProxyType(table),
            free_functions=free_functions,
            unattached=unattached,
            diagnostics=tuple(self.diagnostics),
            implementations=MappingProxyType(implementations),
            sources=tuple(result.source_id for result in results),
        )

    def _merge(self, results: Sequence[BuildResult]) -> Dict[str, Symbol]:
        table: Dict[str, Symbol] = {}
        for result in results:
            for name, symbol in result.symbols.items():
                existing = table.pop(name, None)
                if existing is not None:
                    previous = existing.location.source_id if existing.location else '?'
                    self._diagnose(DiagnosticKind.DUPLICATE_SYMBOL,
                                   f"'{name}' overrides the definition from {previous}", symbol)
                table[name] = symbol
        return table

    @staticmethod
    def _promote_classes(table: Dict[str, Symbol], results: Sequence[BuildResult]) -> Dict[str, Symbol]:
        owners: Set[str] = set()
        for result in results:
            owners.update(result.prototype_owners)

        promoted: Dict[str, Symbol] = {}
        for name, symbol in table.items():
            if symbol.role is SymbolRole.FUNCTION and name in owners:
                symbol = ClassSymbol.from_symbol(symbol)
                logger.debug(f"Promoted '{name}' to a class")
            promoted[name] = symbol
        return promoted

    def _resolve_implementations(self, table: Dict[str, Symbol]) -> Dict[str, str]:
        functions = {name: s for name, s in table.items() if s.role is SymbolRole.FUNCTION}
        classes = {name for name, s in table.items() if isinstance(s, ClassSymbol)}
        implementations: Dict[str, str] = {}

        for symbol in table.values():
            if symbol.implemented_by is None:
                continue
            symbol.state = LinkState.RESOLVING
            if symbol.implemented_by in classes:
                # A class alias; the class keeps its own symbol
                symbol.state = LinkState.RESOLVED
                logger.debug(f"'{symbol.name}' refers to class '{symbol.implemented_by}'")
                continue
            implementation = functions.get(symbol.implemented_by)
            if implementation is None:
                symbol.state = LinkState.RESOLVED if symbol.is_documented else LinkState.DANGLING
                self._diagnose(DiagnosticKind.DANGLING_REFERENCE,
                               f"'{symbol.name}' is assigned '{symbol.implemented_by}', "
                               f"which is not a documented function or class", symbol)
                continue
            self._inherit(symbol, implementation)
            symbol.state = LinkState.RESOLVED
            implementations.setdefault(implementation.name, symbol.name)

        return implementations

    @staticmethod
    def _inherit(member: Symbol, implementation: Symbol) -> None:
        """Fill the member's empty doclet fields from its implementing function."""
        if not member.description:
            member.description = implementation.description
        if not member.params:
            member.params = [replace(p) for p in implementation.params]
        if not member.declared_params:
            member.declared_params = list(implementation.declared_params)
        if member.returns is None:
            member.returns = implementation.returns
            member.returns_type = implementation.returns_type
        if not member.see:
            member.see = [Reference(r.target, r.label) for r in implementation.see]
        if not member.throws:
            member.throws = list(implementation.throws)
        if not member.links:
            member.links = [Reference(r.target, r.label) for r in implementation.links]
        if not member.clauses:
            member.clauses = list(implementation.clauses)
        if member.deprecated is None:
            member.deprecated = implementation.deprecated
        if member.author is None:
            member.author = implementation.author

    def _resolve_bases(self, classes: Dict[str, ClassSymbol], results: Sequence[BuildResult]) -> None:
        for result in results:
            for edge in result.edges:
                cls = classes.get(edge.owner)
                if cls is None:
                    self._diagnose(DiagnosticKind.DANGLING_REFERENCE,
                                   f"prototype of '{edge.owner}' is replaced, but '{edge.owner}' "
                                   f"is not a documented class", source_id=result.source_id, line=edge.line)
                    continue
                cls.base_class = edge.base

        for cls in classes.values():
            if cls.base_class is None:
                extends = next((c for c in cls.clauses if c.kind == 'extends'), None)
                if extends is not None:
                    base = extends.type or (extends.description.split() or [None])[0]
                    cls.base_class = base
            if cls.base_class is None:
                continue
            cls.base_resolved = cls.base_class in classes
            if not cls.base_resolved:
                self._diagnose(DiagnosticKind.DANGLING_REFERENCE,
                               f"base class '{cls.base_class}' of '{cls.name}' is not documented", cls)

    @staticmethod
    def _attach_members(table: Dict[str, Symbol], classes: Dict[str, ClassSymbol]) -> None:
        for symbol in table.values():
            if symbol.role.is_member and symbol.owner in classes:
                classes[symbol.owner].members.append(symbol)

    def _resolve_links(self, table: Dict[str, Symbol]) -> None:
        names = set(table)
        for symbol in table.values():
            context = symbol.name if isinstance(symbol, ClassSymbol) else symbol.owner
            reported: Set[str] = set()
            for reference in symbol.see + symbol.links:
                reference.resolved = resolve_target(reference.target, context, names)
                if reference.resolved is None and reference.target not in reported:
                    reported.add(reference.target)
                    self._diagnose(DiagnosticKind.DANGLING_REFERENCE,
                                   f"link target '{reference.target}' in '{symbol.name}' "
                                   f"does not match any symbol", symbol)

    @staticmethod
    def _freeze(table: Dict[str, Symbol], unattached: Sequence[UnattachedComment]) -> None:
        for symbol in table.values():
            symbol.freeze()
        for entry in unattached:
            if entry.doclet is not None:
                entry.doclet.freeze()

    def _diagnose(self, kind: DiagnosticKind, message: str, symbol: Optional[Symbol] = None,
                  source_id: str = '<unknown>', line: int = 0) -> None:
        if symbol is not None and symbol.location is not None:
            source_id, line = symbol.location.source_id, symbol.location.line
        diagnostic = Diagnostic(kind, message, source_id, line)
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))


def link(results: Sequence[BuildResult]) -> DocletModel:
    """Link build results into a DocletModel."""
    return Linker().link(results)
