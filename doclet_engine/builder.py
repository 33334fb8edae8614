# doclet_engine/builder.py

"""
Symbol builder.

Pairs every documentation comment with the construct that follows it and
turns the pair into a provisional Symbol. Cross-references (implementing
functions, base classes, link targets) are only recorded here as names; the
linker resolves them.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .errors import DiagnosticKind
from .model import (
    ClassSymbol,
    CommentBlock,
    ConstructDescriptor,
    ConstructKind,
    Diagnostic,
    Doclet,
    LinkState,
    Location,
    Param,
    Reference,
    SourceSpan,
    SpanKind,
    Symbol,
    SymbolRole,
    UnattachedComment,
)
from .recognizer import StructuralRecognizer
from .scanner import BraceIndex, CommentScanner
from .tag_parser import parse_comment

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Provisional symbol table of one source, before linking."""
    source_id: str
    symbols: Dict[str, Symbol] = field(default_factory=dict)
    edges: List[ConstructDescriptor] = field(default_factory=list)
    prototype_owners: Set[str] = field(default_factory=set)
    unattached: List[UnattachedComment] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class _Scope:
    """Body of a function declaration."""
    name: str
    open: int
    close: int
    offset: int


def apply_doclet(symbol: Symbol, doclet: Doclet) -> None:
    """Copy parsed doclet content onto a symbol."""
    symbol.description = doclet.description
    symbol.clauses = list(doclet.clauses)
    symbol.params = [
        Param(name=c.name, description=c.description, type=c.type, optional=c.optional)
        for c in doclet.clauses_for('param')
    ]

    returns = doclet.first('returns')
    if returns is not None:
        symbol.returns = returns.description
        symbol.returns_type = returns.type

    symbol.see = []
    for clause in doclet.clauses_for('see'):
        if clause.links:
            symbol.see.extend(Reference(target=link.target, label=link.label) for link in clause.links)
        elif clause.description:
            symbol.see.append(Reference(target=clause.description.split()[0]))

    symbol.throws = [
        ' '.join(part for part in (c.type, c.description) if part)
        for c in doclet.clauses_for('throws')
    ]

    symbol.links = list(doclet.links)
    for clause in doclet.clauses:
        symbol.links.extend(clause.links)

    symbol.is_constructor = doclet.is_constructor
    deprecated = doclet.first('deprecated')
    if deprecated is not None:
        symbol.deprecated = deprecated.description
    author = doclet.first('author')
    if author is not None:
        symbol.author = author.description


class SymbolBuilder:
    """Builds the provisional symbol table for one source text."""

    def __init__(self, source_id: str = '<string>'):
        """
        Initialize the builder.

        Args:
            source_id: Identifier used in locations and diagnostics
        """
        self.source_id = source_id

    def build(self, text: str) -> BuildResult:
        """
        Scan, recognize and pair one source text.

        Args:
            text: JavaScript source

        Returns:
            BuildResult with provisional symbols, edges and diagnostics
        """
        result = BuildResult(source_id=self.source_id)

        scanner = CommentScanner(text, self.source_id)
        spans = list(scanner)
        result.diagnostics.extend(scanner.diagnostics)

        recognizer = StructuralRecognizer(text, BraceIndex(text))
        scopes = self._function_scopes(spans, recognizer)
        constructors: Set[int] = set()

        entries: List[Tuple[int, Optional[CommentBlock], Optional[Doclet], Optional[ConstructDescriptor]]] = []
        swept: List[ConstructDescriptor] = []
        for idx, span in enumerate(spans):
            if span.kind is SpanKind.CODE:
                swept.extend(recognizer.sweep(span))
            elif span.kind is SpanKind.DOC_COMMENT:
                comment = CommentBlock(span)
                construct = self._following_construct(spans, idx, recognizer) if span.terminated else None
                entries.append((comment.start, comment, parse_comment(comment), construct))

        documented = {construct.offset for _, _, _, construct in entries if construct is not None}
        entries.extend((c.offset, None, None, c) for c in swept if c.offset not in documented)
        entries.sort(key=lambda entry: entry[0])

        for _, comment, doclet, construct in entries:
            if comment is None:
                self._add_undocumented(result, construct)
            elif not comment.span.terminated:
                result.unattached.append(
                    UnattachedComment(comment, self.source_id, "comment is not terminated", doclet)
                )
            elif construct is None:
                self._unrecognized(result, comment, doclet)
            else:
                enclosing = self._enclosing(scopes, comment.start)
                self._attach(result, comment, doclet, construct, enclosing, constructors)

        logger.debug(f"{self.source_id}: built {len(result.symbols)} symbols, "
                     f"{len(result.unattached)} unattached comments")
        return result

    def _function_scopes(self, spans: List[SourceSpan], recognizer: StructuralRecognizer) -> List[_Scope]:
        scopes = []
        text = recognizer.text
        for span in spans:
            if span.kind is not SpanKind.CODE:
                continue
            pos = text.find('function', span.start, span.end)
            while pos != -1:
                preceded_by_word = pos > 0 and (text[pos - 1].isalnum() or text[pos - 1] in '_$')
                construct = None if preceded_by_word else recognizer.recognize(pos)
                if (construct is not None and construct.kind is ConstructKind.FUNCTION_DECLARATION
                        and construct.body is not None):
                    scopes.append(_Scope(construct.member, construct.body[0], construct.body[1], construct.offset))
                pos = text.find('function', pos + 8, span.end)
        return scopes

    @staticmethod
    def _enclosing(scopes: List[_Scope], offset: int) -> Optional[_Scope]:
        innermost = None
        for scope in scopes:
            if scope.open < offset < scope.close:
                if innermost is None or scope.open > innermost.open:
                    innermost = scope
        return innermost

    @staticmethod
    def _following_construct(spans: List[SourceSpan], idx: int,
                             recognizer: StructuralRecognizer) -> Optional[ConstructDescriptor]:
        # Whitespace and ordinary comments may separate a comment from its construct
        j = idx + 1
        while j < len(spans):
            span = spans[j]
            if span.kind in (SpanKind.BLOCK_COMMENT, SpanKind.LINE_COMMENT):
                j += 1
            elif span.kind is SpanKind.CODE and not span.text.strip():
                j += 1
            else:
                break
        if j >= len(spans) or spans[j].kind is not SpanKind.CODE:
            return None
        construct = recognizer.recognize(spans[j].start)
        if construct is None or construct.offset >= spans[j].end:
            return None
        return construct

    def _attach(self, result: BuildResult, comment: CommentBlock, doclet: Doclet,
                construct: ConstructDescriptor, enclosing: Optional[_Scope],
                constructors: Set[int]) -> None:
        kind = construct.kind

        if kind in (ConstructKind.FUNCTION_DECLARATION, ConstructKind.FUNCTION_EXPRESSION):
            if doclet.is_constructor and kind is ConstructKind.FUNCTION_DECLARATION:
                constructors.add(construct.offset)
            if enclosing is not None:
                name = f"{enclosing.name}~{construct.member}"
                self._add(result, self._symbol(name, construct.member, SymbolRole.INNER_FUNCTION,
                                               enclosing.name, construct, doclet))
            elif doclet.is_constructor:
                self._add(result, self._symbol(construct.member, construct.member, SymbolRole.CONSTRUCTOR,
                                               None, construct, doclet))
            else:
                self._add(result, self._symbol(construct.member, construct.member, SymbolRole.FUNCTION,
                                               None, construct, doclet))

        elif kind is ConstructKind.PROPERTY_ASSIGNMENT:
            result.prototype_owners.add(construct.owner)
            role = SymbolRole.INSTANCE_METHOD if self._is_method(construct) else SymbolRole.INSTANCE_PROPERTY
            self._add_member(result, construct, role, construct.owner, doclet)

        elif kind is ConstructKind.STATIC_ASSIGNMENT:
            role = SymbolRole.STATIC_METHOD if self._is_method(construct) else SymbolRole.STATIC_PROPERTY
            self._add_member(result, construct, role, construct.owner, doclet)

        elif kind is ConstructKind.PROTOTYPE_REPLACEMENT:
            result.prototype_owners.add(construct.owner)
            result.edges.append(construct)
            result.unattached.append(UnattachedComment(
                comment, self.source_id, "documents an inheritance statement", doclet, construct))

        elif kind is ConstructKind.THIS_ASSIGNMENT:
            if enclosing is not None and enclosing.offset in constructors:
                role = SymbolRole.INSTANCE_METHOD if self._is_method(construct) else SymbolRole.INSTANCE_PROPERTY
                self._add_member(result, construct, role, enclosing.name, doclet)
            else:
                reason = "enclosing function is not marked @constructor"
                if enclosing is None:
                    reason = "this-assignment outside a function declaration body"
                logger.debug(f"{self.source_id}:{comment.line}: {construct.path} not promoted: {reason}")
                result.unattached.append(UnattachedComment(comment, self.source_id, reason, doclet, construct))

    @staticmethod
    def _is_method(construct: ConstructDescriptor) -> bool:
        return construct.is_function or construct.is_indirect

    def _add_undocumented(self, result: BuildResult, construct: ConstructDescriptor) -> None:
        if construct.kind is ConstructKind.PROTOTYPE_REPLACEMENT:
            result.prototype_owners.add(construct.owner)
            result.edges.append(construct)
            return

        if construct.kind is ConstructKind.PROPERTY_ASSIGNMENT:
            result.prototype_owners.add(construct.owner)
            role = SymbolRole.INSTANCE_METHOD
        else:
            role = SymbolRole.STATIC_METHOD

        # Only indirect members become symbols; their doclet comes from the implementation
        if construct.is_indirect:
            self._add_member(result, construct, role, construct.owner, None)

    def _add_member(self, result: BuildResult, construct: ConstructDescriptor, role: SymbolRole,
                    owner: str, doclet: Optional[Doclet]) -> None:
        name = f"{owner}.{construct.member}"
        self._add(result, self._symbol(name, construct.member, role, owner, construct, doclet))

    def _symbol(self, name: str, short_name: str, role: SymbolRole, owner: Optional[str],
                construct: ConstructDescriptor, doclet: Optional[Doclet]) -> Symbol:
        symbol_cls = ClassSymbol if role is SymbolRole.CONSTRUCTOR else Symbol
        symbol = symbol_cls(
            name=name,
            short_name=short_name,
            role=role,
            owner=owner,
            declared_params=list(construct.params),
            location=Location(self.source_id, construct.line, construct.offset),
            implemented_by=construct.reference,
            state=LinkState.UNRESOLVED if construct.is_indirect else LinkState.RESOLVED,
        )
        if doclet is not None:
            apply_doclet(symbol, doclet)
        return symbol

    def _add(self, result: BuildResult, symbol: Symbol) -> None:
        existing = result.symbols.pop(symbol.name, None)
        if existing is not None:
            message = (f"'{symbol.name}' ({symbol.role.value}) overrides the {existing.role.value} "
                       f"definition on line {existing.location.line if existing.location else 0}")
            if existing.role is not symbol.role:
                message += "; the roles differ, so one of the two members is lost"
            self._diagnose(result, DiagnosticKind.DUPLICATE_SYMBOL, message,
                           symbol.location.line if symbol.location else 0)
        result.symbols[symbol.name] = symbol

    def _unrecognized(self, result: BuildResult, comment: CommentBlock, doclet: Doclet) -> None:
        reason = "no recognizable construct follows the comment"
        result.unattached.append(UnattachedComment(comment, self.source_id, reason, doclet))
        self._diagnose(result, DiagnosticKind.UNRECOGNIZED_CONSTRUCT, reason, comment.line)

    def _diagnose(self, result: BuildResult, kind: DiagnosticKind, message: str, line: int) -> None:
        diagnostic = Diagnostic(kind, message, self.source_id, line)
        result.diagnostics.append(diagnostic)
        if kind.severity == "info":
            logger.debug(str(diagnostic))
        else:
            logger.warning(str(diagnostic))


def build_source(text: str, source_id: str = '<string>') -> BuildResult:
    """Build the provisional symbol table of one source text."""
    return SymbolBuilder(source_id).build(text)
