# doclet_engine/model.py
"""
Data model for the doclet engine.

Spans and comments come out of the scanner, doclets and clauses out of the
tag parser, construct descriptors out of the recognizer, and symbols out of
the builder. The linker wraps the finished symbols in a read-only DocletModel.

Relations between symbols (base classes, implementing functions, link
targets) are always held as qualified-name strings, never as object
references.
"""

from __future__ import annotations
from dataclasses import FrozenInstanceError, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .errors import DiagnosticKind


class SpanKind(Enum):
    """Kinds of span produced by the comment scanner."""
    CODE = "code"
    DOC_COMMENT = "doc_comment"
    BLOCK_COMMENT = "block_comment"
    LINE_COMMENT = "line_comment"


@dataclass(frozen=True)
class SourceSpan:
    """A contiguous range of source text. ``end`` is exclusive."""
    kind: SpanKind
    start: int
    end: int
    start_line: int
    end_line: int
    text: str
    terminated: bool = True

    @property
    def is_comment(self) -> bool:
        return self.kind is not SpanKind.CODE


@dataclass(frozen=True)
class CommentBlock:
    """A comment span, documentation (``/** */``) or ordinary."""
    span: SourceSpan

    @property
    def is_doc(self) -> bool:
        return self.span.kind is SpanKind.DOC_COMMENT

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def line(self) -> int:
        return self.span.start_line

    @property
    def inner_text(self) -> str:
        """Comment text without its delimiters."""
        text = self.span.text
        if self.span.kind is SpanKind.LINE_COMMENT:
            return text[2:]
        opener = 3 if self.is_doc else 2
        if self.span.terminated:
            return text[opener:-2]
        return text[opener:]


class _Freezable:
    """
    Mixin for dataclasses that are filled in step by step, then sealed.

    ``freeze()`` turns list fields into tuples, freezes the items inside
    them and makes every later assignment raise FrozenInstanceError.
    """
    _frozen = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def freeze(self):
        if self._frozen:
            return self
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, _Freezable):
                        item.freeze()
                object.__setattr__(self, f.name, tuple(value))
        object.__setattr__(self, '_frozen', True)
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen


@dataclass
class Reference(_Freezable):
    """A ``@see`` or ``{@link}`` target, resolved to a qualified name or not."""
    target: str
    label: Optional[str] = None
    resolved: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


# Tag names that mean the same thing
TAG_SYNONYMS = {
    'argument': 'param',
    'arg': 'param',
    'return': 'returns',
    'exception': 'throws',
    'augments': 'extends',
    'class': 'constructor',
}


@dataclass
class Clause(_Freezable):
    """One tag occurrence inside a documentation comment."""
    tag: str
    name: str = ''
    description: str = ''
    type: Optional[str] = None
    optional: bool = False
    links: List[Reference] = field(default_factory=list)

    @property
    def kind(self) -> str:
        """Canonical tag name (``argument`` -> ``param``)."""
        return TAG_SYNONYMS.get(self.tag, self.tag)


@dataclass
class Doclet(_Freezable):
    """The parsed content of one documentation comment."""
    description: str = ''
    clauses: List[Clause] = field(default_factory=list)
    links: List[Reference] = field(default_factory=list)

    def clauses_for(self, kind: str) -> List[Clause]:
        return [c for c in self.clauses if c.kind == kind]

    def first(self, kind: str) -> Optional[Clause]:
        for clause in self.clauses:
            if clause.kind == kind:
                return clause
        return None

    def has(self, kind: str) -> bool:
        return self.first(kind) is not None

    @property
    def is_constructor(self) -> bool:
        return self.has('constructor')


class ConstructKind(Enum):
    """Structural shapes the recognizer can classify."""
    FUNCTION_DECLARATION = "function_declaration"
    FUNCTION_EXPRESSION = "function_expression"
    PROPERTY_ASSIGNMENT = "property_assignment"
    PROTOTYPE_REPLACEMENT = "prototype_replacement"
    STATIC_ASSIGNMENT = "static_assignment"
    THIS_ASSIGNMENT = "this_assignment"


@dataclass(frozen=True)
class ConstructDescriptor:
    """
    A recognized declaration or assignment.

    ``path`` is the full assignment target as written
    (``Rectangle.prototype.getWidth``). ``reference`` is set for indirect
    assignments (``= Rectangle_GetWidth``), ``base`` for prototype
    replacement, and ``body`` holds the ``(open, close)`` brace offsets of a
    function declaration.
    """
    kind: ConstructKind
    path: str
    owner: Optional[str] = None
    member: Optional[str] = None
    params: Tuple[str, ...] = ()
    is_function: bool = False
    reference: Optional[str] = None
    base: Optional[str] = None
    offset: int = 0
    line: int = 0
    body: Optional[Tuple[int, int]] = None

    @property
    def name(self) -> str:
        return self.member or self.path

    @property
    def is_indirect(self) -> bool:
        return self.reference is not None


class SymbolRole(Enum):
    """What a documented symbol is."""
    CONSTRUCTOR = "constructor"
    INSTANCE_METHOD = "instance-method"
    INSTANCE_PROPERTY = "instance-property"
    STATIC_METHOD = "static-method"
    STATIC_PROPERTY = "static-property"
    FUNCTION = "function"
    INNER_FUNCTION = "inner-function"

    @property
    def is_member(self) -> bool:
        return self in (SymbolRole.INSTANCE_METHOD, SymbolRole.INSTANCE_PROPERTY,
                        SymbolRole.STATIC_METHOD, SymbolRole.STATIC_PROPERTY)


class LinkState(Enum):
    """Resolution state of a symbol's name-based edges."""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    DANGLING = "dangling"


@dataclass(frozen=True)
class Location:
    """Where a symbol was documented."""
    source_id: str
    line: int
    offset: int = 0


@dataclass
class Param(_Freezable):
    """A documented parameter."""
    name: str
    description: str = ''
    type: Optional[str] = None
    optional: bool = False


@dataclass
class Symbol(_Freezable):
    """A documented class, member or function."""
    name: str
    short_name: str
    role: SymbolRole
    owner: Optional[str] = None
    description: str = ''
    params: List[Param] = field(default_factory=list)
    declared_params: List[str] = field(default_factory=list)
    returns: Optional[str] = None
    returns_type: Optional[str] = None
    see: List[Reference] = field(default_factory=list)
    throws: List[str] = field(default_factory=list)
    links: List[Reference] = field(default_factory=list)
    is_constructor: bool = False
    deprecated: Optional[str] = None
    author: Optional[str] = None
    clauses: List[Clause] = field(default_factory=list)
    location: Optional[Location] = None
    implemented_by: Optional[str] = None
    state: LinkState = LinkState.RESOLVED

    @property
    def is_documented(self) -> bool:
        return bool(self.description or self.clauses)


@dataclass
class ClassSymbol(Symbol):
    """A constructor function, which is also the class it defines."""
    members: List[Symbol] = field(default_factory=list)
    base_class: Optional[str] = None
    base_resolved: bool = False

    @classmethod
    def from_symbol(cls, symbol: Symbol) -> "ClassSymbol":
        """Promote a function symbol to a class, keeping its doclet content."""
        values = {f.name: getattr(symbol, f.name) for f in fields(Symbol)}
        values['role'] = SymbolRole.CONSTRUCTOR
        values['owner'] = None
        return cls(**values)


@dataclass(frozen=True)
class UnattachedComment:
    """A documentation comment that produced no symbol."""
    comment: CommentBlock
    source_id: str
    reason: str
    doclet: Optional[Doclet] = None
    construct: Optional[ConstructDescriptor] = None

    @property
    def line(self) -> int:
        return self.comment.line


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found during a run."""
    kind: DiagnosticKind
    message: str
    source_id: str
    line: int = 0

    @property
    def severity(self) -> str:
        return self.kind.severity

    def __str__(self) -> str:
        return f"{self.source_id}:{self.line}: {self.kind.value}: {self.message}"


@dataclass(frozen=True)
class DocletModel:
    """
    The finished documentation model of one run.

    ``symbols`` maps qualified names to symbols in source order. The
    containers are read-only views and every symbol is frozen, with tuples
    in place of lists.
    """
    symbols: Mapping[str, Symbol]
    free_functions: Tuple[Symbol, ...] = ()
    unattached: Tuple[UnattachedComment, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()
    implementations: Mapping[str, str] = field(default_factory=dict)
    sources: Tuple[str, ...] = ()

    def __getitem__(self, name: str) -> Symbol:
        return self.symbols[name]

    def __contains__(self, name: object) -> bool:
        return name in self.symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def get(self, name: str, default: Optional[Symbol] = None) -> Optional[Symbol]:
        return self.symbols.get(name, default)

    @property
    def classes(self) -> Tuple[ClassSymbol, ...]:
        return tuple(s for s in self.symbols.values() if isinstance(s, ClassSymbol))

    def members_of(self, class_name: str) -> Tuple[Symbol, ...]:
        cls = self.symbols.get(class_name)
        if isinstance(cls, ClassSymbol):
            return tuple(cls.members)
        return ()

    def diagnostics_of(self, kind: DiagnosticKind) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.kind is kind)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the model."""
        from .doclet_schema import model_to_dict
        return model_to_dict(self)
