# doclet_engine/recognizer.py

"""
Structural recognizer for documentable JavaScript constructs.

Classifies the code that follows a comment as one of a small, ordered set of
declaration and assignment shapes. The first rule that matches wins. No
expression is evaluated; only the statement's syntactic shape matters.
"""

import bisect
import re
import logging
from typing import List, Optional, Tuple

from .model import ConstructDescriptor, ConstructKind, SourceSpan, SpanKind
from .scanner import BraceIndex

logger = logging.getLogger(__name__)

_IDENT = r'[A-Za-z_$][\w$]*'
_PATH = rf'{_IDENT}(?:\.{_IDENT})*'

_FUNCTION_DECLARATION = re.compile(rf'\s*function\s+({_IDENT})\s*\(([^)]*)\)')
_FUNCTION_EXPRESSION = re.compile(
    rf'\s*(?:(?:var|let|const)\s+)?({_IDENT})\s*=(?!=)\s*function\b\s*(?:{_IDENT})?\s*\(([^)]*)\)'
)
_PROTOTYPE_MEMBER = re.compile(rf'\s*({_PATH})\.prototype\.({_IDENT})\s*=(?!=)\s*')
_PROTOTYPE_REPLACEMENT = re.compile(rf'\s*({_PATH})\.prototype\s*=(?!=)\s*new\s+({_PATH})\s*(?=[(;\n]|$)')
_STATIC_MEMBER = re.compile(rf'\s*({_PATH})\.({_IDENT})\s*=(?!=)\s*')
_THIS_MEMBER = re.compile(rf'\s*this\.({_IDENT})\s*=(?!=)\s*')

_RHS_FUNCTION = re.compile(rf'function\b\s*(?:{_IDENT})?\s*\(([^)]*)\)')
_RHS_IDENTIFIER = re.compile(rf'({_IDENT})[ \t]*(?=;|//|/\*|\r?\n|$)')
_INLINE_COMMENT = re.compile(r'/\*.*?\*/', re.DOTALL)
_LINE_START = re.compile(r'\n')

# Identifiers that are values, not references to a function
_VALUE_KEYWORDS = {
    'null', 'undefined', 'true', 'false', 'this', 'NaN', 'Infinity',
}


def extract_params(param_text: str) -> Tuple[str, ...]:
    """
    Pull parameter names out of the text between a function's parentheses.

    Defaults and inline comments are dropped; rest parameters keep their
    ``...`` prefix.
    """
    cleaned = _INLINE_COMMENT.sub('', param_text or '')
    names = []
    for part in cleaned.split(','):
        part = part.split('=', 1)[0].strip()
        if not part:
            continue
        match = re.match(rf'(\.\.\.)?\s*({_IDENT})', part)
        if match:
            names.append((match.group(1) or '') + match.group(2))
    return tuple(names)


class StructuralRecognizer:
    """Recognizes constructs at positions of one source text."""

    def __init__(self, text: str, brace_index: Optional[BraceIndex] = None):
        """
        Initialize the recognizer.

        Args:
            text: Complete source text
            brace_index: Brace positions of ``text``; built when omitted
        """
        self.text = text
        self.brace_index = brace_index or BraceIndex(text)
        self._line_starts = [0] + [m.end() for m in _LINE_START.finditer(text)]

    def line_of(self, offset: int) -> int:
        """1-based line number of ``offset``."""
        return bisect.bisect_right(self._line_starts, offset)

    def recognize(self, offset: int) -> Optional[ConstructDescriptor]:
        """
        Classify the statement starting at ``offset`` (leading whitespace allowed).

        Args:
            offset: Absolute offset into the source text

        Returns:
            ConstructDescriptor, or None if no rule matches
        """
        text = self.text

        match = _FUNCTION_DECLARATION.match(text, offset)
        if match:
            return self._function_declaration(match)

        match = _FUNCTION_EXPRESSION.match(text, offset)
        if match:
            return self._descriptor(
                ConstructKind.FUNCTION_EXPRESSION, match,
                path=match.group(1),
                member=match.group(1),
                params=extract_params(match.group(2)),
                is_function=True,
            )

        match = _PROTOTYPE_MEMBER.match(text, offset)
        if match:
            owner, member = match.group(1), match.group(2)
            return self._assignment(ConstructKind.PROPERTY_ASSIGNMENT, match,
                                    f"{owner}.prototype.{member}", owner, member)

        match = _PROTOTYPE_REPLACEMENT.match(text, offset)
        if match:
            owner = match.group(1)
            return self._descriptor(
                ConstructKind.PROTOTYPE_REPLACEMENT, match,
                path=f"{owner}.prototype",
                owner=owner,
                base=match.group(2),
            )

        match = _STATIC_MEMBER.match(text, offset)
        if match:
            owner, member = match.group(1), match.group(2)
            segments = owner.split('.')
            if member != 'prototype' and 'prototype' not in segments and segments[0] != 'this':
                return self._assignment(ConstructKind.STATIC_ASSIGNMENT, match,
                                        f"{owner}.{member}", owner, member)

        match = _THIS_MEMBER.match(text, offset)
        if match:
            member = match.group(1)
            return self._assignment(ConstructKind.THIS_ASSIGNMENT, match,
                                    f"this.{member}", None, member)

        return None

    def _descriptor(self, kind: ConstructKind, match, **values) -> ConstructDescriptor:
        start = match.start(1)
        return ConstructDescriptor(kind=kind, offset=start, line=self.line_of(start), **values)

    def _function_declaration(self, match) -> ConstructDescriptor:
        body = None
        open_brace = self.brace_index.first_open_after(match.end())
        if open_brace is not None and not self.text[match.end():open_brace].strip():
            close_brace = self.brace_index.matching_close(open_brace)
            if close_brace is not None:
                body = (open_brace, close_brace)
        return self._descriptor(
            ConstructKind.FUNCTION_DECLARATION, match,
            path=match.group(1),
            member=match.group(1),
            params=extract_params(match.group(2)),
            is_function=True,
            body=body,
        )

    def _assignment(self, kind: ConstructKind, match, path: str,
                    owner: Optional[str], member: str) -> ConstructDescriptor:
        rhs = match.end()
        params: Tuple[str, ...] = ()
        is_function = False
        reference = None

        function_match = _RHS_FUNCTION.match(self.text, rhs)
        if function_match:
            is_function = True
            params = extract_params(function_match.group(1))
        else:
            ident_match = _RHS_IDENTIFIER.match(self.text, rhs)
            if ident_match and ident_match.group(1) not in _VALUE_KEYWORDS:
                reference = ident_match.group(1)

        return self._descriptor(kind, match, path=path, owner=owner, member=member,
                                params=params, is_function=is_function, reference=reference)

    def sweep(self, span: SourceSpan) -> List[ConstructDescriptor]:
        """
        Find top-level prototype statements and indirect static assignments in a code span.

        Only statements at brace depth 0 that start the span, a line, or
        follow a ``;`` or ``}`` are considered, documented or not. The
        results carry inheritance edges, prototype ownership and the
        indirect references the linker resolves.
        """
        if span.kind is not SpanKind.CODE:
            return []

        starts = [span.start] + [m.end() for m in _LINE_START.finditer(self.text, span.start, span.end)]
        ends = self.brace_index.statement_ends
        lo = bisect.bisect_left(ends, span.start)
        hi = bisect.bisect_right(ends, span.end)
        starts = sorted(set(starts).union(ends[lo:hi]))
        found = []
        seen = set()
        for pos in starts:
            if pos >= span.end or self.brace_index.depth_at(pos) != 0:
                continue
            construct = self.recognize(pos)
            if construct is None or construct.offset >= span.end or construct.offset in seen:
                continue
            seen.add(construct.offset)
            if construct.kind in (ConstructKind.PROTOTYPE_REPLACEMENT, ConstructKind.PROPERTY_ASSIGNMENT) or (
                    construct.kind is ConstructKind.STATIC_ASSIGNMENT and construct.is_indirect):
                found.append(construct)
        logger.debug(f"Sweep of lines {span.start_line}-{span.end_line} found {len(found)} constructs")
        return found
