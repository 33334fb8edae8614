# doclet_engine/scanner.py

"""
Comment scanner for JavaScript source text.

Splits source into code spans and comment spans without being fooled by
comment delimiters inside string, template or regex literals.
"""

import bisect
import logging
from typing import Iterator, List, Optional, Tuple

from .errors import DiagnosticKind
from .model import CommentBlock, Diagnostic, SourceSpan, SpanKind

logger = logging.getLogger(__name__)

# Lexer piece kinds. Literals are code for the scanner but not for brace counting.
_CODE = 'code'
_LITERAL = 'literal'

# A '/' after one of these starts a regex literal, not a division
_REGEX_PRECEDERS = set('(,=:[!&|?{};+-*%<>~^}')
_REGEX_KEYWORDS = {
    'return', 'typeof', 'instanceof', 'in', 'of', 'new', 'delete', 'void',
    'throw', 'case', 'do', 'else', 'yield', 'await',
}
# A ')' closing the head of one of these is followed by a statement, not an operand
_CONTROL_KEYWORDS = {'if', 'while', 'for', 'with'}
_CONTROL_HEAD = ')head'


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in '_$'


def _regex_allowed(prev: str) -> bool:
    if not prev:
        return True
    if prev in _REGEX_KEYWORDS or prev == _CONTROL_HEAD:
        return True
    return len(prev) == 1 and prev in _REGEX_PRECEDERS


def _skip_string(text: str, start: int) -> int:
    """Return the offset just past the string literal opening at ``start``."""
    quote = text[start]
    n = len(text)
    j = start + 1
    while j < n:
        ch = text[j]
        if ch == '\\':
            j += 2
            continue
        if ch == quote:
            return j + 1
        if ch == '\n' and quote != '`':
            # Unterminated string; the newline belongs to the code after it
            return j
        j += 1
    return n


def _skip_regex(text: str, start: int) -> Optional[int]:
    """Return the offset past a regex literal at ``start``, or None if it isn't one."""
    n = len(text)
    j = start + 1
    in_class = False
    while j < n:
        ch = text[j]
        if ch == '\\':
            j += 2
            continue
        if ch == '\n':
            return None
        if in_class:
            if ch == ']':
                in_class = False
        elif ch == '[':
            in_class = True
        elif ch == '/':
            j += 1
            while j < n and _is_word_char(text[j]):
                j += 1
            return j
        j += 1
    return None


def _is_doc_opener(text: str, start: int) -> bool:
    # '/**' followed by anything but another '*' (banners) or '/' ('/**/')
    if not text.startswith('/**', start):
        return False
    return start + 3 >= len(text) or text[start + 3] not in '*/'


def _lex(text: str) -> Iterator[Tuple[str, int, int, bool]]:
    """
    Walk the text once, yielding ``(kind, start, end, terminated)`` pieces.

    Kinds are plain code, literals (strings, templates, regexes) and the
    three comment span kinds. Pieces cover the whole text in order.
    """
    n = len(text)
    i = 0
    code_start = 0
    prev = ''
    parens: List[bool] = []

    while i < n:
        ch = text[i]

        if ch == '/' and i + 1 < n and text[i + 1] in '*/':
            if i > code_start:
                yield _CODE, code_start, i, True
            if text[i + 1] == '/':
                end = text.find('\n', i)
                if end == -1:
                    end = n
                yield SpanKind.LINE_COMMENT, i, end, True
            else:
                close = text.find('*/', i + 2)
                terminated = close != -1
                end = close + 2 if terminated else n
                kind = SpanKind.DOC_COMMENT if _is_doc_opener(text, i) else SpanKind.BLOCK_COMMENT
                yield kind, i, end, terminated
            i = code_start = end
            continue

        if ch in '"\'`':
            end = _skip_string(text, i)
        elif ch == '/' and _regex_allowed(prev):
            end = _skip_regex(text, i)
        else:
            end = None

        if end is not None:
            if i > code_start:
                yield _CODE, code_start, i, True
            yield _LITERAL, i, end, True
            i = code_start = end
            prev = 'literal'
            continue

        if ch.isspace():
            i += 1
        elif _is_word_char(ch):
            j = i + 1
            while j < n and _is_word_char(text[j]):
                j += 1
            prev = text[i:j]
            i = j
        elif ch == '(':
            parens.append(prev in _CONTROL_KEYWORDS)
            prev = ch
            i += 1
        elif ch == ')':
            prev = _CONTROL_HEAD if parens and parens.pop() else ch
            i += 1
        else:
            prev = ch
            i += 1

    if code_start < n:
        yield _CODE, code_start, n, True


class CommentScanner:
    """
    Iterable over the spans of one source text.

    Every iteration rescans from the start, so the scanner can be walked
    any number of times. Diagnostics from the most recent walk are kept in
    ``diagnostics``.
    """

    def __init__(self, text: str, source_id: str = '<string>'):
        """
        Initialize the scanner.

        Args:
            text: Source text to scan
            source_id: Identifier used in diagnostics (usually a file path)
        """
        self.text = text
        self.source_id = source_id
        self.diagnostics: List[Diagnostic] = []

    def __iter__(self) -> Iterator[SourceSpan]:
        return self._scan()

    def _scan(self) -> Iterator[SourceSpan]:
        self.diagnostics = []
        text = self.text
        line = 1
        code_start = None

        def make_span(kind, start, end, terminated=True):
            end_line = line + text.count('\n', start, max(start, end - 1))
            return SourceSpan(kind, start, end, line, end_line, text[start:end], terminated)

        for kind, start, end, terminated in _lex(text):
            if kind in (_CODE, _LITERAL):
                if code_start is None:
                    code_start = start
                continue

            if code_start is not None:
                yield make_span(SpanKind.CODE, code_start, start)
                line += text.count('\n', code_start, start)
                code_start = None

            span = make_span(kind, start, end, terminated)
            if not terminated:
                self._report_unterminated(span)
            yield span
            line += text.count('\n', start, end)

        if code_start is not None:
            yield make_span(SpanKind.CODE, code_start, len(text))

    def _report_unterminated(self, span: SourceSpan) -> None:
        message = "Block comment is not terminated before end of input"
        self.diagnostics.append(
            Diagnostic(DiagnosticKind.MALFORMED_COMMENT, message, self.source_id, span.start_line)
        )
        logger.warning(f"{self.source_id}:{span.start_line}: {message}")

    def comments(self) -> Iterator[CommentBlock]:
        """Iterate over comment spans only."""
        for span in self:
            if span.is_comment:
                yield CommentBlock(span)


def scan(text: str, source_id: str = '<string>') -> List[SourceSpan]:
    """Scan ``text`` eagerly and return its spans."""
    return list(CommentScanner(text, source_id))


class BraceIndex:
    """
    Positions of ``{`` and ``}`` in code, ignoring comments and literals.

    Used to find function bodies and to tell top-level statements from
    nested ones. ``statement_ends`` holds the offset just past every ``;``
    and ``}`` in code.
    """

    def __init__(self, text: str):
        self._offsets: List[int] = []
        self._chars: List[str] = []
        self._depths: List[int] = []
        self.statement_ends: List[int] = []

        depth = 0
        for kind, start, end, _ in _lex(text):
            if kind != _CODE:
                continue
            for pos in range(start, end):
                ch = text[pos]
                if ch == '{':
                    depth += 1
                elif ch == '}':
                    depth -= 1
                    self.statement_ends.append(pos + 1)
                elif ch == ';':
                    self.statement_ends.append(pos + 1)
                    continue
                else:
                    continue
                self._offsets.append(pos)
                self._chars.append(ch)
                self._depths.append(depth)

    def depth_at(self, offset: int) -> int:
        """Number of braces open just before ``offset``."""
        idx = bisect.bisect_left(self._offsets, offset)
        if idx == 0:
            return 0
        return max(0, self._depths[idx - 1])

    def first_open_after(self, offset: int) -> Optional[int]:
        idx = bisect.bisect_left(self._offsets, offset)
        while idx < len(self._offsets):
            if self._chars[idx] == '{':
                return self._offsets[idx]
            idx += 1
        return None

    def matching_close(self, open_offset: int) -> Optional[int]:
        """Offset of the ``}`` closing the ``{`` at ``open_offset``."""
        idx = bisect.bisect_left(self._offsets, open_offset)
        if idx >= len(self._offsets) or self._offsets[idx] != open_offset:
            return None
        if self._chars[idx] != '{':
            return None
        outer = self._depths[idx] - 1
        for j in range(idx + 1, len(self._offsets)):
            if self._chars[j] == '}' and self._depths[j] == outer:
                return self._offsets[j]
        return None
