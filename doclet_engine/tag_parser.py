# doclet_engine/tag_parser.py

"""
Tag parser for JSDoc-style documentation comments.

Turns the inner text of a ``/** ... */`` comment into a Doclet: the untagged
leading description followed by one Clause per ``@tag`` line, plus the inline
``{@link ...}`` references found along the way. Parsing never fails; odd
input just yields emptier clauses.
"""

import re
import logging
from typing import List, Optional, Tuple

from .model import Clause, CommentBlock, Doclet, Reference, TAG_SYNONYMS

logger = logging.getLogger(__name__)

_TAG_LINE = re.compile(r'^@([A-Za-z0-9_]+)(.*)$')
_LINK = re.compile(r'\{@link(?:code|plain)?\s+([^\s}|]+)(?:[\s|]+([^}]*))?\}')

# Tags whose body may open with a {Type} expression
_TYPED_TAGS = {'param', 'returns', 'throws', 'type', 'property', 'typedef'}
# Tags whose first token is a name
_NAMED_TAGS = {'param', 'property'}


def strip_margin(inner_text: str) -> List[str]:
    """
    Remove the leading ``*`` margin and indentation from each comment line.

    Leading and trailing blank lines are dropped.
    """
    lines = []
    for raw in inner_text.split('\n'):
        line = raw.strip()
        if line.startswith('*'):
            line = raw.lstrip()[1:]
            if line.startswith(' '):
                line = line[1:]
        lines.append(line.rstrip())
    return _trim_blank(lines)


def _trim_blank(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _join(lines: List[str]) -> str:
    return '\n'.join(_trim_blank(lines)).strip()


def extract_links(text: str) -> List[Reference]:
    """
    Find inline ``{@link Target}`` / ``{@link Target label}`` markup.

    The markup stays in ``text``; this only reports what it points at.
    """
    links = []
    for match in _LINK.finditer(text or ''):
        label = match.group(2).strip() if match.group(2) else None
        links.append(Reference(target=match.group(1), label=label or None))
    return links


def split_type(body: str) -> Tuple[Optional[str], str]:
    """
    Split a leading ``{Type}`` expression off a clause body.

    Braces inside the type are balanced, so ``{Object.<string, {a: number}>}``
    stays whole. An unbalanced or ``{@link}`` opening is not a type.
    """
    if not body.startswith('{') or body.startswith('{@'):
        return None, body
    depth = 0
    for i, ch in enumerate(body):
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return body[1:i].strip(), body[i + 1:].strip()
    return None, body


def _split_name(rest: str) -> Tuple[str, bool, str]:
    parts = rest.split(None, 1)
    if not parts:
        return '', False, ''
    name = parts[0]
    description = parts[1] if len(parts) > 1 else ''
    optional = False
    if name.startswith('[') and name.endswith(']'):
        optional = True
        name = name[1:-1].split('=', 1)[0].strip()
    if description.startswith('- '):
        description = description[2:]
    return name, optional, description.strip()


def parse_clause(tag: str, body: str) -> Clause:
    """Build a Clause from a tag name and its (possibly multi-line) body."""
    kind = TAG_SYNONYMS.get(tag, tag)
    clause_type = None
    rest = body.strip()

    if kind in _TYPED_TAGS:
        clause_type, rest = split_type(rest)

    if kind in _NAMED_TAGS:
        name, optional, description = _split_name(rest)
    else:
        name, optional, description = '', False, rest

    if kind in _NAMED_TAGS and not name:
        logger.debug(f"@{tag} clause without a name")

    return Clause(
        tag=tag,
        name=name,
        description=description,
        type=clause_type,
        optional=optional,
        links=extract_links(description),
    )


def parse_doc_comment(inner_text: str) -> Doclet:
    """
    Parse the inner text of a documentation comment.

    Args:
        inner_text: Comment text between ``/**`` and ``*/``

    Returns:
        Doclet with description, ordered clauses and description links
    """
    description_lines: List[str] = []
    sections: List[Tuple[str, List[str]]] = []

    for line in strip_margin(inner_text or ''):
        match = _TAG_LINE.match(line.strip())
        if match:
            sections.append((match.group(1), [match.group(2).strip()]))
        elif sections:
            sections[-1][1].append(line)
        else:
            description_lines.append(line)

    description = _join(description_lines)
    clauses = [parse_clause(tag, _join(body)) for tag, body in sections]
    return Doclet(description=description, clauses=clauses, links=extract_links(description))


def parse_comment(comment: CommentBlock) -> Doclet:
    """Parse a documentation CommentBlock."""
    return parse_doc_comment(comment.inner_text)
