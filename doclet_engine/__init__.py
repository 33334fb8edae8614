# doclet_engine/__init__.py
"""
Doclet Engine

Extracts a structured documentation model from JSDoc-annotated JavaScript.
"""

from typing import Sequence, Tuple

from .analyzers.js_analyzer import JavaScriptAnalyzer
from .errors import DiagnosticKind, DocletError, InvalidInput
from .model import ClassSymbol, DocletModel, Symbol, SymbolRole
from .project_analyzer import ProjectAnalyzer

__version__ = "1.0.0"


def parse_source(text: str, source_id: str = '<string>') -> DocletModel:
    """Parse one in-memory JavaScript source into a DocletModel."""
    return JavaScriptAnalyzer().parse(text, source_id)


def parse_project(sources: Sequence[Tuple[str, str]], parallel: bool = False,
                  max_workers: int = 4) -> DocletModel:
    """Parse ``(source_id, text)`` pairs and link them into one DocletModel."""
    return ProjectAnalyzer(parallel=parallel, max_workers=max_workers).analyze(sources)


__all__ = [
    "parse_source",
    "parse_project",
    "JavaScriptAnalyzer",
    "ProjectAnalyzer",
    "DocletModel",
    "Symbol",
    "ClassSymbol",
    "SymbolRole",
    "DiagnosticKind",
    "DocletError",
    "InvalidInput",
]
