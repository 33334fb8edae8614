# doclet_engine/analyzers/js_analyzer.py

"""
JavaScript-specific analyzer for extracting doclets from JS source text.
"""

import logging

from .base_analyzer import BaseAnalyzer
from ..builder import BuildResult, SymbolBuilder

logger = logging.getLogger(__name__)


class JavaScriptAnalyzer(BaseAnalyzer):
    """Analyzer for JSDoc-annotated JavaScript."""

    def _get_language_name(self) -> str:
        return "javascript"

    def _build(self, text: str, source_id: str) -> BuildResult:
        result = SymbolBuilder(source_id).build(text)
        logger.info(f"Analyzed {source_id}: {len(result.symbols)} provisional symbols, "
                    f"{len(result.diagnostics)} diagnostics")
        return result
