# doclet_engine/analyzers/base_analyzer.py

"""
Base analyzer class for language-specific doclet extraction.
Provides input validation and the single-source parse entry point.
"""

from abc import ABC, abstractmethod
import logging

from ..builder import BuildResult
from ..errors import InvalidInput
from ..linker import Linker
from ..model import DocletModel

logger = logging.getLogger(__name__)


class BaseAnalyzer(ABC):
    """Abstract base class for language-specific analyzers."""

    def __init__(self):
        """Initialize the analyzer."""
        self.language = self._get_language_name()
        logger.debug(f"Initialized {self.__class__.__name__}")

    @abstractmethod
    def _get_language_name(self) -> str:
        """
        Get the language name for this analyzer.

        Returns:
            Language name (e.g., 'javascript')
        """
        pass

    @abstractmethod
    def _build(self, text: str, source_id: str) -> BuildResult:
        """
        Build the provisional symbol table for already validated input.

        Args:
            text: Source text
            source_id: Identifier of the source

        Returns:
            BuildResult for the source
        """
        pass

    def validate_input(self, text, source_id) -> None:
        """
        Check the caller contract before any parsing starts.

        Raises:
            InvalidInput: If the text is missing or not a string, or the
                source id is empty
        """
        if text is None:
            raise InvalidInput(f"No source text given for {source_id!r}")
        if not isinstance(text, str):
            raise InvalidInput(f"Source text for {source_id!r} must be str, not {type(text).__name__}")
        if not source_id or not isinstance(source_id, str):
            raise InvalidInput("A non-empty source identifier is required")

    def analyze(self, text: str, source_id: str = '<string>') -> BuildResult:
        """
        Run the per-source pipeline (scan, recognize, build) without linking.

        Args:
            text: Source text
            source_id: Identifier used in diagnostics (e.g., file path)

        Returns:
            Provisional BuildResult
        """
        self.validate_input(text, source_id)
        logger.debug(f"Analyzing {self.language} source {source_id}")
        return self._build(text, source_id)

    def parse(self, text: str, source_id: str = '<string>') -> DocletModel:
        """
        Parse and link a single source.

        Args:
            text: Source text
            source_id: Identifier used in diagnostics (e.g., file path)

        Returns:
            Finished DocletModel
        """
        return Linker().link([self.analyze(text, source_id)])
