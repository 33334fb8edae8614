# doclet_engine/project_analyzer.py
"""
Project-wide doclet extraction.

Each source runs through the per-source pipeline on its own, possibly on a
worker pool. Linking starts only after every source has been built, over the
merged tables in the original source order.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from .analyzers.base_analyzer import BaseAnalyzer
from .analyzers.js_analyzer import JavaScriptAnalyzer
from .builder import BuildResult
from .errors import InvalidInput
from .linker import Linker
from .model import DocletModel

logger = logging.getLogger(__name__)


class ProjectAnalyzer:
    """Parses a set of in-memory sources into one DocletModel."""

    def __init__(self, analyzer: Optional[BaseAnalyzer] = None, parallel: bool = False,
                 max_workers: int = 4, show_progress: bool = False):
        """
        Initialize the project analyzer.

        Args:
            analyzer: Per-source analyzer (JavaScript by default)
            parallel: Build sources on a thread pool
            max_workers: Upper bound on worker threads
            show_progress: Show a tqdm progress bar while building
        """
        self.analyzer = analyzer or JavaScriptAnalyzer()
        self.parallel = parallel
        self.max_workers = max(1, int(max_workers))
        self.show_progress = show_progress

    def analyze(self, sources: Sequence[Tuple[str, str]]) -> DocletModel:
        """
        Build every source, then link them together.

        Args:
            sources: ``(source_id, text)`` pairs

        Returns:
            DocletModel covering all sources

        Raises:
            InvalidInput: If ``sources`` or any entry breaks the caller contract
        """
        if sources is None:
            raise InvalidInput("No sources given")
        sources = list(sources)
        for entry in sources:
            if not isinstance(entry, tuple) or len(entry) != 2:
                raise InvalidInput(f"Sources must be (source_id, text) pairs, got {entry!r}")
            source_id, text = entry
            self.analyzer.validate_input(text, source_id)

        logger.info(f"Building {len(sources)} sources")
        if self.parallel and len(sources) > 1:
            results = self._build_parallel(sources)
        else:
            results = self._build_sequential(sources)

        return Linker().link(results)

    def _build_sequential(self, sources: List[Tuple[str, str]]) -> List[BuildResult]:
        logger.debug("Using sequential processing")
        results = []
        for source_id, text in tqdm(sources, desc="Parsing sources", disable=not self.show_progress):
            results.append(self.analyzer.analyze(text, source_id))
        return results

    def _build_parallel(self, sources: List[Tuple[str, str]]) -> List[BuildResult]:
        max_workers = min(self.max_workers, len(sources))
        logger.debug(f"Using parallel processing with {max_workers} workers")
        results: List[Optional[BuildResult]] = [None] * len(sources)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self.analyzer.analyze, text, source_id): index
                for index, (source_id, text) in enumerate(sources)
            }
            with tqdm(total=len(sources), desc="Parsing sources", disable=not self.show_progress) as pbar:
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
                    pbar.update(1)

        return results
