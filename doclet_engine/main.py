# doclet_engine/main.py

"""
Command line entry point for the doclet engine.

Reads JavaScript files from the given paths (or a path typed at the prompt),
parses them into one DocletModel and writes it out as JSON.
"""

import os
import sys
import json
import logging
from typing import List, Optional, Sequence, Tuple
from dotenv import load_dotenv

from .config_loader import ConfigLoader
from .doclet_schema import DocletValidator
from .errors import DocletError
from .project_analyzer import ProjectAnalyzer

logger = logging.getLogger(__name__)


def setup_logging(config: ConfigLoader):
    level_name = os.environ.get("DOCLET_LOG_LEVEL") or config.get_log_level()
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = config.get_log_file()
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=log_level, format=config.get_log_format(), handlers=handlers)
    logger.info("Logging initialized")


def _safe_read_file(file_path: str, encoding: str = "utf-8") -> Optional[str]:
    try:
        with open(file_path, "r", encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError:
        logger.warning(f"Failed to read {file_path} with {encoding}, trying latin-1")
        try:
            with open(file_path, "r", encoding="latin-1") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Failed to read {file_path}: {e}")
            return None
    except OSError as e:
        logger.error(f"Failed to read {file_path}: {e}")
        return None


def collect_sources(paths: Sequence[str], config: ConfigLoader) -> List[Tuple[str, str]]:
    """
    Load every JavaScript file under ``paths`` into memory.

    Args:
        paths: Files or directories
        config: Supplies extensions, excluded directories and encoding

    Returns:
        ``(path, text)`` pairs in a stable order; unreadable files are skipped
    """
    extensions = tuple(config.get_extensions())
    exclude_dirs = config.get_exclude_dirs()
    encoding = config.get_encoding()
    files = []

    for path in paths:
        if os.path.isfile(path):
            files.append(path)
            continue
        if not os.path.isdir(path):
            logger.warning(f"Skipping missing path: {path}")
            continue
        for root, dirs, names in os.walk(path):
            dirs[:] = sorted(d for d in dirs if d not in exclude_dirs)
            for name in sorted(names):
                if name.endswith(extensions):
                    files.append(os.path.join(root, name))

    sources = []
    for file_path in files:
        text = _safe_read_file(file_path, encoding)
        if text is not None:
            sources.append((file_path, text))

    logger.info(f"Loaded {len(sources)} of {len(files)} source files")
    return sources


def write_model(data: dict, output_file: str, indent: int = 2) -> None:
    directory = os.path.dirname(os.path.abspath(output_file))
    os.makedirs(directory, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
    logger.info(f"Wrote doclet model to {output_file}")


def run(paths: Sequence[str], config: ConfigLoader) -> int:
    """
    Parse ``paths`` and write the JSON model.

    Returns:
        Process exit code
    """
    sources = collect_sources(paths, config)
    if not sources:
        logger.error("No JavaScript sources found")
        print("Error: No JavaScript sources found")
        return 1

    analyzer = ProjectAnalyzer(
        parallel=config.is_parallel_processing(),
        max_workers=config.get_max_workers(),
        show_progress=True,
    )
    model = analyzer.analyze(sources)

    data = model.to_dict()
    if not DocletValidator.validate_model(data):
        logger.error("Doclet model failed validation")
        return 1

    output_file = config.get_output_file()
    write_model(data, output_file, config.get_output_indent())

    print(f"\n✓ {len(model)} symbols ({len(model.classes)} classes, "
          f"{len(model.free_functions)} free functions) written to {output_file}")
    for diagnostic in model.diagnostics:
        if diagnostic.severity != "info":
            print(f"  ! {diagnostic}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()

    config = ConfigLoader(os.environ.get("DOCLET_CONFIG", "config.yaml"))
    setup_logging(config)
    logger.info("Starting doclet engine")

    paths = list(sys.argv[1:] if argv is None else argv)
    if not paths:
        path = input("Enter the path to scan: ").strip()
        if not path:
            logger.error("No path provided")
            print("Error: A path is required")
            return 1
        paths = [path]

    try:
        return run(paths, config)
    except DocletError as e:
        logger.error(f"Parsing failed: {e}")
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user")
        logger.info("Operation cancelled by user")
    except Exception as e:
        print(f"\nUnexpected error: {e}")
        logger.exception("Unexpected error in main")
        sys.exit(1)
