"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from doclet_engine.analyzers.js_analyzer import JavaScriptAnalyzer

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def shapes_source():
    """Source text of the Shape/Rectangle/Circle reference fixture."""
    return (FIXTURES_DIR / "shapes.js").read_text(encoding="utf-8")


@pytest.fixture
def shapes_model(shapes_source):
    """Linked model of the reference fixture."""
    return JavaScriptAnalyzer().parse(shapes_source, "shapes.js")
