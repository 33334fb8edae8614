# tests/test_project_analyzer.py

"""
Tests for multi-source parsing and linking.
"""

from unittest.mock import patch

import pytest
from doclet_engine import parse_project
from doclet_engine.analyzers.js_analyzer import JavaScriptAnalyzer
from doclet_engine.errors import DiagnosticKind, InvalidInput
from doclet_engine.project_analyzer import ProjectAnalyzer


BASE_JS = "/** Base shape\n * @constructor */\nfunction Shape(){}\n"
DERIVED_JS = (
    "/** Derived\n * @constructor */\nfunction Rect(){}\n"
    "Rect.prototype = new Shape();\n"
    "Rect.prototype.area = Rect_Area;\n"
)
IMPL_JS = "/** Area of the rectangle\n * @returns a number */\nfunction Rect_Area(){ return 0; }\n"


class TestProjectAnalyzer:
    """Test cases for ProjectAnalyzer."""

    @pytest.fixture
    def sources(self):
        return [('base.js', BASE_JS), ('derived.js', DERIVED_JS), ('impl.js', IMPL_JS)]

    def test_cross_source_linking(self, sources):
        """Test bases and implementations found in other sources."""
        model = ProjectAnalyzer().analyze(sources)

        assert model['Rect'].base_class == 'Shape'
        assert model['Rect'].base_resolved is True
        assert model['Rect.area'].description == 'Area of the rectangle'
        assert model.implementations == {'Rect_Area': 'Rect.area'}
        assert model.sources == ('base.js', 'derived.js', 'impl.js')
        assert model.diagnostics == ()

    def test_parallel_matches_sequential(self, sources):
        """Test that a worker pool gives the same model as a plain loop."""
        sequential = ProjectAnalyzer(parallel=False).analyze(sources)
        parallel = ProjectAnalyzer(parallel=True, max_workers=3).analyze(sources)

        assert list(parallel) == list(sequential)
        assert parallel.sources == sequential.sources
        assert parallel.to_dict() == sequential.to_dict()

    def test_parse_project_helper(self, sources, shapes_source):
        """Test the package-level entry point."""
        model = parse_project(sources + [('shapes.js', shapes_source)], parallel=True)

        assert 'Shape.setColor' in model
        assert model.sources[-1] == 'shapes.js'

    def test_cross_source_duplicate(self):
        """Test that the later source wins and the clash is reported."""
        model = ProjectAnalyzer().analyze([
            ('one.js', "/** First */\nfunction f(){}\n"),
            ('two.js', "/** Second */\nfunction f(){}\n"),
        ])

        assert model['f'].description == 'Second'
        duplicates = model.diagnostics_of(DiagnosticKind.DUPLICATE_SYMBOL)
        assert len(duplicates) == 1
        assert duplicates[0].source_id == 'two.js'
        assert 'one.js' in duplicates[0].message

    @pytest.mark.parametrize("sources", [
        None,
        [('a.js', 'x();'), ('b.js', None)],
        [('a.js', 'x();'), 'b.js'],
        [('', 'x();')],
    ])
    def test_invalid_input_before_any_build(self, sources):
        """Test that bad entries fail the run before anything is parsed."""
        with patch.object(JavaScriptAnalyzer, '_build') as mock_build:
            with pytest.raises(InvalidInput):
                ProjectAnalyzer(parallel=True).analyze(sources)
            mock_build.assert_not_called()

    def test_empty_project(self):
        """Test a run with no sources."""
        model = ProjectAnalyzer().analyze([])

        assert len(model) == 0
        assert model.sources == ()

    def test_max_workers_floor(self):
        """Test that the pool size is at least one."""
        assert ProjectAnalyzer(max_workers=0).max_workers == 1
