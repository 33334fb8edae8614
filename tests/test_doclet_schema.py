# tests/test_doclet_schema.py

"""
Unit tests for model serialization and validation.
"""

import json

from doclet_engine.doclet_schema import DocletValidator, model_to_dict


class TestModelToDict:
    """Test cases for serialization."""

    def test_fixture_serializes(self, shapes_model):
        """Test that the fixture model converts to valid JSON data."""
        data = shapes_model.to_dict()

        assert json.loads(json.dumps(data)) == data
        assert data['sources'] == ['shapes.js']
        assert data['free_functions'] == ['UnattachedFunction']
        assert len(data['implementations']) == 18
        assert DocletValidator.validate_model(data) is True

    def test_class_entry(self, shapes_model):
        """Test the fields only classes carry."""
        symbols = {s['name']: s for s in model_to_dict(shapes_model)['symbols']}
        rectangle = symbols['Rectangle']

        assert rectangle['role'] == 'constructor'
        assert rectangle['base_class'] == 'Shape'
        assert rectangle['base_resolved'] is True
        assert 'Rectangle.getArea' in rectangle['members']
        assert 'members' not in symbols['UnattachedFunction']

    def test_member_entry(self, shapes_model):
        """Test a member's parameters, references and returns."""
        symbols = {s['name']: s for s in model_to_dict(shapes_model)['symbols']}
        get_color = symbols['Shape.getColor']

        assert get_color['role'] == 'instance-method'
        assert get_color['owner'] == 'Shape'
        assert get_color['see'] == [{'target': '#setColor', 'label': None, 'resolved': 'Shape.setColor'}]
        assert get_color['implemented_by'] == 'Shape_GetColor'
        assert get_color['state'] == 'resolved'
        assert get_color['returns'] is None
        assert symbols['Shape.getCoords']['returns']['description'].startswith('A Coordinate')

    def test_diagnostics_and_unattached(self):
        """Test serialized diagnostics and unattached comments."""
        from doclet_engine import parse_source

        data = parse_source("/** Orphan */\nvar x = 1;\n", 'orphan.js').to_dict()

        assert data['unattached'][0]['description'] == 'Orphan'
        assert data['unattached'][0]['line'] == 1
        assert data['diagnostics'][0]['kind'] == 'UnrecognizedConstruct'
        assert data['diagnostics'][0]['severity'] == 'info'
        assert data['diagnostics'][0]['source'] == 'orphan.js'


class TestDocletValidator:
    """Test cases for DocletValidator."""

    def test_valid_model(self):
        """Test validation of a complete model."""
        data = {
            'sources': ['a.js'],
            'symbols': [
                {
                    'name': 'f',
                    'role': 'function',
                    'parameters': [{'name': 'x', 'type': None, 'description': ''}],
                    'see': [{'target': 'g', 'label': None, 'resolved': None}],
                },
            ],
            'free_functions': ['f'],
        }

        assert DocletValidator.validate_model(data) is True

    def test_missing_sources(self):
        """Test validation fails when sources is missing."""
        assert DocletValidator.validate_model({'symbols': []}) is False

    def test_not_a_dict(self):
        """Test validation fails for non-dict input."""
        assert DocletValidator.validate_model([]) is False

    def test_symbol_without_role(self):
        """Test validation fails for a symbol missing its role."""
        data = {'sources': [], 'symbols': [{'name': 'f'}]}

        assert DocletValidator.validate_model(data) is False

    def test_parameter_without_name(self):
        """Test validation fails for an unnamed parameter."""
        symbol = {'name': 'f', 'role': 'function', 'parameters': [{'description': 'x'}]}

        assert DocletValidator.validate_symbol(symbol) is False

    def test_reference_without_target(self):
        """Test validation fails for an empty reference."""
        assert DocletValidator.validate_reference({'target': ''}) is False
        assert DocletValidator.validate_reference({'target': 'Shape'}) is True

    def test_unknown_free_function(self):
        """Test validation fails when a free function has no symbol."""
        data = {'sources': [], 'symbols': [], 'free_functions': ['ghost']}

        assert DocletValidator.validate_model(data) is False
