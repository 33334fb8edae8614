# tests/test_tag_parser.py

"""
Unit tests for JSDoc tag parsing.
"""

import pytest
from doclet_engine.tag_parser import extract_links, parse_doc_comment, split_type, strip_margin


class TestStripMargin:
    """Test cases for comment margin removal."""

    def test_single_line(self):
        """Test a one-line documentation comment."""
        assert strip_margin(' This is another inner ') == ['This is another inner']

    def test_star_margin_and_blank_edges(self):
        """Test removal of the star margin and surrounding blank lines."""
        inner = '\n    * First line  \n    *   indented\n    *\n    '
        assert strip_margin(inner) == ['First line', '  indented']


class TestParseDocComment:
    """Test cases for description and clause splitting."""

    def test_description_and_clauses(self):
        """Test a comment with a description and several tags."""
        doclet = parse_doc_comment(
            "\n * Set the color for this Shape"
            "\n * @param color The color to set for this Shape"
            "\n * @param other There is no other param"
            "\n * @throws NonExistantColorException (no, not really!)\n "
        )

        assert doclet.description == 'Set the color for this Shape'
        assert [c.tag for c in doclet.clauses] == ['param', 'param', 'throws']
        assert doclet.clauses[0].name == 'color'
        assert doclet.clauses[0].description == 'The color to set for this Shape'
        assert doclet.clauses[1].name == 'other'
        assert doclet.clauses[2].description == 'NonExistantColorException (no, not really!)'

    def test_repeated_params_keep_order(self):
        """Test that N @param lines give N clauses in source order."""
        names = ['alpha', 'beta', 'gamma', 'delta', 'epsilon']
        inner = '\n'.join(f' * @param {name} The {name} value' for name in names)
        doclet = parse_doc_comment(inner)

        params = doclet.clauses_for('param')
        assert [c.name for c in params] == names
        assert [c.description for c in params] == [f'The {name} value' for name in names]

    def test_argument_is_param_synonym(self):
        """Test that @argument is read like @param."""
        doclet = parse_doc_comment(' * @argument coordinates The coordinates to set')
        clause = doclet.clauses[0]

        assert clause.tag == 'argument'
        assert clause.kind == 'param'
        assert clause.name == 'coordinates'
        assert clause.description == 'The coordinates to set'

    def test_typed_optional_param(self):
        """Test a JSDoc type expression and optional name."""
        doclet = parse_doc_comment(' * @param {number} [width=10] - The width')
        clause = doclet.clauses[0]

        assert clause.type == 'number'
        assert clause.name == 'width'
        assert clause.optional is True
        assert clause.description == 'The width'

    def test_empty_param_does_not_fail(self):
        """Test that a bare @param yields an empty clause."""
        doclet = parse_doc_comment(' * Text\n * @param\n * @returns something')

        assert doclet.clauses[0].kind == 'param'
        assert doclet.clauses[0].name == ''
        assert doclet.clauses[0].description == ''
        assert doclet.clauses[1].description == 'something'

    def test_multiline_clause(self):
        """Test that a clause runs until the next tag line."""
        doclet = parse_doc_comment(
            ' * @returns A Coordinate object\n *   spanning lines\n * @see #other'
        )

        returns = doclet.first('returns')
        assert ' '.join(returns.description.split()) == 'A Coordinate object spanning lines'
        assert doclet.first('see').description == '#other'

    def test_return_synonym_and_type(self):
        """Test @return with a type expression."""
        clause = parse_doc_comment(' * @return {Object.<string, {a: number}>} a map').clauses[0]

        assert clause.kind == 'returns'
        assert clause.type == 'Object.<string, {a: number}>'
        assert clause.description == 'a map'

    def test_unknown_tags_are_preserved(self):
        """Test that unrecognized tags are kept generically."""
        doclet = parse_doc_comment(' * @frobnicate wildly\n * @author Jane Doe')

        assert doclet.clauses[0].tag == 'frobnicate'
        assert doclet.clauses[0].description == 'wildly'
        assert doclet.first('author').description == 'Jane Doe'

    def test_constructor_marker(self):
        """Test detection of the constructor tag."""
        assert parse_doc_comment(' * A class\n * @constructor').is_constructor
        assert not parse_doc_comment(' * Just a function').is_constructor

    def test_at_sign_inside_text_is_not_a_tag(self):
        """Test that @ in the middle of a line stays in the description."""
        doclet = parse_doc_comment(' * must be denoted with the @constructor tag\n * or mail a@b.c')

        assert doclet.clauses == []
        assert '@constructor' in doclet.description

    def test_multiline_description_keeps_lines(self):
        """Test that description lines are kept and trailing spaces trimmed."""
        doclet = parse_doc_comment(
            '\n * This is the basic Shape class.  \n * It can be considered abstract\n * @constructor\n '
        )

        assert doclet.description == 'This is the basic Shape class.\nIt can be considered abstract'


class TestLinks:
    """Test cases for inline {@link} extraction."""

    def test_link_in_description_is_additive(self):
        """Test that link markup is reported and left in the text."""
        doclet = parse_doc_comment(' * A Square is a subclass of {@link Rectangle}')

        assert doclet.description == 'A Square is a subclass of {@link Rectangle}'
        assert [link.target for link in doclet.links] == ['Rectangle']

    def test_link_with_label(self):
        """Test a link with a label."""
        links = extract_links('see {@link Shape#getColor the color getter} and {@link Circle}')

        assert links[0].target == 'Shape#getColor'
        assert links[0].label == 'the color getter'
        assert links[1].target == 'Circle'
        assert links[1].label is None

    def test_link_inside_clause(self):
        """Test that links are attached to the clause they appear in."""
        doclet = parse_doc_comment(' * @param shape A {@link Shape} to copy')

        assert [link.target for link in doclet.clauses[0].links] == ['Shape']
        assert doclet.links == []


class TestSplitType:
    """Test cases for type expression splitting."""

    @pytest.mark.parametrize("body, expected", [
        ("{string} name desc", ("string", "name desc")),
        ("name desc", (None, "name desc")),
        ("{@link Foo} desc", (None, "{@link Foo} desc")),
        ("{unbalanced name", (None, "{unbalanced name")),
    ])
    def test_split_type(self, body, expected):
        """Test leading type extraction."""
        assert split_type(body) == expected
