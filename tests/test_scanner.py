# tests/test_scanner.py

"""
Unit tests for the comment scanner and brace index.
"""

import pytest
from doclet_engine.errors import DiagnosticKind
from doclet_engine.model import SpanKind
from doclet_engine.scanner import BraceIndex, CommentScanner, scan


def assert_partition(text, spans):
    """Spans must cover the text exactly, in order."""
    assert "".join(span.text for span in spans) == text
    position = 0
    for span in spans:
        assert span.start == position
        assert span.end > span.start
        assert text[span.start:span.end] == span.text
        position = span.end
    assert position == len(text)


class TestCommentScanner:
    """Test cases for span splitting."""

    def test_splits_code_and_comment_kinds(self):
        """Test that each comment style gets its own span kind."""
        text = 'var a = 1;\n/** doc */\nfunction f(){} // tail\n/* block */\n'
        spans = scan(text)

        assert [s.kind for s in spans] == [
            SpanKind.CODE, SpanKind.DOC_COMMENT, SpanKind.CODE,
            SpanKind.LINE_COMMENT, SpanKind.CODE, SpanKind.BLOCK_COMMENT, SpanKind.CODE,
        ]
        assert spans[1].text == '/** doc */'
        assert spans[3].text == '// tail'
        assert spans[5].text == '/* block */'
        assert_partition(text, spans)

    def test_fixture_is_partitioned(self, shapes_source):
        """Test that the reference fixture is covered without gaps or overlaps."""
        assert_partition(shapes_source, scan(shapes_source, 'shapes.js'))

    @pytest.mark.parametrize("text", [
        "",
        "x",
        "/**/",
        "// only a line comment",
        "a = '/*'; b = \"*/\"; /** real */",
        "s = `template /* not */ ${x}`;\n",
        "x = y / 2 / z; /* c */ w = 1;",
        "/* unterminated",
        "'unterminated string\n/** doc */",
    ])
    def test_partition_on_odd_inputs(self, text):
        """Test the partition property on edge-case inputs."""
        assert_partition(text, scan(text))

    def test_delimiters_inside_strings_are_code(self):
        """Test that comment markers inside string literals are ignored."""
        text = 'var a = "/* not a comment */"; var b = \'// nor this\';\n'
        spans = scan(text)

        assert len(spans) == 1
        assert spans[0].kind is SpanKind.CODE

    def test_delimiters_inside_regex_are_code(self):
        """Test that a regex literal containing /* does not open a comment."""
        text = 'var re = /\\/*foo/g;\n/** doc */\nfunction g(){}'
        spans = scan(text)

        assert [s.kind for s in spans] == [SpanKind.CODE, SpanKind.DOC_COMMENT, SpanKind.CODE]
        assert spans[0].text == 'var re = /\\/*foo/g;\n'

    def test_division_is_not_regex(self):
        """Test that a slash after an operand is treated as division."""
        text = 'x = a / b; /* c */'
        spans = scan(text)

        assert spans[-1].kind is SpanKind.BLOCK_COMMENT
        assert spans[-1].text == '/* c */'

    def test_regex_after_control_statement_head(self):
        """Test that a slash after the ) of an if head starts a regex literal."""
        text = 'if (x) /a\\/*b/.test(s);\n/** doc */\nfunction g(){}'
        spans = scan(text)

        assert [s.kind for s in spans] == [SpanKind.CODE, SpanKind.DOC_COMMENT, SpanKind.CODE]
        assert spans[1].text == '/** doc */'

    @pytest.mark.parametrize("head", ["while (busy(x))", "for (i = 0; i < n; i++)"])
    def test_regex_after_loop_heads(self, head):
        """Test nested parentheses inside loop heads."""
        spans = scan(f'{head} /\\/*x/.exec(s);\n/** doc */')

        assert [s.kind for s in spans] == [SpanKind.CODE, SpanKind.DOC_COMMENT]

    def test_division_after_call_parenthesis(self):
        """Test that a slash after the ) of a call stays a division."""
        spans = scan('y = f(x) / 2; /* c */')

        assert spans[-1].kind is SpanKind.BLOCK_COMMENT
        assert spans[-1].text == '/* c */'

    def test_banner_and_empty_comments_are_ordinary(self):
        """Test that /***** banners and /**/ are not documentation comments."""
        spans = scan('/*****\n * Big Block\n *****/\n/**/\n')
        kinds = [s.kind for s in spans if s.is_comment]

        assert kinds == [SpanKind.BLOCK_COMMENT, SpanKind.BLOCK_COMMENT]

    def test_line_numbers(self):
        """Test start and end lines of multi-line spans."""
        text = 'a();\n/**\n * doc\n */\nb();\n'
        spans = scan(text)
        doc = spans[1]

        assert doc.start_line == 2
        assert doc.end_line == 4
        assert spans[2].start_line == 4
        assert spans[2].end_line == 5

    def test_unterminated_comment_reports_diagnostic(self):
        """Test that an unterminated block comment is reported but not fatal."""
        scanner = CommentScanner('code();\n/** never closed', 'broken.js')
        spans = list(scanner)

        assert spans[-1].kind is SpanKind.DOC_COMMENT
        assert spans[-1].terminated is False
        assert len(scanner.diagnostics) == 1
        diagnostic = scanner.diagnostics[0]
        assert diagnostic.kind is DiagnosticKind.MALFORMED_COMMENT
        assert diagnostic.source_id == 'broken.js'
        assert diagnostic.line == 2

    def test_scanner_is_restartable(self):
        """Test that iterating twice rescans and does not pile up diagnostics."""
        scanner = CommentScanner('/* open')

        first = list(scanner)
        second = list(scanner)

        assert first == second
        assert len(scanner.diagnostics) == 1

    def test_comments_iterates_comment_blocks(self):
        """Test that comments() yields CommentBlocks with inner text."""
        blocks = list(CommentScanner('/** Doc text */ x(); // note').comments())

        assert [b.is_doc for b in blocks] == [True, False]
        assert blocks[0].inner_text == ' Doc text '
        assert blocks[1].inner_text == ' note'


class TestBraceIndex:
    """Test cases for brace tracking."""

    def test_matching_close_skips_literals_and_comments(self):
        """Test that braces in strings and comments are not counted."""
        text = "function f() { var s = '}'; /* } */ if (x) { y(); } }"
        index = BraceIndex(text)
        open_brace = text.index('{')

        assert index.matching_close(open_brace) == len(text) - 1

    def test_depth_at(self):
        """Test nesting depth at several offsets."""
        text = "a { b { c } d } e"
        index = BraceIndex(text)

        assert index.depth_at(text.index('a')) == 0
        assert index.depth_at(text.index('b')) == 1
        assert index.depth_at(text.index('c')) == 2
        assert index.depth_at(text.index('d')) == 1
        assert index.depth_at(text.index('e')) == 0

    def test_first_open_after(self):
        """Test finding the next opening brace."""
        text = "x = '{'; function g() {}"
        index = BraceIndex(text)

        assert index.first_open_after(0) == text.rindex('{')
        assert index.first_open_after(len(text)) is None

    def test_matching_close_of_non_brace(self):
        """Test that a non-brace offset has no match."""
        assert BraceIndex("{ }").matching_close(1) is None
