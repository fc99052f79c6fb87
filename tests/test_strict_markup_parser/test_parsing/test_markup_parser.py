"""Tests for the recursive-descent markup parser."""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Tuple

import pytest

from strict_markup_parser.parsing import (
    EmptyAttributeName,
    EmptyTagName,
    MarkupParser,
    MultipleRootElements,
    NestingTooDeep,
    ParseError,
    ParseSession,
    TagNameMismatch,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from strict_markup_parser.shared.config import ParserConfig
from strict_markup_parser.tree import ElementNode, TextNode, serialize

SINGLE_ELEMENT_CASES: List[Tuple[str, str, str, Dict[str, str]]] = [
    ("<dummy></dummy>", "dummy", "", {}),
    ("<dummy>Dummy tag content</dummy>", "dummy", "Dummy tag content", {}),
    (
        "<dummy>Dummy\nmulti-line\ntag\ncontent</dummy>",
        "dummy",
        "Dummy\nmulti-line\ntag\ncontent",
        {},
    ),
    (
        '<dummy example="This is an example attribute w/ &quot;some&quot; text"></dummy>',
        "dummy",
        "",
        {"example": "This is an example attribute w/ &quot;some&quot; text"},
    ),
    (
        '<dummy attr1="val1" attr2="val2"></dummy>',
        "dummy",
        "",
        {"attr1": "val1", "attr2": "val2"},
    ),
    (
        '<dummy attr1="val1" attr2="val2" attr1="val3"></dummy>',
        "dummy",
        "",
        {"attr1": "val3", "attr2": "val2"},
    ),
    (
        '<dummy\nattr1="val1"\nattr2="val2"\n></dummy>',
        "dummy",
        "",
        {"attr1": "val1", "attr2": "val2"},
    ),
    (
        '\n<dummy\n    attr1="val1"\n    attr2="val2"\n>\n    Dummy text node\n</dummy>',
        "dummy",
        "\n    Dummy text node\n",
        {"attr1": "val1", "attr2": "val2"},
    ),
]


@pytest.fixture
def parser() -> MarkupParser:
    return MarkupParser()


class TestSingleElement:
    """Test parsing a document holding one element."""

    @pytest.mark.parametrize(
        "source,tag_name,text,attributes",
        SINGLE_ELEMENT_CASES,
    )
    def test_parses_element(
        self,
        parser: MarkupParser,
        source: str,
        tag_name: str,
        text: str,
        attributes: Dict[str, str],
    ) -> None:
        """Test tag name, text and attributes of a single element."""
        result = parser.parse(source)

        assert len(result) == 1
        element = result[0]
        assert isinstance(element, ElementNode)
        assert element.tag_name == tag_name
        assert element.text_content == text
        assert element.attributes == attributes

    def test_duplicate_attribute_order(self, parser: MarkupParser) -> None:
        """Test that a repeated attribute keeps its first position and last value."""
        source = '<dummy attr1="val1" attr2="val2" attr1="val3"></dummy>'

        element = parser.parse(source)[0]

        assert list(element.attributes.items()) == [("attr1", "val3"), ("attr2", "val2")]
        assert element.serialize() == '<dummy attr1="val3" attr2="val2"></dummy>'

    def test_empty_attribute_value(self, parser: MarkupParser) -> None:
        """Test that an attribute value may be empty."""
        element = parser.parse('<input value=""></input>')[0]

        assert element.attributes == {"value": ""}

    def test_attribute_value_may_contain_markup_characters(
        self, parser: MarkupParser
    ) -> None:
        """Test that attribute values accept any character except a double quote."""
        element = parser.parse('<a title="<b> & \'x\'"></a>')[0]

        assert element.get_attribute("title") == "<b> & 'x'"

    def test_empty_content_has_no_children(self, parser: MarkupParser) -> None:
        """Test that an empty element gets no empty text child."""
        element = parser.parse("<dummy></dummy>")[0]

        assert element.children == []

    def test_hyphen_and_digit_tag_names(self, parser: MarkupParser) -> None:
        """Test the token character set in tag names."""
        element = parser.parse("<my-tag_2></my-tag_2>")[0]

        assert element.tag_name == "my-tag_2"


class TestForest:
    """Test documents with several top-level elements."""

    def test_two_roots_in_order(self, parser: MarkupParser) -> None:
        """Test that top-level elements keep source order."""
        result = parser.parse("<a></a><b></b>")

        assert [element.tag_name for element in result] == ["a", "b"]

    def test_whitespace_between_roots_is_dropped(self, parser: MarkupParser) -> None:
        """Test that whitespace outside the roots produces no nodes."""
        result = parser.parse("  <a></a>\n\n<b></b>\n")

        assert len(result) == 2
        assert serialize(result) == "<a></a><b></b>"


class TestNesting:
    """Test child elements and interleaved text."""

    SOURCE = (
        "<html>\n"
        "    <body>\n"
        "        <h1>This is a test!</h1>\n"
        '        <p class="hello-world">Hello, World!</p>\n'
        "    </body>\n"
        "</html>"
    )

    def test_tree_shape(self, parser: MarkupParser) -> None:
        """Test the child structure of a nested document."""
        html = parser.parse(self.SOURCE)[0]

        assert html.tag_name == "html"
        assert [type(child) for child in html.children] == [TextNode, ElementNode, TextNode]
        body = html.element_children[0]
        assert [child.tag_name for child in body.element_children] == ["h1", "p"]
        assert body.find("p").get_attribute("class") == "hello-world"

    def test_text_content_includes_whitespace_runs(self, parser: MarkupParser) -> None:
        """Test that indentation between tags is kept as text."""
        html = parser.parse(self.SOURCE)[0]

        assert html.text_content == (
            "\n    \n        This is a test!\n        Hello, World!\n    \n"
        )

    def test_adjacent_elements_produce_no_empty_text(self, parser: MarkupParser) -> None:
        """Test that back-to-back children get no text node between them."""
        element = parser.parse("<p><b>x</b><i>y</i></p>")[0]

        assert [type(child) for child in element.children] == [ElementNode, ElementNode]

    def test_text_around_child(self, parser: MarkupParser) -> None:
        """Test text before and after a child element."""
        element = parser.parse("<p>a<b>b</b>c</p>")[0]

        assert element.children == [
            TextNode("a"),
            ElementNode("b", children=[TextNode("b")]),
            TextNode("c"),
        ]


class TestRoundTrip:
    """Test that serialized output re-parses to the same forest."""

    @pytest.mark.parametrize(
        "source",
        [
            "<a></a><b></b>",
            '<dummy   attr1="val1"\n attr2="val2"   ></dummy>',
            TestNesting.SOURCE,
            '<ul><li id="1">one</li> <li>two &amp; three</li></ul>\n<footer></footer>',
        ],
    )
    def test_round_trip(self, parser: MarkupParser, source: str) -> None:
        """Test parse, serialize and parse again."""
        first = parser.parse(source)
        second = parser.parse(serialize(first))

        assert second == first
        assert serialize(second) == serialize(first)

    def test_intra_tag_whitespace_is_normalized(self, parser: MarkupParser) -> None:
        """Test that whitespace inside tags is not preserved."""
        result = parser.parse('<dummy   attr1="val1"\n attr2="val2"   ></dummy>')

        assert serialize(result) == '<dummy attr1="val1" attr2="val2"></dummy>'


class TestInvalidInput:
    """Test that malformed input raises positioned errors."""

    def test_plain_word(self, parser: MarkupParser) -> None:
        """Test text outside any element."""
        with pytest.raises(UnexpectedCharacter) as exc_info:
            parser.parse("foo")

        assert exc_info.value.expected == "<"
        assert exc_info.value.actual == "f"

    def test_mismatched_tags(self, parser: MarkupParser) -> None:
        """Test a closing tag that does not match its opening tag."""
        with pytest.raises(TagNameMismatch) as exc_info:
            parser.parse("<foo></bar>")

        error = exc_info.value
        assert error.opening == "foo"
        assert error.closing == "bar"
        assert error.position == 7

    def test_mismatch_position_on_later_line(self, parser: MarkupParser) -> None:
        """Test line, column and caret for an error past the first line."""
        with pytest.raises(TagNameMismatch) as exc_info:
            parser.parse("<a>\n  <b></c>\n</a>")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 7
        assert str(exc_info.value).endswith("  <b></c>\n       ↑")

    def test_unterminated_content(self, parser: MarkupParser) -> None:
        """Test input ending inside element content."""
        with pytest.raises(UnexpectedEndOfInput):
            parser.parse("<dummy>unterminated")

    def test_unterminated_opening_tag(self, parser: MarkupParser) -> None:
        """Test input ending inside an opening tag."""
        with pytest.raises(UnexpectedEndOfInput):
            parser.parse('<dummy attr="x"')

    def test_unterminated_attribute_value(self, parser: MarkupParser) -> None:
        """Test an attribute value that never closes."""
        with pytest.raises(UnexpectedEndOfInput):
            parser.parse('<dummy attr="x></dummy>')

    @pytest.mark.parametrize("source", ["", "   \n\t"])
    def test_empty_document(self, parser: MarkupParser, source: str) -> None:
        """Test that at least one element is required."""
        with pytest.raises(UnexpectedEndOfInput):
            parser.parse(source)

    def test_empty_tag_name(self, parser: MarkupParser) -> None:
        """Test whitespace directly after the opening angle bracket."""
        with pytest.raises(EmptyTagName) as exc_info:
            parser.parse("< a></a>")

        assert exc_info.value.position == 1

    def test_empty_attribute_name(self, parser: MarkupParser) -> None:
        """Test an attribute without a name."""
        with pytest.raises(EmptyAttributeName) as exc_info:
            parser.parse('<a ="x"></a>')

        assert exc_info.value.position == 3

    def test_self_closing_tag_not_supported(self, parser: MarkupParser) -> None:
        """Test that self-closing syntax is rejected."""
        with pytest.raises(EmptyAttributeName):
            parser.parse("<br/>")

    @pytest.mark.parametrize(
        "source",
        [
            '<dummy example="Wow, "this" is not OK"></dummy>',
            '<dummy example="Wow, \\"this\\" is not OK"></dummy>',
        ],
    )
    def test_quotes_inside_attribute_value(self, parser: MarkupParser, source: str) -> None:
        """Test that quotes cannot be embedded or escaped in values."""
        with pytest.raises(ParseError):
            parser.parse(source)

    def test_missing_equals_sign(self, parser: MarkupParser) -> None:
        """Test an attribute name followed by a value without '='."""
        with pytest.raises(UnexpectedCharacter) as exc_info:
            parser.parse('<a href "x"></a>')

        assert exc_info.value.expected == "="

    def test_trailing_garbage_after_root(self, parser: MarkupParser) -> None:
        """Test text after the last top-level element."""
        with pytest.raises(UnexpectedCharacter):
            parser.parse("<a></a> trailing")

    def test_comment_not_supported(self, parser: MarkupParser) -> None:
        """Test that comments are not part of the grammar."""
        with pytest.raises(EmptyTagName):
            parser.parse("<a><!-- note --></a>")

    def test_rejects_bytes(self, parser: MarkupParser) -> None:
        """Test that only str input is accepted."""
        with pytest.raises(TypeError, match="must be str"):
            parser.parse(b"<a></a>")  # type: ignore[arg-type]


class TestDepthLimit:
    """Test the nesting depth guard."""

    @staticmethod
    def nested(depth: int) -> str:
        return "<d>" * depth + "</d>" * depth

    def test_depth_at_limit_is_accepted(self) -> None:
        """Test nesting exactly max_depth levels."""
        parser = MarkupParser(ParserConfig(max_depth=5))

        result = parser.parse(self.nested(5))

        assert result[0].tag_name == "d"

    def test_depth_past_limit_raises(self) -> None:
        """Test the error and its position one level past max_depth."""
        parser = MarkupParser(ParserConfig(max_depth=5))

        with pytest.raises(NestingTooDeep) as exc_info:
            parser.parse(self.nested(6))

        assert exc_info.value.max_depth == 5
        assert exc_info.value.position == 15

    def test_siblings_do_not_accumulate_depth(self) -> None:
        """Test that depth is released when an element closes."""
        parser = MarkupParser(ParserConfig(max_depth=2))

        result = parser.parse("<a>" + "<b></b>" * 10 + "</a><c></c>")

        assert len(result[0].children) == 10

    def test_adversarial_depth_fails_cleanly(self) -> None:
        """Test that very deep input raises NestingTooDeep, not RecursionError."""
        parser = MarkupParser()

        with pytest.raises(NestingTooDeep):
            parser.parse("<x>" * 100000)

    def test_permissive_depth_is_accepted(self) -> None:
        """Test parsing at the deepest level the permissive preset allows."""
        config = ParserConfig.permissive()
        parser = MarkupParser(config)

        result = parser.parse(self.nested(config.max_depth))

        assert sum(1 for _ in result[0].iter()) == config.max_depth
        with pytest.raises(NestingTooDeep):
            parser.parse(self.nested(config.max_depth + 1))


class TestSingleRootMode:
    """Test the optional single top-level element mode."""

    def test_single_root_accepted(self) -> None:
        """Test that one root surrounded by whitespace is accepted."""
        parser = MarkupParser(ParserConfig(single_root=True))

        assert len(parser.parse("  <a></a>  ")) == 1

    def test_second_root_rejected(self) -> None:
        """Test that the second root is reported at its position."""
        parser = MarkupParser(ParserConfig(single_root=True))

        with pytest.raises(MultipleRootElements) as exc_info:
            parser.parse("<a></a>\n<b></b>")

        assert exc_info.value.position == 8


class TestParserState:
    """Test that parse calls are independent."""

    def test_reuse_after_error(self, parser: MarkupParser) -> None:
        """Test that a failed call leaves the parser usable."""
        with pytest.raises(ParseError):
            parser.parse("<a><b></a>")

        assert parser.parse("<c></c>")[0].tag_name == "c"

    def test_parse_element_with_explicit_session(self, parser: MarkupParser) -> None:
        """Test driving parse_element with a caller-owned session."""
        session = ParseSession.start("<a>x</a><b></b>")

        element = parser.parse_element(session)

        assert element == ElementNode("a", children=[TextNode("x")])
        assert session.cursor.position == 8
        assert session.depth == 0
        assert session.metrics.elements_built == 1

    def test_metrics(self, parser: MarkupParser) -> None:
        """Test the counters gathered for one call."""
        _, metrics = parser.parse_with_metrics("<a>x<b>y</b></a>")

        assert metrics.elements_built == 2
        assert metrics.text_nodes_built == 2
        assert metrics.characters_processed == 16
        assert metrics.processing_time_ms >= 0.0

    def test_metrics_are_per_call(self, parser: MarkupParser) -> None:
        """Test that metrics do not accumulate across calls."""
        parser.parse_with_metrics("<a><b></b></a>")

        _, metrics = parser.parse_with_metrics("<c></c>")

        assert metrics.elements_built == 1

    def test_shared_parser_across_threads(self, parser: MarkupParser) -> None:
        """Test one parser instance used from several threads at once."""
        sources = [
            "<t{0}>{1}</t{0}>".format(i, "<n>" * (i % 20) + "</n>" * (i % 20))
            for i in range(200)
        ]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(parser.parse, sources))

        assert [serialize(result) for result in results] == sources
