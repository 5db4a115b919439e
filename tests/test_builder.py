import pytest

from _xmldoc.builder import TreeBuilder, build_tree
from _xmldoc.exceptions import (
    ParsingStructureError,
    ParsingValidityError,
    XMLSyntaxError,
)
from _xmldoc.parser import EventType, ParserOptions, Position, TagEventData
from xmldoc import parse_tree
from xmldoc.nodes import CDataNode, CommentNode, TextNode


def test_build_from_events():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())
    state = builder.build(
        (
            (EventType.Doctype, " root"),
            (EventType.TagStart, TagEventData("root", {"a": "b"}, Position(0, 12))),
            (EventType.Text, "text"),
            (EventType.TagStart, TagEventData("child", {})),
            (EventType.CData, "<data>"),
            (EventType.TagEnd, None),
            (EventType.Comment, "comment"),
            (EventType.TagEnd, None),
        )
    )

    root = state.root
    assert state.doctype == " root"
    assert not state.stack
    assert root.name == "root"
    assert root.attributes == {"a": "b"}
    assert (root.line, root.column) == (0, 12)
    assert root.children[0] == TextNode("text")
    assert root.children[1].first_child == CDataNode("<data>")
    assert root.children[2] == CommentNode("comment")
    assert root.text_value == "text"


def test_event_handlers():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())

    builder.on_open_tag("root", {})
    builder.on_text("a")
    builder.on_open_tag("child", {"x": "y"}, Position(line=3))
    builder.on_close_tag()
    builder.on_cdata("b")
    builder.on_close_tag()

    root = builder.state.root
    assert root.text_value == "ab"
    assert root.children[1].attributes["x"] == "y"
    assert root.children[1].line == 3
    assert root.children[1].column is None


def test_content_outside_the_root_is_ignored():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())

    builder.on_text("before")
    builder.on_comment("before")
    builder.on_open_tag("root", {})
    builder.on_close_tag()
    builder.on_cdata("after")
    builder.on_text("after")

    assert builder.state.root.children == ()


def test_interleaved_builders():
    a, b = TreeBuilder(), TreeBuilder()
    a.start_document(ParserOptions())
    b.start_document(ParserOptions(xmlns=True))

    a.on_open_tag("a", {})
    b.on_open_tag("b", {"xmlns": "http://b"})
    a.on_text("a")
    b.on_text("b")
    a.on_close_tag()
    b.on_close_tag()

    assert a.state.root.name == "a"
    assert a.state.root.text_value == "a"
    assert a.state.root.namespace is None
    assert b.state.root.name == "b"
    assert b.state.root.text_value == "b"
    assert b.state.root.namespace == "http://b"


def test_start_document_resets_state():
    builder = TreeBuilder()
    first = builder.start_document(ParserOptions())
    builder.on_open_tag("a", {})
    builder.on_close_tag()

    second = builder.start_document(ParserOptions())
    assert second is not first
    assert second.root is None
    assert first.root.name == "a"


def test_doctype_after_root():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())
    builder.on_open_tag("root", {})

    with pytest.raises(ParsingStructureError):
        builder.on_doctype(" root")


def test_error_event_is_raised():
    error = XMLSyntaxError("mismatched tag", line=1, column=9)
    builder = TreeBuilder()
    builder.start_document(ParserOptions())
    builder.on_open_tag("root", {})

    with pytest.raises(XMLSyntaxError) as exception_info:
        builder.handle_event((EventType.Error, error))
    assert exception_info.value is error


def test_no_element():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())
    with pytest.raises(ParsingValidityError):
        builder.build([(EventType.Comment, "nothing")])


def test_multiple_roots():
    builder = TreeBuilder()
    builder.start_document(ParserOptions())
    builder.on_open_tag("a", {})
    builder.on_close_tag()

    with pytest.raises(ParsingValidityError, match="more than one root"):
        builder.on_open_tag("b", {})


def test_namespace_scopes_are_linked():
    builder = TreeBuilder()
    builder.start_document(ParserOptions(xmlns=True))
    builder.on_open_tag("root", {"xmlns:a": "http://a"})
    builder.on_open_tag("a:child", {"xmlns:b": "http://b", "b:attr": "x"})
    builder.on_open_tag("a:grandchild", {})

    root = builder.state.root
    child = root.first_child
    grandchild = child.first_child

    assert child.namespace_scope.parent is root.namespace_scope
    assert grandchild.namespace_scope.parent is child.namespace_scope
    assert root.namespace_scope.parent is None

    assert child.namespace == "http://a"
    assert child.get_attribute_ns("http://b", "attr") == "x"
    assert grandchild.namespace == "http://a"
    assert grandchild.namespace_scope.resolve("b") == "http://b"
    assert root.namespace_scope.resolve("b") is None


def test_comments_are_removed():
    builder = TreeBuilder()
    builder.start_document(ParserOptions(remove_comments=True))
    builder.on_open_tag("root", {})
    builder.on_comment("gone")
    builder.on_close_tag()

    assert builder.state.root.children == ()


def test_build_tree():
    state = build_tree("<!DOCTYPE root><root/>")
    assert state.doctype == " root"
    assert state.root.name == "root"


def test_parse_tree():
    root = parse_tree("<root><child/></root>", ParserOptions(xmlns=True))
    assert root.first_child.local_name == "child"
    assert root.namespace == ""
