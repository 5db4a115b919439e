from io import BytesIO

import pytest

from _xmldoc.serializer import Serializer, _StringWriter
from xmldoc import DefaultStringOptions, Document, SerializationOptions
from xmldoc.nodes import CDataNode, CommentNode, NodeKind, TextNode

from tests.utils import assert_equal_trees


LOREM_IPSUM = "Lorem ipsum dolor sit amet, consectetur adipiscing elit."


def test_indented_serialization():
    document = Document('<books><book title="Twilight"/></books>')
    assert str(document) == '<books>\n  <book title="Twilight"/>\n</books>'
    assert document.to_string() == str(document)
    assert document.serialize() == str(document)


def test_compressed_serialization():
    document = Document('<books><book title="Twilight"/></books>')
    assert document.to_string(compressed=True) == (
        '<books><book title="Twilight"/></books>'
    )
    assert document.serialize(SerializationOptions(compressed=True)) == (
        '<books><book title="Twilight"/></books>'
    )


def test_compressed_mixed_content():
    document = Document("<hello>world<earth/><moon/></hello>")
    assert document.to_string(compressed=True) == (
        "<hello>world<earth/><moon/></hello>"
    )


def test_whitespace_is_stripped():
    document = Document("<hello> world </hello>")
    assert str(document) == "<hello>world</hello>"
    assert document.to_string(preserve_whitespace=True) == "<hello> world </hello>"


def test_cdata_is_retained():
    document = Document("<hello><![CDATA[<world>]]></hello>")
    assert str(document) == "<hello><![CDATA[<world>]]></hello>"


def test_mixed_content_with_preserved_whitespace():
    document = Document("<hello>Hello<!-- , --> <![CDATA[<world>]]>!</hello>")
    assert document.to_string(preserve_whitespace=True) == (
        "<hello>\n  Hello\n  <!-- , -->\n   \n  <![CDATA[<world>]]>\n  !\n</hello>"
    )


def test_text_and_tags_on_separate_lines():
    document = Document("<hello>hello, <world/>!</hello>")
    assert str(document) == "<hello>\n  hello,\n  <world/>\n  !\n</hello>"


def test_nested_indentation():
    document = Document("<a><b><c>text</c><d/></b></a>")
    assert str(document) == (
        "<a>\n  <b>\n    <c>text</c>\n    <d/>\n  </b>\n</a>"
    )
    assert document.to_string(indentation="\t") == (
        "<a>\n\t<b>\n\t\t<c>text</c>\n\t\t<d/>\n\t</b>\n</a>"
    )
    assert document.to_string(indentation="") == (
        "<a>\n<b>\n<c>text</c>\n<d/>\n</b>\n</a>"
    )


def test_trimmed_text():
    document = Document(f"<hello>{LOREM_IPSUM}</hello>")
    assert document.to_string(trimmed=True) == "<hello>Lorem ipsum dolor sit ame…</hello>"
    assert document.to_string() == f"<hello>{LOREM_IPSUM}</hello>"
    assert document.to_string(trimmed=True, trim_length=5) == "<hello>Lorem…</hello>"


def test_short_text_isnt_trimmed():
    document = Document("<hello>world</hello>")
    assert document.to_string(trimmed=True) == "<hello>world</hello>"


def test_html_mode():
    document = Document("<div><br/><p/><img src='a.png'/></div>")
    assert document.to_string(html=True) == (
        '<div>\n  <br/>\n  <p></p>\n  <img src="a.png"/>\n</div>'
    )
    assert document.to_string(html=True, compressed=True) == (
        '<div><br/><p></p><img src="a.png"/></div>'
    )


def test_escaping():
    document = Document(
        "<root a='&lt;&amp;&gt;&quot;'>5 &gt; 3 &amp; 2 &lt; 4 isn't \"false\"</root>"
    )
    assert document.attributes["a"] == '<&>"'
    assert str(document) == (
        '<root a="&lt;&amp;&gt;&quot;">'
        "5 &gt; 3 &amp; 2 &lt; 4 isn&apos;t &quot;false&quot;"
        "</root>"
    )


def test_attribute_order_is_retained():
    document = Document('<root z="1" a="2" m="3"/>')
    document.attributes["b"] = "4"
    document.attributes["z"] = "5"
    assert str(document) == '<root z="5" a="2" m="3" b="4"/>'


@pytest.mark.parametrize(
    "options",
    (
        {"compressed": "yes"},
        {"compressed": 1},
        {"indentation": "--"},
        {"indentation": 2},
        {"trim_length": 0},
        {"trim_length": True},
        {"trim_length": "5"},
        {"unknown": True},
    ),
)
def test_invalid_options_are_ignored(options):
    document = Document('<books><book title="Twilight"/></books>')
    assert document.to_string(**options) == (
        '<books>\n  <book title="Twilight"/>\n</books>'
    )


def test_invalid_trim_length_falls_back():
    document = Document(f"<hello>{LOREM_IPSUM}</hello>")
    assert document.to_string(trimmed=True, trim_length=-1) == (
        "<hello>Lorem ipsum dolor sit ame…</hello>"
    )


def test_leaf_nodes():
    assert str(TextNode(" a < b ")) == "a &lt; b"
    assert TextNode(" a ").serialize(SerializationOptions(preserve_whitespace=True)) == (
        " a "
    )
    assert str(CDataNode(" <a> ")) == "<![CDATA[<a>]]>"
    assert str(CommentNode(" a comment ")) == "<!--a comment-->"


def test_serializer_with_indentation_prefix():
    writer = _StringWriter()
    serializer = Serializer(writer, SerializationOptions())
    serializer.serialize_node(Document("<a><b/></a>").root, "    ")
    assert writer.result == "    <a>\n      <b/>\n    </a>"


def test_default_string_options():
    document = Document('<books><book title="Twilight"/></books>')

    DefaultStringOptions.serialization_options = SerializationOptions(compressed=True)
    assert str(document) == '<books><book title="Twilight"/></books>'
    # explicit options aren't affected
    assert document.to_string() == '<books>\n  <book title="Twilight"/>\n</books>'

    DefaultStringOptions.reset_defaults()
    assert str(document) == '<books>\n  <book title="Twilight"/>\n</books>'


def test_default_newline():
    document = Document('<books><book title="Twilight"/></books>')
    DefaultStringOptions.newline = "\r\n"
    assert str(document) == '<books>\r\n  <book title="Twilight"/>\r\n</books>'


def test_write():
    document = Document("<!DOCTYPE HelloWorld><hello>world</hello>")
    buffer = BytesIO()
    document.write(buffer)
    assert buffer.getvalue() == (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b"<!DOCTYPE HelloWorld>\n"
        b"<hello>world</hello>"
    )
    assert not buffer.closed


def test_write_compressed_with_encoding():
    document = Document("<hello>wörld<moon/></hello>")
    buffer = BytesIO()
    document.write(buffer, SerializationOptions(compressed=True), encoding="latin-1")
    assert buffer.getvalue() == (
        b'<?xml version="1.0" encoding="LATIN-1"?><hello>w\xf6rld<moon/></hello>'
    )

    assert_equal_trees(Document(buffer.getvalue()).root, document.root)


def test_save(tmp_path):
    document = Document(
        '<!DOCTYPE books><books><book title="Twilight">Bella &amp; Edward</book></books>'
    )
    path = tmp_path / "books.xml"
    document.save(path, SerializationOptions(compressed=True))

    reloaded = Document(path)
    assert reloaded.doctype == " books"
    assert reloaded.source_url == path.as_uri()
    assert_equal_trees(reloaded.root, document.root)
    assert path.read_text(encoding="utf-8").startswith(
        '<?xml version="1.0" encoding="UTF-8"?><!DOCTYPE books><books>'
    )


def test_indented_save_adds_whitespace_nodes(tmp_path):
    document = Document("<books><book/></books>")
    path = tmp_path / "books.xml"
    document.save(path)

    reloaded = Document(path)
    assert [n.kind for n in reloaded.children] == [
        NodeKind.TEXT,
        NodeKind.ELEMENT,
        NodeKind.TEXT,
    ]
    assert reloaded.to_string(compressed=True) == "<books><book/></books>"
