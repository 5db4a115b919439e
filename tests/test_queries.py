import pytest

from _xmldoc.exceptions import NamespacesUnsupported
from xmldoc import STOP, Document
from xmldoc.nodes import TagNode, TextNode


BOOKS_NS = "http://example.com/books"


def test_each_child():
    document = Document("<root><a/>text<b/><!-- comment --><c/></root>")
    visited = []

    def visitor(node, index, children):
        visited.append((node.name, index, len(children)))

    document.each_child(visitor)
    assert visited == [("a", 0, 5), ("b", 2, 5), ("c", 4, 5)]


def test_each_child_stops():
    document = Document("<root><a/><b/><c/></root>")
    visited = []

    def visitor(node, index, children):
        visited.append(node.name)
        if node.name == "b":
            return STOP
        # any other value continues the iteration
        return False

    document.each_child(visitor)
    assert visited == ["a", "b"]


def test_iterate_children(navigation_document):
    assert [
        n.attributes.get("id", n.name) for n in navigation_document.iterate_children()
    ] == ["1", "divider", "2"]


def test_iterate_descendants():
    document = Document("<root>a<b>c<d/></b><e>f</e></root>")
    assert [
        n.name if isinstance(n, TagNode) else n.content
        for n in document.iterate_descendants()
    ] == ["a", "b", "c", "d", "e", "f"]


def test_child_named(navigation_document):
    item = navigation_document.child_named("item")
    assert item.attributes["id"] == "1"
    assert navigation_document.child_named("divider").name == "divider"
    assert navigation_document.child_named("nothing") is None


def test_children_named(navigation_document):
    assert [n.attributes["id"] for n in navigation_document.children_named("item")] == [
        "1",
        "2",
    ]
    assert navigation_document.children_named("nothing") == []


def test_child_with_attribute():
    document = Document(
        '<root><a/><b id=""/><c id="x"/><d id="y" class="z"/></root>'
    )
    assert document.child_with_attribute("id").name == "b"
    assert document.child_with_attribute("id", "y").name == "d"
    assert document.child_with_attribute("id", "").name == "b"
    assert document.child_with_attribute("class").name == "d"
    assert document.child_with_attribute("id", "nope") is None
    assert document.child_with_attribute("style") is None


def test_descendants_named(navigation_document):
    items = navigation_document.descendants_named("item")
    assert [n.attributes["id"] for n in items] == ["1", "2", "2.1", "2.2", "2.2.1", "3"]
    assert len(navigation_document.descendants_named("divider")) == 2
    assert navigation_document.descendants_named("navigation") == []


def test_descendant_with_path():
    document = Document(
        "<library><shelf><book><title>Twilight</title></book></shelf></library>"
    )
    assert document.descendant_with_path("shelf.book.title").text_value == "Twilight"
    assert document.descendant_with_path("shelf").name == "shelf"
    assert document.descendant_with_path("shelf.title") is None
    assert document.descendant_with_path("book.title") is None


def test_descendant_with_path_follows_first_matches():
    document = Document("<root><a/><a><b/></a></root>")
    # only the first "a" is considered
    assert document.descendant_with_path("a.b") is None


def test_value_with_path():
    document = Document(
        '<books lang="en"><book id="1"><title>Twilight</title>'
        '<author born="1973">Stephenie Meyer</author></book></books>'
    )
    assert document.value_with_path("book.title") == "Twilight"
    assert document.value_with_path("book.author") == "Stephenie Meyer"
    assert document.value_with_path("book.author@born") == "1973"
    assert document.value_with_path("book@id") == "1"
    assert document.value_with_path("@lang") == "en"
    assert document.value_with_path("book") == ""
    # everything after a second separator is dropped
    assert document.value_with_path("book@id@lang") == "1"
    assert document.value_with_path("book@missing") is None
    assert document.value_with_path("book.isbn") is None
    assert document.value_with_path("book.isbn@type") is None


def test_text_value():
    document = Document("<root>Hello<!-- , --> <![CDATA[<world>]]><b>?</b>!</root>")
    assert document.text_value == "Hello <world>!"
    assert document.children[-1] == TextNode("!")


def test_namespaced_queries():
    document = Document(
        f'<library xmlns="{BOOKS_NS}" xmlns:x="http://x">'
        '<book id="1"><title>Twilight</title></book>'
        '<x:book id="2" x:id="3"><x:title>New Moon</x:title></x:book>'
        '<book xmlns="" id="4"/>'
        "</library>",
        xmlns=True,
    )

    assert document.child_named_ns(BOOKS_NS, "book").attributes["id"] == "1"
    assert document.child_named_ns("http://x", "book").attributes["id"] == "2"
    assert document.child_named_ns("", "book").attributes["id"] == "4"
    assert document.child_named_ns("http://y", "book") is None

    assert [n.attributes["id"] for n in document.children_named_ns(BOOKS_NS, "book")] == [
        "1"
    ]
    assert document.children_named_ns("http://y", "book") == []

    assert document.child_with_attribute_ns("http://x", "id").attributes["id"] == "2"
    assert document.child_with_attribute_ns("", "id", "4").attributes["id"] == "4"
    assert document.child_with_attribute_ns("http://x", "id", "4") is None

    assert [n.name for n in document.descendants_named_ns("http://x", "title")] == [
        "x:title"
    ]
    assert len(document.descendants_named_ns(BOOKS_NS, "title")) == 1

    assert document.descendant_with_path_ns(BOOKS_NS, "book.title").text_value == (
        "Twilight"
    )
    assert document.descendant_with_path_ns("http://x", "book.title").text_value == (
        "New Moon"
    )
    assert document.descendant_with_path_ns("http://y", "book.title") is None

    assert document.value_with_path_ns(BOOKS_NS, "book.title") == "Twilight"
    assert document.value_with_path_ns("http://x", "book@id") == "3"
    assert document.value_with_path_ns("http://x", "book@id@title") == "3"
    assert document.value_with_path_ns("http://x", "book.title@id") is None
    assert document.value_with_path_ns("http://y", "book") is None


def test_value_with_path_ns_on_self(books_ns_document):
    book = books_ns_document.first_child
    assert book.value_with_path_ns(BOOKS_NS, "@title") == "Twilight"
    assert book.value_with_path_ns("", "@title") is None


def test_names_as_written_on_namespaced_trees(books_ns_document):
    assert books_ns_document.child_named("ns:book") is not None
    assert books_ns_document.child_named("book") is None
    assert books_ns_document.child_named_ns(BOOKS_NS, "book") is not None


@pytest.mark.parametrize(
    ("method", "args"),
    (
        ("child_named_ns", ("", "a")),
        ("child_with_attribute_ns", ("", "a")),
        ("children_named_ns", ("", "a")),
        ("descendant_with_path_ns", ("", "a")),
        ("descendants_named_ns", ("", "a")),
        ("value_with_path_ns", ("", "a")),
    ),
)
def test_namespaced_queries_require_namespace_support(method, args):
    document = Document("<root><a/></root>")
    with pytest.raises(NamespacesUnsupported, match=method):
        getattr(document, method)(*args)
