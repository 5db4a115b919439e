import pytest

from _xmldoc.names import (
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
    NamespaceScope,
    deconstruct_clark_notation,
    extract_declarations,
    split_qualified_name,
)


@pytest.mark.parametrize(
    ("in_", "out"),
    (
        ("a", (None, "a")),
        ("x:a", ("x", "a")),
        ("xml:lang", ("xml", "lang")),
    ),
)
def test_split_qualified_name(in_, out):
    assert split_qualified_name(in_) == out


@pytest.mark.parametrize(
    ("in_", "out"),
    (
        ("a", (None, "a")),
        ("{http://clark}a", ("http://clark", "a")),
    ),
)
def test_deconstruct_clark_notation(in_, out):
    assert deconstruct_clark_notation(in_) == out


def test_extract_declarations():
    assert extract_declarations(
        {"xmlns": "http://default", "a": "b", "xmlns:x": "http://x"}
    ) == {"": "http://default", "x": "http://x"}
    assert extract_declarations({"a": "b"}) == {}


def test_global_prefixes():
    scope = NamespaceScope()
    assert scope.resolve("xml") == XML_NAMESPACE
    assert scope.resolve("xmlns") == XMLNS_NAMESPACE
    assert scope.lookup_prefix(XML_NAMESPACE) == "xml"
    assert scope.resolve(None) is None
    assert scope.resolve("") is None


def test_resolution():
    root = NamespaceScope({"": "http://default", "a": "http://a"})
    child = root.new_child({"b": "http://b"})

    assert child.resolve(None) == "http://default"
    assert child.resolve("a") == "http://a"
    assert child.resolve("b") == "http://b"
    assert child.resolve("c") is None
    assert root.resolve("b") is None


def test_shadowing():
    root = NamespaceScope({"a": "http://outer"})
    child = root.new_child({"a": "http://inner"})

    assert child.resolve("a") == "http://inner"
    assert root.resolve("a") == "http://outer"
    assert child.lookup_prefix("http://inner") == "a"
    assert child.lookup_prefix("http://outer") is None
    assert root.lookup_prefix("http://outer") == "a"


def test_lookup_prefix():
    root = NamespaceScope(
        {"": "http://default", "a": "http://a", "r": "http://root"}
    )
    child = root.new_child({"b": "http://a"})
    grandchild = child.new_child({})

    # the default namespace has no prefix to write
    assert root.lookup_prefix("http://default") is None
    assert root.lookup_prefix("http://a") == "a"
    assert child.lookup_prefix("http://a") == "b"
    assert grandchild.lookup_prefix("http://a") == "b"
    assert grandchild.lookup_prefix("http://nowhere") is None
    # declarations of enclosing scopes are found
    assert grandchild.lookup_prefix("http://root") == "r"


def test_declarations_and_parent():
    root = NamespaceScope({"a": "http://a"})
    child = root.new_child({})

    assert root.declarations == {"a": "http://a"}
    assert child.declarations == {}
    assert child.parent is root
    assert root.parent is None

    with pytest.raises(TypeError):
        child.declarations["b"] = "http://b"


def test_mapping_interface():
    root = NamespaceScope({"a": "http://a"})
    child = root.new_child({"a": "http://b", "c": "http://c"})

    assert child["a"] == "http://b"
    assert set(child) == {"a", "c", "xml", "xmlns"}
    assert len(child) == 4
    assert dict(child) == {
        "a": "http://b",
        "c": "http://c",
        "xml": XML_NAMESPACE,
        "xmlns": XMLNS_NAMESPACE,
    }
    with pytest.raises(KeyError):
        child["d"]
