# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import warnings
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, Optional

from _xmldoc.attributes import NamespacedAttributes, PlainAttributes
from _xmldoc.exceptions import NamespacesUnsupported
from _xmldoc.names import split_qualified_name
from _xmldoc.parser import Position
from _xmldoc.serializer import (
    DefaultStringOptions,
    SerializationOptions,
    _get_serializer,
    _StringWriter,
)
from _xmldoc.typing import (
    CDataNodeType,
    CommentNodeType,
    NodeKind,
    TagNodeType,
    TextNodeType,
)


if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from _xmldoc.attributes import TagAttributes
    from _xmldoc.names import NamespaceScope
    from _xmldoc.serializer import Serializer
    from _xmldoc.typing import Visitor, XMLNodeType


# sentinel


class _StopSentinel:
    __slots__ = ()

    def __repr__(self) -> str:
        return "STOP"


STOP: Final = _StopSentinel()
""" A visitor that is passed to :meth:`TagNode.each_child` returns this to halt. """


# leaf nodes


class _LeafNode:
    __slots__ = ("__content",)

    def __init__(self, content: str):
        self.__content: Final = content

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and self.__content == other.content

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}("{self.__content}") [{hex(id(self))}]>'

    def __str__(self) -> str:
        return self.serialize()

    @property
    def content(self) -> str:
        return self.__content

    def serialize(self, options: Optional[SerializationOptions] = None) -> str:
        return _serialize(self, options)


class CDataNode(_LeafNode, CDataNodeType):
    """
    The instances of this class represent CDATA sections. Their content is kept as it
    was written and contributes to the :attr:`TagNode.text_value` of the parent.
    """

    __slots__ = ()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.CDATA


class CommentNode(_LeafNode, CommentNodeType):
    """The instances of this class represent comment nodes of a tree."""

    __slots__ = ()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.COMMENT


class TextNode(_LeafNode, TextNodeType):
    """
    The instances of this class represent character data between tags with resolved
    entities. Consecutive character data of a parsed document is represented by one
    instance.
    """

    __slots__ = ()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TEXT


# tag nodes


class TagNode(TagNodeType):
    """
    The instances of this class represent tag nodes of a tree, the equivalent of DOM's
    elements. They're created by the :class:`_xmldoc.builder.TreeBuilder` and their
    children are fixed after parsing, while attributes can still be altered.

    :param name: The tag's name as written, including a possible prefix.
    :param attributes: The tag's attributes as written, including namespace
                       declarations.
    :param position: The location of the start tag in the source.
    :param namespace_scope: The namespace scope of a tag node that is created with
                            namespace support. The name and attribute names are
                            resolved with it.

    Attribute values can be obtained with the subscript notation on the
    :attr:`attributes` (or shorter :attr:`attr`) property:

    >>> from xmldoc import Document
    >>> root = Document('<root ham="spam"><child/></root>').root
    >>> root.attr["ham"]
    'spam'
    >>> root.first_child.name
    'child'

    A tag node's string representation yields a serialized XML representation of a
    sub-/tree. See :class:`SerializationOptions` for the
    formatting.
    """

    __slots__ = (
        "_child_nodes",
        "__attributes",
        "__first_child",
        "__last_child",
        "__local_name",
        "__name",
        "__namespace",
        "__namespace_scope",
        "__position",
        "__text_value",
    )

    def __init__(
        self,
        name: str,
        attributes: Optional[Mapping[str, str]] = None,
        *,
        position: Optional[Position] = None,
        namespace_scope: Optional[NamespaceScope] = None,
    ):
        self._child_nodes: Final[list[XMLNodeType]] = []
        self.__first_child: Optional[XMLNodeType] = None
        self.__last_child: Optional[XMLNodeType] = None
        self.__name: Final = name
        self.__namespace_scope: Final = namespace_scope
        self.__position: Final = Position() if position is None else position
        self.__text_value = ""

        self.__attributes: TagAttributes
        if namespace_scope is None:
            self.__attributes = PlainAttributes(attributes)
            self.__local_name: Optional[str] = None
            self.__namespace: Optional[str] = None
        else:
            self.__attributes = NamespacedAttributes(
                attributes, scope=namespace_scope
            )
            prefix, self.__local_name = split_qualified_name(name)
            if (namespace := namespace_scope.resolve(prefix)) is None:
                if prefix is not None:
                    warnings.warn(
                        f"The prefix of the tag name '{name}' isn't declared.",
                        category=UserWarning,
                    )
                namespace = ""
            self.__namespace = namespace

    def __repr__(self) -> str:
        return (
            f'<{self.__class__.__name__}("{self.__name}", {self.__attributes}) '
            f"[{hex(id(self))}]>"
        )

    def __str__(self) -> str:
        return self.serialize()

    def _add_child(self, node: XMLNodeType):
        self._child_nodes.append(node)
        if self.__first_child is None:
            self.__first_child = node
        self.__last_child = node
        if isinstance(node, (CDataNode, TextNode)):
            self.__text_value += node.content

    def _ensure_namespaces(self, operation: str):
        if self.__namespace_scope is None:
            raise NamespacesUnsupported(operation)

    def _iterate_tag_children(self) -> Iterator[TagNode]:
        for node in self._child_nodes:
            if isinstance(node, TagNode):
                yield node

    # properties

    @property
    def attributes(self) -> TagAttributes:
        """
        A :term:`mapping` of the tag's attribute names as written to their values.
        For trees that were parsed with namespace support, attributes can also be
        addressed by namespace and local name with the
        :meth:`TagAttributes.get_ns`, :meth:`TagAttributes.has_ns` and
        :meth:`TagAttributes.set_ns` methods.
        """
        return self.__attributes

    attr = attributes

    @property
    def children(self) -> tuple[XMLNodeType, ...]:
        """All child nodes in document order."""
        return tuple(self._child_nodes)

    @property
    def column(self) -> Optional[int]:
        """The zero-based column right after the start tag."""
        return self.__position.column

    @property
    def first_child(self) -> Optional[XMLNodeType]:
        return self.__first_child

    @property
    def kind(self) -> NodeKind:
        return NodeKind.ELEMENT

    @property
    def last_child(self) -> Optional[XMLNodeType]:
        return self.__last_child

    @property
    def line(self) -> Optional[int]:
        """The zero-based line number where the start tag ends."""
        return self.__position.line

    @property
    def local_name(self) -> Optional[str]:
        """
        The tag's name without prefix. Only available on trees that were parsed with
        namespace support, :obj:`None` otherwise.
        """
        return self.__local_name

    @property
    def name(self) -> str:
        return self.__name

    @property
    def namespace(self) -> Optional[str]:
        """
        The namespace that the tag's name was resolved to, an empty string if it has
        none. Only available on trees that were parsed with namespace support,
        :obj:`None` otherwise.
        """
        return self.__namespace

    @property
    def namespace_declarations(self) -> Mapping[str, str]:
        """
        The namespace declarations that are made by this tag itself. The default
        namespace is declared with the empty prefix.
        """
        if self.__namespace_scope is None:
            return MappingProxyType({})
        return self.__namespace_scope.declarations

    @property
    def namespace_scope(self) -> Optional[NamespaceScope]:
        """
        All namespace declarations that are in effect for the tag, :obj:`None` for
        trees that were parsed without namespace support.
        """
        return self.__namespace_scope

    @property
    def position(self) -> Optional[int]:
        """The absolute byte offset right after the start tag."""
        return self.__position.offset

    @property
    def start_tag_position(self) -> Optional[int]:
        """The absolute byte offset right after the start tag's opening ``<``."""
        return self.__position.start_tag_offset

    @property
    def text_value(self) -> str:
        """
        The concatenated contents of the text and CDATA child nodes in document order.
        The contents of descendant tags aren't included.
        """
        return self.__text_value

    # traversal

    def iterate_children(self) -> Iterator[XMLNodeType]:
        """Iterates over all child nodes in document order."""
        yield from self._child_nodes

    def iterate_descendants(self) -> Iterator[XMLNodeType]:
        """Iterates over all descendant nodes in document order."""
        stack = [(self._child_nodes, 0)]

        while stack:
            siblings, pointer = stack.pop()

            for node in siblings[pointer:]:
                pointer += 1
                yield node

                if isinstance(node, TagNode) and node._child_nodes:
                    stack.extend(((siblings, pointer), (node._child_nodes, 0)))
                    break

    # queries

    def each_child(self, visitor: Visitor):
        """
        Calls the ``visitor`` with each child tag node, its index among all child nodes
        and all child nodes. The iteration ends when the visitor returns :obj:`STOP`.

        >>> from xmldoc import Document
        >>> root = Document("<root><a/>text<b/><c/></root>").root
        >>> def visitor(node, index, children):
        ...     print(node.name, index)
        ...     if node.name == "b":
        ...         return STOP
        >>> root.each_child(visitor)
        a 0
        b 2
        """
        children = self.children
        for index, node in enumerate(children):
            if isinstance(node, TagNode) and visitor(node, index, children) is STOP:
                break

    def child_named(self, name: str) -> Optional[TagNode]:
        """Returns the first child tag node with the given name as written."""
        for node in self._iterate_tag_children():
            if node.name == name:
                return node
        return None

    def child_named_ns(self, namespace: str, local_name: str) -> Optional[TagNode]:
        """
        Returns the first child tag node that was resolved to the given namespace and
        local name.
        """
        self._ensure_namespaces("child_named_ns")
        for node in self._iterate_tag_children():
            if node.local_name == local_name and node.namespace == namespace:
                return node
        return None

    def child_with_attribute(
        self, name: str, value: Optional[str] = None
    ) -> Optional[TagNode]:
        """
        Returns the first child tag node that has an attribute with the given name.
        If a ``value`` is given, the attribute must also have that value. An attribute
        with an empty value is considered to be present.
        """
        for node in self._iterate_tag_children():
            attributes = node.attributes
            if name in attributes and (value is None or attributes[name] == value):
                return node
        return None

    def child_with_attribute_ns(
        self, namespace: str, local_name: str, value: Optional[str] = None
    ) -> Optional[TagNode]:
        self._ensure_namespaces("child_with_attribute_ns")
        for node in self._iterate_tag_children():
            attributes = node.attributes
            if attributes.has_ns(namespace, local_name) and (
                value is None or attributes.get_ns(namespace, local_name) == value
            ):
                return node
        return None

    def children_named(self, name: str) -> list[TagNode]:
        return [n for n in self._iterate_tag_children() if n.name == name]

    def children_named_ns(self, namespace: str, local_name: str) -> list[TagNode]:
        self._ensure_namespaces("children_named_ns")
        return [
            n
            for n in self._iterate_tag_children()
            if n.local_name == local_name and n.namespace == namespace
        ]

    def descendant_with_path(self, path: str) -> Optional[TagNode]:
        """
        Follows a path of tag names that are separated by dots, e.g. ``book.title``,
        along the first matching child tag nodes.
        """
        node: Optional[TagNode] = self
        for component in path.split("."):
            assert node is not None
            if (node := node.child_named(component)) is None:
                return None
        return node

    def descendant_with_path_ns(self, namespace: str, path: str) -> Optional[TagNode]:
        """
        Follows a path of local names that are separated by dots along the first
        matching child tag nodes in the given namespace.
        """
        self._ensure_namespaces("descendant_with_path_ns")
        node: Optional[TagNode] = self
        for component in path.split("."):
            assert node is not None
            if (node := node.child_named_ns(namespace, component)) is None:
                return None
        return node

    def descendants_named(self, name: str) -> list[TagNode]:
        """Returns all descendant tag nodes with the given name in document order."""
        return [
            n
            for n in self.iterate_descendants()
            if isinstance(n, TagNode) and n.name == name
        ]

    def descendants_named_ns(self, namespace: str, local_name: str) -> list[TagNode]:
        self._ensure_namespaces("descendants_named_ns")
        return [
            n
            for n in self.iterate_descendants()
            if isinstance(n, TagNode)
            and n.local_name == local_name
            and n.namespace == namespace
        ]

    def value_with_path(self, path: str) -> Optional[str]:
        """
        Returns the :attr:`text_value` of the descendant that a path as used with
        :meth:`descendant_with_path` points to. If the path ends with ``@`` and an
        attribute name, that attribute's value is returned instead. A path that only
        consists of an attribute part refers to this tag node. Anything after a
        second ``@`` is ignored.

        >>> from xmldoc import Document
        >>> root = Document('<book><title lang="en">Twilight</title></book>').root
        >>> root.value_with_path("title")
        'Twilight'
        >>> root.value_with_path("title@lang")
        'en'
        >>> root.value_with_path("author") is None
        True
        """
        path, *attribute = path.split("@")
        if (node := self.descendant_with_path(path) if path else self) is None:
            return None
        if attribute:
            return node.attributes.get(attribute[0])
        return node.text_value

    def value_with_path_ns(self, namespace: str, path: str) -> Optional[str]:
        self._ensure_namespaces("value_with_path_ns")
        path, *attribute = path.split("@")
        if (
            node := self.descendant_with_path_ns(namespace, path) if path else self
        ) is None:
            return None
        if attribute:
            return node.attributes.get_ns(namespace, attribute[0])
        return node.text_value

    # namespaced attributes

    def get_attribute_ns(self, namespace: str, local_name: str) -> Optional[str]:
        return self.__attributes.get_ns(namespace, local_name)

    def has_attribute_ns(self, namespace: str, local_name: str) -> bool:
        return self.__attributes.has_ns(namespace, local_name)

    def set_attribute_ns(self, namespace: str, local_name: str, value: str):
        """
        Sets the value of an attribute that is addressed by namespace and local name.
        The attribute name is written with a prefix that is bound to the namespace in
        the tag's scope. Nothing is set if there's no such prefix.
        """
        self.__attributes.set_ns(namespace, local_name, value)

    # serialization

    def serialize(self, options: Optional[SerializationOptions] = None) -> str:
        return _serialize(self, options)

    def to_string(self, **options) -> str:
        """
        Serializes the tree with :class:`SerializationOptions` that are defined by the
        keyword arguments.

        >>> from xmldoc import Document
        >>> root = Document('<books><book title="Twilight"/></books>').root
        >>> print(root.to_string(compressed=True))
        <books><book title="Twilight"/></books>
        """
        return _serialize(self, options)


def _serialize(
    node: XMLNodeType, options: Optional[SerializationOptions | Mapping[str, Any]]
) -> str:
    serializer: Serializer
    if options is None:
        serializer = DefaultStringOptions._get_serializer()
    else:
        serializer = _get_serializer(
            _StringWriter(newline=DefaultStringOptions.newline), options
        )
    serializer.serialize_node(node)
    return serializer.writer.result


__all__ = (
    CDataNode.__name__,
    CommentNode.__name__,
    "STOP",
    TagNode.__name__,
    TextNode.__name__,
)
