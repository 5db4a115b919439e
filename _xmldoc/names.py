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

from collections import ChainMap
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Optional

if TYPE_CHECKING:
    from _xmldoc.typing import NamespaceDeclarations


XML_NAMESPACE: Final = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE: Final = "http://www.w3.org/2000/xmlns/"

GLOBAL_NAMESPACES: Final = MappingProxyType(
    {"xml": XML_NAMESPACE, "xmlns": XMLNS_NAMESPACE}
)


def deconstruct_clark_notation(name: str) -> tuple[str | None, str]:
    """
    Deconstructs a name in Clark notation, that may or may not include a namespace.

    :param name: An attribute's or tag node's name.
    :return: A tuple with the extracted namespace and local name.

    >>> deconstruct_clark_notation('{http://www.tei-c.org/ns/1.0}text')
    ('http://www.tei-c.org/ns/1.0', 'text')

    >>> deconstruct_clark_notation('div')
    (None, 'div')
    """
    if name.startswith("{"):
        a, b = name.split("}", maxsplit=1)
        return a[1:], b
    else:
        return None, name


def extract_declarations(attributes: Mapping[str, str]) -> NamespaceDeclarations:
    """
    Collects the namespace declarations from a tag's raw attributes. The default
    namespace is mapped to the empty prefix.

    >>> extract_declarations({"xmlns": "http://a", "xmlns:b": "http://b", "c": "d"})
    {'': 'http://a', 'b': 'http://b'}
    """
    result = {}
    for key, value in attributes.items():
        if key == "xmlns":
            result[""] = value
        elif key.startswith("xmlns:"):
            result[key[6:]] = value
    return result


def split_qualified_name(name: str) -> tuple[str | None, str]:
    """
    Splits a name as written in a document into its prefix and local name.

    >>> split_qualified_name("ns:book")
    ('ns', 'book')

    >>> split_qualified_name("book")
    (None, 'book')
    """
    prefix, colon, local_name = name.partition(":")
    if colon:
        return prefix, local_name
    else:
        return None, name


class NamespaceScope(Mapping):
    """
    A :term:`mapping` of the prefixes to namespaces that are in scope for a tag node.
    An instance holds only the declarations of the tag it belongs to, the
    declarations of ancestors are referenced through the enclosing scope. The empty
    prefix maps the default namespace, the global prefixes ``xml`` and ``xmlns`` are
    always bound.
    """

    __slots__ = ("__data", "__declarations", "__parent")

    def __init__(
        self,
        declarations: Optional[NamespaceDeclarations] = None,
        parent: Optional[NamespaceScope] = None,
    ):
        self.__declarations: Final = MappingProxyType(dict(declarations or {}))
        self.__parent: Final = parent
        enclosing = [GLOBAL_NAMESPACES] if parent is None else parent.__data.maps
        self.__data: Final[ChainMap[str, str]] = ChainMap(
            self.__declarations, *enclosing
        )

    def __getitem__(self, prefix: str) -> str:
        return self.__data[prefix]

    def __iter__(self) -> Iterator[str]:
        return iter(self.__data)

    def __len__(self) -> int:
        return len(self.__data)

    def __repr__(self) -> str:
        return f"<{self.__class__.__qualname__}({dict(self)}) [{hex(id(self))}]>"

    @property
    def declarations(self) -> Mapping[str, str]:
        """The declarations that were made by the scope's own tag."""
        return self.__declarations

    @property
    def parent(self) -> Optional[NamespaceScope]:
        return self.__parent

    def lookup_prefix(self, namespace: str) -> Optional[str]:
        """
        Resolves a namespace to a prefix that is bound to it in this scope. Not only
        the tag's own declarations are searched but those of all enclosing tags as
        well, so that a namespace declared at the root can be used anywhere below it.
        The innermost declaration is preferred, prefixes that are shadowed by a nested
        declaration for another namespace and the empty prefix are not considered.
        """
        for declarations in self.__data.maps:
            for prefix, value in declarations.items():
                if value == namespace and prefix and self.__data[prefix] == namespace:
                    return prefix
        return None

    def new_child(self, declarations: NamespaceDeclarations) -> NamespaceScope:
        """Returns a scope for a nested tag that makes the given declarations."""
        return NamespaceScope(declarations, self)

    def resolve(self, prefix: str | None) -> Optional[str]:
        """
        Resolves a prefix to a namespace. :obj:`None` is treated as the empty prefix
        of the default namespace. Returns :obj:`None` for undeclared prefixes.
        """
        return self.__data.get(prefix or "")


__all__ = (
    "GLOBAL_NAMESPACES",
    "XML_NAMESPACE",
    "XMLNS_NAMESPACE",
    deconstruct_clark_notation.__name__,
    extract_declarations.__name__,
    NamespaceScope.__name__,
    split_qualified_name.__name__,
)
