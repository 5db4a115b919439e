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

from abc import abstractmethod
from collections.abc import Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Final, Optional

from _xmldoc.exceptions import NamespacesUnsupported
from _xmldoc.names import XMLNS_NAMESPACE, split_qualified_name

if TYPE_CHECKING:
    from _xmldoc.names import NamespaceScope


class Attribute:
    """
    The representation of an attribute of a tag node that was parsed with namespace
    support. It binds the value to the local name and namespace that its key was
    resolved to when it was set.
    """

    __slots__ = ("local_name", "namespace", "__value")

    def __init__(self, local_name: str, namespace: str, value: str):
        self.local_name: Final = local_name
        self.namespace: Final = namespace
        self.value = value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Attribute):
            return (self.local_name, self.namespace, self.value) == (
                other.local_name,
                other.namespace,
                other.value,
            )
        return NotImplemented

    def __repr__(self):
        return (
            f'<{self.__class__.__name__}({self.universal_name}="{self.value}")'
            f" [{hex(id(self))}]>"
        )

    def __str__(self):
        return self.__value

    @property
    def universal_name(self) -> str:
        """
        The attribute's namespace and local name in `Clark notation`_.

        .. _Clark notation: http://www.jclark.com/xml/xmlns.htm
        """
        if namespace := self.namespace:
            return f"{{{namespace}}}{self.local_name}"
        else:
            return self.local_name

    @property
    def value(self) -> str:
        """The attribute's value."""
        return self.__value

    @value.setter
    def value(self, value: str):
        if not isinstance(value, str):
            raise TypeError("An attribute value must be a string.")
        self.__value = value


class TagAttributes(MutableMapping):
    """
    The common interface of a tag node's attributes. Items are addressed with the
    attribute names as they were written and the values are always strings. The
    insertion order is preserved and a new value for an existing name replaces the
    old one in place.
    """

    __slots__ = ()

    def __str__(self):
        return str(dict(self))

    @abstractmethod
    def get_ns(self, namespace: str, local_name: str) -> Optional[str]:
        """
        Returns the value of the attribute that was resolved to the given namespace
        and local name or :obj:`None`.
        """
        pass

    @abstractmethod
    def has_ns(self, namespace: str, local_name: str) -> bool:
        """
        Tests whether an attribute was resolved to the given namespace and local name.
        """
        pass

    @abstractmethod
    def set_ns(self, namespace: str, local_name: str, value: str):
        """
        Sets an attribute that is addressed by namespace and local name with a prefix
        that is bound to that namespace in the tag node's scope. Nothing happens when
        no such prefix is declared.
        """
        pass


class PlainAttributes(TagAttributes):
    """Attributes of tag nodes that were parsed without namespace support."""

    __slots__ = ("__data",)

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self.__data: Final[dict[str, str]] = {}
        if data:
            self.update(data)

    def __delitem__(self, key: str):
        del self.__data[key]

    def __getitem__(self, key: str) -> str:
        return self.__data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.__data)

    def __len__(self) -> int:
        return len(self.__data)

    def __setitem__(self, key: str, value: str):
        if not isinstance(value, str):
            raise TypeError("An attribute value must be a string.")
        self.__data[key] = value

    def get_ns(self, namespace: str, local_name: str) -> Optional[str]:
        raise NamespacesUnsupported("get_attribute_ns")

    def has_ns(self, namespace: str, local_name: str) -> bool:
        raise NamespacesUnsupported("has_attribute_ns")

    def set_ns(self, namespace: str, local_name: str, value: str):
        raise NamespacesUnsupported("set_attribute_ns")


class NamespacedAttributes(TagAttributes):
    """
    Attributes of tag nodes that were parsed with namespace support. Each key is
    resolved to a namespace and local name when it's set for the first time:

    - an unprefixed name has no namespace
    - a prefixed name is resolved with the tag node's namespace scope, if the prefix
      isn't declared, the assignment is dropped silently
    """

    __slots__ = ("__data", "__scope")

    def __init__(
        self, data: Optional[Mapping[str, str]] = None, *, scope: NamespaceScope
    ):
        self.__data: Final[dict[str, Attribute]] = {}
        self.__scope: Final = scope
        if data:
            self.update(data)

    def __delitem__(self, key: str):
        del self.__data[key]

    def __getitem__(self, key: str) -> str:
        return self.__data[key].value

    def __iter__(self) -> Iterator[str]:
        return iter(self.__data)

    def __len__(self) -> int:
        return len(self.__data)

    def __setitem__(self, key: str, value: str):
        if (attribute := self.__data.get(key)) is not None:
            attribute.value = value
            return

        prefix, local_name = split_qualified_name(key)
        if prefix is None:
            namespace = XMLNS_NAMESPACE if key == "xmlns" else ""
        elif (namespace := self.__scope.resolve(prefix)) is None:
            return

        self.__data[key] = Attribute(local_name, namespace, value)

    def attribute(self, key: str) -> Optional[Attribute]:
        """Returns the :class:`Attribute` object that is stored for a key."""
        return self.__data.get(key)

    def __find(self, namespace: str, local_name: str) -> Optional[Attribute]:
        for attribute in self.__data.values():
            if attribute.local_name == local_name and attribute.namespace == namespace:
                return attribute
        return None

    def get_ns(self, namespace: str, local_name: str) -> Optional[str]:
        if (attribute := self.__find(namespace, local_name)) is None:
            return None
        return attribute.value

    def has_ns(self, namespace: str, local_name: str) -> bool:
        return self.__find(namespace, local_name) is not None

    def set_ns(self, namespace: str, local_name: str, value: str):
        if (prefix := self.__scope.lookup_prefix(namespace)) is None:
            return

        key = f"{prefix}:{local_name}"
        if (attribute := self.__data.get(key)) is not None:
            attribute.value = value
        else:
            self.__data[key] = Attribute(local_name, namespace, value)


__all__ = (
    Attribute.__name__,
    NamespacedAttributes.__name__,
    PlainAttributes.__name__,
    TagAttributes.__name__,
)
