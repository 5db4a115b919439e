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

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, TypeAlias


if TYPE_CHECKING:
    from types import SimpleNamespace

    from _xmldoc.attributes import TagAttributes
    from _xmldoc.builder import BuilderState
    from _xmldoc.serializer import SerializationOptions


class NodeKind(str, Enum):
    """The discriminant that every node exposes as its ``kind`` property."""

    ELEMENT = "element"
    TEXT = "text"
    CDATA = "cdata"
    COMMENT = "comment"

    def __str__(self) -> str:
        return self.value


# node types


class XMLNodeType(ABC):
    """
    Defines the interfaces that all node type representations share. All node type
    implementations are a subclass of this one.
    """

    __slots__ = ()

    @abstractmethod
    def __str__(self) -> str: ...

    @property
    @abstractmethod
    def kind(self) -> NodeKind:
        """The node's type discriminant."""
        pass

    @abstractmethod
    def serialize(self, options: Optional[SerializationOptions] = None) -> str:
        """
        Returns a string that contains the serialization of the node.

        :param options: An instance of :class:`SerializationOptions`, the
                        :class:`DefaultStringOptions` are used if omitted.
        """
        pass


class _LeafNodeType(XMLNodeType):
    __slots__ = ()

    @property
    @abstractmethod
    def content(self) -> str:
        """The node's character data as it was written."""
        pass


class CDataNodeType(_LeafNodeType):
    __slots__ = ()


class CommentNodeType(_LeafNodeType):
    __slots__ = ()


class TextNodeType(_LeafNodeType):
    __slots__ = ()


class TagNodeType(XMLNodeType):
    __slots__ = ()

    @property
    @abstractmethod
    def attributes(self) -> TagAttributes:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """The tag's name as it was written, including a possible prefix."""
        pass

    @property
    @abstractmethod
    def children(self) -> tuple[XMLNodeType, ...]:
        pass

    @property
    @abstractmethod
    def text_value(self) -> str:
        pass


# aliases


Loader: TypeAlias = "Callable[[Any, SimpleNamespace], LoaderResult]"
LoaderConstraint: TypeAlias = "None | Loader | Iterable[Loader]"
LoaderResult: TypeAlias = "BuilderState | str"
NamespaceDeclarations: TypeAlias = "dict[str, str]"
SecondOrderDecorator: TypeAlias = "Callable[[Loader], Loader]"
Visitor: TypeAlias = "Callable[[TagNodeType, int, tuple[XMLNodeType, ...]], Any]"


class BinaryReader(Protocol):
    def read(self, n: int = -1) -> bytes:
        pass


InputStream: TypeAlias = "str | bytes | BinaryReader"


__all__ = (
    CDataNodeType.__name__,
    CommentNodeType.__name__,
    NodeKind.__name__,
    TagNodeType.__name__,
    TextNodeType.__name__,
    XMLNodeType.__name__,
)
