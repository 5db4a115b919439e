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

from abc import ABC
from collections.abc import Mapping
from io import StringIO, TextIOWrapper
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar as ClassWar,
    Final,
    NamedTuple,
    Optional,
    TextIO,
)

from _xmldoc.typing import (
    CDataNodeType,
    CommentNodeType,
    TagNodeType,
    TextNodeType,
)

if TYPE_CHECKING:
    from _xmldoc.typing import XMLNodeType


# constants


CTRL_CHAR_ENTITY_NAME_MAPPING: Final = (
    ("&", "amp"),
    ("<", "lt"),
    (">", "gt"),
    ("'", "apos"),
    ('"', "quot"),
)
CCE_TABLE: Final = str.maketrans(
    {ord(k): f"&{v};" for k, v in CTRL_CHAR_ENTITY_NAME_MAPPING}
)

HTML_VOID_ELEMENTS: Final = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "menuitem",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    )
)

ELLIPSIS: Final = "…"


# configuration


class SerializationOptions(NamedTuple):
    """
    Instances of this class define how a tree is rendered as string. The defaults
    produce an indented representation with stripped text contents where each child
    node of a tag with more than one child starts on a new line.

    Values of an invalid type are ignored in favour of the defaults.
    """

    compressed: bool = False
    """ Neither linebreaks nor indentation are inserted. """
    preserve_whitespace: bool = False
    """ Contents of text, CDATA and comment nodes aren't stripped. """
    trimmed: bool = False
    """
    Contents of text, CDATA and comment nodes that are longer than ``trim_length``
    are cut and marked with an ellipsis. This is purposed for a compact display of
    large documents, the result isn't equivalent to the original document.
    """
    html: bool = False
    """
    Tags without children are closed with a separate end tag unless their name
    is one of the void elements of HTML.
    """
    indentation: str = "  "
    """ This string prefixes descending nodes one time per depth level. """
    trim_length: int = 25
    """ The number of characters that are kept of trimmed contents. """


_DEFAULT_OPTIONS: Final = SerializationOptions()


def _validate_options(options: Any) -> SerializationOptions:
    if isinstance(options, SerializationOptions):
        values = options._asdict()
    elif isinstance(options, Mapping):
        values = {k: v for k, v in options.items() if k in SerializationOptions._fields}
    else:
        return _DEFAULT_OPTIONS

    for name in ("compressed", "preserve_whitespace", "trimmed", "html"):
        if not isinstance(values.get(name), bool):
            values[name] = getattr(_DEFAULT_OPTIONS, name)

    indentation = values.get("indentation")
    if not isinstance(indentation, str) or (indentation and not indentation.isspace()):
        values["indentation"] = _DEFAULT_OPTIONS.indentation

    trim_length = values.get("trim_length")
    if (
        isinstance(trim_length, bool)
        or not isinstance(trim_length, int)
        or trim_length < 1
    ):
        values["trim_length"] = _DEFAULT_OPTIONS.trim_length

    return SerializationOptions(**values)


class DefaultStringOptions:
    """
    This object's class variables are used to configure the serialization parameters
    that are applied when nodes are coerced to :class:`str` objects. Hence it also
    applies when node objects are fed to the :func:`print` function and in other cases
    where objects are implicitly cast to strings.

    .. attention::

        Use this once to define behaviour on *application level*. For thread-safe
        serializations of nodes with diverging parameters use
        :meth:`XMLNodeType.serialize`! Think thrice whether you want to use this
        facility in a library.
    """

    newline: ClassWar[None | str] = None
    """
    See :class:`io.TextIOWrapper` for a detailed explanation of the parameter with the
    same name.
    """
    serialization_options: ClassWar[None | SerializationOptions] = None
    """
    An instance of :class:`SerializationOptions` can be provided to configure
    the formatting.
    """

    @classmethod
    def _get_serializer(cls) -> Serializer:
        return _get_serializer(
            _StringWriter(newline=cls.newline), cls.serialization_options
        )

    @classmethod
    def reset_defaults(cls):
        """Restores the factory settings."""
        cls.newline = None
        cls.serialization_options = None


# serializer


def _get_serializer(
    writer: _SerializationWriter,
    options: Optional[SerializationOptions | Mapping[str, Any]],
) -> Serializer:
    return Serializer(writer, _DEFAULT_OPTIONS if options is None else options)


class Serializer:
    """
    Renders nodes recursively to a writer. Each node is prefixed with the ``indent``
    that it's called with, tag nodes pass an increased indentation to their children.
    """

    __slots__ = ("_child_indentation", "_linebreak", "options", "writer")

    def __init__(
        self,
        writer: _SerializationWriter,
        options: Optional[SerializationOptions | Mapping[str, Any]] = None,
    ):
        self.options: Final = _validate_options(options)
        self.writer: Final = writer
        if self.options.compressed:
            self._child_indentation = self._linebreak = ""
        else:
            self._child_indentation = self.options.indentation
            self._linebreak = "\n"

    def _format_text(self, text: str) -> str:
        options = self.options
        if options.trimmed and len(text) > options.trim_length:
            text = text[: options.trim_length].strip() + ELLIPSIS
        if not options.preserve_whitespace:
            text = text.strip()
        return text

    def serialize_node(self, node: XMLNodeType, indent: str = ""):
        match node:
            case TagNodeType():
                self._serialize_tag(node, indent)
            case CDataNodeType():
                self.writer(f"{indent}<![CDATA[{self._format_text(node.content)}]]>")
            case CommentNodeType():
                content = self._format_text(node.content.translate(CCE_TABLE))
                self.writer(f"{indent}<!--{content}-->")
            case TextNodeType():
                content = self._format_text(node.content.translate(CCE_TABLE))
                self.writer(indent + content)

    def _serialize_tag(self, node: TagNodeType, indent: str):
        name = node.name

        self.writer(f"{indent}<{name}")
        for key, value in node.attributes.items():
            self.writer(f' {key}="{value.translate(CCE_TABLE)}"')

        children = node.children
        if len(children) == 1 and not isinstance(children[0], TagNodeType):
            self.writer(">")
            self.serialize_node(children[0])
            self.writer(f"</{name}>")
        elif children:
            self.writer(">" + self._linebreak)
            child_indent = indent + self._child_indentation
            for child_node in children:
                self.serialize_node(child_node, child_indent)
                self.writer(self._linebreak)
            self.writer(f"{indent}</{name}>")
        elif self.options.html and name not in HTML_VOID_ELEMENTS:
            self.writer(f"></{name}>")
        else:
            self.writer("/>")


# writer


class _SerializationWriter(ABC):
    __slots__ = ("buffer",)

    def __init__(self, buffer: TextIO):
        self.buffer: Final = buffer

    def __call__(self, data: str):
        self.buffer.write(data)

    @property
    def result(self):
        if isinstance(self.buffer, StringIO):
            return self.buffer.getvalue()
        raise TypeError(  # pragma: no cover
            "Underlying buffer must be an instance of `io.StringIO`"
        )


class _StringWriter(_SerializationWriter):
    def __init__(self, newline: Optional[str] = None):
        super().__init__(StringIO(newline=newline))


class _TextBufferWriter(_SerializationWriter):
    def __init__(
        self,
        buffer: TextIOWrapper,
        encoding: str = "utf-8",
        newline: Optional[str] = None,
    ):
        buffer.reconfigure(encoding=encoding, newline=newline)
        super().__init__(buffer)


#


__all__ = (
    DefaultStringOptions.__name__,
    SerializationOptions.__name__,
    Serializer.__name__,
)
