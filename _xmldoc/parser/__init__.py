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
from enum import IntEnum, auto
from typing import TYPE_CHECKING, NamedTuple, Optional, TypeAlias

from _xmldoc.exceptions import (
    NamespaceCapabilityError,
    ParsingEmptyStream,
    XMLSyntaxError,
)
from _xmldoc.parser.utils import decode, detect_encoding
from _xmldoc.plugins import plugin_manager

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from _xmldoc.typing import InputStream


class EventType(IntEnum):
    CData = auto()
    Comment = auto()
    Doctype = auto()
    Error = auto()
    TagEnd = auto()
    TagStart = auto()
    Text = auto()


class ParserOptions(NamedTuple):
    """
    The configuration options that define an XML parser's behaviour.

    The used parser backend is determined by their availability and the
    ``preferred_parsers`` setting.  *xmldoc* comes with two contributed
    implementations and further can be added to the plugin manager based on
    :class:`_xmldoc.plugins.XMLEventParserInterface`.

    The ``expat`` parser adapter depends on the :mod:`xml.parsers.expat` module from
    the standard library.  It reports CDATA sections, document type declarations and
    the positions of tags.

    The ``lxml`` based parser requires the *lxml* package to be present in the
    interpreter environment.  It reports CDATA sections as text and only the line
    numbers of tags.
    """

    xmlns: bool = False
    """
    Resolve namespaces of tags and attributes.  That enables the namespace-qualified
    query methods.  Default: :obj:`False`.
    """
    encoding: Optional[str] = None
    """
    This should be used for streams where the encoding is not noted in an XML document
    declaration or indicated by a BOM for Unicode encodings.  It doesn't affect parsing
    of data that is passed as :class:`str`.  Default: :obj:`None`.
    """
    preferred_parsers: str | Sequence[str] = ("expat", "lxml")
    """
    A parser adapter name or a sequence of such that are preferably to be used.
    Default: ``("expat", "lxml")``.
    """
    remove_comments: bool = False
    """Ignore comments.  Default: :obj:`False`."""


class Position(NamedTuple):
    """
    The location of a tag in the source. ``line`` and ``column`` are zero-based and
    point to the position right after the start tag, as does the absolute byte offset
    ``offset``. ``start_tag_offset`` is the absolute byte offset right after the tag's
    opening ``<``, hence the one-based offset of that character. Parser adapters
    leave out what they can't determine.
    """

    line: Optional[int] = None
    column: Optional[int] = None
    offset: Optional[int] = None
    start_tag_offset: Optional[int] = None


class TagEventData(NamedTuple):
    name: str
    """The tag's name as written, including a prefix."""
    attributes: Mapping[str, str]
    """
    The tag's attributes with names as written, including namespace declarations, in
    document order.
    """
    position: Position = Position()


Event: TypeAlias = tuple[EventType, "str | TagEventData | None | Exception"]
"""
An XML stream event tuple consists of two values.  The first is a member of
:class:`EventType` that signals the type of event, the second carries the relevant data.
Character data must be completely parsed and its character entities resolved.

.. list-table:: XML event tuples' structure
    :widths: auto

    * - Event member
      - Data type
      - Notes
    * - :py:enum:member:`EventType.CData`
      - :class:`str`
      - The contents of a CDATA section.
    * - :py:enum:member:`EventType.Comment`
      - :class:`str`
      -
    * - :py:enum:member:`EventType.Doctype`
      - :class:`str`
      - The raw text between ``<!DOCTYPE`` and the closing ``>``.
    * - :py:enum:member:`EventType.Error`
      - :class:`Exception`
      - Will be raised by the tree builder.
    * - :py:enum:member:`EventType.TagStart`
      - :class:`TagEventData`
      -
    * - :py:enum:member:`EventType.TagEnd`
      - :obj:`None`
      -
    * - :py:enum:member:`EventType.Text`
      - :class:`str`
      -
"""


def read_input(input_: InputStream, options: ParserOptions) -> str:
    """
    Reads and decodes the input, surrounding whitespace is trimmed.

    :raises ParsingEmptyStream: When there's nothing but whitespace.
    :raises XMLSyntaxError: When a byte stream can't be decoded.
    """
    if isinstance(input_, str):
        data = input_
    else:
        if not isinstance(input_, bytes):
            input_ = input_.read()
        assert isinstance(input_, bytes)

        encoding = options.encoding or detect_encoding(input_)
        if encoding is None and input_.strip():
            warnings.warn(
                "No encoding known for parsing an XML stream. Defaulting to UTF-8.",
                category=UserWarning,
            )
        try:
            data = decode(input_, encoding)
        except (LookupError, UnicodeDecodeError) as e:
            raise XMLSyntaxError(str(e)) from e

    data = data.strip()
    if not data:
        raise ParsingEmptyStream
    return data


def parse_events(input_: InputStream, options: ParserOptions) -> Iterator[Event]:
    data = read_input(input_, options)

    parser_class = plugin_manager.get_parser(options.preferred_parsers)
    if options.xmlns and not parser_class.reports_qualified_names:
        raise NamespaceCapabilityError(parser_class.name)

    yield from parser_class(options).parse(data)


__all__ = (
    "Event",
    EventType.__name__,
    ParserOptions.__name__,
    Position.__name__,
    TagEventData.__name__,
    detect_encoding.__name__,
    parse_events.__name__,
)
