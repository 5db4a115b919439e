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

from collections import deque
from typing import TYPE_CHECKING, Optional
from xml.parsers import expat

from _xmldoc.exceptions import InvalidCodePath, XMLSyntaxError
from _xmldoc.parser import EventType, Position, TagEventData
from _xmldoc.parser.utils import LineCounter, match_doctype, match_start_tag
from _xmldoc.plugins import XMLEventParserInterface


if TYPE_CHECKING:
    from collections.abc import Iterator

    from _xmldoc.parser import Event, ParserOptions


class ExpatParser(XMLEventParserInterface):
    """
    A parser adapter that employs :mod:`xml.parsers.expat` without its namespace
    processing, hence names are reported as written. Consecutive character data is
    merged into one event.
    """

    __slots__ = (
        "cdata",
        "events",
        "line_counter",
        "options",
        "parser",
        "source",
        "unprocessed_text",
    )

    name = "expat"

    def __init__(self, options: ParserOptions):
        self.cdata: Optional[list[str]] = None
        self.events: deque[Event] = deque()
        self.options = options
        self.parser = self.make_parser()
        self.source = b""
        self.line_counter = LineCounter(self.source)
        self.unprocessed_text = ""

    def make_parser(self) -> expat.XMLParserType:
        parser = expat.ParserCreate()
        parser.ordered_attributes = False
        parser.specified_attributes = True

        parser.CharacterDataHandler = self.handle_character_data
        parser.EndCdataSectionHandler = self.handle_cdata_end
        parser.EndElementHandler = self.handle_tag_end
        parser.StartCdataSectionHandler = self.handle_cdata_start
        parser.StartDoctypeDeclHandler = self.handle_doctype
        parser.StartElementHandler = self.handle_tag_start
        if not self.options.remove_comments:
            parser.CommentHandler = self.handle_comment

        return parser

    def emit_events(self) -> Iterator[Event]:
        while self.events:
            yield self.events.popleft()

    def flush_text(self):
        if self.unprocessed_text:
            self.events.append((EventType.Text, self.unprocessed_text))
            self.unprocessed_text = ""

    def handle_cdata_end(self):
        assert self.cdata is not None
        self.events.append((EventType.CData, "".join(self.cdata)))
        self.cdata = None

    def handle_cdata_start(self):
        self.flush_text()
        self.cdata = []

    def handle_character_data(self, data: str):
        if self.cdata is None:
            self.unprocessed_text += data
        else:
            self.cdata.append(data)

    def handle_comment(self, data: str):
        self.flush_text()
        self.events.append((EventType.Comment, data))

    def handle_doctype(
        self,
        doctype_name: str,
        system_id: Optional[str],
        public_id: Optional[str],
        has_internal_subset: bool,
    ):
        self.flush_text()
        # expat reports this event only after it has read past the name
        start = self.source.rfind(b"<!DOCTYPE", 0, self.parser.CurrentByteIndex + 1)
        if start == -1 or (match := match_doctype(self.source, start)) is None:
            raise InvalidCodePath
        self.events.append((EventType.Doctype, match.group(1).decode("utf-8")))

    def handle_tag_end(self, name: str):
        self.flush_text()
        self.events.append((EventType.TagEnd, None))

    def handle_tag_start(self, name: str, attributes: dict[str, str]):
        self.flush_text()
        self.events.append(
            (EventType.TagStart, TagEventData(name, attributes, self.locate_tag()))
        )

    def locate_tag(self) -> Position:
        start = self.parser.CurrentByteIndex
        if (match := match_start_tag(self.source, start)) is None:
            raise InvalidCodePath
        offset = match.end()
        line, column = self.line_counter(offset)
        return Position(
            line=line, column=column, offset=offset, start_tag_offset=start + 1
        )

    def parse(self, data: str) -> Iterator[Event]:
        # expat is told to read strings as UTF-8, positions refer to that encoding
        self.source = data.encode("utf-8")
        self.line_counter = LineCounter(self.source)

        try:
            self.parser.Parse(data, True)
        except expat.ExpatError as e:
            yield from self.emit_events()
            yield EventType.Error, XMLSyntaxError(
                expat.ErrorString(e.code), line=e.lineno, column=e.offset
            )
            return

        self.flush_text()
        yield from self.emit_events()


__all__ = (ExpatParser.__name__,)
