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

from typing import TYPE_CHECKING

from lxml import etree

from _xmldoc.exceptions import XMLSyntaxError
from _xmldoc.names import XML_NAMESPACE, deconstruct_clark_notation
from _xmldoc.parser import EventType, Position, TagEventData
from _xmldoc.parser.utils import match_doctype
from _xmldoc.plugins import XMLEventParserInterface


if TYPE_CHECKING:
    from collections.abc import Iterator

    from _xmldoc.parser import Event, ParserOptions


class LxmlParser(XMLEventParserInterface):
    """
    A parser adapter that employs :class:`lxml.etree.XMLPullParser`. As lxml always
    processes namespaces, the names as written are reconstructed from the namespace
    maps and namespace declarations are reported as attributes that precede the
    others. CDATA sections are reported as text.
    """

    __slots__ = ("parser", "root_started", "source")

    name = "lxml"

    def __init__(self, options: ParserOptions):
        self.parser = etree.XMLPullParser(
            dtd_validation=False,
            encoding="utf-8",
            events=("comment", "end", "pi", "start"),
            load_dtd=False,
            no_network=True,
            remove_blank_text=False,
            remove_comments=options.remove_comments,
            remove_pis=False,
            resolve_entities=True,
            strip_cdata=False,
        )
        self.root_started = False
        self.source = b""

    def emit_events(self) -> Iterator[Event]:
        for event in self.parser.read_events():
            yield from self.handle_event(event)

    def handle_element_preceding_text(self, element: etree._Element):
        if ((parent := element.getparent()) is not None) and (
            parent.index(element) == 0
        ):
            if parent.text:
                yield EventType.Text, parent.text
        elif (previous := element.getprevious()) is not None:
            if previous.tail:
                yield EventType.Text, previous.tail
            previous.clear()

    def handle_event(self, event: tuple[str, etree._Element]) -> Iterator[Event]:
        action, element = event
        if action in ("comment", "pi", "start"):
            yield from self.handle_element_preceding_text(element)

        if action == "comment":
            yield EventType.Comment, element.text or ""
        elif action == "end":
            if len(element):
                if element[-1].tail:
                    yield EventType.Text, element[-1].tail
                    element[-1].tail = None
            elif element.text:
                yield EventType.Text, element.text

            yield EventType.TagEnd, None
        elif action == "start":
            if not self.root_started:
                self.root_started = True
                if (doctype := self.read_doctype()) is not None:
                    yield EventType.Doctype, doctype

            yield EventType.TagStart, TagEventData(
                name=self.qualified_name(element),
                attributes=self.process_attributes(element),
                position=Position(
                    line=None if element.sourceline is None else element.sourceline - 1
                ),
            )

    def parse(self, data: str) -> Iterator[Event]:
        self.source = data.encode("utf-8")
        try:
            self.parser.feed(self.source)
            yield from self.emit_events()
            self.parser.close()
        except etree.XMLSyntaxError as e:
            yield EventType.Error, XMLSyntaxError(e.msg, line=e.lineno, column=e.offset)
            return

        yield from self.emit_events()

    def process_attributes(self, element: etree._Element) -> dict[str, str]:
        result = {}

        parent = element.getparent()
        inherited = {} if parent is None else parent.nsmap
        for prefix, namespace in element.nsmap.items():
            if inherited.get(prefix) != namespace:
                result["xmlns" if prefix is None else f"xmlns:{prefix}"] = namespace

        prefixes = {v: k for k, v in reversed(element.nsmap.items()) if k is not None}
        prefixes[XML_NAMESPACE] = "xml"
        for name, value in element.attrib.items():
            namespace, local_name = deconstruct_clark_notation(name)
            if namespace is None:
                result[local_name] = value
            else:
                result[f"{prefixes[namespace]}:{local_name}"] = value

        return result

    def read_doctype(self) -> str | None:
        # the declaration is taken as written, lxml's docinfo drops the internal subset
        if (start := self.source.find(b"<!DOCTYPE")) == -1:
            return None
        if (match := match_doctype(self.source, start)) is None:
            return None
        return match.group(1).decode("utf-8")

    @staticmethod
    def qualified_name(element: etree._Element) -> str:
        local_name = etree.QName(element).localname
        if element.prefix:
            return f"{element.prefix}:{local_name}"
        else:
            return local_name


__all__ = (LxmlParser.__name__,)
