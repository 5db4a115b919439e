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

# this module is intentionally not duplicated in the `xmldoc` package

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Optional

from _xmldoc.exceptions import ParsingStructureError, ParsingValidityError
from _xmldoc.names import NamespaceScope, extract_declarations
from _xmldoc.nodes import CDataNode, CommentNode, TagNode, TextNode
from _xmldoc.parser import EventType, ParserOptions, TagEventData, parse_events


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from _xmldoc.parser import Event, Position
    from _xmldoc.typing import InputStream


class BuilderState:
    """
    The state of one document's construction. The stack holds the tag nodes that are
    currently open, the last one is the insertion point for new nodes.
    """

    __slots__ = ("doctype", "options", "root", "stack")

    def __init__(self, options: ParserOptions):
        self.doctype = ""
        self.options: Final = options
        self.root: Optional[TagNode] = None
        self.stack: Final[list[TagNode]] = []


class TreeBuilder:
    """
    Constructs a tree from parser events. A document's construction is begun with
    :meth:`start_document`, then either each event is passed to the respective
    handler method or all events at once to :meth:`build`.
    """

    __slots__ = ("_state",)

    def __init__(self):
        self._state: Optional[BuilderState] = None

    @property
    def state(self) -> BuilderState:
        assert self._state is not None, "No document has been started."
        return self._state

    def start_document(self, options: ParserOptions) -> BuilderState:
        self._state = BuilderState(options)
        return self._state

    def build(self, events: Iterable[Event]) -> BuilderState:
        """
        Consumes all events and returns the state with the completed tree.

        :raises ParsingValidityError: When the events didn't contain a tag.
        """
        for event in events:
            self.handle_event(event)

        state = self.state
        if state.root is None:
            raise ParsingValidityError("The stream contained no element.")
        assert not state.stack
        return state

    def handle_event(self, event: Event):
        type_, data = event

        match type_:
            case EventType.CData:
                assert isinstance(data, str)
                self.on_cdata(data)
            case EventType.Comment:
                assert isinstance(data, str)
                self.on_comment(data)
            case EventType.Doctype:
                assert isinstance(data, str)
                self.on_doctype(data)
            case EventType.Error:
                assert isinstance(data, Exception)
                self.on_error(data)
            case EventType.TagEnd:
                self.on_close_tag()
            case EventType.TagStart:
                assert isinstance(data, TagEventData)
                self.on_open_tag(data.name, data.attributes, data.position)
            case EventType.Text:
                assert isinstance(data, str)
                self.on_text(data)

    # event handlers

    def on_cdata(self, content: str):
        if stack := self.state.stack:
            stack[-1]._add_child(CDataNode(content))

    def on_close_tag(self):
        self.state.stack.pop()

    def on_comment(self, content: str):
        state = self.state
        if state.stack and not state.options.remove_comments:
            state.stack[-1]._add_child(CommentNode(content))

    def on_doctype(self, content: str):
        state = self.state
        if state.root is not None:
            raise ParsingStructureError(
                "A document type declaration must precede the root element."
            )
        state.doctype += content

    def on_error(self, error: Exception):
        raise error

    def on_open_tag(
        self,
        name: str,
        attributes: Mapping[str, str],
        position: Optional[Position] = None,
    ):
        state = self.state
        stack = state.stack

        if stack:
            parent: Optional[TagNode] = stack[-1]
        elif state.root is not None:
            raise ParsingValidityError("The stream contained more than one root.")
        else:
            parent = None

        namespace_scope: Optional[NamespaceScope]
        if not state.options.xmlns:
            namespace_scope = None
        elif parent is None:
            namespace_scope = NamespaceScope(extract_declarations(attributes))
        else:
            assert parent.namespace_scope is not None
            namespace_scope = parent.namespace_scope.new_child(
                extract_declarations(attributes)
            )

        node = TagNode(
            name, attributes, position=position, namespace_scope=namespace_scope
        )
        if parent is None:
            state.root = node
        else:
            parent._add_child(node)
        stack.append(node)

    def on_text(self, content: str):
        if stack := self.state.stack:
            stack[-1]._add_child(TextNode(content))


def build_tree(
    data: InputStream, options: Optional[ParserOptions] = None
) -> BuilderState:
    """
    Parses the provided input and returns the builder's state with the root node and
    the document type declaration.
    """
    if options is None:
        options = ParserOptions()
    builder = TreeBuilder()
    builder.start_document(options)
    return builder.build(parse_events(data, options))


def parse_tree(data: InputStream, options: Optional[ParserOptions] = None) -> TagNode:
    """
    Parses the provided input to a tree and returns its root node.

    >>> root = parse_tree("<root><child/></root>")
    >>> root.first_child.name
    'child'
    """
    result = build_tree(data, options).root
    assert result is not None
    return result


__all__ = (
    BuilderState.__name__,
    TreeBuilder.__name__,
    build_tree.__name__,
    parse_tree.__name__,
)
