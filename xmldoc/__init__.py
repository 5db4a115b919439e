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

from io import TextIOWrapper
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, BinaryIO, Final, Optional

from _xmldoc.builder import parse_tree
from _xmldoc.exceptions import FailedDocumentLoading, XmldocBaseException
from _xmldoc.nodes import STOP
from _xmldoc.parser import ParserOptions
from _xmldoc.plugins import plugin_manager as _plugin_manager
from _xmldoc.serializer import (
    DefaultStringOptions,
    SerializationOptions,
    _get_serializer,
    _TextBufferWriter,
)

if TYPE_CHECKING:
    from pathlib import Path

    from _xmldoc.builder import BuilderState
    from _xmldoc.nodes import TagNode
    from _xmldoc.typing import Loader


# plugin loading


_plugin_manager.load_plugins()


# api


_ROOT_MEMBERS: Final = frozenset(
    (
        "attr",
        "attributes",
        "child_named",
        "child_named_ns",
        "child_with_attribute",
        "child_with_attribute_ns",
        "children",
        "children_named",
        "children_named_ns",
        "column",
        "descendant_with_path",
        "descendant_with_path_ns",
        "descendants_named",
        "descendants_named_ns",
        "each_child",
        "first_child",
        "get_attribute_ns",
        "has_attribute_ns",
        "iterate_children",
        "iterate_descendants",
        "kind",
        "last_child",
        "line",
        "local_name",
        "name",
        "namespace",
        "namespace_declarations",
        "namespace_scope",
        "position",
        "serialize",
        "set_attribute_ns",
        "start_tag_position",
        "text_value",
        "to_string",
        "value_with_path",
        "value_with_path_ns",
    )
)


class Document:
    """
    This class is the entrypoint to obtain a representation of an XML encoded text
    document.

    :param source: Anything that the configured loaders can make sense of to return a
                   parsed document tree.
    :param parser_options: A :class:`ParserOptions` instance to configure the used
                           parser.
    :param xmlns: A shortcut to enable or disable namespace support that overrides the
                  according field of the ``parser_options``.
    :param source_url: An optional source URL for situations where a loader can't
                       determine one.

    For instantiation any object can be passed. A suitable loader must be available for
    the given source. The loaders in
    :mod:`_xmldoc.plugins.core_loaders` accept paths, binary buffers, strings and
    bytes.

    A document wraps the tree's root node and the contents of a document type
    declaration. All attributes and methods of the :class:`TagNode` interface can be
    used on a document as well, these are delegated to its root node:

    >>> document = Document('<books><book title="Twilight"/></books>')
    >>> document.name
    'books'
    >>> document.child_named("book").attr["title"]
    'Twilight'

    The string coercion of a document yields the serialization of its root node:

    >>> str(document)
    '<books>\\n  <book title="Twilight"/>\\n</books>'
    """

    __slots__ = ("config", "doctype", "root", "source_url")

    def __init__(
        self,
        source: Any,
        /,
        parser_options: Optional[ParserOptions] = None,
        *,
        xmlns: Optional[bool] = None,
        source_url: Optional[str] = None,
    ):
        config = SimpleNamespace(source_url=source_url)
        config.parser_options = parser_options or ParserOptions()
        if xmlns is not None:
            config.parser_options = config.parser_options._replace(xmlns=xmlns)

        state = self.__load_source(source, config)

        self.config: Final = config
        """
        Beside the ``parser_options``, this property contains the namespaced data that
        loaders may have stored.
        """
        self.source_url: Final[Optional[str]] = vars(config).pop("source_url", None)
        """
        The source URL where a loader obtained the document's contents or
        :obj:`None`.
        """
        assert state.root is not None
        self.root: Final[TagNode] = state.root
        """ The root node of the document's tree. """
        self.doctype: Final[str] = state.doctype
        """
        The raw contents of the document type declaration, an empty string if there
        was none.
        """

    def __getattr__(self, name: str) -> Any:
        if name in _ROOT_MEMBERS:
            return getattr(self.root, name)
        raise AttributeError(
            f"'{self.__class__.__name__}' object has no attribute '{name}'"
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.root!r}) [{hex(id(self))}]>"

    def __str__(self) -> str:
        return str(self.root)

    @staticmethod
    def __load_source(source: Any, config: SimpleNamespace) -> BuilderState:
        loader_excuses: dict[Loader, str | Exception] = {}

        for loader in _plugin_manager.loaders:
            try:
                loader_result = loader(source, config)
            except XmldocBaseException:
                raise
            except Exception as e:
                loader_excuses[loader] = e
            else:
                if isinstance(loader_result, str):
                    loader_excuses[loader] = loader_result
                else:
                    return loader_result

        raise FailedDocumentLoading(source, loader_excuses)

    def save(
        self,
        path: Path,
        options: Optional[SerializationOptions] = None,
        *,
        encoding: str = "utf-8",
        newline: None | str = None,
    ):
        """
        Saves the serialized document contents to a file, see :meth:`write`.

        :param path: The filesystem path to the target file.
        :param options: An instance of :class:`SerializationOptions` to configure the
                        formatting.
        :param encoding: The desired text encoding.
        :param newline: See :class:`io.TextIOWrapper` for a detailed explanation of the
                        parameter with the same name.
        """
        with path.open("bw") as file:
            self.write(file, options, encoding=encoding, newline=newline)

    def write(
        self,
        buffer: BinaryIO,
        options: Optional[SerializationOptions] = None,
        *,
        encoding: str = "utf-8",
        newline: None | str = None,
    ):
        """
        Writes the serialized document contents to a :term:`file-like object`. An XML
        declaration and the document type declaration precede the root node.

        :param buffer: A :term:`file-like object` that the document is written to.
        :param options: An instance of :class:`SerializationOptions` to configure the
                        formatting.
        :param encoding: The desired text encoding.
        :param newline: See :class:`io.TextIOWrapper` for a detailed explanation of the
                        parameter with the same name.
        """
        serializer = _get_serializer(
            _TextBufferWriter(TextIOWrapper(buffer), encoding=encoding, newline=newline),
            options,
        )
        writer = serializer.writer
        linebreak = "" if serializer.options.compressed else "\n"

        writer(f'<?xml version="1.0" encoding="{encoding.upper()}"?>{linebreak}')
        if self.doctype:
            writer(f"<!DOCTYPE{self.doctype}>{linebreak}")
        serializer.serialize_node(self.root)

        writer.buffer.flush()
        # the buffer belongs to the caller
        writer.buffer.detach()


__all__ = (
    DefaultStringOptions.__name__,
    Document.__name__,
    ParserOptions.__name__,
    "STOP",
    SerializationOptions.__name__,
    parse_tree.__name__,
)
