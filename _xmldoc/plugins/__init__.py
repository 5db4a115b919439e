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
from collections.abc import Iterable, Iterator, Sequence
from importlib.metadata import entry_points
from importlib.util import find_spec
from typing import TYPE_CHECKING, ClassVar


if TYPE_CHECKING:
    from _xmldoc.parser import Event, ParserOptions
    from _xmldoc.typing import Loader, LoaderConstraint, SecondOrderDecorator


class PluginManager:
    __slots__ = ("loaders", "parsers")

    def __init__(self):
        self.loaders: list[Loader] = []
        self.parsers: dict[str, type[XMLEventParserInterface]] = {}

    def get_parser(
        self, preferences: str | Sequence[str]
    ) -> type[XMLEventParserInterface]:
        """
        Returns the first available parser adapter class from the given preferences.

        :raises ValueError: When none of the preferred parsers is available.
        """
        if isinstance(preferences, str):
            preferences = (preferences,)

        for name in preferences:
            if (parser := self.parsers.get(name)) is not None:
                return parser

        raise ValueError(
            f"No matching parser available for {preferences}, available are: "
            f"{tuple(self.parsers)}"
        )

    @staticmethod
    def load_plugins():
        """
        Loads all modules that are registered as entrypoint in the ``xmldoc`` group and
        imports contributed extensions whose dependencies are available.
        """
        import _xmldoc.plugins.core_loaders  # noqa: F401

        if find_spec("pyexpat"):
            import _xmldoc.plugins.expat_parser  # noqa: F401
        if find_spec("lxml"):
            import _xmldoc.plugins.lxml_parser  # noqa: F401

        for entrypoint in entry_points().select(group="xmldoc"):
            entrypoint.load()

    def register_loader(
        self, before: LoaderConstraint = None, after: LoaderConstraint = None
    ) -> SecondOrderDecorator:
        """
        Registers a document loader.

        An example module that is specified as ``xmldoc`` plugin for a loader of
        archived documents might look like this:

        .. testcode::

            import gzip
            from pathlib import Path
            from types import SimpleNamespace
            from typing import Any

            from _xmldoc.builder import build_tree
            from _xmldoc.plugins import plugin_manager
            from _xmldoc.plugins.core_loaders import path_loader
            from _xmldoc.typing import LoaderResult


            @plugin_manager.register_loader(before=path_loader)
            def gzip_loader(source: Any, config: SimpleNamespace) -> LoaderResult:
                if isinstance(source, Path) and source.suffix == ".gz":
                    config.source_url = source.absolute().as_uri()
                    with gzip.open(source) as file:
                        return build_tree(file, config.parser_options)

                # return an indication why this loader didn't attempt to load in order
                # to support debugging
                return "The input value is not a path to a gzipped file."


        The ``source`` argument is what a :class:`Document` instance is initialized with
        as input data.

        Note that the ``config`` argument that is passed to a loader function contains
        configuration data, it's the :attr:`xmldoc.Document.config` property.

        Loaders that retrieve a document from a location should add the origin as
        string to the ``config`` object as ``source_url``.
        """

        if before is not None and after is not None:
            raise NotImplementedError(
                "Loaders may only define one constraint atm. Please open an issue with "
                "a use-case description if you need to define both."
            )

        registered_loaders = self.loaders

        if before is not None:
            if not isinstance(before, Iterable):
                before = (before,)
            index = min(registered_loaders.index(x) for x in before)

        elif after is not None:
            if not isinstance(after, Iterable):
                after = (after,)
            index = max(registered_loaders.index(x) for x in after) + 1

        else:
            index = len(registered_loaders)

        def registrar(loader: Loader) -> Loader:
            assert callable(loader)
            registered_loaders.insert(index, loader)
            return loader

        return registrar


class XMLEventParserInterface(ABC):
    """
    This is the base class for parser adapters, the tokenizers that feed the tree
    builder.  After initialization their :meth:`parse` method will be called to
    iterate over parser events.  Instances don't have to care about their state
    beyond the parsing of one input as they're only employed once.

    :param options: The parsing options the user passed with the input.
    """

    name: ClassVar[str]
    """
    The parser can be selected by this class attribute's value as (member of) a
    :attr:`ParserOptions.preferred_parsers` setting.
    """

    reports_qualified_names: ClassVar[bool] = True
    """
    Whether the adapter reports tag and attribute names as they were written,
    including namespace declarations.  Namespace support requires this capability.
    """

    def __init_subclass__(cls):
        plugin_manager.parsers[cls.name] = cls

    @abstractmethod
    def __init__(self, options: ParserOptions):
        pass

    @abstractmethod
    def parse(self, data: str) -> Iterator[Event]:
        """
        This method must be implemented and yield the parsed contents in document order
        as :obj:`Event` tuples.  Errors in the input shall be reported as an
        :py:enum:member:`EventType.Error` event rather than be raised.
        """
        pass


plugin_manager = PluginManager()


__all__ = (
    PluginManager.__name__,
    XMLEventParserInterface.__name__,
    "plugin_manager",
)
