from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from _xmldoc.builder import build_tree
from _xmldoc.plugins import plugin_manager
from _xmldoc.plugins.core_loaders import text_loader
from _xmldoc.plugins.expat_parser import ExpatParser

if TYPE_CHECKING:
    from types import SimpleNamespace

    from _xmldoc.typing import LoaderResult


class LimitedParser(ExpatParser):
    """An adapter that claims it can't report names as they were written."""

    name = "limited"
    reports_qualified_names = False


class PlaygroundSource(NamedTuple):
    xml: str


@plugin_manager.register_loader(before=text_loader)
def playground_loader(data, config: SimpleNamespace) -> LoaderResult:
    if isinstance(data, PlaygroundSource):
        config.playground = True
        return build_tree(data.xml, config.parser_options)
    return "The input value is no PlaygroundSource instance."
