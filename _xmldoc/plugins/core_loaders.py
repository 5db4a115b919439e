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

"""
Loaders for the kinds of sources that :class:`xmldoc.Document` accepts out of the box:
filesystem paths, binary streams, strings and byte sequences. They're tried in that
order.
"""

from __future__ import annotations

from contextlib import suppress
from io import IOBase, UnsupportedOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from _xmldoc.builder import build_tree
from _xmldoc.plugins import plugin_manager

if TYPE_CHECKING:
    from types import SimpleNamespace

    from _xmldoc.typing import LoaderResult


def _file_uri(name: Any) -> Optional[str]:
    if isinstance(name, (str, Path)) and (path := Path(name).absolute()).is_file():
        return path.as_uri()
    return None


@plugin_manager.register_loader()
def path_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """
    Reads the file that a :class:`pathlib.Path` points to. Unless a ``source_url``
    was passed to the document, the file's URI is stored as such in the
    :attr:`xmldoc.Document.config`.
    """
    if not isinstance(data, Path):
        return "The input value is not a pathlib.Path instance."

    if config.source_url is None:
        config.source_url = data.absolute().as_uri()
    with data.open("rb") as file:
        return buffer_loader(file, config)


@plugin_manager.register_loader(after=path_loader)
def buffer_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """
    Parses the contents of a :term:`file-like object` that yields bytes, from its
    beginning if it's seekable. When it's a file, its URI is stored as
    ``source_url``.
    """
    if not isinstance(data, IOBase):
        return "The input value is no buffer object."

    if config.source_url is None:
        config.source_url = _file_uri(getattr(data, "name", None))
    with suppress(UnsupportedOperation):
        data.seek(0)
    return build_tree(data, config.parser_options)


@plugin_manager.register_loader()
def text_loader(data: Any, config: SimpleNamespace) -> LoaderResult:
    """Parses a complete document from a string or a byte sequence."""
    if not isinstance(data, (bytes, str)):
        return "The input value is not a byte sequence or a string."
    return build_tree(data, config.parser_options)


__all__ = (
    buffer_loader.__name__,
    path_loader.__name__,
    text_loader.__name__,
)
