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

import codecs
import re
from typing import Final


BOM_TO_ENCODING_NAME: Final = (
    (4, codecs.BOM_UTF32_LE, "utf-32"),
    (4, codecs.BOM_UTF32_BE, "utf-32"),
    (3, codecs.BOM_UTF8, "utf-8-sig"),
    (2, codecs.BOM_UTF16_LE, "utf-16"),
    (2, codecs.BOM_UTF16_BE, "utf-16"),
)


match_encoding: Final = re.compile(
    rb"""<\?xml\s+version=["']1\.[01]["']\s+encoding=["']([A-Za-z0-9._-]+)["']"""
).match

# the end of a start tag, quoted attribute values may contain a `>`
match_start_tag: Final = re.compile(rb"""<[^>"']*(?:(?:"[^"]*"|'[^']*')[^>"']*)*>""").match

# the contents of a document type declaration w/ or w/o an internal subset
match_doctype: Final = re.compile(
    rb"""<!DOCTYPE((?:[^>\["']|"[^"]*"|'[^']*'|\[(?:[^\]"']|"[^"]*"|'[^']*')*\])*)>"""
).match


def decode(data: bytes, encoding: str | None) -> str:
    if encoding is None:
        encoding = detect_encoding(data)
    if encoding is None:
        return data.decode("utf-8")
    return data.decode(encoding)


def detect_encoding(stream: bytes) -> str | None:
    for bom_size, bom, name in BOM_TO_ENCODING_NAME:
        if stream[:bom_size] == bom:
            return name

    if (match := match_encoding(stream)) is not None:
        return match.group(1).decode("ascii")

    return None


class LineCounter:
    """
    Translates monotonously increasing byte offsets of a source to zero-based line and
    column numbers without rescanning the preceding data.
    """

    __slots__ = ("counted_to", "line", "line_start", "source")

    def __init__(self, source: bytes):
        self.counted_to = 0
        self.line = 0
        self.line_start = 0
        self.source: Final = source

    def __call__(self, offset: int) -> tuple[int, int]:
        if offset < self.counted_to:
            self.counted_to = self.line = self.line_start = 0

        source = self.source
        self.line += source.count(b"\n", self.counted_to, offset)
        if (index := source.rfind(b"\n", self.counted_to, offset)) != -1:
            self.line_start = index + 1
        self.counted_to = offset
        return self.line, offset - self.line_start


__all__ = (
    LineCounter.__name__,
    decode.__name__,
    detect_encoding.__name__,
)
