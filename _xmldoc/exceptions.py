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

"""These are the specific xmldoc exceptions."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from _xmldoc.typing import Loader


class XmldocBaseException(Exception):
    pass


class FailedDocumentLoading(XmldocBaseException):
    def __init__(self, source: Any, excuses: dict[Loader, str | Exception]):
        self.source = source
        self.excuses = excuses

    def __str__(self):
        return f"Couldn't load {self.source!r} with these loaders: {self.excuses}"


class InvalidCodePath(XmldocBaseException, RuntimeError):
    """Raised when a code path that is not expected to be executed is reached."""

    def __init__(self):  # pragma: no cover
        super().__init__(
            "An unintended path was taken through the code. Please report this bug."
        )


class NamespaceCapabilityError(XmldocBaseException):
    """
    Raised when a document shall be parsed with namespace support, but the employed
    parser adapter can't report the qualified names that are needed for it.
    """

    def __init__(self, parser_name: str):
        self.parser_name = parser_name
        super().__init__(
            f"Using the xmlns option is not supported by the '{parser_name}' parser."
        )


class NamespacesUnsupported(XmldocBaseException):
    """
    Raised when a namespace-qualified operation is invoked on a tree that was not
    parsed with the ``xmlns`` option.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"{operation} is not supported for this document (xmlns option not set "
            "during parsing)"
        )


class ParsingError(XmldocBaseException):
    pass


class ParsingEmptyStream(ParsingError):
    def __init__(self):
        super().__init__("No XML to parse!")


class ParsingStructureError(ParsingError):
    """Raised when markup appears at a position where it is not allowed."""

    pass


class ParsingValidityError(ParsingError):
    pass


class XMLSyntaxError(ParsingError):
    """
    Raised when a parser adapter reports malformed input. The ``line`` and
    ``column`` attributes point to the reported location if the parser provided it.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self):
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


__all__ = (
    FailedDocumentLoading.__name__,
    InvalidCodePath.__name__,
    NamespaceCapabilityError.__name__,
    NamespacesUnsupported.__name__,
    ParsingEmptyStream.__name__,
    ParsingError.__name__,
    ParsingStructureError.__name__,
    ParsingValidityError.__name__,
    XmldocBaseException.__name__,
    XMLSyntaxError.__name__,
)
