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

from _xmldoc.attributes import (
    Attribute,
    NamespacedAttributes,
    PlainAttributes,
    TagAttributes,
)
from _xmldoc.names import NamespaceScope
from _xmldoc.nodes import STOP, CDataNode, CommentNode, TagNode, TextNode
from _xmldoc.typing import NodeKind


__all__ = (
    Attribute.__name__,
    CDataNode.__name__,
    CommentNode.__name__,
    NamespacedAttributes.__name__,
    NamespaceScope.__name__,
    NodeKind.__name__,
    PlainAttributes.__name__,
    "STOP",
    TagAttributes.__name__,
    TagNode.__name__,
    TextNode.__name__,
)
