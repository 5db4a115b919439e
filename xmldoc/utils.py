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

import enum
from itertools import zip_longest
from typing import TYPE_CHECKING, Optional

from _xmldoc.exceptions import InvalidCodePath
from _xmldoc.nodes import TagNode

if TYPE_CHECKING:
    from _xmldoc.typing import XMLNodeType


class TreeDifferenceKind(enum.Enum):
    None_ = enum.auto()
    NodeContent = enum.auto()
    NodeType = enum.auto()
    TagAttributes = enum.auto()
    TagChildrenSize = enum.auto()
    TagName = enum.auto()
    TagNamespace = enum.auto()


class TreesComparisonResult:
    """
    Instances of this class describe one or no difference between two trees.
    Casting an instance to :class:`bool` will yield :obj:`True` when it describes no
    difference, thus the compared trees were equal.
    Casted to strings they're intended to support debugging.
    """

    def __init__(
        self,
        difference_kind: TreeDifferenceKind,
        lhn: Optional[XMLNodeType],
        rhn: Optional[XMLNodeType],
        location: str = "",
    ):
        self.difference_kind = difference_kind
        self.lhn = lhn
        self.rhn = rhn
        self.location = location
        """ A path of child indexes that leads from the roots to the compared nodes. """

    def __bool__(self):
        return self.difference_kind is TreeDifferenceKind.None_

    def __str__(self):
        kind = self.difference_kind
        location = self.location or "/"

        if kind is TreeDifferenceKind.None_:
            return "Trees are equal."
        elif kind is TreeDifferenceKind.NodeContent:
            return f"Nodes' content differ at {location}:\n{self.lhn!r}\n{self.rhn!r}"
        elif kind is TreeDifferenceKind.NodeType:
            return (
                f"Nodes are of different type at {location}: "
                f"{self.lhn.__class__} != {self.rhn.__class__}"
            )

        assert isinstance(self.lhn, TagNode)
        assert isinstance(self.rhn, TagNode)

        if kind is TreeDifferenceKind.TagAttributes:
            return (
                f"Attributes of tag nodes at {location} differ:\n"
                f"{self.lhn.attributes}\n{self.rhn.attributes}"
            )
        elif kind is TreeDifferenceKind.TagChildrenSize:
            result = f"Child nodes of tag nodes at {location} differ:"
            for a, b in zip_longest(
                self.lhn.iterate_children(),
                self.rhn.iterate_children(),
                fillvalue=None,
            ):
                result += f"\n\n{a!r}\n{b!r}"
            return result
        elif kind is TreeDifferenceKind.TagName:
            return (
                f"Names of tag nodes at {location} differ: "
                f"{self.lhn.name} != {self.rhn.name}"
            )
        elif kind is TreeDifferenceKind.TagNamespace:
            return (
                f"Namespaces of tag nodes at {location} differ: "
                f"{self.lhn.namespace} != {self.rhn.namespace}"
            )

        raise InvalidCodePath()


def compare_trees(lhr: XMLNodeType, rhr: XMLNodeType) -> TreesComparisonResult:
    """
    Compares two node trees for equality. Upon the first detection of a difference of
    nodes that are located at the same position within the compared (sub-)trees a
    mismatch is reported.

    :param lhr: The node that is considered as root of the left hand operand.
    :param rhr: The node that is considered as root of the right hand operand.
    :return: An object that contains information about the first or no difference.

    Tag nodes are compared by their names as written, their attributes including
    their order and their child nodes. Namespaces are only compared when both trees
    were parsed with namespace support, so that trees from both parsing modes can be
    compared.

    While node types that can't have descendants are comparable with a comparison
    expression, the :class:`TagNode` type deliberately doesn't implement the ``==``
    operator, because it isn't clear whether a comparison should also consider the
    node's descendants as this function does.
    """
    return _compare_trees(lhr, rhr, "")


def _compare_trees(
    lhr: XMLNodeType, rhr: XMLNodeType, location: str
) -> TreesComparisonResult:
    if not isinstance(rhr, lhr.__class__):
        return TreesComparisonResult(TreeDifferenceKind.NodeType, lhr, rhr, location)

    if isinstance(lhr, TagNode):
        assert isinstance(rhr, TagNode)
        if lhr.name != rhr.name:
            return TreesComparisonResult(
                TreeDifferenceKind.TagName, lhr, rhr, location
            )
        if (
            lhr.namespace is not None
            and rhr.namespace is not None
            and lhr.namespace != rhr.namespace
        ):
            return TreesComparisonResult(
                TreeDifferenceKind.TagNamespace, lhr, rhr, location
            )
        if list(lhr.attributes.items()) != list(rhr.attributes.items()):
            return TreesComparisonResult(
                TreeDifferenceKind.TagAttributes, lhr, rhr, location
            )
        if len(lhr.children) != len(rhr.children):
            return TreesComparisonResult(
                TreeDifferenceKind.TagChildrenSize, lhr, rhr, location
            )

        for index, (lhn, rhn) in enumerate(
            zip(lhr.iterate_children(), rhr.iterate_children())
        ):
            result = _compare_trees(lhn, rhn, f"{location}/{index}")
            if not result:
                return result

    elif lhr != rhr:
        return TreesComparisonResult(
            TreeDifferenceKind.NodeContent, lhr, rhr, location
        )

    return TreesComparisonResult(TreeDifferenceKind.None_, None, None)


__all__ = (
    compare_trees.__name__,
    TreeDifferenceKind.__name__,
    TreesComparisonResult.__name__,
)
