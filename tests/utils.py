from _xmldoc.typing import XMLNodeType  # noqa: TC001
from xmldoc.utils import compare_trees


def assert_equal_trees(a: XMLNodeType, b: XMLNodeType):
    result = compare_trees(a, b)
    if not result:
        raise AssertionError(str(result))
