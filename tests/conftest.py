import pytest

# keep this before imports from _xmldoc!
import xmldoc  # noqa: F401
from tests import plugins  # noqa: F401

from xmldoc import DefaultStringOptions, Document


@pytest.fixture(autouse=True)
def _reset_serializer():
    DefaultStringOptions.reset_defaults()


@pytest.fixture
def books_ns_document():
    return Document(
        '<books xmlns:ns="http://example.com/books">'
        '<ns:book ns:title="Twilight"/>'
        "</books>",
        xmlns=True,
    )


@pytest.fixture
def navigation_document():
    return Document(
        "<navigation>"
        '<item id="1"/>'
        "<divider/>"
        '<item id="2">'
        '<item id="2.1"/>'
        '<item id="2.2"><item id="2.2.1"/></item>'
        "<divider/>"
        '<item id="3"/>'
        "</item>"
        "</navigation>"
    )
