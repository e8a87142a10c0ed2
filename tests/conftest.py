import pytest

from feedbackmark.document import InMemoryDocument, Line
from feedbackmark.formats import LineKind


def formats_for(kind: LineKind) -> dict:
    return {k: v for k, v in kind.line_formats().items() if v is not None}


@pytest.fixture
def make_document():
    """Build a document from (text, kind) pairs."""
    def _make(*specs):
        lines = [Line(text, formats_for(kind)) for text, kind in specs]
        return InMemoryDocument(lines)
    return _make
