"""Line format taxonomy shared by every annotation component."""

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from .constants import AnnotationConstants as C
from .document import DocumentModel

logger = logging.getLogger(__name__)


class LineKind(Enum):
    """Mutually exclusive kinds a line can carry."""
    NORMAL = "normal"
    MIRRORED_BLOCK = "mirrored_block"
    MAIN_LABEL = "main_label"
    MINOR_LABEL = "minor_label"

    @property
    def prefix(self) -> str:
        """Glyph and space that start a label line ('' for other kinds)."""
        return _PREFIXES.get(self, "")

    def line_formats(self) -> dict[str, Any]:
        """Block formats that turn a line into exactly this kind.

        Attributes of the other kinds are mapped to None so they get cleared.
        """
        formats: dict[str, Any] = {attr: None for attr in _KIND_ATTRS.values()}
        formats[C.INDENT_ATTR] = None
        attr = _KIND_ATTRS.get(self)
        if attr is not None:
            formats[attr] = True
        if self is LineKind.MAIN_LABEL:
            formats[C.INDENT_ATTR] = 0
        elif self is LineKind.MINOR_LABEL:
            formats[C.INDENT_ATTR] = 1
        return formats


_KIND_ATTRS = {
    LineKind.MIRRORED_BLOCK: C.MIRROR_ATTR,
    LineKind.MAIN_LABEL: C.MAIN_LABEL_ATTR,
    LineKind.MINOR_LABEL: C.MINOR_LABEL_ATTR,
}

_PREFIXES = {
    LineKind.MAIN_LABEL: C.MAIN_PREFIX,
    LineKind.MINOR_LABEL: C.MINOR_PREFIX,
}


def classify_formats(formats: Mapping[str, Any]) -> LineKind:
    """Compute the kind of a line from its raw block formats."""
    kinds = [kind for kind, attr in _KIND_ATTRS.items() if formats.get(attr)]
    if not kinds:
        return LineKind.NORMAL
    if len(kinds) > 1:
        names = ", ".join(kind.name for kind in kinds)
        logger.warning(f"Line carries conflicting kinds ({names}); treating it as NORMAL")
        return LineKind.NORMAL
    return kinds[0]


def indent_level(formats: Mapping[str, Any]) -> int:
    """Numeric indent attribute, 0 when absent or malformed."""
    value = formats.get(C.INDENT_ATTR) or 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric indent {value!r}")
        return 0


def kind_at(document: DocumentModel, offset: int) -> Optional[LineKind]:
    """Kind of the line containing ``offset``, or None if there is no line."""
    found = document.get_line_at(offset)
    if found is None:
        return None
    line, _ = found
    return classify_formats(document.line_formats(line))
