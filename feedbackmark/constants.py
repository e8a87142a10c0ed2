"""Constants and configuration for the annotation engine."""

class AnnotationConstants:
    """Central constants shared by the engine and the terminal host."""

    # Label prefixes (glyph followed by one space)
    MAIN_GLYPH = "→"
    MINOR_GLYPH = "↳"
    MAIN_PREFIX = MAIN_GLYPH + " "
    MINOR_PREFIX = MINOR_GLYPH + " "

    # Block-scope attribute names, one per non-normal line kind
    MIRROR_ATTR = "blockquote"
    MAIN_LABEL_ATTR = "main-label"
    MINOR_LABEL_ATTR = "minor-label"
    INDENT_ATTR = "indent"

    # Inline attribute names
    GREYED_ATTR = "greyed"
    STRIKE_ATTR = "strike"
    COLOR_ATTR = "color"

    # Mirror text: each newline of the selection becomes this
    MIRROR_NEWLINE = "  "

    # Correction gap inserted after struck-through text
    CORRECTION_GAP = "  "

    # Default colours
    DEFAULT_HIGHLIGHT_COLOR = "orange"
    DEFAULT_PLAIN_COLOR = "black"

    # Default shortcut keys (Ctrl or Alt + digit)
    DEFAULT_FEEDBACK_KEY = "1"
    DEFAULT_CORRECTION_KEY = "2"

    # Terminal host
    DOCUMENT_WIDTH = 72
    MIRROR_BAR = "│ "
    MINOR_INDENT = "   "
    ATOMIC_SAVE_PREFIX = "."
    ATOMIC_SAVE_SUFFIX = ".tmp"
