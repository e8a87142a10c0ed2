"""feedbackmark - structured feedback annotations for rich-text documents."""

from .document import DocumentModel, InMemoryDocument, Line
from .formats import LineKind, classify_formats
from .composer import insert_feedback_block
from .shortcuts import apply_correction, BracketShortcut
from .session import AnnotationSession

__version__ = "0.1.0"

__all__ = [
    'DocumentModel',
    'InMemoryDocument',
    'Line',
    'LineKind',
    'classify_formats',
    'insert_feedback_block',
    'apply_correction',
    'BracketShortcut',
    'AnnotationSession',
]
