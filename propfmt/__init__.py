"""
propfmt - Round-trip parser and renderer for .properties files.

Comments, blank lines, whitespace and ordering survive parse -> render;
edits are applied in place and new properties are appended.
"""

__version__ = "0.1.0"

from propfmt.spec import TRUE_VALUES, EXTENSION
from propfmt.document import Properties, PropLine, PropEntry, LineKind, PrefixStack
from propfmt.reader import PropReader, ParseState
from propfmt.writer import PropWriter
from propfmt.templates import (
    TemplateError,
    TemplateSyntaxError,
    TemplateUnterminatedError,
    UndefinedTemplateError,
    preprocess,
)
