"""
Properties Format Specification
===============================

Layout (a superset of Java .properties):

    # comment                    <- '#' or '!' after optional whitespace
    ! also a comment
                                 <- blank lines are kept
    host:name = 0.0.0.0          <- '=' is the only separator, so ':' is legal in keys
    greeting = "  quoted  "      <- matching quotes around the whole value are stripped
    padded = \\ \\ two spaces    <- backslash protects leading whitespace
    long = first part \\         <- trailing backslash continues the value
           second part
    server                       <- key without '=' opens a prefix block
    {
        port = 1234              <- read back as server.port
        log.level = debug        <- read back as server.log.level
    }
    <defaults>                   <- template definition
    timeout = 30
    </defaults>
    %defaults%                   <- template reference, expanded in place

Design Decisions:
    - Input and output are UTF-8 (not Latin-1)
    - Only '=' assigns; a line with no '=' is a key with an empty value
    - Prefix blocks nest arbitrarily; keys are joined with '.'
    - Templates are expanded textually before parsing and never persisted
    - Unbalanced braces and duplicate keys are tolerated, never fatal

Escaping:
    - Writer: each leading whitespace character gets a '\\' in front of it
    - Writer: embedded newlines become '\\' + newline + 4-space indent
    - Reader: only the leading run of '\\' + whitespace pairs is undone;
      any other backslash in the value is left alone
"""

from __future__ import annotations

# Characters treated as whitespace when trimming lines and fragments
WHITESPACE = " \n\r\t\v\f"

COMMENT_CHARS = frozenset("#!")
ASSIGN = "="
BLOCK_START = "{"
BLOCK_END = "}"
PREFIX_SEPARATOR = "."
CONTINUATION = "\\"
QUOTE_CHARS = frozenset("'\"")

TEMPLATE_OPEN = "<"
TEMPLATE_CLOSE = "</"
TEMPLATE_REF = "%"

# Rendering
INDENT_UNIT = 4
CONTINUATION_INDENT = " " * INDENT_UNIT
DEFAULT_ASSIGN = " = "          # separator used for synthesized lines

# Values accepted as true by get_bool (case-sensitive)
TRUE_VALUES = frozenset({"true", "1", "yes"})

ENCODING = "utf-8"
EXTENSION = ".properties"

# Safety limits
MAX_FILE_SIZE = 16 * 1024 * 1024  # 16MB max input for reader


# =============================================================================
# Text primitives
# =============================================================================

def split_whitespace(text: str) -> tuple[str, str, str]:
    """Split text into (leading whitespace, core, trailing whitespace).

    Joining the three parts always gives back the input. An all-whitespace
    string is returned entirely as the leading part.
    """
    core = text.lstrip(WHITESPACE)
    leading = text[:len(text) - len(core)]
    stripped = core.rstrip(WHITESPACE)
    trailing = core[len(stripped):]
    return leading, stripped, trailing


def trim(text: str) -> str:
    return text.strip(WHITESPACE)


def trim_right(text: str) -> str:
    return text.rstrip(WHITESPACE)


def ends_with(text: str, ch: str) -> bool:
    """True if ch is the last non-whitespace character of text."""
    stripped = trim_right(text)
    return bool(stripped) and stripped[-1] == ch


def unquote(text: str) -> str:
    """Remove 'single' or "double" quotes around a trimmed value.

    Only strips when the quotes span the entire value and there is at least
    one character between them.
    """
    if len(text) > 2 and text[0] in QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text


def quote_char(text: str) -> str:
    """Return the quote character wrapping text, or '' if unquoted."""
    if unquote(text) != text:
        return text[0]
    return ""


def escape_value(value: str) -> str:
    """Escape a value for writing.

    Each leading whitespace character is preceded by a backslash, and every
    newline in the remainder becomes backslash + newline + continuation indent.
    A value made only of whitespace is returned unchanged.
    """
    rest = value.lstrip(WHITESPACE)
    if not rest:
        return value
    leading = value[:len(value) - len(rest)]
    protected = "".join(CONTINUATION + ch for ch in leading)
    return protected + rest.replace("\n", CONTINUATION + "\n" + CONTINUATION_INDENT)


def unescape_value(text: str) -> str:
    """Undo the leading run of backslash-protected whitespace."""
    i = 0
    out = []
    while i + 1 < len(text) and text[i] == CONTINUATION and text[i + 1] in WHITESPACE:
        out.append(text[i + 1])
        i += 2
    if not out:
        return text
    return "".join(out) + text[i:]


def join_prefix(segments: list[str], key: str) -> str:
    """Qualify key with the active prefix segments: a.b + key -> a.b.key"""
    if not segments:
        return key
    return PREFIX_SEPARATOR.join(segments) + PREFIX_SEPARATOR + key


# =============================================================================
# Line predicates
# =============================================================================

def _first_char(line: str) -> str:
    stripped = line.lstrip(WHITESPACE)
    return stripped[0] if stripped else ""


def is_comment(line: str) -> bool:
    return _first_char(line) in COMMENT_CHARS


def is_empty_line(line: str) -> bool:
    return all(ch.isspace() for ch in line)


def is_block_start(line: str) -> bool:
    return trim(line) == BLOCK_START


def is_block_end(line: str) -> bool:
    return trim(line) == BLOCK_END


def is_multiline(value: str) -> bool:
    """A value whose last non-whitespace character is a backslash continues."""
    return ends_with(value, CONTINUATION)


def is_template_end(line: str) -> bool:
    return line.lstrip(WHITESPACE).startswith(TEMPLATE_CLOSE)


def is_template_start(line: str) -> bool:
    return _first_char(line) == TEMPLATE_OPEN and not is_template_end(line)


def is_template_ref(line: str) -> bool:
    return _first_char(line) == TEMPLATE_REF
