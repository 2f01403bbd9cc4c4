"""
Properties Writer - Renders a Properties document back to text.

Two modes over the same line log:
  - format-preserving (default): untouched lines come back byte-for-byte;
    property lines are rebuilt from their recorded whitespace fragments
    around the current value
  - pretty: whitespace normalized, block contents indented four spaces
    per level, runs of blank lines collapsed into one

Removed properties are skipped. Continuation lines are never emitted on
their own; a multi-line value is re-escaped onto its owning property line.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import TYPE_CHECKING

from propfmt.document import LineKind, PropEntry, PropLine
from propfmt.spec import (
    ASSIGN, BLOCK_END, BLOCK_START, DEFAULT_ASSIGN, ENCODING, INDENT_UNIT,
    escape_value, trim, unquote,
)

if TYPE_CHECKING:
    from propfmt.document import Properties

logger = logging.getLogger(__name__)


def _indent(depth: int) -> str:
    return " " * (depth * INDENT_UNIT)


def _format_value(line: PropLine, value: str) -> str:
    # Quoted single-line values keep their quotes if they still read back the same
    if line.quote and "\n" not in value:
        quoted = line.quote + value + line.quote
        if unquote(quoted) == value:
            return quoted
    return escape_value(value)


def _render_property(line: PropLine, entry: PropEntry, depth: int, pretty: bool) -> str:
    if pretty:
        text = _indent(depth) + line.bare_key
        if entry.value:
            text += DEFAULT_ASSIGN + escape_value(entry.value)
        return text

    text = line.leading_key_ws + line.bare_key + line.trailing_key_ws
    # A bare key stays bare until put() gives it a value
    if line.has_no_assignment and not entry.modified:
        return text
    return (
        text + ASSIGN + line.leading_value_ws
        + _format_value(line, entry.value) + line.trailing_value_ws
    )


class PropWriter:

    @staticmethod
    def render(doc: Properties, pretty: bool = False) -> str:
        """Render the document as text, one '\\n'-terminated line per entry."""
        out: list[str] = []
        depth = 0
        last_kind: LineKind | None = None

        for line in doc.lines:
            kind = line.kind

            if kind is LineKind.EMPTY:
                if pretty and last_kind is LineKind.EMPTY:
                    continue
                out.append("" if pretty else line.raw)

            elif kind is LineKind.COMMENT:
                out.append(trim(line.raw) if pretty else line.raw)

            elif kind is LineKind.PROPERTY:
                entry = doc.props.get(line.key)
                if entry is None:
                    continue  # removed
                out.append(_render_property(line, entry, depth, pretty))

            elif kind is LineKind.BLOCK_START:
                out.append(_indent(depth) + BLOCK_START if pretty else line.raw)
                depth += 1

            elif kind is LineKind.BLOCK_END:
                depth = max(depth - 1, 0)
                out.append(_indent(depth) + BLOCK_END if pretty else line.raw)

            else:
                continue  # continuation lines are folded into their property

            last_kind = kind

        return "".join(text + "\n" for text in out)

    @staticmethod
    def serialize(doc: Properties, pretty: bool = False) -> bytes:
        """Render to UTF-8 bytes. Pure - does not mutate the document."""
        return PropWriter.render(doc, pretty=pretty).encode(ENCODING)

    @staticmethod
    def write(doc: Properties, path: str, pretty: bool = False, mode: int = 0o644) -> int:
        """Write a document to a file atomically. Returns bytes written.

        Writes to a temp file in the target directory, fsyncs it and renames
        it over the target, so the target is never partially written.
        """
        data = PropWriter.serialize(doc, pretty=pretty)
        dir_name = os.path.dirname(os.path.abspath(path)) or "."
        fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix=".properties.tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except Exception:
            # Clean up temp file on failure
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return len(data)
