"""
Properties Reader - Line classifier and parser for .properties files.

Pipeline:
  1. Template expansion (propfmt.templates), the only stage that can fail
  2. Classification of each expanded line, first match wins:
       comment -> empty -> '{' -> '}' -> property
  3. Property lines are split at the first '=', whitespace fragments are
     recorded on the line, keys are qualified through the prefix stack and
     values are unescaped, unquoted and joined across '\\' continuations

Parsing is permissive: unbalanced braces, duplicate keys and lines without
'=' are accepted with defined fallbacks, never rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from propfmt.document import LineKind, PrefixStack, PropLine, Properties
from propfmt.spec import (
    ASSIGN, CONTINUATION, MAX_FILE_SIZE,
    is_block_end, is_block_start, is_comment, is_empty_line, is_multiline,
    ends_with, quote_char, split_whitespace, trim, trim_right, unescape_value, unquote,
)
from propfmt.templates import iter_lines, preprocess

logger = logging.getLogger(__name__)


@dataclass
class ParseState:
    """Parser state threaded from line to line.

    pending_prefix is the key of the last line without '='. Every '{' pushes
    it onto the prefix stack until a line with '=' clears it.
    """
    prefixes: PrefixStack = field(default_factory=PrefixStack)
    pending_prefix: str = ""


def classify(line: str) -> LineKind:
    """Classify a physical line. Continuations are decided by the parser."""
    if is_comment(line):
        return LineKind.COMMENT
    if is_empty_line(line):
        return LineKind.EMPTY
    if is_block_start(line):
        return LineKind.BLOCK_START
    if is_block_end(line):
        return LineKind.BLOCK_END
    return LineKind.PROPERTY


class PropReader:
    """
    Parser for .properties text.

    Usage:
        props = PropReader.read("app.properties")
        props = PropReader.parse("server.port = 1234\\n")

        # Lower level: parse already expanded lines with explicit state
        doc, state = PropReader.parse_lines(["a", "{", "b = 1", "}"])
    """

    @classmethod
    def read(cls, path: str | Path, max_size: int = MAX_FILE_SIZE) -> Properties:
        """Read and parse a UTF-8 .properties file."""
        path = Path(path)
        file_size = path.stat().st_size
        if file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        # Bytes, not read_text(): CRLF must reach the parser untranslated
        data = path.read_bytes()
        return cls.parse(data, max_size=max_size)

    @classmethod
    def parse(
        cls,
        source: str | bytes | Iterable[str],
        max_size: int = MAX_FILE_SIZE,
    ) -> Properties:
        """Parse text, UTF-8 bytes or a readable text stream."""
        if isinstance(source, (str, bytes)) and len(source) > max_size:
            raise ValueError(
                f"Input size {len(source)} exceeds maximum {max_size}. "
                f"Pass max_size= to override."
            )
        if isinstance(source, bytes):
            source = source.decode("utf-8-sig")
        elif isinstance(source, str):
            source = source.lstrip("\ufeff")

        expanded = preprocess(source)
        doc, state = cls.parse_lines(iter_lines(expanded))
        if state.prefixes:
            logger.debug(f"Unclosed prefix blocks at end of input: {state.prefixes!r}")
        return doc

    @classmethod
    def parse_lines(
        cls,
        lines: Iterable[str],
        doc: Properties | None = None,
        state: ParseState | None = None,
    ) -> tuple[Properties, ParseState]:
        """Parse template-expanded lines (without newlines) into doc.

        Returns the populated document and the final parser state.
        """
        doc = doc if doc is not None else Properties()
        state = state if state is not None else ParseState()
        stream = iter(lines)

        for raw in stream:
            line = PropLine(raw=raw, kind=classify(raw))
            doc.lines.append(line)

            if line.kind is LineKind.BLOCK_START:
                if state.pending_prefix:
                    state.prefixes.push(state.pending_prefix)
            elif line.kind is LineKind.BLOCK_END:
                if state.prefixes.pop() is None:
                    logger.debug(f"Ignoring unbalanced '}}' (line {len(doc.lines)})")
            elif line.kind is LineKind.PROPERTY:
                cls._parse_property(line, stream, doc, state)

        return doc, state

    @classmethod
    def _parse_property(
        cls,
        line: PropLine,
        stream: Iterator[str],
        doc: Properties,
        state: ParseState,
    ) -> None:
        assign_pos = line.raw.find(ASSIGN)

        # Lines without '=' are keys with empty values; they may open a block
        if assign_pos == -1:
            lead, key, trail = split_whitespace(line.raw)
            value = ""
            line.has_no_assignment = True
            state.pending_prefix = key
        else:
            lead, key, trail = split_whitespace(line.raw[:assign_pos])
            value_lead, value, value_trail = split_whitespace(line.raw[assign_pos + 1:])
            line.leading_value_ws = value_lead
            line.trailing_value_ws = value_trail
            value = unescape_value(value)
            state.pending_prefix = ""

        line.leading_key_ws = lead
        line.trailing_key_ws = trail
        line.bare_key = key
        line.key = state.prefixes.qualify(key)

        if is_multiline(value):
            value = cls._read_continuation(value, stream, doc)
        else:
            line.quote = quote_char(value)
            value = unquote(value)

        doc._store_parsed(line.key, value)

    @staticmethod
    def _read_continuation(first: str, stream: Iterator[str], doc: Properties) -> str:
        """Join a value ending in '\\' with the following physical lines.

        Each continuation line is trimmed before joining; no separator is
        inserted. The first line not ending in '\\' closes the value.
        """
        value = unquote(trim_right(trim_right(first)[:-1]))

        for raw in stream:
            doc.lines.append(PropLine(raw=raw, kind=LineKind.CONTINUATION))
            piece = trim(raw)
            if not is_multiline(piece):
                return value + unquote(piece)
            piece = piece[:-1]
            if ends_with(piece, '"') or ends_with(piece, CONTINUATION):
                piece = unquote(trim_right(piece))
            value += piece

        return value
