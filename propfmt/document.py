"""
Properties Document - In-memory representation of a .properties file.

Two containers are kept side by side:
  - lines: the ordered line log. One PropLine per physical input line,
    followed by lines appended through the mutation API. Rendering walks it.
  - props: the keyed property store, qualified key -> PropEntry.

They are linked only by key equality. A property line whose key is no
longer in the store is kept in the log but skipped on render.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from propfmt.spec import COMMENT_CHARS, DEFAULT_ASSIGN, TRUE_VALUES, join_prefix, trim

logger = logging.getLogger(__name__)


class LineKind(enum.Enum):
    PROPERTY = "property"
    COMMENT = "comment"
    EMPTY = "empty"
    CONTINUATION = "continuation"
    BLOCK_START = "block_start"
    BLOCK_END = "block_end"


@dataclass
class PropLine:
    """A single entry in the line log."""
    raw: str
    kind: LineKind = LineKind.PROPERTY
    key: str = ""                  # fully qualified key (PROPERTY only)
    bare_key: str = ""             # key as written on this line
    # Whitespace stripped while parsing, kept so the line can be rebuilt.
    # The defaults shape lines synthesized by put(): "key = value"
    leading_key_ws: str = ""
    trailing_key_ws: str = " "
    leading_value_ws: str = " "
    trailing_value_ws: str = ""
    quote: str = ""                # quote char wrapping a single-line value
    has_no_assignment: bool = False


@dataclass
class PropEntry:
    """A property in the keyed store."""
    key: str
    value: str = ""
    modified: bool = False  # touched by put() since parse


class PrefixStack:
    """Active block prefixes while parsing; '{' pushes, '}' pops."""

    def __init__(self, segments: list[str] | None = None) -> None:
        self.segments: list[str] = list(segments or [])

    def push(self, segment: str) -> None:
        self.segments.append(segment)

    def pop(self) -> str | None:
        """Drop the innermost prefix. No-op returning None when empty."""
        if not self.segments:
            return None
        return self.segments.pop()

    def qualify(self, bare_key: str) -> str:
        return join_prefix(self.segments, bare_key)

    def __len__(self) -> int:
        return len(self.segments)

    def __repr__(self) -> str:
        return f"PrefixStack({self.segments!r})"


class Properties:
    """
    Format-preserving property document.

    Usage:
        props = PropReader.read("app.properties")
        props.get("server.port")             # "1234"
        props.put("bind", "127.0.0.1")      # appended if new
        props.remove("legacy.flag")
        props.write("app.properties")       # comments and layout kept
        props.text(pretty=True)             # normalized rendering
    """

    def __init__(self) -> None:
        self.lines: list[PropLine] = []
        self.props: dict[str, PropEntry] = {}

    def _store_parsed(self, key: str, value: str) -> None:
        """Record a value read from input. Later duplicates win."""
        entry = self.props.get(key)
        if entry is None:
            self.props[key] = PropEntry(key=key, value=value)
            return
        logger.debug(f"Duplicate key {key!r}: {entry.value!r} replaced by {value!r}")
        entry.value = value

    # -- Queries ------------------------------------------------------------

    def has_key(self, key: str) -> bool:
        return key in self.props

    def get(self, key: str, default: str = "") -> str:
        """Get a property value, or default ('' unless given) if absent."""
        entry = self.props.get(key)
        return entry.value if entry is not None else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """True if the value is exactly "true", "1" or "yes"."""
        entry = self.props.get(key)
        if entry is None:
            return default
        return entry.value in TRUE_VALUES

    def keys(self) -> list[str]:
        return list(self.props)

    def values(self) -> list[str]:
        return [entry.value for entry in self.props.values()]

    # -- Mutation -----------------------------------------------------------

    def put(self, key: str, value: str) -> str:
        """Set a property. Returns the previous value, or '' if it was new.

        Existing keys are updated in place, so their line keeps its position
        and whitespace. New keys are appended to the end of the document.
        """
        entry = self.props.get(key)
        if entry is not None:
            old = entry.value
            entry.value = value
            entry.modified = True
            return old

        self.lines.append(PropLine(
            raw=f"{key}{DEFAULT_ASSIGN}{value}",
            kind=LineKind.PROPERTY,
            key=key,
            bare_key=key,
        ))
        self.props[key] = PropEntry(key=key, value=value, modified=True)
        return ""

    def remove(self, key: str) -> None:
        """Remove a property. Its line stays in the log but is no longer rendered."""
        self.props.pop(key, None)

    def put_empty_line(self) -> None:
        self.lines.append(PropLine(raw="", kind=LineKind.EMPTY))

    def put_comment(self, comment: str) -> None:
        """Append a comment. A leading '# ' is added unless it starts with # or !."""
        line = trim(comment)
        if not line:
            return
        if line[0] not in COMMENT_CHARS:
            line = "# " + line
        self.lines.append(PropLine(raw=line, kind=LineKind.COMMENT))

    # -- Output -------------------------------------------------------------

    def text(self, pretty: bool = False) -> str:
        """Render the document. Original formatting is kept unless pretty is set."""
        from propfmt.writer import PropWriter
        return PropWriter.render(self, pretty=pretty)

    def to_bytes(self, pretty: bool = False) -> bytes:
        from propfmt.writer import PropWriter
        return PropWriter.serialize(self, pretty=pretty)

    def write(self, path: str, pretty: bool = False) -> int:
        """Write this document to a file atomically. Returns bytes written."""
        from propfmt.writer import PropWriter
        return PropWriter.write(self, path, pretty=pretty)

    def __contains__(self, key: object) -> bool:
        return key in self.props

    def __len__(self) -> int:
        return len(self.props)

    def __repr__(self) -> str:
        return f"Properties(keys={len(self.props)}, lines={len(self.lines)})"
