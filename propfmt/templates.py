"""
Template preprocessor - textual expansion before the line parser runs.

    <name>            <- opens a definition (first non-blank char '<', next not '/')
    key = value       <- body lines are stored verbatim
    </name>           <- any line starting with '</' closes it
    %name%            <- replaced by the stored body lines, in order

Expansion is not recursive: a reference inside a template body is emitted
as-is and then parsed as an ordinary line. The template table lives only
for the duration of one preprocessing pass.

Unlike the rest of the parser, which tolerates malformed input, template
problems are fatal and abort the whole parse.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Iterator

from propfmt.spec import trim, is_template_start, is_template_end, is_template_ref

logger = logging.getLogger(__name__)


class TemplateError(ValueError):
    """Base class for template preprocessing failures."""

    def __init__(self, message: str, name: str = "", line_no: int = 0) -> None:
        if line_no:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.name = name
        self.line_no = line_no


class TemplateSyntaxError(TemplateError):
    """A <name> or %name% line whose bracketed name is empty."""


class TemplateUnterminatedError(TemplateSyntaxError):
    """A definition that reaches end of input without a closing tag."""


class UndefinedTemplateError(TemplateError):
    """A %name% reference with no preceding definition."""


def iter_lines(source: str | Iterable[str]) -> Iterator[str]:
    """Yield lines without their trailing newline.

    Only '\\n' terminates a line, so a '\\r' from CRLF input stays on the line
    and is preserved as whitespace by the parser.
    """
    if isinstance(source, str):
        source = io.StringIO(source, newline="\n")
    for raw in source:
        yield raw[:-1] if raw.endswith("\n") else raw


def _template_name(line: str, line_no: int, kind: str) -> str:
    trimmed = trim(line)
    if len(trimmed) < 3:
        raise TemplateSyntaxError(
            f"Invalid template {kind} syntax: {trimmed!r}", line_no=line_no
        )
    return trimmed[1:-1]


def preprocess(source: str | Iterable[str]) -> io.StringIO:
    """Expand template definitions and references.

    Every emitted line is terminated with '\\n'. Returns a stream positioned
    at the start, ready for the line parser.
    """
    out = io.StringIO(newline="\n")
    templates: dict[str, list[str]] = {}

    numbered = enumerate(iter_lines(source), 1)
    for line_no, line in numbered:
        if is_template_start(line):
            name = _template_name(line, line_no, "definition")
            body: list[str] = []
            for _, inner in numbered:
                if is_template_end(inner):
                    break
                body.append(inner)
            else:
                raise TemplateUnterminatedError(
                    f"Missing closing tag in template definition {name!r}",
                    name=name,
                    line_no=line_no,
                )
            if name in templates:
                logger.debug(f"Template {name!r} redefined at line {line_no}")
            templates[name] = body
            logger.debug(f"Defined template {name!r} ({len(body)} lines)")

        elif is_template_ref(line):
            name = _template_name(line, line_no, "reference")
            body = templates.get(name)
            if body is None:
                raise UndefinedTemplateError(
                    f"Template is not defined: {name!r}", name=name, line_no=line_no
                )
            for template_line in body:
                out.write(template_line + "\n")
            logger.debug(f"Expanded template {name!r} at line {line_no}")

        else:
            out.write(line + "\n")

    out.seek(0)
    return out
