"""
propfmt CLI - Command-line interface for .properties files.

Commands:
  propfmt keys    - List all keys
  propfmt values  - List all values
  propfmt get     - Print the value of a key
  propfmt set     - Set a key (added at the end if new) and save
  propfmt remove  - Remove a key and save
  propfmt fmt     - Render the file, optionally pretty printed
  propfmt expand  - Show the file with templates expanded
  propfmt check   - Parse the file and report problems
  propfmt view    - Browse the file in a TUI
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _load(path: str):
    """Parse a file, exiting with a message on any read or template error."""
    from propfmt.reader import PropReader

    try:
        return PropReader.read(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # Template errors, size limit and undecodable input all land here
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _check_output(output: str) -> None:
    if ".." in Path(output).parts:
        print("Error: Output path must not contain '..' (path traversal)", file=sys.stderr)
        sys.exit(1)


def cmd_keys(args: argparse.Namespace) -> None:
    """List all keys, one per line."""
    props = _load(args.path)
    for key in props.keys():
        print(key)


def cmd_values(args: argparse.Namespace) -> None:
    """List all values, one per line."""
    props = _load(args.path)
    for value in props.values():
        print(value)


def cmd_get(args: argparse.Namespace) -> None:
    """Print the value of a key."""
    props = _load(args.path)
    if not props.has_key(args.key) and args.default is None:
        print(f"Key '{args.key}' not found.", file=sys.stderr)
        sys.exit(1)
    print(props.get(args.key, args.default or ""))


def cmd_set(args: argparse.Namespace) -> None:
    """Set a key and write the file back, keeping its formatting."""
    props = _load(args.path)
    existed = props.has_key(args.key)
    props.put(args.key, args.value)

    output = args.output or args.path
    _check_output(output)
    nbytes = props.write(output, pretty=args.pretty)
    action = "Updated" if existed else "Added"
    print(f"{action} {args.key} -> {output} ({nbytes} bytes)")


def cmd_remove(args: argparse.Namespace) -> None:
    """Remove a key and write the file back."""
    props = _load(args.path)
    if not props.has_key(args.key):
        print(f"Key '{args.key}' not found.", file=sys.stderr)
        sys.exit(1)
    props.remove(args.key)

    output = args.output or args.path
    _check_output(output)
    nbytes = props.write(output)
    print(f"Removed {args.key} -> {output} ({nbytes} bytes)")


def cmd_fmt(args: argparse.Namespace) -> None:
    """Render the file, to stdout or to -o."""
    props = _load(args.path)
    if args.output:
        _check_output(args.output)
        nbytes = props.write(args.output, pretty=args.pretty)
        print(f"Formatted {args.path} -> {args.output} ({nbytes} bytes)")
    else:
        print(props.text(pretty=args.pretty), end="")


def cmd_expand(args: argparse.Namespace) -> None:
    """Print the file with template definitions and references expanded."""
    from propfmt.templates import preprocess

    path = Path(args.path)
    if not path.is_file():
        print(f"Error: File not found: {args.path}", file=sys.stderr)
        sys.exit(1)
    try:
        expanded = preprocess(path.read_bytes().decode("utf-8-sig"))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(expanded.getvalue(), end="")


def cmd_check(args: argparse.Namespace) -> None:
    """Parse a file and report whether it is usable."""
    from propfmt.document import LineKind
    from propfmt.spec import EXTENSION

    props = _load(args.path)
    comments = sum(1 for line in props.lines if line.kind is LineKind.COMMENT)
    opens = sum(1 for line in props.lines if line.kind is LineKind.BLOCK_START)
    closes = sum(1 for line in props.lines if line.kind is LineKind.BLOCK_END)

    print(f"OK: {args.path}")
    print(f"    Keys: {len(props)}  Lines: {len(props.lines)}  Comments: {comments}")
    if opens != closes:
        # Tolerated by the parser, but usually a mistake
        print(f"    Warning: {opens} '{{' vs {closes} '}}' (unbalanced blocks)")
    if Path(args.path).suffix != EXTENSION:
        print(f"    Note: file name does not end in {EXTENSION}")


def cmd_view(args: argparse.Namespace) -> None:
    """Browse a .properties file in the TUI viewer."""
    try:
        from propfmt.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"propfmt[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(args.path)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="propfmt",
        description="propfmt - format-preserving .properties editor.",
    )
    from propfmt import __version__
    parser.add_argument("--version", action="version", version=f"propfmt {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log parser details to stderr")
    sub = parser.add_subparsers(dest="command")

    # keys
    p_keys = sub.add_parser("keys", help="List all keys")
    p_keys.add_argument("path", help="Path to .properties file")

    # values
    p_values = sub.add_parser("values", help="List all values")
    p_values.add_argument("path", help="Path to .properties file")

    # get
    p_get = sub.add_parser("get", help="Print the value of a key")
    p_get.add_argument("path", help="Path to .properties file")
    p_get.add_argument("key", help="Fully qualified key (e.g. server.port)")
    p_get.add_argument("-d", "--default", help="Value to print if the key is missing")

    # set
    p_set = sub.add_parser("set", help="Set a key and save")
    p_set.add_argument("path", help="Path to .properties file")
    p_set.add_argument("key", help="Fully qualified key")
    p_set.add_argument("value", help="New value")
    p_set.add_argument("-o", "--output", help="Output path (default: overwrite input)")
    p_set.add_argument("--pretty", action="store_true", help="Pretty print the output")

    # remove
    p_remove = sub.add_parser("remove", help="Remove a key and save")
    p_remove.add_argument("path", help="Path to .properties file")
    p_remove.add_argument("key", help="Fully qualified key")
    p_remove.add_argument("-o", "--output", help="Output path (default: overwrite input)")

    # fmt
    p_fmt = sub.add_parser("fmt", help="Render the file (optionally pretty printed)")
    p_fmt.add_argument("path", help="Path to .properties file")
    p_fmt.add_argument("-o", "--output", help="Output path (default: stdout)")
    p_fmt.add_argument("--pretty", action="store_true", help="Normalize whitespace and indentation")

    # expand
    p_expand = sub.add_parser("expand", help="Show the file with templates expanded")
    p_expand.add_argument("path", help="Path to .properties file")

    # check
    p_check = sub.add_parser("check", help="Parse a file and report problems")
    p_check.add_argument("path", help="Path to .properties file")

    # view
    p_view = sub.add_parser("view", help="Browse a file in the TUI viewer")
    p_view.add_argument("path", help="Path to .properties file")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        print("propfmt - format-preserving .properties editor\n")
        print("Usage:")
        print("  propfmt keys app.properties")
        print("  propfmt get app.properties server.port")
        print("  propfmt get app.properties missing.key -d fallback")
        print("  propfmt set app.properties bind 127.0.0.1")
        print("  propfmt remove app.properties legacy.flag")
        print("  propfmt fmt app.properties --pretty")
        print("  propfmt expand app.properties")
        print("  propfmt check app.properties")
        print("  propfmt view app.properties")
        print()
        print("Run 'propfmt <command> --help' for details on any command.")
        print("Run 'propfmt --version' for version info.")
        sys.exit(0)

    commands = {
        "keys": cmd_keys,
        "values": cmd_values,
        "get": cmd_get,
        "set": cmd_set,
        "remove": cmd_remove,
        "fmt": cmd_fmt,
        "expand": cmd_expand,
        "check": cmd_check,
        "view": cmd_view,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
