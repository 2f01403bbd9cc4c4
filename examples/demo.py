"""Parse the sample file, edit it, and show both renderings."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from pathlib import Path

from propfmt.reader import PropReader

props = PropReader.read(Path(__file__).parent / "sample.properties")

print("Keys:")
print(",".join(props.keys()))
print("Values:")
print(",".join(props.values()))

print(f"Default value: {props.get('not.there', 'default!')}")

props.remove("removeme")
props.put("bind", "127.0.0.0")
props.put("str.with.leading.ws", "   \t127.0.0.0")

# Add an empty line, a comment and a property at the end of the file
props.put_empty_line()
props.put_comment("A new comment!")
props.put("new-multiline", "this takes \nmultiple \nlines")

print(f"Alternative server log level: '{props.get('server.alternative.log.level', 'not found')}'")
print(f"Nested grouping 1: {props.get('server.alternative.log.inner.value', 'not found')}")
print(f"Nested grouping 2: {props.get('server.alternative.log.inner2.value', 'not found')}")
print(f"Expanded template: {props.get('server.log.file', 'not found')}")

print("text() pretty printed:")
print("-" * 65)
print(props.text(pretty=True))

print("text() original formatting:")
print("-" * 65)
print(props.text())
