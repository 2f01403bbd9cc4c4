"""
propfmt Stress Tests
====================
Large documents, deep nesting, heavy template use and long multi-line
values, with timings printed for -s runs.

Run:
    python -m pytest tests/test_stress.py -v -s
"""

from __future__ import annotations

import time

from propfmt.document import LineKind
from propfmt.reader import PropReader


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _timer():
    """Simple context-manager stopwatch."""
    class Timer:
        def __init__(self):
            self.elapsed = 0.0
        def __enter__(self):
            self._start = time.perf_counter()
            return self
        def __exit__(self, *_):
            self.elapsed = time.perf_counter() - self._start
    return Timer()


def _report(label: str, elapsed: float, size: int = 0):
    mb = size / (1024 * 1024) if size else 0
    rate = f" ({mb / elapsed:.1f} MB/s)" if size and elapsed > 0 else ""
    print(f"  {label}: {elapsed*1000:.1f} ms{rate}")


# ===================================================================
# 1. LARGE DOCUMENTS
# ===================================================================

class TestLargeDocuments:

    def test_50k_properties_round_trip(self):
        text = "".join(
            f"# entry {i}\nsection{i % 100}.key{i}   =   value {i}\n\n"
            for i in range(50_000)
        )
        data = text.encode("utf-8")

        with _timer() as t:
            props = PropReader.parse(data)
        _report("Parse 50k properties", t.elapsed, len(data))

        with _timer() as t:
            out = props.to_bytes()
        _report("Render 50k properties", t.elapsed, len(out))

        assert len(props) == 50_000
        assert props.get("section7.key49907") == "value 49907"
        assert out == data

    def test_many_edits(self):
        props = PropReader.parse("".join(f"k{i} = {i}\n" for i in range(10_000)))
        for i in range(0, 10_000, 2):
            props.remove(f"k{i}")
        for i in range(10_000, 12_000):
            props.put(f"k{i}", str(i))

        text = props.text()
        assert len(props) == 7_000
        assert "k0 = 0\n" not in text
        assert text.startswith("k1 = 1\nk3 = 3\n")
        assert text.endswith("k11999 = 11999\n")


# ===================================================================
# 2. STRUCTURE
# ===================================================================

class TestStructure:

    def test_deep_nesting(self):
        depth = 500
        lines = []
        for i in range(depth):
            lines += [f"n{i}", "{"]
        lines.append("leaf = yes")
        lines += ["}"] * depth
        text = "\n".join(lines) + "\n"

        props = PropReader.parse(text)
        key = ".".join(f"n{i}" for i in range(depth)) + ".leaf"
        assert props.get_bool(key)
        assert props.text() == text

        pretty = props.text(pretty=True)
        assert " " * (4 * depth) + "leaf = yes\n" in pretty
        assert pretty.endswith("\n}\n")

    def test_template_referenced_many_times(self):
        body = "".join(f"opt{j} = {j}\n" for j in range(20))
        blocks = "".join(f"b{i}\n{{\n%common%\n}}\n" for i in range(1_000))
        text = f"<common>\n{body}</common>\n{blocks}"

        with _timer() as t:
            props = PropReader.parse(text)
        _report("Expand 1000 template references", t.elapsed, len(text))

        assert len(props) == 1_000 * 21
        assert props.get("b999.opt19") == "19"

    def test_long_multiline_value(self):
        text = "v = a \\\n" + "  b \\\n" * 10_000 + "  c\nafter = 1\n"
        props = PropReader.parse(text)

        assert props.get("v") == "a" + "b " * 10_000 + "c"
        assert props.get("after") == "1"
        kinds = [line.kind for line in props.lines]
        assert kinds.count(LineKind.CONTINUATION) == 10_001

    def test_blank_line_runs(self):
        text = "a = 1\n" + "\n" * 10_000 + "b = 2\n"
        props = PropReader.parse(text)
        assert props.text() == text
        assert props.text(pretty=True) == "a = 1\n\nb = 2\n"
