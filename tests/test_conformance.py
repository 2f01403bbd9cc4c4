"""
propfmt Conformance Tests

Shared test vectors for round-trip fidelity, key qualification, value
escaping and pretty rendering. The vectors are plain JSON so other
readers of the format can run the same cases.
"""

import json
from pathlib import Path

import pytest

from propfmt.reader import PropReader
from propfmt.spec import escape_value, unescape_value


VECTORS_PATH = Path(__file__).parent / "conformance" / "vectors.json"

@pytest.fixture(scope="module")
def vectors():
    with open(VECTORS_PATH, encoding="utf-8") as f:
        return json.load(f)


# ================================================================
# Round-Trip Tests
# ================================================================

class TestRoundTrip:
    """Unmodified documents render back to their exact input."""

    def test_conformance_vectors(self, vectors):
        for case in vectors["roundtrip"]["cases"]:
            inp = case["input"]
            out = PropReader.parse(inp).text()
            assert out == inp, f"[{case['desc']}] rendered {out!r}, expected {inp!r}"

    def test_bytes_round_trip(self, vectors):
        for case in vectors["roundtrip"]["cases"]:
            data = case["input"].encode("utf-8")
            assert PropReader.parse(data).to_bytes() == data, case["desc"]

    def test_round_trip_is_stable(self, vectors):
        for case in vectors["roundtrip"]["cases"]:
            once = PropReader.parse(case["input"]).text()
            assert PropReader.parse(once).text() == once, case["desc"]


# ================================================================
# Key Qualification Tests
# ================================================================

class TestQualification:

    def test_conformance_vectors(self, vectors):
        for case in vectors["qualification"]["cases"]:
            props = PropReader.parse(case["input"])
            expected = case["expected"]
            assert props.keys() == list(expected), case["desc"]
            for key, value in expected.items():
                assert props.get(key, "<missing>") == value, f"[{case['desc']}] {key}"


# ================================================================
# Escape Tests
# ================================================================

class TestEscape:
    """Every escape case must round-trip: unescape(escape(x)) == x."""

    def test_conformance_vectors(self, vectors):
        for case in vectors["escape"]["cases"]:
            escaped = escape_value(case["value"])
            assert escaped == case["escaped"], (
                f"[{case['desc']}] escape({case['value']!r}) = {escaped!r}"
            )
            assert unescape_value(escaped) == case["value"], case["desc"]

    def test_escaped_values_survive_a_file(self, vectors):
        for case in vectors["escape"]["cases"]:
            props = PropReader.parse("k = x\n")
            props.put("k", case["value"])
            reread = PropReader.parse(props.text())
            assert reread.get("k") == case["value"].rstrip(), case["desc"]


# ================================================================
# Pretty Rendering Tests
# ================================================================

class TestPretty:

    def test_conformance_vectors(self, vectors):
        for case in vectors["pretty"]["cases"]:
            out = PropReader.parse(case["input"]).text(pretty=True)
            assert out == case["pretty"], f"[{case['desc']}] rendered {out!r}"

    def test_idempotent(self, vectors):
        for case in vectors["pretty"]["cases"]:
            once = PropReader.parse(case["input"]).text(pretty=True)
            assert PropReader.parse(once).text(pretty=True) == once, case["desc"]
