"""Unit tests for the JSON / YAML / TOML decoding cascade."""

import datetime
import io

import pytest

from render.exceptions import DecodeError
from render.formats import decode, dump, normalize, to_json, to_yaml


class TestDecode:
    """Tests for decode()."""

    def test_json_object(self) -> None:
        """Test decoding a JSON object."""
        assert decode(b'{"name": "web", "ports": [80, 443]}') == {
            "name": "web",
            "ports": [80, 443],
        }

    def test_json_is_tried_first(self) -> None:
        """Test that JSON wins when the payload is also valid YAML."""
        # YAML 1.1 reads 1e3 as a string, JSON as a number
        assert decode(b'{"n": 1e3}') == {"n": 1000.0}

    def test_yaml_mapping(self) -> None:
        """Test decoding a YAML mapping."""
        data = b"name: web\nports:\n  - 80\n  - 443\n"

        assert decode(data) == {"name": "web", "ports": [80, 443]}

    def test_yaml_keys_are_normalized(self) -> None:
        """Test that YAML integer keys become strings and other keys are dropped."""
        data = b"1: one\ntrue: yes\nnested:\n  2: two\n"

        assert decode(data) == {"1": "one", "nested": {"2": "two"}}

    def test_toml_table(self) -> None:
        """Test decoding TOML that is neither JSON nor YAML."""
        data = b'[server]\nhost = "localhost"\nport = 8080\n'

        assert decode(data) == {"server": {"host": "localhost", "port": 8080}}

    def test_utf8_bom_is_ignored(self) -> None:
        """Test that a leading byte order mark does not break decoding."""
        assert decode(b'\xef\xbb\xbf{"a": 1}') == {"a": 1}

    def test_empty_payload_is_empty_mapping(self) -> None:
        """Test that empty input decodes as an empty TOML document."""
        assert decode(b"") == {}

    def test_sequence_is_rejected(self) -> None:
        """Test that a top-level sequence is not a valid payload."""
        with pytest.raises(DecodeError, match="cannot decode"):
            decode(b"[1, 2, 3]")

    def test_garbage_reports_last_format(self) -> None:
        """Test that the error names the last format tried."""
        with pytest.raises(DecodeError) as exc_info:
            decode(b"{{{ not: [valid")

        assert "toml:" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None


class TestNormalize:
    """Tests for normalize()."""

    def test_recurses_into_lists(self) -> None:
        """Test that mappings inside lists are normalized."""
        assert normalize([{1: "a"}, {None: "b", "c": 3}]) == [{"1": "a"}, {"c": 3}]

    def test_scalars_pass_through(self) -> None:
        """Test that scalars are returned unchanged."""
        assert normalize(3.5) == 3.5
        assert normalize("x") == "x"


class TestEncode:
    """Tests for to_json(), to_yaml() and dump()."""

    def test_to_json_is_compact_and_sorted(self) -> None:
        """Test compact JSON output with sorted keys."""
        assert to_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_to_yaml_block_style(self) -> None:
        """Test that YAML output uses block style."""
        assert to_yaml({"a": [1, 2]}) == "a:\n- 1\n- 2\n"

    def test_dump_writes_pretty_json(self) -> None:
        """Test that dump() writes indented JSON with a trailing newline."""
        stream = io.StringIO()

        dump({"a": 1}, stream)

        assert stream.getvalue() == '{\n  "a": 1\n}\n'

    def test_dump_falls_back_to_yaml(self) -> None:
        """Test that values JSON cannot encode are written as YAML."""
        stream = io.StringIO()

        dump({"day": datetime.date(2024, 1, 2)}, stream)

        assert stream.getvalue() == "day: 2024-01-02\n"
