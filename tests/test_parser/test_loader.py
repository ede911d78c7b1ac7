"""Tests for restcli.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from restcli.exceptions import SpecParseError
from restcli.parser.loader import load_spec, parse_spec_text, validate_openapi_version

_YAML_DOC = textwrap.dedent("""\
    openapi: "3.0.3"
    info:
      title: YAML Items
      version: "1.0.0"
    paths:
      /items:
        get:
          summary: List
""")


def _response(url: str, **kwargs) -> httpx.Response:
    return httpx.Response(request=httpx.Request("GET", url), **kwargs)


# ---------------------------------------------------------------------------
# load_spec
# ---------------------------------------------------------------------------


class TestLoadSpecFromFile:
    def test_json_file(self, items_api_path: Path) -> None:
        result = load_spec(str(items_api_path))
        assert result["openapi"] == "3.0.3"
        assert result["info"]["title"] == "Items API"

    @pytest.mark.parametrize("suffix", [".yaml", ".yml"])
    def test_yaml_file(self, tmp_path: Path, suffix: str) -> None:
        doc = tmp_path / f"api{suffix}"
        doc.write_text(_YAML_DOC, encoding="utf-8")
        assert load_spec(str(doc))["paths"]["/items"]["get"]["summary"] == "List"

    def test_unknown_extension_detected_from_content(self, tmp_path: Path) -> None:
        doc = tmp_path / "api.txt"
        doc.write_text(_YAML_DOC, encoding="utf-8")
        assert load_spec(str(doc))["info"]["title"] == "YAML Items"

    def test_missing_file(self) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            load_spec("/nonexistent/items.json")

    def test_empty_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "empty.json"
        doc.write_text("  \n", encoding="utf-8")
        with pytest.raises(SpecParseError, match="empty"):
            load_spec(str(doc))

    def test_invalid_json_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "bad.json"
        doc.write_text("{invalid", encoding="utf-8")
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            load_spec(str(doc))


class TestLoadSpecFromStdin:
    def test_reads_stdin(self) -> None:
        with patch("restcli.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(json.dumps({"openapi": "3.0.0", "info": {}}))
            assert load_spec("-")["openapi"] == "3.0.0"

    def test_empty_stdin(self) -> None:
        with patch("restcli.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(" \n")
            with pytest.raises(SpecParseError, match="No input"):
                load_spec("-")


class TestLoadSpecFromUrl:
    def test_json_response(self) -> None:
        url = "https://example.com/openapi.json"
        response = _response(url, status_code=200, json={"openapi": "3.1.0"})
        with patch("restcli.parser.loader.httpx.get", return_value=response) as get:
            assert load_spec(url) == {"openapi": "3.1.0"}
        get.assert_called_once()

    def test_yaml_response(self) -> None:
        url = "https://example.com/openapi.yaml"
        response = _response(
            url,
            status_code=200,
            text=_YAML_DOC,
            headers={"content-type": "application/yaml"},
        )
        with patch("restcli.parser.loader.httpx.get", return_value=response):
            assert load_spec(url)["info"]["title"] == "YAML Items"

    def test_http_error(self) -> None:
        url = "https://example.com/missing.json"
        with patch(
            "restcli.parser.loader.httpx.get",
            return_value=_response(url, status_code=404),
        ):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                load_spec(url)

    def test_connection_error(self) -> None:
        with patch(
            "restcli.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                load_spec("https://unreachable.example.com/openapi.json")


# ---------------------------------------------------------------------------
# parse_spec_text
# ---------------------------------------------------------------------------


class TestParseSpecText:
    def test_json(self) -> None:
        assert parse_spec_text('{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_yaml_fallback(self) -> None:
        assert parse_spec_text("openapi: 3.0.0\n") == {"openapi": "3.0.0"}

    def test_json_hint_rejects_yaml(self) -> None:
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            parse_spec_text("openapi: 3.0.0", hint="json")

    def test_garbage(self) -> None:
        with pytest.raises(SpecParseError, match="Failed to parse"):
            parse_spec_text("}{ not a document ][")

    @pytest.mark.parametrize("text", ['"a string"', "[1, 2]", "---\n"])
    def test_top_level_must_be_object(self, text: str) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            parse_spec_text(text)


# ---------------------------------------------------------------------------
# validate_openapi_version
# ---------------------------------------------------------------------------


class TestValidateOpenAPIVersion:
    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0", "3.2.0"])
    def test_accepts_3x(self, version: str) -> None:
        assert validate_openapi_version({"openapi": version}) == version

    def test_numeric_version(self) -> None:
        assert validate_openapi_version({"openapi": 3.0}) == "3.0"

    def test_rejects_swagger(self) -> None:
        with pytest.raises(SpecParseError, match="Swagger 2.0"):
            validate_openapi_version({"swagger": "2.0"})

    def test_rejects_missing_field(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'openapi' field"):
            validate_openapi_version({"info": {}})

    @pytest.mark.parametrize("version", ["2.0.0", "4.0.0"])
    def test_rejects_other_major_versions(self, version: str) -> None:
        with pytest.raises(SpecParseError, match="Unsupported OpenAPI version"):
            validate_openapi_version({"openapi": version})
