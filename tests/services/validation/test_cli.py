import json
from pathlib import Path

import pytest
import yaml

from iglu_client.validation.cli import EXIT_INVALID, EXIT_USAGE, EXIT_VALID, main

EVENT_URI = "iglu:com.acme/event/jsonschema/1-0-0"


def _build_repo(tmp_path: Path) -> Path:
    schema_path = tmp_path / "repo" / "schemas" / "com.acme" / "event" / "jsonschema" / "1-0-0"
    schema_path.parent.mkdir(parents=True)
    schema_path.write_text(
        json.dumps({"type": "object", "properties": {"id": {"type": "string"}}, "required": ["id"]}),
        encoding="utf-8",
    )
    config_path = tmp_path / "resolver.yaml"
    config_path.write_text(
        yaml.safe_dump({"resolver": {"repositories": [{"name": "acme", "path": "repo"}]}}),
        encoding="utf-8",
    )
    return config_path


def _write_input(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "input.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _last_json_line(capsys: pytest.CaptureFixture[str]) -> dict:
    out = capsys.readouterr().out.strip().splitlines()
    return json.loads(out[-1])


def test_cli_valid_instance(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _build_repo(tmp_path)
    source = _write_input(tmp_path, {"schema": EVENT_URI, "data": {"id": "a"}})
    code = main(["--input", str(source), "--resolver-config", str(config), "--data-only"])
    assert code == EXIT_VALID
    assert _last_json_line(capsys) == {"valid": True, "schema": EVENT_URI, "data": {"id": "a"}}


def test_cli_invalid_instance(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _build_repo(tmp_path)
    source = _write_input(tmp_path, {"schema": EVENT_URI, "data": {"id": 1}})
    code = main(["--input", str(source), "--resolver-config", str(config)])
    assert code == EXIT_INVALID
    report = _last_json_line(capsys)
    assert report["valid"] is False
    assert report["errors"][0]["keyword"] == "type"
    assert report["errors"][0]["jsonPath"] == "/data/id"
    assert report["errors"][0]["kind"] == "STRUCTURAL_VIOLATION"


def test_cli_criterion_mismatch(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _build_repo(tmp_path)
    source = _write_input(tmp_path, {"schema": EVENT_URI, "data": {"id": "a"}})
    code = main(
        [
            "--input",
            str(source),
            "--resolver-config",
            str(config),
            "--criterion",
            "iglu:com.acme/event/jsonschema/2-*-*",
        ]
    )
    assert code == EXIT_INVALID
    assert _last_json_line(capsys)["errors"][0]["kind"] == "SCHEMA_CRITERION_MISMATCH"


def test_cli_schema_only_uses_embedded_schemas(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write_input(tmp_path, {"schema": "iglu:com.acme/unknown/jsonschema/1-0-0", "data": 1})
    assert main(["--input", str(source), "--schema-only"]) == EXIT_VALID
    assert _last_json_line(capsys)["valid"] is True


def test_cli_unreadable_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{", encoding="utf-8")
    assert main(["--input", str(source)]) == EXIT_USAGE
    assert _last_json_line(capsys)["valid"] is False
