import json
from pathlib import Path

from typer.testing import CliRunner

from idea_planner.cli import app

runner = CliRunner()


def test_cli_validate_success():
    r = runner.invoke(app, ["validate", "examples/basic-plan.yaml"])
    assert r.exit_code == 0
    assert "OK: 3 nodes in 3 phases" in r.stdout


def test_cli_validate_failure():
    r = runner.invoke(app, ["validate", "examples/invalid-unknown-dep.yaml"])
    assert r.exit_code == 2
    assert "E_UNKNOWN_DEPENDENCY" in r.output


def test_cli_validate_missing_file():
    r = runner.invoke(app, ["validate", "examples/does-not-exist.yaml"])
    assert r.exit_code == 1
    assert "E_FILE_NOT_FOUND" in r.output


def test_cli_validate_json_success():
    r = runner.invoke(app, ["validate", "examples/basic-plan.yaml", "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["command"] == "validate"
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["summary"]["node_count"] == 3


def test_cli_validate_json_failure_contains_codes():
    r = runner.invoke(app, ["validate", "examples/invalid-unknown-dep.yaml", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert {e["code"] for e in payload["errors"]} == {"E_UNKNOWN_DEPENDENCY"}
    assert payload["errors"][0]["source"] == "validate"


def test_cli_validate_synthesized_file(tmp_path: Path):
    out_path = tmp_path / "plan.json"
    r1 = runner.invoke(app, ["synthesize", "AI-powered mobile app for language learning", "--out", str(out_path)])
    assert r1.exit_code == 0, r1.output
    r2 = runner.invoke(app, ["validate", str(out_path)])
    assert r2.exit_code == 0, r2.output
    assert "OK: 11 nodes in 3 phases" in r2.stdout
