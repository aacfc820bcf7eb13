"""Tests for the agentsurface command-line interface."""
from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from agentsurface.cli.main import cli

_SCHEMA = textwrap.dedent(
    """\
    fields:
      - name: system_prompt
        type: string
        default: You are helpful.
      - name: temperature
        type: number
        default: 0.7
        metadata:
          uiConfig:
            type: slider
            min: 0
            max: 2
            step: 0.1
            validator:
              predicateSource: value >= 0 && value <= 2
              message: Temperature must be between 0 and 2
      - name: mcp_config
        type: object
        default: {}
        metadata:
          configType: oap_mcp_tools_config
    """
)


@pytest.fixture()
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture()
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "schema.yaml"
    path.write_text(_SCHEMA, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# version / init
# ---------------------------------------------------------------------------


class TestVersionAndInit:
    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "agentsurface-sdk" in result.output

    def test_init_creates_settings(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["init", "-d", str(tmp_path / "conf")])
        assert result.exit_code == 0
        created = tmp_path / "conf" / "agentsurface.yaml"
        assert created.exists()
        assert "max_predicate_nodes: 256" in created.read_text(encoding="utf-8")

    def test_init_skips_existing(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "agentsurface.yaml").write_text("max_predicate_nodes: 8\n", encoding="utf-8")
        result = runner.invoke(cli, ["init", "-d", str(tmp_path)])
        assert result.exit_code == 0
        assert "Skipping" in result.output
        assert (tmp_path / "agentsurface.yaml").read_text(encoding="utf-8") == "max_predicate_nodes: 8\n"


# ---------------------------------------------------------------------------
# describe / check
# ---------------------------------------------------------------------------


class TestDescribe:
    def test_table(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["describe", str(schema_file)])
        assert result.exit_code == 0
        assert "Configurable fields" in result.output

    def test_json(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["describe", str(schema_file), "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["mcpToolsField"] == "mcp_config"
        assert [f["name"] for f in payload["fields"]] == ["system_prompt", "temperature", "mcp_config"]

    def test_unreadable_schema(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("- name: [unclosed\n", encoding="utf-8")
        result = runner.invoke(cli, ["describe", str(bad)])
        assert result.exit_code == 1

    def test_duplicate_field(self, runner: CliRunner, tmp_path: Path) -> None:
        dup = tmp_path / "dup.yaml"
        dup.write_text("- name: a\n- name: a\n", encoding="utf-8")
        result = runner.invoke(cli, ["describe", str(dup)])
        assert result.exit_code == 1


class TestCheck:
    def test_valid(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["check", str(schema_file)])
        assert result.exit_code == 0
        assert "VALID" in result.output

    def test_degraded_still_exits_zero(self, runner: CliRunner, tmp_path: Path) -> None:
        schema = tmp_path / "degraded.yaml"
        schema.write_text(
            "- name: x\n  type: number\n  metadata:\n    uiConfig:\n      type: slider\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["check", str(schema)])
        assert result.exit_code == 0
        assert "DEGRADED" in result.output

    def test_invalid_exits_one(self, runner: CliRunner, tmp_path: Path) -> None:
        schema = tmp_path / "invalid.yaml"
        schema.write_text(
            "- name: a\n  metadata: {configType: oap_rag_config}\n"
            "- name: b\n  metadata: {configType: oap_rag_config}\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["check", str(schema), "--format", "json"])
        assert result.exit_code == 1
        assert "\"invalid\"" in result.output


# ---------------------------------------------------------------------------
# validate / merge
# ---------------------------------------------------------------------------


class TestValidate:
    def test_ok(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(schema_file), "temperature", "1.5"])
        assert result.exit_code == 0
        assert "temperature: ok" in result.output

    def test_rejected(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(schema_file), "temperature", "3"])
        assert result.exit_code == 1
        assert "Temperature must be between 0 and 2" in result.output

    def test_plain_string_value(self, runner: CliRunner, schema_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(schema_file), "system_prompt", "Be brief."])
        assert result.exit_code == 0


class TestMerge:
    def test_creation(self, runner: CliRunner, schema_file: Path, tmp_path: Path) -> None:
        submission = tmp_path / "submission.json"
        submission.write_text(json.dumps({"temperature": 1.5}), encoding="utf-8")
        result = runner.invoke(cli, ["merge", str(schema_file), str(submission)])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["temperature"] == 1.5
        assert payload["system_prompt"] == "You are helpful."

    def test_update(self, runner: CliRunner, schema_file: Path, tmp_path: Path) -> None:
        previous = tmp_path / "previous.json"
        previous.write_text(
            json.dumps({"system_prompt": "Old", "temperature": 1.2, "mcp_config": {}}),
            encoding="utf-8",
        )
        submission = tmp_path / "submission.yaml"
        submission.write_text("system_prompt: New\n", encoding="utf-8")
        result = runner.invoke(
            cli, ["merge", str(schema_file), str(submission), "--previous", str(previous)]
        )
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["system_prompt"] == "New"
        assert payload["temperature"] == 1.2

    def test_rejections_exit_one(self, runner: CliRunner, schema_file: Path, tmp_path: Path) -> None:
        submission = tmp_path / "submission.json"
        submission.write_text(json.dumps({"temperature": 3, "nonexistent_field": 1}), encoding="utf-8")
        result = runner.invoke(cli, ["merge", str(schema_file), str(submission)])
        assert result.exit_code == 1
        assert "Rejected fields" in result.output

    def test_non_mapping_submission(self, runner: CliRunner, schema_file: Path, tmp_path: Path) -> None:
        submission = tmp_path / "submission.json"
        submission.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(cli, ["merge", str(schema_file), str(submission)])
        assert result.exit_code == 1
