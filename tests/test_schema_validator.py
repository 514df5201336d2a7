"""Tests for the schema_validator.py module."""

import json
import logging
import shutil
from pathlib import Path

import pytest

from schema_validator import (
    BASE_DIR,
    generate_sample_outputs,
    run_tool,
    validate_tool_schemas,
)

TOOL_NAMES = ["honeycomb_form_validation", "time_period_validation"]


@pytest.fixture
def project_copy(tmp_path):
    """Copy of the schemas and tool manifests that tests can modify."""
    shutil.copytree(BASE_DIR / "schemas", tmp_path / "schemas")
    for tool_name in TOOL_NAMES:
        (tmp_path / "tools" / tool_name).mkdir(parents=True)
        shutil.copy(
            BASE_DIR / "tools" / tool_name / "manifest.json",
            tmp_path / "tools" / tool_name / "manifest.json",
        )
    return tmp_path


class TestRunTool:
    """Test cases for run_tool function."""

    def test_run_time_period_tool(self):
        """Test running the time period tool on raw input."""
        output = run_tool(
            "time_period_validation",
            {"value": {"from": "2024-01-01", "to": "2024-01-02"}, "is_date_only": True},
        )

        assert output["valid"] is True
        assert output["period"] == {"from": 1704067200, "to": 1704153600}

    def test_run_honeycomb_tool(self):
        """Test running the honeycomb tool on raw input."""
        output = run_tool("honeycomb_form_validation", {"fields": {}})

        assert output["valid"] is False

    def test_run_tool_missing_entry(self, tmp_path):
        """Test that a manifest naming an unknown function is rejected."""
        tool_dir = tmp_path / "tools" / "time_period_validation"
        tool_dir.mkdir(parents=True)
        (tool_dir / "manifest.json").write_text(json.dumps({"entry_function": "missing"}))

        with pytest.raises(AttributeError):
            run_tool("time_period_validation", {}, tmp_path)


class TestValidateToolSchemas:
    """Test cases for validate_tool_schemas function."""

    @pytest.mark.parametrize("ci", ["true", "false"])
    def test_project_schemas_are_valid(self, monkeypatch, ci):
        """Test that tool outputs match their schemas, locally and in CI."""
        monkeypatch.setenv("CI", ci)

        assert validate_tool_schemas() is True

    def test_invalid_sample_output(self, monkeypatch, project_copy, caplog):
        """Test that an output not matching its schema is reported."""
        monkeypatch.setenv("CI", "true")
        sample = project_copy / "schemas" / "time_period_validation" / "sample_output.json"
        sample.write_text(json.dumps({"valid": "yes"}))

        with caplog.at_level(logging.ERROR, logger="schema_validator"):
            assert validate_tool_schemas(project_copy) is False

        assert "time_period_validation validation failed" in caplog.text

    def test_missing_sample_output(self, monkeypatch, project_copy, caplog):
        """Test that a missing sample output fails in CI."""
        monkeypatch.setenv("CI", "true")
        (project_copy / "schemas" / "honeycomb_form_validation" / "sample_output.json").unlink()

        with caplog.at_level(logging.ERROR, logger="schema_validator"):
            assert validate_tool_schemas(project_copy) is False

        assert "honeycomb_form_validation: No sample_output.json" in caplog.text


class TestGenerateSampleOutputs:
    """Test cases for generate_sample_outputs function."""

    def test_generated_outputs_match_committed_samples(self, project_copy):
        """Test that regenerating the samples reproduces the committed files."""
        generate_sample_outputs(project_copy)

        for tool_name in TOOL_NAMES:
            generated = project_copy / "schemas" / tool_name / "sample_output.json"
            committed = Path(BASE_DIR) / "schemas" / tool_name / "sample_output.json"
            assert json.loads(generated.read_text()) == json.loads(committed.read_text())
