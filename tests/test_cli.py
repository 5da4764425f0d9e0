"""
Integration tests for the il command line.
"""

import json

import pytest
from click.testing import CliRunner

from interloc.cli import cli
from interloc.config import load_config


OLD = """\
product:
  name: {nominal: string}
  age: {nominal: int}
"""

NEW = """\
product:
  name: {nominal: string}
"""


@pytest.fixture
def files(tmp_path):
    """Write old/new interfaces and a couple of locators."""
    paths = {}
    for name, text in {
        "old.yaml": OLD,
        "new.yaml": NEW,
        "name.loc.yaml": "name: tip\n",
        "age.loc.yaml": "age: tip\n",
        "bad.loc.yaml": "email: tip\n",
        "bottom.yaml": "bottom\n",
    }.items():
        path = tmp_path / name
        path.write_text(text)
        paths[name] = str(path)
    return paths


class TestCheck:
    """Tests for il check."""

    def test_added_field_is_compatible(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "--from", files["new.yaml"], "--to", files["old.yaml"]])
        assert result.exit_code == 0
        assert "The interfaces are compatible" in result.output

    def test_removed_field_fails(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-f", files["old.yaml"], "-t", files["new.yaml"]])
        assert result.exit_code == 1
        assert "error: The new interface diverges from the old one at path .age" in result.output
        assert "aren't compatible" in result.output

    def test_locator_hides_unused_field(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "check", "-f", files["old.yaml"], "-t", files["new.yaml"], "-l", files["name.loc.yaml"],
        ])
        assert result.exit_code == 0

    def test_merged_locators_see_used_field(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "check", "-f", files["old.yaml"], "-t", files["new.yaml"],
            "-l", files["name.loc.yaml"], "-l", files["age.loc.yaml"],
        ])
        assert result.exit_code == 1
        assert ".age" in result.output

    def test_diverging_locator_is_usage_error(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "check", "-f", files["old.yaml"], "-t", files["new.yaml"], "-l", files["bad.loc.yaml"],
        ])
        assert result.exit_code == 2
        assert "diverges from the interface at path .email" in result.output
        assert "aren't compatible" not in result.output

    def test_missing_file_is_usage_error(self, files, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "check", "-f", str(tmp_path / "nope.yaml"), "-t", files["new.yaml"],
        ])
        assert result.exit_code == 2
        assert "can't read file" in result.output

    def test_non_utf8_file_is_usage_error(self, files, tmp_path):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"\xff\xfe")
        runner = CliRunner()
        result = runner.invoke(cli, ["check", "-f", str(path), "-t", files["new.yaml"]])
        assert result.exit_code == 2
        assert "not valid UTF-8" in result.output
        assert "aren't compatible" not in result.output

    def test_json_output(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "check", "-f", files["old.yaml"], "-t", files["new.yaml"], "--json",
        ])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["compatible"] is False
        assert data["incompatibilities"][0]["path"] == ".age"
        assert data["incompatibilities"][0]["kind"] == "missing_counterpart"

    def test_bottom_policy_flag(self, files, tmp_path):
        runner = CliRunner()
        args = ["check", "-f", files["old.yaml"], "-t", files["bottom.yaml"], "--config-dir", str(tmp_path)]

        strict = runner.invoke(cli, args)
        assert strict.exit_code == 1
        assert "admits no values" in strict.output

        permissive = runner.invoke(cli, args + ["--bottom", "permissive"])
        assert permissive.exit_code == 0

    def test_bottom_policy_from_config(self, files, tmp_path):
        runner = CliRunner()
        runner.invoke(cli, ["config", "--config-dir", str(tmp_path), "--bottom", "permissive"])
        result = runner.invoke(cli, [
            "check", "-f", files["old.yaml"], "-t", files["bottom.yaml"], "--config-dir", str(tmp_path),
        ])
        assert result.exit_code == 0


class TestOtherCommands:
    """Tests for compare, merge, project and config."""

    def test_compare(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["compare", files["old.yaml"], files["new.yaml"]])
        assert result.exit_code == 0
        assert result.output.strip() == "greater"

        result = runner.invoke(cli, ["compare", files["old.yaml"], files["old.yaml"]])
        assert result.output.strip() == "equal"

    def test_merge(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["merge", files["name.loc.yaml"], files["age.loc.yaml"]])
        assert result.exit_code == 0
        assert result.output == "name: tip\nage: tip\n"

    def test_project(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["project", files["old.yaml"], "-l", files["age.loc.yaml"]])
        assert result.exit_code == 0
        assert "age:" in result.output
        assert "name:" not in result.output

    def test_project_diverging(self, files):
        runner = CliRunner()
        result = runner.invoke(cli, ["project", files["old.yaml"], "-l", files["bad.loc.yaml"]])
        assert result.exit_code == 2

    def test_config_show_and_set(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "--config-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "Bottom policy: strict" in result.output

        result = runner.invoke(cli, ["config", "--config-dir", str(tmp_path), "--no-color"])
        assert result.exit_code == 0
        assert load_config(str(tmp_path)).color is False

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
