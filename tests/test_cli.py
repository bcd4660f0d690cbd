"""Tests for docsniff CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from docsniff.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config files and DOCSNIFF_* variables from leaking into CLI runs."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ENFORCE_PACKAGE_NAMING",
        "REPORT_MISSING_PHP_VERSION",
        "REQUIRE_TAG_CONTENT",
        "CHECK_FILE_COMMENTS",
        "CHECK_CLASS_COMMENTS",
    ):
        monkeypatch.delenv(f"DOCSNIFF_{name}", raising=False)


@pytest.fixture
def good_dump(php, tmp_path: Path) -> Path:
    """A token dump whose file and class comments are complete."""
    path = tmp_path / "Good.php.json"
    records = php.records(
        php.open_tag(),
        php.doc("File.", "", *php.FILE_TAGS),
        php.ws("\n\n"),
        php.doc("Class.", "", *php.CLASS_TAGS),
        php.ws(),
        php.class_(),
    )
    path.write_text(json.dumps(records))
    return path


@pytest.fixture
def bad_dump(php, tmp_path: Path) -> Path:
    """A token dump with a class comment missing required tags."""
    path = tmp_path / "Bad.php.json"
    records = php.records(
        php.open_tag(),
        php.doc("File.", "", *php.FILE_TAGS),
        php.ws("\n\n"),
        php.doc("Class.", "", "@package my package", "@author Jane"),
        php.ws(),
        php.class_(),
    )
    path.write_text(json.dumps(records))
    return path


def test_version() -> None:
    """Test --version flag shows version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "docsniff version" in result.stdout


def test_help() -> None:
    """Test --help flag shows help."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Check file and class doc comments" in result.stdout


# -----------------------------------------------------------------------------
# Check Command Tests
# -----------------------------------------------------------------------------


class TestCheckCommand:
    """Tests for the check command."""

    def test_check_passes(self, good_dump: Path) -> None:
        """Test a clean dump exits 0 with a success message."""
        result = runner.invoke(app, ["check", str(good_dump)])
        assert result.exit_code == 0
        assert "Success:" in result.stdout
        assert "1 file(s), 0 error(s), 0 warning(s)" in result.stdout

    def test_check_fails(self, bad_dump: Path) -> None:
        """Test reported errors exit with code 2."""
        result = runner.invoke(app, ["check", str(bad_dump)])
        assert result.exit_code == 2
        assert "MissingSubpackageTag" in result.output
        assert "Doc comment check failed" in result.output

    def test_quiet_hides_table(self, bad_dump: Path) -> None:
        """Test --quiet prints only the summary line."""
        result = runner.invoke(app, ["check", "--quiet", str(bad_dump)])
        assert result.exit_code == 2
        assert "MissingSubpackageTag" not in result.output
        assert "Doc comment check failed" in result.output

    def test_json_output(self, good_dump: Path, bad_dump: Path) -> None:
        """Test --json emits one entry per file in input order."""
        result = runner.invoke(app, ["check", "--json", str(good_dump), str(bad_dump)])
        assert result.exit_code == 2

        data = json.loads(result.stdout)
        assert data["status"] == "fail"
        assert data["files_checked"] == 2
        assert [f["status"] for f in data["files"]] == ["pass", "fail"]
        codes = [d["code"] for d in data["files"][1]["diagnostics"]]
        assert codes == ["MissingSubpackageTag"]
        assert data["files"][1]["diagnostics"][0]["kind"] == "missing_required_tag"

    def test_enforce_package_naming(self, bad_dump: Path) -> None:
        """Test --enforce-package-naming adds the InvalidPackage warning."""
        result = runner.invoke(
            app, ["check", "--json", "--enforce-package-naming", str(bad_dump)]
        )
        data = json.loads(result.stdout)
        codes = [d["code"] for d in data["files"][0]["diagnostics"]]
        assert "InvalidPackage" in codes
        assert data["warnings"] == 1

    def test_config_file_respected(self, bad_dump: Path, tmp_path: Path) -> None:
        """Test .docsniffrc in the working directory is picked up."""
        (tmp_path / ".docsniffrc").write_text("enforce_package_naming = true\n")

        result = runner.invoke(app, ["check", "--json", str(bad_dump)])
        codes = [d["code"] for d in json.loads(result.stdout)["files"][0]["diagnostics"]]
        assert "InvalidPackage" in codes

    def test_cli_flag_overrides_config_file(self, bad_dump: Path, tmp_path: Path) -> None:
        """Test --no-enforce-package-naming wins over .docsniffrc."""
        (tmp_path / ".docsniffrc").write_text("enforce_package_naming = true\n")

        result = runner.invoke(
            app, ["check", "--json", "--no-enforce-package-naming", str(bad_dump)]
        )
        codes = [d["code"] for d in json.loads(result.stdout)["files"][0]["diagnostics"]]
        assert "InvalidPackage" not in codes

    def test_php_version_warning_does_not_fail(self, good_dump: Path) -> None:
        """Test warnings alone keep exit code 0."""
        result = runner.invoke(app, ["check", "--report-php-version", str(good_dump)])
        assert result.exit_code == 0
        assert "1 warning(s)" in result.stdout

    def test_invalid_env_config(self, good_dump: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid configuration exits with code 1."""
        monkeypatch.setenv("DOCSNIFF_REQUIRE_TAG_CONTENT", "sometimes")

        result = runner.invoke(app, ["check", str(good_dump)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_unreadable_dump(self, tmp_path: Path) -> None:
        """Test a missing dump is reported as InvalidTokenDump."""
        result = runner.invoke(app, ["check", "--json", str(tmp_path / "missing.json")])
        assert result.exit_code == 2
        data = json.loads(result.stdout)
        assert data["files"][0]["diagnostics"][0]["code"] == "InvalidTokenDump"

    def test_sequential(self, good_dump: Path, bad_dump: Path) -> None:
        """Test --sequential gives the same verdict."""
        result = runner.invoke(app, ["check", "--sequential", str(good_dump), str(bad_dump)])
        assert result.exit_code == 2

    def test_requires_paths(self) -> None:
        """Test check without paths is a usage error."""
        result = runner.invoke(app, ["check"])
        assert result.exit_code != 0


# -----------------------------------------------------------------------------
# Rules Command Tests
# -----------------------------------------------------------------------------


class TestRulesCommand:
    """Tests for the rules command."""

    def test_rules_default_scope(self) -> None:
        """Test the class table is shown by default."""
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "Class comment tags" in result.stdout
        assert "@subpackage" in result.stdout

    def test_rules_json(self) -> None:
        """Test --json lists the file tags in order."""
        result = runner.invoke(app, ["rules", "--scope", "file", "--json"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert data["scope"] == "file"
        assert data["tags"][0] == {
            "tag": "@category",
            "required": False,
            "allow_multiple": False,
            "order": "precedes @package",
        }
        subpackage = next(t for t in data["tags"] if t["tag"] == "@subpackage")
        assert subpackage["required"] is False

    def test_rules_unknown_scope(self) -> None:
        """Test an unknown scope exits with code 1."""
        result = runner.invoke(app, ["rules", "--scope", "method"])
        assert result.exit_code == 1
        assert "Unknown scope" in result.output
