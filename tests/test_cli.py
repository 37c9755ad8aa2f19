"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from tutorialhub.cli import cli

from conftest import SAMPLE_MANIFEST


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a config file next to the sample content bundle."""
    content_dir = tmp_path / "content"
    content_dir.mkdir()
    (content_dir / "tutorials.toml").write_text(SAMPLE_MANIFEST, encoding="utf-8")
    config_path = tmp_path / "tutorialhub.toml"
    config_path.write_text('[site]\nexpected_categories = ["gcp", "java"]\n', encoding="utf-8")
    return config_path


class TestRoutesCommand:
    """Tests for the routes command."""

    def test__lists_route_paths(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["routes", "-c", str(config_file)])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "/tutorials/gcp/gcp-fundamentals",
            "/tutorials/gcp/gcp-bigquery",
            "/tutorials/gcp/gcp-gke",
            "/tutorials/java/java-basics",
        ]


class TestShowCommand:
    """Tests for the show command."""

    def test__prints_page_model(self, runner: CliRunner, config_file: Path) -> None:
        """Print the assembled page as JSON."""
        result = runner.invoke(cli, ["show", "gcp", "gcp-gke", "-c", str(config_file)])

        assert result.exit_code == 0
        page = json.loads(result.stdout)
        assert page["tutorial"]["title"] == "Kubernetes Engine"
        assert page["sidebar"]["title"] == "Google Cloud Platform Tutorials"
        active = [item["slug"] for items in page["sidebarGroups"].values() for item in items if item["isActive"]]
        assert active == ["gcp-gke"]

    def test__unknown_slug__exits_with_not_found(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["show", "gcp", "gcp-cloud-storage-guide", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Page not found: /tutorials/gcp/gcp-cloud-storage-guide" in result.stderr

    def test__category_mismatch__exits_with_not_found(self, runner: CliRunner, config_file: Path) -> None:
        """Slug exists, but under another category."""
        result = runner.invoke(cli, ["show", "java", "gcp-gke", "-c", str(config_file)])

        assert result.exit_code == 1
        assert result.stdout == ""


class TestCheckCommand:
    """Tests for the check command."""

    def test__reports_counts(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["check", "-c", str(config_file)])

        assert result.exit_code == 0
        assert "OK: 4 tutorials, 4 routes" in result.stdout

    def test__invalid_content__prints_error(self, runner: CliRunner, config_file: Path) -> None:
        """Report content errors in red and exit with status 1."""
        manifest = config_file.parent / "content" / "tutorials.toml"
        manifest.write_text(SAMPLE_MANIFEST.replace('difficulty = "Advanced"', 'difficulty = "Expert"'), encoding="utf-8")

        result = runner.invoke(cli, ["check", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "Error:" in result.stderr
        assert "Expert" in result.stderr

    def test__missing_expected_category__prints_error(self, runner: CliRunner, config_file: Path) -> None:
        config_file.write_text('[site]\nexpected_categories = ["python"]\n', encoding="utf-8")

        result = runner.invoke(cli, ["check", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "python" in result.stderr

    def test__missing_config__fails(self, runner: CliRunner, tmp_path: Path) -> None:
        """Reject a config path that does not exist."""
        result = runner.invoke(cli, ["check", "-c", str(tmp_path / "missing.toml")])

        assert result.exit_code != 0


class TestBuildCommand:
    """Tests for the build command."""

    def test__builds_site(self, runner: CliRunner, config_file: Path, tmp_path: Path) -> None:
        """Build writes output and prints a summary."""
        output_dir = tmp_path / "out"

        result = runner.invoke(cli, ["build", "-c", str(config_file), "-o", str(output_dir)])

        assert result.exit_code == 0
        assert "Built 4 tutorial pages." in result.stdout
        assert "Written: 9" in result.stdout
        assert (output_dir / "tutorials" / "java" / "java-basics.json").exists()

    def test__second_build__reports_unchanged(self, runner: CliRunner, config_file: Path) -> None:
        runner.invoke(cli, ["build", "-c", str(config_file)])

        result = runner.invoke(cli, ["build", "-c", str(config_file)])

        assert result.exit_code == 0
        assert "Written: 0" in result.stdout
        assert "Unchanged: 9" in result.stdout

    def test__no_cache(self, runner: CliRunner, config_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["build", "-c", str(config_file), "--no-cache", "-j", "2"])

        assert result.exit_code == 0
        assert "Cache: disabled" in result.stdout
        assert not (tmp_path / ".cache").exists()

    def test__invalid_jobs__rejected(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["build", "-c", str(config_file), "-j", "0"])

        assert result.exit_code == 2

    def test__clean__rewrites_outputs(self, runner: CliRunner, config_file: Path) -> None:
        runner.invoke(cli, ["build", "-c", str(config_file)])

        result = runner.invoke(cli, ["build", "-c", str(config_file), "--clean"])

        assert result.exit_code == 0
        assert "Written: 9" in result.stdout

    def test__reports_removed_outputs(self, runner: CliRunner, config_file: Path) -> None:
        """Outputs of dropped tutorials are deleted and counted."""
        runner.invoke(cli, ["build", "-c", str(config_file)])
        manifest = config_file.parent / "content" / "tutorials.toml"
        text = manifest.read_text(encoding="utf-8")
        manifest.write_text(text[: text.index('[[tutorials]]\nid = "1"')], encoding="utf-8")
        config_file.write_text('[site]\nexpected_categories = ["gcp"]\n', encoding="utf-8")

        result = runner.invoke(cli, ["build", "-c", str(config_file)])

        assert result.exit_code == 0
        assert "Removed: 2" in result.stdout
        assert not (config_file.parent / "dist" / "tutorials" / "java.json").exists()
