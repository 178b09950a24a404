"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from attrstrip.cli import collect_source_files, main

SOURCE = '<div data-testid="t" data-cy="c" className="c">x</div>\n'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.tsx").write_text(SOURCE)
    (src / "util.ts").write_text("export const x: number = 1;\n")
    (src / "notes.md").write_text("# not code\n")
    modules = tmp_path / "node_modules" / "pkg"
    modules.mkdir(parents=True)
    (modules / "index.js").write_text(SOURCE)
    return tmp_path


class TestCollectSourceFiles:
    """Tests for collect_source_files."""

    def test_collect_from_directory(self, project):
        """Test collecting sources from a directory."""
        files = collect_source_files((project,))
        assert files == [project / "src" / "App.tsx", project / "src" / "util.ts"]

    def test_collect_single_file(self, project):
        """Test that explicit files are always collected."""
        target = project / "src" / "notes.md"
        assert collect_source_files((target,)) == [target]


class TestStrip:
    """Tests for the strip command."""

    def test_stdout(self, runner, project):
        """Test printing the result to stdout."""
        target = project / "src" / "App.tsx"
        result = runner.invoke(main, ["strip", str(target), "-a", "data-testid", "--stdout"])

        assert result.exit_code == 0, result.output
        assert result.stdout == '<div data-cy="c" className="c">x</div>\n'
        assert target.read_text() == SOURCE

    def test_regex_rule(self, runner, project):
        """Test a regex rule from the command line."""
        target = project / "src" / "App.tsx"
        result = runner.invoke(main, ["strip", str(target), "-a", "/^data-/", "--stdout"])

        assert result.exit_code == 0, result.output
        assert result.stdout == '<div className="c">x</div>\n'

    def test_stdout_requires_single_file(self, runner, project):
        """Test that --stdout rejects directories."""
        result = runner.invoke(main, ["strip", str(project), "-a", "data-testid", "--stdout"])
        assert result.exit_code == 2

    def test_write(self, runner, project):
        """Test rewriting files in place."""
        result = runner.invoke(main, ["strip", str(project), "-a", "data-testid", "-a", "data-cy", "--write"])

        assert result.exit_code == 0, result.output
        assert (project / "src" / "App.tsx").read_text() == '<div className="c">x</div>\n'
        assert (project / "node_modules" / "pkg" / "index.js").read_text() == SOURCE
        assert "2 attribute(s) in 1 file(s)" in result.stdout

    def test_write_source_map(self, runner, project):
        """Test writing .map files."""
        result = runner.invoke(
            main, ["strip", str(project), "-a", "data-testid", "--write", "--source-map"]
        )

        assert result.exit_code == 0, result.output
        source_map = json.loads((project / "src" / "App.tsx.map").read_text())
        assert source_map["version"] == 3
        assert source_map["sourcesContent"] == [SOURCE]

    def test_dry_run_leaves_files(self, runner, project):
        """Test that files are untouched without --write."""
        result = runner.invoke(main, ["strip", str(project), "-a", "data-testid"])

        assert result.exit_code == 0, result.output
        assert (project / "src" / "App.tsx").read_text() == SOURCE
        assert "Would strip" in result.stdout

    def test_check_fails_when_attributes_found(self, runner, project):
        """Test that --check fails on matches."""
        result = runner.invoke(main, ["strip", str(project), "-a", "data-testid", "--check"])
        assert result.exit_code == 1

    def test_check_passes_when_clean(self, runner, project):
        """Test that --check passes without matches."""
        result = runner.invoke(main, ["strip", str(project), "-a", "data-qa", "--check"])
        assert result.exit_code == 0, result.output
        assert "No matching attributes found" in result.stdout

    def test_exclude(self, runner, project):
        """Test the --exclude option."""
        result = runner.invoke(
            main, ["strip", str(project), "-a", "data-testid", "--exclude", "**/*.tsx", "--check"]
        )
        assert result.exit_code == 0, result.output

    def test_development_mode(self, runner, project):
        """Test that development mode writes nothing."""
        result = runner.invoke(
            main, ["strip", str(project), "-a", "data-testid", "--mode", "development", "--write"]
        )

        assert result.exit_code == 0, result.output
        assert "disabled in development mode" in result.stdout
        assert (project / "src" / "App.tsx").read_text() == SOURCE

    def test_config_file(self, runner, project):
        """Test loading rules from a config file."""
        config = project / "attrstrip.yaml"
        config.write_text("attributes:\n  - /^data-/\n")

        target = project / "src" / "App.tsx"
        result = runner.invoke(main, ["--config", str(config), "strip", str(target), "--stdout"])

        assert result.exit_code == 0, result.output
        assert result.stdout == '<div className="c">x</div>\n'

    def test_invalid_config_file(self, runner, project):
        """Test that a bad config file exits with an error."""
        config = project / "attrstrip.yaml"
        config.write_text("mode: staging\n")

        result = runner.invoke(main, ["--config", str(config), "strip", str(project)])
        assert result.exit_code == 2

    def test_invalid_rule(self, runner, project):
        """Test that a bad rule exits with an error."""
        result = runner.invoke(main, ["strip", str(project), "-a", "/(/"])
        assert result.exit_code == 2


class TestMatch:
    """Tests for the match command."""

    def test_match_names(self, runner):
        """Test the match command."""
        result = runner.invoke(main, ["match", "data-testid", "className", "-a", "re:^data-"])

        assert result.exit_code == 0, result.output
        lines = [line for line in result.stdout.splitlines() if "data-testid" in line or "className" in line]
        assert any("data-testid" in line and "yes" in line for line in lines)
        assert any("className" in line and "no" in line for line in lines)
