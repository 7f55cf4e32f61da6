"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from mohero_admin.cli import main
from mohero_admin.commands.base import format_table, truncate


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(tmp_path):
    """Point the CLI at a temporary local database."""
    return {
        "MOHERO_BACKEND_URL": "",
        "MOHERO_DATABASE_PATH": str(tmp_path / "mohero.db"),
        "MOHERO_LOG_LEVEL": "WARNING",
    }


class TestCli:
    """Tests for CLI commands."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "mohero-admin" in result.output

    def test_init_seeds_bank(self, runner, env):
        """Test that init creates the database and seeds the bank."""
        result = runner.invoke(main, ["init"], env=env)
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["bank", "list", "--type", "breathing"], env=env)
        assert result.exit_code == 0
        assert "Box Breathing" in result.output

    def test_empty_program_list(self, runner, env):
        result = runner.invoke(main, ["programs", "list"], env=env)
        assert result.exit_code == 0
        assert "No programs found" in result.output

    def test_stats_lists_clans(self, runner, env):
        result = runner.invoke(main, ["stats"], env=env)
        assert result.exit_code == 0, result.output
        assert "By clan:" in result.output

    def test_missing_program_exits_with_error(self, runner, env):
        """Test that domain errors become exit code 1."""
        result = runner.invoke(main, ["days", "sync", "missing"], env=env)
        assert result.exit_code == 1


class TestFormatting:
    """Tests for output helpers."""

    def test_format_table(self):
        table = format_table(["ID", "Name"], [["1", "Push-ups"], ["22", "Plank"]])
        lines = table.splitlines()

        assert lines[0].startswith("ID")
        assert "Push-ups" in lines[2]
        assert len(lines) == 4

    def test_format_table_empty(self):
        assert format_table(["ID"], []) == ""

    def test_truncate(self):
        assert truncate("short") == "short"
        assert truncate("x" * 40, width=10) == "x" * 10 + "..."
