"""Tests for the management CLI using typer's CliRunner."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from src.cli import app
from src.marketplace.runtime.context import with_context

runner = CliRunner()


@pytest.fixture
def file_database(tmp_path: Path):
    """Point the active configuration at a throwaway SQLite file."""
    override = {
        "database": {"url": f"sqlite:///{tmp_path / 'cli.db'}"},
        "constants": {"auth": {"password_cost": 4}},
    }
    with with_context(override):
        yield


class TestUserCommands:
    def test_init_create_admin_and_list(self, file_database):
        result = runner.invoke(app, ["db", "init"])
        assert result.exit_code == 0, result.output
        assert "Database initialized" in result.output

        result = runner.invoke(
            app,
            ["users", "create-admin", "-e", "root@example.com", "-n", "Root", "-p", "admin-password"],
        )
        assert result.exit_code == 0, result.output
        assert "root@example.com" in result.output

        result = runner.invoke(app, ["users", "list"])
        assert result.exit_code == 0, result.output
        assert "root@example.com" in result.output
        assert "admin" in result.output

    def test_duplicate_admin_fails(self, file_database):
        runner.invoke(app, ["db", "init"])
        args = ["users", "create-admin", "-e", "root@example.com", "-n", "Root", "-p", "admin-password"]
        runner.invoke(app, args)

        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_short_password_fails(self, file_database):
        runner.invoke(app, ["db", "init"])

        result = runner.invoke(
            app, ["users", "create-admin", "-e", "root@example.com", "-n", "Root", "-p", "short"]
        )

        assert result.exit_code == 1

    def test_list_empty(self, file_database):
        runner.invoke(app, ["db", "init"])

        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 0
        assert "No users found" in result.output


class TestDbCommands:
    def test_drop_with_force_removes_tables(self, file_database):
        runner.invoke(app, ["db", "init"])
        runner.invoke(app, ["users", "create-admin", "-e", "root@example.com", "-n", "Root", "-p", "admin-password"])

        result = runner.invoke(app, ["db", "drop", "--force"])
        assert result.exit_code == 0, result.output

        runner.invoke(app, ["db", "init"])
        assert "No users found" in runner.invoke(app, ["users", "list"]).output

    def test_drop_cancelled(self, file_database):
        runner.invoke(app, ["db", "init"])

        result = runner.invoke(app, ["db", "drop"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.output
