"""Tests für die Kommandozeile (click CliRunner, isoliertes Dateisystem)."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli
from storage.gateway import PersistenceGateway
from storage.kv_store import JsonFileStore


def _gateway() -> PersistenceGateway:
    return PersistenceGateway(JsonFileStore(Path("planner_data") / "store.json"))


@pytest.fixture
def runner():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["config", "init", "--no-demo"])
        assert result.exit_code == 0
        yield runner


class TestCliBasics:
    def test_help(self):
        """main.py --help gibt Usage aus."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    @pytest.mark.parametrize("command", [
        "register", "login", "admin-login", "logout", "whoami", "teacher", "course",
        "unit", "assign", "clear", "grid", "check", "export", "admin",
    ])
    def test_commands_registered(self, command):
        result = CliRunner().invoke(cli, [command, "--help"])
        assert result.exit_code == 0

    def test_config_init_writes_file(self, runner):
        assert Path("config/planner.yaml").exists()
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "Beispieldaten" in result.output


class TestCliSession:
    def test_whoami_without_session(self, runner):
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert "Nicht angemeldet" in result.output

    def test_register_persists_session(self, runner):
        result = runner.invoke(cli, ["register", "alice", "-p", "pw"])
        assert result.exit_code == 0
        result = runner.invoke(cli, ["whoami"])
        assert "alice" in result.output

    def test_duplicate_register_fails(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        result = runner.invoke(cli, ["register", "alice", "-p", "other"])
        assert result.exit_code == 1
        assert "Fehler" in result.output

    def test_wrong_password(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        runner.invoke(cli, ["logout"])
        result = runner.invoke(cli, ["login", "alice", "-p", "falsch"])
        assert result.exit_code == 1

    def test_mutation_requires_login(self, runner):
        result = runner.invoke(cli, ["teacher", "add", "SS", "5"])
        assert result.exit_code == 1


class TestCliPlanning:
    def test_plan_workflow(self, runner):
        """Lehrkraft, Kurs, Einheit anlegen und Stunden zuweisen."""
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        assert runner.invoke(cli, ["teacher", "add", "SS", "5"]).exit_code == 0
        assert runner.invoke(cli, ["course", "add", "BTEC", "--target", "10"]).exit_code == 0

        plan = _gateway().load_plan("alice")
        course_id = plan.courses[0].id
        teacher_id = plan.teachers[0].id
        assert runner.invoke(cli, ["unit", "add", course_id, "Networks"]).exit_code == 0

        unit_id = _gateway().load_plan("alice").courses[0].units[0].id
        result = runner.invoke(cli, ["assign", course_id, unit_id, teacher_id, "3"])
        assert result.exit_code == 0
        assert "2.0" in result.output

        plan = _gateway().load_plan("alice")
        assert plan.courses[0].units[0].assignments == {teacher_id: 3.0}

        result = runner.invoke(cli, ["grid"])
        assert result.exit_code == 0
        assert "BTEC" in result.output
        assert "3.0 / 10.0" in result.output

    def test_check_exit_code(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        runner.invoke(cli, ["teacher", "add", "SS", "1"])
        runner.invoke(cli, ["course", "add", "BTEC"])
        plan = _gateway().load_plan("alice")
        course_id, teacher_id = plan.courses[0].id, plan.teachers[0].id
        runner.invoke(cli, ["unit", "add", course_id, "Networks"])
        unit_id = _gateway().load_plan("alice").courses[0].units[0].id

        assert runner.invoke(cli, ["check"]).exit_code == 0
        runner.invoke(cli, ["assign", course_id, unit_id, teacher_id, "2"])
        assert runner.invoke(cli, ["check"]).exit_code == 1

    def test_export(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        result = runner.invoke(cli, ["export", "-o", "out/plan.xlsx"])
        assert result.exit_code == 0
        assert Path("out/plan.xlsx").exists()


class TestCliAdmin:
    def test_admin_commands_need_admin(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        result = runner.invoke(cli, ["admin", "users"])
        assert result.exit_code == 1

    def test_backup_and_restore(self, runner):
        runner.invoke(cli, ["register", "alice", "-p", "pw"])
        runner.invoke(cli, ["teacher", "add", "SS", "5"])
        result = runner.invoke(cli, ["login", "Frazadmin", "-p", "Frazadmin"])
        assert result.exit_code == 0
        assert "Administrator" in result.output

        result = runner.invoke(cli, ["admin", "users"])
        assert "alice" in result.output

        assert runner.invoke(cli, ["admin", "backup", "-o", "backup.json"]).exit_code == 0
        assert runner.invoke(cli, ["admin", "delete", "alice", "-y"]).exit_code == 0
        assert _gateway().load_plan("alice") is None

        result = runner.invoke(cli, ["admin", "restore", "backup.json", "-y"])
        assert result.exit_code == 0
        assert "1 Konten" in result.output
        assert _gateway().load_plan("alice").teachers[0].name == "SS"
