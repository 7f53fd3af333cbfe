"""Tests für Konfiguration, Standardwerte und Beispieldaten."""

from pathlib import Path

import pytest

from config.defaults import (
    ADMIN_USERNAME,
    BACKUP_FORMAT_VERSION,
    DEMO_TEACHERS,
    demo_plan,
    empty_plan,
)
from config.manager import ConfigManager
from config.schema import DisplayConfig, PlannerConfig, StorageConfig


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_config_valid(self):
        config = PlannerConfig()
        assert config.seed_demo_data is True
        assert config.display.decimals == 1
        assert config.storage.store_path == Path("planner_data") / "store.json"

    def test_decimals_bounds(self):
        with pytest.raises(Exception):
            DisplayConfig(decimals=5)

    def test_backup_version(self):
        assert BACKUP_FORMAT_VERSION == "2.0"
        assert ADMIN_USERNAME.lower() == "frazadmin"


# ─── BEISPIELDATEN ────────────────────────────────────────────────────────────

class TestDemoPlan:
    def test_demo_teachers(self):
        plan = demo_plan()
        assert len(plan.teachers) == len(DEMO_TEACHERS) == 17
        assert plan.find_teacher("AB").allowance == 18.4
        assert plan.find_teacher("VAC-2").allowance == 0

    def test_demo_courses(self):
        plan = demo_plan()
        assert [c.id for c in plan.courses] == ["c1", "c2", "c3"]
        assert plan.find_course("c3").target_hours is None
        assert plan.find_course("c1").find_unit("c1u7").assignments == {"AI": 2, "SS": 2}

    def test_demo_plan_is_fresh_copy(self):
        """Jeder Aufruf liefert unabhängige Objekte."""
        a, b = demo_plan(), demo_plan()
        assert a == b
        assert a.courses[0].units[0].assignments is not b.courses[0].units[0].assignments

    def test_empty_plan(self):
        assert empty_plan().teachers == []
        assert empty_plan().courses == []

    def test_summary(self):
        text = demo_plan().summary()
        assert "Lehrkräfte: 17" in text
        assert "Kurse: 3 (18 Einheiten)" in text


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        mgr = ConfigManager(tmp_path / "gibt_es_nicht.yaml")
        assert mgr.first_run_check() is True
        assert mgr.load() == PlannerConfig()

    def test_save_and_load(self, tmp_path: Path):
        path = tmp_path / "cfg" / "planner.yaml"
        mgr = ConfigManager(path)
        config = PlannerConfig(
            storage=StorageConfig(data_dir=tmp_path / "data"),
            display=DisplayConfig(decimals=2, warn_remaining_below=2.5),
            seed_demo_data=False,
        )
        mgr.save(config)
        assert path.exists()
        assert mgr.first_run_check() is False
        loaded = mgr.load()
        assert loaded.display.decimals == 2
        assert loaded.display.warn_remaining_below == 2.5
        assert loaded.seed_demo_data is False
        assert loaded.storage.data_dir == tmp_path / "data"

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        path = tmp_path / "planner.yaml"
        ConfigManager(path).save(PlannerConfig())
        text = path.read_text(encoding="utf-8")
        assert "Kursplaner" in text
        assert "─── Speicher ───" in text

    def test_invalid_config_raises(self, tmp_path: Path):
        path = tmp_path / "planner.yaml"
        path.write_text("display:\n  decimals: 9\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager(path).load()

    def test_empty_yaml_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "planner.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigManager(path).load() == PlannerConfig()
