"""Tests für Schlüssel-Wert-Speicher, Persistenz-Gateway und Backups."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from accounts.errors import InvalidBackupFormat, StorageError
from config.defaults import SESSION_KEY, USERS_KEY, demo_plan
from models.account import AccountRecord, SessionPointer
from models.plan import PlanData
from storage.backup import (
    apply_backup,
    build_backup,
    default_backup_name,
    read_backup_file,
    write_backup_file,
)
from storage.gateway import PersistenceGateway, user_data_key
from storage.kv_store import JsonFileStore, MemoryStore

T0 = datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc)


class _FailingStore(MemoryStore):
    """Simuliert vollen Speicher (Quota überschritten)."""

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


class _CountingStore(MemoryStore):
    """Zählt Lesezugriffe."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.reads = 0

    def get(self, key: str):
        self.reads += 1
        return super().get(key)


@pytest.fixture
def gateway() -> PersistenceGateway:
    return PersistenceGateway(MemoryStore())


# ─── Speicher ─────────────────────────────────────────────────────────────────

class TestStores:
    def test_memory_store_roundtrip(self):
        store = MemoryStore()
        store.set("a", "1")
        assert store.get("a") == "1"
        store.remove("a")
        assert store.get("a") is None
        store.remove("a")  # Entfernen eines fehlenden Schlüssels ist erlaubt

    def test_json_file_store_persists(self, tmp_path: Path):
        path = tmp_path / "data" / "store.json"
        JsonFileStore(path).set("k", "v")
        assert path.exists()
        assert JsonFileStore(path).get("k") == "v"
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_json_file_store_corrupt_file_is_empty(self, tmp_path: Path):
        path = tmp_path / "store.json"
        path.write_text("{nicht json", encoding="utf-8")
        store = JsonFileStore(path)
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_json_file_store_invalid_utf8_is_empty(self, tmp_path: Path):
        """Nicht dekodierbare Bytes gelten wie kaputtes JSON als leerer Speicher."""
        path = tmp_path / "store.json"
        path.write_bytes(b'{"planner_users": "\xff\xfe"}')
        gw = PersistenceGateway(JsonFileStore(path))
        assert gw.load_registry() == {}
        assert gw.load_session() is None
        assert gw.save_registry({"anna": AccountRecord(password="pw")}) is True
        assert list(gw.load_registry()) == ["anna"]

    def test_json_file_store_remove(self, tmp_path: Path):
        store = JsonFileStore(tmp_path / "store.json")
        store.set("a", "1")
        store.set("b", "2")
        store.remove("a")
        assert store.get("a") is None
        assert store.get("b") == "2"


# ─── Gateway ──────────────────────────────────────────────────────────────────

class TestGateway:
    def test_registry_roundtrip(self, gateway: PersistenceGateway):
        registry = {"anna": AccountRecord(password="pw", last_login=T0)}
        assert gateway.save_registry(registry) is True
        loaded = gateway.load_registry()
        assert loaded["anna"].password == "pw"
        assert loaded["anna"].last_login == T0

    def test_registry_storage_format(self, gateway: PersistenceGateway):
        gateway.save_registry({"anna": AccountRecord(password="pw", last_login=T0)})
        raw = json.loads(gateway.store.get(USERS_KEY))
        assert raw["anna"]["password"] == "pw"
        assert raw["anna"]["lastLogin"].startswith("2026-10-01T08:30:00")

    def test_corrupt_registry_is_empty(self):
        gw = PersistenceGateway(MemoryStore({USERS_KEY: "{kaputt"}))
        assert gw.load_registry() == {}

    def test_registry_non_object_is_empty(self):
        gw = PersistenceGateway(MemoryStore({USERS_KEY: "[1, 2]"}))
        assert gw.load_registry() == {}

    def test_invalid_record_skipped(self):
        raw = json.dumps({"ok": {"password": "pw"}, "bad": {"lastLogin": "x"}})
        gw = PersistenceGateway(MemoryStore({USERS_KEY: raw}))
        assert list(gw.load_registry()) == ["ok"]

    def test_plan_roundtrip(self, gateway: PersistenceGateway):
        plan = demo_plan()
        gateway.save_plan("anna", plan)
        assert gateway.load_plan("anna") == plan

    def test_plan_storage_format(self, gateway: PersistenceGateway):
        gateway.save_plan("anna", demo_plan())
        raw = json.loads(gateway.store.get(user_data_key("anna")))
        assert set(raw) == {"teachers", "courses"}
        assert raw["courses"][0]["targetHours"] == 360
        assert "targetHours" not in raw["courses"][2]   # Kurs ohne Soll

    def test_missing_plan_is_none(self, gateway: PersistenceGateway):
        assert gateway.load_plan("niemand") is None

    def test_corrupt_plan_is_empty(self):
        gw = PersistenceGateway(MemoryStore({user_data_key("anna"): "{{{"}))
        assert gw.load_plan("anna") == PlanData()

    def test_invalid_plan_structure_is_empty(self):
        gw = PersistenceGateway(MemoryStore({user_data_key("anna"): '{"teachers": 5}'}))
        assert gw.load_plan("anna") == PlanData()

    def test_load_plan_reads_store_once(self):
        store = _CountingStore({user_data_key("anna"): json.dumps(demo_plan().to_storage())})
        plan = PersistenceGateway(store).load_plan("anna")
        assert plan == demo_plan()
        assert store.reads == 1

    def test_write_failure_reported(self):
        gw = PersistenceGateway(_FailingStore())
        assert gw.save_plan("anna", demo_plan()) is False
        assert gw.save_registry({}) is False

    def test_session_pointer_user(self, gateway: PersistenceGateway):
        gateway.save_session(SessionPointer(username="anna", last_login=T0))
        raw = json.loads(gateway.store.get(SESSION_KEY))
        assert raw["username"] == "anna"
        assert "isAdmin" not in raw
        assert gateway.load_session().username == "anna"

    def test_session_pointer_admin(self, gateway: PersistenceGateway):
        gateway.save_session(SessionPointer(username="Admin", is_admin=True))
        assert json.loads(gateway.store.get(SESSION_KEY)) == {"isAdmin": True, "username": "Admin"}
        assert gateway.load_session().is_admin is True

    def test_clear_session(self, gateway: PersistenceGateway):
        gateway.save_session(SessionPointer(username="anna"))
        gateway.clear_session()
        assert gateway.load_session() is None


# ─── Backup ───────────────────────────────────────────────────────────────────

def _seed(gateway: PersistenceGateway) -> None:
    gateway.save_registry({
        "anna": AccountRecord(password="a", last_login=T0),
        "bert": AccountRecord(password="b"),
    })
    gateway.save_plan("anna", demo_plan())


class TestBackup:
    def test_build_backup(self, gateway: PersistenceGateway):
        _seed(gateway)
        doc = build_backup(gateway)
        assert doc.version == "2.0"
        assert set(doc.users) == {"anna", "bert"}
        assert set(doc.user_data) == {"anna"}   # bert hat keine Planung

    def test_roundtrip_into_empty_store(self, gateway: PersistenceGateway):
        _seed(gateway)
        exported = build_backup(gateway).to_storage()

        target = PersistenceGateway(MemoryStore())
        result = apply_backup(target, exported)
        assert sorted(result.users_restored) == ["anna", "bert"]
        assert result.plans_restored == ["anna"]
        assert target.load_registry() == gateway.load_registry()
        assert target.load_plan("anna") == gateway.load_plan("anna")
        assert target.load_plan("bert") is None

    def test_missing_users_raises(self, gateway: PersistenceGateway):
        with pytest.raises(InvalidBackupFormat):
            apply_backup(gateway, {"version": "2.0", "userData": {}})

    def test_non_dict_document_raises(self, gateway: PersistenceGateway):
        with pytest.raises(InvalidBackupFormat):
            apply_backup(gateway, ["users"])

    def test_merge_keeps_other_users(self, gateway: PersistenceGateway):
        """Benutzer, die im Backup fehlen, bleiben unverändert."""
        _seed(gateway)
        gateway.save_plan("bert", PlanData())
        apply_backup(gateway, {"users": {"anna": {"password": "neu"}}})
        registry = gateway.load_registry()
        assert registry["anna"].password == "neu"
        assert registry["bert"].password == "b"
        assert gateway.load_plan("bert") == PlanData()
        # Ohne userData-Eintrag bleibt annas Planung wie sie war
        assert gateway.load_plan("anna") == demo_plan()

    def test_malformed_user_data_skipped(self, gateway: PersistenceGateway):
        doc = {
            "users": {"anna": {"password": "a"}, "bert": {"password": "b"}},
            "userData": {"anna": {"teachers": "kaputt"}, "bert": demo_plan().to_storage()},
        }
        result = apply_backup(gateway, doc)
        assert result.plans_restored == ["bert"]
        assert gateway.load_plan("anna") is None

    def test_user_data_not_a_mapping(self, gateway: PersistenceGateway):
        result = apply_backup(gateway, {"users": {"anna": {"password": "a"}}, "userData": 42})
        assert result.users_restored == ["anna"]
        assert result.plans_restored == []

    def test_file_roundtrip(self, gateway: PersistenceGateway, tmp_path: Path):
        _seed(gateway)
        path = write_backup_file(build_backup(gateway), tmp_path / "b" / default_backup_name(T0))
        assert path.name == "planner_backup_2026-10-01T08-30-00.json"
        raw = read_backup_file(path)
        assert set(raw) == {"version", "timestamp", "users", "userData"}

    def test_read_invalid_json_file(self, tmp_path: Path):
        path = tmp_path / "kaputt.json"
        path.write_text("nicht json", encoding="utf-8")
        with pytest.raises(InvalidBackupFormat):
            read_backup_file(path)

    def test_read_non_utf8_file(self, tmp_path: Path):
        """Binärmüll wird als ungültiges Backup gemeldet, nicht als Dekodierfehler."""
        path = tmp_path / "binaer.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(InvalidBackupFormat):
            read_backup_file(path)

    def test_apply_backup_write_failure(self):
        gw = PersistenceGateway(_FailingStore())
        with pytest.raises(StorageError):
            apply_backup(gw, {"users": {"anna": {"password": "a"}}})
