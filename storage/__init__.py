"""Persistenz: Schlüssel-Wert-Speicher, Gateway und Backups."""

from storage.kv_store import JsonFileStore, KeyValueStore, MemoryStore
from storage.gateway import PersistenceGateway

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "PersistenceGateway"]
