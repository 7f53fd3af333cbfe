"""Schlüssel-Wert-Speicher: Schnittstelle und zwei Implementierungen.

``MemoryStore`` für Tests, ``JsonFileStore`` als dauerhafter lokaler
Speicher (eine JSON-Datei, die bei jedem Schreibvorgang atomar ersetzt wird).
Werte sind immer Strings; die Serialisierung übernimmt das Gateway.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Flüchtiger Speicher im Prozess."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Dauerhafter Speicher in einer einzelnen JSON-Datei.

    Die Datei wird bei jedem Zugriff neu gelesen, damit ein zweiter Prozess
    (zweites Terminal) den letzten Stand sieht. Gleichzeitiges Schreiben ist
    last-write-wins.

    Eine unlesbare Datei gilt als leerer Speicher; ``set``/``remove`` lassen
    ``OSError`` durch, das Gateway fängt sie ab.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Speicherdatei {self.path} unlesbar – wird als leer behandelt: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Speicherdatei {self.path} hat kein Objekt als Wurzel – ignoriert")
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
