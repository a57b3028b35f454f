"""Datenspeicher als JSON-Dateien: eine Datei <sammlung>.json pro Sammlung.

Jede Operation liest die Datei neu ein, damit Änderungen anderer Prozesse
sichtbar sind. Geschrieben wird über eine temporäre Datei + Umbenennen.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from store.base import Predicate, Record
from store.errors import DuplicateRecordError, RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)


def _has_id(record, record_id: str) -> bool:
    # Eine JSON-Liste kann auch null oder Strings enthalten
    return isinstance(record, dict) and record.get("id") == record_id


class JsonFileStore:
    """RecordStore über ein Verzeichnis mit JSON-Listen."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _load(self, collection: str) -> list[Record]:
        path = self._path(collection)
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise StoreError(f"JSON-Datei defekt: {path} ({e})") from e
        if not isinstance(data, list):
            raise StoreError(f"JSON-Datei {path} enthält keine Liste von Datensätzen")
        return data

    def _write(self, collection: str, records: list[Record]) -> None:
        path = self._path(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
        logger.debug(f"{len(records)} Datensätze geschrieben: {path}")

    # ─── RecordStore ───

    def read_all(self, collection: str) -> list[Record]:
        return self._load(collection)

    def find_many(self, collection: str, predicate: Predicate) -> list[Record]:
        return [r for r in self._load(collection) if predicate(r)]

    def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        return next((r for r in self._load(collection) if _has_id(r, record_id)), None)

    def create(self, collection: str, record: Record) -> Record:
        if not record.get("id"):
            raise ValueError(f"Datensatz ohne 'id' für Sammlung '{collection}'")
        records = self._load(collection)
        if any(_has_id(r, record["id"]) for r in records):
            raise DuplicateRecordError(collection, record["id"])
        stored = dict(record)
        stored.setdefault("created_at", datetime.now().isoformat())
        records.append(stored)
        self._write(collection, records)
        return dict(stored)

    def update(self, collection: str, record_id: str, fields: Record) -> Record:
        records = self._load(collection)
        for i, r in enumerate(records):
            if _has_id(r, record_id):
                updated = {**r, **fields, "id": record_id,
                           "updated_at": datetime.now().isoformat()}
                records[i] = updated
                self._write(collection, records)
                return dict(updated)
        raise RecordNotFoundError(collection, record_id)

    def import_records(self, collection: str, records: list[Record]) -> None:
        """Ersetzt eine komplette Sammlung (z.B. beim Erzeugen von Demo-Daten)."""
        self._write(collection, list(records))
