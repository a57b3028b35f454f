"""Flüchtiger Datenspeicher im Arbeitsspeicher (Tests, Demo-Läufe)."""

import copy
from datetime import datetime
from typing import Optional

from store.base import Predicate, Record
from store.errors import DuplicateRecordError, RecordNotFoundError


class InMemoryRecordStore:
    """RecordStore auf Basis verschachtelter Dicts.

    Gibt immer Kopien heraus, damit Aufrufer den internen Zustand nicht
    versehentlich verändern.
    """

    def __init__(self, initial: Optional[dict[str, list[Record]]] = None) -> None:
        self._collections: dict[str, dict[str, Record]] = {}
        for collection, records in (initial or {}).items():
            for record in records:
                self.create(collection, record)

    def read_all(self, collection: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]

    def find_many(self, collection: str, predicate: Predicate) -> list[Record]:
        return [r for r in self.read_all(collection) if predicate(r)]

    def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def create(self, collection: str, record: Record) -> Record:
        if not record.get("id"):
            raise ValueError(f"Datensatz ohne 'id' für Sammlung '{collection}'")
        records = self._collections.setdefault(collection, {})
        if record["id"] in records:
            raise DuplicateRecordError(collection, record["id"])
        stored = copy.deepcopy(record)
        stored.setdefault("created_at", datetime.now().isoformat())
        records[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, collection: str, record_id: str, fields: Record) -> Record:
        records = self._collections.get(collection, {})
        if record_id not in records:
            raise RecordNotFoundError(collection, record_id)
        stored = records[record_id]
        stored.update(copy.deepcopy(fields))
        stored["id"] = record_id
        stored["updated_at"] = datetime.now().isoformat()
        return copy.deepcopy(stored)

    def collections(self) -> list[str]:
        """Namen aller Sammlungen mit mindestens einem Datensatz."""
        return [name for name, records in self._collections.items() if records]
