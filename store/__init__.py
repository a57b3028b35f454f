"""Datenspeicher-Adapter (Arbeitsspeicher, JSON-Dateien)."""

from pathlib import Path

from config.schema import StoreBackend, StoreConfig
from store.base import Predicate, Record, RecordStore
from store.errors import DuplicateRecordError, RecordNotFoundError, StoreError
from store.json_store import JsonFileStore
from store.memory import InMemoryRecordStore

__all__ = [
    "Predicate",
    "Record",
    "RecordStore",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "StoreError",
    "JsonFileStore",
    "InMemoryRecordStore",
    "create_store",
]


def create_store(cfg: StoreConfig) -> RecordStore:
    """Erzeugt den in der Konfiguration gewählten Speicher."""
    if cfg.backend == StoreBackend.MEMORY:
        return InMemoryRecordStore()
    return JsonFileStore(Path(cfg.data_dir))
