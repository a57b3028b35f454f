"""Schnittstelle des generischen Datenspeichers.

Ein Datensatz ist ein JSON-fähiges Dict mit Pflichtfeld "id"; Sammlungen
werden über ihren Namen angesprochen (siehe config.defaults.ALL_COLLECTIONS).
"""

from typing import Callable, Optional, Protocol

Record = dict
Predicate = Callable[[Record], bool]


class RecordStore(Protocol):
    """Minimaler Funktionsumfang, den die Engine vom Speicher braucht."""

    def read_all(self, collection: str) -> list[Record]:
        """Alle Datensätze einer Sammlung (leere Liste wenn unbekannt)."""
        ...

    def find_many(self, collection: str, predicate: Predicate) -> list[Record]:
        """Alle Datensätze, für die predicate True liefert."""
        ...

    def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        ...

    def create(self, collection: str, record: Record) -> Record:
        """Legt einen Datensatz an. Doppelte IDs → DuplicateRecordError."""
        ...

    def update(self, collection: str, record_id: str, fields: Record) -> Record:
        """Überschreibt einzelne Felder. Unbekannte ID → RecordNotFoundError."""
        ...
