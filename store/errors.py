"""Fehler des Datenspeichers."""

from engine.errors import NotFoundError, SchedulingError


class StoreError(SchedulingError):
    """Basisklasse für Speicherfehler."""


class RecordNotFoundError(NotFoundError, StoreError):
    """Datensatz mit dieser ID existiert in der Sammlung nicht."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        super().__init__(
            collection, record_id,
            f"Datensatz '{record_id}' in Sammlung '{collection}' nicht gefunden",
        )


class DuplicateRecordError(StoreError):
    """Datensatz mit dieser ID existiert bereits."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(
            f"Datensatz '{record_id}' existiert bereits in Sammlung '{collection}'"
        )
