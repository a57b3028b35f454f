from pydantic import BaseModel, Field, model_validator
from enum import Enum


class StoreBackend(str, Enum):
    JSON = "json"
    MEMORY = "memory"


# ─── AUSLASTUNG (Workload-Stufen) ───

class WorkloadThresholds(BaseModel):
    """Schwellwerte für die Einstufung der Tutor-Auslastung.

    Geprüft wird in fester Reihenfolge (erster Treffer gewinnt):
    overloaded → high → medium → low. Jede Stufe greift, sobald
    Stunden ODER Schülerzahl den Schwellwert überschreiten.
    """
    # Ab dieser Stundenzahl gilt ein Tutor als überlastet
    overloaded_hours: float = Field(30, gt=0,
        description="Stunden-Schwelle für 'overloaded'")
    # Ab dieser Schülerzahl gilt ein Tutor als überlastet
    overloaded_students: int = Field(50, gt=0,
        description="Schüler-Schwelle für 'overloaded'")
    high_hours: float = Field(20, gt=0,
        description="Stunden-Schwelle für 'high'")
    high_students: int = Field(30, gt=0,
        description="Schüler-Schwelle für 'high'")
    medium_hours: float = Field(10, gt=0,
        description="Stunden-Schwelle für 'medium'")
    medium_students: int = Field(15, gt=0,
        description="Schüler-Schwelle für 'medium'")
    # Unterausgelastet: Stufe 'low' UND weniger Stunden als dieser Wert
    underutilized_hours: float = Field(5, ge=0,
        description="Stunden unterhalb derer ein 'low'-Tutor als unterausgelastet gilt")

    @model_validator(mode='after')
    def _check_order(self):
        """Schwellen müssen von medium über high bis overloaded steigen."""
        if not (self.medium_hours <= self.high_hours <= self.overloaded_hours):
            raise ValueError(
                "Stunden-Schwellen müssen aufsteigend sein: "
                f"medium ({self.medium_hours}) ≤ high ({self.high_hours}) "
                f"≤ overloaded ({self.overloaded_hours})")
        if not (self.medium_students <= self.high_students <= self.overloaded_students):
            raise ValueError(
                "Schüler-Schwellen müssen aufsteigend sein: "
                f"medium ({self.medium_students}) ≤ high ({self.high_students}) "
                f"≤ overloaded ({self.overloaded_students})")
        return self


# ─── KONFLIKTE ───

class ConflictConfig(BaseModel):
    """Einstellungen der Konfliktprüfung."""
    # Pflicht-Pause zwischen zwei Einzelsitzungen desselben Tutors (Minuten)
    buffer_minutes: int = Field(30, ge=0, le=240,
        description="Puffer zwischen Einzelsitzungen (Minuten)")


# ─── GRUPPENGRÖSSE ───

class GroupBalanceConfig(BaseModel):
    """Schwellwerte für unausgewogene Klassen."""
    # Auslastung unterhalb dieses Anteils → 'unbalanced_group' (medium)
    low_ratio: float = Field(0.30, gt=0.0, le=1.0,
        description="Auslastungsgrenze für unterbesetzte Klassen")
    # Auslastung unterhalb dieses Anteils → Schweregrad 'high'
    critical_ratio: float = Field(0.20, gt=0.0, le=1.0,
        description="Auslastungsgrenze für stark unterbesetzte Klassen")
    # Freie Plätze, die adjust_group_size über der aktuellen Belegung einplant
    capacity_headroom: int = Field(2, ge=0,
        description="Zusätzliche Plätze bei Kapazitätsanpassung")

    @model_validator(mode='after')
    def _check_ratios(self):
        if self.critical_ratio > self.low_ratio:
            raise ValueError(
                f"critical_ratio ({self.critical_ratio}) > low_ratio ({self.low_ratio})")
        return self


# ─── WIRKUNGSSCHÄTZUNG ───

class ImpactConfig(BaseModel):
    """Gewichte der heuristischen Wirkungsschätzung eines Optimierungsplans."""
    # Geschätzte Entlastung in Prozent pro überlastetem Tutor
    workload_reduction_per_finding: float = Field(15, ge=0,
        description="% Entlastung pro überlastetem Tutor")
    # Geschätzte Verbesserung in Prozent pro unausgewogener Klasse
    balance_improvement_per_finding: float = Field(20, ge=0,
        description="% Verbesserung pro unausgewogener Klasse")
    # Anzahl unterausgelasteter Tutoren, bei der die Auslastung 0 % erreicht
    underutilized_divisor: int = Field(10, gt=0,
        description="Divisor für die Ressourcen-Auslastung")


# ─── DATENSPEICHER ───

class StoreConfig(BaseModel):
    """Datenspeicher für Tutoren, Sitzungen, Klassen und Pläne."""
    backend: StoreBackend = Field(StoreBackend.JSON,
        description="json = eine Datei pro Sammlung, memory = flüchtig")
    # Verzeichnis der JSON-Sammlungen (nur Backend 'json')
    data_dir: str = Field("output/store",
        description="Verzeichnis der JSON-Sammlungen")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Logging-Ausgabe."""
    level: str = Field("INFO",
        description="Log-Level (DEBUG, INFO, WARNING, ERROR)")
    # Rich-Handler für farbige Konsolenausgabe
    rich: bool = Field(True,
        description="Rich-Handler verwenden")

    @model_validator(mode='after')
    def _normalize_level(self):
        level = self.level.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unbekanntes Log-Level: {self.level}")
        self.level = level
        return self


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Ressourcen-Engine."""
    # Anzeigename der Einrichtung
    organization_name: str = Field("Tutor-Zentrum",
        description="Name der Einrichtung")
    workload: WorkloadThresholds = Field(default_factory=WorkloadThresholds)
    conflicts: ConflictConfig = Field(default_factory=ConflictConfig)
    group_balance: GroupBalanceConfig = Field(default_factory=GroupBalanceConfig)
    impact: ImpactConfig = Field(default_factory=ImpactConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
