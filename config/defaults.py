from config.schema import (
    ConflictConfig,
    EngineConfig,
    GroupBalanceConfig,
    ImpactConfig,
    LoggingConfig,
    StoreConfig,
    WorkloadThresholds,
)


# ─── Sammlungen im Datenspeicher ─────────────────────────────────────────────

COLLECTION_USERS = "users"
COLLECTION_SESSIONS = "sessions"
COLLECTION_CLASSES = "classes"
COLLECTION_ENROLLMENTS = "enrollments"
COLLECTION_AVAILABILITY = "availability"
COLLECTION_PLANS = "optimization_plans"

ALL_COLLECTIONS = [
    COLLECTION_USERS,
    COLLECTION_SESSIONS,
    COLLECTION_CLASSES,
    COLLECTION_ENROLLMENTS,
    COLLECTION_AVAILABILITY,
    COLLECTION_PLANS,
]


# ─── Handlungsempfehlungen je Befund ─────────────────────────────────────────
# Reiner Anzeigetext für Menschen, wird nicht automatisch ausgeführt.

SUGGESTED_ACTIONS: dict[str, list[str]] = {
    "overloaded_tutor": [
        "Einige Sitzungen an andere Tutoren umverteilen",
        "Schülerzahl in den Klassen des Tutors reduzieren",
        "Zusätzlichen Tutor zur Unterstützung einplanen",
    ],
    "underutilized_tutor": [
        "Dem Tutor weitere Sitzungen zuweisen",
        "Tutor in Klassen mit Personalbedarf einsetzen",
        "Verfügbarkeiten des Tutors überprüfen",
    ],
    "unbalanced_group_low": [
        "Weitere Schüler in die Klasse aufnehmen",
        "Mit einer anderen Klasse desselben Fachs zusammenlegen",
        "maxStudents der Klasse senken",
    ],
    "unbalanced_group_full": [
        "maxStudents erhöhen, falls möglich",
        "Neue Klasse mit demselben Fach eröffnen",
        "Einige Schüler in eine andere Klasse verschieben",
    ],
    "resource_conflict": [
        "Eine der beiden Sitzungen verlegen",
        "Nicht benötigte Sitzung absagen",
        "Sitzung einem anderen Tutor zuweisen",
    ],
}


def default_workload_thresholds() -> WorkloadThresholds:
    """Standard-Schwellwerte: 30h/50 Schüler, 20h/30 Schüler, 10h/15 Schüler."""
    return WorkloadThresholds()


def default_engine_config() -> EngineConfig:
    """Vollständige Standardkonfiguration der Ressourcen-Engine."""
    return EngineConfig(
        organization_name="Tutor-Zentrum",
        workload=default_workload_thresholds(),
        conflicts=ConflictConfig(buffer_minutes=30),
        group_balance=GroupBalanceConfig(
            low_ratio=0.30, critical_ratio=0.20, capacity_headroom=2,
        ),
        impact=ImpactConfig(
            workload_reduction_per_finding=15,
            balance_improvement_per_finding=20,
            underutilized_divisor=10,
        ),
        store=StoreConfig(),
        logging=LoggingConfig(),
    )
