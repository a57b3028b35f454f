"""Optimierungspläne und ihre Änderungen (Pydantic v2).

Eine Änderung ist eine von vier Varianten, unterschieden über das Feld
`type`. Beim Speichern heißen die Referenzfelder wie im Datenspeicher
`from` / `to` (Python-seitig from_ref / to_ref).
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ChangeType(str, Enum):
    REALLOCATE_SESSION = "reallocate_session"
    REALLOCATE_STUDENT = "reallocate_student"
    ADJUST_GROUP_SIZE = "adjust_group_size"
    MODIFY_SCHEDULE = "modify_schedule"


class _ChangeBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_ref: str = Field(alias="from")
    to_ref: str = Field(alias="to")
    resource_id: str
    reason: str = ""


class ReallocateSession(_ChangeBase):
    """Sitzung resource_id von Tutor from_ref an Tutor to_ref übergeben."""

    type: Literal["reallocate_session"] = "reallocate_session"


class ReallocateStudent(_ChangeBase):
    """Erste aktive Einschreibung von Schüler resource_id in Klasse to_ref verschieben."""

    type: Literal["reallocate_student"] = "reallocate_student"


class AdjustGroupSize(_ChangeBase):
    """Kapazität von Klasse resource_id an die Belegung anpassen."""

    type: Literal["adjust_group_size"] = "adjust_group_size"


class ModifySchedule(_ChangeBase):
    """Sitzung resource_id verlegen (ohne neuen Slot derzeit ohne Wirkung)."""

    type: Literal["modify_schedule"] = "modify_schedule"


OptimizationChange = Annotated[
    Union[ReallocateSession, ReallocateStudent, AdjustGroupSize, ModifySchedule],
    Field(discriminator="type"),
]


class PlanStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPLIED = "applied"
    REJECTED = "rejected"


# Nur aus diesen Status heraus darf ein Plan angewendet werden
APPLICABLE_STATUSES = frozenset({PlanStatus.DRAFT, PlanStatus.PENDING})


class EstimatedImpact(BaseModel):
    """Heuristische Wirkungsschätzung in Prozent (keine Messung)."""

    workload_reduction: float = 0.0
    balance_improvement: float = 0.0
    resource_utilization: float = 100.0


class PlanConstraints(BaseModel):
    """Optionale Randbedingungen. Von der Heuristik derzeit nicht ausgewertet."""

    max_workload_per_tutor: Optional[float] = None
    min_group_size: Optional[int] = None
    max_group_size: Optional[int] = None


class OptimizationPlan(BaseModel):
    """Vorgeschlagenes Bündel von Änderungen.

    Lebenszyklus: draft → (pending) → applied; draft/pending → rejected.
    """

    id: str
    name: str
    description: str = ""
    changes: list[OptimizationChange] = []
    estimated_impact: EstimatedImpact = Field(default_factory=EstimatedImpact)
    status: PlanStatus = PlanStatus.DRAFT
    focus_areas: list[str] = []
    constraints: PlanConstraints = Field(default_factory=PlanConstraints)
    created_by: str = "system"
    created_at: datetime = Field(default_factory=datetime.now)
    applied_at: Optional[datetime] = None
    applied_change_ids: list[str] = []
    failed_change_ids: list[str] = []

    def to_record(self) -> dict:
        """JSON-fähiges Dict für den Datenspeicher."""
        return self.model_dump(mode="json", by_alias=True)

    def select(self, change_ids: list[str]) -> list[OptimizationChange]:
        """Änderungen, deren resource_id in change_ids vorkommt (Planreihenfolge)."""
        wanted = set(change_ids)
        return [c for c in self.changes if c.resource_id in wanted]


class ChangeFailure(BaseModel):
    """Eine Änderung, die beim Anwenden fehlgeschlagen ist."""

    resource_id: str
    type: ChangeType
    error: str


class ApplyResult(BaseModel):
    """Ergebnis eines Anwendungs-Laufs.

    Der Plan wird auch bei Teilfehlern als 'applied' markiert; ob das
    reicht, entscheidet der Aufrufer über is_complete.
    """

    plan_id: str
    applied: list[str] = []
    failed: list[ChangeFailure] = []

    @property
    def is_complete(self) -> bool:
        return not self.failed
