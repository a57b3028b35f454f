"""Anwenden von Optimierungsplänen auf den Datenspeicher.

Jede ausgewählte Änderung wird einzeln und in Planreihenfolge ausgeführt,
weil spätere Änderungen den Zustand früherer lesen können (z.B. Belegung
bei adjust_group_size). Schlägt eine Änderung fehl, wird das geloggt und
mit der nächsten weitergemacht. Danach wird der Plan in jedem Fall als
'applied' markiert; welche Änderungen fehlschlugen, steht im ApplyResult
und in failed_change_ids des Plans.
"""

import logging
from datetime import datetime

from config.schema import GroupBalanceConfig
from engine.errors import InvalidStateError, NotFoundError
from engine.repository import SchedulingRepository
from models.enrollment import EnrollmentStatus
from models.plan import (
    APPLICABLE_STATUSES, AdjustGroupSize, ApplyResult, ChangeFailure, ChangeType,
    ModifySchedule, OptimizationChange, OptimizationPlan, PlanStatus,
    ReallocateSession, ReallocateStudent,
)

logger = logging.getLogger(__name__)


class ChangeApplier:
    """Führt Änderungen aus und verwaltet den Plan-Lebenszyklus."""

    def __init__(self, repo: SchedulingRepository, group_balance: GroupBalanceConfig) -> None:
        self.repo = repo
        self.group_balance = group_balance

    # ── Plan-Lebenszyklus ─────────────────────────────────────────────────────

    def apply_plan(self, plan_id: str, change_ids: list[str]) -> ApplyResult:
        """Wendet die Änderungen mit resource_id in change_ids an.

        Plan muss 'draft' oder 'pending' sein, sonst InvalidStateError.
        """
        plan = self.repo.plan(plan_id)
        if plan.status not in APPLICABLE_STATUSES:
            raise InvalidStateError(
                f"Plan {plan_id} hat Status '{plan.status.value}' und kann nicht "
                f"angewendet werden (erlaubt: draft, pending)"
            )

        result = ApplyResult(plan_id=plan_id)
        for change in plan.select(change_ids):
            try:
                self.apply_change(change)
            except Exception as e:
                logger.warning(
                    f"Änderung {change.type} für {change.resource_id} fehlgeschlagen: {e}"
                )
                result.failed.append(ChangeFailure(
                    resource_id=change.resource_id,
                    type=ChangeType(change.type),
                    error=str(e),
                ))
            else:
                result.applied.append(change.resource_id)

        self.repo.update_plan(plan_id, {
            "status": PlanStatus.APPLIED.value,
            "applied_at": datetime.now().isoformat(),
            "applied_change_ids": result.applied,
            "failed_change_ids": [f.resource_id for f in result.failed],
        })
        logger.info(
            f"Plan {plan_id} angewendet: {len(result.applied)} erfolgreich, "
            f"{len(result.failed)} fehlgeschlagen"
        )
        return result

    def submit_plan(self, plan_id: str) -> OptimizationPlan:
        """draft → pending (zur Freigabe vorgelegt)."""
        return self._transition(plan_id, {PlanStatus.DRAFT}, PlanStatus.PENDING)

    def reject_plan(self, plan_id: str) -> OptimizationPlan:
        """draft|pending → rejected."""
        return self._transition(plan_id, set(APPLICABLE_STATUSES), PlanStatus.REJECTED)

    def _transition(
        self, plan_id: str, allowed: set[PlanStatus], target: PlanStatus
    ) -> OptimizationPlan:
        plan = self.repo.plan(plan_id)
        if plan.status not in allowed:
            raise InvalidStateError(
                f"Plan {plan_id}: Übergang '{plan.status.value}' → '{target.value}' nicht erlaubt"
            )
        self.repo.update_plan(plan_id, {"status": target.value})
        return plan.model_copy(update={"status": target})

    # ── Einzelne Änderungen ───────────────────────────────────────────────────

    def apply_change(self, change: OptimizationChange) -> None:
        """Führt eine einzelne Änderung aus (auch direkt als manuelle Übersteuerung)."""
        match change:
            case ReallocateSession():
                self._reallocate_session(change)
            case ReallocateStudent():
                self._reallocate_student(change)
            case AdjustGroupSize():
                self._adjust_group_size(change)
            case ModifySchedule():
                self._modify_schedule(change)
            case _:
                raise TypeError(f"Unbekannter Änderungstyp: {type(change).__name__}")

    def _reallocate_session(self, change: ReallocateSession) -> None:
        self.repo.tutor(change.to_ref)
        self.repo.update_session(change.resource_id, {"tutor_id": change.to_ref})
        logger.info(f"Sitzung {change.resource_id}: {change.from_ref} → {change.to_ref}")

    def _reallocate_student(self, change: ReallocateStudent) -> None:
        # Vereinfachung: nur die erste aktive Einschreibung wird verschoben,
        # freie Plätze in der Zielklasse werden nicht geprüft.
        enrollments = [
            e for e in self.repo.active_enrollments() if e.student_id == change.resource_id
        ]
        if not enrollments:
            raise NotFoundError(
                "Einschreibung", change.resource_id,
                f"Keine aktive Einschreibung für Schüler {change.resource_id}",
            )
        self.repo.tutoring_class(change.to_ref)
        self.repo.update_enrollment(enrollments[0].id, {"class_id": change.to_ref})
        logger.info(
            f"Schüler {change.resource_id}: {enrollments[0].class_id} → {change.to_ref}"
        )

    def _adjust_group_size(self, change: AdjustGroupSize) -> None:
        cls = self.repo.tutoring_class(change.resource_id)
        count = sum(1 for e in self.repo.active_enrollments() if e.class_id == cls.id)
        # Kapazität wird nur vergrößert, nie verkleinert
        new_max = max(count + self.group_balance.capacity_headroom, cls.max_students)
        self.repo.update_class(cls.id, {
            "max_students": new_max,
            "current_enrollment": count,
        })
        logger.info(f"Klasse {cls.label}: max_students {cls.max_students} → {new_max}")

    def _modify_schedule(self, change: ModifySchedule) -> None:
        # Ohne neuen Slot im Änderungsdatensatz gibt es nichts zu verlegen.
        self.repo.session(change.resource_id)
        logger.info(
            f"Sitzung {change.resource_id}: Verlegung vorgemerkt, "
            f"neuer Termin muss manuell gewählt werden"
        )
