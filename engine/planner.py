"""Optimierungsplaner: wandelt Befunde in vorgeschlagene Änderungen um.

Pro Befund entsteht höchstens eine Änderung nach fester Regel:
- overloaded_tutor   → reallocate_session an den ersten anderen Tutor
- unbalanced_group   → adjust_group_size (Größe wird erst beim Anwenden berechnet)
- resource_conflict  → modify_schedule für die später beginnende Sitzung
- underutilized_tutor fließt nur in die Wirkungsschätzung ein.

Die Zielauswahl ist bewusst eine einfache, nachvollziehbare Heuristik
(first_available_candidate), keine optimale Zuordnung.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Sequence, TypeVar

from config.schema import ImpactConfig
from engine.analyzer import InefficiencyAnalyzer, generate_id
from engine.repository import SchedulingRepository
from models.inefficiency import InefficiencyType, ResourceInefficiency
from models.plan import (
    AdjustGroupSize, EstimatedImpact, ModifySchedule, OptimizationChange, OptimizationPlan,
    PlanConstraints, PlanStatus, ReallocateSession,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FocusArea(str, Enum):
    WORKLOAD = "workload"
    GROUP_BALANCE = "group_balance"
    RESOURCE_CONFLICTS = "resource_conflicts"
    UTILIZATION = "utilization"


FOCUS_TO_TYPE: dict[FocusArea, InefficiencyType] = {
    FocusArea.WORKLOAD: InefficiencyType.OVERLOADED_TUTOR,
    FocusArea.GROUP_BALANCE: InefficiencyType.UNBALANCED_GROUP,
    FocusArea.RESOURCE_CONFLICTS: InefficiencyType.RESOURCE_CONFLICT,
    FocusArea.UTILIZATION: InefficiencyType.UNDERUTILIZED_TUTOR,
}


def first_available_candidate(candidates: Iterable[T]) -> Optional[T]:
    """Zielauswahl-Heuristik: der erste Kandidat in Speicherreihenfolge.

    Kein Best-Fit; bewusst so gehalten, damit Vorschläge nachvollziehbar bleiben.
    """
    return next(iter(candidates), None)


def resolve_focus_areas(focus_areas: Optional[Sequence[str]]) -> set[InefficiencyType]:
    """Schwerpunkt-Tags → Befund-Typen. Keine Tags = alle Typen.

    Unbekannte Tags werden mit Warnung ignoriert.
    """
    if not focus_areas:
        return set(InefficiencyType)
    types: set[InefficiencyType] = set()
    for tag in focus_areas:
        try:
            types.add(FOCUS_TO_TYPE[FocusArea(tag)])
        except ValueError:
            logger.warning(f"Unbekannter Schwerpunkt ignoriert: {tag!r}")
    return types


def estimate_impact(
    findings: list[ResourceInefficiency], cfg: ImpactConfig
) -> EstimatedImpact:
    """Heuristische Wirkungsschätzung in Prozent."""
    def count(t: InefficiencyType) -> int:
        return sum(1 for f in findings if f.type == t)

    workload_reduction = min(
        100.0, cfg.workload_reduction_per_finding * count(InefficiencyType.OVERLOADED_TUTOR)
    )
    balance_improvement = min(
        100.0, cfg.balance_improvement_per_finding * count(InefficiencyType.UNBALANCED_GROUP)
    )
    utilization = (1 - count(InefficiencyType.UNDERUTILIZED_TUTOR) / cfg.underutilized_divisor) * 100
    return EstimatedImpact(
        workload_reduction=workload_reduction,
        balance_improvement=balance_improvement,
        resource_utilization=max(0.0, min(100.0, utilization)),
    )


class OptimizationPlanner:
    """Erzeugt Optimierungspläne im Status 'draft'."""

    def __init__(
        self,
        repo: SchedulingRepository,
        analyzer: InefficiencyAnalyzer,
        impact: ImpactConfig,
    ) -> None:
        self.repo = repo
        self.analyzer = analyzer
        self.impact = impact

    def build_plan(
        self,
        focus_areas: Optional[Sequence[str]] = None,
        constraints: Optional[PlanConstraints] = None,
        created_by: str = "system",
        persist: bool = True,
    ) -> OptimizationPlan:
        """Analysiert den aktuellen Bestand und erstellt einen Plan.

        Mit persist=True wird der Plan in der Sammlung 'optimization_plans'
        gespeichert, damit er später angewendet werden kann.
        """
        wanted = resolve_focus_areas(focus_areas)
        report = self.analyzer.analyze()
        findings = [f for f in report.findings if f.type in wanted]

        changes = []
        for finding in findings:
            change = self._change_for(finding)
            if change is not None:
                changes.append(change)

        now = datetime.now()
        plan = OptimizationPlan(
            id=generate_id("plan"),
            name=f"Optimierungsplan {now.strftime('%d.%m.%Y')}",
            description=f"Ressourcen-Optimierung mit {len(changes)} Änderungen",
            changes=changes,
            estimated_impact=estimate_impact(findings, self.impact),
            status=PlanStatus.DRAFT,
            focus_areas=list(focus_areas or []),
            constraints=constraints or PlanConstraints(),
            created_by=created_by,
            created_at=now,
        )
        if persist:
            self.repo.save_plan(plan)
        logger.info(
            f"Plan {plan.id}: {len(changes)} Änderungen aus {len(findings)} Befunden"
        )
        return plan

    def _change_for(self, finding: ResourceInefficiency) -> Optional[OptimizationChange]:
        """Eine Änderung pro Befund nach fester Regel (oder None)."""
        if finding.type == InefficiencyType.OVERLOADED_TUTOR:
            if not finding.session_ids or finding.tutor_id is None:
                return None
            target = first_available_candidate(
                t for t in self.repo.tutors() if t.id != finding.tutor_id
            )
            if target is None:
                logger.info(f"Kein anderer Tutor für Entlastung von {finding.tutor_id}")
                return None
            return ReallocateSession(
                from_ref=finding.tutor_id,
                to_ref=target.id,
                resource_id=finding.session_ids[0],
                reason=f"Entlastung von Tutor {finding.tutor_id}",
            )

        if finding.type == InefficiencyType.UNBALANCED_GROUP:
            class_id = finding.class_ids[0] if finding.class_ids else finding.affected_resources[0]
            return AdjustGroupSize(
                from_ref=class_id,
                to_ref=class_id,
                resource_id=class_id,
                reason=f"Gruppengröße von Klasse {class_id} ausgleichen",
            )

        if finding.type == InefficiencyType.RESOURCE_CONFLICT:
            if len(finding.session_ids) < 2:
                return None
            session_id = finding.session_ids[1]
            return ModifySchedule(
                from_ref=session_id,
                to_ref=session_id,
                resource_id=session_id,
                reason=f"Terminkonflikt von Sitzung {session_id} auflösen",
            )

        return None
