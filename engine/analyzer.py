"""Ineffizienz-Analyse über alle Tutoren, Klassen und laufenden Sitzungen.

Vier unabhängige Durchläufe, deren Befunde aneinandergehängt werden:
1. überlastete Tutoren   (Stufe overloaded → high, Stufe high → medium)
2. unterausgelastete Tutoren (Stufe low UND < 5h → low)
3. unausgewogene Klassen (Belegung < 30 % bzw. < 20 %, oder voll)
4. Terminkonflikte zwischen Einzelsitzungen eines Tutors (high)
"""

import logging
import uuid
from collections import Counter

from config.defaults import SUGGESTED_ACTIONS
from config.schema import EngineConfig
from engine.conflicts import ConflictDetector
from engine.errors import NotFoundError
from engine.repository import SchedulingRepository
from engine.workload import WorkloadCalculator
from models.allocation import ResourceAllocation, WorkloadTier
from models.inefficiency import (
    InefficiencyReport, InefficiencyType, ResourceInefficiency, Severity,
)

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    """Maschinell erzeugte ID, z.B. "ineff_3f2a9c1b7d4e"."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class InefficiencyAnalyzer:
    """Findet systematische Planungs- und Verteilungsprobleme."""

    def __init__(
        self,
        repo: SchedulingRepository,
        workload: WorkloadCalculator,
        conflicts: ConflictDetector,
        config: EngineConfig,
    ) -> None:
        self.repo = repo
        self.workload = workload
        self.conflicts = conflicts
        self.config = config

    def analyze(self) -> InefficiencyReport:
        """Hauptmethode: führt alle Durchläufe aus und gibt einen Report zurück."""
        self.repo.reset_skipped()

        allocations = self.compute_allocations()
        findings: list[ResourceInefficiency] = []
        findings.extend(self._tutor_findings(allocations))
        findings.extend(self._group_findings())
        findings.extend(self._conflict_findings())

        by_type = Counter(f.type.value for f in findings)
        logger.info(
            f"Analyse: {len(findings)} Befunde ({dict(by_type)}), "
            f"{self.repo.skipped_records} Datensätze übersprungen"
        )
        return InefficiencyReport(findings=findings, skipped_records=self.repo.skipped_records)

    def compute_allocations(self) -> list[ResourceAllocation]:
        """Auslastung aller Tutoren in Speicherreihenfolge."""
        allocations = []
        for tutor in self.repo.tutors():
            try:
                allocations.append(self.workload.compute(tutor.id))
            except NotFoundError as e:
                # Tutor zwischen Auflisten und Berechnen entfernt
                logger.warning(f"Auslastung übersprungen: {e}")
        return allocations

    # ── 1./2. Tutoren ─────────────────────────────────────────────────────────

    def _tutor_findings(
        self, allocations: list[ResourceAllocation]
    ) -> list[ResourceInefficiency]:
        findings = []
        for a in allocations:
            if a.workload in (WorkloadTier.OVERLOADED, WorkloadTier.HIGH):
                findings.append(ResourceInefficiency(
                    id=generate_id("ineff"),
                    type=InefficiencyType.OVERLOADED_TUTOR,
                    severity=(Severity.HIGH if a.workload == WorkloadTier.OVERLOADED
                              else Severity.MEDIUM),
                    description=(
                        f"Tutor {a.tutor_id} ist stark ausgelastet: "
                        f"{a.total_hours:g} Stunden mit {a.student_count} Schülern"
                    ),
                    affected_resources=[a.tutor_id, *a.session_ids, *a.class_ids],
                    suggested_actions=list(SUGGESTED_ACTIONS["overloaded_tutor"]),
                    tutor_id=a.tutor_id,
                    session_ids=list(a.session_ids),
                    class_ids=list(a.class_ids),
                ))

        for a in allocations:
            if (a.workload == WorkloadTier.LOW
                    and a.total_hours < self.config.workload.underutilized_hours):
                findings.append(ResourceInefficiency(
                    id=generate_id("ineff"),
                    type=InefficiencyType.UNDERUTILIZED_TUTOR,
                    severity=Severity.LOW,
                    description=(
                        f"Tutor {a.tutor_id} ist kaum eingesetzt: "
                        f"nur {a.total_hours:g} Stunden"
                    ),
                    affected_resources=[a.tutor_id],
                    suggested_actions=list(SUGGESTED_ACTIONS["underutilized_tutor"]),
                    tutor_id=a.tutor_id,
                ))
        return findings

    # ── 3. Klassen ────────────────────────────────────────────────────────────

    def _group_findings(self) -> list[ResourceInefficiency]:
        gb = self.config.group_balance
        enrollment_counts = Counter(e.class_id for e in self.repo.active_enrollments())

        findings = []
        for c in self.repo.classes():
            count = enrollment_counts.get(c.id, 0)
            ratio = count / c.max_students

            if ratio < gb.low_ratio and count > 0:
                findings.append(ResourceInefficiency(
                    id=generate_id("ineff"),
                    type=InefficiencyType.UNBALANCED_GROUP,
                    severity=Severity.HIGH if ratio < gb.critical_ratio else Severity.MEDIUM,
                    description=(
                        f"Klasse {c.label} hat nur {count}/{c.max_students} Schüler "
                        f"({round(ratio * 100)}%)"
                    ),
                    affected_resources=[c.id, c.tutor_id],
                    suggested_actions=list(SUGGESTED_ACTIONS["unbalanced_group_low"]),
                    tutor_id=c.tutor_id,
                    class_ids=[c.id],
                ))
            elif count >= c.max_students:
                findings.append(ResourceInefficiency(
                    id=generate_id("ineff"),
                    type=InefficiencyType.UNBALANCED_GROUP,
                    severity=Severity.HIGH,
                    description=(
                        f"Klasse {c.label} ist voll ({count}/{c.max_students})"
                        + (" und überbelegt" if count > c.max_students else "")
                    ),
                    affected_resources=[c.id],
                    suggested_actions=list(SUGGESTED_ACTIONS["unbalanced_group_full"]),
                    tutor_id=c.tutor_id,
                    class_ids=[c.id],
                ))
        return findings

    # ── 4. Terminkonflikte ────────────────────────────────────────────────────

    def _conflict_findings(self) -> list[ResourceInefficiency]:
        findings = []
        for conflict in self.conflicts.scan_session_conflicts():
            findings.append(ResourceInefficiency(
                id=generate_id("ineff"),
                type=InefficiencyType.RESOURCE_CONFLICT,
                severity=Severity.HIGH,
                description=(
                    f"Terminkonflikt: Tutor {conflict.tutor_id} hat am {conflict.day} "
                    f"zwei Sitzungen gleichzeitig ({conflict.first_window} / "
                    f"{conflict.second_window})"
                ),
                affected_resources=[
                    conflict.tutor_id, conflict.first_session_id, conflict.second_session_id,
                ],
                suggested_actions=list(SUGGESTED_ACTIONS["resource_conflict"]),
                tutor_id=conflict.tutor_id,
                session_ids=[conflict.first_session_id, conflict.second_session_id],
            ))
        return findings
