"""SchedulingEngine: Einstiegspunkt für Aufrufer (CLI, Web-Schicht, Tests).

Verdrahtet Repository, Auslastung, Konfliktprüfung, Analyse, Planer und
Applier mit einem gemeinsamen RecordStore. Die Engine hält keinen eigenen
Zustand; jede Operation liest den aktuellen Bestand neu.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from pydantic import BaseModel

from config.defaults import default_engine_config
from config.schema import EngineConfig
from engine.analyzer import InefficiencyAnalyzer
from engine.applier import ChangeApplier
from engine.conflicts import BookingConflict, ConflictDetector
from engine.planner import OptimizationPlanner
from engine.repository import SchedulingRepository
from engine.workload import WorkloadCalculator
from models.allocation import ResourceAllocation, WorkloadTier
from models.inefficiency import InefficiencyReport
from models.plan import (
    ApplyResult, OptimizationChange, OptimizationPlan, PlanConstraints,
)
from store.base import RecordStore

logger = logging.getLogger(__name__)


class ResourceOverview(BaseModel):
    """Gesamtüberblick über alle Tutoren."""

    total_tutors: int
    total_hours: float
    total_students: int
    workload_distribution: dict[str, int]
    allocations: list[ResourceAllocation]

    def print_rich(self) -> None:
        """Gibt den Überblick formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        dist = self.workload_distribution
        console.print(Panel(
            f"Tutoren: [bold]{self.total_tutors}[/bold] | "
            f"Stunden gesamt: [bold]{self.total_hours:g}[/bold] | "
            f"Schüler: [bold]{self.total_students}[/bold]\n"
            f"[red]überlastet {dist['overloaded']}[/red] | "
            f"[yellow]hoch {dist['high']}[/yellow] | "
            f"mittel {dist['medium']} | [dim]niedrig {dist['low']}[/dim]",
            title="Ressourcen-Überblick",
            border_style="cyan",
        ))

        table = Table(box=box.ROUNDED)
        table.add_column("Tutor", width=14)
        table.add_column("Stunden", justify="right", width=9)
        table.add_column("Schüler", justify="right", width=8)
        table.add_column("Sitzungen", justify="right", width=10)
        table.add_column("Klassen", justify="right", width=8)
        table.add_column("Stufe", width=12)
        colors = {"overloaded": "red", "high": "yellow", "medium": "white", "low": "dim"}
        for a in sorted(self.allocations, key=lambda x: x.workload.rank, reverse=True):
            color = colors[a.workload.value]
            table.add_row(
                a.tutor_id, f"{a.total_hours:g}", str(a.student_count),
                str(len(a.session_ids)), str(len(a.class_ids)),
                f"[{color}]{a.workload.value}[/{color}]",
            )
        console.print(table)


class SchedulingEngine:
    """Ressourcen-Planung und -Optimierung über einem RecordStore."""

    def __init__(self, store: RecordStore, config: Optional[EngineConfig] = None) -> None:
        self.config = config or default_engine_config()
        self.repo = SchedulingRepository(store)
        self.workload = WorkloadCalculator(self.repo, self.config.workload)
        self.conflicts = ConflictDetector(self.repo, self.config.conflicts)
        self.analyzer = InefficiencyAnalyzer(
            self.repo, self.workload, self.conflicts, self.config,
        )
        self.planner = OptimizationPlanner(self.repo, self.analyzer, self.config.impact)
        self.applier = ChangeApplier(self.repo, self.config.group_balance)

    # ── Aufrufer-Operationen ──────────────────────────────────────────────────

    def compute_workload(self, tutor_id: str) -> ResourceAllocation:
        return self.workload.compute(tutor_id)

    def validate_proposed_window(
        self,
        tutor_id: str,
        start: datetime,
        end: datetime,
        exclude_session_id: Optional[str] = None,
    ) -> None:
        """Wirft ValidationFailedError, wenn das Fenster nicht buchbar ist."""
        self.conflicts.validate_proposed_window(tutor_id, start, end, exclude_session_id)

    def find_booking_conflicts(
        self, tutor_id: str, start: datetime, end: datetime,
        exclude_session_id: Optional[str] = None,
    ) -> list[BookingConflict]:
        return self.conflicts.find_booking_conflicts(tutor_id, start, end, exclude_session_id)

    def find_inefficiencies(self) -> InefficiencyReport:
        return self.analyzer.analyze()

    def build_plan(
        self,
        focus_areas: Optional[Sequence[str]] = None,
        constraints: Optional[PlanConstraints] = None,
        created_by: str = "system",
    ) -> OptimizationPlan:
        return self.planner.build_plan(focus_areas, constraints, created_by=created_by)

    def apply_plan(self, plan_id: str, change_ids: list[str]) -> ApplyResult:
        return self.applier.apply_plan(plan_id, change_ids)

    # ── Ergänzende Operationen ────────────────────────────────────────────────

    def submit_plan(self, plan_id: str) -> OptimizationPlan:
        return self.applier.submit_plan(plan_id)

    def reject_plan(self, plan_id: str) -> OptimizationPlan:
        return self.applier.reject_plan(plan_id)

    def manual_override(self, change: OptimizationChange) -> None:
        """Wendet eine einzelne Änderung ohne Plan sofort an.

        Im Gegensatz zu apply_plan werden Fehler hier NICHT abgefangen.
        """
        logger.info(f"Manuelle Übersteuerung: {change.type} für {change.resource_id}")
        self.applier.apply_change(change)

    def list_plans(self) -> list[OptimizationPlan]:
        return sorted(self.repo.plans(), key=lambda p: p.created_at, reverse=True)

    def resource_overview(self) -> ResourceOverview:
        """Auslastung aller Tutoren plus Summen und Stufen-Verteilung."""
        allocations = self.analyzer.compute_allocations()

        session_ids = {sid for a in allocations for sid in a.session_ids}
        class_ids = {cid for a in allocations for cid in a.class_ids}
        students: set[str] = set()
        for s in self.repo.sessions(lambda r: r.get("id") in session_ids):
            students.update(s.student_ids)
        for e in self.repo.active_enrollments():
            if e.class_id in class_ids:
                students.add(e.student_id)

        distribution = {tier.value: 0 for tier in reversed(list(WorkloadTier))}
        for a in allocations:
            distribution[a.workload.value] += 1

        return ResourceOverview(
            total_tutors=len(allocations),
            total_hours=round(sum(a.total_hours for a in allocations), 2),
            total_students=len(students),
            workload_distribution=distribution,
            allocations=allocations,
        )
