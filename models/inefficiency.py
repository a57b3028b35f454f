"""Befunde der Ineffizienz-Analyse (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class InefficiencyType(str, Enum):
    OVERLOADED_TUTOR = "overloaded_tutor"
    UNDERUTILIZED_TUTOR = "underutilized_tutor"
    UNBALANCED_GROUP = "unbalanced_group"
    RESOURCE_CONFLICT = "resource_conflict"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class ResourceInefficiency(BaseModel):
    """Ein typisierter Befund über ein Planungs- oder Verteilungsproblem.

    affected_resources enthält alle betroffenen IDs (Tutor, Sitzungen,
    Klassen); tutor_id / session_ids / class_ids sind dieselben IDs
    nach Art getrennt, damit der Planer nicht am ID-Präfix raten muss.
    """

    id: str
    type: InefficiencyType
    severity: Severity
    description: str
    affected_resources: list[str]
    suggested_actions: list[str] = []
    tutor_id: Optional[str] = None
    session_ids: list[str] = []
    class_ids: list[str] = []
    created_at: datetime = Field(default_factory=datetime.now)

    def fingerprint(self) -> tuple:
        """Vergleichsschlüssel ohne generierte ID und Zeitstempel."""
        return (
            self.type.value, self.severity.value, self.description,
            tuple(self.affected_resources),
        )


class InefficiencyReport(BaseModel):
    """Ergebnis eines Analyse-Laufs."""

    findings: list[ResourceInefficiency]
    skipped_records: int = 0     # fehlerhafte Datensätze, die übersprungen wurden

    def filter(
        self,
        severity: Optional[Severity] = None,
        kind: Optional[InefficiencyType] = None,
    ) -> "InefficiencyReport":
        """Neuer Report nur mit Befunden des Schweregrads / Typs."""
        findings = [
            f for f in self.findings
            if (severity is None or f.severity == severity)
            and (kind is None or f.type == kind)
        ]
        return InefficiencyReport(findings=findings, skipped_records=self.skipped_records)

    def sorted_by_severity(self) -> list[ResourceInefficiency]:
        """Befunde absteigend nach Schweregrad (stabil innerhalb einer Stufe)."""
        return sorted(self.findings, key=lambda f: f.severity.rank, reverse=True)

    def count_by_severity(self) -> dict[str, int]:
        counts = {s.value: 0 for s in reversed(list(Severity))}
        for f in self.findings:
            counts[f.severity.value] += 1
        return counts

    def count_by_type(self) -> dict[str, int]:
        counts = {t.value: 0 for t in InefficiencyType}
        for f in self.findings:
            counts[f.type.value] += 1
        return counts

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        counts = self.count_by_severity()
        lines = [
            f"Befunde: [bold]{len(self.findings)}[/bold] | "
            f"[red]hoch {counts['high']}[/red] | "
            f"[yellow]mittel {counts['medium']}[/yellow] | "
            f"[dim]niedrig {counts['low']}[/dim]",
        ]
        if self.skipped_records:
            lines.append(
                f"[yellow]Übersprungene fehlerhafte Datensätze: {self.skipped_records}[/yellow]"
            )
        console.print(Panel("\n".join(lines), title="Ineffizienz-Analyse", border_style="cyan"))

        if not self.findings:
            console.print("[dim]Keine Ineffizienzen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Schwere", width=8)
        table.add_column("Typ", width=20)
        table.add_column("Beschreibung")
        table.add_column("Betroffen", width=28)

        colors = {"high": "red", "medium": "yellow", "low": "dim"}
        for f in self.sorted_by_severity():
            color = colors[f.severity.value]
            table.add_row(
                f"[{color}]{f.severity.value.upper()}[/{color}]",
                f.type.value,
                f.description,
                ", ".join(f.affected_resources[:4])
                + (" …" if len(f.affected_resources) > 4 else ""),
            )
        console.print(table)
