"""Tutor-Ressourcen-Engine — Haupt-CLI.

Verwendung:
  python main.py config init               Standardkonfiguration anlegen
  python main.py config show               Konfiguration anzeigen
  python main.py generate                  Demo-Daten in den Speicher schreiben
  python main.py overview                  Auslastung aller Tutoren
  python main.py workload <tutor>          Auslastung eines Tutors
  python main.py check <tutor> <von> <bis> Zeitfenster vorab prüfen
  python main.py analyze                   Ineffizienzen finden
  python main.py optimize                  Optimierungsplan erstellen
  python main.py plans                     Gespeicherte Pläne auflisten
  python main.py apply <plan> <id>...      Änderungen eines Plans anwenden
  python main.py submit <plan>             Plan zur Freigabe vorlegen
  python main.py reject <plan>             Plan ablehnen
"""

import sys
from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Akzeptierte Formate für Zeitpunkte auf der Kommandozeile
DATETIME_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


def _load_config_or_abort():
    """Lädt die Konfiguration (oder Standardwerte) und richtet Logging ein."""
    from config.manager import ConfigManager
    from config.log_setup import setup_logging

    mgr = ConfigManager()
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    setup_logging(config.logging)
    return mgr, config


def _open_engine():
    """Erzeugt eine SchedulingEngine über dem konfigurierten Speicher."""
    from engine.service import SchedulingEngine
    from store import create_store

    _, config = _load_config_or_abort()
    return SchedulingEngine(create_store(config.store), config)


def _abort(message: str):
    console.print(f"[red]✗[/red] {escape(message)}")
    sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()
    if mgr.first_run_check():
        console.print(
            "[yellow]Keine Konfigurationsdatei gefunden, es gelten die Standardwerte.[/yellow]"
        )
    mgr.print_rich(config)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(force: bool):
    """Schreibt die Standardkonfiguration als kommentierte YAML-Datei."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(default_engine_config())


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
def cmd_generate(seed: int):
    """Erzeugt Demo-Daten (Tutoren, Sitzungen, Klassen, Einschreibungen).

    Bestehende Daten im JSON-Speicher werden dabei ersetzt.
    """
    from config.defaults import ALL_COLLECTIONS
    from data.fake_data import DemoDataGenerator
    from store import JsonFileStore, create_store

    _, config = _load_config_or_abort()
    store = create_store(config.store)

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = DemoDataGenerator(seed=seed)
    data = gen.generate()

    if isinstance(store, JsonFileStore):
        for collection in ALL_COLLECTIONS:
            store.import_records(collection, [])
    data.load_into(store)

    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")
    if isinstance(store, JsonFileStore):
        console.print(f"[green]✓[/green] Gespeichert in: {store.data_dir}")


# ─── AUSLASTUNG ───────────────────────────────────────────────────────────────

@click.command("overview")
def cmd_overview():
    """Zeigt die Auslastung aller Tutoren."""
    engine = _open_engine()
    engine.resource_overview().print_rich()


@click.command("workload")
@click.argument("tutor_id")
def cmd_workload(tutor_id: str):
    """Berechnet die Auslastung eines Tutors."""
    from engine.errors import NotFoundError

    engine = _open_engine()
    try:
        a = engine.compute_workload(tutor_id)
    except NotFoundError as e:
        _abort(str(e))

    console.print(Panel(
        f"Stunden: [bold]{a.total_hours:g}[/bold] | "
        f"Schüler: [bold]{a.student_count}[/bold] | "
        f"Stufe: [bold]{a.workload.value}[/bold]\n"
        f"Sitzungen: {', '.join(a.session_ids) or '–'}\n"
        f"Klassen: {', '.join(a.class_ids) or '–'}",
        title=f"Auslastung {tutor_id}",
        border_style="cyan",
    ))


# ─── KONFLIKTPRÜFUNG ──────────────────────────────────────────────────────────

@click.command("check")
@click.argument("tutor_id")
@click.argument("start", type=click.DateTime(formats=DATETIME_FORMATS))
@click.argument("end", type=click.DateTime(formats=DATETIME_FORMATS))
@click.option("--exclude", "exclude_session_id", default=None,
              help="Sitzungs-ID, die nicht als Konflikt zählt (z.B. beim Verlegen).")
def cmd_check(tutor_id: str, start: datetime, end: datetime, exclude_session_id):
    """Prüft, ob ein Zeitfenster für einen Tutor buchbar ist."""
    from engine.errors import NotFoundError, ValidationFailedError

    engine = _open_engine()
    try:
        engine.validate_proposed_window(tutor_id, start, end, exclude_session_id)
    except NotFoundError as e:
        _abort(str(e))
    except ValidationFailedError as e:
        console.print(Panel(
            f"[bold]{e.reason.value}[/bold]\n{e.message}"
            + (f"\nKonflikt mit: {e.conflicting_id}" if e.conflicting_id else ""),
            title="Zeitfenster abgelehnt",
            border_style="red",
        ))
        sys.exit(1)

    console.print(
        f"[green]✓[/green] {start:%d.%m.%Y %H:%M}–{end:%H:%M} ist für {tutor_id} buchbar."
    )


# ─── ANALYSE ──────────────────────────────────────────────────────────────────

@click.command("analyze")
@click.option("--severity", type=click.Choice(["high", "medium", "low"]), default=None,
              help="Nur Befunde dieses Schweregrads.")
@click.option("--type", "type_", default=None,
              type=click.Choice(["overloaded_tutor", "underutilized_tutor",
                                 "unbalanced_group", "resource_conflict"]),
              help="Nur Befunde dieser Art.")
def cmd_analyze(severity, type_):
    """Findet überlastete Tutoren, unausgewogene Klassen und Terminkonflikte."""
    engine = _open_engine()
    report = engine.find_inefficiencies()
    if severity or type_:
        report = report.filter(severity=severity, kind=type_)
    report.print_rich()


# ─── OPTIMIERUNG ──────────────────────────────────────────────────────────────

@click.command("optimize")
@click.option("--focus", "focus_areas", multiple=True,
              help="Schwerpunkt (workload, group_balance, resource_conflicts, "
                   "utilization); mehrfach angebbar.")
@click.option("--created-by", default="cli", help="Ersteller des Plans.")
def cmd_optimize(focus_areas: tuple, created_by: str):
    """Erstellt einen Optimierungsplan (Status draft) und speichert ihn."""
    engine = _open_engine()
    plan = engine.build_plan(list(focus_areas), created_by=created_by)

    imp = plan.estimated_impact
    console.print(Panel(
        f"[bold]{plan.name}[/bold]  ({plan.id})\n{plan.description}\n"
        f"Entlastung: {imp.workload_reduction:g}% | "
        f"Ausgleich: {imp.balance_improvement:g}% | "
        f"Auslastung: {imp.resource_utilization:g}%",
        title="Optimierungsplan",
        border_style="cyan",
    ))
    if not plan.changes:
        console.print("[green]Keine Änderungen nötig.[/green]")
        return

    table = Table(box=box.ROUNDED)
    table.add_column("Typ", width=20)
    table.add_column("Ressource", width=14)
    table.add_column("Von", width=12)
    table.add_column("Nach", width=12)
    table.add_column("Begründung")
    for c in plan.changes:
        table.add_row(c.type, c.resource_id, c.from_ref, c.to_ref, c.reason)
    console.print(table)
    console.print(
        f"\nAnwenden mit: [bold]python main.py apply {plan.id} <ressource>...[/bold]"
    )


@click.command("plans")
def cmd_plans():
    """Listet alle gespeicherten Optimierungspläne auf (neueste zuerst)."""
    engine = _open_engine()
    plans = engine.list_plans()
    if not plans:
        console.print("[yellow]Keine Pläne gespeichert.[/yellow]")
        return

    table = Table(title="Optimierungspläne", box=box.ROUNDED)
    table.add_column("ID")
    table.add_column("Erstellt")
    table.add_column("Status")
    table.add_column("Änderungen", justify="right")
    table.add_column("Angewendet / Fehler")
    for p in plans:
        result = ""
        if p.applied_at is not None:
            result = f"{len(p.applied_change_ids)} / {len(p.failed_change_ids)}"
        table.add_row(
            p.id, p.created_at.strftime("%d.%m.%Y %H:%M"), p.status.value,
            str(len(p.changes)), result,
        )
    console.print(table)


@click.command("apply")
@click.argument("plan_id")
@click.argument("change_ids", nargs=-1, required=True)
def cmd_apply(plan_id: str, change_ids: tuple):
    """Wendet die Änderungen mit den angegebenen Ressourcen-IDs an."""
    from engine.errors import InvalidStateError, NotFoundError

    engine = _open_engine()
    try:
        result = engine.apply_plan(plan_id, list(change_ids))
    except (NotFoundError, InvalidStateError) as e:
        _abort(str(e))

    console.print(
        f"[green]✓[/green] {len(result.applied)} Änderung(en) angewendet: "
        f"{', '.join(result.applied) or '–'}"
    )
    for f in result.failed:
        console.print(f"  [red]✗[/red] {f.type.value} {f.resource_id}: {f.error}")
    if not result.is_complete:
        sys.exit(1)


@click.command("submit")
@click.argument("plan_id")
def cmd_submit(plan_id: str):
    """Legt einen Plan zur Freigabe vor (draft → pending)."""
    from engine.errors import InvalidStateError, NotFoundError

    engine = _open_engine()
    try:
        plan = engine.submit_plan(plan_id)
    except (NotFoundError, InvalidStateError) as e:
        _abort(str(e))
    console.print(f"[green]✓[/green] Plan {plan.id}: {plan.status.value}")


@click.command("reject")
@click.argument("plan_id")
def cmd_reject(plan_id: str):
    """Lehnt einen Plan ab (draft/pending → rejected)."""
    from engine.errors import InvalidStateError, NotFoundError

    engine = _open_engine()
    try:
        plan = engine.reject_plan(plan_id)
    except (NotFoundError, InvalidStateError) as e:
        _abort(str(e))
    console.print(f"[green]✓[/green] Plan {plan.id}: {plan.status.value}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Ressourcen-Planung und -Optimierung für Tutor-Zentren.

    Starten Sie mit: python main.py generate
    """


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_overview)
cli.add_command(cmd_workload)
cli.add_command(cmd_check)
cli.add_command(cmd_analyze)
cli.add_command(cmd_optimize)
cli.add_command(cmd_plans)
cli.add_command(cmd_apply)
cli.add_command(cmd_submit)
cli.add_command(cmd_reject)


if __name__ == "__main__":
    main()
