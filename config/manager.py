"""Konfigurationsmanager: Laden, Speichern und Anzeigen der Engine-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_engine_config
from config.schema import EngineConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Tutor-Ressourcen-Engine — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "workload": (
        "Auslastung",
        "Stufen werden in der Reihenfolge overloaded → high → medium geprüft.\n"
        "Stunden ODER Schülerzahl über der Schwelle genügt.",
    ),
    "conflicts": (
        "Konflikte",
        "Pflicht-Pause zwischen zwei Einzelsitzungen desselben Tutors.",
    ),
    "group_balance": (
        "Gruppengröße",
        "Anteile beziehen sich auf aktive Einschreibungen / maxStudents.",
    ),
    "impact": (
        "Wirkungsschätzung",
        "Heuristische Prozentwerte, keine Messung.",
    ),
    "store": (
        "Datenspeicher",
        None,
    ),
    "logging": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "engine_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> EngineConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return EngineConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> EngineConfig:
        """Wie load(), fällt aber ohne Datei auf die Standardkonfiguration zurück."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return default_engine_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: EngineConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: EngineConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "conflicts" in cm:
            conflicts_map = CommentedMap(cm["conflicts"])
            conflicts_map.yaml_add_eol_comment("Minuten", "buffer_minutes")
            cm["conflicts"] = conflicts_map

        return cm

    # ─── Anzeige ───

    def print_rich(self, config: EngineConfig) -> None:
        """Zeigt alle Konfigurationswerte gruppiert als Tabelle an."""
        table = Table(title=f"Konfiguration – {config.organization_name}",
                      box=box.ROUNDED)
        table.add_column("Bereich", style="bold")
        table.add_column("Parameter")
        table.add_column("Wert", justify="right")
        for section, (label, _) in _SECTION_COMMENTS.items():
            values = getattr(config, section).model_dump(mode="json")
            for i, (key, value) in enumerate(values.items()):
                table.add_row(label if i == 0 else "", key, str(value))
        console.print(table)
