"""Konfigurationsmanager: Laden, Speichern und Logging-Einrichtung.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import GradebookConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120

logger = logging.getLogger(__name__)


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Notenbuch: Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "class_defaults": (
        "Neue Klassen",
        "Kategorie-Gewichte (k/t/c/a), Abschlussgewicht und Anzahl Units.\n"
        "Die Units einer neuen Klasse werden gleich gewichtet.",
    ),
    "display": (
        "Anzeige",
        None,
    ),
    "logging": (
        "Logging",
        "DEBUG, INFO, WARNING, ERROR oder CRITICAL.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "gradebook_config.yaml"

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.path.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> GradebookConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.path
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return GradebookConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self) -> GradebookConfig:
        """Wie load(), aber ohne Datei gelten die Standardwerte."""
        if self.first_run_check():
            logger.info(f"Keine Konfiguration unter {self.path} – verwende Standardwerte")
            return GradebookConfig()
        return self.load()

    # ─── Speichern ───

    def save(self, config: GradebookConfig, path: Optional[Path] = None) -> Path:
        """Speichere Config als YAML mit Kommentaren."""
        target = Path(path) if path else self.path
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        return target

    def _build_commented_yaml(self, config: GradebookConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "class_defaults" in cm:
            defaults_map = CommentedMap(cm["class_defaults"])
            defaults_map.yaml_add_eol_comment("Prozent der Gesamtnote", "final_weight")
            cm["class_defaults"] = defaults_map

        return cm


def configure_logging(config: GradebookConfig) -> None:
    """Setzt das Root-Log-Level aus der Konfiguration."""
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logging.getLogger().setLevel(config.logging.level)
