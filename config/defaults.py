import uuid
from typing import Optional

from config.schema import ClassDefaults, GradebookConfig
from models.class_data import ClassData
from models.unit import Unit

# Anzeigenamen der vier Bewertungskategorien
CATEGORY_LABELS: dict[str, str] = {
    "k": "Knowledge",
    "t": "Thinking/Inquiry",
    "c": "Communication",
    "a": "Application",
}

# Rich-Stile je Leistungsstufe (entspricht der Farbcodierung der Notentabelle)
BAND_STYLES: dict[str, str] = {
    "Level 4": "green",
    "Level 3": "blue",
    "Level 2": "yellow",
    "Level 1": "dark_orange",
    "R": "red",
    "missing": "bold red",
}


def default_gradebook_config() -> GradebookConfig:
    """Standard-Konfiguration: 4 × 25 % Kategorien, 5 Units, Abschluss 30 %."""
    return GradebookConfig()


def default_class_data(
    name: str,
    class_id: Optional[str] = None,
    defaults: Optional[ClassDefaults] = None,
) -> ClassData:
    """Neue, leere Klasse aus den Vorgaben.

    Die Term-Units werden gleich gewichtet (5 Units → je 20 %).
    Ist has_final gesetzt, kommt eine leere Abschluss-Unit dazu.
    """
    defaults = defaults or ClassDefaults()
    class_id = class_id or f"class_{uuid.uuid4().hex[:10]}"
    unit_weight = 100 / defaults.unit_count

    units: dict[str, Unit] = {}
    for i in range(1, defaults.unit_count + 1):
        unit_id = f"unit_{i}"
        units[unit_id] = Unit(id=unit_id, order=i, weight=unit_weight)
    if defaults.has_final:
        units["final"] = Unit(
            id="final", title="Final Assessment", order=999, is_final=True,
        )

    return ClassData(
        id=class_id,
        name=name,
        category_weights=dict(defaults.category_weights),
        units=units,
        final_weight=defaults.final_weight,
        has_final=defaults.has_final,
    )
