"""Konfigurationsschema des Notenbuchs (Pydantic v2)."""

import logging

from pydantic import BaseModel, Field, field_validator


# ─── NEUE KLASSEN ───

class ClassDefaults(BaseModel):
    """Vorgaben für neu angelegte Klassen."""
    # Gewicht je Kategorie (Knowledge, Thinking, Communication, Application)
    category_weights: dict[str, float] = Field(
        default={"k": 25.0, "t": 25.0, "c": 25.0, "a": 25.0},
        description="Kategorie-Gewichte in Prozent")
    # Anteil der Abschlussprüfung an der Gesamtnote
    final_weight: float = Field(30.0, ge=0, le=100,
        description="Abschlussgewicht in Prozent")
    # Anzahl Term-Units, die beim Anlegen erzeugt werden (gleich gewichtet)
    unit_count: int = Field(5, ge=1, le=20,
        description="Anzahl Units einer neuen Klasse")
    # Ob neue Klassen direkt eine Abschluss-Unit bekommen
    has_final: bool = Field(False,
        description="Abschlussprüfung direkt anlegen")

    @field_validator("category_weights")
    @classmethod
    def _known_categories(cls, v: dict[str, float]) -> dict[str, float]:
        unknown = set(v) - {"k", "t", "c", "a"}
        if unknown:
            raise ValueError(f"Unbekannte Kategorien: {sorted(unknown)}")
        if any(w < 0 for w in v.values()):
            raise ValueError("Kategorie-Gewichte dürfen nicht negativ sein.")
        return v


# ─── ANZEIGE ───

class DisplayConfig(BaseModel):
    """Darstellung in Tabellen und Berichten."""
    # Nachkommastellen für Prozentwerte
    decimals: int = Field(1, ge=0, le=4,
        description="Nachkommastellen für Prozentwerte")
    # Platzhalter für fehlende Noten
    empty_placeholder: str = Field("--%",
        description="Anzeige, wenn keine Note berechnet werden kann")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Log-Ausgabe der Kommandozeile."""
    level: str = Field("WARNING",
        description="DEBUG, INFO, WARNING, ERROR oder CRITICAL")

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return level


# ─── GESAMT-CONFIG ───

class GradebookConfig(BaseModel):
    """Gesamtkonfiguration des Notenbuchs."""
    # Name der Lehrkraft (für Berichte)
    teacher_name: str = Field("Teacher",
        description="Name der Lehrkraft")
    # Name der Schule (für Berichte)
    school_name: str = Field("School",
        description="Name der Schule")
    # Vorgaben für neue Klassen
    class_defaults: ClassDefaults = Field(default_factory=ClassDefaults)
    # Darstellung
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
