"""Notenbuch: Haupt-CLI.

Verwendung:
  python main.py init <klasse.json> --name "Math 10"   Neue leere Klasse anlegen
  python main.py demo <klasse.json>                    Demo-Klasse erzeugen
  python main.py averages <klasse.json>                Noten aller Schüler
  python main.py stats <klasse.json>                   Stufenverteilung + K/T/C/A
  python main.py student <klasse.json> <id>            Einzelnoten eines Schülers
  python main.py check <klasse.json>                   Plausibilitäts-Check
  python main.py weights 25 25 25 25                   Unit-Gewichte prüfen
  python main.py config init                           Konfiguration anlegen
  python main.py config show                           Konfiguration anzeigen
"""

import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def _load_settings():
    """Lädt die Konfiguration (oder Standardwerte) und richtet Logging ein."""
    from config.manager import ConfigManager, configure_logging
    mgr = ConfigManager()
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    configure_logging(config)
    return mgr, config


def _load_class_or_abort(path: Path):
    """Lädt eine Klassen-Datei oder bricht mit Fehlermeldung ab."""
    from models.class_data import ClassData
    try:
        return ClassData.load_json(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except (ValidationError, ValueError) as e:
        console.print(f"[red bold]Klassen-Datei ungültig:[/red bold] {path}\n{e}")
        sys.exit(1)


# ─── INIT ─────────────────────────────────────────────────────────────────────

@click.command("init")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--name", "-n", required=True, help="Name der Klasse.")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Datei überschreiben.")
def cmd_init(path: Path, name: str, force: bool):
    """Legt eine neue, leere Klasse aus den Vorgaben an."""
    _, config = _load_settings()
    from config.defaults import default_class_data

    if path.exists() and not force:
        console.print(f"[yellow]{path} existiert bereits (--force zum Überschreiben).[/yellow]")
        sys.exit(1)
    class_data = default_class_data(name, defaults=config.class_defaults)
    class_data.save_json(path)
    console.print(f"[green]✓[/green] Klasse gespeichert: {path}")
    console.print(f"\n[dim]{class_data.summary()}[/dim]")


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--students", default=24, show_default=True, help="Anzahl Schüler.")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--final/--no-final", "with_final", default=True,
              help="Mit oder ohne Abschlussprüfung.")
def cmd_demo(path: Path, students: int, seed: int, with_final: bool):
    """Erzeugt eine Demo-Klasse mit zufälligen Noten."""
    _, config = _load_settings()
    from data.fake_data import FakeClassGenerator

    gen = FakeClassGenerator(config.class_defaults, seed=seed)
    class_data = gen.generate(num_students=students, with_final=with_final)
    gen.print_summary(class_data)
    class_data.save_json(path)
    console.print(f"[green]✓[/green] Demo-Klasse gespeichert: {path}")


# ─── AVERAGES / STATS ─────────────────────────────────────────────────────────

@click.command("averages")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def cmd_averages(path: Path):
    """Zeigt Term-, Abschluss- und Gesamtnote sowie K/T/C/A je Schüler."""
    _, config = _load_settings()
    from analysis.class_report import ClassReport

    class_data = _load_class_or_abort(path)
    ClassReport(config.display, console).print_averages(class_data)


@click.command("stats")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def cmd_stats(path: Path):
    """Zeigt Stufenverteilung und klassenweite Kategorie-Durchschnitte."""
    _, config = _load_settings()
    from analysis.class_report import ClassReport

    class_data = _load_class_or_abort(path)
    ClassReport(config.display, console).print_stats(class_data)


# ─── STUDENT ──────────────────────────────────────────────────────────────────

@click.command("student")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.argument("student_id")
def cmd_student(path: Path, student_id: str):
    """Zeigt die Einzelnoten eines Schülers, farbig nach Stufe."""
    _, config = _load_settings()
    from analysis.class_report import ClassReport

    class_data = _load_class_or_abort(path)
    student = class_data.students.get(student_id)
    if student is None:
        console.print(f"[red]Schüler '{student_id}' nicht gefunden.[/red]")
        sys.exit(1)
    ClassReport(config.display, console).print_student(class_data, student)


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def cmd_check(path: Path):
    """Prüft Gewichte und Noten einer Klasse auf Auffälligkeiten."""
    _load_settings()
    from analysis.gradebook_check import GradebookChecker

    class_data = _load_class_or_abort(path)
    console.print(f"\n{class_data.summary()}\n")
    report = GradebookChecker().check(class_data)
    report.print_rich()

    sys.exit(0 if report.is_consistent else 1)


# ─── WEIGHTS ──────────────────────────────────────────────────────────────────

@click.command("weights")
@click.argument("weights", nargs=-1, required=True)
def cmd_weights(weights: tuple[str, ...]):
    """Prüft, ob vorgeschlagene Unit-Gewichte zusammen 100 % ergeben."""
    _load_settings()
    from grading.weights import is_valid_weight_distribution, weight_sum

    total = weight_sum(weights)
    if is_valid_weight_distribution(weights):
        console.print(f"[green]✓[/green] Summe {total:.2f}% – gültig.")
        return
    console.print(f"[red]✗[/red] Summe {total:.2f}% – erforderlich sind 100%.")
    sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Vorhandene Konfiguration überschreiben.")
def config_init(force: bool):
    """Legt eine Konfigurationsdatei mit Standardwerten an."""
    from config.defaults import default_gradebook_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            f"[yellow]Konfiguration existiert bereits: {mgr.path}[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    target = mgr.save(default_gradebook_config())
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_settings()
    from config.defaults import CATEGORY_LABELS

    source = "Standardwerte" if mgr.first_run_check() else str(mgr.path)
    cd = config.class_defaults

    table = Table(title=f"Konfiguration ({source})", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Lehrkraft", config.teacher_name)
    table.add_row("Schule", config.school_name)
    for cat, label in CATEGORY_LABELS.items():
        table.add_row(f"Gewicht {label}", f"{cd.category_weights.get(cat, 0):g}%")
    table.add_row("Abschlussgewicht", f"{cd.final_weight:g}%")
    table.add_row("Units pro Klasse", str(cd.unit_count))
    table.add_row("Abschlussprüfung", "ja" if cd.has_final else "nein")
    table.add_row("Nachkommastellen", str(config.display.decimals))
    table.add_row("Log-Level", config.logging.level)
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Notenbuch: Term-, Abschluss- und Gesamtnoten mit K/T/C/A-Kategorien."""


# Befehle registrieren
cli.add_command(cmd_init)
cli.add_command(cmd_demo)
cli.add_command(cmd_averages)
cli.add_command(cmd_stats)
cli.add_command(cmd_student)
cli.add_command(cmd_check)
cli.add_command(cmd_weights)
cli.add_command(cmd_config)


def main():
    """Einstiegspunkt."""
    cli()


if __name__ == "__main__":
    main()
