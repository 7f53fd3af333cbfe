"""Kursplaner — Haupt-CLI.

Verwendung:
  python main.py config init                      Konfigurationsdatei anlegen
  python main.py config show                      Konfiguration anzeigen
  python main.py register <name>                  Konto anlegen und anmelden
  python main.py login <name>                     Anmelden (auch Administrator)
  python main.py logout                           Abmelden
  python main.py teacher add <name> <kontingent>  Lehrkraft anlegen
  python main.py course add <name> --target 360   Kurs anlegen
  python main.py unit add <kurs-id> <name>        Einheit anlegen
  python main.py assign <kurs> <einheit> <lk> 2   Stunden zuweisen (0 = entfernen)
  python main.py grid                             Planungstabelle anzeigen
  python main.py check                            Planung prüfen
  python main.py export                           Planung als Excel exportieren
  python main.py admin users                      Konten auflisten (Admin)
  python main.py admin backup                     Komplettsicherung (Admin)
  python main.py admin restore <datei.json>       Sicherung einspielen (Admin)
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich import box

from accounts.errors import PlannerError

console = Console()


def _build_controller(ctx: click.Context):
    """Erzeugt Konfiguration, Speicher und Sitzung; stellt die letzte Sitzung wieder her."""
    from accounts.session import SessionController
    from config.manager import ConfigManager
    from storage.gateway import PersistenceGateway
    from storage.kv_store import JsonFileStore

    obj = ctx.ensure_object(dict)
    if "controller" not in obj:
        mgr = ConfigManager(obj.get("config_path"))
        config = mgr.load()
        gateway = PersistenceGateway(JsonFileStore(config.storage.store_path))
        controller = SessionController(gateway, seed_demo_data=config.seed_demo_data)
        controller.restore()
        obj["config"] = config
        obj["controller"] = controller
    return obj["controller"], obj["config"]


def handle_errors(fn):
    """Fachliche Fehler als Meldung ausgeben statt mit Traceback abbrechen."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except PlannerError as e:
            console.print(f"[red bold]Fehler:[/red bold] {e}")
            sys.exit(1)
    return wrapper


def _hours(value: float, decimals: int) -> str:
    from export.helpers import format_hours
    return format_hours(value, decimals)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager
    mgr = ConfigManager(ctx.obj.get("config_path"))
    mgr.show(mgr.load())


@cmd_config.command("init")
@click.option("--no-demo", is_flag=True, default=False,
              help="Neue Benutzer ohne Beispieldaten starten.")
@click.pass_context
def config_init(ctx: click.Context, no_demo: bool):
    """Legt eine Konfigurationsdatei mit Standardwerten an."""
    from config.manager import ConfigManager
    from config.schema import PlannerConfig

    mgr = ConfigManager(ctx.obj.get("config_path"))
    if not mgr.first_run_check():
        if not click.confirm(f"{mgr.path} existiert bereits. Überschreiben?", default=False):
            return
    mgr.save(PlannerConfig(seed_demo_data=not no_demo))
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {mgr.path}")


# ─── KONTO ────────────────────────────────────────────────────────────────────

@click.command("register")
@click.argument("username")
@click.password_option("--password", "-p")
@click.pass_context
@handle_errors
def cmd_register(ctx: click.Context, username: str, password: str):
    """Legt ein neues Konto an und meldet es an."""
    controller, _ = _build_controller(ctx)
    pointer = controller.register(username, password)
    console.print(f"[green]✓[/green] Konto '{pointer.username}' angelegt und angemeldet.")


@click.command("login")
@click.argument("username")
@click.option("--password", "-p", prompt=True, hide_input=True)
@click.pass_context
@handle_errors
def cmd_login(ctx: click.Context, username: str, password: str):
    """Meldet einen Benutzer (oder den Administrator) an."""
    controller, _ = _build_controller(ctx)
    pointer = controller.authenticate(username, password)
    if pointer.is_admin:
        console.print("[green]✓[/green] Als [bold]Administrator[/bold] angemeldet.")
    else:
        console.print(f"[green]✓[/green] Willkommen zurück, [bold]{pointer.username}[/bold]!")


@click.command("admin-login")
@click.argument("username")
@click.option("--password", "-p", prompt=True, hide_input=True)
@click.pass_context
@handle_errors
def cmd_admin_login(ctx: click.Context, username: str, password: str):
    """Meldet den Administrator an (nur mit den fest eingebauten Zugangsdaten)."""
    controller, _ = _build_controller(ctx)
    controller.admin_login(username, password)
    console.print("[green]✓[/green] Als [bold]Administrator[/bold] angemeldet.")


@click.command("logout")
@click.pass_context
@handle_errors
def cmd_logout(ctx: click.Context):
    """Meldet ab. Gespeicherte Daten bleiben erhalten."""
    controller, _ = _build_controller(ctx)
    controller.logout()
    console.print("[green]✓[/green] Abgemeldet.")


@click.command("whoami")
@click.pass_context
@handle_errors
def cmd_whoami(ctx: click.Context):
    """Zeigt die aktive Sitzung an."""
    controller, _ = _build_controller(ctx)
    if controller.is_admin:
        console.print("Angemeldet als [bold]Administrator[/bold].")
    elif controller.is_authenticated:
        last = controller.pointer.last_login
        since = f" (seit {last:%d.%m.%Y %H:%M})" if last else ""
        console.print(f"Angemeldet als [bold]{controller.username}[/bold]{since}.")
    else:
        console.print("[dim]Nicht angemeldet.[/dim]")


# ─── LEHRKRÄFTE ───────────────────────────────────────────────────────────────

@click.group("teacher")
def cmd_teacher():
    """Lehrkräfte verwalten."""


@cmd_teacher.command("list")
@click.pass_context
@handle_errors
def teacher_list(ctx: click.Context):
    """Listet alle Lehrkräfte mit Kontingent und Rest."""
    from planning.aggregation import is_over_allocated, remaining, teacher_totals

    controller, config = _build_controller(ctx)
    plan = controller.plan
    dec = config.display.decimals
    totals = teacher_totals(plan.teachers, plan.courses)

    table = Table(title="Lehrkräfte", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Kontingent", justify="right")
    table.add_column("Zugewiesen", justify="right")
    table.add_column("Rest", justify="right")
    for t in plan.teachers:
        left = remaining(t, totals)
        style = "red" if is_over_allocated(left) else "green"
        table.add_row(t.id, t.name, _hours(t.allowance, dec), _hours(totals[t.id], dec),
                      f"[{style}]{_hours(left, dec)}[/{style}]")
    console.print(table)


@cmd_teacher.command("add")
@click.argument("name")
@click.argument("allowance", type=click.FloatRange(min=0))
@click.pass_context
@handle_errors
def teacher_add(ctx: click.Context, name: str, allowance: float):
    """Legt eine Lehrkraft mit Stundenkontingent an."""
    from planning import mutations

    name = name.strip()
    if not name:
        raise click.BadParameter("Name darf nicht leer sein.", param_hint="NAME")
    controller, _ = _build_controller(ctx)
    plan = controller.apply(mutations.add_teacher, name, allowance)
    console.print(f"[green]✓[/green] Lehrkraft '{name}' angelegt (ID {plan.teachers[-1].id}).")


@cmd_teacher.command("update")
@click.argument("teacher_id")
@click.argument("name")
@click.argument("allowance", type=click.FloatRange(min=0))
@click.pass_context
@handle_errors
def teacher_update(ctx: click.Context, teacher_id: str, name: str, allowance: float):
    """Ändert Name und Kontingent einer Lehrkraft."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    controller.apply(mutations.update_teacher, teacher_id, name.strip(), allowance)
    console.print(f"[green]✓[/green] Lehrkraft {teacher_id} aktualisiert.")


@cmd_teacher.command("delete")
@click.argument("teacher_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
@handle_errors
def teacher_delete(ctx: click.Context, teacher_id: str, yes: bool):
    """Löscht eine Lehrkraft samt aller ihrer Zuweisungen."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    if not yes and not click.confirm(
        f"Lehrkraft {teacher_id} und alle ihre Zuweisungen löschen?", default=False
    ):
        return
    controller.apply(mutations.delete_teacher, teacher_id)
    console.print(f"[green]✓[/green] Lehrkraft {teacher_id} gelöscht.")


# ─── KURSE & EINHEITEN ────────────────────────────────────────────────────────

@click.group("course")
def cmd_course():
    """Kurse verwalten."""


@cmd_course.command("list")
@click.pass_context
@handle_errors
def course_list(ctx: click.Context):
    """Listet alle Kurse mit ihren Einheiten."""
    from planning.aggregation import course_assigned, is_over_budget, unit_assigned

    controller, config = _build_controller(ctx)
    dec = config.display.decimals
    table = Table(title="Kurse", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Kurs / Einheit")
    table.add_column("Zugewiesen", justify="right")
    table.add_column("Soll", justify="right")
    for course in controller.plan.courses:
        style = "red bold" if is_over_budget(course) else "bold"
        target = _hours(course.target_hours, dec) if course.target_hours is not None else "—"
        table.add_row(course.id, f"[{style}]{course.name}[/{style}]",
                      _hours(course_assigned(course), dec), target)
        for unit in course.units:
            table.add_row(f"  {unit.id}", f"  {unit.name}", _hours(unit_assigned(unit), dec), "")
    console.print(table)


@cmd_course.command("add")
@click.argument("name")
@click.option("--target", type=click.FloatRange(min=0), default=None,
              help="Soll-Stunden des Kurses.")
@click.pass_context
@handle_errors
def course_add(ctx: click.Context, name: str, target: Optional[float]):
    """Legt einen Kurs an."""
    from planning import mutations

    name = name.strip()
    if not name:
        raise click.BadParameter("Name darf nicht leer sein.", param_hint="NAME")
    controller, _ = _build_controller(ctx)
    plan = controller.apply(mutations.add_course, name, target)
    console.print(f"[green]✓[/green] Kurs '{name}' angelegt (ID {plan.courses[-1].id}).")


@cmd_course.command("update")
@click.argument("course_id")
@click.argument("name")
@click.option("--target", type=click.FloatRange(min=0), default=None,
              help="Soll-Stunden (weglassen = kein Soll).")
@click.pass_context
@handle_errors
def course_update(ctx: click.Context, course_id: str, name: str, target: Optional[float]):
    """Ändert Name und Soll-Stunden eines Kurses."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    controller.apply(mutations.update_course, course_id, name.strip(), target)
    console.print(f"[green]✓[/green] Kurs {course_id} aktualisiert.")


@cmd_course.command("delete")
@click.argument("course_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
@handle_errors
def course_delete(ctx: click.Context, course_id: str, yes: bool):
    """Löscht einen Kurs samt Einheiten und Zuweisungen."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    if not yes and not click.confirm(
        f"Kurs {course_id} mit allen Einheiten löschen?", default=False
    ):
        return
    controller.apply(mutations.delete_course, course_id)
    console.print(f"[green]✓[/green] Kurs {course_id} gelöscht.")


@click.group("unit")
def cmd_unit():
    """Einheiten eines Kurses verwalten."""


@cmd_unit.command("add")
@click.argument("course_id")
@click.argument("name")
@click.pass_context
@handle_errors
def unit_add(ctx: click.Context, course_id: str, name: str):
    """Hängt eine Einheit an einen Kurs an."""
    from planning import mutations

    name = name.strip()
    if not name:
        raise click.BadParameter("Name darf nicht leer sein.", param_hint="NAME")
    controller, _ = _build_controller(ctx)
    plan = controller.apply(mutations.add_unit, course_id, name)
    course = plan.find_course(course_id)
    if course is None:
        console.print(f"[yellow]Kurs {course_id} nicht gefunden.[/yellow]")
        return
    console.print(f"[green]✓[/green] Einheit '{name}' angelegt (ID {course.units[-1].id}).")


@cmd_unit.command("update")
@click.argument("course_id")
@click.argument("unit_id")
@click.argument("name")
@click.pass_context
@handle_errors
def unit_update(ctx: click.Context, course_id: str, unit_id: str, name: str):
    """Benennt eine Einheit um."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    controller.apply(mutations.update_unit, course_id, unit_id, name.strip())
    console.print(f"[green]✓[/green] Einheit {unit_id} aktualisiert.")


@cmd_unit.command("delete")
@click.argument("course_id")
@click.argument("unit_id")
@click.pass_context
@handle_errors
def unit_delete(ctx: click.Context, course_id: str, unit_id: str):
    """Entfernt eine Einheit aus einem Kurs."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    controller.apply(mutations.delete_unit, course_id, unit_id)
    console.print(f"[green]✓[/green] Einheit {unit_id} gelöscht.")


# ─── ZUWEISUNGEN ──────────────────────────────────────────────────────────────

@click.command("assign")
@click.argument("course_id")
@click.argument("unit_id")
@click.argument("teacher_id")
@click.argument("hours", type=float)
@click.pass_context
@handle_errors
def cmd_assign(ctx: click.Context, course_id: str, unit_id: str, teacher_id: str,
               hours: float):
    """Weist einer Lehrkraft Stunden auf einer Einheit zu (0 = entfernen)."""
    from planning import mutations
    from planning.aggregation import is_over_allocated, remaining, teacher_totals

    controller, config = _build_controller(ctx)
    plan = controller.apply(mutations.update_assignment, course_id, unit_id, teacher_id, hours)
    teacher = plan.find_teacher(teacher_id)
    if teacher is None:
        console.print(f"[yellow]Hinweis: Lehrkraft {teacher_id} ist nicht angelegt.[/yellow]")
        return
    left = remaining(teacher, teacher_totals(plan.teachers, plan.courses))
    style = "red" if is_over_allocated(left) else "green"
    console.print(
        f"[green]✓[/green] {teacher.name}: Rest "
        f"[{style}]{_hours(left, config.display.decimals)}h[/{style}]"
    )


@click.command("clear")
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage leeren.")
@click.pass_context
@handle_errors
def cmd_clear(ctx: click.Context, yes: bool):
    """Entfernt alle Zuweisungen in allen Kursen."""
    from planning import mutations

    controller, _ = _build_controller(ctx)
    if not yes and not click.confirm(
        "Alle Zuweisungen löschen? Das kann nicht rückgängig gemacht werden.", default=False
    ):
        return
    controller.apply(mutations.clear_all_assignments)
    console.print("[green]✓[/green] Alle Zuweisungen entfernt.")


# ─── ANZEIGE & PRÜFUNG ────────────────────────────────────────────────────────

@click.command("grid")
@click.pass_context
@handle_errors
def cmd_grid(ctx: click.Context):
    """Zeigt die Planungstabelle (Kurs/Einheit × Lehrkraft)."""
    from export.grid_renderer import header_row, render_grid_rows

    controller, config = _build_controller(ctx)
    plan = controller.plan
    headers = header_row(plan)

    table = Table(title=f"Planung – {controller.username}", box=box.SIMPLE_HEAD,
                  show_lines=False)
    table.add_column(headers[0], no_wrap=True)
    for h in headers[1:]:
        table.add_column(h, justify="right")

    styles = {"over": "red bold", "warn": "yellow", "ok": "green"}
    for row in render_grid_rows(plan, config.display.decimals,
                                config.display.warn_remaining_below):
        cells = list(row.cells)
        if row.status:
            cells = [f"[{styles[s]}]{c}[/{styles[s]}]" for c, s in zip(cells, row.status)]
        total = f"[red bold]{row.total}[/red bold]" if row.over_budget else row.total
        if row.kind == "summary":
            table.add_row(f"[dim]{row.label}[/dim]", total, *cells)
        elif row.kind == "course":
            table.add_row(f"[bold cyan]{row.label}[/bold cyan]", total, *cells)
        else:
            table.add_row(f"  {row.label}", total, *cells)
    console.print(table)


@click.command("check")
@click.pass_context
@handle_errors
def cmd_check(ctx: click.Context):
    """Prüft die Planung auf Überplanung und verwaiste Zuweisungen."""
    from analysis.plan_check import check_plan

    controller, config = _build_controller(ctx)
    console.print(f"\n[dim]{controller.plan.summary()}[/dim]\n")
    report = check_plan(controller.plan, config.display.warn_remaining_below)
    report.print_rich()
    sys.exit(0 if report.is_consistent else 1)


@click.command("export")
@click.option("--output", "-o", default="output/kursplanung.xlsx",
              help="Ausgabepfad für die Excel-Datei.")
@click.pass_context
@handle_errors
def cmd_export(ctx: click.Context, output: str):
    """Exportiert die Planung als Excel-Datei."""
    from export.excel_export import PlanExcelExporter

    controller, config = _build_controller(ctx)
    out_path = Path(output)
    PlanExcelExporter(
        controller.plan,
        decimals=config.display.decimals,
        warn_below=config.display.warn_remaining_below,
        title=f"Kursplanung {controller.username}",
    ).export(out_path)
    console.print(f"[green]✓[/green] Excel gespeichert: {out_path}")


# ─── ADMIN ────────────────────────────────────────────────────────────────────

@click.group("admin")
def cmd_admin():
    """Konten verwalten, sichern und wiederherstellen (nur Administrator)."""


@cmd_admin.command("users")
@click.pass_context
@handle_errors
def admin_users(ctx: click.Context):
    """Listet alle registrierten Konten."""
    controller, _ = _build_controller(ctx)
    accounts = controller.list_accounts()
    if not accounts:
        console.print("[dim]Keine Konten vorhanden.[/dim]")
        return
    table = Table(title="Konten", box=box.ROUNDED)
    table.add_column("Benutzer", style="bold")
    table.add_column("Letzte Anmeldung")
    for username, record in accounts.items():
        last = f"{record.last_login:%d.%m.%Y %H:%M}" if record.last_login else "nie"
        table.add_row(username, last)
    console.print(table)


@cmd_admin.command("create")
@click.argument("username")
@click.password_option("--password", "-p")
@click.pass_context
@handle_errors
def admin_create(ctx: click.Context, username: str, password: str):
    """Legt ein Konto an."""
    controller, _ = _build_controller(ctx)
    controller.create_account(username, password)
    console.print(f"[green]✓[/green] Konto '{username.strip()}' angelegt.")


@cmd_admin.command("delete")
@click.argument("username")
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
@handle_errors
def admin_delete(ctx: click.Context, username: str, yes: bool):
    """Löscht ein Konto samt Planung."""
    controller, _ = _build_controller(ctx)
    if not yes and not click.confirm(
        f"Konto '{username}' und alle zugehörigen Daten löschen?", default=False
    ):
        return
    if controller.delete_account(username):
        console.print(f"[green]✓[/green] Konto '{username}' gelöscht.")
    else:
        console.print(f"[yellow]Konto '{username}' nicht gefunden.[/yellow]")


@cmd_admin.command("reset-password")
@click.argument("username")
@click.password_option("--password", "-p")
@click.pass_context
@handle_errors
def admin_reset_password(ctx: click.Context, username: str, password: str):
    """Setzt das Passwort eines Kontos neu."""
    controller, _ = _build_controller(ctx)
    if controller.reset_password(username, password):
        console.print(f"[green]✓[/green] Passwort für '{username}' aktualisiert.")
    else:
        console.print(f"[yellow]Konto '{username}' nicht gefunden.[/yellow]")


@cmd_admin.command("backup")
@click.option("--output", "-o", default=None,
              help="Zieldatei (Standard: <backup_dir>/planner_backup_<zeit>.json).")
@click.pass_context
@handle_errors
def admin_backup(ctx: click.Context, output: Optional[str]):
    """Sichert alle Konten und Planungen in eine JSON-Datei."""
    from storage.backup import default_backup_name, write_backup_file

    controller, config = _build_controller(ctx)
    document = controller.export_backup()
    target = Path(output) if output else config.storage.backup_dir / default_backup_name()
    write_backup_file(document, target)
    console.print(
        f"[green]✓[/green] Backup gespeichert: {target} "
        f"({len(document.users)} Konten, {len(document.user_data)} Planungen)"
    )


@cmd_admin.command("restore")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--yes", "-y", is_flag=True, default=False, help="Ohne Rückfrage einspielen.")
@click.pass_context
@handle_errors
def admin_restore(ctx: click.Context, datei: Path, yes: bool):
    """Spielt eine Sicherung ein (überschreibt enthaltene Konten und Planungen)."""
    controller, _ = _build_controller(ctx)
    if not yes and not click.confirm(
        "Enthaltene Konten und Planungen werden überschrieben. Fortfahren?", default=False
    ):
        return
    result = controller.import_backup_file(datei)
    console.print(
        f"[green]✓[/green] Wiederhergestellt: {len(result.users_restored)} Konten, "
        f"{len(result.plans_restored)} Planungen."
    )
    if result.skipped:
        console.print(f"[yellow]Übersprungen (ungültig): {', '.join(result.skipped)}[/yellow]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur Konfigurationsdatei (Standard: config/planner.yaml).")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log-Ausgaben anzeigen.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Kursplaner: Lehrkräfte-Stunden auf Kurse und Einheiten verteilen.

    Starten Sie mit: python main.py register <name>
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_register)
cli.add_command(cmd_login)
cli.add_command(cmd_admin_login)
cli.add_command(cmd_logout)
cli.add_command(cmd_whoami)
cli.add_command(cmd_teacher)
cli.add_command(cmd_course)
cli.add_command(cmd_unit)
cli.add_command(cmd_assign)
cli.add_command(cmd_clear)
cli.add_command(cmd_grid)
cli.add_command(cmd_check)
cli.add_command(cmd_export)
cli.add_command(cmd_admin)


if __name__ == "__main__":
    main()
