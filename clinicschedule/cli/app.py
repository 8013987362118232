"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import NoReturn, Optional, Annotated, Tuple

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_loader import load_schedule
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ScheduleError
from ..domain.models import WEEKDAY_NAMES, Doctor
from ..services.appointment_service import AppointmentService
from ..services.schedule_service import ScheduleService

app = typer.Typer(
    name="clinicschedule",
    help="Query doctors' appointments and open appointment slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Appointment scheduling and availability engine.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_services(config_file: Optional[Path]) -> Tuple[AppConfig, AppointmentService, ScheduleService]:
    """Load configuration and data, and wire up the query services."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)

    data = load_schedule(
        config.data_file,
        timezone=config.timezone,
        strict=config.strict_ingestion
    )

    appointment_service = AppointmentService(data=data, timezone=config.timezone)
    schedule_service = ScheduleService(
        appointment_service,
        grid_start=config.grid.get_start_time(),
        grid_end=config.grid.get_end_time(),
        grid_stride_minutes=config.grid.stride_minutes,
        slot_duration_minutes=config.defaults.slot_duration_minutes,
    )
    return config, appointment_service, schedule_service


def _parse_day(value: Optional[str], tz: str, label: str = "date") -> DateTime:
    """Parse a YYYY-MM-DD option; defaults to today."""
    if value is None:
        return pendulum.today(tz)

    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as e:
        console.print(f"[red]Could not parse {label} '{value}': {e}[/red]")
        raise typer.Exit(1)


def _format_hours(doctor: Doctor) -> str:
    parts = []
    for name, hours in doctor.working_hours.as_dict().items():
        if hours is not None:
            parts.append(f"{name[:3].capitalize()} {hours}")
    return ", ".join(parts) or "-"


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def doctors(
    config_file: ConfigOption = None,
    by_specialty: Annotated[bool, typer.Option("--by-specialty", help="Group doctors by specialty.")] = False,
):
    """
    List all doctors and their weekly working hours.
    """
    try:
        _, service, _ = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    all_doctors = service.get_all_doctors()
    if not all_doctors:
        console.print("[yellow]No doctors found in the schedule data.[/yellow]")
        return

    if by_specialty:
        for specialty, group in service.get_doctors_by_specialty().items():
            console.print(f"\n[bold cyan]{specialty}[/bold cyan]")
            for doctor in group:
                console.print(f"  {doctor.id}  {doctor.name}")
        console.print()
        return

    table = Table(title="Doctors", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Specialty")
    table.add_column("Working hours")

    for doctor in all_doctors:
        table.add_row(doctor.id, doctor.name, doctor.specialty, _format_hours(doctor))

    console.print()
    console.print(table)
    console.print()


@app.command()
def appointments(
    doctor_id: Annotated[str, typer.Argument(help="Doctor ID")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Range start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Range end date (YYYY-MM-DD)")] = None,
):
    """
    Show a doctor's appointments for a day or a date range.

    Examples:

        clinicschedule appointments doctor-1 --date 2024-11-25

        clinicschedule appointments doctor-1 --start 2024-11-25 --end 2024-12-01
    """
    try:
        config, service, _ = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    tz = config.timezone

    if (start is None) != (end is None):
        console.print("[red]Error: --start and --end must be used together.[/red]")
        raise typer.Exit(1)

    if start and end:
        range_start = _parse_day(start, tz, "start date")
        range_end = _parse_day(end, tz, "end date")
        found = service.get_appointments_by_doctor_and_date_range(doctor_id, range_start, range_end)
        period = f"{range_start.format('YYYY-MM-DD')} - {range_end.format('YYYY-MM-DD')}"
    else:
        day = _parse_day(date, tz)
        found = service.get_appointments_by_doctor_and_date(doctor_id, day)
        period = day.format("YYYY-MM-DD")

    populated = service.get_populated_appointments(service.sort_appointments_by_time(found))

    if not populated:
        console.print(f"[yellow]No appointments for {doctor_id} in {period}.[/yellow]")
        return

    table = Table(title=f"Appointments {doctor_id} | {period}", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Time")
    table.add_column("Patient", style="bold yellow")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Notes", style="dim")

    for apt in populated:
        table.add_row(
            apt.start_time.format("YYYY-MM-DD"),
            f"{apt.start_time.format('HH:mm')} – {apt.end_time.format('HH:mm')}",
            apt.patient.name,
            apt.type.value,
            apt.status,
            apt.notes or ""
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def availability(
    doctor_id: Annotated[str, typer.Argument(help="Doctor ID")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Slot duration in minutes")] = None,
):
    """
    Show open appointment start times for a doctor on a day.
    """
    try:
        config, service, _ = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    day = _parse_day(date, config.timezone)
    slot_duration = duration if duration is not None else config.defaults.slot_duration_minutes

    try:
        start_times = service.get_available_time_slots(doctor_id, day, slot_duration)
    except ValueError as e:
        _fail(e)

    if not start_times:
        console.print(
            f"[yellow]⚠ No open slots for {doctor_id} on {day.format('YYYY-MM-DD')}.[/yellow]"
        )
        return

    weekday = WEEKDAY_NAMES[day.weekday()].capitalize()
    console.print(
        f"[bold green]✓ {len(start_times)} open slot(s) on {weekday}, "
        f"{day.format('YYYY-MM-DD')} ({slot_duration} min):[/bold green]\n"
    )
    for start_time in start_times:
        console.print(f"  {start_time.format('HH:mm')}")
    console.print()


@app.command()
def stats(
    doctor_id: Annotated[str, typer.Argument(help="Doctor ID")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
):
    """
    Show appointment statistics for a doctor on a day.
    """
    try:
        config, _, schedule = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    day_schedule = schedule.day_schedule(doctor_id, _parse_day(date, config.timezone))
    summary = day_schedule.stats

    table = Table(title=f"Statistics {doctor_id} | {day_schedule.day.format('YYYY-MM-DD')}", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Appointments", str(summary.total))
    for apt_type, count in sorted(summary.by_type.items()):
        table.add_row(f"  type: {apt_type}", str(count))
    for status, count in sorted(summary.by_status.items()):
        table.add_row(f"  status: {status}", str(count))
    table.add_row("Total duration (min)", f"{summary.total_duration_minutes:g}")
    table.add_row("Average duration (min)", f"{summary.average_duration_minutes:g}")
    table.add_row("Open slots", str(len(day_schedule.available_start_times)))

    console.print()
    console.print(table)
    console.print()


@app.command()
def grid(
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")] = None,
):
    """
    Print the calendar grid for a day.
    """
    try:
        config, _, schedule = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    slots = schedule.time_slots(_parse_day(date, config.timezone))
    for slot in slots:
        console.print(slot.format_display())


@app.command()
def week(
    doctor_id: Annotated[str, typer.Argument(help="Doctor ID")],
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--start", help="First day of the week (YYYY-MM-DD)")] = None,
):
    """
    Show a doctor's week: appointments per day for seven days.
    """
    try:
        config, _, schedule = _load_services(config_file)
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    week_schedule = schedule.week_schedule(doctor_id, _parse_day(start, config.timezone, "start date"))

    if week_schedule.doctor is None:
        console.print(f"[yellow]Unknown doctor: {doctor_id}[/yellow]")
        raise typer.Exit(1)

    table = Table(
        title=f"{week_schedule.doctor.name} | "
              f"{week_schedule.week_start.format('YYYY-MM-DD')} - {week_schedule.week_end.format('YYYY-MM-DD')}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day")
    table.add_column("Appointments", justify="right")
    table.add_column("Times", style="dim")

    for day in week_schedule.days:
        day_appointments = week_schedule.appointments_by_day[day.to_date_string()]
        times = ", ".join(apt.start_time.format("HH:mm") for apt in day_appointments)
        table.add_row(
            f"{WEEKDAY_NAMES[day.weekday()].capitalize()} {day.format('YYYY-MM-DD')}",
            str(len(day_appointments)),
            times
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicschedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
