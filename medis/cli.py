"""
Command-line interface for medis.

Records live in a JSON file (``MEDIS_DATA_FILE`` or ``--data-file``); every
command that changes a record writes the whole file back immediately.
"""

import typing
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console

from medis.adapters.console import render_classification, render_records_table, render_statistics
from medis.adapters.pdf import write_report_pdf
from medis.adapters.storage import JsonFileStorage
from medis.config import AppConfig, get_config
from medis.domain.errors import MedisError, RecordNotFoundError
from medis.domain.models import FitnessPolicy, HealthRecord, RecordSubmission, VitalReading
from medis.logging_setup import configure_logging
from medis.services.classifier import assess_parameters, classify
from medis.services.record_store import RecordStore
from medis.services.report_filter import (
    ReportSelection,
    report_filename,
    report_title,
    select_records,
    summarize,
    week_label,
)

console = Console()

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


@dataclass
class CliState:
    config: AppConfig
    data_file: Path
    policy: FitnessPolicy
    _store: RecordStore | None = field(default=None, repr=False)

    @property
    def store(self) -> RecordStore:
        """Record store, loaded from disk on first use."""
        if self._store is None:
            with _store_errors():
                self._store = RecordStore(JsonFileStorage(self.data_file), self.policy).load()
        return self._store


@contextmanager
def _store_errors() -> Iterator[None]:
    """Report domain and storage failures as a CLI error instead of a traceback."""
    try:
        yield
    except MedisError as e:
        raise click.ClickException(str(e)) from e


pass_state = click.make_pass_decorator(CliState)


def _vital_options(required: bool) -> typing.Callable:
    options = [
        click.option("--systolic", type=int, required=required, help="systolic pressure (mmHg)"),
        click.option("--diastolic", type=int, required=required, help="diastolic pressure (mmHg)"),
        click.option("--pulse", type=int, required=required, help="pulse rate (bpm)"),
        click.option("--spo2", type=float, required=required, help="oxygen saturation (%)"),
        click.option("--temp", "temperature", type=float, required=required, help="temperature (°C)"),
    ]

    def decorator(f: typing.Callable) -> typing.Callable:
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


def _identity_options(required: bool) -> typing.Callable:
    options = [
        click.option("--name", required=required, help="employee name"),
        click.option("--badge", "badge_number", required=required, help="badge number"),
        click.option("--age", type=click.IntRange(min=0), required=required, help="age in years"),
        click.option("--position", required=required, help="job position"),
        click.option("--supervisor", required=required, help="supervisor name"),
        click.option("--department", required=required, help="department"),
        click.option(
            "--date",
            "check_date",
            type=DATE_TYPE,
            default=None,
            help="check date, YYYY-MM-DD (default: today)",
        ),
        click.option("--note", default=None, help="free-text note, required for FIT WITH NOTE"),
    ]

    def decorator(f: typing.Callable) -> typing.Callable:
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


def _selection_options(f: typing.Callable) -> typing.Callable:
    f = click.option("--all", "all_records", is_flag=True, help="select every record")(f)
    f = click.option("--week", default=None, help="select one week, e.g. 2024-W01")(f)
    f = click.option("--date", "day", type=DATE_TYPE, default=None, help="select one day")(f)
    return f


def _build_selection(
    day: datetime | None, week: str | None, all_records: bool, default: ReportSelection
) -> ReportSelection:
    chosen = sum(bool(x) for x in (day, week, all_records))
    if chosen > 1:
        raise click.UsageError("use only one of --date, --week and --all")
    try:
        if all_records:
            return ReportSelection.everything()
        if day is not None:
            return ReportSelection.for_day(day.date())
        if week is not None:
            return ReportSelection.for_week(week)
    except ValidationError as e:
        raise click.BadParameter(str(e.errors()[0]["msg"]), param_hint="--week") from e
    return default


def _resolve_id(store: RecordStore, record_id: str) -> str:
    """Accept a full id or an unambiguous prefix of one."""
    matches = [r.record_id for r in store.records if r.record_id.startswith(record_id)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.ClickException(str(RecordNotFoundError(record_id)))
    raise click.ClickException(f"Record id prefix {record_id!r} is ambiguous")


def _submission(**fields: typing.Any) -> RecordSubmission:
    try:
        return RecordSubmission(**fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise click.ClickException(f"Invalid record: {problems}") from e


def _report_saved(action: str, record: HealthRecord) -> None:
    click.echo(
        f"{action} record {record.record_id}: {record.bp_stage.value} / {record.fitness.value}"
    )


@click.group()
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON file holding the records (default: MEDIS_DATA_FILE or ./records.json)",
)
@click.option(
    "--policy",
    type=click.Choice([p.value for p in FitnessPolicy]),
    default=None,
    help="fitness policy for new and edited records",
)
@click.pass_context
def main(ctx: click.Context, data_file: str | None, policy: str | None) -> None:
    """medis: log employee vital-sign checks and export health reports."""
    config = get_config()
    configure_logging(config.logging, debug=config.debug)
    ctx.obj = CliState(
        config=config,
        data_file=Path(data_file or config.storage.path),
        policy=FitnessPolicy(policy) if policy else config.classifier.policy,
    )


@main.command(name="add")
@_identity_options(required=True)
@_vital_options(required=True)
@pass_state
def add(
    state: CliState,
    check_date: datetime | None,
    note: str | None,
    systolic: int,
    diastolic: int,
    pulse: int,
    spo2: float,
    temperature: float,
    **identity: typing.Any,
) -> None:
    """Record a new health check."""
    submission = _submission(
        **identity,
        check_date=check_date.date() if check_date else date.today(),
        reading=VitalReading(
            systolic=systolic,
            diastolic=diastolic,
            pulse=pulse,
            spo2=spo2,
            temperature=temperature,
        ),
        note=note or "",
    )
    store = state.store
    with _store_errors():
        result = store.submit(submission)
    if result.is_err():
        raise click.ClickException(str(result.unwrap_err()))
    _report_saved("Saved", result.unwrap())


@main.command(name="edit")
@click.argument("record_id")
@_identity_options(required=False)
@_vital_options(required=False)
@pass_state
def edit(state: CliState, record_id: str, **changes: typing.Any) -> None:
    """
    Edit an existing record. Options left out keep their current value; the
    record is classified again from the resulting vitals.
    """
    store = state.store
    current = store.get(_resolve_id(store, record_id))

    reading = current.reading.model_dump()
    for name in reading:
        if changes.get(name) is not None:
            reading[name] = changes.pop(name)

    fields = current.model_dump(
        include={
            "name",
            "badge_number",
            "age",
            "position",
            "supervisor",
            "department",
            "check_date",
            "note",
        }
    )
    if changes.get("check_date") is not None:
        changes["check_date"] = changes["check_date"].date()
    fields.update({k: v for k, v in changes.items() if v is not None})

    submission = _submission(**fields, reading=VitalReading(**reading))
    with _store_errors():
        result = store.update(current.record_id, submission)
    if result.is_err():
        raise click.ClickException(str(result.unwrap_err()))
    _report_saved("Updated", result.unwrap())


@main.command(name="delete")
@click.argument("record_id")
@click.option("--yes", is_flag=True, help="do not ask for confirmation")
@pass_state
def delete(state: CliState, record_id: str, yes: bool) -> None:
    """Delete one record."""
    store = state.store
    resolved = _resolve_id(store, record_id)
    if not yes:
        click.confirm(f"Delete record {resolved}?", abort=True)
    with _store_errors():
        removed = store.remove(resolved)
    click.echo(f"Deleted record {removed.record_id} ({removed.name}, {removed.check_date})")


@main.command(name="clear")
@click.option("--yes", is_flag=True, help="do not ask for confirmation")
@pass_state
def clear(state: CliState, yes: bool) -> None:
    """Delete ALL records."""
    if not yes:
        click.confirm("Delete ALL records?", abort=True)
    store = state.store
    with _store_errors():
        count = store.clear()
    click.echo(f"Deleted {count} record(s)")


@main.command(name="list")
@_selection_options
@pass_state
def list_records(
    state: CliState, day: datetime | None, week: str | None, all_records: bool
) -> None:
    """Show records as a table (default: all records)."""
    selection = _build_selection(day, week, all_records, ReportSelection.everything())
    selected = select_records(state.store.records, selection)
    if not selected:
        click.echo("No records found")
        return
    console.print(
        render_records_table(selected, title=report_title(selection, state.config.report.title_prefix))
    )
    console.print(render_statistics(summarize(selected)))


@main.command(name="classify")
@_vital_options(required=True)
@pass_state
def classify_reading(
    state: CliState,
    systolic: int,
    diastolic: int,
    pulse: int,
    spo2: float,
    temperature: float,
) -> None:
    """Preview the classification of a reading without storing it."""
    reading = VitalReading(
        systolic=systolic,
        diastolic=diastolic,
        pulse=pulse,
        spo2=spo2,
        temperature=temperature,
    )
    classification = classify(reading, state.policy)
    parameters = assess_parameters(reading) if state.policy is FitnessPolicy.TIERED else None
    console.print(render_classification(classification, parameters))


@main.command(name="report")
@_selection_options
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="PDF path (default: REPORT_OUTPUT_DIR/<generated name>)",
)
@pass_state
def report(
    state: CliState,
    day: datetime | None,
    week: str | None,
    all_records: bool,
    output: str | None,
) -> None:
    """Export a PDF report (default: today's records)."""
    today = date.today()
    selection = _build_selection(day, week, all_records, ReportSelection.for_day(today))
    path = (
        Path(output)
        if output
        else Path(state.config.report.output_dir) / report_filename(selection, today)
    )
    records = state.store.records
    written = write_report_pdf(
        path,
        records,
        selection,
        printed_on=today,
        title_prefix=state.config.report.title_prefix,
    )
    count = len(select_records(records, selection))
    click.echo(f"Wrote {count} record(s) to {written}")


@main.command(name="week")
@click.option("--date", "day", type=DATE_TYPE, default=None, help="any day (default: today)")
def show_week(day: datetime | None) -> None:
    """Print the week label used by --week for a given day."""
    click.echo(week_label(day.date() if day else date.today()))
