"""Typer CLI for sheet cutting plans."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from cutplan.application import (
    derive_suggestion_remnants,
    generate_material_suggestions,
    pack,
)
from cutplan.application.config import (
    ConfigError,
    JobConfiguration,
    config_to_cuts,
    config_to_inventory,
    config_to_packing_config,
    config_to_sheet,
    config_to_suggestion_config,
    load_config,
)
from cutplan.domain import (
    InvalidInputError,
    ValidationStatus,
    get_method_recommendation,
    validate_cut_dimensions,
)
from cutplan.infrastructure import (
    CutValidationFormatter,
    JsonExporter,
    PackingReportFormatter,
    SuggestionReportFormatter,
)


class OutputFormat(str, Enum):
    """Report formats."""

    TEXT = "text"
    JSON = "json"


app = typer.Typer(
    name="cutplan",
    help="Plan how to cut glass, mirror and aluminium sheets with minimal waste.",
)

JobFileArgument = Annotated[
    Path,
    typer.Argument(help="Path to the JSON job file"),
]
FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", help="Output format: text or json"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log optimizer progress to stderr"),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_job(job_file: Path) -> JobConfiguration:
    """Load a job file or exit with code 1."""
    try:
        return load_config(job_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)


def _display_load_error(error: ConfigError) -> None:
    if error.error_type == "json_parse":
        typer.echo("Error: Invalid JSON syntax", err=True)
        for detail in error.details:
            typer.echo(
                f"  Line {detail.get('line', '?')}, Column {detail.get('column', '?')}: "
                f"{detail.get('message', 'Unknown error')}",
                err=True,
            )
    elif error.error_type == "validation":
        typer.echo("Error: Job file validation failed", err=True)
        for detail in error.details:
            typer.echo(f"  {detail.get('path') or '(root)'}: {detail.get('message')}", err=True)
    else:
        typer.echo(f"Error: {error}", err=True)


@app.command(name="pack")
def pack_command(
    job_file: JobFileArgument,
    output_format: FormatOption = OutputFormat.TEXT,
    verbose: VerboseOption = False,
) -> None:
    """Pack the job's cut list onto its sheet.

    Examples:
        cutplan pack order-42.json
        cutplan pack order-42.json --format json
    """
    _configure_logging(verbose)
    job = _load_job(job_file)

    sheet = config_to_sheet(job)
    if sheet is None:
        typer.echo("Error: Job file has no 'sheet' to pack on", err=True)
        raise typer.Exit(code=1)

    try:
        result = pack(config_to_cuts(job), sheet, config_to_packing_config(job))
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if output_format == OutputFormat.JSON:
        typer.echo(JsonExporter().export_packing(result, sheet))
    else:
        typer.echo(PackingReportFormatter().format(result, sheet))


@app.command(name="suggest")
def suggest_command(
    job_file: JobFileArgument,
    output_format: FormatOption = OutputFormat.TEXT,
    max_suggestions: Annotated[
        int | None,
        typer.Option("--max", "-n", min=1, help="Number of suggestions to show"),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Suggest which inventory sheets and remnants to cut the order from.

    Examples:
        cutplan suggest order-42.json
        cutplan suggest order-42.json --max 3 --format json
    """
    _configure_logging(verbose)
    job = _load_job(job_file)

    if job.order is None:
        typer.echo("Error: Job file has no 'order' section", err=True)
        raise typer.Exit(code=1)

    suggestion_config = config_to_suggestion_config(job)
    try:
        result = generate_material_suggestions(
            cuts=config_to_cuts(job),
            available_sheets=config_to_inventory(job),
            material_type=job.order.material_type,
            thickness=job.order.thickness,
            kerf=job.order.kerf,
            cutting_method=job.order.cutting_method,
            max_suggestions=max_suggestions or suggestion_config.max_suggestions,
            config=suggestion_config,
        )
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    new_remnants = []
    if result.best_suggestion is not None:
        new_remnants = derive_suggestion_remnants(
            result.best_suggestion,
            source_order_id=job.order.id,
            min_size=suggestion_config.min_inventory_remnant,
        )

    if output_format == OutputFormat.JSON:
        typer.echo(JsonExporter().export_suggestions(result, new_remnants))
    else:
        typer.echo(SuggestionReportFormatter().format(result, new_remnants))


@app.command(name="check")
def check_command(job_file: JobFileArgument) -> None:
    """Check cut dimensions against the safe minimum for the sheet.

    Exit codes:
        0 - Every cut is safe (warnings allowed)
        1 - The job file could not be loaded
        2 - At least one cut is below the safe minimum

    Example:
        cutplan check order-42.json
    """
    job = _load_job(job_file)

    sheet = config_to_sheet(job)
    if sheet is None:
        typer.echo("Error: Job file has no 'sheet' to check against", err=True)
        raise typer.Exit(code=1)

    cuts = config_to_cuts(job)
    checks = [(cut, validate_cut_dimensions(cut, sheet)) for cut in cuts]
    recommendation = get_method_recommendation(cuts, sheet)
    typer.echo(CutValidationFormatter().format(checks, recommendation))

    if any(validation.status == ValidationStatus.DANGER for _, validation in checks):
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
