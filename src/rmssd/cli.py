from __future__ import annotations

"""Command line interface for rmssd using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import numpy as np
import typer
import yaml
from pydantic import ValidationError

from ._typer import bad_parameter, representations_option, roundings_option
from .config import Settings, load_settings
from .core import available_kinds, build_combinations, iter_outcomes
from .report import divergence, format_divergence, format_outcome, outcomes_to_records
from .types import Outcome
from .utils.logging import get_logger, verbosity_level

app = typer.Typer(help="RMSSD of RR intervals across floating-point precisions")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. report.digits=20",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics to stderr."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors."),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("rmssd", level=verbosity_level(verbose, quiet))

    ctx.obj = settings


def _write_json(path: Path, outcomes: List[Outcome], digits: int) -> None:
    with open(path, "w", encoding="utf8") as fh:
        json.dump(outcomes_to_records(outcomes, digits), fh, indent=2)


@app.command()
def run(
    ctx: typer.Context,
    source: Optional[Path] = typer.Argument(
        None, dir_okay=False, help="RR-interval file, one value per line."
    ),
    representation: List[str] = typer.Option(
        [],
        "--representation",
        "-r",
        help="narrow/float, standard/double or extended/long double; repeatable.",
    ),
    round_: List[str] = typer.Option(
        [],
        "--round",
        help="Decimal places to round inputs to, or 'none'; repeatable.",
    ),
    digits: Optional[int] = typer.Option(None, "--digits", min=0, help="Fractional digits to print."),
    skip_blank: Optional[bool] = typer.Option(
        None, "--skip-blank/--no-skip-blank", help="Ignore blank lines in the source."
    ),
    compare: Optional[bool] = typer.Option(
        None, "--compare/--no-compare", help="Print each result's difference from long double."
    ),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also write outcomes to a JSON file."),
) -> None:
    """Compute RMSSD for every configured representation and rounding.

    Each combination is evaluated on its own.  Results go to stdout as a
    label, the value and a blank line; failures are reported on stderr and
    do not stop the remaining combinations.
    """

    cfg: Settings = ctx.obj

    path = source if source is not None else Path(cfg.source.path)
    reps = representations_option(representation) if representation else cfg.run.representations
    roundings = roundings_option(round_) if round_ else cfg.run.roundings
    if not reps:
        bad_parameter("no representations selected", param_hint="--representation")
    if not roundings:
        bad_parameter("no rounding policies selected", param_hint="--round")
    digits = digits if digits is not None else cfg.report.digits
    skip_blank = skip_blank if skip_blank is not None else cfg.source.skip_blank
    compare = compare if compare is not None else cfg.report.compare
    if json_path is None and cfg.report.json_path:
        json_path = Path(cfg.report.json_path)

    combinations = build_combinations(reps, roundings)
    logger.debug("evaluating %d combinations from %s", len(combinations), path)
    outcomes: List[Outcome] = []
    for outcome in iter_outcomes(
        path, combinations, skip_blank=skip_blank, encoding=cfg.source.encoding
    ):
        lines = format_outcome(outcome, digits)
        if outcome.ok:
            for line in lines:
                typer.echo(line)
        else:
            for line in lines:
                typer.secho(line, err=True)
        outcomes.append(outcome)

    if compare:
        for line in format_divergence(divergence(outcomes)):
            typer.echo(line)

    if json_path is not None:
        _write_json(json_path, outcomes, digits)
        typer.echo(f"Wrote {len(outcomes)} outcomes to {json_path}")


@app.command()
def kinds() -> None:
    """List the available floating-point representations."""

    for kind in available_kinds():
        typer.echo(
            f"{kind.representation.value:<9} {kind.label:<12} {np.dtype(kind.dtype).name:<11} "
            f"storage={kind.storage_bits}-bit precision={kind.precision_bits}-bit eps={kind.eps}"
        )


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
