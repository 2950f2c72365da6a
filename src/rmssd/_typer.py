"""Typer option parsing helpers."""

from __future__ import annotations

from typing import Any, List, NoReturn, Optional, Sequence

import typer

from .types import Representation, RoundingPolicy, parse_rounding


def bad_parameter(message: str, *, param_hint: Optional[str] = None) -> NoReturn:
    """Raise :class:`typer.BadParameter` pointing at ``param_hint``."""

    kwargs: dict[str, Any] = {}
    if param_hint is not None:
        kwargs["param_hint"] = param_hint
    raise typer.BadParameter(message, **kwargs)


def representations_option(values: Sequence[str]) -> List[Representation]:
    """Convert repeated ``--representation`` values.

    Each value may itself be a comma separated list.
    """

    result: List[Representation] = []
    for value in values:
        for item in value.split(","):
            if not item.strip():
                continue
            try:
                result.append(Representation.parse(item))
            except ValueError as exc:
                bad_parameter(str(exc), param_hint="--representation")
    return result


def roundings_option(values: Sequence[str]) -> List[RoundingPolicy]:
    """Convert repeated ``--round`` values; ``none`` disables rounding."""

    result: List[RoundingPolicy] = []
    for value in values:
        for item in value.split(","):
            try:
                result.append(parse_rounding(item))
            except ValueError as exc:
                bad_parameter(str(exc), param_hint="--round")
    return result
