"""
Public calculation API.

calculate() is the single entry point per garment piece. It wires the
pipeline: record parsing → Measurement/Ease Resolver → shaper → Instruction
Generator, and is the one place where hard errors become a failed
CalculationResult instead of an exception.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from loguru import logger

from knitwright.errors import InvalidShapingInputError, KnitwrightError
from knitwright.resolver.ease import resolve_finished_measurements
from knitwright.schemas.calculation import (
    ArmholeParams,
    CalculationInput,
    CalculationResult,
    NecklineParams,
    RectangularPanelParams,
    TaperParams,
    TriangularShawlParams,
)
from knitwright.schemas.measurements import FinishedMeasurements
from knitwright.schemas.shaping import ShapingResult
from knitwright.shapers import (
    shape_armhole,
    shape_neckline,
    shape_rectangular_panel,
    shape_taper,
    shape_triangular_shawl,
)
from knitwright.utilities.conversion import convert_length, length_to_stitches
from knitwright.utilities.types import Gauge
from knitwright.writer.generator import InstructionGenerator

from .records import parse_calculation_input, piece_kind


def calculate(request: CalculationInput | Mapping[str, Any]) -> CalculationResult:
    """
    Calculate one garment piece.

    Parameters
    ----------
    request:
        A CalculationInput, or a plain record accepted by
        :func:`knitwright.api.records.parse_calculation_input`.

    Returns
    -------
    CalculationResult
        ``success=True`` with the schedule, instructions and warnings, or
        ``success=False`` with the hard error message. Never raises for bad
        input.
    """
    piece = "unknown"
    warnings: list[str] = []
    try:
        data = request if isinstance(request, CalculationInput) else parse_calculation_input(request)
        piece = piece_kind(data.params)
        result = _calculate(data, warnings)
    except (KnitwrightError, ValueError) as exc:
        message = str(exc)
        logger.warning("{} calculation failed: {}", piece, message)
        logger.info("Calculated {} piece: success=False", piece)
        return CalculationResult(success=False, warnings=tuple(warnings), errors=(message,))

    for warning in result.warnings:
        logger.warning("{}: {}", piece, warning)
    logger.info(
        "Calculated {} piece: success=True, {} steps, {} warnings",
        piece,
        len(result.instructions or ()),
        len(result.warnings),
    )
    return result


def calculate_garment(
    pieces: Mapping[str, CalculationInput | Mapping[str, Any]],
) -> dict[str, CalculationResult]:
    """
    Calculate several pieces independently.

    A failing piece yields its own failed result; the other pieces are
    computed as if it were absent.
    """
    results = {name: calculate(request) for name, request in pieces.items()}
    failed = sorted(name for name, result in results.items() if not result.success)
    logger.info("Calculated {} pieces, {} failed", len(results), len(failed))
    return results


# ── Pipeline ───────────────────────────────────────────────────────────────────


def _calculate(data: CalculationInput, warnings: list[str]) -> CalculationResult:
    finished: FinishedMeasurements | None = None
    if data.measurements is not None:
        resolution = resolve_finished_measurements(
            data.measurements, data.ease, data.garment_type
        )
        finished = resolution.finished
        warnings.extend(resolution.warnings)

    gauge = data.gauge
    standalone = False
    shaped: ShapingResult
    match data.params:
        case TriangularShawlParams() as params:
            shaped = shape_triangular_shawl(params, gauge)
            standalone = True
        case NecklineParams() as params:
            panel = _panel_stitches(params.panel_stitches, params.panel_width, finished, gauge)
            shaped = shape_neckline(params, gauge, panel)
        case ArmholeParams() as params:
            panel = _panel_stitches(params.panel_stitches, params.panel_width, finished, gauge)
            shaped = shape_armhole(params, gauge, panel, params.panel_rows)
        case RectangularPanelParams() as params:
            shaped = shape_rectangular_panel(
                _panel_dimensions(params, finished, gauge),
                gauge,
                data.stitch_pattern,
                data.edge_stitches,
            )
            standalone = True
        case TaperParams() as params:
            shaped = shape_taper(params, gauge)
        case _:
            raise InvalidShapingInputError(
                f"Unsupported construction params: {type(data.params).__name__}"
            )
    warnings.extend(shaped.warnings)

    schedule = shaped.schedule
    output = InstructionGenerator(
        craft=data.craft, language=data.language, abbreviate=data.abbreviate
    ).generate(
        schedule.starting_stitches,
        schedule=schedule,
        pattern=data.stitch_pattern,
        edge_stitches=data.edge_stitches,
        cast_on=standalone,
        finish=standalone,
    )
    warnings.extend(output.warnings)

    return CalculationResult(
        success=True,
        schedule=schedule,
        instructions=output.steps,
        warnings=tuple(warnings),
        finished_measurements=finished,
        metrics=dict(shaped.metrics),
    )


def _in_gauge_unit(value: float, finished: FinishedMeasurements, gauge: Gauge) -> float:
    return convert_length(value, finished.unit, gauge.unit)


def _panel_stitches(
    panel_stitches: int | None,
    panel_width: float | None,
    finished: FinishedMeasurements | None,
    gauge: Gauge,
) -> int:
    """Panel stitches, else panel width, else half the finished chest."""
    if panel_stitches is not None:
        return panel_stitches
    if panel_width is not None:
        return length_to_stitches(panel_width, gauge)
    if finished is not None:
        half_chest = _in_gauge_unit(finished.chest_circumference, finished, gauge) / 2
        return length_to_stitches(half_chest, gauge)
    raise InvalidShapingInputError(
        "Panel width is unknown: supply panel stitches, a panel width or body measurements"
    )


def _panel_dimensions(
    params: RectangularPanelParams, finished: FinishedMeasurements | None, gauge: Gauge
) -> RectangularPanelParams:
    """Fill a missing width (half chest) or length (torso) from finished measurements."""
    if finished is None:
        return params
    width = params.width
    if width is None:
        width = _in_gauge_unit(finished.chest_circumference, finished, gauge) / 2
    length = params.length
    if length is None:
        length = _in_gauge_unit(finished.torso_length, finished, gauge)
    return replace(params, width=width, length=length)
