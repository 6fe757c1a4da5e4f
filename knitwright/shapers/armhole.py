"""
Armhole shaper: rounded set-in and raglan armholes.

Both constructions are symmetric. Each armhole removes its full width in
stitches: a base bind-off at the start of rows 1 and 2, then decrease rows
that take 1 stitch from each end.

Rounded set-in
    Base bind-off is a share of the armhole width, the rest is decreased in
    a rapid phase followed by a gradual phase:

        default          bind-off 1/4, rapid 1/2 every 2 rows, gradual every 4 rows
        depth > 25cm     rapid share 0.4, every 3 rows, gradual every 6 rows
        depth < 18cm     rapid share 0.6, every row, gradual every 2 rows
        width > 15cm     bind-off 1/3
        width < 10cm     bind-off 1/6

Raglan
    A small base bind-off (3 to 6 stitches) followed by one straight line of
    decreases along the raglan length, every 2 to 4 rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas.calculation import ArmholeConstruction, ArmholeParams
from knitwright.schemas.shaping import (
    Placement,
    ShapingEvent,
    ShapingKind,
    ShapingPhase,
    ShapingResult,
    ShapingSchedule,
    ShapingSide,
)
from knitwright.utilities.conversion import (
    convert_length,
    length_to_rows,
    length_to_stitches,
    round_half_up,
)
from knitwright.utilities.types import Gauge, LengthUnit

from .common import require_positive

FIRST_DECREASE_ROW = 3
MAX_REMOVAL_SHARE = 0.4
MAX_HEIGHT_SHARE = 0.6
VERY_DEEP_CM = 35.0
VERY_WIDE_CM = 25.0


@dataclass(frozen=True)
class ArmholeRatios:
    """Ratios and cadence for a rounded set-in armhole."""

    bind_off: float = 1 / 4
    rapid: float = 1 / 2
    rapid_every: int = 2
    gradual_every: int = 4


def armhole_ratios(depth: float, width: float, unit: LengthUnit = LengthUnit.CM) -> ArmholeRatios:
    """Adjust the default rounded-armhole ratios for depth and width."""
    depth_cm = convert_length(depth, unit, LengthUnit.CM)
    width_cm = convert_length(width, unit, LengthUnit.CM)

    rapid, rapid_every, gradual_every = 1 / 2, 2, 4
    if depth_cm > 25:
        rapid, rapid_every, gradual_every = 0.4, 3, 6
    elif depth_cm < 18:
        rapid, rapid_every, gradual_every = 0.6, 1, 2

    bind_off = 1 / 4
    if width_cm > 15:
        bind_off = 1 / 3
    elif width_cm < 10:
        bind_off = 1 / 6

    return ArmholeRatios(
        bind_off=bind_off, rapid=rapid, rapid_every=rapid_every, gradual_every=gradual_every
    )


def shape_armhole(
    params: ArmholeParams, gauge: Gauge, panel_stitches: int, panel_rows: int | None = None
) -> ShapingResult:
    """
    Build the symmetric armhole schedule for a panel.

    Args:
        params: Construction, depth and width (gauge unit).
        gauge: Stitch and row gauge.
        panel_stitches: Live stitches across the panel at the underarm.
        panel_rows: Panel height in rows, for the proportion warning only.
            Falls back to ``params.panel_rows``.

    Raises:
        InvalidShapingInputError: A dimension is not positive, or the
            armholes would remove the whole panel.
    """
    require_positive(params.depth, "Armhole depth")
    require_positive(params.width, "Armhole width")
    require_positive(panel_stitches, "Panel width in stitches")
    if params.raglan_length is not None:
        require_positive(params.raglan_length, "Raglan line length")

    width_sts = length_to_stitches(params.width, gauge)
    if width_sts < 1:
        raise InvalidShapingInputError(
            f"Armhole width {params.width:g}{gauge.unit.value} is less than one stitch"
        )
    if 2 * width_sts >= panel_stitches:
        raise InvalidShapingInputError(
            f"Armholes ({width_sts} sts each) remove the whole {panel_stitches}-stitch panel"
        )
    depth_rows = length_to_rows(params.depth, gauge)

    warnings: list[str] = []
    match params.construction:
        case ArmholeConstruction.ROUNDED_SET_IN:
            phases = _rounded_phases(params, gauge, width_sts)
        case ArmholeConstruction.RAGLAN:
            phases = _raglan_phases(params, gauge, width_sts, warnings)
        case _:
            raise ValueError(f"Unsupported armhole construction: {params.construction!r}")

    last_row = max((phase.last_row or 0 for phase in phases), default=0)
    schedule = ShapingSchedule(
        method=params.construction.value,
        starting_stitches=panel_stitches,
        final_stitch_count=panel_stitches - 2 * width_sts,
        total_rows=max(depth_rows, last_row),
        phases={ShapingSide.BOTH: phases},
    )

    warnings.extend(_dimension_warnings(params, gauge))
    if 2 * width_sts > panel_stitches * MAX_REMOVAL_SHARE:
        warnings.append(
            f"Armhole shaping removes {2 * width_sts} of {panel_stitches} sts "
            f"(more than 40% of the panel width)"
        )
    if last_row > depth_rows:
        warnings.append(
            f"Armhole shaping needs {last_row} rows but the armhole depth allows only {depth_rows}"
        )
    panel_rows = panel_rows if panel_rows is not None else params.panel_rows
    if panel_rows and last_row > panel_rows * MAX_HEIGHT_SHARE:
        warnings.append(
            f"Armhole shaping spans {last_row} rows, more than 60% of the {panel_rows}-row panel"
        )

    bind_off = schedule.phase("bind_off")
    logger.debug(
        "Armhole {}: panel {} sts, {} sts per armhole, bind off {}, final {} over {} rows",
        params.construction.value,
        panel_stitches,
        width_sts,
        bind_off.stitches_per_event if bind_off else 0,
        schedule.final_stitch_count,
        schedule.total_rows,
    )
    return ShapingResult(
        schedule=schedule,
        warnings=tuple(warnings),
        metrics={
            "panel_stitches": panel_stitches,
            "armhole_stitches": width_sts,
            "bind_off_stitches": bind_off.stitches_per_event if bind_off else 0,
            "decrease_rows": sum(
                p.total_shaping_rows for p in phases if p.kind == ShapingKind.DECREASE
            ),
            "depth_rows": depth_rows,
            "final_stitch_count": schedule.final_stitch_count,
        },
    )


def _rounded_phases(
    params: ArmholeParams, gauge: Gauge, width_sts: int
) -> tuple[ShapingPhase, ...]:
    ratios = armhole_ratios(params.depth, params.width, gauge.unit)
    bind_off = round_half_up(width_sts * ratios.bind_off)
    remaining = width_sts - bind_off
    rapid = round_half_up(remaining * ratios.rapid)
    gradual = remaining - rapid

    rapid_phase = _decrease_phase("rapid", FIRST_DECREASE_ROW, ratios.rapid_every, rapid)
    gradual_start = (rapid_phase.last_row or FIRST_DECREASE_ROW - ratios.gradual_every) + (
        ratios.gradual_every
    )
    gradual_phase = _decrease_phase("gradual", gradual_start, ratios.gradual_every, gradual)
    return _bind_off_phase(bind_off), rapid_phase, gradual_phase


def _raglan_phases(
    params: ArmholeParams, gauge: Gauge, width_sts: int, warnings: list[str]
) -> tuple[ShapingPhase, ...]:
    bind_off = min(width_sts, min(6, max(3, round_half_up(width_sts * 0.1))))
    decreases = width_sts - bind_off
    raglan_length = params.raglan_length or params.depth
    raglan_rows = length_to_rows(raglan_length, gauge)

    frequency = 2
    if decreases > 0:
        frequency = min(4, max(2, raglan_rows // decreases))
        if decreases * frequency > raglan_rows:
            warnings.append(
                f"Raglan decreases need {decreases * frequency} rows "
                f"but the raglan line has only {raglan_rows}"
            )
    if params.raglan_length is not None and params.raglan_length < params.depth:
        warnings.append("Raglan line length should typically be at least equal to armhole depth")

    return (
        _bind_off_phase(bind_off),
        _decrease_phase("raglan", FIRST_DECREASE_ROW, frequency, decreases),
    )


def _bind_off_phase(stitches: int) -> ShapingPhase:
    """Bind off ``stitches`` at the start of rows 1 and 2, one armhole each."""
    events: tuple[ShapingEvent, ...] = ()
    if stitches > 0:
        events = (
            ShapingEvent(
                kind=ShapingKind.BIND_OFF,
                stitches=stitches,
                start_row=1,
                placement=Placement.ROW_START,
                repeat=2,
                interval=1,
            ),
        )
    return ShapingPhase(name="bind_off", kind=ShapingKind.BIND_OFF, frequency=1, events=events)


def _decrease_phase(name: str, start_row: int, every: int, count: int) -> ShapingPhase:
    """``count`` rows decreasing 1 stitch at each end, every ``every`` rows."""
    if count <= 0:
        return ShapingPhase(name=name, kind=ShapingKind.DECREASE, frequency=None)
    return ShapingPhase(
        name=name,
        kind=ShapingKind.DECREASE,
        frequency=every,
        events=(
            ShapingEvent(
                kind=ShapingKind.DECREASE,
                stitches=2,
                start_row=start_row,
                placement=Placement.BOTH_ENDS,
                repeat=count,
                interval=every,
            ),
        ),
    )


def _dimension_warnings(params: ArmholeParams, gauge: Gauge) -> list[str]:
    warnings: list[str] = []
    if convert_length(params.depth, gauge.unit, LengthUnit.CM) > VERY_DEEP_CM:
        warnings.append("Very deep armhole - please verify measurements")
    if convert_length(params.width, gauge.unit, LengthUnit.CM) > VERY_WIDE_CM:
        warnings.append("Very wide armhole - please verify measurements")
    return warnings
