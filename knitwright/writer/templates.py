"""
Instruction templates: one format function per instruction kind.

Each function takes exactly the values its kind needs and fills the craft's
template from templates.yaml. Callers never build placeholder dictionaries
themselves, so a misspelt placeholder can only come from the table, and it
surfaces as TemplateMismatchError.
"""

from __future__ import annotations

from knitwright.errors import TemplateMismatchError
from knitwright.schemas.shaping import FabricSide, Placement, ShapingKind, ShapingSide
from knitwright.tables.registry import shaping_key
from knitwright.tables.types import CraftTemplates


def _render(key: str, template: str, **values: object) -> str:
    try:
        return template.format_map(values)
    except KeyError as exc:
        raise TemplateMismatchError(key, str(exc.args[0])) from None


def _kind(templates: CraftTemplates, kind: str) -> tuple[str, str]:
    key = f"{templates.craft.value}.{kind}"
    try:
        return key, templates.kinds[kind]
    except KeyError:
        raise TemplateMismatchError(key, None) from None


# ── Row framing ────────────────────────────────────────────────────────────────


def render_cast_on(templates: CraftTemplates, count: int) -> str:
    """Cast on (knitting) or foundation chain (crochet) for ``count`` stitches."""
    key, template = _kind(templates, "cast_on")
    return _render(key, template, count=count, chain=count + 1)


def render_row(
    templates: CraftTemplates, row: int, side: FabricSide, body: str, count: int
) -> str:
    key, template = _kind(templates, "row")
    return _render(key, template, row=row, side=side.value, body=body, count=count)


def render_shaping_row(
    templates: CraftTemplates,
    row: int,
    side: FabricSide,
    kind: ShapingKind,
    body: str,
    count: int,
) -> str:
    key, template = _kind(templates, "shaping_row")
    label = templates.labels.get(kind.value)
    if label is None:
        raise TemplateMismatchError(f"{templates.craft.value}.labels.{kind.value}", None)
    return _render(key, template, row=row, side=side.value, label=label, body=body, count=count)


def render_row_group(templates: CraftTemplates, start: int, end: int, body: str, count: int) -> str:
    """Consecutive identical rows, e.g. "Rows 5–12: ..."."""
    key, template = _kind(templates, "rows")
    return _render(key, template, start=start, end=end, body=body, count=count)


def render_divide(templates: CraftTemplates, count: int) -> str:
    key, template = _kind(templates, "divide")
    return _render(key, template, count=count)


def render_rejoin(templates: CraftTemplates, count: int) -> str:
    key, template = _kind(templates, "rejoin")
    return _render(key, template, count=count)


def render_finish(templates: CraftTemplates, count: int) -> str:
    key, template = _kind(templates, "finish")
    return _render(key, template, count=count)


# ── Row bodies ─────────────────────────────────────────────────────────────────


def render_plain_body(templates: CraftTemplates) -> str:
    key, template = _kind(templates, "plain")
    return _render(key, template)


def render_pattern_body(
    templates: CraftTemplates,
    pattern_row: int,
    pattern_text: str,
    repeats: int,
    before: int,
    after: int,
) -> str:
    """
    A pattern row worked across the body.

    ``before``/``after`` are the plain stitches (edge plus buffer) either side
    of the motif. With none, the row reads "across all stitches".
    """
    if before == 0 and after == 0:
        kind = "pattern_across"
    elif before == 0:
        kind = "pattern_trailing"
    else:
        kind = "pattern_framed"
    key, template = _kind(templates, kind)
    return _render(
        key,
        template,
        pattern_row=pattern_row,
        pattern_text=pattern_text,
        repeats=repeats,
        before=before,
        after=after,
    )


def render_pattern_edge_shaping(
    templates: CraftTemplates,
    kind: ShapingKind,
    fabric_side: FabricSide,
    pattern_row: int,
    pattern_text: str,
    edge: int,
) -> str:
    """
    A pattern row with one stitch shaped inside each edge allowance.

    Only increases and decreases can be worked this way. Wrong-side rows use
    the purlwise form of each decrease and increase.
    """
    if kind == ShapingKind.DECREASE:
        name = "pattern_edge_decrease"
    elif kind == ShapingKind.INCREASE:
        name = "pattern_edge_increase"
    else:
        raise ValueError(f"Edge shaping cannot express {kind.value!r}")
    if fabric_side == FabricSide.WS:
        name += "_ws"
    key, template = _kind(templates, name)
    return _render(
        key,
        template,
        pattern_row=pattern_row,
        pattern_text=pattern_text,
        edge=edge,
        tail=edge + 2,
    )



def render_pattern_shaped(
    templates: CraftTemplates, shaping: str, pattern_row: int, pattern_text: str
) -> str:
    """Shaping worked through the motif, keeping the pattern as established."""
    key, template = _kind(templates, "pattern_shaped")
    return _render(
        key, template, shaping=shaping, pattern_row=pattern_row, pattern_text=pattern_text
    )


def render_shaping_phrase(
    templates: CraftTemplates,
    kind: ShapingKind,
    placement: Placement,
    fabric_side: FabricSide,
    piece_side: ShapingSide,
    stitches: int,
    before: int,
    after: int,
    within_pattern: bool = False,
) -> str:
    """
    The body of a shaping row.

    Args:
        stitches: Stitches added or removed by this occurrence.
        before: Live stitches before the shaped block (center bind-offs).
        after: Live stitches after the row.
        within_pattern: The row is worked in a stitch pattern, so the
            unshaped stitches are worked in pattern rather than plain.
    """
    table_name = "pattern_shaping" if within_pattern else "shaping"
    phrase = shaping_key(kind, placement, fabric_side, piece_side)
    key = f"{templates.craft.value}.{table_name}.{phrase}"
    template = getattr(templates, table_name).get(phrase)
    if template is None:
        raise TemplateMismatchError(key, None)
    return _render(key, template, stitches=stitches, before=before, after=after)
