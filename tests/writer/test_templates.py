"""Tests for the per-kind instruction format functions."""

import pytest

from knitwright.errors import TemplateMismatchError
from knitwright.schemas import Craft, FabricSide, Placement, ShapingKind, ShapingSide
from knitwright.tables import get_registry
from knitwright.tables.types import CraftTemplates
from knitwright.writer.templates import (
    render_cast_on,
    render_finish,
    render_pattern_body,
    render_pattern_edge_shaping,
    render_pattern_shaped,
    render_row,
    render_row_group,
    render_shaping_phrase,
    render_shaping_row,
)


@pytest.fixture(scope="module")
def knitting():
    return get_registry().get_templates(Craft.KNITTING)


@pytest.fixture(scope="module")
def crochet():
    return get_registry().get_templates(Craft.CROCHET)


class TestRowFraming:
    def test_cast_on(self, knitting):
        assert render_cast_on(knitting, 40) == "Cast on 40 stitches."

    def test_crochet_foundation_chain(self, crochet):
        assert render_cast_on(crochet, 20) == (
            "Chain 21, then single crochet in second chain from hook and in each chain "
            "across (20 stitches)."
        )

    def test_row(self, knitting):
        text = render_row(knitting, 4, FabricSide.WS, "Work even in stockinette stitch", 40)
        assert text == "Row 4 (WS): Work even in stockinette stitch. (40 sts)"

    def test_shaping_row_label(self, knitting):
        text = render_shaping_row(
            knitting, 3, FabricSide.RS, ShapingKind.DECREASE, "K1, k2tog, knit to end", 39
        )
        assert text == "Row 3 (RS - Decrease Row): K1, k2tog, knit to end. (39 sts)"

    def test_row_group(self, knitting):
        text = render_row_group(knitting, 5, 12, "Work even in stockinette stitch", 38)
        assert text == "Rows 5–12: Work even in stockinette stitch. (38 sts)"

    def test_finish_by_craft(self, knitting, crochet):
        assert render_finish(knitting, 3) == "Bind off all 3 stitches loosely."
        assert render_finish(crochet, 3) == "Fasten off and weave in ends."


class TestPatternBodies:
    def test_across(self, knitting):
        assert render_pattern_body(knitting, 1, "K1, p1", 10, 0, 0) == (
            "Work Pattern Row 1 (K1, p1) across all stitches"
        )

    def test_trailing(self, knitting):
        assert render_pattern_body(knitting, 2, "P1, k1", 10, 0, 1) == (
            "Work Pattern Row 2 (P1, k1) 10 times, k1"
        )

    def test_framed(self, knitting):
        assert render_pattern_body(knitting, 1, "K1, p1", 8, 2, 3) == (
            "K2, work Pattern Row 1 (K1, p1) 8 times, k3"
        )

    def test_edge_decrease(self, knitting):
        text = render_pattern_edge_shaping(
            knitting, ShapingKind.DECREASE, FabricSide.RS, 1, "K1, p1", 2
        )
        assert text == "K2, ssk, work Pattern Row 1 (K1, p1) to last 4 stitches, k2tog, k2"

    def test_edge_decrease_leans_match_plain_decrease(self, knitting):
        edge = render_pattern_edge_shaping(
            knitting, ShapingKind.DECREASE, FabricSide.RS, 1, "K1, p1", 1
        )
        plain = render_shaping_phrase(
            knitting, ShapingKind.DECREASE, Placement.BOTH_ENDS, FabricSide.RS,
            ShapingSide.BOTH, stitches=2, before=0, after=10,
        )
        assert edge.split(", ")[1] == plain.split(", ")[1] == "ssk"
        assert edge.split(", ")[-2] == plain.split(", ")[-2] == "k2tog"

    def test_edge_decrease_wrong_side(self, knitting):
        text = render_pattern_edge_shaping(
            knitting, ShapingKind.DECREASE, FabricSide.WS, 2, "P1, k1", 2
        )
        assert text == "P2, p2tog, work Pattern Row 2 (P1, k1) to last 4 stitches, ssp, p2"

    def test_edge_increase(self, knitting):
        text = render_pattern_edge_shaping(knitting, ShapingKind.INCREASE, FabricSide.RS, 3, "Knit", 1)
        assert text == (
            "K1, make 1 left, work Pattern Row 3 (Knit) to last 1 stitches, make 1 right, k1"
        )

    def test_edge_increase_wrong_side(self, knitting):
        text = render_pattern_edge_shaping(knitting, ShapingKind.INCREASE, FabricSide.WS, 4, "Purl", 1)
        assert text == (
            "P1, make 1 left purlwise, work Pattern Row 4 (Purl) to last 1 stitches, "
            "make 1 right purlwise, p1"
        )

    def test_crochet_edge_shaping_same_on_both_sides(self, crochet):
        rs, ws = (
            render_pattern_edge_shaping(crochet, ShapingKind.DECREASE, side, 1, "Sc, dc", 1)
            for side in (FabricSide.RS, FabricSide.WS)
        )
        assert rs == ws

    def test_edge_bind_off_not_expressible(self, knitting):
        with pytest.raises(ValueError, match="Edge shaping cannot express 'bind_off'"):
            render_pattern_edge_shaping(
                knitting, ShapingKind.BIND_OFF, FabricSide.RS, 1, "K1, p1", 2
            )

    def test_shaped(self, knitting):
        assert render_pattern_shaped(knitting, "K1, k2tog, knit to end", 2, "P1, k1") == (
            "K1, k2tog, knit to end, maintaining Pattern Row 2 (P1, k1) as established"
        )

    def test_crochet_shaped_leads_with_pattern_row(self, crochet):
        text = render_pattern_shaped(
            crochet, "Ch 1, single crochet 2 together, work in pattern to end, turn", 1, "Sc, dc"
        )
        assert text == (
            "Following Pattern Row 1 (Sc, dc): "
            "Ch 1, single crochet 2 together, work in pattern to end, turn"
        )


class TestShapingPhrases:
    def test_center_bind_off(self, knitting):
        text = render_shaping_phrase(
            knitting, ShapingKind.BIND_OFF, Placement.CENTER, FabricSide.RS,
            ShapingSide.BOTH, stitches=8, before=16, after=32,
        )
        assert text == "K16, bind off 8 stitches, knit to end"

    def test_within_pattern_works_unshaped_stitches_in_pattern(self, knitting):
        text = render_shaping_phrase(
            knitting, ShapingKind.BIND_OFF, Placement.CENTER, FabricSide.WS,
            ShapingSide.BOTH, stitches=8, before=16, after=32, within_pattern=True,
        )
        assert text == "Work 16 stitches in pattern, bind off 8 stitches, work in pattern to end"

    @pytest.mark.parametrize("side", [FabricSide.RS, FabricSide.WS])
    def test_within_pattern_never_says_knit_or_purl_to_end(self, knitting, side):
        for kind, placement in (
            (ShapingKind.DECREASE, Placement.BOTH_ENDS),
            (ShapingKind.INCREASE, Placement.ROW_START),
            (ShapingKind.INCREASE, Placement.CENTER_AND_ENDS),
        ):
            text = render_shaping_phrase(
                knitting, kind, placement, side, ShapingSide.BOTH,
                stitches=2, before=0, after=20, within_pattern=True,
            )
            assert "knit to" not in text.lower()
            assert "purl to" not in text.lower()
            assert "work in pattern" in text

    def test_evenly(self, knitting, crochet):
        knit = render_shaping_phrase(
            knitting, ShapingKind.DECREASE, Placement.EVENLY, FabricSide.WS,
            ShapingSide.BOTH, stitches=4, before=0, after=40,
        )
        hook = render_shaping_phrase(
            crochet, ShapingKind.INCREASE, Placement.EVENLY, FabricSide.RS,
            ShapingSide.BOTH, stitches=3, before=0, after=40,
        )
        assert knit == "Purl across, decreasing 4 stitches evenly"
        assert hook == "Ch 1, single crochet across, increasing 3 stitches evenly, turn"

    def test_neck_edge_depends_on_piece_side(self, knitting):
        left = render_shaping_phrase(
            knitting, ShapingKind.DECREASE, Placement.NECK_EDGE, FabricSide.RS,
            ShapingSide.LEFT, stitches=1, before=0, after=15,
        )
        right = render_shaping_phrase(
            knitting, ShapingKind.DECREASE, Placement.NECK_EDGE, FabricSide.RS,
            ShapingSide.RIGHT, stitches=1, before=0, after=15,
        )
        assert left == "K1, ssk, knit to end"
        assert right == "Knit to last 3 stitches, k2tog, k1"

    def test_unknown_phrase(self, knitting):
        with pytest.raises(TemplateMismatchError, match="No template 'knitting.shaping.bind_off"):
            render_shaping_phrase(
                knitting, ShapingKind.BIND_OFF, Placement.NECK_EDGE, FabricSide.RS,
                ShapingSide.LEFT, stitches=3, before=0, after=10,
            )


class TestTemplateContract:
    def test_missing_placeholder_value(self):
        templates = CraftTemplates(craft=Craft.KNITTING, kinds={"finish": "Bind off {remaining}."})
        with pytest.raises(TemplateMismatchError) as exc_info:
            render_finish(templates, 10)
        assert exc_info.value.template_key == "knitting.finish"
        assert exc_info.value.placeholder == "remaining"
        assert str(exc_info.value) == "Template 'knitting.finish' requires placeholder 'remaining'"

    def test_missing_kind(self):
        templates = CraftTemplates(craft=Craft.CROCHET)
        with pytest.raises(TemplateMismatchError, match="No template 'crochet.cast_on' is defined"):
            render_cast_on(templates, 10)

    def test_missing_label(self):
        templates = CraftTemplates(
            craft=Craft.KNITTING, kinds={"shaping_row": "Row {row}: {body}"}
        )
        with pytest.raises(TemplateMismatchError, match="knitting.labels.increase"):
            render_shaping_row(templates, 1, FabricSide.RS, ShapingKind.INCREASE, "K", 5)
