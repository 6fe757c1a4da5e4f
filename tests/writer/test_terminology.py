"""Tests for the abbreviation pass."""

import pytest

from knitwright.schemas import Craft
from knitwright.writer import abbreviate, abbreviation_glossary


class TestAbbreviate:
    def test_longest_term_wins(self):
        assert abbreviate("knit 2 together", Craft.KNITTING) == "k2tog"

    def test_leading_capital_kept(self):
        assert abbreviate("Knit to end", Craft.KNITTING) == "K to end"
        assert abbreviate("Cast on 40 stitches.", Craft.KNITTING) == "CO 40 sts."

    def test_whole_words_only(self):
        """'knitting' and 'stitchery' contain terms but are not terms."""
        assert abbreviate("knitting stitchery", Craft.KNITTING) == "knitting stitchery"

    def test_single_pass(self):
        """'slip slip knit' becomes ssk, never 'sl sl k'."""
        assert abbreviate("slip slip knit, then slip 1", Craft.KNITTING) == "ssk, then sl 1"

    def test_case_insensitive(self):
        assert abbreviate("Bind Off all stitches", Craft.KNITTING) == "BO all sts"

    def test_crochet_terms(self):
        text = "Ch 1, single crochet 2 together, single crochet to end, turn"
        assert abbreviate(text, Craft.CROCHET) == "Ch 1, sc2tog, sc to end, turn"

    def test_slip_stitch_is_crochet_specific(self):
        assert abbreviate("Slip stitch across", Craft.CROCHET) == "Sl st across"

    def test_unknown_language(self):
        with pytest.raises(ValueError, match="No terminology for craft 'crochet' in language 'de'"):
            abbreviate("chain 3", Craft.CROCHET, language="de")


class TestGlossary:
    def test_maps_abbreviation_to_term(self):
        glossary = abbreviation_glossary(Craft.KNITTING)
        assert glossary["k2tog"] == "knit 2 together"
        assert glossary["sts"] == "stitches"

    def test_sorted_by_abbreviation(self):
        keys = list(abbreviation_glossary(Craft.CROCHET))
        assert keys == sorted(keys, key=str.lower)
