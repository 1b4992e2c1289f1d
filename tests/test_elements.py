"""
Tests for Element Balance and Day Master Strength
"""

import pytest

from saju.elements import (
    ElementBalance,
    Strength,
    analyze_elements,
    analyze_strength,
    hidden_stem_distribution,
    pick_deficient,
    pick_dominant,
)
from saju.symbols import ELEMENT_ORDER, Element


class TestElementCount:
    """Unweighted count over stems and branches."""

    def test_golden_counts(self, golden_chart):
        balance = analyze_elements(golden_chart)
        assert balance.count(Element.METAL) == 3
        assert balance.count(Element.FIRE) == 2
        assert balance.count(Element.EARTH) == 2
        assert balance.count(Element.WATER) == 1
        assert balance.count(Element.WOOD) == 0

    def test_golden_dominant_and_deficient(self, golden_chart):
        balance = analyze_elements(golden_chart)
        assert balance.dominant is Element.METAL
        assert balance.deficient is Element.WOOD
        assert balance.yongsin is Element.WOOD

    @pytest.mark.parametrize("labels", [
        ("庚午", "辛巳", "庚辰", "癸未"),
        ("甲子", "丙寅", "戊辰", "庚申"),
        ("癸亥", "癸亥", "癸亥", "癸亥"),
    ])
    def test_counts_sum_to_eight(self, make_chart, labels):
        assert analyze_elements(make_chart(*labels)).total == 8

    def test_serialization(self, golden_chart):
        balance = analyze_elements(golden_chart)
        assert ElementBalance.from_dict(balance.to_dict()) == balance


class TestTieBreaks:
    """Deterministic dominant/deficient selection."""

    def test_dominant_tie_prefers_day_master(self):
        counts = {Element.WOOD: 2, Element.FIRE: 2, Element.EARTH: 2,
                  Element.METAL: 1, Element.WATER: 1}
        assert pick_dominant(counts, Element.EARTH) is Element.EARTH

    def test_dominant_tie_without_day_master_uses_canonical_order(self):
        counts = {Element.WOOD: 1, Element.FIRE: 3, Element.EARTH: 0,
                  Element.METAL: 3, Element.WATER: 1}
        assert pick_dominant(counts, Element.WATER) is Element.FIRE

    def test_deficient_tie_uses_canonical_order(self):
        counts = {Element.WOOD: 2, Element.FIRE: 0, Element.EARTH: 2,
                  Element.METAL: 0, Element.WATER: 4}
        assert pick_deficient(counts) is Element.FIRE

    def test_deficient_all_equal(self):
        counts = {e: 2 for e in ELEMENT_ORDER}
        assert pick_deficient(counts) is Element.WOOD


class TestHiddenStems:
    """The weighted distribution is an extension that never touches the count."""

    def test_covers_every_element(self, golden_chart):
        distribution = hidden_stem_distribution(golden_chart)
        assert set(distribution) == {e.value for e in ELEMENT_ORDER}

    def test_count_is_unchanged(self, golden_chart):
        before = analyze_elements(golden_chart)
        hidden_stem_distribution(golden_chart)
        assert analyze_elements(golden_chart) == before
        assert before.total == 8

    def test_weights_exceed_plain_count(self, golden_chart):
        distribution = hidden_stem_distribution(golden_chart)
        # 4 stems at 1.0 plus 4 main qi at 0.7, before middle/residual qi
        assert sum(distribution.values()) > 6.5


class TestStrength:
    """Day Master strength."""

    def test_golden_is_strong(self, golden_chart):
        strength = analyze_strength(golden_chart, analyze_elements(golden_chart))
        assert strength.strength is Strength.STRONG
        assert strength.support == pytest.approx(4.4)
        assert strength.drain == pytest.approx(2.5)
        assert strength.favorable == (Element.WATER, Element.FIRE)
        assert strength.unfavorable == (Element.METAL, Element.EARTH)

    def test_weak_day_master(self, make_chart):
        # 甲 wood surrounded by metal and fire
        chart = make_chart("庚申", "丙申", "甲午", "庚午")
        strength = analyze_strength(chart, analyze_elements(chart))
        assert strength.strength is Strength.WEAK
        assert strength.favorable == (Element.WOOD, Element.WATER)

    def test_to_dict_has_lucky_items(self, golden_chart):
        data = analyze_strength(golden_chart, analyze_elements(golden_chart)).to_dict()
        assert data["strength"] == "strong"
        assert "north" in data["lucky_directions"]
        assert 1 in data["lucky_numbers"]
