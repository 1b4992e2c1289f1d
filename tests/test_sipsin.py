"""
Tests for the Ten Gods Mapper
"""

import pytest

from saju.sipsin import (
    SipsinAnalysis,
    SipsinCategory,
    SipsinType,
    analyze_sipsin,
    classify,
)
from saju.symbols import HEAVENLY_STEMS, Element, Polarity, Position


class TestClassify:
    """Element + polarity against the Day Master."""

    @pytest.mark.parametrize("dm", HEAVENLY_STEMS, ids=lambda s: s.hanja)
    def test_self_is_companion(self, dm):
        assert classify(dm.element, dm.polarity, dm.element, dm.polarity) is SipsinType.BIJEON

    @pytest.mark.parametrize("element,polarity,expected", [
        (Element.METAL, Polarity.YIN, SipsinType.GEOPJAE),
        (Element.WATER, Polarity.YANG, SipsinType.SIKSIN),
        (Element.WATER, Polarity.YIN, SipsinType.SANGGWAN),
        (Element.WOOD, Polarity.YANG, SipsinType.PYEONJAE),
        (Element.WOOD, Polarity.YIN, SipsinType.JEONGJAE),
        (Element.FIRE, Polarity.YANG, SipsinType.PYEONGWAN),
        (Element.FIRE, Polarity.YIN, SipsinType.JEONGGWAN),
        (Element.EARTH, Polarity.YANG, SipsinType.PYEONIN),
        (Element.EARTH, Polarity.YIN, SipsinType.JEONGIN),
    ])
    def test_yang_metal_day_master(self, element, polarity, expected):
        assert classify(Element.METAL, Polarity.YANG, element, polarity) is expected

    def test_every_type_belongs_to_one_category(self):
        for sipsin in SipsinType:
            assert sipsin.category in SipsinCategory


class TestChartAnalysis:
    """Golden chart: 庚 metal Day Master."""

    def test_stem_classifications(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        stems = {c.position: c.sipsin for c in analysis.classifications if c.part == "stem"}
        assert stems == {
            Position.YEAR: SipsinType.BIJEON,
            Position.MONTH: SipsinType.GEOPJAE,
            Position.HOUR: SipsinType.SANGGWAN,
        }

    def test_branch_classifications(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        branches = {c.symbol: c.sipsin for c in analysis.classifications if c.part == "branch"}
        assert branches == {
            "午": SipsinType.PYEONGWAN,
            "巳": SipsinType.JEONGGWAN,
            "辰": SipsinType.PYEONIN,
            "未": SipsinType.JEONGIN,
        }

    def test_seven_positions_classified(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        assert len(analysis.classifications) == 7
        assert sum(n for _, n in analysis.distribution) == 7

    def test_category_distribution(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        assert analysis.category_count(SipsinCategory.PEER) == 2
        assert analysis.category_count(SipsinCategory.OUTPUT) == 1
        assert analysis.category_count(SipsinCategory.WEALTH) == 0
        assert analysis.category_count(SipsinCategory.AUTHORITY) == 2
        assert analysis.category_count(SipsinCategory.RESOURCE) == 2

    def test_dominant_and_missing(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        assert analysis.dominant_category is SipsinCategory.PEER
        assert analysis.missing_categories == (SipsinCategory.WEALTH,)
        assert analysis.dominant_types == ()
        assert analysis.missing_types == (
            SipsinType.SIKSIN, SipsinType.JEONGJAE, SipsinType.PYEONJAE,
        )

    def test_text_fields(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        assert "식신" in analysis.advice
        assert analysis.balance == "Overall a well-balanced arrangement."

    def test_excess_category(self, make_chart):
        # 甲 day surrounded by wood: peers everywhere
        analysis = analyze_sipsin(make_chart("甲寅", "乙卯", "甲寅", "甲寅"))
        assert analysis.category_count(SipsinCategory.PEER) == 7
        assert analysis.dominant_types == (SipsinType.BIJEON, SipsinType.GEOPJAE)
        assert "Peers" in analysis.balance
        assert analysis.personality.startswith("Strong 비견")

    def test_hour_entries_flagged_when_estimated(self, make_chart):
        chart = make_chart("庚午", "辛巳", "庚辰", "壬午", hour_estimated=True)
        analysis = analyze_sipsin(chart)
        flagged = [c for c in analysis.classifications if c.estimated]
        assert {c.position for c in flagged} == {Position.HOUR}
        assert len(flagged) == 2

    def test_serialization(self, golden_chart):
        analysis = analyze_sipsin(golden_chart)
        data = analysis.to_dict()
        assert data["day_master"] == "bijeon"
        assert SipsinAnalysis.from_dict(data) == analysis
