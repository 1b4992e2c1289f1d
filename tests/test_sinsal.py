"""
Tests for the Special Stars Detector
"""

import pytest

from saju.sinsal import (
    EMPTY_SINSAL,
    Sinsal,
    SinsalAnalysis,
    SinsalCategory,
    detect_sinsal,
    void_branches,
)
from saju.symbols import Position


def _found(analysis):
    return {m.sinsal: m.positions for m in analysis.matches}


class TestGoldenChart:
    """庚午 辛巳 庚辰 癸未."""

    def test_matches(self, golden_chart):
        assert _found(detect_sinsal(golden_chart)) == {
            Sinsal.CHEONEUL_GWIIN: (Position.HOUR,),
            Sinsal.CHEONDEOK_GWIIN: (Position.MONTH,),
            Sinsal.WOLDEOK_GWIIN: (Position.YEAR, Position.DAY),
            Sinsal.HWAGAE: (Position.DAY,),
        }

    def test_catalog_order(self, golden_chart):
        stars = [m.sinsal for m in detect_sinsal(golden_chart).matches]
        assert stars == [Sinsal.CHEONEUL_GWIIN, Sinsal.CHEONDEOK_GWIIN,
                         Sinsal.WOLDEOK_GWIIN, Sinsal.HWAGAE]

    def test_void_branches(self, golden_chart):
        # 庚辰 sits in the 甲戌 decade, leaving 申 and 酉 out
        assert void_branches(golden_chart) == (8, 9)

    def test_counts(self, golden_chart):
        counts = detect_sinsal(golden_chart).counts
        assert counts[SinsalCategory.AUSPICIOUS] == 3
        assert counts[SinsalCategory.SPECIAL] == 1
        assert counts[SinsalCategory.INAUSPICIOUS] == 0

    def test_summary_and_advice(self, golden_chart):
        analysis = detect_sinsal(golden_chart)
        assert "귀인" in analysis.summary
        assert "Flowery Canopy" in analysis.summary
        assert len(analysis.advice) == 4

    def test_no_low_confidence_when_time_known(self, golden_chart):
        assert not any(m.low_confidence for m in detect_sinsal(golden_chart).matches)

    def test_serialization(self, golden_chart):
        analysis = detect_sinsal(golden_chart)
        assert SinsalAnalysis.from_dict(analysis.to_dict()) == analysis


class TestLowConfidence:
    """Stars that depend on an estimated hour are flagged."""

    def test_hour_match_flagged(self, make_chart):
        chart = make_chart("庚午", "辛巳", "庚辰", "癸未", hour_estimated=True)
        flags = {m.sinsal: m.low_confidence for m in detect_sinsal(chart).matches}
        assert flags[Sinsal.CHEONEUL_GWIIN] is True
        assert flags[Sinsal.CHEONDEOK_GWIIN] is False
        assert flags[Sinsal.WOLDEOK_GWIIN] is False

    def test_advice_mentions_estimated_hour(self, make_chart):
        chart = make_chart("庚午", "辛巳", "庚辰", "癸未", hour_estimated=True)
        advice = detect_sinsal(chart).advice
        assert any("estimated" in line for line in advice)


class TestIndividualStars:
    """One chart per rule."""

    @pytest.mark.parametrize("labels,star,positions", [
        (("甲戌", "丙寅", "甲子", "甲子"), Sinsal.GONGMANG, (Position.YEAR,)),
        (("甲辰", "丙寅", "庚午", "壬午"), Sinsal.BAEKHO, (Position.YEAR,)),
        (("甲子", "辛未", "庚午", "丙戌"), Sinsal.WONJIN, (Position.YEAR, Position.MONTH)),
        (("甲子", "丙寅", "甲子", "甲子"), Sinsal.GYEOKGAK, (Position.MONTH, Position.DAY)),
        (("庚午", "辛巳", "甲子", "丙寅"), Sinsal.GWANSAL, (Position.YEAR, Position.MONTH)),
    ])
    def test_star_positions(self, make_chart, labels, star, positions):
        assert _found(detect_sinsal(make_chart(*labels)))[star] == positions

    def test_gwansal_needs_two_stems(self, make_chart):
        chart = make_chart("庚午", "丙寅", "甲子", "丙寅")
        assert Sinsal.GWANSAL not in _found(detect_sinsal(chart))

    def test_void_follows_day_decade(self, make_chart):
        # 甲戌 day: the decade's void branches are 申 and 酉
        chart = make_chart("甲申", "丙寅", "甲戌", "甲子")
        assert _found(detect_sinsal(chart))[Sinsal.GONGMANG] == (Position.YEAR,)

    def test_categories(self):
        assert Sinsal.CHEONEUL_GWIIN.info.category is SinsalCategory.AUSPICIOUS
        assert Sinsal.DOHWA.info.category is SinsalCategory.SPECIAL
        assert Sinsal.BAEKHO.info.category is SinsalCategory.INAUSPICIOUS


class TestRules:
    """Rule list injection."""

    def test_empty_rule_list(self, golden_chart):
        analysis = detect_sinsal(golden_chart, rules=[])
        assert analysis.matches == ()
        assert analysis.summary == "No strong stars; a steady, stable chart."

    def test_custom_rule(self, golden_chart):
        rules = [(Sinsal.DOHWA, lambda chart: [Position.HOUR])]
        assert _found(detect_sinsal(golden_chart, rules=rules)) == {
            Sinsal.DOHWA: (Position.HOUR,),
        }

    def test_empty_analysis_serializes(self):
        assert EMPTY_SINSAL.to_dict()["matches"] == []
