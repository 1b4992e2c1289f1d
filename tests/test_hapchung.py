"""
Tests for Branch Interactions (합충형파해)
"""

from itertools import combinations

import pytest

from saju.hapchung import (
    EMPTY_HAPCHUNG,
    HapchungAnalysis,
    HarmonyLevel,
    RelationType,
    analyze_hapchung,
    annual_interactions,
    NO_CAUTION,
    branch_relation,
    caution_periods,
    harmony_level,
    has_triad,
    is_clash,
    is_punishment,
    is_six_combination,
    monthly_risk_timing,
)
from saju.symbols import EARTHLY_BRANCHES, Element, Position

BRANCH_PAIRS = list(combinations([b.hanja for b in EARTHLY_BRANCHES], 2))


class TestGoldenChart:
    """午 巳 辰 未."""

    def test_six_combination(self, golden_chart):
        analysis = analyze_hapchung(golden_chart)
        six = [r for r in analysis.relations if r.relation_type is RelationType.SIX_COMBINATION]
        assert len(six) == 1
        assert six[0].branches == ("午", "未")
        assert six[0].positions == (Position.YEAR, Position.HOUR)
        assert six[0].element is Element.EARTH

    def test_directional_set(self, golden_chart):
        analysis = analyze_hapchung(golden_chart)
        directional = [r for r in analysis.relations
                       if r.relation_type is RelationType.DIRECTIONAL]
        assert len(directional) == 1
        assert directional[0].complete is True
        assert directional[0].branches == ("巳", "午", "未")
        assert directional[0].positions == (Position.YEAR, Position.MONTH, Position.HOUR)

    def test_score_and_level(self, golden_chart):
        analysis = analyze_hapchung(golden_chart)
        assert analysis.harmony_score == 80
        assert analysis.level is HarmonyLevel.HARMONIOUS
        assert analysis.conflicts == ()
        assert len(analysis.harmonies) == 2

    def test_serialization(self, golden_chart):
        analysis = analyze_hapchung(golden_chart)
        data = analysis.to_dict()
        assert data["harmony_count"] == 2
        assert data["conflict_count"] == 0
        assert HapchungAnalysis.from_dict(data) == analysis


class TestConflicts:
    """Charts dominated by clashes."""

    def test_score_clamped_at_zero(self, make_chart):
        analysis = analyze_hapchung(make_chart("甲子", "庚午", "甲子", "庚午"))
        clashes = [r for r in analysis.relations if r.relation_type is RelationType.CLASH]
        assert len(clashes) == 4
        assert analysis.harmony_score == 0
        assert analysis.level is HarmonyLevel.TURBULENT

    def test_self_punishment_needs_two(self, make_chart):
        analysis = analyze_hapchung(make_chart("甲子", "庚午", "甲子", "庚午"))
        punishments = [r for r in analysis.relations
                       if r.relation_type is RelationType.PUNISHMENT]
        assert [r.branches for r in punishments] == [("午", "午")]

    def test_advice_for_conflicts(self, make_chart):
        analysis = analyze_hapchung(make_chart("甲子", "庚午", "甲子", "庚午"))
        assert analysis.advice[-1] == "Stay centred through change and avoid hasty decisions."

    @pytest.mark.parametrize("score,level", [
        (100, HarmonyLevel.HARMONIOUS),
        (70, HarmonyLevel.HARMONIOUS),
        (69, HarmonyLevel.BALANCED),
        (50, HarmonyLevel.BALANCED),
        (49, HarmonyLevel.TURBULENT),
        (0, HarmonyLevel.TURBULENT),
    ])
    def test_harmony_level(self, score, level):
        assert harmony_level(score) is level

    def test_empty_analysis_is_neutral(self):
        assert EMPTY_HAPCHUNG.harmony_score == 50
        assert EMPTY_HAPCHUNG.level is HarmonyLevel.BALANCED


class TestPairwise:
    """Lookups over all 66 branch pairs."""

    def test_exactly_six_clashes(self):
        clashes = [p for p in BRANCH_PAIRS if is_clash(*p)]
        assert len(clashes) == 6
        assert ("子", "午") in clashes

    def test_clash_iff_opposite(self):
        index = {b.hanja: b.index for b in EARTHLY_BRANCHES}
        for b1, b2 in BRANCH_PAIRS:
            assert is_clash(b1, b2) == (abs(index[b1] - index[b2]) == 6)

    def test_each_branch_has_one_combination_partner(self):
        for b in EARTHLY_BRANCHES:
            partners = [o for o in EARTHLY_BRANCHES if o != b and is_six_combination(b, o)]
            assert len(partners) == 1

    def test_lookups_are_symmetric(self):
        for b1, b2 in BRANCH_PAIRS:
            assert branch_relation(b1, b2) == branch_relation(b2, b1)

    def test_accepts_branch_objects(self, golden_chart):
        year, month, day, hour = golden_chart.branches
        assert branch_relation(year, hour) is RelationType.SIX_COMBINATION
        assert branch_relation(year, "未") is RelationType.SIX_COMBINATION

    @pytest.mark.parametrize("b1,b2,expected", [
        ("寅", "亥", RelationType.SIX_COMBINATION),  # also a destruction
        ("巳", "申", RelationType.SIX_COMBINATION),  # also destruction and punishment
        ("子", "午", RelationType.CLASH),
        ("子", "酉", RelationType.DESTRUCTION),
        ("寅", "巳", RelationType.HARM),  # also a punishment
        ("子", "卯", RelationType.PUNISHMENT),
        ("子", "辰", None),
    ])
    def test_branch_relation_priority(self, b1, b2, expected):
        assert branch_relation(b1, b2) is expected

    @pytest.mark.parametrize("b,expected", [
        ("辰", True), ("午", True), ("酉", True), ("亥", True), ("子", False), ("巳", False),
    ])
    def test_self_punishment(self, b, expected):
        assert is_punishment(b, b) is expected

    @pytest.mark.parametrize("branches,expected", [
        (["申", "辰"], Element.WATER),
        (["子", "午"], None),
        (["寅", "戌", "申", "子"], Element.FIRE),
        (["亥", "卯", "未"], Element.WOOD),
        ([], None),
    ])
    def test_has_triad(self, branches, expected):
        assert has_triad(branches) is expected

    def test_has_triad_on_chart(self, golden_chart):
        assert has_triad(golden_chart.branches) is None


class TestMonthlyTiming:
    """Risk and opportunity months for the golden chart."""

    def test_risk_months(self, golden_chart):
        timing = monthly_risk_timing(golden_chart)
        assert [m.month for m in timing.risk_months] == [12, 9]
        assert [m.branch for m in timing.risk_months] == ["丑", "戌"]
        assert timing.risk_months[0].score == 80
        assert all(m.level == "high" for m in timing.risk_months)

    def test_opportunity_months(self, golden_chart):
        timing = monthly_risk_timing(golden_chart)
        assert [m.month for m in timing.opportunity_months] == [7, 8, 5]
        assert timing.opportunity_months[0].score == 45

    def test_limits_and_order(self, make_chart):
        timing = monthly_risk_timing(make_chart("甲子", "庚午", "甲子", "庚午"))
        assert len(timing.risk_months) <= 2
        assert len(timing.opportunity_months) <= 3
        scores = [m.score for m in timing.risk_months]
        assert scores == sorted(scores, reverse=True)

    def test_deterministic(self, golden_chart):
        assert monthly_risk_timing(golden_chart) == monthly_risk_timing(golden_chart)

    def test_to_dict(self, golden_chart):
        data = monthly_risk_timing(golden_chart).to_dict()
        assert "level" in data["risk_months"][0]
        assert "level" not in data["opportunity_months"][0]
        assert [p["rank"] for p in data["caution_periods"]] == [1, 2]

    def test_caution_periods(self, golden_chart):
        periods = monthly_risk_timing(golden_chart).caution_periods
        assert [(p.rank, p.month) for p in periods] == [(1, 12), (2, 9)]
        assert "early" in periods[0].period
        assert "mid" in periods[1].period
        assert all(p.level == "high" for p in periods)

    def test_caution_periods_fallback(self):
        assert caution_periods(()) == (NO_CAUTION,)
        assert NO_CAUTION.month is None
        assert NO_CAUTION.to_dict()["level"] == "low"


class TestAnnualInteractions:
    """Yearly branch (세운) against the natal branches."""

    def test_2026(self, golden_chart):
        annual = annual_interactions(golden_chart, 2026)
        assert annual.pillar_label == "丙午"
        assert annual.relations == (
            (Position.YEAR, RelationType.PUNISHMENT),
            (Position.HOUR, RelationType.SIX_COMBINATION),
        )
        assert annual.score == 55

    def test_to_dict(self, golden_chart):
        data = annual_interactions(golden_chart, 2026).to_dict()
        assert data["branch"] == "午"
        assert data["relations"][0]["type"] == "punishment"
