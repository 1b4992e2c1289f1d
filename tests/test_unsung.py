"""
Tests for the Twelve Life Stages (12운성)
"""

import pytest

from saju.symbols import EARTHLY_BRANCHES, HEAVENLY_STEMS, Position
from saju.unsung import (
    EMPTY_UNSUNG,
    STAGES,
    StageCategory,
    UnsungAnalysis,
    analyze_unsung,
    stage_for,
)


class TestStageTable:
    """Forward walk for yang stems, backward for yin."""

    @pytest.mark.parametrize("day_stem,branch_hanja,expected", [
        ("甲", "亥", "jangsaeng"),
        ("甲", "卯", "jewang"),
        ("丁", "酉", "jangsaeng"),
        ("丁", "午", "geonrok"),
        ("癸", "子", "geonrok"),
        ("辛", "辰", "myo"),
        ("壬", "巳", "jeol"),
        ("乙", "巳", "mogyok"),
        ("乙", "卯", "geonrok"),
        ("庚", "巳", "jangsaeng"),
    ])
    def test_known_stages(self, day_stem, branch_hanja, expected):
        assert stage_for(day_stem, branch_hanja).key == expected

    @pytest.mark.parametrize("day_stem", HEAVENLY_STEMS, ids=lambda s: s.hanja)
    def test_every_stem_visits_all_twelve_stages(self, day_stem):
        keys = {stage_for(day_stem, b).key for b in EARTHLY_BRANCHES}
        assert keys == {s.key for s in STAGES}

    def test_accepts_objects_and_indices(self):
        assert stage_for(HEAVENLY_STEMS[0], EARTHLY_BRANCHES[11]).key == "jangsaeng"
        assert stage_for(0, 3).key == "jewang"
        assert stage_for("庚", EARTHLY_BRANCHES[5]) == stage_for("庚", "巳")

    def test_energy_peaks_at_jewang(self):
        assert max(STAGES, key=lambda s: s.energy).key == "jewang"
        assert min(STAGES, key=lambda s: s.energy).key == "jeol"


class TestChartAnalysis:
    """庚 Day Master over 午 巳 辰 未."""

    def test_positions(self, golden_chart):
        analysis = analyze_unsung(golden_chart)
        stages = {p.position: (p.stage.key, p.stage.energy) for p in analysis.positions}
        assert stages == {
            Position.YEAR: ("mogyok", 5),
            Position.MONTH: ("jangsaeng", 7),
            Position.DAY: ("yang", 5),
            Position.HOUR: ("gwandae", 8),
        }

    def test_aggregates(self, golden_chart):
        analysis = analyze_unsung(golden_chart)
        assert analysis.average_energy == pytest.approx(6.3)
        assert analysis.dominant_category is StageCategory.GROWTH
        assert analysis.peak.position is Position.HOUR
        assert analysis.lowest.position is Position.YEAR

    def test_summary_and_advice(self, golden_chart):
        analysis = analyze_unsung(golden_chart)
        assert "good balance" in analysis.summary
        assert len(analysis.advice) == 2
        assert analysis.advice[0].startswith("시주")

    def test_category_tie_uses_fixed_order(self, make_chart):
        # 甲 over 亥 子 寅 卯: jangsaeng, mogyok, geonrok, jewang
        analysis = analyze_unsung(make_chart("辛亥", "壬子", "甲寅", "丁卯"))
        categories = [p.stage.category for p in analysis.positions]
        assert categories.count(StageCategory.GROWTH) == 2
        assert categories.count(StageCategory.PEAK) == 2
        assert analysis.dominant_category is StageCategory.GROWTH

    def test_estimated_hour_flagged(self, unknown_time_chart):
        analysis = analyze_unsung(unknown_time_chart)
        flagged = [p.position for p in analysis.positions if p.estimated]
        assert flagged == [Position.HOUR]

    def test_serialization(self, golden_chart):
        analysis = analyze_unsung(golden_chart)
        data = analysis.to_dict()
        assert data["peak_position"] == "hour"
        assert data["lowest_position"] == "year"
        assert UnsungAnalysis.from_dict(data) == analysis

    def test_empty_analysis_serializes(self):
        data = EMPTY_UNSUNG.to_dict()
        assert data["positions"] == []
        assert "peak_position" not in data
