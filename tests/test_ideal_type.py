"""
Tests for the Ideal Partner Profile
"""

import pytest

from saju.elements import analyze_elements
from saju.ideal_type import (
    IdealTypeAnalysis,
    analyze_ideal_type,
    ideal_type_for_balance,
    match_scores,
)
from saju.symbols import CONTROLS, ELEMENT_ORDER, GENERATED_BY, GENERATES, Element


class TestMatchScores:
    """Best / good / challenge follow the element cycles."""

    def test_metal(self):
        best, good, challenge = match_scores(Element.METAL)
        assert (best.element, best.score) == (Element.EARTH, 95)
        assert (good.element, good.score) == (Element.WATER, 80)
        assert (challenge.element, challenge.score) == (Element.WOOD, 55)

    @pytest.mark.parametrize("element", ELEMENT_ORDER, ids=lambda e: e.value)
    def test_cycles(self, element):
        best, good, challenge = match_scores(element)
        assert best.element is GENERATED_BY[element]
        assert good.element is GENERATES[element]
        assert challenge.element is CONTROLS[element]


class TestIdealType:
    """Profile built from the Day Master and the deficient element."""

    def test_golden_chart(self, golden_chart):
        analysis = ideal_type_for_balance(analyze_elements(golden_chart))
        assert analysis.day_master_element is Element.METAL
        assert analysis.ideal_element is Element.WOOD
        assert analysis.share_title == "A partner who teaches you flexibility!"

    def test_falls_back_to_generated_element(self):
        analysis = analyze_ideal_type(Element.METAL)
        assert analysis.ideal_element is Element.WATER
        assert analysis.share_title == "A partner to share wisdom with!"

    @pytest.mark.parametrize("dm", ELEMENT_ORDER, ids=lambda e: e.value)
    @pytest.mark.parametrize("ideal", ELEMENT_ORDER, ids=lambda e: e.value)
    def test_every_combination_has_a_title(self, dm, ideal):
        analysis = analyze_ideal_type(dm, ideal)
        assert analysis.share_title
        assert ideal.label in analysis.summary

    def test_profile_follows_ideal_element(self):
        analysis = analyze_ideal_type(Element.METAL, Element.WOOD)
        assert analysis.mbti_types == ["ENFP", "INFP", "ENFJ"]
        assert "growth-minded" in analysis.profile["personality"]

    def test_serialization(self, golden_chart):
        analysis = ideal_type_for_balance(analyze_elements(golden_chart))
        data = analysis.to_dict()
        assert data["matches"]["best"]["score"] == 95
        assert data["profile"]["mbti_types"] == ["ENFP", "INFP", "ENFJ"]
        assert IdealTypeAnalysis.from_dict(data) == analysis
