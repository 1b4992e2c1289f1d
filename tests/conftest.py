"""
Pytest Configuration and Fixtures

Shared birth inputs, computed charts and a chart factory that builds
charts straight from pillar labels (no ephemeris involved).
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from saju.elements import analyze_elements
from saju.pillars import BirthInput, FourPillarsChart, Pillar, compute_chart
from saju.symbols import POSITION_ORDER, branch, stem


@pytest.fixture(scope="session")
def golden_birth() -> BirthInput:
    """1990-05-15 14:00 KST, male: 庚午 辛巳 庚辰 癸未."""
    return BirthInput(year=1990, month=5, day=15, hour=14, minute=0, gender="male")


@pytest.fixture(scope="session")
def golden_chart(golden_birth) -> FourPillarsChart:
    return compute_chart(golden_birth)


@pytest.fixture(scope="session")
def unknown_time_chart() -> FourPillarsChart:
    """Same date as the golden chart with no birth time."""
    return compute_chart(BirthInput(year=1990, month=5, day=15, gender="female"))


def build_chart(year: str, month: str, day: str, hour: str,
                hour_estimated: bool = False) -> FourPillarsChart:
    """Chart from four pillar labels such as '庚午'."""
    pillars = [
        Pillar(stem(label[0]), branch(label[1]), position)
        for label, position in zip((year, month, day, hour), POSITION_ORDER)
    ]
    birth = BirthInput(year=2000, month=1, day=1, hour=None if hour_estimated else 12)
    return FourPillarsChart(
        year=pillars[0], month=pillars[1], day=pillars[2], hour=pillars[3],
        birth=birth,
        solar_date=date(2000, 1, 1),
        corrected_time=datetime(2000, 1, 1, 12, 0),
        utc_time=datetime(2000, 1, 1, 3, 0),
        hour_estimated=hour_estimated,
    )


@pytest.fixture
def make_chart():
    """Factory: make_chart('庚午', '辛巳', '庚辰', '癸未', hour_estimated=False)."""
    return build_chart


@pytest.fixture
def make_report():
    """Factory for the minimal report shape the compatibility engine reads."""
    def _make(*labels, hour_estimated=False):
        chart = build_chart(*labels, hour_estimated=hour_estimated)
        return SimpleNamespace(chart=chart, elements=analyze_elements(chart))
    return _make
