"""
Report pipeline: one chart, every analysis.

Handles:
- build_report(): compute the chart once and run each analysis on it
- Isolation of optional modules (sinsal, hapchung, unsung): a failure is
  logged with the chart context and replaced by an empty result
- compare(): two reports plus compatibility, memoised per call
- Versioned serialization of the full report
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from saju import config
from saju.astro_calendar import solar_to_lunar
from saju.compatibility import CompatibilityResult, Relationship, compute_compatibility
from saju.elements import (
    DayMasterStrength,
    ElementBalance,
    analyze_elements,
    analyze_strength,
    hidden_stem_distribution,
)
from saju.errors import InputValidationError
from saju.hapchung import EMPTY_HAPCHUNG, HapchungAnalysis, analyze_hapchung
from saju.ideal_type import IdealTypeAnalysis, ideal_type_for_balance
from saju.pillars import BirthInput, FourPillarsChart, compute_chart
from saju.sinsal import EMPTY_SINSAL, SinsalAnalysis, detect_sinsal
from saju.sipsin import SipsinAnalysis, analyze_sipsin
from saju.unsung import EMPTY_UNSUNG, UnsungAnalysis, analyze_unsung

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SajuReport:
    chart: FourPillarsChart
    elements: ElementBalance
    strength: DayMasterStrength
    sipsin: SipsinAnalysis
    sinsal: SinsalAnalysis
    hapchung: HapchungAnalysis
    unsung: UnsungAnalysis
    ideal_type: IdealTypeAnalysis
    degraded: tuple = field(default=())

    def to_dict(self) -> dict:
        return {
            "schema_version": config.SCHEMA_VERSION,
            "chart": self.chart.to_dict(),
            "lunar_date": solar_to_lunar(self.chart.solar_date),
            "elements": self.elements.to_dict(),
            "hidden_stem_distribution": hidden_stem_distribution(self.chart),
            "strength": self.strength.to_dict(),
            "sipsin": self.sipsin.to_dict(),
            "sinsal": self.sinsal.to_dict(),
            "hapchung": self.hapchung.to_dict(),
            "unsung": self.unsung.to_dict(),
            "ideal_type": self.ideal_type.to_dict(),
            "degraded": list(self.degraded),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SajuReport":
        """Rehydrate a stored report without recomputing anything."""
        version = str(data.get("schema_version", ""))
        if version.split(".")[0] != config.SCHEMA_VERSION.split(".")[0]:
            raise InputValidationError(
                f"Unsupported report schema version {version!r} "
                f"(expected {config.SCHEMA_VERSION})"
            )
        return cls(
            chart=FourPillarsChart.from_dict(data["chart"]),
            elements=ElementBalance.from_dict(data["elements"]),
            strength=DayMasterStrength.from_dict(data["strength"]),
            sipsin=SipsinAnalysis.from_dict(data["sipsin"]),
            sinsal=SinsalAnalysis.from_dict(data["sinsal"]),
            hapchung=HapchungAnalysis.from_dict(data["hapchung"]),
            unsung=UnsungAnalysis.from_dict(data["unsung"]),
            ideal_type=IdealTypeAnalysis.from_dict(data["ideal_type"]),
            degraded=tuple(data.get("degraded", ())),
        )


# Optional analyses: name -> (analyzer, empty fallback)
OPTIONAL_ANALYSES = {
    "sinsal": (detect_sinsal, EMPTY_SINSAL),
    "hapchung": (analyze_hapchung, EMPTY_HAPCHUNG),
    "unsung": (analyze_unsung, EMPTY_UNSUNG),
}


def _run_optional(name: str, chart: FourPillarsChart, degraded: list):
    analyzer, fallback = OPTIONAL_ANALYSES[name]
    try:
        return analyzer(chart)
    except Exception:
        logger.exception("%s analysis failed; continuing without it (%s)",
                         name, chart.context())
        degraded.append(name)
        return fallback


def build_report(birth: BirthInput) -> SajuReport:
    """
    Compute the full report for one birth.

    Chart, element and sipsin failures propagate. Sinsal, hapchung and
    unsung failures degrade to empty results listed in `degraded`.
    """
    chart = compute_chart(birth)
    balance = analyze_elements(chart)
    degraded = []

    report = SajuReport(
        chart=chart,
        elements=balance,
        strength=analyze_strength(chart, balance),
        sipsin=analyze_sipsin(chart),
        sinsal=_run_optional("sinsal", chart, degraded),
        hapchung=_run_optional("hapchung", chart, degraded),
        unsung=_run_optional("unsung", chart, degraded),
        ideal_type=ideal_type_for_balance(balance),
        degraded=tuple(degraded),
    )
    logger.debug("Built report for %s (degraded: %s)", chart.label, degraded or "none")
    return report


def compare(birth_a: BirthInput, birth_b: BirthInput,
            relationship: Relationship = Relationship.ROMANTIC,
            year: Optional[int] = None) -> CompatibilityResult:
    """
    Compatibility of two births.

    Identical inputs share one report within the call.
    """
    reports = {}
    for birth in (birth_a, birth_b):
        if birth not in reports:
            reports[birth] = build_report(birth)
    return compute_compatibility(reports[birth_a], reports[birth_b], relationship, year)
