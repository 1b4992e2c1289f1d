"""
Four Pillars (Saju 四柱) calculation engine.

    from saju import BirthInput, build_report
    report = build_report(BirthInput.from_strings("1990-05-15", "14:00", gender="male"))
    report.to_dict()
"""

from saju.compatibility import CompatibilityResult, Grade, Relationship, compute_compatibility
from saju.elements import analyze_elements, analyze_strength, hidden_stem_distribution
from saju.errors import (
    CalendarConversionError,
    ComputationError,
    InputValidationError,
    SajuError,
)
from saju.hapchung import (
    analyze_hapchung,
    annual_interactions,
    branch_relation,
    has_triad,
    monthly_risk_timing,
)
from saju.ideal_type import analyze_ideal_type
from saju.pillars import (
    BirthInput,
    CalendarType,
    FourPillarsChart,
    Pillar,
    annual_pillar,
    compute_chart,
    monthly_pillars,
)
from saju.report import SajuReport, build_report, compare
from saju.sinsal import detect_sinsal
from saju.sipsin import analyze_sipsin, classify
from saju.unsung import analyze_unsung, stage_for

__version__ = "0.1.0"
