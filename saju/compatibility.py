"""
Two-person compatibility (궁합) scoring.

Handles:
- Four category scores: day master, branches, elements, yongsin
- Five synergy dimensions re-weighted by relationship type
- Total score, S-D grade, strengths, challenges and advice
- A deterministic 12-month projection for a target year

The relationship type only changes weights, never the category rules.
Every score is an integer in [0, 100].
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from saju.hapchung import RelationType, branch_relation, has_triad
from saju.symbols import CONTROLS, GENERATES, round_half_up


# ============================================================
# ENUMS AND TABLES
# ============================================================

class Relationship(Enum):
    ROMANTIC = "romantic"
    FRIEND = "friend"
    COLLEAGUE = "colleague"
    FAMILY = "family"

    @property
    def label(self) -> str:
        return {"romantic": "연인", "friend": "친구", "colleague": "동료", "family": "가족"}[self.value]


class Grade(Enum):
    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def description(self) -> str:
        return GRADE_DESCRIPTIONS[self]


GRADE_THRESHOLDS = [(90, Grade.S), (80, Grade.A), (70, Grade.B), (60, Grade.C)]

GRADE_DESCRIPTIONS = {
    Grade.S: "A match made in heaven: the best compatibility.",
    Grade.A: "Very good compatibility.",
    Grade.B: "Good compatibility.",
    Grade.C: "Average compatibility.",
    Grade.D: "A pairing that needs effort.",
}

SYNERGY_DIMENSIONS = ("communication", "passion", "stability", "growth", "trust")

RELATIONSHIP_WEIGHTS = {
    Relationship.ROMANTIC: {"communication": 1.0, "passion": 1.2, "stability": 1.1,
                            "growth": 1.0, "trust": 1.1},
    Relationship.FRIEND: {"communication": 1.3, "passion": 0.7, "stability": 0.9,
                          "growth": 1.2, "trust": 1.1},
    Relationship.COLLEAGUE: {"communication": 1.2, "passion": 0.6, "stability": 1.1,
                             "growth": 1.3, "trust": 1.0},
    Relationship.FAMILY: {"communication": 1.1, "passion": 0.7, "stability": 1.2,
                          "growth": 0.9, "trust": 1.3},
}

CATEGORY_WEIGHTS = {"day_master": 0.3, "branches": 0.25, "elements": 0.25, "yongsin": 0.2}

STEM_COMBINATIONS = {frozenset(p) for p in ("甲己", "乙庚", "丙辛", "丁壬", "戊癸")}

DAY_BRANCH_POINTS = {
    RelationType.SIX_COMBINATION: 30,
    RelationType.CLASH: -15,
    RelationType.PUNISHMENT: -10,
    RelationType.HARM: -5,
}

# (name, good, average, poor) descriptions per category
CATEGORY_TEXT = {
    "day_master": ("Day master match",
                   "The day masters fit together naturally.",
                   "An average day-master match; effort brings harmony.",
                   "The day masters are a challenge; work at understanding each other."),
    "branches": ("Branch match",
                 "The branches show a deep bond.",
                 "An average branch match.",
                 "The branches clash and need adjusting."),
    "elements": ("Element harmony",
                 "The elements blend harmoniously.",
                 "The elements get along well enough.",
                 "The elements control each other and need adjusting."),
    "yongsin": ("Useful-element complement",
                "You fill each other's gaps.",
                "An average complement.",
                "With extra effort you can make up for each other."),
}

RELATIONSHIP_ADVICE = {
    Relationship.ROMANTIC: [
        "Acknowledging and respecting your differences matters most.",
        "Make time for regular dates and conversations.",
    ],
    Relationship.FRIEND: [
        "Build the friendship by sharing your interests.",
        "Being there in hard times is what real friendship means.",
        "Respect each other's space while staying close.",
    ],
    Relationship.COLLEAGUE: [
        "Play to each other's strengths at work for real synergy.",
        "Clear division of roles reduces conflict.",
        "When opinions clash, argue from logic rather than emotion.",
    ],
    Relationship.FAMILY: [
        "Even within a family, courtesy and respect are essential.",
        "Regular family time does everyone good.",
        "Cheer on and support each other's growth.",
    ],
}

MONTHLY_ADVICE = [
    "A good month for new beginnings.",
    "Strengthen your communication.",
    "A time to grow together.",
    "A month that calls for patience.",
    "The month of strongest synergy.",
    "A time for mutual consideration.",
    "Overcome challenges together.",
    "Recommended for trips or dates.",
    "Share deep conversations.",
    "A stable period.",
    "A month that needs care.",
    "A time for wrapping up and planning.",
]


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class CategoryScore:
    key: str
    score: int
    details: tuple

    @property
    def name(self) -> str:
        return CATEGORY_TEXT[self.key][0]

    @property
    def description(self) -> str:
        _, good, average, poor = CATEGORY_TEXT[self.key]
        if self.score >= 70:
            return good
        if self.score >= 50:
            return average
        return poor

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score,
                "description": self.description, "details": list(self.details)}


@dataclass(frozen=True)
class MonthlyCompatibility:
    month: int
    score: int
    advice: str

    def to_dict(self) -> dict:
        return {"month": self.month, "score": self.score, "advice": self.advice}


@dataclass(frozen=True)
class CompatibilityResult:
    relationship: Relationship
    categories: dict  # key -> CategoryScore
    base_total: int
    synergy: dict  # dimension -> unweighted score
    adjusted_synergy: dict  # dimension -> weighted score
    total: int
    grade: Grade
    strengths: tuple
    challenges: tuple
    advice: tuple
    monthly: tuple = ()
    year: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "relationship": self.relationship.value,
            "relationship_label": self.relationship.label,
            "total": self.total,
            "base_total": self.base_total,
            "grade": self.grade.value,
            "grade_description": self.grade.description,
            "categories": {k: c.to_dict() for k, c in self.categories.items()},
            "synergy": dict(self.adjusted_synergy),
            "base_synergy": dict(self.synergy),
            "strengths": list(self.strengths),
            "challenges": list(self.challenges),
            "advice": list(self.advice),
        }
        if self.year is not None:
            data["year"] = self.year
            data["monthly"] = [m.to_dict() for m in self.monthly]
        return data


# ============================================================
# CATEGORY SCORING
# ============================================================

def _clamp(score: int) -> int:
    return max(0, min(100, score))


def _generates_either(e1, e2) -> bool:
    return GENERATES[e1] == e2 or GENERATES[e2] == e1


def _controls_either(e1, e2) -> bool:
    return CONTROLS[e1] == e2 or CONTROLS[e2] == e1


def score_day_master(stem1, stem2) -> CategoryScore:
    e1, e2 = stem1.element, stem2.element
    score, details = 50, []

    if stem1.polarity != stem2.polarity:
        score += 15
        details.append("Opposite polarity balances well.")
    else:
        details.append("Same polarity: similar temperaments understand each other.")

    if e1 == e2:
        score += 10
        details.append(f"Same element ({e1.label}): similar values.")
    elif _generates_either(e1, e2):
        score += 25
        details.append(f"{e1.label} and {e2.label} generate: you lift each other up.")
    elif _controls_either(e1, e2):
        score -= 10
        details.append(f"{e1.label} and {e2.label} control: friction is possible.")

    if frozenset((stem1.hanja, stem2.hanja)) in STEM_COMBINATIONS:
        score += 20
        details.append("Heavenly stem combination (천간합): a fated attraction.")

    return CategoryScore("day_master", _clamp(score), tuple(details))


def score_branches(chart1, chart2) -> CategoryScore:
    score, details = 50, []

    d1, d2 = chart1.day.branch, chart2.day.branch
    day_relation = branch_relation(d1, d2)
    if day_relation in DAY_BRANCH_POINTS:
        score += DAY_BRANCH_POINTS[day_relation]
        details.append(f"Day branches {d1.hanja}-{d2.hanja}: {day_relation.label}.")

    combined = [p.branch for c in (chart1, chart2) for p in (c.year, c.month, c.day)]
    triad_element = has_triad(combined)
    if triad_element is not None:
        score += 15
        details.append(f"Triad ({triad_element.label}): good energy gathers when together.")

    if branch_relation(chart1.year.branch, chart2.year.branch) is RelationType.SIX_COMBINATION:
        score += 10
        details.append("Year branches combine: a good family bond.")

    return CategoryScore("branches", _clamp(score), tuple(details))


def score_elements(e1, e2) -> CategoryScore:
    score, details = 50, []
    if _generates_either(e1, e2):
        score += 25
        details.append(f"{e1.label} and {e2.label} generate each other.")
    elif _controls_either(e1, e2):
        score -= 10
        details.append(f"{e1.label} and {e2.label} control each other.")
    elif e1 == e2:
        score += 15
        details.append(f"Same element ({e1.label}): an easy understanding.")
    return CategoryScore("elements", _clamp(score), tuple(details))


def score_yongsin(e1, yongsin1, e2, yongsin2) -> CategoryScore:
    score, details = 50, []
    if GENERATES[e2] == e1 or e2 == yongsin1:
        score += 20
        details.append(f"The partner's {e2.label} supports {e1.label}.")
    if GENERATES[e1] == e2 or e1 == yongsin2:
        score += 20
        details.append(f"Your {e1.label} supports the partner's {e2.label}.")
    if e1 != e2:
        score += 10
        details.append("Different elements complement each other.")
    return CategoryScore("yongsin", _clamp(score), tuple(details))


# ============================================================
# COMBINING
# ============================================================

def synergy_scores(categories: dict) -> dict:
    dm = categories["day_master"].score
    br = categories["branches"].score
    el = categories["elements"].score
    ys = categories["yongsin"].score
    raw = {
        "communication": (dm + el) / 2,
        "passion": (br + dm) / 2,
        "stability": (br + ys) / 2,
        "growth": (el + ys) / 2,
        "trust": (dm + br + ys) / 3,
    }
    return {k: int(round_half_up(v)) for k, v in raw.items()}


def grade_for(score: int) -> Grade:
    return next((g for floor, g in GRADE_THRESHOLDS if score >= floor), Grade.D)


def monthly_compatibility(e1, e2, year: int) -> tuple:
    """Deterministic 12-month scores in [70, 99] seeded by the two elements."""
    seed = (e1.ordinal + e2.ordinal + 1) * year
    return tuple(
        MonthlyCompatibility(month=i + 1, score=70 + (seed + 17 * i) % 30,
                             advice=MONTHLY_ADVICE[i])
        for i in range(12)
    )


def _strengths(c: dict) -> list:
    dm, br, el = c["day_master"].score, c["branches"].score, c["elements"].score
    strengths = []
    if dm >= 70:
        strengths.append("Shared values: personalities and values fit, so big decisions "
                         "rarely split you.")
    if br >= 70:
        strengths.append("A fated bond: you feel at ease together.")
    if el >= 70:
        strengths.append("Generating energy: each naturally fills what the other lacks.")
    if dm >= 80 and br >= 80:
        strengths.append("Made for each other: both day masters and branches combine well.")
    if el >= 60 and dm >= 60:
        strengths.append("Growth partners: each of you becomes better together than alone.")
    if not strengths:
        strengths.append("Strength in diversity: your differences give much to learn.")
    return strengths


def _challenges(c: dict) -> list:
    dm, br, el = c["day_master"].score, c["branches"].score, c["elements"].score
    challenges = []
    if dm < 50:
        challenges.append("Personality gap: you handle stress differently. Let go of "
                          "expecting the other to act like you.")
    if br < 50:
        challenges.append("Change and trials: outside changes such as moves or jobs may "
                          "shake the relationship.")
    if el < 50:
        challenges.append("Energy clash: controlling elements create unconscious tension; "
                          "give each other time to recharge.")
    if dm < 40 and el < 40:
        challenges.append("Key caution: a basic difference in temperament. Understand "
                          "rather than try to change each other.")
    if not challenges:
        challenges.append("A stable relationship: no major difficulty is expected, but "
                          "keep deepening the bond.")
    return challenges


def _advice(relationship: Relationship, c: dict, synergy: dict) -> list:
    el, dm, br = c["elements"].score, c["day_master"].score, c["branches"].score
    advice = list(RELATIONSHIP_ADVICE[relationship])

    if relationship is Relationship.ROMANTIC:
        advice.append("Paying more attention to communication will deepen things."
                      if synergy["communication"] < 70 else
                      "Keep up your good communication.")
        advice.append("Consciously say and do things that give a sense of security."
                      if synergy["stability"] < 70 else
                      "Treasure the stability you already have.")

    if el >= 70:
        advice.append("Trust and back each other's decisions; together one plus one makes three.")
    elif el >= 50:
        advice.append("Decide important things together and divide work by strengths.")
    else:
        advice.append("Take a cooling-off period before reacting emotionally.")
    if dm < 60:
        advice.append("Learn how the other expresses care, in words or in actions.")
    elif dm >= 80:
        advice.append("Your values align: set long-term goals and pursue them together.")
    if br < 60:
        advice.append("Treat waves of change as a chance to grow stronger together.")
    elif br >= 80:
        advice.append("Do not take each other for granted; make a habit of thanks.")
    if c["yongsin"].score >= 70:
        advice.append("Start important things together; your useful elements help each other.")
    return advice


def compute_compatibility(report_a, report_b, relationship: Relationship = Relationship.ROMANTIC,
                          year: Optional[int] = None) -> CompatibilityResult:
    """
    Score two people's compatibility.

    Args:
        report_a: SajuReport of the first person
        report_b: SajuReport of the second person
        relationship: relationship type, only re-weights synergy
        year: target year for the monthly projection (omitted when None)

    Returns:
        CompatibilityResult
    """
    chart_a, chart_b = report_a.chart, report_b.chart
    e1, e2 = chart_a.day_master.element, chart_b.day_master.element

    categories = {
        "day_master": score_day_master(chart_a.day_master, chart_b.day_master),
        "branches": score_branches(chart_a, chart_b),
        "elements": score_elements(e1, e2),
        "yongsin": score_yongsin(e1, report_a.elements.yongsin, e2, report_b.elements.yongsin),
    }

    base_total = int(round_half_up(sum(categories[k].score * w
                                       for k, w in CATEGORY_WEIGHTS.items())))
    synergy = synergy_scores(categories)
    weights = RELATIONSHIP_WEIGHTS[relationship]
    adjusted = {k: min(100, int(round_half_up(synergy[k] * weights[k])))
                for k in SYNERGY_DIMENSIONS}
    mean_adjusted = sum(adjusted.values()) / len(adjusted)
    total = int(round_half_up(base_total * 0.6 + mean_adjusted * 0.4))

    return CompatibilityResult(
        relationship=relationship,
        categories=categories,
        base_total=base_total,
        synergy=synergy,
        adjusted_synergy=adjusted,
        total=total,
        grade=grade_for(total),
        strengths=tuple(_strengths(categories)),
        challenges=tuple(_challenges(categories)),
        advice=tuple(_advice(relationship, categories, synergy)),
        monthly=monthly_compatibility(e1, e2, year) if year is not None else (),
        year=year,
    )
