"""
Branch interaction analysis (합충형파해 合沖刑破害).

Handles:
- Six-combinations, triads and directional sets (the harmonies)
- Clashes, punishments, destructions and harms (the conflicts)
- Harmony score with a three-level label, summary and advice
- Pairwise lookups (branch_relation, has_triad) shared with compatibility
- Month-by-month risk / opportunity timing and yearly interactions

Relations are not exclusive: one branch may take part in several.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from saju.pillars import FourPillarsChart, annual_pillar
from saju.symbols import BRANCH_BY_HANJA, Element, Position


# ============================================================
# RELATION TYPES
# ============================================================

class RelationType(Enum):
    SIX_COMBINATION = "six_combination"
    TRIAD = "triad"
    DIRECTIONAL = "directional"
    CLASH = "clash"
    PUNISHMENT = "punishment"
    DESTRUCTION = "destruction"
    HARM = "harm"

    @property
    def korean(self) -> str:
        return _RELATION_NAMES[self][0]

    @property
    def label(self) -> str:
        korean, hanja = _RELATION_NAMES[self]
        return f"{korean}({hanja})"

    @property
    def is_harmony(self) -> bool:
        return self in (RelationType.SIX_COMBINATION, RelationType.TRIAD,
                        RelationType.DIRECTIONAL)


_RELATION_NAMES = {
    RelationType.SIX_COMBINATION: ("육합", "六合"),
    RelationType.TRIAD: ("삼합", "三合"),
    RelationType.DIRECTIONAL: ("방합", "方合"),
    RelationType.CLASH: ("충", "沖"),
    RelationType.PUNISHMENT: ("형", "刑"),
    RelationType.DESTRUCTION: ("파", "破"),
    RelationType.HARM: ("해", "害"),
}


class HarmonyLevel(Enum):
    HARMONIOUS = "harmonious"
    BALANCED = "balanced"
    TURBULENT = "turbulent"

    @property
    def label(self) -> str:
        return {"harmonious": "조화", "balanced": "균형", "turbulent": "변동"}[self.value]


# ============================================================
# TABLES
# ============================================================

SIX_COMBINATIONS = {
    frozenset("子丑"): Element.EARTH,
    frozenset("寅亥"): Element.WOOD,
    frozenset("卯戌"): Element.FIRE,
    frozenset("辰酉"): Element.METAL,
    frozenset("巳申"): Element.WATER,
    frozenset("午未"): Element.EARTH,
}

TRIAD_GROUPS = [
    ("寅午戌", Element.FIRE),
    ("申子辰", Element.WATER),
    ("巳酉丑", Element.METAL),
    ("亥卯未", Element.WOOD),
]

# (branches, element, direction)
DIRECTIONAL_GROUPS = [
    ("寅卯辰", Element.WOOD, "east"),
    ("巳午未", Element.FIRE, "south"),
    ("申酉戌", Element.METAL, "west"),
    ("亥子丑", Element.WATER, "north"),
]

# (branches, korean name, meaning)
PUNISHMENT_GROUPS = [
    ("寅巳申", "무은지형", "ungrateful punishment: kindness repaid with enmity"),
    ("丑戌未", "지세지형", "power punishment: overreaching on one's own strength"),
    ("子卯", "무례지형", "rude punishment: a lapse of courtesy"),
]
SELF_PUNISHMENT = "辰午酉亥"

DESTRUCTIONS = {frozenset(p) for p in ("子酉", "丑辰", "寅亥", "卯午", "巳申", "未戌")}
HARMS = {frozenset(p) for p in ("子未", "丑午", "寅巳", "卯辰", "申亥", "酉戌")}

SCORE_BASE = 50
SCORE_ADJUSTMENTS = {
    (RelationType.TRIAD, True): 20,
    (RelationType.TRIAD, False): 12,
    (RelationType.SIX_COMBINATION, True): 15,
    (RelationType.DIRECTIONAL, True): 15,
    (RelationType.DIRECTIONAL, False): 8,
    (RelationType.CLASH, True): -12,
    (RelationType.PUNISHMENT, True): -10,
    (RelationType.DESTRUCTION, True): -6,
    (RelationType.HARM, True): -5,
}


# ============================================================
# PAIRWISE LOOKUPS
# ============================================================

def _hanja(b) -> str:
    return b if isinstance(b, str) else b.hanja


def is_six_combination(b1, b2) -> bool:
    return frozenset((_hanja(b1), _hanja(b2))) in SIX_COMBINATIONS


def is_clash(b1, b2) -> bool:
    i, j = BRANCH_BY_HANJA[_hanja(b1)].index, BRANCH_BY_HANJA[_hanja(b2)].index
    return (i - j) % 12 == 6


def is_punishment(b1, b2) -> bool:
    h1, h2 = _hanja(b1), _hanja(b2)
    if h1 == h2:
        return h1 in SELF_PUNISHMENT
    return any(h1 in group and h2 in group for group, _, _ in PUNISHMENT_GROUPS)


def is_destruction(b1, b2) -> bool:
    return frozenset((_hanja(b1), _hanja(b2))) in DESTRUCTIONS


def is_harm(b1, b2) -> bool:
    return frozenset((_hanja(b1), _hanja(b2))) in HARMS


_PAIR_CHECKS = [
    (RelationType.SIX_COMBINATION, is_six_combination),
    (RelationType.CLASH, is_clash),
    (RelationType.DESTRUCTION, is_destruction),
    (RelationType.HARM, is_harm),
    (RelationType.PUNISHMENT, is_punishment),
]


def branch_relation(b1, b2) -> Optional[RelationType]:
    """
    The single most notable relation between two branches.

    Checked in order: six-combination, clash, destruction, harm,
    punishment. Accepts EarthlyBranch objects or hanja strings.
    """
    for relation_type, check in _PAIR_CHECKS:
        if check(b1, b2):
            return relation_type
    return None


def has_triad(branches) -> Optional[Element]:
    """Element of the first triad with at least two members present, else None."""
    present = {_hanja(b) for b in branches}
    for group, element in TRIAD_GROUPS:
        if sum(1 for b in group if b in present) >= 2:
            return element
    return None


# ============================================================
# CHART ANALYSIS
# ============================================================

@dataclass(frozen=True)
class BranchRelation:
    relation_type: RelationType
    branches: tuple  # hanja strings
    positions: tuple  # Positions
    effect: str
    element: Optional[Element] = None
    complete: bool = True

    @property
    def is_harmony(self) -> bool:
        return self.relation_type.is_harmony

    @property
    def score(self) -> int:
        return SCORE_ADJUSTMENTS[(self.relation_type, self.complete)]

    def to_dict(self) -> dict:
        return {
            "type": self.relation_type.value,
            "label": self.relation_type.label,
            "branches": list(self.branches),
            "positions": [p.value for p in self.positions],
            "element": self.element.value if self.element else None,
            "complete": self.complete,
            "effect": self.effect,
            "is_harmony": self.is_harmony,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BranchRelation":
        return cls(
            relation_type=RelationType(data["type"]),
            branches=tuple(data["branches"]),
            positions=tuple(Position(p) for p in data["positions"]),
            effect=data["effect"],
            element=Element(data["element"]) if data.get("element") else None,
            complete=data.get("complete", True),
        )


@dataclass(frozen=True)
class HapchungAnalysis:
    relations: tuple
    harmony_score: int
    summary: str
    advice: tuple

    @property
    def harmonies(self) -> tuple:
        return tuple(r for r in self.relations if r.is_harmony)

    @property
    def conflicts(self) -> tuple:
        return tuple(r for r in self.relations if not r.is_harmony)

    @property
    def level(self) -> HarmonyLevel:
        return harmony_level(self.harmony_score)

    def to_dict(self) -> dict:
        return {
            "relations": [r.to_dict() for r in self.relations],
            "harmony_count": len(self.harmonies),
            "conflict_count": len(self.conflicts),
            "harmony_score": self.harmony_score,
            "level": self.level.value,
            "level_label": self.level.label,
            "summary": self.summary,
            "advice": list(self.advice),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HapchungAnalysis":
        return cls(relations=tuple(BranchRelation.from_dict(r) for r in data["relations"]),
                   harmony_score=data["harmony_score"], summary=data["summary"],
                   advice=tuple(data["advice"]))


EMPTY_HAPCHUNG = HapchungAnalysis(relations=(), harmony_score=SCORE_BASE, summary="", advice=())


def harmony_level(score: int) -> HarmonyLevel:
    if score >= 70:
        return HarmonyLevel.HARMONIOUS
    if score >= 50:
        return HarmonyLevel.BALANCED
    return HarmonyLevel.TURBULENT


def clash_meaning(p1: Position, p2: Position) -> str:
    pair = {p1, p2}
    if pair == {Position.YEAR, Position.MONTH}:
        return "changes in early life; take care with parents"
    if pair == {Position.MONTH, Position.DAY}:
        return "change and friction at work and in society"
    if pair == {Position.DAY, Position.HOUR}:
        return "changes at home; take care with spouse and children"
    if pair == {Position.YEAR, Position.DAY}:
        return "inner conflict over identity and life direction"
    return "much change and movement"


def _positions_of(entries: list, members) -> tuple:
    return tuple(pos for pos, b in entries if b in members)


def _pairwise(entries: list, relation_type: RelationType, check, describe) -> list:
    found = []
    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            (p1, b1), (p2, b2) = entries[i], entries[j]
            if check(b1, b2):
                found.append(BranchRelation(relation_type, (b1, b2), (p1, p2),
                                            describe(p1, b1, p2, b2)))
    return found


def find_relations(chart: FourPillarsChart) -> list:
    """Every branch relation in the chart, harmonies first."""
    entries = [(p.position, p.branch.hanja) for p in chart.pillars]
    present = [b for _, b in entries]
    relations = []

    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            (p1, b1), (p2, b2) = entries[i], entries[j]
            element = SIX_COMBINATIONS.get(frozenset((b1, b2)))
            if element is not None and b1 != b2:
                relations.append(BranchRelation(
                    RelationType.SIX_COMBINATION, (b1, b2), (p1, p2),
                    f"{b1}{b2} combine into {element.label} energy", element))

    for group, element in TRIAD_GROUPS:
        members = tuple(b for b in group if b in present)
        if len(members) >= 2:
            complete = len(members) == 3
            kind = "full triad strengthens" if complete else "half triad partly forms"
            relations.append(BranchRelation(
                RelationType.TRIAD, members, _positions_of(entries, members),
                f"{''.join(members)} {kind} {element.label}", element, complete))

    for group, element, direction in DIRECTIONAL_GROUPS:
        members = tuple(b for b in group if b in present)
        if len(members) >= 2:
            relations.append(BranchRelation(
                RelationType.DIRECTIONAL, members, _positions_of(entries, members),
                f"{direction} {element.label} directional set gathers strength",
                element, len(members) == 3))

    relations += _pairwise(
        entries, RelationType.CLASH, is_clash,
        lambda p1, b1, p2, b2: f"{b1}{b2} clash: {clash_meaning(p1, p2)}")

    for group, name, meaning in PUNISHMENT_GROUPS:
        members = tuple(b for b in group if b in present)
        if len(members) >= 2:
            relations.append(BranchRelation(
                RelationType.PUNISHMENT, members, _positions_of(entries, members),
                f"{''.join(members)} {name}: {meaning}"))
    for b in SELF_PUNISHMENT:
        if present.count(b) >= 2:
            relations.append(BranchRelation(
                RelationType.PUNISHMENT, (b, b), _positions_of(entries, b),
                f"{b}{b} 자형: self-punishment, harm done to oneself"))

    relations += _pairwise(
        entries, RelationType.DESTRUCTION, is_destruction,
        lambda p1, b1, p2, b2: f"{b1}{b2} destruction: energy that breaks and scatters")
    relations += _pairwise(
        entries, RelationType.HARM, is_harm,
        lambda p1, b1, p2, b2: f"{b1}{b2} harm: a relationship of mutual hindrance")
    return relations


def harmony_score(relations) -> int:
    score = SCORE_BASE + sum(r.score for r in relations)
    return max(0, min(100, score))


def analyze_hapchung(chart: FourPillarsChart) -> HapchungAnalysis:
    """
    Analyze combinations and conflicts among the four branches.

    Returns:
        HapchungAnalysis with the relations, a 0-100 harmony score,
        a summary and advice
    """
    relations = find_relations(chart)
    score = harmony_score(relations)
    return HapchungAnalysis(
        relations=tuple(relations),
        harmony_score=score,
        summary=_summary(relations, score),
        advice=tuple(_advice(relations)),
    )


_LEVEL_TEXT = {
    HarmonyLevel.HARMONIOUS: "The branches of this chart sit together in good harmony.",
    HarmonyLevel.BALANCED: "The branches of this chart hold a reasonable balance.",
    HarmonyLevel.TURBULENT: "Conflicts between the branches bring a lot of change.",
}


def _type_names(relations) -> str:
    seen = []
    for r in relations:
        if r.relation_type not in seen:
            seen.append(r.relation_type)
    return ", ".join(t.label for t in seen)


def _summary(relations: list, score: int) -> str:
    harmonies = [r for r in relations if r.is_harmony]
    conflicts = [r for r in relations if not r.is_harmony]
    parts = [_LEVEL_TEXT[harmony_level(score)]]
    if harmonies:
        parts.append(f"{_type_names(harmonies)} bring(s) supportive people and stability.")
    if conflicts:
        parts.append(f"{_type_names(conflicts)} point(s) to change and challenge.")
    elif not harmonies:
        parts.append("No notable combinations or clashes; an even flow.")
    return " ".join(parts)


def _advice(relations: list) -> list:
    harmonies = [r for r in relations if r.is_harmony]
    conflicts = [r for r in relations if not r.is_harmony]
    advice = []

    for r in harmonies:
        joined = "".join(r.branches)
        if r.relation_type is RelationType.TRIAD and r.complete:
            advice.append(f"{r.element.label} triad: expect real results in work tied to this element.")
        elif r.relation_type is RelationType.SIX_COMBINATION:
            positions = "-".join(p.value for p in r.positions)
            advice.append(f"{joined} combination: a good bond between {positions}.")

    for r in conflicts:
        joined = "".join(r.branches)
        if r.relation_type is RelationType.CLASH:
            positions = "-".join(p.value for p in r.positions)
            advice.append(f"{joined} clash: work on resolving tension in the {positions} relationship.")
        elif r.relation_type is RelationType.PUNISHMENT:
            advice.append(f"{joined} punishment: govern yourself and build patience.")
        elif r.relation_type is RelationType.HARM:
            advice.append(f"{joined} harm: keep misunderstandings out of close relationships.")

    if len(conflicts) > len(harmonies):
        advice.append("Stay centred through change and avoid hasty decisions.")
    elif len(harmonies) > len(conflicts):
        advice.append("Make good use of the connections and chances that come your way.")
    return advice


# ============================================================
# TIMING
# ============================================================

# Month 1 is the 寅 month
MONTH_BRANCHES = "寅卯辰巳午未申酉戌亥子丑"

RISK_POINTS = {
    RelationType.CLASH: 30,
    RelationType.PUNISHMENT: 20,
    RelationType.DESTRUCTION: 15,
    RelationType.HARM: 15,
}
OPPORTUNITY_POINTS = {RelationType.SIX_COMBINATION: 25, RelationType.TRIAD: 20}

RISK_TIPS = [
    "Misunderstandings come easily; communicate clearly.",
    "Read contracts carefully before signing.",
    "Put promises in writing rather than relying on words.",
    "Keep clear boundaries, especially with close friends.",
    "Take plenty of time before any sudden decision.",
    "Ease off perfectionism and give yourself some slack.",
]
OPPORTUNITY_TIPS = [
    "Be open to new people.",
    "A good time to form partnerships.",
    "Step up your networking.",
    "Schedule important contracts and appointments for this period.",
]
CAUTION_WINDOWS = ("early (days 1-10)", "mid (days 11-20)")
CAUTION_REASON = "Unstable energy from branch conflicts"
CAUTION_TIP = "Avoid signing important contracts in this window and review investments carefully."


@dataclass(frozen=True)
class MonthTiming:
    month: int  # 1..12, month 1 = 寅
    branch: str
    score: int
    reasons: tuple
    tip: str
    level: Optional[str] = None  # risk months only: high / medium / low

    def to_dict(self) -> dict:
        data = {"month": self.month, "branch": self.branch, "score": self.score,
                "reasons": list(self.reasons), "tip": self.tip}
        if self.level is not None:
            data["level"] = self.level
        return data


@dataclass(frozen=True)
class CautionPeriod:
    """Contract and investment caution window inside a risk month."""
    rank: int  # 0 when nothing needs caution
    month: Optional[int]
    period: str
    level: str
    reason: str
    tip: str

    def to_dict(self) -> dict:
        return {"rank": self.rank, "month": self.month, "period": self.period,
                "level": self.level, "reason": self.reason, "tip": self.tip}


NO_CAUTION = CautionPeriod(0, None, "No particular caution period", "low",
                           "Stable overall", "Proceed as planned.")


def caution_periods(risk_months) -> tuple:
    """Early-month window for the worst risk month, mid-month for the second."""
    periods = tuple(
        CautionPeriod(rank, m.month, f"Month {m.month} ({m.branch}), {window}",
                      m.level, CAUTION_REASON, CAUTION_TIP)
        for rank, (m, window) in enumerate(zip(risk_months, CAUTION_WINDOWS), start=1)
    )
    return periods or (NO_CAUTION,)


@dataclass(frozen=True)
class RiskTiming:
    risk_months: tuple
    opportunity_months: tuple
    caution_periods: tuple = (NO_CAUTION,)

    def to_dict(self) -> dict:
        return {"risk_months": [m.to_dict() for m in self.risk_months],
                "opportunity_months": [m.to_dict() for m in self.opportunity_months],
                "caution_periods": [p.to_dict() for p in self.caution_periods]}


def _risk_level(score: int) -> str:
    if score >= 40:
        return "high"
    if score >= 20:
        return "medium"
    return "low"


def monthly_risk_timing(chart: FourPillarsChart) -> RiskTiming:
    """
    Score each of the 12 month branches against the natal branches.

    Returns the two riskiest months, the three best opportunity months
    and the contract caution windows derived from the risk months; ties
    keep calendar order. Tips depend only on the month.
    """
    natal = [(p.position, p.branch.hanja) for p in chart.pillars]
    present = {b for _, b in natal}
    risks, opportunities = [], []

    for i, month_branch in enumerate(MONTH_BRANCHES):
        month = i + 1
        risk, risk_reasons = 0, []
        opportunity, opportunity_reasons = 0, []

        for position, b in natal:
            for relation_type, check in _PAIR_CHECKS:
                if relation_type in RISK_POINTS and check(b, month_branch):
                    risk += RISK_POINTS[relation_type]
                    risk_reasons.append(f"{relation_type.label} with the {position.value} branch")
            if is_six_combination(b, month_branch):
                opportunity += OPPORTUNITY_POINTS[RelationType.SIX_COMBINATION]
                opportunity_reasons.append(f"{RelationType.SIX_COMBINATION.label} with the "
                                           f"{position.value} branch")

        for group, element in TRIAD_GROUPS:
            if month_branch not in group:
                continue
            if sum(1 for b in group if b in present or b == month_branch) >= 2:
                opportunity += OPPORTUNITY_POINTS[RelationType.TRIAD]
                opportunity_reasons.append(f"{RelationType.TRIAD.label} forms {element.label}")

        if risk:
            risks.append(MonthTiming(month, month_branch, risk, tuple(risk_reasons),
                                     RISK_TIPS[i % len(RISK_TIPS)], _risk_level(risk)))
        if opportunity:
            opportunities.append(MonthTiming(month, month_branch, opportunity,
                                             tuple(opportunity_reasons),
                                             OPPORTUNITY_TIPS[i % len(OPPORTUNITY_TIPS)]))

    risks.sort(key=lambda m: -m.score)
    opportunities.sort(key=lambda m: -m.score)
    top_risks = tuple(risks[:2])
    return RiskTiming(risk_months=top_risks, opportunity_months=tuple(opportunities[:3]),
                      caution_periods=caution_periods(top_risks))


@dataclass(frozen=True)
class AnnualInteractions:
    year: int
    pillar_label: str
    branch: str
    relations: tuple  # ((Position, RelationType), ...)

    @property
    def score(self) -> int:
        return harmony_score(
            BranchRelation(t, (), (), "") for _, t in self.relations
            if (t, True) in SCORE_ADJUSTMENTS
        )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "pillar": self.pillar_label,
            "branch": self.branch,
            "relations": [{"position": p.value, "type": t.value, "label": t.label}
                          for p, t in self.relations],
            "score": self.score,
        }


def annual_interactions(chart: FourPillarsChart, year: int) -> AnnualInteractions:
    """Relations between a calendar year's branch (세운) and each natal branch."""
    pillar = annual_pillar(year)
    found = []
    for natal in chart.pillars:
        relation_type = branch_relation(pillar.branch, natal.branch)
        if relation_type is not None:
            found.append((natal.position, relation_type))
    return AnnualInteractions(year=year, pillar_label=pillar.label,
                              branch=pillar.branch.hanja, relations=tuple(found))
