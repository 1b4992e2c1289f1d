"""
Ten Gods (십신 十神) relationship mapping.

Handles:
- Classifying any element + polarity against the Day Master
- Per-position classification of the 7 non-Day-Master stems/branches
- 10-type and 5-category distributions, dominant / missing
- Personality, career and advice text from the Ten Gods catalog

Branches are classified by their main-qi element and index-parity
polarity. The Day Master itself is always 비견 and is not counted.
"""

from dataclasses import dataclass
from enum import Enum

from saju.errors import ComputationError
from saju.pillars import FourPillarsChart
from saju.symbols import (
    POSITION_ORDER,
    Element,
    Polarity,
    Position,
    Relation,
    element_relationship,
)


# ============================================================
# TYPES AND CATALOG
# ============================================================

class SipsinCategory(Enum):
    PEER = "peer"            # 비겁: same element
    OUTPUT = "output"        # 식상: Day Master generates
    WEALTH = "wealth"        # 재성: Day Master controls
    AUTHORITY = "authority"  # 관성: controls Day Master
    RESOURCE = "resource"    # 인성: generates Day Master

    @property
    def korean(self) -> str:
        return _CATEGORY_NAMES[self]

    @property
    def label(self) -> str:
        return f"{self.korean}({self.value})"


_CATEGORY_NAMES = {
    SipsinCategory.PEER: "비겁",
    SipsinCategory.OUTPUT: "식상",
    SipsinCategory.WEALTH: "재성",
    SipsinCategory.AUTHORITY: "관성",
    SipsinCategory.RESOURCE: "인성",
}

CATEGORY_ORDER = list(SipsinCategory)


class SipsinType(Enum):
    BIJEON = "bijeon"
    GEOPJAE = "geopjae"
    SIKSIN = "siksin"
    SANGGWAN = "sanggwan"
    JEONGJAE = "jeongjae"
    PYEONJAE = "pyeonjae"
    JEONGGWAN = "jeonggwan"
    PYEONGWAN = "pyeongwan"
    JEONGIN = "jeongin"
    PYEONIN = "pyeonin"

    @property
    def info(self) -> "SipsinInfo":
        return SIPSIN_INFO[self]

    @property
    def category(self) -> SipsinCategory:
        return SIPSIN_INFO[self].category

    @property
    def label(self) -> str:
        info = SIPSIN_INFO[self]
        return f"{info.korean}({info.hanja})"


TYPE_ORDER = list(SipsinType)


@dataclass(frozen=True)
class SipsinInfo:
    korean: str
    hanja: str
    english: str
    meaning: str
    category: SipsinCategory
    personality: str
    strength: str
    weakness: str
    careers: tuple
    relationship: str


SIPSIN_INFO = {
    SipsinType.BIJEON: SipsinInfo(
        "비견", "比肩", "Companion", "standing shoulder to shoulder", SipsinCategory.PEER,
        "Independent and proud, with clear convictions and a stubborn streak.",
        "confidence, independence, leadership, pioneering spirit",
        "stubbornness, self-righteousness, difficulty compromising",
        ("entrepreneur", "freelancer", "self-employed", "founder"),
        "Competition and cooperation with siblings, friends and colleagues."),
    SipsinType.GEOPJAE: SipsinInfo(
        "겁재", "劫財", "Rob Wealth", "seizing wealth", SipsinCategory.PEER,
        "Ambitious and competitive, with drive and a bias for action.",
        "drive, competitiveness, appetite for challenge",
        "greed, recklessness, lack of patience",
        ("sales", "investment", "sports", "high-risk ventures"),
        "Competitive ties with siblings and friends."),
    SipsinType.SIKSIN: SipsinInfo(
        "식신", "食神", "Eating God", "the god who provides food", SipsinCategory.OUTPUT,
        "Gentle and optimistic, with strong creativity and expression.",
        "creativity, expressiveness, optimism, goodwill from others",
        "laziness, complacency, settling for comfort",
        ("artist", "chef", "educator", "service industry"),
        "Good fortune with children and easy-going relationships."),
    SipsinType.SANGGWAN: SipsinInfo(
        "상관", "傷官", "Hurting Officer", "harming the officer", SipsinCategory.OUTPUT,
        "Gifted and critical; creative but rebellious.",
        "talent, originality, eloquence, analysis",
        "rebelliousness, sharp tongue, trouble fitting into organisations",
        ("artist", "critic", "lawyer", "freelancer"),
        "Challenges authority and prefers free relationships."),
    SipsinType.JEONGJAE: SipsinInfo(
        "정재", "正財", "Direct Wealth", "rightful wealth", SipsinCategory.WEALTH,
        "Diligent and realistic, good at saving and managing.",
        "diligence, thrift, practicality, responsibility",
        "timidity, stinginess, aversion to risk",
        ("accountant", "banker", "civil servant", "manager"),
        "A stable household and a supportive spouse."),
    SipsinType.PYEONJAE: SipsinInfo(
        "편재", "偏財", "Indirect Wealth", "windfall wealth", SipsinCategory.WEALTH,
        "Active and sociable, drawn to investment and business.",
        "sociability, business sense, flexibility, action",
        "extravagance, fickleness, instability",
        ("entrepreneur", "investor", "sales", "self-employed"),
        "A wide network and an active social life."),
    SipsinType.JEONGGWAN: SipsinInfo(
        "정관", "正官", "Direct Officer", "rightful office", SipsinCategory.AUTHORITY,
        "Responsible and rule-abiding; values social standing.",
        "responsibility, reliability, organisation, sense of honour",
        "rigidity, authoritarianism, inflexibility",
        ("civil servant", "manager", "legal professional", "large corporation"),
        "A stable marriage and an honoured position."),
    SipsinType.PYEONGWAN: SipsinInfo(
        "편관", "偏官", "Seven Killings", "irregular office", SipsinCategory.AUTHORITY,
        "Decisive and tough; shines in a crisis.",
        "decisiveness, drive, crisis management, leadership",
        "domineering, aggressive, prone to stress",
        ("military", "police", "surgeon", "crisis management"),
        "Challenging relationships and a strong-willed partner."),
    SipsinType.JEONGIN: SipsinInfo(
        "정인", "正印", "Direct Resource", "rightful seal", SipsinCategory.RESOURCE,
        "Loves learning and is wise; close bond with the mother.",
        "scholarship, wisdom, kindness, consideration",
        "indecision, dependence, weak follow-through",
        ("professor", "researcher", "teacher", "clergy"),
        "Blessed by the mother and by mentors."),
    SipsinType.PYEONIN: SipsinInfo(
        "편인", "偏印", "Indirect Resource", "irregular seal", SipsinCategory.RESOURCE,
        "Intuitive and inventive, with an unusual way of thinking.",
        "intuition, creativity, spirituality, originality",
        "solitude, isolation, impracticality",
        ("artist", "philosopher", "researcher", "clergy"),
        "Unusual connections and unexpected help."),
}

# (relation, same_polarity) -> type
_CLASSIFICATION = {
    (Relation.SAME, True): SipsinType.BIJEON,
    (Relation.SAME, False): SipsinType.GEOPJAE,
    (Relation.I_GENERATE, True): SipsinType.SIKSIN,
    (Relation.I_GENERATE, False): SipsinType.SANGGWAN,
    (Relation.I_CONTROL, True): SipsinType.PYEONJAE,
    (Relation.I_CONTROL, False): SipsinType.JEONGJAE,
    (Relation.CONTROLS_ME, True): SipsinType.PYEONGWAN,
    (Relation.CONTROLS_ME, False): SipsinType.JEONGGWAN,
    (Relation.GENERATES_ME, True): SipsinType.PYEONIN,
    (Relation.GENERATES_ME, False): SipsinType.JEONGIN,
}


def classify(dm_element: Element, dm_polarity: Polarity,
             element: Element, polarity: Polarity) -> SipsinType:
    """Ten God of an element/polarity seen from the Day Master."""
    relation = element_relationship(dm_element, element)
    return _CLASSIFICATION[(relation, dm_polarity == polarity)]


# ============================================================
# CHART ANALYSIS
# ============================================================

@dataclass(frozen=True)
class SipsinClassification:
    position: Position
    part: str  # "stem" or "branch"
    symbol: str  # hanja of the stem/branch
    sipsin: SipsinType
    estimated: bool = False

    def to_dict(self) -> dict:
        return {
            "position": self.position.value,
            "part": self.part,
            "symbol": self.symbol,
            "sipsin": self.sipsin.value,
            "label": self.sipsin.label,
            "category": self.sipsin.category.value,
            "category_label": self.sipsin.category.label,
            "estimated": self.estimated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SipsinClassification":
        return cls(position=Position(data["position"]), part=data["part"],
                   symbol=data["symbol"], sipsin=SipsinType(data["sipsin"]),
                   estimated=data.get("estimated", False))


@dataclass(frozen=True)
class SipsinAnalysis:
    classifications: tuple  # 7 SipsinClassification, stems then branches
    distribution: tuple  # ((SipsinType, int), ...) in type order
    category_distribution: tuple  # ((SipsinCategory, int), ...) in category order
    dominant_category: SipsinCategory
    missing_categories: tuple
    dominant_types: tuple  # count >= 2
    missing_types: tuple  # count == 0
    balance: str
    personality: str
    career: str
    advice: str
    day_master_sipsin: SipsinType = SipsinType.BIJEON

    def count(self, sipsin: SipsinType) -> int:
        return dict(self.distribution)[sipsin]

    def category_count(self, category: SipsinCategory) -> int:
        return dict(self.category_distribution)[category]

    def to_dict(self) -> dict:
        return {
            "day_master": self.day_master_sipsin.value,
            "classifications": [c.to_dict() for c in self.classifications],
            "distribution": {t.value: n for t, n in self.distribution},
            "category_distribution": {c.value: n for c, n in self.category_distribution},
            "dominant_category": self.dominant_category.value,
            "dominant_category_label": self.dominant_category.label,
            "missing_categories": [c.value for c in self.missing_categories],
            "dominant_types": [t.value for t in self.dominant_types],
            "missing_types": [t.value for t in self.missing_types],
            "balance": self.balance,
            "personality": self.personality,
            "career": self.career,
            "advice": self.advice,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SipsinAnalysis":
        return cls(
            classifications=tuple(SipsinClassification.from_dict(c)
                                  for c in data["classifications"]),
            distribution=tuple((t, data["distribution"][t.value]) for t in TYPE_ORDER),
            category_distribution=tuple((c, data["category_distribution"][c.value])
                                        for c in CATEGORY_ORDER),
            dominant_category=SipsinCategory(data["dominant_category"]),
            missing_categories=tuple(SipsinCategory(c) for c in data["missing_categories"]),
            dominant_types=tuple(SipsinType(t) for t in data["dominant_types"]),
            missing_types=tuple(SipsinType(t) for t in data["missing_types"]),
            balance=data["balance"],
            personality=data["personality"],
            career=data["career"],
            advice=data["advice"],
        )


_BALANCE_TEXT = {
    SipsinCategory.PEER: "Peers (비겁) are excessive: strong independence, but cooperation may be hard.",
    SipsinCategory.OUTPUT: "Output (식상) is excessive: expressive, but may undermine authority.",
    SipsinCategory.WEALTH: "Wealth (재성) is excessive: prone to fixating on money.",
    SipsinCategory.AUTHORITY: "Authority (관성) is excessive: expect stress and pressure.",
    SipsinCategory.RESOURCE: "Resource (인성) is excessive: many thoughts, weak follow-through.",
}


def analyze_sipsin(chart: FourPillarsChart) -> SipsinAnalysis:
    """
    Map the Ten Gods for every position except the Day Master.

    Positions: year/month/hour stems, then all four branches.
    """
    dm = chart.day_master
    if chart.pillar(Position.DAY).stem != dm:
        raise ComputationError("Day Master does not match the day pillar", chart.context())

    entries = []
    for position in POSITION_ORDER:
        if position is Position.DAY:
            continue
        s = chart.pillar(position).stem
        entries.append(SipsinClassification(
            position, "stem", s.hanja,
            classify(dm.element, dm.polarity, s.element, s.polarity),
            estimated=chart.hour_estimated and position is Position.HOUR,
        ))
    for position in POSITION_ORDER:
        b = chart.pillar(position).branch
        entries.append(SipsinClassification(
            position, "branch", b.hanja,
            classify(dm.element, dm.polarity, b.element, b.polarity),
            estimated=chart.hour_estimated and position is Position.HOUR,
        ))

    counts = {t: 0 for t in TYPE_ORDER}
    for entry in entries:
        counts[entry.sipsin] += 1

    categories = {c: 0 for c in CATEGORY_ORDER}
    for t, n in counts.items():
        categories[t.category] += n

    # Ties resolve to the first category in peer → resource order.
    top = max(categories.values())
    dominant_category = next(c for c in CATEGORY_ORDER if categories[c] == top)

    dominant_types = tuple(t for t in TYPE_ORDER if counts[t] >= 2)
    missing_types = tuple(t for t in TYPE_ORDER if counts[t] == 0)

    return SipsinAnalysis(
        classifications=tuple(entries),
        distribution=tuple((t, counts[t]) for t in TYPE_ORDER),
        category_distribution=tuple((c, categories[c]) for c in CATEGORY_ORDER),
        dominant_category=dominant_category,
        missing_categories=tuple(c for c in CATEGORY_ORDER if categories[c] == 0),
        dominant_types=dominant_types,
        missing_types=missing_types,
        balance=_balance_text(categories),
        personality=_personality_text(dominant_types),
        career=_career_text(dominant_types),
        advice=_advice_text(dominant_types, missing_types),
    )


def _balance_text(categories: dict) -> str:
    for category in CATEGORY_ORDER:
        if categories[category] > 3:
            return _BALANCE_TEXT[category]
    return "Overall a well-balanced arrangement."


def _personality_text(dominant_types: tuple) -> str:
    if not dominant_types:
        return "The Ten Gods are spread evenly, giving a flexible personality."
    info = dominant_types[0].info
    return f"Strong {info.korean} ({info.english}) energy. {info.personality}"


def _career_text(dominant_types: tuple) -> str:
    careers = []
    for t in dominant_types:
        for career in t.info.careers:
            if career not in careers:
                careers.append(career)
    if not careers:
        return "Able to perform across many different fields."
    return "Suggested careers: " + ", ".join(careers[:4])


def _advice_text(dominant_types: tuple, missing_types: tuple) -> str:
    if missing_types:
        info = missing_types[0].info
        return f"{info.korean} ({info.english}) is absent; cultivating {info.strength} will help."
    if dominant_types:
        return f"Watch for {dominant_types[0].info.weakness} from the excess energy."
    return "A balanced chart; build on your natural strengths."
