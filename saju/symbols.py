"""
Fundamental symbols of the sexagenary system.

Handles:
- Five Elements, polarity and pillar position enums
- The 10 Heavenly Stems and 12 Earthly Branches (with hidden stems)
- Generation / control cycles shared by every analysis module
- Sexagenary (60-cycle) index arithmetic

Everything here is an immutable table. Analysis modules import these
instead of keeping private copies, so all of them agree on one cycle.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ============================================================
# ENUMS
# ============================================================

class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def korean(self) -> str:
        return _ELEMENT_NAMES[self][0]

    @property
    def hanja(self) -> str:
        return _ELEMENT_NAMES[self][1]

    @property
    def label(self) -> str:
        """Short display label, e.g. '목(木)'."""
        return f"{self.korean}({self.hanja})"

    @property
    def ordinal(self) -> int:
        return ELEMENT_ORDER.index(self)


_ELEMENT_NAMES = {
    Element.WOOD: ("목", "木"),
    Element.FIRE: ("화", "火"),
    Element.EARTH: ("토", "土"),
    Element.METAL: ("금", "金"),
    Element.WATER: ("수", "水"),
}

# Canonical order, used for every deterministic tie-break on elements.
ELEMENT_ORDER = [Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER]


class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"

    @property
    def label(self) -> str:
        return "양(陽)" if self is Polarity.YANG else "음(陰)"


class Position(Enum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"

    @property
    def korean(self) -> str:
        return _POSITION_NAMES[self]

    @property
    def label(self) -> str:
        return f"{self.korean}({self.value})"


_POSITION_NAMES = {
    Position.YEAR: "년주",
    Position.MONTH: "월주",
    Position.DAY: "일주",
    Position.HOUR: "시주",
}

POSITION_ORDER = [Position.YEAR, Position.MONTH, Position.DAY, Position.HOUR]


class Relation(Enum):
    """Elemental relationship of another element, seen from a reference element."""
    SAME = "same"
    I_GENERATE = "i_generate"
    I_CONTROL = "i_control"
    CONTROLS_ME = "controls_me"
    GENERATES_ME = "generates_me"


# ============================================================
# STEMS AND BRANCHES
# ============================================================

@dataclass(frozen=True)
class HeavenlyStem:
    hanja: str
    korean: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    @property
    def label(self) -> str:
        return f"{self.korean}({self.hanja})"

    def __str__(self):
        return f"{self.hanja} ({self.polarity.value} {self.element.value})"

    def to_dict(self) -> dict:
        return {
            "hanja": self.hanja,
            "korean": self.korean,
            "pinyin": self.pinyin,
            "element": self.element.value,
            "element_label": self.element.label,
            "polarity": self.polarity.value,
            "polarity_label": self.polarity.label,
            "index": self.index,
            "label": self.label,
        }


@dataclass(frozen=True)
class EarthlyBranch:
    hanja: str
    korean: str
    pinyin: str
    animal: str
    element: Element  # main qi element
    polarity: Polarity
    index: int  # 0-11 in the cycle
    hidden_stems: tuple  # hanja of hidden stems: (main qi, middle qi, residual qi)

    @property
    def label(self) -> str:
        return f"{self.korean}({self.hanja})"

    def __str__(self):
        return f"{self.hanja} ({self.animal})"

    def to_dict(self) -> dict:
        return {
            "hanja": self.hanja,
            "korean": self.korean,
            "pinyin": self.pinyin,
            "animal": self.animal,
            "element": self.element.value,
            "element_label": self.element.label,
            "polarity": self.polarity.value,
            "polarity_label": self.polarity.label,
            "index": self.index,
            "hidden_stems": list(self.hidden_stems),
            "label": self.label,
        }


HEAVENLY_STEMS = [
    HeavenlyStem("甲", "갑", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "을", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "병", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "정", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "무", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "기", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "경", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "신", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "임", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "계", "Gui", Element.WATER, Polarity.YIN, 9),
]

# Branch polarity follows index parity, so every pillar pairs like with like.
EARTHLY_BRANCHES = [
    EarthlyBranch("子", "자", "Zi", "Rat", Element.WATER, Polarity.YANG, 0, ("癸",)),
    EarthlyBranch("丑", "축", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1, ("己", "癸", "辛")),
    EarthlyBranch("寅", "인", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2, ("甲", "丙", "戊")),
    EarthlyBranch("卯", "묘", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3, ("乙",)),
    EarthlyBranch("辰", "진", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4, ("戊", "乙", "癸")),
    EarthlyBranch("巳", "사", "Si", "Snake", Element.FIRE, Polarity.YIN, 5, ("丙", "庚", "戊")),
    EarthlyBranch("午", "오", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6, ("丁", "己")),
    EarthlyBranch("未", "미", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7, ("己", "丁", "乙")),
    EarthlyBranch("申", "신", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8, ("庚", "壬", "戊")),
    EarthlyBranch("酉", "유", "You", "Rooster", Element.METAL, Polarity.YIN, 9, ("辛",)),
    EarthlyBranch("戌", "술", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10, ("戊", "辛", "丁")),
    EarthlyBranch("亥", "해", "Hai", "Pig", Element.WATER, Polarity.YIN, 11, ("壬", "甲")),
]

# Lookup helpers
STEM_BY_HANJA = {s.hanja: s for s in HEAVENLY_STEMS}
BRANCH_BY_HANJA = {b.hanja: b for b in EARTHLY_BRANCHES}


def stem(key) -> HeavenlyStem:
    """Look up a stem by index or hanja."""
    if isinstance(key, int):
        return HEAVENLY_STEMS[key % 10]
    return STEM_BY_HANJA[key]


def branch(key) -> EarthlyBranch:
    """Look up a branch by index or hanja."""
    if isinstance(key, int):
        return EARTHLY_BRANCHES[key % 12]
    return BRANCH_BY_HANJA[key]


# ============================================================
# FIVE ELEMENT CYCLES
# ============================================================

# Generation: Wood → Fire → Earth → Metal → Water → Wood
GENERATES = {
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
}

# Control: each element controls the element two steps ahead in generation
CONTROLS = {
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
}

GENERATED_BY = {child: parent for parent, child in GENERATES.items()}
CONTROLLED_BY = {target: source for source, target in CONTROLS.items()}


def element_relationship(reference: Element, other: Element) -> Relation:
    """Determine how `other` relates to `reference` in the five-element cycles."""
    if reference == other:
        return Relation.SAME
    if GENERATES[reference] == other:
        return Relation.I_GENERATE
    if CONTROLS[reference] == other:
        return Relation.I_CONTROL
    if CONTROLS[other] == reference:
        return Relation.CONTROLS_ME
    if GENERATES[other] == reference:
        return Relation.GENERATES_ME
    # Five elements with two cycles cover every ordered pair.
    raise ValueError(f"No relationship between {reference} and {other}")


# ============================================================
# SEXAGENARY ARITHMETIC
# ============================================================

def sexagenary_index(stem_index: int, branch_index: int) -> Optional[int]:
    """
    Position (0 = 甲子) of a stem/branch pair in the 60 cycle.

    Returns None when the parities differ, since such a pair never occurs.
    """
    if stem_index % 2 != branch_index % 2:
        return None
    return (6 * stem_index - 5 * branch_index) % 60


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positive scores (round() is banker's rounding)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
