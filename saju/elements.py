"""
Five Element (오행) balance analysis.

Handles:
- Unweighted element count over the 8 stems + branches (always sums to 8)
- Dominant / deficient element with fixed tie-breaks
- Yongsin (용신), the useful element: the deficient one
- Optional hidden-stem weighted distribution (kept separate from the count)
- Day Master strength with favourable / unfavourable elements and
  lucky colours, directions, numbers and hours

Counting rule used everywhere: each stem counts 1 for its element and
each branch counts 1 for its main-qi element. Hidden stems never enter
the 8-count.
"""

from dataclasses import dataclass
from enum import Enum

from saju.pillars import FourPillarsChart
from saju.symbols import (
    CONTROLLED_BY,
    CONTROLS,
    ELEMENT_ORDER,
    GENERATED_BY,
    GENERATES,
    Element,
    stem,
)


# ============================================================
# ELEMENT COUNT
# ============================================================

@dataclass(frozen=True)
class ElementBalance:
    counts: tuple  # ((Element, int), ...) in canonical element order
    dominant: Element
    deficient: Element
    day_master_element: Element

    @property
    def yongsin(self) -> Element:
        return self.deficient

    def count(self, element: Element) -> int:
        return dict(self.counts)[element]

    @property
    def total(self) -> int:
        return sum(n for _, n in self.counts)

    def to_dict(self) -> dict:
        return {
            "counts": {e.value: n for e, n in self.counts},
            "labels": {e.value: e.label for e, _ in self.counts},
            "total": self.total,
            "dominant": self.dominant.value,
            "dominant_label": self.dominant.label,
            "deficient": self.deficient.value,
            "deficient_label": self.deficient.label,
            "yongsin": self.yongsin.value,
            "yongsin_label": self.yongsin.label,
            "day_master_element": self.day_master_element.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ElementBalance":
        counts = tuple((e, int(data["counts"][e.value])) for e in ELEMENT_ORDER)
        return cls(
            counts=counts,
            dominant=Element(data["dominant"]),
            deficient=Element(data["deficient"]),
            day_master_element=Element(data["day_master_element"]),
        )


def count_elements(chart: FourPillarsChart) -> dict:
    """Element -> count over the 4 stems and 4 branches."""
    counts = {e: 0 for e in ELEMENT_ORDER}
    for pillar in chart.pillars:
        counts[pillar.stem.element] += 1
        counts[pillar.branch.element] += 1
    return counts


def pick_dominant(counts: dict, day_master_element: Element) -> Element:
    """Max count; the Day Master's element wins a tie, else canonical order."""
    top = max(counts.values())
    if counts[day_master_element] == top:
        return day_master_element
    return next(e for e in ELEMENT_ORDER if counts[e] == top)


def pick_deficient(counts: dict) -> Element:
    """Min count; ties resolve to the first element in canonical order."""
    low = min(counts.values())
    return next(e for e in ELEMENT_ORDER if counts[e] == low)


def analyze_elements(chart: FourPillarsChart) -> ElementBalance:
    """Compute the element balance of a chart."""
    counts = count_elements(chart)
    dm_element = chart.day_master.element
    return ElementBalance(
        counts=tuple((e, counts[e]) for e in ELEMENT_ORDER),
        dominant=pick_dominant(counts, dm_element),
        deficient=pick_deficient(counts),
        day_master_element=dm_element,
    )


# ============================================================
# HIDDEN STEM DISTRIBUTION (optional extension)
# ============================================================

# Stem, branch main qi, middle qi, residual qi
HIDDEN_STEM_WEIGHTS = (1.0, 0.7, 0.2, 0.1)


def hidden_stem_distribution(chart: FourPillarsChart) -> dict:
    """
    Weighted element presence including hidden stems.

    Returns element value -> weight rounded to 1 decimal. This is an
    extension for narrative use; the balance above never reads it.
    """
    stem_w, main_w, middle_w, residual_w = HIDDEN_STEM_WEIGHTS
    distribution = {e: 0.0 for e in ELEMENT_ORDER}

    for pillar in chart.pillars:
        distribution[pillar.stem.element] += stem_w
        distribution[pillar.branch.element] += main_w
        hidden = pillar.branch.hidden_stems
        if len(hidden) > 1:
            distribution[stem(hidden[1]).element] += middle_w
        if len(hidden) > 2:
            distribution[stem(hidden[2]).element] += residual_w

    return {e.value: round(w, 1) for e, w in distribution.items()}


# ============================================================
# DAY MASTER STRENGTH
# ============================================================

class Strength(Enum):
    STRONG = "strong"
    WEAK = "weak"
    BALANCED = "balanced"

    @property
    def label(self) -> str:
        return {"strong": "신강(身强)", "weak": "신약(身弱)", "balanced": "중화(中和)"}[self.value]


LUCKY_COLORS = {
    Element.WOOD: ["green", "teal", "light green"],
    Element.FIRE: ["red", "orange", "purple", "pink"],
    Element.EARTH: ["yellow", "beige", "brown", "khaki"],
    Element.METAL: ["white", "silver", "gold", "gray"],
    Element.WATER: ["black", "blue", "navy"],
}

LUCKY_DIRECTIONS = {
    Element.WOOD: "east",
    Element.FIRE: "south",
    Element.EARTH: "center / northeast / southwest",
    Element.METAL: "west",
    Element.WATER: "north",
}

LUCKY_NUMBERS = {
    Element.WOOD: [3, 8],
    Element.FIRE: [2, 7],
    Element.EARTH: [5, 10],
    Element.METAL: [4, 9],
    Element.WATER: [1, 6],
}

LUCKY_HOURS = {
    Element.WOOD: "05:00-07:00",
    Element.FIRE: "11:00-13:00",
    Element.EARTH: "13:00-15:00, 19:00-21:00",
    Element.METAL: "17:00-19:00",
    Element.WATER: "21:00-23:00",
}


@dataclass(frozen=True)
class DayMasterStrength:
    strength: Strength
    support: float
    drain: float
    favorable: tuple  # Elements, most useful first
    unfavorable: tuple

    def to_dict(self) -> dict:
        return {
            "strength": self.strength.value,
            "strength_label": self.strength.label,
            "support": round(self.support, 2),
            "drain": round(self.drain, 2),
            "favorable": [e.value for e in self.favorable],
            "unfavorable": [e.value for e in self.unfavorable],
            "lucky_colors": [c for e in self.favorable for c in LUCKY_COLORS[e]],
            "lucky_directions": [LUCKY_DIRECTIONS[e] for e in self.favorable],
            "lucky_numbers": sorted({n for e in self.favorable for n in LUCKY_NUMBERS[e]}),
            "lucky_hours": [LUCKY_HOURS[e] for e in self.favorable],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DayMasterStrength":
        return cls(
            strength=Strength(data["strength"]),
            support=data["support"],
            drain=data["drain"],
            favorable=tuple(Element(e) for e in data["favorable"]),
            unfavorable=tuple(Element(e) for e in data["unfavorable"]),
        )


def analyze_strength(chart: FourPillarsChart, balance: ElementBalance) -> DayMasterStrength:
    """
    Judge whether the Day Master is strong, weak or balanced.

    support = own element + resource element * 0.7, plus 1.5 when the
    month branch is the own or resource element (seasonal command).
    drain = controlling element + output element * 0.5.
    """
    dm = balance.day_master_element
    counts = dict(balance.counts)

    resource = GENERATED_BY[dm]
    support = counts[dm] + counts[resource] * 0.7
    if chart.month.branch.element in (dm, resource):
        support += 1.5
    drain = counts[CONTROLLED_BY[dm]] + counts[GENERATES[dm]] * 0.5

    if support > drain * 1.3:
        strength = Strength.STRONG
        favorable = (GENERATES[dm], CONTROLLED_BY[dm])
        unfavorable = (dm, resource)
    elif support < drain * 0.7:
        strength = Strength.WEAK
        favorable = (dm, resource)
        unfavorable = (CONTROLLED_BY[dm], CONTROLS[dm])
    else:
        strength = Strength.BALANCED
        scarce = [e for e in ELEMENT_ORDER if counts[e] <= 1]
        favorable = tuple(scarce[:2]) if scarce else (GENERATES[dm],)
        unfavorable = tuple(e for e in ELEMENT_ORDER if counts[e] >= 3)

    return DayMasterStrength(strength=strength, support=support, drain=drain,
                             favorable=favorable, unfavorable=unfavorable)
