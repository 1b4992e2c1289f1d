"""
Twelve life-stage (12운성 十二運星) mapping.

The Day Master's energy at each branch follows a 12-step birth-to-rebirth
cycle. Yang stems walk the branches forward from their birth branch,
yin stems walk backward.
"""

from dataclasses import dataclass
from enum import Enum

from saju.pillars import FourPillarsChart
from saju.symbols import (
    EarthlyBranch,
    HeavenlyStem,
    Polarity,
    Position,
    branch,
    round_half_up,
    stem,
)


class StageCategory(Enum):
    GROWTH = "growth"
    PEAK = "peak"
    DECLINE = "decline"
    REST = "rest"

    @property
    def label(self) -> str:
        return {"growth": "성장기", "peak": "전성기", "decline": "쇠퇴기", "rest": "휴식기"}[self.value]


# Fixed tie-break order for the dominant category
STAGE_CATEGORY_ORDER = list(StageCategory)


@dataclass(frozen=True)
class StageInfo:
    key: str
    korean: str
    hanja: str
    energy: int
    category: StageCategory
    description: str
    characteristics: tuple
    advice: str

    @property
    def label(self) -> str:
        return f"{self.korean}({self.hanja})"


_G, _P, _D, _R = StageCategory.GROWTH, StageCategory.PEAK, StageCategory.DECLINE, StageCategory.REST

# In cycle order, starting at the birth branch
STAGES = [
    StageInfo("jangsaeng", "장생", "長生", 7, _G, "birth, a fresh start",
              ("enthusiasm for new beginnings", "pure and optimistic",
               "great potential for growth", "adapts well to new surroundings"),
              "A good energy for starting things. Focus on learning and growth."),
    StageInfo("mogyok", "목욕", "沐浴", 5, _G, "bathing, purification",
              ("curious and adventurous", "prone to mood swings",
               "seeks change", "keen interest in romance"),
              "Mind your emotions and avoid impulsive decisions."),
    StageInfo("gwandae", "관대", "冠帶", 8, _G, "donning cap and belt, coming of age",
              ("values pride and honour", "attentive to appearance and face",
               "wants social recognition", "shows leadership"),
              "Be confident and take an active part in society."),
    StageInfo("geonrok", "건록", "建祿", 9, _P, "drawing a salary, working life",
              ("steady and diligent", "suited to organisational life",
               "strong sense of responsibility", "practical ability"),
              "Steady effort pays off. Keep your footing."),
    StageInfo("jewang", "제왕", "帝旺", 10, _P, "becoming king, the prime of life",
              ("energy at its highest", "strong drive and leadership",
               "full of confidence", "high chance of success"),
              "Energy is at its peak and good for big undertakings. Stay humble."),
    StageInfo("soe", "쇠", "衰", 6, _D, "the start of decline",
              ("careful and conservative", "judges from experience",
               "realistic approach", "avoids risk"),
              "Rather than forcing new challenges, hold steady and build wisdom."),
    StageInfo("byeong", "병", "病", 4, _D, "falling ill, weakening",
              ("needs health care", "a time to turn inward",
               "sensitive and delicate", "artistic sensibility"),
              "Look after your health and do not overdo it. Rest is needed."),
    StageInfo("sa", "사", "死", 3, _D, "death, completion",
              ("a phase is ending", "letting go of attachment",
               "tidying up and finishing", "philosophical thinking"),
              "An end is a new beginning. Let go and put things in order."),
    StageInfo("myo", "묘", "墓", 2, _R, "entering the tomb, storage",
              ("a time to store energy", "inner reflection",
               "time for preparation", "favours saving and stockpiling"),
              "Quietly build your strength. The chance will come again."),
    StageInfo("jeol", "절", "絶", 1, _R, "complete extinction",
              ("needs complete rest", "the stage before a new start",
               "free of attachment", "a sense of freedom"),
              "Energy is at its lowest. Rest fully, then recharge."),
    StageInfo("tae", "태", "胎", 3, _R, "conception, new life",
              ("new possibilities sprouting", "forming ideas",
               "making plans", "the start of hope"),
              "Potential is growing though not yet visible. Plan carefully."),
    StageInfo("yang", "양", "養", 5, _R, "being nurtured, preparing to grow",
              ("energy is building", "preparation and learning",
               "needs protection", "potential for growth"),
              "Do not rush; prepare step by step. You will bloom in time."),
]

STAGE_BY_KEY = {s.key: s for s in STAGES}

# Day stem → branch where its cycle begins (장생)
BIRTH_BRANCHES = {
    "甲": "亥", "乙": "午", "丙": "寅", "丁": "酉", "戊": "寅",
    "己": "酉", "庚": "巳", "辛": "子", "壬": "申", "癸": "卯",
}

PILLAR_MEANINGS = {
    Position.YEAR: "ancestry and early life",
    Position.MONTH: "parents and youth",
    Position.DAY: "self and spouse",
    Position.HOUR: "children and later life",
}

_ENERGY_TEXT = [
    (7, "Overall the chart is full of vitality."),
    (5, "The energy flows in good balance."),
    (0, "The energy is calm and turned inward."),
]

_CATEGORY_SUMMARY = {
    StageCategory.GROWTH: "Strong growth energy favours new challenges.",
    StageCategory.PEAK: "Peak energy makes great achievements possible.",
    StageCategory.DECLINE: "Seek stability built on experience and wisdom.",
    StageCategory.REST: "A time to strengthen yourself inside and wait for your moment.",
}

_CATEGORY_ADVICE = {
    StageCategory.GROWTH: "A good time to try a new field or start learning.",
    StageCategory.PEAK: "Now is the chance. Move actively toward your goals.",
    StageCategory.DECLINE: "Consolidate experience and mentor others rather than overexpanding.",
    StageCategory.REST: "Do not hurry; cultivate yourself. Chances come to the prepared.",
}


def stage_for(day_stem, earthly_branch) -> StageInfo:
    """
    Life stage of a stem at a branch.

    Args:
        day_stem: HeavenlyStem, hanja or index
        earthly_branch: EarthlyBranch, hanja or index
    """
    s = day_stem if isinstance(day_stem, HeavenlyStem) else stem(day_stem)
    b = earthly_branch if isinstance(earthly_branch, EarthlyBranch) else branch(earthly_branch)
    start = branch(BIRTH_BRANCHES[s.hanja]).index
    if s.polarity is Polarity.YANG:
        step = (b.index - start) % 12
    else:
        step = (start - b.index) % 12
    return STAGES[step]


@dataclass(frozen=True)
class UnsungPosition:
    position: Position
    branch: str
    stage: StageInfo
    estimated: bool = False

    def to_dict(self) -> dict:
        return {
            "position": self.position.value,
            "branch": self.branch,
            "stage": self.stage.key,
            "label": self.stage.label,
            "energy": self.stage.energy,
            "category": self.stage.category.value,
            "category_label": self.stage.category.label,
            "description": self.stage.description,
            "characteristics": list(self.stage.characteristics),
            "advice": self.stage.advice,
            "estimated": self.estimated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UnsungPosition":
        return cls(position=Position(data["position"]), branch=data["branch"],
                   stage=STAGE_BY_KEY[data["stage"]], estimated=data.get("estimated", False))


@dataclass(frozen=True)
class UnsungAnalysis:
    positions: tuple
    dominant_category: StageCategory
    average_energy: float
    summary: str
    advice: tuple

    @property
    def peak(self) -> UnsungPosition:
        top = max(p.stage.energy for p in self.positions)
        return next(p for p in self.positions if p.stage.energy == top)

    @property
    def lowest(self) -> UnsungPosition:
        low = min(p.stage.energy for p in self.positions)
        return next(p for p in self.positions if p.stage.energy == low)

    def to_dict(self) -> dict:
        data = {
            "positions": [p.to_dict() for p in self.positions],
            "dominant_category": self.dominant_category.value if self.dominant_category else None,
            "dominant_category_label": (self.dominant_category.label
                                        if self.dominant_category else None),
            "average_energy": self.average_energy,
            "summary": self.summary,
            "advice": list(self.advice),
        }
        if self.positions:
            data["peak_position"] = self.peak.position.value
            data["lowest_position"] = self.lowest.position.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UnsungAnalysis":
        category = data.get("dominant_category")
        return cls(
            positions=tuple(UnsungPosition.from_dict(p) for p in data["positions"]),
            dominant_category=StageCategory(category) if category else None,
            average_energy=data["average_energy"],
            summary=data["summary"],
            advice=tuple(data["advice"]),
        )


EMPTY_UNSUNG = UnsungAnalysis(positions=(), dominant_category=None, average_energy=0.0,
                              summary="", advice=())


def analyze_unsung(chart: FourPillarsChart) -> UnsungAnalysis:
    """Map the Day Master's life stage at each of the four branches."""
    dm = chart.day_master
    positions = tuple(
        UnsungPosition(
            position=p.position,
            branch=p.branch.hanja,
            stage=stage_for(dm, p.branch),
            estimated=chart.hour_estimated and p.position is Position.HOUR,
        )
        for p in chart.pillars
    )

    counts = {c: 0 for c in STAGE_CATEGORY_ORDER}
    for p in positions:
        counts[p.stage.category] += 1
    top = max(counts.values())
    dominant = next(c for c in STAGE_CATEGORY_ORDER if counts[c] == top)

    average = round_half_up(sum(p.stage.energy for p in positions) / len(positions), 1)

    return UnsungAnalysis(
        positions=positions,
        dominant_category=dominant,
        average_energy=average,
        summary=_summary(positions, dominant, average),
        advice=tuple(_advice(positions, dominant)),
    )


def _summary(positions: tuple, dominant: StageCategory, average: float) -> str:
    day = next(p for p in positions if p.position is Position.DAY)
    energy_text = next(text for floor, text in _ENERGY_TEXT if average >= floor)
    return (f"The day pillar's {day.stage.label} carries the energy of "
            f"{day.stage.description}. {energy_text} {_CATEGORY_SUMMARY[dominant]}")


def _advice(positions: tuple, dominant: StageCategory) -> list:
    advice = []
    for p in positions:
        meaning = PILLAR_MEANINGS[p.position]
        if p.stage.energy >= 8:
            advice.append(f"{p.position.korean} ({p.stage.korean}): good energy for {meaning}.")
        elif p.stage.energy <= 3:
            advice.append(f"{p.position.korean} ({p.stage.korean}): {meaning} needs replenishing.")
    advice.append(_CATEGORY_ADVICE[dominant])
    return advice
