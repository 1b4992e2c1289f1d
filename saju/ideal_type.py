"""
Ideal partner profile derived from the Day Master and the element balance.

Handles:
- Ideal element: the deficient element, falling back to the element the
  Day Master generates
- Partner profile (personality, occupation, appearance, warning, MBTI)
- The Day Master's own love style
- Best / good / challenge element matches
- Summary and a short share title
"""

from dataclasses import dataclass
from typing import Optional

from saju.elements import ElementBalance
from saju.symbols import CONTROLS, GENERATED_BY, GENERATES, Element


# ============================================================
# TABLES
# ============================================================

MBTI_MATCHES = {
    Element.WOOD: {"best": ["ENFP", "INFP", "ENFJ"], "good": ["ENTP", "INTP", "INFJ"],
                   "challenge": ["ISTJ", "ESTJ", "ISFJ"]},
    Element.FIRE: {"best": ["ESTP", "ESFP", "ENTJ"], "good": ["ENFP", "ENTP", "ISFP"],
                   "challenge": ["INTP", "ISTP", "INTJ"]},
    Element.EARTH: {"best": ["ISFJ", "ESFJ", "ISTJ"], "good": ["INFJ", "ENFJ", "ISFP"],
                    "challenge": ["ENTP", "ENFP", "ESTP"]},
    Element.METAL: {"best": ["INTJ", "ENTJ", "ISTJ"], "good": ["INTP", "ESTJ", "ISTP"],
                    "challenge": ["ENFP", "ESFP", "INFP"]},
    Element.WATER: {"best": ["INFJ", "INFP", "INTP"], "good": ["INTJ", "ISFJ", "ENFJ"],
                    "challenge": ["ESTP", "ESFP", "ESTJ"]},
}

PARTNER_PROFILES = {
    Element.WOOD: {
        "personality": ["growth-minded", "creative", "free-spirited", "loves learning"],
        "occupation": ["education / research", "creative work", "startups",
                       "environmental / social sector"],
        "appearance": ["on the tall side", "slender build", "neat image", "intellectual look"],
        "warning": ["overly stubborn types", "types who fear change",
                    "types who refuse to talk things through"],
    },
    Element.FIRE: {
        "personality": ["passionate", "a natural leader", "sociable", "lively"],
        "occupation": ["arts / entertainment", "sales / marketing", "executive roles",
                       "broadcasting / media"],
        "appearance": ["radiant face", "bright clear eyes", "good fashion sense",
                       "cheerful presence"],
        "warning": ["cold types", "overly critical types", "low-energy types"],
    },
    Element.EARTH: {
        "personality": ["stable", "dependable", "deeply considerate", "down to earth"],
        "occupation": ["finance / accounting", "real estate", "medicine / nursing",
                       "public administration"],
        "appearance": ["gentle face", "trustworthy air", "comfortable presence", "tidy"],
        "warning": ["overly impulsive types", "irresponsible types", "reckless adventurers"],
    },
    Element.METAL: {
        "personality": ["principled", "fair-minded", "decisive", "polished"],
        "occupation": ["law", "IT / technology", "engineering", "consulting"],
        "appearance": ["refined style", "sharp features", "clean-cut", "charismatic"],
        "warning": ["overly emotional types", "indecisive types",
                    "types who break promises"],
    },
    Element.WATER: {
        "personality": ["wise", "flexible", "profound", "intuitive"],
        "occupation": ["research / academia", "psychology / counselling",
                       "arts / creative work", "philosophy / religion"],
        "appearance": ["mysterious air", "deep gaze", "calm face", "artistic temperament"],
        "warning": ["loud types", "shallow types", "inconsiderate types"],
    },
}

LOVE_STYLES = {
    Element.WOOD: {
        "type": "a romantic who seeks a love that grows",
        "strengths": ["wants to grow together", "unafraid of trying new things",
                      "considerate conversation"],
        "weaknesses": ["ideals may run too high", "weak on practical problems",
                       "independence can go too far"],
        "ideal_partner": "someone who cheers on your dreams and still gives practical advice",
        "communication_tip": "share your vision rather than your feelings and hearts open",
    },
    Element.FIRE: {
        "type": "a passionate, straight-ahead lover",
        "strengths": ["bold expressiveness", "lifts the mood", "shows affection openly"],
        "weaknesses": ["impatient", "may cool off quickly", "heated in conflict"],
        "ideal_partner": "someone who welcomes your passion and calmly keeps you centred",
        "communication_tip": "sincere praise and recognition are the key to your heart",
    },
    Element.EARTH: {
        "type": "a steady, devoted lover",
        "strengths": ["unchanging love", "practical care", "a reliable partner"],
        "weaknesses": ["clumsy at expressing feelings", "slow to adapt to change",
                       "can be stubborn"],
        "ideal_partner": "someone who notices your devotion and says thank you",
        "communication_tip": "practise putting things into words, not only into actions",
    },
    Element.METAL: {
        "type": "a principled, refined lover",
        "strengths": ["clear communication", "intellectual conversation",
                      "a relationship with dignity"],
        "weaknesses": ["awkward with emotions", "may come across as critical",
                       "lacks flexibility"],
        "ideal_partner": "someone who respects your values and adds some softness",
        "communication_tip": "empathise with feelings before logic and the bond deepens",
    },
    Element.WATER: {
        "type": "a lover who seeks a deep, spiritual connection",
        "strengths": ["deep understanding", "empathy", "a meeting of souls"],
        "weaknesses": ["can be indecisive", "swept along by emotion",
                       "tends to escape reality"],
        "ideal_partner": "someone who understands your inner world and grounds you",
        "communication_tip": "the right person knows that silence is also conversation",
    },
}

# Day Master element → ideal element → share title
SHARE_TITLES = {
    Element.WOOD: {
        Element.WOOD: "Meet a dreamer who grows with you!",
        Element.FIRE: "Find the one who sets your passion alight!",
        Element.EARTH: "A steady pillar of support is waiting!",
        Element.METAL: "Look for a partner with refined taste!",
        Element.WATER: "A bond of deep, soulful exchange!",
    },
    Element.FIRE: {
        Element.WOOD: "Find the one who helps you grow!",
        Element.FIRE: "A love that burns bright together!",
        Element.EARTH: "The perfect blend of stability and passion!",
        Element.METAL: "Chemistry of challenge and polish!",
        Element.WATER: "A mysterious match to cool your fire!",
    },
    Element.EARTH: {
        Element.WOOD: "A partner for change and growth!",
        Element.FIRE: "The one who brings you energy!",
        Element.EARTH: "A dependable partner for life!",
        Element.METAL: "A meeting of trust and class!",
        Element.WATER: "A deep, mysterious connection!",
    },
    Element.METAL: {
        Element.WOOD: "A partner who teaches you flexibility!",
        Element.FIRE: "A partner who teaches you passion!",
        Element.EARTH: "The perfect partner to back you up!",
        Element.METAL: "A meeting of principle and polish!",
        Element.WATER: "A partner to share wisdom with!",
    },
    Element.WATER: {
        Element.WOOD: "The best partner to grow with!",
        Element.FIRE: "The one who gives you passion!",
        Element.EARTH: "A steady partner who brings stability!",
        Element.METAL: "A meeting of wisdom and resolve!",
        Element.WATER: "A fated match that reaches the soul!",
    },
}

MATCH_SCORES = {"best": 95, "good": 80, "challenge": 55}


# ============================================================
# ANALYSIS
# ============================================================

@dataclass(frozen=True)
class ElementMatch:
    element: Element
    score: int
    description: str

    def to_dict(self) -> dict:
        return {"element": self.element.value, "label": self.element.label,
                "score": self.score, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> "ElementMatch":
        return cls(Element(data["element"]), data["score"], data["description"])


@dataclass(frozen=True)
class IdealTypeAnalysis:
    day_master_element: Element
    ideal_element: Element
    best_match: ElementMatch
    good_match: ElementMatch
    challenge_match: ElementMatch
    summary: str
    share_title: str

    @property
    def profile(self) -> dict:
        return PARTNER_PROFILES[self.ideal_element]

    @property
    def mbti_types(self) -> list:
        return MBTI_MATCHES[self.ideal_element]["best"]

    @property
    def love_style(self) -> dict:
        return LOVE_STYLES[self.day_master_element]

    def to_dict(self) -> dict:
        return {
            "day_master_element": self.day_master_element.value,
            "ideal_element": self.ideal_element.value,
            "ideal_element_label": self.ideal_element.label,
            "profile": {**self.profile, "mbti_types": list(self.mbti_types)},
            "love_style": dict(self.love_style),
            "matches": {
                "best": self.best_match.to_dict(),
                "good": self.good_match.to_dict(),
                "challenge": self.challenge_match.to_dict(),
            },
            "summary": self.summary,
            "share_title": self.share_title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IdealTypeAnalysis":
        matches = data["matches"]
        return cls(
            day_master_element=Element(data["day_master_element"]),
            ideal_element=Element(data["ideal_element"]),
            best_match=ElementMatch.from_dict(matches["best"]),
            good_match=ElementMatch.from_dict(matches["good"]),
            challenge_match=ElementMatch.from_dict(matches["challenge"]),
            summary=data["summary"],
            share_title=data["share_title"],
        )


def match_scores(dm_element: Element) -> tuple:
    """(best, good, challenge) element matches for a Day Master element."""
    best = GENERATED_BY[dm_element]
    good = GENERATES[dm_element]
    challenge = CONTROLS[dm_element]
    return (
        ElementMatch(best, MATCH_SCORES["best"],
                     f"A {best.label} person helps you grow: an ideal partner. The "
                     f"generating cycle lets you complement each other and develop together."),
        ElementMatch(good, MATCH_SCORES["good"],
                     f"With a {good.label} person you can keep a stable relationship, "
                     f"with you taking the lead."),
        ElementMatch(challenge, MATCH_SCORES["challenge"],
                     f"A {challenge.label} person brings tension, but you can help each "
                     f"other grow. It takes effort."),
    )


def analyze_ideal_type(dm_element: Element, deficient: Optional[Element] = None) -> IdealTypeAnalysis:
    """
    Build the ideal-partner profile.

    Args:
        dm_element: element of the Day Master
        deficient: the chart's deficient element, if known

    Returns:
        IdealTypeAnalysis
    """
    ideal = deficient if deficient is not None else GENERATES[dm_element]
    best, good, challenge = match_scores(dm_element)
    style = LOVE_STYLES[dm_element]
    summary = (
        f"You are {style['type']} with {dm_element.label} energy. Meeting someone with "
        f"{ideal.label} energy lets you complete each other for the best match. Look for "
        f"{style['ideal_partner']}. Remember in love: {style['communication_tip']}."
    )
    return IdealTypeAnalysis(
        day_master_element=dm_element,
        ideal_element=ideal,
        best_match=best,
        good_match=good,
        challenge_match=challenge,
        summary=summary,
        share_title=SHARE_TITLES[dm_element][ideal],
    )


def ideal_type_for_balance(balance: ElementBalance) -> IdealTypeAnalysis:
    return analyze_ideal_type(balance.day_master_element, balance.deficient)
