"""
Sinsal (신살 神殺) star detection.

Handles:
- A fixed catalog of 16 named stars in three categories
  (auspicious 길신, special 특수살, inauspicious 흉살)
- One independent predicate rule per star, evaluated over chart positions
- Low-confidence marking when a match rests on an estimated hour pillar
- Per-category counts, summary and advice text

Rules never look at each other's results; a chart may match none or many.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from saju.pillars import FourPillarsChart
from saju.symbols import CONTROLS, POSITION_ORDER, Position


# ============================================================
# CATALOG
# ============================================================

class SinsalCategory(Enum):
    AUSPICIOUS = "auspicious"
    SPECIAL = "special"
    INAUSPICIOUS = "inauspicious"

    @property
    def korean(self) -> str:
        return {"auspicious": "길신", "special": "특수살", "inauspicious": "흉살"}[self.value]

    @property
    def label(self) -> str:
        return f"{self.korean}({self.value})"


CATEGORY_ORDER = list(SinsalCategory)


class Sinsal(Enum):
    CHEONEUL_GWIIN = "cheoneul_gwiin"
    MUNCHANG_GWIIN = "munchang_gwiin"
    TAEGEUK_GWIIN = "taegeuk_gwiin"
    CHEONDEOK_GWIIN = "cheondeok_gwiin"
    WOLDEOK_GWIIN = "woldeok_gwiin"
    GEUMYEO = "geumyeo"
    NOKMA = "nokma"
    YEOKMA = "yeokma"
    DOHWA = "dohwa"
    HWAGAE = "hwagae"
    YANGIN = "yangin"
    GWANSAL = "gwansal"
    GONGMANG = "gongmang"
    BAEKHO = "baekho"
    WONJIN = "wonjin"
    GYEOKGAK = "gyeokgak"

    @property
    def info(self) -> "SinsalInfo":
        return SINSAL_INFO[self]

    @property
    def label(self) -> str:
        return f"{self.info.korean}({self.info.hanja})"


@dataclass(frozen=True)
class SinsalInfo:
    korean: str
    hanja: str
    english: str
    category: SinsalCategory
    description: str
    effect: str
    activation: str
    remedy: Optional[str] = None


_A, _S, _I = SinsalCategory.AUSPICIOUS, SinsalCategory.SPECIAL, SinsalCategory.INAUSPICIOUS

SINSAL_INFO = {
    Sinsal.CHEONEUL_GWIIN: SinsalInfo(
        "천을귀인", "天乙貴人", "Heavenly Noble", _A,
        "A noble person sent by heaven.",
        "Help from benefactors in a crisis; well liked and rising in standing.",
        "Support arrives in office, business and other important matters."),
    Sinsal.MUNCHANG_GWIIN: SinsalInfo(
        "문창귀인", "文昌貴人", "Literary Star", _A,
        "The star of learning.",
        "Strong academic ability and luck with documents, exams and contracts.",
        "Study, examinations, certifications and paperwork."),
    Sinsal.TAEGEUK_GWIIN: SinsalInfo(
        "태극귀인", "太極貴人", "Supreme Noble", _A,
        "The highest of the noble stars.",
        "Great fortune and protection; a way out of danger.",
        "Shows up at major turning points in life."),
    Sinsal.CHEONDEOK_GWIIN: SinsalInfo(
        "천덕귀인", "天德貴人", "Heavenly Virtue", _A,
        "A noble blessed with heaven's virtue.",
        "Avoids disaster and receives blessings; good character.",
        "Difficult situations tend to resolve on their own."),
    Sinsal.WOLDEOK_GWIIN: SinsalInfo(
        "월덕귀인", "月德貴人", "Monthly Virtue", _A,
        "A noble blessed with the moon's virtue.",
        "Recurring favourable periods and a peaceful life.",
        "Certain times of each month are auspicious."),
    Sinsal.GEUMYEO: SinsalInfo(
        "금여", "金輿", "Golden Carriage", _A,
        "The golden carriage.",
        "Good fortune with money and travel; treated with respect.",
        "Good things happen around moves, trips and relocation."),
    Sinsal.NOKMA: SinsalInfo(
        "녹마", "祿馬", "Salary Horse", _A,
        "The official's salary and horse.",
        "Gains wealth and honour; favourable for promotion.",
        "Opportunities to advance at work or in business."),
    Sinsal.YEOKMA: SinsalInfo(
        "역마살", "驛馬殺", "Travelling Horse", _S,
        "The post-station horse.",
        "Much movement and change; ties abroad, frequent business trips.",
        "Travel, relocation and overseas affairs.",
        "Make a deliberate effort to settle in one place."),
    Sinsal.DOHWA: SinsalInfo(
        "도화살", "桃花殺", "Peach Blossom", _S,
        "The peach blossom star.",
        "Attractive to others with a performer's flair; beware of infidelity.",
        "Romance, the arts and social life.",
        "Practise moderation and discernment."),
    Sinsal.HWAGAE: SinsalInfo(
        "화개살", "華蓋殺", "Flowery Canopy", _S,
        "A canopy covered in flowers.",
        "Drawn to art, religion and philosophy; solitary but deep.",
        "Suited to artistic, religious and contemplative pursuits.",
        "Channel solitude into creative work."),
    Sinsal.YANGIN: SinsalInfo(
        "양인", "羊刃", "Goat Blade", _S,
        "The blade of the goat.",
        "Forceful energy; decisive, but prone to accidents.",
        "Emerges under pressure and in competition.",
        "Cultivate caution and patience."),
    Sinsal.GWANSAL: SinsalInfo(
        "관살", "官殺", "Officer Killing", _S,
        "Pressure from authority.",
        "Watch for legal trouble and disputes; self-control grows.",
        "Legal disputes and dealings with public offices.",
        "Consult legal experts and act carefully."),
    Sinsal.GONGMANG: SinsalInfo(
        "공망", "空亡", "Void", _I,
        "Emptiness and loss.",
        "The affected area may feel hollow and lack substance.",
        "Wasted effort or emptiness in specific areas.",
        "Overcome it with concrete preparation and effort."),
    Sinsal.BAEKHO: SinsalInfo(
        "백호살", "白虎殺", "White Tiger", _I,
        "The killing aura of the white tiger.",
        "Beware of accidents, surgery and bloodshed.",
        "Health and safety matters.",
        "Look after your health and stay safe."),
    Sinsal.WONJIN: SinsalInfo(
        "원진", "怨嗔", "Resentment", _I,
        "Grudges and anger.",
        "Conflict and resentment with particular people.",
        "Interpersonal friction.",
        "Work at reconciliation and forgiveness."),
    Sinsal.GYEOKGAK: SinsalInfo(
        "격각", "隔角", "Separated Corner", _I,
        "A corner set apart.",
        "Risk of separation from parents or spouse.",
        "Family relationships.",
        "Invest in the relationship and keep talking."),
}


# ============================================================
# RULE TABLES
# ============================================================

# Day stem → noble branches
CHEONEUL_TABLE = {
    "甲": "丑未", "戊": "丑未", "庚": "丑未",
    "乙": "子申", "己": "子申",
    "丙": "亥酉", "丁": "亥酉",
    "辛": "寅午",
    "壬": "卯巳", "癸": "卯巳",
}

MUNCHANG_TABLE = {
    "甲": "巳", "乙": "午", "丙": "申", "丁": "酉", "戊": "申",
    "己": "酉", "庚": "亥", "辛": "子", "壬": "寅", "癸": "卯",
}

TAEGEUK_TABLE = {
    "甲": "子午", "乙": "子午",
    "丙": "卯酉", "丁": "卯酉",
    "戊": "辰戌丑未", "己": "辰戌丑未",
    "庚": "寅亥", "辛": "寅亥",
    "壬": "巳申", "癸": "巳申",
}

# Month branch → stem or branch carrying heavenly virtue
CHEONDEOK_TABLE = {
    "寅": "丁", "卯": "申", "辰": "壬", "巳": "辛", "午": "亥", "未": "甲",
    "申": "癸", "酉": "寅", "戌": "丙", "亥": "乙", "子": "巳", "丑": "庚",
}

GEUMYEO_TABLE = {
    "甲": "辰", "乙": "巳", "丙": "未", "丁": "申", "戊": "未",
    "己": "申", "庚": "戌", "辛": "亥", "壬": "丑", "癸": "寅",
}

# Day stem → 祿 (建祿) branch
ROK_TABLE = {
    "甲": "寅", "乙": "卯", "丙": "巳", "丁": "午", "戊": "巳",
    "己": "午", "庚": "申", "辛": "酉", "壬": "亥", "癸": "子",
}

YANGIN_TABLE = {
    "甲": "卯", "乙": "辰", "丙": "午", "丁": "未", "戊": "午",
    "己": "未", "庚": "酉", "辛": "戌", "壬": "子", "癸": "丑",
}

# The four triads and what each points to
TRIADS = ("寅午戌", "申子辰", "巳酉丑", "亥卯未")

WOLDEOK_BY_TRIAD = {"寅午戌": "丙", "申子辰": "壬", "亥卯未": "甲", "巳酉丑": "庚"}
YEOKMA_BY_TRIAD = {"寅午戌": "申", "申子辰": "寅", "巳酉丑": "亥", "亥卯未": "巳"}
DOHWA_BY_TRIAD = {"寅午戌": "卯", "申子辰": "酉", "巳酉丑": "午", "亥卯未": "子"}
HWAGAE_BY_TRIAD = {"寅午戌": "戌", "申子辰": "辰", "巳酉丑": "丑", "亥卯未": "未"}

BAEKHO_PILLARS = {"甲辰", "乙未", "丙戌", "丁丑", "戊辰", "壬戌", "癸丑"}

WONJIN_PAIRS = [set(p) for p in ("子未", "丑午", "寅酉", "卯申", "辰亥", "巳戌")]


def _triad_of(branch_hanja: str) -> str:
    return next(t for t in TRIADS if branch_hanja in t)


def _positions_with_branch(chart: FourPillarsChart, targets: str) -> list:
    return [p.position for p in chart.pillars if p.branch.hanja in targets]


def _positions_with_stem(chart: FourPillarsChart, targets: str) -> list:
    return [p.position for p in chart.pillars if p.stem.hanja in targets]


# ============================================================
# RULES
# ============================================================
#
# Each rule: chart -> matched positions (empty list = star absent)

def _cheoneul(chart):
    return _positions_with_branch(chart, CHEONEUL_TABLE[chart.day_master.hanja])


def _munchang(chart):
    return _positions_with_branch(chart, MUNCHANG_TABLE[chart.day_master.hanja])


def _taegeuk(chart):
    return _positions_with_branch(chart, TAEGEUK_TABLE[chart.day_master.hanja])


def _cheondeok(chart):
    target = CHEONDEOK_TABLE[chart.month.branch.hanja]
    if target in CHEONEUL_TABLE:  # a stem
        return _positions_with_stem(chart, target)
    return _positions_with_branch(chart, target)


def _woldeok(chart):
    return _positions_with_stem(chart, WOLDEOK_BY_TRIAD[_triad_of(chart.month.branch.hanja)])


def _geumyeo(chart):
    return _positions_with_branch(chart, GEUMYEO_TABLE[chart.day_master.hanja])


def _nokma(chart):
    rok = _positions_with_branch(chart, ROK_TABLE[chart.day_master.hanja])
    horse = _yeokma(chart)
    if not rok or not horse:
        return []
    return [p for p in POSITION_ORDER if p in rok or p in horse]


def _yeokma(chart):
    return _positions_with_branch(chart, YEOKMA_BY_TRIAD[_triad_of(chart.day.branch.hanja)])


def _dohwa(chart):
    return _positions_with_branch(chart, DOHWA_BY_TRIAD[_triad_of(chart.day.branch.hanja)])


def _hwagae(chart):
    return _positions_with_branch(chart, HWAGAE_BY_TRIAD[_triad_of(chart.day.branch.hanja)])


def _yangin(chart):
    return _positions_with_branch(chart, YANGIN_TABLE[chart.day_master.hanja])


def _gwansal(chart):
    dm_element = chart.day_master.element
    hits = [p.position for p in chart.pillars
            if p.position is not Position.DAY and CONTROLS[p.stem.element] == dm_element]
    return hits if len(hits) >= 2 else []


def void_branches(chart: FourPillarsChart) -> tuple:
    """The two branch indices left out of the day pillar's ten-day cycle (旬)."""
    xun_start = chart.day.sexagenary_index - chart.day.sexagenary_index % 10
    return ((xun_start + 10) % 12, (xun_start + 11) % 12)


def _gongmang(chart):
    void = void_branches(chart)
    return [p.position for p in chart.pillars
            if p.position is not Position.DAY and p.branch.index in void]


def _baekho(chart):
    return [p.position for p in chart.pillars if p.label in BAEKHO_PILLARS]


def _wonjin(chart):
    hits = set()
    pillars = chart.pillars
    for i in range(len(pillars)):
        for j in range(i + 1, len(pillars)):
            if {pillars[i].branch.hanja, pillars[j].branch.hanja} in WONJIN_PAIRS:
                hits.update((pillars[i].position, pillars[j].position))
    return [p for p in POSITION_ORDER if p in hits]


def _gyeokgak(chart):
    day_index = chart.day.branch.index
    hits = set()
    for neighbour in (chart.month, chart.hour):
        if (day_index - neighbour.branch.index) % 12 in (2, 10):
            hits.update((Position.DAY, neighbour.position))
    return [p for p in POSITION_ORDER if p in hits]


RULES = [
    (Sinsal.CHEONEUL_GWIIN, _cheoneul),
    (Sinsal.MUNCHANG_GWIIN, _munchang),
    (Sinsal.TAEGEUK_GWIIN, _taegeuk),
    (Sinsal.CHEONDEOK_GWIIN, _cheondeok),
    (Sinsal.WOLDEOK_GWIIN, _woldeok),
    (Sinsal.GEUMYEO, _geumyeo),
    (Sinsal.NOKMA, _nokma),
    (Sinsal.YEOKMA, _yeokma),
    (Sinsal.DOHWA, _dohwa),
    (Sinsal.HWAGAE, _hwagae),
    (Sinsal.YANGIN, _yangin),
    (Sinsal.GWANSAL, _gwansal),
    (Sinsal.GONGMANG, _gongmang),
    (Sinsal.BAEKHO, _baekho),
    (Sinsal.WONJIN, _wonjin),
    (Sinsal.GYEOKGAK, _gyeokgak),
]


# ============================================================
# ANALYSIS
# ============================================================

@dataclass(frozen=True)
class SinsalMatch:
    sinsal: Sinsal
    positions: tuple
    low_confidence: bool = False

    @property
    def category(self) -> SinsalCategory:
        return self.sinsal.info.category

    def to_dict(self) -> dict:
        info = self.sinsal.info
        return {
            "sinsal": self.sinsal.value,
            "label": self.sinsal.label,
            "english": info.english,
            "category": info.category.value,
            "category_label": info.category.label,
            "positions": [p.value for p in self.positions],
            "description": info.description,
            "effect": info.effect,
            "activation": info.activation,
            "remedy": info.remedy,
            "low_confidence": self.low_confidence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SinsalMatch":
        return cls(sinsal=Sinsal(data["sinsal"]),
                   positions=tuple(Position(p) for p in data["positions"]),
                   low_confidence=data.get("low_confidence", False))


@dataclass(frozen=True)
class SinsalAnalysis:
    matches: tuple
    summary: str
    advice: tuple

    def by_category(self, category: SinsalCategory) -> tuple:
        return tuple(m for m in self.matches if m.category is category)

    @property
    def counts(self) -> dict:
        return {c: len(self.by_category(c)) for c in CATEGORY_ORDER}

    def to_dict(self) -> dict:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "counts": {c.value: n for c, n in self.counts.items()},
            "summary": self.summary,
            "advice": list(self.advice),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SinsalAnalysis":
        return cls(matches=tuple(SinsalMatch.from_dict(m) for m in data["matches"]),
                   summary=data["summary"], advice=tuple(data["advice"]))


EMPTY_SINSAL = SinsalAnalysis(matches=(), summary="", advice=())


def detect_sinsal(chart: FourPillarsChart, rules: list = None) -> SinsalAnalysis:
    """
    Evaluate every star rule against the chart.

    Args:
        chart: the natal chart
        rules: optional (Sinsal, rule) list, defaults to the full catalog

    Returns:
        SinsalAnalysis with one match per star found, catalog order
    """
    matches = []
    for star, rule in (rules if rules is not None else RULES):
        positions = rule(chart)
        if not positions:
            continue
        matches.append(SinsalMatch(
            sinsal=star,
            positions=tuple(positions),
            low_confidence=chart.hour_estimated and Position.HOUR in positions,
        ))

    return SinsalAnalysis(matches=tuple(matches), summary=_summary(matches),
                          advice=tuple(_advice(matches)))


def _summary(matches: list) -> str:
    found = {m.sinsal for m in matches}
    parts = []
    if any(m.category is SinsalCategory.AUSPICIOUS for m in matches):
        parts.append("Noble-helper (귀인) energy brings support in hard times.")
    if Sinsal.YEOKMA in found:
        parts.append("The Travelling Horse brings frequent movement and change.")
    if Sinsal.DOHWA in found:
        parts.append("The Peach Blossom makes you popular with others.")
    if Sinsal.HWAGAE in found:
        parts.append("The Flowery Canopy gives an artistic, spiritual temperament.")
    inauspicious = sum(1 for m in matches if m.category is SinsalCategory.INAUSPICIOUS)
    if inauspicious:
        parts.append(f"{inauspicious} cautionary star(s) call for care.")
    if not parts:
        return "No strong stars; a steady, stable chart."
    return " ".join(parts)


def _advice(matches: list) -> list:
    advice = []
    for category in CATEGORY_ORDER:
        for m in matches:
            if m.category is not category:
                continue
            info = m.sinsal.info
            if category is SinsalCategory.AUSPICIOUS:
                advice.append(f"{info.korean}: {info.activation}")
            elif info.remedy:
                advice.append(f"{info.korean}: {info.remedy}")
    for m in matches:
        if m.low_confidence:
            advice.append(f"{m.sinsal.info.korean}: relies on the birth hour, which is estimated.")
    return advice
