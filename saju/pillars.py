"""
Four Pillars (四柱) computation engine.

Handles:
- Birth input validation (solar or Korean lunar calendar)
- Clock corrections: DST stripping and optional Local Mean Time
- Year pillar with the Li Chun (입춘) year boundary
- Month pillar from the Sun's longitude + Five Tigers (五虎遁) stems
- Day pillar from the Julian Day Number, O(1) for any date
- Hour pillar from the 2-hour slot + Five Rats (五鼠遁) stems
- The 23:00 rule: births in [23:00, 24:00) take the next day's pillar
- Annual (세운) and monthly (월운) pillars of any year

Design principle: the chart is a pure function of the birth input.
Every downstream analysis takes the chart and never recomputes it.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from saju import config
from saju.astro_calendar import (
    julian_day_number,
    julian_day_ut,
    li_chun_jd,
    lmt_correction,
    lunar_to_solar,
    standard_time,
    sun_longitude,
    sun_longitude_to_month_branch_index,
)
from saju.errors import ComputationError, InputValidationError
from saju.symbols import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    POSITION_ORDER,
    EarthlyBranch,
    HeavenlyStem,
    Position,
    branch,
    sexagenary_index,
    stem,
)

logger = logging.getLogger(__name__)


# ============================================================
# BIRTH INPUT
# ============================================================

class CalendarType(Enum):
    SOLAR = "solar"
    LUNAR = "lunar"


GENDERS = ("male", "female")


@dataclass(frozen=True)
class BirthInput:
    """
    Raw birth data. Hashable, so it doubles as a memoization key.

    Lunar dates are kept as plain integers because a lunar day such as
    the 30th of the 2nd month is not a valid Gregorian date.
    """
    year: int
    month: int
    day: int
    hour: Optional[int] = None  # None = birth time unknown
    minute: int = 0
    calendar: CalendarType = CalendarType.SOLAR
    is_leap_month: bool = False
    gender: Optional[str] = None  # carried through, never used in math
    longitude: Optional[float] = None  # enables Local Mean Time correction
    timezone: str = config.DEFAULT_TIMEZONE

    @property
    def time_known(self) -> bool:
        return self.hour is not None

    @classmethod
    def from_strings(cls, birth_date: str, birth_time: Optional[str] = None,
                     calendar: str = "solar", **kwargs) -> "BirthInput":
        """
        Build an input from 'YYYY-MM-DD' and optional 'HH:MM' strings.

        Raises:
            InputValidationError: malformed date, time or calendar
        """
        try:
            year, month, day = (int(part) for part in birth_date.strip().split("-"))
        except (AttributeError, ValueError):
            raise InputValidationError(f"Birth date must be YYYY-MM-DD, got {birth_date!r}")

        hour = None
        minute = 0
        if birth_time:
            try:
                hour, minute = (int(part) for part in birth_time.strip().split(":"))
            except ValueError:
                raise InputValidationError(f"Birth time must be HH:MM, got {birth_time!r}")

        try:
            calendar_type = CalendarType(calendar)
        except ValueError:
            raise InputValidationError(f"Calendar must be 'solar' or 'lunar', got {calendar!r}")

        return cls(year=year, month=month, day=day, hour=hour, minute=minute,
                   calendar=calendar_type, **kwargs)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute,
            "calendar": self.calendar.value,
            "is_leap_month": self.is_leap_month,
            "gender": self.gender,
            "longitude": self.longitude,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BirthInput":
        return cls(
            year=data["year"],
            month=data["month"],
            day=data["day"],
            hour=data.get("hour"),
            minute=data.get("minute", 0),
            calendar=CalendarType(data.get("calendar", "solar")),
            is_leap_month=data.get("is_leap_month", False),
            gender=data.get("gender"),
            longitude=data.get("longitude"),
            timezone=data.get("timezone", config.DEFAULT_TIMEZONE),
        )


def validate_birth_input(birth: BirthInput) -> None:
    """
    Check ranges before any calendar work.

    Raises:
        InputValidationError: with a user-readable message
    """
    if not (config.MIN_YEAR <= birth.year <= config.MAX_YEAR):
        raise InputValidationError(
            f"Birth year {birth.year} is outside the supported range "
            f"{config.MIN_YEAR}-{config.MAX_YEAR}"
        )
    if not 1 <= birth.month <= 12:
        raise InputValidationError(f"Month must be 1-12, got {birth.month}")

    if birth.calendar is CalendarType.SOLAR:
        if birth.is_leap_month:
            raise InputValidationError("Leap month only applies to lunar dates")
        try:
            date(birth.year, birth.month, birth.day)
        except ValueError:
            raise InputValidationError(
                f"Invalid solar date {birth.year:04d}-{birth.month:02d}-{birth.day:02d}"
            )
    elif not 1 <= birth.day <= 30:
        raise InputValidationError(f"Lunar day must be 1-30, got {birth.day}")

    if birth.hour is not None and not 0 <= birth.hour <= 23:
        raise InputValidationError(f"Hour must be 0-23, got {birth.hour}")
    if not 0 <= birth.minute <= 59:
        raise InputValidationError(f"Minute must be 0-59, got {birth.minute}")
    if birth.gender is not None and birth.gender not in GENDERS:
        raise InputValidationError(f"Gender must be one of {GENDERS}, got {birth.gender!r}")
    if birth.longitude is not None and not -180.0 <= birth.longitude <= 180.0:
        raise InputValidationError(f"Longitude must be within ±180°, got {birth.longitude}")


# ============================================================
# PILLARS
# ============================================================

@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: Position

    def __post_init__(self):
        if self.stem.index % 2 != self.branch.index % 2:
            raise ComputationError(
                f"Stem/branch parity mismatch: {self.stem.hanja}{self.branch.hanja}",
                {"position": self.position.value},
            )

    @property
    def sexagenary_index(self) -> int:
        return sexagenary_index(self.stem.index, self.branch.index)

    @property
    def label(self) -> str:
        return f"{self.stem.hanja}{self.branch.hanja}"

    @property
    def korean(self) -> str:
        return f"{self.stem.korean}{self.branch.korean}"

    def __str__(self):
        return f"{self.label} ({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})"

    def to_dict(self) -> dict:
        return {
            "position": self.position.value,
            "position_label": self.position.label,
            "stem": self.stem.to_dict(),
            "branch": self.branch.to_dict(),
            "sexagenary_index": self.sexagenary_index,
            "label": self.label,
            "korean": self.korean,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pillar":
        return cls(
            stem=stem(data["stem"]["hanja"]),
            branch=branch(data["branch"]["hanja"]),
            position=Position(data["position"]),
        )


def pillar_from_index(index: int, position: Position) -> Pillar:
    return Pillar(stem=HEAVENLY_STEMS[index % 10], branch=EARTHLY_BRANCHES[index % 12],
                  position=position)


def year_pillar(effective_year: int) -> Pillar:
    """
    Compute the Year Pillar of a Saju year.

    The Saju year starts at Li Chun, so callers pass the year already
    shifted back for births before it. Year 4 CE was 甲子.
    """
    return pillar_from_index((effective_year - 4) % 60, Position.YEAR)


# Five Tigers: starting stem of the 寅 month, keyed by year stem index
TIGER_START_STEMS = {
    0: 2, 5: 2,   # 甲/己 year → 丙寅
    1: 4, 6: 4,   # 乙/庚 year → 戊寅
    2: 6, 7: 6,   # 丙/辛 year → 庚寅
    3: 8, 8: 8,   # 丁/壬 year → 壬寅
    4: 0, 9: 0,   # 戊/癸 year → 甲寅
}


def month_pillar(year_stem_index: int, month_branch_index: int) -> Pillar:
    """
    Compute the Month Pillar using the Five Tigers formula.

    Args:
        year_stem_index: index of the Saju year's stem (0-9)
        month_branch_index: branch from the solar term (寅 = 2 is month 1)
    """
    months_from_tiger = (month_branch_index - 2) % 12
    stem_index = (TIGER_START_STEMS[year_stem_index] + months_from_tiger) % 10
    return Pillar(stem=HEAVENLY_STEMS[stem_index], branch=EARTHLY_BRANCHES[month_branch_index],
                  position=Position.MONTH)


# JDN 2451545 (2000-01-01) is 戊午, index 54 in the 60 cycle.
JDN_SEXAGENARY_OFFSET = 49


def day_pillar(d: date) -> Pillar:
    """
    Compute the Day Pillar from the Julian Day Number.

    The 60-day cycle has run unbroken for millennia, so the pillar is a
    fixed offset of the continuous day count. Checked against published
    charts: 1949-10-01 甲子, 2000-01-01 戊午, 2024-01-01 甲子.
    """
    return pillar_from_index((julian_day_number(d) + JDN_SEXAGENARY_OFFSET) % 60, Position.DAY)


def hour_branch_index(hour: int) -> int:
    """
    2-hour slot of a clock hour.

    23:00-00:59 = 子 (0), 01:00-02:59 = 丑 (1), ..., 21:00-22:59 = 亥 (11)
    """
    if hour == 23 or hour == 0:
        return 0
    return ((hour + 1) // 2) % 12


# Five Rats: starting stem of the 子 hour, keyed by day stem index
RAT_START_STEMS = {
    0: 0, 5: 0,   # 甲/己 day → 甲子
    1: 2, 6: 2,   # 乙/庚 day → 丙子
    2: 4, 7: 4,   # 丙/辛 day → 戊子
    3: 6, 8: 6,   # 丁/壬 day → 庚子
    4: 8, 9: 8,   # 戊/癸 day → 壬子
}


def hour_pillar(day_stem_index: int, hour: int) -> Pillar:
    """
    Compute the Hour Pillar using the Five Rats formula.

    Args:
        day_stem_index: stem index of the (already rolled-over) day pillar
        hour: corrected clock hour, 0-23
    """
    branch_index = hour_branch_index(hour)
    stem_index = (RAT_START_STEMS[day_stem_index] + branch_index) % 10
    return Pillar(stem=HEAVENLY_STEMS[stem_index], branch=EARTHLY_BRANCHES[branch_index],
                  position=Position.HOUR)


def annual_pillar(year: int) -> Pillar:
    """Pillar governing a calendar year (세운), from Li Chun of that year."""
    return year_pillar(year)


def monthly_pillars(year: int) -> list[Pillar]:
    """The 12 month pillars (월운) of a Saju year, 寅 month first."""
    year_stem_index = (year - 4) % 10
    return [month_pillar(year_stem_index, (2 + i) % 12) for i in range(12)]


# ============================================================
# CHART
# ============================================================

@dataclass(frozen=True)
class FourPillarsChart:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    birth: BirthInput
    solar_date: date  # civil solar birth date (after lunar conversion)
    corrected_time: datetime  # local time after DST strip and LMT
    utc_time: datetime
    hour_estimated: bool = False
    day_rolled_over: bool = False
    dst_minutes: float = 0.0
    lmt_minutes: float = 0.0

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    @property
    def pillars(self) -> tuple:
        return (self.year, self.month, self.day, self.hour)

    def pillar(self, position: Position) -> Pillar:
        return self.pillars[POSITION_ORDER.index(position)]

    @property
    def stems(self) -> tuple:
        return tuple(p.stem for p in self.pillars)

    @property
    def branches(self) -> tuple:
        return tuple(p.branch for p in self.pillars)

    @property
    def label(self) -> str:
        return " ".join(p.label for p in self.pillars)

    def context(self) -> dict:
        """Compact description for log records and error context."""
        return {"chart": self.label, "birth": self.birth.to_dict(),
                "hour_estimated": self.hour_estimated}

    def to_dict(self) -> dict:
        return {
            "pillars": {p.position.value: p.to_dict() for p in self.pillars},
            "day_master": self.day_master.to_dict(),
            "label": self.label,
            "birth": self.birth.to_dict(),
            "solar_date": self.solar_date.isoformat(),
            "corrected_time": self.corrected_time.isoformat(),
            "utc_time": self.utc_time.isoformat(),
            "hour_estimated": self.hour_estimated,
            "day_rolled_over": self.day_rolled_over,
            "dst_minutes": self.dst_minutes,
            "lmt_minutes": round(self.lmt_minutes, 2),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FourPillarsChart":
        pillars = data["pillars"]
        return cls(
            year=Pillar.from_dict(pillars["year"]),
            month=Pillar.from_dict(pillars["month"]),
            day=Pillar.from_dict(pillars["day"]),
            hour=Pillar.from_dict(pillars["hour"]),
            birth=BirthInput.from_dict(data["birth"]),
            solar_date=date.fromisoformat(data["solar_date"]),
            corrected_time=datetime.fromisoformat(data["corrected_time"]),
            utc_time=datetime.fromisoformat(data["utc_time"]),
            hour_estimated=data.get("hour_estimated", False),
            day_rolled_over=data.get("day_rolled_over", False),
            dst_minutes=data.get("dst_minutes", 0.0),
            lmt_minutes=data.get("lmt_minutes", 0.0),
        )


def resolve_solar_date(birth: BirthInput) -> date:
    """Solar civil date of the birth, converting lunar input first."""
    if birth.calendar is CalendarType.LUNAR:
        solar = lunar_to_solar(birth.year, birth.month, birth.day, birth.is_leap_month)
        if not (config.MIN_YEAR <= solar.year <= config.MAX_YEAR):
            raise InputValidationError(
                f"Converted solar year {solar.year} is outside the supported range"
            )
        return solar
    return date(birth.year, birth.month, birth.day)


def compute_chart(birth: BirthInput) -> FourPillarsChart:
    """
    Compute the Four Pillars chart from birth data.

    Year and month pillars come from the true birth instant (UT) against
    the solar terms. Day and hour pillars come from the corrected local
    clock; a corrected time in [23:00, 24:00) takes the next day's pillar.

    Args:
        birth: validated or raw BirthInput

    Returns:
        FourPillarsChart

    Raises:
        InputValidationError: out-of-range or malformed input
        CalendarConversionError: nonexistent lunar date
        ComputationError: ephemeris failure
    """
    validate_birth_input(birth)
    solar = resolve_solar_date(birth)

    hour_estimated = not birth.time_known
    hour = config.PLACEHOLDER_HOUR if hour_estimated else birth.hour
    minute = 0 if hour_estimated else birth.minute

    local_dt = datetime(solar.year, solar.month, solar.day, hour, minute)
    std_dt, std_offset, dst_minutes = standard_time(local_dt, birth.timezone)
    utc_dt = std_dt - timedelta(hours=std_offset)

    # LMT moves the clock reading, not the instant
    lmt_minutes = 0.0
    corrected = std_dt
    if birth.longitude is not None and not hour_estimated:
        lmt_minutes = lmt_correction(birth.longitude, std_offset * 15)
        corrected = std_dt + timedelta(minutes=lmt_minutes)

    jd = julian_day_ut(utc_dt)

    # Year: before Li Chun still belongs to the previous Saju year
    effective_year = std_dt.year
    if jd < li_chun_jd(std_dt.year):
        effective_year -= 1
    yp = year_pillar(effective_year)

    mp = month_pillar(yp.stem.index, sun_longitude_to_month_branch_index(sun_longitude(jd)))

    day_date = corrected.date()
    rolled_over = corrected.hour == 23
    if rolled_over:
        day_date += timedelta(days=1)
    dp = day_pillar(day_date)
    hp = hour_pillar(dp.stem.index, corrected.hour)

    chart = FourPillarsChart(
        year=yp, month=mp, day=dp, hour=hp,
        birth=birth,
        solar_date=solar,
        corrected_time=corrected,
        utc_time=utc_dt,
        hour_estimated=hour_estimated,
        day_rolled_over=rolled_over,
        dst_minutes=dst_minutes,
        lmt_minutes=lmt_minutes,
    )
    logger.debug("Computed chart %s for %s", chart.label, birth)
    return chart
