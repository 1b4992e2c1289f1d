"""
Calendar utilities for pillar calculations.

Handles:
- Swiss Ephemeris setup and Sun longitude at a UT instant
- The 12 Jie solar terms (month boundaries) and Li Chun (year boundary)
- DST stripping and Local Mean Time correction of clock times
- Korean lunar <-> solar date conversion
- Julian Day Number for the continuous day count
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import swisseph as swe
from korean_lunar_calendar import KoreanLunarCalendar

from saju import config
from saju.errors import CalendarConversionError, ComputationError, InputValidationError

logger = logging.getLogger(__name__)

# Point Swiss Ephemeris to data files when configured; otherwise the
# built-in Moshier ephemeris is accurate to well under a minute of solar
# term timing for the supported range.
if config.EPHE_PATH:
    swe.set_ephe_path(config.EPHE_PATH)
    EPHE_FLAGS = swe.FLG_SWIEPH
else:
    EPHE_FLAGS = swe.FLG_MOSEPH

# date.toordinal() counts 0001-01-01 as day 1; JDN of that day is 1721426.
_JDN_ORDINAL_OFFSET = 1721425


# ============================================================
# JULIAN DAYS
# ============================================================

def julian_day_number(d: date) -> int:
    """Integer Julian Day Number of a civil (proleptic Gregorian) date."""
    return d.toordinal() + _JDN_ORDINAL_OFFSET


def julian_day_ut(utc_dt: datetime) -> float:
    """Julian Day (UT) of a naive UTC datetime, via Swiss Ephemeris."""
    hour = utc_dt.hour + utc_dt.minute / 60.0 + utc_dt.second / 3600.0
    return swe.julday(utc_dt.year, utc_dt.month, utc_dt.day, hour)


# ============================================================
# SOLAR TERM COMPUTATION
# ============================================================
#
# The 12 Jie (節) solar terms mark Saju month boundaries.
# Each Jie is defined by the Sun reaching a specific ecliptic longitude;
# swe.solcross_ut() finds the exact crossing moment.
#
# 입춘 Li Chun (315°) is also the year boundary.

# (longitude, korean, hanja, branch_index)
JIE_DEFINITIONS = [
    (285, "소한", "小寒", 1),
    (315, "입춘", "立春", 2),
    (345, "경칩", "驚蟄", 3),
    (15, "청명", "淸明", 4),
    (45, "입하", "立夏", 5),
    (75, "망종", "芒種", 6),
    (105, "소서", "小暑", 7),
    (135, "입추", "立秋", 8),
    (165, "백로", "白露", 9),
    (195, "한로", "寒露", 10),
    (225, "입동", "立冬", 11),
    (255, "대설", "大雪", 0),
]

LI_CHUN_LONGITUDE = 315.0


def _solar_crossing(longitude: float, jd_start: float) -> float:
    try:
        return swe.solcross_ut(float(longitude), jd_start, EPHE_FLAGS)
    except swe.Error as exc:
        raise ComputationError(
            f"Solar crossing of {longitude}° failed: {exc}",
            {"longitude": longitude, "jd_start": jd_start},
        ) from exc


def sun_longitude(jd_ut: float) -> float:
    """Apparent ecliptic longitude of the Sun in degrees at a UT Julian Day."""
    try:
        result, _flag = swe.calc_ut(jd_ut, swe.SUN, EPHE_FLAGS)
    except swe.Error as exc:
        raise ComputationError(f"Sun position failed: {exc}", {"jd_ut": jd_ut}) from exc
    return result[0]


def li_chun_jd(year: int) -> float:
    """Julian Day (UT) when the Sun reaches 315° in the given Gregorian year."""
    return _solar_crossing(LI_CHUN_LONGITUDE, swe.julday(year, 1, 1, 0))


def solar_terms(year: int) -> list[dict]:
    """
    Compute all 12 Jie solar term moments for a Gregorian year.

    Args:
        year: Gregorian year

    Returns:
        List of dicts (chronological) with keys: korean, hanja, longitude,
        branch_index, jd, utc (naive datetime)
    """
    results = []
    jd_year_start = swe.julday(year, 1, 1, 0)

    for lon, korean, hanja, branch_idx in JIE_DEFINITIONS:
        jd_cross = _solar_crossing(lon, jd_year_start)
        y, m, d, h = swe.revjul(jd_cross)
        # Only include crossings that fall within this Gregorian year
        if y != year:
            continue
        results.append({
            "korean": korean,
            "hanja": hanja,
            "longitude": lon,
            "branch_index": branch_idx,
            "jd": jd_cross,
            "utc": datetime(y, m, d) + timedelta(hours=h),
        })

    results.sort(key=lambda x: x["jd"])
    return results


def sun_longitude_to_month_branch_index(sun_lon: float) -> int:
    """
    Map the Sun's ecliptic longitude to the month branch index.

      315° 입춘 → 寅 (2)   135° 입추 → 申 (8)
      345° 경칩 → 卯 (3)   165° 백로 → 酉 (9)
       15° 청명 → 辰 (4)   195° 한로 → 戌 (10)
       45° 입하 → 巳 (5)   225° 입동 → 亥 (11)
       75° 망종 → 午 (6)   255° 대설 → 子 (0)
      105° 소서 → 未 (7)   285° 소한 → 丑 (1)
    """
    adjusted = (sun_lon - LI_CHUN_LONGITUDE) % 360
    month_num = int(adjusted / 30)
    return (month_num + 2) % 12


# ============================================================
# CLOCK TIME CORRECTIONS
# ============================================================

def standard_time(local_dt: datetime, tz_name: str) -> tuple:
    """
    Strip daylight saving time from a local clock reading.

    Korea observed DST in 1948-1960 and 1987-1988; pillars are read from
    standard time, so the DST hour is removed before anything else.

    Args:
        local_dt: naive local clock datetime
        tz_name: IANA timezone name

    Returns:
        (standard_dt, standard_offset_hours, dst_minutes)
    """
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InputValidationError(f"Unknown timezone: {tz_name}") from exc

    aware = local_dt.replace(tzinfo=zone)
    utc_offset = aware.utcoffset() or timedelta(0)
    dst = aware.dst() or timedelta(0)

    standard_offset = (utc_offset - dst).total_seconds() / 3600
    dst_minutes = dst.total_seconds() / 60
    if dst_minutes:
        logger.debug("Stripping %.0f min DST from %s (%s)", dst_minutes, local_dt, tz_name)
    return local_dt - dst, standard_offset, dst_minutes


def lmt_correction(longitude: float, standard_meridian: float) -> float:
    """
    Local Mean Time correction in minutes.

    Korea keeps clocks on 135°E while Seoul sits near 127°E, so clock
    noon runs about half an hour ahead of the Sun.

    Args:
        longitude: birth location longitude in degrees (east positive)
        standard_meridian: timezone standard meridian (135.0 for KST)

    Returns:
        Correction in minutes (negative = subtract from clock time)

    Example:
        Seoul (126.98°E): correction = (126.98 - 135.0) * 4 = -32.08 min
    """
    return (longitude - standard_meridian) * 4.0


# ============================================================
# LUNAR CALENDAR
# ============================================================

def lunar_to_solar(year: int, month: int, day: int, is_leap_month: bool = False) -> date:
    """
    Convert a Korean lunar date to the solar (Gregorian) date.

    Raises:
        CalendarConversionError: the lunar date does not exist (bad day,
            leap flag on a month that has no leap, or outside the table)
    """
    calendar = KoreanLunarCalendar()
    if not calendar.setLunarDate(year, month, day, is_leap_month):
        leap = " (leap month)" if is_leap_month else ""
        raise CalendarConversionError(
            f"Invalid lunar date {year:04d}-{month:02d}-{day:02d}{leap}"
        )
    return date(calendar.solarYear, calendar.solarMonth, calendar.solarDay)


def solar_to_lunar(d: date) -> Optional[dict]:
    """
    Lunar equivalent of a solar date, for display.

    Returns None when the date is outside the lunar table.
    """
    calendar = KoreanLunarCalendar()
    if not calendar.setSolarDate(d.year, d.month, d.day):
        return None
    return {
        "year": calendar.lunarYear,
        "month": calendar.lunarMonth,
        "day": calendar.lunarDay,
        "is_leap_month": bool(calendar.isIntercalation),
    }
