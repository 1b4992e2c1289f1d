"""
Engine configuration.

Every setting is a module-level constant with an environment override,
read once at import time. The engine never reads files for configuration.

    SAJU_EPHE_PATH          directory with Swiss Ephemeris .se1 files
                            (unset = built-in Moshier ephemeris)
    SAJU_TIMEZONE           default IANA zone for birth times
    SAJU_MIN_YEAR           earliest supported solar birth year
    SAJU_MAX_YEAR           latest supported solar birth year
    SAJU_PLACEHOLDER_HOUR   hour used when the birth time is unknown
    SAJU_LOG_LEVEL          log level used by the CLI
"""

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


EPHE_PATH = os.getenv("SAJU_EPHE_PATH") or None
DEFAULT_TIMEZONE = os.getenv("SAJU_TIMEZONE", "Asia/Seoul")

MIN_YEAR = _int_env("SAJU_MIN_YEAR", 1900)
MAX_YEAR = _int_env("SAJU_MAX_YEAR", 2100)

# 12:00 falls in the Wu (午) slot, the midpoint of the day.
PLACEHOLDER_HOUR = _int_env("SAJU_PLACEHOLDER_HOUR", 12)

LOG_LEVEL = os.getenv("SAJU_LOG_LEVEL", "WARNING").upper()

# Version of the serialized report shape (SajuReport.to_dict).
SCHEMA_VERSION = "1.0"
