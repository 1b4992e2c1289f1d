"""
CLI wrapper for build_report() and compare().

Usage:
    python -m saju.run --birth-date YYYY-MM-DD [--birth-time HH:MM] \
        [--calendar solar|lunar] [--leap-month] [--gender male|female] \
        [--longitude LON] [--timezone TZ] [--year YEAR]

    python -m saju.run --birth-date ... --partner-birth-date YYYY-MM-DD \
        [--partner-birth-time HH:MM] [--partner-calendar solar|lunar] \
        [--relationship romantic|friend|colleague|family] [--year YEAR]
"""

import argparse
import json
import logging
import sys

from saju import config
from saju.compatibility import Relationship
from saju.errors import ComputationError, SajuError
from saju.hapchung import annual_interactions, monthly_risk_timing
from saju.pillars import BirthInput
from saju.report import build_report, compare

logger = logging.getLogger(__name__)


def _add_person_args(parser, prefix: str = "", required: bool = True):
    dash = f"--{prefix}" if prefix else "--"
    dest = f"{prefix.replace('-', '_')}" if prefix else ""
    parser.add_argument(f"{dash}birth-date", dest=f"{dest}birth_date", required=required)
    parser.add_argument(f"{dash}birth-time", dest=f"{dest}birth_time", default=None)
    parser.add_argument(f"{dash}calendar", dest=f"{dest}calendar", default="solar",
                        choices=["solar", "lunar"])
    parser.add_argument(f"{dash}leap-month", dest=f"{dest}leap_month", action="store_true")
    parser.add_argument(f"{dash}gender", dest=f"{dest}gender", default=None,
                        choices=["male", "female"])
    parser.add_argument(f"{dash}longitude", dest=f"{dest}longitude", type=float, default=None)
    parser.add_argument(f"{dash}timezone", dest=f"{dest}timezone",
                        default=config.DEFAULT_TIMEZONE)


def _birth_from_args(args, prefix: str = "") -> BirthInput:
    return BirthInput.from_strings(
        getattr(args, prefix + "birth_date"),
        getattr(args, prefix + "birth_time"),
        calendar=getattr(args, prefix + "calendar"),
        is_leap_month=getattr(args, prefix + "leap_month"),
        gender=getattr(args, prefix + "gender"),
        longitude=getattr(args, prefix + "longitude"),
        timezone=getattr(args, prefix + "timezone"),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a Four Pillars (Saju) report.")
    _add_person_args(parser)
    _add_person_args(parser, prefix="partner-", required=False)
    parser.add_argument("--relationship", default=Relationship.ROMANTIC.value,
                        choices=[r.value for r in Relationship])
    parser.add_argument("--year", type=int, default=None,
                        help="target year for monthly and annual projections")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    birth = partner = None
    try:
        birth = _birth_from_args(args)
        if args.partner_birth_date:
            partner = _birth_from_args(args, prefix="partner_")
            result = compare(birth, partner, Relationship(args.relationship), args.year)
            output = result.to_dict()
        else:
            report = build_report(birth)
            output = report.to_dict()
            if args.year is not None:
                output["annual"] = annual_interactions(report.chart, args.year).to_dict()
                output["risk_timing"] = monthly_risk_timing(report.chart).to_dict()
    except ComputationError as exc:
        logger.exception("Chart computation failed for %s (partner %s); context: %s",
                         birth, partner, exc.context)
        print("Error: internal calculation failure", file=sys.stderr)
        return 1
    except SajuError as exc:
        logger.debug("Request failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
