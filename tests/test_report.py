"""
Tests for the Report Pipeline and CLI
"""

import json
import logging

import pytest

from saju import astro_calendar
from saju import report as report_module
from saju.compatibility import Grade, Relationship
from saju.errors import InputValidationError
from saju.hapchung import HarmonyLevel
from saju.pillars import BirthInput
from saju.report import SajuReport, build_report, compare
from saju.run import main
from saju.sinsal import EMPTY_SINSAL
from saju.sipsin import SipsinCategory
from saju.symbols import Element


@pytest.fixture(scope="module")
def golden_report():
    return build_report(BirthInput(1990, 5, 15, 14, 0, gender="male"))


class TestBuildReport:
    """Every analysis runs on the one computed chart."""

    def test_sections(self, golden_report):
        assert golden_report.chart.label == "庚午 辛巳 庚辰 癸未"
        assert golden_report.elements.yongsin is Element.WOOD
        assert golden_report.sipsin.dominant_category is SipsinCategory.PEER
        assert len(golden_report.sinsal.matches) == 4
        assert golden_report.hapchung.level is HarmonyLevel.HARMONIOUS
        assert golden_report.unsung.average_energy == pytest.approx(6.3)
        assert golden_report.ideal_type.ideal_element is Element.WOOD
        assert golden_report.degraded == ()

    def test_to_dict(self, golden_report):
        data = golden_report.to_dict()
        assert data["schema_version"] == "1.0"
        assert data["lunar_date"]["month"] == 4
        assert set(data["hidden_stem_distribution"]) == {e.value for e in Element}
        assert data["degraded"] == []

    def test_round_trip(self, golden_report):
        data = golden_report.to_dict()
        restored = SajuReport.from_dict(data)
        assert restored.to_dict() == data

    @pytest.mark.parametrize("version", ["2.0", "0.9", ""])
    def test_rejects_other_major_versions(self, golden_report, version):
        data = golden_report.to_dict()
        data["schema_version"] = version
        with pytest.raises(InputValidationError):
            SajuReport.from_dict(data)

    def test_accepts_minor_version(self, golden_report):
        data = golden_report.to_dict()
        data["schema_version"] = "1.3"
        assert SajuReport.from_dict(data).chart.label == golden_report.chart.label

    def test_invalid_input_propagates(self):
        with pytest.raises(InputValidationError):
            build_report(BirthInput(1990, 2, 30))


class TestDegradation:
    """Optional analyses fail soft."""

    def test_failing_analysis_is_replaced(self, monkeypatch, caplog):
        def boom(chart):
            raise RuntimeError("boom")

        monkeypatch.setitem(report_module.OPTIONAL_ANALYSES, "sinsal", (boom, EMPTY_SINSAL))
        with caplog.at_level(logging.ERROR, logger="saju.report"):
            result = build_report(BirthInput(1990, 5, 15, 14, 0))

        assert result.sinsal is EMPTY_SINSAL
        assert result.degraded == ("sinsal",)
        assert result.hapchung.harmony_score == 80
        assert "sinsal analysis failed" in caplog.text
        assert "庚午 辛巳 庚辰 癸未" in caplog.text

    def test_degraded_listed_in_output(self, monkeypatch):
        def boom(chart):
            raise KeyError("missing table entry")

        monkeypatch.setitem(report_module.OPTIONAL_ANALYSES, "unsung",
                            (boom, report_module.EMPTY_UNSUNG))
        data = build_report(BirthInput(1990, 5, 15, 14, 0)).to_dict()
        assert data["degraded"] == ["unsung"]
        assert data["unsung"]["positions"] == []


class TestCompare:
    """Two births through the whole pipeline."""

    def test_self_comparison(self):
        birth = BirthInput(1990, 5, 15, 14, 0)
        result = compare(birth, birth)
        assert result.total == 55
        assert result.grade is Grade.D

    def test_identical_births_share_one_report(self, monkeypatch):
        calls = []
        original = report_module.build_report

        def counting(birth):
            calls.append(birth)
            return original(birth)

        monkeypatch.setattr(report_module, "build_report", counting)
        birth = BirthInput(1990, 5, 15, 14, 0)
        compare(birth, birth, Relationship.FRIEND, 2026)
        assert len(calls) == 1

    def test_with_year(self):
        result = compare(BirthInput(1990, 5, 15, 14, 0), BirthInput(1992, 8, 3),
                         Relationship.COLLEAGUE, 2026)
        assert len(result.monthly) == 12
        assert result.relationship is Relationship.COLLEAGUE


class TestCli:
    """python -m saju.run"""

    def test_report(self, capsys):
        assert main(["--birth-date", "1990-05-15", "--birth-time", "14:00"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["chart"]["label"] == "庚午 辛巳 庚辰 癸未"
        assert "annual" not in data

    def test_report_with_year(self, capsys):
        assert main(["--birth-date", "1990-05-15", "--birth-time", "14:00",
                     "--year", "2026"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["annual"]["pillar"] == "丙午"
        assert [m["month"] for m in data["risk_timing"]["risk_months"]] == [12, 9]

    def test_compatibility(self, capsys):
        argv = ["--birth-date", "1990-05-15", "--birth-time", "14:00",
                "--partner-birth-date", "1990-05-15", "--partner-birth-time", "14:00",
                "--relationship", "romantic", "--year", "2026"]
        assert main(argv) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total"] == 55
        assert data["monthly"][0]["score"] == 92

    def test_invalid_input(self, capsys):
        assert main(["--birth-date", "1990-13-01"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_computation_error_is_generic_and_logged(self, monkeypatch, capsys, caplog):
        def failing(*args, **kwargs):
            raise astro_calendar.swe.Error("ephemeris file sepl_18.se1 not found in /data/ephe")

        monkeypatch.setattr(astro_calendar.swe, "solcross_ut", failing)
        with caplog.at_level(logging.ERROR, logger="saju.run"):
            rc = main(["--birth-date", "1990-05-15", "--birth-time", "14:00"])

        err = capsys.readouterr().err
        assert rc == 1
        assert [line for line in err.splitlines() if line.startswith("Error:")] == [
            "Error: internal calculation failure"]
        records = [r for r in caplog.records if r.name == "saju.run"]
        assert records and records[0].levelno == logging.ERROR
        assert records[0].exc_info is not None
        assert "1990" in records[0].getMessage()
        assert "longitude" in records[0].getMessage()
