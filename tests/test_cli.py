"""Tests for the orgcal command line."""

import json

import pytest
from click.testing import CliRunner

from orgcal.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def conf(tmp_path):
    path = tmp_path / "orgcal.conf"
    path.write_text("timezone = UTC\ncombined_name = Agenda\n")
    return path


@pytest.fixture
def outline(tmp_path):
    path = tmp_path / "work.json"
    path.write_text(
        json.dumps(
            {
                "name": "work.org",
                "entries": [{"begin": 1, "title": ["Standup ", {"type": "timestamp", "start": "2024-03-01T09:00"}]}],
            }
        )
    )
    return path


class TestExport:
    def test_prints_calendar(self, runner, conf, outline):
        result = runner.invoke(main, ["--config", str(conf), "export", str(outline)])
        assert result.exit_code == 0
        assert result.output.startswith("BEGIN:VCALENDAR\n")
        assert "X-WR-CALNAME:work" in result.output
        assert "DTSTART:20240301T090000Z" in result.output
        assert result.output.endswith("END:VCALENDAR\n")

    def test_writes_file(self, runner, conf, outline, tmp_path):
        output = tmp_path / "work.ics"
        result = runner.invoke(main, ["--config", str(conf), "export", str(outline), "-o", str(output)])
        assert result.exit_code == 0
        assert f"Wrote {output}" in result.output
        assert "SUMMARY:Standup" in output.read_text()

    def test_malformed_outline(self, runner, conf, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        result = runner.invoke(main, ["--config", str(conf), "export", str(bad)])
        assert result.exit_code == 1
        assert "Error: Malformed outline" in result.output

    def test_missing_file_rejected(self, runner, conf, tmp_path):
        result = runner.invoke(main, ["--config", str(conf), "export", str(tmp_path / "none.json")])
        assert result.exit_code == 2


class TestCombine:
    def test_combines(self, runner, conf, outline):
        result = runner.invoke(main, ["--config", str(conf), "combine", str(outline), str(outline), "--jobs", "2"])
        assert result.exit_code == 0
        assert "X-WR-CALNAME:Agenda" in result.output
        assert result.output.count("BEGIN:VEVENT") == 2

    def test_restrict(self, runner, conf, outline, tmp_path):
        restrict = tmp_path / "restrict.json"
        restrict.write_text(json.dumps({"work.org": []}))
        result = runner.invoke(main, ["--config", str(conf), "combine", str(outline), "--restrict", str(restrict)])
        assert result.exit_code == 0
        assert "BEGIN:VEVENT" not in result.output

    def test_bad_restriction(self, runner, conf, outline, tmp_path):
        restrict = tmp_path / "restrict.json"
        restrict.write_text("[]")
        result = runner.invoke(main, ["--config", str(conf), "combine", str(outline), "--restrict", str(restrict)])
        assert result.exit_code == 1
        assert "Error: Malformed restriction" in result.output

    def test_requires_files(self, runner, conf):
        result = runner.invoke(main, ["--config", str(conf), "combine"])
        assert result.exit_code == 2
