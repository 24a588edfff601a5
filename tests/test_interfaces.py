"""
Tests for the CLI, the REST API and the MCP server.
"""

import asyncio
import json
import os

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from business_calendar.api import app
from business_calendar.cli import main
from business_calendar.core.loader import CalendarLoader
from business_calendar.core.service import CalendarService
from business_calendar.mcp_server import create_mcp_server, holiday_listing


@pytest.fixture
def runner():
    """Create a click CliRunner."""
    return CliRunner()


@pytest.fixture
def client():
    """Create a FastAPI TestClient."""
    return TestClient(app)


class TestCli:
    """Tests for the business-calendar command line."""

    def test_check(self, runner):
        result = runner.invoke(main, ["check", "2020-12-25"])

        assert result.exit_code == 0
        assert "2020-12-29" in result.output
        assert "2020-12-24" in result.output

    def test_check_ordinal_date(self, runner):
        result = runner.invoke(main, ["check", "December 25th, 2020"])
        assert result.exit_code == 0

    def test_check_writes_json(self, runner, tmp_path):
        output = tmp_path / "check.json"
        result = runner.invoke(main, ["check", "25.12.2020", "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["is_holiday"] is True

    def test_roll(self, runner):
        forward = runner.invoke(main, ["roll", "2020-01-01"])
        backward = runner.invoke(main, ["roll", "2020-01-01", "--backward"])

        assert "2020-01-02" in forward.output
        assert "2019-12-31" in backward.output

    def test_next_and_previous(self, runner):
        assert "2020-06-24" in runner.invoke(main, ["next", "2020-06-23"]).output
        assert "2020-06-22" in runner.invoke(main, ["previous", "2020-06-23"]).output

    def test_add(self, runner):
        result = runner.invoke(main, ["add", "2020-12-26", "6"])

        assert result.exit_code == 0
        assert "2021-01-07" in result.output

    def test_add_negative(self, runner):
        result = runner.invoke(main, ["add", "2020-06-23", "--", "-7"])

        assert result.exit_code == 0
        assert "2020-06-12" in result.output

    def test_between_json(self, runner, tmp_path):
        output = tmp_path / "between.json"
        result = runner.invoke(
            main, ["between", "2014-06-05", "2014-06-02", "--format", "json", "--output", str(output)]
        )

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["business_days"] == -3

    def test_business_day(self, runner):
        result = runner.invoke(main, ["business-day", "2020-04-10"])

        assert result.exit_code == 0
        assert "7" in result.output

    def test_holidays(self, runner, tmp_path):
        output = tmp_path / "holidays.csv"
        result = runner.invoke(main, ["holidays", "--year", "2020", "--output", str(output)])

        assert result.exit_code == 0
        assert "2020-12-28" in result.output
        assert output.read_text(encoding="utf-8").count("2020-") == 8

    def test_holidays_year_out_of_range(self, runner):
        result = runner.invoke(main, ["holidays", "--year", "0"])

        assert result.exit_code == 2
        assert "--year" in result.output

    def test_serve_uses_group_config(self, runner, tmp_path, monkeypatch):
        import uvicorn

        path = tmp_path / "settings.yaml"
        path.write_text("api:\n  host: 127.0.0.1\n  port: 9123\n", encoding="utf-8")
        monkeypatch.setenv("BUSINESS_CALENDAR_CONFIG", "")
        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        result = runner.invoke(main, ["-c", str(path), "serve"])

        assert result.exit_code == 0
        assert calls[0][1]["host"] == "127.0.0.1"
        assert calls[0][1]["port"] == 9123
        assert os.environ["BUSINESS_CALENDAR_CONFIG"] == str(path)

    def test_serve_options_override_config(self, runner, monkeypatch):
        import uvicorn

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

        result = runner.invoke(main, ["serve", "--port", "8765"])

        assert result.exit_code == 0
        assert calls[0]["port"] == 8765

    def test_calendars(self, runner):
        result = runner.invoke(main, ["calendars"])

        assert result.exit_code == 0
        assert "bacs" in result.output
        assert "target" in result.output

    def test_other_calendar(self, runner):
        # Dec 28 2020 is a BACS holiday but a TARGET business day
        result = runner.invoke(main, ["--calendar", "target", "roll", "2020-12-28"])
        assert "2020-12-28" in result.output

    def test_calendar_file(self, runner, tmp_path):
        path = tmp_path / "mondays.yml"
        path.write_text("working_days: [monday]\nholidays: []\n", encoding="utf-8")

        result = runner.invoke(main, ["--calendar-file", str(path), "next", "2020-06-22"])

        assert result.exit_code == 0
        assert "2020-06-29" in result.output

    def test_unknown_calendar(self, runner):
        result = runner.invoke(main, ["--calendar", "nope", "check", "2020-01-01"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_date(self, runner):
        result = runner.invoke(main, ["check", "someday"])
        assert result.exit_code == 2


class TestApi:
    """Tests for the FastAPI endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_calendars(self, client):
        response = client.get("/calendars")

        assert response.status_code == 200
        assert "bacs" in response.json()

    def test_describe_calendar(self, client):
        data = client.get("/calendars/bacs").json()

        assert data["name"] == "bacs"
        assert "monday" in data["working_days"]
        assert "2020-12-25" in data["holidays"]

    def test_check(self, client):
        response = client.get("/calendars/bacs/check", params={"date": "2020-12-25"})
        data = response.json()

        assert response.status_code == 200
        assert data["is_holiday"] is True
        assert data["is_business_day"] is False
        assert data["next_business_day"] == "2020-12-29"

    def test_roll(self, client):
        forward = client.get("/calendars/bacs/roll", params={"date": "2020-01-01"}).json()
        backward = client.get(
            "/calendars/bacs/roll", params={"date": "2020-01-01", "direction": "backward"}
        ).json()

        assert forward["result_date"] == "2020-01-02"
        assert backward["result_date"] == "2019-12-31"

    def test_next_and_previous(self, client):
        following = client.get("/calendars/bacs/next", params={"date": "2020-12-24"}).json()
        preceding = client.get("/calendars/bacs/previous", params={"date": "2020-12-29"}).json()

        assert following["result_date"] == "2020-12-29"
        assert preceding["result_date"] == "2020-12-24"

    def test_add(self, client):
        response = client.get("/calendars/bacs/add", params={"date": "2020-12-26", "delta": 6})

        assert response.status_code == 200
        assert response.json()["result_date"] == "2021-01-07"
        assert response.json()["weekday"] == "thursday"

    def test_between(self, client):
        response = client.get(
            "/calendars/bacs/between", params={"start": "2014-06-05", "end": "2014-06-02"}
        )

        assert response.status_code == 200
        assert response.json()["business_days"] == -3

    def test_unknown_calendar(self, client):
        response = client.get("/calendars/nope/check", params={"date": "2020-01-01"})
        assert response.status_code == 404

    def test_invalid_date(self, client):
        response = client.get("/calendars/bacs/check", params={"date": "someday"})
        assert response.status_code == 422


class TestMcpServer:
    """Tests for the MCP server setup."""

    def test_tools_are_registered(self):
        server = create_mcp_server()
        tools = asyncio.run(server.list_tools())

        assert {tool.name for tool in tools} == {
            "check_date",
            "add_business_days",
            "business_days_between",
            "list_holidays",
            "list_calendars",
        }

    def test_list_holidays_for_year(self):
        result = holiday_listing(CalendarService(CalendarLoader()), "bacs", 2020)

        assert result["holiday_count"] == 8
        assert result["holidays"][0] == {"date": "2020-01-01", "weekday": "wednesday"}

    @pytest.mark.parametrize("year", [0, -1, 10000])
    def test_list_holidays_year_out_of_range(self, year):
        result = holiday_listing(CalendarService(CalendarLoader()), "bacs", year)
        assert result == {"error": "Year must be between 1 and 9999"}

    def test_list_holidays_unknown_calendar(self):
        result = holiday_listing(CalendarService(CalendarLoader()), "nope", None)
        assert "error" in result
