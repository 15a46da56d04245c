"""
Tests for the end-to-end report pipeline.
"""

from unittest.mock import patch

import pytest

from errors import FetchError, SchemaError
from run import build_report, write_report, render_html, main


def test_build_report_sections(raw_yearly):
    report = build_report(raw_yearly)

    assert report.rows == len(raw_yearly)
    assert report.missing_cells == 0
    assert report.undated_rows == 0
    assert len(report.preview) == 10
    assert list(report.charts) == ["borough", "year", "year_borough", "victim_race", "perp_race"]
    assert [c.kind for c in report.charts.values()] == ["bar", "line", "line", "bar", "bar"]
    assert list(report.fits) == ["trend", "trend_by_borough"]
    assert report.overlay.kind == "overlay"
    assert len(report.overlay.line) == 10


@patch("run.fetch_incidents")
def test_build_report_fetches_by_default(mock_fetch, raw_yearly):
    mock_fetch.return_value = raw_yearly

    report = build_report()

    mock_fetch.assert_called_once()
    assert report.rows == len(raw_yearly)


def test_build_report_stops_on_schema_error(raw_yearly):
    with pytest.raises(SchemaError):
        build_report(raw_yearly.drop(columns=["LOCATION_DESC"]))


def test_render_html_order(raw_yearly):
    page = render_html(build_report(raw_yearly))

    assert page.index("Missing cells after cleaning") < page.index("Shooting Incidents by Borough")
    assert page.index("Shooting Incidents by Perpetrator Race") < page.index("count ~ year + C(borough)")
    assert page.index("count ~ year + C(borough)") < page.index("Incidents per Year with OLS Fit")


def test_write_report(tmp_path, raw_yearly):
    path = write_report(build_report(raw_yearly), tmp_path)

    assert path == tmp_path / "report.html"
    names = {p.name for p in tmp_path.iterdir()}
    assert {"counts_borough.csv", "counts_year_borough.csv",
            "chart_perp_race.png", "chart_trend_fit.png",
            "ols_trend.txt", "ols_trend_by_borough.txt"} <= names


@patch("run.write_report")
@patch("run.fetch_incidents")
def test_main_reports_failed_stage(mock_fetch, mock_write, caplog):
    mock_fetch.side_effect = FetchError("HTTP 503 while fetching")

    assert main() == 1
    assert "stage 'load'" in caplog.text
    mock_write.assert_not_called()


@patch("run.save_png")
def test_write_report_leaves_nothing_on_failure(mock_save, tmp_path, raw_yearly):
    """A failure while rendering charts writes no report files at all."""
    mock_save.side_effect = OSError("disk full")
    out_dir = tmp_path / "reports"

    with pytest.raises(OSError):
        write_report(build_report(raw_yearly), out_dir)

    assert not out_dir.exists()
    assert list(tmp_path.iterdir()) == []
