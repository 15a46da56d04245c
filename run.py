# ============================================================
# NYPD Shooting Incidents: report pipeline
# Steps:   load -> clean -> counts -> charts -> OLS trend models
# Charts:  borough, year, year x borough, victim race, perp race
# Models:  count ~ year, count ~ year + C(borough) (+ fitted-line overlay)
# Outputs: ./reports/report.html, *.png, *.csv, *.txt
# ============================================================

import html
import logging
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from analysis import (count_by, fit_trend, fit_trend_by_borough, fitted_line,
                      summarize_fit, FitSummary)
from charts import Chart, ChartConfig, to_plotly, save_png
from config import DATA_URL, REPORTS_DIR, PREVIEW_ROWS
from errors import ReportError
from load_clean import fetch_incidents, clean_incidents, count_missing, count_undated

logger = logging.getLogger(__name__)

# name -> (dimensions, chart kind, bar dimension, config); report order
BREAKDOWNS = {
    "borough": (("borough",), "bar", "borough",
                ChartConfig("Shooting Incidents by Borough", "Borough")),
    "year": (("year",), "line", None,
             ChartConfig("Shooting Incidents per Year", "Year")),
    "year_borough": (("year", "borough"), "line", None,
                     ChartConfig("Shooting Incidents per Year by Borough", "Year",
                                 color_by="borough")),
    "victim_race": (("victim_race",), "bar", "victim_race",
                    ChartConfig("Shooting Incidents by Victim Race", "Victim Race")),
    "perp_race": (("perp_race",), "bar", "perp_race",
                  ChartConfig("Shooting Incidents by Perpetrator Race", "Perpetrator Race")),
}

OVERLAY_CONFIG = ChartConfig("Incidents per Year with OLS Fit", "Year")


@dataclass
class Report:
    preview: pd.DataFrame
    rows: int
    missing_cells: int
    undated_rows: int
    tables: Dict[str, pd.DataFrame] = field(default_factory=dict)
    charts: Dict[str, Chart] = field(default_factory=dict)
    fits: Dict[str, FitSummary] = field(default_factory=dict)
    overlay: Optional[Chart] = None


def build_report(raw: Optional[pd.DataFrame] = None, url: str = DATA_URL) -> Report:
    """Run the whole pipeline once. Any ReportError aborts it."""
    if raw is None:
        raw = fetch_incidents(url)
    df = clean_incidents(raw)

    report = Report(preview=df.head(PREVIEW_ROWS),
                    rows=len(df),
                    missing_cells=count_missing(df),
                    undated_rows=count_undated(df))
    logger.info("Cleaned %d rows; %d missing cells, %d undated rows",
                report.rows, report.missing_cells, report.undated_rows)
    if report.missing_cells:
        logger.warning("Cleaned table still has %d missing cells", report.missing_cells)

    for name, (dims, kind, dimension, cfg) in BREAKDOWNS.items():
        table = count_by(df, *dims)
        report.tables[name] = table
        report.charts[name] = Chart(kind, table, cfg, dimension=dimension)

    trend = fit_trend(report.tables["year"])
    by_borough = fit_trend_by_borough(report.tables["year_borough"])
    report.fits["trend"] = summarize_fit(trend)
    report.fits["trend_by_borough"] = summarize_fit(by_borough)

    year_counts = report.tables["year"]
    report.overlay = Chart("overlay", year_counts, OVERLAY_CONFIG,
                           line=fitted_line(trend, year_counts["year"]))
    return report


def _fit_section(fit: FitSummary) -> str:
    stats = (f"R&sup2;={fit.r_squared:.3f}, adj. R&sup2;={fit.adj_r_squared:.3f}, "
             f"F={fit.f_statistic:.2f} (p={fit.f_pvalue:.3g}), n={fit.nobs}")
    return (f"<h3>{html.escape(fit.formula)}</h3><p>{stats}</p>"
            f"{fit.coefficients.to_html(float_format=lambda v: f'{v:.4g}')}"
            f"<pre>{html.escape(fit.text)}</pre>")


def render_html(report: Report) -> str:
    parts = ["<html><head><meta charset='utf-8'><title>NYPD Shooting Incidents</title></head><body>",
             "<h1>NYPD Shooting Incidents</h1>",
             f"<h2>Cleaned data (first {len(report.preview)} of {report.rows} rows)</h2>",
             report.preview.to_html(index=False),
             f"<p>Missing cells after cleaning: <b>{report.missing_cells}</b> (expected 0). "
             f"Undated rows excluded from yearly counts: {report.undated_rows}.</p>",
             "<h2>Breakdowns</h2>"]
    include_js = "cdn"
    for chart in report.charts.values():
        parts.append(to_plotly(chart).to_html(full_html=False, include_plotlyjs=include_js))
        include_js = False
    parts.append("<h2>Trend models</h2>")
    for fit in report.fits.values():
        parts.append(_fit_section(fit))
    parts.append(to_plotly(report.overlay).to_html(full_html=False, include_plotlyjs=False))
    parts.append("</body></html>")
    return "\n".join(parts)


def write_report(report: Report, out_dir: Path = REPORTS_DIR) -> Path:
    """Render every artifact into a staging dir; out_dir only receives a complete set."""
    out_dir = Path(out_dir)
    out_dir.parent.mkdir(parents=True, exist_ok=True)
    page = render_html(report)

    with tempfile.TemporaryDirectory(dir=out_dir.parent, prefix=".staging-") as tmp:
        staging = Path(tmp)
        for name, table in report.tables.items():
            table.to_csv(staging / f"counts_{name}.csv", index=False)
        for name, chart in report.charts.items():
            save_png(chart, staging / f"chart_{name}.png")
        save_png(report.overlay, staging / "chart_trend_fit.png")
        for name, fit in report.fits.items():
            (staging / f"ols_{name}.txt").write_text(fit.text, encoding="utf-8")
        (staging / "report.html").write_text(page, encoding="utf-8")

        out_dir.mkdir(exist_ok=True)
        for p in staging.iterdir():
            p.replace(out_dir / p.name)

    return out_dir / "report.html"


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        path = write_report(build_report())
    except ReportError as e:
        logger.error("Report generation halted at stage %r: %s", e.stage, e)
        return 1

    print(f"\nDone. Files written to {path.parent.resolve()}")
    for p in sorted(path.parent.glob("*")):
        print("-", p.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
