# charts.py
# Bar / line / fitted-line charts from count tables.
# Every option comes from a ChartConfig; nothing reads or sets global styling.

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from matplotlib.figure import Figure

from config import TEMPLATE, ORANGE, BLACK, PNG_DPI


@dataclass(frozen=True)
class ChartConfig:
    title: str
    x_label: str
    y_label: str = "Incidents"
    color_by: Optional[str] = None   # one series per distinct value
    template: str = TEMPLATE
    color: str = ORANGE
    line_color: str = BLACK


@dataclass
class Chart:
    """A count table plus how to draw it; rendered by to_plotly() or save_png()."""
    kind: str                        # "bar", "line" or "overlay"
    table: pd.DataFrame
    config: ChartConfig
    dimension: Optional[str] = None  # bar charts only
    line: Optional[pd.DataFrame] = None  # overlay only: year, fitted


# ---------- plotly ----------
def bar_chart(table: pd.DataFrame, dimension: str, config: ChartConfig) -> go.Figure:
    t = table.sort_values("count", ascending=False)
    fig = px.bar(t, x=dimension, y="count",
                 color=config.color_by,
                 color_discrete_sequence=[config.color] if config.color_by is None else None,
                 template=config.template,
                 title=config.title,
                 labels={dimension: config.x_label, "count": config.y_label})
    return fig


def line_chart(table: pd.DataFrame, config: ChartConfig) -> go.Figure:
    fig = px.line(table, x="year", y="count", color=config.color_by, markers=True,
                  color_discrete_sequence=[config.color] if config.color_by is None else None,
                  template=config.template,
                  title=config.title,
                  labels={"year": config.x_label, "count": config.y_label})
    return fig


def fit_overlay_chart(table: pd.DataFrame, line: pd.DataFrame, config: ChartConfig) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=table["year"], y=table["count"], mode="markers",
                             name="Observed", marker=dict(color=config.color, size=9)))
    fig.add_trace(go.Scatter(x=line["year"], y=line["fitted"], mode="lines",
                             name="Fitted", line=dict(color=config.line_color, width=2)))
    fig.update_layout(template=config.template, title=config.title,
                      xaxis_title=config.x_label, yaxis_title=config.y_label)
    return fig


def to_plotly(chart: Chart) -> go.Figure:
    if chart.kind == "bar":
        return bar_chart(chart.table, chart.dimension, chart.config)
    if chart.kind == "line":
        return line_chart(chart.table, chart.config)
    if chart.kind == "overlay":
        return fit_overlay_chart(chart.table, chart.line, chart.config)
    raise ValueError(f"Unknown chart kind: {chart.kind!r}")


# ---------- matplotlib (static PNGs) ----------
def save_png(chart: Chart, path: Path, dpi: int = PNG_DPI) -> Path:
    cfg, t = chart.config, chart.table
    fig = Figure(figsize=(8, 5))
    ax = fig.subplots()

    if chart.kind == "bar":
        t = t.sort_values("count", ascending=False)
        ax.bar(t[chart.dimension].astype(str), t["count"], color=cfg.color)
        ax.tick_params(axis="x", labelrotation=45)
    elif chart.kind == "line":
        if cfg.color_by:
            for key, g in t.groupby(cfg.color_by):
                ax.plot(g["year"], g["count"], marker="o", label=str(key))
            ax.legend(title=cfg.color_by)
        else:
            ax.plot(t["year"], t["count"], marker="o", color=cfg.color)
    elif chart.kind == "overlay":
        ax.scatter(t["year"], t["count"], color=cfg.color, label="Observed")
        ax.plot(chart.line["year"], chart.line["fitted"], color=cfg.line_color, label="Fitted")
        ax.legend()
    else:
        raise ValueError(f"Unknown chart kind: {chart.kind!r}")

    ax.set_title(cfg.title)
    ax.set_xlabel(cfg.x_label)
    ax.set_ylabel(cfg.y_label)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    return Path(path)
