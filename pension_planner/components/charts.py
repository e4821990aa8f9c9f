# components/charts.py
# Plotly chart helpers for projections, simulations and strategy grids.
# All functions return a Plotly Figure; callers decide how to display it.

from typing import List, Sequence

import plotly.graph_objects as go
import plotly.io as pio

from ..models import MonteCarloResult, OptimizationResult, ProjectionYear
from .insights import SUCCESS_BANDS, success_band

pio.templates.default = "plotly_white"

_LAYOUT = dict(
    template="plotly_white",
    margin=dict(l=10, r=10, t=40, b=10),
    legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
)


# ---------- Projected income (stacked) ----------
def projection_chart(years: Sequence[ProjectionYear],
                     title: str = "Projected Annual Income") -> go.Figure:
    """Pension (with COLA) and Social Security stacked by age."""
    ages = [y.age for y in years]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=ages, y=[float(y.total_pension_annual) for y in years],
        mode="lines", name="Pension", stackgroup="one",
        hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
    ))
    fig.add_trace(go.Scatter(
        x=ages, y=[float(y.social_security_annual) for y in years],
        mode="lines", name="Social Security", stackgroup="one",
        hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
    ))
    fig.update_layout(title=title, height=380, xaxis_title="Age",
                      yaxis_title="Dollars (nominal)", **_LAYOUT)
    return fig


# ---------- Monte Carlo income "fan" ----------
def fan_chart(result: MonteCarloResult,
              title: str = "Simulated Net Income (Percentile Fan)") -> go.Figure:
    """Shaded 10–90 band with a median line."""
    ages = [p.age for p in result.yearly_projections]
    p10 = [p.p10_income for p in result.yearly_projections]
    p50 = [p.median_income for p in result.yearly_projections]
    p90 = [p.p90_income for p in result.yearly_projections]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=ages, y=p90, mode="lines", line=dict(width=0),
        hoverinfo="skip", showlegend=False
    ))
    fig.add_trace(go.Scatter(
        x=ages, y=p10, mode="lines", line=dict(width=0),
        fill="tonexty", name="10–90%",
        hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
    ))
    fig.add_trace(go.Scatter(
        x=ages, y=p50, mode="lines", name="Median",
        hovertemplate="Age %{x}<br>$%{y:,.0f}<extra></extra>"
    ))
    fig.update_layout(title=title, height=380, xaxis_title="Age",
                      yaxis_title="Dollars (nominal)", **_LAYOUT)
    return fig


# ---------- Success gauge ----------
def success_gauge(success_rate: float,
                  title: str = "Chance of Meeting Income Goal") -> go.Figure:
    """Monte Carlo success rate (percent) coloured by its insight band."""
    rate = max(0.0, min(100.0, float(success_rate)))
    label, colour = success_band(rate)
    ceilings = [100.0] + [floor for floor, _, _ in SUCCESS_BANDS[:-1]]
    steps = [
        {"range": [floor, ceiling], "color": band_colour, "name": band_label}
        for (floor, band_label, band_colour), ceiling in zip(SUCCESS_BANDS, ceilings)
    ]
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=round(rate, 1),
        number={"suffix": "%", "font": {"color": colour}},
        title={"text": f"{title}<br><sub>{label.capitalize()} likelihood</sub>"},
        gauge={
            "axis": {"range": [0, 100], "ticksuffix": "%"},
            "bar": {"color": "#1f2937", "thickness": 0.25},
            "steps": steps,
        },
    ))
    fig.update_layout(template="plotly_white", height=260, margin=dict(l=20, r=20, t=60, b=10))
    return fig


# ---------- Strategy score heatmap ----------
def strategy_heatmap(result: OptimizationResult,
                     title: str = "Claiming Strategy Scores") -> go.Figure:
    """
    Scores for every pension age (rows) × Social Security age (columns).
    Combinations that were not evaluated are left blank.
    """
    pension_ages = sorted({s.pension_claiming_age for s in result.scenarios})
    ss_ages = sorted({s.ss_claiming_age for s in result.scenarios})
    lookup = {(s.pension_claiming_age, s.ss_claiming_age): s.score for s in result.scenarios}
    z: List[List] = [[lookup.get((p, s)) for s in ss_ages] for p in pension_ages]

    fig = go.Figure(data=go.Heatmap(
        z=z,
        x=[str(a) for a in ss_ages],
        y=[str(a) for a in pension_ages],
        hoverongaps=False,
        colorbar=dict(title="Score"),
    ))
    fig.update_layout(
        title=title,
        template="plotly_white",
        height=420,
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis_title="Social Security claiming age",
        yaxis_title="Pension start age",
    )
    return fig
