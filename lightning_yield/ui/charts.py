# lightning_yield/ui/charts.py
from __future__ import annotations

from typing import Tuple

import plotly.graph_objects as go
import streamlit as st

from lightning_yield.config import settings
from lightning_yield.core.projection_engine import projection_to_dataframe
from lightning_yield.core.projection_models import ProjectionResult


# Axis top used when no quarter earns anything (0% allocation or 0% yield)
EMPTY_EPS_AXIS_TOP_USD = 0.01


def eps_axis_range(result: ProjectionResult, headroom: float) -> Tuple[float, float]:
    """
    EPS axis from zero to the best quarter plus headroom for the hover label.

    EPS is never negative (yield >= 0, price > 0), so the axis starts at 0.
    """
    best_quarter = max((row.eps_usd for row in result.quarterly_results), default=0.0)
    if best_quarter <= 0:
        return (0.0, EMPTY_EPS_AXIS_TOP_USD)
    return (0.0, best_quarter * (1 + max(headroom, 0.0)))


def build_quarterly_eps_figure(
    result: ProjectionResult,
    title: str = "Quarterly EPS uplift (USD/share)",
) -> go.Figure:
    """
    Bar chart of EPS per quarter, keyed by quarter label.

    Sats/share for the same quarter is carried as hover data.
    """
    df = projection_to_dataframe(result)

    fig = go.Figure()
    if df.empty:
        fig.update_layout(title=title)
        return fig

    fig.add_trace(
        go.Bar(
            x=df["Quarter"],
            y=df["EPS (USD)"],
            name="EPS uplift",
            marker=dict(color=settings.EPS_BAR_COLOR),
            customdata=df[["Sats/share", "BTC price (USD)"]].to_numpy(),
            hovertemplate=(
                "<b>Quarter: %{x}</b><br>"
                "+$%{y:,.4f} EPS<br>"
                "+%{customdata[0]:,.0f} sats/share<br>"
                "BTC price: $%{customdata[1]:,.0f}<extra></extra>"
            ),
        )
    )

    fig.update_layout(
        title=title,
        xaxis=dict(title=None, type="category"),
        yaxis=dict(
            title="EPS (USD/share)",
            tickprefix="$",
            range=list(eps_axis_range(result, settings.CHART_Y_PAD_PCT)),
        ),
        hovermode="closest",
        showlegend=False,
        margin=dict(l=40, r=20, t=60, b=40),
    )
    return fig


def render_quarterly_eps_chart(result: ProjectionResult) -> None:
    st.plotly_chart(build_quarterly_eps_figure(result), width="stretch")
