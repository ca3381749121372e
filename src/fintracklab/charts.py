"""
Chart functions for the tracker dashboard.

All chart functions return (figure, tidy_dataframe_used) for consistency.
"""

from __future__ import annotations

import pandas as pd

from fintracklab.core.aggregation import FinancialSummary, savings_allocation_breakdown
from fintracklab.core.compounding import InvestmentSummary
from fintracklab.core.projection import ProjectionPoint, projection_frame

# Plotly imports with graceful fallback
try:
    import plotly.express as px
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


CATEGORY_COLORS = {
    "investments": "#3498db",
    "emergency_fund": "#2ecc71",
    "goals": "#9b59b6",
    "unallocated": "#f1c40f",
}


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install 'fintracklab[viz]'"
        )


def projection_area(
    points: list[ProjectionPoint],
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Stacked area chart of projected contributions and growth.

    Growth is derived per point as ``value - contributions``.

    **Args:**
        points: Output of ``project_net_worth``

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)
    """
    _check_plotly()

    df = projection_frame(points)
    dates = df.index.to_timestamp()

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Contributions",
            x=dates,
            y=df["contributions"],
            mode="lines",
            line={"color": "#3498db"},
            stackgroup="one",
        )
    )
    fig.add_trace(
        go.Scatter(
            name="Growth",
            x=dates,
            y=df["growth"],
            mode="lines",
            line={"color": "#2ecc71"},
            stackgroup="one",
        )
    )
    fig.update_layout(
        title="Projected Net Worth",
        xaxis_title="Month",
        yaxis_title="Value",
        hovermode="x unified",
        legend_title="Component",
    )
    return fig, df


def savings_allocation_pie(
    summary: FinancialSummary,
) -> tuple[go.Figure, pd.DataFrame]:
    """Pie chart of allocated categories plus the unallocated balance."""
    _check_plotly()

    slices = savings_allocation_breakdown(summary)
    df = pd.DataFrame(
        {"name": list(slices.keys()), "value": list(slices.values())},
        columns=["name", "value"],
    )
    fig = px.pie(
        df,
        names="name",
        values="value",
        color="name",
        color_discrete_map=CATEGORY_COLORS,
        title="Savings Allocation",
    )
    return fig, df


def portfolio_distribution(
    investments: InvestmentSummary,
) -> tuple[go.Figure, pd.DataFrame]:
    """Donut chart of current investment value per investment type."""
    _check_plotly()

    df = investments.breakdown_frame()
    fig = px.pie(df, names="name", values="value", hole=0.4, title="Portfolio")
    return fig, df


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'pdf', 'svg'); image formats need kaleido
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in {"png", "svg", "pdf"}:
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
