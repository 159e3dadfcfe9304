from __future__ import annotations

from typing import Dict

import pandas as pd
import plotly.graph_objects as go

from pcf.product import STAGE_KEYS, STAGE_LABELS

STAGE_COLORS = {
    "A": "#3B82F6",
    "B": "#10B981",
    "C": "#F59E0B",
    "D": "#6366F1",
}


def stage_breakdown_pie(breakdown: Dict[str, float], title: str = "Emission Stages") -> go.Figure:
    """Pie chart of a product's stage shares; empty when there is nothing to show."""
    if not breakdown or not breakdown.get("total"):
        return go.Figure()

    labels = [f"{STAGE_LABELS[key]} ({key})" for key in STAGE_KEYS]
    values = [float(breakdown.get(key, 0.0)) for key in STAGE_KEYS]

    fig = go.Figure(
        data=[
            go.Pie(
                labels=labels,
                values=values,
                hole=0.4,
                marker={"colors": [STAGE_COLORS[key] for key in STAGE_KEYS]},
                sort=False,
            )
        ]
    )
    fig.update_layout(title_text=title, font_size=11)
    return fig


def contract_stacked_bar(summary_df: pd.DataFrame, title: str = "Contract Emissions by Product") -> go.Figure:
    """Stacked bars per product, one segment per stage."""
    if summary_df is None or summary_df.empty:
        return go.Figure()

    required = {"product_name", *STAGE_KEYS}
    missing = required - set(summary_df.columns)
    if missing:
        raise ValueError(f"Summary dataframe missing columns: {', '.join(sorted(missing))}")

    names = summary_df["product_name"].astype(str).tolist()
    fig = go.Figure(
        data=[
            go.Bar(
                name=STAGE_LABELS[key],
                x=names,
                y=summary_df[key].astype(float).tolist(),
                marker_color=STAGE_COLORS[key],
            )
            for key in STAGE_KEYS
        ]
    )
    fig.update_layout(barmode="stack", title_text=title, font_size=11, yaxis_title="kgCO2e")
    return fig


def stage_sankey(breakdown: Dict[str, float], source_label: str = "Product", title: str = "Emission Flow") -> go.Figure:
    """Sankey diagram from the product node to each non-zero stage."""
    if not breakdown:
        return go.Figure()

    stages = [key for key in STAGE_KEYS if float(breakdown.get(key, 0.0)) > 0]
    if not stages:
        return go.Figure()

    labels = [source_label] + [STAGE_LABELS[key] for key in stages]

    fig = go.Figure(
        data=[
            go.Sankey(
                arrangement="snap",
                node={"label": labels, "pad": 18, "thickness": 16},
                link={
                    "source": [0] * len(stages),
                    "target": list(range(1, len(stages) + 1)),
                    "value": [float(breakdown[key]) for key in stages],
                },
            )
        ]
    )
    fig.update_layout(title_text=title, font_size=11)
    return fig
