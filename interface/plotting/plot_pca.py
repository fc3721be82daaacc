# interface/plotting/plot_pca.py

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.graph_objects import Figure
from typing import Optional, Sequence, Tuple, List

from pca_pipeline.config import PlotStyle
from pca_pipeline.types import PipelineResult
from pca_pipeline.validators import resolve_palette, validate_component_pairs, validate_legend_position


LEGEND_LAYOUTS = {
    "top": dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0.0),
    "bottom": dict(orientation="h", yanchor="top", y=-0.15, xanchor="left", x=0.0),
    "right": dict(orientation="v", yanchor="top", y=1.0, xanchor="left", x=1.02),
    "left": dict(orientation="v", yanchor="top", y=1.0, xanchor="right", x=-0.1),
}


def build_centroid_plots(
    result: PipelineResult,
    pairs: Sequence[Tuple[int, int]],
    style: Optional[PlotStyle] = None
) -> List[Tuple[Tuple[int, int], Figure]]:
    n_retained = result.centroids.shape[1]
    pairs = validate_component_pairs(pairs, n_retained)
    return [
        (
            pair,
            build_centroid_plot(
                result.merged,
                result.centroids,
                pair,
                style=style,
                group_column=result.table.group_column,
                explained_variance_ratio=result.pca.explained_variance_ratio,
            ),
        )
        for pair in pairs
    ]


def build_centroid_plot(
    merged: pd.DataFrame,
    centroids: pd.DataFrame,
    pair: Tuple[int, int],
    style: Optional[PlotStyle] = None,
    group_column: str = "groups",
    explained_variance_ratio: Optional[np.ndarray] = None
) -> Figure:
    style = style or PlotStyle()
    a, b = pair
    x_col, y_col = f"PC{a}", f"PC{b}"
    cx_col, cy_col = f"C{a}", f"C{b}"

    colors = resolve_palette(merged[group_column], style.palette)
    validate_legend_position(style.legend_position)

    fig = go.Figure()

    for group, color in colors.items():
        rows = merged[merged[group_column] == group]
        _add_segments(fig, rows, group, color, (x_col, y_col, cx_col, cy_col), style)

        fig.add_trace(go.Scatter(
            x=rows[x_col],
            y=rows[y_col],
            mode="markers",
            name=group,
            legendgroup=group,
            marker=dict(color=color, size=style.point_size, opacity=style.point_alpha),
            text=[str(i) for i in rows.index],
            hovertemplate=f"%{{text}}<br>{x_col}=%{{x:.3f}}<br>{y_col}=%{{y:.3f}}<extra>{group}</extra>",
        ))

        if group in centroids.index:
            centroid = centroids.loc[group]
            fig.add_trace(go.Scatter(
                x=[centroid[cx_col]],
                y=[centroid[cy_col]],
                mode="markers",
                name=f"{group} centroid",
                legendgroup=group,
                showlegend=False,
                marker=dict(color=color, size=style.centroid_size, opacity=style.centroid_alpha),
                hovertemplate=f"Centroid<br>{x_col}=%{{x:.3f}}<br>{y_col}=%{{y:.3f}}<extra>{group}</extra>",
            ))

    _add_reference_lines(fig, style)

    fig.update_layout(
        xaxis_title=_axis_title(a, explained_variance_ratio),
        yaxis_title=_axis_title(b, explained_variance_ratio),
        legend_title_text=group_column,
        margin=dict(t=40, b=40),
        plot_bgcolor="white",
    )
    if style.legend_position == "none":
        fig.update_layout(showlegend=False)
    else:
        fig.update_layout(legend=LEGEND_LAYOUTS[style.legend_position])
    fig.update_xaxes(showgrid=True, gridcolor="#eeeeee", zeroline=False)
    fig.update_yaxes(showgrid=True, gridcolor="#eeeeee", zeroline=False)
    return fig


# --- Helpers ---

def _add_reference_lines(fig: Figure, style: PlotStyle):
    line = dict(dash="dash", width=1, color=style.reference_line_color)
    fig.add_vline(x=0, line=line, layer="below")
    fig.add_hline(y=0, line=line, layer="below")


def _add_segments(fig: Figure, rows: pd.DataFrame, group: str, color: str, cols: tuple, style: PlotStyle):
    x_col, y_col, cx_col, cy_col = cols
    xs, ys = [], []
    # one trace per group; None breaks the line between samples
    for _, row in rows.iterrows():
        xs += [row[x_col], row[cx_col], None]
        ys += [row[y_col], row[cy_col], None]

    fig.add_trace(go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=f"{group} segments",
        legendgroup=group,
        showlegend=False,
        hoverinfo="skip",
        opacity=style.segment_alpha,
        line=dict(color=color, width=style.segment_width),
    ))


def _axis_title(component: int, explained_variance_ratio: Optional[np.ndarray]) -> str:
    if explained_variance_ratio is None or component > len(explained_variance_ratio):
        return f"PC{component}"
    return f"PC{component} ({explained_variance_ratio[component - 1] * 100:.1f}%)"
