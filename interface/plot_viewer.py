import itertools

import streamlit as st

from interface.backend.session import analysis_config_from_session, plot_style_from_session
from interface.plotting.plot_pca import build_centroid_plots
from interface.plotting.utils import render_result_tables
from pca_pipeline.config import LEGEND_POSITIONS
from pca_pipeline.errors import PCAPipelineError
from pca_pipeline.processor import run_pipeline
from pca_pipeline.types import SampleTable
from pca_pipeline.validators import validate_sample_table


def _pair_label(pair) -> str:
    return f"PC{pair[0]} vs PC{pair[1]}"


def _analysis_controls(table: SampleTable) -> dict:
    st.markdown("### Analysis Configuration")
    config = st.session_state["analysis_config"]
    max_components = max(min(table.n_samples, table.n_features), 2)

    col1, col2, col3 = st.columns(3)
    with col1:
        config["center"] = st.checkbox("Center features", value=config["center"])
    with col2:
        config["scale"] = st.checkbox("Scale to unit variance", value=config["scale"])
    with col3:
        config["n_components_retained"] = st.number_input(
            "Components retained",
            min_value=2,
            max_value=max_components,
            value=min(config["n_components_retained"], max_components),
            step=1
        )

    n = int(config["n_components_retained"])
    candidates = list(itertools.combinations(range(1, n + 1), 2))
    defaults = [tuple(p) for p in config["component_pairs_to_plot"] if tuple(p) in candidates]
    pairs = st.multiselect(
        "Component pairs to plot",
        options=candidates,
        default=defaults or candidates[:1],
        format_func=_pair_label
    )
    if not pairs:
        st.warning("Please select at least one component pair.")
        st.stop()
    config["component_pairs_to_plot"] = pairs

    return {"pairs": pairs}


def _style_controls(groups: list[str]):
    style = st.session_state["plot_style"]

    with st.expander("Presentation Options"):
        col1, col2 = st.columns(2)
        with col1:
            style["point_size"] = st.slider("Point size", 2, 30, int(style["point_size"]))
            style["point_alpha"] = st.slider("Point opacity", 0.05, 1.0, float(style["point_alpha"]))
            style["segment_alpha"] = st.slider("Segment opacity", 0.05, 1.0, float(style["segment_alpha"]))
        with col2:
            style["centroid_size"] = st.slider("Centroid size", 4, 50, int(style["centroid_size"]))
            style["centroid_alpha"] = st.slider("Centroid opacity", 0.05, 1.0, float(style["centroid_alpha"]))
            style["legend_position"] = st.selectbox(
                "Legend position",
                LEGEND_POSITIONS,
                index=LEGEND_POSITIONS.index(style["legend_position"])
            )

        st.markdown("**Group colours**")
        palette = style["palette"]
        if not isinstance(palette, dict):
            palette = dict(zip(sorted(groups), palette))
        cols = st.columns(max(len(groups), 1))
        for col, group in zip(cols, groups):
            with col:
                palette[group] = st.color_picker(group, value=_as_hex(palette.get(group, "#888888")))
        style["palette"] = palette


def _as_hex(color: str) -> str:
    # color_picker only accepts hex codes
    return {"yellow": "#ffff00"}.get(color, color if color.startswith("#") else "#888888")


def run():
    st.title("PCA Centroid Plots")

    table: SampleTable = st.session_state.get("sample_table")
    if table is None:
        st.info("Please import a sample table first.")
        return

    opts = _analysis_controls(table)
    _style_controls(table.group_labels)

    config = analysis_config_from_session()
    with st.expander("Analysis Checklist"):
        issues = validate_sample_table(table, config)
        for issue in issues:
            st.warning(issue)
        if not issues:
            st.success("Setup looks good!")

    try:
        result = run_pipeline(table, config)
        plots = build_centroid_plots(result, opts["pairs"], plot_style_from_session())
    except PCAPipelineError as e:
        st.error(f"Analysis failed: {e}")
        return

    cols = st.columns(min(len(plots), 3))
    for idx, (pair, fig) in enumerate(plots):
        fig.update_layout(title_text=_pair_label(pair), height=500)
        with cols[idx % len(cols)]:
            st.plotly_chart(fig, use_container_width=True)

    render_result_tables(result, opts)


run()
