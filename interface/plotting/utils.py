# interface/plotting/utils.py

import streamlit as st
import pandas as pd

from pca_pipeline.types import PipelineResult


def render_result_tables(result: PipelineResult, opts: dict):
    with st.expander("Explained Variance"):
        st.dataframe(
            result.pca.variance_summary(),
            column_config={
                "Std. Dev.": st.column_config.NumberColumn(format="%.3f"),
                "Explained Variance (%)": st.column_config.NumberColumn(format="%.2f"),
                "Cumulative (%)": st.column_config.NumberColumn(format="%.2f"),
            },
            use_container_width=True,
            hide_index=True
        )

    with st.expander("Show Centroids"):
        st.dataframe(result.centroids.reset_index(), use_container_width=True, hide_index=True)

    with st.expander("Show Raw Plot Values"):
        _render_merged_table(result, opts)


def _render_merged_table(result: PipelineResult, opts: dict):
    merged = result.merged
    group_col = result.table.group_column

    # Only the components that are plotted, plus their centroid columns
    used = sorted({c for pair in opts.get("pairs", []) for c in pair})
    cols = [group_col] + [f"PC{c}" for c in used] + [f"C{c}" for c in used]
    cols_to_show = [c for c in dict.fromkeys(cols) if c in merged.columns]

    df_display = merged[cols_to_show].copy()
    if df_display.empty:
        st.caption("*(empty)*")
        return

    st.dataframe(df_display, use_container_width=True)
    st.download_button(
        label="Download merged table (CSV)",
        data=merged.to_csv().encode("utf-8"),
        file_name="pca_merged.csv",
        mime="text/csv",
        use_container_width=True
    )
