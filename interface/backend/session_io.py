# interface/backend/session_io.py

import json
import streamlit as st
import pandas as pd
from typing import Any, Dict

from pca_pipeline.converters import sample_table_from_frame, table_to_df
from pca_pipeline.errors import PCAPipelineError
from pca_pipeline.types import SampleTable

from interface.backend.session_schema import AnalysisSettings


def serialize_session(state) -> Dict[str, Any]:
    """Convert session state to a JSON-safe dict."""
    config: AnalysisSettings = dict(state.get("analysis_config", {}))
    config["component_pairs_to_plot"] = [list(p) for p in config.get("component_pairs_to_plot", [])]

    session = {
        "analysis_config": config,
        "plot_style": state.get("plot_style", {}),
        "sample_table": None,
    }

    table: SampleTable = state.get("sample_table")
    if table is not None:
        df = table_to_df(table)
        session["sample_table"] = {
            "group_column": table.group_column,
            "id_column": df.index.name,
            "records": df.reset_index().to_dict(orient="records") if df.index.name else df.to_dict(orient="records"),
        }
    return session


def deserialize_session(data: Dict[str, Any]) -> Dict[str, Any]:
    """Rebuild the session entries from a previously exported session dict."""
    config: AnalysisSettings = data.get("analysis_config", {})
    if "component_pairs_to_plot" in config:
        config["component_pairs_to_plot"] = [tuple(p) for p in config["component_pairs_to_plot"]]

    restored = {"analysis_config": config}
    if data.get("plot_style"):
        restored["plot_style"] = data["plot_style"]

    table_data = data.get("sample_table")
    if table_data:
        df = pd.DataFrame(table_data["records"])
        restored["sample_table"] = sample_table_from_frame(
            df,
            group_column=table_data["group_column"],
            id_column=table_data.get("id_column"),
        )
    return restored


def session_export_button():
    if st.button("Export", use_container_width=True):
        session_data = serialize_session(st.session_state)
        st.download_button(
            label="Download JSON",
            data=json.dumps(session_data, indent=2),
            file_name="pca_session.json",
            mime="application/json",
            use_container_width=True
        )


@st.dialog("Import Session")
def session_import_dialog():
    uploaded = st.file_uploader("Upload session JSON", type="json")
    if uploaded:
        try:
            restored = deserialize_session(json.load(uploaded))
        except (json.JSONDecodeError, KeyError, PCAPipelineError) as e:
            st.error(f"Failed to load session: {e}")
            return
        st.session_state.update(restored)
        st.toast("Session imported.", icon="📥")
        st.rerun()


def session_import_button():
    if st.button("Import", use_container_width=True):
        session_import_dialog()


@st.dialog("Restart Session")
def session_restart_dialog():
    st.error("This will clear all session data.")
    if st.button("Confirm Reset", type="primary"):
        st.session_state.clear()
        st.rerun()


def session_restart_button():
    if st.button("", type='primary', icon=":material/restart_alt:", use_container_width=True):
        session_restart_dialog()
