# interface/backend/session.py

import streamlit as st

from pca_pipeline.config import AnalysisConfig, PlotStyle


def initialize_session_state():
    config = AnalysisConfig()
    defaults = {
        "analysis_config": {
            "center": config.center,
            "scale": config.scale,
            "n_components_retained": config.n_components_retained,
            "group_column_name": config.group_column_name,
            "id_column_name": config.id_column_name,
            "component_pairs_to_plot": list(config.component_pairs_to_plot),
        },
        "plot_style": PlotStyle().to_dict(),
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def analysis_config_from_session() -> AnalysisConfig:
    return AnalysisConfig.from_dict(st.session_state["analysis_config"])


def plot_style_from_session() -> PlotStyle:
    return PlotStyle.from_dict(st.session_state["plot_style"])
