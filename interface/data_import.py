import streamlit as st
import pandas as pd

from interface.components.upload_dialog import show_table_upload_dialog
from pca_pipeline.converters import read_table, sample_table_from_frame
from pca_pipeline.errors import ParseError

ENCODINGS = ["utf-8", "latin-1", "cp1252"]


def run():
    col_title, col_button = st.columns([8, 1])

    with col_title:
        st.title("Sample Table Import")

    # --- Step 1: Upload ---
    with col_button:
        if st.button("Import Table"):
            show_table_upload_dialog()

    uploaded = st.session_state.get("uploaded_table_file")
    if uploaded is None:
        st.info("Use the **Import Table** button to upload a file.")
        return

    encoding = st.selectbox("Text encoding", ENCODINGS, help="Only used for CSV/TSV files")

    try:
        uploaded.seek(0)
        raw = read_table(uploaded, encoding=encoding)
    except ParseError as e:
        st.error(f"❌ `{uploaded.name}`: {e}")
        return

    st.success(f"✅ {uploaded.name}: {len(raw)} rows, {raw.shape[1]} columns read.")

    # --- Step 2: Column roles ---
    config = st.session_state["analysis_config"]
    columns = list(raw.columns)

    col1, col2 = st.columns(2)
    with col1:
        current = config.get("group_column_name")
        group_column = st.selectbox(
            "Group column",
            options=columns,
            index=columns.index(current) if current in columns else 0
        )
    with col2:
        id_options = ["None"] + [c for c in columns if c != group_column]
        current_id = config.get("id_column_name")
        id_column = st.selectbox(
            "Sample id column (optional)",
            options=id_options,
            index=id_options.index(current_id) if current_id in id_options else 0
        )
        id_column = None if id_column == "None" else id_column

    try:
        table = sample_table_from_frame(raw, group_column=group_column, id_column=id_column)
    except ParseError as e:
        st.error(f"❌ {e}")
        return

    # --- Step 3: Summary ---
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Groups**")
        counts = table.groups.value_counts().sort_index()
        st.dataframe(
            pd.DataFrame({"Group": counts.index, "Samples": counts.values}),
            use_container_width=True,
            hide_index=True
        )
    with col2:
        st.markdown("**Features**")
        st.metric("Numeric features", table.n_features)
        st.metric("Samples", table.n_samples)

    with st.expander("Table Preview"):
        preview = table.features.copy()
        preview.insert(0, group_column, table.groups)
        st.dataframe(preview.head(50), use_container_width=True)

    # --- Step 4: Finalize + Load ---
    if st.button("Load into Session", type="primary", use_container_width=True):
        st.session_state["sample_table"] = table
        config["group_column_name"] = group_column
        config["id_column_name"] = id_column

        st.toast("Sample table loaded into session.")
        st.session_state.pop("uploaded_table_file", None)
        st.switch_page("interface/plot_viewer.py")


run()
