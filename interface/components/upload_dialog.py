# interface/components/upload_dialog.py

import streamlit as st


@st.dialog("Import Metabolomics Table", width="large")
def show_table_upload_dialog():
    uploaded = st.file_uploader(
        "Upload a sample table (.csv/.tsv/.txt/.xls/.xlsx)",
        type=["csv", "tsv", "txt", "xls", "xlsx"],
        accept_multiple_files=False,
    )

    if uploaded:
        st.session_state["uploaded_table_file"] = uploaded
        st.success(f"`{uploaded.name}` stored for import.")

    if st.button("Confirm upload"):
        st.rerun()
