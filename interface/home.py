# interface/home.py

import streamlit as st

def run():
    st.header("PCA with Group Centroids")

    st.markdown(
        """
        This app runs a **Principal Component Analysis** on a metabolomics table and shows
        how tightly each group clusters around its **centroid** in PC space.

        **Key Features:**
        - Upload a sample table (rows are samples, one group column, numeric metabolite columns)
        - Center and scale features before the decomposition (prcomp-style)
        - Compute per-group centroids over the retained components
        - Plot PC pairs with samples, centroids and sample-to-centroid segments
        - Export the merged table or the session state for reuse

        **Next step:** Go to the **Data Import** page to load your table.
        """
    )

run()
