import numpy as np
import pandas as pd
import pytest

from pca_pipeline.converters import sample_table_from_frame


@pytest.fixture
def metabolite_df() -> pd.DataFrame:
    """6 samples, 3 groups of 2, 4 metabolites."""
    return pd.DataFrame({
        "feature": ["Control", "Control", "TreatA", "TreatA", "TreatB", "TreatB"],
        "Glucose": [5.1, 4.9, 7.8, 8.1, 3.2, 3.0],
        "Lactate": [1.2, 1.4, 2.9, 3.1, 0.7, 0.9],
        "Alanine": [0.30, 0.28, 0.45, 0.41, 0.22, 0.25],
        "Citrate": [110.0, 95.0, 150.0, 160.0, 80.0, 70.0],
    })


@pytest.fixture
def sample_table(metabolite_df):
    return sample_table_from_frame(metabolite_df)


@pytest.fixture
def random_df() -> pd.DataFrame:
    rng = np.random.default_rng(7)
    values = rng.normal(size=(12, 5)) * [1.0, 10.0, 0.1, 3.0, 50.0]
    df = pd.DataFrame(values, columns=[f"m{i}" for i in range(5)])
    df.insert(0, "group", ["a", "b", "c"] * 4)
    return df
