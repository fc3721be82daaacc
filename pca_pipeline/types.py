# pca_pipeline/types.py

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class SampleTable:
    groups: pd.Series
    features: pd.DataFrame
    group_column: str = "groups"

    @property
    def n_samples(self) -> int:
        return len(self.features)

    @property
    def n_features(self) -> int:
        return self.features.shape[1]

    @property
    def group_labels(self) -> list[str]:
        return sorted(self.groups.unique())


@dataclass(frozen=True)
class PCAResult:
    scores: pd.DataFrame       # samples x PC1..PCk
    sdev: np.ndarray           # per-component standard deviation
    rotation: pd.DataFrame     # features x PC1..PCk
    center: Optional[pd.Series] = None
    scale: Optional[pd.Series] = None

    @property
    def n_components(self) -> int:
        return self.scores.shape[1]

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        variance = self.sdev ** 2
        total = variance.sum()
        if total == 0:
            return np.zeros_like(variance)
        return variance / total

    def variance_summary(self) -> pd.DataFrame:
        ratio = self.explained_variance_ratio
        return pd.DataFrame({
            "Component": list(self.scores.columns),
            "Std. Dev.": self.sdev,
            "Explained Variance (%)": ratio * 100,
            "Cumulative (%)": np.cumsum(ratio) * 100,
        })


@dataclass(frozen=True)
class PipelineResult:
    table: SampleTable
    pca: PCAResult
    centroids: pd.DataFrame
    merged: pd.DataFrame
