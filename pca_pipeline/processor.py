# pca_pipeline/processor.py

import logging
from typing import Optional, Union

import numpy as np
import pandas as pd

from pca_pipeline.config import AnalysisConfig
from pca_pipeline.converters import load_sample_table
from pca_pipeline.errors import ConfigError, DimensionalityError, MissingCentroidError, ParseError
from pca_pipeline.types import PCAResult, PipelineResult, SampleTable
from pca_pipeline.validators import validate_component_pairs

logger = logging.getLogger(__name__)

# relative tolerance below which a column counts as constant
ZERO_VARIANCE_TOL = 1e-12


def compute_pca(
    features: Union[pd.DataFrame, np.ndarray],
    center: bool = True,
    scale: bool = True
) -> PCAResult:
    """Principal component scores of a samples x features matrix.

    Follows R's ``prcomp``: optional centering on column means, optional
    scaling by the sample standard deviation (N-1), then a thin SVD.
    Components come back in descending order of explained variance.
    """
    if not isinstance(features, pd.DataFrame):
        features = pd.DataFrame(np.asarray(features, dtype=float))
        features.columns = [f"V{i + 1}" for i in range(features.shape[1])]

    n_samples, n_features = features.shape
    if n_samples < 2:
        raise DimensionalityError(f"PCA needs at least 2 samples, got {n_samples}.")
    if n_features < 2:
        raise DimensionalityError(f"PCA needs at least 2 features, got {n_features}.")

    X = features.to_numpy(dtype=float)
    if not np.isfinite(X).all():
        cols = list(features.columns[~np.isfinite(X).all(axis=0)])
        raise ParseError(f"Non-finite value(s) in feature(s): {cols}")

    center_vec = None
    if center:
        center_vec = X.mean(axis=0)
        X = X - center_vec

    scale_vec = None
    if scale:
        # sample sd when centered, root mean square otherwise (prcomp semantics)
        scale_vec = np.sqrt((X ** 2).sum(axis=0) / (n_samples - 1))
        magnitude = np.maximum(np.abs(features.to_numpy(dtype=float)).max(axis=0), 1.0)
        constant = scale_vec <= ZERO_VARIANCE_TOL * magnitude
        if constant.any():
            cols = list(features.columns[constant])
            raise DimensionalityError(f"Cannot scale zero-variance feature(s): {cols}")
        X = X / scale_vec

    U, S, Vt = np.linalg.svd(X, full_matrices=False)

    labels = [f"PC{i + 1}" for i in range(len(S))]
    scores = pd.DataFrame(U * S, index=features.index, columns=labels)
    rotation = pd.DataFrame(Vt.T, index=features.columns, columns=labels)
    sdev = S / np.sqrt(n_samples - 1)

    result = PCAResult(
        scores=scores,
        sdev=sdev,
        rotation=rotation,
        center=None if center_vec is None else pd.Series(center_vec, index=features.columns),
        scale=None if scale_vec is None else pd.Series(scale_vec, index=features.columns),
    )
    logger.debug("PCA on %d x %d matrix (center=%s, scale=%s)", n_samples, n_features, center, scale)
    logger.info(
        "Explained variance: %s",
        ", ".join(f"{pc} {r:.1%}" for pc, r in zip(labels[:3], result.explained_variance_ratio[:3]))
    )
    return result


def compute_centroids(
    scores: pd.DataFrame,
    groups: pd.Series,
    n_components: int
) -> pd.DataFrame:
    """Mean of the first `n_components` scores per group, as columns C1..Cn."""
    if len(scores) != len(groups):
        raise ValueError(f"{len(scores)} score rows but {len(groups)} group labels.")
    if n_components < 1 or n_components > scores.shape[1]:
        raise DimensionalityError(
            f"Cannot average {n_components} components; {scores.shape[1]} are available."
        )

    group_name = getattr(groups, "name", None) or "groups"
    _check_group_name(group_name, list(scores.columns[:n_components]) + _centroid_columns(n_components))
    subset = scores.iloc[:, :n_components].reset_index(drop=True)
    subset[group_name] = pd.Series(groups).reset_index(drop=True).to_numpy()

    centroids = subset.groupby(group_name, sort=True).mean()
    centroids.columns = _centroid_columns(n_components)
    return centroids


def merge_with_centroids(
    sample_scores: pd.DataFrame,
    groups: pd.Series,
    centroids: pd.DataFrame
) -> pd.DataFrame:
    """Attach each sample's group centroid, keeping the input row order."""
    if len(sample_scores) != len(groups):
        raise ValueError(f"{len(sample_scores)} score rows but {len(groups)} group labels.")

    group_name = getattr(groups, "name", None) or centroids.index.name or "groups"
    _check_group_name(group_name, list(sample_scores.columns) + list(centroids.columns))
    labels = pd.Series(groups).to_numpy()

    unknown = sorted(set(labels) - set(centroids.index))
    if unknown:
        raise MissingCentroidError(f"No centroid for group(s): {unknown}")

    merged = sample_scores.copy()
    merged.insert(0, group_name, labels)
    centroid_values = centroids.loc[labels].to_numpy()
    for i, col in enumerate(centroids.columns):
        merged[col] = centroid_values[:, i]
    return merged


def run_pipeline(
    source: Union[AnalysisConfig, SampleTable],
    config: Optional[AnalysisConfig] = None
) -> PipelineResult:
    """Load -> PCA -> centroids -> merge. Halts on the first failing stage."""
    if isinstance(source, AnalysisConfig):
        config = source
        if not config.input_path:
            raise ValueError("AnalysisConfig.input_path is not set.")
        table = load_sample_table(
            config.input_path,
            group_column=config.group_column_name,
            id_column=config.id_column_name,
            sheet_name=config.sheet_name,
            encoding=config.encoding,
        )
    else:
        table = source
        config = config or AnalysisConfig()

    pca = compute_pca(table.features, center=config.center, scale=config.scale)

    n_retained = config.n_components_retained
    if n_retained > pca.n_components:
        raise DimensionalityError(
            f"Cannot retain {n_retained} components; the data yields {pca.n_components}."
        )
    validate_component_pairs(config.component_pairs_to_plot, n_retained)

    centroids = compute_centroids(pca.scores, table.groups, n_retained)
    merged = merge_with_centroids(pca.scores, table.groups, centroids)
    logger.info("Computed %d centroids over %d components", len(centroids), n_retained)

    return PipelineResult(table=table, pca=pca, centroids=centroids, merged=merged)


# --- Helpers ---

def _centroid_columns(n_components: int) -> list[str]:
    return [f"C{i + 1}" for i in range(n_components)]


def _check_group_name(group_name: str, taken: list[str]):
    if group_name in taken:
        raise ConfigError(
            f"Group column '{group_name}' clashes with a score or centroid column; rename it."
        )
