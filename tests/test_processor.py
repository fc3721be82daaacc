import numpy as np
import pandas as pd
import pytest

from pca_pipeline.config import AnalysisConfig
from pca_pipeline.converters import sample_table_from_frame
from pca_pipeline.errors import ConfigError, DimensionalityError, MissingCentroidError, ParseError
from pca_pipeline.processor import compute_centroids, compute_pca, merge_with_centroids, run_pipeline


def _align_signs(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    signs = np.sign((a * b).sum(axis=0))
    signs[signs == 0] = 1
    return b * signs


# --- PCA ---

def test_score_rows_match_samples(sample_table):
    pca = compute_pca(sample_table.features)
    assert len(pca.scores) == sample_table.n_samples
    assert list(pca.scores.index) == list(sample_table.features.index)
    assert list(pca.scores.columns) == ["PC1", "PC2", "PC3", "PC4"]


def test_components_ordered_by_variance(random_df):
    table = sample_table_from_frame(random_df)
    pca = compute_pca(table.features)
    assert np.all(np.diff(pca.sdev) <= 1e-12)
    assert pca.explained_variance_ratio.sum() == pytest.approx(1.0)


def test_scores_match_covariance_eigendecomposition(random_df):
    table = sample_table_from_frame(random_df)
    pca = compute_pca(table.features, center=True, scale=True)

    X = table.features.to_numpy()
    Z = (X - X.mean(axis=0)) / X.std(axis=0, ddof=1)
    eigvals, eigvecs = np.linalg.eigh(np.cov(Z, rowvar=False))
    order = np.argsort(eigvals)[::-1]
    expected = Z @ eigvecs[:, order]

    np.testing.assert_allclose(pca.sdev ** 2, eigvals[order], atol=1e-10)
    np.testing.assert_allclose(
        _align_signs(expected, pca.scores.to_numpy()), expected, atol=1e-8
    )


def test_centered_scores_have_zero_mean(sample_table):
    pca = compute_pca(sample_table.features, center=True, scale=False)
    np.testing.assert_allclose(pca.scores.mean().to_numpy(), 0.0, atol=1e-10)
    assert pca.scale is None


def test_scaling_invariance(random_df):
    base = sample_table_from_frame(random_df)
    scaled_df = random_df.copy()
    scaled_df["m1"] = scaled_df["m1"] * 1000.0
    scaled = sample_table_from_frame(scaled_df)

    a = compute_pca(base.features, scale=True).scores.to_numpy()
    b = compute_pca(scaled.features, scale=True).scores.to_numpy()
    np.testing.assert_allclose(_align_signs(a, b), a, atol=1e-8)


def test_accepts_plain_arrays():
    pca = compute_pca(np.array([[1.0, 2.0], [3.0, 5.0], [4.0, 4.0]]))
    assert list(pca.rotation.index) == ["V1", "V2"]


def test_two_by_two_succeeds():
    pca = compute_pca(pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 5.0]}))
    assert pca.scores.shape == (2, 2)


@pytest.mark.parametrize("matrix", [
    [[1.0, 2.0, 3.0]],          # 1 sample
    [[1.0], [2.0], [3.0]],      # 1 feature
])
def test_too_small_raises(matrix):
    with pytest.raises(DimensionalityError):
        compute_pca(np.array(matrix))


def test_zero_variance_under_scaling_raises():
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "flat": [0.1, 0.1, 0.1]})
    with pytest.raises(DimensionalityError, match="flat"):
        compute_pca(df, scale=True)


def test_zero_variance_without_scaling_is_allowed():
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "flat": [0.1, 0.1, 0.1]})
    assert compute_pca(df, scale=False).n_components == 2


# --- Centroids & merge ---

def test_centroid_is_group_mean(random_df):
    table = sample_table_from_frame(random_df)
    pca = compute_pca(table.features)
    centroids = compute_centroids(pca.scores, table.groups, 3)

    assert list(centroids.columns) == ["C1", "C2", "C3"]
    assert centroids.index.name == "group"
    for group in table.group_labels:
        mask = (table.groups == group).to_numpy()
        expected = pca.scores.to_numpy()[mask, :3].mean(axis=0)
        np.testing.assert_allclose(centroids.loc[group].to_numpy(), expected)


def test_too_many_centroid_components_raise(sample_table):
    pca = compute_pca(sample_table.features)
    with pytest.raises(DimensionalityError):
        compute_centroids(pca.scores, sample_table.groups, 5)


def test_merge_attaches_centroids_in_input_order(random_df):
    table = sample_table_from_frame(random_df)
    pca = compute_pca(table.features)
    centroids = compute_centroids(pca.scores, table.groups, 3)
    merged = merge_with_centroids(pca.scores, table.groups, centroids)

    assert list(merged.index) == list(pca.scores.index)
    assert list(merged["group"]) == list(table.groups)
    for _, row in merged.iterrows():
        np.testing.assert_allclose(
            row[["C1", "C2", "C3"]].to_numpy(dtype=float),
            centroids.loc[row["group"]].to_numpy()
        )


def test_merge_with_unknown_group_raises(sample_table):
    pca = compute_pca(sample_table.features)
    centroids = compute_centroids(pca.scores, sample_table.groups, 2)
    with pytest.raises(MissingCentroidError):
        merge_with_centroids(pca.scores, sample_table.groups, centroids.drop(index="TreatB"))


def test_missing_centroid_is_a_lookup_error():
    assert issubclass(MissingCentroidError, LookupError)


# --- Pipeline ---

def test_six_sample_scenario(sample_table):
    result = run_pipeline(sample_table, AnalysisConfig())
    assert result.pca.n_components >= 2
    assert len(result.centroids) == 3
    assert len(result.merged) == 6
    assert not result.merged[["C1", "C2", "C3"]].isna().any().any()


def test_pipeline_is_deterministic(sample_table):
    first = run_pipeline(sample_table, AnalysisConfig())
    second = run_pipeline(sample_table, AnalysisConfig())
    pd.testing.assert_frame_equal(first.pca.scores, second.pca.scores)
    pd.testing.assert_frame_equal(first.centroids, second.centroids)
    pd.testing.assert_frame_equal(first.merged, second.merged)


def test_pipeline_from_config_reads_file(tmp_path, metabolite_df):
    path = tmp_path / "metaboanalyst.csv"
    metabolite_df.to_csv(path, index=False)
    result = run_pipeline(AnalysisConfig(input_path=str(path), group_column_name="feature"))
    assert result.table.group_column == "feature"
    assert list(result.merged.columns[:1]) == ["feature"]


def test_pipeline_rejects_pairs_beyond_retained(sample_table):
    config = AnalysisConfig(n_components_retained=2, component_pairs_to_plot=[(1, 3)])
    with pytest.raises(ConfigError):
        run_pipeline(sample_table, config)


def test_pipeline_rejects_too_many_retained_components():
    df = pd.DataFrame({"g": ["x", "y"], "a": [1.0, 2.0], "b": [3.0, 5.0]})
    table = sample_table_from_frame(df)
    with pytest.raises(DimensionalityError):
        run_pipeline(table, AnalysisConfig(n_components_retained=3))

    result = run_pipeline(table, AnalysisConfig(n_components_retained=2, component_pairs_to_plot=[(1, 2)]))
    assert len(result.merged) == 2


def test_scaling_without_centering_uses_root_mean_square(random_df):
    table = sample_table_from_frame(random_df)
    pca = compute_pca(table.features, center=False, scale=True)

    X = table.features.to_numpy()
    n = X.shape[0]
    rms = np.sqrt((X ** 2).sum(axis=0) / (n - 1))
    np.testing.assert_allclose(pca.scale.to_numpy(), rms)
    assert pca.center is None

    U, S, _ = np.linalg.svd(X / rms, full_matrices=False)
    expected = U * S
    np.testing.assert_allclose(_align_signs(expected, pca.scores.to_numpy()), expected, atol=1e-8)


def test_non_finite_matrix_raises():
    with pytest.raises(ParseError, match="V1"):
        compute_pca(np.array([[np.inf, 1.0], [2.0, 3.0], [1.0, 0.5]]))


@pytest.mark.parametrize("group_name", ["PC1", "C1"])
def test_group_column_clashing_with_result_columns_raises(sample_table, group_name):
    pca = compute_pca(sample_table.features)
    groups = sample_table.groups.rename(group_name)
    with pytest.raises(ConfigError, match=group_name):
        compute_centroids(pca.scores, groups, 2)

    centroids = compute_centroids(pca.scores, sample_table.groups, 2)
    with pytest.raises(ConfigError, match=group_name):
        merge_with_centroids(pca.scores, groups, centroids)
