# pca_pipeline/validators.py

from typing import Iterable, Union

from pca_pipeline.config import LEGEND_POSITIONS, AnalysisConfig
from pca_pipeline.errors import ConfigError
from pca_pipeline.types import SampleTable


def validate_component_pairs(
    pairs: Iterable[tuple[int, int]],
    n_available: int
) -> list[tuple[int, int]]:
    """Return the pairs as int tuples, raising ConfigError on the first bad one."""
    checked = []
    for pair in pairs:
        try:
            a, b = (int(v) for v in pair)
        except (TypeError, ValueError):
            raise ConfigError(f"Component pair {pair!r} must hold two component numbers.") from None
        if a == b:
            raise ConfigError(f"Component pair ({a}, {b}) plots a component against itself.")
        for comp in (a, b):
            if comp < 1 or comp > n_available:
                raise ConfigError(
                    f"Component pair ({a}, {b}) is out of range: only PC1..PC{n_available} are available."
                )
        checked.append((a, b))
    if not checked:
        raise ConfigError("At least one component pair is required.")
    return checked


def resolve_palette(
    groups: Iterable[str],
    palette: Union[dict[str, str], list[str]]
) -> dict[str, str]:
    labels = sorted(set(groups))
    if isinstance(palette, dict):
        missing = [g for g in labels if g not in palette]
        if missing:
            raise ConfigError(f"No colour configured for group(s): {missing}")
        return {g: palette[g] for g in labels}

    if len(labels) > len(palette):
        raise ConfigError(
            f"{len(labels)} groups but only {len(palette)} colours configured; "
            "add colours to the palette."
        )
    return dict(zip(labels, palette))


def validate_legend_position(position: str) -> str:
    if position not in LEGEND_POSITIONS:
        raise ConfigError(f"Unknown legend position '{position}'. Use one of {list(LEGEND_POSITIONS)}.")
    return position


def validate_sample_table(table: SampleTable, config: AnalysisConfig) -> list[str]:
    errors = []

    if table.n_samples < 2:
        errors.append(f"At least 2 samples are required (found {table.n_samples}).")
    if table.n_features < 2:
        errors.append(f"At least 2 numeric features are required (found {table.n_features}).")

    available = min(table.n_samples, table.n_features)
    if config.n_components_retained > available:
        errors.append(
            f"Cannot retain {config.n_components_retained} components; "
            f"the data supports at most {available}."
        )

    if config.scale:
        constant = [c for c in table.features.columns if table.features[c].nunique() <= 1]
        if constant:
            errors.append(f"Constant feature(s) cannot be scaled: {constant}")

    if len(table.group_labels) < 2:
        errors.append("At least 2 groups are needed to compare centroids.")

    return errors
