# pca_pipeline/converters.py

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from pca_pipeline.errors import ParseError
from pca_pipeline.types import SampleTable

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xls", ".xlsx"}
DELIMITERS = {".csv": ",", ".tsv": "\t", ".tab": "\t"}


def load_sample_table(
    source,
    group_column: Optional[str] = None,
    id_column: Optional[str] = None,
    sheet_name: Union[int, str] = 0,
    encoding: str = "utf-8"
) -> SampleTable:
    """Read a delimited or Excel file into a SampleTable.

    `source` may be a path or a file-like object carrying a `name`
    (e.g. a Streamlit upload). The group column defaults to the first column.
    """
    df = read_table(source, sheet_name=sheet_name, encoding=encoding)
    table = sample_table_from_frame(df, group_column=group_column, id_column=id_column)
    logger.info(
        "Loaded %s: %d samples, %d features, %d groups",
        _source_name(source), table.n_samples, table.n_features, len(table.group_labels)
    )
    return table


def read_table(source, sheet_name: Union[int, str] = 0, encoding: str = "utf-8") -> pd.DataFrame:
    """Read the raw table. Only empty cells count as missing, so labels like "NA" or "None" survive."""
    name = _source_name(source)
    suffix = Path(name).suffix.lower()

    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(source, sheet_name=sheet_name, keep_default_na=False, na_values=[""])
        else:
            sep = DELIMITERS.get(suffix)
            df = pd.read_csv(
                source, sep=sep, engine="python", encoding=encoding,
                keep_default_na=False, na_values=[""]
            )
    except pd.errors.ParserError as e:
        raise ParseError(f"{name}: inconsistent number of fields ({e})") from e
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{name}: file is empty.") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{name}: not readable as {encoding} text ({e}). Pass the file's encoding, e.g. latin-1.") from e
    except (ValueError, IndexError) as e:
        if suffix not in EXCEL_SUFFIXES:
            raise
        raise ParseError(f"{name}: cannot read sheet {sheet_name!r} ({e})") from e

    df.columns = [str(c).strip() for c in df.columns]
    return df


def sample_table_from_frame(
    df: pd.DataFrame,
    group_column: Optional[str] = None,
    id_column: Optional[str] = None
) -> SampleTable:
    if df.shape[1] == 0:
        raise ParseError("Table has no columns.")

    group_column = group_column or df.columns[0]
    for col, role in [(group_column, "Group"), (id_column, "Sample id")]:
        if col is not None and col not in df.columns:
            raise ParseError(f"{role} column '{col}' not found. Available: {list(df.columns)}")

    df = df.reset_index(drop=True)

    groups = df[group_column].astype(str).str.strip()
    missing_groups = df.index[df[group_column].isna() | groups.eq("")].tolist()
    if missing_groups:
        raise ParseError(f"Missing group label in row(s): {_row_numbers(missing_groups)}")

    if id_column is not None:
        ids = df[id_column].astype(str).str.strip()
        duplicated = sorted(ids[ids.duplicated()].unique())
        if duplicated:
            raise ParseError(f"Duplicate sample id(s): {duplicated}")
        index = pd.Index(ids, name=id_column)
    else:
        index = df.index

    feature_cols = [c for c in df.columns if c not in {group_column, id_column}]
    if not feature_cols:
        raise ParseError("No numeric feature columns found.")

    features = pd.DataFrame(
        {col: _parse_numeric_column(df[col], col) for col in feature_cols}
    )
    features.index = index
    groups.index = index
    groups.name = group_column

    return SampleTable(groups=groups, features=features, group_column=group_column)


def table_to_df(table: SampleTable) -> pd.DataFrame:
    """Inverse of sample_table_from_frame: group column first, then features."""
    df = table.features.copy()
    df.insert(0, table.group_column, table.groups)
    return df


# --- Helpers ---

def _parse_numeric_column(col: pd.Series, name: str) -> pd.Series:
    missing = col.isna()
    if missing.any():
        raise ParseError(f"Missing value in feature '{name}', row(s) {_row_numbers(col.index[missing])}")

    numeric = pd.to_numeric(col, errors="coerce")
    bad = numeric.isna()
    if bad.any():
        first = col[bad].iloc[0]
        raise ParseError(
            f"Non-numeric value {first!r} in feature '{name}', row(s) {_row_numbers(col.index[bad])}"
        )

    infinite = ~np.isfinite(numeric)
    if infinite.any():
        first = col[infinite].iloc[0]
        raise ParseError(
            f"Non-finite value {first!r} in feature '{name}', row(s) {_row_numbers(col.index[infinite])}"
        )
    return numeric.astype(float)


def _row_numbers(positions) -> list[int]:
    # 1-based data rows, header excluded
    return [int(p) + 1 for p in positions]


def _source_name(source) -> str:
    return str(getattr(source, "name", source))
