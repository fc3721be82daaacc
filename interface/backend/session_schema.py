# interface/backend/session_schema.py

from typing import Optional, TypedDict


class AnalysisSettings(TypedDict):
    center: bool
    scale: bool
    n_components_retained: int
    group_column_name: Optional[str]
    id_column_name: Optional[str]
    component_pairs_to_plot: list[tuple[int, int]]
