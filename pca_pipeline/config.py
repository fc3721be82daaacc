# pca_pipeline/config.py

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union

DEFAULT_COMPONENT_PAIRS = [(1, 2), (1, 3), (2, 3)]
DEFAULT_PALETTE = ["#9092c0", "#c25253", "yellow"]
LEGEND_POSITIONS = ("top", "bottom", "right", "left", "none")


@dataclass
class AnalysisConfig:
    input_path: Optional[str] = None
    center: bool = True
    scale: bool = True
    n_components_retained: int = 3
    group_column_name: Optional[str] = None  # None -> first column
    id_column_name: Optional[str] = None
    component_pairs_to_plot: list[tuple[int, int]] = field(
        default_factory=lambda: list(DEFAULT_COMPONENT_PAIRS)
    )
    sheet_name: Union[int, str] = 0
    encoding: str = "utf-8"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["component_pairs_to_plot"] = [list(p) for p in self.component_pairs_to_plot]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisConfig":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "component_pairs_to_plot" in known:
            known["component_pairs_to_plot"] = [
                (int(a), int(b)) for a, b in known["component_pairs_to_plot"]
            ]
        return cls(**known)


@dataclass
class PlotStyle:
    point_size: float = 8
    centroid_size: float = 15
    point_alpha: float = 0.3
    centroid_alpha: float = 0.66
    segment_alpha: float = 0.3
    segment_width: float = 2
    # Either an explicit group -> colour mapping, or colours assigned to sorted labels
    palette: Union[dict[str, str], list[str]] = field(
        default_factory=lambda: list(DEFAULT_PALETTE)
    )
    legend_position: str = "top"
    reference_line_color: str = "#999999"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlotStyle":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
