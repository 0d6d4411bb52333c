"""Configuration models for webmap-walkthrough."""

from dataclasses import dataclass

BINNING_MODES = ("numeric", "bin", "quantile")
LEGEND_POSITIONS = ("topleft", "topright", "bottomleft", "bottomright")


@dataclass(frozen=True)
class MapConfig:
    """Parameters shared by every map built in the walkthrough."""

    center_lat: float | None = None
    center_lon: float | None = None
    zoom_start: int = 12

    tiles: str = "CartoDB positron"
    base_tiles: tuple[str, ...] = ("CartoDB positron", "OpenStreetMap", "CartoDB dark_matter")

    palette: str = "YlOrRd"
    binning: str = "quantile"
    bins: int = 5
    price_palette: str = "viridis"

    fill_opacity: float = 0.6
    line_weight: float = 1.0
    line_color: str = "#444444"
    marker_radius: int = 7
    cluster_markers: bool = False

    legend_position: str = "bottomright"
    collapsed_layer_control: bool = False

    def __post_init__(self) -> None:
        if self.binning not in BINNING_MODES:
            supported = ", ".join(BINNING_MODES)
            raise ValueError(f"Unknown binning mode '{self.binning}'. Supported: {supported}.")
        if self.bins < 2:
            raise ValueError(f"`bins` must be at least 2, got {self.bins}.")
        if not 0.0 <= self.fill_opacity <= 1.0:
            raise ValueError(f"`fill_opacity` must lie in [0, 1], got {self.fill_opacity}.")
        if self.legend_position not in LEGEND_POSITIONS:
            supported = ", ".join(LEGEND_POSITIONS)
            raise ValueError(
                f"Unknown legend position '{self.legend_position}'. Supported: {supported}."
            )

    @property
    def center(self) -> tuple[float, float] | None:
        if self.center_lat is None or self.center_lon is None:
            return None
        return self.center_lat, self.center_lon
