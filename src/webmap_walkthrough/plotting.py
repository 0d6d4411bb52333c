"""Static matplotlib preview of the walkthrough map."""

from __future__ import annotations

from pathlib import Path

import geopandas as gpd
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from webmap_walkthrough.datasets import PRICE_TIERS
from webmap_walkthrough.palettes import NA_COLOR, FactorPalette, color_factor


def plot_static_map(
    regions: gpd.GeoDataFrame,
    restaurants: pd.DataFrame | None = None,
    column: str = "population",
    palette: str = "YlOrRd",
    price_colors: FactorPalette | None = None,
    out_path: Path | str | None = None,
    title: str = "Population and restaurants",
    return_handles: bool = False,
) -> Path | tuple[Figure, Axes] | None:
    """Draw the choropleth and restaurant points as a PNG-ready figure.

    When ``return_handles=True``, returns ``(fig, ax)`` and leaves the figure
    open. Otherwise the figure is closed and the saved path (or ``None`` if
    ``out_path`` is not provided) is returned.
    """
    save_path: Path | None = None
    if out_path is not None:
        save_path = Path(out_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(9, 7))
    regions.plot(
        column=column,
        cmap=palette,
        ax=ax,
        edgecolor="#444444",
        linewidth=0.6,
        legend=True,
        legend_kwds={"label": column.replace("_", " ").title(), "shrink": 0.7},
        missing_kwds={"color": NA_COLOR},
    )

    if restaurants is not None and len(restaurants):
        colors = price_colors or color_factor("viridis", PRICE_TIERS)
        for tier, color in colors.legend_entries():
            subset = restaurants.loc[restaurants["price"] == tier]
            if subset.empty:
                continue
            ax.scatter(
                subset["lon"],
                subset["lat"],
                s=36,
                color=color,
                edgecolor="black",
                linewidth=0.5,
                label=tier.replace("$", r"\$"),
                zorder=3,
            )
        ax.legend(title="Price", loc="lower left", fontsize=8)

    ax.set_title(title, fontsize=12)
    ax.set_xlabel("Longitude", fontsize=9)
    ax.set_ylabel("Latitude", fontsize=9)

    if save_path is not None:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if return_handles:
        return fig, ax

    plt.close(fig)
    return save_path
