"""Colour palettes that map data values onto map colours.

Continuous and binned scales are ``branca`` colormaps, so they can be called on a
value and added to a map as a legend. Categorical scales use
:class:`FactorPalette`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import branca.colormap as cm
import matplotlib
import numpy as np
from matplotlib.colors import to_hex

from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import PRICE_TIERS

NA_COLOR = "#808080"

Palette = str | Sequence[str]


def resolve_palette(palette: Palette, n: int) -> list[str]:
    """Return ``n`` hex colours sampled from a matplotlib colormap name or a colour list."""
    if n < 1:
        raise ValueError(f"`n` must be positive, got {n}.")

    if isinstance(palette, str):
        try:
            cmap = matplotlib.colormaps[palette]
        except KeyError:
            raise ValueError(f"Unknown palette '{palette}'.") from None
        return [to_hex(cmap(x)) for x in np.linspace(0, 1, n)]

    colors = [to_hex(color) for color in palette]
    if not colors:
        raise ValueError("Palette must contain at least one colour.")
    if len(colors) == n:
        return colors
    if len(colors) == 1:
        return colors * n

    ramp = cm.LinearColormap(colors, vmin=0, vmax=1)
    return [ramp(x)[:7] for x in np.linspace(0, 1, n)]


def _finite(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise ValueError("Cannot build a colour scale without finite values.")
    return arr


def _value_range(arr: np.ndarray) -> tuple[float, float]:
    vmin, vmax = float(arr.min()), float(arr.max())
    if vmin == vmax:
        vmax = vmin + 0.0001
    return vmin, vmax


def color_numeric(
    palette: Palette,
    values: Iterable[float],
    caption: str = "",
    n_colors: int = 9,
) -> cm.LinearColormap:
    """Continuous scale spanning the data range."""
    vmin, vmax = _value_range(_finite(values))
    return cm.LinearColormap(
        resolve_palette(palette, n_colors),
        vmin=vmin,
        vmax=vmax,
        caption=caption,
    )


def _step(palette: Palette, breaks: Sequence[float], caption: str) -> cm.StepColormap:
    return cm.StepColormap(
        resolve_palette(palette, len(breaks) - 1),
        index=list(breaks),
        vmin=breaks[0],
        vmax=breaks[-1],
        caption=caption,
    )


def color_bin(
    palette: Palette,
    values: Iterable[float],
    bins: int | Sequence[float] = 5,
    caption: str = "",
) -> cm.StepColormap:
    """Stepped scale over equal-width bins, or over explicit break points."""
    if isinstance(bins, int):
        if bins < 1:
            raise ValueError(f"`bins` must be positive, got {bins}.")
        vmin, vmax = _value_range(_finite(values))
        breaks = [float(b) for b in np.linspace(vmin, vmax, bins + 1)]
    else:
        breaks = sorted(float(b) for b in bins)
        if len(breaks) < 2:
            raise ValueError("Explicit bins need at least two break points.")
    return _step(palette, breaks, caption)


def color_quantile(
    palette: Palette,
    values: Iterable[float],
    n: int = 5,
    caption: str = "",
) -> cm.StepColormap:
    """Stepped scale whose breaks are data quantiles."""
    if n < 1:
        raise ValueError(f"`n` must be positive, got {n}.")
    arr = _finite(values)
    breaks = [float(b) for b in np.unique(np.quantile(arr, np.linspace(0, 1, n + 1)))]
    if len(breaks) < 2:
        breaks = list(_value_range(arr))
    return _step(palette, breaks, caption)


@dataclass(frozen=True)
class FactorPalette:
    """Categorical palette: one colour per level, ``na_color`` for anything else."""

    levels: tuple[str, ...]
    colors: tuple[str, ...]
    na_color: str = NA_COLOR

    def __call__(self, value) -> str:
        try:
            return self.colors[self.levels.index(str(value))]
        except ValueError:
            return self.na_color

    def legend_entries(self) -> list[tuple[str, str]]:
        return list(zip(self.levels, self.colors))


def color_factor(palette: Palette, levels: Iterable, na_color: str = NA_COLOR) -> FactorPalette:
    """Assign a colour to every distinct level, keeping first-seen order."""
    unique = tuple(dict.fromkeys(str(level) for level in levels))
    if not unique:
        raise ValueError("Categorical palette needs at least one level.")
    return FactorPalette(
        levels=unique,
        colors=tuple(resolve_palette(palette, len(unique))),
        na_color=na_color,
    )


def make_colormap(config: MapConfig, values: Iterable[float], caption: str = ""):
    """Build the polygon colour scale selected by ``config.binning``."""
    if config.binning == "numeric":
        return color_numeric(config.palette, values, caption=caption)
    if config.binning == "bin":
        return color_bin(config.palette, values, bins=config.bins, caption=caption)
    return color_quantile(config.palette, values, n=config.bins, caption=caption)


def price_palette(config: MapConfig) -> FactorPalette:
    return color_factor(config.price_palette, PRICE_TIERS)
