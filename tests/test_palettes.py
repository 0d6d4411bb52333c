import branca.colormap as cm
import numpy as np
import pytest

from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import PRICE_TIERS
from webmap_walkthrough.palettes import (
    NA_COLOR,
    color_bin,
    color_factor,
    color_numeric,
    color_quantile,
    make_colormap,
    price_palette,
    resolve_palette,
)

POPULATION = [38500, 24100, 17800, 29300, 14600, 41200]


def test_resolve_palette_from_matplotlib_name():
    colors = resolve_palette("YlOrRd", 5)
    assert len(colors) == 5
    assert all(c.startswith("#") and len(c) == 7 for c in colors)
    assert len(set(colors)) == 5


def test_resolve_palette_unknown_name():
    with pytest.raises(ValueError, match="Unknown palette"):
        resolve_palette("not-a-colormap", 3)


def test_resolve_palette_from_colour_list():
    assert resolve_palette(["red", "#00ff00"], 2) == ["#ff0000", "#00ff00"]

    ramp = resolve_palette(["#000000", "#ffffff"], 3)
    assert ramp[0] == "#000000"
    assert ramp[-1] == "#ffffff"
    assert len(ramp) == 3


def test_color_numeric_spans_data_and_ignores_nan():
    scale = color_numeric("viridis", POPULATION + [np.nan], caption="Population")
    assert isinstance(scale, cm.LinearColormap)
    assert scale.vmin == 14600
    assert scale.vmax == 41200
    assert scale.caption == "Population"


def test_color_numeric_widens_constant_range():
    scale = color_numeric("viridis", [5, 5, 5])
    assert scale.vmax > scale.vmin


def test_color_numeric_requires_finite_values():
    with pytest.raises(ValueError):
        color_numeric("viridis", [np.nan, np.nan])


def test_color_bin_equal_width_and_explicit_breaks():
    scale = color_bin("Blues", POPULATION, bins=4)
    assert isinstance(scale, cm.StepColormap)
    assert np.allclose(scale.index, np.linspace(14600, 41200, 5))

    explicit = color_bin("Blues", POPULATION, bins=[40000, 0, 20000])
    assert list(explicit.index) == [0.0, 20000.0, 40000.0]


def test_color_quantile_breaks_span_data():
    scale = color_quantile("YlOrRd", POPULATION, n=3)
    index = list(scale.index)
    assert index[0] == min(POPULATION)
    assert index[-1] == max(POPULATION)
    assert index == sorted(index)
    assert len(index) == 4


def test_color_quantile_collapses_duplicate_breaks():
    scale = color_quantile("YlOrRd", [1, 1, 1, 1, 2], n=4)
    assert list(scale.index) == [1.0, 2.0]


def test_quantile_colours_follow_population_order():
    scale = color_quantile("Greys", POPULATION, n=5)
    ordered = sorted(POPULATION)
    darkness = [sum(scale.rgb_bytes_tuple(v)) for v in ordered]
    # Greys goes from light to dark, so brightness never increases with population.
    assert darkness == sorted(darkness, reverse=True)
    assert scale(ordered[0]) != scale(ordered[-1])


def test_color_factor_maps_levels_and_unknowns():
    palette = color_factor(["#111111", "#222222"], ["b", "a", "b"])
    assert palette.levels == ("b", "a")
    assert palette("b") == "#111111"
    assert palette("a") == "#222222"
    assert palette("zzz") == NA_COLOR
    assert palette.legend_entries() == [("b", "#111111"), ("a", "#222222")]


def test_color_factor_requires_levels():
    with pytest.raises(ValueError):
        color_factor("viridis", [])


def test_price_palette_covers_every_tier():
    palette = price_palette(MapConfig())
    assert palette.levels == PRICE_TIERS
    assert len(set(palette.colors)) == len(PRICE_TIERS)


@pytest.mark.parametrize(
    "binning, expected",
    [("numeric", cm.LinearColormap), ("bin", cm.StepColormap), ("quantile", cm.StepColormap)],
)
def test_make_colormap_dispatches_on_binning(binning, expected):
    scale = make_colormap(MapConfig(binning=binning, bins=3), POPULATION, caption="Population")
    assert isinstance(scale, expected)
    assert scale.caption == "Population"
