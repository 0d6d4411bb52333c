"""The walkthrough itself: one map builder per step of the call sequence.

Each builder starts from the same two inputs, a regions frame with a population
attribute and a restaurant listing, and chains the helpers from
:mod:`webmap_walkthrough.maps` to produce one map widget. Later steps repeat the
calls of earlier ones so that every example stands on its own.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import folium
import geopandas as gpd
import pandas as pd

from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import (
    PRICE_TIERS,
    add_population_density,
    count_points_in_regions,
    map_center,
)
from webmap_walkthrough.maps import (
    add_choropleth,
    add_factor_legend,
    add_layer_control,
    add_legend,
    add_markers,
    add_overlay_group,
    add_polygons,
    add_region_labels,
    add_region_popups,
    add_tiles,
    create_map,
    fit_to_regions,
    save_map,
)
from webmap_walkthrough.palettes import price_palette

Builder = Callable[[gpd.GeoDataFrame, pd.DataFrame, MapConfig], folium.Map]

TOPO_TILES = "https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png"
TOPO_ATTRIBUTION = (
    'Map data: &copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> '
    'contributors, &copy; <a href="https://opentopomap.org">OpenTopoMap</a> (CC-BY-SA)'
)


@dataclass(frozen=True)
class ExampleSpec:
    """A single annotated step of the walkthrough."""

    key: str
    title: str
    description: str
    builder: Builder


def _base_map(regions: gpd.GeoDataFrame, config: MapConfig) -> folium.Map:
    m = create_map(config, center=config.center or map_center(regions))
    add_tiles(m, config.tiles)
    return fit_to_regions(m, regions)


def initialize_example(regions, restaurants, config):
    m = create_map(config, center=config.center or map_center(regions))
    add_tiles(m, "OpenStreetMap")
    return m


def tiles_example(regions, restaurants, config):
    m = create_map(config, center=config.center or map_center(regions))
    for provider in config.base_tiles:
        add_tiles(m, provider)
    add_tiles(m, TOPO_TILES, name="OpenTopoMap", attribution=TOPO_ATTRIBUTION)
    add_layer_control(m, collapsed=config.collapsed_layer_control)
    return fit_to_regions(m, regions)


def shapes_example(regions, restaurants, config):
    m = _base_map(regions, config)
    add_polygons(m, regions, fill_color="#3388ff", config=config, name="Districts")
    return m


def colors_example(regions, restaurants, config):
    m = _base_map(regions, config)
    add_choropleth(m, regions, "population", config=config)
    return m


def markers_example(regions, restaurants, config):
    m = _base_map(regions, config)
    add_markers(
        m,
        restaurants,
        config=config,
        kind="marker",
        color_by_price=False,
        popup=False,
        label=False,
    )
    return m


def popups_example(regions, restaurants, config):
    m = _base_map(regions, config)
    counted = count_points_in_regions(regions, restaurants)
    layer, _ = add_choropleth(m, counted, "population", config=config)
    add_region_labels(
        layer,
        fields=("name", "population", "restaurants"),
        aliases=("Name", "Population", "Restaurants"),
    )
    add_markers(m, restaurants, config=config, kind="circle", popup=True, label=True)
    return m


def legend_example(regions, restaurants, config):
    m = _base_map(regions, config)
    layer, colormap = add_choropleth(m, regions, "population", config=config)
    add_region_labels(layer, fields=("name", "population"), aliases=("Name", "Population"))
    add_legend(m, colormap, title="Population")

    add_markers(m, restaurants, config=config, kind="circle")
    add_factor_legend(m, price_palette(config), title="Price", position=config.legend_position)
    return m


def layers_example(regions, restaurants, config):
    m = create_map(config, center=config.center or map_center(regions))
    for provider in config.base_tiles:
        add_tiles(m, provider)

    enriched = count_points_in_regions(add_population_density(regions), restaurants)
    labels = ("name", "population", "density", "restaurants")
    aliases = ("Name", "Population", "People per km²", "Restaurants")

    population_layer, population_scale = add_choropleth(
        add_overlay_group(m, "Population"), enriched, "population", config=config
    )
    add_region_labels(population_layer, fields=labels, aliases=aliases)
    add_legend(m, population_scale, title="Population")

    density_layer, _ = add_choropleth(
        add_overlay_group(m, "Density", show=False), enriched, "density", config=config,
        caption="People per km²",
    )
    add_region_popups(density_layer, fields=labels, aliases=aliases)

    for tier in PRICE_TIERS:
        subset = restaurants.loc[restaurants["price"] == tier]
        if subset.empty:
            continue
        add_markers(m, subset, config=config, kind="circle", name=f"Restaurants {tier}")
    add_factor_legend(m, price_palette(config), title="Price", position=config.legend_position)

    add_layer_control(m, collapsed=config.collapsed_layer_control)
    return fit_to_regions(m, regions)


EXAMPLES: dict[str, ExampleSpec] = {
    spec.key: spec
    for spec in (
        ExampleSpec(
            key="initialize",
            title="Initialize a map widget",
            description=(
                "Create the map object centred on the data and give it a single "
                "OpenStreetMap background. Nothing else is drawn yet."
            ),
            builder=initialize_example,
        ),
        ExampleSpec(
            key="tiles",
            title="Add tiles",
            description=(
                "Tile layers are background images served by a tile provider. "
                "Several named providers and one custom XYZ template are added; "
                "a layer control switches between them."
            ),
            builder=tiles_example,
        ),
        ExampleSpec(
            key="shapes",
            title="Add shapes",
            description=(
                "Polygons from the regions file are drawn as a GeoJSON overlay "
                "with a uniform fill. Hovering a polygon highlights its outline."
            ),
            builder=shapes_example,
        ),
        ExampleSpec(
            key="colors",
            title="Add colors",
            description=(
                "The same polygons become a choropleth: each one is shaded by its "
                "population through a colour scale built from the data."
            ),
            builder=colors_example,
        ),
        ExampleSpec(
            key="markers",
            title="Add markers",
            description="Every restaurant gets a pin placed at its longitude and latitude.",
            builder=markers_example,
        ),
        ExampleSpec(
            key="popups",
            title="Add popups and labels",
            description=(
                "Hover labels show each region's name, population and restaurant "
                "count. Clicking a restaurant opens a popup with its address and "
                "price tier."
            ),
            builder=popups_example,
        ),
        ExampleSpec(
            key="legend",
            title="Add a legend",
            description=(
                "The population scale is attached as a legend, and a second "
                "legend explains the price-tier colours of the restaurant markers."
            ),
            builder=legend_example,
        ),
        ExampleSpec(
            key="layers",
            title="Add layers",
            description=(
                "Everything is grouped into overlays: population and density "
                "choropleths plus one group per price tier, all toggled from a "
                "layer control next to the base tile choices."
            ),
            builder=layers_example,
        ),
    )
}


def build_example(
    key: str,
    regions: gpd.GeoDataFrame,
    restaurants: pd.DataFrame,
    config: MapConfig | None = None,
) -> folium.Map:
    """Build the map of a single walkthrough step."""
    if key not in EXAMPLES:
        supported = ", ".join(EXAMPLES)
        raise ValueError(f"Unknown example '{key}'. Supported: {supported}.")
    return EXAMPLES[key].builder(regions, restaurants, config or MapConfig())


def render_all(
    out_dir: Path | str,
    regions: gpd.GeoDataFrame,
    restaurants: pd.DataFrame,
    config: MapConfig | None = None,
    keys: Iterable[str] | None = None,
) -> dict[str, Path]:
    """Build the selected examples (all by default) and save each as ``<key>.html``."""
    out_dir = Path(out_dir)
    saved: dict[str, Path] = {}
    for key in keys if keys is not None else EXAMPLES:
        m = build_example(key, regions, restaurants, config)
        saved[key] = save_map(m, out_dir / f"{key}.html")
    return saved
