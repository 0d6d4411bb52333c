"""Top-level package for webmap-walkthrough."""

__author__ = "Alejandro Fontal"
__version__ = "0.1.0"

from webmap_walkthrough.comparison import LIBRARIES, comparison_markdown, comparison_table
from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import (
    DEFAULT_REGION_DATASET_KEY,
    DEFAULT_RESTAURANT_DATASET_KEY,
    PRICE_TIERS,
    REGION_DATASETS,
    RESTAURANT_DATASETS,
    add_population_density,
    bundled_data_path,
    count_points_in_regions,
    fetch_public_example_data,
    load_regions,
    load_restaurants,
    map_bounds,
    map_center,
    restaurants_to_geodataframe,
)
from webmap_walkthrough.gallery import EXAMPLES, build_example, render_all
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
from webmap_walkthrough.palettes import (
    FactorPalette,
    color_bin,
    color_factor,
    color_numeric,
    color_quantile,
    make_colormap,
)
from webmap_walkthrough.plotting import plot_static_map

__all__ = [
    "MapConfig",
    "REGION_DATASETS",
    "RESTAURANT_DATASETS",
    "DEFAULT_REGION_DATASET_KEY",
    "DEFAULT_RESTAURANT_DATASET_KEY",
    "PRICE_TIERS",
    "bundled_data_path",
    "fetch_public_example_data",
    "load_regions",
    "load_restaurants",
    "restaurants_to_geodataframe",
    "add_population_density",
    "count_points_in_regions",
    "map_center",
    "map_bounds",
    "FactorPalette",
    "color_numeric",
    "color_bin",
    "color_quantile",
    "color_factor",
    "make_colormap",
    "create_map",
    "add_tiles",
    "add_polygons",
    "add_choropleth",
    "add_markers",
    "add_region_labels",
    "add_region_popups",
    "add_legend",
    "add_factor_legend",
    "add_overlay_group",
    "add_layer_control",
    "fit_to_regions",
    "save_map",
    "EXAMPLES",
    "build_example",
    "render_all",
    "LIBRARIES",
    "comparison_table",
    "comparison_markdown",
    "plot_static_map",
]
