"""Thin wrappers around the folium calls that make up an interactive map.

Every helper performs one step of the usual call sequence (initialize, tiles,
shapes, colors, markers, popups/labels, legend, layers) and returns the folium
object it created, so the steps can be chained or inspected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from html import escape
from pathlib import Path

import folium
import geopandas as gpd
import numpy as np
import pandas as pd
from branca.colormap import ColorMap
from folium.plugins import MarkerCluster

from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import map_bounds
from webmap_walkthrough.palettes import NA_COLOR, FactorPalette, make_colormap, price_palette

logger = logging.getLogger(__name__)

MARKER_KINDS = ("marker", "circle")

# folium.Icon only accepts a fixed set of named colours.
PRICE_ICON_COLORS = {"$": "green", "$$": "blue", "$$$": "orange", "$$$$": "red"}

FillColor = str | Callable[[Mapping], str]


def create_map(
    config: MapConfig | None = None,
    center: Sequence[float] | None = None,
    zoom_start: int | None = None,
) -> folium.Map:
    """Initialize an empty map widget without any tile layer."""
    config = config or MapConfig()
    if center is None:
        center = config.center if config.center is not None else (0.0, 0.0)
    return folium.Map(
        location=[float(center[0]), float(center[1])],
        zoom_start=zoom_start if zoom_start is not None else config.zoom_start,
        tiles=None,
        control_scale=True,
    )


def add_tiles(
    m: folium.Map,
    provider: str | None = None,
    name: str | None = None,
    *,
    attribution: str | None = None,
) -> folium.TileLayer:
    """Add a base tile layer from a named provider or an XYZ URL template."""
    provider = provider or MapConfig().tiles
    if "{z}" in provider and not attribution:
        raise ValueError(f"Custom tile URL '{provider}' requires an attribution.")
    layer = folium.TileLayer(
        tiles=provider,
        attr=attribution,
        name=name or provider,
        overlay=False,
        control=True,
    )
    return layer.add_to(m)


def add_polygons(
    parent,
    regions: gpd.GeoDataFrame,
    *,
    fill_color: FillColor = "#3388ff",
    config: MapConfig | None = None,
    name: str = "Regions",
    highlight: bool = True,
    show: bool = True,
) -> folium.GeoJson:
    """Draw region outlines, filled with a constant colour or one computed per feature.

    ``fill_color`` may be a callable receiving the GeoJSON feature properties.
    ``parent`` is a map or a feature group.
    """
    config = config or MapConfig()

    def style(feature):
        color = fill_color(feature["properties"]) if callable(fill_color) else fill_color
        return {
            "fillColor": color,
            "color": config.line_color,
            "weight": config.line_weight,
            "fillOpacity": config.fill_opacity,
        }

    def highlight_style(feature):
        return {
            "weight": config.line_weight * 3,
            "color": "#222222",
            "fillOpacity": min(1.0, config.fill_opacity + 0.2),
        }

    layer = folium.GeoJson(
        regions,
        name=name,
        style_function=style,
        highlight_function=highlight_style if highlight else None,
        show=show,
    )
    return layer.add_to(parent)


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return not np.isfinite(float(value))
    except (TypeError, ValueError):
        return True


def add_choropleth(
    parent,
    regions: gpd.GeoDataFrame,
    column: str = "population",
    config: MapConfig | None = None,
    name: str | None = None,
    caption: str | None = None,
    show: bool = True,
) -> tuple[folium.GeoJson, ColorMap]:
    """Shade regions by ``column`` using the colour scale chosen in ``config``."""
    config = config or MapConfig()
    if column not in regions.columns:
        available = ", ".join(str(col) for col in regions.columns)
        raise ValueError(f"Column '{column}' not found. Available: {available}.")

    label = caption or column.replace("_", " ").title()
    colormap = make_colormap(config, regions[column], caption=label)

    def fill(properties):
        value = properties.get(column)
        if _is_missing(value):
            return NA_COLOR
        return colormap(float(value))[:7]

    layer = add_polygons(
        parent,
        regions,
        fill_color=fill,
        config=config,
        name=name or label,
        show=show,
    )
    return layer, colormap


def add_region_labels(
    layer: folium.GeoJson,
    fields: Sequence[str] = ("name", "population"),
    aliases: Sequence[str] | None = None,
) -> folium.GeoJsonTooltip:
    """Show feature attributes in a tooltip while hovering a region."""
    tooltip = folium.GeoJsonTooltip(
        fields=list(fields),
        aliases=list(aliases) if aliases is not None else [f.replace("_", " ").title() for f in fields],
        localize=True,
        sticky=True,
    )
    return tooltip.add_to(layer)


def add_region_popups(
    layer: folium.GeoJson,
    fields: Sequence[str] = ("name", "population"),
    aliases: Sequence[str] | None = None,
) -> folium.GeoJsonPopup:
    """Show feature attributes in a popup when a region is clicked."""
    popup = folium.GeoJsonPopup(
        fields=list(fields),
        aliases=list(aliases) if aliases is not None else [f.replace("_", " ").title() for f in fields],
        localize=True,
    )
    return popup.add_to(layer)


def _tooltip_text(value) -> str:
    # folium embeds tooltip text raw inside a JavaScript template literal.
    return escape(str(value)).replace("`", "&#96;")


def restaurant_popup_html(row: Mapping) -> str:
    """Popup body listing a restaurant's name, address and price tier."""
    return (
        f"<b>{escape(str(row['name']))}</b><br>"
        f"{escape(str(row['address']))}<br>"
        f"Price: {escape(str(row['price']))}"
    )


def add_markers(
    parent,
    restaurants: pd.DataFrame,
    *,
    config: MapConfig | None = None,
    kind: str = "circle",
    color_by_price: bool = True,
    popup: bool = True,
    label: bool = True,
    name: str = "Restaurants",
    show: bool = True,
):
    """Place one marker per restaurant inside a new overlay group.

    ``kind="marker"`` draws pin icons, ``kind="circle"`` draws circle markers.
    With ``config.cluster_markers`` the group is a ``MarkerCluster``.
    """
    config = config or MapConfig()
    if kind not in MARKER_KINDS:
        supported = ", ".join(MARKER_KINDS)
        raise ValueError(f"Unknown marker kind '{kind}'. Supported: {supported}.")

    if config.cluster_markers:
        container = MarkerCluster(name=name, show=show)
    else:
        container = folium.FeatureGroup(name=name, show=show)
    container.add_to(parent)

    colors = price_palette(config)
    for _, row in restaurants.iterrows():
        location = [float(row["lat"]), float(row["lon"])]
        row_popup = folium.Popup(restaurant_popup_html(row), max_width=300) if popup else None
        tooltip = _tooltip_text(row["name"]) if label else None

        if kind == "circle":
            folium.CircleMarker(
                location=location,
                radius=config.marker_radius,
                color=config.line_color,
                weight=1,
                fill=True,
                fill_color=colors(row["price"]) if color_by_price else "#3388ff",
                fill_opacity=0.9,
                popup=row_popup,
                tooltip=tooltip,
            ).add_to(container)
        else:
            icon_color = PRICE_ICON_COLORS.get(row["price"], "gray") if color_by_price else "blue"
            folium.Marker(
                location=location,
                popup=row_popup,
                tooltip=tooltip,
                icon=folium.Icon(color=icon_color, icon="cutlery"),
            ).add_to(container)

    return container


def add_legend(m: folium.Map, colormap: ColorMap, title: str | None = None) -> ColorMap:
    """Attach a continuous or stepped colour scale as the map legend."""
    if title is not None:
        colormap.caption = title
    colormap.add_to(m)
    return colormap


def add_factor_legend(
    m: folium.Map,
    palette: FactorPalette,
    title: str = "",
    position: str = "bottomright",
) -> folium.Element:
    """Render a fixed HTML legend box for a categorical palette."""
    vertical = "top" if position.startswith("top") else "bottom"
    horizontal = "left" if position.endswith("left") else "right"

    rows = "".join(
        f'<div><span style="display:inline-block;width:12px;height:12px;'
        f'margin-right:6px;background:{color};border:1px solid #555;"></span>'
        f"{escape(level)}</div>"
        for level, color in palette.legend_entries()
    )
    html = (
        f'<div class="factor-legend" style="position:fixed;{vertical}:30px;{horizontal}:10px;'
        f"z-index:1000;background:white;padding:6px 8px;border:1px solid #999;"
        f'border-radius:4px;font:12px/1.4 sans-serif;">'
        f"<b>{escape(title)}</b>{rows}</div>"
    )
    element = folium.Element(html)
    m.get_root().html.add_child(element)
    return element


def add_overlay_group(m: folium.Map, name: str, show: bool = True) -> folium.FeatureGroup:
    return folium.FeatureGroup(name=name, show=show).add_to(m)


def add_layer_control(
    m: folium.Map,
    collapsed: bool = False,
    position: str = "topright",
) -> folium.LayerControl:
    """Add the widget that toggles base tiles and overlay groups."""
    return folium.LayerControl(collapsed=collapsed, position=position).add_to(m)


def fit_to_regions(m: folium.Map, regions: gpd.GeoDataFrame) -> folium.Map:
    m.fit_bounds(map_bounds(regions))
    return m


def save_map(m: folium.Map, path: Path | str) -> Path:
    """Write the map as a standalone HTML document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(path))
    logger.info("Saved map to %s", path)
    return path
