"""Side-by-side comparison of Python interactive-mapping libraries."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import pandas as pd


@dataclass(frozen=True)
class LibraryProfile:
    name: str
    backend: str
    interactivity: str
    notebook: str
    static_export: str
    strengths: str


LIBRARIES: tuple[LibraryProfile, ...] = (
    LibraryProfile(
        name="folium",
        backend="Leaflet.js",
        interactivity="pan/zoom, popups, tooltips, layer control",
        notebook="inline HTML",
        static_export="HTML only",
        strengths="simple API, many tile providers, plugins for clustering and heatmaps",
    ),
    LibraryProfile(
        name="ipyleaflet",
        backend="Leaflet.js via Jupyter widgets",
        interactivity="two-way Python callbacks",
        notebook="native widget",
        static_export="HTML via ipywidgets embed",
        strengths="live updates from Python, drawing tools",
    ),
    LibraryProfile(
        name="plotly",
        backend="plotly.js / MapLibre",
        interactivity="hover, zoom, animation frames",
        notebook="native",
        static_export="PNG/SVG via kaleido, HTML",
        strengths="choropleth and scatter maps share one API with other charts",
    ),
    LibraryProfile(
        name="pydeck",
        backend="deck.gl",
        interactivity="WebGL layers, 3D extrusion",
        notebook="native widget",
        static_export="HTML",
        strengths="very large point sets, 3D and hexbin layers",
    ),
    LibraryProfile(
        name="bokeh",
        backend="BokehJS",
        interactivity="linked brushing, custom JS callbacks",
        notebook="native",
        static_export="PNG/SVG via selenium, HTML",
        strengths="maps linked with other plots in dashboards",
    ),
    LibraryProfile(
        name="keplergl",
        backend="kepler.gl",
        interactivity="GUI-driven filtering and styling",
        notebook="native widget",
        static_export="HTML",
        strengths="exploratory analysis without code for styling",
    ),
)

COLUMN_TITLES = {
    "name": "Library",
    "backend": "Rendering backend",
    "interactivity": "Interactivity",
    "notebook": "Notebook support",
    "static_export": "Export",
    "strengths": "Strengths",
}


def comparison_table() -> pd.DataFrame:
    """Return the comparison as a DataFrame with readable column titles."""
    return pd.DataFrame([asdict(lib) for lib in LIBRARIES]).rename(columns=COLUMN_TITLES)


def comparison_markdown() -> str:
    """Render the comparison as a Markdown table."""
    table = comparison_table()
    header = "| " + " | ".join(table.columns) + " |"
    rule = "|" + "|".join("---" for _ in table.columns) + "|"
    rows = ["| " + " | ".join(str(v) for v in row) + " |" for row in table.itertuples(index=False)]
    return "\n".join([header, rule, *rows])
