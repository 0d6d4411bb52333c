from pathlib import Path

from webmap_walkthrough.datasets import bundled_data_path, load_regions, load_restaurants
from webmap_walkthrough.plotting import plot_static_map


def _sample_inputs():
    regions = load_regions(bundled_data_path("regions.geojson"))
    restaurants = load_restaurants(bundled_data_path("restaurants.csv"))
    return regions, restaurants


def test_plot_static_map_saves_png(tmp_path: Path):
    regions, restaurants = _sample_inputs()
    out_path = tmp_path / "preview" / "map.png"

    ret = plot_static_map(regions, restaurants, out_path=out_path)

    assert ret == out_path
    assert out_path.exists()
    assert out_path.stat().st_size > 0


def test_plot_static_map_returns_handles():
    regions, restaurants = _sample_inputs()

    fig, ax = plot_static_map(regions, restaurants, title="Preview", return_handles=True)

    assert ax.get_title() == "Preview"
    assert ax.get_xlabel() == "Longitude"
    legend_labels = [text.get_text() for text in ax.get_legend().get_texts()]
    expected = [tier.replace("$", r"\$") for tier in sorted(set(restaurants["price"]), key=len)]
    assert legend_labels == expected

    fig.canvas.draw()
    fig.clf()


def test_plot_static_map_without_points_or_output():
    regions, _ = _sample_inputs()
    assert plot_static_map(regions) is None
