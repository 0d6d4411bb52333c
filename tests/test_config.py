from dataclasses import FrozenInstanceError

import pytest

from webmap_walkthrough.config import MapConfig


def test_config_defaults():
    config = MapConfig()
    assert config.binning == "quantile"
    assert config.bins == 5
    assert config.tiles in config.base_tiles
    assert config.center is None


def test_config_center_requires_both_coordinates():
    assert MapConfig(center_lat=45.5).center is None
    assert MapConfig(center_lat=45.5, center_lon=-122.6).center == (45.5, -122.6)


def test_config_is_frozen():
    config = MapConfig()
    with pytest.raises(FrozenInstanceError):
        config.bins = 7


@pytest.mark.parametrize(
    "kwargs",
    [
        {"binning": "jenks"},
        {"bins": 1},
        {"fill_opacity": 1.5},
        {"legend_position": "center"},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        MapConfig(**kwargs)
