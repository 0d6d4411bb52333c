"""Dataset download and loading helpers for webmap-walkthrough."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from urllib.request import Request, urlopen, urlretrieve

import geopandas as gpd
import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionDatasetSpec:
    """Specification for a polygon dataset carrying a population attribute."""

    key: str
    filename: str
    name_column: str
    population_column: str
    description: str
    url: str | None = None


@dataclass(frozen=True)
class RestaurantDatasetSpec:
    """Specification for a comma-separated restaurant listing."""

    key: str
    filename: str
    description: str
    url: str | None = None


REGION_DATASETS: dict[str, RegionDatasetSpec] = {
    "sample_districts": RegionDatasetSpec(
        key="sample_districts",
        filename="regions.geojson",
        name_column="district",
        population_column="pop_2020",
        description="Six sample city districts bundled with the package.",
    ),
    "ne_countries": RegionDatasetSpec(
        key="ne_countries",
        filename="ne_110m_admin_0_countries.zip",
        name_column="NAME",
        population_column="POP_EST",
        description="Natural Earth 1:110m admin-0 countries with population estimates.",
        url="https://naciscdn.org/naturalearth/110m/cultural/ne_110m_admin_0_countries.zip",
    ),
}

RESTAURANT_DATASETS: dict[str, RestaurantDatasetSpec] = {
    "sample_restaurants": RestaurantDatasetSpec(
        key="sample_restaurants",
        filename="restaurants.csv",
        description="Twelve sample restaurants located inside the sample districts.",
    ),
}

DEFAULT_REGION_DATASET_KEY = "sample_districts"
DEFAULT_RESTAURANT_DATASET_KEY = "sample_restaurants"

PRICE_TIERS = ("$", "$$", "$$$", "$$$$")
RESTAURANT_COLUMNS = ("name", "address", "price", "lon", "lat")

_COLUMN_ALIASES = {
    "longitude": "lon",
    "lng": "lon",
    "long": "lon",
    "latitude": "lat",
}

# World Cylindrical Equal Area, used only for area computations.
EQUAL_AREA_CRS = "EPSG:6933"


def _unknown_key(kind: str, key: str, registry: dict) -> ValueError:
    supported = ", ".join(sorted(registry))
    return ValueError(f"Unknown {kind} dataset '{key}'. Supported: {supported}.")


def bundled_data_path(filename: str) -> Path:
    """Return the path of a sample file shipped inside the package."""
    return Path(str(files("webmap_walkthrough") / "data" / filename))


def _non_empty(path: Path) -> bool:
    return path.exists() and path.stat().st_size > 0


def _drop_if_empty(path: Path) -> None:
    if path.exists() and path.stat().st_size == 0:
        path.unlink()


def _remote_size(url: str) -> int | None:
    try:
        with urlopen(Request(url, method="HEAD"), timeout=20) as response:
            raw = response.headers.get("Content-Length")
    except Exception:
        logger.debug("HEAD request for %s failed; keeping cached copy.", url)
        return None
    return int(raw) if raw is not None else None


def _download_with_curl(url: str, destination: Path, attempts: int = 3) -> None:
    cmd = ["curl", "-L", "--fail", "--retry", "5", "-o", str(destination), url]
    for attempt in range(attempts):
        try:
            subprocess.run(cmd, check=True)
            if not _non_empty(destination):
                raise RuntimeError(f"Downloaded file is empty: '{destination}'.")
            return
        except (subprocess.CalledProcessError, RuntimeError):
            _drop_if_empty(destination)
            if attempt == attempts - 1:
                raise


def _download_with_urllib(url: str, destination: Path, attempts: int = 3) -> None:
    for attempt in range(attempts):
        try:
            urlretrieve(url, destination)
            if not _non_empty(destination):
                raise RuntimeError(f"Downloaded file is empty: '{destination}'.")
            return
        except Exception:
            _drop_if_empty(destination)
            if attempt == attempts - 1:
                raise


def download_if_missing(
    url: str,
    destination: Path,
    *,
    refresh: bool = False,
    verify_remote: bool = False,
    offline: bool = False,
) -> Path:
    """Download ``url`` to ``destination`` unless a usable cached copy exists.

    A non-empty local file is reused as-is. With ``verify_remote=True`` a HEAD
    request is issued and the file is fetched again only when the remote copy is
    known to be larger. ``offline=True`` never touches the network.
    """
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    if _non_empty(destination) and not refresh:
        if offline or not verify_remote:
            logger.debug("Using cached %s", destination)
            return destination
        remote_size = _remote_size(url)
        if remote_size is None or destination.stat().st_size >= remote_size:
            logger.debug("Cached %s is up to date", destination)
            return destination

    if offline:
        raise RuntimeError(
            f"Offline mode is enabled and '{destination}' is unavailable or requires refresh."
        )

    logger.info("Downloading %s -> %s", url, destination)
    try:
        _download_with_curl(url, destination)
    except FileNotFoundError:
        # No curl binary on this machine.
        _download_with_urllib(url, destination)
    return destination


def fetch_public_example_data(
    data_dir: Path | str,
    region_key: str = DEFAULT_REGION_DATASET_KEY,
    restaurant_key: str = DEFAULT_RESTAURANT_DATASET_KEY,
    offline: bool = False,
) -> dict[str, Path]:
    """Resolve the selected datasets to local file paths, downloading if needed."""
    if region_key not in REGION_DATASETS:
        raise _unknown_key("region", region_key, REGION_DATASETS)
    if restaurant_key not in RESTAURANT_DATASETS:
        raise _unknown_key("restaurant", restaurant_key, RESTAURANT_DATASETS)

    data_dir = Path(data_dir)
    out: dict[str, Path] = {}
    for label, spec in (
        ("regions", REGION_DATASETS[region_key]),
        ("restaurants", RESTAURANT_DATASETS[restaurant_key]),
    ):
        if spec.url is None:
            out[label] = bundled_data_path(spec.filename)
        else:
            out[label] = download_if_missing(spec.url, data_dir / spec.filename, offline=offline)
    return out


def load_regions(
    path: Path | str,
    region_key: str = DEFAULT_REGION_DATASET_KEY,
    name_column: str | None = None,
    population_column: str | None = None,
) -> gpd.GeoDataFrame:
    """Load polygons as a ``name``/``population``/``geometry`` frame in EPSG:4326."""
    if region_key not in REGION_DATASETS:
        raise _unknown_key("region", region_key, REGION_DATASETS)
    spec = REGION_DATASETS[region_key]
    name_column = name_column or spec.name_column
    population_column = population_column or spec.population_column

    raw = gpd.read_file(path)
    missing = [col for col in (name_column, population_column) if col not in raw.columns]
    if missing:
        available = ", ".join(str(col) for col in raw.columns)
        raise ValueError(
            f"Columns {missing} not found in '{path}'. Available: {available}."
        )

    if raw.crs is None:
        raw = raw.set_crs("EPSG:4326")
    else:
        raw = raw.to_crs("EPSG:4326")

    regions = gpd.GeoDataFrame(
        {
            "name": raw[name_column].astype(str),
            "population": pd.to_numeric(raw[population_column], errors="coerce").astype(float),
        },
        geometry=raw.geometry,
    )
    # Natural Earth encodes unknown populations as negative numbers.
    regions.loc[regions["population"] < 0, "population"] = np.nan
    return regions


def normalize_price(value) -> str:
    """Map a price given as ``1``-``4`` or ``$``-``$$$$`` to its tier string."""
    level: int | None = None
    if isinstance(value, str):
        token = value.strip()
        if token.isdigit():
            level = int(token)
        elif token and set(token) == {"$"}:
            level = len(token)
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = float("nan")
        if np.isfinite(number) and number.is_integer():
            level = int(number)

    if level is None or not 1 <= level <= len(PRICE_TIERS):
        supported = ", ".join(PRICE_TIERS)
        raise ValueError(f"Invalid price tier {value!r}. Supported: {supported} or 1-4.")
    return PRICE_TIERS[level - 1]


def load_restaurants(path: Path | str) -> pd.DataFrame:
    """Load and validate the restaurant listing."""
    raw = pd.read_csv(path)
    raw.columns = [str(col).strip().lower() for col in raw.columns]
    raw = raw.rename(columns=_COLUMN_ALIASES)

    missing = [col for col in RESTAURANT_COLUMNS if col not in raw.columns]
    if missing:
        available = ", ".join(raw.columns)
        raise ValueError(f"Columns {missing} not found in '{path}'. Available: {available}.")

    restaurants = raw.loc[:, list(RESTAURANT_COLUMNS)].copy()
    restaurants["name"] = restaurants["name"].astype(str).str.strip()
    restaurants["address"] = restaurants["address"].fillna("").astype(str).str.strip()
    restaurants["price"] = restaurants["price"].map(normalize_price)

    for col, bound in (("lon", 180.0), ("lat", 90.0)):
        coords = pd.to_numeric(restaurants[col], errors="coerce")
        bad = coords.isna() | (coords.abs() > bound)
        if bad.any():
            rows = ", ".join(str(idx) for idx in restaurants.index[bad])
            raise ValueError(f"Invalid '{col}' values in '{path}' at rows: {rows}.")
        restaurants[col] = coords.astype(float)

    return restaurants.reset_index(drop=True)


def restaurants_to_geodataframe(restaurants: pd.DataFrame) -> gpd.GeoDataFrame:
    """Attach point geometries built from the ``lon``/``lat`` columns."""
    return gpd.GeoDataFrame(
        restaurants.copy(),
        geometry=gpd.points_from_xy(restaurants["lon"], restaurants["lat"]),
        crs="EPSG:4326",
    )


def add_population_density(regions: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Return a copy with ``area_km2`` and ``density`` (people per km²) columns."""
    out = regions.copy()
    out["area_km2"] = regions.to_crs(EQUAL_AREA_CRS).area.to_numpy() / 1e6
    out["density"] = out["population"] / out["area_km2"]
    return out


def count_points_in_regions(
    regions: gpd.GeoDataFrame,
    restaurants: pd.DataFrame,
) -> gpd.GeoDataFrame:
    """Return a copy of ``regions`` with the number of restaurants inside each polygon."""
    points = restaurants
    if not isinstance(points, gpd.GeoDataFrame):
        points = restaurants_to_geodataframe(restaurants)

    # Positional index so the join column is always "index_right".
    polygons = regions[["geometry"]].reset_index(drop=True)
    joined = gpd.sjoin(
        points[["geometry"]],
        polygons,
        how="inner",
        predicate="within",
    )
    counts = joined.groupby("index_right").size()

    out = regions.copy()
    out["restaurants"] = counts.reindex(polygons.index, fill_value=0).astype(int).to_numpy()
    return out


def map_center(regions: gpd.GeoDataFrame) -> tuple[float, float]:
    """Return the ``(lat, lon)`` centre of the regions' bounding box."""
    minx, miny, maxx, maxy = regions.total_bounds
    return float((miny + maxy) / 2), float((minx + maxx) / 2)


def map_bounds(regions: gpd.GeoDataFrame) -> list[list[float]]:
    """Return ``[[south, west], [north, east]]`` as expected by Leaflet."""
    minx, miny, maxx, maxy = regions.total_bounds
    return [[float(miny), float(minx)], [float(maxy), float(maxx)]]
