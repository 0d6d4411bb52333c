"""Command-line entry point that renders the walkthrough maps."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from webmap_walkthrough.comparison import comparison_markdown
from webmap_walkthrough.config import MapConfig
from webmap_walkthrough.datasets import (
    DEFAULT_REGION_DATASET_KEY,
    REGION_DATASETS,
    fetch_public_example_data,
    load_regions,
    load_restaurants,
)
from webmap_walkthrough.gallery import EXAMPLES, render_all
from webmap_walkthrough.palettes import price_palette
from webmap_walkthrough.plotting import plot_static_map


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render the interactive-map walkthrough examples")
    parser.add_argument("--data-dir", type=Path, default=Path(".data"))
    parser.add_argument("--out-dir", type=Path, default=Path(".output"))
    parser.add_argument(
        "--region-dataset",
        type=str,
        default=DEFAULT_REGION_DATASET_KEY,
        choices=sorted(REGION_DATASETS),
        help="Polygon source key.",
    )
    parser.add_argument("--regions", type=Path, default=None, help="Override the polygon file.")
    parser.add_argument("--name-column", type=str, default=None)
    parser.add_argument("--population-column", type=str, default=None)
    parser.add_argument(
        "--restaurants", type=Path, default=None, help="Override the restaurant CSV."
    )
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--example",
        dest="examples",
        action="append",
        choices=list(EXAMPLES),
        help="Walkthrough step to render; repeat for several. Defaults to all steps.",
    )
    selection.add_argument("--all", action="store_true", help="Render every walkthrough step.")
    parser.add_argument("--static", action="store_true", help="Also write a PNG preview.")
    parser.add_argument("--offline", action="store_true", help="Never download data.")
    parser.add_argument("--list", action="store_true", help="List the walkthrough steps.")
    parser.add_argument("--compare", action="store_true", help="Print the library comparison.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for spec in EXAMPLES.values():
            print(f"{spec.key:<12}{spec.title}")
        return
    if args.compare:
        print(comparison_markdown())
        return

    config = MapConfig()
    paths = fetch_public_example_data(
        args.data_dir,
        region_key=args.region_dataset,
        offline=args.offline,
    )

    regions = load_regions(
        args.regions or paths["regions"],
        region_key=args.region_dataset,
        name_column=args.name_column,
        population_column=args.population_column,
    )
    restaurants = load_restaurants(args.restaurants or paths["restaurants"])

    keys = None if args.all else args.examples
    saved = render_all(args.out_dir, regions, restaurants, config=config, keys=keys)

    print(f"Region dataset: {args.region_dataset}")
    for path in saved.values():
        print(f"Saved: {path}")

    if args.static:
        png_path = plot_static_map(
            regions,
            restaurants,
            palette=config.palette,
            price_colors=price_palette(config),
            out_path=args.out_dir / "static_preview.png",
        )
        print(f"Saved: {png_path}")


if __name__ == "__main__":
    main()
