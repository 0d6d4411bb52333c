from argparse import Namespace
from pathlib import Path

import pytest

from webmap_walkthrough import cli
from webmap_walkthrough.gallery import EXAMPLES


def _args(tmp_path: Path, **overrides) -> Namespace:
    values = dict(
        data_dir=tmp_path / "data",
        out_dir=tmp_path / "out",
        region_dataset="ne_countries",
        regions=None,
        name_column=None,
        population_column=None,
        restaurants=None,
        examples=["colors"],
        all=False,
        static=True,
        offline=False,
        list=False,
        compare=False,
        verbose=False,
    )
    values.update(overrides)
    return Namespace(**values)


def test_parse_args_defaults():
    args = cli.parse_args([])
    assert args.region_dataset == "sample_districts"
    assert args.examples is None
    assert args.static is False


def test_parse_args_repeatable_examples():
    args = cli.parse_args(["--example", "tiles", "--example", "legend"])
    assert args.examples == ["tiles", "legend"]


def test_parse_args_rejects_unknown_example():
    with pytest.raises(SystemExit):
        cli.parse_args(["--example", "heatmap"])


def test_main_lists_examples(capsys):
    cli.main(["--list"])
    out = capsys.readouterr().out
    for key in EXAMPLES:
        assert key in out


def test_main_prints_comparison(capsys):
    cli.main(["--compare"])
    out = capsys.readouterr().out
    assert out.startswith("| Library |")
    assert "ipyleaflet" in out


def test_main_wires_selected_dataset(monkeypatch, tmp_path: Path, capsys):
    args = _args(tmp_path)
    monkeypatch.setattr(cli, "parse_args", lambda argv=None: args)

    called: dict[str, object] = {}

    def fake_fetch(data_dir, region_key, offline):
        called["fetch"] = (region_key, offline)
        return {"regions": Path("countries.zip"), "restaurants": Path("restaurants.csv")}

    def fake_load_regions(path, region_key, name_column, population_column):
        called["regions"] = (path, region_key)
        return "regions"

    def fake_load_restaurants(path):
        called["restaurants"] = path
        return "restaurants"

    def fake_render_all(out_dir, regions, restaurants, config, keys):
        called["render"] = (regions, restaurants, keys)
        return {key: out_dir / f"{key}.html" for key in keys}

    def fake_plot(regions, restaurants, palette, price_colors, out_path):
        called["plot"] = out_path
        return out_path

    monkeypatch.setattr(cli, "fetch_public_example_data", fake_fetch)
    monkeypatch.setattr(cli, "load_regions", fake_load_regions)
    monkeypatch.setattr(cli, "load_restaurants", fake_load_restaurants)
    monkeypatch.setattr(cli, "render_all", fake_render_all)
    monkeypatch.setattr(cli, "plot_static_map", fake_plot)

    cli.main()
    out = capsys.readouterr().out

    assert called["fetch"] == ("ne_countries", False)
    assert called["regions"] == (Path("countries.zip"), "ne_countries")
    assert called["render"] == ("regions", "restaurants", ["colors"])
    assert called["plot"] == tmp_path / "out" / "static_preview.png"
    assert "Region dataset: ne_countries" in out
    assert f"Saved: {tmp_path / 'out' / 'colors.html'}" in out


def test_main_prefers_explicit_input_paths(monkeypatch, tmp_path: Path):
    args = _args(
        tmp_path,
        regions=tmp_path / "mine.geojson",
        restaurants=tmp_path / "mine.csv",
        static=False,
    )
    monkeypatch.setattr(cli, "parse_args", lambda argv=None: args)
    seen = {}

    monkeypatch.setattr(
        cli,
        "fetch_public_example_data",
        lambda data_dir, region_key, offline: {"regions": Path("x"), "restaurants": Path("y")},
    )
    monkeypatch.setattr(
        cli, "load_regions", lambda path, **kwargs: seen.setdefault("regions", path)
    )
    monkeypatch.setattr(cli, "load_restaurants", lambda path: seen.setdefault("restaurants", path))
    monkeypatch.setattr(cli, "render_all", lambda *a, **kw: {})

    cli.main()

    assert seen == {"regions": tmp_path / "mine.geojson", "restaurants": tmp_path / "mine.csv"}


def test_main_renders_bundled_sample_offline(tmp_path: Path, capsys):
    out_dir = tmp_path / "out"

    cli.main(["--out-dir", str(out_dir), "--example", "legend", "--offline"])

    assert (out_dir / "legend.html").exists()
    assert "Region dataset: sample_districts" in capsys.readouterr().out


def test_parse_args_all_flag_and_exclusivity():
    args = cli.parse_args(["--all"])
    assert args.all is True
    assert args.examples is None

    with pytest.raises(SystemExit):
        cli.parse_args(["--all", "--example", "tiles"])


def test_main_all_flag_renders_every_example(monkeypatch, tmp_path: Path):
    args = _args(tmp_path, region_dataset="sample_districts", all=True, examples=None, static=False)
    monkeypatch.setattr(cli, "parse_args", lambda argv=None: args)
    seen = {}

    def fake_render_all(out_dir, regions, restaurants, config, keys):
        seen["keys"] = keys
        return {}

    monkeypatch.setattr(cli, "render_all", fake_render_all)

    cli.main()

    assert seen["keys"] is None


def test_main_writes_static_preview_for_bundled_sample(tmp_path: Path, capsys):
    out_dir = tmp_path / "out"

    cli.main(["--out-dir", str(out_dir), "--example", "initialize", "--offline", "--static"])

    png = out_dir / "static_preview.png"
    assert png.exists()
    assert png.stat().st_size > 0
    assert f"Saved: {png}" in capsys.readouterr().out
