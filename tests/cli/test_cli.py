"""Tests for the s2vi command line."""

import json
import sys

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin

from s2vi.cli import main


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["s2vi", *argv])
    main()


def _write_tile(path, band_names):
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=4,
        width=4,
        count=len(band_names),
        dtype="uint16",
        crs="EPSG:32631",
        transform=from_origin(620000.0, 5686000.0, 10.0, 10.0),
    ) as dst:
        for i, name in enumerate(band_names, start=1):
            value = 4 if name == "SCL" else 2000 + 100 * i
            dst.write(np.full((4, 4), value, dtype=np.uint16), i)
            dst.set_band_description(i, name)
    return str(path)


FULL = ["B2", "B3", "B4", "B8", "B11", "B12", "SCL"]


class TestIndicesCommand:
    def test_lists_indices(self, monkeypatch, capsys):
        _run(monkeypatch, "indices")
        out = capsys.readouterr().out
        for name in ("NDVI", "EVI", "kNDVI", "NIRv", "NDWI", "NMDI"):
            assert name in out
        assert "vegetation" in out
        assert "keep" in out


class TestDemoCommand:
    def test_demo(self, monkeypatch, capsys):
        _run(monkeypatch, "demo", "--size", "16")
        out = capsys.readouterr().out
        assert out.count("crs=EPSG:32631") == 3

    def test_demo_output_file(self, monkeypatch, tmp_path):
        output = tmp_path / "descriptors.json"
        _run(monkeypatch, "demo", "--size", "8", "--output", str(output))
        data = json.loads(output.read_text())
        assert len(data["descriptors"]) == 3
        assert data["failures"] == []


class TestRunCommand:
    def test_run_with_flags(self, monkeypatch, capsys, tmp_path):
        tile = _write_tile(tmp_path / "20180705_a.tif", FULL)
        _run(
            monkeypatch,
            "run", tile,
            "--lon", "4.51984", "--lat", "51.30761",
            "--start", "2018-07-01", "--end", "2018-07-31",
            "--folder", "test",
        )
        data = json.loads(capsys.readouterr().out)

        descriptor = data["descriptors"][0]
        assert descriptor["tileId"] == "20180705_a"
        assert descriptor["crs"] == "EPSG:32631"
        assert descriptor["scale"] == 10.0
        assert descriptor["folder"] == "test"
        assert descriptor["bandNames"] == ["SCL", "NDVI", "EVI", "kNDVI", "NIRv", "NDWI", "NMDI"]

    def test_run_with_config(self, monkeypatch, tmp_path):
        config = tmp_path / "run.json"
        config.write_text(
            json.dumps(
                {
                    "point": {"lon": 4.51984, "lat": 51.30761, "buffer_m": 1000},
                    "start_date": "2018-07-01",
                    "end_date": "2018-07-31",
                    "output_folder": "exports",
                }
            )
        )
        tile = _write_tile(tmp_path / "20180705_a.tif", FULL)
        output = tmp_path / "out.json"

        _run(monkeypatch, "run", tile, "--config", str(config), "-o", str(output))

        data = json.loads(output.read_text())
        assert data["descriptors"][0]["folder"] == "exports"

    def test_failed_tile_exits_nonzero(self, monkeypatch, capsys, tmp_path):
        good = _write_tile(tmp_path / "20180705_a.tif", FULL)
        bad = _write_tile(tmp_path / "20180710_b.tif", ["B2", "B3", "B4", "SCL"])

        with pytest.raises(SystemExit) as exc_info:
            _run(
                monkeypatch,
                "run", good, bad,
                "--lon", "4.51984", "--lat", "51.30761",
                "--start", "2018-07-01", "--end", "2018-07-31",
                "--folder", "test",
            )
        assert exc_info.value.code == 1

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert [d["tileId"] for d in data["descriptors"]] == ["20180705_a"]
        assert data["failures"][0]["index"] == 1
        assert "B8" in captured.err

    def test_missing_region_flags(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "run", "--start", "2018-07-01")
        assert exc_info.value.code == 1
        assert "--lon" in capsys.readouterr().err

    def test_empty_run_allowed(self, monkeypatch, capsys):
        _run(
            monkeypatch,
            "run",
            "--lon", "4.51984", "--lat", "51.30761",
            "--start", "2018-07-01", "--end", "2018-07-31",
            "--folder", "test",
        )
        data = json.loads(capsys.readouterr().out)
        assert data == {"descriptors": [], "failures": []}

    def test_empty_run_rejected(self, monkeypatch):
        with pytest.raises(SystemExit):
            _run(
                monkeypatch,
                "run",
                "--lon", "4.51984", "--lat", "51.30761",
                "--start", "2018-07-01", "--end", "2018-07-31",
                "--folder", "test",
                "--fail-on-empty",
            )


class TestNoCommand:
    def test_prints_help(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            _run(monkeypatch)
        assert "usage" in capsys.readouterr().out
