"""Tests for the band accessor."""

import numpy as np
import pytest

from s2vi.core.bands import ALL_BAND_SPECS, DEFAULT_BAND_SPECS, extract_bands
from s2vi.core.exceptions import MissingBandError
from s2vi.products.base import BandSpec


class TestDefaultSpecs:
    def test_native_names(self):
        assert [s.name for s in DEFAULT_BAND_SPECS] == ["B2", "B3", "B4", "B8", "B11", "SCL"]

    def test_swir2_not_required(self):
        assert "B12" not in [s.name for s in DEFAULT_BAND_SPECS]

    def test_all_specs_include_swir2(self):
        assert [s.name for s in ALL_BAND_SPECS] == [
            "B2", "B3", "B4", "B8", "B11", "B12", "SCL",
        ]

    def test_optical_bands_scaled(self):
        for spec in DEFAULT_BAND_SPECS[:-1]:
            assert spec.scale == 10000.0

    def test_scl_categorical(self):
        scl = DEFAULT_BAND_SPECS[-1]
        assert scl.standard_name == "scl"
        assert scl.is_categorical


class TestExtractBands:
    def test_keys_are_standard_names(self, sample_tile):
        scaled = extract_bands(sample_tile)
        assert set(scaled.data_vars) == {"blue", "green", "red", "nir", "swir_1", "scl"}

    def test_swir2_on_request(self, tile_factory):
        tile = tile_factory(
            reflectance={"B2": 0.15, "B3": 0.1, "B4": 0.2, "B8": 0.4, "B11": 0.1, "B12": 0.05}
        )
        scaled = extract_bands(tile, ALL_BAND_SPECS)
        np.testing.assert_allclose(scaled["swir_2"].values, 0.05)

    def test_swir2_missing_on_request(self, sample_tile):
        with pytest.raises(MissingBandError) as exc_info:
            extract_bands(sample_tile, ALL_BAND_SPECS)
        assert exc_info.value.band == "B12"

    def test_reflectance_scaling(self, sample_tile):
        scaled = extract_bands(sample_tile)
        np.testing.assert_allclose(scaled["red"].values, 0.2)
        np.testing.assert_allclose(scaled["nir"].values, 0.4)
        np.testing.assert_allclose(scaled["swir_1"].values, 0.1)
        assert scaled["red"].dtype == np.float64

    def test_blue_band_is_scaled(self, sample_tile):
        scaled = extract_bands(sample_tile)
        np.testing.assert_allclose(scaled["blue"].values, 0.15)

    def test_scl_unscaled(self, sample_tile):
        scaled = extract_bands(sample_tile)
        assert (scaled["scl"].values == 4).all()
        assert scaled["scl"].dtype == np.uint8

    def test_missing_band(self, tile_factory):
        tile = tile_factory(drop=("B8",))
        with pytest.raises(MissingBandError) as exc_info:
            extract_bands(tile)
        assert exc_info.value.band == "B8"

    def test_custom_specs(self, sample_tile):
        specs = [BandSpec("B4", "r", scale=10000.0), BandSpec("B8", "n", scale=10000.0)]
        scaled = extract_bands(sample_tile, specs)
        assert list(scaled.data_vars) == ["r", "n"]

    def test_source_tile_untouched(self, sample_tile):
        before = sample_tile.bands["B4"].values.copy()
        extract_bands(sample_tile)
        np.testing.assert_array_equal(sample_tile.bands["B4"].values, before)
        assert sample_tile.bands["B4"].dtype == np.uint16

    def test_crs_attrs_preserved(self, sample_tile):
        scaled = extract_bands(sample_tile)
        assert scaled["red"].attrs["crs"] == "EPSG:32631"
