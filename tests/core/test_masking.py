"""Tests for cloud/quality masking."""

import numpy as np
import pytest
import xarray as xr

from s2vi.core.bandmath import add_indices
from s2vi.core.exceptions import ValidationError
from s2vi.core.masking import CLEAR_SCL_VALUES, apply_mask, build_validity_mask


def _scl(values):
    return xr.DataArray(np.asarray(values), dims=("y", "x"))


class TestBuildValidityMask:
    def test_default_clear_values(self):
        assert CLEAR_SCL_VALUES == (4, 5)

    def test_vegetation_and_soil_kept(self):
        mask = build_validity_mask(_scl([[4, 5], [3, 9]]))
        np.testing.assert_array_equal(mask.values, [[True, True], [False, False]])
        assert mask.dtype == bool

    def test_all_other_classes_masked(self):
        codes = [0, 1, 2, 3, 6, 7, 8, 9, 10, 11]
        mask = build_validity_mask(_scl([codes]))
        assert not mask.values.any()

    def test_all_vegetation(self):
        mask = build_validity_mask(_scl(np.full((3, 3), 4)))
        assert mask.values.all()

    def test_nan_is_not_clear(self):
        mask = build_validity_mask(_scl([[4.0, np.nan]]))
        np.testing.assert_array_equal(mask.values, [[True, False]])

    def test_custom_clear_values(self):
        mask = build_validity_mask(_scl([[4, 6]]), clear_values=(6,))
        np.testing.assert_array_equal(mask.values, [[False, True]])


class TestApplyMask:
    def test_masks_every_band(self, tile_factory):
        scl = np.full((2, 2), 4)
        scl[0, 0] = 9
        tile = add_indices(tile_factory(scl=scl, shape=(2, 2)))
        mask = build_validity_mask(tile.bands["SCL"])

        masked = apply_mask(tile, mask)

        for name in masked.band_names:
            values = masked.bands[name].values
            assert np.isnan(values[0, 0]), name
            assert not np.isnan(values[1, 1]), name

    def test_all_cloud_is_all_nodata(self, tile_factory):
        tile = add_indices(tile_factory(scl=3))
        mask = build_validity_mask(tile.bands["SCL"])
        assert not mask.values.any()

        masked = apply_mask(tile, mask)
        for name in masked.band_names:
            assert np.isnan(masked.bands[name].values).all(), name

    def test_idempotent(self, tile_factory):
        scl = np.array([[4, 9], [5, 3]])
        tile = add_indices(tile_factory(scl=scl, shape=(2, 2)))
        mask = build_validity_mask(tile.bands["SCL"])

        once = apply_mask(tile, mask)
        twice = apply_mask(once, mask)

        for name in once.band_names:
            np.testing.assert_array_equal(once.bands[name].values, twice.bands[name].values)

    def test_does_not_modify_input(self, sample_tile):
        mask = xr.DataArray(np.zeros(sample_tile.shape, dtype=bool), dims=("y", "x"))
        apply_mask(sample_tile, mask)
        assert sample_tile.bands["B4"].dtype == np.uint16
        assert (sample_tile.bands["B4"].values == 2000).all()

    def test_preserves_attrs(self, sample_tile):
        mask = xr.DataArray(np.ones(sample_tile.shape, dtype=bool), dims=("y", "x"))
        masked = apply_mask(sample_tile, mask)
        assert masked.bands["B4"].attrs["crs"] == "EPSG:32631"

    def test_shape_mismatch(self, sample_tile):
        mask = xr.DataArray(np.ones((2, 2), dtype=bool), dims=("y", "x"))
        with pytest.raises(ValidationError, match="does not match"):
            apply_mask(sample_tile, mask)
