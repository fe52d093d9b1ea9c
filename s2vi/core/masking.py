"""
Cloud/quality masking

Builds a per-pixel validity mask from the Sentinel-2 scene classification
(SCL) band and applies it uniformly to every band of a tile.
"""

import logging

import numpy as np
import xarray as xr

from s2vi.core.exceptions import ValidationError
from s2vi.core.tile import Tile

logger = logging.getLogger(__name__)

# SCL 4 = vegetation, 5 = not vegetated (bare soil)
CLEAR_SCL_VALUES: tuple[int, ...] = (4, 5)


def build_validity_mask(
    scl: xr.DataArray,
    clear_values: tuple[int, ...] = CLEAR_SCL_VALUES,
) -> xr.DataArray:
    """
    Build boolean mask: True where pixel is clear.

    Cloud, cloud shadow, water, snow, saturated and unclassified pixels
    are all masked out. NaN classification values are never clear.

    Args:
        scl: Scene classification band (categorical codes)
        clear_values: Codes to keep

    Returns:
        Boolean DataArray with the same dims and shape as scl
    """
    return scl.isin(list(clear_values)).rename("mask")


def apply_mask(tile: Tile, mask: xr.DataArray) -> Tile:
    """
    Set every band's invalid pixels to NaN.

    Input and derived bands are treated identically; integer bands are
    promoted to float so NaN can represent no-data. Applying the same mask
    twice gives the same result as applying it once.

    Args:
        tile: Tile with all bands attached
        mask: Validity mask (True = keep) matching the tile grid

    Returns:
        New Tile with masked bands

    Raises:
        ValidationError: If the mask shape differs from the tile grid
    """
    if mask.shape != tile.shape:
        raise ValidationError(
            f"Mask shape {mask.shape} does not match tile '{tile.id}' shape {tile.shape}"
        )

    keep = mask.values.astype(bool)
    masked = {}
    for name, band in tile.bands.data_vars.items():
        data = np.where(keep, band.values.astype(np.float64), np.nan)
        masked[name] = band.copy(data=data)

    valid = int(keep.sum())
    logger.debug("Tile %s: %d/%d pixels valid after masking", tile.id, valid, keep.size)
    return tile.replace_bands(xr.Dataset(masked, coords=tile.bands.coords))
