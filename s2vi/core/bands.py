"""
Band Accessor

Extracts the bands needed for index computation from a raw tile and converts
optical digital numbers to surface reflectance.
"""

import logging

import numpy as np
import xarray as xr

from s2vi.core.tile import Tile
from s2vi.products.base import BandSpec
from s2vi.products.profiles.sentinel2 import Sentinel2L2A

logger = logging.getLogger(__name__)

_PROFILE = Sentinel2L2A()

# Optical inputs of the derived indices: B2, B3, B4, B8, B11 (scaled) + SCL (categorical)
DEFAULT_BAND_SPECS: tuple[BandSpec, ...] = tuple(
    _PROFILE.band_specs(["blue", "green", "red", "nir", "swir_1"])
)

# Every optical band of the profile, B12 (swir_2) included
ALL_BAND_SPECS: tuple[BandSpec, ...] = tuple(_PROFILE.band_specs())


def extract_bands(
    tile: Tile,
    specs: tuple[BandSpec, ...] | list[BandSpec] = DEFAULT_BAND_SPECS,
) -> xr.Dataset:
    """
    Extract and scale the requested bands of a tile.

    Optical bands are cast to float64 and divided by their scale
    (DN / 10000 = reflectance). Categorical bands are passed through as-is.

    Args:
        tile: Source tile (left untouched)
        specs: Bands to extract

    Returns:
        xr.Dataset keyed by each spec's standard_name

    Raises:
        MissingBandError: If a native band name is absent from the tile

    Examples:
        >>> scaled = extract_bands(tile)
        >>> float(scaled["red"].max())  # reflectance, not DN
        0.2
    """
    raw = tile.select([spec.name for spec in specs])

    scaled = {}
    for spec in specs:
        band = raw[spec.name]
        if not spec.is_categorical:
            band = (band.astype(np.float64) / spec.scale).assign_attrs(band.attrs)
        scaled[spec.standard_name] = band

    logger.debug("Extracted %d bands from tile %s", len(scaled), tile.id)
    return xr.Dataset(scaled)
