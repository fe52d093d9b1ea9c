"""
Tile data model

A Tile is one multi-band raster scene at one timestamp. Bands are held in an
xarray.Dataset with dims (y, x); every band carries the tile CRS in its
attrs so downstream consumers can read the projection off any single band.
"""

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import numpy as np
import xarray as xr

from s2vi.core.exceptions import MissingBandError, ValidationError

DIMS = ("y", "x")


def pixel_centers(transform, height: int, width: int) -> dict[str, np.ndarray]:
    """
    Pixel-centre coordinates for a north-up affine transform.

    Args:
        transform: rasterio/affine Affine transform of the pixel grid
        height: Number of rows
        width: Number of columns

    Returns:
        Dict with "x" and "y" coordinate arrays in the transform's CRS units
    """
    x = transform.c + transform.a * (np.arange(width) + 0.5)
    y = transform.f + transform.e * (np.arange(height) + 0.5)
    return {"x": x, "y": y}


@dataclass(frozen=True, eq=False)
class Tile:
    """
    One raster scene of a collection

    Attributes:
        id: Scene identifier (may be empty; see export.resolve_tile_id)
        bands: Dataset of co-registered 2-D bands with dims (y, x)
        crs: Coordinate reference system, e.g. "EPSG:32631"
        geometry: Optional clip region (shapely geometry)
        timestamp: Acquisition time

    Tiles are never modified in place; with_bands() and replace_bands()
    return new Tile values.

    Examples:
        >>> tile = Tile.from_arrays(
        ...     "S2A_20180705",
        ...     {"B4": red, "B8": nir, "SCL": scl},
        ...     crs="EPSG:32631",
        ... )
        >>> tile.band_names
        ['B4', 'B8', 'SCL']
    """

    id: str
    bands: xr.Dataset
    crs: str | None = None
    geometry: Any = None
    timestamp: datetime | None = None

    def __post_init__(self):
        for name, band in self.bands.data_vars.items():
            if band.dims != DIMS:
                raise ValidationError(
                    f"Band '{name}' of tile '{self.id}' has dims {band.dims}, expected {DIMS}"
                )

    @classmethod
    def from_arrays(
        cls,
        tile_id: str,
        arrays: Mapping[str, np.ndarray],
        crs: str | None = None,
        transform=None,
        geometry: Any = None,
        timestamp: datetime | None = None,
    ) -> "Tile":
        """
        Build a Tile from plain 2-D arrays.

        Args:
            tile_id: Scene identifier
            arrays: Band name to 2-D array mapping
            crs: Tile CRS, stamped onto every band
            transform: Optional affine transform; attaches x/y coordinates

        Raises:
            ValidationError: If an array is not 2-D or shapes differ
        """
        shapes = set()
        data_vars = {}
        for name, arr in arrays.items():
            arr = np.asarray(arr)
            if arr.ndim != 2:
                raise ValidationError(f"Band '{name}' must be 2-D, got shape {arr.shape}")
            shapes.add(arr.shape)
            data_vars[name] = xr.DataArray(arr, dims=DIMS, attrs=_crs_attrs(crs))

        if len(shapes) > 1:
            raise ValidationError(
                f"Bands of tile '{tile_id}' are not co-registered: shapes {sorted(shapes)}"
            )

        coords = {}
        if transform is not None and shapes:
            height, width = shapes.pop()
            coords = pixel_centers(transform, height, width)

        return cls(
            id=tile_id,
            bands=xr.Dataset(data_vars, coords=coords),
            crs=crs,
            geometry=geometry,
            timestamp=timestamp,
        )

    @property
    def band_names(self) -> list[str]:
        return list(self.bands.data_vars)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.bands.sizes.get("y", 0), self.bands.sizes.get("x", 0))

    @property
    def has_coords(self) -> bool:
        """Whether pixel-centre x/y coordinates are attached."""
        return "x" in self.bands.coords and "y" in self.bands.coords

    def select(self, names: Iterable[str]) -> xr.Dataset:
        """
        Select bands by name.

        Raises:
            MissingBandError: For the first requested band that is absent
        """
        names = list(names)
        for name in names:
            if name not in self.bands.data_vars:
                raise MissingBandError(name, self.id)
        return self.bands[names]

    def with_bands(self, new_bands: Mapping[str, xr.DataArray]) -> "Tile":
        """Return a new Tile with additional (or replaced) bands."""
        stamped = {}
        for name, band in new_bands.items():
            if "crs" not in band.attrs and self.crs is not None:
                band = band.assign_attrs(crs=self.crs)
            stamped[name] = band
        return self.replace_bands(self.bands.assign(stamped))

    def replace_bands(self, bands: xr.Dataset) -> "Tile":
        """Return a new Tile with the given band Dataset."""
        return dataclasses.replace(self, bands=bands)

    def __repr__(self) -> str:
        return (
            f"<Tile: {self.id or '(no id)'}>\n"
            f"  CRS: {self.crs}\n"
            f"  Shape: {self.shape}\n"
            f"  Bands: [{', '.join(self.band_names)}]"
        )


def _crs_attrs(crs: str | None) -> dict[str, str]:
    return {"crs": crs} if crs is not None else {}
