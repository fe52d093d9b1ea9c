"""
Export Descriptor Builder

Turns a processed tile into an immutable description of an export request:
which bands, clipped to which region, in which projection, at which
resolution, to which folder. Nothing is written or submitted here; an
external job-submission collaborator consumes the descriptors.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import xarray as xr
from shapely import contains_xy
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from s2vi.core.config import RunConfig
from s2vi.core.exceptions import ValidationError
from s2vi.core.geometry import transform_geometry
from s2vi.core.tile import Tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportDescriptor:
    """
    Export request for one tile.

    Attributes:
        tile_id: Resolved tile identifier (also used as description and
                 file name prefix of the export)
        crs: Projection of the export, read from the reference band
        region: Export region (shapely geometry, in the run's geometry CRS)
        scale: Resolution in the tile's native projection units
        folder: Destination folder
        band_names: Exported bands, in order
        image: Selected and clipped bands (not part of equality or to_dict)
    """

    tile_id: str
    crs: str
    region: BaseGeometry
    scale: float
    folder: str
    band_names: tuple[str, ...]
    image: xr.Dataset | None = field(default=None, compare=False, repr=False)

    @property
    def description(self) -> str:
        return self.tile_id

    @property
    def file_name_prefix(self) -> str:
        return self.tile_id

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-serializable form for the job-submission collaborator."""
        return {
            "tileId": self.tile_id,
            "crs": self.crs,
            "region": mapping(self.region),
            "scale": self.scale,
            "folder": self.folder,
            "bandNames": list(self.band_names),
            "description": self.description,
            "fileNamePrefix": self.file_name_prefix,
        }


def resolve_tile_id(tile: Tile, collection_id: str, index: int) -> str:
    """
    Stable identifier for a tile within one run.

    Uses the tile's own id when present, otherwise
    "<collectionId>_image_<index>" with "/" in the collection id replaced
    by "_".

    Examples:
        >>> resolve_tile_id(tile_without_id, "COPERNICUS/S2", 2)
        'COPERNICUS_S2_image_2'
    """
    if tile.id:
        return tile.id
    return f"{collection_id.replace('/', '_')}_image_{index}"


def resolve_crs(tile: Tile, reference_band: str) -> str:
    """
    Read the export CRS off the reference band.

    Falls back to the tile CRS when the band carries none.

    Raises:
        MissingBandError: If the reference band is absent
        ValidationError: If no CRS is known for the tile
    """
    band = tile.select([reference_band])[reference_band]
    crs = band.attrs.get("crs") or tile.crs
    if not crs:
        raise ValidationError(f"No CRS found for tile '{tile.id}' (band '{reference_band}')")
    return str(crs)


def clip_to_region(
    image: xr.Dataset,
    region: BaseGeometry,
    region_crs: str,
    tile_crs: str,
) -> xr.Dataset:
    """
    Set pixels whose centre falls outside the region to NaN.

    The region is transformed into the tile CRS; the raster grid is left
    as is. Images without x/y coordinates are returned unchanged.
    """
    if "x" not in image.coords or "y" not in image.coords:
        logger.debug("Image has no pixel coordinates, skipping clip")
        return image

    local_region = transform_geometry(region, region_crs, tile_crs)
    xx, yy = np.meshgrid(image.coords["x"].values, image.coords["y"].values)
    inside = xr.DataArray(contains_xy(local_region, xx, yy), dims=("y", "x"))

    clipped = {}
    for name, band in image.data_vars.items():
        clipped[name] = band.where(inside).assign_attrs(band.attrs)
    return xr.Dataset(clipped, coords=image.coords)


def build_export_descriptor(tile: Tile, config: RunConfig, index: int = 0) -> ExportDescriptor:
    """
    Build the export descriptor of a processed tile.

    Args:
        tile: Tile with the classification band and derived indices attached
        config: Run configuration (region, folder, scale, bands, reference band)
        index: Ordinal position of the tile in the collection

    Returns:
        Immutable ExportDescriptor

    Raises:
        MissingBandError: If an output band or the reference band is absent
        ValidationError: If the tile CRS cannot be determined
    """
    image = tile.select(config.band_names).astype(np.float64)
    crs = resolve_crs(tile, config.reference_band)
    image = clip_to_region(image, config.geometry, config.geometry_crs, crs)
    tile_id = resolve_tile_id(tile, config.collection_id, index)

    logger.debug(
        "Export descriptor for %s (crs=%s, %d bands)", tile_id, crs, len(config.band_names)
    )
    return ExportDescriptor(
        tile_id=tile_id,
        crs=crs,
        region=config.geometry,
        scale=config.scale,
        folder=config.output_folder,
        band_names=config.band_names,
        image=image,
    )
