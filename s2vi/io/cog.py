"""
GeoTIFF tile reader using Rasterio

Adapts a multi-band GeoTIFF (or Cloud-Optimized GeoTIFF) into a Tile: band
names from the raster's band descriptions, CRS and affine transform from
the file header, acquisition date from the filename.
"""

import logging
import re
from datetime import UTC, datetime
from pathlib import Path

import rasterio

from s2vi.core.exceptions import ValidationError
from s2vi.core.tile import Tile

logger = logging.getLogger(__name__)

# Date parsing patterns (tried in order)
_DATE_PATTERNS = [
    (r"(\d{4}-\d{2}-\d{2})", "%Y-%m-%d"),  # 2018-07-05
    (r"(\d{8})", "%Y%m%d"),  # 20180705
    (r"(\d{4}_\d{2}_\d{2})", "%Y_%m_%d"),  # 2018_07_05
]


def parse_date_from_filename(filename: str) -> datetime | None:
    """
    Extract acquisition date from filename.

    Tries YYYY-MM-DD, YYYYMMDD and YYYY_MM_DD in order.

    Examples:
        >>> parse_date_from_filename("20180705T105031_20180705T105307_T31UFS.tif")
        datetime.datetime(2018, 7, 5, 0, 0, tzinfo=datetime.timezone.utc)
    """
    for pattern, fmt in _DATE_PATTERNS:
        m = re.search(pattern, filename)
        if m:
            try:
                return datetime.strptime(m.group(1), fmt).replace(tzinfo=UTC)
            except ValueError:
                continue
    return None


def _band_names_from_descriptions(descriptions: tuple[str | None, ...]) -> list[str]:
    """Band descriptions, or band_1, band_2, ... where missing."""
    return [d or f"band_{i + 1}" for i, d in enumerate(descriptions)]


def read_tile(
    path: str | Path,
    band_names: list[str] | None = None,
    tile_id: str | None = None,
) -> Tile:
    """
    Read a GeoTIFF into a Tile.

    Args:
        path: GeoTIFF path
        band_names: Names for the raster bands, in order. If None, uses the
                    band descriptions stored in the file (e.g. "B4", "SCL")
        tile_id: Tile identifier. If None, uses the file stem

    Returns:
        Tile with one band per raster band, CRS and pixel coordinates

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If band_names doesn't match the band count

    Examples:
        >>> tile = read_tile("20180705T105031_T31UFS.tif")
        >>> tile.crs
        'EPSG:32631'
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tile file does not exist: {path}")

    with rasterio.open(path) as src:
        names = band_names or _band_names_from_descriptions(src.descriptions)
        if len(names) != src.count:
            raise ValidationError(
                f"{path.name}: {len(names)} band names given for {src.count} bands"
            )
        arrays = {name: src.read(i + 1) for i, name in enumerate(names)}
        crs = src.crs.to_string() if src.crs is not None else None
        transform = src.transform

    if crs is None:
        logger.warning("%s has no CRS; export descriptors will fail for this tile", path.name)

    tile = Tile.from_arrays(
        tile_id if tile_id is not None else path.stem,
        arrays,
        crs=crs,
        transform=transform,
        timestamp=parse_date_from_filename(path.name),
    )
    logger.debug("Read %s: %s", path.name, ", ".join(tile.band_names))
    return tile
