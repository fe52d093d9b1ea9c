"""
Sample data generator for s2vi demos.

Creates small synthetic Sentinel-2 L2A tiles that simulate a summer month
over a fixed point, including partly cloudy scenes, so the pipeline can be
tried without any satellite data at hand.
"""

import logging
from datetime import UTC, datetime
from typing import Any

import numpy as np
from rasterio.transform import from_origin
from shapely.geometry import Point

from s2vi.core.geometry import WGS84, transform_geometry, utm_crs_for
from s2vi.core.tile import Tile

logger = logging.getLogger(__name__)

# Antwerp, Belgium (UTM 31N)
SAMPLE_LON = 4.51984
SAMPLE_LAT = 51.30761

# Mean surface reflectance per band, and fraction of cloudy pixels
_SAMPLE_SCENES: list[dict[str, Any]] = [
    {
        "id": "20180705T105031_20180705T105307_T31UFS",
        "date": "2018-07-05",
        "reflectance": {"B2": 0.04, "B3": 0.07, "B4": 0.04, "B8": 0.36, "B11": 0.18, "B12": 0.09},
        "cloud_fraction": 0.0,
    },
    {
        "id": "20180710T105029_20180710T105028_T31UFS",
        "date": "2018-07-10",
        "reflectance": {"B2": 0.05, "B3": 0.08, "B4": 0.05, "B8": 0.33, "B11": 0.19, "B12": 0.10},
        "cloud_fraction": 0.3,
    },
    {
        "id": "20180725T105021_20180725T105335_T31UFS",
        "date": "2018-07-25",
        "reflectance": {"B2": 0.06, "B3": 0.09, "B4": 0.07, "B8": 0.28, "B11": 0.22, "B12": 0.13},
        "cloud_fraction": 0.1,
    },
]

# SCL codes used for synthetic scenes
_SCL_VEGETATION = 4
_SCL_NOT_VEGETATED = 5
_SCL_CLOUD_HIGH = 9


def create_sample_tiles(
    size: int = 32,
    resolution: float = 10.0,
    lon: float = SAMPLE_LON,
    lat: float = SAMPLE_LAT,
    seed: int = 42,
) -> list[Tile]:
    """
    Create synthetic Sentinel-2 L2A tiles centred on a point.

    Bands are stored as uint16 digital numbers (reflectance * 10000) like
    COPERNICUS/S2_SR, with a uint8 SCL band. Cloudy scenes get a block of
    SCL 9 (cloud, high probability) in their top-left corner.

    Args:
        size: Tile width and height in pixels
        resolution: Pixel size in metres
        lon: Centre longitude (WGS84)
        lat: Centre latitude (WGS84)
        seed: Random seed for reflectance noise

    Returns:
        Tiles in acquisition order, in the point's UTM zone

    Examples:
        >>> from s2vi.sample_data import create_sample_tiles
        >>> tiles = create_sample_tiles()
        >>> [t.crs for t in tiles]
        ['EPSG:32631', 'EPSG:32631', 'EPSG:32631']
    """
    rng = np.random.default_rng(seed)
    crs = utm_crs_for(lon, lat)
    center = transform_geometry(Point(lon, lat), WGS84, crs)
    half = size * resolution / 2.0
    transform = from_origin(center.x - half, center.y + half, resolution, resolution)

    tiles = []
    for scene in _SAMPLE_SCENES:
        arrays = {}
        for band, mean in scene["reflectance"].items():
            noise = rng.normal(0.0, 0.005, (size, size))
            reflectance = np.clip(mean + noise, 0.0001, 1.0)
            arrays[band] = np.round(reflectance * 10000).astype(np.uint16)

        scl = np.full((size, size), _SCL_VEGETATION, dtype=np.uint8)
        scl[-2:, :] = _SCL_NOT_VEGETATED
        cloudy = int(round(size * np.sqrt(scene["cloud_fraction"])))
        if cloudy:
            scl[:cloudy, :cloudy] = _SCL_CLOUD_HIGH
        arrays["SCL"] = scl

        tiles.append(
            Tile.from_arrays(
                scene["id"],
                arrays,
                crs=crs,
                transform=transform,
                timestamp=datetime.fromisoformat(scene["date"]).replace(tzinfo=UTC),
            )
        )

    logger.info("Created %d sample tiles (%dx%d px, %s)", len(tiles), size, size, crs)
    return tiles
