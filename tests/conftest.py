"""
s2vi Test Configuration

Shared pytest fixtures for all tests.
"""

from datetime import UTC, datetime

import numpy as np
import pytest
from rasterio.transform import from_origin

from s2vi.core.config import RunConfig
from s2vi.core.tile import Tile

# Antwerp in UTM 31N
UTM_CRS = "EPSG:32631"

# Scenario bands: BLUE, GREEN, RED, NIR, SWIR1 (+ SCL); no SWIR2
REFLECTANCE = {"B2": 0.15, "B3": 0.1, "B4": 0.2, "B8": 0.4, "B11": 0.1}


def make_tile(
    tile_id="S2A_TEST",
    reflectance=None,
    scl=4,
    shape=(4, 4),
    crs=UTM_CRS,
    drop=(),
    transform=None,
):
    """Uniform tile with DN-valued optical bands and a constant (or given) SCL band."""
    reflectance = dict(REFLECTANCE if reflectance is None else reflectance)
    arrays = {
        band: np.full(shape, round(value * 10000), dtype=np.uint16)
        for band, value in reflectance.items()
    }
    arrays["SCL"] = np.broadcast_to(np.asarray(scl, dtype=np.uint8), shape).copy()
    for band in drop:
        arrays.pop(band)
    return Tile.from_arrays(
        tile_id,
        arrays,
        crs=crs,
        transform=transform,
        timestamp=datetime(2018, 7, 5, tzinfo=UTC),
    )


@pytest.fixture
def tile_factory():
    """Factory for uniform synthetic tiles"""
    return make_tile


@pytest.fixture
def sample_tile():
    """Scenario tile: RED 0.2, NIR 0.4, GREEN 0.1, BLUE 0.15, SWIR1 0.1, SCL all 4 (no B12)"""
    return make_tile()


@pytest.fixture
def run_config():
    """Run configuration around the Antwerp test point"""
    return RunConfig.from_point(
        4.51984,
        51.30761,
        buffer_m=1000,
        start_date="2018-07-01",
        end_date="2018-07-31",
        output_folder="test",
        collection_id="COPERNICUS_S2",
    )


@pytest.fixture
def georeferenced_transform():
    """10m transform whose 32x32 grid is centred on the Antwerp test point"""
    from shapely.geometry import Point

    from s2vi.core.geometry import WGS84, transform_geometry

    center = transform_geometry(Point(4.51984, 51.30761), WGS84, UTM_CRS)
    return from_origin(center.x - 160.0, center.y + 160.0, 10.0, 10.0)
