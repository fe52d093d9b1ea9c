"""
Region of interest helpers

Builds the clip region (a point buffered in metres) and transforms vector
geometries between coordinate reference systems. Rasters are never
reprojected; only the region geometry moves into each tile's CRS.
"""

import logging

from rasterio.warp import transform_geom
from shapely.geometry import Point, mapping, shape
from shapely.geometry.base import BaseGeometry

from s2vi.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"


def utm_crs_for(lon: float, lat: float) -> str:
    """
    UTM zone CRS containing a WGS84 coordinate.

    Examples:
        >>> utm_crs_for(4.51984, 51.30761)  # Antwerp
        'EPSG:32631'
        >>> utm_crs_for(-70.0, -33.0)  # Santiago
        'EPSG:32719'
    """
    zone = int((lon + 180.0) // 6.0) % 60 + 1
    base = 32600 if lat >= 0 else 32700
    return f"EPSG:{base + zone}"


def transform_geometry(geometry: BaseGeometry, src_crs: str, dst_crs: str) -> BaseGeometry:
    """
    Transform a shapely geometry between CRSs.

    Returns the input unchanged when both CRSs are equal.
    """
    if src_crs == dst_crs:
        return geometry
    return shape(transform_geom(src_crs, dst_crs, mapping(geometry)))


def region_of_interest(lon: float, lat: float, buffer_m: float) -> BaseGeometry:
    """
    Buffer a WGS84 point by a distance in metres.

    The buffer is computed in the point's UTM zone so the distance is metric,
    then the polygon is transformed back to WGS84.

    Args:
        lon: Longitude in decimal degrees
        lat: Latitude in decimal degrees
        buffer_m: Buffer radius in metres (> 0)

    Returns:
        WGS84 polygon approximating a circle around the point

    Raises:
        ValidationError: If the coordinate or buffer is out of range

    Examples:
        >>> roi = region_of_interest(4.51984, 51.30761, 1000)
        >>> roi.contains(Point(4.51984, 51.30761))
        True
    """
    if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
        raise ValidationError(f"Coordinate out of range: lon={lon}, lat={lat}")
    if buffer_m <= 0:
        raise ValidationError(f"Buffer must be positive, got {buffer_m}")

    utm = utm_crs_for(lon, lat)
    center = transform_geometry(Point(lon, lat), WGS84, utm)
    region = transform_geometry(center.buffer(buffer_m), utm, WGS84)
    logger.debug("Region of interest: %.0fm around (%.5f, %.5f) via %s", buffer_m, lon, lat, utm)
    return region
