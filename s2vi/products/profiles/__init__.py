"""
Product Profiles

Satellite product profile implementations.
"""

from s2vi.products.profiles.sentinel2 import SCL_CLASSES, Sentinel2BandInfo, Sentinel2L2A

__all__ = [
    "SCL_CLASSES",
    "Sentinel2BandInfo",
    "Sentinel2L2A",
]
