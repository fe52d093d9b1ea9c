"""
s2vi Products Module

Band specifications, cloud mask definitions and satellite product profiles.
"""

from s2vi.products.base import BandSpec, CloudMask

__all__ = [
    "BandSpec",
    "CloudMask",
]
