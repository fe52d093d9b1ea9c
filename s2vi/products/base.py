"""
Band and Cloud Mask Specifications

Describe which bands a product exposes, how raw digital numbers are scaled,
and which classification codes count as clear sky.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BandSpec:
    """
    A band required from a raw tile

    Attributes:
        name: Native band name as stored in the tile (e.g., "B4")
        standard_name: Name used in index formulas (e.g., "red")
        scale: Divisor turning DN into reflectance (10000.0 for Sentinel-2
               optical bands), or None for categorical bands

    Examples:
        >>> BandSpec("B4", "red", scale=10000.0)
        >>> BandSpec("SCL", "scl")  # categorical, passed through unscaled
    """

    name: str
    standard_name: str
    scale: float | None = None

    @property
    def is_categorical(self) -> bool:
        return self.scale is None


@dataclass(frozen=True)
class CloudMask:
    """
    Defines how to interpret a scene classification band.

    Attributes:
        band: Native name of the classification band
        clear_values: Class codes considered "clear" (keep these, mask the rest)

    Examples:
        >>> # Sentinel-2 SCL: 4 = vegetation, 5 = not vegetated
        >>> CloudMask(band="SCL", clear_values=(4, 5))
    """

    band: str
    clear_values: tuple[int, ...] = field(default=(4, 5))

    def to_dict(self) -> dict[str, Any]:
        return {
            "band": self.band,
            "clear_values": list(self.clear_values),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CloudMask":
        return cls(
            band=data["band"],
            clear_values=tuple(data.get("clear_values", (4, 5))),
        )
