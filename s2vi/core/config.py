"""
Run configuration

Immutable settings shared by every tile of a pipeline run: clip region,
date range, export destination, output bands and resolution.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from s2vi.core.bandmath import INDEX_NAMES
from s2vi.core.exceptions import ValidationError
from s2vi.core.geometry import WGS84, region_of_interest

logger = logging.getLogger(__name__)

# Classification band followed by the derived indices
OUTPUT_BANDS: tuple[str, ...] = ("SCL",) + INDEX_NAMES

DEFAULT_SCALE = 10.0
DEFAULT_REFERENCE_BAND = "NDVI"


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


@dataclass(frozen=True)
class RunConfig:
    """
    Settings for one pipeline run.

    Attributes:
        geometry: Clip region (shapely geometry in geometry_crs)
        start_date: First acquisition date of the collection
        end_date: Last acquisition date of the collection
        output_folder: Export destination folder
        scale: Export resolution in the tile's native projection units
        band_names: Bands included in each export
        reference_band: Band whose CRS determines the export projection
        geometry_crs: CRS of geometry
        collection_id: Source collection, used to name tiles without an id

    Examples:
        >>> config = RunConfig.from_point(
        ...     4.51984, 51.30761, buffer_m=1000,
        ...     start_date="2018-07-01", end_date="2018-07-31",
        ...     output_folder="test",
        ... )
        >>> config.scale
        10.0
    """

    geometry: BaseGeometry
    start_date: date
    end_date: date
    output_folder: str
    scale: float = DEFAULT_SCALE
    band_names: tuple[str, ...] = OUTPUT_BANDS
    reference_band: str = DEFAULT_REFERENCE_BAND
    geometry_crs: str = WGS84
    collection_id: str = ""

    def __post_init__(self):
        # Normalise ISO strings and lists passed by callers
        object.__setattr__(self, "start_date", _as_date(self.start_date))
        object.__setattr__(self, "end_date", _as_date(self.end_date))
        object.__setattr__(self, "band_names", tuple(self.band_names))

        if self.start_date > self.end_date:
            raise ValidationError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        if not self.output_folder:
            raise ValidationError("output_folder must not be empty")
        if self.scale <= 0:
            raise ValidationError(f"scale must be positive, got {self.scale}")
        if not self.band_names:
            raise ValidationError("band_names must not be empty")
        if self.reference_band not in self.band_names:
            raise ValidationError(
                f"reference_band '{self.reference_band}' is not one of {list(self.band_names)}"
            )
        if self.geometry is None or self.geometry.is_empty:
            raise ValidationError("geometry must be a non-empty shapely geometry")

    @classmethod
    def from_point(
        cls,
        lon: float,
        lat: float,
        buffer_m: float,
        start_date: date | str,
        end_date: date | str,
        output_folder: str,
        **kwargs,
    ) -> "RunConfig":
        """Build a config whose region is a point buffered by buffer_m metres."""
        return cls(
            geometry=region_of_interest(lon, lat, buffer_m),
            start_date=start_date,
            end_date=end_date,
            output_folder=output_folder,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "geometry": mapping(self.geometry),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "output_folder": self.output_folder,
            "scale": self.scale,
            "band_names": list(self.band_names),
            "reference_band": self.reference_band,
            "geometry_crs": self.geometry_crs,
            "collection_id": self.collection_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunConfig":
        """
        Build a config from a plain dict.

        The region is either a GeoJSON "geometry" or a "point" entry of the
        form {"lon": ..., "lat": ..., "buffer_m": ...}.

        Raises:
            ValidationError: If required keys are missing or invalid
        """
        missing = [k for k in ("start_date", "end_date", "output_folder") if k not in data]
        if missing:
            raise ValidationError(f"Missing config keys: {', '.join(missing)}")

        if "geometry" in data:
            geometry = shape(data["geometry"])
        elif "point" in data:
            point = data["point"]
            geometry = region_of_interest(point["lon"], point["lat"], point["buffer_m"])
        else:
            raise ValidationError("Config needs either 'geometry' or 'point'")

        return cls(
            geometry=geometry,
            start_date=data["start_date"],
            end_date=data["end_date"],
            output_folder=data["output_folder"],
            scale=data.get("scale", DEFAULT_SCALE),
            band_names=tuple(data.get("band_names", OUTPUT_BANDS)),
            reference_band=data.get("reference_band", DEFAULT_REFERENCE_BAND),
            geometry_crs=data.get("geometry_crs", WGS84),
            collection_id=data.get("collection_id", ""),
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "RunConfig":
        """Load a config from a JSON file (see from_dict for the layout)."""
        path = Path(path)
        logger.info("Loading run configuration from %s", path)
        with open(path) as f:
            return cls.from_dict(json.load(f))
