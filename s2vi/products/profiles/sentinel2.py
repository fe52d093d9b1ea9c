"""
Sentinel-2 Product Profile

Band layout, radiometric scaling and scene classification codes for
Sentinel-2 L2A (Surface Reflectance) tiles as delivered by COPERNICUS/S2_SR.
"""

from dataclasses import dataclass

from s2vi.products.base import BandSpec, CloudMask

# Scene Classification Layer (SCL) codes
SCL_CLASSES: dict[int, str] = {
    0: "no_data",
    1: "saturated_or_defective",
    2: "dark_area_pixels",
    3: "cloud_shadows",
    4: "vegetation",
    5: "not_vegetated",
    6: "water",
    7: "unclassified",
    8: "cloud_medium_probability",
    9: "cloud_high_probability",
    10: "thin_cirrus",
    11: "snow",
}


@dataclass(frozen=True)
class Sentinel2BandInfo:
    """
    Sentinel-2 band metadata

    Attributes:
        native_name: Sentinel-2 band name (e.g., "B4")
        standard_name: Standardized name (e.g., "red")
        wavelength: Center wavelength in nanometers
        resolution: Native spatial resolution in meters (10m or 20m)
    """

    native_name: str
    standard_name: str
    wavelength: float
    resolution: float


@dataclass(frozen=True)
class Sentinel2L2A:
    """
    Sentinel-2 Level-2A Product Profile

    Surface Reflectance data with atmospheric correction.

    Data Format:
    - DN to Reflectance: DN / 10000
    - Scene classification: SCL band, categorical (see SCL_CLASSES)
    - Clear-sky land surface: SCL 4 (vegetation) and 5 (not vegetated)

    Examples:
        >>> from s2vi.products.profiles import Sentinel2L2A
        >>> profile = Sentinel2L2A()
        >>> profile.bands["red"].native_name
        'B4'
        >>> [s.name for s in profile.band_specs(["red", "nir"])]
        ['B4', 'B8']
    """

    product_id: str = "sentinel2_l2a"
    collection_id: str = "COPERNICUS/S2_SR"
    native_resolution: float = 10.0

    # Radiometric conversion
    reflectance_scale: float = 10000.0

    bands: dict[str, Sentinel2BandInfo] = None
    cloud_mask: CloudMask = CloudMask(band="SCL", clear_values=(4, 5))

    def __post_init__(self):
        """Initialize band definitions"""
        if self.bands is None:
            # Use object.__setattr__ because dataclass is frozen
            object.__setattr__(
                self,
                "bands",
                {
                    "blue": Sentinel2BandInfo("B2", "blue", 490.0, 10.0),
                    "green": Sentinel2BandInfo("B3", "green", 560.0, 10.0),
                    "red": Sentinel2BandInfo("B4", "red", 665.0, 10.0),
                    "nir": Sentinel2BandInfo("B8", "nir", 842.0, 10.0),
                    "swir_1": Sentinel2BandInfo("B11", "swir_1", 1610.0, 20.0),
                    "swir_2": Sentinel2BandInfo("B12", "swir_2", 2190.0, 20.0),
                },
            )

    def band_specs(self, standard_names: list[str] | None = None) -> list[BandSpec]:
        """
        Build BandSpecs for optical bands plus the classification band.

        Args:
            standard_names: Optical bands to include (default: all)

        Returns:
            Reflectance BandSpecs scaled by reflectance_scale, followed by
            an unscaled BandSpec for the SCL band

        Raises:
            KeyError: If a standard name is not part of the profile
        """
        names = standard_names if standard_names is not None else list(self.bands)
        specs = [
            BandSpec(self.bands[n].native_name, n, scale=self.reflectance_scale) for n in names
        ]
        specs.append(BandSpec(self.cloud_mask.band, "scl"))
        return specs

    def get_band_by_native_name(self, native_name: str) -> Sentinel2BandInfo:
        """
        Get band info by Sentinel-2 native name (e.g., "B4")

        Raises:
            KeyError: If band name not found
        """
        for band_info in self.bands.values():
            if band_info.native_name == native_name:
                return band_info
        raise KeyError(f"Band '{native_name}' not found in Sentinel-2 profile")

    def __repr__(self) -> str:
        """String representation"""
        return (
            f"<Sentinel2L2A>\n"
            f"Collection: {self.collection_id}\n"
            f"Native Resolution: {self.native_resolution}m\n"
            f"Bands: {', '.join(b.native_name for b in self.bands.values())}"
        )
