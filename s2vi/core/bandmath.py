"""
Band Math accessor and spectral index calculator.

Evaluates band math expressions over the named variables of an xarray
Dataset and derives the six vegetation/water indices exported per tile.

Usage:
    >>> scaled = extract_bands(tile)
    >>> ndvi = scaled.bandmath("(nir - red) / (nir + red)")
    >>> indices = compute_indices(scaled)
    >>> list(indices.data_vars)
    ['NDVI', 'EVI', 'kNDVI', 'NIRv', 'NDWI', 'NMDI']
"""

import logging
from dataclasses import dataclass

import numpy as np
import xarray as xr

from s2vi.core.bands import extract_bands
from s2vi.core.exceptions import MissingBandError
from s2vi.core.tile import Tile
from s2vi.products.base import BandSpec
from s2vi.products.profiles.sentinel2 import Sentinel2L2A

logger = logging.getLogger(__name__)


@xr.register_dataset_accessor("bandmath")
class BandMathAccessor:
    """
    xarray Dataset accessor for band math expressions.

    Every data variable is available by name; numpy is available as 'np'.
    Zero denominators never raise: floating-point warnings are suppressed
    and non-finite results are reported as NaN.
    """

    def __init__(self, ds: xr.Dataset):
        self._ds = ds

    @property
    def bands(self) -> list[str]:
        """List band names usable in expressions."""
        return [str(name) for name in self._ds.data_vars]

    def __call__(self, expr: str) -> xr.DataArray:
        """
        Evaluate a band math expression.

        Args:
            expr: Expression over band names, e.g. "(nir - red) / (nir + red)"

        Returns:
            xr.DataArray with the computed result (NaN where undefined)

        Examples:
            >>> ds.bandmath("(nir - red) / (nir + red)")                  # NDVI
            >>> ds.bandmath("2.5 * (nir - red) / (nir + 6*red - 7.5*blue + 1)")  # EVI
            >>> ds.bandmath("np.exp(-NDVI**2)")
        """
        namespace = {"np": np}
        for name in self._ds.data_vars:
            namespace[str(name)] = self._ds[name]

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            result = eval(expr, {"__builtins__": {}}, namespace)

        if isinstance(result, xr.DataArray):
            result = result.where(np.isfinite(result))
            result.name = "bandmath"
        return result

    def __repr__(self) -> str:
        lines = ["<BandMath>"]
        for name in self.bands:
            lines.append(f"  {name}")
        return "\n".join(lines)


@dataclass(frozen=True)
class IndexDefinition:
    """
    A derived band computed from other bands.

    Attributes:
        name: Output band name (e.g., "NDVI")
        requires: Band or index names the expression reads, in order
        expression: Elementwise band math expression
    """

    name: str
    requires: tuple[str, ...]
    expression: str


# Evaluated in order; later indices may read earlier ones.
INDICES: tuple[IndexDefinition, ...] = (
    IndexDefinition("NDVI", ("nir", "red"), "(nir - red) / (nir + red)"),
    IndexDefinition(
        "EVI",
        ("nir", "red", "blue"),
        "2.5 * (nir - red) / (nir + 6 * red - 7.5 * blue + 1)",
    ),
    # sigma = (nir + red) / 2
    IndexDefinition(
        "kNDVI",
        ("NDVI", "nir", "red"),
        "np.exp(-(NDVI * NDVI) / (2 * ((nir + red) / 2) ** 2))",
    ),
    IndexDefinition("NIRv", ("NDVI", "nir"), "NDVI * nir"),
    IndexDefinition("NDWI", ("green", "nir"), "(green - nir) / (green + nir)"),
    IndexDefinition("NMDI", ("nir", "swir_1"), "(nir - swir_1) / (nir + swir_1)"),
)

INDEX_NAMES: tuple[str, ...] = tuple(d.name for d in INDICES)


def index_band_specs(indices: tuple[IndexDefinition, ...] = INDICES) -> tuple[BandSpec, ...]:
    """
    BandSpecs for the source bands read by a set of indices, plus SCL.

    Requirements satisfied by another index of the set (kNDVI reads NDVI)
    are not source bands. Optical bands come out in profile order.

    Examples:
        >>> [s.name for s in index_band_specs()]
        ['B2', 'B3', 'B4', 'B8', 'B11', 'SCL']
    """
    derived = {d.name for d in indices}
    needed = {name for d in indices for name in d.requires if name not in derived}
    profile = Sentinel2L2A()
    return tuple(profile.band_specs([name for name in profile.bands if name in needed]))


INDEX_BAND_SPECS: tuple[BandSpec, ...] = index_band_specs()


def compute_indices(
    scaled: xr.Dataset,
    indices: tuple[IndexDefinition, ...] = INDICES,
    tile_id: str | None = None,
) -> xr.Dataset:
    """
    Compute derived indices from scaled reflectance bands.

    Args:
        scaled: Bands keyed by standard name (see extract_bands)
        indices: Index definitions, evaluated in order
        tile_id: Used in error messages only

    Returns:
        xr.Dataset holding only the derived bands

    Raises:
        MissingBandError: If an index requires a band that is not available
    """
    workspace = scaled.copy()
    for definition in indices:
        for required in definition.requires:
            if required not in workspace.data_vars:
                raise MissingBandError(required, tile_id)
        value = workspace.bandmath(definition.expression)
        workspace[definition.name] = value.rename(definition.name)

    return workspace[[d.name for d in indices]]


def add_indices(
    tile: Tile,
    indices: tuple[IndexDefinition, ...] = INDICES,
    scaled: xr.Dataset | None = None,
) -> Tile:
    """
    Attach the derived indices to a tile as new bands.

    Args:
        tile: Raw tile (left untouched)
        indices: Index definitions, evaluated in order
        scaled: Bands already extracted from this tile; extracted with
                index_band_specs(indices) when omitted

    Returns:
        New Tile with one extra band per index, each carrying the tile CRS

    Raises:
        MissingBandError: If a required input band is absent
    """
    if scaled is None:
        scaled = extract_bands(tile, index_band_specs(indices))
    derived = compute_indices(scaled, indices, tile_id=tile.id)
    logger.debug("Tile %s: computed %s", tile.id, ", ".join(derived.data_vars))
    return tile.with_bands({name: derived[name] for name in derived.data_vars})
