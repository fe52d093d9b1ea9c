"""
Pipeline Orchestrator

Runs mask -> indices -> apply mask -> export descriptor for every tile of a
collection. Tiles are independent, so they may be processed in a thread
pool; results are always returned in input order and a failing tile never
affects its siblings.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from s2vi.core.bandmath import INDEX_BAND_SPECS, add_indices
from s2vi.core.bands import extract_bands
from s2vi.core.config import RunConfig
from s2vi.core.exceptions import EmptyCollectionError, S2VIError, TileProcessingError
from s2vi.core.export import ExportDescriptor, build_export_descriptor, resolve_tile_id
from s2vi.core.masking import apply_mask, build_validity_mask
from s2vi.core.tile import Tile
from s2vi.products.profiles.sentinel2 import Sentinel2L2A

logger = logging.getLogger(__name__)

_CLOUD_MASK = Sentinel2L2A().cloud_mask


@dataclass(frozen=True)
class TileFailure:
    """A tile that could not be processed."""

    index: int
    tile_id: str
    error: S2VIError


@dataclass
class PipelineResult:
    """
    Outcome of a pipeline run.

    Attributes:
        descriptors: Export descriptors of successful tiles, in input order
        failures: Failed tiles, in input order
    """

    descriptors: list[ExportDescriptor] = field(default_factory=list)
    failures: list[TileFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """
        Raises:
            TileProcessingError: If any tile failed
        """
        if self.failures:
            raise TileProcessingError(self.failures)

    def __repr__(self):
        status = f"{len(self.descriptors)} descriptors"
        if self.failures:
            status += f" ({len(self.failures)} failed)"
        return f"<PipelineResult: {status}>"


def process_tile(tile: Tile, index: int, config: RunConfig) -> ExportDescriptor:
    """
    Process one tile.

    Args:
        tile: Raw tile (never modified)
        index: Ordinal position in the collection
        config: Run configuration

    Returns:
        ExportDescriptor for the tile

    Raises:
        MissingBandError: If a required band is absent
        ValidationError: If the tile CRS cannot be determined
    """
    scaled = extract_bands(tile, INDEX_BAND_SPECS)
    mask = build_validity_mask(scaled["scl"], _CLOUD_MASK.clear_values)
    with_indices = add_indices(tile, scaled=scaled)
    masked = apply_mask(with_indices, mask)
    return build_export_descriptor(masked, config, index)


def _run_one(index: int, tile: Tile, config: RunConfig) -> ExportDescriptor | TileFailure:
    try:
        return process_tile(tile, index, config)
    except S2VIError as e:
        tile_id = resolve_tile_id(tile, config.collection_id, index)
        logger.warning("Tile #%d (%s) failed: %s", index, tile_id, e)
        return TileFailure(index=index, tile_id=tile_id, error=e)


def run_pipeline(
    tiles: Iterable[Tile],
    config: RunConfig,
    max_workers: int | None = None,
    allow_empty: bool = True,
) -> PipelineResult:
    """
    Process a collection of tiles into export descriptors.

    Args:
        tiles: Tiles already filtered by region and date, in collection order
        config: Run configuration
        max_workers: Thread pool size; None or 1 processes sequentially
        allow_empty: Return an empty result for an empty collection instead
                     of raising

    Returns:
        PipelineResult with descriptors and per-tile failures, both ordered
        by input position

    Raises:
        EmptyCollectionError: If no tiles are given and allow_empty is False

    Examples:
        >>> result = run_pipeline(tiles, config)
        >>> [d.tile_id for d in result.descriptors]
        ['S2A_20180705', 'S2B_20180710']
        >>> result.raise_for_failures()
    """
    tiles = list(tiles)
    if not tiles:
        if not allow_empty:
            raise EmptyCollectionError("No tiles supplied")
        logger.info("Empty collection, nothing to export")
        return PipelineResult()

    logger.info("Processing %d tiles", len(tiles))
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # map() yields in submission order regardless of completion order
            outcomes = list(
                pool.map(_run_one, range(len(tiles)), tiles, [config] * len(tiles))
            )
    else:
        outcomes = [_run_one(i, tile, config) for i, tile in enumerate(tiles)]

    result = PipelineResult()
    for outcome in outcomes:
        if isinstance(outcome, TileFailure):
            result.failures.append(outcome)
        else:
            result.descriptors.append(outcome)

    logger.info(
        "Built %d export descriptors (%d tiles failed)",
        len(result.descriptors),
        len(result.failures),
    )
    return result
