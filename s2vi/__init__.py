"""
s2vi - Sentinel-2 vegetation index export pipeline

Cloud-masks Sentinel-2 L2A tiles with the scene classification band,
derives NDVI, EVI, kNDVI, NIRv, NDWI and NMDI, and builds one export
descriptor per tile in the tile's own projection.

Quick Start:
    >>> import s2vi
    >>>
    >>> config = s2vi.RunConfig.from_point(
    ...     4.51984, 51.30761, buffer_m=1000,
    ...     start_date="2018-07-01", end_date="2018-07-31",
    ...     output_folder="test",
    ... )
    >>> tiles = [s2vi.read_tile(p) for p in paths]
    >>> result = s2vi.run_pipeline(tiles, config)
    >>> for descriptor in result.descriptors:
    ...     submit(descriptor.to_dict())
"""

from s2vi.core import (
    # Exceptions
    EmptyCollectionError,
    # Classes
    ExportDescriptor,
    MissingBandError,
    PipelineResult,
    RunConfig,
    S2VIError,
    Tile,
    TileFailure,
    TileProcessingError,
    ValidationError,
    # Functions
    add_indices,
    apply_mask,
    build_export_descriptor,
    build_validity_mask,
    compute_indices,
    extract_bands,
    process_tile,
    region_of_interest,
    run_pipeline,
)

__version__ = "0.1.0"

__all__ = [
    "EmptyCollectionError",
    "ExportDescriptor",
    "MissingBandError",
    "PipelineResult",
    "RunConfig",
    "S2VIError",
    "Tile",
    "TileFailure",
    "TileProcessingError",
    "ValidationError",
    "__version__",
    "add_indices",
    "apply_mask",
    "build_export_descriptor",
    "build_validity_mask",
    "compute_indices",
    "create_sample_tiles",
    "extract_bands",
    "process_tile",
    "read_tile",
    "region_of_interest",
    "run_pipeline",
]


# Lazy imports for file I/O and sample data
def __getattr__(name):
    if name == "read_tile":
        from s2vi.io.cog import read_tile

        return read_tile
    elif name == "create_sample_tiles":
        from s2vi.sample_data import create_sample_tiles

        return create_sample_tiles
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
