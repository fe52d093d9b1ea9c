"""
s2vi Core Module

Tile model, band access, masking, index computation, export descriptors,
run configuration and the pipeline orchestrator.
"""

from s2vi.core.exceptions import (
    S2VIError,
    MissingBandError,
    EmptyCollectionError,
    ValidationError,
    TileProcessingError,
)
from s2vi.core.tile import Tile
from s2vi.core.bands import ALL_BAND_SPECS, DEFAULT_BAND_SPECS, extract_bands
from s2vi.core.masking import apply_mask, build_validity_mask
from s2vi.core.bandmath import (
    INDEX_BAND_SPECS,
    INDICES,
    IndexDefinition,
    add_indices,
    compute_indices,
    index_band_specs,
)
from s2vi.core.geometry import region_of_interest
from s2vi.core.config import OUTPUT_BANDS, RunConfig
from s2vi.core.export import ExportDescriptor, build_export_descriptor
from s2vi.core.pipeline import PipelineResult, TileFailure, process_tile, run_pipeline

__all__ = [
    # Data model
    "Tile",
    "IndexDefinition",
    "ExportDescriptor",
    "RunConfig",
    "PipelineResult",
    "TileFailure",
    # Constants
    "ALL_BAND_SPECS",
    "DEFAULT_BAND_SPECS",
    "INDEX_BAND_SPECS",
    "INDICES",
    "OUTPUT_BANDS",
    # Functions
    "extract_bands",
    "build_validity_mask",
    "apply_mask",
    "compute_indices",
    "index_band_specs",
    "add_indices",
    "region_of_interest",
    "build_export_descriptor",
    "process_tile",
    "run_pipeline",
    # Exceptions
    "S2VIError",
    "MissingBandError",
    "EmptyCollectionError",
    "ValidationError",
    "TileProcessingError",
]
