"""
s2vi I/O Module

Readers that adapt raster files into Tiles.
"""

from s2vi.io.cog import parse_date_from_filename, read_tile

__all__ = [
    "parse_date_from_filename",
    "read_tile",
]
