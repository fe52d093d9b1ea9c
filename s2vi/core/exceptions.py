"""
s2vi Exceptions

Exception hierarchy for error handling.
"""


class S2VIError(Exception):
    """Base exception for s2vi"""

    pass


class MissingBandError(S2VIError):
    """A required band is absent from a tile"""

    def __init__(self, band: str, tile_id: str | None = None):
        self.band = band
        self.tile_id = tile_id
        where = f" in tile '{tile_id}'" if tile_id else ""
        super().__init__(f"Required band '{band}' not found{where}")


class EmptyCollectionError(S2VIError):
    """No tiles were supplied to a run that requires at least one"""

    pass


class ValidationError(S2VIError):
    """Tile, mask or run configuration validation failed"""

    pass


class TileProcessingError(S2VIError):
    """One or more tiles of a run failed"""

    def __init__(self, failures):
        self.failures = list(failures)
        summary = ", ".join(f"#{f.index} ({f.tile_id or '?'})" for f in self.failures)
        super().__init__(f"{len(self.failures)} tile(s) failed: {summary}")
