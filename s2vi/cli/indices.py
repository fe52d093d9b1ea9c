"""
Indices CLI command

Lists the derived indices, the input bands they read and the scene
classification codes kept by the cloud mask.
"""

import argparse

from s2vi.core.bandmath import INDEX_BAND_SPECS, INDICES
from s2vi.products.profiles.sentinel2 import SCL_CLASSES, Sentinel2L2A


def run_indices(args: argparse.Namespace) -> None:
    """Run the indices command"""
    profile = Sentinel2L2A()

    print("Input bands:")
    for spec in INDEX_BAND_SPECS:
        scaling = f"/ {spec.scale:g}" if spec.scale else "unscaled"
        print(f"  {spec.name:5} {spec.standard_name:8} {scaling}")
    print()

    print("Indices:")
    for definition in INDICES:
        print(f"  {definition.name:6} = {definition.expression}")
    print()

    clear = profile.cloud_mask.clear_values
    print(f"Scene classification ({profile.cloud_mask.band}):")
    for code, label in SCL_CLASSES.items():
        status = "keep" if code in clear else "mask"
        print(f"  {code:2}  {label:26} {status}")
