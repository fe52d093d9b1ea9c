"""
s2vi CLI Entry Points

Provides command-line interface for:
- run: Build export descriptors for GeoTIFF tiles
- demo: Run the pipeline on synthetic sample tiles
- indices: List index formulas and cloud mask classes
"""

import argparse
import logging
import sys


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="s2vi - Sentinel-2 vegetation index export pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  s2vi run tiles/*.tif --config run.json        Descriptors from a config file
  s2vi run tiles/*.tif --lon 4.52 --lat 51.31 --start 2018-07-01 \\
      --end 2018-07-31 --folder test            Descriptors for a point + buffer
  s2vi demo                                     Run on synthetic tiles
  s2vi indices                                  List index formulas
        """,
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Build export descriptors for tiles")
    run_parser.add_argument("tiles", nargs="*", help="GeoTIFF tiles, in collection order")
    run_parser.add_argument("--config", help="Run configuration JSON file")
    run_parser.add_argument("--lon", type=float, help="Point longitude (WGS84)")
    run_parser.add_argument("--lat", type=float, help="Point latitude (WGS84)")
    run_parser.add_argument(
        "--buffer", type=float, default=1000.0, help="Buffer around the point in metres"
    )
    run_parser.add_argument("--start", help="Start date (YYYY-MM-DD)")
    run_parser.add_argument("--end", help="End date (YYYY-MM-DD)")
    run_parser.add_argument("--folder", help="Export destination folder")
    run_parser.add_argument(
        "--collection-id", default="", help="Collection id used to name tiles without an id"
    )
    run_parser.add_argument("--workers", type=int, default=None, help="Parallel tile workers")
    run_parser.add_argument("--output", "-o", help="Write descriptors to this JSON file")
    run_parser.add_argument(
        "--fail-on-empty", action="store_true", help="Treat an empty tile list as an error"
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run the pipeline on synthetic tiles")
    demo_parser.add_argument("--size", type=int, default=32, help="Tile size in pixels")
    demo_parser.add_argument(
        "--buffer", type=float, default=100.0, help="Buffer around the sample point in metres"
    )
    demo_parser.add_argument("--workers", type=int, default=None, help="Parallel tile workers")
    demo_parser.add_argument("--output", "-o", help="Write descriptors to this JSON file")

    # Indices command
    subparsers.add_parser("indices", help="List index formulas and cloud mask classes")

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(message)s" if not args.verbose else "%(levelname)s: %(message)s"
    )

    if args.command == "run":
        from s2vi.cli.run import run_run

        run_run(args)
    elif args.command == "demo":
        from s2vi.cli.run import run_demo

        run_demo(args)
    elif args.command == "indices":
        from s2vi.cli.indices import run_indices

        run_indices(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
