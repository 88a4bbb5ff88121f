"""Command line tools for FITS files.

Usage:
    astro-fits info <file> [--verbose|-v]
    astro-fits help
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .io import FITSError, FITSFile
from .utilities import ObservationSummarizer

logger = logging.getLogger(__name__)

MAX_METADATA_KEYS = 10

USAGE = """\
Astro FITS Ingest CLI - Command line tools for astronomical image files

Usage:
  astro-fits <command> [arguments]

Commands:
  info <file> [-v]   Display information about a FITS file
  help               Show this help message

Examples:
  astro-fits info image.fits
  astro-fits info image.fits --verbose
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.exit(1, f"Error: {message}\n\n{USAGE}")

    def print_help(self, file=None):
        (file or sys.stdout).write(USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog='astro-fits', add_help=True)
    subparsers = parser.add_subparsers(dest='command')

    info = subparsers.add_parser('info', help='Display information about a FITS file')
    info.add_argument('path', type=str, help='Path to FITS file')
    info.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging, HDU list and observation summary'
    )

    subparsers.add_parser('help', help='Show this help message')
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def handle_info(path: str, verbose: bool = False) -> int:
    """Print information about a FITS file.

    Returns:
        Process exit code
    """
    try:
        logger.debug(f"Opening FITS file: {path}")
        with FITSFile(path) as fits_file:
            num_hdus = fits_file.number_of_hdus()
            logger.debug(f"File opened successfully, found {num_hdus} HDUs")

            print("FITS File Information")
            print("====================")
            print(f"Path: {path}")
            print(f"Number of HDUs: {num_hdus}")

            if verbose:
                print("\nHDUs:")
                for hdu in fits_file.list_hdus():
                    label = 'primary' if hdu.is_primary else 'extension'
                    print(f"  {hdu.index}: {hdu.hdu_type.name} ({label})")

            # Image section is best effort: header/HDU reporting still succeeds
            logger.debug("Attempting to read image data from primary HDU")
            try:
                image = fits_file.read_image()
            except FITSError as e:
                logger.debug(f"No image section: {e}")
                image = None

            if image is not None:
                print_image(image, verbose)

    except FITSError as e:
        logger.error(f"Error reading FITS file: {e}")
        print(f"Error reading FITS file: {e}", file=sys.stderr)
        return 1

    return 0


def print_image(image, verbose: bool = False) -> None:
    pixels = image.pixel_data

    print("\nImage Data:")
    print(f"  Dimensions: {image.width} x {image.height} x {image.depth}")
    print(f"  Bitpix: {image.bitpix}")
    print(f"  Data Type: {image.data_type.description}")
    print(f"  Min value: {image.original_min_value}")
    print(f"  Max value: {image.original_max_value}")
    print(f"  Normalized pixel range: [{float(pixels.min())}, {float(pixels.max())}]")
    print(f"  Mean normalized value: {float(np.mean(pixels, dtype=np.float64))}")
    print(f"  Total pixels: {image.pixel_count}")

    metadata = image.metadata
    if len(metadata) > 0:
        print(f"\nMetadata (showing first {MAX_METADATA_KEYS} keys):")
        for key in metadata.sorted_keys()[:MAX_METADATA_KEYS]:
            print(f"  {key} = {metadata[key].render()}")
        if len(metadata) > MAX_METADATA_KEYS:
            print(f"  ... and {len(metadata) - MAX_METADATA_KEYS} more keys")

    if verbose:
        summary = ObservationSummarizer().summarize(metadata)
        print("\nObservation:")
        print(f"  Telescope: {summary.telescope or '-'}")
        print(f"  Instrument: {summary.instrument or '-'}")
        print(f"  Filter: {summary.filter_name or '-'}")
        exposure = f"{summary.exposure_time}s" if summary.exposure_time is not None else '-'
        print(f"  Exposure: {exposure}")
        print(f"  Date: {summary.observation_date or '-'}")
        print(f"  Object: {summary.target_name or '-'}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the astro-fits command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print("Error: No command given\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if args.command == 'help':
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    return handle_info(args.path, verbose=args.verbose)


if __name__ == '__main__':
    sys.exit(main())
