"""Synthetic FITS file generators for testing.

Creates small FITS files covering every BITPIX encoding, 1-3 axis images,
header-only primaries, table extensions and hand-written header cards.
"""

import numpy as np
from astropy.io import fits
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Any


# BITPIX -> numpy dtype astropy writes with that BITPIX (no scaling)
BITPIX_DTYPES = {
    8: np.uint8,
    16: np.int16,
    32: np.int32,
    64: np.int64,
    -32: np.float32,
    -64: np.float64,
}


def create_image_fits(
    output_path: Path,
    data: Optional[np.ndarray],
    keywords: Optional[Dict[str, Any]] = None,
    extensions: Iterable[Any] = ()
) -> Path:
    """Write a FITS file with data in the primary HDU.

    Parameters
    ----------
    output_path : Path
        Output FITS file path
    data : np.ndarray or None
        Primary image, numpy axis order (NAXIS3, NAXIS2, NAXIS1);
        None writes a header-only primary
    keywords : dict
        Extra header keywords (value or (value, comment) tuples)
    extensions : iterable of HDUs
        Extension HDUs appended after the primary

    Returns
    -------
    Path
        Path to created FITS file
    """
    primary = fits.PrimaryHDU(data=data)
    for key, value in (keywords or {}).items():
        primary.header[key] = value

    fits.HDUList([primary, *extensions]).writeto(output_path, overwrite=True)
    return output_path


def create_bitpix_fits(
    output_path: Path,
    bitpix: int,
    shape: Tuple[int, ...] = (4, 5),
    seed: int = 42
) -> Tuple[Path, np.ndarray]:
    """Write a primary image with the given BITPIX and return it with its data."""
    rng = np.random.default_rng(seed)
    dtype = BITPIX_DTYPES[bitpix]

    if np.issubdtype(dtype, np.floating):
        data = (rng.normal(0, 100, shape)).astype(dtype)
    else:
        info = np.iinfo(dtype)
        low = max(info.min, -50000)
        high = min(info.max, 50000)
        data = rng.integers(low, high, shape, endpoint=True).astype(dtype)

    create_image_fits(output_path, data, {'OBJECT': 'SYNTH'})
    return output_path, data


def create_table_extension() -> fits.BinTableHDU:
    """Small binary table extension."""
    columns = [
        fits.Column(name='FLUX', format='E', array=np.array([1.0, 2.0, 3.0], dtype=np.float32)),
        fits.Column(name='ID', format='J', array=np.array([1, 2, 3], dtype=np.int32)),
    ]
    return fits.BinTableHDU.from_columns(columns, name='CATALOG')


def create_raw_header_fits(output_path: Path, cards: Iterable[str], data: bytes = b'') -> Path:
    """Write a file from literal 80-character card images.

    The END card and block padding are added; data is appended as-is and
    padded to a 2880-byte block.
    """
    images = [card.ljust(80)[:80] for card in cards] + ['END'.ljust(80)]
    header = ''.join(images).encode('ascii')
    header += b' ' * (-len(header) % 2880)
    body = data + b'\0' * (-len(data) % 2880)

    Path(output_path).write_bytes(header + body)
    return output_path
