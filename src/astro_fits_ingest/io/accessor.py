"""Low-level FITS accessor.

This module defines the fixed interface the rest of the package uses to
reach into a FITS file (open/close, HDU navigation, header records, image
parameters and raw pixel blocks), together with a concrete backend built on
astropy.io.fits.

Every accessor operation either returns its result or raises AccessorError
carrying a CFITSIO-style numeric status; the human-readable text for a
status is available from status_text().
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import IntEnum
from pathlib import Path
from typing import List, Optional, Tuple, Union
import numpy as np
from astropy.io import fits
import logging

logger = logging.getLogger(__name__)


class FITSStatus(IntEnum):
    """Numeric status codes (CFITSIO numbering)."""
    OK = 0
    FILE_NOT_OPENED = 104
    END_OF_FILE = 107
    READ_ERROR = 108
    BAD_FILEPTR = 114
    KEY_NO_EXIST = 202
    KEY_OUT_BOUNDS = 203
    BAD_BITPIX = 211
    BAD_NAXIS = 212
    NOT_IMAGE = 233
    BAD_HDU_NUM = 301
    BAD_ELEM_NUM = 308
    BAD_DATATYPE = 410


STATUS_TEXT = {
    FITSStatus.OK: 'OK - no error',
    FITSStatus.FILE_NOT_OPENED: 'could not open the named file',
    FITSStatus.END_OF_FILE: 'tried to move past end of file',
    FITSStatus.READ_ERROR: 'error reading from FITS file',
    FITSStatus.BAD_FILEPTR: 'invalid fitsfile pointer (is file opened?)',
    FITSStatus.KEY_NO_EXIST: 'keyword not found in header',
    FITSStatus.KEY_OUT_BOUNDS: 'keyword record number is out of bounds',
    FITSStatus.BAD_BITPIX: 'illegal BITPIX keyword value',
    FITSStatus.BAD_NAXIS: 'illegal NAXIS keyword value',
    FITSStatus.NOT_IMAGE: 'HDU is not an image',
    FITSStatus.BAD_HDU_NUM: 'illegal HDU number',
    FITSStatus.BAD_ELEM_NUM: 'bad first element number (< 1)',
    FITSStatus.BAD_DATATYPE: 'bad keyword datatype code',
}


class HDUType(IntEnum):
    """HDU type tags reported when moving to an HDU."""
    IMAGE_HDU = 0
    ASCII_TBL = 1
    BINARY_TBL = 2


class DataTypeCode(IntEnum):
    """Datatype tags accepted by read_pixels (CFITSIO numbering)."""
    TBYTE = 11
    TSHORT = 21
    TINT = 31
    TFLOAT = 42
    TLONGLONG = 81
    TDOUBLE = 82

    @property
    def dtype(self) -> np.dtype:
        """Native-endian numpy dtype for this tag."""
        return np.dtype(_TYPE_CODE_DTYPES[self])


_TYPE_CODE_DTYPES = {
    DataTypeCode.TBYTE: np.uint8,
    DataTypeCode.TSHORT: np.int16,
    DataTypeCode.TINT: np.int32,
    DataTypeCode.TFLOAT: np.float32,
    DataTypeCode.TLONGLONG: np.int64,
    DataTypeCode.TDOUBLE: np.float64,
}

# readwrite is accepted but files are never opened for writing
OPEN_MODES = {'readonly': 'readonly', 'readwrite': 'readonly'}


class AccessorError(Exception):
    """Failure reported by an accessor operation.

    Attributes:
        status: Numeric status code (CFITSIO numbering)
        detail: Optional backend-specific detail for logging
    """

    def __init__(self, status: int, detail: Optional[str] = None):
        self.status = int(status)
        self.detail = detail
        text = status_text(self.status)
        super().__init__(f"status {self.status}: {text}" + (f" ({detail})" if detail else ""))


def status_text(status: int) -> str:
    """Return the human-readable text for a status code."""
    try:
        return STATUS_TEXT[FITSStatus(status)]
    except ValueError:
        return f"unknown error status {status}"


def split_card(image: str) -> Tuple[str, str, str]:
    """Split an 80-character header card into keyword, value and comment text.

    Commentary cards (COMMENT, HISTORY, blank keyword) and any card without
    a value indicator return an empty value field with the card body as the
    comment. Quoted values are returned with their quotes so the decoder can
    tell strings from other literals.

    Args:
        image: Card image (only the first 80 characters are used)

    Returns:
        Tuple of (keyword, value, comment), each stripped
    """
    image = image[:80]

    if image.upper().startswith('HIERARCH ') and '=' in image:
        name, rest = image[9:].split('=', 1)
        return (name.strip(),) + _split_value_comment(rest)

    keyword = image[:8].strip()
    if image[8:10] != '= ':
        return keyword, '', image[8:].strip()

    return (keyword,) + _split_value_comment(image[10:])


def _split_value_comment(field: str) -> Tuple[str, str]:
    """Separate the value field from the '/' comment."""
    stripped = field.lstrip()

    if stripped.startswith("'"):
        # Closing quote is the first single quote that is not doubled
        i = 1
        while i < len(stripped):
            if stripped[i] == "'":
                if i + 1 < len(stripped) and stripped[i + 1] == "'":
                    i += 2
                    continue
                break
            i += 1
        value = stripped[:i + 1]
        tail = stripped[i + 1:]
        slash = tail.find('/')
        comment = tail[slash + 1:] if slash >= 0 else ''
        return value.strip(), comment.strip()

    slash = stripped.find('/')
    if slash < 0:
        return stripped.strip(), ''
    return stripped[:slash].strip(), stripped[slash + 1:].strip()


class FITSAccessor(ABC):
    """Abstract low-level FITS accessor.

    Implementations hold all per-file state inside the handle object they
    return from open(); a handle carries a mutable current-HDU cursor and
    must not be shared between concurrent readers.
    """

    @abstractmethod
    def open(self, path: Union[str, Path], mode: str = 'readonly'):
        """Open a FITS file and return an opaque handle positioned at the primary HDU."""
        pass

    @abstractmethod
    def close(self, handle) -> None:
        """Release the handle."""
        pass

    @abstractmethod
    def hdu_count(self, handle) -> int:
        """Number of HDUs in the file."""
        pass

    @abstractmethod
    def move_to_hdu(self, handle, index: int) -> HDUType:
        """Move the cursor to a 1-based HDU index and return its type."""
        pass

    @abstractmethod
    def header_space(self, handle) -> Tuple[int, int]:
        """Return (existing, more) header record counts for the current HDU."""
        pass

    @abstractmethod
    def read_record(self, handle, index: int) -> Tuple[str, str, str]:
        """Return (keyword, value, comment) for a 1-based header record index."""
        pass

    @abstractmethod
    def image_parameters(self, handle, max_axes: int) -> Tuple[int, int, List[int]]:
        """Return (bitpix, naxis, naxes) with at most max_axes extents."""
        pass

    @abstractmethod
    def read_pixels(
        self,
        handle,
        datatype: DataTypeCode,
        first: int,
        count: int
    ) -> Tuple[np.ndarray, bool]:
        """Read count samples starting at 1-based element first.

        Samples are physical values: BSCALE and BZERO are applied when the
        HDU declares them.

        Returns:
            Tuple of (1-D array, any_null flag). The array has the
            datatype's native dtype, or float64 for scaled data
        """
        pass

    def status_text(self, status: int) -> str:
        """Human-readable text for a status code."""
        return status_text(status)


class AstropyHandle:
    """Open-file state for AstropyAccessor: the HDU list and the HDU cursor."""

    def __init__(self, path: Path, hdul: fits.HDUList):
        self.path = path
        self.hdul = hdul
        self.current = 0
        self.closed = False

    @property
    def hdu(self):
        return self.hdul[self.current]


class AstropyAccessor(FITSAccessor):
    """FITS accessor backed by astropy.io.fits.

    Files are opened read-only without memory mapping. Pixel blocks come
    back in the native dtype of the requested datatype, unless the HDU
    declares a non-identity BSCALE/BZERO: then the block holds the physical
    values BSCALE * stored + BZERO as float64.

    Example:
        >>> accessor = AstropyAccessor()
        >>> handle = accessor.open('image.fits')
        >>> try:
        ...     print(accessor.hdu_count(handle))
        ... finally:
        ...     accessor.close(handle)
    """

    def open(self, path: Union[str, Path], mode: str = 'readonly') -> AstropyHandle:
        path = Path(path)
        if mode not in OPEN_MODES:
            raise ValueError(f"Unknown mode '{mode}'. Must be one of: {', '.join(OPEN_MODES)}")

        # Scaling is applied in read_pixels so BLANK checks see stored values
        try:
            hdul = fits.open(
                path,
                mode=OPEN_MODES[mode],
                memmap=False,
                do_not_scale_image_data=True
            )
        except (OSError, ValueError) as e:
            raise AccessorError(FITSStatus.FILE_NOT_OPENED, str(e)) from e

        if len(hdul) == 0:
            hdul.close()
            raise AccessorError(FITSStatus.FILE_NOT_OPENED, "file contains no HDUs")

        return AstropyHandle(path, hdul)

    def close(self, handle: AstropyHandle) -> None:
        self._check(handle)
        handle.closed = True
        try:
            handle.hdul.close()
        except OSError as e:
            raise AccessorError(FITSStatus.READ_ERROR, str(e)) from e

    def hdu_count(self, handle: AstropyHandle) -> int:
        self._check(handle)
        try:
            return len(handle.hdul)
        except (OSError, ValueError) as e:
            raise AccessorError(FITSStatus.READ_ERROR, str(e)) from e

    def move_to_hdu(self, handle: AstropyHandle, index: int) -> HDUType:
        count = self.hdu_count(handle)
        if index < 1:
            raise AccessorError(FITSStatus.BAD_HDU_NUM, f"HDU index {index}")
        if index > count:
            raise AccessorError(FITSStatus.END_OF_FILE, f"HDU index {index} of {count}")

        handle.current = index - 1
        hdu = handle.hdu
        if isinstance(hdu, fits.CompImageHDU):
            return HDUType.IMAGE_HDU
        if isinstance(hdu, fits.TableHDU):
            return HDUType.ASCII_TBL
        if isinstance(hdu, fits.BinTableHDU):
            return HDUType.BINARY_TBL
        return HDUType.IMAGE_HDU

    def header_space(self, handle: AstropyHandle) -> Tuple[int, int]:
        self._check(handle)
        return len(handle.hdu.header.cards), 0

    def read_record(self, handle: AstropyHandle, index: int) -> Tuple[str, str, str]:
        self._check(handle)
        cards = handle.hdu.header.cards
        if index < 1 or index > len(cards):
            raise AccessorError(FITSStatus.KEY_OUT_BOUNDS, f"record {index} of {len(cards)}")
        card = cards[index - 1]
        keyword, value, comment = split_card(card.image)

        if len(card.image) > 80 and isinstance(card.value, str):
            # CONTINUE long string: astropy has already joined the pieces
            value = "'" + card.value.replace("'", "''") + "'"
            comment = (card.comment or '').strip()

        return keyword, value, comment

    def image_parameters(self, handle: AstropyHandle, max_axes: int) -> Tuple[int, int, List[int]]:
        self._check(handle)
        hdu = handle.hdu
        if not isinstance(hdu, (fits.PrimaryHDU, fits.ImageHDU, fits.CompImageHDU)):
            raise AccessorError(FITSStatus.NOT_IMAGE, type(hdu).__name__)

        header = hdu.header
        try:
            bitpix = int(header['BITPIX'])
            naxis = int(header['NAXIS'])
            naxes = [int(header[f'NAXIS{i}']) for i in range(1, min(naxis, max_axes) + 1)]
        except KeyError as e:
            raise AccessorError(FITSStatus.KEY_NO_EXIST, str(e)) from e
        except (TypeError, ValueError) as e:
            raise AccessorError(FITSStatus.BAD_NAXIS, str(e)) from e

        return bitpix, naxis, naxes

    def read_pixels(
        self,
        handle: AstropyHandle,
        datatype: DataTypeCode,
        first: int,
        count: int
    ) -> Tuple[np.ndarray, bool]:
        self._check(handle)
        try:
            dtype = DataTypeCode(datatype).dtype
        except ValueError as e:
            raise AccessorError(FITSStatus.BAD_DATATYPE, f"datatype {datatype}") from e
        if first < 1:
            raise AccessorError(FITSStatus.BAD_ELEM_NUM, f"first element {first}")

        hdu = handle.hdu
        try:
            data = hdu.data
        except (OSError, ValueError, TypeError) as e:
            raise AccessorError(FITSStatus.READ_ERROR, str(e)) from e
        if data is None:
            raise AccessorError(FITSStatus.NOT_IMAGE, "HDU has no data array")

        # C-order ravel of (..., NAXIS2, NAXIS1) keeps NAXIS1 fastest
        flat = np.asarray(data).ravel()
        start = first - 1
        if start + count > flat.size:
            raise AccessorError(
                FITSStatus.END_OF_FILE,
                f"requested elements {first}..{start + count} of {flat.size}"
            )

        block = flat[start:start + count].astype(dtype)

        if block.dtype.kind == 'f':
            any_null = not bool(np.all(np.isfinite(block)))
        else:
            blank = hdu.header.get('BLANK')
            any_null = blank is not None and bool(np.any(block == blank))

        bscale, bzero = self._scaling(hdu.header)
        if bscale != 1.0 or bzero != 0.0:
            block = block.astype(np.float64) * bscale + bzero

        return block, any_null

    def _scaling(self, header: fits.Header) -> Tuple[float, float]:
        """BSCALE and BZERO of an HDU (1 and 0 when absent)."""
        try:
            return float(header.get('BSCALE', 1.0)), float(header.get('BZERO', 0.0))
        except (TypeError, ValueError) as e:
            raise AccessorError(FITSStatus.READ_ERROR, f"bad scaling keyword: {e}") from e

    def _check(self, handle: AstropyHandle) -> None:
        if handle is None or handle.closed:
            raise AccessorError(FITSStatus.BAD_FILEPTR)
