"""Exceptions raised by the FITS reader.

Every error carries the numeric status reported by the accessor and the
human-readable text resolved for that status, so callers can branch on the
cause without parsing messages.
"""

from typing import Optional


class FITSError(Exception):
    """Base class for FITS reading failures.

    Attributes:
        status: Numeric status code (CFITSIO numbering)
        message: Human-readable status text
    """

    def __init__(self, status: int, message: str):
        self.status = int(status)
        self.message = message
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"status {self.status}, {self.message}"


class FileOpenFailed(FITSError):
    """The file could not be opened (missing, unreadable or malformed)."""

    def __init__(self, status: int, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(status, message)

    def _describe(self) -> str:
        return f"Cannot open FITS file at {self.path}: status {self.status}, {self.message}"


class QueryFailed(FITSError):
    """A structural query (HDU count, HDU move, header record) failed."""

    def _describe(self) -> str:
        return f"Error reading FITS file: status {self.status}, {self.message}"


class NoImageData(FITSError):
    """The HDU carries no image (zero axes, zero extent or a table)."""

    def _describe(self) -> str:
        return f"No image data in HDU: status {self.status}, {self.message}"


class UnsupportedDimensionality(FITSError):
    """The image has more axes than the reader supports."""

    def __init__(self, status: int, message: str, naxis: int, max_axes: int):
        self.naxis = naxis
        self.max_axes = max_axes
        super().__init__(status, message)

    def _describe(self) -> str:
        return (
            f"Unsupported dimensionality: NAXIS = {self.naxis} "
            f"(at most {self.max_axes} axes supported)"
        )


class UnsupportedDataType(FITSError):
    """BITPIX is not one of the FITS-standard codes."""

    def __init__(self, status: int, message: str, bitpix: int):
        self.bitpix = bitpix
        super().__init__(status, message)

    def _describe(self) -> str:
        return f"Unsupported data type: bitpix = {self.bitpix}"


class PixelReadFailed(FITSError):
    """Reading the pixel block failed; no pixel data is published."""

    def _describe(self) -> str:
        return f"Error reading image data: status {self.status}, {self.message}"
