"""FITS file access.

This module provides the low-level accessor interface and its astropy
backend, the error taxonomy, and the FITSFile facade:
- FITSAccessor / AstropyAccessor: status-code level FITS primitives
- FITSFile: open -> enumerate HDUs -> read header -> read image
- FileOpenFailed, QueryFailed, NoImageData, UnsupportedDimensionality,
  UnsupportedDataType, PixelReadFailed: read failures
"""

from .accessor import (
    FITSAccessor,
    AstropyAccessor,
    AccessorError,
    FITSStatus,
    HDUType,
    DataTypeCode,
    split_card,
    status_text,
)
from .errors import (
    FITSError,
    FileOpenFailed,
    QueryFailed,
    NoImageData,
    UnsupportedDimensionality,
    UnsupportedDataType,
    PixelReadFailed,
)
from .fits_file import FITSFile, HDUInfo, read_fits_image

__all__ = [
    'FITSAccessor',
    'AstropyAccessor',
    'AccessorError',
    'FITSStatus',
    'HDUType',
    'DataTypeCode',
    'split_card',
    'status_text',
    'FITSError',
    'FileOpenFailed',
    'QueryFailed',
    'NoImageData',
    'UnsupportedDimensionality',
    'UnsupportedDataType',
    'PixelReadFailed',
    'FITSFile',
    'HDUInfo',
    'read_fits_image',
]
