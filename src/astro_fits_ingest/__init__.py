"""Astro FITS Ingest - FITS structural reader and image normalization.

Opens FITS files, walks their HDUs, decodes header records into typed
metadata and reads the primary image into a normalized float32 buffer
that remembers the original value range.

API:
- io: FITSFile (facade), FITSAccessor / AstropyAccessor, error taxonomy
- header: HeaderDecoder, Metadata, MetadataValue
- processing: ImageParameterResolver, Normalizer
- image: Image, FITSDataType
- utilities: ObservationSummarizer
"""

# io must be imported before image/processing (image imports io.accessor,
# io.fits_file imports image)
from .header import Metadata, MetadataKind, MetadataValue, HeaderDecoder
from .io import (
    FITSFile,
    HDUInfo,
    read_fits_image,
    FITSAccessor,
    AstropyAccessor,
    HDUType,
    FITSError,
    FileOpenFailed,
    QueryFailed,
    NoImageData,
    UnsupportedDimensionality,
    UnsupportedDataType,
    PixelReadFailed,
)
from .image import Image, FITSDataType
from .processing import ImageParameters, ImageParameterResolver, Normalizer
from .utilities import ObservationSummarizer

__version__ = "0.1.0"
__all__ = [
    # Facade
    "FITSFile",
    "HDUInfo",
    "read_fits_image",
    # Accessor
    "FITSAccessor",
    "AstropyAccessor",
    "HDUType",
    # Errors
    "FITSError",
    "FileOpenFailed",
    "QueryFailed",
    "NoImageData",
    "UnsupportedDimensionality",
    "UnsupportedDataType",
    "PixelReadFailed",
    # Header
    "Metadata",
    "MetadataKind",
    "MetadataValue",
    "HeaderDecoder",
    # Image
    "Image",
    "FITSDataType",
    "ImageParameters",
    "ImageParameterResolver",
    "Normalizer",
    # Utilities
    "ObservationSummarizer",
]
