"""Image processing for FITS pixel data.

This module provides:
- ImageParameterResolver: BITPIX and axis extents of an image HDU
- Normalizer: native pixel block -> normalized float32 buffer
"""

from .image_parameters import ImageParameters, ImageParameterResolver, MAX_AXES
from .normalizer import Normalizer, NormalizedPixels, DEFAULT_OUTPUT_RANGE

__all__ = [
    'ImageParameters',
    'ImageParameterResolver',
    'MAX_AXES',
    'Normalizer',
    'NormalizedPixels',
    'DEFAULT_OUTPUT_RANGE',
]
