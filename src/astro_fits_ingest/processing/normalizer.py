"""Pixel normalization for FITS image data.

This module provides the Normalizer class, which reads a pixel block in its
native encoding, records the original value range and rescales every sample
into a fixed float32 output range.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np
import logging

from astropy.visualization import MinMaxInterval

from ..io.accessor import AccessorError, FITSAccessor, FITSStatus
from ..io.errors import PixelReadFailed
from .image_parameters import ImageParameters

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_RANGE = (0.0, 1.0)


@dataclass(frozen=True, eq=False)
class NormalizedPixels:
    """Result of reading and normalizing a pixel block.

    Attributes:
        pixels: Normalized float32 samples, same length and order as read
        original_min: Smallest finite sample before normalization
        original_max: Largest finite sample before normalization
        any_null: Whether the accessor flagged undefined (blank/NaN) samples
    """
    pixels: np.ndarray
    original_min: float
    original_max: float
    any_null: bool = False


class Normalizer:
    """Normalize FITS pixel data of any BITPIX into a fixed float32 range.

    The mapping is the affine min/max rescaling
    ``low + (value - min) / (max - min) * (high - low)``. When every sample
    has the same value the whole buffer is set to the midpoint of the output
    range. Non-finite samples (NaN blanks in floating-point images) are
    excluded from the min/max and mapped to the lower bound.

    Example:
        >>> import numpy as np
        >>> normalizer = Normalizer()
        >>> data = np.array([100, 200, 300], dtype=np.int16)
        >>> pixels, vmin, vmax = normalizer.normalize(data)
        >>> print(pixels, vmin, vmax)
        [0.  0.5 1. ] 100.0 300.0
    """

    def __init__(self, output_range: Tuple[float, float] = DEFAULT_OUTPUT_RANGE):
        """Initialize the Normalizer.

        Args:
            output_range: (low, high) closed range for normalized samples

        Raises:
            ValueError: If low >= high
        """
        low, high = float(output_range[0]), float(output_range[1])
        if not low < high:
            raise ValueError(f"output_range low ({low}) must be less than high ({high})")
        self.output_range = (low, high)
        self._interval = MinMaxInterval()

    @property
    def midpoint(self) -> float:
        low, high = self.output_range
        return (low + high) / 2.0

    def read(
        self,
        accessor: FITSAccessor,
        handle,
        parameters: ImageParameters
    ) -> NormalizedPixels:
        """Read the full pixel block of the current HDU and normalize it.

        Args:
            accessor: Accessor that owns the handle
            handle: Open handle positioned at the image HDU
            parameters: Resolved image parameters

        Returns:
            NormalizedPixels for the whole image

        Raises:
            PixelReadFailed: If the accessor cannot deliver the block
        """
        data_type = parameters.data_type
        count = parameters.element_count

        logger.debug(
            f"Reading image: {count} elements as {data_type.description} "
            f"(datatype {int(data_type.type_code)})"
        )

        try:
            native, any_null = accessor.read_pixels(handle, data_type.type_code, 1, count)
        except AccessorError as e:
            message = accessor.status_text(e.status)
            logger.error(f"Error reading image data: status {e.status}, {message}")
            raise PixelReadFailed(e.status, message) from e

        native = np.asarray(native).ravel()
        if native.size != count:
            logger.error(f"Accessor returned {native.size} samples, expected {count}")
            raise PixelReadFailed(
                FITSStatus.READ_ERROR,
                accessor.status_text(FITSStatus.READ_ERROR)
            )

        pixels, vmin, vmax = self.normalize(native)

        logger.debug(
            f"Successfully read image: {pixels.size} pixels, value range [{vmin}, {vmax}]"
        )
        return NormalizedPixels(pixels=pixels, original_min=vmin, original_max=vmax, any_null=any_null)

    def normalize(self, data: np.ndarray) -> Tuple[np.ndarray, float, float]:
        """Normalize native samples into the output range.

        Args:
            data: Samples in any numeric dtype (flattened in C order)

        Returns:
            Tuple of (float32 normalized samples, original min, original max)
        """
        if data is None:
            raise ValueError("data is None")

        values = np.asarray(data).ravel()
        low, high = self.output_range

        if values.size == 0:
            return np.empty(0, dtype=np.float32), 0.0, 0.0

        finite = np.isfinite(values)
        if not finite.any():
            logger.warning("No finite values in data, returning lower bound of output range")
            return np.full(values.size, low, dtype=np.float32), 0.0, 0.0

        vmin, vmax = self._interval.get_limits(values[finite])
        vmin, vmax = float(vmin), float(vmax)

        if vmax == vmin:
            normalized = np.full(values.size, self.midpoint, dtype=np.float64)
        else:
            normalized = (values.astype(np.float64) - vmin) / (vmax - vmin)
            normalized = low + normalized * (high - low)

        normalized[~finite] = low
        # Guard against rounding just outside the range in the float32 cast
        pixels = np.clip(normalized.astype(np.float32), np.float32(low), np.float32(high))

        return pixels, vmin, vmax

    def denormalize(self, pixels: np.ndarray, original_min: float, original_max: float) -> np.ndarray:
        """Map normalized samples back to the original value domain.

        Args:
            pixels: Normalized samples
            original_min: Original minimum recorded at normalization
            original_max: Original maximum recorded at normalization

        Returns:
            float64 array in the original domain
        """
        low, high = self.output_range
        pixels = np.asarray(pixels, dtype=np.float64)
        value_range = original_max - original_min
        if value_range == 0:
            return np.full(pixels.shape, float(original_min))
        return (pixels - low) / (high - low) * value_range + original_min
