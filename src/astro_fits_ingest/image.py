"""Image value and pixel datatype classification.

This module provides FITSDataType, the logical classification of a FITS
BITPIX code, and Image, the immutable product of reading a primary HDU.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import numpy as np

from .header.metadata import Metadata
from .io.accessor import DataTypeCode, FITSStatus, status_text
from .io.errors import UnsupportedDataType


class FITSDataType(Enum):
    """Pixel encoding identified by BITPIX."""
    BYTE = 8
    SHORT = 16
    LONG = 32
    LONGLONG = 64
    FLOAT = -32
    DOUBLE = -64

    @classmethod
    def from_bitpix(cls, bitpix: int) -> FITSDataType:
        """Classify a BITPIX code.

        Raises:
            UnsupportedDataType: If bitpix is not a FITS-standard code
        """
        try:
            return cls(int(bitpix))
        except ValueError:
            raise UnsupportedDataType(
                FITSStatus.BAD_BITPIX,
                status_text(FITSStatus.BAD_BITPIX),
                bitpix=bitpix
            ) from None

    @property
    def bitpix(self) -> int:
        return self.value

    @property
    def bits(self) -> int:
        return abs(self.value)

    @property
    def is_float(self) -> bool:
        return self.value < 0

    @property
    def is_signed(self) -> bool:
        # BITPIX 8 is the only unsigned FITS encoding
        return self is not FITSDataType.BYTE

    @property
    def type_code(self) -> DataTypeCode:
        """Accessor datatype tag for reading this encoding natively."""
        return _TYPE_CODES[self]

    @property
    def dtype(self) -> np.dtype:
        return self.type_code.dtype

    @property
    def description(self) -> str:
        if self.is_float:
            return f"{self.bits}-bit floating point"
        sign = 'signed' if self.is_signed else 'unsigned'
        return f"{self.bits}-bit {sign} integer"

    def __str__(self):
        return self.description


_TYPE_CODES = {
    FITSDataType.BYTE: DataTypeCode.TBYTE,
    FITSDataType.SHORT: DataTypeCode.TSHORT,
    FITSDataType.LONG: DataTypeCode.TINT,
    FITSDataType.LONGLONG: DataTypeCode.TLONGLONG,
    FITSDataType.FLOAT: DataTypeCode.TFLOAT,
    FITSDataType.DOUBLE: DataTypeCode.TDOUBLE,
}


@dataclass(frozen=True, eq=False)
class Image:
    """A normalized image read from a FITS HDU.

    Attributes:
        width: Extent of the first (fastest-varying) axis
        height: Extent of the second axis, 1 for 1-D images
        depth: Extent of the third axis, 1 for 1-D and 2-D images
        bitpix: BITPIX code of the stored data
        data_type: Logical classification of bitpix
        pixel_data: Flat float32 buffer of width*height*depth normalized
            samples, first axis fastest
        original_min_value: Smallest stored sample before normalization
        original_max_value: Largest stored sample before normalization
        metadata: Decoded header of the HDU
        normalized_range: Output range pixel_data was scaled into
    """
    width: int
    height: int
    depth: int
    bitpix: int
    data_type: FITSDataType
    pixel_data: np.ndarray
    original_min_value: float
    original_max_value: float
    metadata: Metadata = field(default_factory=Metadata)
    normalized_range: Tuple[float, float] = (0.0, 1.0)

    def __post_init__(self):
        expected = self.width * self.height * self.depth
        if self.pixel_data.size != expected:
            raise ValueError(
                f"pixel_data has {self.pixel_data.size} samples, "
                f"expected {self.width}x{self.height}x{self.depth} = {expected}"
            )
        self.pixel_data.setflags(write=False)

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        return (self.width, self.height, self.depth)

    @property
    def pixel_count(self) -> int:
        return int(self.pixel_data.size)

    def as_array(self) -> np.ndarray:
        """Read-only view of pixel_data shaped (depth, height, width)."""
        return self.pixel_data.reshape(self.depth, self.height, self.width)

    def pixel_value(self, x: int, y: int, z: int = 0) -> Optional[float]:
        """Original-domain value of one pixel.

        Maps the normalized sample back through the inverse of the
        normalization, so the result is exact only up to float32 rounding.

        Returns:
            The value, or None if the coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth):
            return None

        normalized = float(self.pixel_data[(z * self.height + y) * self.width + x])
        low, high = self.normalized_range
        value_range = self.original_max_value - self.original_min_value
        if value_range <= 0:
            return self.original_min_value
        return (normalized - low) / (high - low) * value_range + self.original_min_value

    def extract_region(
        self,
        center_x: int,
        center_y: int,
        size: int = 30,
        z: int = 0
    ) -> Optional[Image]:
        """Cut a square region around a pixel out of one image plane.

        The region is clipped to the image bounds and keeps this image's
        original min/max and metadata so its normalization stays consistent
        with the parent.

        Args:
            center_x: Center column
            center_y: Center row
            size: Edge length of the region in pixels
            z: Plane index for 3-D images

        Returns:
            A single-plane Image, or None if the region does not overlap
            the image
        """
        if size < 1:
            raise ValueError(f"size must be positive, got {size}")
        if not 0 <= z < self.depth:
            return None

        half = size // 2
        start_x = max(0, center_x - half)
        start_y = max(0, center_y - half)
        end_x = min(self.width, center_x + half + size % 2)
        end_y = min(self.height, center_y + half + size % 2)
        if end_x <= start_x or end_y <= start_y:
            return None

        plane = self.as_array()[z]
        region = np.ascontiguousarray(plane[start_y:end_y, start_x:end_x]).ravel()

        return Image(
            width=end_x - start_x,
            height=end_y - start_y,
            depth=1,
            bitpix=self.bitpix,
            data_type=self.data_type,
            pixel_data=region.copy(),
            original_min_value=self.original_min_value,
            original_max_value=self.original_max_value,
            metadata=self.metadata,
            normalized_range=self.normalized_range,
        )

    def __repr__(self):
        return (
            f"Image({self.width}x{self.height}x{self.depth}, "
            f"bitpix={self.bitpix}, range=[{self.original_min_value}, {self.original_max_value}])"
        )
