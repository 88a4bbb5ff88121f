"""Image parameter resolution.

This module provides the ImageParameterResolver class, which determines the
BITPIX code, axis count and axis extents of the image in the current HDU.

The resolver supports at most MAX_AXES (3) axes. This is a fixed design
limit rather than a truncation: images with more axes are rejected with
UnsupportedDimensionality. Raising the limit means making both the resolver
and the Image width/height/depth model work with a dynamic axis count, not
just changing the constant.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import logging

from ..image import FITSDataType
from ..io.accessor import AccessorError, FITSAccessor, FITSStatus
from ..io.errors import NoImageData, QueryFailed, UnsupportedDimensionality

logger = logging.getLogger(__name__)

MAX_AXES = 3


@dataclass(frozen=True)
class ImageParameters:
    """Structural description of an image HDU.

    Attributes:
        bitpix: BITPIX code
        naxis: Number of axes (1 to MAX_AXES)
        naxes: Extent of each axis, first axis fastest-varying
    """
    bitpix: int
    naxis: int
    naxes: Tuple[int, ...]

    @property
    def data_type(self) -> FITSDataType:
        return FITSDataType.from_bitpix(self.bitpix)

    @property
    def width(self) -> int:
        return self._extent(0)

    @property
    def height(self) -> int:
        return self._extent(1)

    @property
    def depth(self) -> int:
        return self._extent(2)

    @property
    def element_count(self) -> int:
        count = 1
        for extent in self.naxes:
            count *= extent
        return count

    def _extent(self, axis: int) -> int:
        # Axes beyond NAXIS have extent 1
        return self.naxes[axis] if axis < self.naxis else 1


class ImageParameterResolver:
    """Resolve ImageParameters for the current HDU of an accessor handle.

    Example:
        >>> resolver = ImageParameterResolver(accessor)
        >>> params = resolver.resolve(handle)
        >>> print(params.width, params.height, params.data_type)
    """

    def __init__(self, accessor: FITSAccessor, max_axes: int = MAX_AXES):
        """Initialize the resolver.

        Args:
            accessor: Accessor the handles belong to
            max_axes: Axis cap passed to the image-parameter query
        """
        if max_axes < 1:
            raise ValueError(f"max_axes must be at least 1, got {max_axes}")
        self.accessor = accessor
        self.max_axes = max_axes

    def resolve(self, handle) -> ImageParameters:
        """Query and validate the image parameters.

        Raises:
            NoImageData: HDU is not an image, or has zero axes or a zero extent
            UnsupportedDimensionality: NAXIS exceeds max_axes
            UnsupportedDataType: BITPIX is not a FITS-standard code
            QueryFailed: Any other accessor failure
        """
        try:
            bitpix, naxis, naxes = self.accessor.image_parameters(handle, self.max_axes)
        except AccessorError as e:
            message = self.accessor.status_text(e.status)
            logger.error(f"Error getting image parameters: status {e.status}, {message}")
            if e.status == FITSStatus.NOT_IMAGE:
                raise NoImageData(e.status, message) from e
            raise QueryFailed(e.status, message) from e

        if naxis == 0:
            logger.debug("HDU has NAXIS = 0, no image data")
            raise NoImageData(FITSStatus.NOT_IMAGE, self.accessor.status_text(FITSStatus.NOT_IMAGE))

        if naxis > self.max_axes:
            raise UnsupportedDimensionality(
                FITSStatus.BAD_NAXIS,
                self.accessor.status_text(FITSStatus.BAD_NAXIS),
                naxis=naxis,
                max_axes=self.max_axes
            )

        naxes = tuple(int(extent) for extent in naxes[:naxis])
        if naxis < 0 or len(naxes) != naxis:
            raise QueryFailed(FITSStatus.BAD_NAXIS, self.accessor.status_text(FITSStatus.BAD_NAXIS))
        if any(extent <= 0 for extent in naxes):
            logger.debug(f"HDU has a zero-length axis {naxes}, no image data")
            raise NoImageData(FITSStatus.NOT_IMAGE, self.accessor.status_text(FITSStatus.NOT_IMAGE))

        FITSDataType.from_bitpix(bitpix)
        params = ImageParameters(bitpix=int(bitpix), naxis=int(naxis), naxes=naxes)

        logger.debug(
            f"Image dimensions: {params.width}x{params.height}x{params.depth}, "
            f"bitpix={params.bitpix}, naxis={params.naxis}"
        )
        return params
