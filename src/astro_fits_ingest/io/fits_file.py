"""FITS file facade.

This module provides the FITSFile class, which owns one accessor handle for
its whole lifetime and composes header decoding, image parameter resolution
and pixel normalization into a single read of the primary image.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union
import logging

from ..header.decoder import HeaderDecoder
from ..header.metadata import Metadata
from ..image import Image
from ..processing.image_parameters import ImageParameterResolver, MAX_AXES
from ..processing.normalizer import DEFAULT_OUTPUT_RANGE, Normalizer
from .accessor import AccessorError, AstropyAccessor, FITSAccessor, FITSStatus, HDUType
from .errors import FileOpenFailed, QueryFailed

logger = logging.getLogger(__name__)

AccessMode = Literal['readonly', 'readwrite']

PRIMARY_HDU = 0


@dataclass(frozen=True)
class HDUInfo:
    """Location of one HDU in a file.

    Attributes:
        index: 0-based HDU index (0 = primary)
        hdu_type: Image, ASCII table or binary table
    """
    index: int
    hdu_type: HDUType

    @property
    def is_primary(self) -> bool:
        return self.index == PRIMARY_HDU

    def __repr__(self):
        return f"HDUInfo({self.index}, {self.hdu_type.name})"


class FITSFile:
    """An open FITS file.

    The accessor handle is acquired in the constructor and released exactly
    once by close(); use the instance as a context manager so the handle is
    released on every exit path. A FITSFile keeps a mutable current-HDU
    cursor and must not be shared between threads.

    Example:
        >>> with FITSFile('m31.fits') as fits_file:
        ...     print(fits_file.number_of_hdus())
        ...     image = fits_file.read_image()
        ...     print(image.dimensions, image.original_min_value, image.original_max_value)
    """

    def __init__(
        self,
        path: Union[str, Path],
        mode: AccessMode = 'readonly',
        accessor: Optional[FITSAccessor] = None,
        max_axes: int = MAX_AXES,
        output_range: Tuple[float, float] = DEFAULT_OUTPUT_RANGE
    ):
        """Open a FITS file.

        Args:
            path: Path to the FITS file
            mode: 'readonly' or 'readwrite'
            accessor: Low-level accessor (default: AstropyAccessor)
            max_axes: Axis cap for image parameter resolution
            output_range: Range normalized pixels are scaled into

        Raises:
            FileOpenFailed: If the accessor cannot open the path
        """
        self.path = Path(path)
        self.mode = mode
        self.accessor = accessor if accessor is not None else AstropyAccessor()
        self.decoder = HeaderDecoder()
        self.resolver = ImageParameterResolver(self.accessor, max_axes=max_axes)
        self.normalizer = Normalizer(output_range=output_range)
        self._handle = None

        try:
            self._handle = self.accessor.open(self.path, mode)
        except AccessorError as e:
            message = self.accessor.status_text(e.status)
            logger.error(f"Failed to open FITS file at {self.path}: status {e.status}, {message}")
            raise FileOpenFailed(e.status, message, path=str(self.path)) from e

        logger.debug(f"Opened FITS file at {self.path}")

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def close(self) -> None:
        """Release the accessor handle. Calling close() again does nothing."""
        if self._handle is None:
            return

        handle, self._handle = self._handle, None
        try:
            self.accessor.close(handle)
        except AccessorError as e:
            raise self._query_failed(e, f"closing {self.path}") from e

        logger.debug(f"Closed FITS file at {self.path}")

    def __enter__(self) -> FITSFile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
            return False

        # A failing close must not replace the error already propagating
        try:
            self.close()
        except QueryFailed as e:
            logger.error(f"Error closing {self.path} after an earlier failure: {e}")
        return False

    def number_of_hdus(self) -> int:
        """Number of HDUs in the file.

        Raises:
            QueryFailed: If the accessor cannot count the HDUs
        """
        handle = self._require_handle()
        try:
            return int(self.accessor.hdu_count(handle))
        except AccessorError as e:
            raise self._query_failed(e, "reading number of HDUs") from e

    def move_to_hdu(self, index: int) -> HDUType:
        """Move to an HDU.

        Args:
            index: 0-based HDU index (0 = primary)

        Returns:
            Type of the HDU moved to

        Raises:
            QueryFailed: If the index is out of range or the move fails
        """
        handle = self._require_handle()
        try:
            # Accessor indices are 1-based
            return HDUType(self.accessor.move_to_hdu(handle, index + 1))
        except AccessorError as e:
            raise self._query_failed(e, f"moving to HDU {index}") from e

    def list_hdus(self) -> List[HDUInfo]:
        """Locate every HDU in the file.

        Leaves the cursor on the primary HDU.
        """
        hdus = [HDUInfo(index, self.move_to_hdu(index)) for index in range(self.number_of_hdus())]
        self.move_to_hdu(PRIMARY_HDU)
        return hdus

    def read_header(self) -> Metadata:
        """Decode every header record of the current HDU.

        Raises:
            QueryFailed: If the header cannot be read
        """
        handle = self._require_handle()
        try:
            existing, _ = self.accessor.header_space(handle)
            records = [self.accessor.read_record(handle, i) for i in range(1, existing + 1)]
        except AccessorError as e:
            raise self._query_failed(e, "reading header") from e

        metadata = self.decoder.decode_records(records)
        logger.debug(f"Read {len(metadata)} header keywords")
        return metadata

    def read_image(self) -> Image:
        """Read the primary HDU's header and image.

        Raises:
            QueryFailed: Moving to the primary HDU or reading its header failed
            NoImageData: The primary HDU has no image
            UnsupportedDimensionality: The image has more than max_axes axes
            UnsupportedDataType: BITPIX is not a FITS-standard code
            PixelReadFailed: The pixel block could not be read
        """
        handle = self._require_handle()
        logger.debug(f"Reading FITS image from primary HDU of {self.path}")

        self.move_to_hdu(PRIMARY_HDU)
        metadata = self.read_header()
        parameters = self.resolver.resolve(handle)
        normalized = self.normalizer.read(self.accessor, handle, parameters)

        image = Image(
            width=parameters.width,
            height=parameters.height,
            depth=parameters.depth,
            bitpix=parameters.bitpix,
            data_type=parameters.data_type,
            pixel_data=normalized.pixels,
            original_min_value=normalized.original_min,
            original_max_value=normalized.original_max,
            metadata=metadata,
            normalized_range=self.normalizer.output_range,
        )

        logger.debug(
            f"Successfully read FITS image: {image.width}x{image.height}x{image.depth}, "
            f"type={image.data_type.description}"
        )
        return image

    def _require_handle(self):
        if self._handle is None:
            raise QueryFailed(FITSStatus.BAD_FILEPTR, self.accessor.status_text(FITSStatus.BAD_FILEPTR))
        return self._handle

    def _query_failed(self, error: AccessorError, action: str) -> QueryFailed:
        message = self.accessor.status_text(error.status)
        logger.error(f"Error {action}: status {error.status}, {message}")
        return QueryFailed(error.status, message)

    def __repr__(self):
        state = 'open' if self.is_open else 'closed'
        return f"FITSFile('{self.path}', {self.mode}, {state})"


def read_fits_image(
    path: Union[str, Path],
    accessor: Optional[FITSAccessor] = None,
    **kwargs
) -> Image:
    """Open a file, read its primary image and close it again.

    Args:
        path: Path to the FITS file
        accessor: Low-level accessor (default: AstropyAccessor)
        **kwargs: Passed to FITSFile (max_axes, output_range)

    Returns:
        The primary HDU's Image
    """
    with FITSFile(path, accessor=accessor, **kwargs) as fits_file:
        return fits_file.read_image()
