"""Unit tests for ImageParameterResolver."""

import pytest

from astro_fits_ingest import FITSDataType
from astro_fits_ingest.io import (
    FITSStatus,
    HDUType,
    NoImageData,
    QueryFailed,
    UnsupportedDataType,
    UnsupportedDimensionality,
)
from astro_fits_ingest.processing import ImageParameterResolver, ImageParameters, MAX_AXES

from fake_accessor import FakeAccessor, FakeHDU


def resolve(hdu: FakeHDU, **kwargs) -> ImageParameters:
    accessor = FakeAccessor([hdu])
    return ImageParameterResolver(accessor, **kwargs).resolve(accessor.open('fake.fits'))


class TestImageParameters:
    """Derived properties of ImageParameters."""

    @pytest.mark.parametrize("naxes,dimensions,count", [
        ((7,), (7, 1, 1), 7),
        ((7, 3), (7, 3, 1), 21),
        ((7, 3, 2), (7, 3, 2), 42),
    ])
    def test_dimensions(self, naxes, dimensions, count):
        params = ImageParameters(bitpix=16, naxis=len(naxes), naxes=naxes)
        assert (params.width, params.height, params.depth) == dimensions
        assert params.element_count == count

    def test_data_type(self):
        assert ImageParameters(bitpix=-32, naxis=1, naxes=(1,)).data_type is FITSDataType.FLOAT


class TestImageParameterResolver:
    """Test resolving parameters through the accessor."""

    def test_default_cap(self):
        assert MAX_AXES == 3

    def test_resolve_2d(self):
        params = resolve(FakeHDU(bitpix=-32, naxis=2, naxes=[640, 480]))
        assert params == ImageParameters(bitpix=-32, naxis=2, naxes=(640, 480))

    def test_resolve_3d(self):
        params = resolve(FakeHDU(bitpix=8, naxis=3, naxes=[4, 5, 3]))
        assert params.depth == 3

    def test_zero_axes(self):
        with pytest.raises(NoImageData) as excinfo:
            resolve(FakeHDU(naxis=0, naxes=[]))
        assert excinfo.value.status == FITSStatus.NOT_IMAGE

    def test_zero_extent(self):
        with pytest.raises(NoImageData):
            resolve(FakeHDU(naxis=2, naxes=[10, 0]))

    def test_table_hdu(self):
        with pytest.raises(NoImageData):
            resolve(FakeHDU(hdu_type=HDUType.BINARY_TBL))

    def test_too_many_axes(self):
        with pytest.raises(UnsupportedDimensionality) as excinfo:
            resolve(FakeHDU(naxis=4, naxes=[2, 2, 2, 2]))
        assert excinfo.value.status == FITSStatus.BAD_NAXIS
        assert 'NAXIS = 4' in str(excinfo.value)

    def test_raised_cap(self):
        with pytest.raises(UnsupportedDimensionality):
            resolve(FakeHDU(naxis=3, naxes=[2, 2, 2]), max_axes=2)

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            ImageParameterResolver(FakeAccessor(), max_axes=0)

    @pytest.mark.parametrize("bitpix", [0, 12, -16, 128])
    def test_unsupported_bitpix(self, bitpix):
        with pytest.raises(UnsupportedDataType) as excinfo:
            resolve(FakeHDU(bitpix=bitpix))
        assert excinfo.value.bitpix == bitpix

    def test_query_failure(self):
        accessor = FakeAccessor(failures={'image_parameters': FITSStatus.KEY_NO_EXIST})
        resolver = ImageParameterResolver(accessor)
        with pytest.raises(QueryFailed) as excinfo:
            resolver.resolve(accessor.open('fake.fits'))
        assert excinfo.value.status == FITSStatus.KEY_NO_EXIST
        assert excinfo.value.message == 'keyword not found in header'
