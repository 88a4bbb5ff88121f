"""Pytest configuration and fixtures for astro_fits_ingest tests."""

import sys
from pathlib import Path

import pytest
import numpy as np
from astropy.io import fits

sys.path.insert(0, str(Path(__file__).parent / 'fixtures'))

from synthetic_fits import (  # noqa: E402
    create_image_fits,
    create_bitpix_fits,
    create_table_extension,
)
from fake_accessor import FakeAccessor, FakeHDU  # noqa: E402


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def sample_fits_data():
    """Synthetic 2-D int16 image with a few observation keywords."""
    data = np.arange(100 * 80, dtype=np.int16).reshape(80, 100) - 1000
    header = fits.Header()
    header['TELESCOP'] = 'TEST'
    header['INSTRUME'] = 'TESTCAM'
    header['FILTER'] = 'TEST_FILTER'
    header['EXPTIME'] = 60.0
    header['OBJECT'] = 'NGC 1234'
    header['FLIPPED'] = False
    return data, header


@pytest.fixture
def temp_fits_file(tmp_path, sample_fits_data):
    """Temporary single-HDU FITS file holding sample_fits_data."""
    data, header = sample_fits_data
    fits_file = tmp_path / "test.fits"
    hdu = fits.PrimaryHDU(data=data, header=header)
    fits.HDUList([hdu]).writeto(fits_file, overwrite=True)
    return fits_file


@pytest.fixture
def multi_extension_fits_file(tmp_path, sample_fits_data):
    """Primary image followed by an image and a binary table extension."""
    data, header = sample_fits_data
    return create_image_fits(
        tmp_path / "multi.fits",
        data,
        {'TELESCOP': 'TEST'},
        extensions=[
            fits.ImageHDU(np.zeros((3, 3), dtype=np.float32), name='SCI'),
            create_table_extension(),
        ]
    )


@pytest.fixture
def header_only_fits_file(tmp_path):
    """Primary HDU with NAXIS = 0 followed by an image extension."""
    return create_image_fits(
        tmp_path / "header_only.fits",
        None,
        {'TELESCOP': 'TEST'},
        extensions=[fits.ImageHDU(np.ones((4, 4), dtype=np.int16))]
    )


@pytest.fixture(params=[8, 16, 32, 64, -32, -64])
def bitpix_fits_file(request, tmp_path):
    """(path, data, bitpix) for every FITS-standard BITPIX."""
    path, data = create_bitpix_fits(tmp_path / f"bitpix_{request.param}.fits", request.param)
    return path, data, request.param


# ============================================================================
# Component Fixtures
# ============================================================================

@pytest.fixture
def decoder():
    """HeaderDecoder instance."""
    from astro_fits_ingest.header import HeaderDecoder
    return HeaderDecoder()


@pytest.fixture
def normalizer():
    """Normalizer instance with the default [0, 1] range."""
    from astro_fits_ingest.processing import Normalizer
    return Normalizer()


@pytest.fixture
def astropy_accessor():
    """AstropyAccessor instance."""
    from astro_fits_ingest.io import AstropyAccessor
    return AstropyAccessor()


@pytest.fixture
def fake_accessor():
    """FakeAccessor serving one 2x2 int16 image."""
    return FakeAccessor([
        FakeHDU(
            records=[
                ('SIMPLE', 'T', 'conforms to FITS standard'),
                ('BITPIX', '16', ''),
                ('NAXIS', '2', ''),
                ('NAXIS1', '2', ''),
                ('NAXIS2', '2', ''),
                ('OBJECT', "'M31'", ''),
            ],
            bitpix=16,
            naxis=2,
            naxes=[2, 2],
            data=np.array([10, 20, 30, 40], dtype=np.int16),
        )
    ])


@pytest.fixture
def summarizer():
    """ObservationSummarizer instance."""
    from astro_fits_ingest.utilities import ObservationSummarizer
    return ObservationSummarizer()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
