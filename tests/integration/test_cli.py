"""Integration tests for the astro-fits command line."""

import pytest

from astro_fits_ingest.cli import main


pytestmark = pytest.mark.integration


class TestCommands:
    """Command dispatch and exit codes."""

    def test_help(self, capsys):
        assert main(['help']) == 0
        out = capsys.readouterr().out
        assert 'Usage:' in out
        assert 'info <file>' in out

    @pytest.mark.parametrize("flag", ['-h', '--help'])
    def test_help_flags(self, capsys, flag):
        with pytest.raises(SystemExit) as excinfo:
            main([flag])
        assert excinfo.value.code == 0
        assert 'Usage:' in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert 'No command given' in capsys.readouterr().err

    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(['convert', 'image.fits'])
        assert excinfo.value.code == 1
        assert 'Error:' in capsys.readouterr().err

    def test_info_without_path(self):
        with pytest.raises(SystemExit) as excinfo:
            main(['info'])
        assert excinfo.value.code == 1


class TestInfo:
    """The info command against real files."""

    def test_info(self, capsys, temp_fits_file):
        assert main(['info', str(temp_fits_file)]) == 0
        out = capsys.readouterr().out

        assert 'FITS File Information' in out
        assert 'Number of HDUs: 1' in out
        assert 'Dimensions: 100 x 80 x 1' in out
        assert 'Bitpix: 16' in out
        assert 'Data Type: 16-bit signed integer' in out
        assert 'Min value: -1000.0' in out
        assert 'Max value: 6999.0' in out
        assert 'Normalized pixel range: [0.0, 1.0]' in out
        assert 'Total pixels: 8000' in out
        assert 'BITPIX = 16' in out
        assert 'more keys' in out
        assert 'HDUs:' not in out
        assert 'Observation:' not in out

    def test_info_verbose(self, capsys, multi_extension_fits_file):
        assert main(['info', str(multi_extension_fits_file), '--verbose']) == 0
        out = capsys.readouterr().out

        assert 'Number of HDUs: 3' in out
        assert '0: IMAGE_HDU (primary)' in out
        assert '2: BINARY_TBL (extension)' in out
        assert 'Observation:' in out
        assert 'Telescope: TEST' in out
        assert 'Filter: -' in out

    def test_info_header_only(self, capsys, header_only_fits_file):
        assert main(['info', str(header_only_fits_file), '-v']) == 0
        out = capsys.readouterr().out

        assert 'Number of HDUs: 2' in out
        assert 'Image Data:' not in out

    def test_info_missing_file(self, capsys, tmp_path):
        assert main(['info', str(tmp_path / 'missing.fits')]) == 1
        captured = capsys.readouterr()
        assert 'Error reading FITS file' in captured.err
        assert 'FITS File Information' not in captured.out
