"""
Unit tests for fftanalyzer.core.export and fftanalyzer.core.formatting.
"""

import numpy as np
import pytest

from fftanalyzer.core.exceptions import InvalidInputError
from fftanalyzer.core.export import CSV_HEADER, format_spectrum_csv, format_spectrum_rows
from fftanalyzer.core.formatting import format_amplitude, format_file_size, format_frequency
from fftanalyzer.core.parser import parse_auto


class TestSpectrumCsv:
    """Tests for spectrum CSV rendering."""

    def test_rows_have_six_decimals(self):
        rows = format_spectrum_rows([0.0, 7.8125], [0.5, 1e-7])

        assert rows == ["0.000000,0.500000", "7.812500,0.000000"]

    def test_document_layout(self):
        text = format_spectrum_csv([1.0, 2.0], [3.0, 4.0])

        assert text.splitlines()[0] == CSV_HEADER
        assert text.endswith("\n")
        assert len(text.splitlines()) == 3

    def test_reparses_as_frequency_domain(self):
        freqs = np.linspace(0, 500, 33)
        amps = np.abs(np.sin(freqs / 37.0))

        result = parse_auto(format_spectrum_csv(freqs, amps))

        assert result.success
        assert result.sample_set.is_time_domain is False
        np.testing.assert_allclose(result.sample_set.frequencies, freqs, atol=5e-7)
        np.testing.assert_allclose(result.sample_set.amplitudes, amps, atol=5e-7)

    def test_length_mismatch(self):
        with pytest.raises(InvalidInputError):
            format_spectrum_rows([1.0], [1.0, 2.0])


class TestFormatting:
    """Tests for human-readable value formatting."""

    @pytest.mark.parametrize(
        "hz,expected",
        [(0, "0.00 Hz"), (999.5, "999.50 Hz"), (1000, "1.00 kHz"), (12800, "12.80 kHz"), (2.5e6, "2.50 MHz")],
    )
    def test_format_frequency(self, hz, expected):
        assert format_frequency(hz) == expected

    def test_format_amplitude(self):
        assert format_amplitude(0.5) == "0.500000"
        assert format_amplitude(-6.0206, log_scale=True) == "-6.02 dB"

    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 B"), (512, "512 B"), (1024, "1 KB"), (1536, "1.5 KB"), (5 * 1024**3, "5 GB")],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected
