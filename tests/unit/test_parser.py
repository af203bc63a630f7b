"""
Unit tests for fftanalyzer.core.parser.
"""

import numpy as np
import pytest

from fftanalyzer.core.exceptions import ParseError
from fftanalyzer.core.parser import (
    detect_sample_rate,
    is_frequency_domain,
    parse_auto,
    parse_frequency_domain,
    parse_invariant,
    parse_time_domain,
    parse_with_locale_fallback,
    resolve_sample_rate,
    split_fields,
)
from fftanalyzer.models.spectrum import DataType


class TestSplitFields:
    """Tests for per-line delimiter selection."""

    def test_comma(self):
        assert split_fields("0, 1.5") == ["0", "1.5"]

    def test_semicolon_wins_over_comma(self):
        assert split_fields("0;1,5") == ["0", "1,5"]

    def test_tab_wins_over_comma(self):
        assert split_fields("0\t1,5") == ["0", "1,5"]

    def test_no_delimiter(self):
        assert split_fields(" 42 ") == ["42"]


class TestNumberParsing:
    """Tests for invariant and comma-decimal number parsing."""

    @pytest.mark.parametrize(
        "token,expected",
        [("1.5", 1.5), ("-2", -2.0), ("+.5", 0.5), ("1e-3", 0.001), (" 3.25 ", 3.25)],
    )
    def test_invariant(self, token, expected):
        assert parse_invariant(token) == pytest.approx(expected)

    @pytest.mark.parametrize("token", ["", "abc", "1,5", "nan", "inf", "1.2.3"])
    def test_invariant_rejects(self, token):
        assert parse_invariant(token) is None

    def test_locale_fallback_accepts_comma_decimal(self):
        assert parse_with_locale_fallback("1,5") == pytest.approx(1.5)

    def test_locale_fallback_prefers_invariant(self):
        assert parse_with_locale_fallback("2.75") == pytest.approx(2.75)

    def test_locale_fallback_rejects_garbage(self):
        assert parse_with_locale_fallback("n/a") is None


class TestParseTimeDomain:
    """Tests for time-domain parsing."""

    def test_header_and_rows(self):
        result = parse_time_domain("Time,Amplitude\n0,1.0\n1,2.0\n2,-0.5\n")

        assert result.success
        assert result.data_type is DataType.TIME_DOMAIN
        np.testing.assert_allclose(result.sample_set.samples, [1.0, 2.0, -0.5])

    def test_extra_comma_row_uses_second_column(self):
        result = parse_time_domain("t,a\n0,1.0\n1,2,5")

        assert result.success
        assert result.sample_count == 2
        np.testing.assert_allclose(result.sample_set.samples, [1.0, 2.0])

    def test_first_line_without_keyword_is_data(self):
        result = parse_time_domain("0,0.5\n1,0.25\n")

        np.testing.assert_allclose(result.sample_set.samples, [0.5, 0.25])

    def test_blank_lines_skipped(self):
        result = parse_time_domain("index;amplitude\n\n0;1\n\n   \n1;2\n")

        np.testing.assert_allclose(result.sample_set.samples, [1.0, 2.0])
        assert result.warnings == []

    def test_comma_decimal_in_semicolon_file(self):
        result = parse_time_domain("Index;Amplitude\n0;1,25\n1;-0,5\n")

        np.testing.assert_allclose(result.sample_set.samples, [1.25, -0.5])

    def test_mixed_delimiters(self):
        result = parse_time_domain("0,1\n1;2\n2\t3\n")

        np.testing.assert_allclose(result.sample_set.samples, [1.0, 2.0, 3.0])

    def test_bad_lines_become_warnings(self):
        result = parse_time_domain("time,amplitude\n0,1\n1\n2,abc\n3,4\n")

        assert result.success
        np.testing.assert_allclose(result.sample_set.samples, [1.0, 4.0])
        assert result.skipped_lines == 2
        assert len(result.warnings) == 2
        assert "Line 3" in result.warnings[0]
        assert "Line 4" in result.warnings[1]

    def test_header_only_fails(self):
        result = parse_time_domain("Time,Amplitude\n")

        assert not result.success
        assert result.sample_set is None
        with pytest.raises(ParseError):
            result.unwrap()

    def test_empty_text_fails(self):
        assert not parse_time_domain("").success

    def test_all_unparseable_fails_with_warnings(self):
        result = parse_time_domain("a,b\nc,d\n")

        assert not result.success
        assert result.skipped_lines == 2
        with pytest.raises(ParseError) as exc_info:
            result.unwrap()
        assert len(exc_info.value.warnings) == 2


class TestParseFrequencyDomain:
    """Tests for frequency-domain parsing."""

    def test_pairs(self):
        result = parse_frequency_domain("FrequencyHz,Amplitude\n0,0.1\n10.5,0.25\n")

        assert result.success
        assert result.data_type is DataType.FREQUENCY_DOMAIN
        np.testing.assert_allclose(result.sample_set.frequencies, [0.0, 10.5])
        np.testing.assert_allclose(result.sample_set.amplitudes, [0.1, 0.25])

    def test_no_locale_retry(self):
        result = parse_frequency_domain("frequency;amplitude\n1;0,5\n2;0.5\n")

        np.testing.assert_allclose(result.sample_set.frequencies, [2.0])
        assert result.skipped_lines == 1

    def test_header_only_fails(self):
        assert not parse_frequency_domain("Frequency,Amplitude\n").success


class TestAutoDetection:
    """Tests for time/frequency auto-detection."""

    @pytest.mark.parametrize(
        "header", ["Frequency,Amplitude", "freq;amp", "Hz\tdB", "FrequencyHz,Amplitude"]
    )
    def test_frequency_headers(self, header):
        assert is_frequency_domain(f"{header}\n1,2\n")

    @pytest.mark.parametrize("header", ["Time,Amplitude", "index,value", "0,1"])
    def test_time_headers(self, header):
        assert not is_frequency_domain(f"{header}\n1,2\n")

    def test_leading_blank_lines(self):
        assert is_frequency_domain("\n\nfrequency,amplitude\n1,2\n")

    def test_parse_auto_dispatches(self):
        assert parse_auto("Frequency,Amplitude\n1,2\n").data_type is DataType.FREQUENCY_DOMAIN
        assert parse_auto("Time,Amplitude\n0,2\n").data_type is DataType.TIME_DOMAIN

    def test_parse_auto_single_line_data(self):
        result = parse_auto("0,3.5")

        assert result.success
        np.testing.assert_allclose(result.sample_set.samples, [3.5])


class TestDetectSampleRate:
    """Tests for sample rate detection from the time column."""

    def test_uniform_spacing(self):
        text = "Time,Amplitude\n" + "".join(f"{i * 0.001:.3f},{i}\n" for i in range(50))

        assert detect_sample_rate(text) == 1000

    def test_rounds_to_nearest(self):
        text = "t,a\n0,0\n0.0003,1\n0.0006,2\n"

        assert detect_sample_rate(text) == 3333

    def test_only_first_ten_timestamps_used(self):
        rows = [f"{i * 0.01:.2f},0" for i in range(10)] + ["100,0", "200,0"]
        text = "Time,Amplitude\n" + "\n".join(rows)

        assert detect_sample_rate(text) == 100

    def test_first_line_always_skipped(self):
        text = "0,0\n0.5,0\n0.6,0\n0.7,0\n"

        assert detect_sample_rate(text) == 10

    def test_index_column_gives_one_hz(self):
        text = "Index,Amplitude\n0,1\n1,2\n2,3\n"

        assert detect_sample_rate(text) == 1

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Time,Amplitude\n",
            "Time,Amplitude\n0,1\n",
            "Time,Amplitude\n1,1\n1,2\n",
            "Time,Amplitude\n2,1\n1,2\n",
            "Time,Amplitude\nx,1\ny,2\n",
            "Time,Amplitude\n0,1\n10,1\n",
        ],
    )
    def test_undetectable(self, text):
        assert detect_sample_rate(text) is None

    def test_resolve_prefers_detected(self):
        text = "Time,Amplitude\n0,0\n0.001,1\n0.002,2\n"

        assert resolve_sample_rate(text, 25600, auto_detect=True) == 1000
        assert resolve_sample_rate(text, 25600, auto_detect=False) == 25600

    def test_resolve_keeps_supplied_on_failure(self):
        assert resolve_sample_rate("Time,Amplitude\n0,1\n", 25600, auto_detect=True) == 25600
