"""
Sample File Parsing
===================

Parses delimited text into time-domain samples or frequency/amplitude pairs.

Supported layouts (one record per line, delimiter ``,`` ``;`` or tab):
- time-domain: ``index,amplitude`` or ``time,amplitude``
- frequency-domain: ``frequency,amplitude``

A header line is optional and recognized by keyword only. Both the header
check and the time/frequency auto-detection are best-effort heuristics: a
well-formed file without the expected keywords can be misclassified.
"""

import re
from typing import Iterable, List, Optional, Tuple

import numpy as np

from fftanalyzer.core.logger import get_logger
from fftanalyzer.models.spectrum import ParseResult, SampleSet

logger = get_logger(__name__)

TIME_HEADER_KEYWORDS = ("time", "index", "amplitude")
FREQUENCY_HEADER_KEYWORDS = ("frequency", "amplitude")
FREQUENCY_FORMAT_KEYWORDS = ("frequency", "freq", "hz")

AUTO_DETECT_LINES = 5
RATE_DETECT_MAX_LINES = 100
RATE_DETECT_MAX_TIMESTAMPS = 10

# Checked in order; the first delimiter present in a line is used for that line
DELIMITERS = ("\t", ";", ",")

_INVARIANT_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_COMMA_DECIMAL_NUMBER = re.compile(r"^[+-]?(\d+(,\d*)?|,\d+)([eE][+-]?\d+)?$")


# =============================================================================
# Tokenizing
# =============================================================================


def split_fields(line: str) -> List[str]:
    """
    Split a data line into trimmed fields.

    Args:
        line: A single line of text

    Returns:
        List of fields; a line without any delimiter yields a single field
    """
    for delimiter in DELIMITERS:
        if delimiter in line:
            return [part.strip() for part in line.split(delimiter)]
    return [line.strip()]


def parse_invariant(token: str) -> Optional[float]:
    """Parse a decimal-point number, returning None when it is not one."""
    token = token.strip()
    if not _INVARIANT_NUMBER.match(token):
        return None
    return float(token)


def parse_with_locale_fallback(token: str) -> Optional[float]:
    """
    Parse a number, retrying as a comma-decimal value.

    The retry swaps ``.`` for ``,`` and reads the result with ``,`` as the
    decimal separator, so both ``1.5`` and ``1,5`` recover as 1.5.
    """
    value = parse_invariant(token)
    if value is not None:
        return value

    swapped = token.strip().replace(".", ",")
    if not _COMMA_DECIMAL_NUMBER.match(swapped):
        return None
    return float(swapped.replace(",", "."))


def _non_blank_lines(text: str) -> Iterable[Tuple[int, str]]:
    for line_number, line in enumerate(text.splitlines(), start=1):
        if line.strip():
            yield line_number, line


def _is_header(line: str, keywords: Tuple[str, ...]) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in keywords)


# =============================================================================
# Parsers
# =============================================================================


def parse_time_domain(text: str) -> ParseResult:
    """
    Parse time-domain sample text.

    Only the second column (amplitude) is used. Short rows and unparseable
    amplitudes are skipped and reported as warnings.

    Args:
        text: File contents

    Returns:
        ParseResult; successful when at least one sample was recovered
    """
    samples: List[float] = []
    warnings: List[str] = []
    skipped = 0
    first = True

    for line_number, line in _non_blank_lines(text):
        if first:
            first = False
            if _is_header(line, TIME_HEADER_KEYWORDS):
                continue

        parts = split_fields(line)
        if len(parts) < 2:
            skipped += 1
            warnings.append(f"Line {line_number}: expected at least 2 columns, got {len(parts)}")
            continue

        amplitude = parse_with_locale_fallback(parts[1])
        if amplitude is None:
            skipped += 1
            warnings.append(f"Line {line_number}: could not parse amplitude '{parts[1]}'")
            continue

        samples.append(amplitude)

    for warning in warnings:
        logger.warning(warning)
    logger.info(f"Parsed {len(samples)} time-domain samples ({skipped} lines skipped)")

    if not samples:
        return ParseResult(
            success=False,
            error="No time-domain samples could be parsed",
            warnings=warnings,
            skipped_lines=skipped,
        )

    return ParseResult(
        success=True,
        sample_set=SampleSet.time_domain(samples),
        warnings=warnings,
        skipped_lines=skipped,
    )


def parse_frequency_domain(text: str) -> ParseResult:
    """
    Parse frequency-domain text of ``frequency,amplitude`` rows.

    Both columns must be decimal-point numbers; there is no comma-decimal
    retry here.

    Args:
        text: File contents

    Returns:
        ParseResult; successful when at least one pair was recovered
    """
    frequencies: List[float] = []
    amplitudes: List[float] = []
    warnings: List[str] = []
    skipped = 0
    first = True

    for line_number, line in _non_blank_lines(text):
        if first:
            first = False
            if _is_header(line, FREQUENCY_HEADER_KEYWORDS):
                continue

        parts = split_fields(line)
        if len(parts) < 2:
            skipped += 1
            warnings.append(f"Line {line_number}: expected at least 2 columns, got {len(parts)}")
            continue

        frequency = parse_invariant(parts[0])
        amplitude = parse_invariant(parts[1])
        if frequency is None or amplitude is None:
            skipped += 1
            warnings.append(f"Line {line_number}: could not parse frequency/amplitude pair")
            continue

        frequencies.append(frequency)
        amplitudes.append(amplitude)

    for warning in warnings:
        logger.warning(warning)
    logger.info(f"Parsed {len(frequencies)} frequency points ({skipped} lines skipped)")

    if not frequencies:
        return ParseResult(
            success=False,
            error="No frequency-domain points could be parsed",
            warnings=warnings,
            skipped_lines=skipped,
        )

    return ParseResult(
        success=True,
        sample_set=SampleSet.frequency_domain(frequencies, amplitudes),
        warnings=warnings,
        skipped_lines=skipped,
    )


def is_frequency_domain(text: str) -> bool:
    """
    Guess whether text holds frequency-domain data.

    Only the header line among the first few lines is inspected; data rows
    are never sniffed.
    """
    for _, line in _non_blank_lines("\n".join(text.splitlines()[:AUTO_DETECT_LINES])):
        return _is_header(line, FREQUENCY_FORMAT_KEYWORDS)
    return False


def parse_auto(text: str) -> ParseResult:
    """Parse text as frequency- or time-domain data based on its header."""
    if is_frequency_domain(text):
        logger.info("Auto-detected frequency-domain format")
        return parse_frequency_domain(text)

    logger.info("Auto-detected time-domain format")
    return parse_time_domain(text)


def detect_sample_rate(text: str) -> Optional[int]:
    """
    Estimate the sample rate from a time column.

    Reads up to 100 lines after the header line, collects at most 10
    timestamps from the first column and converts the mean spacing to Hz.

    Args:
        text: File contents

    Returns:
        Rounded sample rate in Hz, or None when it cannot be determined
    """
    try:
        lines = text.splitlines()[:RATE_DETECT_MAX_LINES]
        times: List[float] = []

        for line in lines[1:]:
            if not line.strip():
                continue

            parts = split_fields(line)
            if len(parts) < 2:
                continue

            value = parse_invariant(parts[0])
            if value is not None:
                times.append(value)

            if len(times) >= RATE_DETECT_MAX_TIMESTAMPS:
                break

        if len(times) < 2:
            return None

        mean_diff = float(np.mean(np.diff(np.asarray(times, dtype=np.float64))))
        if not np.isfinite(mean_diff) or mean_diff <= 0:
            return None

        sample_rate = int(round(1.0 / mean_diff))
        if sample_rate <= 0:
            return None

        logger.info(f"Detected sample rate: {sample_rate} Hz")
        return sample_rate
    except (ValueError, OverflowError, ZeroDivisionError) as e:
        logger.warning(f"Failed to detect sample rate: {e}")
        return None


def resolve_sample_rate(text: str, supplied: int, auto_detect: bool = True) -> int:
    """
    Choose the sample rate for a file.

    A detected rate overrides the supplied one when auto-detection is on;
    detection failure silently keeps the supplied rate.
    """
    if not auto_detect:
        return supplied

    detected = detect_sample_rate(text)
    if detected is None:
        logger.debug(f"Sample rate not detected, using {supplied} Hz")
        return supplied
    return detected
