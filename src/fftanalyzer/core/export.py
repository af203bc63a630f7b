"""
Spectrum CSV Export
===================

Writes frequency/amplitude pairs as ``FrequencyHz,Amplitude`` CSV with six
decimals per value. The output re-parses as frequency-domain data.
"""

from typing import List, Sequence

import numpy as np

from fftanalyzer.core.exceptions import InvalidInputError

CSV_HEADER = "FrequencyHz,Amplitude"


def format_spectrum_rows(frequencies: Sequence[float], amplitudes: Sequence[float]) -> List[str]:
    """
    Format frequency/amplitude pairs as CSV rows (without header).

    Raises:
        InvalidInputError: If the sequences differ in length
    """
    freqs = np.asarray(frequencies, dtype=np.float64).ravel()
    amps = np.asarray(amplitudes, dtype=np.float64).ravel()
    if freqs.shape != amps.shape:
        raise InvalidInputError("Frequencies and amplitudes must have the same length")

    return [f"{f:.6f},{a:.6f}" for f, a in zip(freqs.tolist(), amps.tolist())]


def format_spectrum_csv(frequencies: Sequence[float], amplitudes: Sequence[float]) -> str:
    """Render a complete CSV document including the header line."""
    lines = [CSV_HEADER]
    lines.extend(format_spectrum_rows(frequencies, amplitudes))
    return "\n".join(lines) + "\n"
