"""
Peak Detection
==============

Strict local-maximum detection over ordered amplitude sequences.

Used on freshly computed spectra and on persisted sample rows ordered by
sample index.
"""

from typing import List, Sequence

import numpy as np

from fftanalyzer.core.exceptions import InvalidInputError
from fftanalyzer.models.spectrum import Peak

DEFAULT_TOP_N = 10


def find_peaks(
    amplitudes: Sequence[float],
    frequencies: Sequence[float],
    top_n: int = DEFAULT_TOP_N,
) -> List[Peak]:
    """
    Find the strongest local maxima.

    A point is a peak when it is strictly greater than both neighbours, so
    endpoints and plateaus never qualify. The ``top_n`` highest peaks are
    kept (ties keep discovery order) and returned sorted by frequency.

    Args:
        amplitudes: Amplitudes in index order
        frequencies: Frequencies co-indexed with amplitudes
        top_n: Maximum number of peaks to return

    Returns:
        Peaks ordered by ascending frequency; empty for fewer than 3 points

    Raises:
        InvalidInputError: If the two sequences differ in length
    """
    amps = np.asarray(amplitudes, dtype=np.float64).ravel()
    freqs = np.asarray(frequencies, dtype=np.float64).ravel()

    if amps.shape != freqs.shape:
        raise InvalidInputError(
            f"Amplitudes ({amps.size}) and frequencies ({freqs.size}) must have the same length"
        )
    if amps.size < 3 or top_n <= 0:
        return []

    center = amps[1:-1]
    is_peak = (center > amps[:-2]) & (center > amps[2:])
    indices = np.flatnonzero(is_peak) + 1
    if indices.size == 0:
        return []

    ranked = indices[np.argsort(-amps[indices], kind="stable")][:top_n]
    ordered = ranked[np.argsort(freqs[ranked], kind="stable")]

    return [
        Peak(frequency=float(freqs[i]), amplitude=float(amps[i]), index=int(i))
        for i in ordered
    ]
