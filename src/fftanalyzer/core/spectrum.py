"""
Spectrum Computation
====================

Windowed, zero-padded forward FFT producing a single-sided magnitude spectrum.

Scaling convention:
- the forward transform is unnormalized (numpy / Matlab convention)
- magnitudes are divided by the transform length N
- every bin except DC is doubled to fold in the negative-frequency half
- optional dB scale: 20 * log10(magnitude + 1e-10)

All functions here are pure and safe to call from worker threads.
"""

from typing import Optional, Sequence, Union

import numpy as np
from scipy.signal import windows as scipy_windows

from fftanalyzer.core.exceptions import ComputeError, InvalidInputError
from fftanalyzer.core.peaks import DEFAULT_TOP_N, find_peaks
from fftanalyzer.models.spectrum import Spectrum, WindowType

LOG_EPSILON = 1e-10
MIN_TRANSFORM_LENGTH = 2


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two >= n, or 1 for n <= 0."""
    if n <= 0:
        return 1
    return 1 << (int(n) - 1).bit_length()


def effective_transform_length(sample_count: int, requested: Optional[int] = None) -> int:
    """
    Resolve the transform length for a sample count.

    A requested length below the next power of two is raised to it; larger
    requests are kept as given.
    """
    floor = next_power_of_two(sample_count)
    length = max(requested if requested is not None else floor, floor)
    return max(length, MIN_TRANSFORM_LENGTH)


def window_coefficients(window: Union[WindowType, str, None], length: int) -> np.ndarray:
    """
    Build symmetric window coefficients.

    Args:
        window: Window type (or its name)
        length: Number of coefficients

    Returns:
        Array of ``length`` coefficients clipped to [0, 1]
    """
    window = WindowType.parse(window)
    if length <= 0:
        return np.zeros(0, dtype=np.float64)

    if window is WindowType.HANN:
        coefficients = scipy_windows.hann(length, sym=True)
    elif window is WindowType.HAMMING:
        coefficients = scipy_windows.hamming(length, sym=True)
    elif window is WindowType.BLACKMAN:
        coefficients = scipy_windows.blackman(length, sym=True)
    else:
        coefficients = np.ones(length, dtype=np.float64)

    # Blackman endpoints come out as tiny negatives from rounding
    return np.clip(np.asarray(coefficients, dtype=np.float64), 0.0, 1.0)


def compute_spectrum(
    samples: Sequence[float],
    sample_rate: int,
    window: Union[WindowType, str, None] = WindowType.HANN,
    transform_length: Optional[int] = None,
    log_scale: bool = False,
    top_n: int = DEFAULT_TOP_N,
) -> Spectrum:
    """
    Compute the single-sided spectrum of time-domain samples.

    Args:
        samples: Time-domain amplitudes
        sample_rate: Sample rate in Hz (must be positive)
        window: Window applied to the original samples before padding
        transform_length: Requested transform length (raised to the next
            power of two above the sample count when smaller)
        log_scale: Return amplitudes in dB instead of linear magnitude
        top_n: Number of peaks to keep

    Returns:
        Spectrum with frequencies, amplitudes and peaks

    Raises:
        InvalidInputError: If samples are empty or sample_rate <= 0
        ComputeError: If the transform yields non-finite values
    """
    data = np.asarray(samples, dtype=np.float64).ravel()
    if data.size == 0:
        raise InvalidInputError("Samples cannot be empty")
    if sample_rate is None or sample_rate <= 0:
        raise InvalidInputError(
            f"Sample rate must be positive, got {sample_rate}",
            context={"sample_rate": sample_rate},
        )

    window = WindowType.parse(window)
    count = data.size
    n = effective_transform_length(count, transform_length)

    buffer = np.zeros(n, dtype=np.complex128)
    buffer[:count] = data
    if window is not WindowType.NONE:
        buffer[:count] *= window_coefficients(window, count)

    try:
        with np.errstate(over="raise", invalid="raise"):
            transformed = np.fft.fft(buffer)
            half = n // 2
            magnitude = np.abs(transformed[:half]) / n
            magnitude[1:] *= 2.0

            if log_scale:
                amplitudes = 20.0 * np.log10(magnitude + LOG_EPSILON)
            else:
                amplitudes = magnitude
    except FloatingPointError as e:
        raise ComputeError(f"Transform failed: {e}", context={"transform_length": n}) from e

    if not np.all(np.isfinite(amplitudes)):
        raise ComputeError(
            "Transform produced non-finite amplitudes",
            context={"transform_length": n},
        )

    frequencies = np.arange(half, dtype=np.float64) * (sample_rate / n)
    peaks = find_peaks(amplitudes, frequencies, top_n)

    return Spectrum(
        frequencies=frequencies,
        amplitudes=amplitudes,
        sample_rate=int(sample_rate),
        sample_count=count,
        transform_length=n,
        window=window,
        log_scale=log_scale,
        peaks=peaks,
    )
