"""
fftanalyzer - Spectrum ingestion and analysis
=============================================

Version: 0.3.0
"""

__version__ = "0.3.0"

from fftanalyzer.core.peaks import find_peaks
from fftanalyzer.core.spectrum import compute_spectrum, next_power_of_two
from fftanalyzer.models.spectrum import DataType, Peak, SampleSet, Spectrum, WindowType

__all__ = [
    "__version__",
    "DataType",
    "Peak",
    "SampleSet",
    "Spectrum",
    "WindowType",
    "compute_spectrum",
    "find_peaks",
    "next_power_of_two",
]
