"""Sample, spectrum and peak models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from fftanalyzer.core.exceptions import ParseError
from fftanalyzer.models.base import ToDictMixin


class DataType(str, Enum):
    """Kind of data recovered from a sample file."""

    TIME_DOMAIN = "time_domain"
    FREQUENCY_DOMAIN = "frequency_domain"


class WindowType(str, Enum):
    """Window functions applied before the transform."""

    NONE = "none"
    HANN = "hann"
    HAMMING = "hamming"
    BLACKMAN = "blackman"

    @classmethod
    def parse(cls, value: "WindowType | str | None") -> "WindowType":
        """Resolve a window from an enum member or a case-insensitive name."""
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(w.value for w in cls)
            raise ValueError(f"Unknown window '{value}'. Expected one of: {names}") from None


@dataclass
class Peak(ToDictMixin):
    """A strict local amplitude maximum."""

    frequency: float
    amplitude: float
    index: int


@dataclass
class SampleSet(ToDictMixin):
    """
    Parsed sample data.

    Time-domain sets carry ``samples``; frequency-domain sets carry parallel
    ``frequencies`` and ``amplitudes`` arrays of equal, non-zero length.
    """

    data_type: DataType
    samples: Optional[np.ndarray] = None
    frequencies: Optional[np.ndarray] = None
    amplitudes: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        if self.data_type is DataType.FREQUENCY_DOMAIN:
            if self.frequencies is None or self.amplitudes is None:
                raise ValueError("Frequency-domain data requires frequencies and amplitudes")
            if len(self.frequencies) != len(self.amplitudes):
                raise ValueError("Frequencies and amplitudes must have the same length")
            if len(self.frequencies) == 0:
                raise ValueError("Frequency-domain data cannot be empty")
        elif self.samples is None:
            raise ValueError("Time-domain data requires samples")

    @classmethod
    def time_domain(cls, samples) -> "SampleSet":
        return cls(DataType.TIME_DOMAIN, samples=np.asarray(samples, dtype=np.float64))

    @classmethod
    def frequency_domain(cls, frequencies, amplitudes) -> "SampleSet":
        return cls(
            DataType.FREQUENCY_DOMAIN,
            frequencies=np.asarray(frequencies, dtype=np.float64),
            amplitudes=np.asarray(amplitudes, dtype=np.float64),
        )

    @property
    def is_time_domain(self) -> bool:
        return self.data_type is DataType.TIME_DOMAIN

    @property
    def sample_count(self) -> int:
        """Number of samples (time-domain) or frequency points."""
        if self.is_time_domain:
            return len(self.samples)
        return len(self.frequencies)

    def __len__(self) -> int:
        return self.sample_count


@dataclass
class ParseResult(ToDictMixin):
    """
    Outcome of parsing sample text.

    Per-line problems are collected in ``warnings``; ``success`` is False only
    when nothing at all could be recovered.
    """

    success: bool
    sample_set: Optional[SampleSet] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    skipped_lines: int = 0

    @property
    def data_type(self) -> Optional[DataType]:
        return self.sample_set.data_type if self.sample_set else None

    @property
    def sample_count(self) -> int:
        return self.sample_set.sample_count if self.sample_set else 0

    def unwrap(self) -> SampleSet:
        """Return the parsed sample set or raise ParseError."""
        if not self.success or self.sample_set is None:
            raise ParseError(self.error or "No samples could be parsed.", warnings=self.warnings)
        return self.sample_set


@dataclass
class Spectrum(ToDictMixin):
    """Single-sided magnitude spectrum with detected peaks."""

    frequencies: np.ndarray
    amplitudes: np.ndarray
    sample_rate: int
    sample_count: int
    transform_length: int
    window: WindowType = WindowType.HANN
    log_scale: bool = False
    peaks: List[Peak] = field(default_factory=list)

    @property
    def resolution(self) -> float:
        """Frequency spacing between bins in Hz."""
        return self.sample_rate / self.transform_length

    @property
    def top_peak(self) -> Optional[Peak]:
        """Highest-amplitude peak, if any peaks were found."""
        if not self.peaks:
            return None
        return max(self.peaks, key=lambda p: p.amplitude)

    def __len__(self) -> int:
        return len(self.frequencies)

    def _to_dict_extra(self) -> Optional[Dict[str, Any]]:
        return {"resolution": self.resolution}
