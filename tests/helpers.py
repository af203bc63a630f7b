"""Helpers for writing sample files in tests."""

from pathlib import Path

import numpy as np


def sine(frequency: float, sample_rate: int, count: int, amplitude: float = 1.0) -> np.ndarray:
    t = np.arange(count) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def time_domain_text(samples, sample_rate: int, header: str = "Time,Amplitude") -> str:
    """Render samples as time,amplitude rows with timestamps 1/sample_rate apart."""
    lines = [header] if header else []
    for i, value in enumerate(samples):
        lines.append(f"{i / sample_rate:.9f},{value:.9f}")
    return "\n".join(lines) + "\n"


def write_time_domain_csv(path: Path, samples, sample_rate: int, header: str = "Time,Amplitude") -> Path:
    path.write_text(time_domain_text(samples, sample_rate, header), encoding="utf-8")
    return path
