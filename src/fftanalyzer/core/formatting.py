"""Human-readable formatting for CLI and report output."""

FILE_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_frequency(hz: float) -> str:
    """Format a frequency as Hz, kHz or MHz with two decimals."""
    if hz >= 1_000_000:
        return f"{hz / 1_000_000:.2f} MHz"
    if hz >= 1_000:
        return f"{hz / 1_000:.2f} kHz"
    return f"{hz:.2f} Hz"


def format_amplitude(amplitude: float, log_scale: bool = False) -> str:
    """Format an amplitude as dB (two decimals) or linear (six decimals)."""
    if log_scale:
        return f"{amplitude:.2f} dB"
    return f"{amplitude:.6f}"


def format_file_size(num_bytes: int) -> str:
    """Format a byte count using binary multiples, e.g. ``1.5 KB``."""
    size = float(num_bytes)
    order = 0
    while size >= 1024 and order < len(FILE_SIZE_UNITS) - 1:
        order += 1
        size /= 1024
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {FILE_SIZE_UNITS[order]}"
