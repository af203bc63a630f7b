"""Core Module

Pure signal-processing and parsing functionality for fftanalyzer.

Submodules:
    - parser: Delimited sample text parsing and sample-rate detection
    - spectrum: Window functions and single-sided spectrum computation
    - peaks: Local-maximum peak detection
    - export: CSV export of spectra
    - formatting: Human-readable frequency/amplitude/size strings
    - config: Immutable TOML-backed configuration
    - exceptions: Error taxonomy
    - logger: Logging configuration

Import from specific submodules as needed:
    from fftanalyzer.core.parser import parse_auto
    from fftanalyzer.core.spectrum import compute_spectrum
"""
