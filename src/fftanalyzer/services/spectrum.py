# services/spectrum.py
"""
Service wrapping parsing, transform and peak detection.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from fftanalyzer.core.config import IngestConfig, SpectrumConfig
from fftanalyzer.core.exceptions import FftAnalyzerError, InvalidInputError, ParseError
from fftanalyzer.core.logger import get_logger
from fftanalyzer.core.parser import parse_auto, resolve_sample_rate
from fftanalyzer.core.peaks import find_peaks
from fftanalyzer.core.spectrum import compute_spectrum
from fftanalyzer.models.spectrum import ParseResult, Peak, Spectrum, WindowType
from fftanalyzer.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult

logger = get_logger(__name__)


@dataclass
class FileSpectrum:
    """Spectrum computed from a file together with how the rate was chosen."""

    spectrum: Spectrum
    source_path: str
    parse_warnings: List[str]

    def to_dict(self) -> Dict[str, Any]:
        result = self.spectrum.to_dict()
        result["source_path"] = self.source_path
        result["parse_warnings"] = self.parse_warnings
        return result


class SpectrumService(BaseService):
    """
    Service for one-off spectrum computation.

    Nothing here touches the database; use IngestionService to persist.
    """

    def __init__(
        self,
        file_repository: FileRepositoryProtocol,
        ingest_config: Optional[IngestConfig] = None,
        spectrum_config: Optional[SpectrumConfig] = None,
    ) -> None:
        """Initialize the service.

        Args:
            file_repository: File repository for all file I/O operations (required).
            ingest_config: Default sample rate, auto-detect flag and window.
            spectrum_config: Default scale, peak count and transform length.
        """
        super().__init__(file_repository)
        self.ingest_config = ingest_config or IngestConfig()
        self.spectrum_config = spectrum_config or SpectrumConfig()

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse_text(self, text: str) -> ServiceResult[ParseResult]:
        """Parse sample text, auto-detecting time or frequency domain."""
        parsed = parse_auto(text)
        if not parsed.success:
            return ServiceResult.fail(
                parsed.error or "No samples could be parsed.",
                warnings=parsed.warnings,
                error_type=ParseError.__name__,
            )
        return ServiceResult.ok(
            data=parsed,
            message=f"Parsed {parsed.sample_count} {parsed.data_type.value} points",
            warnings=parsed.warnings,
            skipped_lines=parsed.skipped_lines,
        )

    def parse_file(self, path: Union[str, Path]) -> ServiceResult[ParseResult]:
        """Read and parse a sample file."""
        error = self._validate_input_path(path)
        if error:
            return ServiceResult.fail(error, error_type="FilesystemError")

        try:
            text = self.file_repository.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            return ServiceResult.fail(f"Could not read {path}: {e}", error_type="FilesystemError")

        return self.parse_text(text)

    # =========================================================================
    # Transform
    # =========================================================================

    def compute(
        self,
        samples: Sequence[float],
        sample_rate: int,
        window: Union[WindowType, str, None] = None,
        transform_length: Optional[int] = None,
        log_scale: Optional[bool] = None,
        top_n: Optional[int] = None,
    ) -> ServiceResult[Spectrum]:
        """
        Compute a spectrum, filling unset options from configuration.

        Returns:
            ServiceResult containing the Spectrum
        """
        try:
            spectrum = compute_spectrum(
                samples,
                sample_rate,
                window=self.ingest_config.window if window is None else window,
                transform_length=(
                    self.spectrum_config.transform_length if transform_length is None else transform_length
                ),
                log_scale=self.spectrum_config.log_scale if log_scale is None else log_scale,
                top_n=self.spectrum_config.top_n if top_n is None else top_n,
            )
        except (FftAnalyzerError, ValueError) as e:
            error_type = e.error_type if isinstance(e, FftAnalyzerError) else InvalidInputError.__name__
            return ServiceResult.fail(str(e), error_type=error_type)

        return ServiceResult.ok(
            data=spectrum,
            message=(
                f"Computed {len(spectrum)} bins from {spectrum.sample_count} samples "
                f"(N={spectrum.transform_length}, {len(spectrum.peaks)} peaks)"
            ),
        )

    def compute_file(
        self,
        path: Union[str, Path],
        sample_rate: Optional[int] = None,
        auto_detect_rate: Optional[bool] = None,
        window: Union[WindowType, str, None] = None,
        transform_length: Optional[int] = None,
        log_scale: Optional[bool] = None,
        top_n: Optional[int] = None,
    ) -> ServiceResult[FileSpectrum]:
        """
        Parse a time-domain file and compute its spectrum.

        Args:
            path: Sample file
            sample_rate: Rate used when detection is off or fails
            auto_detect_rate: Detect the rate from the time column

        Returns:
            ServiceResult containing a FileSpectrum
        """
        error = self._validate_input_path(path)
        if error:
            return ServiceResult.fail(error, error_type="FilesystemError")

        try:
            text = self.file_repository.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            return ServiceResult.fail(f"Could not read {path}: {e}", error_type="FilesystemError")

        parsed_result = self.parse_text(text)
        if not parsed_result.success:
            return parsed_result

        sample_set = parsed_result.data.sample_set
        if not sample_set.is_time_domain:
            return ServiceResult.fail(
                f"{Path(path).name} already holds frequency-domain data",
                warnings=parsed_result.warnings,
                error_type=InvalidInputError.__name__,
            )

        rate = resolve_sample_rate(
            text,
            self.ingest_config.default_sample_rate if sample_rate is None else sample_rate,
            self.ingest_config.auto_detect_rate if auto_detect_rate is None else auto_detect_rate,
        )

        computed = self.compute(
            sample_set.samples,
            rate,
            window=window,
            transform_length=transform_length,
            log_scale=log_scale,
            top_n=top_n,
        )
        if not computed.success:
            computed.warnings = parsed_result.warnings + computed.warnings
            return computed

        return ServiceResult.ok(
            data=FileSpectrum(
                spectrum=computed.data,
                source_path=str(path),
                parse_warnings=parsed_result.warnings,
            ),
            message=computed.message,
            warnings=parsed_result.warnings,
            sample_rate=rate,
        )

    def find_peaks(
        self,
        amplitudes: Sequence[float],
        frequencies: Sequence[float],
        top_n: Optional[int] = None,
    ) -> ServiceResult[List[Peak]]:
        """Find the strongest local maxima of an amplitude sequence."""
        try:
            peaks = find_peaks(
                amplitudes, frequencies, self.spectrum_config.top_n if top_n is None else top_n
            )
        except InvalidInputError as e:
            return ServiceResult.fail(str(e), error_type=e.error_type)
        return ServiceResult.ok(data=peaks, message=f"Found {len(peaks)} peaks")
