"""
Configuration Management
========================

TOML-based configuration for fftanalyzer.

Configuration files are searched in the following order (highest to lowest priority):
1. Path specified via --config option
2. ./fftanalyzer.toml (current directory)
3. ~/.config/fftanalyzer/config.toml (user config)
4. Built-in defaults

Example configuration file (fftanalyzer.toml):

    [database]
    url = "sqlite:///fftanalyzer.db"
    echo = false
    batch_size = 1000

    [paths]
    upload = "./fft_data/upload"
    staging = "./fft_data/upload/staging"
    success = "./fft_data/upload/success"
    fail = "./fft_data/upload/fail"

    [ingest]
    default_sample_rate = 25600
    auto_detect_rate = true
    window = "hann"
    retention_days = 30
    workers = 1

    [spectrum]
    log_scale = false
    top_n = 10
    # transform_length = 4096

    [logging]
    level = "INFO"

Configuration values are immutable. Use ``AppConfig.with_overrides`` to derive
a modified copy; files are read but never written.
"""

import logging
import sys
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fftanalyzer.models.spectrum import WindowType

logger = logging.getLogger(__name__)

# Use tomli for Python < 3.11, tomllib for Python >= 3.11
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# Default configuration values
DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "database": {
        "url": "sqlite:///fftanalyzer.db",
        "echo": False,
        "batch_size": 1000,
    },
    "paths": {
        "upload": "./fft_data/upload",
        "staging": "./fft_data/upload/staging",
        "success": "./fft_data/upload/success",
        "fail": "./fft_data/upload/fail",
    },
    "ingest": {
        "default_sample_rate": 25600,
        "auto_detect_rate": True,
        "window": "hann",
        "retention_days": 30,
        "workers": 1,
    },
    "spectrum": {
        "log_scale": False,
        "top_n": 10,
        "transform_length": None,
    },
    "logging": {
        "level": "INFO",
    },
}

# Standard config file locations
CONFIG_LOCATIONS = [
    Path("fftanalyzer.toml"),
    Path("~/.config/fftanalyzer/config.toml").expanduser(),
]


# =============================================================================
# Sections
# =============================================================================


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = "sqlite:///fftanalyzer.db"
    echo: bool = False
    batch_size: int = 1000


@dataclass(frozen=True)
class PathsConfig:
    """File areas used during ingestion."""

    upload: Path = Path("./fft_data/upload")
    staging: Path = Path("./fft_data/upload/staging")
    success: Path = Path("./fft_data/upload/success")
    fail: Path = Path("./fft_data/upload/fail")

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, Path(getattr(self, f.name)))


@dataclass(frozen=True)
class IngestConfig:
    default_sample_rate: int = 25600
    auto_detect_rate: bool = True
    window: WindowType = WindowType.HANN
    retention_days: int = 30
    workers: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "window", WindowType.parse(self.window))
        if self.default_sample_rate <= 0:
            raise ValueError(f"default_sample_rate must be positive, got {self.default_sample_rate}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


@dataclass(frozen=True)
class SpectrumConfig:
    log_scale: bool = False
    top_n: int = 10
    transform_length: Optional[int] = None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


_SECTIONS = {
    "database": DatabaseConfig,
    "paths": PathsConfig,
    "ingest": IngestConfig,
    "spectrum": SpectrumConfig,
    "logging": LoggingConfig,
}


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable configuration for fftanalyzer.

    Attributes:
        database: Database URL and bulk-insert settings
        paths: Upload, staging, success and fail directories
        ingest: Ingestion defaults (sample rate, window, retention)
        spectrum: Transform defaults (scale, peak count, length)
        logging: Logging settings
        source: Path to the config file that was loaded
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    spectrum: SpectrumConfig = field(default_factory=SpectrumConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Optional[str] = None

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        section_obj = getattr(self, section, None)
        if section_obj is None:
            return default
        return getattr(section_obj, key, default)

    def with_overrides(self, section: str, **values: Any) -> "AppConfig":
        """
        Return a copy with some values of one section replaced.

        Args:
            section: Section name, e.g. "ingest"
            **values: Keys of that section and their new values

        Returns:
            New AppConfig; this instance is left untouched

        Raises:
            KeyError: If the section or a key is unknown
        """
        if section not in _SECTIONS:
            raise KeyError(f"Unknown config section: {section}")
        current = getattr(self, section)
        known = {f.name for f in fields(current)}
        unknown = set(values) - known
        if unknown:
            raise KeyError(f"Unknown keys for [{section}]: {', '.join(sorted(unknown))}")
        return replace(self, **{section: replace(current, **values)})

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        result: Dict[str, Any] = {}
        for name in _SECTIONS:
            section = asdict(getattr(self, name))
            for key, value in section.items():
                if isinstance(value, Path):
                    section[key] = str(value)
                elif isinstance(value, WindowType):
                    section[key] = value.value
            result[name] = section
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "AppConfig":
        """Create AppConfig from a dictionary, ignoring unknown keys."""
        sections = {}
        for name, section_cls in _SECTIONS.items():
            raw = data.get(name) or {}
            known = {f.name for f in fields(section_cls)}
            for key in set(raw) - known:
                logger.warning(f"Ignoring unknown config key [{name}].{key}")
            sections[name] = section_cls(**{k: v for k, v in raw.items() if k in known})
        return cls(source=source, **sections)


# =============================================================================
# Loading
# =============================================================================


def load_toml(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a TOML configuration file.

    Args:
        filepath: Path to the TOML file

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If file doesn't exist
        tomllib.TOMLDecodeError: If TOML parsing fails
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(path, "rb") as f:
        return tomllib.load(f)


def find_config_file(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Find the configuration file to use.

    Args:
        config_path: Explicit path to config file (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if config_path:
        path = Path(config_path)
        if path.exists():
            return path
        logger.warning(f"Specified config file not found: {config_path}")
        return None

    for location in CONFIG_LOCATIONS:
        if location.exists():
            return location

    return None


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file or use defaults.

    Values from the file are merged over the built-in defaults. A file that
    cannot be read or holds invalid values is reported and the defaults are
    used instead.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        AppConfig with merged settings
    """
    config_data = _deep_copy_dict(DEFAULT_CONFIG)
    config_file = find_config_file(config_path)

    if config_file:
        try:
            file_config = load_toml(config_file)
            config_data = _merge_dicts(config_data, file_config)
            config = AppConfig.from_dict(config_data, source=str(config_file))
            logger.info(f"Loaded configuration from {config_file}")
            return config
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading config file {config_file}: {e}")
            config_data = _deep_copy_dict(DEFAULT_CONFIG)

    return AppConfig.from_dict(config_data)


def get_default_config() -> AppConfig:
    """Get the default configuration."""
    return AppConfig.from_dict(_deep_copy_dict(DEFAULT_CONFIG))


def get_config_locations() -> List[Path]:
    """Get configuration file search locations in priority order."""
    return CONFIG_LOCATIONS.copy()


def _deep_copy_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    """Create a deep copy of a dictionary."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_dict(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two dictionaries, with override taking precedence."""
    result = _deep_copy_dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
