"""
Runtime configuration for the corpus builder.

Values are resolved by precedence:
    1. Explicit overrides passed to ``load_config``
    2. Environment variables
    3. Optional JSON/YAML configuration file (``MORPHGNT_CONFIG``)
    4. Module defaults

Environment Variables:
    MORPHGNT_BASE_URL: Base URL the source filenames are appended to
    MORPHGNT_OUT_DIR: Directory receiving <CODE>.json and books.json
    MORPHGNT_SOURCE_DIR: Local corpus checkout; disables HTTP fetching
    MORPHGNT_CATALOG: JSON catalog file replacing the built-in book list
    MORPHGNT_TIMEOUT: Per-request timeout in seconds
    MORPHGNT_WORKERS: Number of books fetched concurrently
    MORPHGNT_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
    MORPHGNT_LOG_FORMAT: human or jsonl
    MORPHGNT_LOG_FILE: Optional path to also write logs to
    MORPHGNT_CONFIG: Path to a JSON or YAML configuration file
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/morphgnt/sblgnt/master"
DEFAULT_OUT_DIR = Path("public/data/morphgnt")
DEFAULT_TIMEOUT = 60.0
DEFAULT_WORKERS = 1
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "human"
LOG_FORMATS = ("human", "jsonl")
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

ENV_BASE_URL = "MORPHGNT_BASE_URL"
ENV_OUT_DIR = "MORPHGNT_OUT_DIR"
ENV_SOURCE_DIR = "MORPHGNT_SOURCE_DIR"
ENV_CATALOG = "MORPHGNT_CATALOG"
ENV_TIMEOUT = "MORPHGNT_TIMEOUT"
ENV_WORKERS = "MORPHGNT_WORKERS"
ENV_LOG_LEVEL = "MORPHGNT_LOG_LEVEL"
ENV_LOG_FORMAT = "MORPHGNT_LOG_FORMAT"
ENV_LOG_FILE = "MORPHGNT_LOG_FILE"
ENV_CONFIG = "MORPHGNT_CONFIG"

# config-file key -> environment variable
FIELD_ENV = {
    "base_url": ENV_BASE_URL,
    "out_dir": ENV_OUT_DIR,
    "source_dir": ENV_SOURCE_DIR,
    "catalog_path": ENV_CATALOG,
    "timeout": ENV_TIMEOUT,
    "workers": ENV_WORKERS,
    "log_level": ENV_LOG_LEVEL,
    "log_format": ENV_LOG_FORMAT,
    "log_file": ENV_LOG_FILE,
}


@dataclass
class BuilderConfig:
    """Configuration for a builder run.

    Attributes:
        base_url: Base URL for HTTP fetching.
        out_dir: Output directory for book documents and the manifest.
        source_dir: Local corpus directory; when set, HTTP is not used.
        catalog_path: Optional JSON catalog replacing the built-in books.
        timeout: Per-request timeout (seconds) for HTTP fetching.
        workers: Number of books processed concurrently (1 = sequential).
        log_level: Logging verbosity name.
        log_format: ``human`` or ``jsonl``.
        log_file: Optional path to mirror logs into.
    """

    base_url: str = DEFAULT_BASE_URL
    out_dir: Path = DEFAULT_OUT_DIR
    source_dir: Path | None = None
    catalog_path: Path | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    workers: int = DEFAULT_WORKERS
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    log_file: Path | None = None

    @property
    def log_level_value(self) -> int:
        return LOG_LEVELS[self.log_level]


def _load_config_file(config_path: str | Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON or YAML file.

    Returns an empty dict when no path is provided.

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid.
    """
    if config_path is None:
        return {}

    path = Path(config_path).expanduser()
    if not path.exists():
        raise ConfigError(f"Configuration file not found at '{path}'")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file '{path}': {exc}") from exc

    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            try:
                import yaml
            except ImportError as exc:
                raise ConfigError("PyYAML is required for YAML configuration files.") from exc
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except ConfigError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to parse configuration file '{path}': {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a JSON/YAML object.")

    unknown = sorted(set(data) - set(FIELD_ENV))
    if unknown:
        logger.warning("Ignoring unknown configuration keys in %s: %s", path, ", ".join(unknown))
    return data


def _resolve_value(
    override: Any,
    env_value: Any,
    config_value: Any,
    default_value: Any,
) -> Any:
    """Resolve a configuration value by precedence."""
    if override is not None:
        return override
    if env_value is not None and env_value != "":
        return env_value
    if config_value is not None:
        return config_value
    return default_value


def _as_path(name: str, value: Any) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value.strip()).expanduser()
    raise ConfigError(f"{name} must be a path, got {value!r}")


def _as_timeout(value: Any) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout must be a number, got {value!r}") from exc
    if timeout <= 0:
        # Non-positive disables the timeout
        return None
    return timeout


def _as_workers(value: Any) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"workers must be an integer, got {value!r}") from exc
    if workers < 1:
        raise ConfigError(f"workers must be at least 1, got {workers}")
    return workers


def load_config(
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> BuilderConfig:
    """Build a ``BuilderConfig`` from overrides, environment, file and defaults."""
    overrides = dict(overrides or {})
    env = os.environ if environ is None else environ

    file_values = _load_config_file(overrides.pop("config_path", None) or env.get(ENV_CONFIG) or None)

    unknown = sorted(set(overrides) - set(FIELD_ENV))
    if unknown:
        raise ConfigError(f"Unknown configuration override(s): {', '.join(unknown)}")

    def resolve(name: str, default: Any) -> Any:
        return _resolve_value(overrides.get(name), env.get(FIELD_ENV[name]), file_values.get(name), default)

    base_url = str(resolve("base_url", DEFAULT_BASE_URL)).strip()
    if not base_url:
        raise ConfigError("base_url must not be empty")

    log_level = str(resolve("log_level", DEFAULT_LOG_LEVEL)).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    log_format = str(resolve("log_format", DEFAULT_LOG_FORMAT)).strip().lower()
    if log_format not in LOG_FORMATS:
        raise ConfigError(f"log_format must be one of {', '.join(LOG_FORMATS)}, got {log_format!r}")

    return BuilderConfig(
        base_url=base_url,
        out_dir=_as_path("out_dir", resolve("out_dir", DEFAULT_OUT_DIR)) or DEFAULT_OUT_DIR,
        source_dir=_as_path("source_dir", resolve("source_dir", None)),
        catalog_path=_as_path("catalog_path", resolve("catalog_path", None)),
        timeout=_as_timeout(resolve("timeout", DEFAULT_TIMEOUT)),
        workers=_as_workers(resolve("workers", DEFAULT_WORKERS)),
        log_level=log_level,
        log_format=log_format,
        log_file=_as_path("log_file", resolve("log_file", None)),
    )


__all__ = ["BuilderConfig", "load_config", "LOG_LEVELS", "LOG_FORMATS"]
