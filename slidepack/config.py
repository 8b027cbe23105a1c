"""
Configuration for slidepack.

Dataclass sections with to_dict()/from_dict(), loaded from slidepack.yaml
and overridden by SLIDEPACK_* environment variables:

    SLIDEPACK_LOG_LEVEL     -> logging.level
    SLIDEPACK_VALIDATE_PNG  -> cover.validate_png
    SLIDEPACK_OUTPUT_DIR    -> output.directory

The core synthesizer never reads configuration itself; kernels and the
CLI resolve it and pass plain arguments down.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "slidepack.yaml"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass
class CoverOptions:
    """Cover image handling."""
    validate_png: bool = True               # reject non-PNG cover bytes
    image_name: str = "cover.png"           # file name inside stage1/assets


@dataclass
class OutputOptions:
    """Where and how the .pptx is written."""
    directory: str = "output"               # relative to the workspace
    filename_max_chars: int = 80
    default_basename: str = "presentation"

    def __post_init__(self):
        if self.filename_max_chars < 1:
            raise ValueError(f"filename_max_chars must be >= 1, got {self.filename_max_chars}")


@dataclass
class LoggingOptions:
    level: str = "WARNING"

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in _VALID_LEVELS:
            raise ValueError(f"Invalid log level {self.level!r}, must be one of {_VALID_LEVELS}")


@dataclass
class SlidePackConfig:
    """Top-level configuration."""
    cover: CoverOptions = field(default_factory=CoverOptions)
    output: OutputOptions = field(default_factory=OutputOptions)
    logging: LoggingOptions = field(default_factory=LoggingOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cover": {
                "validate_png": self.cover.validate_png,
                "image_name": self.cover.image_name,
            },
            "output": {
                "directory": self.output.directory,
                "filename_max_chars": self.output.filename_max_chars,
                "default_basename": self.output.default_basename,
            },
            "logging": {"level": self.logging.level},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SlidePackConfig":
        cv = d.get("cover", {}) or {}
        out = d.get("output", {}) or {}
        lg = d.get("logging", {}) or {}
        return cls(
            cover=CoverOptions(
                validate_png=cv.get("validate_png", True),
                image_name=cv.get("image_name", "cover.png"),
            ),
            output=OutputOptions(
                directory=out.get("directory", "output"),
                filename_max_chars=out.get("filename_max_chars", 80),
                default_basename=out.get("default_basename", "presentation"),
            ),
            logging=LoggingOptions(level=lg.get("level", "WARNING")),
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find slidepack.yaml by searching upward from start_path.

    Search order:
    1. start_path / slidepack.yaml
    2. start_path / .slidepack / slidepack.yaml
    3. Parent directories (recursive)
    4. ~/.config/slidepack/slidepack.yaml
    """
    current = Path(start_path or Path.cwd()).resolve()
    for _ in range(10):
        for candidate in (current / CONFIG_FILENAME, current / ".slidepack" / CONFIG_FILENAME):
            if candidate.exists():
                return candidate
        if current.parent == current:
            break
        current = current.parent

    user_config = Path.home() / ".config" / "slidepack" / CONFIG_FILENAME
    if user_config.exists():
        return user_config
    return None


def _apply_env_overrides(config: SlidePackConfig) -> SlidePackConfig:
    if os.environ.get("SLIDEPACK_LOG_LEVEL"):
        config.logging = LoggingOptions(level=os.environ["SLIDEPACK_LOG_LEVEL"])

    if os.environ.get("SLIDEPACK_VALIDATE_PNG"):
        config.cover.validate_png = os.environ["SLIDEPACK_VALIDATE_PNG"].lower() in ("true", "1", "yes")

    if os.environ.get("SLIDEPACK_OUTPUT_DIR"):
        config.output.directory = os.environ["SLIDEPACK_OUTPUT_DIR"]

    return config


def load_config(config_path: Optional[Path] = None) -> SlidePackConfig:
    """
    Load configuration from YAML with environment variable overrides.

    An explicit config_path must exist and parse; an auto-detected file
    that fails to parse is logged and ignored.

    Raises:
        FileNotFoundError: Explicit config_path does not exist
        ValueError: Explicit file holds invalid values
    """
    config = SlidePackConfig()

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = SlidePackConfig.from_dict(data)
        logger.info(f"Loaded config from: {config_path}")
    else:
        found = find_config_file()
        if found:
            try:
                with open(found, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                config = SlidePackConfig.from_dict(data)
                logger.info(f"Loaded config from: {found}")
            except (yaml.YAMLError, ValueError, OSError) as e:
                logger.warning(f"Failed to load config {found}: {e}, using defaults")
        else:
            logger.debug("No config file found, using defaults")

    return _apply_env_overrides(config)


def save_config(config: SlidePackConfig, path: Path) -> None:
    """Write configuration as YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_global_config: Optional[SlidePackConfig] = None


def get_config() -> SlidePackConfig:
    """Get global configuration (loaded on first use)."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: Optional[SlidePackConfig]) -> None:
    """Set (or with None, reset) the global configuration."""
    global _global_config
    _global_config = config
