"""Configuration management for camsnap.

Settings come from a YAML file (``$CAMSNAP_CONFIG`` or the repo's
``config/default.yaml``), then dotted-key overrides such as the CLI flags,
and are validated into a :class:`CamsnapConfig`.
"""

import copy
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from camsnap.core import FacingMode
from camsnap.export import DEFAULT_FILENAME_TEMPLATE
from camsnap.session import CaptureSettings


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CAMSNAP_CONFIG"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "camsnap.log"


class CameraConfig(BaseModel):
    """Configuration for the live camera source."""
    device: int | str = 0
    width: int = 1920  # ideal capture size, the camera may differ
    height: int = 1080
    # Optional per-facing-mode devices: {"user": 0, "environment": 1}
    devices: Dict[FacingMode, int | str] = Field(default_factory=dict)


class ExportConfig(BaseModel):
    """Configuration for writing captured photos."""
    directory: str = "captures"
    filename_template: str = DEFAULT_FILENAME_TEMPLATE


class LoggingConfig(BaseModel):
    """Where camsnap logs go and how much is kept."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = Field(default=10, gt=0)
    backup_count: int = Field(default=3, ge=0)

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> str:
        name = str(v).strip().upper()
        # getLevelName maps known names to their int value
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level {v!r}")
        return name


class CamsnapConfig(BaseModel):
    """Root configuration for camsnap."""

    project_name: str = "camsnap"
    version: str = "0.1.0"
    debug_mode: bool = False

    camera: CameraConfig = Field(default_factory=CameraConfig)
    capture: CaptureSettings = Field(default_factory=CaptureSettings)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def log_level(self) -> int:
        """Effective level; ``debug_mode`` forces DEBUG."""
        if self.debug_mode:
            return logging.DEBUG
        return logging.getLevelName(self.logging.level)

    def _log_handlers(self) -> "List[logging.Handler]":
        formatter = logging.Formatter(LOG_FORMAT)
        handlers: List[logging.Handler] = [logging.StreamHandler()]

        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_dir / LOG_FILENAME,
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count,
            ))

        for handler in handlers:
            handler.setLevel(self.log_level)
            handler.setFormatter(formatter)
        return handlers

    def setup_logging(self) -> None:
        """Install the console (and optional rotating file) handlers."""
        logging.basicConfig(level=self.log_level, handlers=self._log_handlers(), force=True)
        logger.debug(
            "Logging configured: level=%s file=%s",
            logging.getLevelName(self.log_level), self.logging.log_to_file,
        )


def _default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    repo_root = Path(__file__).resolve().parents[3]
    return repo_root / "config" / "default.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> CamsnapConfig:
    """Load, override and validate the configuration, then set up logging.

    Args:
        config_path: YAML file to read.  Defaults to ``$CAMSNAP_CONFIG``,
            then ``config/default.yaml``.  A missing file falls back to the
            built-in defaults.
        overrides: Dotted keys applied on top of the file, e.g.
            ``{"capture.filter": "sepia"}``.

    Raises:
        ValueError: For malformed YAML, a bad override key, or values that
            fail validation (pydantic's ``ValidationError``).
    """
    path = Path(config_path) if config_path is not None else _default_config_path()

    if path.exists():
        logger.info("Loading config from %s", path)
        data = _read_yaml(path)
    else:
        logger.warning("Config file not found: %s, using defaults", path)
        data = {}

    if overrides:
        data = _apply_overrides(data, overrides)

    config = CamsnapConfig(**data)
    config.setup_logging()
    return config


def _apply_overrides(data: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``data`` with dotted-key ``overrides`` applied.

    ``{"capture.ratio": "1-1"}`` sets ``data["capture"]["ratio"]``, creating
    missing sections.  The input mapping is not modified.
    """
    result = copy.deepcopy(data)
    for dotted, value in overrides.items():
        *parents, leaf = dotted.split(".")
        section = result
        for name in parents:
            section = section.setdefault(name, {})
            if not isinstance(section, dict):
                raise ValueError(f"Cannot override {dotted!r}: {name!r} is not a section")
        section[leaf] = value
    return result
