"""Fault log configuration loaded from .faultlog/config.json."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".faultlog") / "config.json"
LOG_ROOT_ENV = "FAULTLOG_LOG_ROOT"


class FaultLogConfig(BaseModel):
    """Where error records live.

    Records are stored in ``<log_root>/<errors_dir_name>/``.
    """

    log_root: Path = Field(default=Path("logs"), description="Root log directory.")
    errors_dir_name: str = Field(default="syserrs", min_length=1, description="Sub-directory holding error records.")

    model_config = {"extra": "forbid"}

    @field_validator("errors_dir_name")
    @classmethod
    def _check_dir_name(cls, v: str) -> str:
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"errors_dir_name must be a single directory name, got: '{v}'")
        return v

    @property
    def log_dir(self) -> Path:
        return self.log_root / self.errors_dir_name

    @classmethod
    def from_env(cls, data: dict[str, Any] | None = None) -> FaultLogConfig:
        """Build a config from *data*, letting ``FAULTLOG_LOG_ROOT`` override ``log_root``."""
        values = dict(data or {})
        env_root = os.environ.get(LOG_ROOT_ENV)
        if env_root:
            logger.debug("Using %s=%s as log root", LOG_ROOT_ENV, env_root)
            values["log_root"] = env_root
        return cls.model_validate(values)

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> FaultLogConfig:
        """Load config from a JSON file, falling back to defaults.

        Raises:
            ValueError: If the file is not a JSON object or fails validation.
        """
        p = Path(path)
        data: dict[str, Any] = {}
        if p.exists():
            data = json.loads(p.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"{p} must contain a JSON object, got {type(data).__name__}")
        return cls.from_env(data)
