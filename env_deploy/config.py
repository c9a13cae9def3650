"""The configuration environment variables."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings

_ENABLED = ("yes", "true", "1", "on")


class Settings(BaseSettings, extra="ignore"):
    """The configuration settings."""

    default_env_path: Path = Path("default.env")
    """Env file loaded first, skipped when missing."""
    functions_env_path: Path = Path("functions.env")
    """Env file loaded last, skipped when missing."""
    auto_approve: bool = False
    """Don't ask for a confirmation before running the command."""
    silent: bool = False
    """Suppress all the log output, including the substituted files."""
    print_k8s_cluster: bool = False
    """Show the current Kubernetes cluster context in the information section."""
    sub_mode: bool = False
    """Only substitute and print the result, the command isn't run."""
    log_level: str = "INFO"
    """Level of the log output."""

    @field_validator("auto_approve", "silent", "print_k8s_cluster", "sub_mode", mode="before")
    @classmethod
    def validate_flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in _ENABLED

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: str | None) -> str:
        if not value:
            return "INFO"
        level = str(value).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def approve(self) -> bool:
        return self.auto_approve or self.sub_mode

    @property
    def quiet(self) -> bool:
        return self.silent or self.sub_mode

    @classmethod
    def from_environment(cls, environment: Mapping[str, str]) -> "Settings":
        """Build the settings from an explicit environment instead of the process one."""
        values = {}
        for name in cls.model_fields:
            key = name.upper()
            if key in environment:
                values[name] = environment[key]
        return cls(**values)
