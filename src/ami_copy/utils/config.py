#!/usr/bin/env python3
"""
utils/config.py

Simple configuration management utilities.
Provides centralized configuration loading for copy throttling, polling and logging.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from ami_copy.core.constants import (
    ADMISSION_POLL_INTERVAL,
    CONSISTENCY_DELAY,
    ENV_TAG_KEY,
    MAX_PENDING_SNAPSHOTS,
    PROGRESS_POLL_INTERVAL,
    WAITER_DELAY,
    WAITER_MAX_ATTEMPTS,
)
from ami_copy.utils.exceptions import ConfigurationError
from ami_copy.utils.logger import setup_logger

logger = setup_logger(__name__, "config.log")

CONFIG_DIR_ENV_VAR = "AMI_COPY_CONFIG_DIR"


class ConfigManager:
    """
    Simple configuration manager.

    Features:
    - YAML configuration loading
    - Environment variable override support
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Custom config directory path (defaults to $AMI_COPY_CONFIG_DIR,
                then PROJECT_ROOT/configs)
        """
        self.project_root = Path(__file__).parent.parent.parent.parent
        env_dir = os.environ.get(CONFIG_DIR_ENV_VAR)
        if config_dir is None and env_dir:
            config_dir = Path(env_dir)
        self.config_dir = Path(config_dir) if config_dir else (self.project_root / "configs")

        # Try both .yml and .yaml extensions
        yml_file = self.config_dir / "settings.yml"
        yaml_file = self.config_dir / "settings.yaml"

        if yml_file.exists():
            self.settings_file = yml_file
        elif yaml_file.exists():
            self.settings_file = yaml_file
        else:
            self.settings_file = yaml_file  # Default to .yaml for error messages

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file safely.
        """
        if not file_path.exists():
            logger.debug(f"Config file not found: {file_path}, using defaults")
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                return content or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {file_path}: {e}")
            return {}

    def load_settings(self) -> Dict[str, Any]:
        """
        Load application settings.
        """
        return self._load_yaml_file(self.settings_file)

    def get_value(
        self, key_path: str, default: Any = None, env_var: Optional[str] = None
    ) -> Any:
        """
        Get configuration value with dot notation support and environment variable override.
        """
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        # Navigate through nested dictionary
        keys = key_path.split(".")
        current = self.config

        try:
            for key in keys:
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def _get_number(
        self,
        key_path: str,
        default: Any,
        cast: Callable[[Any], Any],
        minimum: float = 0,
        env_var: Optional[str] = None,
    ) -> Any:
        """Read a numeric setting, raising ConfigurationError when it is unusable."""
        raw = self.get_value(key_path, default, env_var=env_var)
        source = f"${env_var}" if env_var and env_var in os.environ else key_path
        try:
            value = cast(raw)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value {raw!r} for {source}: expected a number"
            ) from e
        if value < minimum:
            raise ConfigurationError(
                f"Invalid value {raw!r} for {source}: must be at least {minimum}"
            )
        return value

    def get_copy_config(self) -> Dict[str, Any]:
        """Read every copy throttling and polling setting.

        Called before a run makes any change so a bad value fails early.
        """
        return {
            "max_pending_snapshots": self.get_max_pending_snapshots(),
            "admission_poll_interval": self.get_admission_poll_interval(),
            "progress_poll_interval": self.get_progress_poll_interval(),
            "consistency_delay": self.get_consistency_delay(),
            "wait_timeout": self.get_wait_timeout(),
            "waiter": self.get_waiter_config(),
        }

    def get_max_pending_snapshots(self) -> int:
        """Get the pending snapshot ceiling for the admission gate."""
        return self._get_number(
            "copy.max_pending_snapshots",
            MAX_PENDING_SNAPSHOTS,
            int,
            minimum=1,
            env_var="AMI_COPY_MAX_PENDING",
        )

    def get_admission_poll_interval(self) -> float:
        """Seconds between pending snapshot counts while the gate is closed."""
        return self._get_number("copy.admission_poll_interval", ADMISSION_POLL_INTERVAL, float)

    def get_progress_poll_interval(self) -> float:
        """Seconds between copy progress checks."""
        return self._get_number("copy.progress_poll_interval", PROGRESS_POLL_INTERVAL, float)

    def get_consistency_delay(self) -> float:
        """Seconds to wait after initiating copies before the first progress check."""
        return self._get_number("copy.consistency_delay", CONSISTENCY_DELAY, float)

    def get_wait_timeout(self) -> Optional[float]:
        """Per-snapshot progress timeout in seconds, None when unlimited."""
        timeout = self._get_number("copy.wait_timeout", 0, float)
        return timeout if timeout > 0 else None

    def get_waiter_config(self) -> Dict[str, int]:
        """Get WaiterConfig for the snapshot_completed confirmation waiter."""
        return {
            "Delay": self._get_number("copy.waiter_delay", WAITER_DELAY, int, minimum=1),
            "MaxAttempts": self._get_number(
                "copy.waiter_max_attempts", WAITER_MAX_ATTEMPTS, int, minimum=1
            ),
        }

    def get_env_tag_key(self) -> str:
        """Get the tag key that the Env override applies to."""
        return self.get_value("tags.env_key", ENV_TAG_KEY)

    def get_logging_level(self) -> str:
        """Get logging level."""
        return self.get_value("logging.level", "INFO", env_var="LOG_LEVEL")

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration as a cached property."""
        if not hasattr(self, "_cached_config"):
            self._cached_config = self.load_settings()
        return self._cached_config
