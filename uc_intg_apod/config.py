"""
Configuration management for the Astronomy Picture integration.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

_LOG = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "api_key": "",
    "service_host": "api.nasa.gov",
    "request_timeout": None,
    "device_id": "apod_picture",
    "device_name": "Astronomy Picture"
}


class Config:
    """Configuration management for the APOD integration."""

    def __init__(self, config_file_path: str):
        """Initialize configuration."""
        self._config_file_path = config_file_path
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from file."""
        try:
            if os.path.exists(self._config_file_path):
                with open(self._config_file_path, "r", encoding="utf-8") as file:
                    self._config = {**DEFAULT_CONFIG, **json.load(file)}
                    _LOG.info("Configuration loaded from %s", self._config_file_path)
            else:
                _LOG.info("Configuration file not found, using defaults")
                self._config = DEFAULT_CONFIG.copy()
        except (OSError, ValueError, TypeError) as ex:
            _LOG.error("Failed to load configuration: %s", ex)
            self._config = DEFAULT_CONFIG.copy()

    def save(self) -> None:
        """Save configuration to file."""
        try:
            directory = os.path.dirname(self._config_file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._config_file_path, "w", encoding="utf-8") as file:
                json.dump(self._config, file, indent=2)
                _LOG.info("Configuration saved to %s", self._config_file_path)
        except OSError as ex:
            _LOG.error("Failed to save configuration: %s", ex)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def update(self, data: Dict[str, Any]) -> None:
        """Update configuration with new data."""
        self._config.update(data)
        self.save()

    @property
    def api_key(self) -> str:
        """Get NASA API key."""
        return self._config.get("api_key") or ""

    @property
    def service_host(self) -> str:
        """Get the host serving the APOD API."""
        return self._config.get("service_host") or DEFAULT_CONFIG["service_host"]

    @property
    def request_timeout(self) -> Optional[float]:
        """Get the request timeout in seconds, None to wait indefinitely."""
        timeout = self._config.get("request_timeout")
        return float(timeout) if timeout else None

    @property
    def device_id(self) -> str:
        """Get device ID."""
        return self._config.get("device_id", DEFAULT_CONFIG["device_id"])

    @property
    def device_name(self) -> str:
        """Get device name."""
        return self._config.get("device_name", DEFAULT_CONFIG["device_name"])
