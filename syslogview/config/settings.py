"""
Configuration Settings Module

This module provides configuration management for the syslogview dashboard.
It handles loading and validation of application settings from YAML configuration files.

Classes:
    Settings: Main configuration class that manages all application settings
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """
    Main configuration class that manages all application settings.

    This class provides centralized configuration management for the dashboard.
    It uses Pydantic for data validation and type checking, ensuring that all
    configuration values are properly validated against expected types.

    The configuration includes settings for:
    - The forwarding module backend (base URL, request timeout)
    - HTTP server configuration for the dashboard itself
    - Logging configuration

    The polling interval and window size are fixed by
    :mod:`syslogview.constants` and cannot be configured here.

    Attributes:
        backend (Dict[str, Any]): Where the forwarding module is reachable
        http_server (Dict[str, Any]): Configuration for HTTP server settings
        logging (Dict[str, Any]): Configuration for logging settings

    Note:
        All configuration sections use default empty dictionaries to ensure
        the application can start even if specific sections are not defined
        in the configuration file.
    """

    backend: Dict[str, Any] = Field(default_factory=dict)
    http_server: Dict[str, Any] = Field(default_factory=dict)
    logging: Dict[str, Any] = Field(default_factory=dict)

    @property
    def backend_url(self) -> str:
        """Base URL of the module endpoints, always ending with a slash."""
        url = self.backend.get("base_url", "http://127.0.0.1:8080/")
        return url if url.endswith("/") else url + "/"

    @property
    def backend_timeout(self) -> float:
        return float(self.backend.get("timeout", 5))

    @property
    def http_address(self) -> Dict[str, Any]:
        return {
            "ip": self.http_server.get("ip", "127.0.0.1"),
            "port": int(self.http_server.get("port", 8600)),
        }

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """
        Load application settings from a YAML configuration file.

        The method follows this priority order for configuration file loading:
        1. Custom config_path if provided
        2. config/settings.yaml if it exists
        3. config/settings.yaml.example as fallback

        Args:
            config_path (Path, optional): Custom path to configuration file.
                                        If None, uses default locations.

        Returns:
            Settings: A validated Settings instance containing all configuration data

        Raises:
            FileNotFoundError: If no configuration file can be found
            yaml.YAMLError: If the configuration file contains invalid YAML
            ValidationError: If the configuration data doesn't match expected schema
        """
        if config_path is None:
            config_path = Path("config/settings.yaml")
            if not config_path.exists():
                config_path = Path("config/settings.yaml.example")

        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)
