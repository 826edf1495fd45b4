"""
Configuration Management for the XML-RPC client

This module handles environment-based configuration using .env files
and provides centralized access to all configurable parameters.
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv


@dataclass
class ClientConfig:
    """XML-RPC client configuration."""
    destination: str = ""
    timeout_seconds: float = 30.0
    xml_format: int = 0
    underscore_replacement: Optional[str] = None
    content_type: str = "text/xml"
    user_agent: str = "rpcxml/0.21"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = False
    log_file_path: str = "./logs/rpcxml.log"


class Config:
    """
    Centralized configuration management.

    Loads configuration from environment variables and .env files.
    """

    def __init__(self, env_file: str = ".env"):
        """
        Initialize configuration.

        Args:
            env_file: Path to .env file (optional)
        """
        self.env_file = env_file
        self._load_env_file()
        self._initialize_configs()

    def _load_env_file(self):
        """Load environment variables from .env file if available."""
        if os.path.exists(self.env_file):
            load_dotenv(self.env_file)

    def _get_env(self, key: str, default: Any, type_cast: type = str) -> Any:
        """Get environment variable with type casting and default."""
        value = os.environ.get(key, default)

        if type_cast == bool:
            if isinstance(value, str):
                return value.lower() in ('true', '1', 'yes', 'on')
            return bool(value)

        if value is None:
            return None

        try:
            return type_cast(value)
        except (ValueError, TypeError):
            return default

    def _initialize_configs(self):
        """Initialize all configuration sections."""
        self.client = ClientConfig(
            destination=self._get_env("XMLRPC_DESTINATION", ""),
            timeout_seconds=self._get_env("XMLRPC_TIMEOUT_SECONDS", 30.0, float),
            xml_format=self._get_env("XMLRPC_XML_FORMAT", 0, int),
            underscore_replacement=self._get_env("XMLRPC_UNDERSCORE_IS", None),
            content_type=self._get_env("XMLRPC_CONTENT_TYPE", "text/xml"),
            user_agent=self._get_env("XMLRPC_USER_AGENT", "rpcxml/0.21")
        )

        self.logging = LoggingConfig(
            level=self._get_env("LOG_LEVEL", "INFO"),
            format=self._get_env("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            enable_file_logging=self._get_env("ENABLE_FILE_LOGGING", False, bool),
            log_file_path=self._get_env("LOG_FILE_PATH", "./logs/rpcxml.log")
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for debugging."""
        return {
            "client": self.client.__dict__,
            "logging": self.logging.__dict__
        }


# Global configuration instance
config = Config()


def get_default_destination() -> str:
    """Get the default XML-RPC endpoint from configuration."""
    return config.client.destination


def get_rpc_timeout() -> float:
    """Get RPC timeout from configuration."""
    return config.client.timeout_seconds
