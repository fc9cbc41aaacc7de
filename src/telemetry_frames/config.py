"""
Telemetry Frames Configuration
==============================

This module handles configuration loading for the frame builder service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TELEMETRY_TRANSPORT_URL    -> transport.url
    TELEMETRY_RECONNECT_BACKOFF_MS -> transport.reconnect_backoff_ms
    TELEMETRY_STATE_PATH       -> state.path
    TELEMETRY_PARSER_SEPARATOR -> parser.separator
    TELEMETRY_PORT             -> server.port
    TELEMETRY_LOG_LEVEL        -> logging.level
    PORT                       -> server.port (takes precedence)

Example:
    from telemetry_frames.config import load_config, setup_logging

    settings = load_config()
    setup_logging(settings)
    print(settings.transport.url)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="telemetry-frames", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class TransportConfig(BaseModel):
    """Device link configuration."""

    url: Optional[str] = Field(
        default=None,
        description="Websocket URL relaying device bytes (None = ingest via HTTP only)",
    )
    reconnect_backoff_ms: int = Field(
        default=500,
        ge=100,
        description="Backoff in milliseconds between reconnect attempts",
    )
    max_reconnect_attempts: int = Field(
        default=0,
        ge=0,
        description="Maximum reconnection attempts (0 = unlimited)",
    )
    max_buffer_size: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Maximum bytes buffered while waiting for a frame end",
    )


class ParserConfig(BaseModel):
    """Default frame parser configuration."""

    separator: str = Field(
        default=",",
        min_length=1,
        description="Field separator used by the default frame parser",
    )


class StateConfig(BaseModel):
    """Persisted builder state configuration."""

    path: str = Field(
        default="./builder_state.yaml",
        description="Path of the persisted operation mode / project file state",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the frame builder service.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Transport settings
    if env_url := os.environ.get("TELEMETRY_TRANSPORT_URL"):
        config_data.setdefault("transport", {})["url"] = env_url
    if env_backoff := os.environ.get("TELEMETRY_RECONNECT_BACKOFF_MS"):
        config_data.setdefault("transport", {})["reconnect_backoff_ms"] = int(env_backoff)

    # State and parser settings
    if env_state := os.environ.get("TELEMETRY_STATE_PATH"):
        config_data.setdefault("state", {})["path"] = env_state
    if env_sep := os.environ.get("TELEMETRY_PARSER_SEPARATOR"):
        config_data.setdefault("parser", {})["separator"] = env_sep

    # Server settings (PORT wins for container platforms)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("TELEMETRY_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("TELEMETRY_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
