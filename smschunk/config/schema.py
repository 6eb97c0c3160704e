"""Configuration schema using Pydantic."""

import json
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from smschunk.protocol.codec import DEFAULT_CHUNK_SIZE


class TransportConfig(BaseModel):
    """Outbound transport configuration."""

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)  # characters of payload per SMS


class ReceiverConfig(BaseModel):
    """Inbound listener configuration."""

    forward_unchunked: bool = False  # publish non-protocol texts as plain messages


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class Config(BaseModel):
    """Root configuration."""

    transport: TransportConfig = Field(default_factory=TransportConfig)
    receiver: ReceiverConfig = Field(default_factory=ReceiverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_config_path() -> Path:
    """Get the config file path."""
    return Path.home() / ".smschunk" / "config.json"


def load_config() -> Config:
    """Load configuration from file."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return Config(**data)
        except Exception as e:
            logger.warning(f"Ignoring invalid config at {config_path}: {e}")

    return Config()


def save_config(config: Config) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config.model_dump_json(indent=2))
