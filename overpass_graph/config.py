"""
Configuration settings for the Overpass client
"""

from dataclasses import dataclass, field
import os


DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"


@dataclass
class APIConfig:
    """API endpoint and request configuration"""
    # Options: overpass-api.de (main), lz4.overpass-api.de, z.overpass-api.de
    overpass_url: str = field(default_factory=lambda: os.getenv("OVERPASS_URL", DEFAULT_OVERPASS_URL))
    timeout: float = 180.0  # Overpass default [timeout:180]

    # User agent for API requests
    user_agent: str = "overpass-graph/0.1"


@dataclass
class ClientConfig:
    """Client configuration"""
    # Simultaneous requests allowed per client; the public instances allow one
    max_parallel: int = 1

    # API config
    api: APIConfig = field(default_factory=APIConfig)


# Global config instance
config = ClientConfig()


def get_config() -> ClientConfig:
    """Get global configuration"""
    return config


def validate_config(config: ClientConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.max_parallel is None or config.max_parallel < 1:
        errors.append(f"max_parallel must be at least 1, got {config.max_parallel}")

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if config.api.timeout is not None and config.api.timeout <= 0:
            errors.append(f"api.timeout must be positive, got {config.api.timeout}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
