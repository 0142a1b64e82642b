"""Configuration module for Corporate Chronicles."""

from chronicles.config.factory import (
    create_client,
    create_from_config,
    create_researcher,
    create_session_factory,
    resolve_api_key,
)
from chronicles.config.loader import get_default_config_path, load_config
from chronicles.config.models import (
    ChatConfig,
    ChroniclesConfig,
    LoggingConfig,
    PricingConfig,
    ResearchConfig,
)

__all__ = [
    "ChatConfig",
    "ChroniclesConfig",
    "LoggingConfig",
    "PricingConfig",
    "ResearchConfig",
    "create_client",
    "create_from_config",
    "create_researcher",
    "create_session_factory",
    "get_default_config_path",
    "load_config",
    "resolve_api_key",
]
