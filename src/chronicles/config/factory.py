"""Factory functions to create components from configuration."""

import os
from pathlib import Path

import anthropic

from chronicles.app import CompanyExplorer
from chronicles.chat.base import SessionFactory, UpdateCallback
from chronicles.chat.claude import ClaudeChatSession
from chronicles.config.models import ChatConfig, ChroniclesConfig, ResearchConfig
from chronicles.data import CompanyData
from chronicles.errors import ConfigurationError
from chronicles.pricing import PriceCache
from chronicles.research.claude import ClaudeCompanyResearcher
from chronicles.run_logger import RunLogger


def resolve_api_key(api_key: str | None = None, env_var: str = "CLAUDE_API_KEY") -> str:
    """Return the explicit key or read it from the environment.

    Raises:
        ConfigurationError: If no key is available.
    """
    resolved = api_key or os.environ.get(env_var, "").strip()
    if not resolved:
        msg = f"Missing API key: set the {env_var} environment variable"
        raise ConfigurationError(msg)
    return resolved


def create_client(config: ChroniclesConfig, api_key: str | None = None) -> anthropic.AsyncAnthropic:
    """Create the shared Anthropic client, failing fast without a key."""
    key = resolve_api_key(api_key, config.api_key_env)
    return anthropic.AsyncAnthropic(api_key=key, timeout=config.timeout)


def create_researcher(
    config: ResearchConfig, client: anthropic.AsyncAnthropic
) -> ClaudeCompanyResearcher:
    """Create the company researcher from config."""
    return ClaudeCompanyResearcher(
        client,
        model=config.model,
        max_tokens=config.max_tokens,
        max_searches=config.max_searches,
        max_continuations=config.max_continuations,
        system_prompt=config.system_prompt,
    )


def create_session_factory(config: ChatConfig, client: anthropic.AsyncAnthropic) -> SessionFactory:
    """Create a factory building one chat session per company."""

    def factory(data: CompanyData, on_update: UpdateCallback) -> ClaudeChatSession:
        return ClaudeChatSession(
            data,
            on_update,
            client=client,
            model=config.model,
            max_tokens=config.max_tokens,
            max_searches=config.max_searches,
            max_tool_rounds=config.max_tool_rounds,
        )

    return factory


def create_from_config(
    config: ChroniclesConfig,
    *,
    api_key: str | None = None,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[CompanyExplorer, RunLogger | None, PriceCache]:
    """Create a complete explorer from root config.

    Args:
        config: Root configuration.
        api_key: Explicit API key (otherwise read from ``config.api_key_env``).
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (explorer, run_logger, price_cache).
        run_logger is None if logging is disabled.

    Raises:
        ConfigurationError: If no API key is available.
    """
    client = create_client(config, api_key)

    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    price_cache = PriceCache(fetch=config.pricing.fetch_live_prices)
    explorer = CompanyExplorer(
        create_researcher(config.research, client),
        create_session_factory(config.chat, client),
        price_cache=price_cache,
        run_logger=run_logger,
    )
    return (explorer, run_logger, price_cache)
