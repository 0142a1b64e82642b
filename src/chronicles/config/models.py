"""Pydantic configuration models for Corporate Chronicles."""

from pydantic import BaseModel, Field

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


class ResearchConfig(BaseModel):
    """Configuration for the initial company query."""

    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=8192, ge=1)
    max_searches: int = Field(default=5, ge=1)
    max_continuations: int = Field(default=3, ge=0)
    system_prompt: str | None = None

    model_config = {"frozen": True}


class ChatConfig(BaseModel):
    """Configuration for conversational sessions."""

    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=4096, ge=1)
    max_searches: int = Field(default=3, ge=1)
    max_tool_rounds: int = Field(default=8, ge=1)

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Configuration for JSON run logs."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


class PricingConfig(BaseModel):
    """Configuration for cost estimation."""

    fetch_live_prices: bool = True

    model_config = {"frozen": True}


class ChroniclesConfig(BaseModel):
    """Root configuration for Corporate Chronicles."""

    api_key_env: str = "CLAUDE_API_KEY"
    timeout: float = Field(default=120.0, gt=0)
    research: ResearchConfig = Field(default_factory=ResearchConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)

    model_config = {"frozen": True}
