"""Corporate Chronicles: company history and structure explorer backed by Claude."""

from chronicles.app import CompanyExplorer
from chronicles.chat import ChatSession, ClaudeChatSession, SessionFactory, TurnState, UpdateCallback
from chronicles.config import ChroniclesConfig, create_from_config, load_config
from chronicles.data import (
    APICallUsage,
    ChatMessage,
    CompanyData,
    CompanyDataUpdate,
    EventCategory,
    GroundingSource,
    MessageRole,
    NodeRole,
    OrgNode,
    TimelineEvent,
    Usage,
)
from chronicles.errors import (
    ChatError,
    ChroniclesError,
    ConfigurationError,
    ParseError,
    QueryError,
    ToolLoopExceededError,
)
from chronicles.parser import extract_json
from chronicles.pricing import PriceCache, estimate_usage_cost
from chronicles.research import ClaudeCompanyResearcher, CompanyResearcher
from chronicles.run_logger import RunLogger

__all__ = [
    # Models
    "APICallUsage",
    "ChatMessage",
    "CompanyData",
    "CompanyDataUpdate",
    "EventCategory",
    "GroundingSource",
    "MessageRole",
    "NodeRole",
    "OrgNode",
    "TimelineEvent",
    "Usage",
    # Errors
    "ChatError",
    "ChroniclesError",
    "ConfigurationError",
    "ParseError",
    "QueryError",
    "ToolLoopExceededError",
    # Protocols
    "ChatSession",
    "CompanyResearcher",
    "SessionFactory",
    "UpdateCallback",
    # Services
    "ClaudeChatSession",
    "ClaudeCompanyResearcher",
    "CompanyExplorer",
    "TurnState",
    "extract_json",
    # Pricing
    "PriceCache",
    "estimate_usage_cost",
    # Logging
    "RunLogger",
    # Config
    "ChroniclesConfig",
    "create_from_config",
    "load_config",
]
