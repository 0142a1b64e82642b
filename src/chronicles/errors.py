"""Exception taxonomy for Corporate Chronicles."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronicles.data import Usage


class ChroniclesError(Exception):
    """Base exception for all Corporate Chronicles errors."""


class ConfigurationError(ChroniclesError):
    """Raised when required configuration (e.g. the API key) is missing or invalid."""


class ParseError(ChroniclesError):
    """Raised when model text holds no recognizable structured output.

    Internal: the query service converts it to :class:`QueryError`.
    """


class QueryError(ChroniclesError):
    """Raised when the initial company query fails or cannot be parsed."""


class ChatError(ChroniclesError):
    """Raised when a conversational turn fails.

    Attributes:
        usage: Usage of the model calls completed before the failure.
    """

    def __init__(self, message: str, usage: "Usage | None" = None) -> None:
        super().__init__(message)
        self.usage = usage


class ToolLoopExceededError(ChatError):
    """Raised when a single turn requests tools more times than allowed."""
