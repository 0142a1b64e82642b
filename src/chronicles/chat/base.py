from collections.abc import Callable
from typing import Protocol

from chronicles.data import CompanyData, CompanyDataUpdate, Usage

UpdateCallback = Callable[[CompanyDataUpdate], None]


class ChatSession(Protocol):
    """Interface for a multi-turn dialogue about one company."""

    async def send_message(self, text: str) -> tuple[str, Usage]:
        """Send a user message and run the turn to completion.

        Args:
            text: The user's message.

        Returns:
            Tuple of (final assistant reply, usage for the whole turn).

        Raises:
            ChatError: If any underlying call fails.
        """
        ...


SessionFactory = Callable[[CompanyData, UpdateCallback], ChatSession]
