"""Conversational sessions that can refine company data."""

from chronicles.chat.base import ChatSession, SessionFactory, UpdateCallback
from chronicles.chat.claude import ClaudeChatSession, TurnState
from chronicles.chat.tools import UPDATE_COMPANY_DATA_TOOL, UPDATE_TOOL_NAME

__all__ = [
    "ChatSession",
    "ClaudeChatSession",
    "SessionFactory",
    "TurnState",
    "UPDATE_COMPANY_DATA_TOOL",
    "UPDATE_TOOL_NAME",
    "UpdateCallback",
]
