"""Claude-backed conversational session that can update the displayed data."""

import json
import logging
from enum import StrEnum
from typing import Any

import anthropic

from chronicles.chat.base import UpdateCallback
from chronicles.chat.tools import UPDATE_COMPANY_DATA_TOOL, UPDATE_SUCCESS_RESULT, UPDATE_TOOL_NAME
from chronicles.content import response_text
from chronicles.data import APICallUsage, CompanyData, Usage, parse_update
from chronicles.errors import ChatError, ToolLoopExceededError

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "I updated the information."
UNHANDLED_TOOLS_FALLBACK = "I wasn't able to do that. Could you rephrase your request?"

SYSTEM_PROMPT_TEMPLATE = """\
You are an intelligent assistant helping a user analyze a company.
Current Context: You have access to the following company data which is \
currently displayed to the user:
{company_json}

Your Goal: Answer user questions about the company. You can use web search to \
find the latest info.

CRITICAL: If the user provides corrections, asks to add specific events/nodes, \
or if you discover through search that the current data is outdated or \
incorrect, YOU MUST use the '{tool_name}' tool to update the visualization.
When using the tool, provide the COMPLETE updated arrays/objects, not just the diff.\
"""


class TurnState(StrEnum):
    """Where a turn currently is in the tool-call protocol."""

    AWAITING_REPLY = "awaiting_reply"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    FAILED = "failed"


class ClaudeChatSession:
    """Multi-turn dialogue about one company's data.

    The system prompt embeds a snapshot of the data taken at construction;
    create a new session whenever the company changes. Data mutations the
    model asks for are reported through ``on_update`` before the model is
    told they succeeded.

    Args:
        initial_data: Company data shown to the user when the session starts.
        on_update: Callback receiving validated whole-field replacements.
        client: Anthropic async client.
        model: Anthropic model to use.
        max_tokens: Output token limit per model call.
        max_searches: Max web searches per model call.
        max_tool_rounds: Max model calls in a single turn.
    """

    def __init__(
        self,
        initial_data: CompanyData,
        on_update: UpdateCallback,
        *,
        client: anthropic.AsyncAnthropic,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 4096,
        max_searches: int = 3,
        max_tool_rounds: int = 8,
    ) -> None:
        self._client = client
        self._on_update = on_update
        self._model = model
        self._max_tokens = max_tokens
        self._max_searches = max_searches
        self._max_tool_rounds = max_tool_rounds
        self._system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
            company_json=json.dumps(initial_data.to_dict(), ensure_ascii=False),
            tool_name=UPDATE_TOOL_NAME,
        )
        self._messages: list[dict[str, Any]] = []
        self._state = TurnState.DONE

    @property
    def state(self) -> TurnState:
        """State of the most recent turn."""
        return self._state

    @property
    def history(self) -> list[dict[str, Any]]:
        """Messages sent to the model so far (copy)."""
        return list(self._messages)

    async def send_message(self, text: str) -> tuple[str, Usage]:
        """Send a user message and resolve any tool calls it triggers.

        Args:
            text: The user's message.

        Returns:
            Tuple of (final reply text, usage across every round of the turn).

        Raises:
            ToolLoopExceededError: If the model keeps requesting tools past
                ``max_tool_rounds`` calls.
            ChatError: If any call to the model fails.
        """
        usage = Usage()
        rounds = 0
        self._messages.append({"role": "user", "content": text})
        self._state = TurnState.AWAITING_REPLY

        while True:
            if rounds >= self._max_tool_rounds:
                self._state = TurnState.FAILED
                raise ToolLoopExceededError(
                    f"Turn exceeded {self._max_tool_rounds} model calls without a final reply",
                    usage=usage,
                )

            response = await self._create(usage)
            rounds += 1
            usage += Usage(api_calls=[APICallUsage.from_response(self._model, response.usage)])

            if response.stop_reason == "pause_turn":
                # Server-side search paused mid-turn; resend to let it continue
                self._messages.append({"role": "assistant", "content": response.content})
                continue

            tool_calls = [block for block in response.content if block.type == "tool_use"]
            reply = response_text(response.content)

            if not tool_calls:
                self._messages.append({"role": "assistant", "content": response.content})
                self._state = TurnState.DONE
                return (reply or EMPTY_REPLY_FALLBACK, usage)

            self._state = TurnState.EXECUTING_TOOLS
            results, handled = self._execute_tools(tool_calls)

            if not handled:
                logger.warning(
                    "Model requested only unknown tools: %s",
                    ", ".join(call.name for call in tool_calls),
                )
                if reply:
                    self._messages.append({"role": "assistant", "content": reply})
                self._state = TurnState.DONE
                return (reply or UNHANDLED_TOOLS_FALLBACK, usage)

            self._messages.append({"role": "assistant", "content": response.content})
            self._messages.append({"role": "user", "content": results})
            self._state = TurnState.AWAITING_REPLY

    async def _create(self, usage: Usage) -> Any:
        """Call the model; failures carry the usage of the turn so far."""
        try:
            return await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=self._system_prompt,
                tools=[
                    {
                        "type": "web_search_20250305",
                        "name": "web_search",
                        "max_uses": self._max_searches,
                    },
                    UPDATE_COMPANY_DATA_TOOL,
                ],
                messages=self._messages,
            )
        except anthropic.APIError as e:
            self._state = TurnState.FAILED
            logger.error(f"Chat request failed: {e}")
            raise ChatError(f"Chat request failed: {e}", usage=usage) from e

    def _execute_tools(self, tool_calls: list[Any]) -> tuple[list[dict[str, Any]], bool]:
        """Run requested tools and build their results.

        Returns:
            Tuple of (tool_result blocks, whether any known tool was called).
        """
        results: list[dict[str, Any]] = []
        handled = False
        for call in tool_calls:
            if call.name != UPDATE_TOOL_NAME:
                results.append(
                    {
                        "type": "tool_result",
                        "tool_use_id": call.id,
                        "content": f"error: unknown tool '{call.name}'",
                        "is_error": True,
                    }
                )
                continue

            args = call.input if isinstance(call.input, dict) else {}
            update = parse_update(args)
            logger.info(
                "Executing %s (timeline=%s, structure=%s)",
                UPDATE_TOOL_NAME,
                update.timeline is not None,
                update.structure is not None,
            )
            self._on_update(update)
            handled = True
            results.append(
                {
                    "type": "tool_result",
                    "tool_use_id": call.id,
                    "content": UPDATE_SUCCESS_RESULT,
                }
            )
        return (results, handled)
