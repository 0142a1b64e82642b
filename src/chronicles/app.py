"""Top-level application state shared by every front-end."""

import logging
import time
import uuid

from chronicles.chat.base import ChatSession, SessionFactory
from chronicles.data import ChatMessage, CompanyData, CompanyDataUpdate, MessageRole, Usage
from chronicles.errors import ChatError, QueryError
from chronicles.pricing import PriceCache
from chronicles.research.base import CompanyResearcher
from chronicles.run_logger import RunLogger

logger = logging.getLogger(__name__)

GREETING_TEMPLATE = (
    "Hi! I've analyzed {company}. Ask me anything about its history or structure. "
    "If you see something missing, just let me know and I can update the charts!"
)
CHAT_FALLBACK_TEXT = "Sorry, I had trouble connecting. Please try again."


def _new_message(role: MessageRole, text: str, *, is_update: bool = False) -> ChatMessage:
    return ChatMessage(id=uuid.uuid4().hex, role=role, text=text, is_update=is_update)


class CompanyExplorer:
    """Owns the displayed company data, the chat log and the active session.

    Front-ends call :meth:`search` and :meth:`send_chat` and render
    :attr:`data`, :attr:`error` and :attr:`messages`. Only one operation may
    be in flight at a time; front-ends should disable their controls while
    :attr:`busy` is set.

    Args:
        researcher: Service answering the initial company query.
        session_factory: Builds a chat session from a data snapshot and an
            update callback.
        price_cache: Optional PriceCache for cost estimation.
        run_logger: Optional RunLogger recording each company session.
    """

    def __init__(
        self,
        researcher: CompanyResearcher,
        session_factory: SessionFactory,
        *,
        price_cache: PriceCache | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._researcher = researcher
        self._session_factory = session_factory
        self._price_cache = price_cache
        self._run_logger = run_logger

        self._data: CompanyData | None = None
        self._error: str | None = None
        self._messages: list[ChatMessage] = []
        self._session: ChatSession | None = None
        self._busy = False
        self._turn_updated = False
        self._usage = Usage()
        self._run_usage = Usage()

    @property
    def data(self) -> CompanyData | None:
        return self._data

    @property
    def error(self) -> str | None:
        """User-visible message for the last failed query, if any."""
        return self._error

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def usage(self) -> Usage:
        """Usage accumulated over the explorer's lifetime."""
        return self._usage

    async def search(self, name: str) -> CompanyData | None:
        """Run a company query, replacing the current data and chat.

        Blank names are ignored. On failure :attr:`error` is set and no
        data is kept.

        Returns:
            The new company data, or None on failure.
        """
        name = name.strip()
        if not name:
            return None

        self._finish_run()
        self._data = None
        self._error = None
        self._messages = []
        self._session = None

        if self._run_logger:
            self._run_logger.start_run(name)
        if self._price_cache:
            await self._price_cache.get()

        self._busy = True
        t0 = time.monotonic()
        try:
            data, usage = await self._researcher.fetch_company_data(name)
        except QueryError as e:
            logger.error(f"Company query for {name!r} failed: {e}")
            self._error = str(e)
            return None
        finally:
            self._busy = False

        self._record("research", type(self._researcher).__name__, name, data, usage, t0)

        self._data = data
        self._session = self._session_factory(data, self._apply_update)
        self._messages.append(
            ChatMessage(
                id="init",
                role=MessageRole.MODEL,
                text=GREETING_TEMPLATE.format(company=data.company_name),
            )
        )
        return data

    async def send_chat(self, text: str) -> ChatMessage | None:
        """Send a chat message for the current company.

        Blank text, or a call before any company is loaded, is ignored. A
        failed turn appends a fallback reply instead of raising.

        Returns:
            The model's reply message, or None if nothing was sent.
        """
        text = text.strip()
        if not text or self._session is None:
            return None

        self._messages.append(_new_message(MessageRole.USER, text))
        self._busy = True
        self._turn_updated = False
        t0 = time.monotonic()
        try:
            reply_text, usage = await self._session.send_message(text)
        except ChatError as e:
            logger.error(f"Chat turn failed: {e}")
            if e.usage is not None:
                self._record("chat", type(self._session).__name__, text, str(e), e.usage, t0)
            reply = _new_message(MessageRole.MODEL, CHAT_FALLBACK_TEXT, is_update=self._turn_updated)
            self._messages.append(reply)
            return reply
        finally:
            self._busy = False

        self._record("chat", type(self._session).__name__, text, reply_text, usage, t0)

        reply = _new_message(MessageRole.MODEL, reply_text, is_update=self._turn_updated)
        self._messages.append(reply)
        return reply

    def close(self) -> None:
        """Flush the run log of the current company session."""
        self._finish_run()

    def _apply_update(self, update: CompanyDataUpdate) -> None:
        if self._data is None or update.is_empty:
            return
        self._data = self._data.apply_update(update)
        self._turn_updated = True
        logger.info(
            "Applied update to %s (timeline=%s, structure=%s)",
            self._data.company_name,
            update.timeline is not None,
            update.structure is not None,
        )

    def _record(
        self,
        stage: str,
        component: str,
        input_data: object,
        output_data: object,
        usage: Usage,
        t0: float,
    ) -> None:
        if self._price_cache:
            self._price_cache.stamp_usage(usage)
        self._usage += usage
        self._run_usage += usage
        if self._run_logger:
            self._run_logger.log_stage(
                stage=stage,
                component=component,
                input_data=input_data,
                output_data=output_data,
                usage=usage,
                duration_seconds=time.monotonic() - t0,
            )

    def _finish_run(self) -> None:
        if self._run_logger and self._run_logger.active:
            self._run_logger.finish_run(self._data, self._run_usage)
        self._run_usage = Usage()
