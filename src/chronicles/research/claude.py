import logging
from typing import Any

import anthropic

from chronicles.content import collect_sources, response_text
from chronicles.data import APICallUsage, CompanyData, GroundingSource, Usage, parse_company_data
from chronicles.errors import ParseError, QueryError
from chronicles.parser import extract_json

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """\
You are a corporate historian and data analyst. You provide accurate, \
factual data based on search results.\
"""


def build_research_prompt(company_name: str) -> str:
    """Build the user prompt asking for summary, milestones and structure."""
    return f"""\
I need a comprehensive analysis of the company "{company_name}".

Please search the web to find:
1. A brief summary of the company.
2. Key historical milestones (founding, IPO, major product launches, major \
acquisitions, crises). Dates are important.
3. The organizational structure (parent company, major subsidiaries, key divisions).

Output the result as a strict JSON object wrapped in a ```json code block.
The JSON must adhere to this schema:
{{
  "companyName": "Exact Company Name",
  "summary": "Brief 2-3 sentence overview.",
  "timeline": [
    {{ "year": 2024, "dateStr": "Oct 2024", "title": "Event Title", \
"description": "Details...", "category": "general" }}
  ],
  "structure": {{
    "name": "{company_name}",
    "role": "root",
    "description": "Headquarters",
    "children": [
      {{ "name": "Subsidiary A", "role": "subsidiary", "description": "..." }}
    ]
  }}
}}

For the "timeline" category, use one of: 'founding', 'product', 'acquisition', \
'scandal', 'general'.
Ensure the "structure" is a tree starting with the main company as root. If it \
has a parent company, make the parent the root and the searched company a child.\
"""


class ClaudeCompanyResearcher:
    """Research a company with Claude, grounded in web search.

    The model is asked for a fenced JSON object; search results and
    citations attached to the answer become the company's sources. A
    server-side search that pauses the turn is resumed up to
    ``max_continuations`` times.

    Args:
        client: Anthropic async client.
        model: Anthropic model to use.
        max_tokens: Output token limit for the answer.
        max_searches: Max web searches the model may run.
        max_continuations: Max resumptions of a paused turn.
        system_prompt: Custom system prompt (defaults to the historian framing).
    """

    def __init__(
        self,
        client: anthropic.AsyncAnthropic,
        *,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 8192,
        max_searches: int = 5,
        max_continuations: int = 3,
        system_prompt: str | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._max_searches = max_searches
        self._max_continuations = max_continuations
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT

    async def fetch_company_data(self, name: str) -> tuple[CompanyData, Usage]:
        """Query the model for a company's summary, timeline and structure.

        Every call re-queries; nothing is cached.

        Args:
            name: Company name to research.

        Returns:
            Tuple of (company data, usage across every model call).

        Raises:
            QueryError: On upstream failure, a turn still paused after
                ``max_continuations`` resumptions, or an unparseable answer.
        """
        messages: list[dict[str, Any]] = [
            {"role": "user", "content": build_research_prompt(name)}
        ]
        usage = Usage()
        sources: list[GroundingSource] = []

        for _ in range(self._max_continuations + 1):
            response = await self._create(name, messages)
            usage += Usage(api_calls=[APICallUsage.from_response(self._model, response.usage)])
            sources.extend(collect_sources(response.content))
            if response.stop_reason != "pause_turn":
                break
            # Server-side search paused mid-turn; resend to let it continue
            messages.append({"role": "assistant", "content": response.content})
        else:
            logger.warning("Research for %r still paused after %d calls", name, len(usage.api_calls))
            raise QueryError("research did not finish")

        try:
            parsed = extract_json(response_text(response.content))
        except ParseError as e:
            raise QueryError("unparseable response") from e

        if not isinstance(parsed, dict):
            logger.warning("Research answer is %s, expected an object", type(parsed).__name__)
            raise QueryError("unparseable response")

        data = parse_company_data(parsed, fallback_name=name, sources=sources)
        logger.info(
            "Researched %s: %d events, %d sources",
            data.company_name,
            len(data.timeline),
            len(data.sources),
        )
        return (data, usage)

    async def _create(self, name: str, messages: list[dict[str, Any]]) -> Any:
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
                    }
                ],
                messages=list(messages),
            )
        except anthropic.APIError as e:
            logger.error(f"Research request for {name!r} failed: {e}")
            raise QueryError(f"Failed to fetch company data: {e}") from e
