"""Helpers for reading Messages API content blocks."""

from typing import Any

from chronicles.data import GroundingSource


def response_text(content: list[Any]) -> str:
    """Concatenate the text blocks of a Messages API response."""
    return "".join(block.text for block in content if block.type == "text")


def collect_sources(content: list[Any]) -> list[GroundingSource]:
    """Collect web search results and citations in order of appearance.

    Duplicates are kept; callers dedupe by uri.
    """
    sources: list[GroundingSource] = []
    for block in content:
        if block.type == "web_search_tool_result":
            results = block.content
            # An error result carries an error object instead of a list
            if isinstance(results, list):
                for result in results:
                    sources.append(GroundingSource(title=result.title or "", uri=result.url))
        elif block.type == "text":
            for citation in block.citations or []:
                if citation.type == "web_search_result_location":
                    sources.append(GroundingSource(title=citation.title or "", uri=citation.url))
    return sources
