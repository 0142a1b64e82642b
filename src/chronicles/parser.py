"""Extract structured JSON from free-form model text."""

import json
import logging
import re
from typing import Any

from chronicles.errors import ParseError

logger = logging.getLogger(__name__)

# First ```json fenced block; non-greedy so later blocks are ignored
_JSON_BLOCK_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)


def extract_json(text: str) -> Any:
    """Parse the structured value embedded in a model response.

    Looks for the first fenced block tagged ``json``. Without one, the whole
    trimmed text is parsed if it starts with ``{``.

    Args:
        text: Raw response text.

    Returns:
        The decoded JSON value.

    Raises:
        ParseError: If no candidate is found or the candidate is malformed.
    """
    match = _JSON_BLOCK_RE.search(text)
    if match:
        candidate = match.group(1)
    else:
        candidate = text.strip()
        if not candidate.startswith("{"):
            logger.warning("No JSON found in model response (%d chars)", len(text))
            raise ParseError("No JSON found")

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON from model response: {e}")
        raise ParseError(f"Malformed JSON: {e}") from e
