"""
Decoding of raw oracle text into JSON.

The oracle is asked for bare JSON but sometimes wraps it in a markdown code
fence. The text is decoded as-is first; the first fenced block is the only
fallback.
"""
import json
import re
from typing import Any

import structlog

from research_portal.exceptions import MalformedExtractionError

logger = structlog.get_logger(__name__)

FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def decode_oracle_json(raw_text: str) -> Any:
    """
    Decode the oracle's response text.

    Args:
        raw_text: Response text exactly as returned by the oracle.

    Returns:
        The decoded JSON value.

    Raises:
        MalformedExtractionError: Neither the text nor a fenced block in it
            is valid JSON.
    """
    try:
        return json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("oracle_json_invalid", error=str(e), prefix=(raw_text or "")[:300])

    match = FENCED_BLOCK_PATTERN.search(raw_text or "")
    if not match:
        raise MalformedExtractionError(details={"reason": "no JSON object or fenced block"})

    try:
        data = json.loads(match.group(1).strip())
    except json.JSONDecodeError as e:
        raise MalformedExtractionError(details={"reason": "fenced block is not JSON", "error": str(e)}) from e

    logger.info("fenced_json_recovered", length=len(match.group(1)))
    return data
