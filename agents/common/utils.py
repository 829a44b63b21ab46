"""Shared utility functions for agents."""

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def parse_json_response(response: str) -> Optional[Dict[str, Any]]:
    """Safely parse JSON from agent response.

    Args:
        response: Agent response text that may contain JSON

    Returns:
        Parsed JSON dict or None if parsing fails
    """
    if not response:
        return None

    # Try to extract JSON from markdown code blocks
    if "```" in response:
        start = response.find("```")
        start = response.find("\n", start)
        end = response.find("```", start)
        if start != -1 and end != -1:
            try:
                parsed = json.loads(response[start:end].strip())
                return parsed if isinstance(parsed, dict) else None
            except json.JSONDecodeError as e:
                logger.warning(f"Failed to parse JSON from code block: {e}")

    # Try to parse the entire response
    try:
        parsed = json.loads(response.strip())
    except json.JSONDecodeError:
        logger.warning("Response is not valid JSON")
        return None
    return parsed if isinstance(parsed, dict) else None


def clip_text(text: str, max_length: int = 20000) -> str:
    """Cap prompt input at ``max_length`` characters."""
    if len(text) <= max_length:
        return text
    return text[:max_length]
