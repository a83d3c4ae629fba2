"""Reply classification: does the reply carry a JSON object or plain prose?"""

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```[ \t]*json\b\s*(.*?)```", re.IGNORECASE | re.DOTALL)


def json_candidate(text: str) -> str:
    """Return the text that should be tried as JSON.

    The contents of the first ```json fenced block win; otherwise the whole
    trimmed reply is the candidate.
    """
    match = _JSON_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def classify_reply(text: str) -> dict[str, Any] | None:
    """Parse the reply as a JSON object.

    Returns the object for structured extraction, or None when the reply must
    fall through to marker extraction (malformed JSON, non-object top level).
    """
    candidate = json_candidate(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        # Prose failing to parse is the normal marker path; only note near misses.
        if candidate.startswith("{"):
            logger.warning(f"Reply looks like JSON but does not parse: {e}")
        return None
    if not isinstance(data, dict):
        logger.debug("Reply parsed as JSON %s, not an object", type(data).__name__)
        return None
    return data
