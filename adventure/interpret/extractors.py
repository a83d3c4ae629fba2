"""Fact extractors for the two reply dialects.

Structured dialect: a JSON object with optional ``narrative``, ``location``,
``inventory`` and ``recentEvents`` keys. Marker dialect: prose where
``*location*`` names at most one new location and ``{item}`` names found
items.
"""

import logging
import re
from typing import Any

from adventure.models import MarkerFacts, StructuredFacts, normalize, normalize_items

logger = logging.getLogger(__name__)

MAX_MARKER_LENGTH = 64

# Single asterisks only; **emphasis** is not a location marker.
_LOCATION_MARKER = re.compile(r"(?<!\*)\*(?!\*)([^*\n]+?)(?<!\*)\*(?!\*)")
_ITEM_MARKER = re.compile(r"\{([^{}\n]+)\}")


# ── Structured dialect ───────────────────────────────────


def _strings(value: Any) -> list[str]:
    """Stripped, non-blank string elements of a JSON array (else empty)."""
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for element in value:
        if isinstance(element, str) and element.strip():
            out.append(element.strip())
    return out


def extract_structured(data: dict[str, Any]) -> StructuredFacts:
    """Map a parsed JSON object onto StructuredFacts.

    Every field is optional. Wrong types, empty arrays and blank strings are
    ignored, so a partial payload yields partial facts and an object with
    none of the fields yields empty facts.
    """
    narrative = data.get("narrative")
    if not isinstance(narrative, str) or not narrative.strip():
        narrative = None
    else:
        narrative = narrative.strip()

    location = data.get("location")
    if not isinstance(location, str):
        location = None

    inventory = normalize_items(_strings(data.get("inventory"))) or None

    events = _strings(data.get("recentEvents"))
    if not events and narrative:
        # The event log mirrors what the player was shown.
        events = [narrative]

    return StructuredFacts(
        narrative=narrative,
        location=location,
        inventory=inventory,
        events=events,
    )


# ── Marker dialect ───────────────────────────────────────


def _bounded(raw: str) -> str | None:
    value = normalize(raw)
    if value and len(value) <= MAX_MARKER_LENGTH:
        return value
    return None


def scan_location(text: str) -> str | None:
    """First ``*location*`` marker in the text, normalized.

    Only the first marker counts; if it is blank or too long there is no
    location.
    """
    match = _LOCATION_MARKER.search(text)
    return _bounded(match.group(1)) if match else None


def scan_items(text: str) -> list[str]:
    """Every ``{item}`` marker in the text, normalized, in order of appearance."""
    items: list[str] = []
    for match in _ITEM_MARKER.finditer(text):
        value = _bounded(match.group(1))
        if value:
            items.append(value)
    return items


def extract_markers(text: str, inventory: list[str]) -> MarkerFacts:
    """Scan prose for markers.

    Items already held are skipped. The whole trimmed reply is always the
    single event.
    """
    cleaned = text.strip()
    held = set(inventory)
    adds = [item for item in normalize_items(scan_items(cleaned)) if item not in held]
    return MarkerFacts(
        location=scan_location(cleaned),
        inventory_adds=adds,
        events=[cleaned] if cleaned else [],
    )
