"""Apply candidate facts to the authoritative GameState."""

import logging

from adventure.models import (
    MAX_RECENT_EVENTS,
    CandidateFacts,
    GameState,
    MarkerFacts,
    StructuredFacts,
    normalize_items,
    normalize_location,
)

logger = logging.getLogger(__name__)


def push_event(state: GameState, event: str) -> None:
    """Append one event, evicting the oldest once the log holds five."""
    while len(state.recent_events) >= MAX_RECENT_EVENTS:
        state.recent_events.pop(0)
    state.recent_events.append(event)


def apply_facts(state: GameState, facts: CandidateFacts) -> None:
    """Merge facts into state in fixed order: narrative, location, inventory, events.

    Location and item names are normalized again here, so facts built or
    mutated outside the extractors cannot break the lowercase, trimmed and
    unique invariant. Never raises for well-typed facts; absent fields are
    no-ops.
    """
    narrative = facts.narrative if isinstance(facts, StructuredFacts) else None
    if narrative is not None:
        if state.story:
            state.story[-1] = narrative
        else:
            state.story.append(narrative)

    location = normalize_location(facts.location)
    if location is not None:
        state.location = location
        logger.info("Location updated to: %s", state.location)

    if isinstance(facts, StructuredFacts):
        if facts.inventory is not None:
            state.inventory = normalize_items(facts.inventory)
            logger.info("Inventory replaced: %s", state.inventory)
    elif isinstance(facts, MarkerFacts):
        for item in normalize_items(facts.inventory_adds):
            if item not in state.inventory:
                state.inventory.append(item)
                logger.info("Added item to inventory: %s", item)

    for event in facts.events:
        push_event(state, event)
