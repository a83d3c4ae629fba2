"""Narrative reply interpretation and state reconciliation.

Executes one turn for one session:
  1. Build the narrator prompt from the GameState (requested dialect).
  2. Await the narrator LLM. Failures raise LLMError with the state untouched.
  3. Append the trimmed reply to the story transcript.
  4. Classify the reply: a JSON object (bare, or in a ```json fence) is
     structured; anything else is marker prose.
  5. Extract candidate facts:
       structured → StructuredFacts (narrative, location, full inventory, events)
       marker     → MarkerFacts (first *location*, new {items}, reply as event)
  6. Reconcile in fixed order: narrative rewrites the last story line,
     location overwrites, inventory is replaced (structured) or extended
     (marker), events are pushed into the 5-slot recent-events log.

Reply dialects:
  {"narrative": "...", "location": "...", "inventory": [...], "recentEvents": [...]}
  You move to *forest path*. You find {rusty key}.
"""

from .classifier import classify_reply, json_candidate  # noqa: F401
from .core import interpret_reply, run_turn  # noqa: F401
from .extractors import (  # noqa: F401
    extract_markers,
    extract_structured,
    scan_items,
    scan_location,
)
from .reconcile import apply_facts, push_event  # noqa: F401
