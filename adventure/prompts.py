"""Handlebars prompt rendering for the narrator.

The prompt tells the model which reply dialect to use: ``marker`` prose
(``You find {item}``, ``You move to *location*``) or a ``structured`` JSON
object. The engine accepts either, but the prompt should ask for one
consistently.
"""

from collections.abc import Callable
from typing import Any

import pybars

from adventure.models import GameState

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


def _helper_last(this, options, items, count):
    """{{#last array N}}...{{/last}} — iterate over the last N items."""
    result = []
    for item in list(items)[-int(count):]:
        result.extend(options["fn"](item))
    return result


_HELPERS: dict[str, Callable] = {
    "last": _helper_last,
}


WORLD = (
    "You are the Dungeon Master for a text adventure game set in a fantasy world "
    "with villages, forests, mountains, dungeons, and hidden treasures. The player "
    "is on an adventure and exploring this world."
)

_MARKER_RULES = """\
Respond with a vivid, descriptive narrative (2-4 sentences) that advances the story based on the player's input.

Important formatting rules:
1. If the player finds an item, explicitly state "You find {item}" with curly braces around the item name.
2. If the player moves to a new location, explicitly state "You move to *location*" with asterisks around the location name.
3. Include sensory details and create an immersive experience.
4. Keep your response focused and concise.
5. Never break character as the Dungeon Master."""

_STRUCTURED_RULES = """\
Advance the story based on the player's input and reply with a single JSON object, optionally inside a ```json code block, with these keys:
- "narrative": a vivid, descriptive narrative of 2-4 sentences shown to the player.
- "location": the player's current location after this turn.
- "inventory": the player's complete inventory after this turn, as an array of item names.
- "recentEvents": an array with one short summary of what just happened.
Write nothing outside the JSON object. Never break character as the Dungeon Master."""

INSTRUCTIONS = {
    "marker": _MARKER_RULES,
    "structured": _STRUCTURED_RULES,
}

SYSTEM_PROMPTS = {
    "marker": """\
You are a creative Dungeon Master for a text adventure game.

Your responses should be vivid, descriptive, and immersive, using sensory details to bring the fantasy world to life.

IMPORTANT FORMATTING RULES:
- Keep responses between 2-4 sentences for readability
- When the player finds an item, explicitly state "You find {item}" with curly braces around the item name
- When the player moves to a new location, explicitly state "You move to *location*" with asterisks around the location name
- Never break character as the Dungeon Master
- Focus on advancing the story based on player input""",
    "structured": """\
You are a creative Dungeon Master for a text adventure game.

Your narratives should be vivid, descriptive, and immersive, using sensory details to bring the fantasy world to life.

IMPORTANT FORMATTING RULES:
- Always reply with one JSON object holding "narrative", "location", "inventory" and "recentEvents"
- "inventory" is always the complete list of items the player carries
- Keep the narrative between 2-4 sentences for readability
- Never break character as the Dungeon Master""",
}

SYSTEM_PROMPT = SYSTEM_PROMPTS["marker"]

TURN_TEMPLATE = """\
{{{world}}}


Current Game State:
- Location: {{{location}}}
- Inventory: {{#if inventory}}{{{inventory}}}{{else}}empty{{/if}}
- Recent events: {{#last events 2}}{{{this}}} {{/last}}



The player says: "{{{message}}}"


{{{instruction}}}
"""


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context, helpers=_HELPERS))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def build_context(state: GameState, player_input: str, dialect: str = "marker") -> dict[str, Any]:
    """Assemble template variables from the game state.

    The template shows only the last two recent events.
    """
    if dialect not in INSTRUCTIONS:
        raise PromptError(f"Unknown reply dialect: {dialect}")
    return {
        "world": WORLD,
        "location": state.location,
        "inventory": ", ".join(state.inventory),
        "events": list(state.recent_events),
        "message": player_input,
        "instruction": INSTRUCTIONS[dialect],
    }


def build_prompt(state: GameState, player_input: str, dialect: str = "marker") -> str:
    return render_prompt(TURN_TEMPLATE, build_context(state, player_input, dialect))
