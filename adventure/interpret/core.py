"""Interpretation entry point and the per-turn runner."""

import logging

from adventure.llm import LLM, LLMError
from adventure.models import CandidateFacts, GameState, MarkerFacts
from adventure.prompts import build_prompt

from .classifier import classify_reply
from .extractors import extract_markers, extract_structured
from .reconcile import apply_facts

logger = logging.getLogger(__name__)


def interpret_reply(state: GameState, reply: str) -> CandidateFacts:
    """Fold one reply into the state and return the facts that were applied.

    The trimmed reply is appended to the story first. A structured reply with
    a ``narrative`` then overwrites that line; otherwise the reply itself
    stays as the transcript entry. Never raises on malformed replies.
    """
    text = reply.strip()
    if not text:
        logger.warning("Empty reply; nothing to interpret")
        return MarkerFacts()

    state.story.append(text)

    data = classify_reply(text)
    facts: CandidateFacts
    if data is not None:
        facts = extract_structured(data)
    else:
        facts = extract_markers(text, state.inventory)
    logger.debug("Interpreted reply as %s: %s", facts.kind, facts.model_dump(exclude={"kind"}))

    apply_facts(state, facts)
    return facts


async def run_turn(
    state: GameState,
    player_input: str,
    llm: LLM,
    dialect: str = "marker",
) -> CandidateFacts:
    """Ask the narrator for a continuation and fold it into the state.

    The state is untouched unless a non-empty reply arrives: LLMError from the
    client, or a blank reply, propagates before any mutation. Callers must
    hold the session lock.
    """
    prompt = build_prompt(state, player_input, dialect)
    logger.debug("Prompt built: dialect=%s len=%d", dialect, len(prompt))

    reply = await llm("narrator", prompt)
    if not reply or not reply.strip():
        raise LLMError("LLM backend returned an empty reply")

    return interpret_reply(state, reply)
