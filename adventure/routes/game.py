"""Game endpoints: start a session, play a turn, read the current state."""

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException
from fastapi.responses import JSONResponse

from adventure.config import Settings
from adventure.interpret import run_turn
from adventure.llm import LLM, LLMError
from adventure.sessions import SessionStore

from .deps import get_llm, get_sessions, get_settings
from .models import GameBody

logger = logging.getLogger(__name__)

router = APIRouter()

SESSION_COOKIE = "sessionId"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 1 week


@router.get("/game")
async def get_game(
    sessions: SessionStore = Depends(get_sessions),
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
):
    """Current state of the caller's session."""
    state = sessions.get(session_id)
    if state is None:
        raise HTTPException(400, "No active session")
    return {"state": state.to_client()}


@router.post("/game")
async def post_game(
    body: GameBody,
    sessions: SessionStore = Depends(get_sessions),
    llm: LLM = Depends(get_llm),
    settings: Settings = Depends(get_settings),
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
):
    """Start a new game (action=new) or play one turn (action=respond)."""
    if body.action == "new":
        new_id, state = sessions.create()
        response = JSONResponse({"state": state.to_client()})
        response.set_cookie(
            SESSION_COOKIE,
            new_id,
            path="/",
            httponly=True,
            samesite="strict",
            max_age=SESSION_MAX_AGE,
        )
        return response

    state = sessions.get(session_id)
    if state is None:
        logger.info("No active session found")
        raise HTTPException(400, "No active session")

    if body.action != "respond":
        logger.info("Invalid action: %s", body.action)
        raise HTTPException(400, "Invalid action")

    if not body.input.strip():
        raise HTTPException(400, "Empty input")

    async with sessions.lock(session_id):
        try:
            await run_turn(state, body.input, llm, settings.reply_dialect)
        except LLMError as e:
            logger.warning("Narrator unavailable: %s", e)
            raise HTTPException(
                503,
                {"error": str(e), "input": body.input, "retryable": True},
            )

    logger.debug("Updated state: location=%s inventory=%s", state.location, state.inventory)
    return {"state": state.to_client()}
