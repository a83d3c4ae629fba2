"""FastAPI API endpoints under /api.

  GET  /api/health  — liveness
  GET  /api/game    — state of the session named by the sessionId cookie
  POST /api/game    — {"action": "new"} starts a session and sets the cookie;
                      {"action": "respond", "input": "..."} plays one turn
"""

from fastapi import APIRouter

from .game import router as game_router
from .health import router as health_router

router = APIRouter()
router.include_router(health_router)
router.include_router(game_router)
