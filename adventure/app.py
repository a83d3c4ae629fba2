from fastapi import FastAPI

from adventure.config import Settings, load_settings
from adventure.llm import LLM, build_llm
from adventure.routes import router
from adventure.sessions import SessionStore


def create_app(settings: Settings | None = None, llm: LLM | None = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Day One Adventure")
    app.state.settings = settings
    app.state.sessions = SessionStore()
    app.state.llm = llm or build_llm(settings)
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (reads .env / environment)
app = create_app()
