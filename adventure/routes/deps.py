"""Request-scoped access to the objects the app factory owns."""

from fastapi import Request

from adventure.config import Settings
from adventure.llm import LLM
from adventure.sessions import SessionStore


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_llm(request: Request) -> LLM:
    return request.app.state.llm


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
