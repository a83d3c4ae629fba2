"""Pydantic request models for API endpoints."""

from pydantic import BaseModel


class GameBody(BaseModel):
    action: str
    input: str = ""
