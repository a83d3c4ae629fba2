"""Core domain models.

GameState is the single per-session aggregate that every turn mutates.
CandidateFacts is the tagged result of interpreting one reply: either
StructuredFacts (JSON dialect) or MarkerFacts (``*location*`` / ``{item}``
prose dialect). Pydantic is used for validation and serialisation at the
HTTP boundary.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

INITIAL_LOCATION = "village"
INITIAL_EVENT = "You arrived in a quiet village."
MAX_RECENT_EVENTS = 5


def normalize(text: str) -> str:
    """Lowercase and trim a location or item name."""
    return text.strip().lower()


def normalize_items(items: list[str]) -> list[str]:
    """Normalized item names, blanks dropped, first occurrence kept."""
    out: list[str] = []
    for item in items:
        name = normalize(item)
        if name and name not in out:
            out.append(name)
    return out


def normalize_location(value: str | None) -> str | None:
    if value is None:
        return None
    return normalize(value) or None


class GameState(BaseModel):
    """Authoritative state of one adventure session.

    Serialised with camelCase keys (``recentEvents``) for the web client.
    """

    model_config = ConfigDict(populate_by_name=True)

    location: str = INITIAL_LOCATION
    inventory: list[str] = Field(default_factory=list)
    recent_events: list[str] = Field(
        default_factory=lambda: [INITIAL_EVENT], alias="recentEvents"
    )
    story: list[str] = Field(default_factory=lambda: [INITIAL_EVENT])

    def to_client(self) -> dict:
        return self.model_dump(by_alias=True)


class StructuredFacts(BaseModel):
    """Facts read from a JSON reply. ``inventory`` replaces the whole inventory."""

    kind: Literal["structured"] = "structured"
    narrative: str | None = None
    location: str | None = None
    inventory: list[str] | None = None
    events: list[str] = Field(default_factory=list)

    check_location = field_validator("location")(normalize_location)

    @field_validator("inventory")
    @classmethod
    def normalize_inventory(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else normalize_items(value)


class MarkerFacts(BaseModel):
    """Facts scanned from marker prose. ``inventory_adds`` is purely additive."""

    kind: Literal["marker"] = "marker"
    location: str | None = None
    inventory_adds: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)

    check_location = field_validator("location")(normalize_location)

    @field_validator("inventory_adds")
    @classmethod
    def normalize_inventory_adds(cls, value: list[str]) -> list[str]:
        return normalize_items(value)


CandidateFacts = Annotated[
    Union[StructuredFacts, MarkerFacts], Field(discriminator="kind")
]
