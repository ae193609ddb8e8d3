"""Pydantic models for the login flow and schedule payloads.

Schedule lessons are kept as plain mappings: the API adds and renames lesson
fields freely, and every field has to reach the caller untouched.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PKCEPair(BaseModel):
    """Verifier/challenge pair for one authorization flow."""

    model_config = ConfigDict(frozen=True)

    verifier: str
    challenge: str

    def __repr__(self) -> str:
        return f"PKCEPair(challenge={self.challenge!r})"


class TokenResponse(BaseModel):
    """Token endpoint answer. Only access_token is used."""

    model_config = ConfigDict(extra="ignore")

    access_token: str


class ScheduleDay(BaseModel):
    """One day of the personal schedule."""

    model_config = ConfigDict(extra="ignore")

    date: str  # "2024-01-01"
    lessons: list[dict[str, Any]]


class ScheduleResponse(BaseModel):
    """Body of GET /schedule/schedule/personal."""

    model_config = ConfigDict(extra="ignore")

    data: list[ScheduleDay]
