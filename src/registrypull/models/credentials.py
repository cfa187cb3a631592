"""Models for registry credentials."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

__all__ = ["Credentials", "TokenExchangeReply"]


@dataclass(frozen=True, slots=True)
class Credentials:
    """Credentials for one registry.

    These are fetched fresh for each operation and never persisted.
    """

    username: str
    """Authentication username."""

    password: str = field(repr=False)
    """Authentication password or token."""


class TokenExchangeReply(BaseModel):
    """Reply from the registry token exchange endpoint."""

    refresh_token: str = Field(
        ..., title="Refresh token", description="Token used as the password"
    )
