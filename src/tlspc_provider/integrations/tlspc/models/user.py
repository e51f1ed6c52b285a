"""User lookup models."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from tlspc_provider.integrations.tlspc.models.base import TLSPCEntity, TLSPCModel


class User(TLSPCEntity):
    """A TLS Protect Cloud user."""

    _entity_name: ClassVar[str] = "user"

    username: str = Field(default="", description="Login name (the user's email)")


class UserListResponse(TLSPCModel):
    """Response of the username lookup endpoint."""

    users: list[User] = Field(default_factory=list)
