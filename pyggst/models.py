# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""
Pydantic models for the pyggst SDK.

Provides validated configuration models and the JSON reply shapes of
the user lookup endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .protocol import (
    MAX_REPLAYS_PER_PAGE,
    PLATFORM_FLAG,
    PROTOCOL_FLAG,
    PROTOCOL_VERSION,
    RequestHeader,
)

DEFAULT_BASE_URL = "https://ggst-api-proxy.herokuapp.com"
DEFAULT_UTILS_BASE_URL = "https://ggst-utils-default-rtdb.europe-west1.firebasedatabase.app"


# ============================================================================
# Configuration Models
# ============================================================================


class ClientIdentity(BaseModel):
    """
    Caller fingerprint embedded in every request.

    The service expects a stable player id and session token from a real
    game client. Protocol and platform flags rarely need changing.
    """

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(description="18-digit player id of the calling account")
    session_token: str = Field(min_length=1)
    protocol_flag: int = PROTOCOL_FLAG
    version: str = PROTOCOL_VERSION
    platform_flag: int = PLATFORM_FLAG

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, v: str) -> str:
        if len(v) != 18 or not v.isdigit():
            raise ValueError("Player id must be 18 decimal digits")
        return v

    def to_header(self) -> RequestHeader:
        """Request header carrying this identity."""
        return RequestHeader(
            player_id=self.player_id,
            session_token=self.session_token,
            protocol_flag=self.protocol_flag,
            version=self.version,
            platform_flag=self.platform_flag,
        )


class ClientConfig(BaseModel):
    """Configuration for the replay service client."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str = DEFAULT_BASE_URL
    utils_base_url: str = DEFAULT_UTILS_BASE_URL
    timeout: float = Field(default=30.0, ge=0.1, le=300.0, description="Per-request timeout in seconds")
    replays_per_page: int = Field(default=MAX_REPLAYS_PER_PAGE, ge=0, le=MAX_REPLAYS_PER_PAGE)
    legacy_fallback: bool = Field(
        default=False,
        description="Fall back to the byte-layout splitter when a reply is not valid MessagePack",
    )
    user_agent: str = "pyggst"

    @field_validator("base_url", "utils_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")


# ============================================================================
# JSON Reply Models
# ============================================================================


class UserIdReply(BaseModel):
    """Utilities database entry mapping a Steam id to a player id."""

    user_id: str = Field(alias="UserID")


class UserStatsReply(BaseModel):
    """Profile fields of the statistics reply."""

    nick_name: str = Field(alias="NickName")
    public_comment: str = Field(alias="PublicComment")
