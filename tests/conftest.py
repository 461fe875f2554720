# Copyright (c) 2026 The pyggst Authors
# Licensed under the Apache License, Version 2.0

"""Shared fixtures for pyggst tests."""

import pytest

from pyggst import ClientIdentity, WireCodec

from replay_fixtures import PLAYER_ID, SESSION_TOKEN


@pytest.fixture
def identity() -> ClientIdentity:
    """Caller identity used by every test request."""
    return ClientIdentity(player_id=PLAYER_ID, session_token=SESSION_TOKEN)


@pytest.fixture
def codec(identity: ClientIdentity) -> WireCodec:
    """Codec with the legacy fallback disabled."""
    return WireCodec(identity)


@pytest.fixture
def legacy_codec(identity: ClientIdentity) -> WireCodec:
    """Codec with the legacy fallback enabled."""
    return WireCodec(identity, legacy_fallback=True)
