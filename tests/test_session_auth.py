"""
Tests for the owner-only auth provider, the session it keeps current and the
middleware that ties them to incoming updates.
"""
from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.types import Message

from tasktimer.domain.common.errors import NotAuthenticatedError
from tasktimer.domain.session import SessionContext
from tasktimer.infra.auth.owner_auth import OwnerAuthProvider
from tasktimer.ui.telegram.middlewares.auth import OwnerOnlyMiddleware

OWNER = 4242


def test_session_follows_sign_in_and_sign_out():
    auth = OwnerAuthProvider(OWNER)
    session = SessionContext.bind(auth)
    assert session.is_authenticated is False
    with pytest.raises(NotAuthenticatedError):
        session.require_user()

    assert auth.sign_in(OWNER) is True
    assert session.require_user() == OWNER

    auth.sign_out()
    assert session.user_id is None


def test_stranger_is_rejected_without_touching_owner_session():
    auth = OwnerAuthProvider(OWNER)
    session = SessionContext.bind(auth)
    seen = []
    auth.subscribe(seen.append)
    auth.sign_in(OWNER)
    assert auth.sign_in(1) is False
    assert auth.sign_in(None) is False
    assert session.require_user() == OWNER
    assert seen == [OWNER]


def test_listeners_only_hear_changes():
    auth = OwnerAuthProvider(OWNER)
    seen = []
    auth.subscribe(seen.append)
    auth.sign_in(OWNER)
    auth.sign_in(OWNER)
    auth.sign_out()
    auth.sign_out()
    assert seen == [OWNER, None]


def test_closed_session_stops_listening():
    auth = OwnerAuthProvider(OWNER)
    session = SessionContext.bind(auth)
    session.close()
    auth.sign_in(OWNER)
    assert session.user_id is None
    session.close()


def test_bind_picks_up_current_user():
    auth = OwnerAuthProvider(OWNER)
    auth.sign_in(OWNER)
    assert SessionContext.bind(auth).user_id == OWNER


def _message(user_id):
    event = MagicMock(spec=Message)
    event.from_user = SimpleNamespace(id=user_id)
    event.answer = AsyncMock()
    return event


def test_middleware_passes_owner_through():
    async def run():
        auth = OwnerAuthProvider(OWNER)
        session = SessionContext.bind(auth)
        handler = AsyncMock(return_value="handled")
        event = _message(OWNER)

        result = await OwnerOnlyMiddleware(auth)(handler, event, {})
        assert result == "handled"
        handler.assert_awaited_once()
        event.answer.assert_not_awaited()

    asyncio.run(run())


def test_middleware_blocks_stranger():
    async def run():
        auth = OwnerAuthProvider(OWNER)
        session = SessionContext.bind(auth)
        handler = AsyncMock()
        event = _message(99)

        result = await OwnerOnlyMiddleware(auth)(handler, event, {})
        assert result is None
        handler.assert_not_awaited()
        event.answer.assert_awaited_once_with("Not authorized.")

    asyncio.run(run())


def test_stranger_update_does_not_break_owner_handler_in_flight():
    """An owner's handler suspended at an await still sees the owner afterwards."""

    async def run():
        auth = OwnerAuthProvider(OWNER)
        session = SessionContext.bind(auth)
        middleware = OwnerOnlyMiddleware(auth)
        resume = asyncio.Event()
        suspended = asyncio.Event()

        async def owner_handler(event, data):
            first = session.require_user()
            suspended.set()
            await resume.wait()
            return first, session.require_user()

        owner_call = asyncio.create_task(middleware(owner_handler, _message(OWNER), {}))
        await suspended.wait()

        stranger = _message(99)
        await middleware(AsyncMock(), stranger, {})
        stranger.answer.assert_awaited_once_with("Not authorized.")

        resume.set()
        assert await owner_call == (OWNER, OWNER)

    asyncio.run(run())
