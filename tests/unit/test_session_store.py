"""
test_session_store.py
---------------------
Unit tests for anonverse.state.session_store.SessionStore.
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from anonverse.errors import InvalidCredentials, UnconfirmedAccount
from anonverse.models import AuthSession
from anonverse.services.auth_service import SessionEvent
from anonverse.state.session_store import SessionStatus, SessionStore

PASSWORD = "Quill#2024"


class TestLifecycle:
    def test_starts_loading_then_unauthenticated(self, auth, device, run):
        async def scenario():
            store = SessionStore(auth, device)
            assert store.is_loading
            async with store:
                state = await store.wait_ready()
            return state, store

        state, store = run(scenario())
        assert state.status is SessionStatus.UNAUTHENTICATED
        assert state.identity is None
        assert not store.is_open

    def test_existing_session_is_picked_up(self, auth, device, run):
        user = auth.register("ink@example.com", PASSWORD, "Ink")
        auth.current = AuthSession(
            access_token="t", user=user, expires_at=datetime.now(timezone.utc) + timedelta(hours=1)
        )

        async def scenario():
            async with SessionStore(auth, device) as store:
                return await store.wait_ready()

        state = run(scenario())
        assert state.status is SessionStatus.AUTHENTICATED
        assert state.identity.id == user.id

    def test_close_releases_subscription(self, auth, device, run):
        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                assert len(auth._listeners) == 1
            return len(auth._listeners)

        assert run(scenario()) == 0

    def test_lookup_crash_resolves_unauthenticated(self, auth, device, run, caplog):
        async def broken_lookup():
            raise RuntimeError("connection reset")

        auth.get_current_session = broken_lookup

        async def scenario():
            async with SessionStore(auth, device) as store:
                return await asyncio.wait_for(store.wait_ready(), 1)

        state = run(scenario())
        assert state.status is SessionStatus.UNAUTHENTICATED
        assert "connection reset" in caplog.text

    def test_wait_ready_requires_open_store(self, auth, device, run):
        with pytest.raises(RuntimeError):
            run(SessionStore(auth, device).wait_ready())


class TestEvents:
    def test_event_before_lookup_wins(self, auth, device, run):
        user = auth.register("ink@example.com", PASSWORD, "Ink")

        async def scenario():
            auth.lookup_gate = asyncio.Event()
            async with SessionStore(auth, device) as store:
                session = AuthSession(
                    access_token="t", user=user, expires_at=datetime.now(timezone.utc) + timedelta(hours=1)
                )
                auth._notify(SessionEvent.SIGNED_IN, session)
                await store._settle()
                auth.lookup_gate.set()
                await asyncio.sleep(0)
                await asyncio.sleep(0)
                return store.state

        state = run(scenario())
        assert state.status is SessionStatus.AUTHENTICATED
        assert state.identity.id == user.id

    def test_events_apply_in_order(self, auth, device, run):
        auth.register("ink@example.com", PASSWORD, "Ink")

        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                await store.sign_in("ink@example.com", PASSWORD)
                signed_in = store.state.status
                await store.sign_out()
                return signed_in, store.state.status

        assert run(scenario()) == (SessionStatus.AUTHENTICATED, SessionStatus.UNAUTHENTICATED)


class TestAccountOperations:
    def test_sign_in_clears_guest_flag(self, auth, guest_device, run):
        auth.register("ink@example.com", PASSWORD, "Ink")

        async def scenario():
            async with SessionStore(auth, guest_device) as store:
                await store.wait_ready()
                await store.sign_in("ink@example.com", PASSWORD)
                return store.identity

        identity = run(scenario())
        assert identity.pen_name == "Ink"
        assert guest_device.guest_flag is False

    def test_sign_in_rejects_bad_password(self, auth, device, run):
        auth.register("ink@example.com", PASSWORD, "Ink")

        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                with pytest.raises(InvalidCredentials):
                    await store.sign_in("ink@example.com", "wrong")
                return store.state.status

        assert run(scenario()) is SessionStatus.UNAUTHENTICATED

    def test_failed_sign_in_keeps_guest_mode(self, auth, guest_device, run):
        async def scenario():
            async with SessionStore(auth, guest_device) as store:
                await store.wait_ready()
                with pytest.raises(InvalidCredentials):
                    await store.sign_in("nobody@example.com", PASSWORD)

        run(scenario())
        assert guest_device.guest_flag is True

    def test_sign_up_with_existing_credentials_signs_in(self, auth, device, run):
        user = auth.register("ink@example.com", PASSWORD, "Ink")

        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                session = await store.sign_up("ink@example.com", PASSWORD, "Ink")
                return session, store.state

        session, state = run(scenario())
        assert session.user.id == user.id
        assert state.status is SessionStatus.AUTHENTICATED

    def test_sign_up_new_account_waits_for_confirmation(self, auth, device, run):
        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                session = await store.sign_up("new@example.com", PASSWORD, "New")
                return session, store.state.status

        session, status = run(scenario())
        assert session is None
        assert status is SessionStatus.UNAUTHENTICATED
        assert auth.accounts["new@example.com"]["confirmed"] is False

    def test_unconfirmed_then_resend(self, auth, device, run):
        auth.register("slow@example.com", PASSWORD, "Slow", confirmed=False)

        async def scenario():
            async with SessionStore(auth, device) as store:
                await store.wait_ready()
                with pytest.raises(UnconfirmedAccount):
                    await store.sign_in("slow@example.com", PASSWORD)
                before = store.state
                await store.resend_confirmation("slow@example.com")
                return before, store.state

        before, after = run(scenario())
        assert before is after
        assert after.status is SessionStatus.UNAUTHENTICATED
        assert auth.resent == ["slow@example.com"]
