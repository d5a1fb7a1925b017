"""Tests for the auth client (mocked HTTP transport) and the auth-state stream."""

import json

import httpx
import pytest

from mortgage_tracker.config import ConnectionConfig
from mortgage_tracker.data.auth import AuthClient, AuthStateStream, AuthUser

USER = {"id": "3f2c", "email": "ana@example.com"}


@pytest.fixture
def config():
    return ConnectionConfig(
        url="https://project.example.co/",
        anon_key="anon-key",
        database_url="sqlite+aiosqlite://",
    )


def make_client(config, handler, stream=None):
    return AuthClient(config, stream=stream, transport=httpx.MockTransport(handler))


class TestAuthStateStream:
    def test_emit_reaches_subscribers(self):
        stream = AuthStateStream()
        seen = []
        stream.subscribe(seen.append)
        stream.emit(AuthUser("1"))
        stream.emit(None)
        assert seen == [AuthUser("1"), None]
        assert stream.current is None

    def test_dispose_is_idempotent(self):
        stream = AuthStateStream()
        seen = []
        dispose = stream.subscribe(seen.append)
        other = stream.subscribe(lambda user: None)
        dispose()
        dispose()
        assert stream.listener_count == 1
        stream.emit(AuthUser("1"))
        assert seen == []
        other()
        assert stream.listener_count == 0

    def test_subscription_context(self):
        stream = AuthStateStream()
        seen = []
        with stream.subscription(seen.append):
            assert stream.listener_count == 1
            stream.emit(AuthUser("1"))
        assert stream.listener_count == 0
        stream.emit(AuthUser("2"))
        assert seen == [AuthUser("1")]

    def test_subscription_released_on_error(self):
        stream = AuthStateStream()
        with pytest.raises(RuntimeError):
            with stream.subscription(lambda user: None):
                raise RuntimeError("boom")
        assert stream.listener_count == 0


class TestAuthClient:
    async def test_sign_in(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/auth/v1/token"
            assert request.url.params["grant_type"] == "password"
            assert request.headers["apikey"] == "anon-key"
            body = json.loads(request.content)
            assert body == {"email": "ana@example.com", "password": "secret"}
            return httpx.Response(
                200, json={"access_token": "tok", "refresh_token": "ref", "user": USER}
            )

        stream = AuthStateStream()
        seen = []
        stream.subscribe(seen.append)
        session = await make_client(config, handler, stream).sign_in("ana@example.com", "secret")

        assert session.access_token == "tok"
        assert session.user == AuthUser("3f2c", "ana@example.com")
        assert seen == [session.user]
        assert stream.current == session.user

    async def test_sign_in_rejected(self, config):
        stream = AuthStateStream()
        client = make_client(config, lambda r: httpx.Response(400, json={"error": "invalid_grant"}), stream)
        assert await client.sign_in("ana@example.com", "wrong") is None
        assert stream.current is None

    async def test_get_user(self, config):
        def handler(request):
            assert request.url.path == "/auth/v1/user"
            assert request.headers["authorization"] == "Bearer tok"
            return httpx.Response(200, json=USER)

        user = await make_client(config, handler).get_user("tok")
        assert user == AuthUser("3f2c", "ana@example.com")

    async def test_get_user_invalid_token(self, config):
        client = make_client(config, lambda r: httpx.Response(401, json={"msg": "invalid JWT"}))
        assert await client.get_user("expired") is None

    async def test_sign_out_emits_none(self, config):
        stream = AuthStateStream()
        stream.emit(AuthUser("1"))
        client = make_client(config, lambda r: httpx.Response(204), stream)
        await client.sign_out("tok")
        assert stream.current is None

    async def test_sign_out_failure_still_clears_state(self, config):
        stream = AuthStateStream()
        stream.emit(AuthUser("1"))
        client = make_client(config, lambda r: httpx.Response(500), stream)
        await client.sign_out("tok")
        assert stream.current is None
