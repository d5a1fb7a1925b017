"""Hosted auth (GoTrue REST) client and an auth-state event stream.

Listeners subscribe to the stream and get back a disposer; calling the
disposer more than once is harmless.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx

from mortgage_tracker.config import ConnectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str | None
    user: AuthUser


AuthListener = Callable[[AuthUser | None], None]


class AuthStateStream:
    """Publishes the current user (or None) to subscribed listeners."""

    def __init__(self):
        self._listeners: dict[int, AuthListener] = {}
        self._next_id = 0
        self.current: AuthUser | None = None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        token = self._next_id
        self._next_id += 1
        self._listeners[token] = listener

        def dispose() -> None:
            self._listeners.pop(token, None)

        return dispose

    @contextmanager
    def subscription(self, listener: AuthListener) -> Iterator[None]:
        dispose = self.subscribe(listener)
        try:
            yield
        finally:
            dispose()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, user: AuthUser | None) -> None:
        self.current = user
        for listener in list(self._listeners.values()):
            listener(user)


def _parse_user(data: dict) -> AuthUser:
    return AuthUser(id=data["id"], email=data.get("email"))


class AuthClient:
    def __init__(
        self,
        config: ConnectionConfig,
        stream: AuthStateStream | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.stream = stream or AuthStateStream()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.auth_url,
            headers={"apikey": self.config.anon_key},
            timeout=self.config.timeout,
            transport=self._transport,
        )

    async def sign_in(self, email: str, password: str) -> AuthSession | None:
        """Password sign-in. Returns None when credentials are rejected."""
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/token",
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            return None

        session = AuthSession(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            user=_parse_user(data["user"]),
        )
        self.stream.emit(session.user)
        return session

    async def get_user(self, access_token: str) -> AuthUser | None:
        try:
            async with self._client() as client:
                resp = await client.get(
                    "/user", headers={"Authorization": f"Bearer {access_token}"}
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.debug("Token rejected by auth service: %s", e)
            return None
        return _parse_user(data)

    async def sign_out(self, access_token: str) -> None:
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/logout", headers={"Authorization": f"Bearer {access_token}"}
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Sign-out request failed: %s", e)
        self.stream.emit(None)
