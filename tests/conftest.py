"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from idp.core.config import OAuthSettings


class InMemoryRecordStore:
    """Dict-backed stand-in for the DynamoDB tables."""

    def __init__(self) -> None:
        self.items: dict[tuple, dict] = {}
        self.writes: list[tuple] = []

    def put(self, collection, record: dict) -> None:
        self.items[(collection, record[collection.key_attribute])] = dict(record)
        self.writes.append((collection, dict(record)))

    def get(self, collection, key: str) -> dict | None:
        item = self.items.get((collection, key))
        return dict(item) if item is not None else None

    def pop(self, collection, key: str) -> dict | None:
        return self.items.pop((collection, key), None)

    def writes_to(self, collection) -> list[dict]:
        return [record for target, record in self.writes if target == collection]


class FakeClock:
    """Controllable replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def oauth_settings() -> OAuthSettings:
    return OAuthSettings()


class StubVeluxSession:
    def __init__(self) -> None:
        self.credentials = None
        self.token_data = None
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.closed = True


class StubVeluxClient:
    """Records calls instead of talking to Velux."""

    def __init__(self, *, token_data=None, home_data=None, error=None) -> None:
        self.token_data = token_data
        self.home_data = home_data
        self.error = error
        self.sessions: list[StubVeluxSession] = []
        self.staged_credentials = []
        self.home_info_calls = 0

    async def warm_up(self) -> StubVeluxSession:
        session = StubVeluxSession()
        self.sessions.append(session)
        return session

    async def make_token_request(self, session, grant_type="password"):
        assert grant_type == "password"
        if self.error is not None:
            raise self.error
        self.staged_credentials.append(session.credentials)
        session.token_data = self.token_data
        return self.token_data

    async def get_home_info_with_retry(self, session):
        assert session.token_data is not None
        self.home_info_calls += 1
        return self.home_data


@pytest.fixture
def velux_factory():
    return StubVeluxClient


@pytest.fixture
def home_data() -> dict:
    return {
        "body": {
            "homes": [
                {
                    "id": "H1",
                    "name": "Home",
                    "modules": [
                        {"id": "W1", "type": "NXO"},
                        {"id": "B1", "type": "NXG"},
                    ],
                }
            ]
        },
        "status": "ok",
    }


@pytest.fixture
def build_router(record_store, oauth_settings, clock):
    """Wire a real ``IdpRouter`` onto the in-memory store and a Velux stub."""
    from idp.api.router import IdpRouter
    from idp.services import (
        AuthorizationService,
        CredentialCipher,
        UserRegistrationService,
    )

    def _build(velux_client) -> IdpRouter:
        authorization = AuthorizationService(record_store, oauth_settings, clock=clock)
        registration = UserRegistrationService(
            store=record_store,
            velux_client=velux_client,
            authorization=authorization,
            cipher=CredentialCipher(secret="router-secret"),
            clock=clock,
        )
        return IdpRouter(authorization, registration)

    return _build
