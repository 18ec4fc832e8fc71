from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from idp.clients import dynamodb as dynamodb_module
from idp.clients.dynamodb import DynamoDBRecordStore
from idp.clients.sqlite_store import SQLiteRecordStore
from idp.core.config import AWSSettings
from idp.models import AuthorizationCode, RecordCollection


class FakeTable:
    def __init__(self, name: str) -> None:
        self.name = name
        self.items: dict[tuple, dict] = {}
        self.get_calls: list[dict] = []
        self.delete_calls: list[dict] = []

    def put_item(self, *, Item: dict) -> None:
        key = next(iter(Item.items()))
        self.items[key] = Item

    def get_item(self, *, Key: dict, **kwargs) -> dict:
        self.get_calls.append(kwargs)
        item = self.items.get(next(iter(Key.items())))
        return {"Item": item} if item is not None else {}

    def delete_item(self, *, Key: dict, **kwargs) -> dict:
        self.delete_calls.append(kwargs)
        item = self.items.pop(next(iter(Key.items())), None)
        return {"Attributes": item} if item is not None else {}


class FakeResource:
    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def Table(self, name: str) -> FakeTable:  # noqa: N802 - mirrors boto3
        return self.tables.setdefault(name, FakeTable(name))


@pytest.fixture
def fake_resource(monkeypatch: pytest.MonkeyPatch) -> FakeResource:
    resource = FakeResource()
    calls: list[tuple] = []

    def _resource(service_name, **kwargs):
        calls.append((service_name, kwargs))
        return resource

    monkeypatch.setattr(dynamodb_module.boto3, "resource", _resource)
    resource.calls = calls  # type: ignore[attr-defined]
    return resource


def test_dynamodb_store_routes_collections_to_tables(fake_resource: FakeResource) -> None:
    settings = AWSSettings(
        region_name="eu-central-1",
        auth_code_table_name="codes",
        access_token_table_name="tokens",
        user_table_name="users",
    )
    store = DynamoDBRecordStore(settings)

    store.put(RecordCollection.AUTHORIZATION_CODES, {"code": "c1", "expiresAt": 1})
    store.put(RecordCollection.ACCESS_TOKENS, {"token": "t1", "clientId": "x"})
    store.put(RecordCollection.USERS, {"userid": "alice", "home_id": "H1"})

    assert ("code", "c1") in fake_resource.tables["codes"].items
    assert ("token", "t1") in fake_resource.tables["tokens"].items
    assert ("userid", "alice") in fake_resource.tables["users"].items
    assert fake_resource.calls[0] == (
        "dynamodb",
        {"region_name": "eu-central-1", "endpoint_url": None},
    )


def test_dynamodb_store_get_and_pop(fake_resource: FakeResource) -> None:
    store = DynamoDBRecordStore(AWSSettings())
    store.put(RecordCollection.AUTHORIZATION_CODES, {"code": "c1", "expiresAt": 5})

    assert store.get(RecordCollection.AUTHORIZATION_CODES, "c1") == {
        "code": "c1",
        "expiresAt": 5,
    }
    table = fake_resource.tables["OAuthAuthorizationCodes"]
    assert table.get_calls[-1] == {"ConsistentRead": True}

    assert store.pop(RecordCollection.AUTHORIZATION_CODES, "c1") == {
        "code": "c1",
        "expiresAt": 5,
    }
    assert table.delete_calls[-1] == {"ReturnValues": "ALL_OLD"}
    assert store.get(RecordCollection.AUTHORIZATION_CODES, "c1") is None
    assert store.pop(RecordCollection.AUTHORIZATION_CODES, "c1") is None


def test_dynamodb_store_requires_key_attribute(fake_resource: FakeResource) -> None:
    store = DynamoDBRecordStore(AWSSettings())

    with pytest.raises(ValueError):
        store.put(RecordCollection.USERS, {"home_id": "H1"})


def test_sqlite_store_round_trips_per_collection(tmp_path: Path) -> None:
    store = SQLiteRecordStore(str(tmp_path / "nested" / "idp.sqlite3"))

    store.put(RecordCollection.AUTHORIZATION_CODES, {"code": "same", "expiresAt": 1})
    store.put(RecordCollection.ACCESS_TOKENS, {"token": "same", "clientId": "x"})

    assert store.get(RecordCollection.AUTHORIZATION_CODES, "same") == {
        "code": "same",
        "expiresAt": 1,
    }
    assert store.get(RecordCollection.ACCESS_TOKENS, "same") == {
        "token": "same",
        "clientId": "x",
    }
    assert store.get(RecordCollection.USERS, "same") is None


def test_sqlite_store_overwrites_and_pops(tmp_path: Path) -> None:
    store = SQLiteRecordStore(str(tmp_path / "idp.sqlite3"))

    store.put(RecordCollection.USERS, {"userid": "alice", "home_id": "H1"})
    store.put(RecordCollection.USERS, {"userid": "alice", "home_id": "H2"})
    assert store.get(RecordCollection.USERS, "alice")["home_id"] == "H2"

    assert store.pop(RecordCollection.USERS, "alice") == {"userid": "alice", "home_id": "H2"}
    assert store.get(RecordCollection.USERS, "alice") is None
    assert store.pop(RecordCollection.USERS, "alice") is None


def test_authorization_code_reads_dynamodb_decimals() -> None:
    code = AuthorizationCode.from_item(
        {
            "code": "c1",
            "clientId": "alexa-skill",
            "expiresAt": Decimal("1700000600000"),
            "ttl": Decimal("1700000600"),
        }
    )

    assert code.expires_at == 1700000600000
    assert code.ttl == 1700000600
    assert code.redirect_uri is None
    assert code.is_expired(1700000600001)
    assert not code.is_expired(1700000600000)
