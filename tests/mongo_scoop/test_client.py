import pytest
from unittest.mock import AsyncMock, MagicMock
from pydantic import BaseModel
from pymongo import ASCENDING, IndexModel
from pymongo.errors import CollectionInvalid, ServerSelectionTimeoutError

from mongo_scoop.client import Client
from mongo_scoop.exceptions import DatabaseError
from mongo_scoop.scoop import Scoop
from settings import MongoSettings


class User(BaseModel):
    name: str

    @classmethod
    def indexes(cls):
        return [IndexModel([("name", ASCENDING)], unique=True)]


class AuditLog(BaseModel):
    message: str


@pytest.fixture
def mock_db():
    db = MagicMock()
    db.list_collection_names = AsyncMock(return_value=[])
    db.create_collection = AsyncMock()
    db.get_collection.return_value.create_indexes = AsyncMock()
    return db


@pytest.fixture
def mock_motor(mock_db):
    motor = MagicMock()
    motor.get_database.return_value = mock_db
    motor.admin.command = AsyncMock(return_value={"ok": 1})
    return motor


@pytest.fixture
def client(mock_motor):
    return Client(MongoSettings(uri="", database="shop"), mongodb_client=mock_motor)


def test_client_selects_database(client, mock_motor, mock_db):
    mock_motor.get_database.assert_called_once_with("shop")
    assert client.database is mock_db


def test_collection_by_name_and_model(client, mock_db):
    client.collection("orders")
    client.collection(User)

    assert [call.args[0] for call in mock_db.get_collection.call_args_list] == ["orders", "user"]


def test_clients_have_separate_registries(mock_motor):
    first = Client(MongoSettings(uri=""), mongodb_client=mock_motor)
    second = Client(MongoSettings(uri=""), mongodb_client=mock_motor)
    first.registry.register(User, "people")

    assert second.registry.collection_name(User) == "user"


def test_new_scoop(client, mock_db):
    scoop = client.new_scoop(model=User)

    assert isinstance(scoop, Scoop)
    assert scoop.client is client
    assert scoop.model is User
    assert scoop.collection is mock_db.get_collection.return_value
    assert scoop.session is None


def test_new_scoop_inherits_transaction(client):
    session = MagicMock()
    tx = Scoop(session=session)

    assert client.new_scoop(tx).session is session


@pytest.mark.asyncio
async def test_setup_pings(mock_motor):
    client = await Client.setup(MongoSettings(uri=""), mongodb_client=mock_motor)

    assert isinstance(client, Client)
    mock_motor.admin.command.assert_awaited_once_with("ping")


@pytest.mark.asyncio
async def test_health_failure(client, mock_motor):
    mock_motor.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

    with pytest.raises(DatabaseError, match="health check failed"):
        await client.health()


@pytest.mark.asyncio
async def test_auto_migrate_creates_collections_and_indexes(client, mock_db):
    await client.auto_migrate(User, AuditLog)

    assert [call.args[0] for call in mock_db.create_collection.await_args_list] == ["user", "audit_log"]
    mock_db.get_collection.return_value.create_indexes.assert_awaited_once()


@pytest.mark.asyncio
async def test_auto_migrate_skips_existing(client, mock_db):
    mock_db.list_collection_names = AsyncMock(return_value=["audit_log"])

    await client.auto_migrate(AuditLog)

    mock_db.create_collection.assert_not_awaited()


@pytest.mark.asyncio
async def test_auto_migrate_tolerates_concurrent_creation(client, mock_db):
    mock_db.create_collection = AsyncMock(side_effect=CollectionInvalid("exists"))

    await client.auto_migrate(AuditLog)


@pytest.mark.asyncio
async def test_auto_migrate_wraps_driver_errors(client, mock_db):
    mock_db.list_collection_names = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))

    with pytest.raises(DatabaseError):
        await client.auto_migrate(User)


def test_close(client, mock_motor):
    client.collection(User)
    client.close()

    mock_motor.close.assert_called_once()
    assert len(client.registry) == 0
