import pytest
from unittest.mock import AsyncMock, MagicMock
from pydantic import BaseModel

from mongo_scoop.client import Client
from mongo_scoop.exceptions import DocumentNotFoundError
from mongo_scoop.model import Model
from settings import MongoSettings


class Product(BaseModel):
    __collection__ = "products"

    sku: str
    price: float


class ProductNotFound(Exception):
    pass


@pytest.fixture
def mock_collection():
    collection = MagicMock()
    collection.name = "products"
    collection.find_one = AsyncMock(return_value=None)
    return collection


@pytest.fixture
def client(mock_collection):
    motor = MagicMock()
    motor.get_database.return_value.get_collection.return_value = mock_collection
    return Client(MongoSettings(uri=""), mongodb_client=motor)


def test_model_resolves_collection_name(client):
    assert Model(client, Product).collection_name == "products"


def test_new_scoop_is_bound_to_model(client, mock_collection):
    scoop = Model(client, Product).new_scoop()

    assert scoop.model is Product
    assert scoop.collection is mock_collection
    assert scoop.not_found_error is DocumentNotFoundError


@pytest.mark.asyncio
async def test_custom_not_found_error(client):
    products = Model(client, Product).set_not_found(ProductNotFound)

    with pytest.raises(ProductNotFound) as exc_info:
        await products.new_scoop().equal("sku", "missing").first()

    assert products.is_not_found(exc_info.value)
    assert products.is_not_found(DocumentNotFoundError())
    assert not products.is_not_found(KeyError())


@pytest.mark.asyncio
async def test_first_decodes_into_model(client, mock_collection):
    mock_collection.find_one = AsyncMock(return_value={"_id": "x", "sku": "A1", "price": 9.5})

    product = await Model(client, Product).new_scoop().equal("sku", "A1").first()

    assert product == Product(sku="A1", price=9.5)
