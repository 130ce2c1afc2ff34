import threading

import pytest
from pydantic import BaseModel

from mongo_scoop.exceptions import ConfigurationError
from mongo_scoop.registry import CollectionRegistry


class UserProfile(BaseModel):
    name: str


class Order(BaseModel):
    __collection__ = "orders_v2"


class Invoice(BaseModel):
    @classmethod
    def collection(cls):
        return "billing_invoices"


class Broken:
    __collection__ = ""


@pytest.fixture
def registry():
    return CollectionRegistry()


def test_default_name_is_snake_case(registry):
    assert registry.collection_name(UserProfile) == "user_profile"


def test_explicit_names(registry):
    assert registry.collection_name(Order) == "orders_v2"
    assert registry.collection_name(Invoice) == "billing_invoices"


def test_instance_resolves_like_class(registry):
    assert registry.collection_name(UserProfile(name="x")) == "user_profile"
    assert UserProfile in registry
    assert len(registry) == 1


def test_register_overrides_resolution(registry):
    registry.register(UserProfile, "people")

    assert registry.collection_name(UserProfile) == "people"


def test_register_rejects_empty_name(registry):
    with pytest.raises(ConfigurationError):
        registry.register(UserProfile, "")


def test_invalid_collection_name(registry):
    with pytest.raises(ConfigurationError):
        registry.collection_name(Broken)


def test_registries_are_independent():
    first = CollectionRegistry()
    second = CollectionRegistry()
    first.register(UserProfile, "people")

    assert second.collection_name(UserProfile) == "user_profile"


def test_clear(registry):
    registry.collection_name(Order)
    registry.clear()

    assert len(registry) == 0
    assert Order not in registry


def test_concurrent_resolution(registry):
    results = []

    def resolve():
        results.append(registry.collection_name(UserProfile))

    threads = [threading.Thread(target=resolve) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["user_profile"] * 16
    assert len(registry) == 1
