import json
import os

import pytest

from storefront.core.store import CartStore
from storefront.database.storage import (
    CartPersistence,
    FileStorage,
    MemoryStorage,
    create_storage,
)
from storefront.models.cart import DiscountKind, ShippingSelection

from helpers import make_discount, make_item, make_variant


def _populated_store(persistence) -> CartStore:
    store = CartStore(persistence)
    store.initialize()
    store.add_item(make_item(quantity=2, variant=make_variant()))
    store.add_item(make_item(quantity=1, id="p-2", price=3.33, metadata={"origin": "DE"}))
    store.apply_discount(make_discount())
    store.apply_discount(make_discount(code="SHIPFREE", kind=DiscountKind.FREE_SHIPPING, value=1))
    store.set_shipping_method(ShippingSelection(method="standard", cost=4.99, estimated_days=3, carrier="DHL"))
    return store


def test_snapshot_round_trip(persistence):
    store = _populated_store(persistence)

    loaded = persistence.load()

    assert loaded.items == store.state.items
    assert loaded.discounts == store.state.discounts
    assert loaded.shipping == store.state.shipping
    assert loaded.summary == store.state.summary

    persistence.save(loaded)
    assert persistence.load().to_snapshot() == store.state.to_snapshot()


def test_transient_fields_not_persisted(storage, persistence):
    store = _populated_store(persistence)
    store.set_error("something went wrong")
    store.set_loading(True)
    store.calculate_summary()

    raw = json.loads(storage.get(persistence.key))

    assert set(raw) == {"items", "discounts", "shipping", "summary"}

    loaded = persistence.load()
    assert loaded.error is None
    assert not loaded.is_loading
    assert not loaded.is_initialized


def test_load_missing_key(persistence):
    assert persistence.load() is None


def test_delete(storage, persistence):
    _populated_store(persistence)
    persistence.delete()
    assert storage.get(persistence.key) is None


def test_file_storage_round_trip(tmp_path):
    storage = FileStorage(str(tmp_path / "carts"))
    persistence = CartPersistence(storage, "onicommerce-cart:abc/123")
    store = _populated_store(persistence)

    files = list((tmp_path / "carts").iterdir())
    assert [f.name for f in files] == ["onicommerce-cart%3Aabc%2F123.json"]

    reopened = CartPersistence(FileStorage(str(tmp_path / "carts")), "onicommerce-cart:abc/123")
    assert reopened.load().to_snapshot() == store.state.to_snapshot()


def test_file_storage_delete_missing_key(tmp_path):
    storage = FileStorage(str(tmp_path))
    storage.delete("nope")
    assert storage.get("nope") is None


def test_file_storage_last_write_wins(tmp_path):
    first = CartStore(CartPersistence(FileStorage(str(tmp_path)), "cart"))
    second = CartStore(CartPersistence(FileStorage(str(tmp_path)), "cart"))
    first.initialize()
    second.initialize()

    first.add_item(make_item(quantity=1))
    second.add_item(make_item(quantity=5, id="p-2"))

    loaded = CartPersistence(FileStorage(str(tmp_path)), "cart").load()
    assert [i.product_id for i in loaded.items] == ["p-2"]


def test_create_storage():
    assert isinstance(create_storage("memory"), MemoryStorage)

    with pytest.raises(ValueError):
        create_storage("file")

    with pytest.raises(ValueError):
        create_storage("redis")


def test_file_storage_keys_do_not_collide(tmp_path):
    storage = FileStorage(str(tmp_path))
    storage.set("onicommerce-cart:a_b", "first")

    assert storage.get("onicommerce-cart:a:b") is None
    assert storage.get("onicommerce-cart:a/b") is None

    storage.set("onicommerce-cart:a:b", "second")
    assert storage.get("onicommerce-cart:a_b") == "first"
    assert storage.get("onicommerce-cart:a:b") == "second"


def test_file_storage_leaves_no_temp_files(tmp_path):
    storage = FileStorage(str(tmp_path))
    for value in ("one", "two", "three"):
        storage.set("cart", value)

    assert [f.name for f in tmp_path.iterdir()] == ["cart.json"]
    assert storage.get("cart") == "three"


def test_file_storage_temp_names_are_unique(tmp_path, monkeypatch):
    storage = FileStorage(str(tmp_path))
    replaced = []
    real_replace = os.replace

    def record(src, dst):
        replaced.append(src)
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", record)
    storage.set("cart", "one")
    storage.set("cart", "two")

    assert len(set(replaced)) == 2
