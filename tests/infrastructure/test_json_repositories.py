"""Tests for the JSON-file-backed repositories."""

import json
import multiprocessing
import os
import threading
from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import (
    CorruptCartDataError,
    InsufficientStockError,
    ProductNotFoundError,
    StoreError,
)
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.shipping import PaymentMethod, ShippingInfo
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_file import JsonFile
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository

SHIPPING = ShippingInfo(
    name="Siti Rahma",
    email="siti@example.com",
    phone="081234567890",
    address="Jl. Merdeka No. 10, Bandung",
    payment_method=PaymentMethod.E_WALLET,
    notes="Leave at the gate",
)


# Each CLI invocation is its own process; these workers stand in for them.
# Forked, so the children need not re-import this module.


def _take_units(path, results):
    repo = JsonProductRepository(path)
    for _ in range(20):
        try:
            repo.decrement_stock("A", 1)
            results.put(1)
        except InsufficientStockError:
            pass


def _place_orders(path, results):
    repo = JsonOrderRepository(path)
    for _ in range(5):
        order = Order.place(
            buyer_id=f"buyer-{os.getpid()}",
            product_id="1",
            product_name="Batik Shirt",
            quantity=1,
            unit_price=Money(120000),
            shipping_info=SHIPPING,
        )
        repo.save(order)
        results.put(order.id)


def _run_in_processes(worker, path, workers: int) -> list:
    ctx = multiprocessing.get_context("fork")
    results = ctx.SimpleQueue()
    procs = [ctx.Process(target=worker, args=(path, results)) for _ in range(workers)]
    for p in procs:
        p.start()
    for p in procs:
        p.join(timeout=60)
    assert all(p.exitcode == 0 for p in procs)
    collected = []
    while not results.empty():
        collected.append(results.get())
    return collected


# ── Shared file plumbing ─────────────────────────────────────────────────────


class TestJsonFile:

    def test_failed_update_is_not_written(self, tmp_path):
        data = JsonFile(tmp_path / "records.json")
        data.write([{"id": 1}])

        with pytest.raises(RuntimeError):
            with data.updating() as records:
                records.append({"id": 2})
                raise RuntimeError("boom")

        assert data.read() == [{"id": 1}]
        assert [p.name for p in tmp_path.iterdir() if p.suffix == ".tmp"] == []

    def test_nested_updates_share_the_lock(self, tmp_path):
        data = JsonFile(tmp_path / "records.json")
        with data.updating() as records:
            records.append({"id": 1})
            with data.updating() as inner:
                inner.append({"id": 2})
        # The outer block writes last.
        assert data.read() == [{"id": 1}]
        assert (tmp_path / ".records.json.lock").exists()

    def test_non_list_content_rejected(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text('{"id": 1}')
        with pytest.raises(StoreError, match="list of records"):
            JsonFile(path).read()


# ── Products ─────────────────────────────────────────────────────────────────


class TestJsonProductRepository:

    @pytest.fixture
    def repo(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(Product(id="1", name="Batik Shirt", price=Money(120000), stock=5, category="Apparel"))
        return repo

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_round_trip(self, repo):
        product = repo.get_by_id("1")
        assert product.price == Money(120000)
        assert product.stock == 5
        assert product.category == "Apparel"
        assert repo.get_by_name("batik shirt").id == "1"
        assert [p.id for p in repo.list_all()] == ["1"]

    def test_decrement(self, repo):
        repo.decrement_stock("1", 2)
        assert repo.get_by_id("1").stock == 3

    def test_decrement_below_zero_rejected(self, repo):
        with pytest.raises(InsufficientStockError):
            repo.decrement_stock("1", 6)
        assert repo.get_by_id("1").stock == 5

    def test_decrement_missing_product(self, repo):
        with pytest.raises(ProductNotFoundError):
            repo.decrement_stock("9", 1)

    def test_increment(self, repo):
        repo.increment_stock("1", 3)
        assert repo.get_by_id("1").stock == 8

    def test_concurrent_decrements_never_oversell(self, tmp_path, repo):
        # A second instance on the same file shares the file lock.
        other = JsonProductRepository(tmp_path / "products.json")
        successes: list[int] = []
        barrier = threading.Barrier(10)

        def take(n):
            target = repo if n % 2 else other
            barrier.wait()
            try:
                target.decrement_stock("1", 1)
                successes.append(n)
            except InsufficientStockError:
                pass

        threads = [threading.Thread(target=take, args=(n,)) for n in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(successes) == 5
        assert repo.get_by_id("1").stock == 0

    def test_separate_processes_never_oversell(self, tmp_path):
        path = tmp_path / "products.json"
        JsonProductRepository(path).save(
            Product(id="A", name="Tenun Scarf", price=Money(90000), stock=40)
        )

        taken = _run_in_processes(_take_units, path, workers=4)

        left = JsonProductRepository(path).get_by_id("A").stock
        assert sum(taken) + left == 40
        assert left == 0

    def test_unreadable_file_raises_store_error(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JsonProductRepository(path).list_all()


# ── Orders ───────────────────────────────────────────────────────────────────


class TestJsonOrderRepository:

    def _order(self, buyer_id: str = "buyer-1") -> Order:
        return Order.place(
            buyer_id=buyer_id,
            product_id="1",
            product_name="Batik Shirt",
            quantity=2,
            unit_price=Money(120000),
            shipping_info=SHIPPING,
        )

    def test_save_assigns_sequential_ids(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        first, second = self._order(), self._order()
        repo.save(first)
        repo.save(second)
        assert (first.id, second.id) == (1, 2)

    def test_separate_processes_get_distinct_ids(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path)

        ids = _run_in_processes(_place_orders, path, workers=4)

        saved = JsonOrderRepository(path).list_all()
        assert sorted(ids) == list(range(1, 21))
        assert sorted(o.id for o in saved) == list(range(1, 21))

    def test_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = self._order()
        order.created_at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        order.mark_paid("inline_abc123")
        repo.save(order)

        loaded = JsonOrderRepository(tmp_path / "orders.json").get_by_id(order.id)

        assert loaded == order
        assert loaded.shipping_info.notes == "Leave at the gate"

    def test_update_replaces_existing(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = self._order()
        repo.save(order)
        order.cancel()
        repo.save(order)

        assert len(repo.list_all()) == 1
        assert repo.get_by_id(order.id).status == OrderStatus.CANCELLED

    def test_list_by_buyer(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        for buyer in ("alice", "bob", "alice"):
            repo.save(self._order(buyer))
        assert [o.id for o in repo.list_by_buyer("alice")] == [1, 3]

    def test_missing_order(self, tmp_path):
        assert JsonOrderRepository(tmp_path / "orders.json").get_by_id(1) is None


# ── Carts ────────────────────────────────────────────────────────────────────


class TestJsonCartRepository:

    def _cart(self) -> Cart:
        return Cart(lines=[
            CartLine("1", "Batik Shirt", Money(120000), quantity=2, stock=5, image_url="https://img.test/1.jpg"),
            CartLine("2", "Kebaya", Money(250000), quantity=1, stock=3),
        ])

    def test_round_trip(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts")
        repo.save("s1", self._cart())
        assert repo.load("s1") == self._cart()

    def test_missing_session(self, tmp_path):
        assert JsonCartRepository(tmp_path / "carts").load("nobody") is None

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"lines": []}',
            '[{"product_id": "1"}]',
            '[{"product_id": "1", "product_name": "X", "unit_price": 10, "quantity": 0, "stock": 1}]',
            '[{"product_id": "1", "product_name": "X", "unit_price": -10, "quantity": 1, "stock": 1}]',
        ],
    )
    def test_corrupt_data(self, tmp_path, content):
        repo = JsonCartRepository(tmp_path / "carts")
        (tmp_path / "carts" / "s1.json").write_text(content)
        with pytest.raises(CorruptCartDataError):
            repo.load("s1")

    def test_delete_is_idempotent(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts")
        repo.save("s1", self._cart())
        repo.delete("s1")
        repo.delete("s1")
        assert repo.load("s1") is None

    def test_session_key_cannot_escape_directory(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts")
        repo.save("../evil", self._cart())
        assert not (tmp_path / "evil.json").exists()
        assert repo.load("../evil") == self._cart()
