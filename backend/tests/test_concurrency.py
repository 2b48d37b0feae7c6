"""
Concurrency tests for the in-memory stores and checkout.

Threads are joined with a timeout so a lock bug shows up as a failure
rather than a hung test run.
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from kasir.errors import InsufficientStockError
from kasir.models import Category, CheckoutItem, Product
from kasir.repositories import (
    MemoryCategoryRepository,
    MemoryProductRepository,
    MemoryTransactionRepository,
)
from kasir.repositories.locking import ReadWriteLock
from kasir.services import TransactionService

JOIN_TIMEOUT = 5


class TestReadWriteLock:
    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=JOIN_TIMEOUT)

        def reader():
            with lock.read_locked():
                # All three readers must be inside at once to pass the barrier
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(JOIN_TIMEOUT)

        assert not any(t.is_alive() for t in threads)
        assert not inside.broken

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []

        lock.acquire_write()
        reader = threading.Thread(target=lambda: (lock.acquire_read(), events.append("read"), lock.release_read()))
        reader.start()
        time.sleep(0.05)
        events.append("write done")
        lock.release_write()
        reader.join(JOIN_TIMEOUT)

        assert events == ["write done", "read"]

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        events = []

        lock.acquire_read()
        writer = threading.Thread(target=lambda: (lock.acquire_write(), events.append("write"), lock.release_write()))
        writer.start()
        time.sleep(0.05)

        late_reader = threading.Thread(target=lambda: (lock.acquire_read(), events.append("read"), lock.release_read()))
        late_reader.start()
        time.sleep(0.05)
        assert events == []

        lock.release_read()
        writer.join(JOIN_TIMEOUT)
        late_reader.join(JOIN_TIMEOUT)

        assert events == ["write", "read"]

    def test_release_on_exception(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            with lock.write_locked():
                raise RuntimeError("boom")

        # Would block forever if the write lock leaked
        with lock.read_locked():
            pass


class TestConcurrentCreates:
    N = 100

    def test_category_ids_are_unique_and_dense(self):
        repo = MemoryCategoryRepository()

        with ThreadPoolExecutor(max_workers=16) as pool:
            created = list(pool.map(lambda i: repo.create(Category(name=f"cat-{i}")), range(self.N)))

        ids = sorted(c.id for c in created)
        assert ids == list(range(1, self.N + 1))
        assert len(repo.get_all()) == self.N

    def test_product_ids_are_unique_with_readers_running(self):
        categories = MemoryCategoryRepository()
        category = categories.create(Category(name="Makanan"))
        repo = MemoryProductRepository(categories)
        stop = threading.Event()
        reader_errors = []

        def read_loop():
            while not stop.is_set():
                try:
                    for product in repo.get_all():
                        assert product.category.name == "Makanan"
                except Exception as e:
                    reader_errors.append(e)
                    return

        readers = [threading.Thread(target=read_loop) for _ in range(4)]
        for t in readers:
            t.start()
        try:
            with ThreadPoolExecutor(max_workers=8) as pool:
                created = list(pool.map(
                    lambda i: repo.create(Product(name=f"p{i}", price=1000, stock=1, category_id=category.id)),
                    range(self.N),
                ))
        finally:
            stop.set()
            for t in readers:
                t.join(JOIN_TIMEOUT)

        assert reader_errors == []
        assert len({p.id for p in created}) == self.N
        assert [p.id for p in repo.get_all()] == list(range(1, self.N + 1))

    def test_transaction_ids_are_unique(self, clock):
        categories = MemoryCategoryRepository()
        products = MemoryProductRepository(categories)
        product = products.create(Product(name="Aqua", price=3000, stock=self.N))
        service = TransactionService(MemoryTransactionRepository(), products, atomic_stock=True, clock=clock)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(
                lambda _: service.checkout([CheckoutItem(product_id=product.id, quantity=1)]),
                range(self.N),
            ))

        assert sorted(t.id for t in results) == list(range(1, self.N + 1))
        assert products.get_by_id(product.id).stock == 0


class _RendezvousProductRepository(MemoryProductRepository):
    """
    Holds every get_by_id caller until `parties` of them have read, so
    concurrent checkouts all see the same stock before anyone writes.
    """

    def __init__(self, parties):
        super().__init__()
        self._barrier = threading.Barrier(parties, timeout=JOIN_TIMEOUT)

    def get_by_id(self, product_id):
        product = super().get_by_id(product_id)
        self._barrier.wait()
        return product


class TestCheckoutRace:
    def _race(self, service, product_id, parties=2):
        outcomes = []
        lock = threading.Lock()

        def buy():
            try:
                tx = service.checkout([CheckoutItem(product_id=product_id, quantity=1)])
                result = tx
            except InsufficientStockError as e:
                result = e
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=buy) for _ in range(parties)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(JOIN_TIMEOUT)
        return outcomes

    def test_default_mode_can_oversell_last_unit(self, clock):
        """
        SCENARIO: Two checkouts for the last unit both read stock=1 before either writes
        EXPECTED: Both succeed; two transactions exist for one unit of stock
        """
        products = _RendezvousProductRepository(parties=2)
        product = products.create(Product(name="Last one", price=5000, stock=1))
        transactions = MemoryTransactionRepository()
        service = TransactionService(transactions, products, clock=clock)

        outcomes = self._race(service, product.id)

        assert len(outcomes) == 2
        assert all(not isinstance(o, Exception) for o in outcomes)
        assert transactions.get_by_id(1).total_amount == 5000
        assert transactions.get_by_id(2).total_amount == 5000
        # Both wrote back 1 - 1
        assert MemoryProductRepository.get_by_id(products, product.id).stock == 0

    def test_atomic_mode_sells_last_unit_once(self, clock):
        products = MemoryProductRepository()
        product = products.create(Product(name="Last one", price=5000, stock=1))
        service = TransactionService(MemoryTransactionRepository(), products, atomic_stock=True, clock=clock)

        outcomes = self._race(service, product.id, parties=8)

        successes = [o for o in outcomes if not isinstance(o, Exception)]
        failures = [o for o in outcomes if isinstance(o, InsufficientStockError)]
        assert len(successes) == 1
        assert len(failures) == 7
        assert products.get_by_id(product.id).stock == 0
