# Overview: Process-lifetime storage backend guarded by one read-write lock per store.

"""
In-memory repositories.

Each store owns its dict, its id counter and its lock; nothing is shared
between instances. Values are copied on the way in and on the way out, so
callers never hold a reference into stored state.

Ids come from a counter that starts at 1, advances only on a successful
create, and is never reused after a delete.
"""
from __future__ import annotations

from datetime import datetime

from ..errors import (
    CategoryNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    TransactionNotFoundError,
)
from ..models import BestSellingProduct, Category, Product, ProductCategory, Report, Transaction
from .base import CategoryRepository, ProductRepository, TransactionRepository
from .locking import ReadWriteLock


class MemoryCategoryRepository(CategoryRepository):
    def __init__(self):
        self._lock = ReadWriteLock()
        self._categories: dict[int, Category] = {}
        self._next_id = 1

    def get_all(self) -> list[Category]:
        with self._lock.read_locked():
            return [self._categories[k].copy() for k in sorted(self._categories)]

    def get_by_id(self, category_id: int) -> Category:
        with self._lock.read_locked():
            category = self._categories.get(category_id)
            if category is None:
                raise CategoryNotFoundError()
            return category.copy()

    def create(self, category: Category) -> Category:
        with self._lock.write_locked():
            category.id = self._next_id
            self._categories[category.id] = category.copy()
            self._next_id += 1
        return category

    def update(self, category: Category) -> Category:
        with self._lock.write_locked():
            if category.id not in self._categories:
                raise CategoryNotFoundError()
            self._categories[category.id] = category.copy()
        return category

    def delete(self, category_id: int) -> None:
        with self._lock.write_locked():
            if category_id not in self._categories:
                raise CategoryNotFoundError()
            del self._categories[category_id]


class MemoryProductRepository(ProductRepository):
    """
    Products plus best-effort category enrichment.

    Enrichment runs after the product lock is released, so this store never
    holds its own lock while taking the category store's. The attached
    category is whatever the category store says at that moment; a concurrent
    category edit can make two reads disagree.
    """

    def __init__(self, category_repo: CategoryRepository | None = None):
        self._lock = ReadWriteLock()
        self._products: dict[int, Product] = {}
        self._next_id = 1
        self._category_repo = category_repo

    def _enrich(self, product: Product) -> Product:
        product.category = None
        if self._category_repo is None or product.category_id is None:
            return product
        try:
            category = self._category_repo.get_by_id(product.category_id)
        except CategoryNotFoundError:
            return product
        product.category = ProductCategory(name=category.name, description=category.description)
        return product

    def get_all(self, name_filter: str = "") -> list[Product]:
        needle = (name_filter or "").lower()
        with self._lock.read_locked():
            products = [
                self._products[k].copy()
                for k in sorted(self._products)
                if not needle or needle in self._products[k].name.lower()
            ]
        return [self._enrich(p) for p in products]

    def get_by_id(self, product_id: int) -> Product:
        with self._lock.read_locked():
            product = self._products.get(product_id)
            if product is None:
                raise ProductNotFoundError()
            product = product.copy()
        return self._enrich(product)

    def create(self, product: Product) -> Product:
        with self._lock.write_locked():
            product.id = self._next_id
            stored = product.copy()
            stored.category = None
            self._products[product.id] = stored
            self._next_id += 1
        return self._enrich(product)

    def update(self, product: Product) -> Product:
        with self._lock.write_locked():
            if product.id not in self._products:
                raise ProductNotFoundError()
            stored = product.copy()
            stored.category = None
            self._products[product.id] = stored
        return self._enrich(product)

    def delete(self, product_id: int) -> None:
        with self._lock.write_locked():
            if product_id not in self._products:
                raise ProductNotFoundError()
            del self._products[product_id]

    def decrement_stock(self, product_id: int, quantity: int) -> Product:
        with self._lock.write_locked():
            stored = self._products.get(product_id)
            if stored is None:
                raise ProductNotFoundError()
            if stored.stock < quantity:
                raise InsufficientStockError(details={
                    "product_id": product_id,
                    "requested_quantity": quantity,
                    "stock": stored.stock,
                })
            stored.stock -= quantity
            product = stored.copy()
        return self._enrich(product)


class MemoryTransactionRepository(TransactionRepository):
    """Append-only: transactions are never updated or deleted."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._transactions: dict[int, Transaction] = {}
        self._next_id = 1

    def create(self, transaction: Transaction) -> Transaction:
        with self._lock.write_locked():
            transaction.id = self._next_id
            self._next_id += 1
            for line_number, detail in enumerate(transaction.details, start=1):
                detail.id = line_number
                detail.transaction_id = transaction.id
            self._transactions[transaction.id] = transaction.copy()
        return transaction

    def get_by_id(self, transaction_id: int) -> Transaction:
        with self._lock.read_locked():
            transaction = self._transactions.get(transaction_id)
            if transaction is None:
                raise TransactionNotFoundError()
            return transaction.copy()

    def get_report_by_date_range(self, start: datetime, end: datetime) -> Report:
        report = Report()
        quantity_by_name: dict[str, int] = {}

        with self._lock.read_locked():
            for transaction_id in sorted(self._transactions):
                transaction = self._transactions[transaction_id]
                # Half-open [start, end)
                if transaction.created_at < start or transaction.created_at >= end:
                    continue

                report.total_revenue += transaction.total_amount
                report.total_transactions += 1
                for detail in transaction.details:
                    quantity_by_name[detail.product_name] = (
                        quantity_by_name.get(detail.product_name, 0) + detail.quantity
                    )

        # Ties go to the name seen first (lowest transaction id, then line order)
        best_name = None
        best_qty = 0
        for name, qty in quantity_by_name.items():
            if qty > best_qty:
                best_name, best_qty = name, qty

        if best_name is not None:
            report.best_selling_product = BestSellingProduct(name=best_name, quantity_sold=best_qty)
        return report
