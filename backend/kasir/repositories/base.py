# Overview: Storage capability sets shared by the in-memory and SQL backends.

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..models import Category, Product, Report, Transaction


class CategoryRepository(ABC):
    @abstractmethod
    def get_all(self) -> list[Category]:
        ...

    @abstractmethod
    def get_by_id(self, category_id: int) -> Category:
        """Raises CategoryNotFoundError when absent."""

    @abstractmethod
    def create(self, category: Category) -> Category:
        """Assigns category.id and stores a copy."""

    @abstractmethod
    def update(self, category: Category) -> Category:
        """Full replace. Raises CategoryNotFoundError when category.id is absent."""

    @abstractmethod
    def delete(self, category_id: int) -> None:
        ...


class ProductRepository(ABC):
    @abstractmethod
    def get_all(self, name_filter: str = "") -> list[Product]:
        """All products, or those whose name contains name_filter (case-insensitive)."""

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product:
        """Raises ProductNotFoundError when absent."""

    @abstractmethod
    def create(self, product: Product) -> Product:
        ...

    @abstractmethod
    def update(self, product: Product) -> Product:
        ...

    @abstractmethod
    def delete(self, product_id: int) -> None:
        ...

    @abstractmethod
    def decrement_stock(self, product_id: int, quantity: int) -> Product:
        """
        Check-and-decrement in a single critical section.

        Raises ProductNotFoundError, or InsufficientStockError when
        stock < quantity (stock is left unchanged).
        """


class TransactionRepository(ABC):
    @abstractmethod
    def create(self, transaction: Transaction) -> Transaction:
        """Assigns transaction and detail ids (details numbered from 1)."""

    @abstractmethod
    def get_by_id(self, transaction_id: int) -> Transaction:
        """Raises TransactionNotFoundError when absent."""

    @abstractmethod
    def get_report_by_date_range(self, start: datetime, end: datetime) -> Report:
        """Aggregate transactions with start <= created_at < end."""
