from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..time_utils import to_iso


@dataclass
class Category:
    id: int = 0
    name: str = ""
    description: str = ""

    def copy(self) -> "Category":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }


@dataclass
class ProductCategory:
    """Category display fields attached to a product at read time."""

    name: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}


@dataclass
class Product:
    """
    Product master data.

    category_id is the stored reference (None means "no category").
    category is never stored: repositories fill it in on every read/create/update
    by looking category_id up, so it is a snapshot that can go stale if the
    category is edited between two reads.
    """

    id: int = 0
    name: str = ""
    price: int = 0
    stock: int = 0
    category_id: Optional[int] = None
    category: Optional[ProductCategory] = None

    def copy(self) -> "Product":
        category = replace(self.category) if self.category is not None else None
        return replace(self, category=category)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "category_id": self.category_id,
        }
        if self.category is not None:
            data["category"] = self.category.to_dict()
        return data


@dataclass
class TransactionDetail:
    product_id: int
    product_name: str
    quantity: int
    price: int
    subtotal: int
    id: int = 0
    transaction_id: int = 0

    def copy(self) -> "TransactionDetail":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.price,
            "subtotal": self.subtotal,
        }


@dataclass
class Transaction:
    """Checkout record. Immutable once stored; details snapshot name and price."""

    total_amount: int = 0
    created_at: Optional[datetime] = None
    details: list[TransactionDetail] = field(default_factory=list)
    id: int = 0

    def copy(self) -> "Transaction":
        return replace(self, details=[d.copy() for d in self.details])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "total_amount": self.total_amount,
            "created_at": to_iso(self.created_at),
            "details": [d.to_dict() for d in self.details],
        }


@dataclass(frozen=True)
class CheckoutItem:
    product_id: int
    quantity: int


@dataclass
class BestSellingProduct:
    name: str
    quantity_sold: int

    def to_dict(self) -> dict:
        return {"nama": self.name, "qty_terjual": self.quantity_sold}


@dataclass
class Report:
    total_revenue: int = 0
    total_transactions: int = 0
    best_selling_product: Optional[BestSellingProduct] = None

    def to_dict(self) -> dict:
        best = self.best_selling_product
        return {
            "total_revenue": self.total_revenue,
            "total_transaksi": self.total_transactions,
            "produk_terlaris": best.to_dict() if best is not None else None,
        }
