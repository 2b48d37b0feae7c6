# backend/kasir/services/product_service.py
"""
Product Service

Rules applied before any write:
- name must be non-blank
- price > 0, stock >= 0
- category_id, when set, must exist in the category store at call time
"""
from __future__ import annotations

import logging

from ..errors import (
    IDRequiredError,
    NameRequiredError,
    PriceInvalidError,
    StockInvalidError,
)
from ..models import Product
from ..repositories import CategoryRepository, ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    def get_all(self, name_filter: str = "") -> list[Product]:
        return self.repo.get_all(name_filter=name_filter or "")

    def get_by_id(self, product_id: int) -> Product:
        if product_id <= 0:
            raise IDRequiredError()
        return self.repo.get_by_id(product_id)

    def create(self, product: Product) -> Product:
        self._validate(product)
        created = self.repo.create(product)
        logger.info("Created product id=%s name=%r stock=%s", created.id, created.name, created.stock)
        return created

    def update(self, product_id: int, product: Product) -> Product:
        if product_id <= 0:
            raise IDRequiredError()
        self._validate(product)
        product.id = product_id
        updated = self.repo.update(product)
        logger.info("Updated product id=%s", product_id)
        return updated

    def delete(self, product_id: int) -> None:
        if product_id <= 0:
            raise IDRequiredError()
        self.repo.delete(product_id)
        logger.info("Deleted product id=%s", product_id)

    def _validate(self, product: Product) -> None:
        if not product.name or not product.name.strip():
            raise NameRequiredError()
        if product.price <= 0:
            raise PriceInvalidError()
        if product.stock < 0:
            raise StockInvalidError()
        if product.category_id is not None:
            # Raises CategoryNotFoundError for a dangling reference
            self.category_repo.get_by_id(product.category_id)
