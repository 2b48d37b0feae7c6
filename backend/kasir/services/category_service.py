# backend/kasir/services/category_service.py
"""Category Service: input rules around the category repository."""
from __future__ import annotations

import logging

from ..errors import IDRequiredError, NameRequiredError
from ..models import Category
from ..repositories import CategoryRepository

logger = logging.getLogger(__name__)


def validate_category(category: Category) -> None:
    if not category.name or not category.name.strip():
        raise NameRequiredError()


class CategoryService:
    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def get_all(self) -> list[Category]:
        return self.repo.get_all()

    def get_by_id(self, category_id: int) -> Category:
        if category_id <= 0:
            raise IDRequiredError()
        return self.repo.get_by_id(category_id)

    def create(self, category: Category) -> Category:
        validate_category(category)
        created = self.repo.create(category)
        logger.info("Created category id=%s name=%r", created.id, created.name)
        return created

    def update(self, category_id: int, category: Category) -> Category:
        """Full replace of the category stored under category_id."""
        if category_id <= 0:
            raise IDRequiredError()
        validate_category(category)
        category.id = category_id
        updated = self.repo.update(category)
        logger.info("Updated category id=%s", category_id)
        return updated

    def delete(self, category_id: int) -> None:
        # Products pointing at this category keep their category_id;
        # enrichment simply stops finding it.
        if category_id <= 0:
            raise IDRequiredError()
        self.repo.delete(category_id)
        logger.info("Deleted category id=%s", category_id)
