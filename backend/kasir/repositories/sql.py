# Overview: SQLAlchemy-backed repositories; same contract and error kinds as the in-memory backend.

"""
SQL repositories (Flask-SQLAlchemy session; an app context is required).

Every write is a single session commit wrapped in run_with_retry. On any
failure the session is rolled back and the error propagates unchanged, so
infrastructure errors reach the HTTP layer as-is.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, update

from ..errors import (
    CategoryNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    TransactionNotFoundError,
)
from ..extensions import db
from ..models import (
    BestSellingProduct,
    Category,
    CategoryRow,
    Product,
    ProductRow,
    Report,
    Transaction,
    TransactionDetailRow,
    TransactionRow,
)
from .base import CategoryRepository, ProductRepository, TransactionRepository
from .concurrency import run_with_retry


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _write(operation):
    def _op():
        try:
            result = operation()
            db.session.commit()
            return result
        except Exception:
            db.session.rollback()
            raise
    return run_with_retry(_op)


class SQLCategoryRepository(CategoryRepository):
    def get_all(self) -> list[Category]:
        rows = db.session.query(CategoryRow).order_by(CategoryRow.id.asc()).all()
        return [r.to_entity() for r in rows]

    def get_by_id(self, category_id: int) -> Category:
        row = db.session.get(CategoryRow, category_id)
        if row is None:
            raise CategoryNotFoundError()
        return row.to_entity()

    def create(self, category: Category) -> Category:
        def _op():
            row = CategoryRow(name=category.name, description=category.description)
            db.session.add(row)
            db.session.flush()
            return row.id

        category.id = _write(_op)
        return category

    def update(self, category: Category) -> Category:
        def _op():
            row = db.session.get(CategoryRow, category.id)
            if row is None:
                raise CategoryNotFoundError()
            row.name = category.name
            row.description = category.description

        _write(_op)
        return category

    def delete(self, category_id: int) -> None:
        def _op():
            row = db.session.get(CategoryRow, category_id)
            if row is None:
                raise CategoryNotFoundError()
            db.session.delete(row)

        _write(_op)


class SQLProductRepository(ProductRepository):
    """Category enrichment comes from the joined categories row."""

    def _query(self):
        return db.session.query(ProductRow)

    def get_all(self, name_filter: str = "") -> list[Product]:
        query = self._query()
        if name_filter:
            query = query.filter(ProductRow.name.ilike(f"%{_escape_like(name_filter)}%", escape="\\"))
        rows = query.order_by(ProductRow.id.asc()).all()
        return [r.to_entity() for r in rows]

    def get_by_id(self, product_id: int) -> Product:
        row = db.session.get(ProductRow, product_id)
        if row is None:
            raise ProductNotFoundError()
        return row.to_entity()

    def create(self, product: Product) -> Product:
        def _op():
            row = ProductRow(
                name=product.name,
                price=product.price,
                stock=product.stock,
                category_id=product.category_id,
            )
            db.session.add(row)
            db.session.flush()
            return row.id

        product.id = _write(_op)
        product.category = self.get_by_id(product.id).category
        return product

    def update(self, product: Product) -> Product:
        def _op():
            row = db.session.get(ProductRow, product.id)
            if row is None:
                raise ProductNotFoundError()
            row.name = product.name
            row.price = product.price
            row.stock = product.stock
            row.category_id = product.category_id

        _write(_op)
        product.category = self.get_by_id(product.id).category
        return product

    def delete(self, product_id: int) -> None:
        def _op():
            row = db.session.get(ProductRow, product_id)
            if row is None:
                raise ProductNotFoundError()
            db.session.delete(row)

        _write(_op)

    def decrement_stock(self, product_id: int, quantity: int) -> Product:
        def _op():
            result = db.session.execute(
                update(ProductRow)
                .where(ProductRow.id == product_id, ProductRow.stock >= quantity)
                .values(stock=ProductRow.stock - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                return
            row = db.session.get(ProductRow, product_id)
            if row is None:
                raise ProductNotFoundError()
            raise InsufficientStockError(details={
                "product_id": product_id,
                "requested_quantity": quantity,
                "stock": row.stock,
            })

        _write(_op)
        db.session.expire_all()
        return self.get_by_id(product_id)


class SQLTransactionRepository(TransactionRepository):
    def create(self, transaction: Transaction) -> Transaction:
        def _op():
            row = TransactionRow(
                total_amount=transaction.total_amount,
                created_at=transaction.created_at,
            )
            row.details = [
                TransactionDetailRow(
                    line_number=line_number,
                    product_id=d.product_id,
                    product_name=d.product_name,
                    quantity=d.quantity,
                    price=d.price,
                    subtotal=d.subtotal,
                )
                for line_number, d in enumerate(transaction.details, start=1)
            ]
            db.session.add(row)
            db.session.flush()
            return row.id

        transaction.id = _write(_op)
        for line_number, detail in enumerate(transaction.details, start=1):
            detail.id = line_number
            detail.transaction_id = transaction.id
        return transaction

    def get_by_id(self, transaction_id: int) -> Transaction:
        row = db.session.get(TransactionRow, transaction_id)
        if row is None:
            raise TransactionNotFoundError()
        return row.to_entity()

    def get_report_by_date_range(self, start: datetime, end: datetime) -> Report:
        in_range = (TransactionRow.created_at >= start, TransactionRow.created_at < end)

        revenue, count = (
            db.session.query(
                func.coalesce(func.sum(TransactionRow.total_amount), 0),
                func.count(TransactionRow.id),
            )
            .filter(*in_range)
            .one()
        )
        report = Report(total_revenue=int(revenue), total_transactions=int(count))

        total_qty = func.sum(TransactionDetailRow.quantity).label("total_qty")
        best = (
            db.session.query(TransactionDetailRow.product_name, total_qty)
            .join(TransactionRow, TransactionDetailRow.transaction_id == TransactionRow.id)
            .filter(*in_range)
            .group_by(TransactionDetailRow.product_name)
            .order_by(total_qty.desc(), TransactionDetailRow.product_name.asc())
            .first()
        )
        if best is not None:
            report.best_selling_product = BestSellingProduct(name=best[0], quantity_sold=int(best[1]))
        return report
