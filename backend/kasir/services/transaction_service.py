"""
Transaction Service - checkout and sales reports

Checkout walks the cart in order and stops at the first problem:
empty cart, non-positive quantity, unknown product, not enough stock.
Each item's stock is written back as soon as it is processed, before the
transaction itself is stored. Nothing is rolled back: if item N fails, items
1..N-1 stay decremented and no transaction is recorded.

In the default mode the stock check and the decrement are two separate store
calls, so two concurrent checkouts can both pass the check for the last unit.
With atomic_stock=True the store performs check-and-decrement in one critical
section instead.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Union

from ..errors import (
    EmptyCheckoutError,
    InsufficientStockError,
    InvalidDateRangeError,
    InvalidQuantityError,
    TransactionNotFoundError,
)
from ..models import CheckoutItem, Report, Transaction, TransactionDetail
from ..repositories import ProductRepository, TransactionRepository
from ..time_utils import day_bounds, now, to_datetime

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(
        self,
        repo: TransactionRepository,
        product_repo: ProductRepository,
        *,
        atomic_stock: bool = False,
        clock: Callable[[], datetime] = now,
    ):
        self.repo = repo
        self.product_repo = product_repo
        self.atomic_stock = atomic_stock
        self.clock = clock

    def checkout(self, items: Iterable[CheckoutItem]) -> Transaction:
        items = list(items or [])
        if not items:
            raise EmptyCheckoutError()

        transaction = Transaction(created_at=self.clock())
        total_amount = 0

        for item in items:
            if item.quantity <= 0:
                raise InvalidQuantityError(details={
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                })

            if self.atomic_stock:
                product = self.product_repo.decrement_stock(item.product_id, item.quantity)
            else:
                product = self.product_repo.get_by_id(item.product_id)
                if product.stock < item.quantity:
                    raise InsufficientStockError(details={
                        "product_id": product.id,
                        "requested_quantity": item.quantity,
                        "stock": product.stock,
                    })

            subtotal = product.price * item.quantity
            total_amount += subtotal

            # Name and price are copied so later product edits don't rewrite history
            transaction.details.append(TransactionDetail(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                price=product.price,
                subtotal=subtotal,
            ))

            if not self.atomic_stock:
                product.stock -= item.quantity
                self.product_repo.update(product)

        transaction.total_amount = total_amount
        self.repo.create(transaction)

        logger.info(
            "Checkout id=%s items=%d total_amount=%s",
            transaction.id, len(transaction.details), transaction.total_amount,
        )
        return transaction

    def get_by_id(self, transaction_id: int) -> Transaction:
        if transaction_id <= 0:
            raise TransactionNotFoundError()
        return self.repo.get_by_id(transaction_id)

    def get_today_report(self) -> Report:
        start, end = day_bounds(self.clock())
        return self.repo.get_report_by_date_range(start, end)

    def get_report_by_date_range(
        self,
        start: Union[date, datetime],
        end: Union[date, datetime],
    ) -> Report:
        """Report for start..end where end is an inclusive calendar date."""
        start = to_datetime(start)
        end = to_datetime(end)
        if end < start:
            raise InvalidDateRangeError("end_date must be after start_date")
        return self.repo.get_report_by_date_range(start, end + timedelta(days=1))
