from .entities import (
    Category, ProductCategory, Product,
    Transaction, TransactionDetail, CheckoutItem,
    Report, BestSellingProduct,
)
from .schema import CategoryRow, ProductRow, TransactionRow, TransactionDetailRow

__all__ = [
    'Category', 'ProductCategory', 'Product',
    'Transaction', 'TransactionDetail', 'CheckoutItem',
    'Report', 'BestSellingProduct',
    'CategoryRow', 'ProductRow', 'TransactionRow', 'TransactionDetailRow',
]
