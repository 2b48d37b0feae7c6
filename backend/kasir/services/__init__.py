from ..repositories import (
    MemoryCategoryRepository,
    MemoryProductRepository,
    MemoryTransactionRepository,
    SQLCategoryRepository,
    SQLProductRepository,
    SQLTransactionRepository,
)
from .category_service import CategoryService
from .product_service import ProductService
from .transaction_service import TransactionService

__all__ = ['CategoryService', 'ProductService', 'TransactionService', 'Services', 'build_services']


class Services:
    """The three services wired to one storage backend."""

    def __init__(self, *, categories: CategoryService, products: ProductService, transactions: TransactionService):
        self.categories = categories
        self.products = products
        self.transactions = transactions


def build_services(*, use_database: bool = False, atomic_checkout: bool = False) -> Services:
    """
    Wire services to the in-memory backend, or to the SQL backend when
    use_database is set. Services only ever see the abstract repositories.
    """
    if use_database:
        category_repo = SQLCategoryRepository()
        product_repo = SQLProductRepository()
        transaction_repo = SQLTransactionRepository()
    else:
        category_repo = MemoryCategoryRepository()
        product_repo = MemoryProductRepository(category_repo)
        transaction_repo = MemoryTransactionRepository()

    return Services(
        categories=CategoryService(category_repo),
        products=ProductService(product_repo, category_repo),
        transactions=TransactionService(transaction_repo, product_repo, atomic_stock=atomic_checkout),
    )
