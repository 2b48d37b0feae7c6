from .base import CategoryRepository, ProductRepository, TransactionRepository
from .memory import MemoryCategoryRepository, MemoryProductRepository, MemoryTransactionRepository
from .sql import SQLCategoryRepository, SQLProductRepository, SQLTransactionRepository

__all__ = [
    'CategoryRepository', 'ProductRepository', 'TransactionRepository',
    'MemoryCategoryRepository', 'MemoryProductRepository', 'MemoryTransactionRepository',
    'SQLCategoryRepository', 'SQLProductRepository', 'SQLTransactionRepository',
]
