"""
Data access layer: repositories and the unit of work that shares their session
"""
from .base import Repository
from .customer_repository import CustomerRepository
from .market_repository import MarketRepository
from .product_repository import ProductRepository
from .unit_of_work import TransactionError, TransactionState, UnitOfWork

__all__ = [
    "Repository",
    "CustomerRepository",
    "MarketRepository",
    "ProductRepository",
    "TransactionError",
    "TransactionState",
    "UnitOfWork",
]
