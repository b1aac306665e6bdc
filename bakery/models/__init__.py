"""
ORM entities
"""
from .base import EntityMixin, SoftDeletable
from .customer import Customer
from .market import Market
from .product import Product

__all__ = [
    "EntityMixin",
    "SoftDeletable",
    "Customer",
    "Market",
    "Product",
]
