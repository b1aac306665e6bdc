"""
Command and query handlers

Each handler takes a UnitOfWork and exposes `async handle(...) -> Result`.
"""
from .customer_handlers import CreateCustomerHandler, GetCustomerByIdHandler, GetVipCustomersHandler
from .market_handlers import CreateMarketHandler, GetMarketByIdHandler, GetOpenMarketsHandler
from .product_commands import CreateProductHandler, DeleteProductHandler, UpdateProductHandler
from .product_queries import (
    GetAllProductsHandler,
    GetProductByIdHandler,
    GetProductsByMarketHandler,
    GetProductsHandler,
)

__all__ = [
    "CreateCustomerHandler",
    "GetCustomerByIdHandler",
    "GetVipCustomersHandler",
    "CreateMarketHandler",
    "GetMarketByIdHandler",
    "GetOpenMarketsHandler",
    "CreateProductHandler",
    "DeleteProductHandler",
    "UpdateProductHandler",
    "GetAllProductsHandler",
    "GetProductByIdHandler",
    "GetProductsByMarketHandler",
    "GetProductsHandler",
]
