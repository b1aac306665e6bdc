"""
Markets API Endpoints
"""
from uuid import UUID

from fastapi import APIRouter, Depends

from bakery.api.dependencies import get_unit_of_work
from bakery.api.responses import success, unwrap
from bakery.domain.market import MarketCreate
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.market_handlers import CreateMarketHandler, GetMarketByIdHandler, GetOpenMarketsHandler
from bakery.services.product_queries import GetProductsByMarketHandler

router = APIRouter()


@router.post("", status_code=201)
async def create_market(market: MarketCreate, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await CreateMarketHandler(uow).handle(market)
    return success(unwrap(result))


@router.get("/open")
async def get_open_markets(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Markets open at the time of the request"""
    result = await GetOpenMarketsHandler(uow).handle()
    return success(unwrap(result))


@router.get("/{market_id}")
async def get_market(market_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetMarketByIdHandler(uow).handle(market_id)
    return success(unwrap(result))


@router.get("/{market_id}/products")
async def get_market_products(market_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Available products sold at the market"""
    result = await GetProductsByMarketHandler(uow).handle(market_id)
    return success(unwrap(result))
