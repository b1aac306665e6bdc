"""
Market Handlers
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.domain.market import MarketCreate, MarketDto
from bakery.models.market import Market
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.instrumentation import logged_handler

logger = logging.getLogger(__name__)


class CreateMarketHandler:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, command: MarketCreate) -> Result[MarketDto]:
        if not command.name.strip():
            return Result.failure(Error.invalid_input("Market name is required"))
        if command.opening_time >= command.closing_time:
            return Result.failure(Error.invalid_input("Opening time must be before closing time"))

        market = Market(**command.model_dump())
        market.name = command.name.strip()

        async with self.uow.transaction():
            added = await self.uow.markets.add(market)
            if added.is_failure:
                await self.uow.rollback_transaction()
                return added.propagate()
            saved = await self.uow.save_changes()
            if saved.is_failure:
                await self.uow.rollback_transaction()
                return saved.propagate()

        logger.info(f"Created market {market.id} ({market.name})")
        return Result.success(MarketDto.from_entity(market))


class GetMarketByIdHandler:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, market_id: UUID, now: Optional[datetime] = None) -> Result[MarketDto]:
        found = await self.uow.markets.get_by_id(market_id)
        if found.is_failure:
            return found.propagate()
        if found.value.is_deleted:
            return Result.failure(Error.not_found(f"Market with ID {market_id} not found"))
        return Result.success(MarketDto.from_entity(found.value, now))


class GetOpenMarketsHandler:
    """Markets open right now (or at `now`)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, now: Optional[datetime] = None) -> Result[List[MarketDto]]:
        now = now or datetime.now()
        found = await self.uow.markets.get_open_markets(now)
        if found.is_failure:
            return found.propagate()
        return Result.success([MarketDto.from_entity(m, now) for m in found.value])
