"""
Market Repository
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.models.market import Market
from bakery.repositories.base import Repository

logger = logging.getLogger(__name__)


class MarketRepository(Repository[Market, UUID]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Market)

    async def get_open_markets(self, now: Optional[datetime] = None) -> Result[List[Market]]:
        """Markets flagged open whose opening hours include the current time"""
        try:
            current = (now or datetime.now()).time()
            stmt = self._query(
                Market.is_open.is_(True),
                Market.opening_time <= current,
                Market.closing_time >= current,
            ).order_by(Market.name)
            markets = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(markets)} open markets at {current}")
            return Result.success(markets)
        except Exception as e:
            logger.error(f"Error getting open markets: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_by_city(self, city: str) -> Result[List[Market]]:
        if not city or not city.strip():
            return Result.failure(Error.invalid_input("City cannot be empty"))
        try:
            stmt = self._query(func.lower(Market.city) == city.strip().lower()).order_by(Market.name)
            markets = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(markets)} markets in {city}")
            return Result.success(markets)
        except Exception as e:
            logger.error(f"Error getting markets in {city}: {e}", exc_info=True)
            return Result.from_exception(e)
