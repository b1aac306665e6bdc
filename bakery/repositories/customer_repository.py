"""
Customer Repository
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.models.base import utcnow
from bakery.models.customer import REGULAR_CUSTOMER_MIN_SPENT, REGULAR_CUSTOMER_WINDOW, Customer
from bakery.repositories.base import Repository

logger = logging.getLogger(__name__)


class CustomerRepository(Repository[Customer, UUID]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Customer)

    async def get_by_market(self, market_id: UUID) -> Result[List[Customer]]:
        try:
            stmt = self._query(Customer.market_id == market_id).order_by(Customer.last_name, Customer.first_name)
            customers = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(customers)} customers for market {market_id}")
            return Result.success(customers)
        except Exception as e:
            logger.error(f"Error getting customers for market {market_id}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_by_email(self, email: str) -> Result[Customer]:
        """Exact match, ignoring case"""
        if not email or not email.strip():
            return Result.failure(Error.invalid_input("Email cannot be empty"))
        try:
            stmt = self._query(func.lower(Customer.email) == email.strip().lower())
            customer = (await self.session.scalars(stmt)).first()
            if customer is None:
                logger.warning(f"Customer with email {email} not found")
                return Result.failure(Error.not_found(f"Customer with email {email} not found"))
            return Result.success(customer)
        except Exception as e:
            logger.error(f"Error getting customer by email {email}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_vip_customers(self) -> Result[List[Customer]]:
        """VIP customers, biggest spenders first"""
        try:
            stmt = self._query(Customer.is_vip.is_(True)).order_by(Customer.total_spent.desc(), Customer.id)
            customers = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(customers)} VIP customers")
            return Result.success(customers)
        except Exception as e:
            logger.error(f"Error getting VIP customers: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_regular_customers(self, now: Optional[datetime] = None) -> Result[List[Customer]]:
        """Customers who ordered in the last 30 days and spent more than 100"""
        try:
            since = (now or utcnow()) - REGULAR_CUSTOMER_WINDOW
            stmt = self._query(
                Customer.last_order_date.is_not(None),
                Customer.last_order_date >= since,
                Customer.total_spent > REGULAR_CUSTOMER_MIN_SPENT,
            ).order_by(Customer.last_order_date.desc())
            customers = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(customers)} regular customers")
            return Result.success(customers)
        except Exception as e:
            logger.error(f"Error getting regular customers: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_top_spenders(self, take: int = 10) -> Result[List[Customer]]:
        if take < 1:
            return Result.failure(Error.invalid_input("Number of customers must be at least 1"))
        try:
            stmt = self._query().order_by(Customer.total_spent.desc(), Customer.id).limit(take)
            customers = list(await self.session.scalars(stmt))
            return Result.success(customers)
        except Exception as e:
            logger.error(f"Error getting top {take} spenders: {e}", exc_info=True)
            return Result.from_exception(e)
