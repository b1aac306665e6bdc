"""
Unit of Work

Owns one AsyncSession and coordinates the repositories that share it.
Repositories only stage changes; save_changes flushes them and, outside an
explicit transaction, commits.

Transaction states:

    NO_TRANSACTION --begin--> ACTIVE --commit--> (COMMITTED) NO_TRANSACTION
                                     --rollback--> (ROLLED_BACK) NO_TRANSACTION

The outcome of the last transaction is kept in `last_outcome`.

Usage:

    async with UnitOfWork(SessionLocal) as uow:
        async with uow.transaction():
            await uow.products.add(product)
            await uow.save_changes()
"""
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator, Callable, Dict, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.models.customer import Customer
from bakery.models.market import Market
from bakery.models.product import Product
from bakery.repositories.base import Repository
from bakery.repositories.customer_repository import CustomerRepository
from bakery.repositories.market_repository import MarketRepository
from bakery.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

# Specialised repository per model; others get the generic Repository
REPOSITORY_TYPES: Dict[type, Type[Repository]] = {
    Product: ProductRepository,
    Customer: CustomerRepository,
    Market: MarketRepository,
}


class TransactionError(RuntimeError):
    """Raised by UnitOfWork.transaction() when the transaction cannot begin or commit"""

    def __init__(self, error: Error):
        super().__init__(str(error))
        self.error = error


class TransactionState(str, Enum):
    NO_TRANSACTION = "NoTransaction"
    ACTIVE = "Active"
    COMMITTED = "Committed"
    ROLLED_BACK = "RolledBack"


class UnitOfWork:
    """
    Session owner for one business operation (one HTTP request)

    Args:
        session_factory: callable returning a new AsyncSession
            (an async_sessionmaker), or an AsyncSession to adopt
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        if isinstance(session_factory, AsyncSession):
            self.session = session_factory
        else:
            self.session = session_factory()
        self.state = TransactionState.NO_TRANSACTION
        self.last_outcome: Optional[TransactionState] = None
        self._repositories: Dict[type, Repository] = {}
        self._closed = False

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ======= REPOSITORIES =======

    def repository(self, model: type) -> Repository:
        """Repository for a model, created once per unit of work"""
        if model not in self._repositories:
            repository_type = REPOSITORY_TYPES.get(model)
            if repository_type is not None:
                self._repositories[model] = repository_type(self.session)
            else:
                self._repositories[model] = Repository(self.session, model)
        return self._repositories[model]

    @property
    def products(self) -> ProductRepository:
        return self.repository(Product)

    @property
    def customers(self) -> CustomerRepository:
        return self.repository(Customer)

    @property
    def markets(self) -> MarketRepository:
        return self.repository(Market)

    # ======= CHANGE TRACKING =======

    @property
    def pending_changes_count(self) -> int:
        return len(self.session.new) + len(self.session.dirty) + len(self.session.deleted)

    @property
    def has_pending_changes(self) -> bool:
        return self.pending_changes_count > 0

    @property
    def in_transaction(self) -> bool:
        return self.state == TransactionState.ACTIVE

    async def save_changes(self) -> Result[int]:
        """
        Write staged changes and return how many entities were written

        Outside an explicit transaction the write is committed immediately.
        """
        try:
            count = self.pending_changes_count
            await self.session.flush()
            if not self.in_transaction:
                await self.session.commit()
            logger.debug(f"Saved {count} changes")
            return Result.success(count)
        except Exception as e:
            logger.error(f"Error saving changes: {e}", exc_info=True)
            if not self.in_transaction:
                try:
                    await self.session.rollback()
                except Exception as rollback_error:
                    logger.error(f"Error during rollback: {rollback_error}", exc_info=True)
            return Result.from_exception(e)

    # ======= TRANSACTIONS =======

    async def begin_transaction(self) -> Result[None]:
        if self.in_transaction:
            logger.warning("Transaction already in progress")
            return Result.failure(Error.invalid_operation("Transaction already in progress"))
        # The session itself begins lazily on first use
        self.state = TransactionState.ACTIVE
        logger.debug("Transaction started")
        return Result.ok()

    async def commit_transaction(self) -> Result[None]:
        if not self.in_transaction:
            logger.warning("No active transaction to commit")
            return Result.failure(Error.invalid_operation("No active transaction to commit"))
        try:
            await self.session.commit()
            self._finish(TransactionState.COMMITTED)
            logger.debug("Transaction committed")
            return Result.ok()
        except Exception as e:
            logger.error(f"Error committing transaction: {e}", exc_info=True)
            await self._rollback_quietly()
            return Result.from_exception(e)

    async def rollback_transaction(self) -> Result[None]:
        if not self.in_transaction:
            logger.warning("No active transaction to rollback")
            return Result.failure(Error.invalid_operation("No active transaction to rollback"))
        try:
            await self.session.rollback()
            self._finish(TransactionState.ROLLED_BACK)
            logger.debug("Transaction rolled back")
            return Result.ok()
        except Exception as e:
            logger.error(f"Error rolling back transaction: {e}", exc_info=True)
            self._finish(TransactionState.ROLLED_BACK)
            return Result.from_exception(e)

    async def save_changes_with_transaction(self) -> Result[int]:
        """begin -> save_changes -> commit, rolled back if any step fails"""
        begun = await self.begin_transaction()
        if begun.is_failure:
            return begun.propagate()

        saved = await self.save_changes()
        if saved.is_failure:
            await self.rollback_transaction()
            return saved

        committed = await self.commit_transaction()
        if committed.is_failure:
            return committed.propagate()
        return saved

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["UnitOfWork"]:
        """
        Explicit transaction scope

        Commits on a clean exit. Any exception, cancellation included, rolls
        back and is re-raised. A failed begin or commit raises
        TransactionError.
        """
        begun = await self.begin_transaction()
        if begun.is_failure:
            raise TransactionError(begun.error)
        try:
            yield self
        except BaseException:
            if self.in_transaction:
                logger.warning("Rolling back transaction after error")
                await self._rollback_quietly()
            raise
        if self.in_transaction:
            committed = await self.commit_transaction()
            if committed.is_failure:
                raise TransactionError(committed.error)

    # ======= LIFECYCLE =======

    async def close(self) -> None:
        """Roll back an unfinished transaction and release the session"""
        if self._closed:
            return
        if self.in_transaction:
            logger.warning("Unit of work closed with an active transaction, rolling back")
            await self._rollback_quietly()
        await self.session.close()
        self._repositories.clear()
        self._closed = True

    def _finish(self, outcome: TransactionState) -> None:
        self.state = TransactionState.NO_TRANSACTION
        self.last_outcome = outcome

    async def _rollback_quietly(self) -> None:
        try:
            await self.session.rollback()
        except Exception as e:
            logger.error(f"Error during rollback: {e}", exc_info=True)
        finally:
            self._finish(TransactionState.ROLLED_BACK)

