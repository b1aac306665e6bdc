"""
Generic Repository - Data Access Layer

CRUD and predicate queries over any ORM entity. Every method returns a
Result; backend exceptions are logged and converted with
Error.from_exception, so nothing raised by SQLAlchemy escapes this layer.
Cancellation (asyncio.CancelledError) is not an Exception and propagates.

Write operations only stage work on the session. Flushing and committing is
the job of the UnitOfWork.

Soft-deleted rows are hidden from get_all/find/first_or_default/any/count
unless include_deleted is passed. get_by_id looks rows up by key and sees
them regardless of the flag.
"""
import logging
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from bakery.core.errors import Error, ErrorKind
from bakery.core.result import Result
from bakery.models.base import SoftDeletable

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
KeyT = TypeVar("KeyT")


class Repository(Generic[ModelT, KeyT]):
    """
    Repository for one entity type

    Args:
        session: AsyncSession owned by the caller's unit of work
        model: ORM class handled by this repository
    """

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        if session is None:
            raise ValueError("session is required")
        self.session = session
        self.model = model
        self.entity_name = model.__name__
        # Decided once per repository, from the class
        self.supports_soft_delete = issubclass(model, SoftDeletable)
        self._key_attr = sa_inspect(model).primary_key[0].key

    # ======= HELPERS =======

    def _query(self, *criteria: Any, include_deleted: bool = False) -> Select:
        stmt = select(self.model)
        if self.supports_soft_delete and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt

    def _staged(self, key: KeyT) -> Optional[ModelT]:
        """Entity added in this unit of work but not flushed yet"""
        for obj in self.session.new:
            if isinstance(obj, self.model) and getattr(obj, self._key_attr) == key:
                return obj
        return None

    async def _find(self, key: KeyT) -> Optional[ModelT]:
        entity = self._staged(key)
        if entity is None:
            entity = await self.session.get(self.model, key)
        if entity is not None and entity in self.session.deleted:
            return None
        return entity

    def _not_found(self, key: KeyT) -> Error:
        return Error.not_found(f"Entity {self.entity_name} with ID {key} not found")

    def _check_entity(self, entity: Any) -> Optional[Error]:
        if entity is None:
            return Error.of(ErrorKind.ARGUMENT_NULL, f"{self.entity_name} entity is required")
        if not isinstance(entity, self.model):
            return Error.of(
                ErrorKind.ARGUMENT_ERROR,
                f"Expected {self.entity_name}, got {type(entity).__name__}",
            )
        return None

    # ======= QUERY METHODS =======

    async def get_by_id(self, key: KeyT) -> Result[ModelT]:
        try:
            logger.debug(f"Getting {self.entity_name} with ID {key}")
            entity = await self._find(key)
            if entity is None:
                logger.warning(f"{self.entity_name} with ID {key} not found")
                return Result.failure(self._not_found(key))
            return Result.success(entity)
        except Exception as e:
            logger.error(f"Error getting {self.entity_name} with ID {key}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_all(self, include_deleted: bool = False) -> Result[List[ModelT]]:
        try:
            logger.debug(f"Getting all {self.entity_name} entities")
            entities = list(await self.session.scalars(self._query(include_deleted=include_deleted)))
            logger.debug(f"Retrieved {len(entities)} {self.entity_name} entities")
            return Result.success(entities)
        except Exception as e:
            logger.error(f"Error getting all {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    async def find(self, *criteria: Any, include_deleted: bool = False) -> Result[List[ModelT]]:
        """
        Entities matching every criterion

        Criteria are SQLAlchemy boolean expressions, e.g.
        repo.find(Product.price > 5, Product.is_available.is_(True))
        """
        try:
            logger.debug(f"Finding {self.entity_name} entities with predicate")
            stmt = self._query(*criteria, include_deleted=include_deleted)
            entities = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(entities)} {self.entity_name} entities")
            return Result.success(entities)
        except Exception as e:
            logger.error(f"Error finding {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    async def first_or_default(self, *criteria: Any, include_deleted: bool = False) -> Result[ModelT]:
        try:
            stmt = self._query(*criteria, include_deleted=include_deleted).limit(1)
            entity = (await self.session.scalars(stmt)).first()
            if entity is None:
                logger.warning(f"No {self.entity_name} found with the given predicate")
                return Result.failure(
                    Error.not_found(f"No entity of type {self.entity_name} found with the given predicate")
                )
            return Result.success(entity)
        except Exception as e:
            logger.error(f"Error getting first {self.entity_name}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def any(self, *criteria: Any, include_deleted: bool = False) -> Result[bool]:
        try:
            key_column = getattr(self.model, self._key_attr)
            stmt = self._query(*criteria, include_deleted=include_deleted).with_only_columns(key_column).limit(1)
            exists = (await self.session.scalar(stmt)) is not None
            logger.debug(f"{self.entity_name} existence check: {exists}")
            return Result.success(exists)
        except Exception as e:
            logger.error(f"Error checking {self.entity_name} existence: {e}", exc_info=True)
            return Result.from_exception(e)

    async def count(self, *criteria: Any, include_deleted: bool = False) -> Result[int]:
        try:
            filtered = self._query(*criteria, include_deleted=include_deleted).subquery()
            total = await self.session.scalar(select(func.count()).select_from(filtered))
            logger.debug(f"{self.entity_name} count: {total}")
            return Result.success(int(total or 0))
        except Exception as e:
            logger.error(f"Error counting {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    # ======= COMMAND METHODS =======

    async def add(self, entity: ModelT) -> Result[ModelT]:
        error = self._check_entity(entity)
        if error:
            return Result.failure(error)
        try:
            self.session.add(entity)
            logger.debug(f"Staged new {self.entity_name} {getattr(entity, self._key_attr)}")
            return Result.success(entity)
        except Exception as e:
            logger.error(f"Error adding {self.entity_name}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def add_range(self, entities: Iterable[ModelT]) -> Result[List[ModelT]]:
        entity_list = list(entities)
        for entity in entity_list:
            error = self._check_entity(entity)
            if error:
                return Result.failure(error)
        try:
            self.session.add_all(entity_list)
            logger.debug(f"Staged {len(entity_list)} new {self.entity_name} entities")
            return Result.success(entity_list)
        except Exception as e:
            logger.error(f"Error adding {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    async def update(self, entity: ModelT) -> Result[ModelT]:
        """
        Stage the entity's state as the new state of the row with its key

        Callers confirm the row exists first (see UpdateProductHandler);
        merging an unknown key stages an insert.
        """
        error = self._check_entity(entity)
        if error:
            return Result.failure(error)
        try:
            merged = await self.session.merge(entity)
            logger.debug(f"Staged update of {self.entity_name} {getattr(merged, self._key_attr)}")
            return Result.success(merged)
        except Exception as e:
            logger.error(f"Error updating {self.entity_name}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def update_range(self, entities: Iterable[ModelT]) -> Result[List[ModelT]]:
        entity_list = list(entities)
        for entity in entity_list:
            error = self._check_entity(entity)
            if error:
                return Result.failure(error)
        try:
            merged = [await self.session.merge(entity) for entity in entity_list]
            logger.debug(f"Staged update of {len(merged)} {self.entity_name} entities")
            return Result.success(merged)
        except Exception as e:
            logger.error(f"Error updating {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    async def _stage_delete(self, entity: ModelT) -> None:
        if entity in self.session.new:
            # Never reached the database: just forget it
            self.session.expunge(entity)
        else:
            await self.session.delete(entity)

    async def remove(self, entity: ModelT) -> Result[None]:
        error = self._check_entity(entity)
        if error:
            return Result.failure(error)
        try:
            await self._stage_delete(entity)
            logger.debug(f"Staged removal of {self.entity_name} {getattr(entity, self._key_attr)}")
            return Result.ok()
        except Exception as e:
            logger.error(f"Error removing {self.entity_name}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def remove_by_id(self, key: KeyT) -> Result[None]:
        try:
            logger.debug(f"Removing {self.entity_name} with ID {key}")
            entity = await self._find(key)
            if entity is None:
                logger.warning(f"Cannot remove {self.entity_name} with ID {key} - not found")
                return Result.failure(self._not_found(key))
            await self._stage_delete(entity)
            return Result.ok()
        except Exception as e:
            logger.error(f"Error removing {self.entity_name} with ID {key}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def remove_range(self, entities: Iterable[ModelT]) -> Result[None]:
        entity_list = list(entities)
        for entity in entity_list:
            error = self._check_entity(entity)
            if error:
                return Result.failure(error)
        try:
            for entity in entity_list:
                await self._stage_delete(entity)
            logger.debug(f"Staged removal of {len(entity_list)} {self.entity_name} entities")
            return Result.ok()
        except Exception as e:
            logger.error(f"Error removing {self.entity_name} entities: {e}", exc_info=True)
            return Result.from_exception(e)

    # ======= SOFT DELETE =======

    async def soft_delete(self, key: KeyT) -> Result[None]:
        """Flag the row as deleted and stamp updated_at"""
        if not self.supports_soft_delete:
            logger.warning(f"{self.entity_name} does not support soft delete")
            return Result.failure(Error.not_supported(f"Entity {self.entity_name} does not support soft delete"))
        try:
            logger.debug(f"Soft deleting {self.entity_name} with ID {key}")
            entity = await self._find(key)
            if entity is None:
                logger.warning(f"Cannot soft delete {self.entity_name} with ID {key} - not found")
                return Result.failure(self._not_found(key))
            entity.mark_deleted()
            return Result.ok()
        except Exception as e:
            logger.error(f"Error soft deleting {self.entity_name} with ID {key}: {e}", exc_info=True)
            return Result.from_exception(e)
