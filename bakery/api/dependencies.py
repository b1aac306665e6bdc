"""
FastAPI dependencies
"""
from typing import AsyncIterator

from bakery.core.database import SessionLocal
from bakery.repositories.unit_of_work import UnitOfWork


async def get_unit_of_work() -> AsyncIterator[UnitOfWork]:
    """
    One UnitOfWork (and session) per request

    Closing it rolls back anything left uncommitted.
    """
    async with UnitOfWork(SessionLocal) as uow:
        yield uow
