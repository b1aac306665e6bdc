"""
Customers API Endpoints
"""
from uuid import UUID

from fastapi import APIRouter, Depends

from bakery.api.dependencies import get_unit_of_work
from bakery.api.responses import success, unwrap
from bakery.domain.customer import CustomerCreate
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.customer_handlers import CreateCustomerHandler, GetCustomerByIdHandler, GetVipCustomersHandler

router = APIRouter()


@router.post("", status_code=201)
async def create_customer(customer: CustomerCreate, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await CreateCustomerHandler(uow).handle(customer)
    return success(unwrap(result))


@router.get("/vip")
async def get_vip_customers(uow: UnitOfWork = Depends(get_unit_of_work)):
    """VIP customers with their discount tier, biggest spenders first"""
    result = await GetVipCustomersHandler(uow).handle()
    return success(unwrap(result))


@router.get("/{customer_id}")
async def get_customer(customer_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetCustomerByIdHandler(uow).handle(customer_id)
    return success(unwrap(result))
