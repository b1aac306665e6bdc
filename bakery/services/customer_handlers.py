"""
Customer Handlers
"""
import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.domain.customer import CustomerCreate, CustomerDto
from bakery.models.customer import Customer
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.instrumentation import logged_handler

logger = logging.getLogger(__name__)


class CreateCustomerHandler:
    """Register a customer; emails are unique, ignoring case"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def validate(self, command: CustomerCreate) -> Optional[Error]:
        if not command.first_name.strip():
            return Error.invalid_input("First name is required")
        if not command.last_name.strip():
            return Error.invalid_input("Last name is required")
        if not command.email.strip() or "@" not in command.email:
            return Error.invalid_input("A valid email is required")
        if command.date_of_birth >= date.today():
            return Error.invalid_input("Date of birth must be in the past")
        return None

    @logged_handler
    async def handle(self, command: CustomerCreate) -> Result[CustomerDto]:
        error = self.validate(command)
        if error:
            return Result.failure(error)

        email = command.email.strip().lower()
        taken = await self.uow.customers.any(func.lower(Customer.email) == email, include_deleted=True)
        if taken.is_failure:
            return taken.propagate()
        if taken.value:
            return Result.failure(Error.duplicated_entry(f"A customer with email {email} already exists"))

        customer = Customer(
            first_name=command.first_name.strip(),
            last_name=command.last_name.strip(),
            email=email,
            phone_number=command.phone_number,
            date_of_birth=command.date_of_birth,
            address=command.address,
            city=command.city,
            state=command.state,
            zip_code=command.zip_code,
            market_id=command.market_id,
            total_spent=command.total_spent,
            is_vip=command.is_vip,
        )

        async with self.uow.transaction():
            added = await self.uow.customers.add(customer)
            if added.is_failure:
                await self.uow.rollback_transaction()
                return added.propagate()
            saved = await self.uow.save_changes()
            if saved.is_failure:
                await self.uow.rollback_transaction()
                return saved.propagate()

        logger.info(f"Created customer {customer.id} ({customer.email})")
        return Result.success(CustomerDto.model_validate(customer))


class GetCustomerByIdHandler:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, customer_id: UUID) -> Result[CustomerDto]:
        found = await self.uow.customers.get_by_id(customer_id)
        if found.is_failure:
            return found.propagate()
        if found.value.is_deleted:
            return Result.failure(Error.not_found(f"Customer with ID {customer_id} not found"))
        return Result.success(CustomerDto.model_validate(found.value))


class GetVipCustomersHandler:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self) -> Result[List[CustomerDto]]:
        found = await self.uow.customers.get_vip_customers()
        if found.is_failure:
            return found.propagate()
        return Result.success([CustomerDto.model_validate(c) for c in found.value])
