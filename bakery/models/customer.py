"""
Customer table
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Numeric, String, Uuid

from bakery.core.database import Base
from bakery.models.base import EntityMixin, SoftDeletable, as_utc, utcnow

# (minimum total spent, discount %) from the highest tier down
VIP_DISCOUNT_TIERS = (
    (Decimal("1000"), Decimal("15")),
    (Decimal("500"), Decimal("10")),
    (Decimal("250"), Decimal("5")),
)

REGULAR_CUSTOMER_WINDOW = timedelta(days=30)
REGULAR_CUSTOMER_MIN_SPENT = Decimal("100")


class Customer(EntityMixin, SoftDeletable, Base):
    """
    Bakery customers
    """
    __tablename__ = "customers"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone_number = Column(String(50))
    date_of_birth = Column(Date, nullable=False)
    address = Column(String(255), nullable=False, default="")
    city = Column(String(100), nullable=False, default="")
    state = Column(String(100), nullable=False, default="")
    zip_code = Column(String(20), nullable=False, default="")

    market_id = Column(Uuid, ForeignKey("markets.id"), index=True)
    last_order_date = Column(DateTime(timezone=True))
    total_spent = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    is_vip = Column(Boolean, nullable=False, default=False, index=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("total_spent", Decimal("0"))
        kwargs.setdefault("is_vip", False)
        super().__init__(**kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def age(self) -> int:
        today = date.today()
        years = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            years -= 1
        return years

    @property
    def vip_discount_percentage(self) -> Decimal:
        """Discount tier by total spent; non-VIP customers get nothing"""
        if not self.is_vip:
            return Decimal("0")
        spent = Decimal(self.total_spent or 0)
        for threshold, discount in VIP_DISCOUNT_TIERS:
            if spent >= threshold:
                return discount
        return Decimal("0")

    def is_regular_customer(self, now: Optional[datetime] = None) -> bool:
        """Ordered within the last 30 days and spent more than 100"""
        if self.last_order_date is None:
            return False
        now = now or utcnow()
        recent = now - as_utc(self.last_order_date) <= REGULAR_CUSTOMER_WINDOW
        return recent and Decimal(self.total_spent or 0) > REGULAR_CUSTOMER_MIN_SPENT

    def is_valid(self) -> bool:
        return (
            bool(self.first_name and self.first_name.strip())
            and bool(self.last_name and self.last_name.strip())
            and bool(self.email and self.email.strip())
            and self.date_of_birth is not None
            and self.date_of_birth < date.today()
        )

    def __repr__(self) -> str:
        return f"<Customer {self.id} {self.email!r}>"
