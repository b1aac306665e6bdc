"""
Market table (points of sale)
"""
from datetime import datetime, time
from typing import Optional

from sqlalchemy import Boolean, Column, String, Time

from bakery.core.database import Base
from bakery.models.base import EntityMixin, SoftDeletable


class Market(EntityMixin, SoftDeletable, Base):
    """
    Shops where products are sold
    """
    __tablename__ = "markets"

    name = Column(String(200), nullable=False, index=True)
    address = Column(String(255), nullable=False, default="")
    city = Column(String(100), nullable=False, default="", index=True)
    state = Column(String(100), nullable=False, default="")
    zip_code = Column(String(20), nullable=False, default="")
    phone_number = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    opening_time = Column(Time, nullable=False, default=time(7, 0))
    closing_time = Column(Time, nullable=False, default=time(19, 0))
    is_open = Column(Boolean, nullable=False, default=True, index=True)

    def __init__(self, **kwargs):
        for field in ("address", "city", "state", "zip_code", "phone_number", "email"):
            kwargs.setdefault(field, "")
        kwargs.setdefault("opening_time", time(7, 0))
        kwargs.setdefault("closing_time", time(19, 0))
        kwargs.setdefault("is_open", True)
        super().__init__(**kwargs)

    def is_currently_open(self, now: Optional[datetime] = None) -> bool:
        """Open flag set and the local time of day within [opening, closing]"""
        if not self.is_open:
            return False
        current = (now or datetime.now()).time()
        return self.opening_time <= current <= self.closing_time

    @property
    def daily_opening_hours(self) -> float:
        opening = self.opening_time.hour * 3600 + self.opening_time.minute * 60 + self.opening_time.second
        closing = self.closing_time.hour * 3600 + self.closing_time.minute * 60 + self.closing_time.second
        return (closing - opening) / 3600

    def __repr__(self) -> str:
        return f"<Market {self.id} {self.name!r}>"
