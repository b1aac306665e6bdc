"""
Money amounts

Kept as Decimal in Python; written as JSON numbers on the wire.
"""
from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
