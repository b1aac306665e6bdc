"""
Paging models
"""
import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class PageRequest(BaseModel):
    """1-based page number and page size; range checks happen in the query layer"""
    page_number: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


class PagedList(BaseModel, Generic[T]):
    items: List[T]
    total_count: int
    page_number: int
    page_size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @classmethod
    def empty(cls, page_number: int = 1, page_size: int = 10) -> "PagedList[T]":
        return cls(items=[], total_count=0, page_number=page_number, page_size=page_size)
