"""Paging primitives shared by listing endpoints."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 10


@dataclass
class PaginationParams:
    """Requested page number and size."""

    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        self.page_number = max(self.page_number, 1)
        self.page_size = min(max(self.page_size, 1), MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """Index of the first item on the requested page."""
        return (self.page_number - 1) * self.page_size


@dataclass
class UserParams(PaginationParams):
    """Member listing filter."""

    current_username: str | None = None
    gender: str | None = None
    min_age: int = 18
    max_age: int = 100
    order_by: str = "last_active"


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """A single page of items plus the counts needed to fetch the others."""

    items: list[T] = field(default_factory=list)
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0
    total_pages: int = 0

    @classmethod
    def create(
        cls, items: list[T], count: int, page_number: int, page_size: int
    ) -> "PagedResult[T]":
        """Build a page from already-sliced items and the total count."""
        return cls(
            items=items,
            current_page=page_number,
            page_size=page_size,
            total_count=count,
            total_pages=math.ceil(count / page_size) if page_size else 0,
        )

    @classmethod
    def from_sequence(
        cls, source: list[T], page_number: int, page_size: int
    ) -> "PagedResult[T]":
        """Slice an in-memory sequence into the requested page."""
        start = (page_number - 1) * page_size
        return cls.create(
            source[start : start + page_size], len(source), page_number, page_size
        )
