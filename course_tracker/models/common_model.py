# /course-tracker/course_tracker/models/common_model.py

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .. import config

T = TypeVar("T")


class PageParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    """One page of a filtered listing plus the pagination block the UI renders."""
    model_config = ConfigDict(frozen=True)

    items: List[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, items: List[T], total: int, params: PageParams) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=params.page,
            limit=params.limit,
            pages=math.ceil(total / params.limit) if total else 0,
        )
