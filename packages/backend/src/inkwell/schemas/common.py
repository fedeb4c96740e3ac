"""Shared request/response pieces: pagination."""

import math

from pydantic import BaseModel, field_validator

MAX_PAGE_SIZE = 100


class PageParams(BaseModel):
    page: int = 1
    limit: int = 10

    @field_validator("page")
    @classmethod
    def check_page(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page must be a positive integer")
        return v

    @field_validator("limit")
    @classmethod
    def check_limit(cls, v: int) -> int:
        if not 1 <= v <= MAX_PAGE_SIZE:
            raise ValueError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        return v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, params: PageParams, total: int) -> "Pagination":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            pages=math.ceil(total / params.limit),
            has_next=params.page * params.limit < total,
            has_prev=params.page > 1,
        )
