import math
from dataclasses import dataclass
from fastapi import Query


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        """currentPage / totalPages / hasMore block appended to list responses"""
        total_pages = math.ceil(total / self.limit) if self.limit else 0
        return {
            "currentPage": self.page,
            "totalPages": total_pages,
            "hasMore": self.page < total_pages,
        }


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)
