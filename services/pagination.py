from __future__ import annotations

import math
from typing import NamedTuple, List, Any


class Page(NamedTuple):
    items: List[Any]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0


def paginate(query, page: int, size: int) -> Page:
    """Apply offset/limit to a query; page is 1-based."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * size).limit(size).all()
    return Page(items=items, page=page, size=size, total=total)
