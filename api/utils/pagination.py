from __future__ import annotations

from typing import Tuple

from flask import request, abort

DEFAULT_SIZE = 20
MAX_SIZE = 100


def parse_pagination() -> Tuple[int, int]:
    """Read ?page (1-based) and ?size, clamped to 1..MAX_SIZE."""
    try:
        page = int(request.args.get("page", "1"))
        size = int(request.args.get("size", str(DEFAULT_SIZE)))
    except ValueError:
        abort(400, description="page and size must be integers")
    return max(page, 1), min(max(size, 1), MAX_SIZE)


def parse_int_arg(name: str, minimum: int | None = None, maximum: int | None = None) -> int | None:
    val = request.args.get(name)
    if val is None or val == "":
        return None
    try:
        number = int(val)
    except ValueError:
        abort(400, description=f"{name} must be an integer")
    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        abort(400, description=f"{name} is out of range")
    return number


def page_payload(page, dump) -> dict:
    """Serialize a services.pagination.Page; dump turns the item list into JSON data."""
    return {
        "items": dump(page.items),
        "page": page.page,
        "size": page.size,
        "total": page.total,
        "total_pages": page.total_pages,
    }
