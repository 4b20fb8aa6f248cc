import math
from typing import Any, Dict, List, Sequence, Tuple

MAX_PAGE_SIZE = 50


def page_window(page: int, limit: int) -> Tuple[int, int, int]:
    """Clamp page/limit and return (page, limit, offset)."""
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    return page, limit, (page - 1) * limit


def paginate(items: Sequence[Any], page: int, limit: int) -> Tuple[List[Any], Dict[str, Any]]:
    """Slice an already-sorted list and describe the page."""
    page, limit, offset = page_window(page, limit)
    total = len(items)
    total_pages = math.ceil(total / limit)

    return list(items[offset:offset + limit]), {
        "current_page": page,
        "page_size": limit,
        "total_items": total,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }
