"""
Paginated collections returned by backends.

A backend returns a :class:`Paginator` wrapping either a plain sequence or an
adapter; the controller then asks it for one :class:`Page` using the
configured page size and the requested page number.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Union


class ArrayAdapter:
    """Adapter over an in-memory sequence."""

    def __init__(self, items: Sequence[Any]):
        self._items = list(items)

    def count(self) -> int:
        return len(self._items)

    def get_items(self, offset: int, limit: int) -> List[Any]:
        return self._items[offset:offset + limit]


@dataclass(frozen=True)
class Page:
    """One page of a paginated collection."""

    items: List[Any]
    total: int
    page_size: int
    page: int

    @property
    def last_page(self) -> int:
        return last_page_for(self.total, self.page_size)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.last_page


def last_page_for(total: int, page_size: int) -> int:
    """Number of the last page; an empty collection still has one page."""
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, total: int, page_size: int) -> int:
    """Collapse an out-of-range page number onto the nearest valid page."""
    return min(max(page, 1), last_page_for(total, page_size))


class Paginator:
    """Lazily paginated collection.

    Accepts either a sequence or any object exposing ``count()`` and
    ``get_items(offset, limit)``.
    """

    def __init__(self, source: Union[Sequence[Any], Any]):
        if hasattr(source, "count") and hasattr(source, "get_items"):
            self.adapter = source
        else:
            self.adapter = ArrayAdapter(source)

    def __len__(self) -> int:
        return self.adapter.count()

    def page(self, page: int, page_size: int) -> Page:
        """Build the requested page, clamping out-of-range page numbers."""
        total = self.adapter.count()
        current = clamp_page(page, total, page_size)
        offset = (current - 1) * page_size
        items = list(self.adapter.get_items(offset, page_size))
        return Page(items=items, total=total, page_size=page_size, page=current)
