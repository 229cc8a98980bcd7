"""Shared pieces of the filter / sort / paginate listings."""
from dataclasses import dataclass, field


@dataclass
class Page:
    rows: list
    total: int
    page: int
    per_page: int
    total_pages: int
    extras: dict = field(default_factory=dict)

    @property
    def has_prev(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.total_pages


def parse_page(value) -> int:
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def paginate(query, page, per_page) -> Page:
    """Run ``query`` for one page; ``total`` counts every matching row.

    An empty result has ``total_pages == 0``.
    """
    result = query.paginate(page=page, per_page=per_page, error_out=False, count=True)
    return Page(
        rows=list(result.items),
        total=result.total or 0,
        page=page,
        per_page=per_page,
        total_pages=result.pages,
    )


def contains(column, value):
    """Case-insensitive substring predicate; the value is always bound."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def pick_order(orders, key, default):
    return orders.get(key) or orders[default]
