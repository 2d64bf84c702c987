"""
_group_orders.py
----------------
Fold canonical rows into order drafts.

Order-history exports usually carry one line per item, so several rows make up
one logical order. Rows are bucketed by a grouping key (restaurant and local
calendar day by default) and each bucket becomes one ``OrderDraft`` whose total
is the sum of its rows' totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List

from django.utils import timezone

from importers._normalize_row import CanonicalRow


@dataclass(frozen=True)
class DraftItem:
    item_name: str
    quantity: int
    price: Decimal


@dataclass
class OrderDraft:
    user_id: int
    order_date: datetime
    restaurant: str
    total_amount: Decimal = Decimal("0.00")
    items: List[DraftItem] = field(default_factory=list)

    def add_row(self, row: CanonicalRow) -> None:
        self.total_amount += row.total_amount
        self.items.append(DraftItem(row.item_name, row.quantity, row.price))


def restaurant_date_key(row: CanonicalRow) -> str:
    day = timezone.localtime(row.order_date).date()
    return f"{row.restaurant}-{day.isoformat()}"


def order_ref_key(row: CanonicalRow) -> str:
    """Group by the export's own order reference, falling back to restaurant and day."""
    if row.order_ref:
        return f"{row.restaurant}#{row.order_ref}"
    return restaurant_date_key(row)


GROUPING_STRATEGIES: Dict[str, Callable[[CanonicalRow], str]] = {
    "restaurant-date": restaurant_date_key,
    "order-ref": order_ref_key,
}


def group_rows(
    rows: Iterable[CanonicalRow],
    user_id: int,
    key_func: Callable[[CanonicalRow], str] = restaurant_date_key,
) -> Dict[str, OrderDraft]:
    """Return ``key -> OrderDraft`` in first-seen order.

    The draft keeps the date and restaurant of the first row seen for its key.
    """
    drafts: Dict[str, OrderDraft] = {}
    for row in rows:
        key = key_func(row)
        draft = drafts.get(key)
        if draft is None:
            draft = OrderDraft(user_id=user_id, order_date=row.order_date, restaurant=row.restaurant)
            drafts[key] = draft
        draft.add_row(row)
    return drafts
