"""
_normalize_row.py
-----------------
Turn one raw order-history CSV record into a ``CanonicalRow``.

Exports come from different delivery apps, so every field is looked up through
an ordered list of header aliases. Headers are matched exactly first and then
case/whitespace-insensitively; a blank value falls through to the next alias.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

FIELD_ALIASES = {
    "order_date": ("Order Date", "Date", "Order Time", "Ordered At", "Placed At"),
    "restaurant": ("Restaurant", "Restaurant Name", "Outlet", "Store", "Merchant"),
    "total_amount": ("Total Amount", "Order Total", "Total", "Amount", "Grand Total"),
    "item_name": ("Item Name", "Item", "Dish", "Product"),
    "quantity": ("Quantity", "Qty", "Item Quantity"),
    "price": ("Item Price", "Price", "Unit Price"),
    "order_ref": ("Order ID", "Order Id", "Order Number", "Order No"),
}

DEFAULT_RESTAURANT = "Unknown Restaurant"
DEFAULT_ITEM = "Unknown Item"
MAX_TEXT_LENGTH = 255

CENTS = Decimal("0.01")
# Largest value a Decimal(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")
MAX_QUANTITY = 2147483647

_NON_NUMERIC = re.compile(r"[^0-9.\-]")

DATE_FORMATS = [
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y %I:%M %p",
    "%m/%d/%y %H:%M",
    "%m/%d/%y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%d %b %Y %H:%M",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y %I:%M %p",
    "%b %d, %Y",
    "%B %d, %Y %I:%M %p",
    "%B %d, %Y",
]


class RowRejected(ValueError):
    """Raised when a CSV record cannot become an order line."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


@dataclass(frozen=True)
class CanonicalRow:
    order_date: datetime
    restaurant: str
    total_amount: Decimal
    item_name: str
    quantity: int
    price: Decimal
    order_ref: str = ""


def _fold_header(header) -> str:
    return " ".join(str(header).split()).lower()


def _present(value) -> bool:
    return isinstance(value, str) and value.strip() != ""


def resolve_field(row: Mapping, field: str) -> Optional[str]:
    """Return the first non-blank value among ``field``'s aliases, or None."""
    aliases = FIELD_ALIASES[field]
    for alias in aliases:
        value = row.get(alias)
        if _present(value):
            return value.strip()

    folded = {}
    for header, value in row.items():
        # DictReader stores surplus cells under a None key.
        if header is None:
            continue
        folded.setdefault(_fold_header(header), value)
    for alias in aliases:
        value = folded.get(_fold_header(alias))
        if _present(value):
            return value.strip()
    return None


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """Parse a currency string such as ``"$1,234.50"``; None when not a number."""
    if value is None:
        return None
    clean = _NON_NUMERIC.sub("", value)
    if not clean:
        return None
    try:
        return Decimal(clean).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def parse_quantity(value: Optional[str]) -> int:
    amount = parse_amount(value)
    if amount is None:
        return 1
    quantity = int(amount.to_integral_value(rounding=ROUND_DOWN))
    return quantity if quantity >= 1 else 1


def parse_order_date(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO 8601 first, then the known export formats; returns an aware datetime."""
    if not value:
        return None
    value = value.strip()

    parsed = None
    try:
        parsed = parse_datetime(value)
    except ValueError:
        parsed = None

    if parsed is None:
        try:
            day = parse_date(value)
        except ValueError:
            day = None
        if day is not None:
            parsed = datetime.combine(day, time.min)

    if parsed is None:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def normalize_row(row: Mapping) -> CanonicalRow:
    """Map a raw CSV record onto a ``CanonicalRow`` or raise ``RowRejected``."""
    raw_date = resolve_field(row, "order_date")
    order_date = parse_order_date(raw_date)
    if order_date is None:
        raise RowRejected(f"invalid order date {raw_date!r}")

    restaurant = (resolve_field(row, "restaurant") or DEFAULT_RESTAURANT)[:MAX_TEXT_LENGTH]
    if not restaurant:
        raise RowRejected("missing restaurant")

    raw_total = resolve_field(row, "total_amount")
    total_amount = parse_amount(raw_total) if raw_total is not None else Decimal("0.00")
    if total_amount is None:
        raise RowRejected(f"total {raw_total!r} is not a number")
    if total_amount < 0:
        raise RowRejected(f"negative total {total_amount}")
    if total_amount > MAX_AMOUNT:
        raise RowRejected(f"total {total_amount} out of range")

    price = parse_amount(resolve_field(row, "price"))
    if price is None or price < 0:
        price = Decimal("0.00")
    if price > MAX_AMOUNT:
        raise RowRejected(f"price {price} out of range")

    quantity = parse_quantity(resolve_field(row, "quantity"))
    if quantity > MAX_QUANTITY:
        raise RowRejected(f"quantity {quantity} out of range")

    item_name = (resolve_field(row, "item_name") or DEFAULT_ITEM)[:MAX_TEXT_LENGTH]

    return CanonicalRow(
        order_date=order_date,
        restaurant=restaurant,
        total_amount=total_amount,
        item_name=item_name,
        quantity=quantity,
        price=price,
        order_ref=resolve_field(row, "order_ref") or "",
    )
