from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from django.conf import settings
from django.core.cache import cache
from django.db.models import Avg, DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce, TruncMonth, TruncYear

from foodAnalytics.models import Order, OrderItem

DASHBOARD_CACHE_KEY = "dashboard:user"
TOP_LIMIT = 5
TWO_PLACES = Decimal("0.01")

MONEY_FIELD = DecimalField(max_digits=14, decimal_places=2)

INTERVALS = {
    "month": (TruncMonth, "%Y-%m"),
    "year": (TruncYear, "%Y"),
}


def _to_float(value) -> float:
    if value is None:
        return 0.0
    return float(value)


def _round2(value) -> float:
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def spending_over_time(user_id: int, interval: str) -> List[Dict[str, Any]]:
    """Total spend per calendar month or year, oldest period first."""
    try:
        trunc, fmt = INTERVALS[interval]
    except KeyError:
        raise ValueError(f"Unsupported interval {interval!r}; expected 'month' or 'year'") from None

    rows = (
        Order.objects.filter(user_id=user_id)
        .annotate(period=trunc("order_date"))
        .values("period")
        .annotate(total=Sum("total_amount"))
        .order_by("period")
    )
    return [
        {"period": row["period"].strftime(fmt), "totalSpending": _to_float(row["total"])}
        for row in rows
    ]


def top_restaurants(user_id: int, limit: int = TOP_LIMIT) -> List[Dict[str, Any]]:
    rows = (
        Order.objects.filter(user_id=user_id)
        .values("restaurant")
        .annotate(total=Coalesce(Sum("total_amount"), Value(Decimal("0.00")), output_field=MONEY_FIELD))
        .order_by("-total", "restaurant")[:limit]
    )
    return [
        {"restaurant": row["restaurant"], "totalSpending": _to_float(row["total"])}
        for row in rows
    ]


def spending_per_item(user_id: int) -> List[Dict[str, Any]]:
    """Sum of quantity x unit price per item name across the user's orders."""
    line_total = ExpressionWrapper(F("quantity") * F("price"), output_field=MONEY_FIELD)
    rows = (
        OrderItem.objects.filter(order__user_id=user_id)
        .values("item_name")
        .annotate(total=Sum(line_total, output_field=MONEY_FIELD))
        .order_by("-total", "item_name")
    )
    return [
        {"itemName": row["item_name"], "totalSpent": _to_float(row["total"])}
        for row in rows
    ]


def average_order_value(user_id: int) -> float:
    avg = Order.objects.filter(user_id=user_id).aggregate(avg=Avg("total_amount"))["avg"]
    if avg is None:
        return 0
    return float(avg)


def order_frequency(user_id: int) -> Dict[str, Any]:
    orders = Order.objects.filter(user_id=user_id)
    total_orders = orders.count()
    distinct_months = orders.datetimes("order_date", "month").count()
    return {
        "totalOrders": total_orders,
        "distinctMonths": distinct_months,
        "avgOrdersPerMonth": _round2(Decimal(total_orders) / Decimal(max(distinct_months, 1))),
    }


def most_frequent_items(user_id: int, limit: int = TOP_LIMIT) -> List[Dict[str, Any]]:
    rows = (
        OrderItem.objects.filter(order__user_id=user_id)
        .values("item_name")
        .annotate(total=Sum("quantity"))
        .order_by("-total", "item_name")[:limit]
    )
    return [
        {"itemName": row["item_name"], "totalQuantityOrdered": row["total"] or 0}
        for row in rows
    ]


def liked_orders(user_id: int) -> List[Dict[str, Any]]:
    orders = (
        Order.objects.filter(user_id=user_id, is_liked=True)
        .prefetch_related("items")
        .order_by("-order_date", "-id")
    )
    return [
        {**order.to_public_dict(), "items": [item.to_public_dict() for item in order.items.all()]}
        for order in orders
    ]


# ---------------------------------------------------------------------------
# Dashboard payload
# ---------------------------------------------------------------------------

def _dashboard_cache_key(user_id: int) -> str:
    return f"{DASHBOARD_CACHE_KEY}:{user_id}"


def build_dashboard(user_id: int) -> Dict[str, Any]:
    """Assemble every analytics block for ``user_id``, cached per user."""
    cache_key = _dashboard_cache_key(user_id)
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    payload = {
        "totalSpendingMonthly": spending_over_time(user_id, "month"),
        "totalSpendingYearly": spending_over_time(user_id, "year"),
        "topRestaurants": top_restaurants(user_id),
        "spendingPerItem": spending_per_item(user_id),
        "averageOrderValue": average_order_value(user_id),
        "orderFrequency": order_frequency(user_id),
        "mostFrequentItems": most_frequent_items(user_id),
        "likedOrders": liked_orders(user_id),
    }
    cache.set(cache_key, payload, getattr(settings, "DASHBOARD_CACHE_TIMEOUT", 300))
    return payload


def invalidate_dashboard(user_id: int) -> None:
    cache.delete(_dashboard_cache_key(user_id))
