from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.utils import timezone

from importers._group_orders import (
    GROUPING_STRATEGIES,
    group_rows,
    order_ref_key,
    restaurant_date_key,
)
from importers._normalize_row import CanonicalRow


def _canonical(restaurant="A", day=1, hour=12, total="10", item="Coke", quantity=1, price="10", order_ref=""):
    return CanonicalRow(
        order_date=timezone.make_aware(datetime(2024, 1, day, hour, 0), dt_timezone.utc),
        restaurant=restaurant,
        total_amount=Decimal(total),
        item_name=item,
        quantity=quantity,
        price=Decimal(price),
        order_ref=order_ref,
    )


def test_rows_sharing_restaurant_and_day_merge_into_one_draft():
    rows = [
        _canonical(total="10", item="Coke", price="10"),
        _canonical(total="15", item="Fries", price="15", hour=13),
    ]

    with timezone.override("UTC"):
        drafts = group_rows(rows, user_id=7)

    assert list(drafts) == ["A-2024-01-01"]
    draft = drafts["A-2024-01-01"]
    assert draft.user_id == 7
    assert draft.total_amount == Decimal("25")
    assert [item.item_name for item in draft.items] == ["Coke", "Fries"]
    assert draft.order_date == rows[0].order_date


def test_different_days_or_restaurants_stay_separate():
    rows = [
        _canonical(restaurant="A", day=1),
        _canonical(restaurant="B", day=1),
        _canonical(restaurant="A", day=2),
    ]

    with timezone.override("UTC"):
        drafts = group_rows(rows, user_id=1)

    assert list(drafts) == ["A-2024-01-01", "B-2024-01-01", "A-2024-01-02"]


def test_grouping_day_follows_current_timezone():
    late_evening = _canonical(day=1, hour=23)

    with timezone.override("UTC"):
        assert restaurant_date_key(late_evening) == "A-2024-01-01"
    with timezone.override("Asia/Tokyo"):
        assert restaurant_date_key(late_evening) == "A-2024-01-02"


def test_empty_input_yields_no_drafts():
    assert group_rows(iter([]), user_id=1) == {}


def test_group_rows_consumes_a_generator():
    rows = (_canonical(item=f"Item {n}") for n in range(3))
    drafts = group_rows(rows, user_id=1)
    assert len(drafts["A-2024-01-01"].items) == 3


def test_order_ref_strategy_splits_same_day_orders():
    rows = [
        _canonical(order_ref="1001", item="Coke"),
        _canonical(order_ref="1002", item="Tea"),
        _canonical(order_ref="1001", item="Fries"),
        _canonical(order_ref="", item="Water"),
    ]

    with timezone.override("UTC"):
        drafts = group_rows(rows, user_id=1, key_func=order_ref_key)

    assert set(drafts) == {"A#1001", "A#1002", "A-2024-01-01"}
    assert [item.item_name for item in drafts["A#1001"].items] == ["Coke", "Fries"]


def test_grouping_strategies_are_registered_by_name():
    assert GROUPING_STRATEGIES["restaurant-date"] is restaurant_date_key
    assert GROUPING_STRATEGIES["order-ref"] is order_ref_key
