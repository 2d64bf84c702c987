from datetime import datetime
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone

from foodAnalytics.utils import analytics
from tests.factories import OrderFactory, OrderItemFactory, UserFactory


def _at(year, month, day):
    return timezone.make_aware(datetime(year, month, day, 12, 0))


@pytest.fixture
def history(user):
    jan = OrderFactory(user=user, restaurant="A", order_date=_at(2023, 1, 10), total_amount=Decimal("10.00"))
    jan_b = OrderFactory(user=user, restaurant="B", order_date=_at(2023, 1, 20), total_amount=Decimal("30.00"))
    mar = OrderFactory(user=user, restaurant="A", order_date=_at(2024, 3, 5), total_amount=Decimal("5.50"))
    OrderItemFactory(order=jan, item_name="Coke", quantity=2, price=Decimal("2.50"))
    OrderItemFactory(order=jan, item_name="Fries", quantity=1, price=Decimal("5.00"))
    OrderItemFactory(order=jan_b, item_name="Pizza", quantity=1, price=Decimal("30.00"))
    OrderItemFactory(order=mar, item_name="Coke", quantity=3, price=Decimal("1.50"))
    return {"jan": jan, "jan_b": jan_b, "mar": mar}


@pytest.mark.django_db
def test_spending_over_time_by_month(user, history):
    assert analytics.spending_over_time(user.pk, "month") == [
        {"period": "2023-01", "totalSpending": 40.0},
        {"period": "2024-03", "totalSpending": 5.5},
    ]


@pytest.mark.django_db
def test_spending_over_time_by_year(user, history):
    assert analytics.spending_over_time(user.pk, "year") == [
        {"period": "2023", "totalSpending": 40.0},
        {"period": "2024", "totalSpending": 5.5},
    ]


@pytest.mark.django_db
def test_spending_over_time_rejects_unknown_interval(user):
    with pytest.raises(ValueError):
        analytics.spending_over_time(user.pk, "week")


@pytest.mark.django_db
def test_top_restaurants_orders_by_spend(user, history):
    assert analytics.top_restaurants(user.pk) == [
        {"restaurant": "B", "totalSpending": 30.0},
        {"restaurant": "A", "totalSpending": 15.5},
    ]
    assert len(analytics.top_restaurants(user.pk, limit=1)) == 1


@pytest.mark.django_db
def test_spending_per_item_multiplies_quantity_by_price(user, history):
    assert analytics.spending_per_item(user.pk) == [
        {"itemName": "Pizza", "totalSpent": 30.0},
        {"itemName": "Coke", "totalSpent": 9.5},
        {"itemName": "Fries", "totalSpent": 5.0},
    ]


@pytest.mark.django_db
def test_average_order_value(user, history):
    assert analytics.average_order_value(user.pk) == pytest.approx(45.5 / 3)


@pytest.mark.django_db
def test_average_order_value_is_not_rounded(user):
    for total in ("10.00", "10.01", "10.01"):
        OrderFactory(user=user, total_amount=Decimal(total))

    assert analytics.average_order_value(user.pk) == pytest.approx(30.02 / 3, abs=1e-9)


@pytest.mark.django_db
def test_average_order_value_is_zero_without_orders(user):
    assert analytics.average_order_value(user.pk) == 0


@pytest.mark.django_db
def test_order_frequency_counts_distinct_months(user, history):
    assert analytics.order_frequency(user.pk) == {
        "totalOrders": 3,
        "distinctMonths": 2,
        "avgOrdersPerMonth": 1.5,
    }


@pytest.mark.django_db
def test_order_frequency_without_orders(user):
    assert analytics.order_frequency(user.pk) == {
        "totalOrders": 0,
        "distinctMonths": 0,
        "avgOrdersPerMonth": 0.0,
    }


@pytest.mark.django_db
def test_most_frequent_items_sums_quantity(user, history):
    assert analytics.most_frequent_items(user.pk) == [
        {"itemName": "Coke", "totalQuantityOrdered": 5},
        {"itemName": "Fries", "totalQuantityOrdered": 1},
        {"itemName": "Pizza", "totalQuantityOrdered": 1},
    ]


@pytest.mark.django_db
def test_liked_orders_newest_first_with_items(user, history):
    for key in ("jan", "mar"):
        history[key].is_liked = True
        history[key].save()

    liked = analytics.liked_orders(user.pk)

    assert [order["id"] for order in liked] == [history["mar"].pk, history["jan"].pk]
    assert liked[0]["isLiked"] is True
    assert [item["itemName"] for item in liked[1]["items"]] == ["Coke", "Fries"]


@pytest.mark.django_db
def test_analytics_never_leak_other_users_orders(user, history):
    stranger = UserFactory()
    OrderFactory(user=stranger, restaurant="Secret", total_amount=Decimal("999.00"), is_liked=True)

    restaurants = [row["restaurant"] for row in analytics.top_restaurants(user.pk)]
    assert "Secret" not in restaurants
    assert analytics.order_frequency(user.pk)["totalOrders"] == 3
    assert analytics.liked_orders(user.pk) == []


@pytest.mark.django_db
def test_build_dashboard_is_cached_until_invalidated(user, history):
    first = analytics.build_dashboard(user.pk)
    assert set(first) == {
        "totalSpendingMonthly",
        "totalSpendingYearly",
        "topRestaurants",
        "spendingPerItem",
        "averageOrderValue",
        "orderFrequency",
        "mostFrequentItems",
        "likedOrders",
    }

    OrderFactory(user=user, restaurant="C", order_date=_at(2024, 4, 1), total_amount=Decimal("1.00"))
    assert analytics.build_dashboard(user.pk)["orderFrequency"]["totalOrders"] == 3

    analytics.invalidate_dashboard(user.pk)
    assert analytics.build_dashboard(user.pk)["orderFrequency"]["totalOrders"] == 4


@pytest.mark.django_db
def test_empty_dashboard(user):
    payload = analytics.build_dashboard(user.pk)

    assert payload["totalSpendingMonthly"] == []
    assert payload["topRestaurants"] == []
    assert payload["averageOrderValue"] == 0
    assert payload["likedOrders"] == []
    assert cache.get(f"{analytics.DASHBOARD_CACHE_KEY}:{user.pk}") == payload
