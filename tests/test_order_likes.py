from decimal import Decimal

import pytest

from foodAnalytics.exceptions import NotFoundError, OrderNotFound
from foodAnalytics.models import Order
from foodAnalytics.utils import analytics
from foodAnalytics.utils.order_likes import set_order_like
from tests.factories import OrderFactory, UserFactory


@pytest.mark.django_db
def test_like_and_unlike_own_order(user):
    order = OrderFactory(user=user, restaurant="A", total_amount=Decimal("12.50"))

    liked = set_order_like(order.pk, user.pk, True)

    assert liked["id"] == order.pk
    assert liked["restaurant"] == "A"
    assert liked["totalAmount"] == 12.5
    assert liked["isLiked"] is True
    assert Order.objects.get(pk=order.pk).is_liked is True

    unliked = set_order_like(order.pk, user.pk, False)
    assert unliked["isLiked"] is False


@pytest.mark.django_db
def test_liking_someone_elses_order_is_not_found(user):
    order = OrderFactory(user=UserFactory())

    with pytest.raises(OrderNotFound) as excinfo:
        set_order_like(order.pk, user.pk, True)

    assert isinstance(excinfo.value, NotFoundError)
    assert excinfo.value.message == "Order not found or not owned by user."
    order.refresh_from_db()
    assert order.is_liked is False


@pytest.mark.django_db
def test_liking_missing_order_is_not_found(user):
    with pytest.raises(OrderNotFound):
        set_order_like(999999, user.pk, True)


@pytest.mark.django_db
def test_like_change_refreshes_cached_dashboard(user):
    order = OrderFactory(user=user)
    assert analytics.build_dashboard(user.pk)["likedOrders"] == []

    set_order_like(order.pk, user.pk, True)

    liked = analytics.build_dashboard(user.pk)["likedOrders"]
    assert [entry["id"] for entry in liked] == [order.pk]
