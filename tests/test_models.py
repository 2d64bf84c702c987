from datetime import datetime
from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.utils import timezone

from tests.factories import ImportLogFactory, OrderFactory, OrderItemFactory


@pytest.mark.django_db
def test_order_public_dict():
    order = OrderFactory(
        restaurant="Pho 1",
        order_date=timezone.make_aware(datetime(2024, 5, 6, 19, 30)),
        total_amount=Decimal("18.40"),
    )

    assert order.to_public_dict() == {
        "id": order.pk,
        "restaurant": "Pho 1",
        "orderDate": order.order_date.isoformat(),
        "totalAmount": 18.4,
        "isLiked": False,
    }


@pytest.mark.django_db
def test_order_item_line_total():
    item = OrderItemFactory(quantity=3, price=Decimal("2.50"))
    assert item.line_total == Decimal("7.50")


@pytest.mark.django_db
def test_order_item_line_is_unique_per_order():
    order = OrderFactory()
    OrderItemFactory(order=order, line_number=1)

    with pytest.raises(IntegrityError):
        OrderItemFactory(order=order, line_number=1)


@pytest.mark.django_db
def test_import_log_str_mentions_file_and_mode():
    log = ImportLogFactory(filename="orders.csv", run_type="dry-run")
    assert str(log).startswith("orders.csv Dry Run @ ")
