from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone

from foodAnalytics.models import ImportLog, Order, OrderItem


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()
        django_get_or_create = ("username",)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.LazyAttribute(lambda obj: obj.email)
    first_name = factory.Sequence(lambda n: f"User {n}")
    password = factory.django.Password("secret123")


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    user = factory.SubFactory(UserFactory)
    order_date = factory.LazyFunction(timezone.now)
    restaurant = factory.Sequence(lambda n: f"Restaurant {n}")
    total_amount = Decimal("10.00")
    is_liked = False


class OrderItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    line_number = factory.Sequence(lambda n: n + 1)
    item_name = factory.Sequence(lambda n: f"Item {n}")
    quantity = 1
    price = Decimal("5.00")


class ImportLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ImportLog

    user = factory.SubFactory(UserFactory)
    filename = factory.Sequence(lambda n: f"orders-{n}.csv")
    run_type = "live"
    status = "success"
