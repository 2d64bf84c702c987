import logging

from foodAnalytics.exceptions import OrderNotFound
from foodAnalytics.models import Order
from foodAnalytics.utils.analytics import invalidate_dashboard

logger = logging.getLogger(__name__)


def set_order_like(order_id: int, user_id: int, is_liked: bool) -> dict:
    """Flip the liked flag on one of ``user_id``'s orders.

    Ownership is enforced by the update's filter itself: an order that does not
    exist and an order owned by someone else both match zero rows and raise
    ``OrderNotFound``.
    """
    updated = Order.objects.filter(pk=order_id, user_id=user_id).update(is_liked=is_liked)
    if updated == 0:
        logger.info("Like update for order %s by user %s matched nothing", order_id, user_id)
        raise OrderNotFound()

    invalidate_dashboard(user_id)
    order = Order.objects.get(pk=order_id)
    return order.to_public_dict()
