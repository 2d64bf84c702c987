import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from foodAnalytics.exceptions import ApiError, ValidationError
from foodAnalytics.utils.analytics import build_dashboard
from foodAnalytics.utils.http import parse_json_body
from foodAnalytics.utils.order_likes import set_order_like

logger = logging.getLogger(__name__)

MAX_ORDER_ID = 2**63 - 1


@require_GET
def dashboard_view(request):
    """Return every analytics block for the authenticated user."""
    try:
        payload = build_dashboard(request.api_user.pk)
    except Exception as exc:
        logger.exception("Dashboard build failed for user %s", request.api_user.pk)
        raise ApiError("Failed to fetch dashboard data.") from exc
    return JsonResponse(payload)


@csrf_exempt
@require_POST
def order_like_view(request, order_id):
    body = parse_json_body(request)
    is_liked = body.get("isLiked")
    if not isinstance(is_liked, bool):
        raise ValidationError("isLiked must be a boolean.")

    try:
        order_pk = int(order_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid order ID.")
    if not 1 <= order_pk <= MAX_ORDER_ID:
        raise ValidationError("Invalid order ID.")

    order = set_order_like(order_pk, request.api_user.pk, is_liked)
    return JsonResponse({"message": "Order like status updated successfully.", "order": order})
