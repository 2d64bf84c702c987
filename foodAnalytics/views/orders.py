"""
Order-history upload endpoint.
"""

import logging
import uuid
from pathlib import Path

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.utils.text import slugify
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from foodAnalytics.exceptions import ProcessingError
from foodAnalytics.forms import OrderUploadForm, raise_for_form
from foodAnalytics.utils.analytics import invalidate_dashboard
from foodAnalytics.utils.import_logs import record_import_log
from importers.order_history_importer import OrderHistoryImporter

logger = logging.getLogger(__name__)


def _save_order_upload(uploaded_file) -> Path:
    """Persist the uploaded CSV into ``ORDER_UPLOAD_DIR`` under a unique name."""

    target_dir = Path(settings.ORDER_UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)

    original_name = Path(uploaded_file.name or "order-history")
    base = slugify(original_name.stem) or "order-history"
    timestamp = timezone.now().strftime("%Y%m%d-%H%M%S")
    filename = f"{timestamp}-{uuid.uuid4().hex[:8]}-{base}.csv"

    destination = target_dir / filename
    try:
        with destination.open("wb") as handle:
            for chunk in uploaded_file.chunks():
                handle.write(chunk)
    except Exception:
        destination.unlink(missing_ok=True)
        raise

    return destination


@csrf_exempt
@require_POST
def upload_order_history_view(request):
    """Ingest an order-history CSV for the authenticated user."""

    form = OrderUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        raise_for_form(form, missing_message=None)

    uploaded_file = form.cleaned_data["file"]
    user = request.api_user
    importer = OrderHistoryImporter(user=user)

    try:
        saved_path = _save_order_upload(uploaded_file)
        result = importer.run_from_file(saved_path, remove_after=True)
    except Exception as exc:
        logger.exception("Order history upload failed for user %s", user.pk)
        record_import_log(user, uploaded_file.name, importer, status="failed")
        invalidate_dashboard(user.pk)
        if isinstance(exc, ProcessingError):
            raise
        raise ProcessingError() from exc

    record_import_log(user, uploaded_file.name, importer, status="success")
    invalidate_dashboard(user.pk)
    logger.info(
        "Imported %s order(s) / %s item(s) for user %s (%s row(s) skipped)",
        result.orders_created,
        result.items_created,
        user.pk,
        result.rows_skipped,
    )
    return JsonResponse(
        {
            "message": "Order history uploaded and processed successfully!",
            "ordersProcessed": result.orders_created,
            "itemsProcessed": result.items_created,
        }
    )
