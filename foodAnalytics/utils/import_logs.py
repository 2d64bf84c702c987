from decimal import Decimal

from foodAnalytics.models import ImportLog


def record_import_log(user, filename, importer, status="success") -> ImportLog:
    """Store an ImportLog row describing ``importer``'s most recent run."""
    summary = importer.summarize()
    metadata = importer.get_run_metadata()
    stats = metadata.get("stats", {})
    duration = metadata.get("duration_seconds")
    return ImportLog.objects.create(
        user=user,
        filename=(filename or "")[:255],
        run_type="dry-run" if importer.dry_run else "live",
        status=status,
        started_at=metadata.get("started_at"),
        finished_at=metadata.get("finished_at"),
        duration_seconds=Decimal(str(round(duration, 2))) if duration is not None else None,
        rows_processed=stats.get("rows_processed", 0),
        rows_skipped=stats.get("rows_skipped", 0),
        orders_created=stats.get("orders_created", 0),
        items_created=stats.get("items_created", 0),
        error_count=stats.get("errors", 0),
        summary=summary,
        log_output=importer.get_output(),
    )
