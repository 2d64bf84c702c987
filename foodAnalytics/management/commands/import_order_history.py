"""Wrap the OrderHistoryImporter for CLI execution."""

from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from foodAnalytics.exceptions import ProcessingError
from foodAnalytics.utils.analytics import invalidate_dashboard
from foodAnalytics.utils.import_logs import record_import_log
from importers._group_orders import GROUPING_STRATEGIES
from importers.order_history_importer import OrderHistoryImporter


class Command(BaseCommand):
    """Import an order-history CSV from disk for an existing user."""
    help = "Import an order-history CSV for a user. Supports --dry-run. The file is left in place."

    def add_arguments(self, parser):
        parser.add_argument("csv_path", help="Path to the order-history CSV file.")
        parser.add_argument("--email", required=True, help="Email of the user who owns the orders.")
        parser.add_argument("--dry-run", action="store_true", help="Simulate only (no DB writes).")
        parser.add_argument(
            "--group-by",
            choices=sorted(GROUPING_STRATEGIES),
            default="restaurant-date",
            help="How rows are grouped into orders.",
        )

    def handle(self, *args, **opts):
        file_path = Path(opts["csv_path"])
        if not file_path.exists():
            raise CommandError(f"File not found: {file_path}")

        email = opts["email"].strip().lower()
        user = get_user_model().objects.filter(email__iexact=email).first()
        if user is None:
            raise CommandError(f"No user with email {email}")

        importer = OrderHistoryImporter(
            user=user,
            dry_run=opts["dry_run"],
            key_func=GROUPING_STRATEGIES[opts["group_by"]],
        )
        self.stdout.write(self.style.NOTICE(
            f"📥 Importing {file_path} for {email} {'(dry-run)' if opts['dry_run'] else ''}"
        ))
        try:
            result = importer.run_from_file(file_path)
        except ProcessingError as e:
            record_import_log(user, file_path.name, importer, status="failed")
            raise CommandError(f"Import failed: {e}")

        record_import_log(user, file_path.name, importer, status="success")
        if not opts["dry_run"]:
            invalidate_dashboard(user.pk)

        output = importer.get_output()
        if output:
            self.stdout.write(output)

        self.stdout.write(self.style.SUCCESS(
            f"✅ Done. {result.orders_created} order(s), {result.items_created} item(s), "
            f"{result.rows_skipped} of {result.rows_processed} row(s) skipped."
        ))
