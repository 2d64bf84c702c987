"""
order_history_importer.py
-------------------------
Importer for food-delivery order-history CSV exports.
Handles:
- CSV reading (via run_from_file)
- Row-level cleaning and validation (_normalize_row)
- Grouping rows into orders (_group_orders)
- Persisting orders and their items, with dry-run and summary reporting
"""

import csv
from dataclasses import dataclass
from decimal import InvalidOperation
from pathlib import Path

from django.db import DatabaseError, transaction

from foodAnalytics.exceptions import ProcessingError
from foodAnalytics.models import Order, OrderItem
from importers._base_Importer import BaseImporter
from importers._group_orders import group_rows, restaurant_date_key
from importers._normalize_row import normalize_row


@dataclass(frozen=True)
class ImportResult:
    orders_created: int
    items_created: int
    rows_processed: int
    rows_skipped: int


class OrderHistoryImporter(BaseImporter):
    """Parses an order-history CSV and stores it as the given user's orders."""

    def __init__(self, user, dry_run=False, key_func=restaurant_date_key):
        super().__init__(dry_run=dry_run)
        self.user = user
        self.key_func = key_func

    def process_row(self, row):
        return normalize_row(row)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def persist_drafts(self, drafts) -> tuple[int, int]:
        """Write each draft as one Order plus its items, one transaction per draft.

        Drafts already written stay committed when a later one fails.
        """
        orders_created = 0
        items_created = 0

        for key, draft in drafts.items():
            if self.dry_run:
                self.log(
                    f"[Dry Run] Would create order {key} with {len(draft.items)} item(s), total {draft.total_amount}",
                    "🧪",
                )
                orders_created += 1
                items_created += len(draft.items)
                self.counters["orders_created"] += 1
                self.counters["items_created"] += len(draft.items)
                continue

            try:
                with transaction.atomic():
                    order = Order.objects.create(
                        user_id=draft.user_id,
                        order_date=draft.order_date,
                        restaurant=draft.restaurant,
                        total_amount=draft.total_amount,
                    )
                    OrderItem.objects.bulk_create(
                        [
                            OrderItem(
                                order=order,
                                line_number=line_number,
                                item_name=item.item_name,
                                quantity=item.quantity,
                                price=item.price,
                            )
                            for line_number, item in enumerate(draft.items, start=1)
                        ],
                        ignore_conflicts=True,
                    )
            except (DatabaseError, InvalidOperation) as exc:
                self.counters["errors"] += 1
                self.log(f"Failed to save order {key}: {exc}", "❌")
                raise ProcessingError() from exc

            orders_created += 1
            items_created += len(draft.items)
            self.counters["orders_created"] += 1
            self.counters["items_created"] += len(draft.items)
            self.log(f"Created order #{order.pk} {key} ({len(draft.items)} item(s))", "🆕")

        return orders_created, items_created

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def run(self, csv_reader) -> ImportResult:
        """Normalize, group and persist every row of ``csv_reader``."""
        self.log(f"Starting {'dry-run' if self.dry_run else 'live'} import for {self.user}...", "🚀")

        drafts = group_rows(self.iter_processed(csv_reader), self.user.pk, key_func=self.key_func)
        self.log(f"Grouped {self.counters['rows_processed'] - self.counters['rows_skipped']} row(s) into {len(drafts)} order(s)", "🧾")

        try:
            orders_created, items_created = self.persist_drafts(drafts)
        finally:
            self.summarize()

        return ImportResult(
            orders_created=orders_created,
            items_created=items_created,
            rows_processed=self.counters["rows_processed"],
            rows_skipped=self.counters["rows_skipped"],
        )

    def run_from_file(self, file_path, remove_after=False) -> ImportResult:
        """Run import from a CSV file on disk, optionally deleting it afterwards."""
        file_path = Path(file_path)
        self.log(f"Importing {file_path.name} ({'dry-run' if self.dry_run else 'live'})", "📥")
        try:
            with file_path.open(newline="", encoding="utf-8-sig") as handle:
                return self.run(csv.DictReader(handle))
        except (csv.Error, UnicodeDecodeError) as exc:
            self.counters["errors"] += 1
            self.log(f"Unreadable CSV {file_path.name}: {exc}", "❌")
            raise ProcessingError() from exc
        finally:
            if remove_after:
                file_path.unlink(missing_ok=True)
