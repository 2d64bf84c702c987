# importers/_base_Importer.py

import io
import logging

from django.utils import timezone

from importers._normalize_row import RowRejected

logger = logging.getLogger("importers")


class BaseImporter:
    """
    Abstract importer class providing:
    - dry_run support
    - structured logging (to the module logger and a run buffer)
    - summary counters for test assertions and ImportLog records
    """

    def __init__(self, dry_run=False):
        self.dry_run = dry_run
        self.buffer = io.StringIO()
        self.counters = {
            "rows_processed": 0,
            "rows_skipped": 0,
            "orders_created": 0,
            "items_created": 0,
            "errors": 0,
        }
        self.start_time = timezone.now()
        self.finish_time = None
        self._summary_cache = None

    # ---------------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------------
    def log(self, message, emoji="💬", level=logging.INFO):
        timestamp = timezone.now().strftime("%H:%M:%S")
        line = f"[{timestamp}] {emoji} {message}"
        self.buffer.write(line + "\n")
        logger.log(level, message)

    def get_output(self) -> str:
        return self.buffer.getvalue()

    # ---------------------------------------------------------------------
    # Row iteration
    # ---------------------------------------------------------------------
    def iter_processed(self, csv_reader):
        """Yield ``process_row`` results, counting and logging rejected rows.

        Row numbers are 1-based data rows (the header is not counted).
        """
        for line_no, row in enumerate(csv_reader, start=1):
            self.counters["rows_processed"] += 1
            try:
                result = self.process_row(row)
            except RowRejected as exc:
                self.counters["rows_skipped"] += 1
                self.log(f"Skipping row {line_no}: {exc.reason}", "⚠️", level=logging.WARNING)
                continue
            yield result

    # ---------------------------------------------------------------------
    # Summary
    # ---------------------------------------------------------------------
    def summarize(self):
        if self._summary_cache is not None:
            return self._summary_cache

        self.finish_time = timezone.now()
        elapsed = (self.finish_time - self.start_time).total_seconds()
        summary = (
            f"\n📊 Import Summary ({'Dry Run' if self.dry_run else 'Committed'})\n"
            f"Rows processed: {self.counters['rows_processed']}\n"
            f"Rows skipped: {self.counters['rows_skipped']}\n"
            f"Orders created: {self.counters['orders_created']}\n"
            f"Items created: {self.counters['items_created']}\n"
            f"Errors: {self.counters['errors']}\n"
            f"Elapsed: {elapsed:.2f}s\n"
        )
        self.log(summary, "✅")
        self._summary_cache = summary
        return summary

    def get_run_metadata(self) -> dict:
        """Return structured metadata about the most recent run."""
        duration = None
        if self.finish_time:
            duration = (self.finish_time - self.start_time).total_seconds()
        return {
            "started_at": self.start_time,
            "finished_at": self.finish_time,
            "duration_seconds": duration,
            "stats": dict(self.counters),
        }

    # ---------------------------------------------------------------------
    # Abstract Hooks
    # ---------------------------------------------------------------------
    def process_row(self, row):
        """To be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement process_row()")

    def run(self, csv_reader):
        """Main loop for importers. Pass in a csv.DictReader."""
        raise NotImplementedError("Subclasses must implement run()")
