"""Admin customizations for browsing imported orders and import runs."""
from django.contrib import admin

from .models import ImportLog, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Show associated order items under an Order."""
    model = OrderItem
    extra = 0
    readonly_fields = ('line_number', 'item_name', 'quantity', 'price')
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Expose imported orders with related line items."""
    list_display = ('id', 'user', 'restaurant', 'order_date', 'total_amount', 'is_liked')
    list_filter = ('is_liked', 'order_date')
    search_fields = ('restaurant', 'user__email')
    inlines = [OrderItemInline]
    readonly_fields = ('user', 'order_date', 'restaurant', 'total_amount', 'created_at')
    ordering = ['-order_date']


@admin.register(ImportLog)
class ImportLogAdmin(admin.ModelAdmin):
    """Show high-level stats for each import run."""
    list_display = (
        "filename",
        "user",
        "run_type",
        "status",
        "created_at",
        "rows_processed",
        "rows_skipped",
        "orders_created",
        "short_summary",
    )
    list_filter = ("run_type", "status")
    search_fields = ("filename", "summary", "log_output", "user__email")
    readonly_fields = (
        "user",
        "filename",
        "run_type",
        "status",
        "created_at",
        "started_at",
        "finished_at",
        "duration_seconds",
        "rows_processed",
        "rows_skipped",
        "orders_created",
        "items_created",
        "error_count",
        "summary",
        "log_output",
    )
    ordering = ("-created_at",)

    @admin.display(description="Summary")
    def short_summary(self, obj):
        if not obj.summary:
            return "-"
        preview = obj.summary.strip().splitlines()[0]
        return (preview[:75] + "...") if len(preview) > 75 else preview
