# foodAnalytics/models.py

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


RUN_TYPE_CHOICES = (
    ("dry-run", "Dry Run"),
    ("live", "Live"),
)


class Order(models.Model):
    """One logical food-delivery order assembled from one or more CSV rows."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    order_date = models.DateTimeField()
    restaurant = models.CharField(max_length=255)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_liked = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["user", "order_date"], name="order_user_date_idx"),
            models.Index(fields=["user", "restaurant"], name="order_user_restaurant_idx"),
        ]

    def __str__(self):
        return f"{self.restaurant} - {self.order_date.date()} ({self.total_amount})"

    def to_public_dict(self) -> dict:
        return {
            "id": self.pk,
            "restaurant": self.restaurant,
            "orderDate": self.order_date.isoformat(),
            "totalAmount": float(self.total_amount),
            "isLiked": self.is_liked,
        }


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    line_number = models.PositiveIntegerField(default=0, help_text="Position within the imported order")
    item_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Per-unit price",
    )

    class Meta:
        ordering = ["order", "line_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "line_number"],
                name="unique_order_item_line",
            ),
        ]

    def __str__(self):
        return f"{self.item_name} x{self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_public_dict(self) -> dict:
        return {
            "id": self.pk,
            "itemName": self.item_name,
            "quantity": self.quantity,
            "price": float(self.price),
        }


class ImportLog(models.Model):
    STATUS_CHOICES = [
        ("success", "Success"),
        ("failed", "Failed"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="import_logs",
    )
    filename = models.CharField(max_length=255, blank=True)
    run_type = models.CharField(max_length=20, choices=RUN_TYPE_CHOICES, default="live")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="success")
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)
    duration_seconds = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    rows_processed = models.PositiveIntegerField(default=0)
    rows_skipped = models.PositiveIntegerField(default=0)
    orders_created = models.PositiveIntegerField(default=0)
    items_created = models.PositiveIntegerField(default=0)
    error_count = models.PositiveIntegerField(default=0)
    summary = models.TextField(blank=True)
    log_output = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        timestamp = self.created_at.astimezone(timezone.get_current_timezone()) if self.created_at else None
        ts_display = timestamp.strftime("%Y-%m-%d %H:%M") if timestamp else "pending"
        return f"{self.filename or 'upload'} {self.get_run_type_display()} @ {ts_display}"
