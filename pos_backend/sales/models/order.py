# sales/models/order.py

import uuid
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Order(models.Model):
    """
    A committed POS order (one per checkout).

    GUARANTEES:
    - Created exactly once by sales.services.checkout_orchestrator
    - Immutable financial record: only `status` (and the completion stamp
      that goes with it) may change, via sales.services.order_lifecycle
    - timestamp/business_date are taken in POS_BUSINESS_TIME_ZONE;
      every daily report groups by business_date
    """

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
    ]

    class ServiceType(models.TextChoices):
        DINE_IN = "DINE_IN", "Dine In"
        TAKE_OUT = "TAKE_OUT", "Take Out"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated human readable order number",
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    business_date = models.DateField(db_index=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    service_fee = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    payment_method = models.CharField(max_length=32, default="cash")
    amount_received = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    change = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    service_type = models.CharField(
        max_length=16, choices=ServiceType.choices, default=ServiceType.TAKE_OUT
    )

    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_email = models.CharField(max_length=254, blank=True, default="")
    customer_phone = models.CharField(max_length=40, blank=True, default="")
    customer_discount_type = models.CharField(max_length=50, blank=True, default="")
    customer_discount_id = models.CharField(max_length=100, blank=True, default="")

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_COMPLETED)
    notes = models.CharField(max_length=500, blank=True, default="")

    # server price won; at least one line disagreed with the client's price
    has_price_mismatch = models.BooleanField(default=False)

    created_by = models.CharField(max_length=150, blank=True, default="")
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["business_date", "status"]),
            models.Index(fields=["status"]),
            models.Index(fields=["order_number"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total__gte=0),
                name="chk_order_total_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(change__gte=0),
                name="chk_order_change_gte_zero",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "order_number",
        "timestamp",
        "business_date",
        "subtotal",
        "discount_total",
        "service_fee",
        "total",
        "payment_method",
        "amount_received",
        "change",
        "service_type",
        "customer_name",
        "customer_email",
        "customer_phone",
        "customer_discount_type",
        "customer_discount_id",
        "notes",
        "has_price_mismatch",
        "created_by",
    )

    def _validate_immutable(self, previous: "Order"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(
                    f"Order is immutable. Field '{field}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is None:
                raise ValidationError("Order records are immutable")
            self._validate_immutable(previous)

        if not self.business_date:
            self.business_date = timezone.localdate(
                self.timestamp, timezone=ZoneInfo(settings.POS_BUSINESS_TIME_ZONE)
            )

        if not self.order_number:
            prefix = self.business_date.strftime("ORD%Y%m%d")
            self.order_number = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        if self.status == self.STATUS_COMPLETED and not self.completed_at:
            self.completed_at = timezone.now()

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Orders are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.order_number} | {self.total}"
