from django.db import models

from .account import Account


class SystemAccountKey(models.TextChoices):
    """Roles the posting workflows look up instead of hard-coding codes."""

    DEFAULT_REVENUE = "DEFAULT_REVENUE", "Room revenue"
    DEFAULT_RECEIVABLE = "DEFAULT_RECEIVABLE", "Customer receivables (control)"
    DEFAULT_TAX = "DEFAULT_TAX", "Output tax payable"
    DEFAULT_CASH = "DEFAULT_CASH", "Cash on hand"
    CUSTOMER_ADVANCES = "CUSTOMER_ADVANCES", "Customer advances / deposits"
    COMMISSION_EXPENSE = "COMMISSION_EXPENSE", "Platform commission expense"


# ---------- System account mapping ----------
class SystemAccountMapping(models.Model):
    key = models.CharField(
        max_length=32, choices=SystemAccountKey.choices, unique=True)
    # Nullable: a mapping row can exist before an account is chosen
    account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="system_mappings",
    )
    label = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ("key",)

    def __str__(self):
        target = self.account.code if self.account_id else "unmapped"
        return f"{self.key} → {target}"


# ---------- Payment method ----------
class PaymentMethod(models.Model):
    """
    How money arrives: cash desk, bank transfer, or a booking platform
    (Booking.com, Agoda...) that collects on our behalf and settles later.
    """

    name = models.CharField(max_length=100, unique=True)
    # Ledger account debited when a payment arrives through this method
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="payment_methods")
    # Platform receivables are cleared by settle_platform_balance()
    is_platform = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name
