from django.core.exceptions import ValidationError
from django.db import models

from .account import Account


# ---------- Customer ----------
# Guest or company billed for stays (receivables side)
class Customer(models.Model):
    full_name = models.CharField(max_length=200)
    # Optional contact details for statements and receipts
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("full_name", "id")
        indexes = [models.Index(fields=["full_name"], name="customer_name_idx")]

    def __str__(self):
        if self.phone:
            return f"{self.full_name} - {self.phone}"
        return self.full_name

    @property
    def ledger_account(self):
        link = getattr(self, "account_link", None)
        return link.account if link else None


# ---------- Customer sub-ledger link ----------
class CustomerAccountLink(models.Model):
    """
    Customer → its own sub-account under the receivables control account.
    A customer statement is an account statement scoped through this link.
    """

    # at most one sub-account per customer, and vice versa
    customer = models.OneToOneField(
        Customer, on_delete=models.CASCADE, related_name="account_link")
    account = models.OneToOneField(
        Account, on_delete=models.PROTECT, related_name="customer_link")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.customer} → {self.account.code}"

    def clean(self):
        if self.account_id and self.account.parent_id is None:
            raise ValidationError(
                f"Customer account {self.account.code} must sit under the "
                "receivables control account"
            )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
