import logging

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import AccountManager

logger = logging.getLogger(__name__)

# Choice Lists
AC_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("revenue", "Revenue"),
    ("expense", "Expense"),
]

# Types whose balance is conventionally shown credit-positive
CREDIT_NORMAL_TYPES = frozenset({"liability", "equity", "revenue"})


class Account(models.Model):
    """
    Node of the chart of accounts.
    - code is unique and sorts lexicographically into the hierarchy
      ("1101" under "1100")
    - ac_type drives the display sign, never the stored amounts
    - parent gives the roll-up tree used by recursive balances
    """

    code = models.CharField(max_length=32, unique=True)
    # Human-readable name → "Cash", "Accounts Receivable"
    name = models.CharField(max_length=200)

    # Classify account into one of the 5 basic accounting types
    ac_type = models.CharField(max_length=10, choices=AC_TYPES)

    # Optional hierarchy: sub-accounts roll up into their parent
    # (e.g. 1130 Receivables → 11300001 Customer A)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # can't delete a parent if children exist
        related_name="children",
    )

    # "soft deactivate": hide from pickers and stop new postings,
    # history stays in every balance
    is_active = models.BooleanField(default=True)

    # marker for roll-up accounts that must only be posted through sub-accounts
    is_control_account = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = AccountManager()

    class Meta:
        ordering = ("code",)
        indexes = [
            models.Index(fields=["ac_type"], name="account_type_idx"),
            models.Index(fields=["parent"], name="account_parent_idx"),  # Sub-accounts by parent account
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"  # Example: "1101 – Cash"

    def natural_key(self):
        return (self.code,)

    @property
    def is_credit_normal(self):
        return self.ac_type in CREDIT_NORMAL_TYPES

    def display_balance(self, raw_balance):
        """Turn a raw debit-minus-credit balance into the reporting sign."""
        return -raw_balance if self.is_credit_normal else raw_balance

    def clean(self):
        # Walk up the parent chain: reparenting must never create a cycle
        seen = {self.pk} if self.pk else set()
        node = self.parent
        while node is not None:
            if node.pk in seen:
                raise ValidationError(
                    f"Account {self.code} cannot be placed under {self.parent.code}: "
                    "the hierarchy would contain a cycle"
                )
            seen.add(node.pk)
            node = node.parent

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False)
        # Type consistency with the parent is a data-quality concern only
        if self.parent is not None and self.parent.ac_type != self.ac_type:
            logger.warning(
                "Account %s (%s) sits under %s (%s) with a different type",
                self.code, self.ac_type, self.parent.code, self.parent.ac_type,
            )
        return super().save(*args, **kwargs)
