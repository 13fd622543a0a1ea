from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone

from ..exceptions import (ControlAccountPostingError, InactiveAccountError,
                          UnbalancedJournalError)
from ..managers import JournalLineManager
from .account import Account
from .hotel import Hotel
from .period import AccountingPeriod

JOURNAL_STATUS = [
    ("draft", "Draft"),  # still editable, ignored by balances
    ("posted", "Posted"),  # finalized & immutable
]


class SourceKind(models.TextChoices):
    """Business object that caused a journal entry."""

    BOOKING = "booking", "Booking"
    INVOICE = "invoice", "Invoice"
    PAYMENT = "payment", "Payment"
    SETTLEMENT = "settlement", "Settlement"
    REVERSAL = "reversal", "Reversal"


@dataclass(frozen=True)
class SourceRef:
    """Tagged pointer from an entry back to its originating object."""

    kind: SourceKind
    id: str

    def __post_init__(self):
        # accept raw strings / ints from callers, store the canonical forms
        object.__setattr__(self, "kind", SourceKind(self.kind))
        object.__setattr__(self, "id", str(self.id))

    def __str__(self):
        return f"{self.kind.value}:{self.id}"


# Header fields that freeze once an entry is posted
FROZEN_FIELDS = (
    "entry_date", "description", "voucher_number", "period_id",
    "hotel_id", "reference_type", "reference_id", "reverses_id",
)


# ---------- Journal (Header) & JournalLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    # Optional per-hotel tag (no isolation, reporting only)
    hotel = models.ForeignKey(
        Hotel, null=True, blank=True, on_delete=models.PROTECT)
    # Governing accounting period, resolved at posting time
    period = models.ForeignKey(
        AccountingPeriod,
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
        related_name="journal_entries",
    )
    # Business metadata
    entry_date = models.DateField()
    voucher_number = models.CharField(
        max_length=32, null=True, blank=True, unique=True)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=10, choices=JOURNAL_STATUS, default="draft")

    # polymorphic source info (booking, invoice, payment, settlement,
    # or the entry a reversal undoes), used for drill-down only
    reference_type = models.CharField(
        max_length=20, choices=SourceKind.choices, null=True, blank=True)
    reference_id = models.CharField(max_length=64, null=True, blank=True)

    # One-to-one: an entry can be reversed at most once
    reverses = models.OneToOneField(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversal",
    )

    # Actor that caused the posting
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(default=timezone.now)
    posted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = "journal entries"
        indexes = [
            models.Index(fields=["entry_date"], name="je_entry_date_idx"),
            models.Index(fields=["status"], name="je_status_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="je_reference_idx"),
        ]
        ordering = ("entry_date", "created_at", "id")

    def __str__(self):
        label = self.voucher_number or f"JE {self.pk}"
        return f"{label} {self.entry_date} [{self.status}]"

    @property
    def is_posted(self):
        return self.status == "posted"

    @property
    def source(self):
        if not self.reference_type:
            return None
        return SourceRef(self.reference_type, self.reference_id or "")

    @source.setter
    def source(self, ref):
        self.reference_type = ref.kind.value if ref else None
        self.reference_id = ref.id if ref else None

    # Aggregate all debit and credit amounts across entry's lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit"),
            total_credit=models.Sum("credit"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit

    # Post the entry safely inside a database transaction
    @transaction.atomic
    def post(self, user=None, allow_closed_period=False):
        """
        Validate and finalize a draft entry.
        Lines and accounts are re-read under lock so the checks see
        exactly what gets committed.
        """
        # lazy import to avoid circular import at module load time
        from ..conf import ledger_settings
        from ..services.periods import resolve_period_for_posting

        je = JournalEntry.objects.select_for_update().get(pk=self.pk)
        if je.status == "posted":
            raise ValidationError(f"Journal entry {je.pk} is already posted")

        lines = list(je.lines.select_related("account").order_by("id"))
        if len(lines) < 2:
            raise ValidationError(
                f"Journal entry needs at least two lines, got {len(lines)}")

        total_debit, total_credit = je.compute_totals()
        if total_debit != total_credit:
            raise UnbalancedJournalError(total_debit, total_credit)

        # Lock the accounts so a concurrent deactivation waits for us
        account_ids = {line.account_id for line in lines}
        for account in Account.objects.select_for_update().filter(
                pk__in=account_ids).order_by("pk"):
            if not account.is_active:
                raise InactiveAccountError(account.code)
            if account.is_control_account:
                raise ControlAccountPostingError(account.code)

        je.period = resolve_period_for_posting(
            je.entry_date, allow_closed_period=allow_closed_period)

        """ Update state """
        je.status = "posted"
        je.posted_at = timezone.now()
        if user is not None:
            je.created_by = user
        if not je.voucher_number:
            # skip numbers a caller already supplied by hand
            seq = je.pk
            voucher = f"{ledger_settings.VOUCHER_PREFIX}-{seq:06d}"
            while JournalEntry.objects.filter(voucher_number=voucher).exists():
                seq += 1
                voucher = f"{ledger_settings.VOUCHER_PREFIX}-{seq:06d}"
            je.voucher_number = voucher
        je.save(update_fields=[
            "status", "posted_at", "created_by", "voucher_number", "period"])

        # keep the caller's instance in sync
        for field in ("status", "posted_at", "created_by_id",
                      "voucher_number", "period_id"):
            setattr(self, field, getattr(je, field))
        return je

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = JournalEntry.objects.filter(pk=self.pk).first()
            if orig is not None and orig.status == "posted":
                if self.status != "posted":
                    raise ValidationError("Cannot unpost a posted journal")
                changed = [
                    f for f in FROZEN_FIELDS
                    if getattr(orig, f) != getattr(self, f)
                ]
                if changed:
                    raise ValidationError(
                        "Cannot modify a posted JournalEntry "
                        f"(changed: {', '.join(changed)}); post a reversal instead."
                    )
        super().save(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """
    One debit or credit against one account. The owning entry
    exclusively owns its lines.
    """

    journal = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,  # drafts only, see signals
        related_name="lines",
    )

    # Must point to one Account (can't delete account if lines exist → PROTECT)
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="journal_lines")

    description = models.CharField(max_length=400, blank=True, default="")

    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    objects = JournalLineManager()

    class Meta:
        indexes = [
            models.Index(fields=["account", "journal"], name="jl_account_journal_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(debit__gte=0) & models.Q(credit__gte=0),
                name="jl_non_negative_amounts",
            ),
            # exactly one side carries the amount
            models.CheckConstraint(
                condition=(
                    (models.Q(debit__gt=0) & models.Q(credit=0)) |
                    (models.Q(debit=0) & models.Q(credit__gt=0))
                ),
                name="jl_debit_xor_credit",
            ),
        ]

    def __str__(self):
        return (
            f"{self.journal_id} | {self.account.code} {self.account.name} "
            f"| D:{self.debit} C:{self.credit}"
        )

    @property
    def signed_amount(self):
        # balance contribution, debit-positive
        return self.debit - self.credit

    def clean(self):
        if self.debit is None or self.credit is None:
            raise ValidationError("Debit and credit are required")
        if self.debit < 0 or self.credit < 0:
            raise ValidationError(
                f"Debit and credit must be >= 0 (got D:{self.debit} C:{self.credit})")
        if self.debit > 0 and self.credit > 0:
            raise ValidationError(
                "JournalLine should not have both debit and credit > 0 "
                f"(got D:{self.debit} C:{self.credit})"
            )
        if self.debit == 0 and self.credit == 0:
            raise ValidationError(
                "JournalLine requires a non-0 amount on either debit or credit")

        # Lines of a posted journal are frozen
        if self.journal_id and JournalEntry.objects.filter(
                pk=self.journal_id, status="posted").exists():
            if not self.pk:
                raise ValidationError(
                    "Cannot add JournalLine: parent journal is posted.")
            orig = JournalLine.objects.get(pk=self.pk)
            if (
                orig.debit != self.debit
                or orig.credit != self.credit
                or orig.account_id != self.account_id
            ):
                raise ValidationError(
                    "Cannot modify JournalLine: parent JournalEntry is posted.")

    def save(self, *args, **kwargs):
        # clean()+field validation always run whenever
        # a JournalLine is saved programmatically
        self.full_clean()
        return super().save(*args, **kwargs)
