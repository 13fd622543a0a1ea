from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from ..managers import PeriodManager

PERIOD_STATUS = [
    ("open", "Open"),  # postings allowed
    ("closed", "Closed"),  # postings rejected, can be reopened
]


# ---------- AccountingPeriod ----------
class AccountingPeriod(models.Model):
    """Date range gating whether journal entries may be posted.

    Lifecycle: open -> closed -> open. Open periods may overlap; the
    overlap is warned about when the period is opened, never blocked.
    """

    # Human-readable label, e.g. "January 2024"
    name = models.CharField(max_length=50, blank=True)

    # Inclusive date range of the period
    start_date = models.DateField()
    end_date = models.DateField()

    status = models.CharField(
        max_length=6, choices=PERIOD_STATUS, default="open")

    # Refreshed on open and reopen; the most recently opened period
    # governs a date covered by several open periods
    opened_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PeriodManager()

    class Meta:
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="period_range_idx"),
            models.Index(fields=["status"], name="period_status_idx"),
        ]
        # periods are returned chronologically
        ordering = ("start_date", "id")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_date__lte=models.F("end_date")),
                name="period_start_not_after_end",
            ),
        ]

    def __str__(self):
        label = self.name or f"{self.start_date}..{self.end_date}"
        return f"{label} [{self.status}]"  # Example: "January 2024 [open]"

    @property
    def is_open(self):
        return self.status == "open"

    def covers(self, date):
        return self.start_date <= date <= self.end_date

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError(
                f"start_date {self.start_date} must not be after "
                f"end_date {self.end_date}"
            )

    def save(self, *args, **kwargs):
        if not self.name and self.start_date:
            self.name = self.start_date.strftime("%B %Y")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
