from django.conf import settings  # To access global project settings
from django.db import models

from .hotel import Hotel


# ---------- Audit / Event log ----------
class AuditLog(models.Model):  # Who did what to which ledger object
    # Nullable: chart-of-accounts and period changes are not hotel-specific
    hotel = models.ForeignKey(
        Hotel, null=True, blank=True, on_delete=models.SET_NULL)
    # Nullable in case the action was automated (task, import script)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # Common choices: create, update, deactivate, delete, post, reverse,
    # open, close, reopen, settle
    action = models.CharField(max_length=50)
    # What kind of object was affected (e.g., "Account", "JournalEntry")
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    # Before/after details, JSON encoded
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
            models.Index(fields=["created_at"], name="auditlog_created_idx"),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self):
        return (
            f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user} {self.action} "
            f"{self.object_type}({self.object_id})"
        )
