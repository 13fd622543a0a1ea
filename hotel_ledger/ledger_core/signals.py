from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import AccountingPeriod, Account, JournalEntry, JournalLine
from .services.registry import ensure_deletable

"""Block account deletion while anything in the ledger still points at it."""


# pre_delete fires for admin deletes and queryset deletes alike,
# so the same rules as delete_account() apply outside the service layer
@receiver(pre_delete, sender=Account)
def prevent_delete_referenced_account(sender, instance, **kwargs):
    ensure_deletable(instance)


"""Posted entries are permanent; corrections go through reverse_entry()."""


@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_posted_journal(sender, instance, **kwargs):
    if instance.status == "posted":
        raise ValidationError(
            f"Cannot delete posted journal entry {instance.voucher_number}; reverse it instead.")


@receiver(pre_delete, sender=JournalLine)
def prevent_delete_posted_line(sender, instance, **kwargs):
    if JournalEntry.objects.filter(pk=instance.journal_id, status="posted").exists():
        raise ValidationError("Cannot delete a line of a posted journal entry.")


"""Block deletion if period has posted journals."""


@receiver(pre_delete, sender=AccountingPeriod)
def prevent_delete_period_with_posted_journals(sender, instance, **kwargs):
    if JournalEntry.objects.filter(period=instance, status="posted").exists():
        raise ValidationError(
            f"Cannot delete period {instance.name} with posted journal entries.")
