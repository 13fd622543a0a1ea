import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import (AccountNotFound, AlreadyReversedError,
                          ControlAccountPostingError, InactiveAccountError,
                          JournalEntryNotFound, PeriodClosedError)
from ..models import Account, JournalEntry, JournalLine, SourceKind, SourceRef
from .audit_helper import log_action
from .periods import is_date_open
from .validation import LineSpec, validate_line_specs

logger = logging.getLogger(__name__)


def _get_entry(entry_id, *, lock=False):
    qs = JournalEntry.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=entry_id)
    except (JournalEntry.DoesNotExist, ValueError, TypeError):
        raise JournalEntryNotFound(entry_id)


def _check_accounts(lines):
    """Every account must exist, be active and accept direct postings."""
    wanted = {line.account_id for line in lines}
    accounts = {a.pk: a for a in Account.objects.filter(pk__in=wanted)}
    for line in lines:
        account = accounts.get(line.account_id)
        if account is None:
            raise AccountNotFound(line.account_id)
        if not account.is_active:
            raise InactiveAccountError(account.code)
        if account.is_control_account:
            raise ControlAccountPostingError(account.code)


def _write_draft(entry_date, description, lines, *, reference=None,
                 voucher_number=None, hotel=None, user=None, reverses=None):
    je = JournalEntry(
        hotel=hotel,
        entry_date=entry_date,
        voucher_number=voucher_number or None,
        description=description or "",
        status="draft",
        reverses=reverses,
        created_by=user,
    )
    je.source = reference
    je.save()
    for line in lines:
        JournalLine.objects.create(
            journal=je,
            account_id=line.account_id,
            description=line.description,
            debit=line.debit,
            credit=line.credit,
        )
    return je


# ----------------------------
# Journal-related workflows
# ----------------------------
def post_entry(entry_date, description, lines, *, reference=None,
               voucher_number=None, hotel=None, user=None,
               allow_closed_period=False, reverses=None) -> JournalEntry:
    """
    Validate and persist one balanced journal entry as posted.

    Every rejection happens before the first write; the entry and all of
    its lines are committed together or not at all.
    """
    if reference is not None and not isinstance(reference, SourceRef):
        raise TypeError("reference must be a SourceRef")
    lines = validate_line_specs(lines)
    _check_accounts(lines)
    if not allow_closed_period and not is_date_open(entry_date):
        raise PeriodClosedError(entry_date)
    if voucher_number and JournalEntry.objects.filter(
            voucher_number=voucher_number).exists():
        raise ValidationError(f"Voucher number {voucher_number} already exists")

    with transaction.atomic():
        je = _write_draft(
            entry_date, description, lines, reference=reference,
            voucher_number=voucher_number, hotel=hotel, user=user,
            reverses=reverses,
        )
        # period gate again, under lock, plus in-transaction re-validation
        je.post(user=user, allow_closed_period=allow_closed_period)
        log_action(
            action="post", instance=je, user=user,
            changes={
                "voucher": je.voucher_number,
                "date": entry_date.isoformat(),
                "reference": str(reference) if reference else None,
                "total": str(sum(line.debit for line in lines)),
            },
        )
    logger.info(
        "Posted %s dated %s (%d lines, ref=%s)",
        je.voucher_number, entry_date, len(lines), reference,
    )
    return je


def reverse_entry(entry_id, *, entry_date=None, description=None,
                  user=None) -> JournalEntry:
    """
    Correct a posted entry by posting its mirror image.
    The original is never edited; each entry can be reversed once.
    """
    with transaction.atomic():
        original = _get_entry(entry_id, lock=True)
        if original.status != "posted":
            raise ValidationError(
                f"Only posted entries can be reversed; entry {entry_id} is {original.status}")
        existing = JournalEntry.objects.filter(reverses=original).first()
        if existing is not None:
            raise AlreadyReversedError(original.pk, existing.pk)

        mirrored = [
            LineSpec(line.account_id, debit=line.credit, credit=line.debit,
                     description=f"Reversal: {line.description}".strip())
            for line in original.lines.order_by("id")
        ]
        reversal = post_entry(
            entry_date or original.entry_date,
            description or f"Reversal of {original.voucher_number}",
            mirrored,
            reference=SourceRef(SourceKind.REVERSAL, original.pk),
            hotel=original.hotel,
            user=user,
            reverses=original,
        )
    return reversal


# ----------------------------
# Drafts (booking-time placeholders)
# ----------------------------
def create_draft_entry(entry_date, description, lines, *, reference=None,
                       hotel=None, user=None) -> JournalEntry:
    """Persist a balanced draft; drafts are ignored by every balance."""
    lines = validate_line_specs(lines)
    _check_accounts(lines)
    with transaction.atomic():
        je = _write_draft(entry_date, description, lines,
                          reference=reference, hotel=hotel, user=user)
        log_action(action="draft", instance=je, user=user)
    return je


def post_draft(entry_id, *, user=None, allow_closed_period=False) -> JournalEntry:
    with transaction.atomic():
        je = _get_entry(entry_id, lock=True)
        if je.status == "posted":
            raise ValidationError(f"Journal entry {entry_id} is already posted")
        # same account checks as post_entry(); accounts may have changed
        _check_accounts(list(je.lines.all()))
        je.post(user=user, allow_closed_period=allow_closed_period)
        log_action(action="post", instance=je, user=user,
                   changes={"voucher": je.voucher_number})
    return je


def discard_draft(entry_id, *, user=None):
    with transaction.atomic():
        je = _get_entry(entry_id, lock=True)
        if je.status == "posted":
            raise ValidationError(
                f"Journal entry {entry_id} is posted; reverse it instead of deleting")
        log_action(action="discard", instance=je, user=user)
        je.delete()  # lines cascade with the draft
