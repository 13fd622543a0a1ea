import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..exceptions import PeriodClosedError, PeriodNotFound
from ..models import AccountingPeriod
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def _get_period(period_id, *, lock=False):
    qs = AccountingPeriod.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=period_id)
    except AccountingPeriod.DoesNotExist:
        raise PeriodNotFound(period_id)


# ----------------------------
# Queries
# ----------------------------
def is_date_open(date) -> bool:
    """True if date lies within at least one open period."""
    return AccountingPeriod.objects.open().covering(date).exists()


def overlapping_open_periods(start_date, end_date, exclude_id=None):
    """Open periods intersecting [start_date, end_date]; lets a UI confirm first."""
    qs = AccountingPeriod.objects.open().overlapping(start_date, end_date)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return list(qs)


"""
    Posting date determines the period.
    Several open periods may cover one date: the most recently opened wins.
"""
def resolve_period(date, *, lock=False):
    qs = AccountingPeriod.objects.open().covering(date).order_by(
        "-opened_at", "-id")
    if lock:
        qs = qs.select_for_update()
    candidates = list(qs)
    if not candidates:
        raise PeriodClosedError(date)
    if len(candidates) > 1:
        logger.warning(
            "Date %s is covered by %d open periods (%s); using %s",
            date, len(candidates),
            ", ".join(str(p.pk) for p in candidates), candidates[0].pk,
        )
    return candidates[0]


def resolve_period_for_posting(date, *, allow_closed_period=False):
    """Period gate used by JournalEntry.post(); locks the governing period row."""
    try:
        return resolve_period(date, lock=True)
    except PeriodClosedError:
        if not allow_closed_period:
            raise
        logger.warning(
            "Posting dated %s outside every open period (override requested)",
            date,
        )
        return None


# ----------------------------
# Lifecycle: open -> closed -> open
# ----------------------------
def open_period(start_date, end_date, *, name="", user=None) -> AccountingPeriod:
    if start_date > end_date:
        raise ValidationError(
            f"start_date {start_date} must not be after end_date {end_date}")

    overlaps = overlapping_open_periods(start_date, end_date)
    if overlaps:
        # soft rule: warn, never block
        logger.warning(
            "New period %s..%s overlaps open period(s): %s",
            start_date, end_date, ", ".join(str(p) for p in overlaps),
        )

    with transaction.atomic():
        period = AccountingPeriod.objects.create(
            name=name, start_date=start_date, end_date=end_date,
            status="open", opened_at=timezone.now(),
        )
        log_action(
            action="open", instance=period, user=user,
            changes={
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "overlaps": [p.pk for p in overlaps],
            },
        )
    return period


def close_period(period_id, *, user=None) -> AccountingPeriod:
    with transaction.atomic():
        period = _get_period(period_id, lock=True)
        if period.status == "closed":
            return period
        period.status = "closed"
        period.save(update_fields=["status"])
        log_action(action="close", instance=period, user=user)
    return period


def reopen_period(period_id, *, user=None) -> AccountingPeriod:
    with transaction.atomic():
        period = _get_period(period_id, lock=True)
        if period.status == "open":
            return period
        overlaps = overlapping_open_periods(
            period.start_date, period.end_date, exclude_id=period.pk)
        if overlaps:
            logger.warning(
                "Reopened period %s overlaps open period(s): %s",
                period, ", ".join(str(p) for p in overlaps),
            )
        period.status = "open"
        period.opened_at = timezone.now()
        period.save(update_fields=["status", "opened_at"])
        log_action(action="reopen", instance=period, user=user)
    return period
