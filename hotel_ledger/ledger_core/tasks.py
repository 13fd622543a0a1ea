import logging
from datetime import date, timedelta

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def verify_trial_balance(start=None, end=None):
    """
    Periodic integrity check: rebuild the trial balance for a window
    (default: the last TRIAL_BALANCE_CHECK_DAYS days) and fail loudly
    when debits and credits diverge. Dates travel as ISO strings.
    """
    # import lazily to avoid circular imports at module import time
    from .conf import ledger_settings
    from .services.trial_balance import trial_balance

    end_date = date.fromisoformat(end) if end else timezone.localdate()
    if start:
        start_date = date.fromisoformat(start)
    else:
        start_date = end_date - timedelta(days=ledger_settings.TRIAL_BALANCE_CHECK_DAYS)

    # LedgerIntegrityError propagates so the task is marked failed
    report = trial_balance(start_date, end_date)
    logger.info(
        "Trial balance %s..%s ok: %d accounts, debits=credits=%s",
        start_date, end_date, len(report.rows), report.total_debit,
    )
    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "accounts": len(report.rows),
        "total_debit": str(report.total_debit),
        "total_credit": str(report.total_credit),
    }
