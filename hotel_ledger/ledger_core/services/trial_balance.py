import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List

from django.core.exceptions import ValidationError

from ..exceptions import LedgerIntegrityError
from .balances import ZERO, BalanceEngine, Movement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: int
    account_code: str
    account_name: str
    account_type: str
    is_active: bool
    opening_balance: Decimal
    period_debit: Decimal
    period_credit: Decimal

    @property
    def net_balance(self):
        return self.opening_balance + self.period_debit - self.period_credit

    def as_dict(self):
        return {
            "account_id": self.account_id,
            "account_code": self.account_code,
            "account_name": self.account_name,
            "account_type": self.account_type,
            "is_active": self.is_active,
            "opening_balance": str(self.opening_balance),
            "period_debit": str(self.period_debit),
            "period_credit": str(self.period_credit),
            "net_balance": str(self.net_balance),
        }


@dataclass
class TrialBalance:
    start_date: date
    end_date: date
    rows: List[TrialBalanceRow] = field(default_factory=list)

    @property
    def total_opening(self):
        return sum((r.opening_balance for r in self.rows), ZERO)

    @property
    def total_debit(self):
        return sum((r.period_debit for r in self.rows), ZERO)

    @property
    def total_credit(self):
        return sum((r.period_credit for r in self.rows), ZERO)

    @property
    def total_net(self):
        return sum((r.net_balance for r in self.rows), ZERO)

    def as_dict(self):
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "rows": [row.as_dict() for row in self.rows],
            "totals": {
                "opening_balance": str(self.total_opening),
                "period_debit": str(self.total_debit),
                "period_credit": str(self.total_credit),
                "net_balance": str(self.total_net),
            },
        }


def trial_balance(start_date, end_date, engine=None) -> TrialBalance:
    """
    One row per active account (non-recursive figures), ordered by code.

    Deactivated accounts still holding an opening balance or period
    movement are listed too, otherwise their postings would vanish from
    the totals. Σdebit must equal Σcredit exactly; a difference means a
    posted entry escaped validation and is raised, never rounded away.
    """
    if start_date > end_date:
        raise ValidationError(
            f"start_date {start_date} must not be after end_date {end_date}")

    engine = engine or BalanceEngine()
    openings = engine.opening_balances(start_date)
    movements = engine.movements(start_date, end_date)

    report = TrialBalance(start_date=start_date, end_date=end_date)
    for pk in sorted(engine.tree.by_id, key=lambda k: (engine.tree.by_id[k].code, k)):
        account = engine.tree.by_id[pk]
        opening = openings.get(pk, ZERO)
        movement = movements.get(pk, Movement())
        if not account.is_active and not (opening or movement.debit or movement.credit):
            continue
        report.rows.append(TrialBalanceRow(
            account_id=pk,
            account_code=account.code,
            account_name=account.name,
            account_type=account.ac_type,
            is_active=account.is_active,
            opening_balance=opening,
            period_debit=movement.debit,
            period_credit=movement.credit,
        ))

    verify_totals(report)
    return report


def verify_totals(report):
    """Raise LedgerIntegrityError when period debits and credits diverge."""
    total_debit, total_credit = report.total_debit, report.total_credit
    if total_debit != total_credit:
        logger.error(
            "Trial balance %s..%s out of balance: debits=%s credits=%s",
            report.start_date, report.end_date, total_debit, total_credit,
        )
        raise LedgerIntegrityError(
            total_debit, total_credit, report.start_date, report.end_date)
    return total_debit
