from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Sum

from ..models import JournalLine
from .registry import AccountTree

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Movement:
    """Gross debit and credit over a window (not netted)."""

    debit: Decimal = ZERO
    credit: Decimal = ZERO

    @property
    def net(self):
        return self.debit - self.credit


class BalanceEngine:
    """
    Read-only balance queries over posted journal lines.

    One engine = one query: the account tree is loaded once and its
    descendant sets are memoized, so a trial balance over the whole chart
    resolves the hierarchy a single time. Never keep an engine across
    requests.
    """

    def __init__(self, tree=None):
        self.tree = tree if tree is not None else AccountTree()

    def _lines(self, account_id, recursive):
        account_set = self.tree.account_set(account_id, recursive)
        return JournalLine.objects.posted().for_accounts(account_set)

    def balance_as_of(self, account_id, as_of, recursive=False) -> Decimal:
        """Signed Σ(debit − credit) of posted lines dated strictly before as_of."""
        agg = self._lines(account_id, recursive).before(as_of).aggregate(
            debit=Sum("debit"), credit=Sum("credit"))
        return (agg["debit"] or ZERO) - (agg["credit"] or ZERO)

    def movement_between(self, account_id, start_date, end_date,
                         recursive=False) -> Movement:
        """Gross debit and credit of posted lines with start ≤ date ≤ end."""
        agg = self._lines(account_id, recursive).between(
            start_date, end_date).aggregate(
                debit=Sum("debit"), credit=Sum("credit"))
        return Movement(agg["debit"] or ZERO, agg["credit"] or ZERO)

    # ----------------------------
    # Bulk, non-recursive (one query for the whole chart)
    # ----------------------------
    def opening_balances(self, as_of):
        rows = (
            JournalLine.objects.posted().before(as_of)
            .values("account_id")
            .annotate(debit=Sum("debit"), credit=Sum("credit"))
            .order_by()
        )
        return {
            row["account_id"]: (row["debit"] or ZERO) - (row["credit"] or ZERO)
            for row in rows
        }

    def movements(self, start_date, end_date):
        rows = (
            JournalLine.objects.posted().between(start_date, end_date)
            .values("account_id")
            .annotate(debit=Sum("debit"), credit=Sum("credit"))
            .order_by()
        )
        return {
            row["account_id"]: Movement(row["debit"] or ZERO, row["credit"] or ZERO)
            for row in rows
        }


def balance_as_of(account_id, as_of, recursive=False) -> Decimal:
    return BalanceEngine().balance_as_of(account_id, as_of, recursive)


def movement_between(account_id, start_date, end_date, recursive=False) -> Movement:
    return BalanceEngine().movement_between(
        account_id, start_date, end_date, recursive)
