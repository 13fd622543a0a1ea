from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from django.core.exceptions import ValidationError

from ..exceptions import CustomerAccountMissing, CustomerNotFound
from ..models import Customer, CustomerAccountLink, JournalLine
from .balances import ZERO, BalanceEngine


@dataclass(frozen=True)
class StatementLine:
    line_id: int
    entry_id: int
    entry_date: date
    voucher_number: str
    description: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    # set on recursive statements: the sub-account that moved
    account_code: Optional[str] = None
    account_name: Optional[str] = None

    def as_dict(self):
        return {
            "line_id": self.line_id,
            "entry_id": self.entry_id,
            "entry_date": self.entry_date.isoformat(),
            "voucher_number": self.voucher_number,
            "description": self.description,
            "debit": str(self.debit),
            "credit": str(self.credit),
            "running_balance": str(self.running_balance),
            "reference_type": self.reference_type,
            "reference_id": self.reference_id,
            "account_code": self.account_code,
            "account_name": self.account_name,
        }


@dataclass
class Statement:
    account_id: int
    account_code: str
    account_name: str
    start_date: date
    end_date: date
    recursive: bool
    opening_balance: Decimal
    lines: List[StatementLine] = field(default_factory=list)
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO

    @property
    def closing_balance(self):
        return self.opening_balance + self.total_debit - self.total_credit

    @property
    def totals(self):
        return {"debit": self.total_debit, "credit": self.total_credit}

    def as_dict(self):
        return {
            "account": {
                "id": self.account_id,
                "code": self.account_code,
                "name": self.account_name,
            },
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "recursive": self.recursive,
            "opening_balance": str(self.opening_balance),
            "lines": [line.as_dict() for line in self.lines],
            "totals": {
                "debit": str(self.total_debit),
                "credit": str(self.total_credit),
            },
            "closing_balance": str(self.closing_balance),
        }


def generate_statement(account_id, start_date, end_date, recursive=False,
                       engine=None) -> Statement:
    """
    Opening balance, every posted line in [start_date, end_date] with its
    running balance, and totals. Ordering is fixed so two calls with no
    writes in between produce identical statements.
    """
    if start_date > end_date:
        raise ValidationError(
            f"start_date {start_date} must not be after end_date {end_date}")

    engine = engine or BalanceEngine()
    account = engine.tree.get(account_id)
    opening = engine.balance_as_of(account_id, start_date, recursive)
    account_set = engine.tree.account_set(account_id, recursive)

    lines = (
        JournalLine.objects.posted()
        .for_accounts(account_set)
        .between(start_date, end_date)
        .select_related("journal", "account")
        .in_statement_order()
    )

    statement = Statement(
        account_id=account.pk,
        account_code=account.code,
        account_name=account.name,
        start_date=start_date,
        end_date=end_date,
        recursive=recursive,
        opening_balance=opening,
    )
    running = opening
    for line in lines:
        running += line.debit - line.credit
        statement.total_debit += line.debit
        statement.total_credit += line.credit
        je = line.journal
        statement.lines.append(StatementLine(
            line_id=line.pk,
            entry_id=je.pk,
            entry_date=je.entry_date,
            voucher_number=je.voucher_number or "",
            description=line.description or je.description,
            debit=line.debit,
            credit=line.credit,
            running_balance=running,
            reference_type=je.reference_type,
            reference_id=je.reference_id,
            account_code=line.account.code if recursive else None,
            account_name=line.account.name if recursive else None,
        ))
    return statement


def customer_statement(customer_id, start_date, end_date) -> Statement:
    """Account statement of the customer's receivable sub-account."""
    if not Customer.objects.filter(pk=customer_id).exists():
        raise CustomerNotFound(customer_id)
    link = CustomerAccountLink.objects.filter(customer_id=customer_id).first()
    if link is None:
        raise CustomerAccountMissing(customer_id)
    return generate_statement(link.account_id, start_date, end_date, recursive=False)
