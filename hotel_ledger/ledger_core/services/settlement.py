import logging
from dataclasses import dataclass
import datetime
from decimal import Decimal
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from ..models import JournalLine, PaymentMethod, SourceKind, SourceRef, SystemAccountKey
from .audit_helper import log_action
from .balances import BalanceEngine
from .mappings import mapped_account
from .posting import post_entry
from .registry import get_account
from .validation import LineSpec, to_amount

logger = logging.getLogger(__name__)


def settle_platform_balance(platform_account_id, target_bank_account_id,
                            gross_amount, commission_amount, date, reference,
                            *, user=None):
    """
    Clear a booking platform's receivable into the bank:

        Dr bank                 gross - commission
        Dr commission expense   commission  (skipped when zero)
        Cr platform             gross
    """
    gross = to_amount(gross_amount, field="gross_amount")
    commission = to_amount(commission_amount, field="commission_amount")
    if gross <= 0:
        raise ValidationError(f"gross_amount must be positive (got {gross})")
    if commission < 0 or commission > gross:
        raise ValidationError(
            f"commission_amount must be between 0 and gross {gross} (got {commission})")

    platform = get_account(platform_account_id)
    bank = get_account(target_bank_account_id)
    net = gross - commission

    lines = []
    if net > 0:
        lines.append(LineSpec.dr(bank, net, f"Settlement from {platform.name}"))
    if commission > 0:
        expense = mapped_account(SystemAccountKey.COMMISSION_EXPENSE)
        lines.append(LineSpec.dr(expense, commission, f"{platform.name} commission"))
    lines.append(LineSpec.cr(platform, gross, f"Settlement to {bank.name}"))

    with transaction.atomic():
        je = post_entry(
            date,
            f"Settlement {reference} from {platform.name}",
            lines,
            reference=SourceRef(SourceKind.SETTLEMENT, reference),
            user=user,
        )
        log_action(
            action="settle", instance=je, user=user,
            changes={"platform": platform.code, "bank": bank.code,
                     "gross": str(gross), "commission": str(commission)},
        )
    logger.info(
        "Settled %s from %s into %s (gross=%s commission=%s)",
        reference, platform.code, bank.code, gross, commission,
    )
    return je


@dataclass(frozen=True)
class PlatformBalance:
    method_id: int
    method_name: str
    account_id: int
    account_code: str
    account_name: str
    balance: Decimal
    last_transaction_date: Optional[datetime.date]

    def as_dict(self):
        return {
            "method_id": self.method_id,
            "method_name": self.method_name,
            "account_id": self.account_id,
            "account_code": self.account_code,
            "account_name": self.account_name,
            "balance": str(self.balance),
            "last_transaction_date": (
                self.last_transaction_date.isoformat()
                if self.last_transaction_date else None),
        }


def platform_balances(as_of=None) -> List[PlatformBalance]:
    """Outstanding amount each active platform still owes, as of a date."""
    if as_of is None:
        as_of = timezone.localdate()
    engine = BalanceEngine()
    result = []
    methods = (
        PaymentMethod.objects.filter(is_platform=True, is_active=True)
        .select_related("account").order_by("name")
    )
    for method in methods:
        account = method.account
        # balance_as_of() is exclusive; include postings dated as_of
        balance = engine.balance_as_of(account.pk, as_of) + engine.movement_between(
            account.pk, as_of, as_of).net
        last = (
            JournalLine.objects.posted().for_accounts([account.pk])
            .filter(journal__entry_date__lte=as_of)
            .aggregate(last=Max("journal__entry_date"))["last"]
        )
        result.append(PlatformBalance(
            method_id=method.pk,
            method_name=method.name,
            account_id=account.pk,
            account_code=account.code,
            account_name=account.name,
            balance=balance,
            last_transaction_date=last,
        ))
    return result
