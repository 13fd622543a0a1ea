from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError

from ..exceptions import UnbalancedJournalError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


# ------------------------------------
# Amount parsing
# ------------------------------------
def to_amount(value, *, field="amount") -> Decimal:
    """
    Coerce a caller-supplied amount to a 2-place Decimal.
    Binary floats are refused: 0.1 + 0.2 must never reach the ledger.
    """
    if isinstance(value, (float, bool)):
        raise ValidationError(
            f"{field} must be a Decimal, int or string, not {type(value).__name__} ({value!r})"
        )
    try:
        amount = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} is not a valid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field} is not a valid amount: {value!r}")
    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise ValidationError(
            f"{field} {amount} has more than 2 decimal places")
    return quantized


# ------------------------------------
# Journal line input
# ------------------------------------
@dataclass(frozen=True)
class LineSpec:
    """One requested journal line; amounts are validated by post_entry()."""

    account_id: int
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: str = ""

    @classmethod
    def dr(cls, account, amount, description=""):
        return cls(_account_id(account), debit=amount, description=description)

    @classmethod
    def cr(cls, account, amount, description=""):
        return cls(_account_id(account), credit=amount, description=description)


def _account_id(account):
    # accept Account instances or raw ids
    return getattr(account, "pk", account)


def validate_line_specs(lines):
    """
    Shape checks done before touching the database.
    Returns normalized LineSpecs with Decimal amounts.
    """
    lines = list(lines)
    if len(lines) < 2:
        raise ValidationError(
            f"Journal entry needs at least two lines, got {len(lines)}")

    normalized = []
    for idx, line in enumerate(lines, start=1):
        if line.account_id is None:
            raise ValidationError(f"Line {idx} has no account")
        debit = to_amount(line.debit, field=f"Line {idx} debit")
        credit = to_amount(line.credit, field=f"Line {idx} credit")
        if debit < 0 or credit < 0:
            raise ValidationError(
                f"Line {idx}: debit and credit must be >= 0 (got D:{debit} C:{credit})")
        if debit > 0 and credit > 0:
            raise ValidationError(
                f"Line {idx}: only one of debit/credit may be non-zero (got D:{debit} C:{credit})")
        if debit == 0 and credit == 0:
            raise ValidationError(f"Line {idx}: amount must be non-zero")
        normalized.append(LineSpec(
            line.account_id, debit=debit, credit=credit,
            description=line.description or ""))

    total_debit = sum((line.debit for line in normalized), ZERO)
    total_credit = sum((line.credit for line in normalized), ZERO)
    # exact Decimal equality, no tolerance
    if total_debit != total_credit:
        raise UnbalancedJournalError(total_debit, total_credit)
    return normalized
