import json
import logging
from datetime import date
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from .exceptions import LedgerIntegrityError
from .services import (BalanceEngine, customer_statement, generate_statement,
                       list_hierarchy, platform_balances,
                       settle_platform_balance, trial_balance)

logger = logging.getLogger(__name__)


def _error(message, status):
    return JsonResponse({"ok": False, "error": message}, status=status)


def ledger_json(view):
    """Map ledger exceptions to JSON error responses."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as e:
            return _error("; ".join(e.messages), 400)
        except ObjectDoesNotExist as e:
            return _error(str(e), 404)
        except LedgerIntegrityError as e:
            logger.error("Integrity failure serving %s: %s", request.path, e)
            return _error(str(e), 500)

    return wrapper


def _date_param(params, name, default=None):
    raw = params.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Missing required parameter: {name}")
        return default
    try:
        return date.fromisoformat(raw)
    except (ValueError, TypeError):
        raise ValidationError(f"{name} is not an ISO date: {raw!r}")


def _flag(params, name):
    return params.get(name, "").lower() in ("1", "true", "yes")


# ----------------------------
# Chart of accounts & balances
# ----------------------------
@require_GET
@ledger_json
def account_list_view(request):
    return JsonResponse({"ok": True, "accounts": [n.as_dict() for n in list_hierarchy()]})


@require_GET
@ledger_json
def account_balance_view(request, account_id):
    as_of = _date_param(request.GET, "as_of", default=timezone.localdate())
    recursive = _flag(request.GET, "recursive")
    engine = BalanceEngine()
    account = engine.tree.get(account_id)
    balance = engine.balance_as_of(account_id, as_of, recursive)
    return JsonResponse({
        "ok": True,
        "account": account.code,
        "as_of": as_of.isoformat(),
        "recursive": recursive,
        "balance": str(balance),
    })


@require_GET
@ledger_json
def account_movement_view(request, account_id):
    start = _date_param(request.GET, "start")
    end = _date_param(request.GET, "end")
    if start > end:
        raise ValidationError(f"start {start} must not be after end {end}")
    recursive = _flag(request.GET, "recursive")
    engine = BalanceEngine()
    account = engine.tree.get(account_id)
    movement = engine.movement_between(account_id, start, end, recursive)
    return JsonResponse({
        "ok": True,
        "account": account.code,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "recursive": recursive,
        "debit": str(movement.debit),
        "credit": str(movement.credit),
    })


# ----------------------------
# Statements & reports
# ----------------------------
@require_GET
@ledger_json
def account_statement_view(request, account_id):
    statement = generate_statement(
        account_id,
        _date_param(request.GET, "start"),
        _date_param(request.GET, "end"),
        recursive=_flag(request.GET, "recursive"),
    )
    return JsonResponse({"ok": True, "statement": statement.as_dict()})


@require_GET
@ledger_json
def customer_statement_view(request, customer_id):
    statement = customer_statement(
        customer_id,
        _date_param(request.GET, "start"),
        _date_param(request.GET, "end"),
    )
    return JsonResponse({"ok": True, "statement": statement.as_dict()})


@require_GET
@ledger_json
def trial_balance_view(request):
    report = trial_balance(
        _date_param(request.GET, "start"),
        _date_param(request.GET, "end"),
    )
    return JsonResponse({"ok": True, "trial_balance": report.as_dict()})


@require_GET
@ledger_json
def platform_balances_view(request):
    as_of = _date_param(request.GET, "as_of", default=timezone.localdate())
    rows = platform_balances(as_of)
    return JsonResponse({"ok": True, "platforms": [row.as_dict() for row in rows]})


# ----------------------------
# Settlement
# ----------------------------
@require_POST
@ledger_json
def settlement_view(request):
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        raise ValidationError("Request body is not valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    missing = [
        key for key in ("platform_account_id", "bank_account_id", "gross_amount",
                        "commission_amount", "date", "reference")
        if key not in payload
    ]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")

    # amounts must arrive as strings or ints; JSON floats are refused downstream
    je = settle_platform_balance(
        payload["platform_account_id"],
        payload["bank_account_id"],
        payload["gross_amount"],
        payload["commission_amount"],
        _date_param(payload, "date"),
        payload["reference"],
        user=request.user if request.user.is_authenticated else None,
    )
    return JsonResponse(
        {"ok": True, "entry_id": je.pk, "voucher_number": je.voucher_number},
        status=201,
    )
