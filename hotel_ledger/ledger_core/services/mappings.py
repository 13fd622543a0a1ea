from django.db import transaction

from ..exceptions import PaymentMethodNotFound, UnmappedSystemAccount
from ..models import PaymentMethod, SystemAccountKey, SystemAccountMapping
from .audit_helper import log_action


def mapped_account(key):
    """Account configured for a system role, e.g. DEFAULT_REVENUE."""
    key = SystemAccountKey(key)
    mapping = (
        SystemAccountMapping.objects.select_related("account")
        .filter(key=key).first()
    )
    if mapping is None or mapping.account is None:
        raise UnmappedSystemAccount(key.value)
    return mapping.account


def set_mapping(key, account, *, user=None):
    key = SystemAccountKey(key)
    with transaction.atomic():
        mapping, _ = SystemAccountMapping.objects.get_or_create(
            key=key, defaults={"label": key.label})
        previous = mapping.account.code if mapping.account_id else None
        mapping.account = account
        mapping.save(update_fields=["account"])
        log_action(
            action="update", instance=mapping, user=user,
            changes={"key": key.value, "from": previous,
                     "to": account.code if account else None},
        )
    return mapping


def resolve_payment_method(method):
    """Accept a PaymentMethod, its id, or its name."""
    if isinstance(method, PaymentMethod):
        return method
    qs = PaymentMethod.objects.select_related("account").filter(is_active=True)
    found = None
    if isinstance(method, int) or (isinstance(method, str) and method.isdigit()):
        found = qs.filter(pk=int(method)).first()
    if found is None and isinstance(method, str):
        found = qs.filter(name__iexact=method).first()
    if found is None:
        raise PaymentMethodNotFound(method)
    return found
