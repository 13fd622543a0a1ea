from django.db import transaction

from ..conf import ledger_settings
from ..exceptions import CustomerNotFound
from ..models import Account, Customer, CustomerAccountLink, SystemAccountKey
from .audit_helper import log_action
from .mappings import mapped_account


def _next_sub_account_code(parent):
    """<parent code><zero-padded sequence>, e.g. 1130 → 11300001."""
    width = ledger_settings.CUSTOMER_ACCOUNT_CODE_WIDTH
    prefix = parent.code
    taken = set(
        Account.objects.filter(code__startswith=prefix)
        .values_list("code", flat=True)
    )
    seq = 1
    for code in taken:
        suffix = code[len(prefix):]
        if len(suffix) == width and suffix.isdigit():
            seq = max(seq, int(suffix) + 1)
    code = f"{prefix}{seq:0{width}d}"
    while code in taken:
        seq += 1
        code = f"{prefix}{seq:0{width}d}"
    return code


def ensure_customer_account(customer_id, *, user=None) -> Account:
    """Return the customer's receivable sub-account, creating it on first use."""
    with transaction.atomic():
        try:
            customer = Customer.objects.select_for_update().get(pk=customer_id)
        except (Customer.DoesNotExist, ValueError, TypeError):
            raise CustomerNotFound(customer_id)

        link = CustomerAccountLink.objects.select_related("account").filter(
            customer=customer).first()
        if link is not None:
            return link.account

        control = mapped_account(SystemAccountKey.DEFAULT_RECEIVABLE)
        # serializes sub-account numbering across customers
        control = Account.objects.select_for_update().get(pk=control.pk)
        account = Account.objects.create(
            code=_next_sub_account_code(control),
            name=customer.full_name,
            ac_type=control.ac_type,
            parent=control,
        )
        CustomerAccountLink.objects.create(customer=customer, account=account)
        log_action(
            action="create", instance=account, user=user,
            changes={"customer": customer.pk, "code": account.code},
        )
    return account
