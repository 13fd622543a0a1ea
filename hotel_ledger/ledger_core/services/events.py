"""
Inbound hotel events (bookings, invoices, payments) turned into journal
entries. Each handler runs synchronously; validation and period errors
reach the caller unchanged.
"""
import logging

from django.db import transaction

from ..exceptions import CustomerNotFound
from ..models import (Customer, JournalEntry, SourceKind, SourceRef,
                      SystemAccountKey)
from .customers import ensure_customer_account
from .mappings import mapped_account, resolve_payment_method
from .posting import create_draft_entry, discard_draft, post_entry
from .validation import LineSpec, ZERO, to_amount

logger = logging.getLogger(__name__)


def on_booking_created(booking_id, amount, customer_id, date, *, user=None):
    """A booking is not revenue yet: record it as a draft."""
    amount = to_amount(amount)
    with transaction.atomic():
        receivable = ensure_customer_account(customer_id, user=user)
        revenue = mapped_account(SystemAccountKey.DEFAULT_REVENUE)
        je = create_draft_entry(
            date,
            f"Booking {booking_id}",
            [
                LineSpec.dr(receivable, amount, f"Booking {booking_id}"),
                LineSpec.cr(revenue, amount, f"Booking {booking_id}"),
            ],
            reference=SourceRef(SourceKind.BOOKING, booking_id),
            user=user,
        )
    logger.info("Draft %s recorded for booking %s", je.pk, booking_id)
    return je


def on_invoice_issued(invoice_id, customer_id, net_amount, tax_amount, date,
                      *, booking_id=None, user=None):
    net = to_amount(net_amount, field="net_amount")
    tax = to_amount(tax_amount, field="tax_amount")
    with transaction.atomic():
        if booking_id is not None:
            drafts = JournalEntry.objects.filter(
                status="draft",
                reference_type=SourceKind.BOOKING,
                reference_id=str(booking_id),
            ).values_list("pk", flat=True)
            for pk in list(drafts):
                discard_draft(pk, user=user)

        receivable = ensure_customer_account(customer_id, user=user)
        revenue = mapped_account(SystemAccountKey.DEFAULT_REVENUE)
        lines = [
            LineSpec.dr(receivable, net + tax, f"Invoice {invoice_id}"),
            LineSpec.cr(revenue, net, f"Invoice {invoice_id} revenue"),
        ]
        if tax > ZERO:
            lines.append(LineSpec.cr(
                mapped_account(SystemAccountKey.DEFAULT_TAX), tax,
                f"Invoice {invoice_id} tax"))
        je = post_entry(
            date,
            f"Invoice {invoice_id}",
            lines,
            reference=SourceRef(SourceKind.INVOICE, invoice_id),
            user=user,
        )
    return je


def on_payment_recorded(payment_id, amount, method, date, customer_id=None,
                        *, invoice_id=None, user=None):
    """
    Against an invoice the payment clears the customer's receivable;
    without one it is an advance (deposit) held as a liability, with the
    paying customer named on the advance line.
    """
    amount = to_amount(amount)
    method = resolve_payment_method(method)
    with transaction.atomic():
        if invoice_id is not None:
            credit_account = ensure_customer_account(customer_id, user=user)
            memo = f"Payment {payment_id} for invoice {invoice_id}"
        else:
            credit_account = mapped_account(SystemAccountKey.CUSTOMER_ADVANCES)
            memo = f"Advance payment {payment_id}"
            if customer_id is not None:
                try:
                    customer = Customer.objects.get(pk=customer_id)
                except (Customer.DoesNotExist, ValueError, TypeError):
                    raise CustomerNotFound(customer_id)
                memo = f"{memo} from {customer.full_name} (customer {customer.pk})"
        je = post_entry(
            date,
            memo,
            [
                LineSpec.dr(method.account, amount, f"{method.name} receipt"),
                LineSpec.cr(credit_account, amount, memo),
            ],
            reference=SourceRef(SourceKind.PAYMENT, payment_id),
            user=user,
        )
    return je
