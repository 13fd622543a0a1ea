import datetime
from decimal import Decimal

from ledger_core.models import (Account, PaymentMethod, SystemAccountKey,
                                SystemAccountMapping)
from ledger_core.services import LineSpec, open_period, post_entry


def D(value):
    return Decimal(value)


class LedgerFixtureMixin:
    """Small hotel chart plus an open 2024 period, shared by most tests."""

    def build_chart(self):
        self.assets = Account.objects.create(code="1000", name="Assets", ac_type="asset")
        self.funds = Account.objects.create(
            code="1100", name="Funds", ac_type="asset", parent=self.assets)
        self.cash = Account.objects.create(
            code="1101", name="Cash", ac_type="asset", parent=self.funds)
        self.bank = Account.objects.create(
            code="1102", name="Bank", ac_type="asset", parent=self.funds)
        self.receivables = Account.objects.create(
            code="1130", name="Customer Receivables", ac_type="asset",
            parent=self.assets, is_control_account=True)
        self.platforms = Account.objects.create(
            code="1140", name="Platform Receivables", ac_type="asset", parent=self.assets)
        self.booking_com = Account.objects.create(
            code="1141", name="Booking.com", ac_type="asset", parent=self.platforms)
        self.advances = Account.objects.create(
            code="2100", name="Customer Advances", ac_type="liability")
        self.tax = Account.objects.create(code="2200", name="Tax Payable", ac_type="liability")
        self.revenue = Account.objects.create(code="4000", name="Revenue", ac_type="revenue")
        self.commission = Account.objects.create(
            code="5100", name="Platform Commissions", ac_type="expense")

        for key, account in (
            (SystemAccountKey.DEFAULT_REVENUE, self.revenue),
            (SystemAccountKey.DEFAULT_RECEIVABLE, self.receivables),
            (SystemAccountKey.DEFAULT_TAX, self.tax),
            (SystemAccountKey.DEFAULT_CASH, self.cash),
            (SystemAccountKey.CUSTOMER_ADVANCES, self.advances),
            (SystemAccountKey.COMMISSION_EXPENSE, self.commission),
        ):
            SystemAccountMapping.objects.create(key=key, account=account)

        self.cash_method = PaymentMethod.objects.create(name="Cash", account=self.cash)
        self.booking_method = PaymentMethod.objects.create(
            name="Booking.com", account=self.booking_com, is_platform=True)

    def open_2024(self):
        self.period = open_period(
            datetime.date(2024, 1, 1), datetime.date(2024, 12, 31), name="FY 2024")
        return self.period

    def post_simple(self, debit_account, credit_account, amount, on, description="", **kwargs):
        return post_entry(
            on,
            description,
            [LineSpec.dr(debit_account, amount), LineSpec.cr(credit_account, amount)],
            **kwargs,
        )
