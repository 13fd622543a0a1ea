import datetime

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from django.utils.text import slugify

from ledger_core.models import (Account, AccountingPeriod, Hotel,
                                PaymentMethod, SystemAccountKey,
                                SystemAccountMapping)

# (code, name, type, parent code, control account)
DEFAULT_CHART = [
    ("1000", "Assets", "asset", None, False),
    ("1100", "Funds", "asset", "1000", False),
    ("1101", "Cash", "asset", "1100", False),
    ("1102", "Bank", "asset", "1100", False),
    ("1130", "Customer Receivables", "asset", "1000", True),
    ("1140", "Platform Receivables", "asset", "1000", False),
    ("1141", "Booking.com", "asset", "1140", False),
    ("1142", "Agoda", "asset", "1140", False),
    ("2000", "Liabilities", "liability", None, False),
    ("2100", "Customer Advances", "liability", "2000", False),
    ("2200", "Tax Payable", "liability", "2000", False),
    ("3000", "Equity", "equity", None, False),
    ("3100", "Owner's Capital", "equity", "3000", False),
    ("4000", "Revenue", "revenue", None, False),
    ("4100", "Room Revenue", "revenue", "4000", False),
    ("5000", "Expenses", "expense", None, False),
    ("5100", "Platform Commissions", "expense", "5000", False),
]

DEFAULT_MAPPINGS = {
    SystemAccountKey.DEFAULT_REVENUE: "4100",
    SystemAccountKey.DEFAULT_RECEIVABLE: "1130",
    SystemAccountKey.DEFAULT_TAX: "2200",
    SystemAccountKey.DEFAULT_CASH: "1101",
    SystemAccountKey.CUSTOMER_ADVANCES: "2100",
    SystemAccountKey.COMMISSION_EXPENSE: "5100",
}

# (name, account code, is_platform)
DEFAULT_PAYMENT_METHODS = [
    ("Cash", "1101", False),
    ("Bank Transfer", "1102", False),
    ("Booking.com", "1141", True),
    ("Agoda", "1142", True),
]


class Command(BaseCommand):
    help = (
        "Create the default hotel chart of accounts, system account mappings, "
        "payment methods and an open period for the current year. Safe to re-run."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--hotel",
            default="",
            help="Optionally create a hotel with this name.",
        )
        parser.add_argument(
            "--year",
            type=int,
            default=None,
            help="Year of the open period (default: current year).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # 1. Hotel (tagging only)
        if options["hotel"]:
            hotel, created = Hotel.objects.get_or_create(
                slug=slugify(options["hotel"]) or "hotel",
                defaults={"name": options["hotel"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created hotel: {hotel}"))

        # 2. Chart of accounts, parents first
        accounts = {}
        created_count = 0
        for code, name, ac_type, parent_code, is_control in DEFAULT_CHART:
            account, created = Account.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "ac_type": ac_type,
                    "parent": accounts.get(parent_code),
                    "is_control_account": is_control,
                },
            )
            accounts[code] = account
            created_count += created
        self.stdout.write(self.style.SUCCESS(
            f"Chart of accounts: {created_count} created, "
            f"{len(DEFAULT_CHART) - created_count} already present"))

        # 3. System mappings; an existing choice is never overwritten
        for key, code in DEFAULT_MAPPINGS.items():
            mapping, _ = SystemAccountMapping.objects.get_or_create(
                key=key, defaults={"label": key.label})
            if mapping.account_id is None:
                mapping.account = accounts[code]
                mapping.save(update_fields=["account"])

        # 4. Payment methods
        for name, code, is_platform in DEFAULT_PAYMENT_METHODS:
            PaymentMethod.objects.get_or_create(
                name=name,
                defaults={"account": accounts[code], "is_platform": is_platform},
            )
        self.stdout.write(self.style.SUCCESS("Created mappings and payment methods"))

        # 5. Open period covering the whole year
        year = options["year"] or timezone.localdate().year
        start, end = datetime.date(year, 1, 1), datetime.date(year, 12, 31)
        period, created = AccountingPeriod.objects.get_or_create(
            start_date=start,
            end_date=end,
            defaults={"name": f"FY {year}"},
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f"Opened period: {period}"))
        else:
            self.stdout.write(self.style.NOTICE(f"Period already exists: {period}"))
