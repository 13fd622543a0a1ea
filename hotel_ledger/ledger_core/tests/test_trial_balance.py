import datetime

from django.core.exceptions import ValidationError
from django.test import TestCase

from ledger_core.exceptions import LedgerIntegrityError
from ledger_core.models import Account, JournalLine
from ledger_core.services import (LineSpec, deactivate_account, post_entry,
                                  trial_balance)
from ledger_core.tasks import verify_trial_balance

from .helpers import D, LedgerFixtureMixin

JAN_1 = datetime.date(2024, 1, 1)
JAN_31 = datetime.date(2024, 1, 31)


class TrialBalanceTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.post_simple(self.cash, self.revenue, "500.00", datetime.date(2023, 12, 31),
                         allow_closed_period=True)
        post_entry(datetime.date(2024, 1, 9), "Invoice 4", [
            LineSpec.dr(self.bank, "230.00"),
            LineSpec.cr(self.revenue, "200.00"),
            LineSpec.cr(self.tax, "30.00"),
        ])
        self.post_simple(self.commission, self.cash, "17.25", datetime.date(2024, 1, 20))

    def test_debits_equal_credits(self):
        report = trial_balance(JAN_1, JAN_31)
        self.assertEqual(report.total_debit, D("247.25"))
        self.assertEqual(report.total_credit, D("247.25"))
        self.assertEqual(report.total_opening, D("0.00"))

    def test_one_row_per_active_account_ordered_by_code(self):
        report = trial_balance(JAN_1, JAN_31)
        codes = [row.account_code for row in report.rows]
        self.assertEqual(codes, sorted(codes))
        self.assertEqual(set(codes), set(Account.objects.values_list("code", flat=True)))

    def test_rows_are_not_recursive(self):
        rows = {row.account_code: row for row in trial_balance(JAN_1, JAN_31).rows}
        self.assertEqual(rows["1101"].opening_balance, D("500.00"))
        self.assertEqual(rows["1101"].period_credit, D("17.25"))
        self.assertEqual(rows["1101"].net_balance, D("482.75"))
        self.assertEqual(rows["1100"].opening_balance, D("0.00"))
        self.assertEqual(rows["1100"].period_debit, D("0.00"))

    def test_inactive_account_with_activity_is_listed(self):
        deactivate_account(self.tax.pk)
        deactivate_account(self.advances.pk)
        codes = [row.account_code for row in trial_balance(JAN_1, JAN_31).rows]
        self.assertIn("2200", codes)
        self.assertNotIn("2100", codes)

    def test_empty_window_is_balanced(self):
        report = trial_balance(datetime.date(2024, 6, 1), datetime.date(2024, 6, 30))
        self.assertEqual(report.total_debit, D("0.00"))
        self.assertEqual(report.total_credit, D("0.00"))

    def test_invalid_window(self):
        with self.assertRaises(ValidationError):
            trial_balance(JAN_31, JAN_1)

    def test_corrupted_ledger_is_reported_not_rounded(self):
        # queryset.update() bypasses model validation, simulating a defect
        line = JournalLine.objects.get(account=self.bank)
        JournalLine.objects.filter(pk=line.pk).update(debit=D("230.01"))
        with self.assertLogs("ledger_core.services.trial_balance", level="ERROR"):
            with self.assertRaises(LedgerIntegrityError) as ctx:
                trial_balance(JAN_1, JAN_31)
        self.assertEqual(ctx.exception.total_debit, D("247.26"))
        self.assertEqual(ctx.exception.total_credit, D("247.25"))


class VerifyTrialBalanceTaskTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.post_simple(self.cash, self.revenue, "99.00", datetime.date(2024, 1, 15))

    def test_task_reports_totals(self):
        result = verify_trial_balance("2024-01-01", "2024-01-31")
        self.assertEqual(result["start_date"], "2024-01-01")
        self.assertEqual(result["total_debit"], "99.00")
        self.assertEqual(result["total_credit"], "99.00")

    def test_task_runs_through_celery(self):
        # apply() executes locally, no broker needed
        result = verify_trial_balance.apply(args=("2024-01-01", "2024-01-31")).get()
        self.assertEqual(result["total_debit"], "99.00")

    def test_default_window_ends_today(self):
        result = verify_trial_balance()
        start = datetime.date.fromisoformat(result["start_date"])
        end = datetime.date.fromisoformat(result["end_date"])
        self.assertEqual((end - start).days, 31)

    def test_task_fails_on_divergence(self):
        line = JournalLine.objects.filter(account=self.cash).get()
        JournalLine.objects.filter(pk=line.pk).update(debit=D("98.00"))
        with self.assertRaises(LedgerIntegrityError):
            verify_trial_balance("2024-01-01", "2024-01-31")
