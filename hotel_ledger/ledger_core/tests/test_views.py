import datetime
import json

from django.test import TestCase
from django.urls import reverse

from ledger_core.models import Customer, JournalLine
from ledger_core.services import ensure_customer_account

from .helpers import LedgerFixtureMixin


class LedgerViewTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.post_simple(self.cash, self.revenue, "150.00", datetime.date(2024, 1, 5), "Stay")
        self.post_simple(self.booking_com, self.revenue, "500.00", datetime.date(2024, 1, 8))

    def test_account_list(self):
        resp = self.client.get(reverse("ledger_core:account-list"))
        self.assertEqual(resp.status_code, 200)
        roots = [node["code"] for node in resp.json()["accounts"]]
        self.assertEqual(roots[0], "1000")

    def test_balance(self):
        url = reverse("ledger_core:account-balance", args=[self.funds.pk])
        resp = self.client.get(url, {"as_of": "2024-02-01", "recursive": "true"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["balance"], "150.00")

        resp = self.client.get(url, {"as_of": "2024-02-01"})
        self.assertEqual(resp.json()["balance"], "0.00")

    def test_movement(self):
        url = reverse("ledger_core:account-movement", args=[self.revenue.pk])
        resp = self.client.get(url, {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["credit"], "650.00")

    def test_statement(self):
        url = reverse("ledger_core:account-statement", args=[self.cash.pk])
        resp = self.client.get(url, {"start": "2024-01-01", "end": "2024-01-31"})
        body = resp.json()
        self.assertTrue(body["ok"])
        self.assertEqual(body["statement"]["closing_balance"], "150.00")
        self.assertEqual(body["statement"]["lines"][0]["description"], "Stay")

    def test_customer_statement(self):
        guest = Customer.objects.create(full_name="Ada Guest")
        ensure_customer_account(guest.pk)
        url = reverse("ledger_core:customer-statement", args=[guest.pk])
        resp = self.client.get(url, {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["statement"]["lines"], [])

    def test_trial_balance(self):
        resp = self.client.get(
            reverse("ledger_core:trial-balance"), {"start": "2024-01-01", "end": "2024-01-31"})
        totals = resp.json()["trial_balance"]["totals"]
        self.assertEqual(totals["period_debit"], totals["period_credit"])

    def test_platform_balances(self):
        resp = self.client.get(reverse("ledger_core:platform-balances"), {"as_of": "2024-02-01"})
        [row] = resp.json()["platforms"]
        self.assertEqual(row["balance"], "500.00")

    def test_settlement(self):
        payload = {
            "platform_account_id": self.booking_com.pk,
            "bank_account_id": self.bank.pk,
            "gross_amount": "500.00",
            "commission_amount": "50.00",
            "date": "2024-02-01",
            "reference": "BK-PAYOUT-1",
        }
        resp = self.client.post(
            reverse("ledger_core:settlement-create"),
            data=json.dumps(payload), content_type="application/json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(JournalLine.objects.filter(journal_id=resp.json()["entry_id"]).count(), 3)

    """ Error mapping """
    def test_missing_parameter_is_400(self):
        resp = self.client.get(reverse("ledger_core:account-statement", args=[self.cash.pk]))
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["ok"])

    def test_bad_date_is_400(self):
        resp = self.client.get(
            reverse("ledger_core:trial-balance"), {"start": "01/01/2024", "end": "2024-01-31"})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_account_is_404(self):
        resp = self.client.get(
            reverse("ledger_core:account-balance", args=[999999]), {"as_of": "2024-02-01"})
        self.assertEqual(resp.status_code, 404)
        self.assertIn("999999", resp.json()["error"])

    def test_customer_without_account_is_404(self):
        guest = Customer.objects.create(full_name="No Account")
        resp = self.client.get(
            reverse("ledger_core:customer-statement", args=[guest.pk]),
            {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(resp.status_code, 404)

    def test_rejected_settlement_is_400(self):
        payload = {
            "platform_account_id": self.booking_com.pk,
            "bank_account_id": self.bank.pk,
            "gross_amount": "500.00",
            "commission_amount": "600.00",
            "date": "2024-02-01",
            "reference": "BK-PAYOUT-2",
        }
        resp = self.client.post(
            reverse("ledger_core:settlement-create"),
            data=json.dumps(payload), content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("600", resp.json()["error"])

    def test_settlement_in_closed_period_is_400(self):
        payload = {
            "platform_account_id": self.booking_com.pk,
            "bank_account_id": self.bank.pk,
            "gross_amount": "100",
            "commission_amount": "0",
            "date": "2030-01-01",
            "reference": "BK-PAYOUT-3",
        }
        resp = self.client.post(
            reverse("ledger_core:settlement-create"),
            data=json.dumps(payload), content_type="application/json")
        self.assertEqual(resp.status_code, 400)

    def test_integrity_failure_is_500(self):
        line = JournalLine.objects.filter(account=self.cash).get()
        JournalLine.objects.filter(pk=line.pk).update(debit="151.00")
        with self.assertLogs("ledger_core", level="ERROR"):
            resp = self.client.get(
                reverse("ledger_core:trial-balance"), {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.json()["ok"])

    def test_settlement_body_must_be_an_object(self):
        resp = self.client.post(
            reverse("ledger_core:settlement-create"),
            data=json.dumps(["BK-PAYOUT-4"]), content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["ok"])

    def test_settlement_numeric_date_is_400(self):
        payload = {
            "platform_account_id": self.booking_com.pk,
            "bank_account_id": self.bank.pk,
            "gross_amount": "100",
            "commission_amount": "0",
            "date": 20240201,
            "reference": "BK-PAYOUT-5",
        }
        resp = self.client.post(
            reverse("ledger_core:settlement-create"),
            data=json.dumps(payload), content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("20240201", resp.json()["error"])

    def test_settlement_requires_post(self):
        resp = self.client.get(reverse("ledger_core:settlement-create"))
        self.assertEqual(resp.status_code, 405)
