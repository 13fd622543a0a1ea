import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from ledger_core.exceptions import (AccountNotFound, ControlAccountPostingError,
                                    InactiveAccountError, PeriodClosedError,
                                    UnbalancedJournalError)
from ledger_core.models import AuditLog, JournalEntry, JournalLine, SourceKind, SourceRef
from ledger_core.services import (LineSpec, balance_as_of, create_draft_entry,
                                  deactivate_account, discard_draft, post_draft,
                                  post_entry)

from .helpers import D, LedgerFixtureMixin

JAN_5 = datetime.date(2024, 1, 5)

""" Success tests """
class PostEntrySuccessTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.user = get_user_model().objects.create_user("frontdesk")

    """ Test Balanced Entry """
    def test_balanced_entry_posts_successfully(self):
        je = post_entry(
            JAN_5,
            "Walk-in stay",
            [LineSpec.dr(self.cash, "1000.00"), LineSpec.cr(self.revenue, "1000.00")],
            reference=SourceRef("invoice", 17),
            user=self.user,
        )
        je.refresh_from_db()

        self.assertEqual(je.status, "posted")
        self.assertEqual(je.period, self.period)
        self.assertEqual(je.created_by, self.user)
        self.assertIsNotNone(je.posted_at)
        self.assertEqual(je.voucher_number, f"JV-{je.pk:06d}")
        self.assertEqual(je.source, SourceRef(SourceKind.INVOICE, "17"))
        self.assertEqual(je.compute_totals(), (D("1000.00"), D("1000.00")))
        self.assertTrue(
            AuditLog.objects.filter(
                action="post", object_type="JournalEntry", object_id=str(je.pk)
            ).exists()
        )

    def test_multi_line_entry_balances_exactly(self):
        je = post_entry(
            JAN_5,
            "Invoice with tax",
            [
                LineSpec.dr(self.cash, D("115.00")),
                LineSpec.cr(self.revenue, D("100.00")),
                LineSpec.cr(self.tax, D("15.00")),
            ],
        )
        self.assertEqual(je.lines.count(), 3)
        self.assertTrue(je.is_balanced())

    def test_explicit_voucher_number_is_kept(self):
        je = self.post_simple(self.cash, self.revenue, "10.00", JAN_5, voucher_number="RCPT-1")
        self.assertEqual(je.voucher_number, "RCPT-1")

    def test_generated_voucher_skips_numbers_taken_by_hand(self):
        first = self.post_simple(self.cash, self.revenue, "10.00", JAN_5)
        # the hand-picked number is the one the next automatic entry would get
        taken = f"JV-{first.pk + 2:06d}"
        manual = self.post_simple(self.cash, self.revenue, "10.00", JAN_5, voucher_number=taken)

        je = self.post_simple(self.cash, self.revenue, "10.00", JAN_5)
        self.assertEqual(je.status, "posted")
        self.assertNotEqual(je.voucher_number, manual.voucher_number)
        self.assertEqual(
            JournalEntry.objects.filter(voucher_number=je.voucher_number).count(), 1)

    @override_settings(HOTEL_LEDGER={"VOUCHER_PREFIX": "HTL"})
    def test_voucher_prefix_comes_from_settings(self):
        je = self.post_simple(self.cash, self.revenue, "10.00", JAN_5)
        self.assertTrue(je.voucher_number.startswith("HTL-"))

    def test_parent_account_accepts_postings(self):
        # plain parents are not control accounts
        je = self.post_simple(self.funds, self.revenue, "5.00", JAN_5)
        self.assertEqual(je.status, "posted")


""" Failure tests """
class PostEntryFailureTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()

    def assertNothingWritten(self):
        self.assertFalse(JournalEntry.objects.exists())
        self.assertFalse(JournalLine.objects.exists())

    """ Test Unbalanced Entry """
    def test_unbalanced_entry_is_rejected(self):
        with self.assertRaises(UnbalancedJournalError) as ctx:
            post_entry(
                JAN_5, "Typo",
                [LineSpec.dr(self.cash, "100.00"), LineSpec.cr(self.revenue, "99.99")],
            )
        self.assertIn("100.00", str(ctx.exception))
        self.assertIn("99.99", str(ctx.exception))
        self.assertNothingWritten()

    def test_single_line_is_rejected(self):
        with self.assertRaises(ValidationError):
            post_entry(JAN_5, "Half", [LineSpec.dr(self.cash, "1.00")])
        self.assertNothingWritten()

    def test_line_with_both_sides_is_rejected(self):
        with self.assertRaises(ValidationError):
            post_entry(JAN_5, "Both", [
                LineSpec(self.cash.pk, debit=D("5.00"), credit=D("5.00")),
                LineSpec.cr(self.revenue, "0.00"),
            ])
        self.assertNothingWritten()

    def test_negative_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            post_entry(JAN_5, "Negative", [
                LineSpec.dr(self.cash, "-5.00"),
                LineSpec.cr(self.revenue, "-5.00"),
            ])

    def test_float_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.post_simple(self.cash, self.revenue, 0.1, JAN_5)
        self.assertNothingWritten()

    def test_sub_cent_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.post_simple(self.cash, self.revenue, "10.005", JAN_5)

    def test_unknown_account_is_rejected(self):
        with self.assertRaises(AccountNotFound):
            self.post_simple(self.cash, 987654, "10.00", JAN_5)
        self.assertNothingWritten()

    def test_inactive_account_is_rejected(self):
        deactivate_account(self.revenue.pk)
        with self.assertRaises(InactiveAccountError):
            self.post_simple(self.cash, self.revenue, "10.00", JAN_5)
        self.assertNothingWritten()

    def test_control_account_is_rejected(self):
        with self.assertRaises(ControlAccountPostingError):
            self.post_simple(self.receivables, self.revenue, "10.00", JAN_5)
        self.assertNothingWritten()

    def test_date_outside_open_periods_is_rejected(self):
        with self.assertRaises(PeriodClosedError) as ctx:
            self.post_simple(self.cash, self.revenue, "10.00", datetime.date(2023, 12, 31))
        self.assertIn("2023-12-31", str(ctx.exception))
        self.assertNothingWritten()

    def test_reference_must_be_a_source_ref(self):
        with self.assertRaises(TypeError):
            self.post_simple(self.cash, self.revenue, "10.00", JAN_5, reference="invoice:1")

    def test_duplicate_voucher_number_is_rejected(self):
        self.post_simple(self.cash, self.revenue, "10.00", JAN_5, voucher_number="R-1")
        with self.assertRaises(ValidationError) as ctx:
            self.post_simple(self.cash, self.revenue, "20.00", JAN_5, voucher_number="R-1")
        self.assertIn("R-1", str(ctx.exception))
        self.assertEqual(JournalEntry.objects.count(), 1)
        self.assertEqual(JournalLine.objects.count(), 2)


""" Immutability of posted entries """
class PostedEntryImmutabilityTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.je = self.post_simple(self.cash, self.revenue, "50.00", JAN_5, "Stay")

    def test_header_cannot_change(self):
        self.je.description = "Edited"
        with self.assertRaises(ValidationError):
            self.je.save()

    def test_cannot_unpost(self):
        self.je.status = "draft"
        with self.assertRaises(ValidationError):
            self.je.save()

    def test_line_amount_cannot_change(self):
        line = self.je.lines.order_by("id").first()
        line.debit = D("60.00")
        with self.assertRaises(ValidationError):
            line.save()

    def test_line_cannot_be_added(self):
        with self.assertRaises(ValidationError):
            JournalLine.objects.create(journal=self.je, account=self.cash, debit=D("1.00"))

    def test_posted_entry_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.je.delete()
        self.assertTrue(JournalEntry.objects.filter(pk=self.je.pk).exists())

    def test_posting_twice_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.je.post()


""" Drafts """
class DraftEntryTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()

    def draft(self):
        return create_draft_entry(
            JAN_5, "Booking 9",
            [LineSpec.dr(self.cash, "80.00"), LineSpec.cr(self.revenue, "80.00")],
            reference=SourceRef("booking", 9),
        )

    def test_drafts_do_not_affect_balances(self):
        self.draft()
        self.assertEqual(balance_as_of(self.cash.pk, datetime.date(2024, 2, 1)), D("0.00"))

    def test_post_draft(self):
        je = post_draft(self.draft().pk)
        self.assertEqual(je.status, "posted")
        self.assertEqual(balance_as_of(self.cash.pk, datetime.date(2024, 2, 1)), D("80.00"))

    def test_discard_draft_removes_lines(self):
        je = self.draft()
        discard_draft(je.pk)
        self.assertFalse(JournalEntry.objects.filter(pk=je.pk).exists())
        self.assertFalse(JournalLine.objects.filter(journal_id=je.pk).exists())

    def test_discarding_posted_entry_is_rejected(self):
        je = post_draft(self.draft().pk)
        with self.assertRaises(ValidationError):
            discard_draft(je.pk)

    def test_draft_in_closed_date_cannot_be_posted(self):
        je = create_draft_entry(
            datetime.date(2023, 6, 1), "Old",
            [LineSpec.dr(self.cash, "1.00"), LineSpec.cr(self.revenue, "1.00")],
        )
        with self.assertRaises(PeriodClosedError):
            post_draft(je.pk)
        je.refresh_from_db()
        self.assertEqual(je.status, "draft")
