import datetime

from django.core.exceptions import ValidationError
from django.test import TestCase

from ledger_core.exceptions import (AccountInUseError, AccountNotFound,
                                    DuplicateAccountCode, InvalidParentAccount)
from ledger_core.models import Account, AuditLog
from ledger_core.services import (balance_as_of, create_account,
                                  deactivate_account, delete_account,
                                  list_hierarchy, reactivate_account,
                                  update_account)

from .helpers import D, LedgerFixtureMixin


class AccountRegistryTests(TestCase):

    def setUp(self):
        self.assets = create_account("1000", "Assets", "asset")
        self.funds = create_account("1100", "Funds", "asset", self.assets.pk)

    def test_create_account_is_audited(self):
        cash = create_account("1101", "Cash", "asset", self.funds.pk)
        self.assertEqual(cash.parent, self.funds)
        log = AuditLog.objects.get(action="create", object_id=str(cash.pk))
        self.assertEqual(log.changes["parent"], "1100")

    def test_duplicate_code_is_rejected(self):
        with self.assertRaises(DuplicateAccountCode) as ctx:
            create_account("1100", "Funds again", "asset")
        self.assertIn("1100", str(ctx.exception))

    def test_missing_parent_is_rejected(self):
        with self.assertRaises(InvalidParentAccount):
            create_account("1199", "Orphan", "asset", 999999)
        self.assertFalse(Account.objects.filter(code="1199").exists())

    def test_invalid_type_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_account("9000", "Odd", "income")

    def test_update_fields(self):
        update_account(self.funds.pk, name="Cash & Bank", code="1150")
        self.funds.refresh_from_db()
        self.assertEqual((self.funds.code, self.funds.name), ("1150", "Cash & Bank"))

    def test_update_to_taken_code_is_rejected(self):
        with self.assertRaises(DuplicateAccountCode):
            update_account(self.funds.pk, code="1000")

    def test_update_rejects_unknown_fields(self):
        with self.assertRaises(TypeError):
            update_account(self.funds.pk, is_active=False)

    def test_reparenting_into_own_subtree_is_rejected(self):
        with self.assertRaises(ValidationError):
            update_account(self.assets.pk, parent_id=self.funds.pk)

    def test_account_cannot_be_its_own_parent(self):
        with self.assertRaises(ValidationError):
            update_account(self.funds.pk, parent_id=self.funds.pk)

    def test_deactivate_and_reactivate(self):
        deactivate_account(self.funds.pk)
        self.funds.refresh_from_db()
        self.assertFalse(self.funds.is_active)
        reactivate_account(self.funds.pk)
        self.funds.refresh_from_db()
        self.assertTrue(self.funds.is_active)
        self.assertEqual(
            list(AuditLog.objects.filter(object_id=str(self.funds.pk))
                 .order_by("id").values_list("action", flat=True)),
            ["create", "deactivate", "reactivate"],
        )

    def test_unknown_account(self):
        with self.assertRaises(AccountNotFound):
            deactivate_account(999999)

    def test_delete_unused_leaf(self):
        leaf = create_account("1199", "Petty cash", "asset", self.funds.pk)
        delete_account(leaf.pk)
        self.assertFalse(Account.objects.filter(pk=leaf.pk).exists())

    def test_delete_parent_is_rejected(self):
        with self.assertRaises(AccountInUseError):
            delete_account(self.assets.pk)

    def test_hierarchy_is_ordered_by_code(self):
        create_account("1102", "Bank", "asset", self.funds.pk)
        create_account("1101", "Cash", "asset", self.funds.pk)
        create_account("4000", "Revenue", "revenue")
        forest = list_hierarchy()
        self.assertEqual([node.account.code for node in forest], ["1000", "4000"])
        funds = forest[0].children[0]
        self.assertEqual([node.account.code for node in funds.children], ["1101", "1102"])
        self.assertEqual(forest[0].as_dict()["children"][0]["code"], "1100")


class AccountInUseTests(LedgerFixtureMixin, TestCase):

    def setUp(self):
        self.build_chart()
        self.open_2024()
        self.post_simple(self.cash, self.revenue, "10.00", datetime.date(2024, 1, 2))

    def test_account_with_postings_cannot_be_deleted(self):
        with self.assertRaises(AccountInUseError) as ctx:
            delete_account(self.cash.pk)
        self.assertIn("journal lines", str(ctx.exception))

    def test_account_used_by_payment_method_cannot_be_deleted(self):
        with self.assertRaises(AccountInUseError):
            delete_account(self.booking_com.pk)

    def test_deactivated_account_keeps_history(self):
        deactivate_account(self.cash.pk)
        self.assertEqual(balance_as_of(self.cash.pk, datetime.date(2024, 2, 1)), D("10.00"))
