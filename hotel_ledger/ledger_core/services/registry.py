from dataclasses import dataclass, field
from typing import Dict, List, Optional

from django.db import transaction

from ..exceptions import (AccountInUseError, AccountNotFound,
                          DuplicateAccountCode, InvalidParentAccount)
from ..models import Account, JournalLine
from .audit_helper import log_action

# Fields update_account() may change; code changes keep the code unique
UPDATABLE_FIELDS = ("code", "name", "ac_type", "parent_id", "is_control_account")


# ----------------------------
# Hierarchy (one arena per query)
# ----------------------------
@dataclass
class AccountNode:
    account: Account
    children: List["AccountNode"] = field(default_factory=list)

    def as_dict(self):
        return {
            "id": self.account.pk,
            "code": self.account.code,
            "name": self.account.name,
            "type": self.account.ac_type,
            "is_active": self.account.is_active,
            "is_control_account": self.account.is_control_account,
            "children": [child.as_dict() for child in self.children],
        }


class AccountTree:
    """
    Snapshot of the chart of accounts for the lifetime of one query.

    Accounts can be added or reparented at any time, so a tree is built
    per request and thrown away with it; descendant sets are memoized
    on the instance only.
    """

    def __init__(self, accounts=None):
        if accounts is None:
            accounts = Account.objects.by_code()
        self.by_id: Dict[int, Account] = {}
        self.children_of: Dict[Optional[int], List[int]] = {}
        for account in sorted(accounts, key=lambda a: (a.code, a.pk)):
            self.by_id[account.pk] = account
            self.children_of.setdefault(account.parent_id, []).append(account.pk)
        self._descendants: Dict[int, frozenset] = {}

    def get(self, account_id) -> Account:
        try:
            return self.by_id[int(account_id)]
        except (KeyError, ValueError, TypeError):
            raise AccountNotFound(account_id)

    def children(self, account_id):
        return [self.by_id[pk] for pk in self.children_of.get(account_id, [])]

    def descendants(self, account_id) -> frozenset:
        """Transitive descendants of account_id (the account itself excluded)."""
        account_id = self.get(account_id).pk
        cached = self._descendants.get(account_id)
        if cached is not None:
            return cached
        found = set()
        stack = list(self.children_of.get(account_id, []))
        while stack:
            pk = stack.pop()
            if pk in found:
                continue
            found.add(pk)
            stack.extend(self.children_of.get(pk, []))
        result = frozenset(found)
        self._descendants[account_id] = result
        return result

    def account_set(self, account_id, recursive=False) -> frozenset:
        account_id = self.get(account_id).pk
        if not recursive:
            return frozenset({account_id})
        return self.descendants(account_id) | {account_id}

    def forest(self) -> List[AccountNode]:
        def build(pk):
            return AccountNode(
                self.by_id[pk],
                [build(child) for child in self.children_of.get(pk, [])],
            )
        # Orphans (parent outside the snapshot) are treated as roots
        roots = [
            pk for pk, account in self.by_id.items()
            if account.parent_id is None or account.parent_id not in self.by_id
        ]
        roots.sort(key=lambda pk: (self.by_id[pk].code, pk))
        return [build(pk) for pk in roots]


def list_hierarchy() -> List[AccountNode]:
    """Chart of accounts as a forest ordered by code at every level."""
    return AccountTree().forest()


# ----------------------------
# Chart-of-accounts administration
# ----------------------------
def get_account(account_id) -> Account:
    try:
        return Account.objects.get(pk=account_id)
    except (Account.DoesNotExist, ValueError, TypeError):
        raise AccountNotFound(account_id)


def _resolve_parent(parent_id):
    if parent_id is None:
        return None
    try:
        return Account.objects.get(pk=parent_id)
    except (Account.DoesNotExist, ValueError, TypeError):
        raise InvalidParentAccount(parent_id)


def create_account(code, name, ac_type, parent_id=None, *,
                   is_control_account=False, user=None) -> Account:
    with transaction.atomic():
        if Account.objects.filter(code=code).exists():
            raise DuplicateAccountCode(code)
        parent = _resolve_parent(parent_id)
        account = Account.objects.create(
            code=code,
            name=name,
            ac_type=ac_type,
            parent=parent,
            is_control_account=is_control_account,
        )
        log_action(
            action="create", instance=account, user=user,
            changes={"code": code, "name": name, "type": ac_type,
                     "parent": parent.code if parent else None},
        )
    return account


def update_account(account_id, *, user=None, **fields) -> Account:
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise TypeError(f"update_account() got unexpected fields: {sorted(unknown)}")

    with transaction.atomic():
        account = get_account(account_id)
        changes = {}
        if "code" in fields and fields["code"] != account.code:
            if Account.objects.filter(code=fields["code"]).exclude(pk=account.pk).exists():
                raise DuplicateAccountCode(fields["code"])
        if "parent_id" in fields:
            parent = _resolve_parent(fields.pop("parent_id"))
            if (parent.pk if parent else None) != account.parent_id:
                changes["parent"] = parent.code if parent else None
            account.parent = parent
        for name, value in fields.items():
            if getattr(account, name) != value:
                changes[name] = value
            setattr(account, name, value)
        if changes:
            account.save()  # clean() rejects cycles
            log_action(action="update", instance=account, user=user, changes=changes)
    return account


def deactivate_account(account_id, *, user=None) -> Account:
    """Soft delete: history stays, new postings are refused."""
    with transaction.atomic():
        account = get_account(account_id)
        if account.is_active:
            account.is_active = False
            account.save(update_fields=["is_active"])
            log_action(action="deactivate", instance=account, user=user)
    return account


def reactivate_account(account_id, *, user=None) -> Account:
    with transaction.atomic():
        account = get_account(account_id)
        if not account.is_active:
            account.is_active = True
            account.save(update_fields=["is_active"])
            log_action(action="reactivate", instance=account, user=user)
    return account


def ensure_deletable(account):
    if JournalLine.objects.filter(account=account).exists():
        raise AccountInUseError(account.code, "referenced by journal lines")
    if Account.objects.filter(parent=account).exists():
        raise AccountInUseError(account.code, "has child accounts")
    if account.payment_methods.exists() or account.system_mappings.exists():
        raise AccountInUseError(
            account.code, "used by a payment method or system mapping")
    if hasattr(account, "customer_link"):
        raise AccountInUseError(account.code, "linked to a customer")


def delete_account(account_id, *, user=None):
    """The only hard delete in the ledger; referenced accounts are refused."""
    with transaction.atomic():
        account = get_account(account_id)
        ensure_deletable(account)
        log_action(
            action="delete", instance=account, user=user,
            changes={"code": account.code, "name": account.name},
        )
        account.delete()
