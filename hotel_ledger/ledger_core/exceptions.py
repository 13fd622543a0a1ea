from django.core.exceptions import ObjectDoesNotExist, ValidationError


# ---------- Validation family (rejected before any write) ----------

class UnbalancedJournalError(ValidationError):
    """Raised when a JournalEntry fails the double-entry balance check."""

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal not balanced: debits={total_debit}, credits={total_credit}",
            code="unbalanced",
        )


class DuplicateAccountCode(ValidationError):
    """Raised when an account code is already taken."""

    def __init__(self, code):
        self.account_code = code
        super().__init__(
            f"Account code {code} already exists", code="duplicate_code")


class InactiveAccountError(ValidationError):
    """Raised when a posting targets a deactivated account."""

    def __init__(self, code):
        self.account_code = code
        super().__init__(
            f"Account {code} is inactive and cannot receive postings",
            code="inactive_account",
        )


class ControlAccountPostingError(ValidationError):
    """Raised when a posting targets a control (roll-up only) account."""

    def __init__(self, code):
        self.account_code = code
        super().__init__(
            f"Account {code} is a control account; post to one of its "
            "sub-accounts instead",
            code="control_account",
        )


class PeriodClosedError(ValidationError):
    """Raised when no open accounting period covers a posting date."""

    def __init__(self, entry_date):
        self.entry_date = entry_date
        super().__init__(
            f"No open accounting period covers {entry_date}",
            code="period_closed",
        )


class AccountInUseError(ValidationError):
    """Raised on delete of an account that has journal lines or children."""

    def __init__(self, code, reason):
        self.account_code = code
        super().__init__(
            f"Cannot delete account {code}: {reason}", code="account_in_use")


class AlreadyReversedError(ValidationError):
    """Raised when an entry that already has a reversal is reversed again."""

    def __init__(self, entry_id, reversal_id):
        self.entry_id = entry_id
        self.reversal_id = reversal_id
        super().__init__(
            f"Journal entry {entry_id} was already reversed by entry {reversal_id}",
            code="already_reversed",
        )


# ---------- Reference family (typed "not found") ----------

class LedgerReferenceError(ObjectDoesNotExist):
    """Base for lookups that resolve to nothing."""


class AccountNotFound(LedgerReferenceError):
    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account {account_id} does not exist")


class InvalidParentAccount(LedgerReferenceError):
    def __init__(self, parent_id):
        self.parent_id = parent_id
        super().__init__(f"Parent account {parent_id} does not exist")


class JournalEntryNotFound(LedgerReferenceError):
    def __init__(self, entry_id):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} does not exist")


class PeriodNotFound(LedgerReferenceError):
    def __init__(self, period_id):
        self.period_id = period_id
        super().__init__(f"Accounting period {period_id} does not exist")


class CustomerNotFound(LedgerReferenceError):
    def __init__(self, customer_id):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} does not exist")


class CustomerAccountMissing(LedgerReferenceError):
    def __init__(self, customer_id):
        self.customer_id = customer_id
        super().__init__(
            f"Customer {customer_id} has no receivable sub-account")


class UnmappedSystemAccount(LedgerReferenceError):
    def __init__(self, key):
        self.key = key
        super().__init__(f"No account is mapped to system key {key}")


class PaymentMethodNotFound(LedgerReferenceError):
    def __init__(self, method):
        self.method = method
        super().__init__(f"Payment method {method!r} does not exist")


# ---------- Integrity ----------

class LedgerIntegrityError(Exception):
    """Raised when posted data violates the double-entry invariant.

    Signals a defect in posting enforcement; report it, never correct it.
    """

    def __init__(self, total_debit, total_credit, start_date, end_date):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Ledger out of balance for {start_date}..{end_date}: "
            f"debits={total_debit}, credits={total_credit}"
        )
