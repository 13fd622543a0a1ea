from .balances import BalanceEngine, Movement, balance_as_of, movement_between
from .customers import ensure_customer_account
from .events import on_booking_created, on_invoice_issued, on_payment_recorded
from .mappings import mapped_account, resolve_payment_method, set_mapping
from .periods import close_period, open_period, reopen_period, resolve_period
from .posting import (create_draft_entry, discard_draft, post_draft,
                      post_entry, reverse_entry)
from .registry import (create_account, deactivate_account, delete_account,
                       get_account, list_hierarchy, reactivate_account,
                       update_account)
from .settlement import platform_balances, settle_platform_balance
from .statements import customer_statement, generate_statement
from .trial_balance import trial_balance, verify_totals
from .validation import LineSpec
