from .account import AccountAdmin, PaymentMethodAdmin, SystemAccountMappingAdmin
from .actions import (close_periods, deactivate_accounts, post_journal_entries,
                      reopen_periods, reverse_journal_entries)
from .auditlog import AuditLogAdmin
from .customer import CustomerAdmin, HotelAdmin
from .inlines import JournalLineInline
from .journal import JournalEntryAdmin, JournalLineAdmin
from .period import AccountingPeriodAdmin
from .ReadOnly import ReadOnlyAdmin
