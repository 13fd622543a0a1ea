from .account import Account
from .auditlog import AuditLog
from .customer import Customer, CustomerAccountLink
from .hotel import Hotel
from .journal import JournalEntry, JournalLine, SourceKind, SourceRef
from .mapping import PaymentMethod, SystemAccountKey, SystemAccountMapping
from .period import AccountingPeriod
