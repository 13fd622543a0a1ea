"""
Configuration for ledger_core.

Override any value through the HOTEL_LEDGER dictionary in Django settings:

    HOTEL_LEDGER = {"VOUCHER_PREFIX": "JV"}
"""

from dataclasses import dataclass

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured


@dataclass
class LedgerSettings:
    # Prefix of auto-assigned voucher numbers ("JV-000042")
    VOUCHER_PREFIX: str = "JV"

    # Digits appended to the receivables code for customer sub-accounts
    CUSTOMER_ACCOUNT_CODE_WIDTH: int = 4

    # Window (days back from today) checked by the nightly trial balance task
    TRIAL_BALANCE_CHECK_DAYS: int = 31

    def __init__(self):
        user_settings = getattr(django_settings, "HOTEL_LEDGER", {})
        for key in self.__class__.__dataclass_fields__:
            setattr(self, key, user_settings.get(key, getattr(self.__class__, key)))
        self._validate_settings()

    def _validate_settings(self):
        if not isinstance(self.VOUCHER_PREFIX, str) or not self.VOUCHER_PREFIX:
            raise ImproperlyConfigured(
                "HOTEL_LEDGER['VOUCHER_PREFIX'] must be a non-empty string. "
                f"Got: {self.VOUCHER_PREFIX!r}"
            )
        width = self.CUSTOMER_ACCOUNT_CODE_WIDTH
        if not isinstance(width, int) or width < 1:
            raise ImproperlyConfigured(
                "HOTEL_LEDGER['CUSTOMER_ACCOUNT_CODE_WIDTH'] must be a "
                f"positive integer. Got: {width!r}"
            )
        days = self.TRIAL_BALANCE_CHECK_DAYS
        if not isinstance(days, int) or days < 1:
            raise ImproperlyConfigured(
                "HOTEL_LEDGER['TRIAL_BALANCE_CHECK_DAYS'] must be a "
                f"positive integer. Got: {days!r}"
            )


class _LazyLedgerSettings:
    """Re-read on every access so override_settings works in tests."""

    def __getattr__(self, name):
        return getattr(LedgerSettings(), name)


ledger_settings = _LazyLedgerSettings()
