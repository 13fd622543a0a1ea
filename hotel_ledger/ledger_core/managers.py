from django.db import models


# -----------------------------------------
# Query helpers shared by ledger models
# -----------------------------------------
class AccountQuerySet(models.QuerySet):
    def by_code(self):
        # lexicographic code order is the chart-of-accounts order
        return self.order_by("code", "id")


class AccountManager(models.Manager.from_queryset(AccountQuerySet)):
    def get_by_natural_key(self, code):
        return self.get(code=code)


class JournalLineQuerySet(models.QuerySet):
    # Only posted entries participate in balances
    def posted(self):
        return self.filter(journal__status="posted")

    def for_accounts(self, account_ids):
        return self.filter(account_id__in=account_ids)

    # Strictly before a date: the opening-balance window
    def before(self, date):
        return self.filter(journal__entry_date__lt=date)

    # Inclusive on both ends: the movement window
    def between(self, start_date, end_date):
        return self.filter(
            journal__entry_date__gte=start_date,
            journal__entry_date__lte=end_date,
        )

    # Fixed order so running balances are reproducible
    def in_statement_order(self):
        return self.order_by(
            "journal__entry_date",
            "journal__created_at",
            "journal_id",
            "id",
        )


JournalLineManager = models.Manager.from_queryset(JournalLineQuerySet)


class PeriodQuerySet(models.QuerySet):
    def open(self):
        return self.filter(status="open")

    def covering(self, date):
        return self.filter(start_date__lte=date, end_date__gte=date)

    def overlapping(self, start_date, end_date):
        return self.filter(start_date__lte=end_date, end_date__gte=start_date)


PeriodManager = models.Manager.from_queryset(PeriodQuerySet)
