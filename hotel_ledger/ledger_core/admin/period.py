from django.contrib import admin

from ledger_core.models import AccountingPeriod

from .actions import close_periods, reopen_periods


# Register `AccountingPeriod` model
@admin.register(AccountingPeriod)
class AccountingPeriodAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "start_date", "end_date", "status", "opened_at")
    list_filter = ("status",)
    search_fields = ("name",)
    ordering = ("-start_date",)
    # status changes only through the close/reopen actions (audited)
    readonly_fields = ("status", "opened_at", "created_at")
    actions = [close_periods, reopen_periods]
