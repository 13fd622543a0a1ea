from decimal import Decimal

from django.contrib import admin
from django.db.models import Prefetch
from django.utils.html import format_html

from ledger_core.models import JournalEntry, JournalLine

from .actions import post_journal_entries, reverse_journal_entries
from .inlines import JournalLineInline


# Register `JournalEntry` model
@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "voucher_number",
        "entry_date",
        "description",
        "status",
        "reference_type",
        "reference_id",
        "posted_at",
        "created_by",
        "balanced",
    )
    list_filter = ("status", "reference_type", "entry_date")
    search_fields = ("voucher_number", "description", "reference_id")
    date_hierarchy = "entry_date"
    # status/period/voucher are set by posting, never typed in
    readonly_fields = (
        "status", "period", "voucher_number", "posted_at", "created_by", "reverses")
    inlines = [JournalLineInline]
    actions = [post_journal_entries, reverse_journal_entries]

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        lines_qs = JournalLine.objects.select_related("account")
        return qs.select_related("period", "created_by").prefetch_related(
            Prefetch("lines", queryset=lines_qs)
        )

    # Show total debits / total credits for each journal
    def balanced(self, obj):
        d, c = obj.compute_totals()
        return format_html(
            "<b>{}</b> / <small>{}</small>",
            d or Decimal("0.00"),
            c or Decimal("0.00"),
        )

    balanced.short_description = "Debits / Credits"

    """ Make entries immutable once posted """
    def get_readonly_fields(self, request, obj=None):
        r = list(self.readonly_fields)
        if obj and obj.status == "posted":
            r += ["hotel", "entry_date", "description"]
        return r

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status == "posted":
            return False  # corrections go through the reverse action
        return super().has_delete_permission(request, obj)

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


# Register `JournalLine` model
@admin.register(JournalLine)
class JournalLineAdmin(admin.ModelAdmin):
    list_display = ("id", "journal", "account", "debit", "credit", "description")
    list_filter = ("journal__status", "account")
    search_fields = ("description", "account__code", "journal__voucher_number")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("journal", "account")

    # lines are created via the JournalEntry inline only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        if obj and obj.journal.status == "posted":
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.journal.status == "posted":
            return False
        return super().has_delete_permission(request, obj)
