from django.contrib import admin

from ledger_core.models import JournalLine


class JournalLineInline(admin.TabularInline):
    """Show JournalLine rows on JournalEntry page"""

    model = JournalLine
    extra = 0  # don’t show “empty” rows by default (prevents clutter)
    fields = ("account", "description", "debit", "credit")
    autocomplete_fields = ("account",)
    ordering = ("id",)  # lines appear in creation order

    # lines of a posted journal are frozen
    def _is_posted(self, obj):
        return bool(obj and obj.status == "posted")

    def get_readonly_fields(self, request, obj=None):
        if self._is_posted(obj):
            return self.fields
        return super().get_readonly_fields(request, obj)

    def has_add_permission(self, request, obj=None):
        return not self._is_posted(obj) and super().has_add_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return not self._is_posted(obj) and super().has_delete_permission(request, obj)
