from django.contrib import admin

from ledger_core.models import Account, PaymentMethod, SystemAccountMapping

from .actions import deactivate_accounts


# Register `Account` model
@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    # show key accounting fields
    list_display = (
        "id",
        "code",
        "name",
        "ac_type",
        "parent",
        "is_control_account",
        "is_active",
    )
    list_filter = ("ac_type", "is_active", "is_control_account")
    search_fields = ("code", "name")
    ordering = ("code",)
    fieldsets = (
        (None, {"fields": ("code", "name", "ac_type", "parent")}),
        ("Posting", {"fields": ("is_control_account", "is_active")}),
    )
    actions = [deactivate_accounts]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("parent")

    # accounts with history are deactivated, never deleted
    def has_delete_permission(self, request, obj=None):
        if obj and (obj.journal_lines.exists() or obj.children.exists()):
            return False
        return super().has_delete_permission(request, obj)


# Register `SystemAccountMapping` model
@admin.register(SystemAccountMapping)
class SystemAccountMappingAdmin(admin.ModelAdmin):
    list_display = ("key", "account", "label")
    search_fields = ("key", "label", "account__code")
    autocomplete_fields = ("account",)


# Register `PaymentMethod` model
@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "account", "is_platform", "is_active")
    list_filter = ("is_platform", "is_active")
    search_fields = ("name",)
    autocomplete_fields = ("account",)
