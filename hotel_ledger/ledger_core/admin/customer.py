from django.contrib import admin

from ledger_core.models import Customer, CustomerAccountLink, Hotel


class CustomerAccountLinkInline(admin.StackedInline):
    model = CustomerAccountLink
    extra = 0
    can_delete = False
    readonly_fields = ("account", "created_at")

    # links are created by ensure_customer_account()
    def has_add_permission(self, request, obj=None):
        return False


# Register `Customer` model
@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "full_name", "phone", "email", "ledger_code")
    search_fields = ("full_name", "phone", "email")
    inlines = [CustomerAccountLinkInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account_link__account")

    def ledger_code(self, obj):
        account = obj.ledger_account
        return account.code if account else "-"

    ledger_code.short_description = "Ledger account"


# Register `Hotel` model
@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug", "created_at")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
