from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from ledger_core.services import (close_period, deactivate_account, post_draft,
                                  reopen_period, reverse_entry)

# ---------- Admin actions ----------
# Every action goes through the service layer so admins get the same
# checks (balance, period, activity) as API callers.


def _run_each(modeladmin, request, queryset, func, label):
    success = failures = 0
    for obj in queryset:
        try:
            func(obj)
            success += 1
        except ValidationError as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not %(label)s %(obj)s: %(err)s") % {
                    "label": label, "obj": obj, "err": "; ".join(exc.messages)},
                level=messages.ERROR,
            )
    # Final summary message
    modeladmin.message_user(
        request,
        _("%(label)s: %(success)d done, %(failures)d failed.") % {
            "label": label.capitalize(), "success": success, "failures": failures},
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


@admin.action(description="Post selected draft journals")
def post_journal_entries(modeladmin, request, queryset):
    _run_each(
        modeladmin, request, queryset.filter(status="draft"),
        lambda je: post_draft(je.pk, user=request.user), "post",
    )


@admin.action(description="Reverse selected posted journals")
def reverse_journal_entries(modeladmin, request, queryset):
    _run_each(
        modeladmin, request, queryset.filter(status="posted"),
        lambda je: reverse_entry(je.pk, user=request.user), "reverse",
    )


@admin.action(description="Close selected periods")
def close_periods(modeladmin, request, queryset):
    _run_each(
        modeladmin, request, queryset,
        lambda p: close_period(p.pk, user=request.user), "close",
    )


@admin.action(description="Reopen selected periods")
def reopen_periods(modeladmin, request, queryset):
    _run_each(
        modeladmin, request, queryset,
        lambda p: reopen_period(p.pk, user=request.user), "reopen",
    )


@admin.action(description="Deactivate selected accounts")
def deactivate_accounts(modeladmin, request, queryset):
    _run_each(
        modeladmin, request, queryset,
        lambda a: deactivate_account(a.pk, user=request.user), "deactivate",
    )
