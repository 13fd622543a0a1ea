from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("accounts/", views.account_list_view, name="account-list"),
    path("accounts/<int:account_id>/balance/", views.account_balance_view,
         name="account-balance"),
    path("accounts/<int:account_id>/movement/", views.account_movement_view,
         name="account-movement"),
    path("accounts/<int:account_id>/statement/", views.account_statement_view,
         name="account-statement"),
    path("customers/<int:customer_id>/statement/", views.customer_statement_view,
         name="customer-statement"),
    path("reports/trial-balance/", views.trial_balance_view, name="trial-balance"),
    path("platforms/balances/", views.platform_balances_view,
         name="platform-balances"),
    path("settlements/", views.settlement_view, name="settlement-create"),
]
