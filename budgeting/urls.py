# budgeting/urls.py
from django.urls import path, register_converter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views import (
    RegisterView,
    IncomeView, IncomeDetailView, recompute_month_view,
    FinanceView, FinanceDetailView,
    CategoryListView, category_summary_view, BudgetCategoryView, BudgetCategoryDetailView,
    ExpenseMonthView, expense_by_date_view, ExpenseView, ExpenseDetailView, recompute_chain_view,
    monthly_report_view, trend_report_view, savings_report_view, spending_report_view,
)


class IsoDateConverter:
    """Matches YYYY-MM-DD text; the view parses it into a date."""
    regex = r'\d{4}-\d{2}-\d{2}'

    def to_python(self, value):
        return value

    def to_url(self, value):
        return value.isoformat() if hasattr(value, 'isoformat') else str(value)


register_converter(IsoDateConverter, 'isodate')

urlpatterns = [
    path('api/register/', RegisterView.as_view(), name='register'),
    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Income
    path('api/income/', IncomeView.as_view(), name='income'),
    path('api/income/<int:month>/<int:year>/', IncomeDetailView.as_view(), name='income-detail'),
    path('api/income/<int:pk>/recompute/', recompute_month_view, name='income-recompute'),

    # Income + budgets together
    path('api/finance/', FinanceView.as_view(), name='finance'),
    path('api/finance/<int:month>/<int:year>/', FinanceDetailView.as_view(), name='finance-detail'),

    # Budget categories
    path('api/budget/', BudgetCategoryView.as_view(), name='budget'),
    path('api/budget/month/<int:month_id>/', CategoryListView.as_view(), name='budget-month'),
    path('api/budget/summary/<int:month_id>/', category_summary_view, name='budget-summary'),
    path('api/budget/<int:pk>/', BudgetCategoryDetailView.as_view(), name='budget-detail'),

    # Daily expenses
    path('api/expense/', ExpenseView.as_view(), name='expense'),
    path('api/expense/month/<int:month_id>/', ExpenseMonthView.as_view(), name='expense-month'),
    path('api/expense/month/<int:month_id>/recompute/', recompute_chain_view, name='expense-recompute'),
    path('api/expense/date/<isodate:day>/', expense_by_date_view, name='expense-date'),
    path('api/expense/<str:ref>/', ExpenseDetailView.as_view(), name='expense-detail'),

    # Reports
    path('api/report/monthly/<int:month>/<int:year>/', monthly_report_view, name='report-monthly'),
    path('api/report/trend/<int:month>/<int:year>/', trend_report_view, name='report-trend'),
    path('api/report/savings/<int:month>/<int:year>/', savings_report_view, name='report-savings'),
    path('api/report/spending/<int:month>/<int:year>/', spending_report_view, name='report-spending'),
]
