# budgeting/views.py
import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import reports, services
from .references import parse_expense_ref, parse_iso_date
from .serializers import (
    RegisterSerializer,
    MonthSerializer, IncomeInputSerializer,
    BudgetCategorySerializer, CategoryCreateSerializer, CategoryUpdateSerializer,
    FinanceInputSerializer,
    DailyExpenseSerializer, ExpenseInputSerializer, ExpenseUpdateSerializer,
    RecomputeChainSerializer,
)

logger = logging.getLogger(__name__)


def invalid(serializer):
    return Response({
        "error": "Validation failed",
        "details": serializer.errors,
    }, status=status.HTTP_400_BAD_REQUEST)


def health(request):
    return HttpResponse('Expense Tracker API is running', content_type='text/plain')


# Register API
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response({"message": "User registered successfully"}, status=status.HTTP_201_CREATED)
        return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


# ──────────────────────────────────────────────────────────────
# Income / month records
# ──────────────────────────────────────────────────────────────

class IncomeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """GET /api/income/ → every month on record, newest first"""
        months = services.list_months(request.user)
        return Response(MonthSerializer(months, many=True).data)

    def post(self, request):
        """POST /api/income/ → create or update a month's income"""
        serializer = IncomeInputSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        record, created = services.upsert_income(request.user, data['month'], data['year'], data['income'])
        return Response(
            MonthSerializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class IncomeDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, month, year):
        record = services.get_month(request.user, month, year)
        return Response(MonthSerializer(record).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recompute_month_view(request, pk):
    record = services.recompute_month(services.get_month_by_id(request.user, pk))
    return Response(MonthSerializer(record).data)


# ──────────────────────────────────────────────────────────────
# Combined income + budgets
# ──────────────────────────────────────────────────────────────

class FinanceDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, month, year):
        overview = services.finance_overview(request.user, month, year)
        month_data = MonthSerializer(overview['month']).data
        return Response({
            "month": month_data,
            "budgets": {
                "categories": BudgetCategorySerializer(overview['categories'], many=True).data,
                "totals": overview['totals'],
            },
        })


class FinanceView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = FinanceInputSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        income = serializer.validated_data['income']
        budgets = serializer.validated_data.get('budgets', [])
        record, categories, created = services.save_finance(
            request.user, income['month'], income['year'], income['amount'], budgets,
        )
        return Response({
            "month": MonthSerializer(record).data,
            "budgets": BudgetCategorySerializer(categories, many=True).data,
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


# ──────────────────────────────────────────────────────────────
# Budget categories
# ──────────────────────────────────────────────────────────────

class CategoryListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, month_id):
        categories = services.list_categories(request.user, month_id)
        return Response(BudgetCategorySerializer(categories, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def category_summary_view(request, month_id):
    return Response(services.category_summary(request.user, month_id))


class BudgetCategoryView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """POST /api/budget/ → add a category to a month"""
        serializer = CategoryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        category = services.create_category(
            request.user, data['monthId'], data['name'], data['amount'], data['type'],
        )
        return Response(BudgetCategorySerializer(category).data, status=status.HTTP_201_CREATED)


class BudgetCategoryDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BudgetCategorySerializer(services.get_category(request.user, pk)).data)

    def put(self, request, pk):
        """PUT /api/budget/1/ → update name, amount and/or type"""
        serializer = CategoryUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        category = services.update_category(request.user, pk, **serializer.validated_data)
        return Response(BudgetCategorySerializer(category).data)

    patch = put

    def delete(self, request, pk):
        services.delete_category(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────
# Daily expenses
# ──────────────────────────────────────────────────────────────

class ExpenseMonthView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, month_id):
        """
        GET /api/expense/month/3/                        → saved days only
        GET /api/expense/month/3/?include_placeholders=1 → every day of the month
        """
        if request.query_params.get('include_placeholders') in ('1', 'true', 'yes'):
            expenses = services.month_days(request.user, month_id)
        else:
            expenses = services.list_expenses(request.user, month_id)
        return Response(DailyExpenseSerializer(expenses, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expense_by_date_view(request, day):
    expense = services.get_expense_for_date(request.user, parse_iso_date(day))
    return Response(DailyExpenseSerializer(expense).data)


class ExpenseView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """POST /api/expense/ → record spending for a day"""
        serializer = ExpenseInputSerializer(data=request.data)
        if not serializer.is_valid():
            logger.debug("Rejected expense payload: %s", serializer.errors)
            return invalid(serializer)
        data = serializer.validated_data
        expense, created = services.record_expense(
            request.user, data['monthId'], data['date'], data['amountSpent'], data.get('notes'),
        )
        return Response(
            DailyExpenseSerializer(expense).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ExpenseDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, ref):
        expense = services.get_expense(request.user, parse_expense_ref(ref))
        return Response(DailyExpenseSerializer(expense).data)

    def put(self, request, ref):
        """PUT /api/expense/1/ or /api/expense/virtual-2025-06-03/"""
        expense_ref = parse_expense_ref(ref)
        serializer = ExpenseUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        expense, created = services.update_expense(
            request.user, expense_ref, data['amountSpent'], data.get('notes'),
        )
        return Response(
            DailyExpenseSerializer(expense).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def delete(self, request, ref):
        services.delete_expense(request.user, parse_expense_ref(ref))
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recompute_chain_view(request, month_id):
    serializer = RecomputeChainSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid(serializer)
    changed = services.recompute_chain(request.user, month_id, serializer.validated_data.get('start'))
    return Response({
        "updated": len(changed),
        "expenses": DailyExpenseSerializer(changed, many=True).data,
    })


# ──────────────────────────────────────────────────────────────
# Reports
# ──────────────────────────────────────────────────────────────

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_report_view(request, month, year):
    return Response(reports.monthly_summary(request.user, month, year))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def trend_report_view(request, month, year):
    return Response(reports.expense_trend(request.user, month, year))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def savings_report_view(request, month, year):
    return Response(reports.savings_analysis(request.user, month, year))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def spending_report_view(request, month, year):
    return Response(reports.spending_analysis(request.user, month, year))
