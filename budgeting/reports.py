# budgeting/reports.py
"""
Read-only report views over a month: summary, trend, savings and spending.

Month totals come from the stored month row plus database aggregates. When
those look blank or disagree with the categories, the same figures are recomputed
from the raw category and expense rows instead of failing the request.
"""
import logging
from collections import namedtuple

from django.db.models import DecimalField, Sum

from . import calculations as calc
from .models import DERIVED
from .services import get_month

logger = logging.getLogger(__name__)

MonthTotals = namedtuple(
    'MonthTotals',
    ['income', 'planned_spent', 'planned_savings', 'total_budgeted',
     'daily_allocation', 'balance_amount', 'actual_spent', 'source'],
)


def _stored_totals(month_record):
    wide = DecimalField(**DERIVED)
    grouped = month_record.categories.values('type').annotate(total=Sum('amount', output_field=wide)).order_by()
    by_type = {row['type']: row['total'] for row in grouped}
    actual = month_record.expenses.aggregate(total=Sum('amount_spent', output_field=wide))['total']
    return MonthTotals(
        income=month_record.income,
        planned_spent=by_type.get(calc.SPENT),
        planned_savings=by_type.get(calc.SAVINGS),
        total_budgeted=month_record.total_budgeted,
        daily_allocation=month_record.daily_allocation,
        balance_amount=month_record.balance_amount,
        actual_spent=actual,
        source='stored',
    )


def _raw_totals(month_record):
    categories = list(month_record.categories.all())
    planned = calc.partition_totals(categories)
    total_budgeted = planned[calc.SPENT] + planned[calc.SAVINGS]
    actual = sum((e.amount_spent for e in month_record.expenses.all()), calc.ZERO)
    return MonthTotals(
        income=month_record.income,
        planned_spent=planned[calc.SPENT],
        planned_savings=planned[calc.SAVINGS],
        total_budgeted=total_budgeted,
        daily_allocation=calc.daily_allocation(month_record.income, total_budgeted, month_record.days_in_month),
        balance_amount=month_record.income - total_budgeted,
        actual_spent=actual,
        source='raw',
    )


def looks_degraded(totals):
    """True when stored figures are blank or no longer match the categories."""
    planned = calc.to_decimal(totals.planned_spent) + calc.to_decimal(totals.planned_savings)
    if totals.total_budgeted != planned:
        return True
    # a zero allocation is only right when the budget swallows the whole income
    if totals.daily_allocation == 0 and totals.income != totals.total_budgeted:
        return True
    return False


def month_totals(month_record):
    totals = _stored_totals(month_record)
    if looks_degraded(totals):
        logger.warning(
            "Stored totals for month %s look stale; recomputing from raw rows", month_record.pk,
        )
        totals = _raw_totals(month_record)
    return totals._replace(
        planned_spent=calc.to_decimal(totals.planned_spent),
        planned_savings=calc.to_decimal(totals.planned_savings),
        actual_spent=calc.to_decimal(totals.actual_spent),
    )


def _latest_remaining(month_record):
    last = month_record.expenses.order_by('-date').only('remaining').first()
    return last.remaining if last else calc.ZERO


def monthly_summary(user, month, year):
    record = get_month(user, month, year)
    totals = month_totals(record)
    total_daily_allocation = totals.daily_allocation * record.days_in_month
    daily_spending = {
        expense.date.isoformat(): float(expense.amount_spent)
        for expense in record.expenses.filter(user=user).order_by('date')
    }
    return {
        "month": record.month,
        "year": record.year,
        "totalIncome": float(totals.income),
        "totalSavings": float(totals.planned_savings),
        "totalSpent": float(totals.planned_spent),
        "totalDailyAllocation": float(total_daily_allocation),
        "totalRemaining": float(totals.balance_amount),
        "extraSavings": float(_latest_remaining(record)),
        "dailySpending": daily_spending,
        "perdayLimit": float(total_daily_allocation / record.days_in_month),
        "savingGoal": float(calc.saving_goal(totals.income)),
    }


def expense_trend(user, month, year):
    record = get_month(user, month, year)
    return [
        {
            "date": expense.date.isoformat(),
            "amountSpent": float(expense.amount_spent),
            "allocatedBudget": float(expense.allocated_budget),
            "cumulativeSavings": float(expense.cumulative_savings),
            "cumulativeBudget": float(expense.cumulative_budget),
            "remaining": float(expense.remaining),
            "notes": expense.notes,
            "indicator": expense.indicator,
        }
        for expense in record.expenses.filter(user=user).order_by('date')
    ]


def _planned(record, user, category_type):
    categories = record.categories.filter(user=user, type=category_type).order_by('-amount')
    return [{"name": c.name, "amount": float(c.amount)} for c in categories]


def savings_analysis(user, month, year):
    record = get_month(user, month, year)
    totals = month_totals(record)
    extra = _latest_remaining(record)
    total_savings = totals.planned_savings + extra
    return {
        "month": record.month,
        "year": record.year,
        "plannedSavings": _planned(record, user, calc.SAVINGS),
        "totalPlannedSavings": float(totals.planned_savings),
        "extraSavings": float(extra),
        "totalSavings": float(total_savings),
        "savingsPercentage": float(calc.percentage_of(total_savings, totals.income)),
    }


def spending_analysis(user, month, year):
    record = get_month(user, month, year)
    totals = month_totals(record)
    return {
        "month": record.month,
        "year": record.year,
        "plannedSpending": _planned(record, user, calc.SPENT),
        "totalPlannedSpending": float(totals.planned_spent),
        "totalActualSpending": float(totals.actual_spent),
        "difference": float(totals.planned_spent - totals.actual_spent),
        "spendingPercentage": float(calc.percentage_of(totals.actual_spent, totals.income)),
    }
