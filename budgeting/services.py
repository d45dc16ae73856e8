# budgeting/services.py
"""
Month, budget category and daily expense operations.

Every function takes the authenticated user explicitly and filters on it, so
a row owned by someone else looks exactly like a missing one.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import DecimalField, Sum
from rest_framework import serializers

from . import calculations as calc
from .exceptions import NotFoundOrAccessDenied
from .models import DERIVED, Month, BudgetCategory, DailyExpense
from .references import VirtualExpense

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2100
# largest value the 12-digit money columns hold
MAX_TOTAL_BUDGETED = Decimal('9999999999.99')


def validate_period(month, year):
    errors = {}
    try:
        month = int(month)
        if not 1 <= month <= 12:
            errors['month'] = 'Month must be between 1 and 12'
    except (TypeError, ValueError):
        errors['month'] = 'Month must be an integer'
    try:
        year = int(year)
        if not MIN_YEAR <= year <= MAX_YEAR:
            errors['year'] = 'Year must be valid'
    except (TypeError, ValueError):
        errors['year'] = 'Year must be an integer'
    if errors:
        raise serializers.ValidationError(errors)
    return month, year


# ──────────────────────────────────────────────────────────────
# Month records
# ──────────────────────────────────────────────────────────────

def get_month(user, month, year):
    month, year = validate_period(month, year)
    try:
        return Month.objects.get(user=user, month=month, year=year)
    except Month.DoesNotExist:
        raise NotFoundOrAccessDenied('Month')


def get_month_by_id(user, month_id):
    try:
        return Month.objects.get(pk=month_id, user=user)
    except Month.DoesNotExist:
        raise NotFoundOrAccessDenied('Month')


def list_months(user):
    return Month.objects.filter(user=user).order_by('-year', '-month')


def recompute_month(month_record):
    """Refresh total_budgeted, balance_amount and daily_allocation from the categories."""
    total = month_record.categories.aggregate(
        total=Sum('amount', output_field=DecimalField(**DERIVED))
    )['total'] or calc.ZERO
    if total > MAX_TOTAL_BUDGETED:
        raise serializers.ValidationError(
            {'amount': f"Total budgeted for the month cannot exceed {MAX_TOTAL_BUDGETED}"}
        )
    month_record.total_budgeted = total
    month_record.balance_amount = month_record.income - total
    month_record.daily_allocation = calc.daily_allocation(
        month_record.income, total, month_record.days_in_month
    )
    month_record.save(update_fields=['total_budgeted', 'balance_amount', 'daily_allocation', 'updated_at'])
    return month_record


@transaction.atomic
def upsert_income(user, month, year, income):
    """Create or update the month's income. Returns (month_record, created)."""
    month, year = validate_period(month, year)
    income = calc.to_decimal(income)
    if income < 0:
        raise serializers.ValidationError({'income': 'Income must be a positive number'})

    record = Month.objects.select_for_update().filter(user=user, month=month, year=year).first()
    created = record is None
    if created:
        record = Month.objects.create(
            user=user,
            month=month,
            year=year,
            income=income,
            days_in_month=calc.days_in_month(month, year),
            daily_allocation=calc.ZERO,
            total_budgeted=calc.ZERO,
            balance_amount=income,
        )
    else:
        record.income = income
        record.save(update_fields=['income', 'updated_at'])

    recompute_month(record)
    logger.info(
        "%s income %s for user %s %d-%02d, daily allocation %s",
        'Created' if created else 'Updated', income, user.pk, year, month, record.daily_allocation,
    )
    return record, created


def finance_overview(user, month, year):
    record = get_month(user, month, year)
    categories = list(record.categories.filter(user=user).order_by('name'))
    totals = calc.partition_totals(categories)
    return {
        'month': record,
        'saving_goal': calc.saving_goal(record.income),
        'categories': categories,
        'totals': {
            'spent': totals[calc.SPENT],
            'savings': totals[calc.SAVINGS],
            'total': totals[calc.SPENT] + totals[calc.SAVINGS],
        },
    }


@transaction.atomic
def save_finance(user, month, year, income, budgets=()):
    """Income and a batch of new categories in one go. Returns (month_record, categories, created)."""
    record, created = upsert_income(user, month, year, income)
    categories = [
        BudgetCategory.objects.create(
            user=user, month=record, name=item['name'], amount=item['amount'], type=item['type'],
        )
        for item in budgets
    ]
    if categories:
        recompute_month(record)
    return record, categories, created


# ──────────────────────────────────────────────────────────────
# Budget categories
# ──────────────────────────────────────────────────────────────

def list_categories(user, month_id):
    record = get_month_by_id(user, month_id)
    return record.categories.filter(user=user).order_by('name')


def get_category(user, category_id):
    try:
        return BudgetCategory.objects.select_related('month').get(pk=category_id, user=user)
    except BudgetCategory.DoesNotExist:
        raise NotFoundOrAccessDenied('Category')


@transaction.atomic
def create_category(user, month_id, name, amount, category_type):
    record = get_month_by_id(user, month_id)
    category = BudgetCategory.objects.create(
        user=user, month=record, name=name, amount=amount, type=category_type,
    )
    recompute_month(record)
    logger.info("Created %s category '%s' (%s) for month %s", category_type, name, amount, record.pk)
    return category


@transaction.atomic
def update_category(user, category_id, **changes):
    category = get_category(user, category_id)
    fields = []
    for attr in ('name', 'amount', 'type'):
        if attr in changes and changes[attr] is not None:
            setattr(category, attr, changes[attr])
            fields.append(attr)
    if fields:
        category.save(update_fields=fields + ['updated_at'])
        recompute_month(category.month)
    return category


@transaction.atomic
def delete_category(user, category_id):
    category = get_category(user, category_id)
    record = category.month
    category.delete()
    recompute_month(record)
    logger.info("Deleted category %s from month %s", category_id, record.pk)


def category_summary(user, month_id):
    record = get_month_by_id(user, month_id)
    totals = calc.partition_totals(record.categories.filter(user=user))
    return {
        'income': record.income,
        'totalBudgeted': record.total_budgeted,
        'balanceAmount': record.balance_amount,
        'dailyAllocation': record.daily_allocation,
        'daysInMonth': record.days_in_month,
        'spentCategories': totals[calc.SPENT],
        'savingsCategories': totals[calc.SAVINGS],
    }


# ──────────────────────────────────────────────────────────────
# Daily expenses
# ──────────────────────────────────────────────────────────────

def _expense_on(user, day):
    return DailyExpense.objects.filter(user=user, date=day).first()


def _check_date_in_month(month_record, day):
    if (day.year, day.month) != (month_record.year, month_record.month):
        raise serializers.ValidationError(
            {'date': f"{day.isoformat()} is outside {month_record.year}-{month_record.month:02d}"}
        )


def _month_for_date(user, day):
    record = Month.objects.filter(user=user, month=day.month, year=day.year).first()
    if record is None:
        raise NotFoundOrAccessDenied('Month')
    return record


def placeholder_expense(month_record, day):
    """An unsaved expense standing in for a day with no spending recorded."""
    figures = calc.placeholder_day(month_record.daily_allocation)
    return DailyExpense(user_id=month_record.user_id, month=month_record, date=day, **figures._asdict())


def list_expenses(user, month_id):
    record = get_month_by_id(user, month_id)
    return record.expenses.filter(user=user).order_by('date')


def month_days(user, month_id):
    """Every day of the month: saved rows where they exist, placeholders elsewhere."""
    record = get_month_by_id(user, month_id)
    saved = {expense.date: expense for expense in record.expenses.filter(user=user)}
    return [
        saved.get(day) or placeholder_expense(record, day)
        for day in calc.month_dates(record.month, record.year)
    ]


def get_expense_for_date(user, day):
    expense = _expense_on(user, day)
    if expense is None:
        raise NotFoundOrAccessDenied('Expense')
    return expense


def get_expense(user, ref):
    if isinstance(ref, VirtualExpense):
        return _expense_on(user, ref.date) or placeholder_expense(_month_for_date(user, ref.date), ref.date)
    try:
        return DailyExpense.objects.get(pk=ref.id, user=user)
    except DailyExpense.DoesNotExist:
        raise NotFoundOrAccessDenied('Expense')


def _touch_next_day(user_id, day, remaining):
    """
    Re-derive the following day's carry from `remaining` (None when `day` was
    deleted). Only one day forward; use recompute_chain for the rest.
    """
    following = DailyExpense.objects.filter(user_id=user_id, date=calc.next_day(day)).first()
    if following is None:
        return None
    figures = calc.chain_day(following.allocated_budget, remaining, following.amount_spent)
    following.cumulative_savings = figures.cumulative_savings
    following.cumulative_budget = figures.cumulative_budget
    following.remaining = figures.remaining
    following.save(update_fields=['cumulative_savings', 'cumulative_budget', 'remaining', 'updated_at'])
    logger.debug("Refreshed carry on %s for user %s", following.date, user_id)
    return following


def _apply_update(expense, amount_spent, notes=None):
    # allocated_budget and cumulative_savings stay as stored
    expense.amount_spent = calc.to_decimal(amount_spent)
    if notes is not None:
        expense.notes = notes
    expense.remaining = calc.recompute_remaining(expense.cumulative_budget, expense.amount_spent)
    expense.save(update_fields=['amount_spent', 'notes', 'remaining', 'updated_at'])
    _touch_next_day(expense.user_id, expense.date, expense.remaining)
    logger.info("Updated expense %s on %s: spent %s", expense.pk, expense.date, expense.amount_spent)
    return expense


@transaction.atomic
def record_expense(user, month_id, day, amount_spent, notes=None):
    """
    Record spending for `day`. Returns (expense, created).

    A day that already has a row is updated in place; otherwise the new row
    carries the previous calendar day's remaining forward.
    """
    record = get_month_by_id(user, month_id)
    _check_date_in_month(record, day)

    existing = DailyExpense.objects.select_for_update().filter(user=user, date=day).first()
    if existing is not None:
        return _apply_update(existing, amount_spent, notes), False

    prior = _expense_on(user, calc.previous_day(day))
    figures = calc.chain_day(
        record.daily_allocation, prior.remaining if prior else None, amount_spent,
    )
    expense = DailyExpense.objects.create(
        user=user, month=record, date=day, notes=notes, **figures._asdict()
    )
    logger.info(
        "Recorded expense on %s for user %s: spent %s, remaining %s",
        day, user.pk, figures.amount_spent, figures.remaining,
    )
    return expense, True


@transaction.atomic
def update_expense(user, ref, amount_spent, notes=None):
    """Returns (expense, created); a placeholder ref inserts for its date."""
    if isinstance(ref, VirtualExpense):
        record = _month_for_date(user, ref.date)
        return record_expense(user, record.pk, ref.date, amount_spent, notes)
    try:
        expense = DailyExpense.objects.select_for_update().get(pk=ref.id, user=user)
    except DailyExpense.DoesNotExist:
        raise NotFoundOrAccessDenied('Expense')
    return _apply_update(expense, amount_spent, notes), False


@transaction.atomic
def delete_expense(user, ref):
    if isinstance(ref, VirtualExpense):
        # nothing saved under a placeholder
        raise NotFoundOrAccessDenied('Expense')
    try:
        expense = DailyExpense.objects.get(pk=ref.id, user=user)
    except DailyExpense.DoesNotExist:
        raise NotFoundOrAccessDenied('Expense')
    day, user_id = expense.date, expense.user_id
    expense.delete()
    _touch_next_day(user_id, day, None)
    logger.info("Deleted expense %s on %s", ref.id, day)


@transaction.atomic
def recompute_chain(user, month_id, start=None):
    """
    Re-run the recurrence over every saved day of the month from `start`
    (default: the first day) using each row's stored allocated_budget.

    Returns the rows that changed.
    """
    record = get_month_by_id(user, month_id)
    expenses = record.expenses.filter(user=user).select_for_update().order_by('date')
    if start is not None:
        _check_date_in_month(record, start)
        expenses = expenses.filter(date__gte=start)
    expenses = list(expenses)
    if not expenses:
        return []

    prior = _expense_on(user, calc.previous_day(expenses[0].date))
    replayed = calc.replay_chain(
        [(e.date, e.allocated_budget, e.amount_spent) for e in expenses],
        prior.remaining if prior else None,
    )

    changed = []
    for expense, (_, figures) in zip(expenses, replayed):
        stored = (expense.cumulative_savings, expense.cumulative_budget, expense.remaining)
        if stored == (figures.cumulative_savings, figures.cumulative_budget, figures.remaining):
            continue
        expense.cumulative_savings = figures.cumulative_savings
        expense.cumulative_budget = figures.cumulative_budget
        expense.remaining = figures.remaining
        expense.save(update_fields=['cumulative_savings', 'cumulative_budget', 'remaining', 'updated_at'])
        changed.append(expense)

    logger.info(
        "Recomputed chain for month %s from %s: %d of %d days changed",
        record.pk, expenses[0].date, len(changed), len(expenses),
    )
    return changed
