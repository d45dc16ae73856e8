# budgeting/calculations.py
"""
Pure arithmetic behind the daily budget.

Nothing here touches the database: services feed stored rows in and write the
results back, and tests use these functions to check that the cached columns
still agree with what they should be.
"""
import calendar
from collections import namedtuple
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from dateutil.relativedelta import relativedelta

ZERO = Decimal('0')
ALLOCATION_PLACES = Decimal('0.0001')
PERCENT_PLACES = Decimal('0.01')

SAVING_GOAL_RATE = Decimal('0.25')
GOOD_SPENDING_RATIO = Decimal('0.7')

GOOD = 'good'
AVERAGE = 'average'
REACHED = 'reached'

SPENT = 'Spent'
SAVINGS = 'Savings'

DayFigures = namedtuple(
    'DayFigures',
    ['allocated_budget', 'cumulative_savings', 'cumulative_budget', 'amount_spent', 'remaining'],
)


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def days_in_month(month, year):
    return calendar.monthrange(year, month)[1]


def month_dates(month, year):
    """Every calendar date of the month, in order."""
    first = date(year, month, 1)
    return [first + relativedelta(days=offset) for offset in range(days_in_month(month, year))]


def previous_day(day):
    return day - relativedelta(days=1)


def next_day(day):
    return day + relativedelta(days=1)


def daily_allocation(income, total_budgeted, days):
    """
    (income - total_budgeted) / days, rounded to 4 places.

    Over-budgeted months give a negative allocation; it is not clamped.
    """
    if not days:
        return ZERO
    spendable = to_decimal(income) - to_decimal(total_budgeted)
    return (spendable / Decimal(days)).quantize(ALLOCATION_PLACES, rounding=ROUND_HALF_UP)


def saving_goal(income):
    return to_decimal(income) * SAVING_GOAL_RATE


def recompute_remaining(cumulative_budget, amount_spent):
    return to_decimal(cumulative_budget) - to_decimal(amount_spent)


def chain_day(allocated_budget, prior_remaining, amount_spent):
    """
    Figures for one day given the previous day's remaining.

    `prior_remaining` is None when the previous calendar day has no record;
    the carry is then zero.
    """
    allocated_budget = to_decimal(allocated_budget)
    cumulative_savings = to_decimal(prior_remaining)
    cumulative_budget = allocated_budget + cumulative_savings
    amount_spent = to_decimal(amount_spent)
    return DayFigures(
        allocated_budget=allocated_budget,
        cumulative_savings=cumulative_savings,
        cumulative_budget=cumulative_budget,
        amount_spent=amount_spent,
        remaining=recompute_remaining(cumulative_budget, amount_spent),
    )


def placeholder_day(allocation):
    # No carry: an unsaved day assumes its whole allocation is still there.
    return chain_day(allocation, None, ZERO)


def replay_chain(days, prior_remaining=None):
    """
    Re-run the recurrence over `days`, a date-ordered list of
    (date, allocated_budget, amount_spent) tuples.

    `prior_remaining` is the remaining of the calendar day before the first
    entry, if that day has a record. A gap of one or more days breaks the
    carry, the same as at insert time.

    Returns a list of (date, DayFigures).
    """
    results = []
    last_date = None
    last_remaining = prior_remaining
    for day, allocated_budget, amount_spent in days:
        if last_date is not None and previous_day(day) != last_date:
            last_remaining = None
        figures = chain_day(allocated_budget, last_remaining, amount_spent)
        results.append((day, figures))
        last_date = day
        last_remaining = figures.remaining
    return results


def spending_indicator(amount_spent, allocated_budget):
    amount_spent = to_decimal(amount_spent)
    allocated_budget = to_decimal(allocated_budget)
    if amount_spent <= allocated_budget * GOOD_SPENDING_RATIO:
        return GOOD
    if amount_spent <= allocated_budget:
        return AVERAGE
    return REACHED


def partition_totals(categories):
    """Sum category amounts per type. Accepts objects or dicts with `type`/`amount`."""
    totals = {SPENT: ZERO, SAVINGS: ZERO}
    for cat in categories:
        if isinstance(cat, dict):
            kind, amount = cat['type'], cat['amount']
        else:
            kind, amount = cat.type, cat.amount
        totals[kind] = totals.get(kind, ZERO) + to_decimal(amount)
    return totals


def percentage_of(part, whole):
    whole = to_decimal(whole)
    if whole <= 0:
        return ZERO
    return (to_decimal(part) / whole * 100).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)
