# budgeting/references.py
"""
Expense identifiers as they appear in URLs.

A saved row is addressed by its integer id. A day that has no row yet is
shown to clients as `virtual-YYYY-MM-DD`; writing to it creates the row for
that date.
"""
from collections import namedtuple
from datetime import date

from rest_framework.exceptions import ValidationError

VIRTUAL_PREFIX = 'virtual-'

PersistedExpense = namedtuple('PersistedExpense', ['id'])
VirtualExpense = namedtuple('VirtualExpense', ['date'])


def virtual_id(day):
    return f"{VIRTUAL_PREFIX}{day.isoformat()}"


def parse_iso_date(raw, field="date"):
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError({field: f"Invalid date '{raw}', expected YYYY-MM-DD"})


def parse_expense_ref(raw):
    raw = str(raw).strip()
    if raw.startswith(VIRTUAL_PREFIX):
        return VirtualExpense(parse_iso_date(raw[len(VIRTUAL_PREFIX):], field="id"))
    if raw.isdecimal():
        return PersistedExpense(int(raw))
    raise ValidationError({"id": f"Invalid expense id '{raw}'"})
