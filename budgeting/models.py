# budgeting/models.py
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .calculations import spending_indicator
from .references import virtual_id

MONEY = dict(max_digits=12, decimal_places=2)
DERIVED = dict(max_digits=16, decimal_places=4)


class Month(models.Model):
    """One user's income and allocation figures for a calendar month."""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='months')
    month = models.IntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    year = models.IntegerField(validators=[MinValueValidator(2000), MaxValueValidator(2100)])
    income = models.DecimalField(default=Decimal('0'), **MONEY)
    days_in_month = models.IntegerField()
    daily_allocation = models.DecimalField(default=Decimal('0'), **DERIVED)
    total_budgeted = models.DecimalField(default=Decimal('0'), **MONEY)
    balance_amount = models.DecimalField(default=Decimal('0'), **DERIVED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'months'
        ordering = ['-year', '-month']
        constraints = [
            models.UniqueConstraint(fields=['user', 'month', 'year'], name='unique_user_month_year'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.year}-{self.month:02d}: {self.income}"


class BudgetCategory(models.Model):
    SPENT = 'Spent'
    SAVINGS = 'Savings'
    TYPE_CHOICES = [(SPENT, 'Spent'), (SAVINGS, 'Savings')]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='budget_categories')
    month = models.ForeignKey(Month, on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    amount = models.DecimalField(default=Decimal('0'), **MONEY)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budget_categories'
        ordering = ['name']
        indexes = [
            models.Index(fields=['user', 'month'], name='budget_cat_user_month_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.type}): {self.amount}"


class DailyExpense(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='daily_expenses')
    month = models.ForeignKey(Month, on_delete=models.CASCADE, related_name='expenses')
    date = models.DateField()
    amount_spent = models.DecimalField(default=Decimal('0'), **MONEY)
    allocated_budget = models.DecimalField(default=Decimal('0'), **DERIVED)
    cumulative_savings = models.DecimalField(default=Decimal('0'), **DERIVED)
    cumulative_budget = models.DecimalField(default=Decimal('0'), **DERIVED)
    remaining = models.DecimalField(default=Decimal('0'), **DERIVED)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_expenses'
        ordering = ['date']
        constraints = [
            models.UniqueConstraint(fields=['user', 'date'], name='unique_user_date'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.date}: {self.amount_spent}"

    @property
    def indicator(self):
        return spending_indicator(self.amount_spent, self.allocated_budget)

    @property
    def is_placeholder(self):
        return self.pk is None

    @property
    def reference(self):
        """Integer id once saved, `virtual-YYYY-MM-DD` before."""
        return virtual_id(self.date) if self.pk is None else self.pk
