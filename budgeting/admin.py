from django.contrib import admin

from .models import Month, BudgetCategory, DailyExpense


@admin.register(Month)
class MonthAdmin(admin.ModelAdmin):
    list_display = ('user', 'year', 'month', 'income', 'total_budgeted', 'daily_allocation')
    list_filter = ('year', 'month')


@admin.register(BudgetCategory)
class BudgetCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'amount', 'month', 'user')
    list_filter = ('type',)


@admin.register(DailyExpense)
class DailyExpenseAdmin(admin.ModelAdmin):
    list_display = ('user', 'date', 'amount_spent', 'cumulative_budget', 'remaining')
    date_hierarchy = 'date'
