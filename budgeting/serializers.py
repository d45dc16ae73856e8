# budgeting/serializers.py
from decimal import Decimal

from django.contrib.auth.models import User
from rest_framework import serializers

from .calculations import saving_goal
from .models import Month, BudgetCategory, DailyExpense

AMOUNT = dict(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class RegisterSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ('username', 'email', 'password')
        extra_kwargs = {'password': {'write_only': True}}

    def create(self, validated_data):
        user = User.objects.create_user(**validated_data)
        return user


class MonthSerializer(serializers.ModelSerializer):
    daysInMonth = serializers.IntegerField(source='days_in_month', read_only=True)
    dailyAllocation = serializers.DecimalField(source='daily_allocation', max_digits=16, decimal_places=4, read_only=True)
    totalBudgeted = serializers.DecimalField(source='total_budgeted', max_digits=12, decimal_places=2, read_only=True)
    balanceAmount = serializers.DecimalField(source='balance_amount', max_digits=16, decimal_places=4, read_only=True)
    savingGoal = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Month
        fields = [
            'id', 'month', 'year', 'income', 'daysInMonth', 'dailyAllocation',
            'totalBudgeted', 'balanceAmount', 'savingGoal', 'createdAt', 'updatedAt',
        ]

    def get_savingGoal(self, obj):
        return saving_goal(obj.income)


class IncomeInputSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    income = serializers.DecimalField(**AMOUNT)


class BudgetCategorySerializer(serializers.ModelSerializer):
    monthId = serializers.IntegerField(source='month_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = BudgetCategory
        fields = ['id', 'monthId', 'name', 'amount', 'type', 'createdAt', 'updatedAt']


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, allow_blank=False, trim_whitespace=True)
    amount = serializers.DecimalField(**AMOUNT)
    type = serializers.ChoiceField(choices=BudgetCategory.TYPE_CHOICES)


class CategoryCreateSerializer(CategoryInputSerializer):
    monthId = serializers.IntegerField(min_value=1)


class CategoryUpdateSerializer(CategoryInputSerializer):
    # every field optional on update
    name = serializers.CharField(max_length=100, allow_blank=False, trim_whitespace=True, required=False)
    amount = serializers.DecimalField(required=False, **AMOUNT)
    type = serializers.ChoiceField(choices=BudgetCategory.TYPE_CHOICES, required=False)


class FinanceIncomeSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    amount = serializers.DecimalField(**AMOUNT)


class FinanceInputSerializer(serializers.Serializer):
    income = FinanceIncomeSerializer()
    budgets = CategoryInputSerializer(many=True, required=False)


class DailyExpenseSerializer(serializers.ModelSerializer):
    id = serializers.SerializerMethodField()
    monthId = serializers.IntegerField(source='month_id', read_only=True)
    amountSpent = serializers.DecimalField(source='amount_spent', max_digits=12, decimal_places=2, read_only=True)
    allocatedBudget = serializers.DecimalField(source='allocated_budget', max_digits=16, decimal_places=4, read_only=True)
    cumulativeSavings = serializers.DecimalField(source='cumulative_savings', max_digits=16, decimal_places=4, read_only=True)
    cumulativeBudget = serializers.DecimalField(source='cumulative_budget', max_digits=16, decimal_places=4, read_only=True)
    remaining = serializers.DecimalField(max_digits=16, decimal_places=4, read_only=True)
    indicator = serializers.CharField(read_only=True)
    isPlaceholder = serializers.BooleanField(source='is_placeholder', read_only=True)

    class Meta:
        model = DailyExpense
        fields = [
            'id', 'monthId', 'date', 'amountSpent', 'allocatedBudget', 'cumulativeSavings',
            'cumulativeBudget', 'remaining', 'notes', 'indicator', 'isPlaceholder',
        ]

    def get_id(self, obj):
        return obj.reference


class ExpenseInputSerializer(serializers.Serializer):
    monthId = serializers.IntegerField(min_value=1)
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    amountSpent = serializers.DecimalField(**AMOUNT)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ExpenseUpdateSerializer(serializers.Serializer):
    amountSpent = serializers.DecimalField(**AMOUNT)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RecomputeChainSerializer(serializers.Serializer):
    start = serializers.DateField(required=False, input_formats=['%Y-%m-%d'])
