from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Month',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month', models.IntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('year', models.IntegerField(validators=[django.core.validators.MinValueValidator(2000), django.core.validators.MaxValueValidator(2100)])),
                ('income', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('days_in_month', models.IntegerField()),
                ('daily_allocation', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('total_budgeted', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('balance_amount', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='months', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'months',
                'ordering': ['-year', '-month'],
            },
        ),
        migrations.CreateModel(
            name='BudgetCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('type', models.CharField(choices=[('Spent', 'Spent'), ('Savings', 'Savings')], max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('month', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='categories', to='budgeting.month')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='budget_categories', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'budget_categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='DailyExpense',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('amount_spent', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('allocated_budget', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('cumulative_savings', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('cumulative_budget', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('remaining', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('month', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='budgeting.month')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_expenses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'daily_expenses',
                'ordering': ['date'],
            },
        ),
        migrations.AddConstraint(
            model_name='month',
            constraint=models.UniqueConstraint(fields=('user', 'month', 'year'), name='unique_user_month_year'),
        ),
        migrations.AddIndex(
            model_name='budgetcategory',
            index=models.Index(fields=['user', 'month'], name='budget_cat_user_month_idx'),
        ),
        migrations.AddConstraint(
            model_name='dailyexpense',
            constraint=models.UniqueConstraint(fields=('user', 'date'), name='unique_user_date'),
        ),
    ]
