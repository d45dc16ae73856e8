import logging

import pytest
from django.db import DatabaseError
from rest_framework.test import APIClient

from budgeting import services
from budgeting.models import DailyExpense, Month

pytestmark = pytest.mark.django_db


def test_health_is_public(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Expense Tracker API is running' in response.content


def test_api_requires_authentication(db):
    response = APIClient().get('/api/income/')
    assert response.status_code == 401
    assert 'error' in response.json()


def test_register_and_obtain_token(db):
    client = APIClient()
    response = client.post('/api/register/', {
        'username': 'carol', 'email': 'carol@example.com', 'password': 'long-enough-pw',
    }, format='json')
    assert response.status_code == 201

    response = client.post('/api/token/', {'username': 'carol', 'password': 'long-enough-pw'}, format='json')
    assert response.status_code == 200
    token = response.json()['access']

    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    assert client.get('/api/income/').status_code == 200


class TestIncomeEndpoints:
    def test_post_creates_then_updates(self, api_client, user):
        payload = {'month': 6, 'year': 2025, 'income': '3000'}
        first = api_client.post('/api/income/', payload, format='json')
        assert first.status_code == 201
        body = first.json()
        assert body['daysInMonth'] == 30
        assert body['dailyAllocation'] == pytest.approx(100)
        assert body['savingGoal'] == pytest.approx(750)

        second = api_client.post('/api/income/', payload, format='json')
        assert second.status_code == 200
        assert second.json()['id'] == body['id']
        assert Month.objects.filter(user=user).count() == 1

    @pytest.mark.parametrize('payload', [
        {'month': 13, 'year': 2025, 'income': '10'},
        {'month': 6, 'year': 1999, 'income': '10'},
        {'month': 6, 'year': 2025, 'income': '-5'},
    ])
    def test_rejects_bad_input(self, api_client, payload):
        response = api_client.post('/api/income/', payload, format='json')
        assert response.status_code == 400
        assert 'details' in response.json()

    def test_read_single_month(self, api_client, june):
        response = api_client.get('/api/income/6/2025/')
        assert response.status_code == 200
        assert response.json()['totalBudgeted'] == pytest.approx(700)

    def test_missing_month(self, api_client):
        response = api_client.get('/api/income/1/2025/')
        assert response.status_code == 404
        assert response.json()['error'] == 'Month not found or access denied'

    def test_out_of_range_month_in_path(self, api_client):
        assert api_client.get('/api/income/13/2025/').status_code == 400

    def test_recompute(self, api_client, june):
        Month.objects.filter(pk=june.pk).update(daily_allocation=0)
        response = api_client.post(f'/api/income/{june.pk}/recompute/')
        assert response.status_code == 200
        assert response.json()['dailyAllocation'] == pytest.approx(76.6667)


class TestFinanceEndpoints:
    def test_combined_post_and_read(self, api_client):
        response = api_client.post('/api/finance/', {
            'income': {'month': 6, 'year': 2025, 'amount': '3000'},
            'budgets': [
                {'name': 'Rent', 'amount': '500', 'type': 'Spent'},
                {'name': 'Savings pot', 'amount': '200', 'type': 'Savings'},
            ],
        }, format='json')
        assert response.status_code == 201
        assert len(response.json()['budgets']) == 2

        overview = api_client.get('/api/finance/6/2025/').json()
        assert overview['month']['savingGoal'] == pytest.approx(750)
        assert overview['budgets']['totals'] == {'spent': 500.0, 'savings': 200.0, 'total': 700.0}

    def test_bad_budget_type(self, api_client):
        response = api_client.post('/api/finance/', {
            'income': {'month': 6, 'year': 2025, 'amount': '3000'},
            'budgets': [{'name': 'Rent', 'amount': '500', 'type': 'Fun'}],
        }, format='json')
        assert response.status_code == 400


class TestBudgetEndpoints:
    def test_create_list_update_delete(self, api_client, flat_june):
        created = api_client.post('/api/budget/', {
            'monthId': flat_june.pk, 'name': 'Rent', 'amount': '300', 'type': 'Spent',
        }, format='json')
        assert created.status_code == 201
        category_id = created.json()['id']

        listing = api_client.get(f'/api/budget/month/{flat_june.pk}/').json()
        assert [c['name'] for c in listing] == ['Rent']

        updated = api_client.put(f'/api/budget/{category_id}/', {'amount': '600'}, format='json')
        assert updated.status_code == 200
        summary = api_client.get(f'/api/budget/summary/{flat_june.pk}/').json()
        assert summary['spentCategories'] == pytest.approx(600)
        assert summary['dailyAllocation'] == pytest.approx(30)

        assert api_client.delete(f'/api/budget/{category_id}/').status_code == 204
        assert api_client.get(f'/api/budget/month/{flat_june.pk}/').json() == []

    @pytest.mark.parametrize('payload', [
        {'name': '', 'amount': '10', 'type': 'Spent'},
        {'name': 'Rent', 'amount': '-1', 'type': 'Spent'},
        {'name': 'Rent', 'amount': '10', 'type': 'Investments'},
    ])
    def test_validation(self, api_client, flat_june, payload):
        response = api_client.post('/api/budget/', dict(payload, monthId=flat_june.pk), format='json')
        assert response.status_code == 400

    def test_other_users_month(self, june, other_user):
        client = APIClient()
        client.force_authenticate(user=other_user)
        response = client.get(f'/api/budget/month/{june.pk}/')
        assert response.status_code == 404


class TestExpenseEndpoints:
    def test_record_chain_through_api(self, api_client, june):
        first = api_client.post('/api/expense/', {
            'monthId': june.pk, 'date': '2025-06-01', 'amountSpent': '40',
        }, format='json')
        assert first.status_code == 201
        assert first.json()['remaining'] == pytest.approx(36.6667)

        second = api_client.post('/api/expense/', {
            'monthId': june.pk, 'date': '2025-06-02', 'amountSpent': '30', 'notes': 'bus',
        }, format='json').json()
        assert second['cumulativeSavings'] == pytest.approx(36.6667)
        assert second['cumulativeBudget'] == pytest.approx(113.3334)
        assert second['remaining'] == pytest.approx(83.3334)
        assert second['indicator'] == 'good'

        again = api_client.post('/api/expense/', {
            'monthId': june.pk, 'date': '2025-06-01', 'amountSpent': '70',
        }, format='json')
        assert again.status_code == 200
        assert again.json()['indicator'] == 'average'

    def test_by_date_and_by_id(self, api_client, flat_june):
        created = api_client.post('/api/expense/', {
            'monthId': flat_june.pk, 'date': '2025-06-03', 'amountSpent': '60',
        }, format='json').json()
        assert created['indicator'] == 'reached'

        by_date = api_client.get('/api/expense/date/2025-06-03/')
        assert by_date.status_code == 200
        assert by_date.json()['id'] == created['id']
        assert api_client.get(f"/api/expense/{created['id']}/").status_code == 200
        assert api_client.get('/api/expense/date/2025-06-04/').status_code == 404

    def test_month_listing_with_placeholders(self, api_client, flat_june):
        api_client.post('/api/expense/', {
            'monthId': flat_june.pk, 'date': '2025-06-01', 'amountSpent': '10',
        }, format='json')

        saved = api_client.get(f'/api/expense/month/{flat_june.pk}/').json()
        assert len(saved) == 1

        full = api_client.get(f'/api/expense/month/{flat_june.pk}/?include_placeholders=1').json()
        assert len(full) == 30
        assert full[1]['id'] == 'virtual-2025-06-02'
        assert full[1]['isPlaceholder'] is True
        assert full[1]['remaining'] == pytest.approx(50)

    def test_put_to_placeholder_inserts(self, api_client, flat_june):
        response = api_client.put('/api/expense/virtual-2025-06-05/', {'amountSpent': '12'}, format='json')
        assert response.status_code == 201
        assert isinstance(response.json()['id'], int)
        assert DailyExpense.objects.filter(date='2025-06-05').exists()

    def test_update_and_delete_by_id(self, api_client, flat_june):
        ids = [
            api_client.post('/api/expense/', {
                'monthId': flat_june.pk, 'date': f'2025-06-0{n}', 'amountSpent': '20',
            }, format='json').json()['id']
            for n in (1, 2)
        ]
        response = api_client.put(f'/api/expense/{ids[0]}/', {'amountSpent': '50'}, format='json')
        assert response.status_code == 200
        assert response.json()['remaining'] == pytest.approx(0)
        assert DailyExpense.objects.get(pk=ids[1]).cumulative_savings == 0

        assert api_client.delete(f'/api/expense/{ids[0]}/').status_code == 204
        assert api_client.delete('/api/expense/virtual-2025-06-01/').status_code == 404

    def test_malformed_id(self, api_client):
        assert api_client.get('/api/expense/not-an-id/').status_code == 400

    def test_negative_spending_rejected(self, api_client, flat_june):
        response = api_client.post('/api/expense/', {
            'monthId': flat_june.pk, 'date': '2025-06-01', 'amountSpent': '-3',
        }, format='json')
        assert response.status_code == 400

    def test_recompute_chain_endpoint(self, api_client, flat_june):
        for n in (1, 2, 3):
            api_client.post('/api/expense/', {
                'monthId': flat_june.pk, 'date': f'2025-06-0{n}', 'amountSpent': '20',
            }, format='json')
        first = DailyExpense.objects.get(date='2025-06-01')
        api_client.put(f'/api/expense/{first.pk}/', {'amountSpent': '50'}, format='json')

        response = api_client.post(f'/api/expense/month/{flat_june.pk}/recompute/', {}, format='json')
        assert response.status_code == 200
        assert response.json()['updated'] == 1
        assert DailyExpense.objects.get(date='2025-06-03').remaining == 60


class TestReportEndpoints:
    @pytest.fixture
    def spent(self, api_client, june):
        api_client.post('/api/expense/', {
            'monthId': june.pk, 'date': '2025-06-01', 'amountSpent': '40',
        }, format='json')
        return june

    @pytest.mark.parametrize('kind', ['monthly', 'trend', 'savings', 'spending'])
    def test_reports_respond(self, api_client, spent, kind):
        assert api_client.get(f'/api/report/{kind}/6/2025/').status_code == 200

    def test_monthly_report_body(self, api_client, spent):
        body = api_client.get('/api/report/monthly/6/2025/').json()
        assert body['dailySpending'] == {'2025-06-01': 40.0}
        assert body['extraSavings'] == pytest.approx(36.6667)

    def test_unknown_month(self, api_client):
        assert api_client.get('/api/report/trend/6/2025/').status_code == 404

    def test_invalid_month(self, api_client):
        assert api_client.get('/api/report/savings/0/2025/').status_code == 400


class TestErrorResponses:
    def test_impossible_date_in_path_is_bad_input(self, api_client, flat_june):
        response = api_client.get('/api/expense/date/2025-02-30/')
        assert response.status_code == 400
        assert response.json()['error'] == 'Validation failed'
        assert 'date' in response.json()['details']

    def test_budget_total_beyond_column_size_is_rejected(self, api_client):
        created = api_client.post('/api/income/', {
            'month': 6, 'year': 2025, 'income': '9999999999.99',
        }, format='json').json()
        first = api_client.post('/api/budget/', {
            'monthId': created['id'], 'name': 'Rent', 'amount': '9999999999.99', 'type': 'Spent',
        }, format='json')
        assert first.status_code == 201

        second = api_client.post('/api/budget/', {
            'monthId': created['id'], 'name': 'Pension', 'amount': '9999999999.99', 'type': 'Savings',
        }, format='json')
        assert second.status_code == 400
        assert 'amount' in second.json()['details']

        month = api_client.get('/api/income/6/2025/')
        assert month.status_code == 200
        assert month.json()['totalBudgeted'] == pytest.approx(9999999999.99)
        assert api_client.get('/api/report/monthly/6/2025/').status_code == 200

    def test_storage_failure_is_a_generic_500(self, api_client, monkeypatch, caplog):
        def broken(user):
            raise DatabaseError('disk I/O error')

        monkeypatch.setattr(services, 'list_months', broken)
        # the app logger does not propagate to the root handler caplog listens on
        monkeypatch.setattr(logging.getLogger('budgeting'), 'propagate', True)

        with caplog.at_level(logging.ERROR, logger='budgeting.exceptions'):
            response = api_client.get('/api/income/')

        assert response.status_code == 500
        assert response.json() == {'error': 'Server error'}
        record = next(r for r in caplog.records if r.name == 'budgeting.exceptions')
        assert 'Storage failure' in record.getMessage()
        assert record.exc_info[0] is DatabaseError
