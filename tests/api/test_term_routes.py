"""Tests for condition, bonification and share endpoints of a stored mortgage."""

from dataclasses import replace
from decimal import Decimal
from uuid import uuid4

import pytest

from mortgage_tracker.models.mortgage import (
    BonificationType,
    ConditionType,
    MortgageBonification,
    MortgageCondition,
    UserRole,
)


@pytest.fixture
def owned(repo, stored_bundle):
    repo.get_mortgage.return_value = stored_bundle.mortgage
    return stored_bundle.mortgage


@pytest.fixture
def foreign(repo, stored_bundle):
    mortgage = replace(stored_bundle.mortgage, user_id="someone-else")
    repo.get_mortgage.return_value = mortgage
    return mortgage


async def _with_id(mortgage_id, item):
    return replace(item, id=uuid4(), mortgage_id=mortgage_id)


class TestConditions:
    def test_add(self, client, repo, owned):
        repo.add_condition.side_effect = _with_id
        resp = client.post(f"/api/v1/mortgages/{owned.id}/conditions", json={
            "start_month": 1,
            "end_month": 12,
            "interest_rate": "0",
            "condition_type": "grace_period",
        })
        assert resp.status_code == 201
        assert resp.json()["condition_type"] == "grace_period"
        mortgage_id, condition = repo.add_condition.await_args.args
        assert mortgage_id == owned.id
        assert condition.condition_type is ConditionType.GRACE_PERIOD
        assert condition.interest_rate == 0

    def test_reversed_months(self, client, repo, owned):
        resp = client.post(f"/api/v1/mortgages/{owned.id}/conditions", json={
            "start_month": 24,
            "end_month": 12,
            "interest_rate": "2",
        })
        assert resp.status_code == 400
        repo.add_condition.assert_not_called()

    def test_list(self, client, repo, owned):
        repo.list_conditions.return_value = [
            MortgageCondition(1, 12, Decimal("0"), id=uuid4(), mortgage_id=owned.id),
            MortgageCondition(13, 24, None, id=uuid4(), mortgage_id=owned.id),
        ]
        resp = client.get(f"/api/v1/mortgages/{owned.id}/conditions")
        assert [c["start_month"] for c in resp.json()] == [1, 13]
        assert resp.json()[1]["interest_rate"] is None

    def test_delete(self, client, repo, owned):
        condition = MortgageCondition(1, 12, Decimal("0"), id=uuid4(), mortgage_id=owned.id)
        repo.get_condition.return_value = condition
        resp = client.delete(f"/api/v1/conditions/{condition.id}")
        assert resp.status_code == 204
        repo.delete_condition.assert_awaited_once_with(condition.id)

    def test_delete_missing(self, client, repo):
        repo.get_condition.return_value = None
        resp = client.delete(f"/api/v1/conditions/{uuid4()}")
        assert resp.status_code == 404

    def test_delete_foreign(self, client, repo, foreign):
        condition = MortgageCondition(1, 12, Decimal("0"), id=uuid4(), mortgage_id=foreign.id)
        repo.get_condition.return_value = condition
        resp = client.delete(f"/api/v1/conditions/{condition.id}")
        assert resp.status_code == 404
        repo.delete_condition.assert_not_called()

    def test_add_to_foreign(self, client, repo, foreign):
        resp = client.post(f"/api/v1/mortgages/{foreign.id}/conditions", json={
            "start_month": 1, "end_month": 12, "interest_rate": "0",
        })
        assert resp.status_code == 404
        repo.add_condition.assert_not_called()


class TestBonifications:
    def test_add(self, client, repo, owned):
        repo.add_bonification.side_effect = _with_id
        resp = client.post(f"/api/v1/mortgages/{owned.id}/bonifications", json={
            "rate_reduction": "0.3",
            "bonification_type": "payroll",
        })
        assert resp.status_code == 201
        assert resp.json()["is_active"] is True
        _, bonification = repo.add_bonification.await_args.args
        assert bonification.bonification_type is BonificationType.PAYROLL

    def test_negative_reduction(self, client, repo, owned):
        resp = client.post(f"/api/v1/mortgages/{owned.id}/bonifications", json={"rate_reduction": "-0.1"})
        assert resp.status_code == 422

    def test_list_foreign(self, client, repo, foreign):
        resp = client.get(f"/api/v1/mortgages/{foreign.id}/bonifications")
        assert resp.status_code == 404
        repo.list_bonifications.assert_not_called()

    def test_deactivate(self, client, repo, owned):
        bonification = MortgageBonification(Decimal("0.3"), id=uuid4(), mortgage_id=owned.id)
        repo.get_bonification.return_value = bonification
        repo.set_bonification_active.return_value = replace(bonification, is_active=False)
        resp = client.patch(f"/api/v1/bonifications/{bonification.id}", json={"is_active": False})
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False
        repo.set_bonification_active.assert_awaited_once_with(bonification.id, False)

    def test_toggle_foreign(self, client, repo, foreign):
        bonification = MortgageBonification(Decimal("0.3"), id=uuid4(), mortgage_id=foreign.id)
        repo.get_bonification.return_value = bonification
        resp = client.patch(f"/api/v1/bonifications/{bonification.id}", json={"is_active": False})
        assert resp.status_code == 404
        repo.set_bonification_active.assert_not_called()

    def test_toggle_missing(self, client, repo):
        repo.get_bonification.return_value = None
        resp = client.patch(f"/api/v1/bonifications/{uuid4()}", json={"is_active": True})
        assert resp.status_code == 404


class TestShares:
    def test_list(self, client, repo, owned, stored_bundle):
        repo.list_shares.return_value = stored_bundle.shares
        resp = client.get(f"/api/v1/mortgages/{owned.id}/shares")
        assert [s["user_role"] for s in resp.json()] == ["lender", "borrower"]

    def test_add(self, client, repo, owned):
        repo.list_shares.return_value = []
        repo.add_share.side_effect = _with_id
        resp = client.post(f"/api/v1/mortgages/{owned.id}/shares", json={
            "user_role": "borrower",
            "initial_share_percentage": "60",
            "initial_share_amount": "90000",
        })
        assert resp.status_code == 201
        _, share = repo.add_share.await_args.args
        assert share.user_role is UserRole.BORROWER
        assert share.amortized_amount == 0

    def test_duplicate_role(self, client, repo, owned, stored_bundle):
        repo.list_shares.return_value = stored_bundle.shares
        resp = client.post(f"/api/v1/mortgages/{owned.id}/shares", json={
            "user_role": "lender",
            "initial_share_percentage": "40",
            "initial_share_amount": "60000",
        })
        assert resp.status_code == 400
        repo.add_share.assert_not_called()

    def test_over_one_hundred_percent(self, client, repo, owned, stored_bundle):
        lender_only = [s for s in stored_bundle.shares if s.user_role == UserRole.LENDER]
        repo.list_shares.return_value = lender_only
        resp = client.post(f"/api/v1/mortgages/{owned.id}/shares", json={
            "user_role": "borrower",
            "initial_share_percentage": "70",
            "initial_share_amount": "105000",
        })
        assert resp.status_code == 400

    def test_add_to_foreign(self, client, repo, foreign):
        resp = client.post(f"/api/v1/mortgages/{foreign.id}/shares", json={
            "user_role": "borrower",
            "initial_share_percentage": "60",
            "initial_share_amount": "90000",
        })
        assert resp.status_code == 404
        repo.add_share.assert_not_called()
