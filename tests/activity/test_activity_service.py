from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_system.hr_system.activity.service import ActivityService
from src.hr_system.hr_system.core.enums import ActivityAction, EntityType, Role
from src.hr_system.hr_system.core.exceptions import AuthorizationError, InvalidPeriod

from tests.fakes import InMemoryAccounts, InMemoryActivity, admin_account


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def logs(accounts):
    return InMemoryActivity(accounts)


@pytest.fixture
def svc(logs):
    return ActivityService(logs)


def record_at(svc, logs, when, actor_id, action, entity_type, entity_id=1):
    logs.now = when
    svc.record(actor_id=actor_id, action=action, entity_type=entity_type, entity_id=entity_id)


def test_summary_groups_by_actor_busiest_first(svc, logs, accounts):
    alice = admin_account(accounts, email="alice@example.com")
    bob = admin_account(accounts, email="bob@example.com")
    record_at(svc, logs, datetime(2026, 3, 2, 9, 0), alice.account_id, ActivityAction.CREATE, EntityType.EMPLOYEE)
    record_at(svc, logs, datetime(2026, 3, 3, 9, 0), bob.account_id, ActivityAction.CREATE, EntityType.DEPARTMENT)
    record_at(svc, logs, datetime(2026, 3, 4, 9, 0), bob.account_id, ActivityAction.UPDATE, EntityType.EMPLOYEE)
    record_at(svc, logs, datetime(2026, 3, 5, 16, 30), bob.account_id, ActivityAction.UPDATE, EntityType.DEPARTMENT)

    summary = svc.summary(current_role=Role.ADMIN)

    assert summary.total_actors == 2
    assert summary.total_actions == 4
    first, second = summary.actors
    assert (first.email, first.total_actions, first.last_active) == ("bob@example.com", 3, datetime(2026, 3, 5, 16, 30))
    assert first.actions == (ActivityAction.CREATE, ActivityAction.UPDATE)
    assert first.entity_types == (EntityType.DEPARTMENT, EntityType.EMPLOYEE)
    assert (second.email, second.total_actions) == ("alice@example.com", 1)


def test_summary_period_includes_whole_end_day(svc, logs, accounts):
    alice = admin_account(accounts, email="alice@example.com")
    record_at(svc, logs, datetime(2026, 2, 28, 23, 59), alice.account_id, ActivityAction.CREATE, EntityType.EMPLOYEE)
    record_at(svc, logs, datetime(2026, 3, 1, 0, 0), alice.account_id, ActivityAction.UPDATE, EntityType.EMPLOYEE)
    record_at(svc, logs, datetime(2026, 3, 31, 23, 59), alice.account_id, ActivityAction.DELETE, EntityType.EMPLOYEE)
    record_at(svc, logs, datetime(2026, 4, 1, 0, 0), alice.account_id, ActivityAction.CREATE, EntityType.LEAVE)

    summary = svc.summary(date(2026, 3, 1), date(2026, 3, 31), current_role=Role.ADMIN)

    assert summary.total_actions == 2
    assert summary.actors[0].actions == (ActivityAction.DELETE, ActivityAction.UPDATE)
    assert summary.to_dict()["period"] == {"start": "2026-03-01", "end": "2026-03-31"}


def test_summary_of_quiet_period_is_empty(svc):
    summary = svc.summary(date(2026, 3, 1), date(2026, 3, 31), current_role=Role.ADMIN)

    assert summary.to_dict() == {
        "period": {"start": "2026-03-01", "end": "2026-03-31"},
        "total_actors": 0,
        "total_actions": 0,
        "actors": [],
    }


def test_summary_rejects_reversed_period(svc):
    with pytest.raises(InvalidPeriod):
        svc.summary(date(2026, 3, 31), date(2026, 3, 1), current_role=Role.ADMIN)


def test_summary_requires_admin(svc):
    with pytest.raises(AuthorizationError):
        svc.summary(current_role=Role.EMPLOYEE)
