from __future__ import annotations

from datetime import date, datetime

import pytest

from chat_attendance.core.enums import EmployeeStatus, RequestStatus, Role
from chat_attendance.core.exceptions import AuthorizationError, ConfigurationError, ConflictError, ValidationError
from chat_attendance.leave.service import LeaveWorkflow

TODAY = date(2026, 10, 17)


def test_create_request_persists_pending_and_routes_to_manager(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(ids=["a1b2c3d4-0000-4000-8000-000000000001"])
    manager = employees_repo.add(make_employee(role=Role.MANAGER))
    employee = employees_repo.add(make_employee())

    created = LeaveWorkflow(leave_repo, employees_repo).create_request(employee, "25/12", today=TODAY)

    assert created.short_id == "a1b2c3d4"
    assert created.manager == manager
    assert created.formatted_date == "25/12/2026"
    assert created.message == "Demande de congé #a1b2c3d4 créée pour le 25/12/2026."
    stored = leave_repo.items[created.request.request_id]
    assert stored.status == RequestStatus.PENDING
    assert stored.start_at == datetime(2026, 12, 25, 0, 0, 0)
    assert stored.end_at == datetime(2026, 12, 25, 23, 59, 59)


def test_invalid_date_returns_guidance_and_persists_nothing(make_employee, employees_repo, leave_repo):
    employee = employees_repo.add(make_employee())

    with pytest.raises(ValidationError, match="Congé 25/12"):
        LeaveWorkflow(leave_repo, employees_repo).create_request(employee, "31/02", today=TODAY)

    assert leave_repo.items == {}


def test_missing_manager_keeps_the_request(make_employee, employees_repo, leave_repo):
    employee = employees_repo.add(make_employee())
    employees_repo.add(make_employee(tenant_id="tenant-b", role=Role.MANAGER))

    with pytest.raises(ConfigurationError, match="Aucun manager") as exc_info:
        LeaveWorkflow(leave_repo, employees_repo).create_request(employee, "25/12", today=TODAY)

    orphan = exc_info.value.request
    assert orphan is not None
    assert leave_repo.items[orphan.request_id].status == RequestStatus.PENDING


def test_earliest_active_manager_is_chosen(make_employee, employees_repo, leave_repo):
    employees_repo.add(make_employee(employee_id="archived-boss", role=Role.MANAGER, status=EmployeeStatus.ARCHIVED))
    first = employees_repo.add(make_employee(employee_id="boss-1", role=Role.MANAGER))
    employees_repo.add(make_employee(employee_id="boss-2", role=Role.MANAGER))
    employee = employees_repo.add(make_employee())

    created = LeaveWorkflow(leave_repo, employees_repo).create_request(employee, "02/11", today=TODAY)

    assert created.manager == first


def _seed_pending(workflow, employee):
    return workflow.create_request(employee, "25/12", today=TODAY).request


def test_manager_approves_by_short_id(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(ids=["a1b2c3d4-0000-4000-8000-000000000001"])
    manager = employees_repo.add(make_employee(role=Role.MANAGER))
    employee = employees_repo.add(make_employee())
    workflow = LeaveWorkflow(leave_repo, employees_repo)
    request = _seed_pending(workflow, employee)

    applied = workflow.apply_manager_decision(manager, "OK a1b2c3d4")

    assert applied.status == RequestStatus.APPROVED
    assert applied.employee == employee
    assert applied.message == "Demande #a1b2c3d4 approuvée ✅."
    assert leave_repo.items[request.request_id].status == RequestStatus.APPROVED
    assert leave_repo.items[request.request_id].decided_by == manager.employee_id


def test_manager_rejects_with_hash_and_uppercase_fragment(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(ids=["a1b2c3d4-0000-4000-8000-000000000001"])
    manager = employees_repo.add(make_employee(role=Role.MANAGER))
    employee = employees_repo.add(make_employee())
    workflow = LeaveWorkflow(leave_repo, employees_repo)
    request = _seed_pending(workflow, employee)

    applied = workflow.apply_manager_decision(manager, "non #A1B2")

    assert applied.status == RequestStatus.REJECTED
    assert applied.decision_text == "refusée ❌"
    assert leave_repo.items[request.request_id].status == RequestStatus.REJECTED


def test_colliding_prefix_in_another_tenant_is_never_touched(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(
        ids=[
            "abcd1234-0000-4000-8000-00000000000b",  # tenant B, created first
            "abcd1234-0000-4000-8000-00000000000a",  # tenant A
        ]
    )
    manager_a = employees_repo.add(make_employee(role=Role.MANAGER))
    employees_repo.add(make_employee(tenant_id="tenant-b", role=Role.MANAGER))
    employee_a = employees_repo.add(make_employee())
    employee_b = employees_repo.add(make_employee(tenant_id="tenant-b"))
    workflow = LeaveWorkflow(leave_repo, employees_repo)
    request_b = _seed_pending(workflow, employee_b)
    request_a = _seed_pending(workflow, employee_a)

    applied = workflow.apply_manager_decision(manager_a, "OK abcd1234")

    assert applied.request.request_id == request_a.request_id
    assert leave_repo.items[request_b.request_id].status == RequestStatus.PENDING


def test_manager_cannot_reach_a_request_that_only_exists_in_another_tenant(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(ids=["ffff0000-0000-4000-8000-000000000001"])
    manager_a = employees_repo.add(make_employee(role=Role.MANAGER))
    employees_repo.add(make_employee(tenant_id="tenant-b", role=Role.MANAGER))
    employee_b = employees_repo.add(make_employee(tenant_id="tenant-b"))
    workflow = LeaveWorkflow(leave_repo, employees_repo)
    request_b = _seed_pending(workflow, employee_b)

    with pytest.raises(ConflictError, match="introuvable ou déjà traitée"):
        workflow.apply_manager_decision(manager_a, "OK ffff0000")

    assert leave_repo.items[request_b.request_id].status == RequestStatus.PENDING


def test_resending_a_decision_does_not_mutate_twice(make_employee, employees_repo, make_leave_repo):
    leave_repo = make_leave_repo(ids=["a1b2c3d4-0000-4000-8000-000000000001"])
    manager = employees_repo.add(make_employee(role=Role.MANAGER))
    employee = employees_repo.add(make_employee())
    workflow = LeaveWorkflow(leave_repo, employees_repo)
    request = _seed_pending(workflow, employee)
    workflow.apply_manager_decision(manager, "OK a1b2c3d4")

    with pytest.raises(ConflictError, match="#a1b2c3d4 introuvable ou déjà traitée"):
        workflow.apply_manager_decision(manager, "NON a1b2c3d4")

    assert leave_repo.items[request.request_id].status == RequestStatus.APPROVED


def test_malformed_decision_returns_guidance(make_employee, employees_repo, leave_repo):
    manager = employees_repo.add(make_employee(role=Role.MANAGER))

    with pytest.raises(ValidationError, match="OK \\[ID\\]"):
        LeaveWorkflow(leave_repo, employees_repo).apply_manager_decision(manager, "d'accord")

    assert leave_repo.decide_calls == 0


def test_only_managers_can_decide(make_employee, employees_repo, leave_repo):
    employee = employees_repo.add(make_employee())

    with pytest.raises(AuthorizationError):
        LeaveWorkflow(leave_repo, employees_repo).apply_manager_decision(employee, "OK a1b2")
