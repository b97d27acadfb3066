from datetime import date, datetime

import pytest

from src.timeclock.timeclock.absences.service import AbsenceService, calculate_hours_affected
from src.timeclock.timeclock.core.enums import AbsenceStatus, AbsenceType, Role
from src.timeclock.timeclock.core.exceptions import AuthenticationError, AuthorizationError, ValidationError

NOW = datetime(2024, 1, 10, 9, 0)


@pytest.fixture
def service(absence_repo, settings_service):
    return AbsenceService(absence_repo, settings_service, clock=lambda: NOW)


def _create(service, user_id="u1", **overrides):
    data = dict(
        absence_type="vacation",
        start_date=date(2024, 2, 5),
        end_date=date(2024, 2, 7),
        reason="Family trip",
    )
    data.update(overrides)
    return service.create(user_id, **data)


def test_hours_affected_counts_both_ends():
    assert calculate_hours_affected(date(2024, 2, 5), date(2024, 2, 7), 8) == 24
    assert calculate_hours_affected(date(2024, 2, 5), date(2024, 2, 5), 7.5) == 7.5


def test_create_stores_a_pending_request(service):
    req = _create(service)

    assert req.status == AbsenceStatus.PENDING
    assert req.absence_type == AbsenceType.VACATION
    assert req.hours_affected == 24
    assert req.created_at == NOW
    assert req.to_dict()["type"] == "vacation"


def test_hours_follow_the_user_settings(service, settings_service):
    settings_service.save_settings("u1", {"weekly_hours": 30})
    assert _create(service).hours_affected == 18


def test_create_validates_input(service, absence_repo):
    with pytest.raises(ValidationError):
        _create(service, end_date=date(2024, 2, 1))
    with pytest.raises(ValidationError):
        _create(service, reason="   ")
    with pytest.raises(ValidationError):
        _create(service, absence_type="holiday")
    with pytest.raises(AuthenticationError):
        _create(service, user_id="")
    assert absence_repo.calls == []


def test_list_for_user_only_returns_own_requests(service):
    _create(service)
    _create(service, user_id="u2")
    assert [r.user_id for r in service.list_for_user("u1")] == ["u1"]


def test_employee_cannot_review(service):
    req = _create(service)
    with pytest.raises(AuthorizationError):
        service.list_pending(current_role=Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        service.approve(current_role=Role.EMPLOYEE, approver_id="u9", user_id="u1", request_id=req.request_id)


def test_manager_approves_once(service):
    req = _create(service)
    assert [r.request_id for r in service.list_pending(current_role=Role.MANAGER)] == [req.request_id]

    service.approve(current_role=Role.MANAGER, approver_id="m1", user_id="u1", request_id=req.request_id, comments="ok")

    stored = service.get("u1", req.request_id)
    assert stored.status == AbsenceStatus.APPROVED
    assert (stored.approved_by, stored.approved_at, stored.comments) == ("m1", NOW, "ok")
    with pytest.raises(ValidationError):
        service.reject(
            current_role=Role.HR, approver_id="h1", user_id="u1", request_id=req.request_id, rejection_reason="late"
        )
    assert service.list_pending(current_role=Role.ADMIN) == []


def test_reject_needs_a_reason(service):
    req = _create(service)
    with pytest.raises(ValidationError):
        service.reject(current_role=Role.HR, approver_id="h1", user_id="u1", request_id=req.request_id, rejection_reason="")

    service.reject(
        current_role=Role.HR, approver_id="h1", user_id="u1", request_id=req.request_id, rejection_reason="Busy week"
    )
    assert service.get("u1", req.request_id).rejection_reason == "Busy week"


def test_cancel_edit_and_delete(service, absence_repo):
    req = _create(service)

    updated = service.update("u1", req.request_id, absence_type="personal", reason="Moving house")
    assert (updated.absence_type, updated.reason) == (AbsenceType.PERSONAL, "Moving house")
    assert updated.start_date == req.start_date
    assert updated.hours_affected == req.hours_affected

    service.cancel("u1", req.request_id)
    assert service.get("u1", req.request_id).status == AbsenceStatus.CANCELLED
    with pytest.raises(ValidationError):
        service.cancel("u1", req.request_id)
    with pytest.raises(ValidationError):
        service.update("u1", req.request_id, reason="again")

    service.delete("u1", req.request_id)
    with pytest.raises(ValidationError):
        service.get("u1", req.request_id)


def test_decided_requests_cannot_be_deleted(service):
    req = _create(service)
    service.approve(current_role=Role.ADMIN, approver_id="a1", user_id="u1", request_id=req.request_id)
    with pytest.raises(ValidationError):
        service.delete("u1", req.request_id)


def test_unknown_request(service):
    with pytest.raises(ValidationError):
        service.get("u1", "nope")
