import pytest
from fastapi import status

from staffdesk.models.profile import Capability, ROLE_CAPABILITIES, UserRole, role_can
from staffdesk.services.base import Actor
from staffdesk.core.exceptions import AccessDeniedError


def test_every_role_has_capabilities_mapped():
    assert set(ROLE_CAPABILITIES) == set(UserRole)


@pytest.mark.parametrize("capability", list(Capability))
def test_admin_can_do_everything(capability):
    assert role_can(UserRole.ADMIN, capability)


def test_hr_cannot_manage_policy_or_profiles():
    assert role_can(UserRole.HR, Capability.REVIEW_LEAVE)
    assert not role_can(UserRole.HR, Capability.MANAGE_POLICY)
    assert not role_can(UserRole.HR, Capability.MANAGE_PROFILES)


def test_employee_actor_scoped_to_self():
    actor = Actor(user_id=7, role=UserRole.EMPLOYEE)
    assert actor.scope_user_id(None) == 7
    assert actor.scope_user_id(7) == 7
    with pytest.raises(AccessDeniedError):
        actor.scope_user_id(8)


def test_update_own_profile(client, employee, auth_headers):
    response = client.patch(
        "/api/profiles/me", headers=auth_headers(employee), json={"name": "Alice Smith", "department": "Sales"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Alice Smith"
    assert response.json()["department"] == "Sales"
    assert response.json()["role"] == "employee"


def test_self_update_cannot_change_role(client, employee, auth_headers):
    response = client.patch("/api/profiles/me", headers=auth_headers(employee), json={"role": "admin"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "employee"


def test_profile_listing_is_staff_only(client, employee, hr_user, auth_headers):
    assert client.get("/api/profiles", headers=auth_headers(employee)).status_code == status.HTTP_403_FORBIDDEN

    response = client.get("/api/profiles", params={"role": "employee"}, headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_200_OK
    assert [p["email"] for p in response.json()] == [employee.email]


def test_admin_promotes_employee(client, employee, admin_user, auth_headers):
    response = client.patch(
        f"/api/profiles/{employee.user_id}", headers=auth_headers(admin_user), json={"role": "hr"}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "hr"

    # The new role is effective on the next request with the old token
    assert client.get("/api/profiles", headers=auth_headers(employee)).status_code == status.HTTP_200_OK


def test_hr_cannot_change_roles(client, employee, hr_user, auth_headers):
    response = client.patch(
        f"/api/profiles/{employee.user_id}", headers=auth_headers(hr_user), json={"role": "admin"}
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_cannot_demote_self(client, admin_user, auth_headers):
    response = client.patch(
        f"/api/profiles/{admin_user.user_id}", headers=auth_headers(admin_user), json={"role": "employee"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_unknown_profile(client, admin_user, auth_headers):
    response = client.patch("/api/profiles/9999", headers=auth_headers(admin_user), json={"name": "Ghost"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.parametrize("field", ["role", "status"])
def test_admin_update_refuses_null(client, employee, admin_user, auth_headers, db_session, field):
    response = client.patch(
        f"/api/profiles/{employee.user_id}", headers=auth_headers(admin_user), json={field: None}
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == field

    db_session.refresh(employee)
    assert employee.role == UserRole.EMPLOYEE
    assert employee.status == "active"


def test_hire_date_defaults_to_company_date(db_session, monkeypatch):
    from datetime import date, datetime
    import pytz
    from staffdesk.core.config import settings
    from staffdesk.models import profile as profile_module
    from staffdesk.models.account import Account
    from staffdesk.models.profile import Profile

    # 12:00 UTC on the 3rd is already the 4th at UTC+14
    monkeypatch.setattr(settings, "company_timezone", "Pacific/Kiritimati")
    monkeypatch.setattr(profile_module, "utc_now", lambda: datetime(2025, 3, 3, 12, 0, tzinfo=pytz.UTC))

    account = Account(email="late.hire@acme.com", hashed_password="x")
    account.profile = Profile(email="late.hire@acme.com", name="Late Hire", role=UserRole.EMPLOYEE)
    db_session.add(account)
    db_session.commit()

    assert account.profile.hire_date == date(2025, 3, 4)
