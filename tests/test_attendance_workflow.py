import pytest
from fastapi import status

from staffdesk.models.attendance import AttendanceRecord, AttendanceStatus


def _error_code(response):
    return response.json()["errors"][0]["code"]


def test_check_in_on_time_then_check_out(client, clock, employee, auth_headers):
    headers = auth_headers(employee)

    clock.set(2025, 3, 3, 9, 5)
    response = client.post("/api/attendance/check-in", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "present"
    assert data["date"] == "2025-03-03"
    assert data["check_out"] is None
    assert data["total_hours"] is None

    clock.set(2025, 3, 3, 17, 30)
    response = client.post("/api/attendance/check-out", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_hours"] == pytest.approx(8.4167, abs=1e-4)
    assert data["status"] == "present"


def test_late_check_in(client, clock, employee, auth_headers):
    clock.set(2025, 3, 3, 9, 20)
    response = client.post("/api/attendance/check-in", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "late"


def test_second_check_in_is_refused_without_changes(client, clock, employee, auth_headers, db_session):
    headers = auth_headers(employee)
    clock.set(2025, 3, 3, 9, 0)
    first = client.post("/api/attendance/check-in", headers=headers)
    assert first.status_code == status.HTTP_200_OK

    clock.set(2025, 3, 3, 11, 0)
    second = client.post("/api/attendance/check-in", headers=headers)
    assert second.status_code == status.HTTP_409_CONFLICT
    assert _error_code(second) == "ALREADY_CHECKED_IN"
    assert second.json()["errors"][0]["msg"] == "You have already checked in today"

    records = db_session.query(AttendanceRecord).filter(AttendanceRecord.user_id == employee.user_id).all()
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.PRESENT
    assert records[0].check_in.hour == 9


def test_check_out_without_check_in(client, clock, employee, auth_headers):
    clock.set(2025, 3, 3, 17, 0)
    response = client.post("/api/attendance/check-out", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _error_code(response) == "NOT_CHECKED_IN"


def test_check_out_only_once(client, clock, employee, auth_headers):
    headers = auth_headers(employee)
    clock.set(2025, 3, 3, 9, 0)
    client.post("/api/attendance/check-in", headers=headers)
    clock.set(2025, 3, 3, 17, 0)
    assert client.post("/api/attendance/check-out", headers=headers).status_code == status.HTTP_200_OK

    clock.set(2025, 3, 3, 18, 0)
    response = client.post("/api/attendance/check-out", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert _error_code(response) == "ALREADY_CHECKED_OUT"


def test_today_record(client, clock, employee, auth_headers):
    headers = auth_headers(employee)
    clock.set(2025, 3, 3, 8, 0)
    assert client.get("/api/attendance/today", headers=headers).json() is None

    clock.set(2025, 3, 3, 9, 0)
    client.post("/api/attendance/check-in", headers=headers)
    response = client.get("/api/attendance/today", headers=headers)
    assert response.json()["date"] == "2025-03-03"


def test_monthly_history_and_summary(client, clock, employee, auth_headers):
    headers = auth_headers(employee)
    for day, hour in ((3, 9), (4, 10), (5, 9)):
        clock.set(2025, 3, day, hour, 0)
        client.post("/api/attendance/check-in", headers=headers)
        clock.set(2025, 3, day, hour + 8, 0)
        client.post("/api/attendance/check-out", headers=headers)

    response = client.get("/api/attendance", params={"year": 2025, "month": 3}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [r["date"] for r in data["records"]] == ["2025-03-05", "2025-03-04", "2025-03-03"]
    summary = data["summary"]
    assert summary["total_days"] == 3
    assert summary["present_days"] == 2
    assert summary["late_days"] == 1
    assert summary["total_hours"] == pytest.approx(24.0)
    assert summary["average_hours"] == pytest.approx(12.0)

    empty = client.get("/api/attendance", params={"year": 2025, "month": 2}, headers=headers)
    assert empty.json()["records"] == []


def test_employee_cannot_read_other_history(client, employee, make_user, auth_headers):
    bob = make_user("bob@acme.com")
    response = client.get(
        "/api/attendance", params={"year": 2025, "month": 3, "user_id": bob.user_id},
        headers=auth_headers(employee),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_hr_reads_employee_history(client, clock, employee, hr_user, auth_headers):
    clock.set(2025, 3, 3, 9, 0)
    client.post("/api/attendance/check-in", headers=auth_headers(employee))

    response = client.get(
        "/api/attendance", params={"year": 2025, "month": 3, "user_id": employee.user_id},
        headers=auth_headers(hr_user),
    )
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()["records"]) == 1


def test_daily_view_is_staff_only(client, employee, hr_user, auth_headers):
    assert client.get(
        "/api/attendance/daily", params={"day": "2025-03-03"}, headers=auth_headers(employee)
    ).status_code == status.HTTP_403_FORBIDDEN
    assert client.get(
        "/api/attendance/daily", params={"day": "2025-03-03"}, headers=auth_headers(hr_user)
    ).status_code == status.HTTP_200_OK


def test_mark_absentees_after_office_hours(client, clock, employee, hr_user, admin_user, make_user, auth_headers):
    bob = make_user("bob@acme.com")
    clock.set(2025, 3, 3, 9, 0)
    client.post("/api/attendance/check-in", headers=auth_headers(employee))

    clock.set(2025, 3, 3, 18, 30)
    response = client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    # Admins are not tracked, checked-in employees are left alone
    assert set(data["user_ids"]) == {bob.user_id, hr_user.user_id}
    assert data["marked"] == 2

    daily = client.get("/api/attendance/daily", params={"day": "2025-03-03"}, headers=auth_headers(hr_user)).json()
    by_user = {r["user_id"]: r["status"] for r in daily}
    assert by_user[bob.user_id] == "absent"
    assert by_user[employee.user_id] == "present"
    assert admin_user.user_id not in by_user

    again = client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(hr_user))
    assert again.json()["marked"] == 0


def test_mark_absentees_skips_later_hires(client, clock, hr_user, make_user, auth_headers):
    from datetime import date
    make_user("newbie@acme.com", hire_date=date(2025, 4, 1))
    clock.set(2025, 3, 3, 19, 0)
    response = client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(hr_user))
    assert response.json()["user_ids"] == [hr_user.user_id]


def test_mark_absentees_refused_during_office_hours(client, clock, hr_user, auth_headers):
    clock.set(2025, 3, 3, 12, 0)
    response = client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(hr_user))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _error_code(response) == "VALIDATION_ERROR"


def test_employee_cannot_mark_absentees(client, clock, employee, auth_headers):
    clock.set(2025, 3, 3, 19, 0)
    response = client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_check_in_replaces_absent_marker(client, clock, employee, hr_user, auth_headers):
    clock.set(2025, 3, 3, 18, 30)
    client.post("/api/attendance/absentees", params={"day": "2025-03-03"}, headers=auth_headers(hr_user))

    clock.set(2025, 3, 3, 19, 0)
    response = client.post("/api/attendance/check-in", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "late"


def test_attendance_requires_authentication(client):
    assert client.post("/api/attendance/check-in").status_code == status.HTTP_401_UNAUTHORIZED


def test_recent_attendance(client, clock, employee, auth_headers):
    headers = auth_headers(employee)
    for day in range(3, 12):
        clock.set(2025, 3, day, 9, 0)
        client.post("/api/attendance/check-in", headers=headers)

    response = client.get("/api/attendance/recent", headers=headers)
    dates = [r["date"] for r in response.json()]
    assert len(dates) == 7
    assert dates[0] == "2025-03-11"
    assert dates == sorted(dates, reverse=True)

    assert len(client.get("/api/attendance/recent", params={"limit": 2}, headers=headers).json()) == 2


def test_lost_insert_race_becomes_update(db_session, employee, monkeypatch):
    from datetime import date, datetime
    import pytz
    from staffdesk.core.timeutils import as_utc
    from staffdesk.services.attendance_service import AttendanceService
    from staffdesk.services.base import Actor

    day = date(2025, 3, 3)
    # Row written by a concurrent request after this one looked and found nothing
    db_session.add(AttendanceRecord(
        user_id=employee.user_id, date=day,
        check_in=datetime(2025, 3, 3, 9, 0, tzinfo=pytz.UTC), status=AttendanceStatus.PRESENT,
    ))
    db_session.commit()

    service = AttendanceService(db_session, Actor(user_id=employee.user_id, role=employee.role))
    lookup = service.get_record
    calls = []

    def stale_then_fresh(user_id, d):
        calls.append(d)
        return None if len(calls) == 1 else lookup(user_id, d)

    monkeypatch.setattr(service, "get_record", stale_then_fresh)
    later = datetime(2025, 3, 3, 9, 30, tzinfo=pytz.UTC)
    record = service._upsert(employee.user_id, day, check_in=later, status=AttendanceStatus.LATE)

    rows = db_session.query(AttendanceRecord).filter(AttendanceRecord.user_id == employee.user_id).all()
    assert len(rows) == 1
    assert rows[0].id == record.id
    assert rows[0].status == AttendanceStatus.LATE
    assert as_utc(rows[0].check_in) == later
