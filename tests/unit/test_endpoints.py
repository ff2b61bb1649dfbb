"""Unit tests for endpoint wrappers.

Uses a mocked requests.Session; no backend is contacted.
"""
import json
import pytest

from hospital_admin.models import AppointmentStatus, QueueStatus
from tests.conftest import BASE_URL, sent_headers


def sent(http_session):
    """(method, url, params, body) of the last request."""
    call = http_session.request.call_args
    data = call.kwargs["data"]
    return call.args[0], call.args[1], call.kwargs["params"], json.loads(data) if data else None


class TestAuthEndpoints:

    def test_login_posts_credentials_without_auth(self, api, session_store, http_session, make_response):
        session_store.set_credential("old")
        http_session.request.return_value = make_response(200, {"token": "abc"})

        result = api.auth.login("admin@hospital.com", "secret")

        method, url, _, body = sent(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/auth/login")
        assert body == {"email": "admin@hospital.com", "password": "secret"}
        assert "Authorization" not in sent_headers(http_session)
        assert result.token == "abc"

    def test_me_decodes_user(self, api, http_session, make_response):
        http_session.request.return_value = make_response(
            200, {"id": "u-1", "name": "Ada", "email": "ada@h.org", "role": "ADMIN"}
        )

        user = api.auth.me()

        assert sent(http_session)[:2] == ("GET", f"{BASE_URL}/auth/me")
        assert user.role == "ADMIN"

    def test_me_keeps_unlisted_role_string(self, api, http_session, make_response):
        http_session.request.return_value = make_response(
            200, {"id": "u-9", "name": "Bo", "email": "bo@h.org", "role": "DOCTOR"}
        )

        assert api.auth.me().role == "DOCTOR"


class TestAppointmentEndpoints:

    def test_create_sends_camel_case_body(self, api, http_session, make_response):
        http_session.request.return_value = make_response(201, {
            "appointmentId": "apt-12345",
            "scheduledAt": "2026-01-05T09:30:00Z",
            "status": "PENDING",
            "queue": {"position": 4, "status": "WAITING"},
        })

        created = api.appointments.create("d-1", "h-1", "2026-01-05", "09:30")

        method, url, _, body = sent(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/appointments/create-appointment")
        assert body == {"departmentId": "d-1", "hospitalId": "h-1", "date": "2026-01-05", "time": "09:30"}
        assert created.queue.position == 4

    def test_my_without_type_sends_no_query(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, [])

        assert api.appointments.my() == []
        assert sent(http_session)[2] is None

    def test_my_with_type(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, [{
            "id": "apt-1", "date": "2026-01-05", "time": "09:30", "status": "WAITING",
            "departmentId": "d-1", "patientId": "p-1",
        }])

        appointments = api.appointments.my(type="upcoming")

        assert sent(http_session)[2] == {"type": "upcoming"}
        assert appointments[0].status == AppointmentStatus.WAITING

    def test_my_rejects_unknown_type(self, api, http_session):
        with pytest.raises(ValueError):
            api.appointments.my(type="tomorrow")
        http_session.request.assert_not_called()

    @pytest.mark.parametrize("action", ["complete", "cancel"])
    def test_status_change_patches_trimmed_id(self, api, http_session, make_response, action):
        http_session.request.return_value = make_response(200, {
            "message": "Appointment updated", "appointmentId": "apt-12345", "status": "DONE",
        })

        result = getattr(api.appointments, action)("  apt-12345 ")

        assert sent(http_session)[:2] == ("PATCH", f"{BASE_URL}/appointments/apt-12345/{action}")
        assert result.message == "Appointment updated"

    @pytest.mark.parametrize("appointment_id", ["", "   ", "a-1"])
    def test_status_change_rejects_short_id(self, api, http_session, appointment_id):
        with pytest.raises(ValueError):
            api.appointments.complete(appointment_id)
        http_session.request.assert_not_called()


class TestDepartmentEndpoints:

    def test_list_with_hospital_filter(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, [
            {"id": "d-1", "name": "Cardiology", "hospitalId": "h-1"},
        ])

        departments = api.departments.list(hospital_id="h-1")

        method, url, params, _ = sent(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/departments/get-departments")
        assert params == {"hospitalId": "h-1"}
        assert departments[0].hospital_id == "h-1"

    def test_list_without_filter(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, [])

        api.departments.list()

        assert sent(http_session)[2] is None

    def test_create_trims_name(self, api, http_session, make_response):
        http_session.request.return_value = make_response(201, {"id": "d-2", "name": "Radiology"})

        department = api.departments.create("  Radiology ", "h-1")

        assert sent(http_session)[3] == {"name": "Radiology", "hospitalId": "h-1"}
        assert department.id == "d-2"

    def test_create_requires_hospital(self, api, http_session):
        with pytest.raises(ValueError, match="hospitalId"):
            api.departments.create("Radiology", "")
        http_session.request.assert_not_called()

    def test_create_requires_two_characters(self, api, http_session):
        with pytest.raises(ValueError):
            api.departments.create(" R ", "h-1")
        http_session.request.assert_not_called()


class TestQueueEndpoints:

    def test_list_admin_query(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, [
            {"id": "q-2", "appointmentId": "a-2", "position": 2, "status": "WAITING", "createdAt": "t"},
            {"id": "q-1", "appointmentId": "a-1", "position": 1, "status": "ACTIVE", "createdAt": "t"},
        ])

        items = api.queue.list_admin("d-1", date="2026-01-05")

        method, url, params, _ = sent(http_session)
        assert (method, url) == ("GET", f"{BASE_URL}/queque/get-queque")
        assert params == {"departmentId": "d-1", "date": "2026-01-05"}
        # Order is whatever the backend returned
        assert [item.id for item in items] == ["q-2", "q-1"]

    def test_list_admin_requires_department(self, api, http_session):
        with pytest.raises(ValueError):
            api.queue.list_admin("")
        http_session.request.assert_not_called()

    def test_next_posts_department_and_date(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, {
            "appointmentId": "a-1", "position": 1, "status": "ACTIVE",
        })

        item = api.queue.next("d-1", date="2026-01-05")

        method, url, _, body = sent(http_session)
        assert (method, url) == ("POST", f"{BASE_URL}/queque/next")
        assert body == {"departmentId": "d-1", "date": "2026-01-05"}
        assert item.status == QueueStatus.ACTIVE

    def test_next_without_date(self, api, http_session, make_response):
        http_session.request.return_value = make_response(200, {
            "appointmentId": "a-1", "position": 1, "status": "ACTIVE",
        })

        api.queue.next("d-1")

        assert sent(http_session)[3] == {"departmentId": "d-1"}

    @pytest.mark.parametrize("direction", ["UP", "down"])
    def test_move(self, api, http_session, make_response, direction):
        http_session.request.return_value = make_response(200, {"id": "q-1", "position": 2, "status": "WAITING"})

        moved = api.queue.move("q-1", direction)

        method, url, _, body = sent(http_session)
        assert (method, url) == ("PATCH", f"{BASE_URL}/queque/q-1/move")
        assert body == {"direction": direction.upper()}
        assert moved.position == 2

    def test_move_rejects_unknown_direction(self, api, http_session):
        with pytest.raises(ValueError):
            api.queue.move("q-1", "SIDEWAYS")
        http_session.request.assert_not_called()
