"""Typed wrappers for every backend endpoint the dashboard uses.

Each method is a single gateway call. Inputs are checked only as far as the
dashboard screens check them; all queue and appointment rules are enforced
by the backend.
"""
from typing import List, Optional

from hospital_admin.http_client import ApiGateway
from hospital_admin.models import (
    Appointment,
    AppointmentStatusChange,
    CreatedAppointment,
    Department,
    LoginResponse,
    MoveDirection,
    NextQueueItem,
    QueueItem,
    QueueMove,
    User,
)

MIN_APPOINTMENT_ID_LENGTH = 5
MIN_DEPARTMENT_NAME_LENGTH = 2


def _query(**params) -> Optional[dict]:
    """Drop empty values; None when nothing is left."""
    cleaned = {key: value for key, value in params.items() if value}
    return cleaned or None


def _appointment_id(appointment_id: str) -> str:
    appointment_id = (appointment_id or "").strip()
    if len(appointment_id) < MIN_APPOINTMENT_ID_LENGTH:
        raise ValueError(
            f"Appointment ID must be at least {MIN_APPOINTMENT_ID_LENGTH} characters"
        )
    return appointment_id


class AuthEndpoints:
    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    def login(self, email: str, password: str) -> LoginResponse:
        """Exchange credentials for a token. Sent without Authorization."""
        return self.gateway.request(
            "/auth/login",
            method="POST",
            body={"email": email, "password": password},
            requires_auth=False,
            response_model=LoginResponse,
        )

    def me(self) -> User:
        return self.gateway.request("/auth/me", response_model=User)


class AppointmentEndpoints:
    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    def create(self, department_id: str, hospital_id: str, date: str, time: str) -> CreatedAppointment:
        """
        Book an appointment.

        Args:
            department_id: Target department
            hospital_id: Hospital the department belongs to
            date: YYYY-MM-DD
            time: HH:MM

        Returns:
            Created appointment with its initial queue position
        """
        return self.gateway.request(
            "/appointments/create-appointment",
            method="POST",
            body={
                "departmentId": department_id,
                "hospitalId": hospital_id,
                "date": date,
                "time": time,
            },
            response_model=CreatedAppointment,
        )

    def my(self, type: Optional[str] = None) -> List[Appointment]:
        """List the caller's appointments, optionally 'past' or 'upcoming'."""
        if type is not None and type not in ("past", "upcoming"):
            raise ValueError("type must be 'past' or 'upcoming'")
        return self.gateway.request(
            "/appointments/my-appointments",
            params=_query(type=type),
            response_model=List[Appointment],
        )

    def complete(self, appointment_id: str) -> AppointmentStatusChange:
        appointment_id = _appointment_id(appointment_id)
        return self.gateway.request(
            f"/appointments/{appointment_id}/complete",
            method="PATCH",
            response_model=AppointmentStatusChange,
        )

    def cancel(self, appointment_id: str) -> AppointmentStatusChange:
        appointment_id = _appointment_id(appointment_id)
        return self.gateway.request(
            f"/appointments/{appointment_id}/cancel",
            method="PATCH",
            response_model=AppointmentStatusChange,
        )


class DepartmentEndpoints:
    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    def list(self, hospital_id: Optional[str] = None) -> List[Department]:
        return self.gateway.request(
            "/departments/get-departments",
            params=_query(hospitalId=hospital_id),
            response_model=List[Department],
        )

    def create(self, name: str, hospital_id: str) -> Department:
        """
        Create a department.

        Raises:
            ValueError: If hospital_id is missing or the trimmed name is
                        shorter than two characters
        """
        name = (name or "").strip()
        if not hospital_id:
            raise ValueError("hospitalId is required to create a department")
        if len(name) < MIN_DEPARTMENT_NAME_LENGTH:
            raise ValueError(
                f"Department name must be at least {MIN_DEPARTMENT_NAME_LENGTH} characters"
            )
        return self.gateway.request(
            "/departments/create-department",
            method="POST",
            body={"name": name, "hospitalId": hospital_id},
            response_model=Department,
        )


class QueueEndpoints:
    # Backend routes are spelled "queque"
    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway

    def list_admin(self, department_id: str, date: Optional[str] = None) -> List[QueueItem]:
        if not department_id:
            raise ValueError("department_id is required")
        params = {"departmentId": department_id}
        if date:
            params["date"] = date
        return self.gateway.request(
            "/queque/get-queque",
            params=params,
            response_model=List[QueueItem],
        )

    def next(self, department_id: str, date: Optional[str] = None) -> NextQueueItem:
        """Call the next waiting patient in a department."""
        if not department_id:
            raise ValueError("department_id is required")
        body = {"departmentId": department_id}
        if date:
            body["date"] = date
        return self.gateway.request(
            "/queque/next",
            method="POST",
            body=body,
            response_model=NextQueueItem,
        )

    def move(self, queue_id: str, direction: str) -> QueueMove:
        """
        Move a queue entry one position UP or DOWN.

        Concurrent moves are sent independently; the backend orders them.
        """
        direction = MoveDirection(str(direction).upper())
        return self.gateway.request(
            f"/queque/{queue_id}/move",
            method="PATCH",
            body={"direction": direction.value},
            response_model=QueueMove,
        )


class AdminApi:
    """All endpoint groups over one gateway."""

    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway
        self.auth = AuthEndpoints(gateway)
        self.appointments = AppointmentEndpoints(gateway)
        self.departments = DepartmentEndpoints(gateway)
        self.queue = QueueEndpoints(gateway)
