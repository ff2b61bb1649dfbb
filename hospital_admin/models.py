"""Pydantic models for backend request/response payloads.

The backend speaks camelCase JSON; fields here are snake_case with aliases.
Unknown fields are ignored so additive backend changes do not break decoding.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BackendModel(BaseModel):
    """Base for all backend payloads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    WAITING = "WAITING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class QueueStatus(str, Enum):
    WAITING = "WAITING"
    ACTIVE = "ACTIVE"
    DONE = "DONE"


class MoveDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class User(BackendModel):
    """Authenticated user profile as returned by /auth/me."""
    id: str
    name: str
    email: str
    role: str


class LoginUser(BackendModel):
    """User summary embedded in the login response; every field optional."""
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class LoginResponse(BackendModel):
    token: Optional[str] = None
    user: Optional[LoginUser] = None


class Department(BackendModel):
    id: str
    name: str
    hospital_id: Optional[str] = None


class Appointment(BackendModel):
    id: str
    date: str
    time: str
    status: AppointmentStatus
    department_id: str
    patient_id: str


class QueuePosition(BackendModel):
    position: int
    status: str


class CreatedAppointment(BackendModel):
    """Result of booking: the appointment plus its initial queue slot."""
    appointment_id: str
    scheduled_at: str
    status: str
    queue: QueuePosition


class AppointmentStatusChange(BackendModel):
    """Result of completing or cancelling an appointment."""
    message: str
    appointment_id: str
    status: str


class QueueItem(BackendModel):
    id: str
    appointment_id: str
    position: int
    status: QueueStatus
    created_at: str


class NextQueueItem(BackendModel):
    """Queue entry promoted to ACTIVE by /queque/next."""
    appointment_id: str
    position: int
    status: QueueStatus


class QueueMove(BackendModel):
    id: str
    position: int
    status: str
