"""Shared test fixtures."""
import json
import pytest
import requests
from unittest.mock import Mock

from hospital_admin.auth import AuthSession
from hospital_admin.endpoints import AdminApi
from hospital_admin.http_client import ApiGateway
from hospital_admin.session_store import SessionStore

BASE_URL = "http://backend.test"

ADMIN_USER = {"id": "u-1", "name": "Ada Admin", "email": "admin@hospital.com", "role": "ADMIN"}
PATIENT_USER = {"id": "u-2", "name": "Pat Patient", "email": "pat@hospital.com", "role": "PATIENT"}


@pytest.fixture
def make_response():
    """Build real requests.Response objects."""
    def _create(status_code: int = 200, json_body=None, text: str = None, content_type: str = None):
        response = requests.Response()
        response.status_code = status_code
        response.encoding = "utf-8"
        if json_body is not None:
            response._content = json.dumps(json_body).encode()
            response.headers["Content-Type"] = content_type or "application/json; charset=utf-8"
        else:
            response._content = (text or "").encode()
            response.headers["Content-Type"] = content_type or "text/html"
        return response
    return _create


@pytest.fixture
def session_store():
    """SessionStore on an in-memory database."""
    return SessionStore(database_url="sqlite:///:memory:")


@pytest.fixture
def http_session():
    return Mock(spec=requests.Session)


@pytest.fixture
def gateway(session_store, http_session):
    return ApiGateway(base_url=BASE_URL, session_store=session_store, http_session=http_session)


@pytest.fixture
def api(gateway):
    return AdminApi(gateway)


@pytest.fixture
def auth(api, session_store):
    return AuthSession(api, session_store, required_role="ADMIN")


def sent_headers(http_session, call_index: int = -1) -> dict:
    """Headers of a recorded request."""
    return http_session.request.call_args_list[call_index].kwargs["headers"]
