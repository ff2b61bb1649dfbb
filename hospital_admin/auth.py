"""Login/logout orchestration with the dashboard role gate.

States:
- ANONYMOUS: no credential, no profile
- PENDING: credentials submitted or profile fetch in flight
- AUTHENTICATED: credential stored and profile fetched

A valid token is not enough: the fetched profile must also hold the role
the dashboard requires, otherwise the session is rejected client-side.
"""
from enum import Enum
from typing import Callable, Optional

import requests

from hospital_admin import config
from hospital_admin.endpoints import AdminApi
from hospital_admin.http_client import (
    RequestFailedError,
    ResponseDecodeError,
    StaleSessionError,
)
from hospital_admin.logging_config import get_logger
from hospital_admin.models import User
from hospital_admin.session_store import SessionStore

logger = get_logger(__name__)


class AuthState(Enum):
    """Authentication states."""
    ANONYMOUS = "anonymous"
    PENDING = "pending"
    AUTHENTICATED = "authenticated"


class LoginError(Exception):
    """Raised when login fails. Carries one human-readable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccessDeniedError(LoginError):
    """Raised when an authenticated user lacks the dashboard role."""
    pass


class AuthSession:
    """Tracks who is logged in to the dashboard."""

    def __init__(
        self,
        api: AdminApi,
        session_store: Optional[SessionStore] = None,
        required_role: Optional[str] = None,
        on_logout: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            api: Endpoint wrappers sharing the gateway's session store
            session_store: Defaults to the gateway's store
            required_role: Role needed for the dashboard (default: config)
            on_logout: Called after logout, e.g. to return to the login screen
        """
        self.api = api
        self.session_store = session_store or api.gateway.session_store
        self.required_role = required_role or config.REQUIRED_ROLE
        self.on_logout = on_logout
        self._user: Optional[User] = None
        self._state = AuthState.ANONYMOUS
        # Failure of the most recent profile fetch, kept for require_access
        self.last_error: Optional[Exception] = None

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._state == AuthState.PENDING

    @property
    def is_authed(self) -> bool:
        return self.session_store.get_credential() is not None and self._user is not None

    @property
    def access_denied_message(self) -> str:
        return f"Access denied: {self.required_role.capitalize()}s only."

    def login(self, email: str, password: str) -> User:
        """
        Log in and fetch the profile.

        Args:
            email: Account email (trimmed and lowercased before sending)
            password: Account password

        Returns:
            The authenticated user

        Raises:
            AccessDeniedError: If the user does not hold the required role
            LoginError: On any other failure (validation, backend, network)
        """
        email = (email or "").strip().lower()
        if not email or not (password or "").strip():
            raise LoginError("Email and password are required.")

        self._state = AuthState.PENDING
        try:
            response = self.api.auth.login(email, password)
            if not response.token:
                raise LoginError("No token returned from server")

            # Reject before persisting when the login payload already shows the role
            if response.user is not None and response.user.role is not None:
                self._check_role(response.user.role)

            self.session_store.set_credential(response.token)
            user = self.api.auth.me()
            self._check_role(user.role)
            self.session_store.set_profile(user.model_dump(mode="json"))

        except LoginError as e:
            self._reset()
            logger.warning("login_failed", reason=e.message)
            raise
        except (RequestFailedError, ResponseDecodeError, StaleSessionError) as e:
            self._reset()
            logger.warning("login_failed", reason=str(e))
            raise LoginError(str(e) or "Something went wrong") from e
        except requests.exceptions.RequestException as e:
            self._reset()
            logger.warning("login_failed", reason="transport", error=str(e))
            raise LoginError(f"Could not reach the server: {e}") from e

        self._user = user
        self._state = AuthState.AUTHENTICATED
        logger.info("login_succeeded", user_id=user.id, role=user.role)
        return user

    def refetch_me(self) -> Optional[User]:
        """
        Re-fetch the profile for the stored credential.

        Any failure leaves the session anonymous and is kept in
        last_error; a 401 has already cleared the credential in the gateway.

        Returns:
            The user, or None when absent
        """
        self.last_error = None
        if self.session_store.get_credential() is None:
            self._user = None
            self._state = AuthState.ANONYMOUS
            return None

        self._state = AuthState.PENDING
        try:
            user = self.api.auth.me()
        except (RequestFailedError, ResponseDecodeError, StaleSessionError,
                requests.exceptions.RequestException) as e:
            logger.warning("profile_fetch_failed", error=str(e))
            self.last_error = e
            self._user = None
            self._state = AuthState.ANONYMOUS
            return None

        self._user = user
        self._state = AuthState.AUTHENTICATED
        self.session_store.set_profile(user.model_dump(mode="json"))
        return user

    def restore(self) -> Optional[User]:
        """Resume a persisted session on startup."""
        return self.refetch_me()

    def require_access(self) -> User:
        """
        Gate for dashboard screens.

        Raises:
            AccessDeniedError: If not logged in or lacking the required role
            RequestFailedError, requests.exceptions.RequestException, ...:
                The failure of the last profile fetch, when that is why
                no user is present
        """
        if not self.is_authed:
            if self.last_error is not None:
                raise self.last_error
            raise AccessDeniedError("Not logged in.")
        self._check_role(self._user.role)
        return self._user

    def logout(self) -> None:
        """Discard the credential locally. The backend is not contacted."""
        self._reset()
        logger.info("logged_out")
        if self.on_logout:
            self.on_logout()

    def _check_role(self, role: Optional[str]):
        if role != self.required_role:
            raise AccessDeniedError(self.access_denied_message)

    def _reset(self):
        self.last_error = None
        self.session_store.clear()
        self._user = None
        self._state = AuthState.ANONYMOUS
