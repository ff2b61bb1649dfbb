"""Authenticated request gateway for the hospital backend.

Purpose: Single choke point through which every backend call passes.

Pattern: requests.Session with connection pooling, a response interceptor
stage, and typed failures. Each call is a one-shot attempt:
- No retries, no backoff, no client-side locking between calls
- Any 401, from any endpoint, clears the local credential
- Transport errors (requests.exceptions.*) propagate unmodified
"""
import json
import time
from typing import Any, Callable, Iterable, Optional

import requests
from pydantic import TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter

from hospital_admin import config
from hospital_admin.logging_config import get_logger, generate_request_id
from hospital_admin.session_store import SessionStore

logger = get_logger(__name__)

HTTP_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE")


class RequestFailedError(Exception):
    """Raised when the backend answers with a non-ok status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRejectedError(RequestFailedError):
    """Raised on 401. The local session has already been cleared."""
    pass


class ResponseDecodeError(Exception):
    """Raised when a successful response does not match the expected shape."""
    pass


class StaleSessionError(Exception):
    """Raised when the session changed while an authenticated call was in flight."""
    pass


def create_http_session(pool_size: int = 10) -> requests.Session:
    """
    Create HTTP session with connection pooling and no retries.

    Args:
        pool_size: Connection pool size per host (default: 10)

    Returns:
        Configured requests.Session
    """
    session = requests.Session()

    adapter = HTTPAdapter(
        max_retries=0,
        pool_connections=pool_size,
        pool_maxsize=pool_size,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def invalidate_session_on_401(response: requests.Response, session_store: SessionStore):
    """
    Clear the local credential whenever the backend rejects authentication.

    Applies to every endpoint, including ones called without a credential.
    """
    if response.status_code == 401:
        session_store.clear_credential()
        logger.warning("session_invalidated", status_code=401)


def parse_body(response: requests.Response) -> Any:
    """Parse a JSON body; anything else (or unparseable JSON) is None."""
    content_type = response.headers.get("content-type") or ""
    if "application/json" not in content_type.lower():
        return None
    try:
        return response.json()
    except ValueError:
        logger.warning("response_json_unparseable", status_code=response.status_code)
        return None


def failure_message(data: Any, status_code: int) -> str:
    """Backend's `message` field verbatim, else a message with the status code."""
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    return f"Request failed ({status_code})"


class ApiGateway:
    """
    Issues backend calls, attaching the session credential.

    Callers may use one gateway from several threads; calls run
    independently and complete in whatever order the backend answers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session_store: Optional[SessionStore] = None,
        http_session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        interceptors: Optional[Iterable[Callable]] = None,
    ):
        """
        Initialize gateway.

        Args:
            base_url: Backend base URL (defaults to config.API_BASE_URL)
            session_store: Credential store (defaults to a store on
                           config.SESSION_DATABASE_URL)
            http_session: requests.Session to reuse
            timeout: Transport timeout in seconds; None keeps the
                     transport default
            interceptors: Extra callables (response, session_store) run on
                          every response before parsing. They always run
                          after the 401 session invalidation policy, which
                          cannot be removed.
        """
        self.base_url = config.API_BASE_URL if base_url is None else base_url
        config.warn_if_unconfigured(self.base_url)
        self.session_store = session_store or SessionStore()
        self.http_session = http_session or create_http_session()
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
        self.interceptors = [invalidate_session_on_401, *(interceptors or ())]

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        requires_auth: bool = True,
        params: Optional[dict] = None,
        response_model: Any = None,
    ) -> Any:
        """
        Send one request to the backend.

        Args:
            path: Backend-relative path, e.g. "/auth/me"
            method: GET, POST, PATCH, PUT or DELETE
            body: JSON-serializable payload, sent whole when not None
            requires_auth: Attach the stored credential if one exists
            params: Optional query string parameters
            response_model: Optional type (pydantic model, list[...]) the
                            successful body must decode into

        Returns:
            Parsed JSON body (None for non-JSON), or the decoded model

        Raises:
            ValueError: If path or method is invalid
            AuthenticationRejectedError: On 401 (session already cleared)
            RequestFailedError: On any other non-ok status
            ResponseDecodeError: If the body does not match response_model
            StaleSessionError: If the session changed while in flight
            requests.exceptions.RequestException: On transport failure
        """
        if not isinstance(path, str) or not path:
            raise ValueError("path must be a non-empty string")
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        request_id = generate_request_id()
        log = logger.bind(request_id=request_id, method=method, path=path)

        headers = {
            "Content-Type": "application/json",
            "X-Request-ID": request_id,
        }

        generation = None
        if requires_auth:
            # Read generation first: a credential written after this point
            # makes the call stale rather than silently mismatched
            generation = self.session_store.generation
            token = self.session_store.get_credential()
            if token:
                headers["Authorization"] = f"Bearer {token}"
            else:
                generation = None

        start = time.perf_counter()
        response = self.http_session.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            params=params,
            data=json.dumps(body) if body is not None else None,
            timeout=self.timeout,
        )
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)

        for interceptor in self.interceptors:
            interceptor(response, self.session_store)

        data = parse_body(response)

        if not response.ok:
            message = failure_message(data, response.status_code)
            log.warning(
                "api_request_failed",
                status_code=response.status_code,
                elapsed_ms=elapsed_ms,
                error=message,
            )
            if response.status_code == 401:
                raise AuthenticationRejectedError(message, 401)
            raise RequestFailedError(message, response.status_code)

        if generation is not None and self.session_store.generation != generation:
            log.warning("api_response_stale", status_code=response.status_code)
            raise StaleSessionError(
                f"Session changed while {method} {path} was in flight"
            )

        log.info("api_request_completed", status_code=response.status_code, elapsed_ms=elapsed_ms)

        if response_model is None:
            return data
        return decode(data, response_model)


def decode(data: Any, response_model: Any) -> Any:
    """Validate a parsed body against a pydantic model or typing construct."""
    try:
        return TypeAdapter(response_model).validate_python(data)
    except ValidationError as e:
        raise ResponseDecodeError(
            f"Unexpected response shape for {getattr(response_model, '__name__', response_model)}: "
            f"{e.error_count()} validation error(s)"
        ) from e
