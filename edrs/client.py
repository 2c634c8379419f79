"""
HTTP client for the EDRS backend.

Wraps a ``requests.Session`` with base-URL selection, request augmentation
(auth token, request id) and the retry/auth-failure policy from
``edrs.policy``.
"""

from __future__ import annotations

import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Any, Callable, NoReturn, Optional

import requests

from edrs.config import Settings
from edrs.errors import ApiError, ApiNetworkError
from edrs.policy import AuthFailureHandler, Decision, Navigator, RetryPolicy
from edrs.session import InMemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

API_PATH = "/api"
HEALTH_PATH = "/health/"

_REQUEST_ID_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout: float
    retries: int
    log_requests: bool = False


def root_url(settings: Settings) -> str:
    root = settings.dev_api_url if settings.is_development else settings.api_url
    return root.rstrip("/")


def resolve_api_config(settings: Settings) -> ApiConfig:
    """Pick the development or production backend and append the API path."""
    return ApiConfig(
        base_url=f"{root_url(settings)}{API_PATH}",
        timeout=settings.request_timeout,
        retries=settings.max_retries,
        log_requests=settings.is_development,
    )


def health_url(settings: Settings) -> str:
    return f"{root_url(settings)}{HEALTH_PATH}"


def new_request_id() -> str:
    suffix = "".join(random.choices(_REQUEST_ID_ALPHABET, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


@dataclass
class RequestContext:
    """One outgoing call; mutated by the retry handler, dropped after it resolves."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: Optional[dict] = None
    json: Any = None
    data: Any = None
    retries: int = 0
    retried: bool = False

    @property
    def request_id(self) -> Optional[str]:
        return self.headers.get("X-Request-ID")


def augment_request(ctx: RequestContext, token: Optional[str]) -> RequestContext:
    ctx.headers["Content-Type"] = "application/json"
    ctx.headers["Accept"] = "application/json"
    # Drop any casing variant so at most one Authorization header goes out.
    for name in [key for key in ctx.headers if key.lower() == "authorization"]:
        del ctx.headers[name]
    if token:
        ctx.headers["Authorization"] = f"Token {token}"
    ctx.headers["X-Request-ID"] = new_request_id()
    return ctx


def _server_message(response: Optional[requests.Response], exc: Optional[Exception]) -> str:
    if response is None:
        return str(exc) if exc is not None else "Request failed"
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            if payload.get(key):
                return str(payload[key])
    return response.reason or f"Request failed with status code {response.status_code}"


def _payload(response: Optional[requests.Response]) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """
    Backend client with token injection and a single-resubmission retry policy.

    Each call gets its own ``RequestContext``; the only state shared between
    concurrent calls is the session store.
    """

    def __init__(
        self,
        config: ApiConfig,
        session: Optional[SessionStore] = None,
        policy: Optional[RetryPolicy] = None,
        http: Optional[requests.Session] = None,
    ):
        self.config = config
        self.session = session if session is not None else InMemorySessionStore()
        self.policy = policy or RetryPolicy()
        self.http = http or requests.Session()
        self._on_auth_failure: Callable[[], None] = (
            self.policy.on_auth_failure or AuthFailureHandler(self.session)
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: Optional[SessionStore] = None,
        navigator: Optional[Navigator] = None,
        http: Optional[requests.Session] = None,
    ) -> "ApiClient":
        session = session if session is not None else InMemorySessionStore()
        policy = RetryPolicy(on_auth_failure=AuthFailureHandler(session, navigator))
        return cls(resolve_api_config(settings), session=session, policy=policy, http=http)

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.config.base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
        data: Any = None,
        headers: Optional[dict] = None,
        retries: Optional[int] = None,
    ) -> requests.Response:
        if retries is None:
            retries = self.policy.max_retries
        if retries is None:
            retries = self.config.retries
        ctx = RequestContext(
            method=method.upper(),
            url=self.url_for(path),
            headers=dict(headers or {}),
            params=params,
            json=json,
            data=data,
            retries=max(0, retries),
        )
        return self._dispatch(ctx)

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> requests.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def options(self, path: str, **kwargs) -> requests.Response:
        return self.request("OPTIONS", path, **kwargs)

    def _dispatch(self, ctx: RequestContext) -> requests.Response:
        augment_request(ctx, self.session.get_token())
        if self.config.log_requests:
            logger.debug("API Request: %s %s", ctx.method, ctx.url)

        try:
            response = self.http.request(
                ctx.method,
                ctx.url,
                headers=dict(ctx.headers),
                params=ctx.params,
                json=ctx.json,
                data=ctx.data,
                timeout=self.config.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            return self._handle_failure(ctx, None, exc)
        except requests.RequestException as exc:
            # Invalid URL or broken body: terminal, never resubmitted.
            self._fail(ctx, None, exc)

        if response.status_code < 400:
            if self.config.log_requests:
                logger.debug("API Response: %s %s", response.status_code, ctx.url)
            return response
        return self._handle_failure(ctx, response, None)

    def _handle_failure(
        self,
        ctx: RequestContext,
        response: Optional[requests.Response],
        exc: Optional[Exception],
    ) -> requests.Response:
        status = response.status_code if response is not None else None
        decision = self.policy.decide(ctx, status, network_error=exc is not None)

        if decision is Decision.AUTH_FAILED:
            ctx.retried = True
            self._on_auth_failure()
            raise self._build_error(ctx, response, exc)

        if decision is Decision.RETRY:
            delay = self.policy.consume_retry(ctx)
            logger.info(
                "Retrying %s %s in %dms (%d retries left)",
                ctx.method,
                ctx.url,
                int(delay * 1000),
                ctx.retries,
            )
            self.policy.sleep(delay)
            return self._dispatch(ctx)

        self._fail(ctx, response, exc)

    def _fail(
        self,
        ctx: RequestContext,
        response: Optional[requests.Response],
        exc: Optional[Exception],
    ) -> NoReturn:
        error = self._build_error(ctx, response, exc)
        logger.error(
            "API Error: url=%s method=%s status=%s message=%s request_id=%s",
            ctx.url,
            ctx.method,
            error.status,
            error.message,
            ctx.request_id,
        )
        raise error from exc

    def _build_error(
        self,
        ctx: RequestContext,
        response: Optional[requests.Response],
        exc: Optional[Exception],
    ) -> ApiError:
        network = isinstance(exc, (requests.ConnectionError, requests.Timeout))
        error_cls = ApiNetworkError if response is None and network else ApiError
        return error_cls(
            _server_message(response, exc),
            status=response.status_code if response is not None else None,
            url=ctx.url,
            method=ctx.method,
            request_id=ctx.request_id,
            payload=_payload(response),
        )
