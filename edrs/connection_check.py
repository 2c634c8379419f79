"""
Connection checks between a deployed frontend and the EDRS backend.

Two suites are provided:

* ``run_connection_checks``: health, API schema, database and CORS, going
  through ``ApiClient`` so the retry policy applies.
* ``run_deployment_checks``: end-to-end reachability of backend, frontend,
  CORS, API root, database and auth endpoints with plain HTTP calls.

Every check catches its own failure and reports it as a ``CheckResult``;
nothing here raises for an unreachable backend.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

import requests

from edrs.client import API_PATH, ApiClient, health_url, root_url
from edrs.config import Settings
from edrs.errors import ApiError

logger = logging.getLogger(__name__)

HEALTH_TIMEOUT_SECONDS = 5.0
CHECK_TIMEOUT_SECONDS = 10.0
DATABASE_HEALTH_PATH = "/core/database/health/"


class CheckStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    PARTIAL = "PARTIAL"


@dataclass
class CheckResult:
    name: str
    status: CheckStatus
    details: str = ""
    latency: Optional[str] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ConnectionReport:
    api_url: str
    tests: list[CheckResult] = field(default_factory=list)
    timestamp: str = field(default_factory=_now_iso)

    @property
    def passed(self) -> int:
        return sum(1 for test in self.tests if test.status == CheckStatus.PASS)

    @property
    def failed(self) -> int:
        return sum(1 for test in self.tests if test.status == CheckStatus.FAIL)

    @property
    def partial(self) -> int:
        return sum(1 for test in self.tests if test.status == CheckStatus.PARTIAL)

    @property
    def overall(self) -> str:
        if self.tests and self.passed == len(self.tests):
            return "HEALTHY"
        return "ISSUES_DETECTED"

    def exit_code(self) -> int:
        # A single failed check is tolerated as a warning.
        return 0 if self.failed <= 1 else 1

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "tests": [
                {**asdict(test), "status": test.status.value} for test in self.tests
            ],
            "timestamp": self.timestamp,
            "api_url": self.api_url,
        }


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def network_hint(exc: BaseException) -> Optional[str]:
    """Human hint for the common reasons a backend is unreachable."""
    text = str(exc)
    if any(
        marker in text
        for marker in ("NameResolutionError", "Name or service not known", "getaddrinfo", "nodename nor servname")
    ):
        return "Domain name not found - check the backend URL"
    if "Connection refused" in text or "ECONNREFUSED" in text:
        return "Backend server may not be running"
    if isinstance(exc, requests.Timeout):
        return "Backend did not answer in time - it may be sleeping or cold-starting"
    return None


def _failure_details(prefix: str, exc: BaseException) -> str:
    if isinstance(exc, ApiError) and exc.status is not None:
        return f"{prefix}: {exc.status}"
    details = f"{prefix}: {exc}"
    hint = network_hint(exc.__cause__ or exc)
    return f"{details} ({hint})" if hint else details


def check_api_health(
    settings: Settings,
    http: Any = None,
    timeout: float = HEALTH_TIMEOUT_SECONDS,
) -> dict:
    """GET ``/health/``; healthy only on HTTP 200."""
    http = http or requests
    url = health_url(settings)
    started = time.monotonic()
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        return {"status": "unhealthy", "error": str(exc), "hint": network_hint(exc), "url": url}

    if response.status_code != 200:
        return {
            "status": "unhealthy",
            "error": f"HTTP {response.status_code}",
            "code": response.status_code,
            "url": url,
        }
    elapsed_ms = int((time.monotonic() - started) * 1000)
    return {
        "status": "healthy",
        "data": _json_or_none(response),
        "latency": response.headers.get("x-response-time") or f"{elapsed_ms}ms",
        "url": url,
    }


def _health_check(settings: Settings, http: Any) -> CheckResult:
    health = check_api_health(settings, http)
    if health["status"] != "healthy":
        details = health.get("error", "Backend unreachable")
        if health.get("hint"):
            details = f"{details} ({health['hint']})"
        return CheckResult("Health Check", CheckStatus.FAIL, details)

    data = health.get("data") if isinstance(health.get("data"), dict) else {}
    details = (
        f"Service: {data.get('service') or 'Unknown'}, "
        f"Status: {data.get('status') or 'healthy'}"
    )
    return CheckResult("Health Check", CheckStatus.PASS, details, health.get("latency"))


def _schema_check(client: ApiClient) -> CheckResult:
    try:
        response = client.get("/schema/")
    except ApiError as exc:
        return CheckResult("API Schema", CheckStatus.FAIL, _failure_details("Schema endpoint error", exc))
    if response.status_code == 200:
        return CheckResult("API Schema", CheckStatus.PASS, "REST API schema accessible")
    return CheckResult("API Schema", CheckStatus.FAIL, f"Schema endpoint returned {response.status_code}")


def _database_details(payload: Any) -> str:
    if not isinstance(payload, dict):
        return "Connected"
    data = payload.get("data") or {}
    if isinstance(data, dict) and data.get("postgresql_version"):
        return f"PostgreSQL: {data['postgresql_version']}"
    database = payload.get("database")
    if isinstance(database, dict) and database.get("status"):
        return f"Database: {database['status']}"
    return "PostgreSQL: Connected"


def _database_check(client: ApiClient) -> CheckResult:
    try:
        response = client.get(DATABASE_HEALTH_PATH)
    except ApiError as exc:
        return CheckResult(
            "Database Connection", CheckStatus.FAIL, _failure_details("Database test failed", exc)
        )
    if response.status_code == 200:
        return CheckResult(
            "Database Connection", CheckStatus.PASS, _database_details(_json_or_none(response))
        )
    return CheckResult(
        "Database Connection", CheckStatus.FAIL, f"Database check returned {response.status_code}"
    )


def _cors_check(client: ApiClient, origin: str) -> CheckResult:
    try:
        response = client.get("/core/categories/", headers={"Origin": origin})
    except ApiError as exc:
        if exc.status == 401:
            return CheckResult(
                "CORS Configuration", CheckStatus.PASS, "CORS working (authentication required)"
            )
        return CheckResult("CORS Configuration", CheckStatus.FAIL, _failure_details("CORS test failed", exc))
    if response.status_code == 200:
        return CheckResult("CORS Configuration", CheckStatus.PASS, "CORS configuration working")
    return CheckResult(
        "CORS Configuration",
        CheckStatus.PARTIAL,
        f"CORS test inconclusive: {response.status_code}",
    )


def run_connection_checks(
    client: ApiClient,
    settings: Settings,
    http: Any = None,
) -> ConnectionReport:
    report = ConnectionReport(api_url=client.config.base_url)
    checks: list[Callable[[], CheckResult]] = [
        lambda: _health_check(settings, http),
        lambda: _schema_check(client),
        lambda: _database_check(client),
        lambda: _cors_check(client, settings.frontend_url),
    ]
    for check in checks:
        result = check()
        logger.info("%s: %s %s", result.name, result.status.value, result.details)
        report.tests.append(result)
    return report


class DeploymentChecks:
    """End-to-end reachability checks with plain HTTP calls (no retry, no token)."""

    def __init__(self, settings: Settings, http: Any = None, timeout: float = CHECK_TIMEOUT_SECONDS):
        self.settings = settings
        self.http = http or requests.Session()
        self.timeout = timeout
        self.backend_url = root_url(settings)
        self.frontend_url = settings.frontend_url.rstrip("/")

    def _run(self, name: str, attempt: Callable[[], CheckResult]) -> CheckResult:
        try:
            return attempt()
        except requests.RequestException as exc:
            return CheckResult(name, CheckStatus.FAIL, _failure_details("Request failed", exc))

    def backend_health(self) -> CheckResult:
        name = "Backend Health Check"

        def attempt() -> CheckResult:
            response = self.http.get(f"{self.backend_url}/health/", timeout=self.timeout)
            data = _json_or_none(response)
            if not isinstance(data, dict):
                data = {}
            if response.ok and data.get("status") == "healthy":
                message = data.get("message") or data.get("service") or "ok"
                return CheckResult(name, CheckStatus.PASS, f"Backend responding: {message}")
            return CheckResult(name, CheckStatus.FAIL, f"Health check failed: {response.status_code} {data}")

        return self._run(name, attempt)

    def frontend_access(self) -> CheckResult:
        name = "Frontend Accessibility"

        def attempt() -> CheckResult:
            response = self.http.get(self.frontend_url, timeout=self.timeout)
            if response.ok:
                return CheckResult(name, CheckStatus.PASS, f"Frontend accessible: {response.status_code}")
            return CheckResult(name, CheckStatus.FAIL, f"Frontend returned: {response.status_code}")

        return self._run(name, attempt)

    def cors_integration(self) -> CheckResult:
        name = "CORS Configuration"

        def attempt() -> CheckResult:
            response = self.http.get(
                f"{self.backend_url}{API_PATH}/health/",
                headers={"Origin": self.frontend_url, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if response.ok:
                allowed = response.headers.get("Access-Control-Allow-Origin")
                return CheckResult(name, CheckStatus.PASS, f"CORS working: {allowed or 'Headers present'}")
            return CheckResult(name, CheckStatus.FAIL, f"CORS test failed: {response.status_code}")

        return self._run(name, attempt)

    def api_connection(self) -> CheckResult:
        name = "API Connection"

        def attempt() -> CheckResult:
            response = self.http.get(
                f"{self.backend_url}{API_PATH}/",
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if response.ok:
                return CheckResult(name, CheckStatus.PASS, f"API responding: {response.text[:100]}")
            return CheckResult(name, CheckStatus.FAIL, f"API returned: {response.status_code}")

        return self._run(name, attempt)

    def database_connection(self) -> CheckResult:
        name = "Database Connection"

        def attempt() -> CheckResult:
            response = self.http.get(
                f"{self.backend_url}{API_PATH}{DATABASE_HEALTH_PATH}", timeout=self.timeout
            )
            if response.status_code == 200:
                return CheckResult(name, CheckStatus.PASS, _database_details(_json_or_none(response)))
            return CheckResult(name, CheckStatus.FAIL, f"Database check failed: {response.status_code}")

        return self._run(name, attempt)

    def auth_endpoints(self) -> CheckResult:
        name = "Authentication Endpoints"

        def attempt() -> CheckResult:
            response = self.http.options(
                f"{self.backend_url}{API_PATH}/auth/",
                headers={"Origin": self.frontend_url},
                timeout=self.timeout,
            )
            if response.ok or response.status_code == 405:
                return CheckResult(name, CheckStatus.PASS, "Auth endpoints accessible")
            return CheckResult(name, CheckStatus.FAIL, f"Auth endpoints returned: {response.status_code}")

        return self._run(name, attempt)

    def run_all(self) -> ConnectionReport:
        report = ConnectionReport(api_url=f"{self.backend_url}{API_PATH}")
        for check in (
            self.backend_health,
            self.frontend_access,
            self.cors_integration,
            self.api_connection,
            self.database_connection,
            self.auth_endpoints,
        ):
            result = check()
            logger.info("%s: %s %s", result.name, result.status.value, result.details)
            report.tests.append(result)
        return report


def run_deployment_checks(settings: Settings, http: Any = None) -> ConnectionReport:
    return DeploymentChecks(settings, http=http).run_all()
