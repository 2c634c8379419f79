"""
Retry and auth-failure policy for the API client.

The client consults ``RetryPolicy.decide`` once per failed attempt; the
policy itself holds no per-request state, everything mutable lives on the
``RequestContext`` of the call being handled.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from edrs.session import SessionStore

if TYPE_CHECKING:
    from edrs.client import RequestContext

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class Decision(str, Enum):
    AUTH_FAILED = "AUTH_FAILED"
    RETRY = "RETRY"
    FAIL = "FAIL"


def backoff_delay_ms(remaining_retries: int) -> int:
    """
    Delay before a resubmission, given the budget left after decrementing.

    The exponent grows as the budget shrinks: 2 left -> 2000ms, 1 -> 4000ms,
    0 -> 8000ms. Budgets above 3 give sub-second delays.
    """
    return int(2 ** (3 - remaining_retries) * 1000)


def default_backoff(remaining_retries: int) -> float:
    return backoff_delay_ms(remaining_retries) / 1000.0


@dataclass
class RetryPolicy:
    """Retry budget, backoff function and auth-failure callback for a client.

    ``max_retries`` of None means "use the budget from the ApiConfig".
    ``on_auth_failure`` of None means the client installs an
    ``AuthFailureHandler`` over its own session store.
    """

    max_retries: Optional[int] = None
    backoff: Callable[[int], float] = default_backoff
    sleep: Callable[[float], None] = time.sleep
    on_auth_failure: Optional[Callable[[], None]] = None

    def decide(
        self,
        ctx: "RequestContext",
        status: Optional[int],
        network_error: bool = False,
    ) -> Decision:
        if status == 401 and not ctx.retried:
            return Decision.AUTH_FAILED
        retryable = network_error or (status is not None and status >= 500)
        if retryable and not ctx.retried and ctx.retries > 0:
            return Decision.RETRY
        return Decision.FAIL

    def consume_retry(self, ctx: "RequestContext") -> float:
        """Mark the context retried, spend one retry and return the delay in seconds."""
        ctx.retried = True
        ctx.retries = max(0, ctx.retries - 1)
        return self.backoff(ctx.retries)


class Navigator(Protocol):
    """The hosting browser's location, when there is one."""

    current_path: str

    def navigate(self, path: str) -> None:
        ...


@dataclass
class RecordingNavigator:
    """Navigator that only records where it was sent."""

    current_path: str = "/"
    history: list[str] = field(default_factory=list)

    def navigate(self, path: str) -> None:
        self.history.append(path)
        self.current_path = path


@dataclass
class AuthFailureHandler:
    """
    Invalidates the local session after a 401 and sends a browser to login.

    Without a navigator (CLI or server-side use) only the session is cleared.
    """

    session: SessionStore
    navigator: Optional[Navigator] = None
    login_path: str = LOGIN_PATH

    def __call__(self) -> None:
        self.session.clear()
        logger.info("Session invalidated after authentication failure")
        if self.navigator is None:
            return
        if self.login_path in self.navigator.current_path:
            return
        self.navigator.navigate(self.login_path)
