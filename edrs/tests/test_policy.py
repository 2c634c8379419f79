import unittest

from edrs.client import RequestContext
from edrs.policy import (
    AuthFailureHandler,
    Decision,
    RecordingNavigator,
    RetryPolicy,
    backoff_delay_ms,
    default_backoff,
)
from edrs.session import InMemorySessionStore


class BackoffTests(unittest.TestCase):
    def test_delay_grows_as_budget_depletes(self):
        self.assertEqual(backoff_delay_ms(3), 1000)
        self.assertEqual(backoff_delay_ms(2), 2000)
        self.assertEqual(backoff_delay_ms(1), 4000)
        self.assertEqual(backoff_delay_ms(0), 8000)

    def test_large_budget_gives_subsecond_delay(self):
        self.assertEqual(backoff_delay_ms(4), 500)

    def test_default_backoff_in_seconds(self):
        self.assertEqual(default_backoff(2), 2.0)


class DecideTests(unittest.TestCase):
    def setUp(self):
        self.policy = RetryPolicy()

    def _ctx(self, retries=3, retried=False):
        return RequestContext(method="GET", url="u", retries=retries, retried=retried)

    def test_first_401_is_auth_failure(self):
        self.assertEqual(self.policy.decide(self._ctx(), 401), Decision.AUTH_FAILED)

    def test_401_after_retry_fails(self):
        self.assertEqual(self.policy.decide(self._ctx(retried=True), 401), Decision.FAIL)

    def test_server_error_with_budget_retries(self):
        self.assertEqual(self.policy.decide(self._ctx(), 500), Decision.RETRY)
        self.assertEqual(self.policy.decide(self._ctx(), 503), Decision.RETRY)

    def test_network_error_with_budget_retries(self):
        self.assertEqual(self.policy.decide(self._ctx(), None, network_error=True), Decision.RETRY)

    def test_no_retry_once_flag_set_even_with_budget(self):
        ctx = self._ctx(retries=3, retried=True)
        self.assertEqual(self.policy.decide(ctx, 500), Decision.FAIL)
        self.assertEqual(self.policy.decide(ctx, None, network_error=True), Decision.FAIL)

    def test_no_retry_without_budget(self):
        self.assertEqual(self.policy.decide(self._ctx(retries=0), 502), Decision.FAIL)

    def test_client_errors_fail(self):
        for status in (400, 403, 404, 409, 422):
            self.assertEqual(self.policy.decide(self._ctx(), status), Decision.FAIL)

    def test_consume_retry_marks_and_decrements(self):
        ctx = self._ctx(retries=3)
        delay = self.policy.consume_retry(ctx)
        self.assertTrue(ctx.retried)
        self.assertEqual(ctx.retries, 2)
        self.assertEqual(delay, 2.0)

    def test_custom_backoff(self):
        policy = RetryPolicy(backoff=lambda remaining: 0.0)
        self.assertEqual(policy.consume_retry(self._ctx(retries=1)), 0.0)


class AuthFailureHandlerTests(unittest.TestCase):
    def test_clears_token_and_user(self):
        session = InMemorySessionStore(token="t", user={"id": 1})
        AuthFailureHandler(session)()
        self.assertIsNone(session.get_token())
        self.assertIsNone(session.get_user())

    def test_idempotent(self):
        session = InMemorySessionStore(token="t")
        handler = AuthFailureHandler(session)
        handler()
        handler()
        self.assertIsNone(session.get_token())

    def test_navigates_to_login_exactly_once(self):
        navigator = RecordingNavigator(current_path="/documents")
        handler = AuthFailureHandler(InMemorySessionStore(token="t"), navigator)
        handler()
        handler()
        self.assertEqual(navigator.history, ["/login"])
        self.assertEqual(navigator.current_path, "/login")

    def test_no_navigation_when_already_on_login(self):
        navigator = RecordingNavigator(current_path="/login?next=/documents")
        AuthFailureHandler(InMemorySessionStore(token="t"), navigator)()
        self.assertEqual(navigator.history, [])


if __name__ == "__main__":
    unittest.main()
