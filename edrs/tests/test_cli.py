import io
import json
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from edrs.cli import check_connection_main, check_deployment_main
from edrs.config import Settings
from edrs.connection_check import CheckResult, CheckStatus, ConnectionReport


def _report(*statuses):
    return ConnectionReport(
        api_url="https://api.example.test/api",
        tests=[CheckResult(f"check {i}", status, "details") for i, status in enumerate(statuses)],
    )


class CliTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("edrs.cli.get_settings", return_value=Settings(_env_file=None, mode="production"))
        self.addCleanup(patcher.stop)
        patcher.start()

    @patch("edrs.cli.run_connection_checks")
    def test_connection_json_output(self, mock_run):
        mock_run.return_value = _report(CheckStatus.PASS, CheckStatus.PASS)
        out = io.StringIO()
        with redirect_stdout(out):
            code = check_connection_main(["--json", "--api-url", "https://api.example.test"])

        self.assertEqual(code, 0)
        payload = json.loads(out.getvalue())
        self.assertEqual(payload["overall"], "HEALTHY")
        client, settings = mock_run.call_args.args
        self.assertEqual(client.config.base_url, "https://api.example.test/api")
        self.assertEqual(settings.api_url, "https://api.example.test")

    @patch("edrs.cli.run_connection_checks")
    def test_connection_summary_and_exit_code(self, mock_run):
        mock_run.return_value = _report(CheckStatus.FAIL, CheckStatus.FAIL, CheckStatus.PARTIAL)
        out = io.StringIO()
        with redirect_stdout(out):
            code = check_connection_main([])

        self.assertEqual(code, 1)
        text = out.getvalue()
        self.assertIn("0 passed, 2 failed, 1 partial", text)
        self.assertIn("Troubleshooting tips", text)

    @patch("edrs.cli.run_deployment_checks")
    def test_deployment_overrides_frontend(self, mock_run):
        mock_run.return_value = _report(CheckStatus.PASS, CheckStatus.FAIL)
        out = io.StringIO()
        with redirect_stdout(out):
            code = check_deployment_main(["--frontend-url", "https://app.example.test"])

        self.assertEqual(code, 0)
        settings = mock_run.call_args.args[0]
        self.assertEqual(settings.frontend_url, "https://app.example.test")
        self.assertIn("Minor issues detected", out.getvalue())


if __name__ == "__main__":
    unittest.main()
