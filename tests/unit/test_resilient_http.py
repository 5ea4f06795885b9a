import os
import sys
from pathlib import Path
import unittest
from unittest import mock

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from raidinsure.infrastructure.resilient_http import CircuitOpenError, post_json_with_retry, reset_circuit_breakers


class _AlwaysTimeoutClient:
    def __init__(self) -> None:
        self.base_url = "https://mail.invalid"
        self.calls = 0

    def post(self, path, json=None, headers=None):
        self.calls += 1
        raise httpx.TimeoutException("timeout")


class _StatusSequenceClient:
    def __init__(self, statuses) -> None:
        self.base_url = "https://mail.invalid"
        self.statuses = list(statuses)
        self.calls = 0

    def post(self, path, json=None, headers=None):
        self.calls += 1
        status = self.statuses.pop(0)
        request = httpx.Request("POST", f"https://mail.invalid{path}")
        body = {"accepted": True} if status == 200 else {"error": status}
        return httpx.Response(status, json=body, request=request)


class ResilientHttpTests(unittest.TestCase):
    def tearDown(self) -> None:
        reset_circuit_breakers()

    def test_returns_json_payload_on_success(self) -> None:
        client = _StatusSequenceClient([200])
        payload = post_json_with_retry(client, "/mail/send", payload={"a": 1}, retries=0)
        self.assertEqual({"accepted": True}, payload)
        self.assertEqual(1, client.calls)

    def test_retries_retryable_status_then_succeeds(self) -> None:
        client = _StatusSequenceClient([503, 200])
        payload = post_json_with_retry(client, "/mail/send", payload={}, retries=2, backoff_seconds=0)
        self.assertEqual({"accepted": True}, payload)
        self.assertEqual(2, client.calls)

    def test_client_error_is_not_retried(self) -> None:
        client = _StatusSequenceClient([400, 200])
        with self.assertRaises(httpx.HTTPStatusError):
            post_json_with_retry(client, "/mail/send", payload={}, retries=3)
        self.assertEqual(1, client.calls)

    def test_circuit_opens_after_threshold_and_short_circuits_next_call(self) -> None:
        client = _AlwaysTimeoutClient()
        env = {
            "RAIDINS_HTTP_CIRCUIT_BREAKER_ENABLED": "1",
            "RAIDINS_HTTP_CIRCUIT_FAILURE_THRESHOLD": "3",
            "RAIDINS_HTTP_CIRCUIT_RESET_SECONDS": "600",
        }

        with mock.patch.dict(os.environ, env, clear=False):
            for _ in range(3):
                with self.assertRaises(httpx.TimeoutException):
                    post_json_with_retry(client, "/mail/send", payload={}, retries=0)

            calls_before = client.calls
            with self.assertRaises(CircuitOpenError):
                post_json_with_retry(client, "/mail/send", payload={}, retries=0)
            self.assertEqual(calls_before, client.calls)


if __name__ == "__main__":
    unittest.main()
