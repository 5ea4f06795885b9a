import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import httpx


_LOGGER = logging.getLogger(__name__)

# Statuses a mail service may answer while restarting or shedding load
_TRANSIENT_STATUSES = frozenset({408, 425, 429, 500, 502, 503, 504})


class CircuitOpenError(RuntimeError):
    pass


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class _Breaker:
    endpoint: str
    consecutive_failures: int = 0
    open_until: float = 0.0

    @property
    def threshold(self) -> int:
        return max(1, int(os.getenv("RAIDINS_HTTP_CIRCUIT_FAILURE_THRESHOLD", "3")))

    @property
    def cooldown_seconds(self) -> float:
        return max(0.0, float(os.getenv("RAIDINS_HTTP_CIRCUIT_RESET_SECONDS", "60")))

    def check(self) -> None:
        if self.open_until <= 0:
            return
        if self.open_until > time.time():
            raise CircuitOpenError(f"Mail circuit open for {self.endpoint} until {int(self.open_until)}")
        # Cooldown elapsed: half-open, let the next call through with a clean slate
        self.consecutive_failures = 0
        self.open_until = 0.0

    def failed(self) -> None:
        self.consecutive_failures += 1
        if self.consecutive_failures >= self.threshold and self.open_until <= 0:
            self.open_until = time.time() + self.cooldown_seconds
            _LOGGER.warning(
                "Opening mail circuit",
                extra={"endpoint": self.endpoint, "failures": self.consecutive_failures},
            )


_BREAKERS: dict[str, _Breaker] = {}


def _breaker_for(client: httpx.Client) -> _Breaker | None:
    if not _env_flag("RAIDINS_HTTP_CIRCUIT_BREAKER_ENABLED", True):
        return None
    endpoint = str(getattr(client, "base_url", "") or "unknown")
    return _BREAKERS.setdefault(endpoint, _Breaker(endpoint=endpoint))


def reset_circuit_breakers() -> None:
    _BREAKERS.clear()


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _TRANSIENT_STATUSES
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError))


def post_json_with_retry(
    client: httpx.Client,
    path: str,
    *,
    payload: dict[str, Any],
    headers: dict[str, str] | None = None,
    retries: int = 0,
    backoff_seconds: float = 0.2,
) -> dict[str, Any]:
    """POST ``payload`` as JSON, retrying transient failures with exponential backoff.

    Returns the decoded JSON object, ``{}`` for an empty body, or wraps a
    non-object body under ``"results"``. Client errors are raised immediately.
    """
    breaker = _breaker_for(client)
    total_attempts = max(0, int(retries)) + 1

    for attempt in range(1, total_attempts + 1):
        if breaker is not None:
            breaker.check()
        try:
            response = client.post(path, json=payload, headers=headers)
            if response.status_code in _TRANSIENT_STATUSES:
                raise httpx.HTTPStatusError(
                    f"Transient HTTP status: {response.status_code}",
                    request=response.request,
                    response=response,
                )
            response.raise_for_status()
        except Exception as exc:
            if not _is_transient(exc):
                raise
            if breaker is not None:
                breaker.failed()
            if attempt == total_attempts:
                raise
            _LOGGER.info(
                "Retrying mail request",
                extra={"path": path, "attempt": attempt, "error": type(exc).__name__},
            )
            delay = max(0.0, backoff_seconds) * (2 ** (attempt - 1))
            if delay > 0:
                time.sleep(delay)
            continue

        if breaker is not None:
            _BREAKERS.pop(breaker.endpoint, None)
        if not response.content:
            return {}
        body = response.json()
        return body if isinstance(body, dict) else {"results": body}

    return {}
