"""Delivery of the metadata payload to the analytics endpoint."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import requests

from .errors import DeliveryError
from .models import SubmissionPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff settings for payload delivery."""

    max_attempts: int = 5
    initial_delay_ms: int = 5000
    backoff_multiplier: int = 2

    def delays_ms(self) -> Iterator[int]:
        """Yield the delay applied after each failed attempt except the last."""
        delay_ms = self.initial_delay_ms
        for _ in range(self.max_attempts - 1):
            yield delay_ms
            delay_ms *= self.backoff_multiplier


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a delivery run.

    ``status`` is the HTTP status of the final attempt, or ``0`` if that
    attempt received no response.
    """

    status: int
    attempts: int
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class Submitter:
    """Posts a payload with retries, never raising on delivery failure."""

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float], None]] = None,
        timeout_seconds: int = 30,
    ) -> None:
        """Initialize the submitter.

        Args:
            policy: Retry policy; defaults to 5 attempts starting at 5000 ms.
            session: HTTP session used for POSTs.
            sleep: Callable taking seconds, used between attempts. Defaults to
                ``time.sleep``.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._policy = policy or RetryPolicy()
        self._session = session or requests.Session()
        self._sleep = sleep
        self._timeout_seconds = timeout_seconds

    def _wait(self, delay_ms: int) -> None:
        if self._sleep is not None:
            self._sleep(delay_ms / 1000)
        else:
            time.sleep(delay_ms / 1000)

    def _post(self, endpoint: str, body: bytes, auth_token: str) -> int:
        """Execute one POST and return its status.

        Raises:
            DeliveryError: On transport failure (status 0) or any non-2xx status.
        """
        try:
            response = self._session.post(
                endpoint,
                data=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {auth_token}",
                },
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else 0
            raise DeliveryError(str(exc), status_code=status) from exc
        except requests.RequestException as exc:
            raise DeliveryError(str(exc), status_code=0) from exc

        status = response.status_code
        if not 200 <= status < 300:
            raise DeliveryError(f"Unexpected HTTP status {status} for url: {endpoint}", status_code=status)

        return status

    def submit(self, payload: SubmissionPayload, endpoint: str, auth_token: str) -> SubmissionResult:
        """Deliver ``payload`` to ``endpoint``, retrying every failure.

        4xx responses are retried the same way as 5xx and network errors. The
        body is serialized once so every attempt sends identical bytes.
        """
        body = payload.to_json().encode("utf-8")
        delays = self._policy.delays_ms()
        status = 0
        last_error: Optional[DeliveryError] = None

        for attempt in range(1, self._policy.max_attempts + 1):
            logger.info(f"Attempt {attempt} to send data")
            try:
                status = self._post(endpoint, body, auth_token)
            except DeliveryError as exc:
                status = exc.status_code
                last_error = exc
                logger.warning(f"Attempt {attempt} failed with status {status}. Error: {exc}")

                delay_ms = next(delays, None)
                if delay_ms is None:
                    break
                logger.info(f"Retrying in {delay_ms}ms...")
                self._wait(delay_ms)
                continue

            logger.info(f"Successfully sent PR data. HTTP status: {status}")
            return SubmissionResult(status=status, attempts=attempt)

        logger.error(f"All {self._policy.max_attempts} attempts failed.")
        return SubmissionResult(
            status=status,
            attempts=self._policy.max_attempts,
            error=str(last_error) if last_error is not None else "No delivery attempt was made.",
        )


def submit(
    payload: SubmissionPayload,
    endpoint: str,
    auth_token: str,
    policy: Optional[RetryPolicy] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> int:
    """Deliver ``payload`` and return the final HTTP status (``0`` if none)."""
    with requests.Session() as session:
        result = Submitter(policy=policy, session=session, sleep=sleep).submit(payload, endpoint, auth_token)
    return result.status
