"""
Platform Sender.

Posts the metrics payload to the ingestion endpoint and classifies the
response. One request per delivery attempt; a failed attempt is retried
only by the next delivery cycle.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 500


class PluginAgentError(Exception):
    """Base error for the plugin agent."""


class ForbiddenError(PluginAgentError):
    """
    The endpoint rejected the license key (HTTP 403).

    Unlike every other delivery outcome this is not recoverable: callers
    are expected to let it propagate and end the process.
    """

    def __init__(self, body: str):
        super().__init__(f"Forbidden request. Response: {body}")
        self.body = body


class DeliveryStatus(Enum):
    """Outcome of a delivery attempt."""
    OK = "ok"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass
class SendResult:
    """Result of a send operation."""
    status: DeliveryStatus
    status_code: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == DeliveryStatus.OK

    @property
    def failed(self) -> bool:
        return self.status == DeliveryStatus.FAILED


def _error_detail(body: str) -> str:
    """Extract the `error` field from a response body."""
    if not body:
        return "no data returned"
    try:
        data = json.loads(body)
    except ValueError:
        return body[:MAX_ERROR_LENGTH]
    if isinstance(data, dict) and "error" in data:
        return str(data["error"])
    return body[:MAX_ERROR_LENGTH]


def classify_response(status_code: int, body: str) -> SendResult:
    """
    Map an HTTP status and body to a delivery outcome.

    Raises ForbiddenError on 403.
    """
    if status_code == 200:
        try:
            data = json.loads(body)
        except ValueError:
            return SendResult(DeliveryStatus.FAILED, status_code, "invalid response body")

        if isinstance(data, dict) and data.get("status") == "ok":
            return SendResult(DeliveryStatus.OK, status_code)

        error = data.get("error") if isinstance(data, dict) else None
        if error is None:
            error = "no error returned"
        return SendResult(DeliveryStatus.FAILED, status_code, str(error))

    if status_code == 403:
        raise ForbiddenError(body)

    if status_code == 503:
        return SendResult(DeliveryStatus.UNAVAILABLE, status_code)

    return SendResult(DeliveryStatus.FAILED, status_code, _error_detail(body))


class PlatformSender:
    """
    Sends metric payloads to the ingestion endpoint.

    Features:
    - Persistent HTTP session
    - License key authentication
    - Request timeout so a hanging endpoint cannot stall the agent forever
    """

    def __init__(self, endpoint: str, timeout: int = 30, version: str = "1.0"):
        """Initialize the sender."""
        self.endpoint = endpoint
        self.timeout = timeout
        self.version = version
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _get_headers(self, license_key: str) -> dict:
        """Get request headers."""
        return {
            'X-License-Key': license_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'User-Agent': f'PluginAgent/{self.version}',
        }

    def send(self, payload: dict, license_key: str) -> SendResult:
        """
        Deliver a payload once.

        Transport errors and declared failures come back as a FAILED result.
        A 403 raises ForbiddenError.
        """
        data = json.dumps(payload, allow_nan=False)
        logger.debug(f"JSON Payload: {data}")

        try:
            response = self._get_session().post(
                self.endpoint,
                data=data,
                headers=self._get_headers(license_key),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Connection Error: {e}")
            return SendResult(DeliveryStatus.FAILED, error=str(e))

        logger.debug(f"Status code: {response.status_code}")
        logger.debug(f"Response body: {response.text}")

        if response.status_code == 403:
            logger.error(f"Forbidden request. Response: {response.text}")

        result = classify_response(response.status_code, response.text)

        if result.status == DeliveryStatus.UNAVAILABLE:
            logger.warning("Collector temporarily unavailable. Continuing.")
        elif result.failed:
            logger.error(f"FAILED {result.status_code}, {result.error}")

        return result

    def close(self):
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
