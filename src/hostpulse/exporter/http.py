"""HTTP exporter: POSTs snapshots as JSON to the collector endpoint."""

from __future__ import annotations

import json
import logging

import requests

from ..collector.base import SystemSnapshot
from ..config import EndpointConfig
from ..errors import TransportError
from .base import BaseExporter

logger = logging.getLogger(__name__)

AGENT_PATH = "/api/agent"


class HttpExporter(BaseExporter):
    """Sends each snapshot once to ``<url>/api/agent``.

    The shared secret goes into the ``Authorization`` header as-is, without a
    ``Bearer`` prefix, because that is what the collector expects. Anything
    other than HTTP 200 is a failure. There is no retry here; the polling
    loop tries again on its next cycle with a fresh snapshot.
    """

    def __init__(self, config: EndpointConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._url = config.url.rstrip("/") + AGENT_PATH
        self._session = session or requests.Session()
        logger.info("HttpExporter initialized → %s", self._url)

    @property
    def url(self) -> str:
        return self._url

    def export(self, snapshot: SystemSnapshot) -> None:
        try:
            body = json.dumps(snapshot.to_payload(), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"JSON error: {exc}") from exc

        headers = {
            "Content-Type": "application/json",
            "Authorization": self._config.secret,
        }
        try:
            response = self._session.post(
                self._url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=self._config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"API error: {exc}") from exc
        except UnicodeError as exc:
            raise TransportError(f"Request error: {exc}") from exc

        if response.status_code != 200:
            raise TransportError(
                f"API response: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

    def shutdown(self) -> None:
        self._session.close()
        logger.info("HttpExporter shut down")
