"""requests wrapper shared by the cloud API and sync-core sessions.

``CloudSyncRestAdapter`` keeps one ``RetryingSession`` per base URL. The
session owns the bearer token for its target and retries transport failures;
HTTP status handling stays with the adapter (see ``api_errors.raise_for_status``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from cloudsync.adapters.api_errors import ApiTimeoutError

USER_AGENT = "cloudsync/0.1"


@dataclass
class HttpConfig:
    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """``requests.Session`` with a bearer token and a transport retry loop.

    Timeouts and connection errors are retried ``cfg.retries`` times, then
    surface as ``ApiTimeoutError``. Responses are returned whatever their
    status code.
    """

    def __init__(self, cfg: HttpConfig, access_token: Optional[str] = None) -> None:
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
        self.cfg = cfg
        self.access_token = access_token

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        return self._send("GET", url, params=params, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        return self._send("POST", url, json=json_body, timeout=timeout)

    def close(self) -> None:
        self.session.close()

    def _send(self, method: str, url: str, *, timeout: Optional[int], **kwargs: Any) -> requests.Response:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        attempts = max(self.cfg.retries, 0) + 1
        for attempt in range(1, attempts + 1):
            try:
                return self.session.request(
                    method,
                    url,
                    headers=headers,
                    timeout=timeout or self.cfg.request_timeout_s,
                    **kwargs,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                if attempt == attempts:
                    raise ApiTimeoutError(
                        f"Timeout contacting {url} after {attempts} attempt(s)",
                        context=f"{method} {url}",
                    ) from exc
        raise AssertionError("unreachable")


__all__ = ["HttpConfig", "RetryingSession", "USER_AGENT"]
