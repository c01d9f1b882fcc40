"""Shared HTTP transport utilities for map-service adapters.

This module provides a thin wrapper around ``requests.Session`` so the
geocoding, routing, scene and location adapters share one timeout policy,
one retry loop and one ``User-Agent`` (Nominatim rejects anonymous clients).

Dependencies:
    - ``requests`` for network I/O.
    - ``mapscout.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by adapters in ``mapscout/adapters/geocoding_nominatim.py``,
      ``routing_osrm.py``, ``scene_mapillary.py`` and ``location_ip.py``.
    - Used only inside adapter layer methods; use cases interact through ports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from mapscout.adapters.api_errors import ApiError, ApiTimeoutError

DEFAULT_USER_AGENT = "mapscout/0.1 (+https://github.com/mapscout/mapscout)"

_log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for each JSON API call.
        retries: Number of retry attempts after the initial request.
        user_agent: ``User-Agent`` header sent with every request.
    """
    request_timeout_s: float = 10
    retries: int = 2
    user_agent: str = DEFAULT_USER_AGENT


class RetryingSession:
    """Shared requests wrapper with a fixed user agent and retry loop.

    This class is intentionally transport-only. Callers provide endpoint URLs and
    decide how to map non-2xx responses into adapter errors.
    """

    def __init__(self, cfg: Optional[HttpConfig] = None) -> None:
        """Create a retry-enabled session.

        Args:
            cfg: Shared timeout and retry settings.

        Side Effects:
            Creates a persistent ``requests.Session`` object.
        """
        self.session = requests.Session()
        self.cfg = cfg or HttpConfig()

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        return {"Accept": accept, "User-Agent": self.cfg.user_agent}

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send a GET request with retries on timeout/connectivity failures.

        Args:
            url: Absolute endpoint URL.
            params: Optional query parameter mapping.
            accept: ``Accept`` header value.
            timeout: Optional timeout override in seconds.

        Returns:
            ``requests.Response`` from the first attempt that reached the server.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
            ApiError: For any other ``requests`` failure (invalid URL, etc.).

        Call Chain:
            Adapter methods -> ``RetryingSession.get`` -> ``requests.Session.get``.
        """
        context = f"GET {url}"
        last_err: ApiTimeoutError | None = None
        attempts = max(0, int(self.cfg.retries)) + 1
        for attempt in range(attempts):
            try:
                return self.session.get(
                    url,
                    params=params,
                    headers=self._headers(accept=accept),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                _log.debug("%s failed (attempt %d/%d): %s", context, attempt + 1, attempts, exc)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        raise last_err


__all__ = ["DEFAULT_USER_AGENT", "HttpConfig", "RetryingSession"]
