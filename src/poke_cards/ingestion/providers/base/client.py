from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from poke_cards.core.errors import ProviderRateLimited, ProviderRequestError


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic HTTP client wrapper.

    - Owns a single underlying httpx.Client; use it as a context manager so the
      connection is released on every exit path.
    - Maps HTTP 429 to ProviderRateLimited and any other non-2xx (or transport
      failure) to ProviderRequestError.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.Client(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BaseHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request_text(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Perform an HTTP request and return the raw response body.
        Raises ProviderRequestError (including ProviderRateLimited) on transport issues / non-2xx.
        """
        try:
            resp = self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise ProviderRequestError(f"Error! Transport failure [{e}]") from e

        message = (
            f"Error! Status code [{resp.status_code}] Reason [{resp.reason_phrase}]"
        )
        if resp.status_code == 429:
            raise ProviderRateLimited(
                message, status_code=resp.status_code, reason=resp.reason_phrase
            )

        if not resp.is_success:
            raise ProviderRequestError(
                message, status_code=resp.status_code, reason=resp.reason_phrase
            )

        return resp.text

    def get_text(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        return self.request_text("GET", path, params=params)
