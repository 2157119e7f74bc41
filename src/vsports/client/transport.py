"""Authenticated HTTP GET transport for the vsports API.

:class:`HTTPTransport` owns one :class:`httpx.Client` for the lifetime of a
:class:`~vsports.client.VSportsClient` and exposes a single operation,
:meth:`HTTPTransport.get`, returning the raw response body.

Failures are classified by the stage at which they happen:

- **build** -- the URL or parameters cannot form a request
  (:class:`~vsports.exceptions.RequestBuildError`);
- **send** -- connection, DNS, timeout or protocol failure
  (:class:`~vsports.exceptions.TransportError`);
- **read** -- the body stream breaks after the status line arrived
  (:class:`~vsports.exceptions.BodyReadError`).

Nothing is retried. HTTP status codes are not interpreted: a 404 or 500
body is returned exactly like a 200 body.
"""

from __future__ import annotations

from typing import Mapping, Optional

import httpx

from vsports.exceptions import BodyReadError, RequestBuildError, TransportError
from vsports.output import NullOutput, OutputManager

BASE_URL = "https://extended.vsports.pt/api"


class HTTPTransport:
    """Issues bearer-authenticated GET requests with a fixed timeout.

    Args:
        api_key: Token sent as ``Authorization: Bearer <api_key>``.
        timeout_seconds: Single timeout applied to connect, write, read
            and pool acquisition alike.
        base_url: API root; endpoints are appended after a ``/``.
        transport: Optional :class:`httpx.BaseTransport`, mostly for tests
            (``httpx.MockTransport``).
        output: Diagnostic sink. Defaults to :class:`NullOutput`.
    """

    def __init__(
        self,
        api_key: str,
        timeout_seconds: float,
        base_url: str = BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
        output: Optional[OutputManager] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._output = output if output is not None else NullOutput()
        self._client = httpx.Client(timeout=timeout_seconds, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, endpoint: str) -> str:
        return f"{self._base_url}/{endpoint}"

    def get(self, endpoint: str, params: Optional[Mapping[str, str]] = None) -> bytes:
        """GET ``<base_url>/<endpoint>`` and return the full body.

        Parameters are sent verbatim in the mapping's iteration order.

        Raises:
            RequestBuildError: The request could not be assembled.
            TransportError: The request could not be sent or timed out.
            BodyReadError: The body could not be read completely.
        """
        url = self.build_url(endpoint)
        self._output.debug(f"Making request to URL: {url}")

        try:
            request = self._client.build_request(
                "GET",
                url,
                params=dict(params) if params else None,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            self._output.error(f"Error creating request: {exc}")
            raise RequestBuildError(f"error creating request: {exc}") from exc

        try:
            response = self._client.send(request, stream=True)
        except httpx.TransportError as exc:
            self._output.error(f"Error making request: {exc}")
            raise TransportError(f"error making request: {exc}") from exc

        try:
            body = response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            self._output.error(f"Error reading response body: {exc}")
            raise BodyReadError(f"error reading response body: {exc}") from exc
        finally:
            response.close()

        self._output.debug(f"GET {url} -> {response.status_code} ({len(body)} bytes)")
        return body

    def close(self) -> None:
        self._client.close()
