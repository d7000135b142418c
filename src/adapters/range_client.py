"""Range query client (k-anonymity lookup).

Responsibility:
- Send the 5-character digest prefix, and nothing else, to the range service.
- Turn the `SUFFIX:COUNT` body into a `RangeResponse`.
- Translate every transport/HTTP failure into a distinct `QueryError`.
"""

from __future__ import annotations

import logging
import ssl
from types import TracebackType

import httpx

from adapters.http_client import ProxyConfig, TlsPolicy, build_client
from core.config import AppSettings
from core.domain.errors import (
    HttpStatusError,
    ProxyAuthenticationError,
    QueryError,
    ServiceUnavailableError,
    TlsError,
)
from core.domain.models import PREFIX_LENGTH, RangeResponse, is_hex
from core.services.range_parser import parse_range_body

logger = logging.getLogger(__name__)


def normalise_prefix(prefix: str) -> str:
    """Validate a range prefix and return it uppercased."""

    if len(prefix) != PREFIX_LENGTH or not is_hex(prefix):
        raise ValueError(f"range prefix must be {PREFIX_LENGTH} hex characters")
    return prefix.upper()


def _caused_by_tls(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    # Some backends only keep the message.
    text = str(exc)
    return "CERTIFICATE_VERIFY_FAILED" in text or "SSL:" in text


def _translate(exc: httpx.HTTPError, prefix: str) -> QueryError:
    if isinstance(exc, httpx.ProxyError):
        return ProxyAuthenticationError(f"proxy refused the request: {exc}", prefix=prefix)
    if isinstance(exc, httpx.ConnectError) and _caused_by_tls(exc):
        return TlsError(f"TLS handshake with the range service failed: {exc}", prefix=prefix)
    if isinstance(exc, httpx.TimeoutException):
        return ServiceUnavailableError(f"range service timed out: {exc}", prefix=prefix)
    return ServiceUnavailableError(f"range service unreachable: {exc}", prefix=prefix)


class RangeQueryClient:
    """Synchronous client for the range endpoint.

    Use as a context manager so the underlying connection pool is closed:

        with RangeQueryClient(settings) as client:
            response = client.query("5BAA6")
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        proxy: ProxyConfig | None = None,
        tls: TlsPolicy | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._proxy = proxy if proxy is not None else ProxyConfig.from_settings(self._settings)
        extra_headers = {"Add-Padding": "true"} if self._settings.add_padding else None
        try:
            self._client = build_client(
                self._settings,
                proxy=self._proxy,
                tls=tls,
                extra_headers=extra_headers,
                transport=transport,
            )
        except OSError as exc:
            # Missing, unreadable or non-PEM CA bundle (ssl.SSLError is an OSError).
            raise TlsError(f"cannot load the TLS trust policy: {exc}") from exc
        if self._proxy is not None:
            logger.debug("range queries routed through proxy %s", self._proxy.redacted())

    def url_for(self, prefix: str) -> str:
        return f"{self._settings.range_api_url}{normalise_prefix(prefix)}"

    def query(self, prefix: str) -> RangeResponse:
        prefix = normalise_prefix(prefix)
        url = self.url_for(prefix)

        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise _translate(exc, prefix) from exc

        if response.status_code == 407:
            raise ProxyAuthenticationError("proxy authentication required (HTTP 407)", prefix=prefix)
        if not response.is_success:
            raise HttpStatusError(
                f"range service answered HTTP {response.status_code}",
                status_code=response.status_code,
                prefix=prefix,
            )

        result = parse_range_body(prefix, response.content)
        logger.debug("prefix %s: %d records", prefix, len(result))
        return result

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RangeQueryClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def query(
    prefix: str,
    proxy: ProxyConfig | None = None,
    *,
    settings: AppSettings | None = None,
    tls: TlsPolicy | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RangeResponse:
    """One-shot range query with its own short-lived client."""

    with RangeQueryClient(settings, proxy=proxy, tls=tls, transport=transport) as client:
        return client.query(prefix)
