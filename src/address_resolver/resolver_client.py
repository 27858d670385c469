"""
Domain Resolver Client for name service lookups.

This module provides an async client that asks the wallet's name service
which inscription currently backs a domain name, with TLS enforcement and
translation of transport and envelope failures into structured errors.

Lookups are never retried here: a later keystroke triggers a fresh attempt.
"""

import time
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from .audit_logger import AuditLogger
from .config import ResolverServiceConfig
from .enums import LogLevel, LookupErrorCode
from .exceptions import NetworkError, ProtocolError
from .models import ResolutionRecord


class DomainResolverClient:
    """
    Async name service client with TLS enforcement.

    The service answers with a JSON envelope `{"code": 0, "msg": ..., "data": ...}`;
    a non-zero code is an error, an empty `data` means the name is not registered.
    """

    def __init__(
        self,
        config: Optional[ResolverServiceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the resolver client.

        Args:
            config: Service endpoint configuration
            transport: Optional httpx transport (used to stub the service)
            logger: Optional audit logger
        """
        self._config = config or ResolverServiceConfig()
        self._transport = transport
        self._logger = logger
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DomainResolverClient":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def config(self) -> ResolverServiceConfig:
        return self._config

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,  # TLS certificate verification enforced
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=dict(self._config.headers),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def build_url(self, encoded_name: str) -> str:
        """
        Build the lookup URL for an already URL-escaped name.

        The name is appended verbatim so that its escaping is not applied twice.
        """
        base = self._config.base_url.rstrip("/")
        path = "/" + self._config.domain_info_path.lstrip("/")
        return f"{base}{path}?domain={encoded_name}"

    def _validate_endpoint_url(self, endpoint: str) -> None:
        """
        Validate that the endpoint uses HTTPS (TLS).

        Raises:
            NetworkError: If the endpoint does not use HTTPS
        """
        parsed = urlparse(endpoint)
        if parsed.scheme.lower() != "https":
            raise NetworkError(
                code=LookupErrorCode.TLS_ERROR.value,
                message=f"Name service endpoint must use HTTPS: {endpoint}",
                details={"endpoint": endpoint, "scheme": parsed.scheme},
            )

    async def query_domain_info(self, encoded_name: str) -> Optional[ResolutionRecord]:
        """
        Look up the inscription backing a domain name.

        Args:
            encoded_name: URL-escaped domain name (e.g. 'alice.sats')

        Returns:
            ResolutionRecord if the name is registered, None if it does not exist

        Raises:
            NetworkError: On TLS, connection, timeout, rate limit or server failures
            ProtocolError: On an error envelope or a malformed response
        """
        start_time = time.perf_counter()
        url = self.build_url(encoded_name)

        self._validate_endpoint_url(url)

        if self._config.simulation_mode:
            return self._create_simulation_record(encoded_name)

        client = self._ensure_client()

        try:
            response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.TimeoutException as e:
            raise NetworkError(
                code=LookupErrorCode.TIMEOUT.value,
                message=f"Request timed out after {self._config.timeout_seconds}s",
                details={"url": url},
            ) from e
        except httpx.ConnectError as e:
            error_msg = str(e)
            if "ssl" in error_msg.lower() or "certificate" in error_msg.lower():
                raise NetworkError(
                    code=LookupErrorCode.TLS_ERROR.value,
                    message=f"TLS connection error: {error_msg}",
                    details={"url": url},
                ) from e
            raise NetworkError(
                code=LookupErrorCode.NETWORK_ERROR.value,
                message=f"Connection error: {error_msg}",
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                code=LookupErrorCode.NETWORK_ERROR.value,
                message=f"Network error: {e}",
                details={"url": url},
            ) from e

        self._log(
            LogLevel.DEBUG,
            f"Name service answered HTTP {response.status_code}",
            {
                "name": encoded_name,
                "http_status": response.status_code,
                "response_time_ms": (time.perf_counter() - start_time) * 1000,
            },
        )

        if response.status_code == 404:
            return None

        if response.status_code == 429:
            raise NetworkError(
                code=LookupErrorCode.RATE_LIMITED.value,
                message="Rate limited by name service",
                details={"url": url, "http_status": 429},
            )

        if response.status_code >= 500:
            raise NetworkError(
                code=LookupErrorCode.SERVER_ERROR.value,
                message=f"Name service error: {response.status_code}",
                details={"url": url, "http_status": response.status_code},
            )

        if response.status_code != 200:
            raise NetworkError(
                code=LookupErrorCode.SERVER_ERROR.value,
                message=f"Unexpected HTTP status: {response.status_code}",
                details={"url": url, "http_status": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Failed to parse name service response",
                details={"url": url},
            ) from e

        return self._parse_envelope(payload, url)

    def _parse_envelope(self, payload: Any, url: str) -> Optional[ResolutionRecord]:
        if not isinstance(payload, dict) or "code" not in payload:
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Unexpected name service response",
                details={"url": url},
            )

        if payload.get("code") != 0:
            raise ProtocolError(
                code=LookupErrorCode.API_ERROR.value,
                message=str(payload.get("msg") or "Name service error"),
                details={"url": url, "api_code": payload.get("code")},
            )

        data = payload.get("data")
        if not data:
            return None

        return ResolutionRecord.from_inscription(data)

    def _create_simulation_record(self, encoded_name: str) -> ResolutionRecord:
        """Simulated lookup without network access: found, but never confirmed."""
        self._log(LogLevel.DEBUG, f"Simulated lookup for {encoded_name}", {"name": encoded_name})
        return ResolutionRecord(
            owner_address="",
            confirmations=0,
            inscription={"simulated": True, "name": encoded_name},
        )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "DomainResolverClient", message, data)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
