from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from sonatype_mcp.config import ConnectionProfile
from sonatype_mcp.errors import (
    AuthenticationError,
    ConfigurationError,
    UnknownError,
    classify_exception,
    classify_response,
)

READ_ONLY_MESSAGE = "Write operations are disabled in read-only mode"


class RestGatewayClient:
    """
    Thin async HTTP client for one Sonatype REST API.

    Responsibilities:
    - attach Basic-Auth credentials from the connection profile
    - refuse mutating calls in read-only mode before any I/O
    - classify every failed call into a `NexusApiError` subclass

    Note: no retries are performed; the first failure is raised to the caller.
    """

    service_name = "Nexus"
    health_path = "/"

    def __init__(self, profile: ConnectionProfile, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self._profile = profile
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(profile.timeout_seconds),
            verify=profile.validate_ssl,
            headers={"Accept": "application/json"},
        )
        self._logger = logging.getLogger(__name__)

    @property
    def base_url(self) -> str:
        return self._profile.base_url

    @property
    def profile(self) -> ConnectionProfile:
        return self._profile

    def is_read_only(self) -> bool:
        return self._profile.read_only

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RestGatewayClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _ensure_credentials(self) -> None:
        if not self._profile.has_credentials:
            raise ConfigurationError(
                f"Invalid {self.service_name} credentials: username and password are required"
            )

    def _ensure_writable(self) -> None:
        if self._profile.read_only:
            raise AuthenticationError(READ_ONLY_MESSAGE)

    async def probe(self) -> bool:
        """Unauthenticated reachability check against the health path. Never raises."""
        url = self._url(self.health_path)
        try:
            self._logger.debug("%s probe: GET %s", self.service_name, url)
            r = await self._client.get(url)
        except Exception as e:
            self._logger.warning("%s connection test failed: %s", self.service_name, e)
            return False
        self._logger.debug("%s probe: %s %s", self.service_name, r.status_code, r.reason_phrase)
        return self._is_reachable(r)

    def _is_reachable(self, r: httpx.Response) -> bool:
        return r.is_success

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        self._ensure_credentials()
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Any = None,
    ) -> Any:
        self._ensure_writable()
        self._ensure_credentials()
        return await self._request("POST", path, json=body, headers=headers, params=params, data=data, files=files)

    async def put(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        self._ensure_writable()
        self._ensure_credentials()
        return await self._request("PUT", path, json=body, headers=headers, params=params)

    async def delete(self, path: str) -> Any:
        self._ensure_writable()
        self._ensure_credentials()
        return await self._request("DELETE", path)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        url = self._url(path)
        self._logger.debug("Making request to: %s %s params=%s", method, url, dict(params or {}))
        try:
            r = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=headers,
                auth=httpx.BasicAuth(self._profile.username, self._profile.password),
            )
        except Exception as e:
            self._logger.debug("%s request failed without a response: %r", self.service_name, e)
            raise classify_exception(e, service=self.service_name) from e
        self._logger.debug("Response: %s %s", r.status_code, r.reason_phrase)
        if r.status_code >= 400:
            raise classify_response(r)
        return self._parse_body(r)

    @staticmethod
    def _parse_body(r: httpx.Response) -> Any:
        if not r.content:
            return None
        content_type = r.headers.get("content-type", "")
        if "json" in content_type:
            try:
                return r.json()
            except ValueError as e:
                raise UnknownError(f"Invalid response body: {e}", status_code=r.status_code, details=r.text) from e
        if content_type.startswith("text/"):
            return r.text
        return r.content


class NexusClient(RestGatewayClient):
    """Gateway for the Nexus Repository Manager REST API (`/service/rest/v1`)."""

    service_name = "Nexus"
    health_path = "/service/rest/v1/status"


class FirewallClient(RestGatewayClient):
    """Gateway for the Sonatype Firewall / IQ Server REST API (`/api/v2`)."""

    service_name = "Firewall"
    # /ping is served on the IQ admin port only; the report endpoint answers on the application port.
    health_path = "/api/v2/reports/components/quarantined?limit=1"

    def _is_reachable(self, r: httpx.Response) -> bool:
        # An unauthenticated probe is challenged with 401/403 by a live server.
        return r.status_code < 400 or r.status_code in (401, 403)
