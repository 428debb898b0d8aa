from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List

import httpx
import pytest

# Load dotenv files early so fixtures can read overrides via os.getenv
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    load_dotenv(TEST_ROOT / ".env", override=False)
except ImportError:
    pass

from sonatype_mcp.config import ConnectionProfile
from sonatype_mcp.gateway.client import FirewallClient, NexusClient

NEXUS_URL = "http://mock-nexus:8081"
FIREWALL_URL = "http://mock-firewall:8070"

SETTINGS_ENV_VARS = (
    "NEXUS_BASE_URL",
    "NEXUS_USERNAME",
    "NEXUS_PASSWORD",
    "NEXUS_TIMEOUT",
    "NEXUS_VALIDATE_SSL",
    "FIREWALL_BASE_URL",
    "FIREWALL_USERNAME",
    "FIREWALL_PASSWORD",
    "FIREWALL_TIMEOUT",
    "FIREWALL_VALIDATE_SSL",
    "MCP_SERVER_NAME",
    "MCP_SERVER_VERSION",
    "READ_ONLY_MODE",
    "ENABLED_TOOLS",
    "SONATYPE_MCP_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE_DIR",
    "ENABLE_FILE_LOGGING",
)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def calls(self) -> int:
        return len(self.requests)


def make_profile(
    base_url: str = NEXUS_URL,
    *,
    username: str = "admin",
    password: str = "admin123",
    read_only: bool = False,
    timeout_ms: int = 5000,
) -> ConnectionProfile:
    return ConnectionProfile(
        base_url=base_url,
        username=username,
        password=password,
        read_only=read_only,
        timeout_ms=timeout_ms,
    )


def make_nexus(handler: Callable[[httpx.Request], httpx.Response], **profile_kwargs) -> tuple[NexusClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = NexusClient(make_profile(NEXUS_URL, **profile_kwargs), client=httpx.AsyncClient(transport=transport))
    return client, transport


def make_firewall(
    handler: Callable[[httpx.Request], httpx.Response], **profile_kwargs
) -> tuple[FirewallClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = FirewallClient(
        make_profile(FIREWALL_URL, **profile_kwargs), client=httpx.AsyncClient(transport=transport)
    )
    return client, transport


@pytest.fixture()
def nexus_factory():
    """Build a `NexusClient` over a `RecordingTransport`: ``nexus_factory(handler, read_only=True)``."""
    return make_nexus


@pytest.fixture()
def firewall_factory():
    return make_firewall


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Strip every settings variable and run from an empty directory so no .env leaks in."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
