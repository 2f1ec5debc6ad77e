"""HTTP session helpers."""

import json
from typing import Any

import aiohttp

from .types import PublisherConfig, RequestResult

AUTH_TOKEN_HEADER = "x-auth-token"


async def create_session() -> aiohttp.ClientSession:
    """Create a client session for one publishing run.

    The session carries no overall timeout; each request sets its own.
    """
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=None),
        raise_for_status=False,
    )


def auth_headers(token: str | None) -> dict[str, str]:
    """Return the auth header when a token is present."""
    if token is None:
        return {}
    return {AUTH_TOKEN_HEADER: token}


def request_timeout(config: PublisherConfig) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=config.timeout)


def parse_json_response(text: str) -> Any | None:
    """Parse a JSON body, returning None when it is not valid JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


async def make_request(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    *,
    timeout: aiohttp.ClientTimeout,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
    json_body: Any = None,
) -> RequestResult:
    """Send a request and read the whole response.

    Transport errors are not caught here.
    """
    async with session.request(
        method,
        url,
        headers=headers or {},
        params=params,
        json=json_body,
        timeout=timeout,
    ) as resp:
        return RequestResult(
            status_code=resp.status,
            headers=dict(resp.headers),
            data=await resp.read(),
        )
