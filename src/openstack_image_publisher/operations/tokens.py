"""Identity service token operations."""

import asyncio
import logging
from typing import Any

import aiohttp

from ..core.log import get_logger, trace
from ..core.session import make_request, parse_json_response, request_timeout
from ..core.types import Credentials, PublisherConfig, TokenResult
from ..exceptions import IdentityConnectionError

TOKENS_PATH = "/v2.0/tokens"


def build_token_request(credentials: Credentials) -> dict[str, Any]:
    """Build the password credentials body for a token request."""
    return {
        "auth": {
            "passwordCredentials": {
                "username": credentials.user,
                "password": credentials.password,
            },
            "tenantId": credentials.tenant_id,
        }
    }


def extract_token_id(body: Any) -> str | None:
    """Return ``access.token.id`` from a token response body."""
    try:
        token_id = body["access"]["token"]["id"]
    except (KeyError, TypeError):
        return None
    return str(token_id) if token_id is not None else None


async def request_token(
    session: aiohttp.ClientSession,
    config: PublisherConfig,
    credentials: Credentials,
    log: logging.Logger | None = None,
) -> TokenResult:
    """Exchange credentials for an access token.

    Args:
        session: Client session
        config: Publisher configuration
        credentials: Tenant, user and password
        log: Logger receiving the request narration (default: module logger)

    Returns:
        TokenResult with the token on HTTP 200, otherwise without a token

    Raises:
        IdentityConnectionError: If the identity service cannot be reached
    """
    log = get_logger(__name__, log)
    url = config.identity.url(TOKENS_PATH)
    trace(log, "Requesting token for user '%s' from %s...", credentials.user, url)

    try:
        result = await make_request(
            session,
            "POST",
            url,
            headers={"Accept": "application/json"},
            json_body=build_token_request(credentials),
            timeout=request_timeout(config),
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise IdentityConnectionError(
            f"Failed to reach identity service at {url}: {e}"
        ) from e

    if result.status_code != 200:
        log.warning(
            "Identity service returned HTTP %s, continuing without a token.",
            result.status_code,
        )
        return TokenResult(token=None, status=result.status_code)

    token = extract_token_id(
        parse_json_response(result.data.decode("utf-8", errors="replace"))
    )
    if token is None:
        log.warning(
            "Identity service response has no access.token.id, continuing without a token."
        )
    else:
        trace(log, "Token retrieved.")
    return TokenResult(token=token, status=result.status_code)


async def retrieve_token(
    session: aiohttp.ClientSession,
    config: PublisherConfig,
    tenant_id: str,
    user: str,
    password: str,
) -> str | None:
    """Return an access token, or None when the service refused to issue one."""
    credentials = Credentials(tenant_id=tenant_id, user=user, password=password)
    result = await request_token(session, config, credentials)
    return result.token
