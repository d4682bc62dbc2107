import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)


def create_async_client(
    base_url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the pooled async HTTP client used for all backend calls.

    ``transport`` lets tests plug in an ``httpx.MockTransport``.
    """
    # Connection limits for a single-user front end
    limits = httpx.Limits(
        max_keepalive_connections=5,
        max_connections=20,
        keepalive_expiry=30.0,
    )

    timeout_config = httpx.Timeout(
        timeout=timeout,
        connect=min(5.0, timeout),
    )

    logger.debug("Creating HTTP client for %s", base_url)
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers or {},
        limits=limits,
        timeout=timeout_config,
        follow_redirects=True,
        transport=transport,
    )
