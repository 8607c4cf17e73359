"""
Creates the aiohttp ClientSession used to fetch artifacts.
"""

import logging

import aiohttp

from model_vault import __version__

log = logging.getLogger(__name__)


def create_session(
    connect_timeout: float = 15.0, read_timeout: float = 90.0
) -> aiohttp.ClientSession:
    """
    Creates a ClientSession tuned for long single-file transfers.

    There is no total timeout: a large artifact may take a long time to arrive, but
    a stalled socket fails after `read_timeout` seconds without data.
    """
    connector = aiohttp.TCPConnector(
        limit=4,
        ttl_dns_cache=600,  # 10 minutes
        keepalive_timeout=30,
        enable_cleanup_closed=True,
    )
    timeout = aiohttp.ClientTimeout(
        total=None, sock_connect=connect_timeout, sock_read=read_timeout
    )
    session = aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers={
            # Byte counts must match Content-Length for progress reporting
            "Accept-Encoding": "identity",
            "User-Agent": f"model-vault/{__version__}",
        },
    )
    log.debug(
        f"Created download session (sock_connect={connect_timeout}s, "
        f"sock_read={read_timeout}s)."
    )
    return session
