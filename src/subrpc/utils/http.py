"""HTTP utilities.

Bounded JSON reading for aiohttp responses, so that an oversized registry
document or RPC reply cannot exhaust memory, and a one-shot JSON GET used
to download registry documents.

Note:
    This module depends only on stdlib and ``aiohttp``; it is importable
    from both ``subrpc.probe`` and ``subrpc.core``.
"""

from __future__ import annotations

import json
from typing import Any

import aiohttp


async def _read_bounded(response: aiohttp.ClientResponse, max_size: int) -> bytes:
    """Read an entire response body, failing once it exceeds ``max_size``.

    Loops until EOF because a single ``content.read(n)`` may return fewer
    bytes than available with chunked transfer-encoding.

    Raises:
        ValueError: If the body is larger than ``max_size`` bytes.
    """
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await response.content.read(max_size + 1 - total)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            raise ValueError(f"Response body too large: >{max_size} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


async def read_bounded_json(response: aiohttp.ClientResponse, max_size: int) -> Any:
    """Read and parse a JSON response body with size enforcement.

    The size check happens before parsing.

    Raises:
        ValueError: If the body exceeds ``max_size``.
        json.JSONDecodeError: If the body is not valid JSON.
    """
    body = await _read_bounded(response, max_size)
    return json.loads(body)


async def fetch_json(
    url: str,
    *,
    timeout: float,  # noqa: ASYNC109
    max_size: int,
) -> Any:
    """GET ``url`` and return its parsed JSON body.

    The ``Content-Type`` header is not checked: registry documents are
    commonly served as ``text/plain`` from gists and raw file hosts.

    Args:
        url: Document URL.
        timeout: Total request timeout in seconds.
        max_size: Largest accepted body in bytes.

    Raises:
        aiohttp.ClientError: On connection failure or a non-2xx status.
        TimeoutError: If the request exceeds ``timeout``.
        ValueError: If the body is too large or not valid JSON.
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with (
        aiohttp.ClientSession(timeout=client_timeout) as session,
        session.get(url) as response,
    ):
        response.raise_for_status()
        return await read_bounded_json(response, max_size)
