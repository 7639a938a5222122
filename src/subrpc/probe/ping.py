"""
Liveness probe for a single RPC endpoint.

Sends one JSON-RPC call (``system_chain`` by default, no parameters) over
the transport implied by the endpoint's URL scheme: an HTTP POST for
``http``/``https``, a WebSocket frame for ``ws``/``wss``. Every call opens
its own ``aiohttp.ClientSession`` and closes it before returning.

Classification:

* any well-formed JSON-RPC reply, ``result`` or ``error``, is a success
  carrying the wall-clock duration in seconds;
* connection, TLS, protocol, decoding and timeout errors, and any other
  error raised while talking to the endpoint, are a failure with no
  duration.

[probe_endpoint()][subrpc.probe.ping.probe_endpoint] never raises for those
outcomes; only task cancellation propagates.
"""

from __future__ import annotations

import asyncio
import json
import logging
from time import perf_counter
from typing import TYPE_CHECKING, Any, Final, NamedTuple

import aiohttp

from subrpc.models.constants import EndpointType
from subrpc.utils.http import read_bounded_json
from subrpc.utils.jsonrpc import build_request, is_response_to, validate_response


if TYPE_CHECKING:
    from subrpc.models.endpoint import Endpoint


DEFAULT_TIMEOUT: Final[float] = 10.0
DEFAULT_METHOD: Final[str] = "system_chain"

# Liveness replies are tiny; anything larger is not a sane answer
_MAX_RESPONSE_SIZE: Final[int] = 1024 * 1024
_REQUEST_ID: Final[int] = 1

logger = logging.getLogger("subrpc.probe")


class ProbeResult(NamedTuple):
    """Outcome of one probe.

    Attributes:
        success: Whether the endpoint answered with a JSON-RPC response.
        latency: Seconds from call start to reply, ``None`` on failure.
    """

    success: bool
    latency: float | None

    @classmethod
    def failed(cls) -> ProbeResult:
        return cls(success=False, latency=None)


async def _call_http(
    url: str,
    payload: dict[str, Any],
    timeout: float,  # noqa: ASYNC109
) -> dict[str, Any]:
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with (
        aiohttp.ClientSession(timeout=client_timeout) as session,
        session.post(url, json=payload) as response,
    ):
        # Status is not checked: a JSON-RPC error body on a 4xx/5xx still proves liveness
        body = await read_bounded_json(response, _MAX_RESPONSE_SIZE)
        return validate_response(body, payload["id"])


async def _call_ws(
    url: str,
    payload: dict[str, Any],
    timeout: float,  # noqa: ASYNC109
) -> dict[str, Any]:
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with (
        aiohttp.ClientSession(timeout=client_timeout) as session,
        session.ws_connect(url, max_msg_size=_MAX_RESPONSE_SIZE) as ws,
    ):
        await ws.send_json(payload)
        while True:
            msg = await ws.receive()
            if msg.type not in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                raise ConnectionError(f"WebSocket closed before reply: {msg.type.name}")
            data = json.loads(msg.data)
            # Skip notifications and other unrelated frames
            if is_response_to(data, payload["id"]):
                return validate_response(data, payload["id"])


async def probe_endpoint(
    endpoint: Endpoint,
    timeout: float | None = None,  # noqa: ASYNC109
    method: str = DEFAULT_METHOD,
) -> ProbeResult:
    """Probe one endpoint and classify the outcome.

    Args:
        endpoint: Endpoint to probe.
        timeout: Upper bound in seconds for the whole call, connection
            included (default: 10.0).
        method: JSON-RPC method name (default: ``system_chain``).

    Returns:
        ``ProbeResult(True, seconds)`` when a JSON-RPC reply arrived,
        otherwise ``ProbeResult(False, None)``.
    """
    timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
    url = endpoint.url
    payload = build_request(method, request_id=_REQUEST_ID)
    logger.debug("probe_started endpoint=%s url=%s timeout_s=%s", endpoint.name, url, timeout)

    start = perf_counter()
    try:
        async with asyncio.timeout(timeout):
            if url.endpoint_type is EndpointType.HTTP:
                response = await _call_http(url.url, payload, timeout)
            else:
                response = await _call_ws(url.url, payload, timeout)
    except Exception as e:
        logger.debug(
            "probe_failed endpoint=%s url=%s error=%s",
            endpoint.name,
            url,
            str(e) or type(e).__name__,
        )
        return ProbeResult.failed()

    latency = perf_counter() - start
    logger.debug(
        "probe_ok endpoint=%s url=%s latency_s=%.3f rpc_error=%s",
        endpoint.name,
        url,
        latency,
        "error" in response,
    )
    return ProbeResult(success=True, latency=latency)
