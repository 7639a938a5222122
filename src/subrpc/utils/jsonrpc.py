"""JSON-RPC 2.0 request building and response classification.

Only what a liveness probe needs: one request shape, and a check that a
reply is a well-formed JSON-RPC response. An application-level ``error``
reply is still a well-formed response.
"""

from __future__ import annotations

from typing import Any, Final


JSONRPC_VERSION: Final[str] = "2.0"


def build_request(
    method: str,
    params: list[Any] | None = None,
    request_id: int = 1,
) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 request object."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "method": method,
        "params": params if params is not None else [],
    }


def is_response_to(payload: Any, request_id: int) -> bool:
    """Whether ``payload`` looks like the reply to ``request_id``.

    Used to skip unrelated frames (e.g. subscription notifications) on a
    WebSocket. Error replies with ``id: null`` are accepted since servers
    use them when they could not read the request id.
    """
    return isinstance(payload, dict) and payload.get("id") in (request_id, None) and (
        "result" in payload or "error" in payload
    )


def validate_response(payload: Any, request_id: int) -> dict[str, Any]:
    """Check that ``payload`` is a well-formed JSON-RPC response.

    Args:
        payload: Decoded JSON reply.
        request_id: The id sent with the request.

    Returns:
        The payload, unchanged.

    Raises:
        ValueError: If the payload is not an object, has the wrong
            ``jsonrpc`` version, carries neither ``result`` nor ``error``,
            or answers a different request id.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Expected JSON-RPC object, got {type(payload).__name__}")
    if payload.get("jsonrpc") != JSONRPC_VERSION:
        raise ValueError(f"Unsupported JSON-RPC version: {payload.get('jsonrpc')!r}")
    if "result" not in payload and "error" not in payload:
        raise ValueError("JSON-RPC response has neither result nor error")
    if not is_response_to(payload, request_id):
        raise ValueError(f"JSON-RPC response id mismatch: {payload.get('id')!r}")
    return payload
