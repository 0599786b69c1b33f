"""MCP JSON-RPC over HTTP POST transport."""
import json
import logging
from typing import Any, Dict

from fastapi import Request, Response

from .jsonrpc import (
    ErrorCode,
    JSONRPCHandler,
    JSONRPCRequest,
    JSONRPCResponse,
    error_response,
    parse_message,
)

logger = logging.getLogger(__name__)

CORS_ORIGIN_HEADER = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With, Accept",
    "Access-Control-Max-Age": "86400",
}


def json_response(data: Dict[str, Any], status_code: int = 200) -> Response:
    return Response(
        content=json.dumps(data),
        status_code=status_code,
        media_type="application/json",
        headers=CORS_ORIGIN_HEADER,
    )


class MCPTransport:
    """Handles the /mcp endpoint.

    Every JSON-RPC outcome, success or error, is sent with HTTP 200.
    Only transport problems (wrong HTTP method or content type) use a
    non-200 status. Requests are handled independently; nothing is kept
    between them.
    """

    def __init__(self, jsonrpc_handler: JSONRPCHandler):
        self.jsonrpc_handler = jsonrpc_handler

    async def handle_request(self, request: Request) -> Response:
        """Handle any HTTP request sent to /mcp."""
        content_type = request.headers.get("Content-Type", "")
        if request.method != "POST" or "application/json" not in content_type.lower():
            logger.warning(
                f"Rejected {request.method} /mcp with content type {content_type or 'none'}"
            )
            return Response(
                content="MCP endpoint requires POST with application/json",
                status_code=400,
                media_type="text/plain",
                headers=CORS_ORIGIN_HEADER,
            )

        raw = await request.body()
        try:
            parsed = parse_message(raw)
        except Exception as e:
            logger.error(f"Unhandled error parsing JSON-RPC message: {e}", exc_info=True)
            parsed = error_response(
                ErrorCode.INTERNAL_ERROR, "Internal error", data={"details": str(e)}
            )
        if isinstance(parsed, JSONRPCResponse):
            logger.warning(f"Rejected JSON-RPC message: {parsed.error.message}")
            return json_response(parsed.to_dict())

        return await self.dispatch(parsed)

    async def dispatch(self, jsonrpc_request: JSONRPCRequest) -> Response:
        logger.debug(f"MCP Request: {jsonrpc_request.model_dump_json()}")
        try:
            jsonrpc_response = await self.jsonrpc_handler.handle_request(jsonrpc_request)
            data = jsonrpc_response.to_dict()
            body = json.dumps(data)
        except Exception as e:
            # Anything escaping the handler (e.g. unserializable results) becomes -32603
            logger.error(f"Unhandled error dispatching {jsonrpc_request.method}: {e}", exc_info=True)
            data = error_response(
                ErrorCode.INTERNAL_ERROR,
                "Internal error",
                request_id=jsonrpc_request.id,
                has_id=jsonrpc_request.has_id,
                data={"details": str(e)},
            ).to_dict()
            body = json.dumps(data)

        # Notifications get an empty acknowledgement, not an envelope
        if jsonrpc_request.is_notification and "error" not in data:
            return Response(status_code=204, headers=CORS_ORIGIN_HEADER)

        logger.debug(f"MCP Response: {body}")
        return Response(
            content=body,
            media_type="application/json",
            headers=CORS_ORIGIN_HEADER,
        )
