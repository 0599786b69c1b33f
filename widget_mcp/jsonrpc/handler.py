"""JSON-RPC 2.0 request parsing and method dispatch."""
import asyncio
import json
import math
from typing import Any, Awaitable, Callable, Dict, Union
import logging
from .models import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    JSONRPCException,
    ErrorCode
)

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


def _reject_constant(name: str):
    """NaN and Infinity are not JSON."""
    raise ValueError(f"Invalid constant {name}")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def error_response(
    code: int,
    message: str,
    request_id: Any = None,
    has_id: bool = True,
    data: Any = None,
) -> JSONRPCResponse:
    """Build an error envelope outside of a dispatched request."""
    return JSONRPCResponse(
        id=request_id,
        has_id=has_id,
        error=JSONRPCError(code=code, message=message, data=data),
    )


def parse_message(raw: Union[bytes, str]) -> Union[JSONRPCRequest, JSONRPCResponse]:
    """Decode an HTTP body into a request.

    Returns a ready error response when the body is not a valid
    JSON-RPC 2.0 request envelope.
    """
    try:
        body = json.loads(raw, parse_constant=_reject_constant, parse_float=_parse_float)
    except (ValueError, UnicodeDecodeError) as e:
        return error_response(ErrorCode.PARSE_ERROR, f"Parse error: {e}")
    except RecursionError:
        return error_response(ErrorCode.PARSE_ERROR, "Parse error: nesting too deep")

    if not isinstance(body, dict):
        return error_response(
            ErrorCode.INVALID_REQUEST, "Invalid Request: expected a JSON object"
        )

    has_id = "id" in body
    request_id = body.get("id")
    # An unusable id cannot be echoed, so it is rejected before the version check
    if request_id is not None and (
        isinstance(request_id, bool) or not isinstance(request_id, (str, int, float))
    ):
        return error_response(
            ErrorCode.INVALID_REQUEST, "Invalid Request: id must be a string, number or null"
        )

    if body.get("jsonrpc") != "2.0":
        return error_response(
            ErrorCode.INVALID_REQUEST,
            "Invalid Request: must be JSON-RPC 2.0",
            request_id=request_id,
            has_id=has_id,
        )

    method = body.get("method")
    if not isinstance(method, str) or not method:
        return error_response(
            ErrorCode.INVALID_REQUEST,
            "Invalid Request: method must be a non-empty string",
            request_id=request_id,
            has_id=has_id,
        )

    params = body.get("params")
    if params is not None and not isinstance(params, dict):
        return error_response(
            ErrorCode.INVALID_PARAMS,
            "Invalid params: params must be an object",
            request_id=request_id,
            has_id=has_id,
        )

    return JSONRPCRequest(
        jsonrpc="2.0",
        method=method,
        params=params,
        id=request_id,
        has_id=has_id,
    )


class JSONRPCHandler:
    """Handles JSON-RPC 2.0 requests and routes to registered methods."""

    def __init__(self):
        self.methods: Dict[str, MethodHandler] = {}

    def register_method(self, method_name: str, handler: MethodHandler):
        """Register a JSON-RPC method handler.

        Args:
            method_name: Name of the JSON-RPC method (e.g., "tools/list")
            handler: Async callable that receives the params mapping
        """
        self.methods[method_name] = handler
        logger.info(f"Registered JSON-RPC method: {method_name}")

    async def handle_request(
        self,
        request: JSONRPCRequest
    ) -> JSONRPCResponse:
        """Handle a JSON-RPC 2.0 request.

        Args:
            request: JSONRPCRequest object

        Returns:
            JSONRPCResponse with result or error
        """
        try:
            # Validate method exists
            if request.method not in self.methods:
                return JSONRPCResponse.for_request(
                    request,
                    error=JSONRPCError(
                        code=ErrorCode.METHOD_NOT_FOUND,
                        message=f"Method not found: {request.method}"
                    )
                )

            # Execute method
            handler = self.methods[request.method]
            result = await handler(request.params or {})

            # Return success response
            return JSONRPCResponse.for_request(request, result=result)

        except JSONRPCException as e:
            logger.warning(f"{request.method} failed with {e.code}: {e.message}")
            return JSONRPCResponse.for_request(request, error=e.to_error())
        except asyncio.TimeoutError:
            logger.error(f"Timed out handling {request.method}")
            return JSONRPCResponse.for_request(
                request,
                error=JSONRPCError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message=f"Request timed out: {request.method}"
                )
            )
        except Exception as e:
            # Internal error
            logger.error(f"Internal error handling {request.method}: {e}", exc_info=True)
            return JSONRPCResponse.for_request(
                request,
                error=JSONRPCError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Internal error",
                    data={"details": str(e)}
                )
            )
