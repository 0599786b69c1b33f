"""JSON-RPC 2.0 implementation for the widget MCP protocol."""
from .models import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    JSONRPCException,
    InvalidRequestError,
    MethodNotFoundError,
    InvalidParamsError,
    InternalError,
    ErrorCode,
    is_notification,
)
from .handler import JSONRPCHandler, error_response, parse_message

__all__ = [
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCError",
    "JSONRPCException",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalError",
    "ErrorCode",
    "JSONRPCHandler",
    "error_response",
    "is_notification",
    "parse_message",
]
