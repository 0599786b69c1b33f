"""JSON-RPC 2.0 request/response models."""
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union, Literal

RequestId = Optional[Union[str, int, float]]


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: str = "2.0"
    method: str
    params: Optional[dict] = None
    id: RequestId = None
    # False when the client sent no "id" key at all
    has_id: bool = Field(default=True, exclude=True)

    @property
    def is_notification(self) -> bool:
        return is_notification(self.method)


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error model."""

    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response model."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None
    has_id: bool = Field(default=True, exclude=True)

    @classmethod
    def for_request(cls, request: JSONRPCRequest, **kwargs) -> "JSONRPCResponse":
        return cls(id=request.id, has_id=request.has_id, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Render the wire shape.

        A null id stays null (parse errors); a request that carried no id
        gets a response without the key.
        """
        data: Dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.has_id:
            data["id"] = self.id
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return data


class ErrorCode:
    """JSON-RPC 2.0 standard error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class JSONRPCException(Exception):
    """Raised by method handlers to produce a specific error envelope."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, data: Optional[Any] = None, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.data = data
        if code is not None:
            self.code = code

    def to_error(self) -> JSONRPCError:
        return JSONRPCError(code=self.code, message=self.message, data=self.data)


class InvalidRequestError(JSONRPCException):
    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(JSONRPCException):
    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParamsError(JSONRPCException):
    code = ErrorCode.INVALID_PARAMS


class InternalError(JSONRPCException):
    code = ErrorCode.INTERNAL_ERROR


def is_notification(method: str) -> bool:
    """Methods in the notifications/ namespace never get a JSON-RPC reply."""
    return method.startswith("notifications/")
