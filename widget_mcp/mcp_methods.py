"""MCP protocol methods registered on the JSON-RPC dispatch table."""
import logging
from typing import Any, Dict

from .jsonrpc import (
    InternalError,
    InvalidParamsError,
    JSONRPCHandler,
    MethodNotFoundError,
)
from .resources import ResourceCatalog, WidgetFetcher
from .tool_registry import ToolRegistry
from .utils.errors import ToolNotFoundError, WidgetFetchError

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-06-18"


def register_jsonrpc_methods(
    jsonrpc_handler: JSONRPCHandler,
    registry: ToolRegistry,
    catalog: ResourceCatalog,
    fetcher: WidgetFetcher,
    server_info: Dict[str, str],
    protocol_version: str = DEFAULT_PROTOCOL_VERSION,
) -> None:
    """Register all MCP methods for one widget server."""

    capabilities: Dict[str, Any] = {"tools": {}}
    if len(catalog):
        capabilities["resources"] = {}

    # Method: initialize
    # Stateless acknowledgement; no session is created.
    async def initialize(params: dict):
        client = params.get("clientInfo") or {}
        if isinstance(client, dict) and client.get("name"):
            logger.info(f"Initialize from {client.get('name')} {client.get('version', '')}".rstrip())
        return {
            "protocolVersion": protocol_version,
            "capabilities": capabilities,
            "serverInfo": dict(server_info),
        }

    # Method: notifications/initialized
    # The transport answers notifications with 204 and no body.
    async def initialized(params: dict):
        logger.debug("Client finished initialization")
        return None

    # Method: ping
    async def ping(params: dict):
        return {}

    # Method: tools/list
    async def tools_list(params: dict):
        return {"tools": registry.list_tools()}

    # Method: tools/call
    async def tools_call(params: dict):
        name = params.get("name")
        if not isinstance(name, str):
            raise MethodNotFoundError(f"Tool not found: {name}")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Invalid params: arguments must be an object")

        try:
            result = await registry.invoke(name, arguments)
        except ToolNotFoundError as e:
            raise MethodNotFoundError(str(e)) from e
        return result.to_mcp()

    # Method: resources/list
    async def resources_list(params: dict):
        return {"resources": catalog.list_resources()}

    # Method: resources/read
    async def resources_read(params: dict):
        requested_uri = params.get("uri")
        if not isinstance(requested_uri, str) or not requested_uri:
            raise InvalidParamsError("Missing resource URI")

        resource = catalog.find(requested_uri)
        if resource is None:
            raise InvalidParamsError(f"Resource not found: {requested_uri}")

        try:
            html = await fetcher.fetch(resource.uri)
        except WidgetFetchError as e:
            raise InternalError(f"Failed to fetch widget: {e}") from e

        return {
            "contents": [
                {
                    "uri": requested_uri,
                    "mimeType": resource.mimeType,
                    "text": html,
                }
            ]
        }

    # Register methods
    jsonrpc_handler.register_method("initialize", initialize)
    jsonrpc_handler.register_method("notifications/initialized", initialized)
    jsonrpc_handler.register_method("ping", ping)
    jsonrpc_handler.register_method("tools/list", tools_list)
    jsonrpc_handler.register_method("tools/call", tools_call)
    if len(catalog):
        jsonrpc_handler.register_method("resources/list", resources_list)
        jsonrpc_handler.register_method("resources/read", resources_read)
