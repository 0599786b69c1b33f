"""FastAPI server exposing a widget app over MCP JSON-RPC."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import Response
from sse_starlette.sse import EventSourceResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ServerConfig, load_config
from .jsonrpc import JSONRPCHandler
from .mcp_methods import register_jsonrpc_methods
from .mcp_transport import CORS_ORIGIN_HEADER, PREFLIGHT_HEADERS, MCPTransport, json_response
from .resources import ResourceCatalog, WidgetFetcher
from .tool_registry import ToolRegistry, utc_timestamp
from .widget_app import WidgetApp

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def create_app(
    widget_app: WidgetApp,
    config: Optional[ServerConfig] = None,
    fetcher: Optional[WidgetFetcher] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the HTTP server for one widget app.

    Args:
        widget_app: The example app providing tools and the widget resource
        config: Effective configuration; defaults to ``ServerConfig(app=widget_app.key)``
        fetcher: Widget HTML fetcher, injectable for tests
        http_client: Shared client for tools that call external HTTP APIs
    """
    config = config or ServerConfig(app=widget_app.key)
    widget_url = widget_app.widget_url(config)

    registry = ToolRegistry(widget_url=widget_url, timeout=config.tool_timeout)
    widget_app.register_tools(registry, config, http_client)

    catalog = ResourceCatalog([widget_app.widget_resource(config)])
    fetcher = fetcher or WidgetFetcher(
        timeout=config.widget_fetch_timeout, cache_ttl=config.widget_cache_ttl
    )

    jsonrpc_handler = JSONRPCHandler()
    server_info = {"name": widget_app.name, "version": widget_app.version}
    register_jsonrpc_methods(
        jsonrpc_handler,
        registry,
        catalog,
        fetcher,
        server_info,
        protocol_version=config.protocol_version,
    )
    mcp_transport = MCPTransport(jsonrpc_handler)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for FastAPI app."""
        logger.info(f"Starting {widget_app.name} (widget: {widget_url})")
        logger.info(f"Registered {len(registry.tools)} MCP tools")
        logger.info(f"Registered {len(jsonrpc_handler.methods)} JSON-RPC methods")
        yield
        logger.info(f"Shutting down {widget_app.name}...")
        await fetcher.close()
        await registry.close()

    app = FastAPI(
        title=widget_app.title,
        description=widget_app.description,
        version=widget_app.version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.widget_app = widget_app
    app.state.config = config
    app.state.registry = registry
    app.state.fetcher = fetcher

    # CORS: preflight answered before routing so unknown paths succeed too
    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=PREFLIGHT_HEADERS)
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return Response(
                content="Not Found",
                status_code=404,
                media_type="text/plain",
                headers=CORS_ORIGIN_HEADER,
            )
        return Response(
            content=str(exc.detail),
            status_code=exc.status_code,
            media_type="text/plain",
            headers=CORS_ORIGIN_HEADER,
        )

    # MCP JSON-RPC endpoint; non-POST methods get a transport-level 400
    @app.api_route(MCP_PATH, methods=ANY_METHOD)
    async def mcp_endpoint(request: Request):
        return await mcp_transport.handle_request(request)

    # Monitoring Endpoints
    @app.api_route("/health", methods=ANY_METHOD)
    async def health_check():
        """Health check endpoint."""
        return json_response({
            "status": "ok",
            "service": widget_app.name,
            "version": widget_app.version,
            "widget_url": widget_url,
            "timestamp": utc_timestamp(),
        })

    @app.get("/")
    @app.get("/info")
    async def server_info_endpoint():
        """Static server and tool metadata."""
        return json_response({
            "name": widget_app.name,
            "title": widget_app.title,
            "description": widget_app.description,
            "version": widget_app.version,
            "endpoints": {
                "health": "/health",
                "info": "/info",
                "mcp": f"{MCP_PATH} (JSON-RPC 2.0)",
                "sse": "/sse",
            },
            "widget_url": widget_url,
            "tools": [
                {
                    "name": tool["name"],
                    "description": tool["description"],
                    "parameters": list(tool["inputSchema"].get("properties", {})),
                }
                for tool in registry.list_tools()
            ],
            "protocol": {
                "name": "MCP (Model Context Protocol)",
                "version": config.protocol_version,
            },
        })

    @app.get("/sse")
    async def legacy_sse_endpoint():
        """Legacy SSE endpoint (deprecated).

        Announces the JSON-RPC endpoint and closes; hosts should POST to /mcp.
        """
        async def event_generator() -> AsyncGenerator[dict, None]:
            yield {"event": "endpoint", "data": MCP_PATH}

        return EventSourceResponse(event_generator())

    return app


def create_app_from_env() -> FastAPI:
    """Factory for ``uvicorn --factory widget_mcp.server:create_app_from_env``."""
    from .apps import get_app

    config = load_config()
    return create_app(get_app(config.app), config)
