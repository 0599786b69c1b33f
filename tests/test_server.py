"""End-to-end tests for the HTTP surface and MCP JSON-RPC endpoint."""
import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from widget_mcp.apps import get_app
from widget_mcp.apps.animated_testimonials import show_testimonials
from widget_mcp.config import ServerConfig
from widget_mcp.resources import WidgetFetcher
from widget_mcp.server import create_app
from widget_mcp.tool_registry import OUTPUT_TEMPLATE_KEY
from widget_mcp.widget_app import WidgetApp

WIDGET_HTML = "<!doctype html><html><body><div id='root'></div></body></html>"


def make_fetcher(handler=None):
    handler = handler or (lambda request: httpx.Response(200, text=WIDGET_HTML))
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WidgetFetcher(client=client)


def make_client(key="hello-world", fetcher=None, **config):
    app = create_app(
        get_app(key),
        ServerConfig(app=key, **config),
        fetcher=fetcher or make_fetcher(),
    )
    return TestClient(app)


def rpc(client, method, params=None, id=1):
    message = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        message["params"] = params
    response = client.post("/mcp", json=message)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def client():
    with make_client() as c:
        yield c


class TestProtocolMethods:
    def test_initialize(self, client):
        data = rpc(client, "initialize", {
            "protocolVersion": "2025-06-18",
            "capabilities": {},
            "clientInfo": {"name": "test-client", "version": "1.0"},
        })

        assert data["jsonrpc"] == "2.0"
        assert data["id"] == 1
        result = data["result"]
        assert result["protocolVersion"] == "2025-06-18"
        assert result["capabilities"] == {"tools": {}, "resources": {}}
        assert result["serverInfo"] == {"name": "hello-world-mcp-server", "version": "1.0.0"}

    def test_ping(self, client):
        assert rpc(client, "ping", id="abc") == {"jsonrpc": "2.0", "id": "abc", "result": {}}

    def test_tools_list(self, client):
        tools = rpc(client, "tools/list")["result"]["tools"]

        assert tools
        for tool in tools:
            assert "name" in tool
            assert "inputSchema" in tool
        assert tools[0]["_meta"] == {OUTPUT_TEMPLATE_KEY: "https://hello-world-widget.pages.dev"}

    def test_tools_call(self, client):
        result = rpc(client, "tools/call", {
            "name": "greet_user",
            "arguments": {"name": "Ada", "formal": True},
        })["result"]

        assert result["content"] == [{"type": "text", "text": "Good day, Ada."}]
        assert result["structuredContent"]["greeting"] == "Good day, Ada."
        assert result["_meta"] == {OUTPUT_TEMPLATE_KEY: "https://hello-world-widget.pages.dev"}
        assert "isError" not in result

    def test_tools_call_structured_content_is_handler_output(self):
        with make_client("animated-testimonials") as c:
            result = rpc(c, "tools/call", {"name": "show_testimonials"})["result"]

        assert result["structuredContent"] == show_testimonials({})
        assert result["content"][0]["text"] == (
            "Showing 5 customer testimonials with animated carousel"
        )

    def test_tools_call_validation_error_is_payload_level(self, client):
        data = rpc(client, "tools/call", {"name": "greet_user", "arguments": {}})

        assert "error" not in data
        result = data["result"]
        assert result["isError"] is True
        assert result["structuredContent"]["error"] is True
        assert result["structuredContent"]["code"] == "VALIDATION_ERROR"
        assert result["content"][0]["text"] == "Error: name is required"

    def test_tools_call_unknown_tool(self, client):
        data = rpc(client, "tools/call", {"name": "nonexistent_tool", "arguments": {}}, id=2)

        assert data["id"] == 2
        assert data["error"]["code"] == -32601
        assert "result" not in data

    @pytest.mark.parametrize("name", [["greet_user"], {"tool": "greet_user"}, 7, None])
    def test_tools_call_non_string_name_is_unknown_tool(self, client, name):
        params = {"arguments": {}}
        if name is not None:
            params["name"] = name

        data = rpc(client, "tools/call", params, id=5)

        assert data["id"] == 5
        assert data["error"]["code"] == -32601
        assert data["error"]["message"].startswith("Tool not found: ")

    def test_tools_call_arguments_must_be_an_object(self, client):
        data = rpc(client, "tools/call", {"name": "greet_user", "arguments": ["Ada"]})

        assert data["error"]["code"] == -32602

    def test_unknown_method(self, client):
        data = rpc(client, "tools/delete", id=9)

        assert data == {
            "jsonrpc": "2.0",
            "id": 9,
            "error": {"code": -32601, "message": "Method not found: tools/delete"},
        }

    def test_resources_list(self, client):
        resources = rpc(client, "resources/list")["result"]["resources"]

        assert resources == [{
            "uri": "https://hello-world-widget.pages.dev",
            "name": "Hello World Widget",
            "description": "Greeting widget with personalized messages",
            "mimeType": "text/html+skybridge",
        }]


class TestResourcesRead:
    def test_read_echoes_requested_uri(self, client):
        uri = "https://hello-world-widget.pages.dev/?v=2"

        result = rpc(client, "resources/read", {"uri": uri})["result"]

        assert result == {
            "contents": [{"uri": uri, "mimeType": "text/html+skybridge", "text": WIDGET_HTML}],
        }

    def test_read_fetches_the_deployed_url(self):
        seen = []

        def handler(request):
            seen.append((request.url.host, request.url.params.get("v")))
            return httpx.Response(200, text=WIDGET_HTML)

        with make_client("playa-guide", fetcher=make_fetcher(handler)) as c:
            rpc(c, "resources/read", {"uri": "https://playa-guide-widget.pages.dev"})

        assert seen == [("playa-guide-widget.pages.dev", "1.0.4")]

    def test_unknown_resource(self, client):
        data = rpc(client, "resources/read", {"uri": "https://elsewhere.example.com"})

        assert data["error"]["code"] == -32602
        assert "https://elsewhere.example.com" in data["error"]["message"]

    def test_missing_uri(self, client):
        data = rpc(client, "resources/read", {})

        assert data["error"] == {"code": -32602, "message": "Missing resource URI"}

    def test_fetch_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(fetcher=make_fetcher(handler)) as c:
            data = rpc(c, "resources/read", {"uri": "https://hello-world-widget.pages.dev"})

        assert data["error"]["code"] == -32603
        assert data["error"]["message"] == "Failed to fetch widget: connection refused"

    def test_fetch_non_2xx_is_a_failure(self):
        fetcher = make_fetcher(lambda request: httpx.Response(404, text="missing"))

        with make_client(fetcher=fetcher) as c:
            data = rpc(c, "resources/read", {"uri": "https://hello-world-widget.pages.dev"})

        assert data["error"]["code"] == -32603
        assert "404" in data["error"]["message"]


class TestEnvelopeErrors:
    def test_parse_error(self, client):
        response = client.post(
            "/mcp", content=b"{bad", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["jsonrpc"] == "2.0"
        assert data["id"] is None
        assert data["error"]["code"] == -32700

    def test_empty_body_is_a_parse_error(self, client):
        response = client.post("/mcp", content=b"", headers={"Content-Type": "application/json"})

        assert response.json()["error"]["code"] == -32700

    def test_wrong_version_echoes_id(self, client):
        data = client.post("/mcp", json={"jsonrpc": "1.0", "id": 7, "method": "ping"}).json()

        assert data["id"] == 7
        assert data["error"]["code"] == -32600

    def test_missing_version_without_id_omits_id(self, client):
        data = client.post("/mcp", json={"method": "ping"}).json()

        assert "id" not in data
        assert data["error"]["code"] == -32600

    def test_non_object_body(self, client):
        data = client.post("/mcp", json=[{"jsonrpc": "2.0", "id": 1, "method": "ping"}]).json()

        assert data["id"] is None
        assert data["error"]["code"] == -32600

    def test_invalid_id_type(self, client):
        data = client.post("/mcp", json={"jsonrpc": "2.0", "id": {"n": 1}, "method": "ping"}).json()

        assert data["error"]["code"] == -32600
        assert data["id"] is None

    def test_deeply_nested_body_is_a_parse_error(self, client):
        body = "[" * 200000 + "]" * 200000

        response = client.post("/mcp", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] is None
        assert data["error"]["code"] == -32700

    @pytest.mark.parametrize("body", [
        b'{"jsonrpc":"2.0","id":NaN,"method":"ping"}',
        b'{"jsonrpc":"2.0","id":Infinity,"method":"ping"}',
        b'{"jsonrpc":"2.0","id":-Infinity,"method":"ping"}',
        b'{"jsonrpc":"2.0","id":1e999,"method":"ping"}',
    ])
    def test_non_finite_numbers_are_a_parse_error(self, client, body):
        response = client.post("/mcp", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] is None
        assert data["error"]["code"] == -32700

    def test_unexpected_parse_failure_becomes_internal_error(self, client, monkeypatch):
        def explode(raw):
            raise RuntimeError("decoder crashed")

        monkeypatch.setattr("widget_mcp.mcp_transport.parse_message", explode)

        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] is None
        assert data["error"]["code"] == -32603

    def test_missing_method(self, client):
        data = client.post("/mcp", json={"jsonrpc": "2.0", "id": 3}).json()

        assert data["id"] == 3
        assert data["error"]["code"] == -32600

    def test_params_must_be_an_object(self, client):
        data = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 4, "method": "tools/list", "params": [1]}
        ).json()

        assert data["error"]["code"] == -32602

    def test_null_id_is_echoed(self, client):
        data = client.post("/mcp", json={"jsonrpc": "2.0", "id": None, "method": "ping"}).json()

        assert data == {"jsonrpc": "2.0", "id": None, "result": {}}


class TestNotifications:
    def test_initialized_notification(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})

        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_unknown_notification(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/unknown"})

        assert response.status_code == 200
        data = response.json()
        assert "id" not in data
        assert data["error"]["code"] == -32601


def _slow_app(handler):
    def register_tools(registry, config, http_client=None):
        registry.register_tool(
            name="misbehave",
            description="Test tool",
            input_schema={"type": "object", "properties": {}},
            handler=handler,
        )

    return WidgetApp(
        key="misbehaving",
        name="misbehaving-mcp-server",
        title="Misbehaving",
        description="Test app",
        default_widget_url="https://misbehaving.example.com",
        register_tools=register_tools,
    )


class TestHandlerFailures:
    def _call(self, handler, **config):
        app = create_app(
            _slow_app(handler),
            ServerConfig(app="misbehaving", **config),
            fetcher=make_fetcher(),
        )
        with TestClient(app) as c:
            return rpc(c, "tools/call", {"name": "misbehave"})

    def test_exception_becomes_internal_error(self):
        def handler(args):
            raise RuntimeError("database on fire")

        data = self._call(handler)

        assert data["error"]["code"] == -32603
        assert data["error"]["data"] == {"details": "database on fire"}

    def test_timeout_becomes_internal_error(self):
        async def handler(args):
            await asyncio.sleep(5)

        data = self._call(handler, tool_timeout=0.05)

        assert data["error"]["code"] == -32603
        assert data["error"]["message"] == "Request timed out: tools/call"

    def test_unserializable_result_becomes_internal_error(self):
        data = self._call(lambda args: {"value": object()})

        assert data["id"] == 1
        assert data["error"]["code"] == -32603


class TestTransport:
    def test_get_mcp_is_rejected(self, client):
        response = client.get("/mcp")

        assert response.status_code == 400
        assert response.text == "MCP endpoint requires POST with application/json"
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_non_json_content_type_is_rejected(self, client):
        response = client.post(
            "/mcp",
            content=b'{"jsonrpc":"2.0","id":1,"method":"ping"}',
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 400

    def test_json_content_type_with_charset(self, client):
        response = client.post(
            "/mcp",
            content=b'{"jsonrpc":"2.0","id":1,"method":"ping"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )

        assert response.status_code == 200
        assert response.json()["result"] == {}

    @pytest.mark.parametrize("path", ["/mcp", "/health", "/anything/at/all"])
    def test_preflight(self, client, path):
        response = client.options(path)

        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["Access-Control-Allow-Headers"] == (
            "Content-Type, Authorization, X-Requested-With, Accept"
        )
        assert response.headers["Access-Control-Max-Age"] == "86400"

    def test_cors_header_on_results(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})

        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.parametrize("method, path", [
        ("GET", "/missing"),
        ("POST", "/info"),
        ("DELETE", "/"),
    ])
    def test_not_found(self, client, method, path):
        response = client.request(method, path)

        assert response.status_code == 404
        assert response.text == "Not Found"
        assert response.headers["Access-Control-Allow-Origin"] == "*"


class TestMonitoringEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "hello-world-mcp-server"
        assert data["version"] == "1.0.0"
        assert data["widget_url"] == "https://hello-world-widget.pages.dev"
        assert data["timestamp"].endswith("Z")

    def test_health_accepts_any_method(self, client):
        assert client.post("/health").status_code == 200

    @pytest.mark.parametrize("path", ["/", "/info"])
    def test_info(self, client, path):
        data = client.get(path).json()

        assert data["name"] == "hello-world-mcp-server"
        assert data["endpoints"]["mcp"] == "/mcp (JSON-RPC 2.0)"
        assert data["tools"] == [{
            "name": "greet_user",
            "description": "Generates personalized greetings",
            "parameters": ["name", "formal"],
        }]
        assert data["protocol"]["version"] == "2025-06-18"

    def test_widget_url_override(self):
        with make_client(widget_url="https://preview.example.com/hello") as c:
            assert c.get("/health").json()["widget_url"] == "https://preview.example.com/hello"
            tools = rpc(c, "tools/list")["result"]["tools"]

        assert tools[0]["_meta"][OUTPUT_TEMPLATE_KEY] == "https://preview.example.com/hello"

    def test_legacy_sse_announces_endpoint(self, client):
        with client.stream("GET", "/sse") as response:
            body = response.read().decode()

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "event: endpoint" in body
        assert "data: /mcp" in body
