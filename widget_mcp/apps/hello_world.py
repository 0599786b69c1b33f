"""hello-world: personalized greetings."""
from typing import Any, Dict, Optional, Union

import httpx

from ..config import ServerConfig
from ..tool_registry import ToolError, ToolRegistry, utc_timestamp
from ..utils.validation import validate_input
from ..widget_app import WidgetApp

GREET_USER_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "User's name", "minLength": 1},
        "formal": {"type": "boolean", "description": "Use formal greeting"},
    },
    "required": ["name"],
}


def greet_user(args: Dict[str, Any]) -> Union[Dict[str, Any], ToolError]:
    """Generate a greeting for ``args["name"]``."""
    errors = validate_input(GREET_USER_SCHEMA, args)
    if errors:
        return ToolError.create("VALIDATION_ERROR", ", ".join(errors))

    formal = bool(args.get("formal", False))
    name = args["name"]
    greeting = f"Good day, {name}." if formal else f"Hello, {name}!"
    return {
        "greeting": greeting,
        "formal": formal,
        "timestamp": utc_timestamp(),
    }


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    registry.register_tool(
        name="greet_user",
        description="Generates personalized greetings",
        input_schema=GREET_USER_SCHEMA,
        handler=greet_user,
        summarize=lambda result: result.get("greeting") or "Greeting generated successfully",
        renders_widget=True,
    )


APP = WidgetApp(
    key="hello-world",
    name="hello-world-mcp-server",
    title="Hello World",
    description="Generates personalized greetings",
    default_widget_url="https://hello-world-widget.pages.dev",
    register_tools=register_tools,
    widget_description="Greeting widget with personalized messages",
)
