"""Definition of a widget application served by the shared dispatcher."""
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from .config import ServerConfig
from .resources import WidgetResource
from .tool_registry import ToolRegistry

RegisterTools = Callable[[ToolRegistry, ServerConfig, Optional[httpx.AsyncClient]], None]


@dataclass(frozen=True)
class WidgetApp:
    """Everything that distinguishes one example server from another.

    ``register_tools`` receives the registry, the effective configuration
    and an optional shared HTTP client for tools that call external APIs.
    """

    key: str
    name: str
    title: str
    description: str
    default_widget_url: str
    register_tools: RegisterTools
    version: str = "1.0.0"
    widget_description: str = ""

    def widget_url(self, config: ServerConfig) -> str:
        return config.widget_url or self.default_widget_url

    def widget_resource(self, config: ServerConfig) -> WidgetResource:
        return WidgetResource(
            uri=self.widget_url(config),
            name=f"{self.title} Widget",
            description=self.widget_description or self.description,
        )
