"""Custom exception classes for the widget MCP server."""


class WidgetMCPError(Exception):
    """Base exception for widget server errors."""

    pass


class ConfigError(WidgetMCPError):
    """Invalid or unreadable server configuration."""

    pass


class ToolNotFoundError(WidgetMCPError):
    """A tools/call named a tool that is not registered."""

    def __init__(self, name):
        super().__init__(f"Tool not found: {name}")
        self.name = name


class WidgetFetchError(WidgetMCPError):
    """The deployed widget HTML could not be fetched."""

    pass
