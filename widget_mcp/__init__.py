"""Widget MCP servers: JSON-RPC tool servers for host-embedded widgets."""

__version__ = "1.0.0"
