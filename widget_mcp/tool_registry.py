"""Tool registry: descriptors, handler invocation and payload-level errors."""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .utils.errors import ToolNotFoundError

logger = logging.getLogger(__name__)

OUTPUT_TEMPLATE_KEY = "openai/outputTemplate"

ToolHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]
Summarizer = Callable[[Dict[str, Any]], str]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ToolAnnotations(BaseModel):
    """Behaviour hints a host may use when presenting a tool."""

    title: Optional[str] = None
    readOnlyHint: Optional[bool] = None
    destructiveHint: Optional[bool] = None
    idempotentHint: Optional[bool] = None
    openWorldHint: Optional[bool] = None


class ToolDescriptor(BaseModel):
    """A tool as published by tools/list."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    inputSchema: Dict[str, Any]
    annotations: Optional[ToolAnnotations] = None
    meta: Optional[Dict[str, Any]] = Field(default=None, alias="_meta")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolError(BaseModel):
    """Payload-level failure returned by a tool handler.

    Rides inside structuredContent of a successful tools/call response;
    it is not a JSON-RPC error.
    """

    error: bool = True
    message: str
    code: Optional[str] = None
    timestamp: str = Field(default_factory=utc_timestamp)

    @classmethod
    def create(cls, code: str, message: str) -> "ToolError":
        return cls(code=code, message=message)


@dataclass
class ToolCallResult:
    """Outcome of a successful tool invocation."""

    structured: Any
    text: str
    is_error: bool = False
    meta: Optional[Dict[str, Any]] = None

    def to_mcp(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "content": [{"type": "text", "text": self.text}],
            "structuredContent": self.structured,
        }
        if self.is_error:
            result["isError"] = True
        if self.meta:
            result["_meta"] = self.meta
        return result


@dataclass
class _RegisteredTool:
    descriptor: ToolDescriptor
    handler: ToolHandler
    summarize: Optional[Summarizer] = None
    meta: Optional[Dict[str, Any]] = None


class ToolRegistry:
    """Name to handler mapping, populated at startup and read-only afterwards."""

    def __init__(self, widget_url: Optional[str] = None, timeout: Optional[float] = None):
        self.widget_url = widget_url
        self.timeout = timeout
        self.tools: Dict[str, _RegisteredTool] = {}
        self._closers: List[Callable[[], Awaitable[None]]] = []

    def register_tool(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        handler: ToolHandler,
        annotations: Optional[Dict[str, Any]] = None,
        summarize: Optional[Summarizer] = None,
        renders_widget: bool = False,
    ) -> None:
        """Register a tool. Re-registering a name replaces the previous entry."""
        meta = None
        if renders_widget and self.widget_url:
            meta = {OUTPUT_TEMPLATE_KEY: self.widget_url}

        descriptor = ToolDescriptor(
            name=name,
            description=description,
            inputSchema=input_schema,
            annotations=ToolAnnotations(**annotations) if annotations else None,
            meta=meta,
        )
        self.tools[name] = _RegisteredTool(
            descriptor=descriptor, handler=handler, summarize=summarize, meta=meta
        )
        logger.info(f"Registered tool: {name}")

    def add_closer(self, closer: Callable[[], Awaitable[None]]) -> None:
        """Register a coroutine to run at shutdown (e.g. closing an HTTP client)."""
        self._closers.append(closer)

    def list_tools(self) -> List[Dict[str, Any]]:
        """List all registered tools."""
        return [tool.descriptor.to_dict() for tool in self.tools.values()]

    def get(self, name: str) -> Optional[ToolDescriptor]:
        tool = self.tools.get(name)
        return tool.descriptor if tool else None

    async def invoke(self, name: str, arguments: Dict[str, Any]) -> ToolCallResult:
        """Execute a registered tool.

        Raises:
            ToolNotFoundError: no tool is registered under ``name``
            asyncio.TimeoutError: the handler exceeded the registry timeout
        """
        tool = self.tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        outcome = tool.handler(arguments)
        if inspect.isawaitable(outcome):
            outcome = await asyncio.wait_for(outcome, timeout=self.timeout)

        if isinstance(outcome, ToolError):
            logger.warning(f"Tool {name} reported {outcome.code}: {outcome.message}")
            return ToolCallResult(
                structured=outcome.model_dump(exclude_none=True),
                text=f"Error: {outcome.message}",
                is_error=True,
                meta=tool.meta,
            )

        if isinstance(outcome, BaseModel):
            outcome = outcome.model_dump(by_alias=True, exclude_none=True)

        text = tool.summarize(outcome) if tool.summarize else f"{name} completed"
        return ToolCallResult(structured=outcome, text=text, meta=tool.meta)

    async def close(self) -> None:
        for closer in self._closers:
            await closer()
        self._closers.clear()
