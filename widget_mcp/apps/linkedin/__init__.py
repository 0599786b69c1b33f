"""linkedin-post-composer: compose, illustrate and publish LinkedIn posts.

``compose_linkedin_post`` opens the composer widget; ``generate_image`` and
``publish_post`` are server actions invoked by the widget itself.
"""
from typing import Any, Callable, Dict, Optional

import httpx

from ...config import ServerConfig
from ...tool_registry import ToolError, ToolRegistry
from ...utils.validation import validate_input
from ...widget_app import WidgetApp
from .actions import make_compose_post, make_generate_image, make_publish_post
from .image_client import ImageGenerationClient
from .token_store import TokenStore

COMPOSE_POST_SCHEMA = {
    "type": "object",
    "properties": {
        "content": {"type": "string", "description": "Post text content"},
        "postType": {
            "type": "string",
            "description": "Type of post",
            "enum": ["text", "image", "carousel", "video", "document", "poll"],
            "default": "text",
        },
        "imageSource": {
            "type": "string",
            "description": "How to get image (required if postType='image')",
            "enum": ["upload", "ai-generate", "url"],
        },
        "imageUrl": {"type": "string", "description": "Direct image URL (if imageSource='url')"},
        "suggestedImagePrompt": {
            "type": "string",
            "description": "AI generation prompt (if imageSource='ai-generate')",
        },
        "accountType": {
            "type": "string",
            "description": "Account type to post to",
            "enum": ["personal", "organization"],
            "default": "personal",
        },
    },
    "required": ["content"],
}

GENERATE_IMAGE_SCHEMA = {
    "type": "object",
    "properties": {
        "prompt": {"type": "string", "description": "Image generation prompt"},
        "style": {
            "type": "string",
            "enum": ["professional", "creative", "minimalist"],
            "default": "professional",
        },
        "size": {
            "type": "string",
            "enum": ["1024x1024", "1792x1024", "1024x1792"],
            "default": "1024x1024",
        },
    },
    "required": ["prompt"],
}

PUBLISH_POST_SCHEMA = {
    "type": "object",
    "properties": {
        "accountId": {"type": "string", "description": "LinkedIn account URN"},
        "content": {"type": "string", "description": "Post text content"},
        "imageUrl": {"type": "string", "description": "Image URL (optional)"},
        "carouselImageUrls": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Image URLs for carousel posts (2-20)",
        },
        "documentUrl": {"type": "string", "description": "Document URL for document posts"},
        "postType": {"type": "string", "enum": ["text", "image", "carousel", "document"]},
    },
    "required": ["accountId", "content", "postType"],
}


def _validated(schema: Dict[str, Any], handler: Callable):
    """Reject arguments that do not fit ``schema`` with a payload-level error."""
    def wrapper(args: Dict[str, Any]):
        errors = validate_input(schema, args)
        if errors:
            return ToolError.create("VALIDATION_ERROR", ", ".join(errors))
        return handler(args)

    wrapper.__name__ = getattr(handler, "__name__", "handler")
    return wrapper


def _action_summary(success_text: str):
    def summarize(result: Dict[str, Any]) -> str:
        return success_text if result.get("success") else f"Error: {result.get('error')}"

    return summarize


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
    token_store: Optional[TokenStore] = None,
) -> None:
    token_store = token_store or TokenStore()
    image_client = ImageGenerationClient(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        timeout=config.tool_timeout,
        client=http_client,
    )
    registry.add_closer(image_client.close)

    registry.register_tool(
        name="compose_linkedin_post",
        description=(
            "Opens the LinkedIn Post Composer widget to create, preview, and publish LinkedIn posts. "
            "Supports text-only posts and posts with images (upload or AI-generated). "
            "Users can post to their personal profile or company pages."
        ),
        input_schema=COMPOSE_POST_SCHEMA,
        handler=_validated(COMPOSE_POST_SCHEMA, make_compose_post(token_store)),
        annotations={
            "title": "LinkedIn Post Composer",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        summarize=lambda result: "Opening LinkedIn Post Composer with your content...",
        renders_widget=True,
    )

    # Server actions (called by the widget)
    registry.register_tool(
        name="generate_image",
        description="Generate an image for the post from a text prompt (server action)",
        input_schema=GENERATE_IMAGE_SCHEMA,
        handler=make_generate_image(image_client),
        annotations={"readOnlyHint": False, "openWorldHint": True},
        summarize=_action_summary("Image generated successfully!"),
    )
    registry.register_tool(
        name="publish_post",
        description="Publish post to LinkedIn (server action)",
        input_schema=PUBLISH_POST_SCHEMA,
        handler=make_publish_post(token_store),
        annotations={"destructiveHint": False, "openWorldHint": True},
        summarize=lambda result: result["message"],
    )


APP = WidgetApp(
    key="linkedin-post-composer",
    name="linkedin-post-composer-mcp-server",
    title="LinkedIn Post Composer",
    description="Compose, preview and publish LinkedIn posts",
    default_widget_url="https://linkedin-post-composer-widget.pages.dev",
    register_tools=register_tools,
    widget_description="LinkedIn post composer with account selection, images and preview",
)
