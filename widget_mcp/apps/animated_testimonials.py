"""animated-testimonials: customer testimonials in an animated carousel."""
from typing import Any, Dict, List, Optional

import httpx

from ..config import ServerConfig
from ..tool_registry import ToolRegistry
from ..widget_app import WidgetApp

TESTIMONIALS: List[Dict[str, str]] = [
    {
        "quote": "The attention to detail and the thoughtful features exceeded our expectations.",
        "name": "Sarah Chen",
        "designation": "Product Manager at TechFlow",
        "src": "https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=500&q=80",
        "category": "product",
    },
    {
        "quote": "Implementation was seamless and the results went beyond what we planned for.",
        "name": "Michael Rodriguez",
        "designation": "CTO at InnovateSphere",
        "src": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=500&q=80",
        "category": "engineering",
    },
    {
        "quote": "Our team's productivity went up noticeably. The interface is intuitive.",
        "name": "Emily Watson",
        "designation": "Operations Director at CloudScale",
        "src": "https://images.unsplash.com/photo-1438761681033-6461ffad8d80?w=500&q=80",
        "category": "product",
    },
    {
        "quote": "Support answered every question within hours. That made the rollout easy.",
        "name": "James Kim",
        "designation": "Engineering Lead at DataPro",
        "src": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=500&q=80",
        "category": "support",
    },
    {
        "quote": "Scalability and performance have been outstanding for our growing business.",
        "name": "Lisa Thompson",
        "designation": "VP of Technology at FutureNet",
        "src": "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=500&q=80",
        "category": "engineering",
    },
]

SHOW_TESTIMONIALS_SCHEMA = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "description": "Optional category to filter testimonials",
        },
        "autoplay": {
            "type": "boolean",
            "description": "Enable auto-play carousel (default: true)",
        },
    },
    "required": [],
}


def show_testimonials(args: Dict[str, Any]) -> Dict[str, Any]:
    category = args.get("category")
    autoplay = args.get("autoplay")

    testimonials = TESTIMONIALS
    if isinstance(category, str) and category:
        selected = [t for t in TESTIMONIALS if t["category"] == category.lower()]
        # Unknown categories show everything
        testimonials = selected or TESTIMONIALS

    output: Dict[str, Any] = {
        "testimonials": [
            {key: t[key] for key in ("quote", "name", "designation", "src")}
            for t in testimonials
        ],
        "autoplay": autoplay if isinstance(autoplay, bool) else True,
    }
    if category:
        output["category"] = category
    return output


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    registry.register_tool(
        name="show_testimonials",
        description=(
            "Display customer testimonials with animated carousel. Use this when users want "
            "to see reviews, testimonials, or customer feedback with an interactive animated interface."
        ),
        input_schema=SHOW_TESTIMONIALS_SCHEMA,
        handler=show_testimonials,
        annotations={
            "title": "Animated Testimonials",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        summarize=lambda result: (
            f"Showing {len(result['testimonials'])} customer testimonials with animated carousel"
        ),
        renders_widget=True,
    )


APP = WidgetApp(
    key="animated-testimonials",
    name="animated-testimonials-mcp-server",
    title="Animated Testimonials",
    description="Customer testimonials in an animated carousel",
    default_widget_url="https://animated-testimonials.pages.dev",
    register_tools=register_tools,
)
