"""playa-guide: places in Playa del Carmen shown on an interactive map."""
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import ServerConfig
from ..tool_registry import ToolRegistry
from ..widget_app import WidgetApp
from .playa_places import (
    CATEGORY_ALIASES,
    PLACES,
    PLAYA_DEL_CARMEN_CENTER,
    get_places_by_category,
    matches_preferences,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Playa del Carmen"
DEFAULT_LIMIT = 10
MAX_LIMIT = 50

FIND_PLACES_SCHEMA = {
    "type": "object",
    "properties": {
        "location": {
            "type": "string",
            "description": "Location name (currently only 'Playa del Carmen' is supported)",
            "default": DEFAULT_LOCATION,
        },
        "category": {
            "type": "string",
            "description": "Category of places to find",
            "enum": ["all", *CATEGORY_ALIASES],
            "default": "all",
        },
        "preferences": {
            "type": "string",
            "description": (
                "User preferences for filtering "
                "(e.g., 'family-friendly', 'romantic', 'budget', 'luxury')"
            ),
        },
        "limit": {
            "type": "number",
            "description": f"Maximum number of places to return (default: {DEFAULT_LIMIT}, max: {MAX_LIMIT})",
            "default": DEFAULT_LIMIT,
            "minimum": 1,
            "maximum": MAX_LIMIT,
        },
    },
    "required": [],
}


def _clamp_limit(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 1:
        return DEFAULT_LIMIT
    return min(int(value), MAX_LIMIT)


def find_places(args: Dict[str, Any]) -> Dict[str, Any]:
    """Find places by category, optionally narrowed by preference keywords.

    Unsupported locations produce an error-shaped payload with no places.
    A category with no matches falls back to places from every category.
    """
    location = args.get("location") or DEFAULT_LOCATION
    category = str(args.get("category") or "all").lower()

    if not isinstance(location, str) or "playa" not in location.lower():
        return {
            "places": [],
            "location": str(location),
            "category": category,
            "totalCount": 0,
            "centerCoordinates": PLAYA_DEL_CARMEN_CENTER,
            "error": True,
            "message": (
                f'Sorry, this guide only covers {DEFAULT_LOCATION}. '
                f'"{location}" is not supported yet.'
            ),
        }

    limit = _clamp_limit(args.get("limit", DEFAULT_LIMIT))
    places = get_places_by_category(category, limit=len(PLACES))

    preferences = args.get("preferences")
    if isinstance(preferences, str) and preferences.strip():
        preferred = [place for place in places if matches_preferences(place, preferences)]
        if preferred:
            places = preferred
        else:
            logger.debug(f"No places match preferences {preferences!r}; ignoring them")

    places = places[:limit]
    if not places and category != "all":
        places = PLACES[:limit]

    return {
        "places": places,
        "location": DEFAULT_LOCATION,
        "category": category,
        "totalCount": len(places),
        "centerCoordinates": PLAYA_DEL_CARMEN_CENTER,
    }


def summarize_places(result: Dict[str, Any]) -> str:
    if result.get("error"):
        return f"Error: {result['message']}"
    count = result["totalCount"]
    plural = "" if count == 1 else "s"
    return f"Found {count} {result['category']} place{plural} in {result['location']}"


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    registry.register_tool(
        name="find_places",
        description=(
            "Finds and displays recommended places in Playa del Carmen, Mexico on an interactive map. "
            "Use this when users ask about restaurants, beaches, activities, nightlife, shopping, "
            "or hotels in Playa del Carmen. Returns places with details, coordinates and ratings. "
            "Supports filtering by category and preferences (e.g., 'family-friendly', 'romantic', 'budget')."
        ),
        input_schema=FIND_PLACES_SCHEMA,
        handler=find_places,
        annotations={
            "title": "Playa del Carmen Guide",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        summarize=summarize_places,
        renders_widget=True,
    )


APP = WidgetApp(
    key="playa-guide",
    name="playa-guide-mcp-server",
    title="Playa del Carmen Guide",
    description="Find places in Playa del Carmen on an interactive map",
    default_widget_url="https://playa-guide-widget.pages.dev?v=1.0.4",
    register_tools=register_tools,
    widget_description=(
        "Interactive map widget displaying places in Playa del Carmen with details and filters"
    ),
)
