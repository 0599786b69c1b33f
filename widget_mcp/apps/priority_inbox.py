"""priority-inbox: a mock mailbox sorted by priority."""
from typing import Any, Dict, List, Optional

import httpx

from ..config import ServerConfig
from ..tool_registry import ToolError, ToolRegistry
from ..utils.validation import validate_input
from ..widget_app import WidgetApp

PRIORITY_ORDER = {"high": 0, "normal": 1, "low": 2}
CATEGORIES = ["all", "primary", "social", "promotions", "updates"]


def _email(
    id: str,
    name: str,
    address: str,
    subject: str,
    preview: str,
    timestamp: str,
    priority: str,
    category: str,
    is_read: bool = False,
    is_starred: bool = False,
    has_attachments: bool = False,
    labels: Optional[List[str]] = None,
) -> Dict[str, Any]:
    initials = "".join(part[0] for part in name.split()[:2]).upper()
    return {
        "id": id,
        "sender": {"name": name, "email": address, "avatar": initials},
        "subject": subject,
        "preview": preview,
        "body": preview,
        "timestamp": timestamp,
        "isRead": is_read,
        "isStarred": is_starred,
        "priority": priority,
        "category": category,
        "hasAttachments": has_attachments,
        "labels": labels or [],
    }


MOCK_EMAILS: List[Dict[str, Any]] = [
    _email(
        "email-001", "Sarah Chen", "sarah.chen@example.com",
        "Q4 budget review needs your sign-off",
        "Hi, the finance team needs your approval on the Q4 budget before Friday.",
        "2025-01-15T09:30:00Z", "high", "primary", is_starred=True,
        has_attachments=True, labels=["finance"],
    ),
    _email(
        "email-002", "Marcus Webb", "marcus@example.com",
        "Production incident postmortem",
        "The postmortem for Tuesday's outage is ready for review.",
        "2025-01-15T08:05:00Z", "high", "updates", labels=["engineering"],
    ),
    _email(
        "email-003", "Priya Patel", "priya.patel@example.com",
        "Lunch on Thursday?",
        "Are you free for lunch on Thursday? There's a new place near the office.",
        "2025-01-14T16:20:00Z", "normal", "primary", is_read=True,
    ),
    _email(
        "email-004", "Design Weekly", "news@designweekly.example.com",
        "10 layout ideas for your next dashboard",
        "This week: dashboards, dense tables and the return of serif fonts.",
        "2025-01-14T07:00:00Z", "low", "promotions",
    ),
    _email(
        "email-005", "Alex Romero", "alex.romero@example.com",
        "Tagged you in a photo",
        "Alex tagged you in a photo from the team offsite.",
        "2025-01-13T19:45:00Z", "low", "social", is_read=True,
    ),
    _email(
        "email-006", "Jordan Lee", "jordan.lee@example.com",
        "Contract draft for the partnership",
        "Attached is the first draft of the partnership contract. Comments welcome.",
        "2025-01-13T11:10:00Z", "high", "primary", has_attachments=True,
        labels=["legal"],
    ),
    _email(
        "email-007", "Calendar", "calendar@example.com",
        "Reminder: 1:1 with your manager tomorrow",
        "Your weekly 1:1 is scheduled for tomorrow at 10:00.",
        "2025-01-12T18:00:00Z", "normal", "updates",
    ),
    _email(
        "email-008", "CloudStore", "offers@cloudstore.example.com",
        "Your storage is almost full",
        "Upgrade today and get 20% off your first year.",
        "2025-01-12T09:00:00Z", "low", "promotions", is_read=True,
    ),
]

GET_PRIORITY_EMAILS_SCHEMA = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "description": "Inbox category to show",
            "enum": CATEGORIES,
            "default": "all",
        },
        "limit": {
            "type": "integer",
            "description": "Maximum number of emails to return",
            "default": 10,
            "minimum": 1,
            "maximum": 50,
        },
        "unreadOnly": {
            "type": "boolean",
            "description": "Only return unread emails",
            "default": False,
        },
    },
    "required": [],
}


def get_priority_emails(args: Dict[str, Any]):
    """Filter the mailbox, sort high priority and newest first, then apply the limit."""
    errors = validate_input(GET_PRIORITY_EMAILS_SCHEMA, args)
    if errors:
        return ToolError.create("VALIDATION_ERROR", ", ".join(errors))

    category = args.get("category") or "all"
    limit = args.get("limit", 10)
    unread_only = args.get("unreadOnly", False)

    filtered = MOCK_EMAILS
    if category != "all":
        filtered = [email for email in filtered if email["category"] == category]
    if unread_only:
        filtered = [email for email in filtered if not email["isRead"]]

    # Newest first, then a stable sort by priority keeps that order within a priority
    filtered = sorted(filtered, key=lambda email: email["timestamp"], reverse=True)
    filtered = sorted(filtered, key=lambda email: PRIORITY_ORDER[email["priority"]])

    return {
        "emails": filtered[:limit],
        "category": category,
        "totalCount": len(filtered),
    }


def summarize_emails(result: Dict[str, Any]) -> str:
    count = len(result["emails"])
    plural = "" if count == 1 else "s"
    return f"Showing {count} priority email{plural}"


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    registry.register_tool(
        name="get_priority_emails",
        description=(
            "Shows the user's inbox sorted by priority. Use this when users ask about "
            "important, urgent or unread emails."
        ),
        input_schema=GET_PRIORITY_EMAILS_SCHEMA,
        handler=get_priority_emails,
        annotations={
            "title": "Priority Inbox",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        summarize=summarize_emails,
        renders_widget=True,
    )


APP = WidgetApp(
    key="priority-inbox",
    name="priority-inbox-mcp-server",
    title="Priority Inbox",
    description="Inbox view with emails sorted by priority",
    default_widget_url="https://priority-inbox-widget.pages.dev",
    register_tools=register_tools,
)
