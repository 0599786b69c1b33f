"""email-composer: pre-filled email drafts from a small template table."""
from typing import Any, Dict, Optional

import httpx

from ..config import ServerConfig
from ..tool_registry import ToolRegistry
from ..widget_app import WidgetApp

TEMPLATES: Dict[str, Dict[str, str]] = {
    "blank": {
        "subject": "",
        "body": "",
    },
    "meeting-followup": {
        "subject": "Following up on our meeting",
        "body": (
            "Hi there,\n\n"
            "It was great meeting with you earlier. I wanted to follow up on a few "
            "points we discussed:\n\n"
            "1. [Point 1]\n2. [Point 2]\n3. [Point 3]\n\n"
            "Let me know your thoughts when you have a moment.\n\n"
            "Best regards"
        ),
    },
    "introduction": {
        "subject": "Introduction",
        "body": (
            "Hi [Name],\n\n"
            "I wanted to reach out and introduce myself. I'm [Your Name] from [Company], "
            "and I think there could be some great opportunities for us to collaborate.\n\n"
            "Would you be open to a quick call next week to discuss?\n\n"
            "Looking forward to connecting!\n\n"
            "Best"
        ),
    },
    "thank-you": {
        "subject": "Thank you",
        "body": (
            "Hi [Name],\n\n"
            "I just wanted to take a moment to say thank you for [specific reason]. "
            "Your help made a real difference and I truly appreciate it.\n\n"
            "Looking forward to working together again soon!\n\n"
            "Best regards"
        ),
    },
    "roadmap-inquiry": {
        "subject": "Product roadmap",
        "body": (
            "Hi [Name],\n\n"
            "Hope you're doing well! Just wanted to check in and see if there are any "
            "updates on the roadmap. We're excited to see what's coming next and how we "
            "can make the most of the upcoming features.\n\n"
            "Best"
        ),
    },
}

COMPOSE_EMAIL_SCHEMA = {
    "type": "object",
    "properties": {
        "to": {"type": "string", "description": "Recipient email address"},
        "subject": {"type": "string", "description": "Email subject line"},
        "template": {
            "type": "string",
            "description": "Template to start from",
            "enum": list(TEMPLATES),
            "default": "blank",
        },
    },
    "required": [],
}


def make_compose_email(sender: str, default_recipient: str):
    def compose_email(args: Dict[str, Any]) -> Dict[str, Any]:
        template_key = args.get("template") or "blank"
        if template_key not in TEMPLATES:
            template_key = "blank"
        template = TEMPLATES[template_key]

        return {
            "emailFrom": sender,
            "defaultTo": args.get("to") or default_recipient,
            "defaultSubject": args.get("subject") or template["subject"],
            "defaultBody": template["body"],
            "templateType": template_key,
        }

    return compose_email


def register_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    registry.register_tool(
        name="compose_email",
        description=(
            "Opens an email composer pre-filled with a draft. "
            "Use this when the user wants to write or send an email."
        ),
        input_schema=COMPOSE_EMAIL_SCHEMA,
        handler=make_compose_email(config.default_sender, config.default_recipient),
        annotations={
            "title": "Email Composer",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        summarize=lambda result: f"Draft email ready to send to {result['defaultTo']}",
        renders_widget=True,
    )


APP = WidgetApp(
    key="email-composer",
    name="email-composer-mcp-server",
    title="Email Composer",
    description="Compose email drafts from templates",
    default_widget_url="https://email-composer-widget.pages.dev",
    register_tools=register_tools,
    widget_description="Email composer widget with editable recipient, subject and body",
)
