"""Catalogue of the example widget apps."""
from typing import Dict, List

from ..widget_app import WidgetApp
from . import (
    animated_testimonials,
    email_composer,
    hello_world,
    linkedin,
    playa_guide,
    priority_inbox,
)

APPS: Dict[str, WidgetApp] = {
    module.APP.key: module.APP
    for module in (
        hello_world,
        email_composer,
        playa_guide,
        priority_inbox,
        animated_testimonials,
        linkedin,
    )
}


def get_app(key: str) -> WidgetApp:
    try:
        return APPS[key]
    except KeyError:
        known = ", ".join(sorted(APPS))
        raise KeyError(f"Unknown widget app {key!r}; known apps: {known}") from None


def list_apps() -> List[WidgetApp]:
    return list(APPS.values())
