"""Command line entry point: serve one widget app with uvicorn."""
import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from .apps import get_app, list_apps
from .config import configure_logging, load_config
from .server import create_app
from .utils.errors import ConfigError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="widget-mcp",
        description="Serve an example widget app over MCP JSON-RPC.",
    )
    parser.add_argument("app", nargs="?", help="Widget app key (see --list-apps)")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--widget-url", help="Deployed widget URL")
    parser.add_argument("--log-level")
    parser.add_argument("--list-apps", action="store_true", help="List widget apps and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_apps:
        for widget_app in list_apps():
            print(f"{widget_app.key:<26} {widget_app.description}")
        return 0

    try:
        config = load_config(
            args.config,
            app=args.app,
            host=args.host,
            port=args.port,
            widget_url=args.widget_url,
            log_level=args.log_level,
        )
        configure_logging(config.log_level)
        widget_app = get_app(config.app)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return 2

    logger.info(f"Serving {widget_app.key} on {config.host}:{config.port}")
    uvicorn.run(
        create_app(widget_app, config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
