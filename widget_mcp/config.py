"""Server configuration loaded from defaults, a YAML file and the environment."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .utils.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "WIDGET_MCP_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServerConfig(BaseModel):
    """Settings for one widget server deployment."""

    model_config = ConfigDict(extra="forbid")

    app: str = "hello-world"
    host: str = "0.0.0.0"
    port: int = Field(default=8787, ge=1, le=65535)
    # None means "use the widget app's default deployment URL"
    widget_url: Optional[str] = None
    protocol_version: str = "2025-06-18"
    widget_fetch_timeout: float = Field(default=10.0, gt=0)
    widget_cache_ttl: float = Field(default=300.0, ge=0)
    tool_timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    default_sender: str = "me@example.com"
    default_recipient: str = "team@example.com"


def _read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _read_env(environ: Mapping[str, str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for name in ServerConfig.model_fields:
        env_name = f"{ENV_PREFIX}{name.upper()}"
        if env_name in environ:
            values[name] = environ[env_name]
    if "openai_api_key" not in values and environ.get("OPENAI_API_KEY"):
        values["openai_api_key"] = environ["OPENAI_API_KEY"]
    return values


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ServerConfig:
    """Build the effective configuration.

    Precedence, lowest first: defaults, YAML file, ``WIDGET_MCP_*``
    environment variables, explicit keyword overrides (``None`` values
    are ignored so unset CLI flags do not clobber the file).
    """
    values: Dict[str, Any] = {}
    if path is not None:
        values.update(_read_yaml(path))
    values.update(_read_env(os.environ if environ is None else environ))
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ServerConfig(**values)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigError(f"Invalid configuration ({fields}): {e}") from e


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
