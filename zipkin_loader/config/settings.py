"""
Loader Settings

Runtime configuration for the Zipkin loader and the data tables that drive
span translation (alias tables, noise filters, flattening depth).

The translation tables are data, not code: they ship as ``translation.yaml``
next to this module and can be extended without touching the translator.

Usage:
    from zipkin_loader.config import get_loader_settings

    settings = get_loader_settings(zipkin_host="zipkin.local", dry_run=False)
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field

from zipkin_loader.logger import logger
from zipkin_loader.types import ConfiguredBaseModel

DEFAULT_TRANSLATION_PATH = Path(__file__).with_name("translation.yaml")

ENV_PREFIX = "ZIPKIN_LOADER_"


class NoiseRule(ConfiguredBaseModel):
    """An operation/service pair whose records are dropped as noise."""

    operation: str
    service: str


class TranslationConfig(ConfiguredBaseModel):
    """
    Tables consumed by the record filter and the span translator.

    Alias tables are ordered mappings of raw identifier -> canonical name.
    ``flatten_extra_depth`` maps a tag key prefix to the number of extra
    levels of nested objects to flatten under it.
    """

    magic_key: str = "TritonTracing"
    magic_value: str = "TRITON"

    health_check_prefixes: List[str] = Field(default_factory=lambda: ["/ping"])
    noise: List[NoiseRule] = Field(default_factory=list)

    http_request_operation: str = "restify_request"
    client_name_tag: str = "client.name"
    client_name_prefix: str = "sdc-clients:"
    url_path_max_length: int = Field(default=80, ge=1)

    server_aliases: Dict[str, str] = Field(
        default_factory=lambda: {
            "compute node agent": "cn-agent",
            "WorkflowAPI": "wfapi",
        }
    )
    component_aliases: Dict[str, str] = Field(default_factory=dict)

    flatten_extra_depth: Dict[str, int] = Field(default_factory=lambda: {"moray.rpc": 1})

    local_span_begin: str = "local-begin"
    local_span_end: str = "local-end"

    annotation_codes: Dict[str, str] = Field(
        default_factory=lambda: {
            "client-send-req": "cs",
            "client-recv-res": "cr",
            "server-request": "sr",
            "server-response": "ss",
        }
    )
    fallback_annotation_code: str = "lc"


class LoaderSettings(ConfiguredBaseModel):
    """Settings for one loader process."""

    zipkin_host: Optional[str] = Field(default=None, description="Zipkin collector host")
    zipkin_port: int = Field(default=9411, ge=1, le=65535)
    spans_path: str = "/api/v1/spans"

    pump_interval_ms: int = Field(
        default=1000,
        ge=1,
        description="Milliseconds between pump ticks",
    )
    request_timeout_sec: float = Field(default=10.0, gt=0)

    dry_run: bool = Field(default=False, description="Print batches instead of sending them")
    log_level: str = "INFO"

    translation: TranslationConfig = Field(default_factory=TranslationConfig)

    @property
    def collector_url(self) -> str:
        return f"http://{self.zipkin_host}:{self.zipkin_port}"


def load_translation_config(path: Optional[str] = None) -> TranslationConfig:
    """
    Load translation tables from a YAML file.

    Args:
        path: YAML file to read (default: packaged translation.yaml)

    Returns:
        TranslationConfig with file values over built-in defaults
    """
    config_path = Path(path) if path else DEFAULT_TRANSLATION_PATH

    if not config_path.exists():
        logger.warning(f"Translation config not found: {config_path}, using defaults")
        return TranslationConfig()

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    config = TranslationConfig(**data)
    logger.debug(
        f"Loaded translation config from {config_path}: "
        f"{len(config.server_aliases)} server aliases, "
        f"{len(config.component_aliases)} component aliases, "
        f"{len(config.noise)} noise rules"
    )
    return config


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    host = os.getenv(f"{ENV_PREFIX}HOST")
    if host:
        overrides["zipkin_host"] = host
    port = os.getenv(f"{ENV_PREFIX}PORT")
    if port:
        overrides["zipkin_port"] = int(port)
    interval = os.getenv(f"{ENV_PREFIX}PUMP_INTERVAL_MS")
    if interval:
        overrides["pump_interval_ms"] = int(interval)
    dry_run = os.getenv(f"{ENV_PREFIX}DRY_RUN")
    if dry_run:
        overrides["dry_run"] = dry_run.lower() in ("1", "true", "yes")
    return overrides


def get_loader_settings(
    translation_path: Optional[str] = None,
    **overrides: Any,
) -> LoaderSettings:
    """
    Build loader settings.

    Precedence, lowest first: defaults, ``ZIPKIN_LOADER_*`` environment
    variables, explicit keyword overrides. ``None`` overrides are ignored so
    unset CLI options fall through.

    Args:
        translation_path: Optional YAML file with translation tables
        **overrides: Field values to set explicitly

    Returns:
        Validated LoaderSettings
    """
    values = _env_overrides()
    values.update({k: v for k, v in overrides.items() if v is not None})
    values["translation"] = load_translation_config(translation_path)
    return LoaderSettings(**values)
