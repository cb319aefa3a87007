"""Application configuration: settings schema and config.yaml loader"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"
PERMALINK_STYLES = ("date", "pretty", "ordinal", "none")


class Settings(BaseModel):
    app_name:        str = "mdfolio"
    content_dir:     str = Field(default=".",    description="Site root holding pages and _posts/")
    output_dir:      str = Field(default="dist", description="Directory for migrated content and manifest")
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    permalink_style: str = Field(default="date", description="date, pretty, ordinal, none, or a /custom/:template")
    required_keys:   list[str] = Field(default=["layout"], description="Front matter keys every document must set")
    layouts:         list[str] = Field(default=[], description="Known layout names; empty accepts any")
    duplicate_policy: str = Field(default="reject", pattern="^(reject|split)$", description="Embedded document handling")
    target:          str = Field(default="jekyll", pattern="^(jekyll|hugo)$", description="Migration target layout")
    include_drafts:  bool = Field(default=False, description="Scan _drafts/ alongside _posts/")
    exclude:         list[str] = Field(
        default=["README.md", "_site", "vendor", "node_modules"],
        description="File or directory names skipped during discovery",
    )
    fail_on_warnings: bool = Field(default=False, description="Treat warnings as check failures")
    log_level:       str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("permalink_style")
    @classmethod
    def _known_style(cls, value: str) -> str:
        if value in PERMALINK_STYLES or value.startswith("/"):
            return value
        raise ValueError(f"unknown permalink style {value!r}; use one of {PERMALINK_STYLES} or a /template")


def _env_value(name: str, raw: str) -> Any:
    """Split comma-separated env values for list fields; leave scalars for pydantic to coerce."""
    annotation = Settings.model_fields[name].annotation
    if getattr(annotation, "__origin__", None) is list:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDFOLIO_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")
        logger.debug("Loaded %s with keys %s", CONFIG_FILE, sorted(data))

    for name in Settings.model_fields:
        if val := os.getenv(f"MDFOLIO_{name.upper()}"):
            data[name] = _env_value(name, val)

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def dump_defaults() -> str:
    """Return a config.yaml body populated with every default setting."""
    return yaml.safe_dump(Settings().model_dump(), sort_keys=False, allow_unicode=True)
