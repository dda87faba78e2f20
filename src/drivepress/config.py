"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from drivepress.core.models import Label


CONFIG_FILE = "config.yaml"
DEFAULT_FOLDER_ID = "1kQ-InlQsnmiGcrZPNs64gXpnR9JHYHh0"

# Unprefixed names kept for existing deployments; DRIVEPRESS_* wins over these.
LEGACY_ENV = {"folder_id": "DRIVE_FOLDER_ID", "api_key": "GOOGLE_API_KEY"}


class Settings(BaseModel):
    folder_id:        str = Field(default=DEFAULT_FOLDER_ID, description="Drive folder holding the markdown sources")
    api_key:          str = Field(default="", description="Google API key used for Drive requests")
    source_dir:       Optional[str] = Field(default=None, description="Read sources from a local directory instead of Drive")
    site_dir:         str = Field(default="docs",     description="Output root published as the site")
    articles_dir:     str = Field(default="articles", description="Article pages directory, relative to site_dir")
    article_template: str = Field(default="site/article-template.html")
    index_template:   str = Field(default="site/index.html")
    extensions:       list[str] = Field(default=[".md", ".markdown"], description="Source filename suffixes to build")
    excerpt_length:   int = Field(default=150, ge=1, description="Max excerpt characters before the ellipsis")
    label_keywords:   list[str] = Field(default=["update", "アップデート", "ログ"])
    update_label:     str = "Update"
    signal_label:     str = "Signal"
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    on_error:         str = Field(default="skip", pattern="^(skip|abort)$", description="Per-document failure policy")
    timeout:          float = Field(default=30, gt=0, description="HTTP timeout in seconds")

    @field_validator("extensions", "label_keywords", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        """Accept comma-separated strings from env vars and CLI flags."""
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    def label_text(self, label: Label) -> str:
        return self.update_label if label is Label.update else self.signal_label


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name, var in LEGACY_ENV.items():
        if val := os.getenv(var):
            data[name] = val
    for name in Settings.model_fields:
        if val := os.getenv(f"DRIVEPRESS_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
