"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:          str  = "mdvdom"
    parser_config:     str  = Field(default="gfm-like", description="MarkdownIt parser preset name")
    position:          bool = Field(default=False, description="Attach source line positions to AST nodes")
    max_depth:         int  = Field(default=200, ge=1, description="Max AST nesting depth before conversion fails")
    strict_references: bool = Field(default=False, description="Fail on unresolved link/image references")
    footnotes_tag:     str  = Field(default="footer", description="Tag of the trailing footnote container")
    output_dir:        str  = Field(default="dist", description="Directory for rendered JSON/HTML files")
    output_format:     str  = Field(default="json", pattern="^(json|html)$", description="json or html")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDVDOM_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDVDOM_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
