"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDMANIFEST_"


class Settings(BaseModel):
    workspace_root:    str = Field(default_factory=os.getcwd, description="Workspace containing the docs and tasks roots")
    docs_dir:          str = Field(default="docs",            description="Docs root, relative to the workspace")
    tasks_dir:         str = Field(default="tasks",           description="Tasks root, relative to the workspace")
    manifest_name:     str = Field(default=".manifest.json",  description="Manifest file name")
    public_dir:        str = Field(default="public",          description="Static asset directory that receives a manifest copy")
    skip_dirs:   list[str] = Field(default=["node_modules"],  description="Directory names never descended into")
    excerpt_length:    int = Field(default=150, ge=0,         description="Characters kept in a synthesized excerpt")
    excerpt_separator: str = Field(default="<!-- more -->",   description="Marker ending an explicit excerpt")
    source:            str = Field(default="auto", pattern="^(auto|live|manifest)$", description="auto, live or manifest")
    manifest_max_age:  int = Field(default=0, ge=0,           description="Seconds before a manifest is stale; 0 disables")

    @property
    def target_dir(self) -> Path:
        return Path(self.workspace_root).resolve()

    @property
    def docs_path(self) -> Path:
        return self.target_dir / self.docs_dir

    @property
    def tasks_path(self) -> Path:
        return self.target_dir / self.tasks_dir

    @property
    def manifest_path(self) -> Path:
        return self.target_dir / self.manifest_name

    @property
    def public_manifest_path(self) -> Path:
        return self.target_dir / self.public_dir / self.manifest_name


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDMANIFEST_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            # list fields take a comma-separated value
            data[name] = val.split(",") if name == "skip_dirs" else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
