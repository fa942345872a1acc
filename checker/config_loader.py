"""
Configuration loader for the project checker.

Handles parsing and validation of YAML configuration files.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from .config import (
    ALLOWED_FONTS,
    LAYOUT_MISMATCH_THRESHOLD,
    LAYOUT_REFERENCE_FILENAME,
    NAVIGATION_TIMEOUT_MS,
    PROJECT_STRUCTURE,
    RESET_MARGIN_TAGS,
    SEMANTIC_TAGS,
    STYLELINT_COMMAND,
    STYLELINT_CONFIG,
    STYLESHEET_ORDER,
    VALIDATOR_TIMEOUT_SECONDS,
    VALIDATOR_URL,
    VIEWPORT,
)
from .models import DirNode, FileNode, ImageDiffOptions, mkdir, mkfile


class CheckerSettings(BaseModel):
    """
    Configuration model for a checker run.
    """
    structure: DirNode = Field(default=PROJECT_STRUCTURE, description="Required project layout")
    stylesheet_order: list[str] = Field(default_factory=lambda: list(STYLESHEET_ORDER), description="Expected order of stylesheet links")
    allowed_fonts: list[str] = Field(default_factory=lambda: list(ALLOWED_FONTS), description="Whitelisted font families")
    semantic_tags: list[str] = Field(default_factory=lambda: list(SEMANTIC_TAGS), description="Tags the page must contain")
    reset_margin_tags: list[str] = Field(default_factory=lambda: list(RESET_MARGIN_TAGS), description="Tags whose margin and padding must be 0")

    layout_reference: Path = Field(Path(LAYOUT_REFERENCE_FILENAME), description="Reference screenshot of the layout")
    artifacts_dir: Optional[Path] = Field(None, description="Where screenshots are written; a temporary directory when unset")
    mismatch_threshold: float = Field(LAYOUT_MISMATCH_THRESHOLD, ge=0, le=100, description="Allowed layout mismatch, percent")
    image_diff: ImageDiffOptions = Field(default_factory=ImageDiffOptions, description="Screenshot comparison options")
    viewport: dict[str, int] = Field(default_factory=lambda: dict(VIEWPORT), description="Browser viewport size")
    navigation_timeout_ms: int = Field(NAVIGATION_TIMEOUT_MS, gt=0, description="Page load timeout")

    validator_url: str = Field(VALIDATOR_URL, description="W3C Nu checker endpoint")
    validator_timeout: int = Field(VALIDATOR_TIMEOUT_SECONDS, gt=0, description="Validator request timeout, seconds")
    stylelint_command: list[str] = Field(default_factory=lambda: list(STYLELINT_COMMAND), description="Command that runs stylelint")
    stylelint_config: dict[str, Any] = Field(default_factory=lambda: dict(STYLELINT_CONFIG), description="Stylelint configuration")


def parse_structure(entries: list, name: str = "project") -> DirNode:
    """
    Build a directory node from its YAML description.

    Strings are files; single-key mappings are directories whose value
    is the list of their entries.

    Args:
        entries: List of entry descriptions.
        name: Name of the directory being built.

    Returns:
        DirNode with the described children.

    Raises:
        ValueError: If an entry is neither a string nor a single-key mapping.
    """
    children: list[FileNode | DirNode] = []
    for entry in entries or []:
        if isinstance(entry, str):
            children.append(mkfile(entry))
        elif isinstance(entry, dict) and len(entry) == 1:
            dir_name, dir_entries = next(iter(entry.items()))
            children.append(parse_structure(dir_entries or [], name=str(dir_name)))
        else:
            raise ValueError(f"Invalid structure entry: {entry!r}")
    return mkdir(name, children)


def load_config(config_path: Path) -> CheckerSettings:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        CheckerSettings object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
        ValidationError: If config data is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        return CheckerSettings()

    if "structure" in config_data:
        config_data["structure"] = parse_structure(config_data["structure"])

    # Resolve relative paths relative to the config file location
    config_dir = config_path.parent
    for path_field in ["layout_reference", "artifacts_dir"]:
        if path_field in config_data and config_data[path_field]:
            path = Path(config_data[path_field])
            if not path.is_absolute():
                config_data[path_field] = config_dir / path

    return CheckerSettings(**config_data)
