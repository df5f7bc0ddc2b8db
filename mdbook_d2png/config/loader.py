"""Config loading from the mdBook context or a standalone YAML file."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RenderConfig

PREPROCESSOR_NAME = "d2-png"
DEFAULT_CONFIG_FILE = "d2png.yaml"


def load_config(cli_path: str | None = None) -> RenderConfig:
    """Load config with resolution order: CLI > project-local > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path(DEFAULT_CONFIG_FILE),
    ]

    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping")
                raw = _expand_env_vars(raw)
                return RenderConfig.model_validate(raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return RenderConfig()


def config_from_context(context: dict) -> RenderConfig:
    """Read the [preprocessor.d2-png] table out of an mdBook context."""
    table = context.get("config", {}).get("preprocessor", {}).get(PREPROCESSOR_NAME)
    if table is None:
        raise ValueError(
            f"{PREPROCESSOR_NAME} preprocessor config not found. "
            f"Add [preprocessor.{PREPROCESSOR_NAME}] section to book.toml"
        )
    try:
        return RenderConfig.model_validate(table)
    except ValidationError as e:
        raise ValueError(f"Unable to deserialize {PREPROCESSOR_NAME} preprocessor config: {e}") from e


def source_dir_from_context(context: dict) -> Path:
    """Absolute path of the book's source directory (root / book.src)."""
    root = Path(context.get("root", "."))
    src = context.get("config", {}).get("book", {}).get("src", "src")
    return root / src


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `mdbook-d2-png config init`
DEFAULT_CONFIG_TEMPLATE = """\
# d2png.yaml — used by `mdbook-d2-png render`.
# Inside an mdBook build the same keys are read from [preprocessor.d2-png] in book.toml.

path: "d2"                     # d2 binary
output-dir: "d2"               # directory under the source root for generated PNGs
inline: false                  # embed PNGs as base64 data URIs instead of files
# layout: "dagre"              # dagre | elk | tala
# theme-id: "0"
# dark-theme-id: "200"
# fonts:
#   regular: "fonts/Regular.ttf"
#   italic: "fonts/Italic.ttf"
#   bold: "fonts/Bold.ttf"
"""
