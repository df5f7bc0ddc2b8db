from .loader import (
    DEFAULT_CONFIG_TEMPLATE,
    PREPROCESSOR_NAME,
    config_from_context,
    load_config,
    source_dir_from_context,
)
from .models import Fonts, RenderConfig

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "Fonts",
    "PREPROCESSOR_NAME",
    "RenderConfig",
    "config_from_context",
    "load_config",
    "source_dir_from_context",
]
