"""mdbook-d2-png — mdBook preprocessor rendering D2 diagrams to PNG."""

from mdbook_d2png.backend import Backend
from mdbook_d2png.config import RenderConfig, load_config
from mdbook_d2png.preprocessor import D2Preprocessor, process_events, render_chapter

__version__ = "0.3.7"

__all__ = [
    "Backend",
    "D2Preprocessor",
    "RenderConfig",
    "load_config",
    "process_events",
    "render_chapter",
]
