"""
Comic formatting pipeline for square social-media posts.

Modules:
- core: per-image pipeline and batch driver
- crop: whitespace margin removal
- layout: Sunday/weekday classification and square composition
- render: padding, outlined watermark text, and final resize
- codec: image decoding/encoding with typed errors
- assets: input image discovery
- config: tunable constants and environment overrides
"""

from .config import FormatConfig, config_from_env
from .core import BatchReport, ComicFormatter, convert_image
from .layout import Layout

__all__ = [
    "BatchReport",
    "ComicFormatter",
    "FormatConfig",
    "Layout",
    "config_from_env",
    "convert_image",
]
