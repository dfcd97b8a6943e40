import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from PIL import Image


Edges = Tuple[float, float, float, float]


@dataclass(frozen=True)
class FormatConfig:
    """
    Every tunable constant of the formatting pipeline.

    Fractions are relative to the width/height of the image at the stage
    that uses them. Edge tables are ordered (left, right, top, bottom).
    """

    # Minimum value of a color channel for a pixel to count as white
    white_threshold: int = 100
    # Images narrower than this (w/h) are treated as Sunday comics
    max_sunday_aspect_ratio: float = 2.0

    # End of panel 2 / start of panel 3 in a weekday strip
    twothirds_left: float = 0.655
    twothirds_right: float = 0.666
    # Hand-tuned so the folded weekday strip comes out square
    height_multiplier: float = 2.03

    # Sunday icon band starts this far down the resized icon
    sunday_icon_band_start: float = 0.35
    # Slight overlap with the comic, avoids a white seam
    sunday_icon_offset: float = 1.01
    # Weekday icon position, relative to the third panel cut / canvas height
    icon_x: float = 0.515
    icon_y: float = 0.505

    padding_amount: float = 0.009

    text_size: Tuple[float, float] = (0.03, 0.04)
    text_width_scale: Tuple[float, float] = (0.6, 1.1)
    text_stroke_weight: float = 0.09
    edges_weekday: Edges = (0.52, 0.99, 0.51, 0.99)
    edges_sunday: Edges = (0.01, 0.99, 0.71, 0.99)

    final_width: int = 1200
    # Slow, but looks best
    resize_filter: Image.Resampling = Image.LANCZOS
    font_path: Optional[str] = None

    def with_twothirds_adjust(self, percent: float) -> "FormatConfig":
        """
        Shift both weekday fold cuts by `percent` of the comic width.

        Raises ValueError if either cut leaves the (0, 1] range.
        """
        shift = percent / 100
        left = self.twothirds_left + shift
        right = self.twothirds_right + shift
        if not (0 < left <= 1 and 0 < right <= 1):
            raise ValueError(
                f"twothirds adjust of {percent}% moves the fold cut outside the comic "
                f"(left={left:.3f}, right={right:.3f})"
            )
        return replace(self, twothirds_left=left, twothirds_right=right)


def config_from_env(
    base: Optional[FormatConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> FormatConfig:
    """
    Apply COMIC_FORMAT_* environment overrides on top of `base`.

    Call `dotenv.load_dotenv()` beforehand to pick up a local .env file.
    """
    config = base or FormatConfig()
    env = os.environ if environ is None else environ

    final_width = env.get("COMIC_FORMAT_FINAL_WIDTH")
    if final_width:
        width = _parse_number("COMIC_FORMAT_FINAL_WIDTH", final_width, int)
        if width <= 0:
            raise ValueError(f"COMIC_FORMAT_FINAL_WIDTH must be positive, got {width}")
        config = replace(config, final_width=width)

    font_path = env.get("COMIC_FORMAT_FONT")
    if font_path:
        config = replace(config, font_path=font_path)

    adjust = env.get("COMIC_FORMAT_TWOTHIRDS_ADJUST")
    if adjust:
        config = config.with_twothirds_adjust(
            _parse_number("COMIC_FORMAT_TWOTHIRDS_ADJUST", adjust, float)
        )

    return config


def _parse_number(name: str, value: str, kind):
    try:
        return kind(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
