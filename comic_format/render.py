import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple

from PIL import Image, ImageDraw, ImageFont

from .config import Edges, FormatConfig
from .layout import WHITE, Layout, overlay


BLACK = (0, 0, 0, 255)

# Diagonals first, then cardinals
STROKE_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (1, -1),
    (-1, 1),
    (1, 1),
    (0, -1),
    (-1, 0),
    (1, 0),
    (0, 1),
)

FontLoader = Callable[[Optional[str], int], ImageFont.FreeTypeFont]


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float:
        ...


@dataclass(frozen=True)
class PlacementBounds:
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @classmethod
    def from_edges(
        cls,
        width: int,
        height: int,
        edges: Edges,
        text_width: int,
        text_height: int,
    ) -> "PlacementBounds":
        """
        Region where the text origin may go so the text stays inside `edges`.

        When the text is larger than the region, the range collapses to its
        minimum instead of inverting.
        """
        left, right, top, bottom = edges
        min_x = int(width * left)
        max_x = int(width * right) - text_width
        min_y = int(height * top)
        max_y = int(height * bottom) - text_height
        return cls(
            min_x=min_x,
            max_x=max(min_x, max_x),
            min_y=min_y,
            max_y=max(min_y, max_y),
        )

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass(frozen=True)
class WatermarkJob:
    text: str
    scale_x: float
    scale_y: float
    origin: Tuple[int, int]
    stroke_offset: int
    bounds: PlacementBounds


def add_padding(img: Image.Image, config: FormatConfig) -> Image.Image:
    """
    Add a thin white border so the artwork never touches the edge.
    """
    width, height = img.size
    padding = int(min(width, height) * config.padding_amount)

    padded = Image.new("RGBA", (width + padding * 2, height + padding * 2), WHITE)
    overlay(padded, img.convert("RGBA"), padding, padding)
    return padded


def render_text_mask(
    text: str,
    scale_x: float,
    scale_y: float,
    font: ImageFont.FreeTypeFont,
    resize_filter: Image.Resampling = Image.LANCZOS,
) -> Image.Image:
    """
    Rasterize `text` into an L mask, `font` being sized for `scale_y`.

    The glyph run is stretched horizontally by scale_x / scale_y, which
    squishes or widens the text without changing its height.
    """
    left, top, right, bottom = font.getbbox(text)
    mask = Image.new("L", (max(1, right - left), max(1, bottom - top)), 0)
    ImageDraw.Draw(mask).text((-left, -top), text, font=font, fill=255)

    stretched_width = max(1, round(mask.width * scale_x / scale_y))
    return mask.resize((stretched_width, mask.height), resize_filter)


def plan_watermark(
    size: Tuple[int, int],
    text: str,
    layout: Layout,
    config: FormatConfig,
    rng: RandomSource,
    font_loader: Optional[FontLoader] = None,
) -> Tuple[WatermarkJob, Image.Image]:
    """
    Pick a random text size, distortion and position for the watermark.

    Returns the job together with the rendered text mask it was measured on.
    """
    font_loader = font_loader or load_font
    width, height = size

    text_height = max(width, height) * rng.uniform(*config.text_size)
    stroke_offset = round(text_height * config.text_stroke_weight)
    scale_x = text_height * rng.uniform(*config.text_width_scale)
    scale_y = text_height

    font = font_loader(config.font_path, max(1, round(scale_y)))
    mask = render_text_mask(text, scale_x, scale_y, font, config.resize_filter)

    edges = config.edges_sunday if layout is Layout.SUNDAY else config.edges_weekday
    bounds = PlacementBounds.from_edges(width, height, edges, mask.width, mask.height)

    x = int(rng.uniform(bounds.min_x, bounds.max_x))
    y = int(rng.uniform(bounds.min_y, bounds.max_y))

    job = WatermarkJob(
        text=text,
        scale_x=scale_x,
        scale_y=scale_y,
        origin=(x, y),
        stroke_offset=stroke_offset,
        bounds=bounds,
    )
    return job, mask


def draw_watermark(img: Image.Image, job: WatermarkJob, mask: Image.Image) -> Image.Image:
    """
    Draw white text with a black outline: eight offset black passes, then
    the white fill on top.
    """
    img = img.convert("RGBA")
    x, y = job.origin
    offset = job.stroke_offset

    for dir_x, dir_y in STROKE_DIRECTIONS:
        img.paste(BLACK, (x + offset * dir_x, y + offset * dir_y), mask)

    img.paste(WHITE, (x, y), mask)
    return img


def add_watermark(
    img: Image.Image,
    text: str,
    layout: Layout,
    config: FormatConfig,
    rng: Optional[RandomSource] = None,
    font_loader: Optional[FontLoader] = None,
) -> Image.Image:
    if not text:
        return img

    job, mask = plan_watermark(
        img.size,
        text,
        layout,
        config,
        rng or random.Random(),
        font_loader=font_loader,
    )
    return draw_watermark(img, job, mask)


def resize_image(img: Image.Image, config: FormatConfig) -> Image.Image:
    """
    Scale to the final width, keeping the aspect ratio.
    """
    width, height = img.size
    final_height = max(1, round(config.final_width * height / width))
    return img.resize((config.final_width, final_height), config.resize_filter)


def load_font(font_path: Optional[str], size: int) -> ImageFont.FreeTypeFont:
    """
    Load a scalable TrueType font for the watermark.

    Tries the configured font_path, then fonts shipped next to the project,
    then common system fonts, and finally Pillow's built-in scalable font.
    """
    if font_path:
        # An explicit font that fails to load is a configuration error
        return ImageFont.truetype(font_path, size=size)

    project_root = Path(__file__).parent.parent
    fonts_dir = project_root / "fonts"

    font_files = []
    if fonts_dir.exists():
        font_files.extend(sorted(fonts_dir.glob("*.ttf")))
        font_files.extend(sorted(fonts_dir.glob("*.otf")))

    font_files.extend(
        Path(p)
        for p in [
            # Linux
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
            # macOS
            "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
            "/Library/Fonts/Arial Bold.ttf",
            # Windows
            "C:/Windows/Fonts/arialbd.ttf",
        ]
    )

    for font_file in font_files:
        if not font_file.exists():
            continue
        try:
            return ImageFont.truetype(str(font_file), size=size)
        except OSError:
            continue

    return ImageFont.load_default(size=size)
