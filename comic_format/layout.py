from enum import Enum

from PIL import Image

from .config import FormatConfig


WHITE = (255, 255, 255, 255)


class Layout(Enum):
    # Near-square, multi-row strip: kept as is, icon band added below
    SUNDAY = "sunday"
    # Long 3-panel strip: third panel folded below the first two
    WEEKDAY = "weekday"


def classify_layout(width: int, height: int, config: FormatConfig) -> Layout:
    if width / height < config.max_sunday_aspect_ratio:
        return Layout.SUNDAY
    return Layout.WEEKDAY


def overlay(canvas: Image.Image, layer: Image.Image, x: int, y: int) -> None:
    """
    Alpha-composite `layer` onto `canvas` in place, with its top-left corner
    at (x, y). Offsets may be negative; whatever falls outside is clipped.
    """
    left, top = max(0, -x), max(0, -y)
    if left >= layer.width or top >= layer.height:
        return
    if x >= canvas.width or y >= canvas.height:
        return
    canvas.alpha_composite(layer, dest=(x + left, y + top), source=(left, top))


def make_square(
    img: Image.Image,
    icon: Image.Image,
    layout: Layout,
    config: FormatConfig,
) -> Image.Image:
    """
    Make the comic fit a square canvas.

    - Sunday: comic unchanged, a band of the icon fills the space below it.
    - Weekday: third panel wraps below the first two to form a 2x2 grid,
      the icon fills the last cell.
    """
    img = img.convert("RGBA")
    icon = icon.convert("RGBA")
    width, height = img.size

    if layout is Layout.SUNDAY:
        square = Image.new("RGBA", (width, width), WHITE)
        overlay(square, img, 0, 0)

        band = icon.resize((width, width), config.resize_filter)
        band = band.crop((0, int(width * config.sunday_icon_band_start), width, width))
        overlay(square, band, 0, int(height * config.sunday_icon_offset))
        return square

    twothirds_left = int(width * config.twothirds_left)
    twothirds_right = int(width * config.twothirds_right)

    square_width = twothirds_left
    square_height = int(height * config.height_multiplier)

    square = Image.new("RGBA", (square_width, square_height), WHITE)
    # Panels 1-2; panel 3 falls outside the narrower canvas
    overlay(square, img, 0, 0)
    # Panel 3, shifted left into view on the second row
    overlay(square, img, -twothirds_right, square_height - height)

    size = max(square_width, square_height) // 2
    icon = icon.resize((size, size), config.resize_filter)
    overlay(
        square,
        icon,
        int(twothirds_right * config.icon_x),
        int(square_height * config.icon_y),
    )
    return square
