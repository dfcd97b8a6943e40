from typing import Tuple

from PIL import Image, ImageChops

from .config import FormatConfig


def is_white_enough(pixel: Tuple[int, int, int, int], threshold: int) -> bool:
    """
    A pixel is white when it is fully opaque and no channel is below threshold.
    """
    r, g, b, a = pixel
    if a < 255:
        return False
    return r >= threshold and g >= threshold and b >= threshold


def remove_padding(img: Image.Image, config: FormatConfig) -> Image.Image:
    """
    Crop away the white margin around the comic, of any thickness.

    Returns the image untouched if it has no non-white pixel at all.
    """
    img = img.convert("RGBA")
    threshold = config.white_threshold

    r, g, b, a = img.split()
    # 255 wherever the band alone makes the pixel non-white
    mask = ImageChops.lighter(
        ImageChops.lighter(
            r.point(lambda v: 255 if v < threshold else 0),
            g.point(lambda v: 255 if v < threshold else 0),
        ),
        ImageChops.lighter(
            b.point(lambda v: 255 if v < threshold else 0),
            a.point(lambda v: 255 if v < 255 else 0),
        ),
    )

    bbox = mask.getbbox()
    if bbox is None:
        return img
    return img.crop(bbox)
