from PIL import Image


class FixedRandom:
    """Deterministic random source: always the same fraction of the range."""

    def __init__(self, fraction: float = 0.5) -> None:
        self.fraction = fraction

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.fraction


def white(width, height):
    return Image.new("RGBA", (width, height), (255, 255, 255, 255))


def dark_bbox(img, level=40):
    """Bounding box of pixels darker than `level`, or None."""
    return img.convert("L").point(lambda v: 255 if v < level else 0).getbbox()
