from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError


# Formats that cannot store an alpha channel
OPAQUE_FORMATS = {".jpg", ".jpeg", ".bmp"}


class ImageDecodeError(ValueError):
    """Raised when a file exists but cannot be decoded as an image."""


class ImageEncodeError(OSError):
    """Raised when an image cannot be written to the requested path."""


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Decode an image file into an RGBA raster.

    Raises:
        FileNotFoundError: if the path does not point to a file.
        ImageDecodeError: if the file is not a readable image.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")

    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Cannot decode image {path}: {exc}") from exc


def save_image(img: Image.Image, path: Union[str, Path]) -> None:
    """
    Encode an image, with the format inferred from the file extension.
    """
    path = Path(path)
    if path.suffix.lower() in OPAQUE_FORMATS:
        img = img.convert("RGB")

    try:
        img.save(path)
    except (ValueError, OSError) as exc:
        raise ImageEncodeError(f"Cannot write image {path}: {exc}") from exc
