from pathlib import Path
from typing import List

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff"}


def list_input_images(input_dir: Path, sort_name: bool = False) -> List[Path]:
    """
    Image files directly inside `input_dir`, in directory order unless
    `sort_name` is set.
    """
    files = [
        path
        for path in input_dir.iterdir()
        if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
    ]
    if sort_name:
        files.sort(key=lambda path: path.name)
    return files
