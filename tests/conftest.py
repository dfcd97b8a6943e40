import pytest
from PIL import Image

from comic_format.config import FormatConfig


@pytest.fixture
def config():
    return FormatConfig()


@pytest.fixture
def icon():
    return Image.new("RGBA", (64, 64), (255, 0, 255, 255))


@pytest.fixture
def icon_path(tmp_path, icon):
    path = tmp_path / "icon.png"
    icon.save(path)
    return path
