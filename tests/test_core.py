"""Tests for the end-to-end pipeline and the batch driver."""

from dataclasses import replace

import pytest
from PIL import Image

from comic_format.config import FormatConfig
from comic_format.core import BatchReport, ComicFormatter, convert_image
from tests.helpers import FixedRandom, dark_bbox, white

INK = (90, 90, 90, 255)


def sunday_comic():
    """White sheet with an 1800x1100 block of ink in it."""
    img = white(2000, 1200)
    img.paste(INK, (100, 50, 1900, 1150))
    return img


class TestConvertImage:
    def test_single_pixel_sheet_reaches_final_width(self, icon):
        img = white(2000, 1200)
        img.putpixel((100, 50), (0, 0, 0, 255))

        out = convert_image(img, icon, "TEST", rng=FixedRandom(0.5))

        assert out.width == 1200

    def test_sunday_watermark_in_bottom_region(self):
        icon = Image.new("RGBA", (64, 64), INK)

        out = convert_image(sunday_comic(), icon, "TEST", rng=FixedRandom(0.5))

        assert out.size == (1200, 1200)
        # Only the watermark outline is dark; content and icon are mid gray
        bbox = dark_bbox(out)
        assert bbox is not None
        assert bbox[1] >= int(1200 * 0.71) - 15

    def test_weekday_strip(self, icon):
        img = white(1000, 400)
        img.paste(INK, (50, 50, 950, 350))
        config = FormatConfig()

        out = convert_image(img, icon, "TEST", config=config, rng=FixedRandom(0.2))

        # 900x300 strip folds to int(900*0.655) x int(300*2.03), plus padding
        square_w, square_h = int(900 * 0.655), int(300 * 2.03)
        padding = int(min(square_w, square_h) * 0.009)
        expected_h = round(1200 * (square_h + 2 * padding) / (square_w + 2 * padding))
        assert out.size == (1200, expected_h)

    def test_custom_final_width(self, icon):
        config = replace(FormatConfig(), final_width=300)

        out = convert_image(sunday_comic(), icon, "TEST", config=config)

        assert out.width == 300

    def test_input_not_mutated(self, icon):
        img = sunday_comic()
        before = img.copy()

        convert_image(img, icon, "TEST", rng=FixedRandom(0.5))

        assert img.tobytes() == before.tobytes()


@pytest.fixture
def small_config():
    return replace(FormatConfig(), final_width=200)


class TestComicFormatter:
    """Tests for single-file and directory conversion."""

    def test_convert_single_file(self, tmp_path, icon_path, small_config):
        source = tmp_path / "strip.png"
        sunday_comic().save(source)
        target = tmp_path / "out.png"

        formatter = ComicFormatter(icon_path, "TEST", config=small_config)
        report = formatter.run(source, target)

        assert report.ok
        assert report.converted == [target]
        with Image.open(target) as img:
            assert img.width == 200

    def test_directory_skips_broken_images(self, tmp_path, icon_path, small_config):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        sunday_comic().save(input_dir / "a.png")
        sunday_comic().convert("RGB").save(input_dir / "b.jpg")
        (input_dir / "broken.png").write_bytes(b"not an image")
        (input_dir / "notes.txt").write_text("ignored")
        output_dir = tmp_path / "out" / "nested"

        formatter = ComicFormatter(icon_path, "TEST", config=small_config, sort_name=True)
        report = formatter.run(input_dir, output_dir)

        assert not report.ok
        assert report.converted == [output_dir / "a.png", output_dir / "b.jpg"]
        assert list(report.failed) == [input_dir / "broken.png"]
        assert (output_dir / "a.png").exists()
        assert (output_dir / "b.jpg").exists()
        assert not (output_dir / "broken.png").exists()

    def test_encode_failure_is_reported(self, tmp_path, icon_path, small_config):
        source = tmp_path / "strip.png"
        sunday_comic().save(source)

        formatter = ComicFormatter(icon_path, "TEST", config=small_config)
        report = formatter.run(source, tmp_path / "out.unknownext")

        assert report.converted == []
        assert source in report.failed

    def test_missing_input_raises(self, tmp_path, icon_path):
        formatter = ComicFormatter(icon_path, "TEST")

        with pytest.raises(FileNotFoundError):
            formatter.run(tmp_path / "missing", tmp_path / "out")

    def test_missing_icon_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ComicFormatter(tmp_path / "nope.png", "TEST")


class TestBatchReport:
    def test_ok(self):
        report = BatchReport()
        assert report.ok

        report.failed[object()] = "boom"
        assert not report.ok


class TestFormatterSetup:
    def test_broken_font_fails_before_batch(self, tmp_path, icon_path):
        config = replace(FormatConfig(), font_path=str(tmp_path / "missing.ttf"))

        with pytest.raises(OSError):
            ComicFormatter(icon_path, "TEST", config=config)

    def test_oversized_input_is_skipped(self, tmp_path, icon_path, small_config, monkeypatch):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        sunday_comic().save(input_dir / "a.png")
        white(400, 400).save(input_dir / "b.png")
        formatter = ComicFormatter(icon_path, "TEST", config=small_config, sort_name=True)
        # a.png is 2000x1200, far above twice this limit; b.png is not
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100_000)

        report = formatter.run(input_dir, tmp_path / "out")

        assert list(report.failed) == [input_dir / "a.png"]
        assert report.converted == [tmp_path / "out" / "b.png"]
