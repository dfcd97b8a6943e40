from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from PIL import Image

from .assets import list_input_images
from .codec import ImageDecodeError, ImageEncodeError, load_image, save_image
from .config import FormatConfig
from .crop import remove_padding
from .layout import classify_layout, make_square
from .render import RandomSource, add_padding, add_watermark, load_font, resize_image


def convert_image(
    img: Image.Image,
    icon: Image.Image,
    watermark: str,
    config: Optional[FormatConfig] = None,
    rng: Optional[RandomSource] = None,
) -> Image.Image:
    """
    Run one comic through every stage:
    crop -> square layout -> padding -> watermark -> final resize.
    """
    config = config or FormatConfig()

    img = remove_padding(img, config)
    layout = classify_layout(img.width, img.height, config)
    img = make_square(img, icon, layout, config)
    img = add_padding(img, config)
    img = add_watermark(img, watermark, layout, config, rng=rng)
    return resize_image(img, config)


@dataclass
class BatchReport:
    converted: List[Path] = field(default_factory=list)
    # input path -> error message
    failed: Dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class ComicFormatter:
    """
    Converts a single comic file, or every image in a directory:
    - load the icon once, shared read-only by every conversion
    - decode, convert and encode each image independently
    - a broken image is reported and skipped, the rest still get converted
    """

    def __init__(
        self,
        icon_path: Path,
        watermark: str,
        config: Optional[FormatConfig] = None,
        sort_name: bool = False,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.icon = load_image(icon_path)
        self.watermark = watermark
        self.config = config or FormatConfig()
        # Fail on a broken font before any image is touched
        load_font(self.config.font_path, 12)
        self.sort_name = sort_name
        self.rng = rng

    def convert_file(self, input_path: Path, output_path: Path) -> None:
        print(f"{input_path} -> {output_path}")
        img = load_image(input_path)
        converted = convert_image(
            img,
            self.icon,
            self.watermark,
            config=self.config,
            rng=self.rng,
        )
        save_image(converted, output_path)

    def run(self, input_path: Path, output_path: Path) -> BatchReport:
        if not input_path.exists():
            raise FileNotFoundError(f"Input file or directory does not exist: {input_path}")

        report = BatchReport()

        if input_path.is_file():
            self._convert_into_report(input_path, output_path, report)
            return report

        files = list_input_images(input_path, sort_name=self.sort_name)
        output_path.mkdir(parents=True, exist_ok=True)

        for file in files:
            self._convert_into_report(file, output_path / file.name, report)

        print(f"Converted {len(report.converted)} of {len(files)} images into {output_path}")
        return report

    def _convert_into_report(self, input_path: Path, output_path: Path, report: BatchReport) -> None:
        try:
            self.convert_file(input_path, output_path)
        except (FileNotFoundError, ImageDecodeError, ImageEncodeError) as exc:
            print(f"⚠️  Skipping {input_path}: {exc}")
            report.failed[input_path] = str(exc)
        else:
            report.converted.append(output_path)
