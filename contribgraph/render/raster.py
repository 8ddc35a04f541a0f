import io
import logging
from pathlib import Path
from typing import Protocol

from PIL import Image

from contribgraph.core.errors import RenderError


logger = logging.getLogger(__name__)


class ImageEncoder(Protocol):
    def encode(self, svg_markup: str) -> bytes: ...


class CairoPngEncoder:
    """Rasterize SVG markup with cairosvg.

    When `background` is set, transparent pixels are flattened onto that
    colour with Pillow before the PNG is re-encoded losslessly.
    """

    def __init__(self, background: str | None = None) -> None:
        self.background = background

    def encode(self, svg_markup: str) -> bytes:
        import cairosvg

        png_bytes = cairosvg.svg2png(bytestring=svg_markup.encode("utf-8"))
        if self.background is None:
            return png_bytes

        with Image.open(io.BytesIO(png_bytes)) as image:
            rgba = image.convert("RGBA")
        backdrop = Image.new("RGBA", rgba.size, self.background)
        flattened = Image.alpha_composite(backdrop, rgba).convert("RGB")

        buffer = io.BytesIO()
        flattened.save(buffer, format="PNG", optimize=True)
        return buffer.getvalue()


def write_png(svg_markup: str, output_path: str | Path, encoder: ImageEncoder) -> Path:
    """Rasterize markup and write the PNG to `output_path`.

    Raises:
        RenderError: If rasterization fails or the file cannot be written.
    """

    path = Path(output_path)
    try:
        png_bytes = encoder.encode(svg_markup)
    except Exception as exc:
        raise RenderError(f"could not rasterize SVG: {exc}") from exc

    try:
        path.write_bytes(png_bytes)
    except OSError as exc:
        raise RenderError(f"could not write {path}: {exc}") from exc

    logger.info("Wrote %d bytes to %s", len(png_bytes), path)
    return path
