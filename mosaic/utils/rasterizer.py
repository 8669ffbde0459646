"""Preview compositor — draws a capture's placements and outlines onto a Pillow canvas.

For debugging the installation; the live display does its own drawing and fading.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from PIL import Image, ImageDraw

from mosaic.engine.context import Contour, PlacedRectangle

_BACKGROUND = (255, 255, 255)
_PLACEHOLDER_FILL = (0, 0, 0)
_PLACEHOLDER_BORDER = (255, 255, 255)
_OUTLINE_COLOR = (0, 0, 0)


def render_preview(
    placements: Iterable[PlacedRectangle],
    size: tuple[int, int],
    contours: Sequence[Contour] = (),
    outline_width: int = 2,
) -> Image.Image:
    """Composite the placed images (or black placeholders) over optional outlines."""
    canvas = Image.new("RGB", size, _BACKGROUND)
    draw = ImageDraw.Draw(canvas)

    for contour in contours:
        if len(contour) < 2:
            continue
        pts = [(float(x), float(y)) for x, y in contour.points]
        draw.line(pts + pts[:1], fill=_OUTLINE_COLOR, width=outline_width)

    for rect in placements:
        x0, y0, x1, y1 = (int(round(v)) for v in rect.bounds)
        w, h = max(1, x1 - x0), max(1, y1 - y0)
        source = rect.image.image if rect.image is not None else None
        if source is not None:
            tile = source.convert("RGBA").resize((w, h), Image.Resampling.LANCZOS)
            canvas.paste(tile, (x0, y0), tile)
        else:
            draw.rectangle([x0, y0, x0 + w - 1, y0 + h - 1], fill=_PLACEHOLDER_FILL, outline=_PLACEHOLDER_BORDER)

    return canvas
