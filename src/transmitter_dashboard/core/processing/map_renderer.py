"""
Server-side rendering of the deployment map as a PNG.
Draws the background grid and the marker layer exactly as the client would,
so a snapshot of the current view can be embedded or exported.
"""
import io
import logging
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from transmitter_dashboard.core.processing.marker_layer import LABEL_OFFSET_Y, MARKER_RADIUS, Marker

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "#374151"
GRID_COLOR = "#4b5563"
GRID_LINES = 20
GRID_SPACING_X = 40
GRID_SPACING_Y = 30
OUTLINE_COLOR = "white"
OUTLINE_WIDTH = 2
SELECTED_RING_COLOR = "#facc15"
SELECTED_RING_RADIUS = MARKER_RADIUS + 5


def _draw_grid(draw: ImageDraw.ImageDraw, width: int, height: int):
    for i in range(GRID_LINES):
        x = i * GRID_SPACING_X
        y = i * GRID_SPACING_Y
        draw.line([(x, 0), (x, height)], fill=GRID_COLOR, width=1)
        draw.line([(0, y), (width, y)], fill=GRID_COLOR, width=1)


def _draw_marker(draw: ImageDraw.ImageDraw, marker: Marker, font):
    x, y = marker.x, marker.y
    if marker.selected:
        r = SELECTED_RING_RADIUS
        draw.ellipse([x - r, y - r, x + r, y + r], outline=SELECTED_RING_COLOR, width=3)
    r = MARKER_RADIUS
    draw.ellipse([x - r, y - r, x + r, y + r], fill=marker.color, outline=OUTLINE_COLOR, width=OUTLINE_WIDTH)
    # Centre the label horizontally above the marker
    text_width = draw.textlength(marker.label, font=font)
    draw.text((x - text_width / 2, y + LABEL_OFFSET_Y - 12), marker.label, fill=OUTLINE_COLOR, font=font)


def render_map_png(markers: Sequence[Marker], width: int = 800, height: int = 600) -> bytes:
    """Render the viewport with the given markers. Off-screen markers are simply clipped."""
    image = Image.new("RGBA", (width, height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    _draw_grid(draw, width, height)
    for marker in markers:
        _draw_marker(draw, marker, font)

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    png = buf.getvalue()
    logger.debug(f"Rendered map with {len(markers)} markers ({len(png)} bytes)")
    return png
