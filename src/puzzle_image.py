"""
Puzzle Image Export

Renders a puzzle snapshot to a PNG with the sum headers, revealed
digits and (optionally) the solution for the blank cells.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from src.puzzle import PuzzleSnapshot

logger = logging.getLogger(__name__)


# Export settings
EXPORT_DIR = Path("./exports")
MAX_EXPORT_IMAGES = 10

# Layout
CELL_SIZE = 50
MARGIN = 10

# Colors
BACKGROUND = "white"
GRID_LINE = "#333333"
HEADER_FILL = "#e3f2fd"
HEADER_TEXT = "#1565C0"
REVEALED_TEXT = "#333333"
SOLUTION_TEXT = "#4CAF50"


def _load_font(size: int) -> ImageFont.ImageFont:
    """Load a TrueType font, falling back to Pillow's built-in font."""
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _draw_centered(draw: ImageDraw.ImageDraw, box, text: str, font, fill: str) -> None:
    """Draw text centered inside a (x0, y0, x1, y1) box."""
    x0, y0, x1, y1 = box
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = x0 + (x1 - x0 - (right - left)) / 2 - left
    y = y0 + (y1 - y0 - (bottom - top)) / 2 - top
    draw.text((x, y), text, fill=fill, font=font)


def render_puzzle_image(snapshot: PuzzleSnapshot, show_solution: bool = False) -> Image.Image:
    """
    Render the puzzle grid with its row and column sums.

    Layout matches the play window: a blank corner, a header row of
    column sums, then one row-sum header per grid row.

    Args:
        snapshot: Generated puzzle
        show_solution: Draw the answers into the blank cells

    Returns:
        RGB PIL Image
    """
    cells = snapshot.size + 1
    side = cells * CELL_SIZE + 2 * MARGIN
    footer = CELL_SIZE // 2

    image = Image.new("RGB", (side, side + footer), BACKGROUND)
    draw = ImageDraw.Draw(image)
    font = _load_font(CELL_SIZE // 2)
    small_font = _load_font(CELL_SIZE // 4)

    def cell_box(row: int, col: int):
        x0 = MARGIN + col * CELL_SIZE
        y0 = MARGIN + row * CELL_SIZE
        return (x0, y0, x0 + CELL_SIZE, y0 + CELL_SIZE)

    # Column sum headers
    for col, total in enumerate(snapshot.col_sums):
        box = cell_box(0, col + 1)
        draw.rectangle(box, fill=HEADER_FILL, outline=GRID_LINE)
        _draw_centered(draw, box, str(total), font, HEADER_TEXT)

    for row in range(snapshot.size):
        # Row sum header
        box = cell_box(row + 1, 0)
        draw.rectangle(box, fill=HEADER_FILL, outline=GRID_LINE)
        _draw_centered(draw, box, str(snapshot.row_sums[row]), font, HEADER_TEXT)

        for col in range(snapshot.size):
            box = cell_box(row + 1, col + 1)
            draw.rectangle(box, fill=BACKGROUND, outline=GRID_LINE)

            value = snapshot.puzzle[row][col]
            if value is not None:
                _draw_centered(draw, box, str(value), font, REVEALED_TEXT)
            elif show_solution:
                _draw_centered(draw, box, str(snapshot.solution[row][col]), font, SOLUTION_TEXT)

    # Difficulty footer
    footer_box = (MARGIN, side - MARGIN, side - MARGIN, side + footer - MARGIN)
    _draw_centered(draw, footer_box, f"Difficulty: {snapshot.level.display}",
                   small_font, GRID_LINE)

    return image


def save_puzzle_image(snapshot: PuzzleSnapshot, path: Optional[Path] = None,
                      show_solution: bool = False) -> Path:
    """
    Render and save a puzzle image as PNG.

    Args:
        snapshot: Generated puzzle
        path: Output file path (timestamped file in EXPORT_DIR if None)
        show_solution: Draw the answers into the blank cells

    Returns:
        Path of the written file
    """
    export = path is None
    if export:
        EXPORT_DIR.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        path = EXPORT_DIR / f"puzzle_{timestamp}.png"

    image = render_puzzle_image(snapshot, show_solution=show_solution)
    image.save(path, "PNG")
    logger.info(f"Puzzle image saved: {path}")

    # Only timestamped exports are pruned
    if export:
        _cleanup_exports()
    return path


def _cleanup_exports() -> None:
    """Remove old exports, keeping only the most recent MAX_EXPORT_IMAGES."""
    if not EXPORT_DIR.exists():
        return

    # Get all exports sorted by modification time
    export_files = sorted(
        EXPORT_DIR.glob("puzzle_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in export_files[MAX_EXPORT_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old export {old_file}: {e}")
