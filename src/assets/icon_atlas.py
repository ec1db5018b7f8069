"""Icon sprite sheet builder.

This module composites every module icon into one fixed-width grid,
records the grid cell of each icon, and renders the CSS rule that
embeds the sheet as a data URI. Cell (0, 0) always holds the blank
icon so unknown names fall back to it.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from core.constants import (
    BLANK_ICON_FILE_NAME,
    ICON_CELL_HEIGHT,
    ICON_CELL_WIDTH,
    ICON_CSS_SELECTOR,
    ICON_GLOB,
    ICON_GRID_COLUMNS,
)
from core.errors import CatalogAtlasError
from core.logging_config import get_logger
from core.types import IconAtlas, IconCoordinate

_LOGGER = get_logger(__name__)


def build_icon_atlas(
    icon_dir: Path,
    columns: int = ICON_GRID_COLUMNS,
    cell_size: tuple[int, int] = (ICON_CELL_WIDTH, ICON_CELL_HEIGHT),
) -> IconAtlas:
    """Composite all icons of a directory into a sprite sheet.

    Args:
        icon_dir: Directory with one PNG per module plus ``blank.png``.
        columns: Number of icons per row.
        cell_size: Width and height of one grid cell in pixels.

    Returns:
        Atlas PNG bytes, CSS rule, and coordinate table.

    Raises:
        CatalogAtlasError: If the directory, the blank icon, or an icon is unreadable.
    """
    icon_files = list_icon_files(icon_dir)
    cell_width, cell_height = cell_size
    rows = (len(icon_files) + columns - 1) // columns
    sheet = Image.new("RGBA", (cell_width * columns, cell_height * rows), (0, 0, 0, 0))
    coordinates: dict[str, IconCoordinate] = {}
    for index, icon_path in enumerate(icon_files):
        cell = IconCoordinate(index % columns, index // columns)
        icon = _load_icon(icon_path, cell_size)
        sheet.alpha_composite(icon, dest=(cell.x * cell_width, cell.y * cell_height))
        coordinates[icon_path.stem] = cell
    png_bytes = _encode_png(sheet)
    _LOGGER.info("icon_atlas_built", icon_count=len(icon_files), rows=rows, bytes=len(png_bytes))
    return IconAtlas(
        png_bytes=png_bytes,
        css_rule=build_css_rule(png_bytes),
        coordinates=coordinates,
    )


def list_icon_files(icon_dir: Path) -> list[Path]:
    """List icon files with the blank icon first and the rest by name.

    Args:
        icon_dir: Icon directory.

    Returns:
        Ordered icon paths.

    Raises:
        CatalogAtlasError: If the directory or the blank icon is missing.
    """
    if not icon_dir.is_dir():
        raise CatalogAtlasError(
            f"Icon directory not found at {icon_dir}. Create it and add {BLANK_ICON_FILE_NAME}."
        )
    icon_files = sorted(
        (path for path in icon_dir.glob(ICON_GLOB) if path.is_file()),
        key=lambda path: (path.name != BLANK_ICON_FILE_NAME, path.name),
    )
    if not icon_files or icon_files[0].name != BLANK_ICON_FILE_NAME:
        raise CatalogAtlasError(
            f"Missing {BLANK_ICON_FILE_NAME} in {icon_dir}. "
            "The blank icon must exist because it backs every module without an icon."
        )
    return icon_files


def build_css_rule(png_bytes: bytes) -> str:
    """Render the stylesheet rule embedding the sheet as a data URI."""
    encoded = base64.b64encode(png_bytes).decode("ascii")
    return f"{ICON_CSS_SELECTOR}{{background-image:url(data:image/png;base64,{encoded})}}"


def _load_icon(icon_path: Path, cell_size: tuple[int, int]) -> Image.Image:
    """Decode an icon as RGBA sized to one grid cell.

    Raises:
        CatalogAtlasError: If the file is not a readable image.
    """
    try:
        with Image.open(icon_path) as source:
            icon = source.convert("RGBA")
    except (OSError, UnidentifiedImageError) as error:
        raise CatalogAtlasError(f"Failed to read icon {icon_path}: {error}") from error
    if icon.size != cell_size:
        _LOGGER.warning("icon_resized", icon=icon_path.name, size=list(icon.size))
        icon = icon.resize(cell_size)
    return icon


def _encode_png(sheet: Image.Image) -> bytes:
    buffer = io.BytesIO()
    sheet.save(buffer, format="PNG")
    return buffer.getvalue()
