from __future__ import annotations

import logging
from io import BytesIO

from openpyxl.drawing.image import Image as ExcelImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.utils import get_column_letter
from openpyxl.utils.units import pixels_to_EMU
from openpyxl.worksheet.worksheet import Worksheet
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..config.loader import DEFAULT_SETTINGS, ExportSettings
from ..errors import ImageDecodeError

"""Image embedding for image cells.

Pictures are scaled to fit the bound box (settings.image_max_width x
settings.image_max_height) keeping their aspect ratio, anchored with zero
offset at the target cell, and the anchor row/column are resized to hold them.
"""

__all__ = [
    "scale_image",
    "decode_image_size",
    "add_image",
]

logger = logging.getLogger(__name__)


def scale_image(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale ``(width, height)`` to fit the bound box, rounding toward zero.

    Images smaller than the box are scaled up as well; the ratio is always
    ``min(max_width / width, max_height / height)``.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size: {width}x{height}")
    ratio = min(max_width / width, max_height / height)
    return int(width * ratio), int(height * ratio)


def decode_image_size(data: bytes) -> tuple[int, int]:
    """Decode ``data`` fully with Pillow and return its intrinsic size.

    Raises:
        ImageDecodeError: If Pillow cannot identify or decode the bytes
    """
    try:
        with PILImage.open(BytesIO(data)) as img:
            # open() は遅延読み込みなので load() で破損データも検出する
            img.load()
            return img.size
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"cannot decode image ({len(data)} bytes): {e}") from e


def add_image(
    worksheet: Worksheet,
    data: bytes | None,
    row: int,
    column: int,
    settings: ExportSettings = DEFAULT_SETTINGS,
) -> ExcelImage | None:
    """Embed ``data`` as a picture anchored at the 1-based cell (row, column).

    The one-cell anchor uses the 0-based marker (row - 1, column - 1) with no
    pixel offset. The anchor row height becomes the scaled picture height and
    the anchor column width becomes the bound width.

    Returns:
        The embedded openpyxl image, or None when ``data`` is None
    """
    if data is None:
        return None

    intrinsic_width, intrinsic_height = decode_image_size(data)
    width, height = scale_image(
        intrinsic_width, intrinsic_height, settings.image_max_width, settings.image_max_height
    )

    picture = ExcelImage(BytesIO(data))
    picture.width = width
    picture.height = height

    # openpyxl の anchor は 0-based
    marker = AnchorMarker(col=column - 1, colOff=0, row=row - 1, rowOff=0)
    extent = XDRPositiveSize2D(cx=pixels_to_EMU(width), cy=pixels_to_EMU(height))
    picture.anchor = OneCellAnchor(_from=marker, ext=extent)
    worksheet.add_image(picture)

    column_letter = get_column_letter(column)
    worksheet.row_dimensions[row].height = height
    worksheet.column_dimensions[column_letter].width = settings.image_max_width

    logger.debug(
        f"image embedded sheet={worksheet.title} cell={column_letter}{row} "
        f"size={intrinsic_width}x{intrinsic_height}->{width}x{height}"
    )
    return picture
