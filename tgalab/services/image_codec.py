"""Кодек изображения поверх кодека заголовка, плюс мосты к файлам и Pillow.

Пиксели на диске идут тройками (B, G, R), построчно, в порядке хранения.
В памяти: массив (height, width, 3) в порядке RGB.
"""
from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from tgalab.models.errors import MalformedError, TruncatedError
from tgalab.models.header_model import Header
from tgalab.models.image_model import RasterImage
from tgalab.services.header_codec import decode_header, encode_header

logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 3


def decode_image(data: bytes, check_profile: bool = False) -> RasterImage:
    """Декодирует заголовок и `width*height` пикселей.

    Args:
        data: Содержимое файла.
        check_profile: Дополнительно проверить профиль «несжатый truecolor 24 бит».

    Raises:
        TruncatedError: если байт меньше, чем `18 + 3*width*height`.
        MalformedError: при нулевой ширине/высоте или нарушении профиля.
    """
    header, offset = decode_header(data)
    if header.width == 0 or header.height == 0:
        raise MalformedError(f"Нулевой размер изображения: {header.width}×{header.height}")
    if check_profile:
        header.check_profile()

    needed = header.pixel_count * BYTES_PER_PIXEL
    available = len(data) - offset
    if available < needed:
        raise TruncatedError("Пиксели", offset + needed, len(data))

    bgr = np.frombuffer(data, dtype=np.uint8, count=needed, offset=offset)
    rgb = bgr.reshape(header.height, header.width, BYTES_PER_PIXEL)[..., ::-1]
    logger.debug("decoded %dx%d image (%d trailing bytes ignored)",
                 header.width, header.height, available - needed)
    return RasterImage(header, rgb)


def encode_image(image: RasterImage) -> bytes:
    """Обратное к `decode_image`: длина результата всегда `18 + 3*width*height`."""
    bgr = np.ascontiguousarray(image.pixels[..., ::-1])
    return encode_header(image.header) + bgr.tobytes()


def read_image(path: str | Path, check_profile: bool = False) -> RasterImage:
    """Читает файл целиком и декодирует. `OSError` пробрасывается как есть."""
    data = Path(path).read_bytes()
    return decode_image(data, check_profile=check_profile)


def write_image(path: str | Path, image: RasterImage) -> None:
    Path(path).write_bytes(encode_image(image))


# ---------- Мосты к Pillow (превью) ----------
def to_pil(image: RasterImage) -> Image.Image:
    """Изображение Pillow в режиме RGB (копия пикселей)."""
    return Image.fromarray(np.array(image.pixels))


def from_pil(pil_image: Image.Image) -> RasterImage:
    """Строит несжатый truecolor-растр из изображения Pillow (альфа отбрасывается)."""
    rgb = pil_image if pil_image.mode == "RGB" else pil_image.convert("RGB")
    width, height = rgb.size
    # Pillow хранит строки сверху вниз, поэтому выставим бит 5 дескриптора
    header = Header.truecolor(width, height, image_descriptor=0x20)
    return RasterImage(header, np.asarray(rgb, dtype=np.uint8))
