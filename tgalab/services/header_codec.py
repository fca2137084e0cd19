"""Кодек 18-байтового заголовка: байты <-> `Header`.

Кодек не проверяет семантику полей (профиль проверяет вызывающий код через
`Header.check_profile`), поэтому подходит для любого варианта формата.
"""
from __future__ import annotations

import struct
from typing import Tuple

from tgalab.models.errors import TruncatedError
from tgalab.models.header_model import HEADER_SIZE, Header

# id, cmap type, image type, cmap origin, cmap length, cmap depth,
# x origin, y origin, width, height, bpp, descriptor; little-endian
HEADER_STRUCT = struct.Struct("<BBBHHBHHHHBB")


def decode_header(data: bytes, offset: int = 0) -> Tuple[Header, int]:
    """Читает заголовок начиная с `offset`.

    Returns:
        Пару (заголовок, смещение первого байта после заголовка).

    Raises:
        TruncatedError: если доступно меньше 18 байт.
    """
    available = max(0, len(data) - offset)
    if available < HEADER_SIZE:
        raise TruncatedError("Заголовок", HEADER_SIZE, available)
    values = HEADER_STRUCT.unpack_from(data, offset)
    return Header(*values), offset + HEADER_SIZE


def encode_header(header: Header) -> bytes:
    """Сериализует заголовок ровно в 18 байт."""
    return HEADER_STRUCT.pack(
        header.id_length,
        header.color_map_type,
        header.image_type_code,
        header.color_map_origin,
        header.color_map_length,
        header.color_map_depth,
        header.x_origin,
        header.y_origin,
        header.width,
        header.height,
        header.bits_per_pixel,
        header.image_descriptor,
    )
