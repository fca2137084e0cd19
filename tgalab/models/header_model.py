"""Заголовок растрового файла: типизированная запись вместо сырого буфера.

Принципы:
- SRP: только структура полей и проверка их диапазонов/профиля.
- Чистый код: неизменяемость (`frozen=True`); кодирование байтов живёт в сервисе.
"""
from __future__ import annotations

from dataclasses import dataclass, fields

from tgalab.models.errors import MalformedError

HEADER_SIZE = 18
TRUECOLOR_IMAGE_TYPE = 2
TRUECOLOR_BITS = 24

# поля шириной 2 байта, остальные по 1 байту
_WIDE_FIELDS = frozenset(
    {"color_map_origin", "color_map_length", "x_origin", "y_origin", "width", "height"}
)


@dataclass(frozen=True)
class Header:
    """Неизменяемый 18-байтовый заголовок.

    Fields:
        id_length: Длина блока идентификатора (в профиле только переносится).
        color_map_type: Тип палитры, для truecolor — 0.
        image_type_code: Тип изображения, 2 = несжатый truecolor.
        color_map_origin, color_map_length, color_map_depth: Описание палитры (0).
        x_origin, y_origin: Смещение изображения.
        width, height: Размеры, px.
        bits_per_pixel: Глубина цвета, в профиле — 24.
        image_descriptor: Флаги; бит 5 — вертикальная ориентация (не интерпретируется).
    """
    id_length: int = 0
    color_map_type: int = 0
    image_type_code: int = TRUECOLOR_IMAGE_TYPE
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    bits_per_pixel: int = TRUECOLOR_BITS
    image_descriptor: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            limit = 0xFFFF if f.name in _WIDE_FIELDS else 0xFF
            if not isinstance(value, int) or isinstance(value, bool):
                raise MalformedError(f"Поле {f.name} должно быть целым, получено {value!r}")
            if not 0 <= value <= limit:
                raise MalformedError(f"Поле {f.name}={value} вне диапазона 0..{limit}")

    @classmethod
    def truecolor(cls, width: int, height: int, **overrides: int) -> "Header":
        """Создаёт заголовок несжатого 24-битного изображения заданного размера."""
        return cls(width=width, height=height, **overrides)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def top_origin(self) -> bool:
        """Бит 5 дескриптора: строки хранятся сверху вниз."""
        return bool(self.image_descriptor & 0x20)

    def check_profile(self) -> None:
        """Проверяет профиль «несжатый truecolor, 24 бита».

        Raises:
            MalformedError: при первом нарушенном ограничении.
        """
        if self.color_map_type != 0:
            raise MalformedError(f"Палитровые изображения не поддерживаются (color_map_type={self.color_map_type})")
        if self.image_type_code != TRUECOLOR_IMAGE_TYPE:
            raise MalformedError(f"Неподдерживаемый тип изображения: {self.image_type_code}")
        if self.color_map_origin or self.color_map_length or self.color_map_depth:
            raise MalformedError("Описание палитры должно быть нулевым")
        if self.width == 0 or self.height == 0:
            raise MalformedError(f"Нулевой размер изображения: {self.width}×{self.height}")
        if self.bits_per_pixel != TRUECOLOR_BITS:
            raise MalformedError(f"Неподдерживаемая глубина цвета: {self.bits_per_pixel} бит")
