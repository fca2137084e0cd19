"""Модели данных растра: пиксель, выбор канала и само изображение.

Принципы:
- SRP: только структура данных, без арифметики смешивания.
- Чистый код: изображение — неизменяемое значение; буфер пикселей только для чтения.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple, Optional

import numpy as np

from tgalab.models.errors import MalformedError
from tgalab.models.header_model import Header


class Pixel(NamedTuple):
    """Три 8-битных канала. Порядок в памяти — RGB, на диске — BGR."""
    red: int
    green: int
    blue: int


class Channel(Enum):
    """Закрытый выбор канала; значение — индекс по последней оси массива RGB."""
    RED = 0
    GREEN = 1
    BLUE = 2


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Неизменяемое изображение: заголовок + пиксели (height, width, 3) uint8, RGB.

    Строка 0 — первая строка в порядке хранения на диске.
    """
    header: Header
    pixels: np.ndarray

    def __post_init__(self) -> None:
        src = np.asarray(self.pixels)
        if src.dtype != np.uint8 and src.size and (src.min() < 0 or src.max() > 255):
            raise MalformedError("Значения каналов должны лежать в 0..255")
        arr = np.array(src, dtype=np.uint8, copy=True)
        expected = (self.header.height, self.header.width, 3)
        if arr.shape != expected:
            raise MalformedError(
                f"Буфер пикселей {arr.shape} не соответствует заголовку {expected}"
            )
        arr.flags.writeable = False
        object.__setattr__(self, "pixels", arr)

    # ---- Конструкторы ----
    @classmethod
    def from_pixels(cls, header: Header, pixels: Iterable[Pixel]) -> "RasterImage":
        """Собирает изображение из последовательности пикселей (построчно)."""
        flat = np.array([tuple(p) for p in pixels], dtype=np.int64)
        if flat.shape[0] != header.pixel_count:
            raise MalformedError(
                f"Ожидалось {header.pixel_count} пикселей, получено {flat.shape[0]}"
            )
        return cls(header, flat.reshape(header.height, header.width, 3))

    @classmethod
    def filled(cls, header: Header, pixel: Pixel) -> "RasterImage":
        """Изображение, целиком залитое одним цветом."""
        arr = np.empty((header.height, header.width, 3), dtype=np.uint8)
        arr[...] = tuple(pixel)
        return cls(header, arr)

    def with_pixels(self, pixels: np.ndarray) -> "RasterImage":
        """Новое изображение с тем же заголовком и другими пикселями."""
        return RasterImage(self.header, pixels)

    # ---- Доступ ----
    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def size(self) -> tuple[int, int]:
        return self.header.size

    @property
    def pixel_count(self) -> int:
        return self.pixels.shape[0] * self.pixels.shape[1]

    def pixel(self, x: int, y: int) -> Pixel:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Пиксель ({x}, {y}) вне изображения {self.width}×{self.height}")
        r, g, b = self.pixels[y, x]
        return Pixel(int(r), int(g), int(b))

    def iter_pixels(self) -> Iterator[Pixel]:
        for r, g, b in self.pixels.reshape(-1, 3).tolist():
            yield Pixel(r, g, b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.header == other.header and np.array_equal(self.pixels, other.pixels)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class LayerData:
    """Слой, открытый с диска, вместе с метаданными файла.

    Fields:
        path: Путь к исходному файлу.
        image: Декодированное изображение.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    image: RasterImage
    size_bytes: Optional[int]
