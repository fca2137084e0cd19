"""Иерархия исключений ядра.

Ядро не логирует и не подавляет ошибки: всё возвращается вызывающему коду,
который сам решает, прерывать ли пакетную обработку.
"""
from __future__ import annotations


class TgaLabError(Exception):
    """Базовый класс для всех ошибок tgalab."""


class FormatError(TgaLabError):
    """Байты не соответствуют формату."""


class TruncatedError(FormatError):
    """Данных меньше, чем требуют заголовок или область пикселей."""

    def __init__(self, what: str, needed: int, available: int) -> None:
        super().__init__(f"{what}: нужно {needed} байт, доступно {available}")
        self.needed = needed
        self.available = available


class MalformedError(FormatError, ValueError):
    """Структура на месте, но значения полей недопустимы."""


class DimensionMismatchError(TgaLabError, ValueError):
    """Операнды бинарной операции имеют разные размеры."""

    def __init__(self, top_size: tuple[int, int], bottom_size: tuple[int, int]) -> None:
        super().__init__(
            f"Размеры слоёв не совпадают: top {top_size[0]}×{top_size[1]}, "
            f"bottom {bottom_size[0]}×{bottom_size[1]}"
        )
        self.top_size = top_size
        self.bottom_size = bottom_size


class LayerNotFoundError(TgaLabError, FileNotFoundError):
    """Именованный слой отсутствует в хранилище."""
