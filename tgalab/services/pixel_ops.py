"""Поканальная арифметика смешивания и уровней.

Все функции чистые: принимают массивы uint8 одинаковой формы (один пиксель:
форма (3,)) и возвращают новый массив uint8. Дробные промежуточные значения
округляются «половина вверх» (floor(x + 0.5)), результат всегда обрезается в [0, 255].

Операнды названы `top` и `bottom` намеренно: вычитание и overlay не коммутативны.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, Tuple

import numpy as np

from tgalab.models.image_model import Channel, Pixel

MAX_VALUE = 255
# Граница ветвей overlay: при bottom < 128 «тёмная» ветвь, при 128..255 «светлая»
OVERLAY_THRESHOLD = 128

Offsets = Tuple[int, int, int]


# ---------- Вспомогательные функции ----------
def _widen(a: np.ndarray) -> np.ndarray:
    return np.asarray(a, dtype=np.int64)


def _div_round_half_up(numerator: np.ndarray, denominator: int) -> np.ndarray:
    """floor(n/d + 0.5) в целых числах, без ошибок двоичной плавающей точки."""
    return (2 * numerator + denominator) // (2 * denominator)


def _to_u8(values: np.ndarray) -> np.ndarray:
    return np.clip(values, 0, MAX_VALUE).astype(np.uint8)


def round_half_up(values: np.ndarray | float) -> np.ndarray:
    """Округление дробных значений «половина вверх»."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


# ---------- Режимы смешивания ----------
def multiply(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """top * bottom / 255."""
    t, b = _widen(top), _widen(bottom)
    return _to_u8(_div_round_half_up(t * b, MAX_VALUE))


def screen(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """255 - (255 - top) * (255 - bottom) / 255."""
    t, b = _widen(top), _widen(bottom)
    return _to_u8(MAX_VALUE - _div_round_half_up((MAX_VALUE - t) * (MAX_VALUE - b), MAX_VALUE))


def add(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """Сложение с насыщением на 255."""
    return _to_u8(_widen(top) + _widen(bottom))


def subtract(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """bottom - top, не ниже нуля (уменьшаемое: нижний слой)."""
    return _to_u8(_widen(bottom) - _widen(top))


def overlay(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """Перекрытие: ветвь выбирается по нижнему слою, bottom == 128 — «светлая» ветвь."""
    t, b = _widen(top), _widen(bottom)
    dark = _div_round_half_up(2 * t * b, MAX_VALUE)
    light = MAX_VALUE - _div_round_half_up(2 * (MAX_VALUE - t) * (MAX_VALUE - b), MAX_VALUE)
    return _to_u8(np.where(b < OVERLAY_THRESHOLD, dark, light))


# ---------- Уровни ----------
def adjust_channel(
    pixels: np.ndarray,
    channel: Channel,
    multiplier: float = 1.0,
    offsets: Offsets = (0, 0, 0),
) -> np.ndarray:
    """Масштабирует один канал, затем сдвигает все три.

    Выбранный канал заменяется на clip(round(value * multiplier), 0, 255); после
    этого к каждому каналу прибавляется свой сдвиг из `offsets` (dr, dg, db),
    каждый канал обрезается в [0, 255] независимо.

    Raises:
        TypeError: если `channel` не `Channel`.
        ValueError: при бесконечном/нечисловом множителе или неверных сдвигах.
    """
    if not isinstance(channel, Channel):
        raise TypeError(f"Ожидался Channel, получено {channel!r}")
    multiplier = float(multiplier)
    if not math.isfinite(multiplier):
        raise ValueError(f"Множитель должен быть конечным числом: {multiplier}")
    if len(offsets) != 3:
        raise ValueError(f"Нужно три сдвига (dr, dg, db), получено {len(offsets)}")

    out = _widen(pixels).copy()
    idx = channel.value
    scaled = round_half_up(out[..., idx] * multiplier)
    out[..., idx] = np.clip(scaled, 0, MAX_VALUE).astype(np.int64)
    out += np.asarray([int(o) for o in offsets], dtype=np.int64)
    return _to_u8(out)


class BlendMode(Enum):
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    SUBTRACT = "subtract"
    ADD = "add"

    @property
    def func(self) -> Callable[[np.ndarray, np.ndarray], np.ndarray]:
        return BLEND_FUNCS[self]

    @property
    def commutative(self) -> bool:
        return self in (BlendMode.MULTIPLY, BlendMode.SCREEN, BlendMode.ADD)


BLEND_FUNCS: Dict[BlendMode, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    BlendMode.MULTIPLY: multiply,
    BlendMode.SCREEN: screen,
    BlendMode.OVERLAY: overlay,
    BlendMode.SUBTRACT: subtract,
    BlendMode.ADD: add,
}


def blend_pixel(mode: BlendMode, top: Pixel, bottom: Pixel) -> Pixel:
    """Смешивание одиночных пикселей."""
    r, g, b = mode.func(np.asarray(top, dtype=np.uint8), np.asarray(bottom, dtype=np.uint8)).tolist()
    return Pixel(r, g, b)
