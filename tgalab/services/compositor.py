"""Композитор: применяет операцию к одному или двум слоям и возвращает новый растр.

Принципы:
- SRP: только проверка операндов и раскладка работы; арифметика в `pixel_ops`.
- Чистые функции: входные изображения не изменяются, результат в свежем буфере.
- Заголовок результата копируется с основного (верхнего) операнда.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from tgalab.models.errors import DimensionMismatchError
from tgalab.models.image_model import Channel, RasterImage
from tgalab.services import pixel_ops
from tgalab.services.pixel_ops import BlendMode, Offsets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Adjustment:
    """Уровни: масштаб одного канала и сдвиг всех трёх."""
    channel: Channel
    multiplier: float = 1.0
    offsets: Offsets = (0, 0, 0)

    def __post_init__(self) -> None:
        if not isinstance(self.channel, Channel):
            raise TypeError(f"Ожидался Channel, получено {self.channel!r}")
        object.__setattr__(self, "offsets", tuple(int(o) for o in self.offsets))

    def __call__(self, pixels: np.ndarray) -> np.ndarray:
        return pixel_ops.adjust_channel(pixels, self.channel, self.multiplier, self.offsets)


Operation = Union[BlendMode, Adjustment]


class CompositorService:
    def __init__(self, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError(f"workers должно быть >= 1, получено {workers}")
        self.workers = workers
        # один пул на сервис; закрывается через close() или with
        self._pool: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None

    def close(self) -> None:
        """Останавливает пул потоков; повторный вызов безопасен."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "CompositorService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def apply(self, op: Operation, top: RasterImage, bottom: Optional[RasterImage] = None) -> RasterImage:
        """Применяет режим смешивания (два слоя) или уровни (один слой).

        Raises:
            DimensionMismatchError: размеры `top` и `bottom` различаются.
            ValueError: не хватает второго слоя для смешивания или он лишний для уровней.
            TypeError: неизвестная операция.
        """
        if isinstance(op, BlendMode):
            if bottom is None:
                raise ValueError(f"Режиму {op.value} нужен нижний слой")
            if top.size != bottom.size:
                raise DimensionMismatchError(top.size, bottom.size)
            func = op.func
            pixels = self._run_banded(lambda rows: func(top.pixels[rows], bottom.pixels[rows]), top.height)
        elif isinstance(op, Adjustment):
            if bottom is not None:
                raise ValueError("Уровни применяются к одному слою")
            pixels = self._run_banded(lambda rows: op(top.pixels[rows]), top.height)
        else:
            raise TypeError(f"Неизвестная операция: {op!r}")
        logger.debug("applied %s to %dx%d", op, top.width, top.height)
        return top.with_pixels(pixels)

    # ---- Удобные обёртки ----
    def blend(self, mode: BlendMode, top: RasterImage, bottom: RasterImage) -> RasterImage:
        return self.apply(mode, top, bottom)

    def adjust(
        self,
        image: RasterImage,
        channel: Channel,
        multiplier: float = 1.0,
        offsets: Offsets = (0, 0, 0),
    ) -> RasterImage:
        return self.apply(Adjustment(channel, multiplier, offsets), image)

    def chain(self, image: RasterImage, *adjustments: Adjustment) -> RasterImage:
        """Последовательно применяет несколько корректировок уровней."""
        result = image
        for adjustment in adjustments:
            result = self.apply(adjustment, result)
        return result

    def rotate_half_turn(self, image: RasterImage) -> RasterImage:
        """Поворот на 180°: обратный порядок строк и столбцов, заголовок прежний."""
        return image.with_pixels(image.pixels[::-1, ::-1])

    # ---- Helpers ----
    def _run_banded(self, compute: Callable[[slice], np.ndarray], height: int) -> np.ndarray:
        """Считает результат полосами строк; каждая полоса пишется ровно один раз."""
        if self._pool is None or height < 2:
            return compute(slice(0, height))
        bands = [
            slice(int(idx[0]), int(idx[-1]) + 1)
            for idx in np.array_split(np.arange(height), min(self.workers, height))
        ]
        parts = list(self._pool.map(compute, bands))
        return np.concatenate(parts, axis=0)
