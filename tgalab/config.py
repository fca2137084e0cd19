"""Настройки приложения: значения по умолчанию, переменные окружения TGALAB_*."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

ENV_PREFIX = "TGALAB_"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Неизменяемые настройки.

    Fields:
        layers_dir: Каталог исходных слоёв.
        output_dir: Каталог для результатов.
        examples_dir: Каталог эталонов `EXAMPLE_<имя>.tga` (сравнение отключено, если None).
        workers: Число потоков на операцию композитора.
        log_level: Уровень логирования, например "INFO".
    """
    layers_dir: Path = Path("input")
    output_dir: Path = Path("output")
    examples_dir: Optional[Path] = None
    workers: int = 1
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers должно быть >= 1, получено {self.workers}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Неизвестный уровень логирования: {self.log_level}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if f"{ENV_PREFIX}LAYERS_DIR" in env:
            values["layers_dir"] = Path(env[f"{ENV_PREFIX}LAYERS_DIR"])
        if f"{ENV_PREFIX}OUTPUT_DIR" in env:
            values["output_dir"] = Path(env[f"{ENV_PREFIX}OUTPUT_DIR"])
        if env.get(f"{ENV_PREFIX}EXAMPLES_DIR"):
            values["examples_dir"] = Path(env[f"{ENV_PREFIX}EXAMPLES_DIR"])
        if f"{ENV_PREFIX}WORKERS" in env:
            try:
                values["workers"] = int(env[f"{ENV_PREFIX}WORKERS"])
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}WORKERS должно быть целым") from exc
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            values["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
        return cls(**values)

    def merged(self, **overrides: Any) -> "AppConfig":
        """Копия с переопределёнными значениями; None означает «не задано»."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
