"""Хранилище именованных слоёв в каталоге: имя -> файл `<root>/<name>.tga`."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from tgalab.models.errors import LayerNotFoundError
from tgalab.models.image_model import RasterImage
from tgalab.services.image_codec import decode_image, encode_image

logger = logging.getLogger(__name__)


class LayerStore:
    def __init__(self, root: str | Path, suffix: str = ".tga", check_profile: bool = True) -> None:
        self.root = Path(root)
        self.suffix = suffix
        self.check_profile = check_profile

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}{self.suffix}"

    def names(self) -> List[str]:
        """Имена слоёв в каталоге (без расширения), по алфавиту."""
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.iterdir() if p.is_file() and p.suffix == self.suffix)

    def load_layer(self, name: str) -> RasterImage:
        """Загружает слой по имени.

        Raises:
            LayerNotFoundError: файла слоя нет.
            OSError: прочие ошибки чтения, без изменений.
            FormatError: содержимое не является допустимым изображением.
        """
        path = self.path_for(name)
        if not path.is_file():
            raise LayerNotFoundError(f"Слой не найден: {name} ({path})")
        data = path.read_bytes()
        logger.debug("loaded layer %s (%d bytes)", name, len(data))
        return decode_image(data, check_profile=self.check_profile)

    def save_layer(self, name: str, image: RasterImage) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_image(image))
        logger.debug("saved layer %s -> %s", name, path)
        return path
