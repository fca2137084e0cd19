"""Загрузка и сохранение слоёв для окна превью.

Принципы:
- SRP: класс отвечает только за файловый ввод/вывод и метаданные файла.
- OCP: TGA читается собственным кодеком, прочие форматы через Pillow.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from tgalab.models.image_model import LayerData, RasterImage
from tgalab.services.image_codec import decode_image, encode_image, from_pil, to_pil

TGA_SUFFIXES = (".tga", ".icb", ".vda", ".vst")


class ImageService:
    def load_layer(self, file_path: str | Path) -> LayerData:
        """Загружает слой с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `LayerData` с декодированным растром и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            FormatError: если TGA-файл повреждён или не в профиле 24-бит truecolor.
            ValueError: если файл другого формата не распознан Pillow.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        if path.suffix.lower() in TGA_SUFFIXES:
            image = decode_image(path.read_bytes(), check_profile=True)
        else:
            try:
                with Image.open(path) as pil_image:
                    image = from_pil(pil_image)
            except UnidentifiedImageError as exc:
                raise ValueError(f"Файл не является изображением: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None
        return LayerData(path=path, image=image, size_bytes=size_bytes)

    def save_layer(self, image: RasterImage, file_path: str | Path) -> Path:
        """Сохраняет растр как несжатый TGA; расширение добавляется при отсутствии."""
        path = Path(file_path)
        if path.suffix.lower() not in TGA_SUFFIXES:
            path = path.with_suffix(".tga")
        path.write_bytes(encode_image(image))
        return path

    def to_preview(self, image: RasterImage) -> Image.Image:
        return to_pil(image)
