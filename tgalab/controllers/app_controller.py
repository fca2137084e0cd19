"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без арифметики пикселей).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; вычисления вынесены в `CompositorService`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from tkinter import filedialog, TclError
from typing import Dict, Optional

import customtkinter as ctk

from tgalab.models.errors import TgaLabError
from tgalab.models.image_model import LayerData, RasterImage
from tgalab.services.compositor import Adjustment, CompositorService
from tgalab.services.image_service import ImageService
from tgalab.services.pixel_ops import BlendMode
from tgalab.ui.bottom_bar import BottomBar
from tgalab.ui.image_viewer import ImageViewer
from tgalab.ui.sidebar import ADJUST_OPERATION, NO_OPERATION, Sidebar

logger = logging.getLogger(__name__)

BLEND_OPERATIONS: Dict[str, BlendMode] = {
    "Умножение": BlendMode.MULTIPLY,
    "Экран": BlendMode.SCREEN,
    "Перекрытие": BlendMode.OVERLAY,
    "Вычитание": BlendMode.SUBTRACT,
    "Сложение": BlendMode.ADD,
}
OPERATION_LABELS = (*BLEND_OPERATIONS, ADJUST_OPERATION)

FILE_TYPES = (
    ("TGA", "*.tga"),
    ("Images", "*.png *.jpg *.jpeg *.bmp *.tiff *.webp"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Открытие верхнего/нижнего слоёв через `ImageService`.
    - Применение выбранной операции через `CompositorService`.
    - Сохранение результата и синхронизация масштаба/сравнения.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    compositor: CompositorService

    _image_service: ImageService = ImageService()
    _top: Optional[LayerData] = None
    _bottom: Optional[LayerData] = None
    _result: Optional[RasterImage] = None
    _operation: str = NO_OPERATION

    def bind_events(self) -> None:
        """Регистрирует обработчики; компоненты UI общаются только через контроллер."""
        self.sidebar.on_open_top = lambda: self._handle_open_layer(top=True)
        self.sidebar.on_open_bottom = lambda: self._handle_open_layer(top=False)
        self.sidebar.on_swap_layers = self._handle_swap_layers
        self.sidebar.on_save_result = self._handle_save_result
        self.sidebar.on_operation_change = self._handle_operation_change

        self.viewer.on_cursor_move = self.sidebar.update_cursor_info
        self.viewer.on_zoom_change = self.bottom.set_zoom_percent

        self.bottom.on_zoom_change = self.viewer.set_zoom_percent
        self.bottom.on_zoom_fit = self._handle_zoom_fit
        self.bottom.on_compare_mode_change = self.viewer.set_compare_mode
        self.bottom.on_wipe_change = self.viewer.set_wipe_percent

    # ---- Handlers ----
    def _handle_open_layer(self, top: bool) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите верхний слой" if top else "Выберите нижний слой", filetypes=FILE_TYPES
            )
        except TclError:
            # диалог недоступен, ничего не делаем
            return
        if not file_path:
            return

        try:
            layer = self._image_service.load_layer(file_path)
        except (TgaLabError, OSError, ValueError) as exc:
            logger.warning("Cannot open %s: %s", file_path, exc)
            self.sidebar.set_status(f"Не удалось открыть файл: {exc}")
            return

        if top:
            self._top = layer
            self.sidebar.set_top_info(layer)
            self.viewer.set_image(self._image_service.to_preview(layer.image))
            self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())
        else:
            self._bottom = layer
            self.sidebar.set_bottom_info(layer)
        self._apply_operation()

    def _handle_swap_layers(self) -> None:
        self._top, self._bottom = self._bottom, self._top
        self.sidebar.set_top_info(self._top)
        self.sidebar.set_bottom_info(self._bottom)
        self.viewer.set_image(self._image_service.to_preview(self._top.image) if self._top else None)
        self._apply_operation()

    def _handle_operation_change(self, operation: str) -> None:
        self._operation = operation
        self._apply_operation()

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    def _handle_save_result(self) -> None:
        image = self._result or (self._top.image if self._top else None)
        if image is None:
            self.sidebar.set_status("Нечего сохранять: откройте верхний слой")
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить результат", defaultextension=".tga", filetypes=FILE_TYPES[:1]
            )
        except TclError:
            return
        if not file_path:
            return
        try:
            saved = self._image_service.save_layer(image, file_path)
        except OSError as exc:
            logger.warning("Cannot save %s: %s", file_path, exc)
            self.sidebar.set_status(f"Не удалось сохранить: {exc}")
            return
        logger.info("Saved result to %s", saved)
        self.sidebar.set_status("")

    # ---- Helpers ----
    def _apply_operation(self) -> None:
        """Пересчитывает результат выбранной операции; исходные слои не меняются."""
        self._result = None
        self.sidebar.set_status("")
        if self._top is None or self._operation == NO_OPERATION:
            self.viewer.set_processed_image(None)
            return

        try:
            if self._operation == ADJUST_OPERATION:
                channel, multiplier, offsets = self.sidebar.get_adjust_params()
                self._result = self.compositor.apply(Adjustment(channel, multiplier, offsets), self._top.image)
            elif self._bottom is None:
                self.sidebar.set_status("Для смешивания откройте нижний слой")
            else:
                mode = BLEND_OPERATIONS[self._operation]
                self._result = self.compositor.apply(mode, self._top.image, self._bottom.image)
        except (TgaLabError, ValueError) as exc:
            self.sidebar.set_status(str(exc))

        preview = self._image_service.to_preview(self._result) if self._result is not None else None
        self.viewer.set_processed_image(preview)
