"""Боковая панель: открытие слоёв, информация, выбор операции и её параметров.

Принципы:
- SRP: управляет только UI параметров, не содержит арифметики смешивания.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

import customtkinter as ctk

from tgalab.models.image_model import Channel, LayerData, Pixel

NO_OPERATION = "Нет"
ADJUST_OPERATION = "Уровни"
CHANNEL_LABELS = {"Красный": Channel.RED, "Зелёный": Channel.GREEN, "Синий": Channel.BLUE}


def _pixel_to_hex(pixel: Pixel) -> str:
    return f"#{pixel.red:02X}{pixel.green:02X}{pixel.blue:02X}"


def _parse_offset(text: str) -> int:
    try:
        value = int(text.strip() or 0)
    except ValueError:
        return 0
    return max(-255, min(255, value))


class _LayerInfo:
    """Блок из трёх строк о слое: путь, размер файла, размеры и заголовок."""
    def __init__(self, master: ctk.CTkFrame, title: str, first_row: int) -> None:
        self._title = ctk.CTkLabel(master, text=title, font=ctk.CTkFont(size=13, weight="bold"))
        self._path_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._header_val = ctk.StringVar(value="—")
        self._title.grid(row=first_row, column=0, padx=8, pady=(4, 0), sticky="w")
        for offset, var in enumerate((self._path_val, self._dims_val, self._header_val), start=1):
            label = ctk.CTkLabel(master, textvariable=var, wraplength=250, anchor="w", justify="left")
            label.grid(row=first_row + offset, column=0, padx=8, pady=(0, 2), sticky="ew")

    def set(self, layer: Optional[LayerData], size_text: str) -> None:
        if layer is None:
            for var in (self._path_val, self._dims_val, self._header_val):
                var.set("—")
            return
        header = layer.image.header
        self._path_val.set(str(layer.path))
        self._dims_val.set(f"{header.width} × {header.height} px, {size_text}")
        self._header_val.set(
            f"тип {header.image_type_code}, {header.bits_per_pixel} бит, id {header.id_length}, "
            f"origin ({header.x_origin}, {header.y_origin})"
        )


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: слои, курсор, операция, сохранение."""
    def __init__(self, master: ctk.CTk, operations: Sequence[str], **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_top: Optional[Callable[[], None]] = None
        self.on_open_bottom: Optional[Callable[[], None]] = None
        self.on_swap_layers: Optional[Callable[[], None]] = None
        self.on_save_result: Optional[Callable[[], None]] = None
        self.on_operation_change: Optional[Callable[[str], None]] = None

        # Слои
        self._title = ctk.CTkLabel(self, text="Слои", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=1, column=0, padx=8, pady=(0, 8), sticky="ew")
        buttons.grid_columnconfigure((0, 1), weight=1)
        ctk.CTkButton(buttons, text="Верхний…", command=lambda: self._emit(self.on_open_top)).grid(
            row=0, column=0, padx=(0, 4), sticky="ew"
        )
        ctk.CTkButton(buttons, text="Нижний…", command=lambda: self._emit(self.on_open_bottom)).grid(
            row=0, column=1, padx=(4, 0), sticky="ew"
        )
        ctk.CTkButton(buttons, text="Поменять местами", command=lambda: self._emit(self.on_swap_layers)).grid(
            row=1, column=0, columnspan=2, pady=(6, 0), sticky="ew"
        )

        self._top_info = _LayerInfo(self, "Верхний слой (top)", first_row=2)
        self._bottom_info = _LayerInfo(self, "Нижний слой (bottom)", first_row=6)

        # Курсор
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=ctk.CTkFont(size=16, weight="bold"))
        self._cursor_title.grid(row=10, column=0, padx=8, pady=(8, 4), sticky="w")
        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgb_val = ctk.StringVar(value="—")
        ctk.CTkLabel(self, textvariable=self._cursor_xy_val, anchor="w").grid(row=11, column=0, padx=8, sticky="ew")
        ctk.CTkLabel(self, textvariable=self._cursor_rgb_val, anchor="w").grid(row=12, column=0, padx=8, sticky="ew")

        # Операция
        self._op_title = ctk.CTkLabel(self, text="Операция", font=ctk.CTkFont(size=16, weight="bold"))
        self._op_title.grid(row=20, column=0, padx=8, pady=(8, 4), sticky="w")

        self._operation = ctk.StringVar(value=NO_OPERATION)
        self._tabs = ctk.CTkTabview(self, height=230)
        self._tabs.grid(row=21, column=0, padx=8, pady=(0, 8), sticky="nsew")
        self._tabs.add("Смешивание")
        self._tabs.add(ADJUST_OPERATION)
        self.grid_rowconfigure(21, weight=1)

        blend_tab = self._tabs.tab("Смешивание")
        blend_tab.grid_columnconfigure(0, weight=1)
        for row, label in enumerate([NO_OPERATION, *[o for o in operations if o != ADJUST_OPERATION]]):
            ctk.CTkRadioButton(
                blend_tab, text=label, variable=self._operation, value=label, command=self._emit_operation_change
            ).grid(row=row, column=0, padx=6, pady=2, sticky="w")

        adjust_tab = self._tabs.tab(ADJUST_OPERATION)
        adjust_tab.grid_columnconfigure((0, 1, 2), weight=1)
        ctk.CTkRadioButton(
            adjust_tab,
            text="Применить к верхнему слою",
            variable=self._operation,
            value=ADJUST_OPERATION,
            command=self._emit_operation_change,
        ).grid(row=0, column=0, columnspan=3, padx=6, pady=(4, 6), sticky="w")

        ctk.CTkLabel(adjust_tab, text="Канал:").grid(row=1, column=0, padx=6, sticky="w")
        self._channel_menu = ctk.CTkOptionMenu(
            adjust_tab, values=list(CHANNEL_LABELS), command=lambda _v: self._on_adjust_param_change()
        )
        self._channel_menu.set("Красный")
        self._channel_menu.grid(row=1, column=1, columnspan=2, padx=6, pady=2, sticky="ew")

        self._multiplier_val = ctk.StringVar(value="×1.00")
        ctk.CTkLabel(adjust_tab, text="Множитель:").grid(row=2, column=0, padx=6, sticky="w")
        ctk.CTkLabel(adjust_tab, textvariable=self._multiplier_val, width=48, anchor="e").grid(
            row=2, column=2, padx=6, sticky="e"
        )
        self._multiplier_slider = ctk.CTkSlider(
            adjust_tab, from_=0.0, to=4.0, number_of_steps=80, command=self._on_multiplier_change
        )
        self._multiplier_slider.set(1.0)
        self._multiplier_slider.grid(row=3, column=0, columnspan=3, padx=6, pady=(0, 6), sticky="ew")

        ctk.CTkLabel(adjust_tab, text="Сдвиги dR / dG / dB:").grid(row=4, column=0, columnspan=3, padx=6, sticky="w")
        self._offset_vals = [ctk.StringVar(value="0") for _ in range(3)]
        for col, var in enumerate(self._offset_vals):
            entry = ctk.CTkEntry(adjust_tab, textvariable=var, width=56)
            entry.grid(row=5, column=col, padx=4, pady=(0, 6), sticky="ew")
            entry.bind("<FocusOut>", lambda _e: self._on_adjust_param_change())
            entry.bind("<Return>", lambda _e: self._on_adjust_param_change())

        # Кнопки результата
        self._reset_btn = ctk.CTkButton(self, text="Показать оригинал", command=self._reset_operation)
        self._reset_btn.grid(row=22, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить результат…", command=lambda: self._emit(self.on_save_result))
        self._save_btn.grid(row=23, column=0, padx=8, pady=(0, 6), sticky="ew")

        self._status_val = ctk.StringVar(value="")
        self._status = ctk.CTkLabel(
            self, textvariable=self._status_val, wraplength=260, anchor="w", justify="left", text_color="#d9534f"
        )
        self._status.grid(row=24, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def set_top_info(self, layer: Optional[LayerData]) -> None:
        self._top_info.set(layer, self._format_size(layer.size_bytes if layer else None))

    def set_bottom_info(self, layer: Optional[LayerData]) -> None:
        self._bottom_info.set(layer, self._format_size(layer.size_bytes if layer else None))

    def update_cursor_info(self, x: Optional[int], y: Optional[int], pixel: Optional[Pixel]) -> None:
        """Обновляет информацию по курсору (координаты, RGB, HEX)."""
        if x is None or y is None or pixel is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgb_val.set("—")
            return
        self._cursor_xy_val.set(f"({x}, {y})")
        self._cursor_rgb_val.set(f"RGB: {pixel.red}, {pixel.green}, {pixel.blue}   {_pixel_to_hex(pixel)}")

    def set_status(self, message: str) -> None:
        """Показывает сообщение об ошибке; пустая строка очищает его."""
        self._status_val.set(message)

    def set_operation_value(self, operation: str) -> None:
        self._operation.set(operation)
        self._tabs.set(ADJUST_OPERATION if operation == ADJUST_OPERATION else "Смешивание")

    def get_adjust_params(self) -> Tuple[Channel, float, Tuple[int, int, int]]:
        """Возвращает (канал, множитель, (dr, dg, db)) для уровней."""
        channel = CHANNEL_LABELS.get(self._channel_menu.get(), Channel.RED)
        multiplier = max(0.0, float(self._multiplier_slider.get()))
        dr, dg, db = (_parse_offset(v.get()) for v in self._offset_vals)
        return channel, multiplier, (dr, dg, db)

    # ---- Events ----
    def _emit(self, callback: Optional[Callable[[], None]]) -> None:
        if callback:
            callback()

    def _emit_operation_change(self) -> None:
        if self.on_operation_change:
            self.on_operation_change(self._operation.get())

    def _on_multiplier_change(self, value: float) -> None:
        self._multiplier_val.set(f"×{value:.2f}")
        self._on_adjust_param_change()

    def _on_adjust_param_change(self) -> None:
        # пересчитываем сразу, только если уровни активны
        if self._operation.get() == ADJUST_OPERATION:
            self._emit_operation_change()

    def _reset_operation(self) -> None:
        self.set_operation_value(NO_OPERATION)
        self._emit_operation_change()

    # ---- Helpers ----
    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        if size_bytes < 1024:
            return f"{size_bytes} Б"
        for label, unit in (("КБ", 1024), ("МБ", 1024**2)):
            if size_bytes < unit * 1024:
                return f"{size_bytes / unit:.1f} {label}"
        return f"{size_bytes / 1024**3:.1f} ГБ"
