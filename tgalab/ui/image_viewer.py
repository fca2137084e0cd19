"""Виджет просмотра: верхний слой «до», результат «после», масштаб и сравнение.

Принципы:
- SRP: отвечает только за отображение и интеракции с изображением.
- Пиксели масштабируются без сглаживания (NEAREST), чтобы были видны значения каналов.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from tgalab.models.image_model import Pixel

MIN_SCALE, MAX_SCALE = 0.1, 8.0
SIDE_GAP = 16
# подписи режимов в UI -> внутренние ключи
COMPARE_MODES = {"Нет": "off", "Шторка": "wipe", "2-up": "side_by_side"}


def _clamp_scale(value: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, value))


class ImageViewer(ctk.CTkFrame):
    """Канва с режимами «только результат», «шторка» и «рядом»."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        bg = "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
        self._canvas = tk.Canvas(self, highlightthickness=0, bg=bg)
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._before: Optional[Image.Image] = None
        self._after: Optional[Image.Image] = None
        self._photos: list[ImageTk.PhotoImage] = []  # держим ссылки, иначе Tk их соберёт

        self._scale: float = 1.0
        self._origin: Optional[Tuple[int, int]] = None  # левый верхний угол содержимого
        self._drag_from: Optional[Tuple[int, int, int, int]] = None

        self._mode: str = "off"
        self._wipe_ratio: float = 0.5
        self._hold_before: bool = False

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int], Optional[Pixel]], None]] = None
        self.on_zoom_change: Optional[Callable[[int], None]] = None

        self._canvas.bind("<Configure>", lambda _e: self._render())
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", lambda _e: self._emit_cursor(None, None, None))
        self._canvas.bind("<MouseWheel>", lambda e: self._zoom_at(e.x, e.y, 1.1 if e.delta > 0 else 1 / 1.1))
        self._canvas.bind("<Button-4>", lambda e: self._zoom_at(e.x, e.y, 1.1))
        self._canvas.bind("<Button-5>", lambda e: self._zoom_at(e.x, e.y, 1 / 1.1))
        self._canvas.bind("<ButtonPress-1>", self._on_drag_start)
        self._canvas.bind("<B1-Motion>", self._on_drag_move)
        self._canvas.bind("<ButtonRelease-1>", self._on_drag_end)
        # удерживать пробел: показать «до»
        self._canvas.bind("<KeyPress-space>", lambda _e: self._set_hold_before(True))
        self._canvas.bind("<KeyRelease-space>", lambda _e: self._set_hold_before(False))

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Новое исходное изображение: сбрасывает результат и подгоняет масштаб."""
        self._before = image
        self._after = None
        self.set_zoom_to_fit()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        self._after = image
        self._render()

    def set_zoom_to_fit(self) -> None:
        self._scale = self._fit_scale()
        self._origin = None
        self._render()

    def set_zoom_percent(self, zoom_percent: int) -> None:
        self._scale = _clamp_scale(zoom_percent / 100.0)
        self._render()

    def get_zoom_percent(self) -> int:
        return int(round(self._scale * 100))

    def set_compare_mode(self, mode: str) -> None:
        """Режим сравнения по подписи UI: 'Нет' | 'Шторка' | '2-up'."""
        self._mode = COMPARE_MODES.get(mode, "off")
        self._origin = None
        self._render()

    def set_wipe_percent(self, percent: int) -> None:
        self._wipe_ratio = max(0.0, min(1.0, percent / 100.0))
        if self._mode == "wipe":
            self._render()

    # ---- Rendering ----
    def _scaled_size(self) -> Tuple[int, int]:
        assert self._before is not None
        w, h = self._before.size
        return max(1, int(w * self._scale)), max(1, int(h * self._scale))

    def _content_size(self) -> Tuple[int, int]:
        sw, sh = self._scaled_size()
        if self._mode == "side_by_side" and self._after is not None:
            return sw * 2 + SIDE_GAP, sh
        return sw, sh

    def _fit_scale(self) -> float:
        if self._before is None:
            return 1.0
        cw = max(1, self._canvas.winfo_width())
        ch = max(1, self._canvas.winfo_height())
        w, h = self._before.size
        return _clamp_scale(min(cw / w, ch / h))

    def _clamped_origin(self) -> Tuple[int, int]:
        cw, ch = self._canvas.winfo_width(), self._canvas.winfo_height()
        content_w, content_h = self._content_size()

        def axis(canvas_len: int, content_len: int, current: Optional[int]) -> int:
            if content_len <= canvas_len:
                return (canvas_len - content_len) // 2
            if current is None:
                return 0
            return max(canvas_len - content_len, min(0, current))

        ox, oy = self._origin if self._origin is not None else (None, None)
        return axis(cw, content_w, ox), axis(ch, content_h, oy)

    def _render(self) -> None:
        self._canvas.delete("all")
        self._photos.clear()
        if self._before is None:
            return

        sw, sh = self._scaled_size()
        before = self._before.resize((sw, sh), Image.Resampling.NEAREST)
        after = self._after.resize((sw, sh), Image.Resampling.NEAREST) if self._after is not None else None
        shown_after = after if (after is not None and not self._hold_before) else before

        self._origin = self._clamped_origin()
        ox, oy = self._origin

        if self._mode == "wipe" and after is not None:
            split = int(round(sw * self._wipe_ratio))
            self._draw(before.crop((0, 0, split, sh)), ox, oy)
            self._draw(shown_after.crop((split, 0, sw, sh)), ox + split, oy)
        elif self._mode == "side_by_side" and after is not None:
            self._draw(before, ox, oy)
            self._draw(shown_after, ox + sw + SIDE_GAP, oy)
        else:
            self._draw(shown_after, ox, oy)

    def _draw(self, image: Image.Image, x: int, y: int) -> None:
        photo = ImageTk.PhotoImage(image)
        self._photos.append(photo)
        self._canvas.create_image(x, y, image=photo, anchor="nw")

    # ---- Cursor ----
    def _locate(self, cx: int, cy: int) -> Tuple[Optional[int], Optional[int], bool]:
        """Координаты пикселя под курсором и признак «курсор над результатом»."""
        if self._before is None or self._origin is None:
            return None, None, False
        sw, sh = self._scaled_size()
        dx, dy = cx - self._origin[0], cy - self._origin[1]
        on_after = False
        if self._mode == "side_by_side" and self._after is not None and dx >= sw + SIDE_GAP:
            dx -= sw + SIDE_GAP
            on_after = True
        if not (0 <= dx < sw and 0 <= dy < sh):
            return None, None, False
        if self._mode == "off":
            on_after = True
        elif self._mode == "wipe":
            on_after = dx >= int(round(sw * self._wipe_ratio))
        w, h = self._before.size
        return min(w - 1, int(dx / self._scale)), min(h - 1, int(dy / self._scale)), on_after

    def _on_mouse_move(self, event: tk.Event) -> None:
        x, y, on_after = self._locate(event.x, event.y)
        if x is None or y is None:
            self._emit_cursor(None, None, None)
            return
        source = self._after if (on_after and self._after is not None and not self._hold_before) else self._before
        r, g, b = source.getpixel((x, y))[:3]
        self._emit_cursor(x, y, Pixel(r, g, b))

    def _emit_cursor(self, x: Optional[int], y: Optional[int], pixel: Optional[Pixel]) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(x, y, pixel)

    # ---- Zoom / pan ----
    def _zoom_at(self, cx: int, cy: int, factor: float) -> None:
        if self._before is None or self._origin is None:
            return
        new_scale = _clamp_scale(self._scale * factor)
        if abs(new_scale - self._scale) < 1e-6:
            return
        # точка под курсором остаётся на месте
        ix = (cx - self._origin[0]) / self._scale
        iy = (cy - self._origin[1]) / self._scale
        self._scale = new_scale
        self._origin = (int(round(cx - ix * new_scale)), int(round(cy - iy * new_scale)))
        self._render()
        if self.on_zoom_change:
            self.on_zoom_change(self.get_zoom_percent())

    def _on_drag_start(self, event: tk.Event) -> None:
        self._canvas.focus_set()
        if self._origin is not None:
            self._drag_from = (event.x, event.y, *self._origin)

    def _on_drag_move(self, event: tk.Event) -> None:
        if self._drag_from is None:
            return
        sx, sy, ox, oy = self._drag_from
        self._origin = (ox + event.x - sx, oy + event.y - sy)
        self._render()

    def _on_drag_end(self, _event: tk.Event) -> None:
        self._drag_from = None

    def _set_hold_before(self, active: bool) -> None:
        if self._mode != "side_by_side" and self._hold_before != active:
            self._hold_before = active
            self._render()
