"""Виджет просмотра изображения записи: пиксельный зум, шахматный фон, цвет под курсором.

Принципы:
- SRP: отвечает только за представление изображения записи.
- Изображение всегда по центру канвы; прозрачность видна на шахматном фоне.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import numpy as np
import tkinter as tk
from PIL import Image, ImageTk

MIN_SCALE = 0.1
MAX_SCALE = 16.0  # icons are tiny, allow deep zoom
CHECKER_CELL = 8
CHECKER_COLORS = ((0xCC, 0xCC, 0xCC, 0xFF), (0x99, 0x99, 0x99, 0xFF))


def _checkerboard(size: Tuple[int, int]) -> Image.Image:
    width, height = size
    rows, cols = np.indices((height, width)) // CHECKER_CELL
    palette = np.array(CHECKER_COLORS, dtype=np.uint8)
    return Image.fromarray(palette[(rows + cols) % 2])


class ImageViewer(ctk.CTkFrame):
    """Канва с изображением выбранной записи иконки."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._scale_factor: float = 1.0
        self._origin: Tuple[int, int] = (0, 0)

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int], Optional[Tuple[int, int, int, int]]], None]] = None
        self.on_zoom_change: Optional[Callable[[int], None]] = None

        self._canvas.bind("<Configure>", lambda _e: self._render_image())
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", lambda _e: self._emit_cursor(None, None, None))
        self._canvas.bind("<MouseWheel>", lambda e: self._step_zoom(e.delta > 0))  # Windows/macOS
        self._canvas.bind("<Button-4>", lambda _e: self._step_zoom(True))         # X11 up
        self._canvas.bind("<Button-5>", lambda _e: self._step_zoom(False))        # X11 down

    # ---- Public API ----
    def set_image(self, image: Image.Image) -> None:
        """Показывает изображение, вписывая его в канву."""
        self._image = image if image.mode == "RGBA" else image.convert("RGBA")
        self._scale_factor = self._fit_scale()
        self._render_image()

    def clear(self) -> None:
        self._image = None
        self._tk_image = None
        self._canvas.delete("all")

    def set_zoom_to_fit(self) -> None:
        self._scale_factor = self._fit_scale()
        self._render_image()

    def set_zoom_percent(self, zoom_percent: int) -> None:
        """Устанавливает масштаб в процентах (10–1600%)."""
        self._scale_factor = max(MIN_SCALE, min(MAX_SCALE, zoom_percent / 100.0))
        self._render_image()

    def get_zoom_percent(self) -> int:
        return int(round(self._scale_factor * 100))

    # ---- Internals ----
    def _render_image(self) -> None:
        self._canvas.delete("all")
        if self._image is None:
            return

        img_w, img_h = self._image.size
        scaled = (max(1, int(img_w * self._scale_factor)), max(1, int(img_h * self._scale_factor)))
        # nearest keeps icon pixels crisp when zoomed in
        composed = _checkerboard(scaled)
        composed.alpha_composite(self._image.resize(scaled, Image.Resampling.NEAREST))

        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())
        self._origin = ((canvas_w - scaled[0]) // 2, (canvas_h - scaled[1]) // 2)
        self._tk_image = ImageTk.PhotoImage(composed)
        self._canvas.create_image(*self._origin, image=self._tk_image, anchor="nw")

    def _fit_scale(self) -> float:
        if self._image is None or 0 in self._image.size:
            return 1.0
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._image.size
        return max(MIN_SCALE, min(MAX_SCALE, min(canvas_w / img_w, canvas_h / img_h)))

    def _step_zoom(self, zoom_in: bool) -> None:
        if self._image is None:
            return
        factor = 2.0 if zoom_in else 0.5
        self._scale_factor = max(MIN_SCALE, min(MAX_SCALE, self._scale_factor * factor))
        self._render_image()
        if self.on_zoom_change:
            self.on_zoom_change(self.get_zoom_percent())

    def _on_mouse_move(self, event: tk.Event) -> None:
        if self._image is None:
            return
        ox, oy = self._origin
        x = int((event.x - ox) // self._scale_factor)
        y = int((event.y - oy) // self._scale_factor)
        if 0 <= x < self._image.width and 0 <= y < self._image.height:
            self._emit_cursor(x, y, self._image.getpixel((x, y)))
        else:
            self._emit_cursor(None, None, None)

    def _emit_cursor(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(x, y, rgba)

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
