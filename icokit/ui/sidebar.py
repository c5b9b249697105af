"""Боковая панель: действия с файлом, список записей иконки, информация, курсор.

Принципы:
- SRP: управляет только UI, не знает о формате ICO.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import customtkinter as ctk

ADD_MODES = ("PNG", "BMP", "PNG+BMP")


def _rgba_to_hex(rgba: Tuple[int, int, int, int]) -> str:
    """Преобразует RGBA в HEX (без альфа)."""
    r, g, b, _a = rgba
    return f"#{r:02X}{g:02X}{b:02X}"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, записи, информация, курсор."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_icon: Optional[Callable[[], None]] = None
        self.on_import_frames: Optional[Callable[[], None]] = None
        self.on_add_image: Optional[Callable[[], None]] = None
        self.on_remove_entry: Optional[Callable[[], None]] = None
        self.on_save_icon: Optional[Callable[[], None]] = None
        self.on_entry_selected: Optional[Callable[[int], None]] = None

        # File section
        self._title = ctk.CTkLabel(self, text="Иконка", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть ICO…", command=lambda: self._emit(self.on_open_icon))
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._frames_btn = ctk.CTkButton(
            self, text="Из кадров изображения…", command=lambda: self._emit(self.on_import_frames)
        )
        self._frames_btn.grid(row=2, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._save_btn = ctk.CTkButton(self, text="Сохранить ICO…", command=lambda: self._emit(self.on_save_icon))
        self._save_btn.grid(row=3, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Entries section
        self._entries_title = ctk.CTkLabel(self, text="Записи", font=ctk.CTkFont(size=16, weight="bold"))
        self._entries_title.grid(row=4, column=0, padx=8, pady=(8, 4), sticky="w")

        self._selected_entry = ctk.IntVar(value=-1)
        self._entries_frame = ctk.CTkScrollableFrame(self, height=180)
        self._entries_frame.grid(row=5, column=0, padx=8, pady=(0, 4), sticky="nsew")
        self._entries_frame.grid_columnconfigure(0, weight=1)
        self._entry_buttons: List[ctk.CTkRadioButton] = []
        self.grid_rowconfigure(5, weight=1)

        self._add_mode = ctk.CTkSegmentedButton(self, values=list(ADD_MODES))
        self._add_mode.set("PNG+BMP")
        self._add_mode.grid(row=6, column=0, padx=8, pady=(4, 4), sticky="ew")

        self._add_btn = ctk.CTkButton(self, text="Добавить изображение…", command=lambda: self._emit(self.on_add_image))
        self._add_btn.grid(row=7, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._remove_btn = ctk.CTkButton(
            self, text="Удалить запись", fg_color="#8a2a2a", command=lambda: self._emit(self.on_remove_entry)
        )
        self._remove_btn.grid(row=8, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._entry_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=270, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_entry = ctk.CTkLabel(self, textvariable=self._entry_val, wraplength=270, anchor="w", justify="left")

        self._info_path.grid(row=10, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_entry.grid(row=12, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=ctk.CTkFont(size=16, weight="bold"))
        self._cursor_title.grid(row=13, column=0, padx=8, pady=(8, 4), sticky="w")

        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgba_val = ctk.StringVar(value="—")
        self._cursor_hex_val = ctk.StringVar(value="—")

        self._cursor_xy = ctk.CTkLabel(self, textvariable=self._cursor_xy_val, anchor="w", justify="left")
        self._cursor_rgba = ctk.CTkLabel(self, textvariable=self._cursor_rgba_val, anchor="w", justify="left")
        self._cursor_hex = ctk.CTkLabel(self, textvariable=self._cursor_hex_val, anchor="w", justify="left")

        self._cursor_xy.grid(row=14, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._cursor_rgba.grid(row=15, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._cursor_hex.grid(row=16, column=0, padx=8, pady=(0, 2), sticky="ew")

        # Status line
        self._status_val = ctk.StringVar(value="")
        self._status = ctk.CTkLabel(self, textvariable=self._status_val, wraplength=270, anchor="w", justify="left")
        self._status.grid(row=17, column=0, padx=8, pady=(8, 8), sticky="ew")

    # ---- Public API ----
    def set_entries(self, labels: Sequence[str], selected: Optional[int] = None) -> None:
        """Перестраивает список записей и выделяет запись с индексом `selected`."""
        for button in self._entry_buttons:
            button.destroy()
        self._entry_buttons = []
        for index, label in enumerate(labels):
            button = ctk.CTkRadioButton(
                self._entries_frame,
                text=label,
                variable=self._selected_entry,
                value=index,
                command=self._emit_entry_selected,
            )
            button.grid(row=index, column=0, padx=6, pady=2, sticky="w")
            self._entry_buttons.append(button)
        self._selected_entry.set(-1 if selected is None else selected)

    def get_selected_entry(self) -> Optional[int]:
        index = self._selected_entry.get()
        return index if index >= 0 else None

    def get_add_kinds(self) -> Tuple[str, ...]:
        """Виды вариантов для добавляемого изображения: ("png",), ("bmp",) или оба."""
        return tuple(part.lower() for part in self._add_mode.get().split("+"))

    def set_file_info(self, path: Optional[str], size_bytes: Optional[int]) -> None:
        self._path_val.set(path or "Новая иконка")
        self._size_val.set(self._format_size(size_bytes))

    def set_entry_info(self, text: Optional[str]) -> None:
        self._entry_val.set(text or "—")

    def set_status(self, text: str) -> None:
        self._status_val.set(text)

    def update_cursor_info(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        """Обновляет информацию по курсору (координаты, RGBA, HEX)."""
        if x is None or y is None or rgba is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgba_val.set("—")
            self._cursor_hex_val.set("—")
            return
        self._cursor_xy_val.set(f"({x}, {y})")
        r, g, b, a = rgba
        self._cursor_rgba_val.set(f"RGBA: {r}, {g}, {b}, {a}")
        self._cursor_hex_val.set(f"HEX: {_rgba_to_hex(rgba)}")

    # ---- Events ----
    def _emit(self, callback: Optional[Callable[[], None]]) -> None:
        if callback:
            callback()

    def _emit_entry_selected(self) -> None:
        index = self.get_selected_entry()
        if index is not None and self.on_entry_selected:
            self.on_entry_selected(index)

    # ---- Helpers ----
    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        return f"{size_bytes / 1024**3:.1f} ГБ"
