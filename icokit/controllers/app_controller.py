"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики формата ICO).
- DIP: зависит от `IconService` как от роли; детали кодека инкапсулированы.
Clean Code:
- Обработчики компактны; ошибки сервисов показываются в строке состояния и пишутся в лог.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Any, Callable, Dict, Optional, Tuple

import customtkinter as ctk

from icokit import config
from icokit.exceptions import IconError
from icokit.logs import log_error, log_info
from icokit.models.icon import Icon
from icokit.services.icon_service import IconService
from icokit.ui.bottom_bar import BottomBar
from icokit.ui.image_viewer import ImageViewer
from icokit.ui.sidebar import Sidebar

ICO_FILETYPES = (("Icons", "*.ico"), ("All files", "*.*"))
IMAGE_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> контроллер).
    - Открытие/сохранение иконок и добавление изображений через `IconService`.
    - Синхронизация списка записей, просмотра и зума.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _icon_service: IconService = field(default_factory=IconService)
    _icon: Icon = field(default_factory=Icon)
    _path: Optional[Path] = None
    _size_bytes: Optional[int] = None
    _selected: Optional[int] = None
    _settings: Dict[str, Any] = field(default_factory=config.load_settings)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_icon = self._handle_open_icon
        self.sidebar.on_import_frames = self._handle_import_frames
        self.sidebar.on_add_image = self._handle_add_image
        self.sidebar.on_remove_entry = self._handle_remove_entry
        self.sidebar.on_save_icon = self._handle_save_icon
        self.sidebar.on_entry_selected = self._handle_entry_selected

        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit

        self._refresh()

    # ---- Handlers ----
    def _handle_open_icon(self) -> None:
        file_path = self._ask(filedialog.askopenfilename, title="Выберите иконку", filetypes=ICO_FILETYPES)
        if not file_path:
            return

        def action() -> str:
            icon_file = self._icon_service.load_icon(file_path)
            self._icon = icon_file.icon
            self._path = icon_file.path
            self._size_bytes = icon_file.size_bytes
            self._selected = 0 if icon_file.icon.images else None
            return f"Загружено записей: {len(icon_file.icon)}"

        self._run(action, file_path)

    def _handle_import_frames(self) -> None:
        file_path = self._ask(filedialog.askopenfilename, title="Выберите изображение", filetypes=IMAGE_FILETYPES)
        if not file_path:
            return

        def action() -> str:
            self._icon = self._icon_service.open_frames(file_path)
            self._path = None
            self._size_bytes = None
            self._selected = 0 if self._icon.images else None
            return f"Уникальных кадров: {len(self._icon)}"

        self._run(action, file_path)

    def _handle_add_image(self) -> None:
        file_path = self._ask(filedialog.askopenfilename, title="Выберите изображение", filetypes=IMAGE_FILETYPES)
        if not file_path:
            return

        def action() -> str:
            image = self._icon_service.import_image(file_path)
            variants = self._icon_service.build_variants(image, self.sidebar.get_add_kinds())
            self._icon.images.extend(variants)
            self._selected = len(self._icon.images) - 1
            return f"Добавлено записей: {len(variants)}"

        self._run(action, file_path)

    def _handle_remove_entry(self) -> None:
        index = self.sidebar.get_selected_entry()
        if index is None or index >= len(self._icon.images):
            self.sidebar.set_status("Запись не выбрана")
            return
        del self._icon.images[index]
        self._selected = min(index, len(self._icon.images) - 1) if self._icon.images else None
        self._refresh()
        self.sidebar.set_status(f"Запись {index} удалена")

    def _handle_save_icon(self) -> None:
        if not self._icon.images:
            self.sidebar.set_status("Иконка пуста")
            return
        file_path = self._ask(
            filedialog.asksaveasfilename,
            title="Сохранить иконку",
            defaultextension=".ico",
            filetypes=ICO_FILETYPES,
        )
        if not file_path:
            return

        def action() -> str:
            icon_file = self._icon_service.save_icon(self._icon, file_path)
            self._path = icon_file.path
            self._size_bytes = icon_file.size_bytes
            return f"Сохранено: {icon_file.path.name}"

        self._run(action, file_path)

    def _handle_entry_selected(self, index: int) -> None:
        self._selected = index
        self._show_selected()

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        self.sidebar.update_cursor_info(x, y, rgba)

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _ask(self, dialog: Callable[..., str], **options: Any) -> str:
        initial = self._settings.get("last_directory")
        if initial:
            options["initialdir"] = initial
        try:
            return dialog(**options) or ""
        except TclError:
            # Silent fail if dialog cannot open
            return ""

    def _run(self, action: Callable[[], str], file_path: str) -> None:
        """Выполняет действие с файлом, обновляет UI и показывает результат или ошибку."""
        try:
            message = action()
        except (IconError, OSError, ValueError) as exc:
            log_error(f"{file_path}: {exc}")
            self.sidebar.set_status(f"Ошибка: {exc}")
            return
        log_info(f"{file_path}: {message}")
        self._remember_directory(file_path)
        self._refresh()
        self.sidebar.set_status(message)

    def _remember_directory(self, file_path: str) -> None:
        self._settings["last_directory"] = str(Path(file_path).parent)
        try:
            config.save_settings(self._settings)
        except OSError as exc:
            log_error(f"settings not saved: {exc}")

    def _refresh(self) -> None:
        labels = [self._icon_service.describe(v, index=i) for i, v in enumerate(self._icon.images)]
        self.sidebar.set_entries(labels, self._selected)
        self.sidebar.set_file_info(str(self._path) if self._path else None, self._size_bytes)
        self._show_selected()

    def _show_selected(self) -> None:
        if self._selected is None or self._selected >= len(self._icon.images):
            self.viewer.clear()
            self.sidebar.set_entry_info(None)
            return
        variant = self._icon.images[self._selected]
        self.viewer.set_image(self._icon_service.preview(variant))
        self.sidebar.set_entry_info(self._icon_service.describe(variant, detailed=True))
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())
