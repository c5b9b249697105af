"""Точка входа в приложение."""
from icokit.app import IconInspectorApp
from icokit.logs import log_info, setup_logging


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    setup_logging()
    log_info("inspector started")
    app = IconInspectorApp()
    app.mainloop()


if __name__ == "__main__":
    main()
