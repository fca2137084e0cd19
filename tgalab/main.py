"""Точка входа в приложение."""
from tgalab.app import LayerCompositorApp
from tgalab.config import AppConfig, setup_logging


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    config = AppConfig.from_env()
    setup_logging(config.log_level)
    app = LayerCompositorApp(config)
    try:
        app.mainloop()
    finally:
        app.release_workers()


if __name__ == "__main__":
    main()
