"""Application entry point and setup for the Pokédex trainer."""

import logging
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from pokedex.core.catalog import CatalogFetcher, CatalogLoader
from pokedex.core.config import Settings
from pokedex.core.progress import ProgressStore
from pokedex.core.quiz import QuizBank
from pokedex.ui.main_window import MainWindow


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Read settings, wire the stores and start the main window."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logging.info("Progress file: %s", settings.progress_file)

    app = QApplication(sys.argv)
    app.setApplicationName("Pokedex")
    app.setApplicationDisplayName("Pokédex")

    store = ProgressStore(settings.progress_file)
    fetcher = CatalogFetcher(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        batch_size=settings.batch_size,
    )
    loader = CatalogLoader(fetcher, settings.roster_size, attempts=settings.load_attempts)
    quiz_bank = QuizBank()

    window = MainWindow(store, loader, quiz_bank, page_size=settings.page_size)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(window.width(), geometry.width()), min(window.height(), geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
