from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from pokedex.core.catalog import CatalogLoader, Creature, EvolutionNode
from pokedex.core.levels import title_for_level
from pokedex.core.progress import ProgressStore
from pokedex.core.quiz import QuizBank, build_questions
from pokedex.core.search import filter_creatures, paginate
from pokedex.core.session import QuizSession
from pokedex.ui.cards import ArtworkLoader, CreatureCard
from pokedex.ui.colors import Palette, palette_for, type_color
from pokedex.ui.dialogs import CreatureDetailsDialog, QuizDialog
from pokedex.ui.models import card_states
from pokedex.ui.widgets import ProgressPanel
from pokedex.ui.workers import start_task

logger = logging.getLogger(__name__)

GRID_COLUMNS = 4


class MainWindow(QMainWindow):
    """Catalog browser with the trainer progress panel on top.

    The window owns no progress of its own: it reads snapshots from the
    injected ProgressStore and sends every change back through it.
    """

    def __init__(
        self,
        store: ProgressStore,
        loader: CatalogLoader,
        quiz_bank: QuizBank,
        page_size: int = 20,
    ) -> None:
        super().__init__()
        self._store = store
        self._loader = loader
        self._quiz_bank = quiz_bank
        self._page_size = page_size
        self._creatures: List[Creature] = []
        self._by_id: Dict[int, Creature] = {}
        self._page = 1
        self._loading = False
        self._error: Optional[str] = None
        self._artwork = ArtworkLoader(self)
        self._type_buttons: Dict[str, QPushButton] = {}

        self.setWindowTitle("Pokédex")
        self.resize(1080, 860)
        self._build_ui()
        self._apply_theme()

        self._store.refresh_daily_streak()
        self._after_progress_change()
        self.load_catalog()

    @property
    def _palette(self) -> Palette:
        return palette_for(self._store.state.theme)

    def _build_ui(self) -> None:
        self._title = QLabel("Pokédex")
        self._title.setAlignment(Qt.AlignCenter)
        self._theme_button = QPushButton("")
        self._theme_button.setCursor(Qt.PointingHandCursor)
        self._theme_button.clicked.connect(self._toggle_theme)

        header = QHBoxLayout()
        header.addStretch(1)
        header.addWidget(self._title)
        header.addStretch(1)
        header.addWidget(self._theme_button)

        self._progress_panel = ProgressPanel()

        self._search = QLineEdit()
        self._search.setPlaceholderText("Search by name or number…")
        self._search.setClearButtonEnabled(True)
        self._search.setMaximumWidth(520)
        self._search.setText(self._store.state.search_term)
        self._search.textChanged.connect(self._on_search_changed)

        types_row = QHBoxLayout()
        types_row.setSpacing(6)
        types_row.addStretch(1)
        for type_name in self._quiz_bank.types:
            button = QPushButton(type_name.title())
            button.setCheckable(True)
            button.setCursor(Qt.PointingHandCursor)
            button.setChecked(type_name in self._store.state.selected_types)
            button.clicked.connect(lambda _checked=False, t=type_name: self._toggle_type(t))
            self._type_buttons[type_name] = button
            types_row.addWidget(button)
        types_row.addStretch(1)

        self._status = QLabel("")
        self._status.setAlignment(Qt.AlignCenter)
        self._status.setWordWrap(True)
        self._retry_button = QPushButton("Retry")
        self._retry_button.setCursor(Qt.PointingHandCursor)
        self._retry_button.clicked.connect(self.load_catalog)
        self._retry_button.setVisible(False)

        self._grid_host = QWidget()
        self._grid = QGridLayout(self._grid_host)
        self._grid.setSpacing(18)
        self._grid.setAlignment(Qt.AlignTop | Qt.AlignHCenter)

        self._prev_button = QPushButton("Previous")
        self._prev_button.clicked.connect(lambda: self._go_to_page(self._page - 1))
        self._next_button = QPushButton("Next")
        self._next_button.clicked.connect(lambda: self._go_to_page(self._page + 1))
        self._page_label = QLabel("")
        pager = QHBoxLayout()
        pager.addStretch(1)
        pager.addWidget(self._prev_button)
        pager.addWidget(self._page_label)
        pager.addWidget(self._next_button)
        pager.addStretch(1)

        content = QWidget()
        content.setObjectName("pokedexContent")
        layout = QVBoxLayout(content)
        layout.setContentsMargins(28, 20, 28, 28)
        layout.setSpacing(16)
        layout.addLayout(header)
        layout.addWidget(self._progress_panel)
        layout.addWidget(self._search, 0, Qt.AlignHCenter)
        layout.addLayout(types_row)
        layout.addWidget(self._status)
        layout.addWidget(self._retry_button, 0, Qt.AlignHCenter)
        layout.addWidget(self._grid_host)
        layout.addLayout(pager)
        layout.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(content)
        self._content = content
        self.setCentralWidget(scroll)

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def _apply_theme(self) -> None:
        palette = self._palette
        self._content.setStyleSheet(
            f"""
            QWidget#pokedexContent {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {palette.BG_TOP}, stop:1 {palette.BG_BOTTOM});
            }}
            QLineEdit {{
                background: {palette.CARD_BG};
                color: {palette.TEXT_PRIMARY};
                border: 1px solid {palette.CARD_BORDER};
                border-radius: 14px;
                padding: 10px 14px;
                font-size: 14px;
            }}
            QPushButton {{
                background: {palette.PRIMARY};
                color: white;
                border: none;
                border-radius: 10px;
                padding: 8px 14px;
                font-weight: 700;
            }}
            QPushButton:disabled {{
                background: {palette.TEXT_MUTED};
            }}
            """
        )
        self._title.setStyleSheet(
            f"color: {palette.TEXT_PRIMARY}; font-size: 34px; font-weight: 900;"
        )
        self._status.setStyleSheet(f"color: {palette.TEXT_SECONDARY}; font-size: 14px;")
        self._page_label.setStyleSheet(f"color: {palette.TEXT_PRIMARY}; padding: 0 12px;")
        self._theme_button.setText("☀ Light" if self._store.state.theme == "dark" else "🌙 Dark")
        self._progress_panel.apply_palette(palette)
        self._style_type_buttons()

    def _style_type_buttons(self) -> None:
        selected = self._store.state.selected_types
        for type_name, button in self._type_buttons.items():
            color = type_color(type_name)
            checked = type_name in selected
            button.setChecked(checked)
            button.setStyleSheet(
                f"""
                QPushButton {{
                    background: {color if checked else "transparent"};
                    color: {"white" if checked else color};
                    border: 2px solid {color};
                    border-radius: 12px;
                    padding: 4px 10px;
                    font-size: 11px;
                    font-weight: 700;
                }}
                """
            )

    def _toggle_theme(self) -> None:
        self._store.toggle_theme()
        self._apply_theme()
        self._refresh_grid()

    # ------------------------------------------------------------------
    # Catalog loading
    # ------------------------------------------------------------------

    def load_catalog(self) -> None:
        """Start a roster load; any load still running becomes stale."""
        generation = self._loader.begin()
        self._loading = True
        self._error = None
        self._retry_button.setVisible(False)
        self._refresh_grid()
        start_task(
            self._loader.load,
            generation,
            on_finished=lambda result, g=generation: self._on_catalog_loaded(g, result),
            on_failed=lambda message, g=generation: self._on_catalog_failed(g, message),
        )

    def _on_catalog_loaded(self, generation: int, creatures: Optional[List[Creature]]) -> None:
        if creatures is None or not self._loader.is_current(generation):
            return
        logger.info("Catalog ready with %d creatures", len(creatures))
        self._loading = False
        self._creatures = list(creatures)
        self._by_id = {c.id: c for c in self._creatures}
        self._refresh_grid()

    def _on_catalog_failed(self, generation: int, message: str) -> None:
        if not self._loader.is_current(generation):
            return
        self._loading = False
        self._error = message
        self._refresh_grid()

    # ------------------------------------------------------------------
    # Search, filters, paging
    # ------------------------------------------------------------------

    def _on_search_changed(self, text: str) -> None:
        self._store.set_search_term(text)
        self._page = 1
        self._refresh_grid()

    def _toggle_type(self, type_name: str) -> None:
        self._store.toggle_type_filter(type_name)
        self._style_type_buttons()
        self._page = 1
        self._refresh_grid()

    def _go_to_page(self, page: int) -> None:
        self._page = page
        self._refresh_grid()

    def _clear_grid(self) -> None:
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    def _refresh_grid(self) -> None:
        self._clear_grid()
        palette = self._palette
        if self._loading:
            self._status.setText("Loading Pokémon…")
            self._set_pager(visible=False)
            return
        if self._error:
            self._status.setText(f"Error loading Pokémon data: {self._error}")
            self._status.setStyleSheet(f"color: {palette.ERROR}; font-size: 14px;")
            self._retry_button.setVisible(True)
            self._set_pager(visible=False)
            return
        self._status.setStyleSheet(f"color: {palette.TEXT_SECONDARY}; font-size: 14px;")

        state = self._store.state
        matches = filter_creatures(self._creatures, state.search_term, state.selected_types)
        page = paginate(matches, self._page, self._page_size)
        self._page = page.page
        if not matches:
            self._status.setText("No Pokémon found matching your search criteria")
            self._set_pager(visible=False)
            return
        self._status.setText("")

        for index, card in enumerate(card_states(page.items, state)):
            widget = CreatureCard(
                card,
                palette,
                self._artwork,
                on_open=self._open_creature,
                on_favorite=self._toggle_favorite,
            )
            self._grid.addWidget(widget, index // GRID_COLUMNS, index % GRID_COLUMNS)

        self._set_pager(visible=True)
        self._page_label.setText(f"Page {page.page} of {page.total_pages}")
        self._prev_button.setEnabled(page.has_previous)
        self._next_button.setEnabled(page.has_next)

    def _set_pager(self, visible: bool) -> None:
        self._prev_button.setVisible(visible)
        self._next_button.setVisible(visible)
        self._page_label.setVisible(visible)

    # ------------------------------------------------------------------
    # Cards, details, quiz
    # ------------------------------------------------------------------

    def _toggle_favorite(self, creature_id: int) -> None:
        self._store.toggle_favorite(creature_id)
        self._refresh_grid()

    def _open_creature(self, creature_id: int) -> None:
        creature = self._by_id.get(creature_id)
        if creature is None:
            return
        self._store.record_discovery(creature_id)
        self._after_progress_change()

        dialog = CreatureDetailsDialog(
            creature, self._palette, self._artwork, self._loader.fetcher, parent=self
        )
        dialog.exec()
        if dialog.wants_quiz:
            self._open_quiz(creature, dialog.evolution)
        self._refresh_grid()

    def _open_quiz(self, creature: Creature, evolution: Optional[EvolutionNode]) -> None:
        questions = build_questions(creature, evolution, self._quiz_bank)
        session = QuizSession(creature.id, questions, self._store, creature_name=creature.name)
        dialog = QuizDialog(
            session, creature, self._palette, on_answered=self._after_progress_change, parent=self
        )
        dialog.exec()
        self._after_progress_change()

    def _after_progress_change(self) -> None:
        self._progress_panel.update_state(self._store.state)
        notice = self._store.consume_level_up()
        if notice is None:
            return
        QMessageBox.information(
            self,
            "Level up!",
            f"Level {notice.from_level} → Level {notice.to_level}\n\n"
            f"You are now a {title_for_level(notice.to_level)}!",
        )

    def closeEvent(self, event: QCloseEvent) -> None:
        self._loader.begin()
        self._store.save()
        self._loader.fetcher.close()
        super().closeEvent(event)
