"""Creature details and quiz dialogs."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pokedex.core.catalog import CatalogFetcher, Creature, EvolutionNode
from pokedex.core.progress import perfect_score_badge
from pokedex.core.session import QuizSession
from pokedex.ui.cards import ArtworkLoader
from pokedex.ui.colors import Palette, type_color
from pokedex.ui.widgets import ProgressBar
from pokedex.ui.workers import start_task

logger = logging.getLogger(__name__)

STAT_LABELS = {
    "hp": "❤ HP",
    "attack": "⚔ Attack",
    "defense": "🛡 Defense",
    "special-attack": "✦ Sp. Atk",
    "special-defense": "🛡 Sp. Def",
    "speed": "⚡ Speed",
}
# Highest base stat in the roster; used to scale the stat bars.
MAX_BASE_STAT = 255


def _button_style(palette: Palette, background: Optional[str] = None) -> str:
    bg = background or palette.PRIMARY
    return f"""
        QPushButton {{
            background: {bg};
            color: white;
            padding: 10px 18px;
            border: none;
            border-radius: 12px;
            font-weight: 700;
            font-size: 13px;
        }}
        QPushButton:disabled {{
            background: {palette.TEXT_MUTED};
        }}
    """


def _option_style(palette: Palette, state: str = "") -> str:
    backgrounds = {"correct": "#c8e6c9", "wrong": "#ffcdd2"}
    bg = backgrounds.get(state, palette.PROGRESS_TRACK)
    text = "#1a3a3a" if state else palette.TEXT_PRIMARY
    return f"""
        QPushButton {{
            background: {bg};
            color: {text};
            padding: 12px;
            border: none;
            border-radius: 10px;
            text-align: left;
            font-size: 14px;
        }}
    """


def format_evolution(evolution: Optional[EvolutionNode]) -> str:
    """Every branch of the chain, one line per final form."""
    if evolution is None:
        return "No evolution data"
    lines: List[str] = []

    def _walk(node: EvolutionNode, prefix: str) -> None:
        label = node.name.replace("-", " ").title()
        if node.requirement:
            label += f" ({node.requirement})"
        text = f"{prefix} → {label}" if prefix else label
        if not node.evolves_to:
            lines.append(text)
            return
        for child in node.evolves_to:
            _walk(child, text)

    _walk(evolution, "")
    if len(lines) == 1 and not evolution.evolves_to:
        return f"{lines[0]} (No evolution)"
    return "\n".join(lines)


class CreatureDetailsDialog(QDialog):
    """Stats, abilities, size and evolution chain, with a button to start the quiz."""

    def __init__(
        self,
        creature: Creature,
        palette: Palette,
        artwork: ArtworkLoader,
        fetcher: CatalogFetcher,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._creature = creature
        self._evolution: Optional[EvolutionNode] = None
        self._wants_quiz = False
        self._closed = False

        self.setWindowTitle(f"{creature.number} {creature.display_name}")
        self.setMinimumWidth(620)
        self.setStyleSheet(f"QDialog {{ background: {palette.BG_TOP}; }}")

        title = QLabel(f"{creature.display_name}  {creature.number}")
        title.setStyleSheet(f"color: {palette.TEXT_PRIMARY}; font-size: 24px; font-weight: 900;")

        self._image = QLabel("")
        self._image.setAlignment(Qt.AlignCenter)
        self._image.setFixedSize(220, 220)
        artwork.request(creature.artwork_url, self._set_pixmap)

        text_style = f"color: {palette.TEXT_SECONDARY}; font-size: 13px;"
        types = QLabel(" / ".join(t.title() for t in creature.types))
        first_type = creature.types[0] if creature.types else ""
        types.setStyleSheet(f"color: {type_color(first_type)}; font-size: 15px; font-weight: 800;")
        size = QLabel(f"Height: {creature.height_m:.1f} m    Weight: {creature.weight_kg:.1f} kg")
        size.setStyleSheet(text_style)
        abilities = QLabel(
            "Abilities: "
            + ", ".join(
                a.name.replace("-", " ") + (" (Hidden)" if a.is_hidden else "")
                for a in creature.abilities
            )
        )
        abilities.setWordWrap(True)
        abilities.setStyleSheet(text_style)

        stats = QGridLayout()
        stats.setHorizontalSpacing(10)
        for row, stat in enumerate(creature.stats):
            name = QLabel(STAT_LABELS.get(stat.name, stat.name.title()))
            name.setStyleSheet(text_style)
            value = QLabel(str(stat.base_value))
            value.setStyleSheet(f"color: {palette.TEXT_PRIMARY}; font-weight: 700;")
            bar = ProgressBar(height=10)
            bar.set_colors(palette.PRIMARY_LIGHT, palette.PRIMARY, palette.PROGRESS_TRACK)
            bar.set_progress(stat.base_value, MAX_BASE_STAT)
            stats.addWidget(name, row, 0)
            stats.addWidget(value, row, 1)
            stats.addWidget(bar, row, 2)

        info = QVBoxLayout()
        info.setSpacing(8)
        info.addWidget(types)
        info.addWidget(size)
        info.addWidget(abilities)
        info.addLayout(stats)

        top = QHBoxLayout()
        top.addWidget(self._image)
        top.addLayout(info, 1)

        evolution_title = QLabel("Evolution chain")
        evolution_title.setStyleSheet(
            f"color: {palette.TEXT_PRIMARY}; font-size: 16px; font-weight: 800;"
        )
        self._evolution_label = QLabel("Loading…")
        self._evolution_label.setStyleSheet(text_style)

        moves = QLabel(
            "Moves: " + ", ".join(m.replace("-", " ") for m in creature.moves[:12])
            + (" …" if len(creature.moves) > 12 else "")
        )
        moves.setWordWrap(True)
        moves.setStyleSheet(text_style)

        self._quiz_button = QPushButton("Take the quiz")
        self._quiz_button.setStyleSheet(_button_style(palette))
        self._quiz_button.setCursor(Qt.PointingHandCursor)
        self._quiz_button.setEnabled(False)
        self._quiz_button.clicked.connect(self._start_quiz)
        close_button = QPushButton("Close")
        close_button.setStyleSheet(_button_style(palette, palette.TEXT_MUTED))
        close_button.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(close_button)
        buttons.addWidget(self._quiz_button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)
        layout.addWidget(title)
        layout.addLayout(top)
        layout.addWidget(evolution_title)
        layout.addWidget(self._evolution_label)
        layout.addWidget(moves)
        layout.addLayout(buttons)

        start_task(
            fetcher.fetch_evolution_chain,
            creature,
            on_finished=self._on_evolution_loaded,
            on_failed=self._on_evolution_failed,
        )

    def _set_pixmap(self, pixmap) -> None:
        if self._closed:
            return
        self._image.setPixmap(pixmap.scaled(210, 210, Qt.KeepAspectRatio, Qt.SmoothTransformation))

    def _on_evolution_loaded(self, evolution: EvolutionNode) -> None:
        if self._closed:
            return
        self._evolution = evolution
        self._evolution_label.setText(format_evolution(evolution))
        self._quiz_button.setEnabled(True)

    def _on_evolution_failed(self, message: str) -> None:
        if self._closed:
            return
        logger.warning("Evolution chain for %s unavailable: %s", self._creature.name, message)
        self._evolution_label.setText("Evolution data unavailable")
        self._quiz_button.setEnabled(True)

    @property
    def evolution(self) -> Optional[EvolutionNode]:
        return self._evolution

    @property
    def wants_quiz(self) -> bool:
        return self._wants_quiz

    def _start_quiz(self) -> None:
        self._wants_quiz = True
        self.accept()

    def done(self, result: int) -> None:
        self._closed = True
        super().done(result)


class QuizDialog(QDialog):
    """One question at a time, then a results screen."""

    FEEDBACK_DELAY_MS = 900

    def __init__(
        self,
        session: QuizSession,
        creature: Creature,
        palette: Palette,
        on_answered: Callable[[], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._creature = creature
        self._palette = palette
        self._on_answered = on_answered
        self._option_buttons: List[QPushButton] = []
        self._locked = False

        self.setWindowTitle(f"{creature.display_name} quiz")
        self.setMinimumWidth(520)
        self.setStyleSheet(f"QDialog {{ background: {palette.BG_TOP}; }}")

        self._header = QLabel("")
        self._header.setStyleSheet(
            f"color: {palette.TEXT_PRIMARY}; font-size: 20px; font-weight: 800;"
        )
        self._dots = QLabel("")
        self._dots.setStyleSheet("font-size: 18px;")
        header_row = QHBoxLayout()
        header_row.addWidget(self._header)
        header_row.addStretch(1)
        header_row.addWidget(self._dots)

        self._prompt = QLabel("")
        self._prompt.setWordWrap(True)
        self._prompt.setStyleSheet(f"color: {palette.TEXT_SECONDARY}; font-size: 16px;")

        self._options_box = QVBoxLayout()
        self._options_box.setSpacing(8)

        self._close_button = QPushButton("Close")
        self._close_button.setStyleSheet(_button_style(palette))
        self._close_button.clicked.connect(self.accept)
        self._close_button.setVisible(False)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(14)
        layout.addLayout(header_row)
        layout.addWidget(self._prompt)
        layout.addLayout(self._options_box)
        layout.addWidget(self._close_button, 0, Qt.AlignRight)

        self._show_question()

    def _render_dots(self) -> None:
        answered = "".join("🟢" if ok else "🔴" for ok in self._session.answers)
        pending = "⚪" * (self._session.total_questions - len(self._session.answers))
        self._dots.setText(answered + pending)

    def _clear_options(self) -> None:
        for button in self._option_buttons:
            self._options_box.removeWidget(button)
            button.deleteLater()
        self._option_buttons = []

    def _show_question(self) -> None:
        self._clear_options()
        self._render_dots()
        question = self._session.current_question()
        if question is None:
            self._show_results()
            return
        self._locked = False
        self._header.setText(
            f"Question {self._session.index + 1} of {self._session.total_questions}"
        )
        self._prompt.setText(question.prompt)
        for option in question.options:
            button = QPushButton(option)
            button.setCursor(Qt.PointingHandCursor)
            button.setStyleSheet(_option_style(self._palette))
            button.clicked.connect(lambda _checked=False, choice=option: self._answer(choice))
            self._options_box.addWidget(button)
            self._option_buttons.append(button)

    def _answer(self, choice: str) -> None:
        if self._locked:
            return
        self._locked = True
        result = self._session.submit(choice)
        for button in self._option_buttons:
            button.setEnabled(False)
            if button.text() == result.correct_answer:
                button.setStyleSheet(_option_style(self._palette, "correct"))
            elif button.text() == choice:
                button.setStyleSheet(_option_style(self._palette, "wrong"))
        self._render_dots()
        self._on_answered()
        QTimer.singleShot(self.FEEDBACK_DELAY_MS, self._show_question)

    def _show_results(self) -> None:
        session = self._session
        self._header.setText("Quiz complete! 🏆" if session.is_perfect() else "Quiz complete!")
        message = f"You scored {session.score} out of {session.total_questions}."
        if session.is_perfect():
            badge = perfect_score_badge(self._creature.id, self._creature.name)
            message += f"\n\n🎉 You've earned the \"{badge}\" badge!"
        self._prompt.setText(message)
        self._close_button.setVisible(True)
