"""Shared widgets: progress bar, stat cards and the trainer progress panel."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QLinearGradient, QPainter
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from pokedex.core.levels import (
    MAX_LEVEL,
    overall_progress,
    points_to_next_level,
    progress_to_next_level,
    title_for_level,
)
from pokedex.core.progress import ProgressState
from pokedex.ui.colors import Palette


class ProgressBar(QWidget):
    """Rounded gradient progress bar."""

    def __init__(self, parent: Optional[QWidget] = None, *, height: int = 12) -> None:
        super().__init__(parent)
        self._value = 0
        self._max_value = 100
        self._color_start = "#7986cb"
        self._color_end = "#3b4cca"
        self._track_color = "#e0e7f5"
        self.setFixedHeight(height)
        self.setMinimumWidth(100)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

    def set_colors(self, start: str, end: str, track: str) -> None:
        self._color_start = start
        self._color_end = end
        self._track_color = track
        self.update()

    def set_progress(self, value: int, max_value: int = 100) -> None:
        self._max_value = max(1, int(max_value))
        self._value = max(0, min(int(value), self._max_value))
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)
        radius = min(8, self.height() // 2)

        painter.setBrush(QColor(self._track_color))
        painter.drawRoundedRect(0, 0, self.width(), self.height(), radius, radius)

        progress_width = int(self._value / self._max_value * self.width())
        if progress_width > 0:
            gradient = QLinearGradient(0, 0, progress_width, 0)
            gradient.setColorAt(0, QColor(self._color_start))
            gradient.setColorAt(1, QColor(self._color_end))
            painter.setBrush(gradient)
            painter.drawRoundedRect(0, 0, progress_width, self.height(), radius, radius)


class StatCard(QFrame):
    def __init__(self, icon: str, label: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("statCard")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(2)
        self._label = QLabel(f"{icon} {label}")
        self._label.setStyleSheet("color: rgba(255,255,255,0.92); font-size: 12px; font-weight: 600;")
        layout.addWidget(self._label)
        self.value_label = QLabel("0")
        self.value_label.setStyleSheet("color: white; font-size: 26px; font-weight: 900;")
        layout.addWidget(self.value_label)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(16)
        shadow.setOffset(0, 4)
        shadow.setColor(QColor(0, 0, 0, 50))
        self.setGraphicsEffect(shadow)

    def set_color(self, bg_color: str) -> None:
        self.setStyleSheet(
            f"""
            QFrame#statCard {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {bg_color}, stop:1 {QColor(bg_color).darker(115).name()});
                border-radius: 16px;
                border: none;
            }}
            """
        )

    def set_value(self, value: str) -> None:
        self.value_label.setText(str(value))


class ProgressPanel(QFrame):
    """Level badge, rank title, stat cards and both progress bars."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("progressPanel")

        self._level_badge = QLabel("1")
        self._level_badge.setAlignment(Qt.AlignCenter)
        self._level_badge.setFixedSize(72, 72)
        self._title_label = QLabel("")
        self._hint_label = QLabel("Keep exploring to level up!")

        title_box = QVBoxLayout()
        title_box.setSpacing(2)
        title_box.addWidget(self._title_label)
        title_box.addWidget(self._hint_label)

        self._points_card = StatCard("⭐", "Points")
        self._badges_card = StatCard("🏅", "Badges")
        self._streak_card = StatCard("🔥", "Daily Streak")

        header = QHBoxLayout()
        header.setSpacing(14)
        header.addWidget(self._level_badge)
        header.addLayout(title_box, 1)
        header.addWidget(self._points_card)
        header.addWidget(self._badges_card)
        header.addWidget(self._streak_card)

        self._level_bar = ProgressBar(height=14)
        self._level_caption = QLabel("")
        self._overall_bar = ProgressBar(height=8)
        self._overall_caption = QLabel("")
        self._badges_label = QLabel("")
        self._badges_label.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(10)
        layout.addLayout(header)
        layout.addWidget(self._level_bar)
        layout.addWidget(self._level_caption, 0, Qt.AlignHCenter)
        layout.addWidget(self._overall_bar)
        layout.addWidget(self._overall_caption, 0, Qt.AlignHCenter)
        layout.addWidget(self._badges_label)

    def apply_palette(self, palette: Palette) -> None:
        self.setStyleSheet(
            f"""
            QFrame#progressPanel {{
                background: {palette.CARD_BG};
                border: 1px solid {palette.CARD_BORDER};
                border-radius: 20px;
            }}
            """
        )
        self._level_badge.setStyleSheet(
            f"""
            background: {palette.PRIMARY};
            color: white;
            border-radius: 36px;
            font-size: 28px;
            font-weight: 900;
            """
        )
        self._title_label.setStyleSheet(
            f"color: {palette.TEXT_PRIMARY}; font-size: 20px; font-weight: 800;"
        )
        muted = f"color: {palette.TEXT_MUTED}; font-size: 12px; font-weight: 600;"
        self._hint_label.setStyleSheet(muted)
        self._level_caption.setStyleSheet(muted)
        self._overall_caption.setStyleSheet(muted)
        self._badges_label.setStyleSheet(f"color: {palette.TEXT_SECONDARY}; font-size: 12px;")
        self._points_card.set_color(palette.POINTS)
        self._badges_card.set_color(palette.BADGES)
        self._streak_card.set_color(palette.STREAK)
        self._level_bar.set_colors(palette.PRIMARY_LIGHT, palette.PRIMARY, palette.PROGRESS_TRACK)
        self._overall_bar.set_colors("#26a69a", "#00897b", palette.PROGRESS_TRACK)

    def update_state(self, state: ProgressState) -> None:
        level = state.level
        self._level_badge.setText(str(level))
        self._title_label.setText(title_for_level(level))
        self._points_card.set_value(str(state.points))
        self._badges_card.set_value(str(len(state.badges)))
        self._streak_card.set_value(str(state.daily_streak))

        self._level_bar.set_progress(progress_to_next_level(state.points))
        if level < MAX_LEVEL:
            self._level_caption.setText(
                f"Level {level} · {points_to_next_level(state.points)} points to Level {level + 1}"
            )
        else:
            self._level_caption.setText("Maximum level reached!")

        overall = overall_progress(level)
        self._overall_bar.set_progress(overall)
        self._overall_caption.setText(f"Level {level} of {MAX_LEVEL} ({overall}% complete)")

        if state.badges:
            self._badges_label.setText("Badges: " + ", ".join(sorted(state.badges)))
        else:
            self._badges_label.setText("No badges yet. Ace a quiz to earn one!")
