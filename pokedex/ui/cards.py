"""Creature cards for the catalog grid, plus a shared artwork loader."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QObject, Qt, QUrl
from PySide6.QtGui import QColor, QPixmap
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pokedex.ui.colors import Palette, blend_hex, type_color
from pokedex.ui.models import CardState

logger = logging.getLogger(__name__)


class ArtworkLoader(QObject):
    """Downloads artwork once per URL and hands out cached pixmaps."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._manager = QNetworkAccessManager(self)
        self._cache: Dict[str, QPixmap] = {}
        self._waiting: Dict[str, List[Callable[[QPixmap], None]]] = {}

    def request(self, url: str, callback: Callable[[QPixmap], None]) -> None:
        if not url:
            return
        if url in self._cache:
            callback(self._cache[url])
            return
        if url in self._waiting:
            self._waiting[url].append(callback)
            return
        self._waiting[url] = [callback]
        reply = self._manager.get(QNetworkRequest(QUrl(url)))
        reply.finished.connect(lambda: self._on_finished(url, reply))

    def _on_finished(self, url: str, reply: QNetworkReply) -> None:
        callbacks = self._waiting.pop(url, [])
        if reply.error() != QNetworkReply.NetworkError.NoError:
            logger.warning("Could not load artwork %s: %s", url, reply.errorString())
            reply.deleteLater()
            return
        pixmap = QPixmap()
        pixmap.loadFromData(reply.readAll())
        reply.deleteLater()
        if pixmap.isNull():
            return
        self._cache[url] = pixmap
        for callback in callbacks:
            callback(pixmap)


class CreatureCard(QFrame):
    """Clickable card: artwork, number, name, type pills and a favorite star."""

    def __init__(
        self,
        card: CardState,
        palette: Palette,
        artwork: ArtworkLoader,
        *,
        on_open: Callable[[int], None],
        on_favorite: Callable[[int], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._card = card
        self._on_open = on_open
        self._on_favorite = on_favorite
        creature = card.creature

        self.setObjectName("creatureCard")
        self.setCursor(Qt.PointingHandCursor)
        self.setFixedSize(220, 280)

        self._image = QLabel("…")
        self._image.setAlignment(Qt.AlignCenter)
        self._image.setFixedHeight(150)

        number = QLabel(creature.number)
        number.setStyleSheet(f"color: {palette.TEXT_MUTED}; font-size: 12px; font-weight: 700;")

        self._favorite_button = QPushButton("★" if card.favorite else "☆")
        self._favorite_button.setFlat(True)
        self._favorite_button.setCursor(Qt.PointingHandCursor)
        self._favorite_button.setFixedSize(32, 32)
        self._favorite_button.setStyleSheet(
            f"color: {palette.POINTS}; font-size: 20px; border: none; background: transparent;"
        )
        self._favorite_button.clicked.connect(lambda: self._on_favorite(creature.id))

        top_row = QHBoxLayout()
        top_row.addWidget(number)
        top_row.addStretch(1)
        top_row.addWidget(self._favorite_button)

        name = QLabel(creature.display_name)
        name.setStyleSheet(f"color: {palette.TEXT_PRIMARY}; font-size: 16px; font-weight: 800;")

        types_row = QHBoxLayout()
        types_row.setSpacing(6)
        for type_name in creature.types:
            pill = QLabel(type_name.title())
            color = type_color(type_name)
            pill.setStyleSheet(
                f"""
                background: {color};
                color: white;
                border-radius: 9px;
                padding: 2px 10px;
                font-size: 11px;
                font-weight: 700;
                """
            )
            types_row.addWidget(pill)
        types_row.addStretch(1)

        footer = QLabel(self._footer_text(card))
        footer.setStyleSheet(f"color: {palette.TEXT_MUTED}; font-size: 11px;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 10, 14, 12)
        layout.setSpacing(6)
        layout.addLayout(top_row)
        layout.addWidget(self._image)
        layout.addWidget(name)
        layout.addLayout(types_row)
        layout.addWidget(footer)

        accent = type_color(creature.types[0]) if creature.types else palette.PRIMARY
        border = blend_hex(accent, "#FFFFFF", 0.35)
        self.setStyleSheet(
            f"""
            QFrame#creatureCard {{
                background: {palette.CARD_BG};
                border: 2px solid {border};
                border-radius: 18px;
            }}
            QFrame#creatureCard:hover {{
                border: 2px solid {accent};
            }}
            """
        )
        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(22)
        shadow.setOffset(0, 6)
        shadow.setColor(QColor(15, 23, 42, 60))
        self.setGraphicsEffect(shadow)

        artwork.request(creature.artwork_url, self._set_pixmap)

    @staticmethod
    def _footer_text(card: CardState) -> str:
        parts = ["Discovered" if card.discovered else "New!"]
        if card.best_score:
            parts.append(f"Quiz best {card.best_score}")
        return " · ".join(parts)

    def _set_pixmap(self, pixmap: QPixmap) -> None:
        scaled = pixmap.scaled(140, 140, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        try:
            self._image.setPixmap(scaled)
        except RuntimeError:
            # Card was destroyed by a page change before the download finished.
            pass

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self._on_open(self._card.creature.id)
        super().mousePressEvent(event)
