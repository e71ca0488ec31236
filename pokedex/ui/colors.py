"""Theme palettes, type colors and color utilities for the UI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    BG_TOP: str
    BG_BOTTOM: str
    PRIMARY: str
    PRIMARY_LIGHT: str
    CARD_BG: str
    CARD_BORDER: str
    TEXT_PRIMARY: str
    TEXT_SECONDARY: str
    TEXT_MUTED: str
    PROGRESS_TRACK: str
    POINTS: str
    BADGES: str
    STREAK: str
    ERROR: str


LIGHT = Palette(
    BG_TOP="#e3f2fd",
    BG_BOTTOM="#bbdefb",
    PRIMARY="#3b4cca",
    PRIMARY_LIGHT="#7986cb",
    CARD_BG="rgba(255, 255, 255, 0.92)",
    CARD_BORDER="rgba(59, 76, 202, 0.15)",
    TEXT_PRIMARY="#1a237e",
    TEXT_SECONDARY="#455a64",
    TEXT_MUTED="#78909c",
    PROGRESS_TRACK="#e0e7f5",
    POINTS="#f9a825",
    BADGES="#8e24aa",
    STREAK="#e53935",
    ERROR="#c62828",
)

DARK = Palette(
    BG_TOP="#111827",
    BG_BOTTOM="#1f2937",
    PRIMARY="#818cf8",
    PRIMARY_LIGHT="#a5b4fc",
    CARD_BG="rgba(31, 41, 55, 0.95)",
    CARD_BORDER="rgba(129, 140, 248, 0.25)",
    TEXT_PRIMARY="#f3f4f6",
    TEXT_SECONDARY="#d1d5db",
    TEXT_MUTED="#9ca3af",
    PROGRESS_TRACK="#374151",
    POINTS="#fcd34d",
    BADGES="#c084fc",
    STREAK="#f87171",
    ERROR="#f87171",
)

TYPE_COLORS = {
    "normal": "#A8A878",
    "fire": "#F08030",
    "water": "#6890F0",
    "electric": "#F8D030",
    "grass": "#78C850",
    "ice": "#98D8D8",
    "fighting": "#C03028",
    "poison": "#A040A0",
    "ground": "#E0C068",
    "flying": "#A890F0",
    "psychic": "#F85888",
    "bug": "#A8B820",
    "rock": "#B8A038",
    "ghost": "#705898",
    "dragon": "#7038F8",
    "dark": "#705848",
    "steel": "#B8B8D0",
    "fairy": "#EE99AC",
}


def palette_for(theme: str) -> Palette:
    return DARK if theme == "dark" else LIGHT


def type_color(type_name: str) -> str:
    return TYPE_COLORS.get(type_name, "#9e9e9e")


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b. Anything else returns a."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"
