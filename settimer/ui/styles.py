"""QSS stylesheet and phase colors for SetTimer."""

from __future__ import annotations

from ..timer.engine import Phase

# ── phase colors ─────────────────────────────────────────────────────────

PHASE_COLORS: dict[Phase, str] = {
    Phase.READY:      "#7A7A9A",   # muted
    Phase.EXERCISING: "#A6E3A1",   # green
    Phase.RESTING:    "#FAB387",   # orange
}

# ── default palette ──────────────────────────────────────────────────────

DEFAULT_PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "warning":      "#FAB387",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def phase_color(phase: Phase) -> str:
    return PHASE_COLORS.get(phase, PHASE_COLORS[Phase.READY])


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or DEFAULT_PALETTE
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-size: 14px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton#startButton,
    QPushButton#completeButton,
    QPushButton#nextSetButton {{
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#startButton {{
        background-color: {p['accent']};
    }}

    QPushButton#completeButton {{
        background-color: {p['warning']};
    }}

    QPushButton#nextSetButton {{
        background-color: {p['success']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        font-size: 13px;
        padding: 6px 14px;
        border-radius: 8px;
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['accent']};
        font-size: 13px;
        padding: 6px 14px;
        border-radius: 8px;
    }}

    QPushButton#stopButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 12px;
        padding: 4px 12px;
        border-radius: 6px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#caption {{
        color: {p['text_muted']};
        font-size: 11px;
        letter-spacing: 1px;
    }}

    QLabel#setCounter {{
        font-size: 40px;
        font-weight: 700;
    }}

    QLabel#timeLabel {{
        font-size: 28px;
        font-weight: 600;
    }}

    QFrame#divider {{
        background-color: {p['border']};
        max-height: 1px;
    }}
    """
