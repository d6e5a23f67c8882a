"""QSS stylesheet and phase colours for HIIT Timer."""

from __future__ import annotations

from ..timer.engine import Phase, Status, WorkoutState

# ── card backgrounds ─────────────────────────────────────────────────────
#    Only a running workout is tinted; everything else stays neutral.

PHASE_COLORS: dict[Phase, str] = {
    Phase.MOVE: "#0B3D32",   # deep emerald
    Phase.REST: "#0C3A57",   # deep sky
}

NEUTRAL_COLOR = "#111827"

# ── default palette ──────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#111827",
    "bg_secondary": "#1F2937",
    "surface":      "#374151",
    "accent":       "#5EEAD4",   # teal status text
    "text":         "#F9FAFB",
    "text_muted":   "#9CA3AF",
    "start":        "#22C55E",
    "pause":        "#EAB308",
    "restart":      "#3B82F6",
    "border":       "#4B5563",
}


def background_for(state: WorkoutState) -> str:
    """Card colour for *state*: tinted by phase while running."""
    if state.status == Status.RUNNING:
        return PHASE_COLORS[state.phase]
    return NEUTRAL_COLOR


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Detect the best available system font.  Must be called after
    QApplication is created (font database needs the app context)."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase
        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", ".AppleSystemUIFont", "Inter"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
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
        padding: 12px 24px;
        font-size: 16px;
        font-weight: 600;
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['start']};
        border: none;
        font-size: 22px;
        font-weight: 700;
        padding: 16px 24px;
    }}

    QPushButton#primaryButton[mode="pause"] {{
        background-color: {p['pause']};
        color: #000000;
    }}

    QPushButton#primaryButton[mode="restart"] {{
        background-color: {p['restart']};
    }}

    /* ── number inputs ───────────────────────────── */
    QSpinBox {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 6px;
        font-size: 17px;
        font-weight: 600;
    }}

    QSpinBox:disabled {{
        color: {p['text_muted']};
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#inputLabel {{
        font-size: 12px;
        color: {p['text_muted']};
        font-weight: 600;
    }}

    QLabel#statusLabel {{
        font-size: 44px;
        color: {p['accent']};
        font-weight: 700;
    }}

    QLabel#timeLabel {{
        font-size: 88px;
        font-family: "Menlo", monospace;
        font-weight: 700;
    }}

    QLabel#repLabel, QLabel#totalLabel {{
        font-size: 18px;
        color: {p['text_muted']};
        font-weight: 600;
    }}

    /* ── phase progress ──────────────────────────── */
    QProgressBar {{
        background-color: {p['bg_secondary']};
        border: none;
        border-radius: 3px;
        max-height: 6px;
    }}

    QProgressBar::chunk {{
        background-color: {p['accent']};
        border-radius: 3px;
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
