"""Cue synthesis and playback using numpy + QSoundEffect.

All sounds are generated programmatically as WAV files using simple
oscillators shaped by ADSR envelopes.  Files are cached to disk so
subsequent app launches are instant.

Sound names
-----------
- ``move_start``     — bright sine C4, an eighth note long
- ``rest_start``     — softer triangle G3, an eighth note long
- ``countdown_beep`` — short membrane thump for the last 3 seconds
- ``finished``       — three rising chords, the workout is done

``SoundManager`` is the timer's notification sink: it maps each
``Cue`` to one of the names above.
"""

from __future__ import annotations

import io
import logging
import wave
from collections.abc import Callable
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR
from ..timer.engine import Cue

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    "move_start",
    "rest_start",
    "countdown_beep",
    "finished",
)

CUE_SOUNDS: dict[Cue, str] = {
    Cue.MOVE_START: "move_start",
    Cue.REST_START: "rest_start",
    Cue.COUNTDOWN_BEEP: "countdown_beep",
    Cue.FINISHED: "finished",
}

SAMPLE_RATE = 44100

# Note lengths at 120 bpm
EIGHTH_NOTE = 0.25
SIXTEENTH_NOTE = 0.125
QUARTER_NOTE = 0.5

NOTES: dict[str, float] = {
    "G3": 196.00,
    "C4": 261.63,
    "E4": 329.63,
    "G4": 392.00,
    "B4": 493.88,
    "D5": 587.33,
    "C5": 523.25,
    "E5": 659.25,
    "G5": 783.99,
}


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    # Attack
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    # Decay
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    # Sustain
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    # Release
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _time_axis(duration_s: float) -> np.ndarray:
    return np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    return np.sin(2 * np.pi * freq * _time_axis(duration_s))


def _triangle(freq: float, duration_s: float, partials: int = 8) -> np.ndarray:
    """Band-limited triangle built from its first *partials* odd harmonics."""
    t = _time_axis(duration_s)
    wave_ = np.zeros_like(t)
    for k in range(partials):
        n = 2 * k + 1
        wave_ += ((-1) ** k) * np.sin(2 * np.pi * freq * n * t) / (n * n)
    return wave_ * (8 / np.pi ** 2)


def _saw(freq: float, duration_s: float) -> np.ndarray:
    """Naive sawtooth, -1..1."""
    phase = (freq * _time_axis(duration_s)) % 1.0
    return 2.0 * phase - 1.0


def _fat_saw(freq: float, duration_s: float, detune_cents: float = 12.0) -> np.ndarray:
    """Three slightly detuned saws for a thicker tone."""
    ratio = 2 ** (detune_cents / 1200)
    return (
        _saw(freq, duration_s)
        + _saw(freq * ratio, duration_s)
        + _saw(freq / ratio, duration_s)
    ) / 3.0


def _seconds(samples_s: float) -> int:
    return int(SAMPLE_RATE * samples_s)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    # Clip and scale
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_move_start() -> bytes:
    """Move start — clean sine C4 with a long release tail."""
    tone = _sine(NOTES["C4"], EIGHTH_NOTE + 0.6) * 0.6
    env = _make_envelope(
        len(tone),
        attack=_seconds(0.005),
        decay=_seconds(0.1),
        sustain_level=0.3,
        release=_seconds(0.6),
    )
    return _to_wav_bytes(tone * env)


def _generate_rest_start() -> bytes:
    """Rest start — triangle G3, mellower than the move chime."""
    tone = _triangle(NOTES["G3"], EIGHTH_NOTE + 0.6) * 0.6
    env = _make_envelope(
        len(tone),
        attack=_seconds(0.005),
        decay=_seconds(0.1),
        sustain_level=0.3,
        release=_seconds(0.6),
    )
    return _to_wav_bytes(tone * env)


def _generate_countdown_beep() -> bytes:
    """Countdown — membrane thump: pitch falls from 2 octaves above C4."""
    duration = SIXTEENTH_NOTE + 0.2
    t = _time_axis(duration)
    base = NOTES["C4"]
    # Exponential pitch drop, integrated into phase
    freq = base + base * 3 * np.exp(-t / 0.02)
    phase = 2 * np.pi * np.cumsum(freq) / SAMPLE_RATE
    tone = np.sin(phase) * 0.7
    env = _make_envelope(
        len(tone),
        attack=_seconds(0.001),
        decay=_seconds(0.25),
        sustain_level=0.0,
        release=0,
    )
    return _to_wav_bytes(tone * env)


def _generate_finished() -> bytes:
    """Finished — C major, G major, high C major chords, 0.2 s apart."""
    chords = (
        (("C4", "E4", "G4"), EIGHTH_NOTE),
        (("G4", "B4", "D5"), EIGHTH_NOTE),
        (("C5", "E5", "G5"), QUARTER_NOTE),
    )
    spacing = 0.2
    release = 0.5
    total = spacing * (len(chords) - 1) + QUARTER_NOTE + release
    out = np.zeros(_seconds(total))
    for i, (names, length) in enumerate(chords):
        duration = length + release
        chord = sum(_fat_saw(NOTES[n], duration) for n in names) / len(names)
        env = _make_envelope(
            len(chord),
            attack=_seconds(0.05),
            decay=_seconds(0.2),
            sustain_level=0.2,
            release=_seconds(release),
        )
        start = _seconds(spacing * i)
        segment = (chord * env * 0.5)[: len(out) - start]
        out[start:start + len(segment)] += segment
    return _to_wav_bytes(out)


# Map sound names to generator functions
_GENERATORS: dict[str, Callable[[], bytes]] = {
    "move_start": _generate_move_start,
    "rest_start": _generate_rest_start,
    "countdown_beep": _generate_countdown_beep,
    "finished": _generate_finished,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Synthesis, caching and playback of the workout cues.

    Nothing is loaded until ``ensure_ready`` is called; until then
    ``notify`` and ``play`` are silent.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.ensure_ready(lambda: mgr.notify(Cue.MOVE_START))
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._ready = False

    # ── notification sink ─────────────────────────────────────────────

    def ensure_ready(self, on_ready: Callable[[], None]) -> None:
        """Prepare audio, then call *on_ready*.  Always calls it."""
        try:
            if not self._ready:
                self._ensure_wav_files()
                self._load_effects()
                self._ready = True
        except OSError:
            logger.warning(
                "Audio unavailable; continuing without cues", exc_info=True,
            )
        finally:
            on_ready()

    def notify(self, cue: Cue) -> None:
        self.play(CUE_SOUNDS[cue])

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled, not ready or unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def ready(self) -> bool:
        return self._ready

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                logger.info("Generating %s", path)
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
