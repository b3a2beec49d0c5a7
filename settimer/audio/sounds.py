"""Cue synthesis and playback using numpy + QSoundEffect.

Every cue the workout engine can emit has its own sound, generated
programmatically as a WAV file from sine waves shaped by ADSR envelopes.
Files are cached to disk so subsequent launches are instant.

Sound names (one per ``CueKind`` value)
---------------------------------------
- ``start``         : short ascending chime (3 notes), a set begins
- ``success``       : bright arpeggio, set completed
- ``stop``          : two descending notes
- ``reset``         : subtle click, new exercise
- ``notification``  : bell, rest has reached 1:30
- ``periodic_pulse``: soft low tap every 30 s, "still running"
- ``audio_pulse``   : clear beep every minute (audio toggle)
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..timer.engine import CueKind


logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SetTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = tuple(kind.value for kind in CueKind)

SAMPLE_RATE = 44100


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
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def _note_sequence(
    notes: list[float], note_dur: float, gap: float, level: float,
) -> list[np.ndarray]:
    parts: list[np.ndarray] = []
    for freq in notes:
        tone = _sine(freq, note_dur) * level
        env = _make_envelope(len(tone), attack=80, decay=200, sustain_level=0.4, release=300)
        parts.append(tone * env)
        parts.append(_silence(gap))
    return parts


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_start() -> bytes:
    """Set start: 3 ascending notes (C5→E5→G5)."""
    parts = _note_sequence([523.25, 659.25, 783.99], 0.12, 0.03, 0.6)
    parts.append(_silence(0.05))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_success() -> bytes:
    """Set complete: arpeggio (C5→E5→G5) landing on a held C6."""
    parts = _note_sequence([523.25, 659.25, 783.99], 0.10, 0.02, 0.5)
    final = _sine(1046.50, 0.35) * 0.5
    env = _make_envelope(len(final), attack=80, decay=300, sustain_level=0.5, release=600)
    parts.append(final * env)
    return _to_wav_bytes(np.concatenate(parts))


def _generate_stop() -> bytes:
    """Stop: two descending notes (G5→C5)."""
    parts = _note_sequence([783.99, 523.25], 0.14, 0.04, 0.5)
    return _to_wav_bytes(np.concatenate(parts))


def _generate_reset() -> bytes:
    """New exercise: very short, subtle click."""
    duration = 0.015
    n_samples = int(SAMPLE_RATE * duration)
    tick = _sine(1200.0, duration) * 0.2
    env = _make_envelope(n_samples, attack=20, decay=50, sustain_level=0.0, release=n_samples - 70)
    # Pad with silence so QSoundEffect doesn't clip
    return _to_wav_bytes(np.concatenate([tick * env, _silence(0.03)]))


def _generate_notification() -> bytes:
    """Rest is up: bell (A4 + octave overtone), slow decay."""
    duration = 1.0
    combined = _sine(440.0, duration) * 0.35 + _sine(880.0, duration) * 0.08
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.08),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.55),
    )
    return _to_wav_bytes(combined * env)


def _generate_periodic_pulse() -> bytes:
    """Still running: a soft, low tap standing in for a wrist buzz."""
    tap = _sine(180.0, 0.06) * 0.4
    env = _make_envelope(len(tap), attack=40, decay=300, sustain_level=0.2, release=1200)
    return _to_wav_bytes(np.concatenate([tap * env, _silence(0.04)]))


def _generate_audio_pulse() -> bytes:
    """Minute marker: gentle double beep (800Hz), 80ms apart."""
    beep = _sine(800.0, 0.04) * 0.35
    env = _make_envelope(len(beep), attack=40, decay=100, sustain_level=0.2, release=200)
    beep = beep * env
    return _to_wav_bytes(np.concatenate([beep, _silence(0.08), beep, _silence(0.05)]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    CueKind.START.value: _generate_start,
    CueKind.SUCCESS.value: _generate_success,
    CueKind.STOP.value: _generate_stop,
    CueKind.RESET.value: _generate_reset,
    CueKind.NOTIFICATION.value: _generate_notification,
    CueKind.PERIODIC_PULSE.value: _generate_periodic_pulse,
    CueKind.AUDIO_PULSE.value: _generate_audio_pulse,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Feedback sink for the workout engine: synthesis, caching, playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        engine = WorkoutEngine(self, feedback=mgr)
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

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("No sound loaded for %r", name)
            return
        effect.play()

    def play_cue(self, kind: CueKind) -> None:
        self.play(kind.value)

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def sounds_dir(self) -> Path:
        return self._sounds_dir

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                logger.info("Synthesizing %s", path.name)
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
