"""Tests for settings persistence and cue sound synthesis.

Covers:
- Settings dataclass defaults and JSON round-trip
- WAV generation for every cue kind
- SoundManager caching and the FeedbackSink entry point
"""

from __future__ import annotations

import io
import json
import wave

import pytest

from settimer.settings import Settings, load_settings, save_settings
from settimer.audio.sounds import (
    SoundManager,
    SOUND_NAMES,
    SAMPLE_RATE,
    _GENERATORS,
    _make_envelope,
)
from settimer.timer.engine import CueKind, WorkoutEngine


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_sound_enabled(self):
        assert Settings().sound_enabled is True

    def test_volume_default(self):
        assert Settings().sound_volume == 70

    def test_audio_cues_default(self):
        assert Settings().audio_cues_default is True

    def test_window_defaults(self):
        s = Settings()
        assert s.window_x is None
        assert s.window_y is None
        assert s.always_on_top is False


class TestSettingsPersistence:
    def test_round_trip(self):
        original = Settings(sound_volume=42, audio_cues_default=False, window_x=10)
        save_settings(original)
        loaded = load_settings()
        assert loaded.sound_volume == 42
        assert loaded.audio_cues_default is False
        assert loaded.window_x == 10

    def test_missing_file_returns_defaults(self):
        assert load_settings() == Settings()

    def test_invalid_json_returns_defaults(self, app_dirs):
        (app_dirs / "settings.json").write_text("NOT VALID JSON", encoding="utf-8")
        assert load_settings() == Settings()

    def test_non_object_json_returns_defaults(self, app_dirs):
        (app_dirs / "settings.json").write_text("[1, 2, 3]", encoding="utf-8")
        assert load_settings() == Settings()

    def test_extra_keys_ignored(self, app_dirs):
        data = {"sound_volume": 15, "unknown_future_key": True}
        (app_dirs / "settings.json").write_text(json.dumps(data), encoding="utf-8")
        s = load_settings()
        assert s.sound_volume == 15
        assert not hasattr(s, "unknown_future_key")

    def test_saved_file_is_json(self, app_dirs):
        save_settings(Settings(sound_volume=5))
        data = json.loads((app_dirs / "settings.json").read_text(encoding="utf-8"))
        assert data["sound_volume"] == 5


# ═══════════════════════════════════════════════════════════════════════
#  SOUND SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:

    def test_one_sound_per_cue_kind(self):
        assert set(SOUND_NAMES) == {kind.value for kind in CueKind}
        assert set(_GENERATORS) == set(SOUND_NAMES)

    @pytest.mark.parametrize("name", SOUND_NAMES)
    def test_generator_produces_wav(self, name):
        data = _GENERATORS[name]()
        assert isinstance(data, bytes)
        assert data[:4] == b"RIFF"

        with wave.open(io.BytesIO(data), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > 0

    def test_envelope_bounds(self):
        env = _make_envelope(2000)
        assert len(env) == 2000
        assert env[0] == pytest.approx(0.0)
        assert env[-1] == pytest.approx(0.0)
        assert env.max() <= 1.0


# ═══════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSoundManager:

    def test_writes_cache(self, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path / "cache")
        for name in SOUND_NAMES:
            assert (tmp_path / "cache" / f"{name}.wav").exists()
        assert mgr.sounds_dir == tmp_path / "cache"

    def test_default_dir_is_module_setting(self, app_dirs):
        SoundManager()
        assert (app_dirs / "sounds" / "start.wav").exists()

    def test_existing_files_not_regenerated(self, tmp_path):
        cache = tmp_path / "cache"
        SoundManager(sounds_dir=cache)
        marker = cache / "start.wav"
        mtime = marker.stat().st_mtime_ns
        SoundManager(sounds_dir=cache)
        assert marker.stat().st_mtime_ns == mtime

    def test_volume_clamped(self, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        mgr.set_volume(150)
        assert mgr.volume == 100
        mgr.set_volume(-5)
        assert mgr.volume == 0
        mgr.set_volume(35)
        assert mgr.volume == 35

    def test_disable(self, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        mgr.set_enabled(False)
        assert mgr.enabled is False
        mgr.play_cue(CueKind.START)  # must not raise

    def test_unknown_name_is_noop(self, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        mgr.play("does_not_exist")

    @pytest.mark.parametrize("kind", list(CueKind))
    def test_play_cue_accepts_every_kind(self, tmp_path, kind):
        mgr = SoundManager(sounds_dir=tmp_path)
        mgr.play_cue(kind)

    def test_works_as_engine_sink(self, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        eng = WorkoutEngine(parent=None, feedback=mgr)
        eng.start_exercise()
        eng.complete_set()
        eng.stop()
        assert eng.feedback is mgr
