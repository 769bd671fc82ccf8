"""Ambient background sounds using numpy + QSoundEffect.

Each sound is synthesised once as a 10-second loop (filtered white noise,
slow amplitude swells, soft sine pads), written to a WAV cache and
played through a looping ``QSoundEffect``.  One master volume applies to
whatever is playing.

Filtering is done in the frequency domain on the whole loop, which keeps
the loop seamless: the filtered signal is periodic by construction.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "QuestTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "ambient"

SAMPLE_RATE = 44100
LOOP_SECONDS = 10.0
SILENCE = "none"


# ═══════════════════════════════════════════════════════════════════════════
#  CATALOG
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AmbientSound:
    id: str
    name: str
    icon: str
    description: str


AMBIENT_SOUNDS: list[AmbientSound] = [
    AmbientSound("none", "Silence", "🔇", "Pure quiet for deep focus"),
    AmbientSound("enchanted-forest", "Enchanted Forest", "🌲", "Gentle rustling leaves and distant birds"),
    AmbientSound("mystical-rain", "Mystical Rain", "🌧️", "Soft raindrops on magical leaves"),
    AmbientSound("crackling-fire", "Cozy Campfire", "🔥", "Warm crackling flames"),
    AmbientSound("ocean-waves", "Serene Shores", "🌊", "Gentle waves on a peaceful beach"),
    AmbientSound("mountain-wind", "Mountain Breeze", "🏔️", "Soft wind through mountain peaks"),
    AmbientSound("library-whispers", "Ancient Library", "📚", "Quiet page turns and distant whispers"),
    AmbientSound("cafe-chatter", "Tavern Ambience", "☕", "Gentle murmur of a cozy tavern"),
    AmbientSound("gentle-stream", "Crystal Stream", "💧", "Babbling brook through the forest"),
    AmbientSound("night-crickets", "Starlit Evening", "🦗", "Peaceful cricket symphony"),
    AmbientSound("wizard-study", "Wizard's Study", "🔮", "Magical ambience with soft chimes"),
    AmbientSound("dragon-cave", "Dragon's Lair", "🐉", "Deep, resonant cave atmosphere"),
]

SOUND_IDS = tuple(s.id for s in AMBIENT_SOUNDS)


def get_sound(sound_id: str) -> AmbientSound | None:
    for sound in AMBIENT_SOUNDS:
        if sound.id == sound_id:
            return sound
    return None


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _loop_length() -> int:
    return int(SAMPLE_RATE * LOOP_SECONDS)


def _white_noise(seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, _loop_length())


def _band_filter(
    samples: np.ndarray,
    low_hz: float = 0.0,
    high_hz: float | None = None,
) -> np.ndarray:
    """Keep only the ``low_hz..high_hz`` band, normalised to peak 1."""
    spectrum = np.fft.rfft(samples)
    freqs = np.fft.rfftfreq(len(samples), d=1.0 / SAMPLE_RATE)
    mask = freqs >= low_hz
    if high_hz is not None:
        mask &= freqs <= high_hz
    filtered = np.fft.irfft(spectrum * mask, n=len(samples))
    peak = np.max(np.abs(filtered))
    return filtered / peak if peak > 0 else filtered


def _lowpass(samples: np.ndarray, cutoff_hz: float) -> np.ndarray:
    return _band_filter(samples, high_hz=cutoff_hz)


def _highpass(samples: np.ndarray, cutoff_hz: float) -> np.ndarray:
    return _band_filter(samples, low_hz=cutoff_hz)


def _bandpass(samples: np.ndarray, centre_hz: float, q: float) -> np.ndarray:
    half_width = centre_hz / q / 2
    return _band_filter(samples, max(0.0, centre_hz - half_width), centre_hz + half_width)


def _lfo(freq: float, depth: float) -> np.ndarray:
    """Slow gain swell ``1 ± depth`` at *freq* Hz."""
    t = np.arange(_loop_length()) / SAMPLE_RATE
    return 1.0 + depth * np.sin(2 * np.pi * freq * t)


def _sine(freq: float) -> np.ndarray:
    t = np.arange(_loop_length()) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t)


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


# ═══════════════════════════════════════════════════════════════════════════
#  RECIPES
# ═══════════════════════════════════════════════════════════════════════════


def _forest() -> np.ndarray:
    return _lowpass(_white_noise(1), 800)


def _rain() -> np.ndarray:
    return _highpass(_white_noise(2), 1000) * 0.3


def _fire() -> np.ndarray:
    return _lowpass(_white_noise(3), 400) * 0.4


def _waves() -> np.ndarray:
    # 0.1 Hz swell: exactly one wave per loop
    return _lowpass(_white_noise(4), 600) * _lfo(0.1, 0.3) * 0.7


def _wind() -> np.ndarray:
    return _bandpass(_white_noise(5), 500, 0.5) * 0.3


def _stream() -> np.ndarray:
    return _highpass(_white_noise(6), 800) * _lfo(0.3, 0.2) * 0.8


def _wizard_study() -> np.ndarray:
    return _sine(220.0) * 0.1 + _sine(330.0) * 0.08 + _sine(440.0) * 0.06


def _soft_noise() -> np.ndarray:
    return _white_noise(7) * 0.2


_RECIPES = {
    "enchanted-forest": _forest,
    "mystical-rain": _rain,
    "crackling-fire": _fire,
    "ocean-waves": _waves,
    "mountain-wind": _wind,
    "gentle-stream": _stream,
    "wizard-study": _wizard_study,
}


def synthesize(sound_id: str) -> bytes:
    """WAV bytes for *sound_id*.  Sounds without a recipe get soft noise."""
    recipe = _RECIPES.get(sound_id, _soft_noise)
    return _to_wav_bytes(recipe())


# ═══════════════════════════════════════════════════════════════════════════
#  PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class AmbientPlayer(QObject):
    """Plays one looping ambient sound at a time.

    Usage::

        player = AmbientPlayer(parent=self)
        player.set_volume(40)
        player.play("mystical-rain")
        player.stop()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        volume: int = 50,
    ) -> None:
        super().__init__(parent)
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._volume = max(0, min(volume, 100)) / 100.0
        self._effects: dict[str, QSoundEffect] = {}
        self._current: str = SILENCE

    # ── public API ────────────────────────────────────────────────────

    @property
    def current(self) -> str:
        """Id of the selected sound (``"none"`` when silent)."""
        return self._current

    @property
    def is_playing(self) -> bool:
        return self._current != SILENCE

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    def set_volume(self, level: int) -> None:
        """Set the master volume (0-100)."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def play(self, sound_id: str) -> None:
        """Switch to *sound_id*.  ``"none"`` stops; unknown ids are ignored.

        If the loop cannot be written to the cache the player stays silent.
        """
        if sound_id == SILENCE:
            self.stop()
            return
        if sound_id not in SOUND_IDS:
            logger.warning("Unknown ambient sound %r", sound_id)
            return
        self.stop()
        try:
            effect = self._effect_for(sound_id)
        except OSError as exc:
            logger.warning("Cannot prepare ambient sound %r: %s", sound_id, exc)
            return
        effect.play()
        self._current = sound_id
        logger.debug("Ambient sound: %s", sound_id)

    def stop(self) -> None:
        for effect in self._effects.values():
            effect.stop()
        self._current = SILENCE

    def close(self) -> None:
        """Stop and release every loaded effect."""
        self.stop()
        for effect in self._effects.values():
            effect.deleteLater()
        self._effects.clear()

    # ── internal ──────────────────────────────────────────────────────

    def _wav_path(self, sound_id: str) -> Path:
        """Generate the loop on first use and return its cached path."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        path = self._sounds_dir / f"{sound_id}.wav"
        if not path.exists():
            path.write_bytes(synthesize(sound_id))
        return path

    def _effect_for(self, sound_id: str) -> QSoundEffect:
        effect = self._effects.get(sound_id)
        if effect is None:
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(self._wav_path(sound_id))))
            effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
            effect.setVolume(self._volume)
            self._effects[sound_id] = effect
        return effect
