"""Audio package."""

from .ambient import (
    AmbientPlayer,
    AmbientSound,
    AMBIENT_SOUNDS,
    SOUND_IDS,
    get_sound,
    synthesize,
)

__all__ = [
    "AmbientPlayer",
    "AmbientSound",
    "AMBIENT_SOUNDS",
    "SOUND_IDS",
    "get_sound",
    "synthesize",
]
