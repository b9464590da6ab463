"""Speech synthesis chain and voice tables."""

from .chain import build_synthesis_chain
from .voices import VoiceModel, voice_models_for

__all__ = [
    "build_synthesis_chain",
    "voice_models_for",
    "VoiceModel",
]
