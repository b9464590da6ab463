"""Voice Translator gateway event handlers.

Exports all handler registration functions for use in server setup.
"""

from voice_translator.server.handlers.audio import register_audio_handlers
from voice_translator.server.handlers.lifecycle import register_lifecycle_handlers

__all__ = [
    "register_audio_handlers",
    "register_lifecycle_handlers",
]
