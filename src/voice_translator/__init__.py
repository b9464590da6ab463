"""Voice Translator service package.

Provides the real-time speech translation pipeline:
STT -> (language detection) -> Translation -> TTS with Socket.IO integration.
"""

__version__ = "0.1.0"
