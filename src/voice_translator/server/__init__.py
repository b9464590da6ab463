"""Socket.IO + HTTP gateway for the Voice Translator service."""

from voice_translator.server.app import create_app

__all__ = ["create_app"]
