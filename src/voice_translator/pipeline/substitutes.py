"""Deterministic stand-ins used when every provider for a stage fails."""

MOCK_TRANSCRIPT = "This is a test translation from the mock service"

# Not playable audio; the client falls back to local speech synthesis
PLACEHOLDER_AUDIO = b"mock-audio-data"


def mock_transcript() -> str:
    return MOCK_TRANSCRIPT


def mock_translation(text: str, target_language: str) -> str:
    """Fixed marker plus the original text."""
    return f"[Translated to {target_language}] {text}"


def placeholder_audio() -> bytes:
    return PLACEHOLDER_AUDIO
