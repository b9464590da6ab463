"""Environment-based configuration for the Voice Translator service.

All configuration is loaded from environment variables with sensible defaults.
The resulting objects are frozen: they are built once at startup and passed
explicitly into the provider factory, the orchestrator and the gateway.
"""

import os
from dataclasses import dataclass, field

DETECTION_POLICIES = ("fail", "assume")
PROVIDER_MODES = ("live", "mock")


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration for the Socket.IO gateway."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "5000")))

    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
    )

    # Recorded utterances arrive as a single binary attachment
    max_buffer_size: int = field(
        default_factory=lambda: int(os.getenv("WS_MAX_BUFFER_SIZE", str(50 * 1024 * 1024)))
    )  # 50MB default

    ping_interval: int = field(default_factory=lambda: int(os.getenv("WS_PING_INTERVAL", "25")))
    # Synthesis fallbacks can take close to a minute end to end
    ping_timeout: int = field(default_factory=lambda: int(os.getenv("WS_PING_TIMEOUT", "60")))


@dataclass(frozen=True)
class ObservabilityConfig:
    """Observability configuration for logging and metrics."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    json_logs: bool = field(
        default_factory=lambda: os.getenv("LOG_JSON", "true").lower() == "true"
    )


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials, endpoints and per-capability timeouts for external providers."""

    mode: str = field(default_factory=lambda: os.getenv("PROVIDER_MODE", "live").lower())

    # Hugging Face Inference API
    hugging_face_token: str | None = field(
        default_factory=lambda: _optional_env("HUGGING_FACE_TOKEN")
    )
    hugging_face_api_url: str = field(
        default_factory=lambda: os.getenv(
            "HUGGING_FACE_API_URL", "https://api-inference.huggingface.co/models"
        ).rstrip("/")
    )
    hugging_face_models_url: str = field(
        default_factory=lambda: os.getenv(
            "HUGGING_FACE_MODELS_URL", "https://huggingface.co/api/models"
        )
    )

    # Google Cloud Translation (optional)
    google_credentials_path: str | None = field(
        default_factory=lambda: _optional_env("GOOGLE_APPLICATION_CREDENTIALS")
    )

    # Timeouts (in seconds)
    stt_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("STT_TIMEOUT_S", "30"))
    )
    detection_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("DETECTION_TIMEOUT_S", "10"))
    )
    translation_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("TRANSLATION_TIMEOUT_S", "30"))
    )
    cloud_translation_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("CLOUD_TRANSLATION_TIMEOUT_S", "15"))
    )
    synthesis_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("SYNTHESIS_TIMEOUT_S", "45"))
    )
    fallback_synthesis_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("FALLBACK_SYNTHESIS_TIMEOUT_S", "30"))
    )
    gtts_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("GTTS_TIMEOUT_S", "20"))
    )
    health_probe_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("HEALTH_PROBE_TIMEOUT_S", "10"))
    )

    # Some providers answer 200 with a short error body instead of audio
    min_audio_response_bytes: int = field(
        default_factory=lambda: int(os.getenv("MIN_AUDIO_RESPONSE_BYTES", "100"))
    )

    @property
    def has_hugging_face_token(self) -> bool:
        return self.hugging_face_token is not None

    @property
    def has_google_credentials(self) -> bool:
        return self.google_credentials_path is not None

    def validate(self) -> None:
        """Validate provider configuration values.

        Raises:
            ValueError: If a value is out of range.
        """
        if self.mode not in PROVIDER_MODES:
            raise ValueError(f"PROVIDER_MODE must be one of {PROVIDER_MODES}, got {self.mode!r}")

        timeouts = {
            "STT_TIMEOUT_S": self.stt_timeout_s,
            "DETECTION_TIMEOUT_S": self.detection_timeout_s,
            "TRANSLATION_TIMEOUT_S": self.translation_timeout_s,
            "CLOUD_TRANSLATION_TIMEOUT_S": self.cloud_translation_timeout_s,
            "SYNTHESIS_TIMEOUT_S": self.synthesis_timeout_s,
            "FALLBACK_SYNTHESIS_TIMEOUT_S": self.fallback_synthesis_timeout_s,
            "GTTS_TIMEOUT_S": self.gtts_timeout_s,
            "HEALTH_PROBE_TIMEOUT_S": self.health_probe_timeout_s,
        }
        for name, value in timeouts.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.min_audio_response_bytes < 0:
            raise ValueError(
                f"MIN_AUDIO_RESPONSE_BYTES must be >= 0, got {self.min_audio_response_bytes}"
            )


@dataclass(frozen=True)
class PipelineConfig:
    """Orchestration policy for one audio job."""

    # Payloads below this size are treated as silence
    min_audio_bytes: int = field(
        default_factory=lambda: int(os.getenv("MIN_AUDIO_BYTES", "1000"))
    )

    # What to do when auto-detection fails: "fail" the job or "assume" a language
    detection_failure_policy: str = field(
        default_factory=lambda: os.getenv("DETECTION_FAILURE_POLICY", "fail").lower()
    )
    detection_fallback_language: str = field(
        default_factory=lambda: os.getenv("DETECTION_FALLBACK_LANGUAGE", "en").lower()
    )

    default_source_language: str = field(
        default_factory=lambda: os.getenv("DEFAULT_SOURCE_LANGUAGE", "en").lower()
    )
    default_target_language: str = field(
        default_factory=lambda: os.getenv("DEFAULT_TARGET_LANGUAGE", "es").lower()
    )

    def validate(self) -> None:
        """Validate pipeline policy values.

        Raises:
            ValueError: If a value is out of range.
        """
        if self.min_audio_bytes < 1:
            raise ValueError(f"MIN_AUDIO_BYTES must be >= 1, got {self.min_audio_bytes}")
        if self.detection_failure_policy not in DETECTION_POLICIES:
            raise ValueError(
                f"DETECTION_FAILURE_POLICY must be one of {DETECTION_POLICIES}, "
                f"got {self.detection_failure_policy!r}"
            )
        if not self.detection_fallback_language or self.detection_fallback_language == "auto":
            raise ValueError("DETECTION_FALLBACK_LANGUAGE must be a concrete language code")


@dataclass(frozen=True)
class AppConfig:
    """Complete configuration for the Voice Translator service."""

    server: ServerConfig
    observability: ObservabilityConfig
    providers: ProviderConfig
    pipeline: PipelineConfig

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables.

        Returns:
            AppConfig instance with all settings loaded.

        Raises:
            ValueError: If configuration is invalid.
        """
        config = cls(
            server=ServerConfig(),
            observability=ObservabilityConfig(),
            providers=ProviderConfig(),
            pipeline=PipelineConfig(),
        )
        config.providers.validate()
        config.pipeline.validate()
        return config


# Global singleton configuration
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance, loading it on first use."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


def set_config(config: AppConfig) -> None:
    """Set the global configuration (for testing)."""
    global _config
    _config = config
