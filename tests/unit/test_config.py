"""Unit tests for environment-based configuration."""

import pytest

from voice_translator.config import (
    AppConfig,
    PipelineConfig,
    ProviderConfig,
    ServerConfig,
    get_config,
    reset_config,
    set_config,
)

CONFIG_ENV_VARS = [
    "HOST",
    "PORT",
    "CORS_ORIGINS",
    "PROVIDER_MODE",
    "HUGGING_FACE_TOKEN",
    "HUGGING_FACE_API_URL",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "STT_TIMEOUT_S",
    "SYNTHESIS_TIMEOUT_S",
    "MIN_AUDIO_BYTES",
    "DETECTION_FAILURE_POLICY",
    "DETECTION_FALLBACK_LANGUAGE",
    "DEFAULT_SOURCE_LANGUAGE",
    "DEFAULT_TARGET_LANGUAGE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class TestServerConfig:
    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 5000
        assert config.host == "0.0.0.0"
        assert config.cors_origins == ("http://localhost:3000",)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")

        config = ServerConfig()

        assert config.port == 8080
        assert config.cors_origins == ("http://a.test", "http://b.test")


class TestProviderConfig:
    def test_defaults(self):
        config = ProviderConfig()

        assert config.mode == "live"
        assert config.hugging_face_token is None
        assert config.has_hugging_face_token is False
        assert config.has_google_credentials is False
        assert config.hugging_face_api_url == "https://api-inference.huggingface.co/models"
        assert config.stt_timeout_s == 30
        assert config.detection_timeout_s == 10
        assert config.translation_timeout_s == 30
        assert config.synthesis_timeout_s == 45
        assert config.fallback_synthesis_timeout_s == 30
        assert config.gtts_timeout_s == 20
        assert config.cloud_translation_timeout_s == 15
        assert config.health_probe_timeout_s == 10
        assert config.min_audio_response_bytes == 100

    def test_blank_token_is_absent(self, monkeypatch):
        monkeypatch.setenv("HUGGING_FACE_TOKEN", "   ")

        assert ProviderConfig().has_hugging_face_token is False

    def test_credentials_from_env(self, monkeypatch):
        monkeypatch.setenv("HUGGING_FACE_TOKEN", "hf_abc")
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/secrets/sa.json")

        config = ProviderConfig()

        assert config.hugging_face_token == "hf_abc"
        assert config.google_credentials_path == "/secrets/sa.json"
        assert config.has_google_credentials is True

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValueError, match="PROVIDER_MODE"):
            ProviderConfig(mode="replay").validate()

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError, match="STT_TIMEOUT_S"):
            ProviderConfig(stt_timeout_s=0).validate()


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()

        assert config.min_audio_bytes == 1000
        assert config.detection_failure_policy == "fail"
        assert config.detection_fallback_language == "en"
        assert config.default_source_language == "en"
        assert config.default_target_language == "es"

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError, match="DETECTION_FAILURE_POLICY"):
            PipelineConfig(detection_failure_policy="guess").validate()

    def test_auto_fallback_language_rejected(self):
        with pytest.raises(ValueError, match="DETECTION_FALLBACK_LANGUAGE"):
            PipelineConfig(detection_fallback_language="auto").validate()

    def test_min_audio_bytes_must_be_positive(self):
        with pytest.raises(ValueError, match="MIN_AUDIO_BYTES"):
            PipelineConfig(min_audio_bytes=0).validate()


class TestAppConfig:
    def test_from_env_validates(self, monkeypatch):
        monkeypatch.setenv("DETECTION_FAILURE_POLICY", "sometimes")

        with pytest.raises(ValueError):
            AppConfig.from_env()

    def test_config_is_frozen(self):
        config = AppConfig.from_env()

        with pytest.raises(AttributeError):
            config.server.port = 1234

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config(self):
        custom = AppConfig(
            server=ServerConfig(port=9000),
            observability=AppConfig.from_env().observability,
            providers=ProviderConfig(mode="mock"),
            pipeline=PipelineConfig(),
        )
        set_config(custom)

        assert get_config().server.port == 9000
        assert get_config().providers.mode == "mock"
