"""
Tests for settings loading.
"""
from jwt_signer.config import DEFAULT_PUBLISHED_NAME, Environment, Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("JWT_SIGNER_ENVIRONMENT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.published_name == DEFAULT_PUBLISHED_NAME
        assert settings.directive_file is None
        assert settings.is_development()

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SIGNER_ENVIRONMENT", "production")
        monkeypatch.setenv("JWT_SIGNER_DURATION", "10m")
        monkeypatch.setenv("JWT_SIGNER_SECRET", "{env.SECRET}")
        monkeypatch.setenv("JWT_SIGNER_CLAIMS_JSON", '{"sub": "{header.X-User}"}')

        settings = Settings(_env_file=None)

        assert settings.is_production()
        assert settings.duration == "10m"
        assert settings.secret == "{env.SECRET}"
        assert settings.claims_json == '{"sub": "{header.X-User}"}'

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("JWT_SIGNER_LOG_LEVEL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("JWT_SIGNER_LOG_LEVEL=WARNING\nJWT_SIGNER_RESPONSE_HEADER=X-Jwt\n")

        settings = Settings(_env_file=env_file)

        assert settings.log_level == "WARNING"
        assert settings.response_header == "X-Jwt"
