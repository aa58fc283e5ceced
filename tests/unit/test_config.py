"""Unit tests for configuration loading and validation."""

import pytest

from news_feed.config import DEFAULT_SECTIONS, ServerConfig, load_config, validate_config
from news_feed.exceptions import ConfigurationError


ENV_NAMES = (
    "NEWS_FEED_SERVER_NAME", "NEWS_FEED_LOG_LEVEL", "NEWS_FEED_PROJECT_ID", "NEWS_FEED_DATASET",
    "NEWS_FEED_API_VERSION", "NEWS_FEED_USE_CDN", "NEWS_FEED_TOKEN", "NEWS_FEED_TIMEOUT",
    "NEWS_FEED_CACHE_TTL", "NEWS_FEED_DOCUMENT_TYPE", "NEWS_FEED_ASSET_BASE_URL",
    "NEWS_FEED_PLACEHOLDER_IMAGE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset every NEWS_FEED_* variable and run from an empty directory.

    Each variable is set before it is deleted so monkeypatch also undoes
    values that load_dotenv writes during the test.
    """
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        config = load_config()

        assert config.name == "news_feed"
        assert config.dataset == "production"
        assert config.use_cdn is True
        assert config.document_type == "news"
        assert [s.category for s in config.sections] == ["headline", "business", "sports", "entertainment"]

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("NEWS_FEED_PROJECT_ID", "abc123")
        clean_env.setenv("NEWS_FEED_DATASET", "staging")
        clean_env.setenv("NEWS_FEED_API_VERSION", "v2023-05-03")
        clean_env.setenv("NEWS_FEED_USE_CDN", "false")
        clean_env.setenv("NEWS_FEED_TIMEOUT", "5")
        clean_env.setenv("NEWS_FEED_LOG_LEVEL", "debug")

        config = load_config()

        assert config.project_id == "abc123"
        assert config.dataset == "staging"
        assert config.api_version == "2023-05-03"
        assert config.use_cdn is False
        assert config.request_timeout == 5.0
        assert config.log_level == "DEBUG"

    def test_non_numeric_timeout(self, clean_env):
        clean_env.setenv("NEWS_FEED_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError):
            load_config()

    def test_reads_dotenv_in_working_directory(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("NEWS_FEED_PROJECT_ID=abc123\nNEWS_FEED_DATASET=staging\n")

        config = load_config()

        assert config.project_id == "abc123"
        assert config.dataset == "staging"

    def test_environment_wins_over_dotenv(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("NEWS_FEED_PROJECT_ID=from-file\n")
        clean_env.setenv("NEWS_FEED_PROJECT_ID", "from-env")

        assert load_config().project_id == "from-env"

    def test_explicit_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / "settings.env"
        env_file.write_text("NEWS_FEED_TOKEN=secret\n")

        assert load_config(env_file=str(env_file)).token == "secret"


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid(self):
        assert validate_config(ServerConfig(project_id="abc123")) is True

    def test_missing_project_id(self):
        with pytest.raises(ConfigurationError, match="NEWS_FEED_PROJECT_ID"):
            validate_config(ServerConfig())

    def test_reports_all_errors_at_once(self):
        config = ServerConfig(
            project_id="abc123",
            dataset="Bad Dataset",
            request_timeout=0,
            cache_ttl=-1,
            log_level="LOUD",
        )

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(config)

        message = str(exc_info.value)
        assert "dataset" in message
        assert "NEWS_FEED_TIMEOUT" in message
        assert "NEWS_FEED_CACHE_TTL" in message
        assert "LOUD" in message

    def test_bad_api_version(self):
        with pytest.raises(ConfigurationError, match="API version"):
            validate_config(ServerConfig(project_id="abc123", api_version="latest"))

    def test_sections_required(self):
        with pytest.raises(ConfigurationError, match="section"):
            validate_config(ServerConfig(project_id="abc123", sections=[]))


def test_default_sections_are_not_shared():
    config = ServerConfig()
    config.sections.pop()

    assert len(DEFAULT_SECTIONS) == 4
