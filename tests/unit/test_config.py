"""Unit tests for configuration loading."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from cardcache import config as config_module
from cardcache.config import (
    CardcacheConfig,
    generate_config,
    get_config_path,
    load_config,
)
from cardcache.fetch.http import DEFAULT_USER_AGENT
from cardcache.fetch.speech import DEFAULT_TTS_ENDPOINT


class TestLoadConfig:
    """Test config file loading, defaults and overrides."""

    def test_first_load_generates_default_file(self, tmp_path: Path) -> None:
        path = get_config_path()
        assert not path.exists()

        config = load_config()

        assert path.exists()
        assert path.parent == tmp_path / "xdg-config" / "cardcache"
        assert config.cache.root == tmp_path / "xdg-data" / "cardcache"
        assert config.cache.coalesce_requests is False
        assert config.cache.memory_count_limit == 100
        assert config.cache.memory_cost_limit == 50 * 1024 * 1024
        assert config.http.timeout == 30.0
        assert config.http.user_agent == DEFAULT_USER_AGENT
        assert config.audio.endpoint == DEFAULT_TTS_ENDPOINT
        assert config.audio.voice_codes == {}

    def test_result_memoized(self) -> None:
        assert load_config() is load_config()
        assert load_config(reload=True) is not None

    def test_file_values(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text(
            """
[cache]
root = "/srv/cards"
coalesce_requests = true
memory_count_limit = 10

[http]
timeout = 5

[audio]
endpoint = "http://localhost:8080/tts"

[audio.voice_codes]
en = "en-us"
es = "es-us"
"""
        )

        config = load_config(path)

        assert config.cache.root == Path("/srv/cards")
        assert config.cache.coalesce_requests is True
        assert config.cache.memory_count_limit == 10
        assert config.http.timeout == 5.0
        assert config.audio.endpoint == "http://localhost:8080/tts"
        assert config.audio.voice_codes == {"en": "en-us", "es": "es-us"}

    def test_explicit_path_not_memoized(self, tmp_path: Path) -> None:
        path = generate_config(tmp_path / "other.toml")
        load_config(path)
        assert config_module._cached_config is None

    def test_env_overrides(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("CARDCACHE_ROOT", str(tmp_path / "env-root"))
        monkeypatch.setenv("CARDCACHE_COALESCE", "yes")
        monkeypatch.setenv("CARDCACHE_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("CARDCACHE_TTS_ENDPOINT", "http://tts.local/speak")

        config = load_config()

        assert config.cache.root == tmp_path / "env-root"
        assert config.cache.coalesce_requests is True
        assert config.http.timeout == 12.5
        assert config.audio.endpoint == "http://tts.local/speak"

    @pytest.mark.parametrize(
        "body, message",
        [
            ("[http]\ntimeout = 0\n", "http.timeout must be positive"),
            ("[http]\ntimeout = 'soon'\n", "http.timeout must be a float"),
            ("[cache]\nmemory_count_limit = -5\n", "cache.memory_count_limit"),
            ("[audio]\nvoice_codes = 'en'\n", "audio.voice_codes must be a table"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str, message: str) -> None:
        path = tmp_path / "bad.toml"
        path.write_text(body)

        with pytest.raises(ValueError, match=message):
            load_config(path)

    def test_default_factory(self, tmp_path: Path) -> None:
        config = CardcacheConfig.default(root=tmp_path)
        assert config.cache.root == tmp_path
        assert config.http.timeout == 30.0
