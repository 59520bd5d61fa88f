"""Configuration management for cardcache.

Loads configuration from ~/.config/cardcache/config.toml.
Priority chain: CLI flags > env vars > config file > built-in defaults.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .fetch.http import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .fetch.speech import DEFAULT_TTS_ENDPOINT
from .cache.memory import DEFAULT_COST_LIMIT, DEFAULT_COUNT_LIMIT
from .paths import get_config_dir, get_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"

DEFAULT_CONFIG = f"""\
# cardcache configuration

[cache]
# Root directory holding AudioCache/, ImageCache/ and PreviewAudioCache/
# (defaults to $XDG_DATA_HOME/cardcache)
# root = "~/.local/share/cardcache"

# Share one download between concurrent lookups of the same key
coalesce_requests = false

# Bounds of the in-memory decoded image cache
memory_count_limit = {DEFAULT_COUNT_LIMIT}
memory_cost_limit = {DEFAULT_COST_LIMIT}

[http]
# Per-request timeout in seconds
timeout = {DEFAULT_TIMEOUT}
user_agent = "{DEFAULT_USER_AGENT}"

[audio]
# Speech-synthesis endpoint queried with q=<text>&tl=<voice code>
endpoint = "{DEFAULT_TTS_ENDPOINT}"

# Optional language code -> voice code overrides, e.g. en = "en-us"
[audio.voice_codes]
"""

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CacheConfig:
    """Cache directory and behavior configuration."""

    root: Path
    coalesce_requests: bool = False
    memory_count_limit: int = DEFAULT_COUNT_LIMIT
    memory_cost_limit: int = DEFAULT_COST_LIMIT


@dataclass(frozen=True)
class HTTPConfig:
    """Outbound HTTP configuration."""

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class AudioConfig:
    """Speech-synthesis endpoint configuration."""

    endpoint: str = DEFAULT_TTS_ENDPOINT
    voice_codes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CardcacheConfig:
    """Top-level cardcache configuration."""

    cache: CacheConfig
    http: HTTPConfig
    audio: AudioConfig

    @classmethod
    def default(cls, root: Path | None = None) -> "CardcacheConfig":
        return cls(
            cache=CacheConfig(root=root or get_data_dir()),
            http=HTTPConfig(),
            audio=AudioConfig(),
        )


_cached_config: CardcacheConfig | None = None


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file and return its path."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _positive(value, name: str, kind: type):
    try:
        converted = kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a {kind.__name__}, got {value!r}") from e
    if converted <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return converted


def load_config(path: Path | None = None, reload: bool = False) -> CardcacheConfig:
    """Load configuration from the config file with env var overrides.

    On first run the default config file is generated and its defaults are
    used.

    Args:
        path: Config file to read (defaults to the XDG config location)
        reload: Ignore the memoized result of a previous call

    Returns:
        Loaded and validated CardcacheConfig.

    Raises:
        ValueError: If a configured value is invalid.
        tomllib.TOMLDecodeError: If the config file is not valid TOML.
    """
    global _cached_config
    if _cached_config is not None and not reload and path is None:
        return _cached_config

    config_path = path or get_config_path()
    if not config_path.exists():
        generate_config(config_path)
        logger.info(f"No config found. Generated {config_path} with defaults")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    cache = data.get("cache", {})
    http_cfg = data.get("http", {})
    audio = data.get("audio", {})

    # Env vars override config file values
    root_str = os.getenv("CARDCACHE_ROOT", cache.get("root", ""))
    root = Path(root_str).expanduser() if root_str else get_data_dir()

    coalesce_env = os.getenv("CARDCACHE_COALESCE")
    if coalesce_env is not None:
        coalesce = coalesce_env.strip().lower() in _TRUTHY
    else:
        coalesce = bool(cache.get("coalesce_requests", False))

    voice_codes = audio.get("voice_codes", {})
    if not isinstance(voice_codes, dict):
        raise ValueError("audio.voice_codes must be a table")

    config = CardcacheConfig(
        cache=CacheConfig(
            root=root,
            coalesce_requests=coalesce,
            memory_count_limit=_positive(
                cache.get("memory_count_limit", DEFAULT_COUNT_LIMIT),
                "cache.memory_count_limit",
                int,
            ),
            memory_cost_limit=_positive(
                cache.get("memory_cost_limit", DEFAULT_COST_LIMIT),
                "cache.memory_cost_limit",
                int,
            ),
        ),
        http=HTTPConfig(
            timeout=_positive(
                os.getenv(
                    "CARDCACHE_HTTP_TIMEOUT", http_cfg.get("timeout", DEFAULT_TIMEOUT)
                ),
                "http.timeout",
                float,
            ),
            user_agent=http_cfg.get("user_agent", DEFAULT_USER_AGENT),
        ),
        audio=AudioConfig(
            endpoint=os.getenv(
                "CARDCACHE_TTS_ENDPOINT", audio.get("endpoint", DEFAULT_TTS_ENDPOINT)
            ),
            voice_codes={str(k): str(v) for k, v in voice_codes.items()},
        ),
    )

    if path is None:
        _cached_config = config
    return config
