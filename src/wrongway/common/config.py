"""
Environment and configuration utilities.

Usage:
    from wrongway.common.config import load_env, load_config, load_settings
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from wrongway.common.path import PROJECT_ROOT, get_default_config_path

logger = logging.getLogger(__name__)


def load_env() -> bool:
    """
    Load .env from the project root into os.environ.

    Returns:
        True if a .env file was found and read
    """
    return load_dotenv(PROJECT_ROOT / ".env")


def load_config(
    path: Optional[str] = None,
    profile: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Load YAML config with optional profile merging.

    Args:
        path: Path to YAML config (defaults to the packaged configs/default.yaml)
        profile: Profile name to merge on top of defaults (e.g. "stub", "local")

    Returns:
        Merged config dict with "upstream", "service" and "project" sections.
        If profile is given, defaults are updated with profile-specific
        overrides (deep merge one level).

    Example:
        cfg = load_config(profile="stub")
        use_stub = cfg["service"]["use_stub"]
    """
    if path is None:
        path = str(get_default_config_path())

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    defaults = raw.get("defaults", {})
    profiles = raw.get("profiles", {}) or {}

    if profile is None:
        merged = {key: (dict(val) if isinstance(val, dict) else val) for key, val in defaults.items()}
        merged["project"] = raw.get("project", {})
        return merged

    if profile not in profiles:
        available = list(profiles.keys())
        raise KeyError(f"Profile '{profile}' not found. Available: {available}")

    overrides = profiles[profile] or {}

    # Shallow-deep merge: for each top-level key in overrides,
    # if both sides are dicts, merge them; otherwise override.
    merged = {}
    for key in set(list(defaults.keys()) + list(overrides.keys())):
        d_val = defaults.get(key)
        o_val = overrides.get(key)
        if isinstance(d_val, dict) and isinstance(o_val, dict):
            merged[key] = {**d_val, **o_val}
        elif o_val is not None:
            merged[key] = o_val
        else:
            merged[key] = d_val

    merged["project"] = raw.get("project", {})

    return merged


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the joke pipeline.

    Attributes:
        api_key: Bearer credential for the chat-completions backend
        model: Backend model identifier
        base_url: OpenAI-compatible API root (".../v1")
        temperature: Sampling temperature sent with every call
        max_tokens: Completion token cap
        timeout_ms: Per-attempt timeout
        retries: Extra attempts after the first one (0 = single attempt)
        backoff_ms: Linear backoff base; attempt n waits backoff_ms * n
        use_stub: Skip the network and return synthetic artifacts
        log_level: Level name for entry-point loggers
        host / port: Bind address for `wrongway serve`
    """

    api_key: str = ""
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    temperature: float = 0.7
    max_tokens: int = 700
    timeout_ms: int = 20000
    retries: int = 2
    backoff_ms: int = 500
    use_stub: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self):
        """Validate configuration values."""
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms={self.timeout_ms} must be positive")
        if self.retries < 0:
            raise ValueError(f"retries={self.retries} must be >= 0")
        if self.backoff_ms < 0:
            raise ValueError(f"backoff_ms={self.backoff_ms} must be >= 0")
        if not 0.0 <= self.temperature <= 2.0:
            logger.warning(
                f"temperature={self.temperature} is outside recommended range [0.0, 2.0]"
            )

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def backoff_s(self) -> float:
        return self.backoff_ms / 1000.0


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(
    profile: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
) -> Settings:
    """
    Build Settings from the YAML config, then apply environment overrides.

    When `environ` is None the process environment is used (after loading
    .env); tests pass an explicit mapping instead.
    """
    if environ is None:
        if load_env():
            logger.debug(f"Loaded {PROJECT_ROOT / '.env'}")
        environ = os.environ

    profile = profile or environ.get("WRONGWAY_PROFILE") or None
    cfg = load_config(config_path, profile=profile)
    upstream = cfg.get("upstream", {}) or {}
    service = cfg.get("service", {}) or {}

    use_stub = bool(service.get("use_stub", False))
    if "USE_STUB" in environ:
        use_stub = _env_flag(environ["USE_STUB"])

    settings = Settings(
        api_key=environ.get("OPENAI_API_KEY", ""),
        model=environ.get("OPENAI_MODEL") or upstream.get("model", Settings.model),
        base_url=environ.get("OPENAI_BASE_URL") or upstream.get("base_url", Settings.base_url),
        temperature=float(upstream.get("temperature", Settings.temperature)),
        max_tokens=int(upstream.get("max_tokens", Settings.max_tokens)),
        timeout_ms=int(environ.get("WRONGWAY_TIMEOUT_MS") or upstream.get("timeout_ms", Settings.timeout_ms)),
        retries=int(environ.get("WRONGWAY_RETRIES") or upstream.get("retries", Settings.retries)),
        backoff_ms=int(environ.get("WRONGWAY_BACKOFF_MS") or upstream.get("backoff_ms", Settings.backoff_ms)),
        use_stub=use_stub,
        log_level=environ.get("WRONGWAY_LOG_LEVEL") or service.get("log_level", Settings.log_level),
        host=service.get("host", Settings.host),
        port=int(service.get("port", Settings.port)),
    )

    if not settings.api_key and not settings.use_stub:
        logger.warning("OPENAI_API_KEY is not set; upstream calls will be rejected")

    return settings
