"""Configuration loading and management for git-analytics.

Configuration sources are merged in priority order:
    1. Defaults (defined in EngineConfig)
    2. Global config (~/.git-analytics.toml)
    3. Project config (./git-analytics.toml)
    4. Explicit config file
    5. Environment variables (GIT_ANALYTICS_* prefix)
    6. Overrides (passed as kwargs, typically from the CLI)

Example:
    >>> config = load_config(half_life_days=14)
    >>> config.half_life_days
    14.0
    >>> config.pairwise_cap
    50
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigFileError, InvalidConfigError

ENV_PREFIX = "GIT_ANALYTICS_"


@dataclass(frozen=True)
class EngineConfig:
    """Tunable parameters for the analytics engine.

    The decay half-life and the pairwise cap have no canonical value; the
    defaults are design choices, not requirements.

    Attributes:
        Temporal hotspots:
            half_life_days: Days after which a file's churn weighs half as much

        Coupling:
            pairwise_cap: Commits touching more files than this are left out
                of pair expansion (they still count per file)
            min_cochanges: Minimum shared commits for a pair to be reported
            coupling_limit: Maximum pairs returned (None = all)

        Reading:
            git_timeout_seconds: Timeout for short git metadata commands
            reader_prefetch: Size of the reader -> index handoff queue
                (0 = read inline, no background thread)

        Caching:
            index_cache_enabled: Reuse change indexes across queries until
                the repository head moves

        Filtering:
            default_excludes: Patterns prepended to every query's exclude list
    """

    # === Temporal hotspots ===
    half_life_days: float = 30.0

    # === Coupling ===
    pairwise_cap: int = 50
    min_cochanges: int = 2
    coupling_limit: Optional[int] = None

    # === Reading ===
    git_timeout_seconds: int = 10
    reader_prefetch: int = 0

    # === Caching ===
    index_cache_enabled: bool = False

    # === Filtering ===
    default_excludes: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.half_life_days <= 0:
            raise InvalidConfigError("half_life_days", self.half_life_days, "must be positive")
        if self.pairwise_cap < 2:
            raise InvalidConfigError("pairwise_cap", self.pairwise_cap, "must be at least 2")
        if self.min_cochanges < 1:
            raise InvalidConfigError("min_cochanges", self.min_cochanges, "must be at least 1")
        if self.coupling_limit is not None and self.coupling_limit < 1:
            raise InvalidConfigError("coupling_limit", self.coupling_limit, "must be at least 1")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.reader_prefetch < 0:
            raise InvalidConfigError("reader_prefetch", self.reader_prefetch, "must be non-negative")


DEFAULT_CONFIG = EngineConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> EngineConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``None`` values are ignored so CLI
            options left unset do not mask file settings

    Returns:
        Validated EngineConfig instance

    Raises:
        ConfigFileError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".git-analytics.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "git-analytics.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "half_life_days" in merged:
        merged["half_life_days"] = float(merged["half_life_days"])

    unknown = set(merged) - set(EngineConfig.__dataclass_fields__)
    if unknown:
        key = sorted(unknown)[0]
        raise InvalidConfigError(key, merged[key], "unknown configuration key")

    return EngineConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GIT_ANALYTICS_* environment variables.

    List-valued fields (default_excludes) take a comma-separated value.
    """
    type_hints = get_type_hints(EngineConfig)
    result: dict[str, Any] = {}

    for field_name in EngineConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        if value.lower() in ("", "none"):
            return None
        type_hint = next(t for t in args if t is not type(None))

    if getattr(type_hint, "__origin__", None) is list:
        return [p.strip() for p in value.split(",") if p.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    return value


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return the parsed dict.

    Accepts either top-level keys or a ``[git-analytics]`` table.
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))

    section = data.get("git-analytics")
    if isinstance(section, dict):
        return section
    return data
