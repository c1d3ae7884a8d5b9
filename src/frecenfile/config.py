"""Configuration loading and management for frecenfile.

Configuration sources are merged in priority order:
    1. Defaults (defined in FrecencyConfig / DecayConfig)
    2. Global config (~/.frecenfile.toml)
    3. Project config (./frecenfile.toml)
    4. Explicit config file
    5. Environment variables (FRECENFILE_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(max_commits=500, half_life=50.0)
    >>> config.max_commits
    500
    >>> config.decay.half_life
    50.0

A config file looks like::

    max_commits = 5000
    rename_policy = "new-only"

    [decay]
    half_life = 250.0
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .exceptions import InvalidConfigError

RENAME_POLICIES = ("both", "new-only")

GLOBAL_CONFIG_NAME = ".frecenfile.toml"
PROJECT_CONFIG_NAME = "frecenfile.toml"
ENV_PREFIX = "FRECENFILE_"


@dataclass(frozen=True)
class DecayConfig:
    """Shape of the recency decay ``base_weight * exp(-rank / half_life)``.

    Attributes:
        half_life: Rank distance over which a touch loses a factor of e.
            500 keeps the contribution at the default 3000-commit cap near
            2.5e-3, far above underflow but well below the newest ranks.
        base_weight: Contribution of a touch at rank 0.
    """

    half_life: float = 500.0
    base_weight: float = 1.0

    def __post_init__(self) -> None:
        for name in ("half_life", "base_weight"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive finite number, got {value!r}")

    def weight(self, rank: int) -> float:
        """Uncached decay value for a single rank."""
        return self.base_weight * math.exp(-rank / self.half_life)


@dataclass(frozen=True)
class FrecencyConfig:
    """Configuration for a scoring run.

    Attributes:
        max_commits: Newest commits to read (0 = whole history)
        rename_policy: "both" credits old and new path of a rename,
            "new-only" credits the destination only
        git_timeout_seconds: Timeout for git discovery subprocesses
        decay: Decay shape handed to the accumulator
    """

    max_commits: int = 3000
    rename_policy: str = "both"
    git_timeout_seconds: int = 10
    decay: DecayConfig = field(default_factory=DecayConfig)

    def __post_init__(self) -> None:
        if isinstance(self.max_commits, bool) or not isinstance(self.max_commits, int):
            raise ValueError(f"max_commits must be an integer, got {self.max_commits!r}")
        if self.max_commits < 0:
            raise ValueError("max_commits must be non-negative (0 = unlimited)")
        if self.rename_policy not in RENAME_POLICIES:
            raise ValueError(
                f"rename_policy must be one of {', '.join(RENAME_POLICIES)}, "
                f"got {self.rename_policy!r}"
            )
        if self.git_timeout_seconds < 1:
            raise ValueError("git_timeout_seconds must be at least 1")


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> FrecencyConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides. ``half_life`` and ``base_weight``
            are routed into the decay section. ``None`` values are ignored
            so CLI options can be passed through unconditionally.

    Returns:
        Validated FrecencyConfig instance

    Raises:
        InvalidConfigError: If a config file is missing or malformed, or
            any merged value fails validation
    """
    merged: dict[str, Any] = {}
    decay: dict[str, Any] = {}

    candidates = [
        Path.home() / GLOBAL_CONFIG_NAME,
        Path.cwd() / PROJECT_CONFIG_NAME,
    ]
    for candidate in candidates:
        if candidate.is_file():
            _merge_section(merged, decay, _load_toml_file(candidate))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        _merge_section(merged, decay, _load_toml_file(config_file))

    _merge_section(merged, decay, _load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    _merge_section(merged, decay, overrides)

    if decay:
        try:
            merged["decay"] = DecayConfig(**decay)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError("decay", decay, str(e))

    try:
        return FrecencyConfig(**merged)
    except (TypeError, ValueError) as e:
        # TypeError: unknown field in config
        raise InvalidConfigError("config", merged, str(e))


def _merge_section(merged: dict, decay: dict, source: dict) -> None:
    """Fold one config source into the running top-level and decay dicts."""
    source = dict(source)
    nested = source.pop("decay", None)
    if nested is not None:
        if isinstance(nested, DecayConfig):
            decay.update(half_life=nested.half_life, base_weight=nested.base_weight)
        elif isinstance(nested, dict):
            decay.update(nested)
        else:
            raise InvalidConfigError("decay", nested, "expected a table")

    for key in ("half_life", "base_weight"):
        if key in source:
            decay[key] = source.pop(key)

    if "rename_policy" in source and isinstance(source["rename_policy"], str):
        source["rename_policy"] = source["rename_policy"].replace("_", "-")

    merged.update(source)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from FRECENFILE_* environment variables.

    Supported environment variables:
        FRECENFILE_MAX_COMMITS: int
        FRECENFILE_RENAME_POLICY: both/new-only
        FRECENFILE_GIT_TIMEOUT_SECONDS: int
        FRECENFILE_HALF_LIFE: float
        FRECENFILE_BASE_WEIGHT: float
    """
    parsers: dict[str, Any] = {
        "max_commits": int,
        "rename_policy": str,
        "git_timeout_seconds": int,
        "half_life": float,
        "base_weight": float,
    }

    result: dict[str, Any] = {}
    for field_name, parse in parsers.items():
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[field_name] = parse(env_value.strip())
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        InvalidConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", path, str(e))
