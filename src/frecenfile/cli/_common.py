"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import FrecencyConfig, load_config

# Scores go to stdout with print(); everything human-facing goes to stderr
console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    max_commits: Optional[int] = None,
    half_life: Optional[float] = None,
    rename_policy: Optional[str] = None,
) -> FrecencyConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if max_commits is not None:
        overrides["max_commits"] = max_commits
    if half_life is not None:
        overrides["half_life"] = half_life
    if rename_policy is not None:
        overrides["rename_policy"] = rename_policy
    return load_config(config_file=config, **overrides)
