"""Configuration management for release-paperwork."""

from __future__ import annotations

from release_paperwork.config.loader import load_config
from release_paperwork.config.models import ReleasePaperworkConfig

__all__ = [
    "ReleasePaperworkConfig",
    "load_config",
]
