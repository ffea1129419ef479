"""Exceptions raised by the sectorgen pipeline."""

from __future__ import annotations


class SectorGenError(RuntimeError):
    """Base class for failures that abort a generation run."""


class ConfigError(SectorGenError):
    """Raised when the configuration file is missing, unparseable or invalid."""


class DiscoveryError(SectorGenError):
    """Raised when no sector with at least one endpoint can be discovered."""


__all__ = ["ConfigError", "DiscoveryError", "SectorGenError"]
