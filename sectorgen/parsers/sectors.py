"""Sector discovery over the configured sectors directory."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..config import GenerationConfig
from ..errors import DiscoveryError
from ..logging import get_logger
from ..models import SectorInfo
from .router import parse_router_file

EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
}


class SectorScanner:
    """Lists sector directories and parses each sector's router file."""

    def __init__(self, config: GenerationConfig) -> None:
        self.config = config
        self.logger = get_logger("discovery")

    def discover(self) -> Tuple[List[SectorInfo], List[str]]:
        """Return sectors with at least one endpoint plus stage-scoped read errors.

        Raises :class:`DiscoveryError` when the sectors directory cannot be listed
        or when no sector contributes an endpoint.
        """
        sectors_dir = self.config.sectors_path
        if not sectors_dir.exists():
            raise DiscoveryError(f"Failed to discover sectors: {sectors_dir} does not exist")
        if not sectors_dir.is_dir():
            raise DiscoveryError(f"Failed to discover sectors: {sectors_dir} is not a directory")

        sectors: List[SectorInfo] = []
        errors: List[str] = []
        for candidate in self._iter_sector_dirs(sectors_dir):
            sector = self.parse_sector(candidate.name, errors)
            if sector.endpoints:
                self.logger.debug(
                    "Sector %s: %d endpoints", sector.name, len(sector.endpoints)
                )
                sectors.append(sector)
            else:
                self.logger.debug("Sector %s has no router endpoints; skipping", candidate.name)

        if not sectors:
            raise DiscoveryError(
                f"Failed to discover sectors: no sectors with routers found in {sectors_dir}"
            )
        self.logger.info("Discovered %d sectors in %s", len(sectors), sectors_dir)
        return sectors, errors

    def parse_sector(self, name: str, errors: List[str]) -> SectorInfo:
        """Parse one sector's router file; unreadable files are reported via ``errors``."""
        router_file = self.config.router_file(name)
        try:
            content = router_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return SectorInfo(name=name)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Failed to read router for sector '{name}' ({router_file}): {exc}"
            self.logger.error(message)
            errors.append(message)
            return SectorInfo(name=name)

        endpoints = parse_router_file(
            content,
            self.config.parsing.router_method_pattern,
            self.config.parsing.endpoint_pattern,
        )
        return SectorInfo(name=name, endpoints=endpoints)

    def _iter_sector_dirs(self, sectors_dir: Path) -> List[Path]:
        try:
            entries = sorted(sectors_dir.iterdir(), key=lambda path: path.name)
        except OSError as exc:
            raise DiscoveryError(f"Failed to discover sectors: {exc}") from exc
        return [
            entry
            for entry in entries
            if entry.is_dir()
            and entry.name not in EXCLUDED_DIRS
            and not entry.name.startswith(".")
        ]


__all__ = ["EXCLUDED_DIRS", "SectorScanner"]
