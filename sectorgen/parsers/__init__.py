"""Source scanning and router extraction."""

from __future__ import annotations

from .router import extract_router_body, parse_router_file
from .sectors import SectorScanner

__all__ = ["SectorScanner", "extract_router_body", "parse_router_file"]
