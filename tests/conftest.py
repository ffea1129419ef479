from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.sector_builder import SectorTreeBuilder


@pytest.fixture
def sector_tree(tmp_path: Path) -> SectorTreeBuilder:
    """Provide an empty project rooted at the pytest tmp_path."""
    return SectorTreeBuilder(tmp_path)


@pytest.fixture
def sample_tree(sector_tree: SectorTreeBuilder) -> SectorTreeBuilder:
    """Project seeded with the `user` and `project` sectors and a default config."""
    sector_tree.add_sample_sectors()
    sector_tree.write_config()
    return sector_tree


@pytest.fixture(autouse=True)
def _reset_sectorgen_logger():
    """Undo configure_logging side effects so caplog sees sectorgen records."""
    yield
    logger = logging.getLogger("sectorgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
