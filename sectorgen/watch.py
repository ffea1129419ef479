"""Watch mode: regenerate whenever a source file under the sectors root changes."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Iterable, Optional, Set, Tuple

from watchfiles import Change, DefaultFilter, watch

from .config import GenerationConfig
from .logging import get_logger
from .models import GenerationResult
from .orchestrator import Orchestrator

logger = get_logger("watch")

ResultCallback = Callable[[GenerationResult], None]
FailureCallback = Callable[[Exception], None]
Watcher = Callable[..., Iterable[Set[Tuple[Change, str]]]]


class SectorSourceFilter(DefaultFilter):
    """Ignores VCS/dependency trees, compiled caches and the generator's own output."""

    def __init__(self, config: GenerationConfig) -> None:
        ignore_paths = [config.output_path]
        if config.dist_path is not None:
            ignore_paths.append(config.dist_path)
        super().__init__(ignore_paths=ignore_paths)

    def __call__(self, change: Change, path: str) -> bool:
        normalised = path.replace("\\", "/")
        if "/node_modules/" in normalised or "/.git/" in normalised:
            return False
        return super().__call__(change, path)


def watch_and_regenerate(
    orchestrator: Orchestrator,
    on_result: ResultCallback,
    on_failure: FailureCallback,
    *,
    stop_event: Optional[threading.Event] = None,
    debounce: int = 300,
    watcher: Watcher = watch,
) -> int:
    """Run the pipeline once, then again after every batch of source changes.

    Regeneration happens on the watching thread, so runs never overlap:
    changes that arrive while a run is in progress are collected by the
    watcher and delivered as the next batch. Returns the number of runs.
    """
    config = orchestrator.config
    runs = 0

    _regenerate(orchestrator, on_result, on_failure)
    runs += 1

    logger.info("Watching for changes in %s", config.sectors_path)
    for changes in watcher(
        str(config.sectors_path),
        watch_filter=SectorSourceFilter(config),
        debounce=debounce,
        stop_event=stop_event,
    ):
        for changed in sorted({_relative(config.root, path) for _change, path in changes}):
            logger.info("File changed: %s", changed)
        _regenerate(orchestrator, on_result, on_failure)
        runs += 1
    return runs


def _regenerate(
    orchestrator: Orchestrator, on_result: ResultCallback, on_failure: FailureCallback
) -> None:
    try:
        result = orchestrator.generate()
    except Exception as exc:  # keep watching after a failed run
        logger.error("Regeneration failed: %s", exc)
        on_failure(exc)
        return
    on_result(result)


def _relative(root: Path, path: str) -> str:
    try:
        return Path(path).resolve().relative_to(root).as_posix()
    except ValueError:
        return path


__all__ = ["SectorSourceFilter", "watch_and_regenerate"]
