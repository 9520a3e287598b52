"""
Reference Dataset Loader

Loads the reference CSV once and publishes the resulting ModelStats into a
set-once store. Scoring reads the store at call time:

    UNLOADED -> fallback heuristic (load still running or never started)
    LOADED   -> dataset distance scorer
    FAILED   -> fallback heuristic for the rest of the process
"""
from __future__ import annotations
import asyncio
import threading
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from heartrisk.core.dataset.records import ReferenceColumn
from heartrisk.core.inference.model_stats import ModelStats, compute_model_stats
from heartrisk.utils import get_logger

logger = get_logger(__name__)


class LoadState(str, Enum):
    """Lifecycle of the reference statistics."""
    UNLOADED = "unloaded"
    LOADED = "loaded"
    FAILED = "failed"


class StoreAlreadySetError(RuntimeError):
    """Raised on a second write to a ModelStatsStore."""


class ModelStatsStore:
    """
    Holds the reference statistics for the lifetime of the process.

    Written exactly once, either with stats (LOADED) or a failure reason
    (FAILED). Reads never block.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = LoadState.UNLOADED
        self._stats: Optional[ModelStats] = None
        self._failure_reason: Optional[str] = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def stats(self) -> Optional[ModelStats]:
        """Published stats, or None unless LOADED."""
        return self._stats

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    def publish(self, stats: ModelStats) -> None:
        """Move UNLOADED -> LOADED."""
        with self._lock:
            self._ensure_unset()
            self._stats = stats
            self._state = LoadState.LOADED
        logger.info(f"Model statistics published ({stats.row_count} reference rows)")

    def fail(self, reason: str) -> None:
        """Move UNLOADED -> FAILED; scoring stays on the fallback path."""
        with self._lock:
            self._ensure_unset()
            self._failure_reason = reason
            self._state = LoadState.FAILED
        logger.warning(f"Reference dataset unavailable, using fallback scorer: {reason}")

    def _ensure_unset(self) -> None:
        if self._state != LoadState.UNLOADED:
            raise StoreAlreadySetError(f"Model statistics already {self._state.value}")


def read_reference_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read the reference CSV with numeric typing and blank lines skipped."""
    return pd.read_csv(path, skip_blank_lines=True)


def build_stats_from_file(
    path: Union[str, Path],
    label_column: str = ReferenceColumn.OUTCOME.value,
) -> ModelStats:
    """Read the CSV and compute complete model statistics, or raise."""
    df = read_reference_table(path)
    if label_column not in df.columns:
        raise KeyError(f"Label column '{label_column}' not found; columns: {list(df.columns)}")
    return compute_model_stats(df, label_column=label_column).require_complete()


async def load_reference_dataset(
    store: ModelStatsStore,
    path: Union[str, Path],
    label_column: str = ReferenceColumn.OUTCOME.value,
) -> LoadState:
    """
    Load the reference dataset into the store.

    Never raises for read or parse problems: the store is marked FAILED and
    scoring keeps using the fallback heuristic. No retry, no timeout.
    """
    logger.info(f"Loading reference dataset from: {path}")
    try:
        stats = await asyncio.to_thread(build_stats_from_file, path, label_column)
    except Exception as e:
        logger.error(f"Failed to load reference dataset: {e}")
        store.fail(f"{type(e).__name__}: {e}")
        return store.state

    store.publish(stats)
    return store.state
