from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, TypeVar

import structlog

from ..errors import WriteChunkError
from .records import CanonicalObservation, dedupe_observations
from .storage import CONFLICT_KEYS, WeatherStore

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 1000

T = TypeVar("T")


@dataclass
class WriteResult:
    attempted: int = 0
    written: int = 0
    chunks: int = 0
    failed_chunks: int = 0


def iter_chunks(items: Sequence[T], size: int) -> Iterator[List[T]]:
    if size <= 0:
        raise ValueError("chunk size must be > 0")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def write_observations(
    store: WeatherStore,
    observations: Sequence[CanonicalObservation],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> WriteResult:
    """Upsert observations chunk by chunk.

    Rows sharing a ``(station_id, date)`` key are collapsed first, keeping the
    last one; one upsert statement cannot touch the same row twice.
    A rejected chunk is logged and skipped; the remaining chunks are still
    written. ``written`` counts only rows of chunks that succeeded.
    """
    unique = dedupe_observations(observations)
    if len(unique) < len(observations):
        logger.warning("duplicate_rows_collapsed", dropped=len(observations) - len(unique))
    result = WriteResult(attempted=len(unique))
    observations = unique
    for index, chunk in enumerate(iter_chunks(observations, chunk_size)):
        result.chunks += 1
        rows = [obs.to_row() for obs in chunk]
        try:
            store.upsert(rows, CONFLICT_KEYS)
        except WriteChunkError as e:
            result.failed_chunks += 1
            logger.error("upsert_chunk_failed", chunk=index, rows=len(rows), error=str(e))
            continue
        result.written += len(rows)
    return result
