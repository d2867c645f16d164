"""Split oversized baseline payloads for size-limited key/value stores.

Payloads are serialized to compact ASCII JSON, so a chunk's length in
characters equals its size in bytes. Store layout for a key ``k``:
``k_chunkCount`` holds the number of chunks, ``k_chunk_0`` .. ``k_chunk_{n-1}``
hold the slices in order.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import MutableMapping, Sequence

log = getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 90_000


class CorruptPayloadError(RuntimeError):
    """Raised when stored chunks cannot be reassembled into a payload."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


@dataclass(frozen=True, slots=True)
class ChunkedPayload:
    chunks: tuple[str, ...]
    total_size: int
    chunk_count: int


def _serialize(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=True, separators=(",", ":"))


def _check_chunk_size(max_chunk_size: int) -> None:
    if max_chunk_size < 1:
        raise ValueError(f"max_chunk_size must be at least 1, got {max_chunk_size}")


def encode_chunks(payload: object, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> list[str]:
    """Serialize ``payload`` and slice it into chunks of at most ``max_chunk_size``."""

    _check_chunk_size(max_chunk_size)
    serialized = _serialize(payload)
    count = max(1, math.ceil(len(serialized) / max_chunk_size))
    return [
        serialized[index * max_chunk_size : (index + 1) * max_chunk_size] for index in range(count)
    ]


def decode_chunks(chunks: Sequence[str]) -> object:
    """Concatenate ``chunks`` in order and parse the result."""

    try:
        return json.loads("".join(chunks))
    except (json.JSONDecodeError, TypeError) as exc:
        raise CorruptPayloadError(f"Reassembled payload is not valid JSON: {exc}") from exc


def chunk_payload(payload: object, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> ChunkedPayload:
    chunks = encode_chunks(payload, max_chunk_size)
    return ChunkedPayload(
        chunks=tuple(chunks),
        total_size=sum(len(chunk) for chunk in chunks),
        chunk_count=len(chunks),
    )


def _count_key(key: str) -> str:
    return f"{key}_chunkCount"


def _chunk_key(key: str, index: int) -> str:
    return f"{key}_chunk_{index}"


def write_chunked(
    store: MutableMapping[str, str],
    key: str,
    payload: object,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> ChunkedPayload:
    """Store ``payload`` under ``key``, replacing any previously stored chunks."""

    chunked = chunk_payload(payload, max_chunk_size)
    clear_chunks(store, key)
    for index, chunk in enumerate(chunked.chunks):
        store[_chunk_key(key, index)] = chunk
    store[_count_key(key)] = str(chunked.chunk_count)
    log.info(
        "Stored %r in %d chunk(s), %d characters",
        key,
        chunked.chunk_count,
        chunked.total_size,
    )
    return chunked


def read_chunked(store: MutableMapping[str, str], key: str) -> object | None:
    """Reassemble the payload stored under ``key``; ``None`` when nothing is stored."""

    raw_count = store.get(_count_key(key))
    if raw_count is None:
        return None
    try:
        count = int(raw_count)
    except ValueError as exc:
        raise CorruptPayloadError(f"Invalid chunk count {raw_count!r}", key=key) from exc
    if count < 1:
        raise CorruptPayloadError(f"Invalid chunk count {raw_count!r}", key=key)

    chunks: list[str] = []
    for index in range(count):
        chunk = store.get(_chunk_key(key, index))
        if chunk is None:
            raise CorruptPayloadError(f"Missing chunk {index} of {count}", key=key)
        chunks.append(chunk)

    try:
        return decode_chunks(chunks)
    except CorruptPayloadError as exc:
        raise CorruptPayloadError(str(exc), key=key) from exc


def clear_chunks(store: MutableMapping[str, str], key: str) -> int:
    """Remove the chunks stored under ``key``; returns how many were removed."""

    raw_count = store.pop(_count_key(key), None)
    removed = 0
    index = 0
    # Stale chunks past a smaller count are removed too.
    while _chunk_key(key, index) in store:
        del store[_chunk_key(key, index)]
        removed += 1
        index += 1
    if raw_count is not None or removed:
        log.debug("Cleared %d chunk(s) for %r", removed, key)
    return removed
