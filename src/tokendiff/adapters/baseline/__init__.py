"""Public interface for the baseline adapter."""

from __future__ import annotations

from .chunks import (
    DEFAULT_MAX_CHUNK_SIZE,
    ChunkedPayload,
    CorruptPayloadError,
    chunk_payload,
    clear_chunks,
    decode_chunks,
    encode_chunks,
    read_chunked,
    write_chunked,
)
from .schema import BaselinePayload, EntryPayload, MetadataPayload
from .translator import (
    InvalidSnapshotFormatError,
    TranslationResult,
    parse_entry,
    snapshot_from_payload,
    snapshot_to_payload,
)

__all__ = [
    "DEFAULT_MAX_CHUNK_SIZE",
    "BaselinePayload",
    "ChunkedPayload",
    "CorruptPayloadError",
    "EntryPayload",
    "InvalidSnapshotFormatError",
    "MetadataPayload",
    "TranslationResult",
    "chunk_payload",
    "clear_chunks",
    "decode_chunks",
    "encode_chunks",
    "parse_entry",
    "read_chunked",
    "snapshot_from_payload",
    "snapshot_to_payload",
    "write_chunked",
]
