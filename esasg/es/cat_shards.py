"""The ``GET /_cat/shards`` API: shards and statistics about them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, Optional, Sequence
from urllib.parse import quote

from esasg.es.client import Client

_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def _to_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string")
    return value


def _to_int(key: str, value: Any) -> int:
    # These columns arrive as numbers quoted in strings.
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a quoted integer")
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key!r} is not an integer: {value!r}") from exc


def _to_time(key: str, value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string")
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"{key!r} is not an RFC 3339 time: {value!r}")
    date, clock, fraction, zone = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    if zone.upper() == "Z":
        zone = "+00:00"
    return datetime.fromisoformat(f"{date}T{clock}.{micros}{zone}")


def _column(key: str, convert: Callable[[str, Any], Any], default: Any = None) -> Any:
    return field(default=default, metadata={"json": key, "convert": convert})


def _s(key: str) -> Any:
    return _column(key, _to_str)


def _i(key: str) -> Any:
    return _column(key, _to_int)


@dataclass
class CatShardsRow:
    """One shard of a ``_cat/shards`` reply.

    Columns not requested are None; see CatShardsService.columns.
    """

    completion_size: Optional[str] = _s("completion.size")
    docs: Optional[int] = _i("docs")
    fielddata_evictions: Optional[int] = _i("fielddata.evictions")
    fielddata_memory_size: Optional[str] = _s("fielddata.memory_size")
    flush_total: Optional[int] = _i("flush.total")
    flush_total_time: Optional[str] = _s("flush.total_time")
    get_current: Optional[int] = _i("get.current")
    get_exists_time: Optional[str] = _s("get.exists_time")
    get_exists_total: Optional[int] = _i("get.exists_total")
    get_missing_time: Optional[str] = _s("get.missing_time")
    get_missing_total: Optional[int] = _i("get.missing_total")
    get_time: Optional[str] = _s("get.time")
    get_total: Optional[int] = _i("get.total")
    id: Optional[str] = _s("id")
    index: str = _column("index", _to_str, "")
    indexing_delete_current: Optional[int] = _i("indexing.delete_current")
    indexing_delete_total: Optional[int] = _i("indexing.delete_total")
    indexing_delete_time: Optional[str] = _s("indexing.delete_time")
    indexing_index_current: Optional[int] = _i("indexing.index_current")
    indexing_index_failed: Optional[int] = _i("indexing.index_failed")
    indexing_index_time: Optional[str] = _s("indexing.index_time")
    indexing_index_total: Optional[int] = _i("indexing.index_total")
    ip: Optional[str] = _s("ip")
    merges_current: Optional[int] = _i("merges.current")
    merges_current_docs: Optional[int] = _i("merges.current_docs")
    merges_current_size: Optional[str] = _s("merges.current_size")
    merges_total: Optional[int] = _i("merges.total")
    merges_total_docs: Optional[int] = _i("merges.total_docs")
    merges_total_size: Optional[str] = _s("merges.total_size")
    merges_total_time: Optional[str] = _s("merges.total_time")
    node: Optional[str] = _s("node")
    # "p" for a primary, "r" for a replica.
    primary_or_replica: str = _column("prirep", _to_str, "")
    query_cache_evictions: Optional[int] = _i("query_cache.evictions")
    query_cache_memory_size: Optional[str] = _s("query_cache.memory_size")
    recovery_source_type: Optional[str] = _s("recoverysource.type")
    refresh_listeners: Optional[int] = _i("refresh.listeners")
    refresh_time: Optional[str] = _s("refresh.time")
    refresh_total: Optional[int] = _i("refresh.total")
    search_fetch_current: Optional[int] = _i("search.fetch_current")
    search_fetch_time: Optional[str] = _s("search.fetch_time")
    search_fetch_total: Optional[int] = _i("search.fetch_total")
    search_open_contexts: Optional[int] = _i("search.open_contexts")
    search_query_current: Optional[int] = _i("search.query_current")
    search_query_time: Optional[str] = _s("search.query_time")
    search_query_total: Optional[int] = _i("search.query_total")
    search_scroll_current: Optional[int] = _i("search.scroll_current")
    search_scroll_time: Optional[str] = _s("search.scroll_time")
    search_scroll_total: Optional[int] = _i("search.scroll_total")
    segments_count: Optional[int] = _i("segments.count")
    segments_fixed_bitset_memory: Optional[str] = _s("segments.fixed_bitset_memory")
    segments_index_writer_memory: Optional[str] = _s("segments.index_writer_memory")
    segments_memory: Optional[str] = _s("segments.memory")
    segments_version_map_memory: Optional[str] = _s("segments.version_map_memory")
    seq_no_global_checkpoint: Optional[str] = _s("seq_no.global_checkpoint")
    seq_no_local_checkpoint: Optional[str] = _s("seq_no.local_checkpoint")
    seq_no_max: Optional[str] = _s("seq_no.max")
    shard: str = _column("shard", _to_str, "")
    state: str = _column("state", _to_str, "")
    store: Optional[str] = _s("store")
    sync_id: Optional[str] = _s("sync_id")
    unassigned_at: Optional[datetime] = _column("unassigned.at", _to_time)
    unassigned_details: Optional[str] = _s("unassigned.details")
    unassigned_for: Optional[str] = _s("unassigned.for")
    unassigned_reason: Optional[str] = _s("unassigned.reason")
    warmer_current: Optional[int] = _i("warmer.current")
    warmer_total: Optional[int] = _i("warmer.total")
    warmer_total_time: Optional[str] = _s("warmer.total_time")

    @classmethod
    def from_dict(cls, data: Any) -> "CatShardsRow":
        """Build a row from one decoded JSON object of the reply."""
        if not isinstance(data, dict):
            raise ValueError("cat shards row must be a JSON object")
        values = {}
        for f in fields(cls):
            key = f.metadata["json"]
            raw = data.get(key)
            if raw is not None:
                values[f.name] = f.metadata["convert"](key, raw)
        return cls(**values)


@dataclass
class CatShardsService:
    """Lists shards with additional information about them."""

    client: Client
    # Limit the reply to shards of this index pattern.
    index: str = ""
    # Unit of byte values: "b", "k", "m" or "g".
    bytes_unit: str = ""
    # Read local state instead of asking the master node.
    local: Optional[bool] = None
    master_timeout: str = ""
    # Long column names to return; ("*",) returns all of them.
    columns: Sequence[str] = ()
    # Columns to sort by.
    sort: Sequence[str] = ()
    pretty: bool = False

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        if self.index:
            path = "/_cat/shards/" + quote(self.index, safe="")
        else:
            path = "/_cat/shards"
        params = {"format": "json"}
        if self.pretty:
            params["pretty"] = "true"
        if self.bytes_unit:
            params["bytes"] = self.bytes_unit
        if self.local is not None:
            params["local"] = "true" if self.local else "false"
        if self.master_timeout:
            params["master_timeout"] = self.master_timeout
        if self.columns:
            params["h"] = ",".join(self.columns)
        if self.sort:
            params["s"] = ",".join(self.sort)
        return path, params

    def do(self) -> list[CatShardsRow]:
        """Perform the request and return its rows."""
        path, params = self.build_url()
        result = self.client.perform_request("GET", path, params)
        if result is None:
            return []
        if not isinstance(result, list):
            raise ValueError("cat shards reply must be a JSON array")
        return [CatShardsRow.from_dict(row) for row in result]