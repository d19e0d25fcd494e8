"""The ``GET /_recovery`` API: on-going and completed shard recoveries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence
from urllib.parse import quote

from esasg.es.client import Client
from esasg.events.details import _parse_time


def _obj(data: Any, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _int(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key!r} must be an integer")
    return value


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string")
    return value


def _bool(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key!r} must be a boolean")
    return value


@dataclass(frozen=True)
class RecoveryTarget:
    """Where a shard is being recovered to."""

    id: str = ""
    host: str = ""
    transport_address: str = ""
    ip: str = ""
    name: str = ""


@dataclass(frozen=True)
class RecoveryIndexSize:
    """Size of a recovering shard; strings such as ``2.1gb``."""

    total: str = ""
    total_in_bytes: int = 0
    reused: str = ""
    reused_in_bytes: int = 0
    recovered: str = ""
    recovered_in_bytes: int = 0
    percent: str = ""


@dataclass(frozen=True)
class RecoveryFileDetail:
    """Recovery of one physical file."""

    name: str = ""
    length: int = 0
    recovered: int = 0


@dataclass(frozen=True)
class RecoveryIndexFiles:
    """Recovery of the individual files within a shard."""

    total: int = 0
    reused: int = 0
    recovered: int = 0
    percent: str = ""
    details: tuple[RecoveryFileDetail, ...] = ()


@dataclass(frozen=True)
class RecoveryIndex:
    """Statistics about physical index recovery."""

    size: RecoveryIndexSize = field(default_factory=RecoveryIndexSize)
    files: RecoveryIndexFiles = field(default_factory=RecoveryIndexFiles)
    total_time: str = ""
    total_time_in_millis: int = 0
    source_throttle_time: str = ""
    source_throttle_time_in_millis: int = 0
    target_throttle_time: str = ""
    target_throttle_time_in_millis: int = 0


@dataclass(frozen=True)
class RecoveryTranslog:
    """Statistics about translog recovery."""

    recovered: int = 0
    total: int = 0
    percent: str = ""
    total_on_start: int = 0
    total_time: str = ""
    total_time_in_millis: int = 0


@dataclass(frozen=True)
class RecoveryVerifyIndex:
    """Progress verifying a recovered index."""

    check_index_time: int = 0
    check_index_time_in_millis: int = 0
    total_time: str = ""
    total_time_in_millis: int = 0


def _target(data: Any) -> RecoveryTarget:
    data = _obj(data, "target")
    return RecoveryTarget(
        id=_str(data, "id"),
        host=_str(data, "host"),
        transport_address=_str(data, "transport_address"),
        ip=_str(data, "ip"),
        name=_str(data, "name"),
    )


def _size(data: Any) -> RecoveryIndexSize:
    data = _obj(data, "size")
    return RecoveryIndexSize(
        total=_str(data, "total"),
        total_in_bytes=_int(data, "total_in_bytes"),
        reused=_str(data, "reused"),
        reused_in_bytes=_int(data, "reused_in_bytes"),
        recovered=_str(data, "recovered"),
        recovered_in_bytes=_int(data, "recovered_in_bytes"),
        percent=_str(data, "percent"),
    )


def _file_detail(data: Any) -> RecoveryFileDetail:
    data = _obj(data, "file detail")
    return RecoveryFileDetail(
        name=_str(data, "name"),
        length=_int(data, "length"),
        recovered=_int(data, "recovered"),
    )


def _files(data: Any) -> RecoveryIndexFiles:
    data = _obj(data, "files")
    details = data.get("details")
    if details is None:
        details = []
    if not isinstance(details, list):
        raise ValueError("'details' must be a JSON array")
    return RecoveryIndexFiles(
        total=_int(data, "total"),
        reused=_int(data, "reused"),
        recovered=_int(data, "recovered"),
        percent=_str(data, "percent"),
        details=tuple(_file_detail(d) for d in details),
    )


def _index(data: Any) -> RecoveryIndex:
    data = _obj(data, "index")
    return RecoveryIndex(
        size=_size(data.get("size")),
        files=_files(data.get("files")),
        total_time=_str(data, "total_time"),
        total_time_in_millis=_int(data, "total_time_in_millis"),
        source_throttle_time=_str(data, "source_throttle_time"),
        source_throttle_time_in_millis=_int(data, "source_throttle_time_in_millis"),
        target_throttle_time=_str(data, "target_throttle_time"),
        target_throttle_time_in_millis=_int(data, "target_throttle_time_in_millis"),
    )


def _translog(data: Any) -> RecoveryTranslog:
    data = _obj(data, "translog")
    return RecoveryTranslog(
        recovered=_int(data, "recovered"),
        total=_int(data, "total"),
        percent=_str(data, "percent"),
        total_on_start=_int(data, "total_on_start"),
        total_time=_str(data, "total_time"),
        total_time_in_millis=_int(data, "total_time_in_millis"),
    )


def _verify_index(data: Any) -> RecoveryVerifyIndex:
    data = _obj(data, "verify_index")
    return RecoveryVerifyIndex(
        check_index_time=_int(data, "check_index_time"),
        check_index_time_in_millis=_int(data, "check_index_time_in_millis"),
        total_time=_str(data, "total_time"),
        total_time_in_millis=_int(data, "total_time_in_millis"),
    )


@dataclass(frozen=True)
class RecoveryShard:
    """Recovery of one shard within an index."""

    id: int = 0
    # One of "store", "snapshot", "replica", "relocating".
    type: str = ""
    # One of "init", "index", "start", "translog", "finalize", "done".
    stage: str = ""
    primary: bool = False
    start_time: Optional[datetime] = None
    start_time_in_millis: int = 0
    stop_time: Optional[datetime] = None
    stop_time_in_millis: int = 0
    total_time: str = ""
    total_time_in_millis: int = 0
    source: dict[str, Any] = field(default_factory=dict)
    target: RecoveryTarget = field(default_factory=RecoveryTarget)
    index: RecoveryIndex = field(default_factory=RecoveryIndex)
    translog: RecoveryTranslog = field(default_factory=RecoveryTranslog)
    verify_index: RecoveryVerifyIndex = field(default_factory=RecoveryVerifyIndex)

    @classmethod
    def from_dict(cls, data: Any) -> "RecoveryShard":
        """Build a shard recovery from decoded JSON."""
        if not isinstance(data, dict):
            raise ValueError("shard recovery must be a JSON object")
        return cls(
            id=_int(data, "id"),
            type=_str(data, "type"),
            stage=_str(data, "stage"),
            primary=_bool(data, "primary"),
            start_time=_parse_time(data.get("start_time")),
            start_time_in_millis=_int(data, "start_time_in_millis"),
            stop_time=_parse_time(data.get("stop_time")),
            stop_time_in_millis=_int(data, "stop_time_in_millis"),
            total_time=_str(data, "total_time"),
            total_time_in_millis=_int(data, "total_time_in_millis"),
            source=dict(_obj(data.get("source"), "source")),
            target=_target(data.get("target")),
            index=_index(data.get("index")),
            translog=_translog(data.get("translog")),
            verify_index=_verify_index(data.get("verify_index")),
        )


@dataclass
class IndicesRecoveryService:
    """Gets information about on-going and completed shard recoveries."""

    client: Client
    # Limit the reply to these indices; all indices by default.
    index: Sequence[str] = ()
    # Include extra detail such as the list of files in recovery.
    detailed: Optional[bool] = None
    # Limit the reply to on-going recoveries.
    active_only: Optional[bool] = None

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        if self.index:
            path = "/" + quote(",".join(self.index), safe="") + "/_recovery"
        else:
            path = "/_recovery"
        params: dict[str, str] = {}
        if self.detailed is not None:
            params["detailed"] = "true" if self.detailed else "false"
        if self.active_only is not None:
            params["active_only"] = "true" if self.active_only else "false"
        return path, params

    def do(self) -> dict[str, list[RecoveryShard]]:
        """Perform the request and return shard recoveries by index name."""
        path, params = self.build_url()
        result = self.client.perform_request("GET", path, params)
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise ValueError("recovery reply must be a JSON object")
        out: dict[str, list[RecoveryShard]] = {}
        for name, entry in result.items():
            shards = _obj(entry, "index recovery").get("shards")
            if shards is None:
                shards = []
            if not isinstance(shards, list):
                raise ValueError("'shards' must be a JSON array")
            out[name] = [RecoveryShard.from_dict(s) for s in shards]
        return out