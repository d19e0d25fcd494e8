"""The outer envelope of events delivered by CloudWatch Events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import esasg.events.details  # noqa: F401  registers the built-in detail types
from esasg.events.details import _parse_time
from esasg.events.registry import decode_detail


class InvalidCloudWatchEvent(ValueError):
    """Raised when an event lacks its source or detail type."""


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string")
    return value


def _resources(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(r, str) for r in value):
        raise ValueError("'resources' must be a list of strings")
    return list(value)


@dataclass
class CloudWatchEvent:
    """An event sent via CloudWatch Events.

    ``detail`` holds an instance of the type registered for the event's
    source and detail type, or the plain JSON value when none is.
    """

    version: str = ""
    id: str = ""
    detail_type: str = ""
    source: str = ""
    account_id: str = ""
    time: Optional[datetime] = None
    region: str = ""
    resources: list[str] = field(default_factory=list)
    detail: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "CloudWatchEvent":
        """Build an event from decoded JSON."""
        if not isinstance(data, dict):
            raise InvalidCloudWatchEvent("CloudWatch event must be a JSON object")
        event = cls(
            version=_str(data, "version"),
            id=_str(data, "id"),
            detail_type=_str(data, "detail-type"),
            source=_str(data, "source"),
            account_id=_str(data, "account"),
            time=_parse_time(data.get("time")),
            region=_str(data, "region"),
            resources=_resources(data.get("resources")),
        )
        if not event.source or not event.detail_type:
            raise InvalidCloudWatchEvent("invalid CloudWatch event")
        event.detail = decode_detail(event.source, event.detail_type, data.get("detail"))
        return event

    @classmethod
    def from_json(cls, text: str | bytes) -> "CloudWatchEvent":
        """Parse an event from JSON text."""
        return cls.from_dict(json.loads(text))